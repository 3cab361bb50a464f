"""Thin CLI entry point — builds a Manifest and calls the engine."""

import argparse
import os
import sys
from pathlib import Path

from audiosplit.config import Settings
from audiosplit.engine import process
from audiosplit.errors import AudioSplitError
from audiosplit.logging import configure_logging
from audiosplit.manifest import Manifest, load_manifest


def main() -> None:
    parser = argparse.ArgumentParser(
        prog="audiosplit",
        description="audiosplit — fetch a video's audio and cut it at timestamps.",
    )
    parser.add_argument("--verbose", "-v", action="store_true", help="Enable debug logging")
    sub = parser.add_subparsers(dest="command")

    split = sub.add_parser("split", help="Split a video URL or local media file")
    split.add_argument("source", nargs="?", help="Video URL or local media file")
    split.add_argument("--manifest", "-m", type=Path, help="Path to a JSON manifest file")
    split.add_argument(
        "--timestamp", "-t", dest="timestamps", action="append", default=[],
        help="Cut point in seconds, mm:ss or hh:mm:ss (repeatable)",
    )
    split.add_argument("--output-dir", "-o", type=Path, help="Directory for the segment files")
    split.add_argument("--format", dest="audio_format", help="Output audio format (default: mp3)")
    split.add_argument("--codec", dest="audio_codec", help="ffmpeg audio codec (default: libmp3lame)")

    serve = sub.add_parser("serve", help="Launch the HTTP API")
    serve.add_argument("--port", type=int, default=int(os.environ.get("PORT", 3000)), help="Port to listen on")
    serve.add_argument("--host", type=str, default="127.0.0.1", help="Host to bind to")

    args = parser.parse_args()
    configure_logging(args.verbose)

    if args.command is None:
        parser.print_help()
        sys.exit(0)

    settings = Settings.from_env()

    if args.command == "serve":
        from audiosplit.web import create_app
        app = create_app(settings)
        print(f"audiosplit API: http://{args.host}:{args.port}")
        app.run(host=args.host, port=args.port, debug=False)
        return

    if args.audio_format:
        settings.audio_format = args.audio_format
    if args.audio_codec:
        settings.audio_codec = args.audio_codec

    if args.manifest:
        m = load_manifest(args.manifest)
        if args.output_dir:
            m.output_dir = args.output_dir
    elif args.source:
        m = Manifest(
            source=args.source,
            timestamps=args.timestamps,
            output_dir=args.output_dir or Path.cwd(),
        )
    else:
        print("Error: provide either a SOURCE argument or --manifest.", file=sys.stderr)
        sys.exit(1)

    def on_progress(stage: str, frac: float) -> None:
        print(f"  [{frac:3.0%}] {stage}")

    try:
        result = process(m, settings, on_progress=on_progress)
    except AudioSplitError as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)

    print()
    print(f"Done! {result.title} ({result.duration:.1f}s)")
    for seg in result.segments:
        end = f"{seg.end}s" if seg.end is not None else "end"
        print(f"  {seg.index}. {seg.path}  [{seg.start}s - {end}]")
