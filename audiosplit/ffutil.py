"""FFmpeg/ffprobe subprocess helpers."""

import json
import logging
import shutil
import subprocess
from pathlib import Path

from audiosplit.config import Settings
from audiosplit.errors import FFmpegNotFoundError
from audiosplit.models import ProbeResult

logger = logging.getLogger(__name__)


class NoAudioStreamError(ValueError):
    """Raised when the input file has no audio stream."""
    pass


def check_ffmpeg(settings: Settings) -> None:
    """Raise FFmpegNotFoundError if ffmpeg/ffprobe cannot be found."""
    for cmd in (settings.ffmpeg_path, settings.ffprobe_path):
        if shutil.which(cmd) is None:
            raise FFmpegNotFoundError(f"{cmd} not found on PATH")


def probe(input_path: Path, settings: Settings) -> ProbeResult:
    """Extract audio metadata via ffprobe."""
    cmd = [
        settings.ffprobe_path,
        "-v", "quiet",
        "-print_format", "json",
        "-show_format",
        "-show_streams",
        str(input_path),
    ]
    result = subprocess.run(cmd, capture_output=True, text=True, check=True)
    data = json.loads(result.stdout)

    audio_stream = next(
        (s for s in data.get("streams", []) if s.get("codec_type") == "audio"), None
    )
    if audio_stream is None:
        raise NoAudioStreamError(f"No audio stream found in {input_path}")

    return ProbeResult(
        duration=float(data["format"]["duration"]),
        sample_rate=int(audio_stream.get("sample_rate", 0)),
        codec=audio_stream.get("codec_name", "unknown"),
        channels=int(audio_stream.get("channels", 0)),
    )


def _audio_args(settings: Settings) -> list[str]:
    return ["-vn", "-acodec", settings.audio_codec, "-q:a", settings.audio_quality]


def extract_audio(input_path: Path, output_path: Path, settings: Settings) -> Path:
    """Transcode the whole audio track of *input_path* to the configured format."""
    cmd = [
        settings.ffmpeg_path, "-y",
        "-i", str(input_path),
        *_audio_args(settings),
        str(output_path),
    ]
    logger.debug("Running %s", " ".join(cmd))
    subprocess.run(cmd, capture_output=True, check=True)
    return output_path


def cut_audio(
    input_path: Path,
    output_path: Path,
    start: int,
    duration: int | None,
    settings: Settings,
) -> Path:
    """Write ``duration`` seconds of audio from ``start`` into *output_path*.

    With ``duration=None`` the cut runs to the end of the input. Existing
    output files are overwritten.
    """
    cmd = [
        settings.ffmpeg_path, "-y",
        "-i", str(input_path),
        "-ss", str(start),
    ]
    if duration is not None:
        cmd += ["-t", str(duration)]
    cmd += [*_audio_args(settings), str(output_path)]
    logger.debug("Running %s", " ".join(cmd))
    subprocess.run(cmd, capture_output=True, check=True)
    return output_path


def stderr_tail(error: subprocess.CalledProcessError, limit: int = 500) -> str:
    """Last *limit* characters of a failed ffmpeg run's stderr, for messages."""
    stderr = error.stderr if isinstance(error.stderr, str) else (error.stderr or b"").decode(errors="replace")
    return stderr[-limit:].strip() if stderr else str(error)
