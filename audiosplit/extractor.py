"""Segment extractor — cuts a source file into one audio file per interval."""

import logging
import subprocess
from pathlib import Path
from typing import Callable

from audiosplit import ffutil
from audiosplit.config import Settings
from audiosplit.errors import (
    ExtractionFailedError,
    SourceUnavailableError,
    TransientInfrastructureError,
)
from audiosplit.models import Segment

logger = logging.getLogger(__name__)


def segment_name(slug: str, ordinal: int, ext: str) -> str:
    return f"{slug}_segment_{ordinal}.{ext}"


def intervals(plan: list[int]) -> list[tuple[int, int | None]]:
    """Pair each offset with its duration; the last one is open-ended."""
    pairs: list[tuple[int, int | None]] = []
    for i, start in enumerate(plan):
        end = plan[i + 1] if i + 1 < len(plan) else None
        pairs.append((start, None if end is None else end - start))
    return pairs


def _discard(paths: list[Path]) -> None:
    for path in paths:
        try:
            path.unlink(missing_ok=True)
        except OSError:
            logger.warning("Could not remove %s", path)


def extract(
    source_path: Path,
    plan: list[int],
    slug: str,
    output_dir: Path,
    settings: Settings,
    on_progress: Callable[[float], None] | None = None,
) -> list[Segment]:
    """Cut *source_path* at every offset of *plan*, one ffmpeg run at a time.

    The source file is always deleted when this returns or raises. If any
    interval fails, every segment written so far is deleted as well and
    ExtractionFailedError is raised; a partial result is never returned.
    """
    if not source_path.exists():
        raise SourceUnavailableError(f"Source file not found: {source_path}")

    segments: list[Segment] = []
    pairs = intervals(plan)

    for i, (start, duration) in enumerate(pairs):
        name = segment_name(slug, i + 1, settings.audio_format)
        output_path = output_dir / name
        try:
            ffutil.cut_audio(source_path, output_path, start, duration, settings)
        except subprocess.CalledProcessError as e:
            _discard([s.path for s in segments] + [output_path, source_path])
            raise ExtractionFailedError(i, ffutil.stderr_tail(e)) from e
        except OSError as e:
            _discard([s.path for s in segments] + [output_path, source_path])
            raise TransientInfrastructureError(f"Could not run ffmpeg: {e}") from e

        segments.append(
            Segment(
                path=output_path,
                name=name,
                index=i + 1,
                start=start,
                end=None if duration is None else start + duration,
            )
        )
        logger.info("Wrote %s", output_path)
        if on_progress:
            on_progress((i + 1) / len(pairs))

    _discard([source_path])
    return segments
