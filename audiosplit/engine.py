"""Orchestrator — runs the fetch-and-split pipeline defined by a Manifest."""

import logging
import shutil
import subprocess
import uuid
from dataclasses import dataclass, field
from pathlib import Path
from typing import Callable

from audiosplit import ffutil
from audiosplit.config import Settings
from audiosplit.errors import InvalidInputError, TransientInfrastructureError
from audiosplit.extractor import extract
from audiosplit.fetchers.base import Fetcher, fetcher_for
from audiosplit.manifest import Manifest
from audiosplit.models import FetchedMedia, Segment
from audiosplit.timestamps import normalize

logger = logging.getLogger(__name__)


@dataclass
class EngineResult:
    job_id: str
    output_dir: Path
    title: str = ""
    duration: float = 0.0
    segments: list[Segment] = field(default_factory=list)


def new_job_id() -> str:
    return uuid.uuid4().hex[:12]


def _check_plan_fits(plan: list[int], duration: float) -> None:
    """Every cut point must fall strictly inside the media."""
    beyond = [t for t in plan if t >= duration]
    if beyond:
        raise InvalidInputError(
            f"Timestamp {beyond[0]}s is beyond the end of the media ({duration:.1f}s)"
        )


def _probe_source(media: FetchedMedia, plan: list[int], settings: Settings) -> float:
    try:
        probe_result = ffutil.probe(media.path, settings)
    except ffutil.NoAudioStreamError as e:
        media.path.unlink(missing_ok=True)
        raise InvalidInputError(str(e)) from e
    except (subprocess.CalledProcessError, OSError, ValueError, KeyError) as e:
        media.path.unlink(missing_ok=True)
        raise TransientInfrastructureError(f"Could not probe {media.path.name}: {e}") from e

    try:
        _check_plan_fits(plan, probe_result.duration)
    except InvalidInputError:
        media.path.unlink(missing_ok=True)
        raise
    return probe_result.duration


def process(
    manifest: Manifest,
    settings: Settings,
    fetcher: Fetcher | None = None,
    on_progress: Callable[[str, float], None] | None = None,
) -> EngineResult:
    """Execute the full split pipeline.

    Args:
        manifest: Source and raw timestamps for this job.
        settings: Tool locations and output format.
        fetcher: Source fetcher; picked from the source kind when omitted.
        on_progress: Optional callback(stage_name, fraction_complete).
    """

    def _progress(stage: str, frac: float) -> None:
        if on_progress:
            on_progress(stage, frac)

    plan = normalize(manifest.timestamps)
    fetcher = fetcher or fetcher_for(manifest.source, settings)

    job_id = new_job_id()
    # The source is always fetched into a private scratch directory, so it
    # can never be a file the caller owns.
    scratch_dir = settings.work_dir / job_id
    scratch_dir.mkdir(parents=True, exist_ok=True)
    output_dir = manifest.output_dir or scratch_dir
    output_dir.mkdir(parents=True, exist_ok=True)
    logger.info("Job %s: %d segment(s) from %s", job_id, len(plan), manifest.source)

    try:
        _progress("Fetching audio", 0.0)
        media = fetcher.fetch(manifest.source, scratch_dir)

        _progress("Probing audio", 0.40)
        duration = _probe_source(media, plan, settings)

        _progress(f"Cutting {len(plan)} segment(s)", 0.45)
        segments = extract(
            media.path,
            plan,
            media.slug,
            output_dir,
            settings,
            on_progress=lambda frac: _progress(
                f"Cutting {len(plan)} segment(s)", 0.45 + frac * 0.55
            ),
        )
    except Exception:
        shutil.rmtree(scratch_dir, ignore_errors=True)
        raise

    if output_dir != scratch_dir:
        shutil.rmtree(scratch_dir, ignore_errors=True)

    _progress("Done", 1.0)
    return EngineResult(
        job_id=job_id,
        output_dir=output_dir,
        title=media.title,
        duration=duration,
        segments=segments,
    )
