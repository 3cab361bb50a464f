"""Shared data types used across audiosplit."""

from dataclasses import dataclass
from pathlib import Path


@dataclass
class Segment:
    """One produced audio file covering ``[start, end)`` of the source.

    ``end`` is None for the final interval, which runs to the end of the media.
    """

    path: Path
    name: str
    index: int
    start: int
    end: int | None = None


@dataclass
class FetchedMedia:
    """A source audio file materialized on local disk by a fetcher."""

    path: Path
    title: str
    slug: str


@dataclass
class ProbeResult:
    """Audio metadata extracted from a media file via ffprobe."""

    duration: float
    sample_rate: int
    codec: str
    channels: int
