"""Fetcher interface and selection by source kind."""

from pathlib import Path
from typing import Protocol
from urllib.parse import urlparse

from audiosplit.config import Settings
from audiosplit.errors import InvalidInputError
from audiosplit.models import FetchedMedia


class Fetcher(Protocol):
    """Materializes a source as a local audio file inside ``dest_dir``."""

    def fetch(self, source: str, dest_dir: Path) -> FetchedMedia: ...


def is_remote(source: str) -> bool:
    parsed = urlparse(source)
    return parsed.scheme in ("http", "https") and bool(parsed.netloc)


def fetcher_for(source: str, settings: Settings) -> Fetcher:
    """Pick yt-dlp for http(s) URLs and the local fetcher for existing paths."""
    from audiosplit.fetchers.local import LocalFileFetcher
    from audiosplit.fetchers.ytdlp import YtDlpFetcher

    if not source or not isinstance(source, str):
        raise InvalidInputError("A source URL is required")
    if is_remote(source):
        return YtDlpFetcher(settings)
    if Path(source).is_file():
        return LocalFileFetcher(settings)
    raise InvalidInputError(f"Not a valid URL or media file: {source}")
