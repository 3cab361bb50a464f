"""Remote source fetching through the yt-dlp library."""

import logging
from pathlib import Path

import yt_dlp
from yt_dlp.utils import DownloadError

from audiosplit.config import Settings
from audiosplit.errors import SourceUnavailableError, TransientInfrastructureError
from audiosplit.models import FetchedMedia
from audiosplit.timestamps import slugify

logger = logging.getLogger(__name__)

# Substrings of yt-dlp error messages, checked in order.
_REASON_MARKERS = [
    ("gone", ("HTTP Error 410", "Status code: 410", "no longer available", "has been removed")),
    ("forbidden", (
        "HTTP Error 403", "Status code: 403", "Private video", "Sign in to confirm",
        "members-only", "not available for download", "age-restricted",
    )),
    ("not_found", (
        "HTTP Error 404", "Video unavailable", "Unsupported URL", "does not exist",
        "is not a valid URL", "not available",
    )),
]

_USER_MESSAGES = {
    "gone": "This video is no longer available",
    "forbidden": "This video is not available for download",
    "not_found": "Video not found",
    "network": "Could not reach the video host",
}


def classify_error(message: str) -> str:
    """Map a yt-dlp error message to a SourceUnavailableError reason."""
    for reason, markers in _REASON_MARKERS:
        if any(m.lower() in message.lower() for m in markers):
            return reason
    return "network"


class YtDlpFetcher:
    """Downloads best audio and converts it with yt-dlp's FFmpeg post-processor."""

    def __init__(self, settings: Settings):
        self.settings = settings
        if settings.cookies_file is not None and not settings.cookies_file.exists():
            logger.warning(
                "Cookies file %s not found; some videos may require authentication",
                settings.cookies_file,
            )

    def _base_options(self) -> dict:
        opts = {
            "quiet": True,
            "no_warnings": True,
            "noplaylist": True,
        }
        if self.settings.ffmpeg_path != "ffmpeg":
            opts["ffmpeg_location"] = self.settings.ffmpeg_path
        cookies = self.settings.cookies_file
        if cookies is not None and cookies.exists():
            opts["cookiefile"] = str(cookies)
        return opts

    def _run(self, url: str, opts: dict, download: bool) -> dict:
        try:
            with yt_dlp.YoutubeDL(opts) as ydl:
                info = ydl.extract_info(url, download=download)
        except DownloadError as e:
            reason = classify_error(str(e))
            logger.info("yt-dlp failed for %s (%s): %s", url, reason, e)
            raise SourceUnavailableError(_USER_MESSAGES[reason], reason=reason) from e
        if info is None:
            raise SourceUnavailableError(_USER_MESSAGES["not_found"], reason="not_found")
        return info

    def fetch(self, source: str, dest_dir: Path) -> FetchedMedia:
        info = self._run(source, self._base_options(), download=False)
        title = info.get("title") or info.get("id") or "audio"
        slug = slugify(title)

        fmt = self.settings.audio_format
        opts = self._base_options()
        opts.update({
            "format": "bestaudio/best",
            "outtmpl": str(dest_dir / f"{slug}.%(ext)s"),
            "postprocessors": [{
                "key": "FFmpegExtractAudio",
                "preferredcodec": fmt,
                "preferredquality": self.settings.audio_quality,
            }],
        })
        logger.info("Downloading audio for %r", title)
        self._run(source, opts, download=True)

        path = dest_dir / f"{slug}.{fmt}"
        if not path.exists():
            raise TransientInfrastructureError(f"Downloaded audio missing at {path}")
        return FetchedMedia(path=path, title=title, slug=slug)
