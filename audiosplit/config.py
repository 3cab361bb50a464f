"""Runtime settings, resolved once and passed into every component."""

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Mapping


@dataclass
class Settings:
    """Tool locations, scratch directory and output audio format."""

    work_dir: Path = Path("downloads")
    ffmpeg_path: str = "ffmpeg"
    ffprobe_path: str = "ffprobe"
    cookies_file: Path | None = None
    audio_format: str = "mp3"
    audio_codec: str = "libmp3lame"
    audio_quality: str = "0"

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> "Settings":
        """Build settings from environment variables, falling back to defaults."""
        env = os.environ if environ is None else environ
        defaults = cls()
        cookies = env.get("AUDIOSPLIT_COOKIES_FILE")
        return cls(
            work_dir=Path(env.get("AUDIOSPLIT_WORK_DIR", str(defaults.work_dir))),
            ffmpeg_path=env.get("FFMPEG_PATH", defaults.ffmpeg_path),
            ffprobe_path=env.get("FFPROBE_PATH", defaults.ffprobe_path),
            cookies_file=Path(cookies) if cookies else None,
            audio_format=env.get("AUDIOSPLIT_AUDIO_FORMAT", defaults.audio_format),
            audio_codec=env.get("AUDIOSPLIT_AUDIO_CODEC", defaults.audio_codec),
            audio_quality=env.get("AUDIOSPLIT_AUDIO_QUALITY", defaults.audio_quality),
        )
