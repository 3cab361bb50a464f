"""Local media files as sources, for the CLI."""

import logging
import subprocess
from pathlib import Path

from audiosplit import ffutil
from audiosplit.config import Settings
from audiosplit.errors import (
    InvalidInputError,
    SourceUnavailableError,
    TransientInfrastructureError,
)
from audiosplit.models import FetchedMedia
from audiosplit.timestamps import slugify

logger = logging.getLogger(__name__)


class LocalFileFetcher:
    """Transcodes a local media file's audio track into the job directory."""

    def __init__(self, settings: Settings):
        self.settings = settings

    def fetch(self, source: str, dest_dir: Path) -> FetchedMedia:
        input_path = Path(source)
        if not input_path.is_file():
            raise SourceUnavailableError(f"File not found: {source}", reason="not_found")

        title = input_path.stem
        slug = slugify(title)
        output_path = dest_dir / f"{slug}.{self.settings.audio_format}"
        if output_path.resolve() == input_path.resolve():
            raise InvalidInputError(f"Refusing to overwrite the source file {source}")
        try:
            ffutil.extract_audio(input_path, output_path, self.settings)
        except subprocess.CalledProcessError as e:
            output_path.unlink(missing_ok=True)
            raise SourceUnavailableError(
                f"Could not read audio from {source}: {ffutil.stderr_tail(e)}",
                reason="not_found",
            ) from e
        except OSError as e:
            raise TransientInfrastructureError(f"Could not run ffmpeg: {e}") from e
        logger.info("Extracted audio from %s", input_path)
        return FetchedMedia(path=output_path, title=title, slug=slug)
