"""Shared test fixtures."""

from pathlib import Path

import pytest

from audiosplit.config import Settings
from audiosplit.models import FetchedMedia

FIXTURES_DIR = Path(__file__).parent / "fixtures"


@pytest.fixture
def sample_manifest_path() -> Path:
    return FIXTURES_DIR / "sample_manifest.json"


@pytest.fixture
def settings(tmp_path: Path) -> Settings:
    return Settings(work_dir=tmp_path / "work")


class FakeFetcher:
    """Writes a placeholder source file instead of downloading anything."""

    def __init__(self, title: str = "My Video!"):
        self.title = title
        self.calls: list[str] = []

    def fetch(self, source: str, dest_dir: Path) -> FetchedMedia:
        self.calls.append(source)
        slug = self.title.replace(" ", "_").replace("!", "_").lower()
        path = dest_dir / f"{slug}.mp3"
        path.write_bytes(b"source audio")
        return FetchedMedia(path=path, title=self.title, slug=slug)


@pytest.fixture
def fake_fetcher() -> FakeFetcher:
    return FakeFetcher()
