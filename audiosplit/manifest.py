"""JSON manifest schema — the contract between CLI/API and engine."""

import json
from dataclasses import dataclass, field
from pathlib import Path

from audiosplit.timestamps import RawTimestamp


@dataclass
class Manifest:
    """One split job: where the audio comes from and where to cut it."""

    source: str
    timestamps: list[RawTimestamp] = field(default_factory=list)
    output_dir: Path | None = None
    version: str = "1"


def load_manifest(path: str | Path) -> Manifest:
    """Load and validate a manifest from a JSON file."""
    path = Path(path)
    data = json.loads(path.read_text())

    if "source" not in data or "timestamps" not in data:
        raise ValueError("Manifest must contain 'source' and 'timestamps' fields")
    if not isinstance(data["timestamps"], list):
        raise ValueError("Manifest 'timestamps' must be a list")

    output_dir = data.get("output_dir")
    return Manifest(
        version=data.get("version", "1"),
        source=data["source"],
        timestamps=data["timestamps"],
        output_dir=Path(output_dir) if output_dir else None,
    )
