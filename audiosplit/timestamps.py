"""Timestamp parsing — turns raw cut points into an ordered cut plan."""

import math
import re

from audiosplit.errors import InvalidInputError

RawTimestamp = int | float | str


def _clock_to_seconds(value: str) -> float | None:
    """Parse ``mm:ss`` or ``hh:mm:ss``; None if the clock is malformed.

    A signed component anywhere in the clock is rejected outright.
    """
    parts = value.split(":")
    if len(parts) not in (2, 3):
        return None
    if any(p.strip().startswith("-") for p in parts):
        raise InvalidInputError(f"Negative timestamp not allowed: {value!r}")
    try:
        numbers = [float(p) for p in parts]
    except ValueError:
        return None
    while len(numbers) < 3:
        numbers.insert(0, 0.0)
    h, m, s = numbers
    return h * 3600 + m * 60 + s


def parse_timestamp(raw: object) -> float | None:
    """Convert one raw timestamp to seconds, or None if it is unparsable.

    Raises InvalidInputError for a clock with a signed component.
    """
    if isinstance(raw, bool) or raw is None:
        return None
    if isinstance(raw, str):
        text = raw.strip()
        if ":" in text:
            seconds = _clock_to_seconds(text)
        else:
            try:
                seconds = float(text)
            except ValueError:
                return None
    elif isinstance(raw, (int, float)):
        seconds = float(raw)
    else:
        return None

    if seconds is None or not math.isfinite(seconds):
        return None
    return seconds


def normalize(raw: list[RawTimestamp]) -> list[int]:
    """Build a cut plan: whole-second offsets, strictly increasing, from 0.

    Unparsable entries are dropped. Negative offsets are rejected, and an
    input with nothing parsable raises InvalidInputError.
    """
    offsets: set[int] = set()
    for entry in raw:
        seconds = parse_timestamp(entry)
        if seconds is None:
            continue
        if seconds < 0:
            raise InvalidInputError(f"Negative timestamp not allowed: {entry!r}")
        offsets.add(int(seconds))

    if not offsets:
        raise InvalidInputError("No valid timestamps provided")

    plan = sorted(offsets)
    if plan[0] != 0:
        plan.insert(0, 0)
    return plan


def slugify(title: str) -> str:
    """Filesystem-safe name: non-alphanumerics become ``_``, lower-cased."""
    return re.sub(r"[^a-zA-Z0-9]", "_", title).lower()
