"""Exception hierarchy shared by the pipeline and the HTTP layer.

Every error carries the HTTP status it maps to, so the web layer can turn any
``AudioSplitError`` into a JSON response without knowing its type.
"""


class AudioSplitError(Exception):
    """Base exception for all audiosplit errors."""

    status_code = 500


class InvalidInputError(AudioSplitError):
    """Malformed or missing URL/timestamps; correctable by the caller."""

    status_code = 400


class SourceUnavailableError(AudioSplitError):
    """The source media could not be obtained.

    ``reason`` is one of ``not_found``, ``gone``, ``forbidden`` or ``network``.
    """

    REASONS = ("not_found", "gone", "forbidden", "network")

    def __init__(self, message: str, reason: str = "not_found"):
        if reason not in self.REASONS:
            raise ValueError(f"Unknown source failure reason: {reason!r}")
        self.reason = reason
        super().__init__(message)

    @property
    def status_code(self) -> int:  # type: ignore[override]
        return 503 if self.reason == "network" else 400


class ExtractionFailedError(AudioSplitError):
    """ffmpeg failed on one interval of the cut plan."""

    def __init__(self, interval_index: int, cause: str):
        self.interval_index = interval_index
        self.cause = cause
        super().__init__(f"Failed to extract segment {interval_index + 1}: {cause}")


class TransientInfrastructureError(AudioSplitError):
    """Unexpected internal failure (disk I/O, process spawn)."""


class FFmpegNotFoundError(TransientInfrastructureError):
    pass
