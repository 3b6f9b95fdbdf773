"""Exception types raised across the ingestion pipeline.

Only `PipelineFailure` is expected to reach callers; the others are caught
inside the pipeline and translated into a skipped row or a skipped file.
"""

from __future__ import annotations


class PointsTrackerError(Exception):
    """Base class for pipeline errors."""


class SkippableRowError(PointsTrackerError):
    """A row has no usable date or no positive points and is skipped."""


class FileUnavailableError(PointsTrackerError):
    """A catalog file is missing or could not be retrieved."""

    def __init__(self, path: str, reason: str = "not found") -> None:
        super().__init__(f"{path}: {reason}")
        self.path = path
        self.reason = reason


class DecodeError(PointsTrackerError):
    """A retrieved file could not be decoded into rows."""

    def __init__(self, path: str, reason: str) -> None:
        super().__init__(f"{path}: {reason}")
        self.path = path
        self.reason = reason


class PipelineFailure(PointsTrackerError):
    """A full ingestion run failed and there is no cached result to fall back on."""
