"""Error kinds raised by the refresh engine.

``ListFailure`` and ``RateLimiterError`` abort a whole cycle.
``DetailFailure`` costs one pipeline its row for the cycle.
``RenderFailure`` marks a defect in turning snapshots into view rows.
"""

from __future__ import annotations


class PipewatchError(RuntimeError):
    """Base class for all pipewatch runtime errors."""


class ListFailure(PipewatchError):
    """Raised when the pipeline listing call fails."""


class DetailFailure(PipewatchError):
    """Raised when one pipeline's state could not be fetched."""

    def __init__(self, pipeline_name: str, reason: str) -> None:
        super().__init__(f"Detail fetch for {pipeline_name!r} failed: {reason}")
        self.pipeline_name = pipeline_name
        self.reason = reason


class RateLimiterError(PipewatchError):
    """Raised when the rate limiter itself malfunctions."""


class RenderFailure(PipewatchError):
    """Raised when a published snapshot cannot be turned into view rows.

    This is a programming defect, not a transient condition.
    """
