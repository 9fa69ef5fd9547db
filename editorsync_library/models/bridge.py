"""Bridge response and detection outcome models."""

from typing import Literal

from pydantic import Field

from .base import CamelCaseModel
from .diagnostics import DiagnosticSummary
from .diagnostics import Location

DetectionReason = Literal["stable", "fallback", "timeout", "cancelled"]


class DetectionResult(CamelCaseModel):
    """How a stability detection cycle ended.

    ``timeout`` is a soft completion: the latency ceiling was reached while
    the analyzer was still emitting events.
    """

    reason: DetectionReason
    elapsed_seconds: float = Field(ge=0)
    relevant_event_count: int = 0
    total_event_count: int = 0

    @property
    def timed_out(self) -> bool:
        """True when the hard ceiling resolved the cycle."""
        return self.reason == "timeout"


class BridgeResponse(CamelCaseModel):
    """Response of the HTTP bridge."""

    success: bool
    message: str = ""
    diagnostics: DiagnosticSummary | None = None
    definitions: list[Location] | None = None
    refreshed_files: list[str] | None = None
    skipped_files: list[str] | None = None
    analysis: DetectionResult | None = None
    error: str | None = None
