"""Diagnostic and source-location models."""

from enum import Enum

from pydantic import BaseModel
from pydantic import Field

from .base import CamelCaseModel


class DiagnosticSeverity(str, Enum):
    """Severity reported by an analyzer.

    Only ERROR and WARNING are aggregated into a DiagnosticSummary.
    """

    ERROR = "error"
    WARNING = "warning"
    INFORMATION = "information"
    HINT = "hint"


class Diagnostic(BaseModel):
    """A single analyzer finding, 1-based line and column."""

    line: int = Field(ge=1, description="Line number (1-based)")
    column: int = Field(default=1, ge=1, description="Column number (1-based)")
    severity: DiagnosticSeverity = Field(description="Severity level")
    message: str = Field(description="Diagnostic text")
    source: str = Field(default="", description="Analyzer that produced the diagnostic")


class DiagnosticSummary(CamelCaseModel):
    """Per-file diagnostics plus aggregate counts.

    Files without errors or warnings are omitted from ``files``.
    """

    files: dict[str, list[Diagnostic]] = Field(default_factory=dict)
    total_errors: int = 0
    total_warnings: int = 0
    files_with_issues: int = 0

    @classmethod
    def from_diagnostics(cls, per_file: dict[str, list[Diagnostic]]) -> "DiagnosticSummary":
        """Aggregate raw per-file diagnostics.

        Args:
            per_file: Mapping of file path to every diagnostic reported for it

        Returns:
            Summary containing only errors and warnings
        """
        files: dict[str, list[Diagnostic]] = {}
        total_errors = 0
        total_warnings = 0
        for path, diagnostics in per_file.items():
            issues = [
                d for d in diagnostics if d.severity in (DiagnosticSeverity.ERROR, DiagnosticSeverity.WARNING)
            ]
            if not issues:
                continue
            files[path] = sorted(issues, key=lambda d: (d.line, d.column))
            total_errors += sum(1 for d in issues if d.severity == DiagnosticSeverity.ERROR)
            total_warnings += sum(1 for d in issues if d.severity == DiagnosticSeverity.WARNING)

        return cls(
            files=files,
            total_errors=total_errors,
            total_warnings=total_warnings,
            files_with_issues=len(files),
        )


class Position(BaseModel):
    """Zero-based position in a text document."""

    line: int = Field(ge=0)
    character: int = Field(ge=0)


class Range(BaseModel):
    """Zero-based start/end range in a text document."""

    start: Position
    end: Position


class Location(BaseModel):
    """A definition result: file path plus range."""

    uri: str = Field(description="Filesystem path of the target document")
    range: Range
