"""Text rendering of bridge results for the agent."""

from typing import Any

from editorsync_library.models import BridgeResponse
from editorsync_library.models import DiagnosticSummary
from editorsync_library.models import Location

MAX_LISTED_DIAGNOSTICS = 50


def format_error(error: Exception | str) -> str:
    return f"Error: {error}"


def format_diagnostics(summary: DiagnosticSummary) -> str:
    """Render a diagnostic summary, errors first, capped at MAX_LISTED_DIAGNOSTICS lines."""
    if summary.total_errors == 0 and summary.total_warnings == 0:
        return "No errors or warnings."

    lines = [
        f"{summary.total_errors} errors, {summary.total_warnings} warnings "
        f"in {summary.files_with_issues} files:"
    ]
    listed = 0
    for path, diagnostics in summary.files.items():
        for diagnostic in diagnostics:
            if listed == MAX_LISTED_DIAGNOSTICS:
                remaining = summary.total_errors + summary.total_warnings - listed
                lines.append(f"... {remaining} more")
                return "\n".join(lines)
            source = f" [{diagnostic.source}]" if diagnostic.source else ""
            lines.append(
                f"{path}:{diagnostic.line}:{diagnostic.column}: "
                f"{diagnostic.severity.value}{source}: {diagnostic.message}"
            )
            listed += 1
    return "\n".join(lines)


def format_refresh(response: BridgeResponse, files: list[str] | None = None) -> str:
    """Render a refresh_project response.

    Args:
        response: Bridge response
        files: Files the agent asked for (None means every open file)
    """
    if not response.success:
        return format_error(response.error or response.message)

    scope = f"{len(files)} specified files" if files else "all open files"
    lines = [f"Editor refresh completed ({scope})", response.message]

    if response.skipped_files:
        lines.append("Skipped (not found or unreadable): " + ", ".join(response.skipped_files))

    analysis = response.analysis
    if analysis is not None:
        if analysis.timed_out:
            lines.append(
                f"Analysis still running after {analysis.elapsed_seconds:.1f}s; diagnostics may be incomplete."
            )
        else:
            lines.append(f"Analysis settled ({analysis.reason}) after {analysis.elapsed_seconds:.1f}s.")

    if response.diagnostics is not None:
        lines.append("")
        lines.append(format_diagnostics(response.diagnostics))
    return "\n".join(lines)


def format_location(index: int, location: Location) -> str:
    start = location.range.start
    return f"{index}. {location.uri}\n   Line: {start.line + 1}, Column: {start.character + 1}"


def format_definitions(response: BridgeResponse) -> str:
    """Render a goto_symbol_definition response with 1-based positions."""
    if not response.success:
        return format_error(response.error or response.message)
    if not response.definitions:
        return f"Symbol definition not found\n\nResponse: {response.message}"

    entries = "\n\n".join(format_location(i, loc) for i, loc in enumerate(response.definitions, start=1))
    return f"Found {len(response.definitions)} definition(s):\n\n{entries}"


def format_compile_status(record: dict[str, Any] | None) -> str:
    if record is None:
        return "No compile in progress (no compile status recorded)."
    state = "Compiling" if record.get("isCompiling") else "Not compiling"
    details = [state]
    if record.get("message"):
        details.append(f"Message: {record['message']}")
    if record.get("compileId"):
        details.append(f"Compile ID: {record['compileId']}")
    if record.get("lastUpdate"):
        details.append(f"Last update: {record['lastUpdate']}")
    return "\n".join(details)
