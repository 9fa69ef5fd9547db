"""Editor host capability interface.

The bridge never talks to an editor API directly; it goes through this
small capability surface, implemented once per host editor.
"""

from typing import Protocol

from ..detection.events import DiagnosticEventSource
from ..models.diagnostics import Diagnostic
from ..models.diagnostics import Location


class EditorHost(Protocol):
    """Capabilities the refresh bridge needs from a host editor.

    All positions passed to find_definitions are zero-based.
    """

    @property
    def events(self) -> DiagnosticEventSource:
        """Diagnostic-change events emitted by the host's analyzers."""
        ...

    def open_files(self) -> list[str]:
        """Files currently tracked as open documents."""
        ...

    async def revert_file(self, path: str) -> str:
        """Force the in-memory document to match on-disk content.

        Opens the document first if it is not tracked yet. Returns the
        canonical path; raises OSError if the file cannot be read.
        """
        ...

    async def reload_project(self) -> None:
        """Re-scan project structure (explorer, project files)."""
        ...

    async def restart_analyzer(self) -> None:
        """Ask the external analyzer to restart and re-analyze."""
        ...

    async def get_diagnostics(self, path: str) -> list[Diagnostic]:
        """Current diagnostics for one file."""
        ...

    async def find_definitions(self, path: str, line: int, character: int) -> list[Location]:
        """Definitions of the symbol at a zero-based position."""
        ...
