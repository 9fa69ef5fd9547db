"""Workspace-backed editor host.

Tracks open documents as in-memory buffers re-read from disk on revert, and
keeps the diagnostics that external analyzers publish for them. Publishing
diagnostics is what produces diagnostic-change events for the detector.
"""

import asyncio
import logging
from collections.abc import Awaitable
from collections.abc import Callable
from pathlib import Path

from ..detection.events import DiagnosticChangeEvent
from ..detection.events import DiagnosticEventHub
from ..models.diagnostics import Diagnostic
from ..models.diagnostics import Location
from .definitions import DefinitionProvider
from .definitions import TextSearchDefinitionProvider

logger = logging.getLogger(__name__)

RestartListener = Callable[[], Awaitable[None]]


class WorkspaceHost:
    """In-process editor host rooted at a workspace directory."""

    def __init__(
        self,
        root: Path,
        definition_provider: DefinitionProvider | None = None,
        analyzer_restart_command: list[str] | None = None,
        restart_timeout: float = 60.0,
    ) -> None:
        """Initialize workspace host.

        Args:
            root: Workspace root; relative paths resolve against it
            definition_provider: Definition lookup (default: text search under root)
            analyzer_restart_command: argv run by restart_analyzer (optional)
            restart_timeout: Seconds to wait for the restart command
        """
        self.root = Path(root).expanduser().resolve()
        self.definition_provider = definition_provider or TextSearchDefinitionProvider(self.root)
        self.analyzer_restart_command = list(analyzer_restart_command or [])
        self.restart_timeout = restart_timeout

        self._events = DiagnosticEventHub()
        self._documents: dict[str, str] = {}
        self._diagnostics: dict[str, list[Diagnostic]] = {}
        self._restart_listeners: list[RestartListener] = []

    @property
    def events(self) -> DiagnosticEventHub:
        return self._events

    def resolve_path(self, path: str) -> Path:
        """Resolve a path against the workspace root.

        Raises:
            FileNotFoundError: If the path cannot name a file (e.g. it contains a NUL byte)
        """
        try:
            candidate = Path(path).expanduser()
            if not candidate.is_absolute():
                candidate = self.root / candidate
            return candidate.resolve()
        except (ValueError, RuntimeError) as e:
            raise FileNotFoundError(f"Invalid path {path!r}: {e}") from e

    # --- Documents ---

    def open_files(self) -> list[str]:
        return sorted(self._documents)

    def document_text(self, path: str) -> str | None:
        return self._documents.get(str(self.resolve_path(path)))

    async def open_document(self, path: str) -> str:
        """Start tracking a document, loading it from disk.

        Args:
            path: File path (absolute or workspace-relative)

        Returns:
            Canonical path of the document

        Raises:
            OSError: If the file cannot be read
        """
        return await self.revert_file(path)

    def close_document(self, path: str) -> bool:
        """Stop tracking a document.

        Returns:
            True if the document was open
        """
        key = str(self.resolve_path(path))
        return self._documents.pop(key, None) is not None

    async def revert_file(self, path: str) -> str:
        resolved = self.resolve_path(path)
        if not resolved.is_file():
            raise FileNotFoundError(f"File not found: {resolved}")

        text = await asyncio.to_thread(resolved.read_text, encoding="utf-8", errors="replace")
        key = str(resolved)
        if key not in self._documents:
            logger.debug(f"Opened document {key}")
        self._documents[key] = text
        return key

    async def reload_project(self) -> None:
        """Drop documents whose files no longer exist on disk."""
        removed = [key for key in self._documents if not Path(key).exists()]
        for key in removed:
            del self._documents[key]
            if self._diagnostics.pop(key, None) is not None:
                self._events.publish(DiagnosticChangeEvent(uris=(key,)))
        if removed:
            logger.info(f"Closed {len(removed)} documents deleted from disk")

    # --- Analyzer ---

    def add_restart_listener(self, listener: RestartListener) -> None:
        """Register a coroutine called after every analyzer restart request."""
        self._restart_listeners.append(listener)

    async def restart_analyzer(self) -> None:
        if self.analyzer_restart_command:
            logger.info(f"Restarting analyzer: {' '.join(self.analyzer_restart_command)}")
            process = await asyncio.create_subprocess_exec(
                *self.analyzer_restart_command,
                cwd=str(self.root),
                stdout=asyncio.subprocess.DEVNULL,
                stderr=asyncio.subprocess.DEVNULL,
            )
            try:
                returncode = await asyncio.wait_for(process.wait(), timeout=self.restart_timeout)
            except TimeoutError:
                process.kill()
                await process.wait()
                raise
            if returncode != 0:
                logger.warning(f"Analyzer restart command exited with {returncode}")

        for listener in list(self._restart_listeners):
            await listener()

    async def get_diagnostics(self, path: str) -> list[Diagnostic]:
        return list(self._diagnostics.get(str(self.resolve_path(path)), []))

    def publish_diagnostics(self, path: str, diagnostics: list[Diagnostic]) -> str:
        """Replace the diagnostics of one file and emit a change event.

        Args:
            path: File the diagnostics belong to
            diagnostics: Full diagnostic list (empty clears the file)

        Returns:
            Canonical path the diagnostics were stored under
        """
        key = str(self.resolve_path(path))
        if diagnostics:
            self._diagnostics[key] = list(diagnostics)
        else:
            self._diagnostics.pop(key, None)
        self._events.publish(DiagnosticChangeEvent(uris=(key,)))
        return key

    # --- Navigation ---

    async def find_definitions(self, path: str, line: int, character: int) -> list[Location]:
        key = await self.revert_file(path)
        return await self.definition_provider.find(Path(key), self._documents[key], line, character)
