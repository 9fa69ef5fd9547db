"""Text-search definition provider.

A lightweight stand-in for a language server's definition request: finds the
identifier under the cursor and scans project files of the same language for
declarations of that name.
"""

import asyncio
import logging
import re
from pathlib import Path
from typing import Protocol

from ..models.diagnostics import Location
from ..models.diagnostics import Position
from ..models.diagnostics import Range

logger = logging.getLogger(__name__)

IDENTIFIER_PATTERN = re.compile(r"[A-Za-z_][A-Za-z0-9_]*")

DEFAULT_EXCLUDED_DIRS = frozenset(
    {".git", ".hg", ".svn", ".vs", ".idea", "bin", "obj", "node_modules", "Library", "Temp", "Logs", "__pycache__"}
)

DECLARATION_KEYWORDS = (
    "class",
    "struct",
    "interface",
    "enum",
    "record",
    "namespace",
    "delegate",
    "event",
    "def",
    "function",
    "func",
    "fn",
    "type",
)

# Words that can precede a name without declaring it
NON_TYPE_WORDS = frozenset({"return", "new", "await", "throw", "else", "yield", "in", "is", "as", "case", "goto", "typeof", "nameof"})


class DefinitionProvider(Protocol):
    """Resolves definitions for the symbol at a zero-based position."""

    async def find(self, path: Path, text: str, line: int, character: int) -> list[Location]: ...


def identifier_at(text: str, line: int, character: int) -> str | None:
    """Extract the identifier at a zero-based position.

    Args:
        text: Document content
        line: Zero-based line
        character: Zero-based character offset

    Returns:
        The identifier, or None if the position is not on one
    """
    lines = text.splitlines()
    if line < 0 or line >= len(lines):
        return None
    for match in IDENTIFIER_PATTERN.finditer(lines[line]):
        if match.start() <= character <= match.end():
            return match.group(0)
    return None


class TextSearchDefinitionProvider:
    """Scans same-language files under a root for declarations."""

    def __init__(self, root: Path, max_files: int = 5000, excluded_dirs: frozenset[str] = DEFAULT_EXCLUDED_DIRS) -> None:
        self.root = Path(root).resolve()
        self.max_files = max_files
        self.excluded_dirs = excluded_dirs

    async def find(self, path: Path, text: str, line: int, character: int) -> list[Location]:
        name = identifier_at(text, line, character)
        if name is None:
            logger.debug(f"No identifier at {path}:{line}:{character}")
            return []
        return await asyncio.to_thread(self._scan, name, path.suffix)

    def _candidate_files(self, suffix: str) -> list[Path]:
        files: list[Path] = []
        for candidate in sorted(self.root.rglob(f"*{suffix}")):
            if len(files) >= self.max_files:
                logger.warning(f"Definition search truncated at {self.max_files} files")
                break
            relative_parts = candidate.relative_to(self.root).parts[:-1]
            if any(part in self.excluded_dirs for part in relative_parts):
                continue
            if candidate.is_file():
                files.append(candidate)
        return files

    def _scan(self, name: str, suffix: str) -> list[Location]:
        keyword_pattern = re.compile(rf"\b(?:{'|'.join(DECLARATION_KEYWORDS)})\s+({re.escape(name)})\b")
        typed_pattern = re.compile(rf"\b([A-Za-z_][\w<>\[\],.?]*)\s+({re.escape(name)})\s*(?:\(|=|;|\{{)")

        results: list[Location] = []
        for file_path in self._candidate_files(suffix):
            try:
                content = file_path.read_text(encoding="utf-8", errors="replace")
            except OSError as e:
                logger.debug(f"Skipping unreadable file {file_path}: {e}")
                continue

            for line_number, source_line in enumerate(content.splitlines()):
                match = keyword_pattern.search(source_line)
                start = match.start(1) if match else None
                if start is None:
                    typed = typed_pattern.search(source_line)
                    if typed and typed.group(1) not in NON_TYPE_WORDS:
                        start = typed.start(2)
                if start is None:
                    continue
                results.append(
                    Location(
                        uri=str(file_path),
                        range=Range(
                            start=Position(line=line_number, character=start),
                            end=Position(line=line_number, character=start + len(name)),
                        ),
                    )
                )
        return results
