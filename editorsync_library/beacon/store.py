"""Persistence for the compile-status record.

Contract:
- Writers treat any write failure as non-fatal (best-effort telemetry)
- Readers treat a missing or corrupt file as "not compiling"
- At most one record exists; each write replaces it atomically
"""

import logging
from pathlib import Path

from pydantic import ValidationError

from ..models.compile_status import CompileStatusRecord
from ..storage.paths import get_compile_status_path

logger = logging.getLogger(__name__)


class CompileStatusStore:
    """Reads and writes the single compile-status JSON file."""

    def __init__(self, path: Path | None = None) -> None:
        """Initialize store.

        Args:
            path: File location (default: per-installation temp path)
        """
        self.path = Path(path) if path is not None else get_compile_status_path()

    def write(self, record: CompileStatusRecord) -> bool:
        """Persist a record, replacing any previous one.

        Args:
            record: Record to write

        Returns:
            True if the record was written, False if the write failed
        """
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            tmp_path = self.path.with_suffix(".tmp")
            tmp_path.write_text(record.model_dump_json(by_alias=True, indent=2), encoding="utf-8")
            tmp_path.replace(self.path)
            return True
        except OSError as e:
            logger.debug(f"Ignoring compile status write failure for {self.path}: {e}")
            return False

    def read(self) -> CompileStatusRecord | None:
        """Load the current record.

        Returns:
            The record, or None if the file is missing or unparsable
        """
        try:
            content = self.path.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError):
            return None

        try:
            return CompileStatusRecord.model_validate_json(content)
        except ValidationError as e:
            logger.debug(f"Unparsable compile status file {self.path}: {e}")
            return None

    def is_compiling(self) -> bool:
        """Check whether a compile cycle is in flight.

        Returns:
            The record's isCompiling value, False on any read problem
        """
        record = self.read()
        return record.is_compiling if record is not None else False

    def clear(self) -> None:
        """Remove the record if present."""
        try:
            self.path.unlink(missing_ok=True)
        except OSError as e:
            logger.debug(f"Ignoring compile status removal failure for {self.path}: {e}")
