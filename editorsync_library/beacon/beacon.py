"""Compile-status beacon.

Runs inside the analyzing process. It records analyzer activity in the
compile-status file and manages the background-run toggle:

- The original flag value is captured exactly once per compile cycle,
  before the flag is forced on
- It is restored exactly once when the cycle ends
- A second restore is a no-op
"""

import logging
from datetime import datetime
from typing import TYPE_CHECKING

from ..models.compile_status import CompileStatusRecord
from ..models.compile_status import new_compile_id
from .flags import BackgroundRunFlag
from .store import CompileStatusStore

if TYPE_CHECKING:
    from ..engine.host import EngineHost

logger = logging.getLogger(__name__)


class CompileStatusBeacon:
    """Signals "analysis in progress" across process boundaries."""

    def __init__(self, store: CompileStatusStore, background_flag: BackgroundRunFlag) -> None:
        """Initialize beacon.

        Args:
            store: Compile-status persistence
            background_flag: Host setting to keep on while compiling
        """
        self.store = store
        self.background_flag = background_flag
        self._original_background: bool | None = None
        self._restore_owed = False
        self._compile_id: str | None = None

    @property
    def restore_owed(self) -> bool:
        """True while the background flag has been forced on and not yet restored."""
        return self._restore_owed

    def attach(self, engine_host: "EngineHost") -> None:
        """Subscribe to the engine host's compilation hooks.

        Args:
            engine_host: Host emitting compilation started/finished
        """
        engine_host.add_compilation_started_listener(lambda: self.mark_compile_started("Compilation in progress"))
        engine_host.add_compilation_finished_listener(lambda: self.mark_compile_finished("Compilation finished"))

    def mark_compile_started(self, message: str = "Compilation in progress") -> None:
        """Record the start of a compile cycle.

        A cycle that is already running keeps its compileId.

        Args:
            message: Status message to persist
        """
        if self._compile_id is None:
            self._compile_id = new_compile_id()
        logger.info(f"Compile started ({self._compile_id}): {message}")
        self.store.write(
            CompileStatusRecord(
                is_compiling=True,
                message=message,
                last_update=datetime.now(),
                compile_id=self._compile_id,
            )
        )

    def mark_compile_finished(self, message: str = "Compilation finished") -> None:
        """Record the end of a compile cycle and restore the background flag.

        Args:
            message: Status message to persist
        """
        compile_id = self._compile_id or new_compile_id()
        self._compile_id = None
        logger.info(f"Compile finished ({compile_id}): {message}")
        self.store.write(
            CompileStatusRecord(
                is_compiling=False,
                message=message,
                last_update=datetime.now(),
                compile_id=compile_id,
            )
        )
        self.restore_background_flag()

    def is_compiling(self) -> bool:
        """Check the persisted record (fail-soft).

        Returns:
            True only if a readable record says a compile is in flight
        """
        return self.store.is_compiling()

    def ensure_background_run(self) -> bool:
        """Force background running on for the current cycle.

        Captures the original value only once per cycle; does nothing if
        the flag is already on.

        Returns:
            True if this call changed the flag
        """
        if self._restore_owed:
            return False
        if self.background_flag.value:
            return False

        self._original_background = self.background_flag.value
        self.background_flag.value = True
        self._restore_owed = True
        logger.info("Enabled background running for in-flight compile")
        return True

    def on_focus_lost(self) -> bool:
        """Keep an in-flight compile running after the host loses focus.

        Returns:
            True if the background flag was forced on
        """
        if not self.is_compiling():
            return False
        return self.ensure_background_run()

    def on_focus_changed(self, has_focus: bool) -> bool:
        """Dispatch a host focus change.

        Args:
            has_focus: Whether the host window now has focus

        Returns:
            True if the background flag was forced on
        """
        if has_focus:
            return False
        return self.on_focus_lost()

    def restore_background_flag(self) -> bool:
        """Put the background flag back to its captured value.

        Idempotent: only the first call after a forced change has an effect.

        Returns:
            True if the flag was restored
        """
        if not self._restore_owed:
            return False

        original = bool(self._original_background)
        self.background_flag.value = original
        self._restore_owed = False
        self._original_background = None
        logger.info(f"Restored background running to {original}")
        return True
