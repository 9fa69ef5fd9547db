"""Compile-status watcher for editorsyncd.

Polls the engine companion's compile-status file using APScheduler and turns
transitions of its isCompiling flag into global events, so SSE subscribers
learn when an engine compile starts and finishes.

Architecture:
- Uses APScheduler AsyncIOScheduler with an IntervalTrigger
- Reads through CompileStatusStore (missing or corrupt file = not compiling)
- Emits compile:started / compile:finished only on transitions
- Lifecycle: start with daemon, stop on shutdown
"""

import logging

from apscheduler.schedulers.asyncio import AsyncIOScheduler
from apscheduler.triggers.interval import IntervalTrigger

from editorsync_library.beacon import CompileStatusStore
from editorsync_library.models import CompileStatusRecord

from ..models.events import CompileFinishedEvent
from ..models.events import CompileStartedEvent
from .global_events import GlobalEventService

logger = logging.getLogger(__name__)

JOB_ID = "compile-status-poll"


class CompileStatusWatcher:
    """Tracks the compile-status record and announces transitions."""

    def __init__(self, store: CompileStatusStore, events: GlobalEventService, poll_interval: float = 2.0) -> None:
        """Initialize watcher.

        Args:
            store: Compile-status store to poll
            events: Event service receiving compile transitions
            poll_interval: Seconds between polls
        """
        self.store = store
        self.events = events
        self.poll_interval = poll_interval
        self.scheduler = AsyncIOScheduler(timezone="UTC")
        self.current: CompileStatusRecord | None = None
        self._running = False

    @property
    def is_compiling(self) -> bool:
        return self.current is not None and self.current.is_compiling

    async def start(self) -> None:
        """Take an initial reading and start polling.

        Idempotent - safe to call multiple times.
        """
        if self._running:
            logger.warning("Compile status watcher already running")
            return

        self.current = self.store.read()
        self.scheduler.start()
        self.scheduler.add_job(
            func=self.poll,
            trigger=IntervalTrigger(seconds=self.poll_interval),
            id=JOB_ID,
            name="Compile status poll",
            replace_existing=True,
            max_instances=1,
            coalesce=True,
        )
        self._running = True
        logger.info(f"Watching compile status at {self.store.path} every {self.poll_interval}s")

    async def stop(self) -> None:
        """Stop polling."""
        if not self._running:
            return

        self.scheduler.shutdown(wait=False)
        self._running = False
        logger.info("Compile status watcher stopped")

    async def poll(self) -> CompileStatusRecord | None:
        """Read the record once and emit an event on a transition.

        Returns:
            The record just read (None when missing or unparsable)
        """
        record = self.store.read()
        was_compiling = self.is_compiling
        self.current = record
        now_compiling = record is not None and record.is_compiling

        if now_compiling and not was_compiling:
            logger.info(f"Engine compile started ({record.compile_id})")
            await self.events.emit(CompileStartedEvent(compile_id=record.compile_id, message=record.message))
        elif was_compiling and not now_compiling:
            compile_id = record.compile_id if record is not None else ""
            message = record.message if record is not None else "Compile status cleared"
            logger.info(f"Engine compile finished ({compile_id or 'unknown'})")
            await self.events.emit(CompileFinishedEvent(compile_id=compile_id, message=message))

        return record
