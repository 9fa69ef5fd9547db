"""
Tests for CompileStatusWatcher.

Calls poll() directly instead of waiting for the scheduler.
"""

from collections.abc import AsyncGenerator
from pathlib import Path

import pytest

from editorsync_library.beacon import CompileStatusStore
from editorsync_library.models import CompileStatusRecord
from editorsyncd.services.compile_status_watcher import JOB_ID
from editorsyncd.services.compile_status_watcher import CompileStatusWatcher
from editorsyncd.services.global_events import GlobalEventService


@pytest.fixture
async def events() -> AsyncGenerator[GlobalEventService, None]:
    service = GlobalEventService()
    await service.start()
    yield service
    await service.stop()


@pytest.fixture
def store(tmp_path: Path) -> CompileStatusStore:
    return CompileStatusStore(tmp_path / "mcp_compile_status.json")


@pytest.mark.unit
class TestCompileStatusWatcher:
    """Test transition detection."""

    async def test_emits_started_and_finished_once(
        self, store: CompileStatusStore, events: GlobalEventService
    ) -> None:
        watcher = CompileStatusWatcher(store, events)
        queue = events.subscribe()

        store.write(CompileStatusRecord(is_compiling=True, message="Compiling", compile_id="compile_a"))
        await watcher.poll()
        await watcher.poll()
        store.write(CompileStatusRecord(is_compiling=False, message="Done", compile_id="compile_a"))
        await watcher.poll()

        started = queue.get_nowait()
        finished = queue.get_nowait()
        assert queue.empty()
        assert started["event"] == "compile:started"
        assert started["data"]["compile_id"] == "compile_a"
        assert finished["event"] == "compile:finished"
        assert finished["data"]["message"] == "Done"

    async def test_missing_file_is_idle(self, store: CompileStatusStore, events: GlobalEventService) -> None:
        watcher = CompileStatusWatcher(store, events)
        queue = events.subscribe()

        assert await watcher.poll() is None
        assert watcher.is_compiling is False
        assert queue.empty()

    async def test_deleted_file_while_compiling_finishes(
        self, store: CompileStatusStore, events: GlobalEventService
    ) -> None:
        watcher = CompileStatusWatcher(store, events)
        queue = events.subscribe()
        store.write(CompileStatusRecord(is_compiling=True, compile_id="compile_b"))
        await watcher.poll()

        store.clear()
        await watcher.poll()

        queue.get_nowait()
        finished = queue.get_nowait()
        assert finished["event"] == "compile:finished"
        assert watcher.current is None

    async def test_start_takes_initial_reading_without_event(
        self, store: CompileStatusStore, events: GlobalEventService
    ) -> None:
        store.write(CompileStatusRecord(is_compiling=True, compile_id="compile_c"))
        watcher = CompileStatusWatcher(store, events, poll_interval=60)
        queue = events.subscribe()

        await watcher.start()
        try:
            assert watcher.is_compiling is True
            assert watcher.scheduler.get_job(JOB_ID) is not None
            await watcher.start()
        finally:
            await watcher.stop()

        assert queue.empty()
