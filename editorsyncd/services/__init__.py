"""Service layer for the editorsyncd daemon."""

from .bridge_service import RefreshBridgeService
from .compile_status_watcher import CompileStatusWatcher
from .global_events import GlobalEventService

__all__ = [
    "CompileStatusWatcher",
    "GlobalEventService",
    "RefreshBridgeService",
]
