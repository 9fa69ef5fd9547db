"""API models for the editorsyncd daemon."""

from .events import AnalyzerRestartRequestedEvent
from .events import CompileFinishedEvent
from .events import CompileStartedEvent
from .events import GlobalEvent
from .events import RefreshCompletedEvent
from .requests import DocumentRequest
from .requests import PublishDiagnosticsRequest
from .responses import DocumentListResponse
from .responses import PublishDiagnosticsResponse
from .responses import StatusResponse

__all__ = [
    "AnalyzerRestartRequestedEvent",
    "CompileFinishedEvent",
    "CompileStartedEvent",
    "DocumentListResponse",
    "DocumentRequest",
    "GlobalEvent",
    "PublishDiagnosticsRequest",
    "PublishDiagnosticsResponse",
    "RefreshCompletedEvent",
    "StatusResponse",
]
