"""Global event models for SSE streaming.

These events are emitted by the daemon and can be subscribed to via the
global SSE endpoint at /api/v1/events.
"""

from datetime import datetime
from typing import Literal

from pydantic import BaseModel
from pydantic import Field


class GlobalEvent(BaseModel):
    """Base model for global SSE events."""

    event_type: str
    timestamp: datetime = Field(default_factory=datetime.now)


class CompileStartedEvent(GlobalEvent):
    """Emitted when the engine's compile-status record turns to compiling."""

    event_type: Literal["compile:started"] = "compile:started"
    compile_id: str
    message: str


class CompileFinishedEvent(GlobalEvent):
    """Emitted when the engine's compile-status record stops compiling."""

    event_type: Literal["compile:finished"] = "compile:finished"
    compile_id: str
    message: str


class AnalyzerRestartRequestedEvent(GlobalEvent):
    """Emitted when the bridge asks external analyzers to restart.

    Analyzer shims subscribed to the event stream re-analyze the workspace
    and publish fresh diagnostics to /api/v1/host/diagnostics.
    """

    event_type: Literal["analyzer:restart_requested"] = "analyzer:restart_requested"
    workspace_root: str


class RefreshCompletedEvent(GlobalEvent):
    """Emitted after every refresh_project."""

    event_type: Literal["refresh:completed"] = "refresh:completed"
    refreshed_files: int
    skipped_files: int
    total_errors: int
    total_warnings: int
    analysis: str | None = Field(None, description="Detector outcome when the analyzer was restarted")
