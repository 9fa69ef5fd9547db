"""Response models for the daemon's auxiliary endpoints."""

from pydantic import Field

from editorsync_library.models import CamelCaseModel


class StatusResponse(CamelCaseModel):
    """Daemon status."""

    status: str = Field(..., description="Daemon status")
    version: str = Field(..., description="Daemon version")
    uptime_seconds: float = Field(..., description="Seconds since start")
    workspace_root: str = Field(..., description="Workspace root directory")
    gateway: str = Field(..., description="Engine gateway address (host:port)")
    refresh_in_progress: bool = Field(..., description="True while a refresh_project is running")
    open_files: int = Field(..., description="Number of tracked open documents")


class DocumentListResponse(CamelCaseModel):
    """Tracked open documents."""

    files: list[str] = Field(default_factory=list)


class PublishDiagnosticsResponse(CamelCaseModel):
    """Result of publishing diagnostics."""

    file_path: str = Field(..., description="Canonical path the diagnostics were stored under")
    count: int = Field(..., description="Number of diagnostics stored")
