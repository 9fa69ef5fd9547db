"""Shared dependency factories for FastAPI endpoints.

Services are created once by the application lifespan and stored on
app.state; these factories hand them to the routers.
"""

from fastapi import HTTPException
from fastapi import Request

from editorsync_library.beacon import CompileStatusStore
from editorsync_library.host import WorkspaceHost

from .config.models import Config
from .services.bridge_service import RefreshBridgeService
from .services.compile_status_watcher import CompileStatusWatcher
from .services.global_events import GlobalEventService


def _require(request: Request, name: str):
    service = getattr(request.app.state, name, None)
    if service is None:
        raise HTTPException(status_code=503, detail=f"Service not available: {name}")
    return service


def get_config(request: Request) -> Config:
    """Get daemon configuration from app state."""
    return _require(request, "config")


def get_workspace_host(request: Request) -> WorkspaceHost:
    """Get the workspace host from app state."""
    return _require(request, "workspace_host")


def get_bridge_service(request: Request) -> RefreshBridgeService:
    """Get the refresh bridge service from app state."""
    return _require(request, "bridge_service")


def get_compile_status_store(request: Request) -> CompileStatusStore:
    """Get the compile-status store from app state."""
    return _require(request, "compile_status_store")


def get_event_service(request: Request) -> GlobalEventService:
    """Get the daemon event service from app state."""
    return _require(request, "event_service")


def get_compile_status_watcher(request: Request) -> CompileStatusWatcher | None:
    """Get compile-status watcher from app state.

    Args:
        request: FastAPI request object

    Returns:
        CompileStatusWatcher instance from app state, or None if watching is disabled
    """
    return getattr(request.app.state, "compile_status_watcher", None)
