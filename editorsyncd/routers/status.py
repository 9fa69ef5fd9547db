"""Status router for editorsyncd API.

Provides health check, status and compile-status information.
"""

import logging
import time
from typing import Annotated
from typing import Any

from fastapi import APIRouter
from fastapi import Depends

from editorsync_library.beacon import CompileStatusStore
from editorsync_library.host import WorkspaceHost

from .. import __version__
from ..config.models import Config
from ..dependencies import get_bridge_service
from ..dependencies import get_compile_status_store
from ..dependencies import get_config
from ..dependencies import get_workspace_host
from ..models import StatusResponse
from ..services.bridge_service import RefreshBridgeService

logger = logging.getLogger(__name__)

router = APIRouter(tags=["status"])

# Track daemon start time for uptime calculation
_start_time = time.time()


@router.get("/api/v1/status", response_model=StatusResponse)
async def get_status(
    config: Annotated[Config, Depends(get_config)],
    host: Annotated[WorkspaceHost, Depends(get_workspace_host)],
    service: Annotated[RefreshBridgeService, Depends(get_bridge_service)],
) -> StatusResponse:
    """Get daemon status.

    Returns:
        Daemon status information including version, uptime, and workspace root
    """
    return StatusResponse(
        status="running",
        version=__version__,
        uptime_seconds=time.time() - _start_time,
        workspace_root=str(host.root),
        gateway=f"{config.gateway.host}:{config.gateway.port}",
        refresh_in_progress=service.busy,
        open_files=len(host.open_files()),
    )


@router.get("/api/v1/compile-status")
async def get_compile_status(
    store: Annotated[CompileStatusStore, Depends(get_compile_status_store)],
) -> dict[str, Any]:
    """Get the engine's compile-status record.

    Returns:
        The record in its on-disk shape, or {"isCompiling": false} when absent
    """
    record = store.read()
    if record is None:
        return {"isCompiling": False}
    return record.model_dump(mode="json", by_alias=True)


@router.get("/health")
async def health_check() -> dict[str, str]:
    """Health check endpoint.

    Returns:
        Simple health status
    """
    return {"status": "healthy"}
