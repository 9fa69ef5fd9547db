"""HTTP bridge endpoint.

Accepts one JSON action per request from the tool adapter:

    POST /bridge {"action": "refresh_project", "files": [...], "is_add": false}
    POST /bridge {"action": "goto_symbol_definition", "file_path": "...", "line": 1, "character": 0}

Every failure is answered with {"success": false, "error": "..."} and a status
code; nothing a client sends can take the daemon down.
"""

import json
import logging
from typing import Annotated

from fastapi import APIRouter
from fastapi import Depends
from fastapi import Request
from fastapi import Response
from fastapi.responses import JSONResponse

from editorsync_library.errors import BridgeBusyError
from editorsync_library.errors import ProtocolParseError
from editorsync_library.errors import UnknownActionError
from editorsync_library.models import BridgeResponse
from editorsync_library.models import GotoSymbolDefinitionCommand
from editorsync_library.models import parse_bridge_command

from ..dependencies import get_bridge_service
from ..dependencies import get_event_service
from ..models import RefreshCompletedEvent
from ..services.bridge_service import RefreshBridgeService
from ..services.global_events import GlobalEventService

logger = logging.getLogger(__name__)

router = APIRouter(tags=["bridge"])


def _error(status_code: int, message: str) -> JSONResponse:
    body = BridgeResponse(success=False, message=message, error=message)
    return JSONResponse(status_code=status_code, content=body.model_dump(by_alias=True, exclude_none=True))


async def _announce_refresh(events: GlobalEventService, result: BridgeResponse) -> None:
    summary = result.diagnostics
    await events.emit(
        RefreshCompletedEvent(
            refreshed_files=len(result.refreshed_files or []),
            skipped_files=len(result.skipped_files or []),
            total_errors=summary.total_errors if summary else 0,
            total_warnings=summary.total_warnings if summary else 0,
            analysis=result.analysis.reason if result.analysis else None,
        )
    )


@router.options("/bridge")
async def bridge_preflight() -> Response:
    """Answer preflight requests that reach the route directly."""
    return Response(status_code=200)


@router.post("/bridge")
async def bridge(
    request: Request,
    service: Annotated[RefreshBridgeService, Depends(get_bridge_service)],
    events: Annotated[GlobalEventService, Depends(get_event_service)],
) -> JSONResponse:
    """Dispatch one bridge action.

    Returns:
        200 with the action's BridgeResponse, 400 for malformed or unknown
        actions, 409 when busy and the busy policy is "reject", 500 otherwise
    """
    try:
        payload = json.loads(await request.body())
    except (json.JSONDecodeError, UnicodeDecodeError) as e:
        return _error(400, f"Invalid JSON body: {e}")

    try:
        command = parse_bridge_command(payload)
    except (ProtocolParseError, UnknownActionError) as e:
        return _error(400, str(e))

    logger.info(f"Bridge action: {command.action}")
    try:
        if isinstance(command, GotoSymbolDefinitionCommand):
            result = await service.goto_symbol_definition(command.file_path, command.line, command.character)
        else:
            result = await service.refresh_project(command.files, command.is_add)
            await _announce_refresh(events, result)
    except BridgeBusyError as e:
        return _error(409, f"Bridge busy: {e}")
    except FileNotFoundError as e:
        return _error(404, str(e))
    except Exception as e:
        logger.exception(f"Bridge action {command.action} failed")
        return _error(500, f"{command.action} failed: {e}")

    return JSONResponse(content=result.model_dump(mode="json", by_alias=True, exclude_none=True))
