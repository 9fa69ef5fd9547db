"""Editor host endpoints.

External analyzers publish diagnostics here, and editors tell the daemon
which documents are open. Publishing diagnostics feeds the stability
detector of any refresh waiting for analysis to settle.
"""

import logging
from typing import Annotated

from fastapi import APIRouter
from fastapi import Depends
from fastapi import HTTPException

from editorsync_library.host import WorkspaceHost

from ..dependencies import get_workspace_host
from ..models import DocumentListResponse
from ..models import DocumentRequest
from ..models import PublishDiagnosticsRequest
from ..models import PublishDiagnosticsResponse

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/v1/host", tags=["host"])


@router.post("/diagnostics", response_model=PublishDiagnosticsResponse)
async def publish_diagnostics(
    request: PublishDiagnosticsRequest,
    host: Annotated[WorkspaceHost, Depends(get_workspace_host)],
) -> PublishDiagnosticsResponse:
    """Replace the diagnostics of one file.

    Raises:
        HTTPException: 400 if the path cannot name a file
    """
    try:
        key = host.publish_diagnostics(request.file_path, request.diagnostics)
    except FileNotFoundError as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc
    logger.debug(f"Received {len(request.diagnostics)} diagnostics for {key}")
    return PublishDiagnosticsResponse(file_path=key, count=len(request.diagnostics))


@router.get("/documents", response_model=DocumentListResponse)
async def list_documents(
    host: Annotated[WorkspaceHost, Depends(get_workspace_host)],
) -> DocumentListResponse:
    """List tracked open documents."""
    return DocumentListResponse(files=host.open_files())


@router.post("/documents/open", response_model=DocumentListResponse)
async def open_document(
    request: DocumentRequest,
    host: Annotated[WorkspaceHost, Depends(get_workspace_host)],
) -> DocumentListResponse:
    """Start tracking a document.

    Raises:
        HTTPException: 404 if the file does not exist
    """
    try:
        await host.open_document(request.file_path)
    except FileNotFoundError as exc:
        raise HTTPException(status_code=404, detail=str(exc)) from exc
    except OSError as exc:
        logger.error(f"Failed to open {request.file_path}: {exc}")
        raise HTTPException(status_code=500, detail=str(exc)) from exc
    return DocumentListResponse(files=host.open_files())


@router.post("/documents/close", response_model=DocumentListResponse)
async def close_document(
    request: DocumentRequest,
    host: Annotated[WorkspaceHost, Depends(get_workspace_host)],
) -> DocumentListResponse:
    """Stop tracking a document.

    Raises:
        HTTPException: 404 if the document was not open
    """
    try:
        closed = host.close_document(request.file_path)
    except FileNotFoundError as exc:
        raise HTTPException(status_code=404, detail=str(exc)) from exc
    if not closed:
        raise HTTPException(status_code=404, detail=f"Document not open: {request.file_path}")
    return DocumentListResponse(files=host.open_files())
