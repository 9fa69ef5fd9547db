"""Global SSE event stream.

Analyzer shims and dashboards subscribe here to follow engine compiles,
analyzer restart requests and refresh completions. A new subscriber first
receives "connected", then the latest compile transition if one happened.
"""

import asyncio
import json
import logging
from collections.abc import AsyncIterator
from datetime import UTC
from datetime import datetime
from typing import Annotated
from typing import Any

from fastapi import APIRouter
from fastapi import Depends
from sse_starlette import ServerSentEvent
from sse_starlette.sse import EventSourceResponse

from ..dependencies import get_event_service
from ..services.global_events import GlobalEventService

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api/v1/events", tags=["events"])

KEEPALIVE_SECONDS = 30.0


def _stamped(event: str, **fields: Any) -> ServerSentEvent:
    fields["timestamp"] = datetime.now(UTC).isoformat()
    return ServerSentEvent(data=json.dumps(fields), event=event)


async def _stream(queue: asyncio.Queue) -> AsyncIterator[ServerSentEvent]:
    yield _stamped("connected")
    while True:
        try:
            item = await asyncio.wait_for(queue.get(), timeout=KEEPALIVE_SECONDS)
        except TimeoutError:
            yield _stamped("keepalive")
            continue
        if item is None:
            logger.info("Event service stopped, closing stream")
            return
        yield ServerSentEvent(data=json.dumps(item["data"]), event=item["event"])


@router.get("")
async def global_event_stream(
    events_service: Annotated[GlobalEventService, Depends(get_event_service)],
) -> EventSourceResponse:
    """Stream daemon-wide events.

    Events:
        - connected: sent once on subscribe
        - keepalive: every 30s without traffic
        - compile:started / compile:finished: engine compile transitions
        - analyzer:restart_requested: analyzers should re-analyze the workspace
        - refresh:completed: a refresh_project finished
        - error: the stream failed and is closing
    """

    async def events() -> AsyncIterator[ServerSentEvent]:
        queue = events_service.subscribe(replay=True)
        logger.info("Event stream subscriber connected")
        try:
            async for event in _stream(queue):
                yield event
        except asyncio.CancelledError:
            logger.info("Event stream subscriber disconnected")
            raise
        except Exception as e:
            logger.error(f"Event stream failed: {e}")
            yield _stamped("error", error=str(e))
        finally:
            events_service.unsubscribe(queue)

    return EventSourceResponse(events())
