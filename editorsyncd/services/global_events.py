"""Daemon-wide event bus behind the /api/v1/events SSE stream.

The application lifespan creates one GlobalEventService and hands it to the
compile-status watcher, the bridge router and the workspace host's restart
listener. The latest payload of each event type is remembered so a client
that connects mid-compile can be told the current state straight away.

Architecture:
- One bounded asyncio.Queue per subscriber
- emit() never blocks: a full queue drops its oldest event
- stop() wakes every subscriber with a None sentinel so streams can end
"""

import asyncio
import logging
from typing import Any

from ..models.events import GlobalEvent

logger = logging.getLogger(__name__)

# Event types replayed to new subscribers, oldest first
REPLAYED_EVENT_TYPES = ("compile:started", "compile:finished")

SubscriberQueue = asyncio.Queue[dict[str, Any] | None]


class GlobalEventService:
    """Fan-out of daemon events to SSE subscribers."""

    def __init__(self, queue_size: int = 256) -> None:
        """Initialize event service.

        Args:
            queue_size: Events buffered per subscriber before the oldest is dropped
        """
        self.queue_size = queue_size
        self._subscribers: list[SubscriberQueue] = []
        self._latest: dict[str, dict[str, Any]] = {}
        self._running = False

    @property
    def running(self) -> bool:
        return self._running

    @property
    def subscriber_count(self) -> int:
        return len(self._subscribers)

    async def start(self) -> None:
        """Accept subscribers and events. Idempotent."""
        self._running = True
        logger.info("Event service started")

    async def stop(self) -> None:
        """Close every subscriber stream and forget remembered payloads."""
        if not self._running:
            return

        self._running = False
        for queue in self._subscribers:
            self._offer(queue, None)
        self._subscribers.clear()
        self._latest.clear()
        logger.info("Event service stopped")

    async def emit(self, event: GlobalEvent) -> None:
        """Publish an event to every subscriber and remember it.

        Args:
            event: The event to publish
        """
        if not self._running:
            logger.debug(f"Event service stopped, dropping {event.event_type}")
            return

        payload = event.model_dump(mode="json")
        self._latest[event.event_type] = payload
        item = {"event": event.event_type, "data": payload}
        for queue in self._subscribers:
            self._offer(queue, item)

    def latest(self, event_type: str) -> dict[str, Any] | None:
        return self._latest.get(event_type)

    def current_compile_event(self) -> dict[str, Any] | None:
        """The most recent compile transition, as a queued event dict."""
        newest: dict[str, Any] | None = None
        for event_type in REPLAYED_EVENT_TYPES:
            payload = self._latest.get(event_type)
            if payload is not None and (newest is None or payload["timestamp"] >= newest["data"]["timestamp"]):
                newest = {"event": event_type, "data": payload}
        return newest

    def subscribe(self, replay: bool = False) -> SubscriberQueue:
        """Open a subscriber queue.

        Args:
            replay: Pre-load the queue with the current compile transition

        Returns:
            A queue receiving every event emitted from now on; None marks shutdown
        """
        queue: SubscriberQueue = asyncio.Queue(maxsize=self.queue_size)
        if not self._running:
            queue.put_nowait(None)
            return queue

        self._subscribers.append(queue)
        if replay:
            current = self.current_compile_event()
            if current is not None:
                queue.put_nowait(current)
        return queue

    def unsubscribe(self, queue: SubscriberQueue) -> None:
        if queue in self._subscribers:
            self._subscribers.remove(queue)

    def _offer(self, queue: SubscriberQueue, item: dict[str, Any] | None) -> None:
        if queue.full():
            queue.get_nowait()
            logger.warning("Event subscriber is not keeping up, dropped oldest event")
        queue.put_nowait(item)
