"""Diagnostic-change event subscription.

Listeners are plain callables invoked on the event loop thread. Every
subscription is released through its Subscription handle, whose dispose()
takes effect exactly once.
"""

import logging
import time
from collections.abc import Callable
from dataclasses import dataclass
from dataclasses import field
from typing import Protocol

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class DiagnosticChangeEvent:
    """Diagnostics changed for one or more documents."""

    uris: tuple[str, ...]
    timestamp: float = field(default_factory=time.monotonic)


DiagnosticListener = Callable[[DiagnosticChangeEvent], None]


class Subscription:
    """Cancellable handle for a registered listener."""

    def __init__(self, release: Callable[[], None]) -> None:
        self._release = release
        self._disposed = False

    @property
    def disposed(self) -> bool:
        return self._disposed

    def dispose(self) -> bool:
        """Release the listener.

        Returns:
            True on the first call, False on every later call
        """
        if self._disposed:
            return False
        self._disposed = True
        self._release()
        return True


class DiagnosticEventSource(Protocol):
    """Anything that can deliver diagnostic-change events."""

    def subscribe(self, listener: DiagnosticListener) -> Subscription: ...


class DiagnosticEventHub:
    """Fan-out of diagnostic-change events to subscribed listeners."""

    def __init__(self) -> None:
        self._listeners: list[DiagnosticListener] = []

    @property
    def listener_count(self) -> int:
        return len(self._listeners)

    def subscribe(self, listener: DiagnosticListener) -> Subscription:
        """Register a listener.

        Args:
            listener: Called with each published event

        Returns:
            Subscription whose dispose() unregisters the listener
        """
        self._listeners.append(listener)

        def release() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return Subscription(release)

    def publish(self, event: DiagnosticChangeEvent) -> None:
        """Deliver an event to every current listener.

        A failing listener is logged and does not stop delivery to the others.

        Args:
            event: Event to deliver
        """
        for listener in list(self._listeners):
            try:
                listener(event)
            except Exception as e:
                logger.error(f"Diagnostic listener failed: {e}")
