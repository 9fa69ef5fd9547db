"""Diagnostic-stability detector.

Infers that a background analysis pass has settled when the analyzer gives
no explicit "done" signal. An analyzer restart emits an unpredictable burst
of diagnostic-change events while dependent files are re-validated; the
detector debounces that burst to a quiet period, bounded by a hard ceiling.

State machine (one cycle per instance):

    WAITING --(stability window elapsed after last relevant event)--> RESOLVED(stable)
    WAITING --(no relevant event by fallback delay)----------------> RESOLVED(fallback)
    WAITING --(hard ceiling reached)--------------------------------> RESOLVED(timeout)
    WAITING --(cancel() / waiting task cancelled)-------------------> RESOLVED(cancelled)

The first trigger wins. At resolution every timer is cancelled and the
event subscription is disposed, exactly once.
"""

import asyncio
import logging
from collections.abc import Iterable
from dataclasses import dataclass

from ..models.bridge import DetectionReason
from ..models.bridge import DetectionResult
from .events import DiagnosticChangeEvent
from .events import DiagnosticEventSource
from .events import Subscription

logger = logging.getLogger(__name__)

DEFAULT_MAX_WAIT = 30.0
DEFAULT_FALLBACK_DELAY = 10.0
DEFAULT_STABILITY_WINDOW = 3.0
DEFAULT_WATCHED_EXTENSIONS = (".cs",)


@dataclass
class StabilityState:
    """Bookkeeping for one detection cycle (loop-clock seconds)."""

    start_time: float
    last_relevant_event_time: float | None = None
    relevant_event_count: int = 0
    total_event_count: int = 0
    resolved: bool = False


class StabilityDetector:
    """Waits until diagnostic-change activity for watched files has quiesced.

    Instances are single-use: create one per detection cycle.

    Example:
        detector = StabilityDetector(host.events, stability_window=3.0)
        await host.restart_analyzer()
        result = await detector.wait()
        if result.timed_out:
            ...
    """

    def __init__(
        self,
        events: DiagnosticEventSource,
        max_wait: float = DEFAULT_MAX_WAIT,
        fallback_delay: float = DEFAULT_FALLBACK_DELAY,
        stability_window: float = DEFAULT_STABILITY_WINDOW,
        watched_extensions: Iterable[str] = DEFAULT_WATCHED_EXTENSIONS,
    ) -> None:
        """Initialize detector.

        Args:
            events: Source of diagnostic-change events
            max_wait: Hard ceiling in seconds (T_max)
            fallback_delay: Resolve this long after start if no relevant event arrives (T_fallback)
            stability_window: Quiet period required after the last relevant event (T_stable)
            watched_extensions: File suffixes that make an event relevant (empty = every file)

        Raises:
            ValueError: If a duration is not positive
        """
        for name, value in (
            ("max_wait", max_wait),
            ("fallback_delay", fallback_delay),
            ("stability_window", stability_window),
        ):
            if value <= 0:
                raise ValueError(f"{name} must be positive, got {value}")

        self.events = events
        self.max_wait = max_wait
        self.fallback_delay = fallback_delay
        self.stability_window = stability_window
        self.watched_extensions = tuple(ext.lower() for ext in watched_extensions)

        self.state: StabilityState | None = None
        self._loop: asyncio.AbstractEventLoop | None = None
        self._future: asyncio.Future[DetectionResult] | None = None
        self._subscription: Subscription | None = None
        self._ceiling_handle: asyncio.TimerHandle | None = None
        self._fallback_handle: asyncio.TimerHandle | None = None
        self._stable_handle: asyncio.TimerHandle | None = None

    @property
    def active(self) -> bool:
        """True while a cycle is waiting."""
        return self.state is not None and not self.state.resolved

    def is_relevant(self, event: DiagnosticChangeEvent) -> bool:
        """Check whether an event touches a watched file category."""
        if not self.watched_extensions:
            return bool(event.uris)
        return any(uri.lower().endswith(self.watched_extensions) for uri in event.uris)

    async def wait(self) -> DetectionResult:
        """Run one detection cycle.

        Returns:
            How and when the cycle resolved

        Raises:
            RuntimeError: If this instance was already used
        """
        if self.state is not None:
            raise RuntimeError("StabilityDetector instances are single-use")

        loop = asyncio.get_running_loop()
        self._loop = loop
        self._future = loop.create_future()
        self.state = StabilityState(start_time=loop.time())

        self._subscription = self.events.subscribe(self._on_event)
        self._ceiling_handle = loop.call_later(self.max_wait, self._resolve, "timeout")
        self._fallback_handle = loop.call_later(self.fallback_delay, self._resolve, "fallback")

        logger.info(
            f"Waiting for analysis to settle (window={self.stability_window}s, "
            f"fallback={self.fallback_delay}s, ceiling={self.max_wait}s)"
        )
        try:
            return await self._future
        finally:
            # Covers cancellation of the waiting task
            if not self.state.resolved:
                self._resolve("cancelled")

    def cancel(self) -> None:
        """Resolve an active cycle immediately (host shutdown)."""
        if self.active:
            self._resolve("cancelled")

    def _on_event(self, event: DiagnosticChangeEvent) -> None:
        state = self.state
        if state is None or state.resolved or self._loop is None:
            return

        state.total_event_count += 1
        if not self.is_relevant(event):
            return

        now = self._loop.time()
        state.relevant_event_count += 1
        state.last_relevant_event_time = now
        logger.debug(f"Relevant diagnostic change ({state.relevant_event_count} so far)")

        if self._fallback_handle is not None:
            self._fallback_handle.cancel()
            self._fallback_handle = None
        if self._stable_handle is not None:
            self._stable_handle.cancel()
        self._stable_handle = self._loop.call_later(self.stability_window, self._resolve, "stable")

    def _resolve(self, reason: DetectionReason) -> None:
        state = self.state
        if state is None or state.resolved:
            return
        state.resolved = True
        self._release()

        elapsed = (self._loop.time() if self._loop is not None else state.start_time) - state.start_time
        result = DetectionResult(
            reason=reason,
            elapsed_seconds=max(elapsed, 0.0),
            relevant_event_count=state.relevant_event_count,
            total_event_count=state.total_event_count,
        )

        if reason == "stable":
            logger.info(
                f"Analysis settled after {elapsed:.1f}s ({state.relevant_event_count} relevant diagnostic changes)"
            )
        elif reason == "fallback":
            logger.info(f"No relevant diagnostic changes within {self.fallback_delay}s, assuming analysis settled")
        elif reason == "timeout":
            logger.warning(
                f"Analysis still active at the {self.max_wait}s ceiling, continuing "
                f"({state.relevant_event_count} relevant diagnostic changes)"
            )
        else:
            logger.info("Analysis wait cancelled")

        if self._future is not None and not self._future.done():
            self._future.set_result(result)

    def _release(self) -> None:
        for handle in (self._ceiling_handle, self._fallback_handle, self._stable_handle):
            if handle is not None:
                handle.cancel()
        self._ceiling_handle = None
        self._fallback_handle = None
        self._stable_handle = None

        if self._subscription is not None:
            self._subscription.dispose()
            self._subscription = None
