"""
Tests for the diagnostic-stability detector.

Durations are scaled down to fractions of a second; assertions allow
generous tolerances for scheduler jitter.
"""

import asyncio

import pytest

from editorsync_library.detection import DiagnosticChangeEvent
from editorsync_library.detection import DiagnosticEventHub
from editorsync_library.detection import StabilityDetector

CS_EVENT = DiagnosticChangeEvent(uris=("/ws/Assets/Player.cs",))
MD_EVENT = DiagnosticChangeEvent(uris=("/ws/README.md",))


def make_detector(hub: DiagnosticEventHub, **overrides: float) -> StabilityDetector:
    params = {"max_wait": 1.5, "fallback_delay": 0.4, "stability_window": 0.2}
    params.update(overrides)
    return StabilityDetector(hub, **params)


async def publish_every(hub: DiagnosticEventHub, event: DiagnosticChangeEvent, interval: float, count: int) -> None:
    for _ in range(count):
        await asyncio.sleep(interval)
        hub.publish(event)


@pytest.mark.unit
class TestDiagnosticEventHub:
    """Test subscription handling."""

    def test_dispose_is_idempotent(self) -> None:
        hub = DiagnosticEventHub()
        received: list[DiagnosticChangeEvent] = []
        subscription = hub.subscribe(received.append)

        assert subscription.dispose() is True
        assert subscription.dispose() is False
        hub.publish(CS_EVENT)

        assert received == []
        assert hub.listener_count == 0

    def test_failing_listener_does_not_block_others(self) -> None:
        hub = DiagnosticEventHub()
        received: list[DiagnosticChangeEvent] = []

        def broken(event: DiagnosticChangeEvent) -> None:
            raise RuntimeError("boom")

        hub.subscribe(broken)
        hub.subscribe(received.append)
        hub.publish(CS_EVENT)

        assert received == [CS_EVENT]


@pytest.mark.unit
class TestStabilityDetector:
    """Test detection outcomes."""

    def test_rejects_non_positive_durations(self) -> None:
        with pytest.raises(ValueError, match="stability_window"):
            StabilityDetector(DiagnosticEventHub(), stability_window=0)

    def test_relevance_by_extension(self) -> None:
        detector = StabilityDetector(DiagnosticEventHub())

        assert detector.is_relevant(CS_EVENT)
        assert detector.is_relevant(DiagnosticChangeEvent(uris=("/ws/A.CS",)))
        assert not detector.is_relevant(MD_EVENT)

    def test_empty_extension_list_watches_everything(self) -> None:
        detector = StabilityDetector(DiagnosticEventHub(), watched_extensions=())

        assert detector.is_relevant(MD_EVENT)

    async def test_no_events_resolves_by_fallback(self) -> None:
        hub = DiagnosticEventHub()
        detector = make_detector(hub)

        result = await detector.wait()

        assert result.reason == "fallback"
        assert 0.35 <= result.elapsed_seconds < 1.0
        assert result.relevant_event_count == 0
        assert hub.listener_count == 0

    async def test_burst_then_quiet_resolves_stable(self) -> None:
        hub = DiagnosticEventHub()
        detector = make_detector(hub)

        publisher = asyncio.create_task(publish_every(hub, CS_EVENT, 0.05, 4))
        result = await detector.wait()
        await publisher

        assert result.reason == "stable"
        assert result.relevant_event_count == 4
        # Last event near 0.2s, plus the 0.2s window
        assert 0.35 <= result.elapsed_seconds < 1.0
        assert hub.listener_count == 0

    async def test_first_relevant_event_cancels_fallback(self) -> None:
        hub = DiagnosticEventHub()
        detector = make_detector(hub, fallback_delay=0.3, stability_window=0.25)

        async def late_burst() -> None:
            await asyncio.sleep(0.1)
            hub.publish(CS_EVENT)
            # Keeps the cycle alive past the fallback deadline
            await publish_every(hub, CS_EVENT, 0.15, 2)

        publisher = asyncio.create_task(late_burst())
        result = await detector.wait()
        await publisher

        assert result.reason == "stable"
        assert result.elapsed_seconds > 0.4

    async def test_continuous_activity_hits_ceiling(self, caplog: pytest.LogCaptureFixture) -> None:
        hub = DiagnosticEventHub()
        detector = make_detector(hub, max_wait=0.6)

        publisher = asyncio.create_task(publish_every(hub, CS_EVENT, 0.05, 40))
        with caplog.at_level("WARNING"):
            result = await detector.wait()
        publisher.cancel()

        assert result.reason == "timeout"
        assert result.timed_out is True
        assert 0.55 <= result.elapsed_seconds < 1.2
        assert hub.listener_count == 0
        assert any(record.levelname == "WARNING" for record in caplog.records)

    async def test_irrelevant_events_do_not_delay_fallback(self) -> None:
        hub = DiagnosticEventHub()
        detector = make_detector(hub)

        publisher = asyncio.create_task(publish_every(hub, MD_EVENT, 0.05, 5))
        result = await detector.wait()
        await publisher

        assert result.reason == "fallback"
        assert result.relevant_event_count == 0
        assert result.total_event_count == 5

    async def test_cancel_resolves_immediately(self) -> None:
        hub = DiagnosticEventHub()
        detector = make_detector(hub)

        task = asyncio.create_task(detector.wait())
        await asyncio.sleep(0.05)
        assert detector.active
        detector.cancel()
        result = await task

        assert result.reason == "cancelled"
        assert not detector.active
        assert hub.listener_count == 0

    async def test_cancelling_waiting_task_releases_subscription(self) -> None:
        hub = DiagnosticEventHub()
        detector = make_detector(hub)

        task = asyncio.create_task(detector.wait())
        await asyncio.sleep(0.05)
        assert hub.listener_count == 1
        task.cancel()
        with pytest.raises(asyncio.CancelledError):
            await task

        assert hub.listener_count == 0
        assert detector.state is not None and detector.state.resolved

    async def test_instances_are_single_use(self) -> None:
        detector = make_detector(DiagnosticEventHub(), fallback_delay=0.05)
        await detector.wait()

        with pytest.raises(RuntimeError, match="single-use"):
            await detector.wait()

    async def test_events_after_resolution_are_ignored(self) -> None:
        hub = DiagnosticEventHub()
        detector = make_detector(hub, fallback_delay=0.05)
        result = await detector.wait()

        hub.publish(CS_EVENT)

        assert result.relevant_event_count == 0
        assert detector.state.relevant_event_count == 0
