"""
Tests for RefreshBridgeService.

Uses a real WorkspaceHost; analyzer restarts are simulated by a restart
listener that publishes diagnostics the way an external analyzer would.
"""

import asyncio
from pathlib import Path
from unittest.mock import AsyncMock

import pytest

from editorsync_library.errors import BridgeBusyError
from editorsync_library.errors import GatewayConnectionError
from editorsync_library.host import WorkspaceHost
from editorsync_library.models import Diagnostic
from editorsync_library.models import DiagnosticSeverity
from editorsyncd.config.models import DetectorConfig
from editorsyncd.config.models import RefreshConfig
from editorsyncd.services.bridge_service import RefreshBridgeService

FAST_DETECTOR = DetectorConfig(max_wait=1.0, fallback_delay=0.2, stability_window=0.1)


def diagnostic(severity: DiagnosticSeverity, line: int = 1) -> Diagnostic:
    return Diagnostic(line=line, severity=severity, message=f"{severity.value} here", source="test")


@pytest.fixture
def host(workspace: Path) -> WorkspaceHost:
    return WorkspaceHost(workspace)


@pytest.fixture
def gateway() -> AsyncMock:
    client = AsyncMock()
    client.send.return_value = {"status": "success"}
    return client


def make_service(host: WorkspaceHost, gateway: AsyncMock | None = None, **refresh: object) -> RefreshBridgeService:
    refresh.setdefault("pre_restart_delay", 0.0)
    return RefreshBridgeService(
        host,
        gateway=gateway,
        refresh_config=RefreshConfig(**refresh),
        detector_config=FAST_DETECTOR,
    )


@pytest.mark.unit
class TestRefreshProject:
    """Test refresh_project sequencing and aggregation."""

    async def test_notifies_engine_before_syncing(self, host: WorkspaceHost, gateway: AsyncMock) -> None:
        service = make_service(host, gateway)

        response = await service.refresh_project(["Assets/Scripts/Player.cs"])

        gateway.send.assert_awaited_once_with("project_files_refresher", {})
        assert response.success is True
        assert len(response.refreshed_files) == 1
        assert host.open_files() == response.refreshed_files

    async def test_engine_unreachable_is_not_fatal(self, host: WorkspaceHost, gateway: AsyncMock) -> None:
        gateway.send.side_effect = GatewayConnectionError("127.0.0.1", 6400, "connection refused")
        service = make_service(host, gateway)

        response = await service.refresh_project(["Assets/Scripts/Player.cs"])

        assert response.success is True
        assert len(response.refreshed_files) == 1

    async def test_missing_files_are_skipped(self, host: WorkspaceHost) -> None:
        service = make_service(host)

        response = await service.refresh_project(["Assets/Scripts/Player.cs", "Assets/Scripts/Gone.cs"])

        assert response.skipped_files == ["Assets/Scripts/Gone.cs"]
        assert len(response.refreshed_files) == 1
        assert "skipped 1" in response.message

    async def test_unusable_path_does_not_abort_batch(self, host: WorkspaceHost) -> None:
        service = make_service(host)

        response = await service.refresh_project(["bad\x00name.cs", "Assets/Scripts/Player.cs"])

        assert response.success is True
        assert response.skipped_files == ["bad\x00name.cs"]
        assert len(response.refreshed_files) == 1

    async def test_empty_list_means_all_open_files(self, host: WorkspaceHost) -> None:
        await host.open_document("Assets/Scripts/Player.cs")
        await host.open_document("Assets/Scripts/Game.cs")
        service = make_service(host)

        with_empty = await service.refresh_project([])
        with_none = await service.refresh_project(None)

        assert sorted(with_empty.refreshed_files) == host.open_files()
        assert with_none.refreshed_files == with_empty.refreshed_files

    async def test_summary_counts_errors_and_warnings_only(self, host: WorkspaceHost) -> None:
        host.publish_diagnostics(
            "Assets/Scripts/Game.cs",
            [
                diagnostic(DiagnosticSeverity.ERROR, 5),
                diagnostic(DiagnosticSeverity.WARNING, 6),
                diagnostic(DiagnosticSeverity.HINT, 7),
            ],
        )
        service = make_service(host)

        response = await service.refresh_project(["Assets/Scripts/Game.cs", "Assets/Scripts/Player.cs"])

        summary = response.diagnostics
        assert summary.total_errors == 1
        assert summary.total_warnings == 1
        assert summary.files_with_issues == 1
        assert len(next(iter(summary.files.values()))) == 2

    async def test_no_restart_without_add(self, host: WorkspaceHost) -> None:
        restarts = AsyncMock()
        host.add_restart_listener(restarts)
        service = make_service(host)

        response = await service.refresh_project(["Assets/Scripts/Player.cs"], is_add=False)

        restarts.assert_not_awaited()
        assert response.analysis is None


@pytest.mark.unit
class TestRestartPolicy:
    """Test analyzer restart and stability detection."""

    async def test_add_restarts_and_recollects_after_settling(self, host: WorkspaceHost) -> None:
        async def analyzer() -> None:
            # Burst of re-analysis results arriving after the restart
            async def burst() -> None:
                for _ in range(3):
                    await asyncio.sleep(0.03)
                    host.publish_diagnostics("Assets/Scripts/Game.cs", [diagnostic(DiagnosticSeverity.ERROR, 5)])

            asyncio.create_task(burst())

        host.add_restart_listener(analyzer)
        service = make_service(host)

        response = await service.refresh_project(["Assets/Scripts/Game.cs"], is_add=True)

        assert response.analysis is not None
        assert response.analysis.reason == "stable"
        assert response.analysis.relevant_event_count == 3
        assert response.diagnostics.total_errors == 1

    async def test_quiet_analyzer_resolves_by_fallback(self, host: WorkspaceHost) -> None:
        service = make_service(host, restart_analyzer="always")

        response = await service.refresh_project(["Assets/Scripts/Player.cs"])

        assert response.analysis.reason == "fallback"

    async def test_add_restarts_even_when_nothing_was_refreshed(self, host: WorkspaceHost) -> None:
        restarts = AsyncMock()
        host.add_restart_listener(restarts)
        service = make_service(host)

        response = await service.refresh_project(["Assets/Scripts/Gone.cs"], is_add=True)

        restarts.assert_awaited_once()
        assert response.refreshed_files == []
        assert response.analysis.reason == "fallback"

    async def test_never_policy_skips_detector(self, host: WorkspaceHost) -> None:
        restarts = AsyncMock()
        host.add_restart_listener(restarts)
        service = make_service(host, restart_analyzer="never")

        response = await service.refresh_project(["Assets/Scripts/Player.cs"], is_add=True)

        restarts.assert_not_awaited()
        assert response.analysis is None

    async def test_restart_failure_still_answers(self, workspace: Path) -> None:
        host = WorkspaceHost(workspace, analyzer_restart_command=["/nonexistent/analyzer-restart"])
        service = make_service(host)

        response = await service.refresh_project(["Assets/Scripts/Player.cs"], is_add=True)

        assert response.success is True
        assert response.analysis.reason == "cancelled"

    async def test_stop_cancels_pending_wait(self, host: WorkspaceHost) -> None:
        service = RefreshBridgeService(
            host,
            refresh_config=RefreshConfig(pre_restart_delay=0.0, restart_analyzer="always"),
            detector_config=DetectorConfig(max_wait=30.0, fallback_delay=10.0, stability_window=3.0),
        )

        task = asyncio.create_task(service.refresh_project(["Assets/Scripts/Player.cs"]))
        await asyncio.sleep(0.1)
        await service.stop()
        response = await asyncio.wait_for(task, timeout=2.0)

        assert response.analysis.reason == "cancelled"


@pytest.mark.unit
class TestSingleFlight:
    """Test refresh serialization."""

    async def test_queue_policy_serializes(self, host: WorkspaceHost) -> None:
        service = make_service(host, restart_analyzer="always")

        first = asyncio.create_task(service.refresh_project(["Assets/Scripts/Player.cs"]))
        await asyncio.sleep(0.05)
        assert service.busy
        second = await service.refresh_project(["Assets/Scripts/Game.cs"])
        first_response = await first

        assert first_response.success and second.success
        assert not service.busy

    async def test_reject_policy_raises_busy(self, host: WorkspaceHost) -> None:
        service = make_service(host, restart_analyzer="always", busy_policy="reject")

        first = asyncio.create_task(service.refresh_project(["Assets/Scripts/Player.cs"]))
        await asyncio.sleep(0.05)
        with pytest.raises(BridgeBusyError):
            await service.refresh_project(["Assets/Scripts/Game.cs"])
        await first


@pytest.mark.unit
class TestGotoSymbolDefinition:
    """Test definition lookup."""

    async def test_converts_to_zero_based_line(self, host: WorkspaceHost, workspace: Path) -> None:
        service = make_service(host)

        # Line 5 (1-based) of Game.cs declares "private Player player"
        response = await service.goto_symbol_definition(str(workspace / "Assets/Scripts/Game.cs"), 5, 17)

        assert response.success is True
        assert len(response.definitions) == 1
        assert response.definitions[0].range.start.line == 2
        assert response.message == "Found 1 definition"

    async def test_no_results_is_success(self, host: WorkspaceHost, workspace: Path) -> None:
        service = make_service(host)

        response = await service.goto_symbol_definition(str(workspace / "Assets/Scripts/Game.cs"), 1, 0)

        assert response.success is True
        assert response.definitions == []
