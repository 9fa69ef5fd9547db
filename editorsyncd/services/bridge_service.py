"""Refresh bridge service.

Brings the editor host in sync with files an agent changed on disk, then
reports the diagnostics the analyzer produced for them.

Sequence of one refresh:
1. Notify the engine companion (project_files_refresher), best-effort
2. Revert every target document from disk
3. Reload the project and collect diagnostics
4. Restart the analyzer when the restart policy says so, wait for the
   diagnostic-change burst to settle, and collect diagnostics again

Refreshes are single-flight: a second call waits for the first (busy policy
"queue") or is refused with BridgeBusyError (busy policy "reject").
"""

import asyncio
import logging

from editorsync_library.detection import StabilityDetector
from editorsync_library.errors import BridgeBusyError
from editorsync_library.errors import EditorSyncError
from editorsync_library.gateway import GatewayClient
from editorsync_library.host import EditorHost
from editorsync_library.models import BridgeResponse
from editorsync_library.models import DetectionResult
from editorsync_library.models import Diagnostic
from editorsync_library.models import DiagnosticSummary

from ..config.models import DetectorConfig
from ..config.models import RefreshConfig

logger = logging.getLogger(__name__)

REFRESH_COMMAND = "project_files_refresher"


class RefreshBridgeService:
    """Serves bridge actions against an editor host."""

    def __init__(
        self,
        host: EditorHost,
        gateway: GatewayClient | None = None,
        refresh_config: RefreshConfig | None = None,
        detector_config: DetectorConfig | None = None,
    ) -> None:
        """Initialize bridge service.

        Args:
            host: Editor host whose documents and analyzer are driven
            gateway: Engine companion client (None disables the notification)
            refresh_config: Restart and busy policies
            detector_config: Stability detector parameters
        """
        self.host = host
        self.gateway = gateway
        self.refresh_config = refresh_config or RefreshConfig()
        self.detector_config = detector_config or DetectorConfig()

        self._lock = asyncio.Lock()
        self._detector: StabilityDetector | None = None
        self._stopped = False

    @property
    def busy(self) -> bool:
        """True while a refresh is running."""
        return self._lock.locked()

    async def stop(self) -> None:
        """Release a pending analysis wait so shutdown is not held up."""
        self._stopped = True
        if self._detector is not None:
            self._detector.cancel()

    def should_restart_analyzer(self, is_add: bool) -> bool:
        policy = self.refresh_config.restart_analyzer
        if policy == "always":
            return True
        if policy == "never":
            return False
        return is_add

    async def refresh_project(self, files: list[str] | None = None, is_add: bool = False) -> BridgeResponse:
        """Re-sync documents with disk and report diagnostics.

        Args:
            files: Files to refresh (None or empty: every open document)
            is_add: True when the files were newly created

        Returns:
            Bridge response with diagnostics and the analysis outcome

        Raises:
            BridgeBusyError: If a refresh is running and the busy policy is "reject"
        """
        if self._lock.locked():
            if self.refresh_config.busy_policy == "reject":
                raise BridgeBusyError("A refresh is already in progress")
            logger.info("Refresh already in progress, queueing")

        async with self._lock:
            return await self._refresh(files, is_add)

    async def _refresh(self, files: list[str] | None, is_add: bool) -> BridgeResponse:
        await self._notify_engine()

        targets = list(files) if files else self.host.open_files()
        logger.info(f"Refreshing {len(targets)} files (is_add={is_add})")

        refreshed: list[str] = []
        skipped: list[str] = []
        for path in targets:
            try:
                refreshed.append(await self.host.revert_file(path))
            except (OSError, EditorSyncError) as e:
                logger.warning(f"Skipping {path}: {e}")
                skipped.append(path)

        try:
            await self.host.reload_project()
        except (OSError, EditorSyncError) as e:
            logger.warning(f"Project reload failed: {e}")

        summary = await self._collect_diagnostics(refreshed)

        analysis: DetectionResult | None = None
        if self.should_restart_analyzer(is_add):
            analysis = await self._restart_and_wait()
            summary = await self._collect_diagnostics(refreshed)

        message = f"Refreshed {len(refreshed)} files"
        if skipped:
            message += f", skipped {len(skipped)}"
        if analysis is not None and analysis.timed_out:
            message += f" (analysis still running after {self.detector_config.max_wait:g}s)"

        return BridgeResponse(
            success=True,
            message=message,
            diagnostics=summary,
            refreshed_files=refreshed,
            skipped_files=skipped,
            analysis=analysis,
        )

    async def goto_symbol_definition(self, file_path: str, line: int, character: int) -> BridgeResponse:
        """Find definitions of the symbol at a position.

        Args:
            file_path: File containing the symbol
            line: 1-based line
            character: 0-based column

        Returns:
            Bridge response listing definition locations (possibly empty)
        """
        locations = await self.host.find_definitions(file_path, line - 1, character)
        noun = "definition" if len(locations) == 1 else "definitions"
        return BridgeResponse(success=True, message=f"Found {len(locations)} {noun}", definitions=locations)

    async def _notify_engine(self) -> None:
        if self.gateway is None:
            return
        try:
            await self.gateway.send(REFRESH_COMMAND, {})
        except EditorSyncError as e:
            logger.warning(f"Engine notification failed, continuing: {e}")

    async def _collect_diagnostics(self, paths: list[str]) -> DiagnosticSummary:
        per_file: dict[str, list[Diagnostic]] = {}
        for path in paths:
            per_file[path] = await self.host.get_diagnostics(path)
        return DiagnosticSummary.from_diagnostics(per_file)

    async def _restart_and_wait(self) -> DetectionResult | None:
        if self._stopped:
            return None

        delay = self.refresh_config.pre_restart_delay
        if delay > 0:
            await asyncio.sleep(delay)

        config = self.detector_config
        detector = StabilityDetector(
            self.host.events,
            max_wait=config.max_wait,
            fallback_delay=config.fallback_delay,
            stability_window=config.stability_window,
            watched_extensions=config.watched_extensions,
        )
        self._detector = detector
        # Subscribe before restarting so the first burst is not missed
        wait_task = asyncio.create_task(detector.wait())
        await asyncio.sleep(0)
        try:
            try:
                await self.host.restart_analyzer()
            except (OSError, TimeoutError, EditorSyncError) as e:
                logger.error(f"Analyzer restart failed: {e}")
                detector.cancel()
            return await wait_task
        finally:
            if not wait_task.done():
                wait_task.cancel()
            self._detector = None
