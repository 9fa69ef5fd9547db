"""Engine companion service.

Runs inside (or next to) the game-engine editor: owns the compile-status
beacon and serves gateway commands from the editor bridge.
"""

import asyncio
import logging
from pathlib import Path

from ..beacon.beacon import CompileStatusBeacon
from ..beacon.flags import BackgroundRunFlag
from ..beacon.flags import InMemoryBackgroundRunFlag
from ..beacon.store import CompileStatusStore
from ..config.settings import EngineSettings
from ..gateway.server import CommandGatewayServer
from .handlers import EngineCommandHandlers
from .host import EngineHost
from .host import SubprocessEngineHost

logger = logging.getLogger(__name__)


class EngineCompanion:
    """Gateway server + beacon with an explicit start/stop lifecycle."""

    def __init__(
        self,
        settings: EngineSettings,
        engine_host: EngineHost | None = None,
        background_flag: BackgroundRunFlag | None = None,
        store: CompileStatusStore | None = None,
    ) -> None:
        """Initialize engine companion.

        Args:
            settings: Engine settings
            engine_host: Engine collaborator (default: subprocess commands from settings)
            background_flag: Background-run setting (default: in-memory, from settings)
            store: Compile-status store (default: settings.status_file or the per-installation path)
        """
        self.settings = settings
        self.store = store or CompileStatusStore(Path(settings.status_file) if settings.status_file else None)
        self.background_flag = background_flag or InMemoryBackgroundRunFlag(settings.run_in_background)
        self.engine_host = engine_host or SubprocessEngineHost(
            project_dir=Path(settings.project_dir),
            generate_command=settings.generate_command,
            refresh_command=settings.refresh_command,
            compile_command=settings.compile_command,
        )

        self.beacon = CompileStatusBeacon(self.store, self.background_flag)
        self.beacon.attach(self.engine_host)
        self.handlers = EngineCommandHandlers(self.beacon, self.engine_host)
        self.gateway = CommandGatewayServer(
            host=settings.host,
            port=settings.port,
            handlers=self.handlers.as_handlers(),
        )

    async def start(self) -> None:
        logger.info(f"Starting engine companion (status file: {self.store.path})")
        await self.gateway.start()

    async def stop(self) -> None:
        logger.info("Stopping engine companion")
        await self.gateway.stop()
        await self.engine_host.stop()
        self.beacon.restore_background_flag()

    async def serve_forever(self) -> None:
        """Run until cancelled."""
        await self.start()
        try:
            await asyncio.Event().wait()
        finally:
            await self.stop()
