"""Gateway command handlers of the engine companion.

Commands:
- project_files_refresher: force background running, mark a compile cycle as
  started, regenerate project files, refresh assets, and request compilation
- focus_changed {has_focus}: keep an in-flight compile running when unfocused
- compile_status: return the persisted compile-status record
"""

import logging
from typing import Any

from ..beacon.beacon import CompileStatusBeacon
from ..gateway.server import CommandHandler
from .host import EngineHost

logger = logging.getLogger(__name__)


class EngineCommandHandlers:
    """Binds gateway commands to the beacon and engine host."""

    def __init__(self, beacon: CompileStatusBeacon, engine_host: EngineHost) -> None:
        self.beacon = beacon
        self.engine_host = engine_host

    def as_handlers(self) -> dict[str, CommandHandler]:
        """Handlers keyed by gateway command type."""
        return {
            "project_files_refresher": self.project_files_refresher,
            "focus_changed": self.focus_changed,
            "compile_status": self.compile_status,
        }

    async def project_files_refresher(self, params: dict[str, Any]) -> dict[str, Any]:
        """Regenerate project files and start a recompile.

        Raises:
            Exception: Whatever the engine host raised; the compile cycle is
                marked finished and the background flag restored first
        """
        logger.info("Project file refresh requested")
        self.beacon.ensure_background_run()
        self.beacon.mark_compile_started("Compile requested")

        try:
            await self.engine_host.regenerate_project_files()
            await self.engine_host.refresh_assets()
            await self.engine_host.request_compilation()
        except Exception as e:
            logger.error(f"Failed to start project refresh: {e}")
            self.beacon.mark_compile_finished(f"Failed to start: {e}")
            raise

        return {
            "success": True,
            "message": "Project file regeneration and compilation started",
            "background_enabled": self.beacon.background_flag.value,
        }

    async def focus_changed(self, params: dict[str, Any]) -> dict[str, Any]:
        has_focus = params.get("has_focus")
        if not isinstance(has_focus, bool):
            raise ValueError("has_focus must be a boolean")

        forced = self.beacon.on_focus_changed(has_focus)
        return {"forced_background": forced, "background_enabled": self.beacon.background_flag.value}

    async def compile_status(self, params: dict[str, Any]) -> dict[str, Any]:
        record = self.beacon.store.read()
        if record is None:
            return {"isCompiling": False}
        return record.model_dump(mode="json", by_alias=True)
