"""Main FastAPI application for the editorsyncd bridge daemon.

This module creates and configures the FastAPI application that exposes
the refresh bridge, the editor host endpoints and the global event stream.
"""

import logging
from contextlib import asynccontextmanager
from pathlib import Path

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from editorsync_library.beacon import CompileStatusStore
from editorsync_library.gateway import GatewayClient
from editorsync_library.host import WorkspaceHost

from . import __version__
from .config.loader import load_config
from .config.models import Config
from .models import AnalyzerRestartRequestedEvent
from .routers import bridge_router
from .routers import events_router
from .routers import host_router
from .routers import status_router
from .services.bridge_service import RefreshBridgeService
from .services.compile_status_watcher import CompileStatusWatcher
from .services.global_events import GlobalEventService

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan manager.

    Builds the workspace host and services on startup, stops them on shutdown.

    Args:
        app: FastAPI application instance
    """
    config: Config = app.state.config
    logging.getLogger().setLevel(config.daemon.log_level.upper())
    logger.info(f"Starting editorsyncd on {config.daemon.host}:{config.daemon.port}")

    host = WorkspaceHost(
        config.workspace.root_path,
        analyzer_restart_command=config.refresh.analyzer_restart_command,
        restart_timeout=config.refresh.analyzer_restart_timeout,
    )
    logger.info(f"Workspace root: {host.root}")

    events = GlobalEventService()
    await events.start()
    app.state.event_service = events

    async def announce_restart() -> None:
        await events.emit(AnalyzerRestartRequestedEvent(workspace_root=str(host.root)))

    host.add_restart_listener(announce_restart)

    gateway = None
    if config.gateway.notify_on_refresh:
        gateway = GatewayClient(
            host=config.gateway.host,
            port=config.gateway.port,
            timeout=config.gateway.timeout_seconds,
        )

    bridge_service = RefreshBridgeService(
        host,
        gateway=gateway,
        refresh_config=config.refresh,
        detector_config=config.detector,
    )

    status_file = Path(config.beacon.status_file).expanduser() if config.beacon.status_file else None
    store = CompileStatusStore(status_file)

    app.state.workspace_host = host
    app.state.bridge_service = bridge_service
    app.state.compile_status_store = store

    watcher = None
    if config.beacon.watch:
        try:
            watcher = CompileStatusWatcher(store, events, poll_interval=config.beacon.poll_interval_seconds)
            await watcher.start()
            app.state.compile_status_watcher = watcher
        except Exception as e:
            logger.error(f"Failed to start compile status watcher: {e}")
            # Don't fail startup, just log the error
            watcher = None

    yield

    # Shutdown
    logger.info("Shutting down editorsyncd")
    await bridge_service.stop()

    if watcher is not None:
        try:
            await watcher.stop()
        except Exception as e:
            logger.error(f"Failed to stop compile status watcher: {e}")

    await events.stop()


def create_app(config: Config | None = None) -> FastAPI:
    """Create the daemon application.

    Args:
        config: Daemon configuration (default: loaded from daemon.yaml and env)

    Returns:
        Configured FastAPI application
    """
    config = config or load_config()

    app = FastAPI(
        title="editorsyncd",
        description="Bridge daemon that syncs an editor with agent file changes and reports diagnostics",
        version=__version__,
        lifespan=lifespan,
    )
    app.state.config = config

    # CORS origins configured in daemon.yaml
    app.add_middleware(
        CORSMiddleware,
        allow_origins=config.daemon.cors_origins,
        allow_credentials=False,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    logger.info(f"CORS enabled for origins: {config.daemon.cors_origins}")

    app.include_router(bridge_router)
    app.include_router(events_router)
    app.include_router(host_router)
    app.include_router(status_router)

    @app.get("/")
    async def root() -> dict[str, str]:
        """Root endpoint.

        Returns:
            Welcome message with API information
        """
        return {
            "name": "editorsyncd",
            "version": __version__,
            "description": "Editor sync bridge daemon",
            "bridge": "/bridge",
            "docs": "/docs",
        }

    return app
