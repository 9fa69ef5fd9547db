"""MCP server exposing editorsync tools over stdio.

Tools:
- refresh_project: Sync the editor with changed files and report diagnostics
- refresh_all_files: Same, for every open file
- goto_symbol_definition: Find where a symbol is defined
- project_files_refresher: Ask the engine to regenerate project files and recompile
- get_compile_status: Report whether the engine is compiling
"""

import logging
import sys

from mcp.server.fastmcp import FastMCP

from editorsync_library.beacon import CompileStatusStore
from editorsync_library.client import BridgeClient
from editorsync_library.config import load_client_settings
from editorsync_library.errors import EditorSyncError
from editorsync_library.gateway import send_command

from .formatting import format_compile_status
from .formatting import format_definitions
from .formatting import format_error
from .formatting import format_refresh

logger = logging.getLogger(__name__)

mcp = FastMCP("editorsync")


def _bridge_client(bridge_port: int | None) -> BridgeClient:
    settings = load_client_settings(bridge_port=bridge_port)
    return BridgeClient(settings.bridge_url, timeout=settings.bridge_timeout)


@mcp.tool()
async def refresh_project(
    files: list[str] | None = None,
    is_add: bool = False,
    bridge_port: int | None = None,
) -> str:
    """Make the code editor reload changed files and report their diagnostics.

    Call this after editing files on disk. When is_add is true (new files were
    created) the analyzer is restarted and the call waits until its analysis
    settles before reporting errors and warnings.

    Args:
        files: Absolute paths of changed files (omit to refresh every open file)
        is_add: True when files were added to the project
        bridge_port: Bridge daemon port (default: 8790 or EDITORSYNC_BRIDGE_PORT)
    """
    files = [f for f in (files or []) if f.strip()] or None
    try:
        response = await _bridge_client(bridge_port).refresh_project(files, is_add)
    except (EditorSyncError, ValueError) as e:
        logger.warning(f"refresh_project failed: {e}")
        return format_error(e)
    return format_refresh(response, files)


@mcp.tool()
async def refresh_all_files(bridge_port: int | None = None) -> str:
    """Make the code editor reload every open file and report diagnostics.

    Args:
        bridge_port: Bridge daemon port (default: 8790 or EDITORSYNC_BRIDGE_PORT)
    """
    return await refresh_project(files=None, is_add=False, bridge_port=bridge_port)


@mcp.tool()
async def goto_symbol_definition(
    file_path: str,
    line: int,
    character: int,
    bridge_port: int | None = None,
) -> str:
    """Find the definition of the symbol at a position.

    Args:
        file_path: File containing the symbol
        line: Line number (1-based)
        character: Column (0-based)
        bridge_port: Bridge daemon port (default: 8790 or EDITORSYNC_BRIDGE_PORT)
    """
    if not file_path.strip():
        return format_error("file_path must not be empty")
    if line < 1:
        return format_error(f"line must be 1 or greater, got {line}")
    if character < 0:
        return format_error(f"character must be 0 or greater, got {character}")

    try:
        response = await _bridge_client(bridge_port).goto_symbol_definition(file_path, line, character)
    except (EditorSyncError, ValueError) as e:
        logger.warning(f"goto_symbol_definition failed: {e}")
        return format_error(e)
    return format_definitions(response)


@mcp.tool()
async def project_files_refresher(engine_host: str | None = None, engine_port: int | None = None) -> str:
    """Ask the game engine to regenerate project files, refresh assets and recompile.

    Args:
        engine_host: Engine companion host (default: 127.0.0.1 or EDITORSYNC_ENGINE_HOST)
        engine_port: Engine companion port (default: 6400 or EDITORSYNC_ENGINE_PORT)
    """
    try:
        settings = load_client_settings(engine_host=engine_host, engine_port=engine_port)
        response = await send_command(
            settings.engine_host,
            settings.engine_port,
            "project_files_refresher",
            {},
            timeout=settings.gateway_timeout,
        )
    except (EditorSyncError, ValueError) as e:
        logger.warning(f"project_files_refresher failed: {e}")
        return format_error(e)

    result = response.get("result") or {}
    return result.get("message") or "Engine project refresh requested"


@mcp.tool()
async def get_compile_status() -> str:
    """Report whether the game engine is currently compiling scripts."""
    record = CompileStatusStore().read()
    return format_compile_status(record.model_dump(mode="json", by_alias=True) if record else None)


def main() -> None:
    """Run the MCP server on stdio."""
    # stdout carries the protocol
    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        stream=sys.stderr,
    )
    logging.getLogger("mcp").setLevel(logging.WARNING)
    logger.info("Starting editorsync MCP server")
    mcp.run()
