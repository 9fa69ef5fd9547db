"""
Tests for the MCP tool functions.

Bridge calls go through an httpx MockTransport; gateway calls are patched.
"""

from pathlib import Path
from unittest.mock import AsyncMock
from unittest.mock import patch

import httpx
import pytest

from editorsync_library.beacon import CompileStatusStore
from editorsync_library.client import BridgeClient
from editorsync_library.errors import GatewayConnectionError
from editorsync_library.models import CompileStatusRecord
from editorsync_mcp import server


def mock_bridge(handler):
    return patch.object(
        server,
        "_bridge_client",
        lambda port: BridgeClient(f"http://localhost:{port or 8790}", transport=httpx.MockTransport(handler)),
    )


@pytest.mark.unit
class TestTools:
    """Test tool argument handling and rendering."""

    async def test_refresh_project_renders_summary(self) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(
                200,
                json={
                    "success": True,
                    "message": "Refreshed 1 files",
                    "refreshedFiles": ["/ws/a.cs"],
                    "diagnostics": {"files": {}, "totalErrors": 0, "totalWarnings": 0, "filesWithIssues": 0},
                },
            )

        with mock_bridge(handler):
            text = await server.refresh_project(files=["/ws/a.cs", "  "])

        assert "1 specified files" in text
        assert "No errors or warnings." in text

    async def test_bridge_down_is_text_with_remediation(self) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("Connection refused", request=request)

        with mock_bridge(handler):
            text = await server.refresh_all_files(bridge_port=8799)

        assert text.startswith("Error: Bridge daemon not running on port 8799")

    async def test_goto_validates_arguments(self) -> None:
        assert "line must be 1 or greater" in await server.goto_symbol_definition("/ws/a.cs", 0, 0)
        assert "character must be 0 or greater" in await server.goto_symbol_definition("/ws/a.cs", 1, -1)
        assert "file_path" in await server.goto_symbol_definition(" ", 1, 0)

    async def test_project_files_refresher_success(self) -> None:
        result = {"status": "success", "result": {"message": "Project file regeneration and compilation started"}}
        with patch.object(server, "send_command", AsyncMock(return_value=result)) as send:
            text = await server.project_files_refresher(engine_port=6401)

        assert text == "Project file regeneration and compilation started"
        assert send.await_args.args[1] == 6401

    async def test_project_files_refresher_unreachable(self) -> None:
        error = GatewayConnectionError("127.0.0.1", 6400, "Connection refused")
        with patch.object(server, "send_command", AsyncMock(side_effect=error)):
            text = await server.project_files_refresher()

        assert text.startswith("Error: Unable to reach engine companion")
        assert "listening on port 6400" in text

    async def test_get_compile_status_reads_file(self, status_file: Path) -> None:
        CompileStatusStore(status_file).write(CompileStatusRecord(is_compiling=True, message="Compiling"))

        text = await server.get_compile_status()

        assert text.startswith("Compiling")
