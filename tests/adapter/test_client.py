"""
Tests for the bridge HTTP client using httpx MockTransport.
"""

import json

import httpx
import pytest

from editorsync_library.client import BridgeClient
from editorsync_library.client import BridgeUnavailableError
from editorsync_library.errors import ProtocolParseError


def client_for(handler) -> BridgeClient:
    return BridgeClient("http://localhost:8790", timeout=5.0, transport=httpx.MockTransport(handler))


@pytest.mark.unit
class TestBridgeClient:
    """Test request shaping and error mapping."""

    async def test_refresh_posts_action_and_omits_none(self) -> None:
        seen: list[dict] = []

        def handler(request: httpx.Request) -> httpx.Response:
            seen.append(json.loads(request.content))
            assert request.url.path == "/bridge"
            return httpx.Response(200, json={"success": True, "message": "Refreshed 0 files", "refreshedFiles": []})

        response = await client_for(handler).refresh_project(None, False)

        assert seen == [{"action": "refresh_project", "is_add": False}]
        assert response.success is True
        assert response.refreshed_files == []

    async def test_goto_sends_position(self) -> None:
        seen: list[dict] = []

        def handler(request: httpx.Request) -> httpx.Response:
            seen.append(json.loads(request.content))
            return httpx.Response(200, json={"success": True, "definitions": []})

        await client_for(handler).goto_symbol_definition("/ws/a.cs", 3, 4)

        assert seen == [{"action": "goto_symbol_definition", "file_path": "/ws/a.cs", "line": 3, "character": 4}]

    async def test_error_status_body_is_returned(self) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(409, json={"success": False, "error": "Bridge busy"})

        response = await client_for(handler).refresh_project()

        assert response.success is False
        assert response.error == "Bridge busy"

    async def test_connection_refused_has_remediation(self) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("Connection refused", request=request)

        with pytest.raises(BridgeUnavailableError, match="Bridge daemon not running on port 8790"):
            await client_for(handler).refresh_project()

    async def test_timeout_is_unavailable(self) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ReadTimeout("timed out", request=request)

        with pytest.raises(BridgeUnavailableError, match="no response within 5s"):
            await client_for(handler).refresh_project()

    async def test_non_json_reply(self) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(502, text="<html>Bad Gateway</html>")

        with pytest.raises(ProtocolParseError, match="HTTP 502"):
            await client_for(handler).refresh_project()
