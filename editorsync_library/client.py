"""HTTP client for the editor bridge daemon.

Used by the agent-facing tool adapter and the CLI. Transport failures are
raised as editorsync errors whose messages tell the agent how to fix them.
"""

import logging
from typing import Any

import httpx
from pydantic import ValidationError

from .errors import EditorSyncError
from .errors import ProtocolParseError
from .models import BridgeResponse

logger = logging.getLogger(__name__)


class BridgeUnavailableError(EditorSyncError):
    """The bridge daemon could not be reached."""

    def __init__(self, url: str, port: int, reason: str) -> None:
        self.url = url
        self.port = port
        super().__init__(
            f"Bridge daemon not running on port {port} ({reason}). "
            f"Start it with 'editorsync start' or open the editor with the editorsync extension enabled."
        )


class BridgeClient:
    """Sends bridge actions to the daemon's POST /bridge endpoint."""

    def __init__(
        self,
        base_url: str = "http://localhost:8790",
        timeout: float = 120.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        """Initialize bridge client.

        Args:
            base_url: Daemon base URL
            timeout: Seconds to wait for a response
            transport: Optional httpx transport (tests inject a MockTransport)
        """
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.transport = transport

    @property
    def port(self) -> int:
        return httpx.URL(self.base_url).port or 80

    async def send(self, action: str, **params: Any) -> BridgeResponse:
        """Send one action.

        Args:
            action: Bridge action name
            **params: Action parameters (None values are omitted)

        Returns:
            The daemon's response (success may be False for rejected requests)

        Raises:
            BridgeUnavailableError: If the daemon is unreachable or did not answer in time
            ProtocolParseError: If the reply is not a bridge response
        """
        payload = {"action": action, **{key: value for key, value in params.items() if value is not None}}
        try:
            async with httpx.AsyncClient(
                base_url=self.base_url, timeout=self.timeout, transport=self.transport
            ) as client:
                response = await client.post("/bridge", json=payload)
        except httpx.TimeoutException as e:
            raise BridgeUnavailableError(self.base_url, self.port, f"no response within {self.timeout:g}s") from e
        except httpx.TransportError as e:
            raise BridgeUnavailableError(self.base_url, self.port, str(e) or type(e).__name__) from e

        try:
            return BridgeResponse.model_validate(response.json())
        except (ValueError, ValidationError) as e:
            raise ProtocolParseError(f"Unexpected bridge reply (HTTP {response.status_code}): {response.text[:200]}") from e

    async def refresh_project(self, files: list[str] | None = None, is_add: bool = False) -> BridgeResponse:
        return await self.send("refresh_project", files=files or None, is_add=is_add)

    async def goto_symbol_definition(self, file_path: str, line: int, character: int) -> BridgeResponse:
        return await self.send("goto_symbol_definition", file_path=file_path, line=line, character=character)

