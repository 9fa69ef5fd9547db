"""Command gateway client.

One connection per command. The caller's timeout is always honored and a
failed call is never retried: the remote end may already have started the
side effect the command triggers.
"""

import asyncio
import contextlib
import logging
from dataclasses import dataclass
from typing import Any

from ..errors import GatewayCommandError
from ..errors import GatewayConnectionError
from ..errors import GatewayTimeoutError
from ..errors import ProtocolParseError
from .protocol import encode_message
from .protocol import read_message

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT = 5.0


async def send_command(
    host: str,
    port: int,
    command_type: str,
    params: dict[str, Any] | None = None,
    timeout: float = DEFAULT_TIMEOUT,
) -> dict[str, Any]:
    """Send one command and wait for its response.

    Args:
        host: Gateway host
        port: Gateway port
        command_type: Command name
        params: Command parameters
        timeout: Seconds for the whole exchange (connect, send, receive)

    Returns:
        The full success response ({"status": "success", "result"?: ...})

    Raises:
        GatewayConnectionError: Connection refused, unreachable, or reset
        GatewayTimeoutError: No response within timeout
        ProtocolParseError: Response was not a valid gateway message
        GatewayCommandError: Gateway answered with status "error"
    """
    try:
        response = await asyncio.wait_for(_exchange(host, port, command_type, params or {}), timeout=timeout)
    except TimeoutError as e:
        logger.warning(f"Gateway command {command_type} to {host}:{port} timed out after {timeout}s")
        raise GatewayTimeoutError(host, port, timeout) from e

    status = response.get("status")
    if status == "success":
        logger.info(f"Gateway command {command_type} succeeded")
        return response
    if status == "error":
        raise GatewayCommandError(f"Gateway command {command_type} failed: {response.get('error') or 'unknown error'}")
    raise ProtocolParseError(f"Unexpected gateway response: {response}")


async def _exchange(host: str, port: int, command_type: str, params: dict[str, Any]) -> dict[str, Any]:
    try:
        reader, writer = await asyncio.open_connection(host, port)
    except OSError as e:
        raise GatewayConnectionError(host, port, e.strerror or str(e)) from e

    logger.debug(f"Connected to gateway {host}:{port}")
    try:
        writer.write(encode_message({"type": command_type, "params": params}))
        await writer.drain()
        return await read_message(reader)
    except ConnectionError as e:
        raise GatewayConnectionError(host, port, str(e)) from e
    finally:
        writer.close()
        with contextlib.suppress(ConnectionError):
            await writer.wait_closed()


@dataclass
class GatewayClient:
    """Gateway address and timeout bundled for injection into services."""

    host: str = "127.0.0.1"
    port: int = 6400
    timeout: float = DEFAULT_TIMEOUT

    async def send(self, command_type: str, params: dict[str, Any] | None = None) -> dict[str, Any]:
        """Send one command to the configured gateway.

        See send_command for return value and errors.
        """
        return await send_command(self.host, self.port, command_type, params, timeout=self.timeout)
