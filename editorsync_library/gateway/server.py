"""Command gateway server.

Accepts a connection, reads one command, executes it, writes one response,
and closes. Each connection serves exactly one command: no sessions and no
pipelining. Malformed input always gets an error response rather than a
dropped connection.
"""

import asyncio
import contextlib
import logging
from collections.abc import Awaitable
from collections.abc import Callable
from typing import Any

from ..errors import ProtocolParseError
from .protocol import encode_message
from .protocol import error_response
from .protocol import read_message
from .protocol import success_response

logger = logging.getLogger(__name__)

CommandHandler = Callable[[dict[str, Any]], Awaitable[dict[str, Any] | None]]


class CommandGatewayServer:
    """One-shot JSON command server on asyncio streams.

    Example:
        server = CommandGatewayServer(port=6400)
        server.register("ping", handle_ping)
        await server.start()
        ...
        await server.stop()
    """

    def __init__(
        self,
        host: str = "127.0.0.1",
        port: int = 6400,
        handlers: dict[str, CommandHandler] | None = None,
        read_timeout: float = 5.0,
    ) -> None:
        """Initialize gateway server.

        Args:
            host: Listen address
            port: Listen port (0 picks a free port)
            handlers: Command type to coroutine handler
            read_timeout: Seconds to wait for a complete command
        """
        self.host = host
        self._port = port
        self.handlers: dict[str, CommandHandler] = dict(handlers or {})
        self.read_timeout = read_timeout
        self._server: asyncio.Server | None = None

    @property
    def port(self) -> int:
        """Bound port (the configured port until started)."""
        if self._server is not None and self._server.sockets:
            return self._server.sockets[0].getsockname()[1]
        return self._port

    @property
    def is_running(self) -> bool:
        return self._server is not None

    def register(self, command_type: str, handler: CommandHandler) -> None:
        """Register or replace a command handler.

        Args:
            command_type: Value of the "type" field to dispatch on
            handler: Coroutine receiving the command params
        """
        self.handlers[command_type] = handler

    async def start(self) -> None:
        """Start listening. Idempotent."""
        if self._server is not None:
            logger.warning("Gateway server already running")
            return

        self._server = await asyncio.start_server(self._handle_connection, self.host, self._port)
        logger.info(f"Command gateway listening on {self.host}:{self.port}")

    async def stop(self) -> None:
        """Stop listening and wait for the server to close."""
        if self._server is None:
            return

        server = self._server
        self._server = None
        server.close()
        await server.wait_closed()
        logger.info("Command gateway stopped")

    async def _handle_connection(self, reader: asyncio.StreamReader, writer: asyncio.StreamWriter) -> None:
        peer = writer.get_extra_info("peername")
        try:
            response = await self._process(reader)
            writer.write(encode_message(response))
            await writer.drain()
        except ConnectionError as e:
            logger.warning(f"Gateway client {peer} went away: {e}")
        finally:
            writer.close()
            with contextlib.suppress(ConnectionError):
                await writer.wait_closed()

    async def _process(self, reader: asyncio.StreamReader) -> dict[str, Any]:
        try:
            message = await asyncio.wait_for(read_message(reader), timeout=self.read_timeout)
        except TimeoutError:
            logger.warning("Timed out waiting for a complete gateway command")
            return error_response("Timed out waiting for a complete command")
        except ProtocolParseError as e:
            logger.warning(f"Rejected malformed gateway command: {e}")
            return error_response(str(e))

        command_type = message.get("type")
        if not isinstance(command_type, str) or not command_type:
            return error_response("Missing command type")

        params = message.get("params")
        if params is None:
            params = {}
        if not isinstance(params, dict):
            return error_response("params must be a JSON object")

        handler = self.handlers.get(command_type)
        if handler is None:
            logger.warning(f"Unknown gateway command: {command_type}")
            return error_response(f"Unknown command type: {command_type}")

        logger.info(f"Executing gateway command: {command_type}")
        try:
            result = await handler(params)
        except Exception as e:
            logger.error(f"Gateway command {command_type} failed: {e}")
            return error_response(str(e))

        return success_response(result)
