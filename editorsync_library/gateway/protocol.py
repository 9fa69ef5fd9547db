"""Wire format of the one-shot command gateway.

Client writes one UTF-8 JSON object ``{"type": name, "params": {...}}``;
server writes one UTF-8 JSON object ``{"status": "success"|"error", ...}``
and closes the connection. There is no framing: a reader accumulates bytes
until they form a complete JSON value.
"""

import asyncio
import json
from typing import Any

from ..errors import ProtocolParseError

MAX_MESSAGE_BYTES = 1024 * 1024
READ_CHUNK_BYTES = 4096


def encode_message(payload: dict[str, Any]) -> bytes:
    """Serialize a message for the wire.

    Args:
        payload: JSON-serializable object

    Returns:
        UTF-8 encoded JSON
    """
    return json.dumps(payload, ensure_ascii=False).encode("utf-8")


def try_decode_message(buffer: bytes, final: bool = False) -> dict[str, Any] | None:
    """Decode a buffer if it holds a complete JSON object.

    A JSON text can be cut anywhere by the transport, including inside a
    literal such as ``tr|ue``, so a decode error only counts as malformed
    input once no more data can arrive.

    Args:
        buffer: Bytes received so far
        final: True when the peer has finished sending or the size cap is hit

    Returns:
        The decoded object, or None if more data is needed

    Raises:
        ProtocolParseError: If the bytes can never form a valid JSON object
    """
    try:
        text = buffer.decode("utf-8")
    except UnicodeDecodeError as e:
        if e.reason == "unexpected end of data" and not final:
            return None
        raise ProtocolParseError(f"Invalid UTF-8 in message: {e}") from e

    stripped = text.strip()
    if not stripped:
        if final:
            raise ProtocolParseError("Connection closed before a message was received")
        return None
    if not stripped.startswith("{"):
        raise ProtocolParseError(f"Expected a JSON object, got {stripped[:20]!r}")

    try:
        value = json.loads(stripped)
    except json.JSONDecodeError as e:
        if not final:
            return None
        raise ProtocolParseError(f"Malformed JSON: {e}") from e

    if not isinstance(value, dict):
        raise ProtocolParseError(f"Expected a JSON object, got {type(value).__name__}")
    return value


async def read_message(reader: asyncio.StreamReader, max_bytes: int = MAX_MESSAGE_BYTES) -> dict[str, Any]:
    """Read from a stream until a complete JSON object has arrived.

    Args:
        reader: Stream to read from
        max_bytes: Upper bound on message size

    Returns:
        The decoded object

    Raises:
        ProtocolParseError: On malformed, oversize, or truncated input
    """
    buffer = b""
    while True:
        chunk = await reader.read(READ_CHUNK_BYTES)
        if not chunk:
            return try_decode_message(buffer, final=True)

        buffer += chunk
        if len(buffer) > max_bytes:
            raise ProtocolParseError(f"Message exceeds {max_bytes} bytes")

        message = try_decode_message(buffer)
        if message is not None:
            return message


def success_response(result: dict[str, Any] | None = None) -> dict[str, Any]:
    """Build a success response."""
    response: dict[str, Any] = {"status": "success"}
    if result is not None:
        response["result"] = result
    return response


def error_response(error: str) -> dict[str, Any]:
    """Build an error response."""
    return {"status": "error", "error": error}
