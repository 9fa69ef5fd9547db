"""Error taxonomy for editorsync.

Every failure that crosses a process boundary is mapped to one of these
exceptions. Callers convert them to a short textual explanation for the
agent, which has no structured-error channel.

Contract:
- Transport-level failures (connection, timeout, unparsable reply) abort the whole call
- Per-file failures inside a batch are logged and skipped, never raised
- A detector timeout is not an error (see DetectionResult.reason)
"""


class EditorSyncError(Exception):
    """Base class for all editorsync errors."""


class GatewayConnectionError(EditorSyncError):
    """The engine companion could not be reached (refused, unreachable).

    Never retried automatically: the command may already have triggered
    a side effect on the remote end.
    """

    def __init__(self, host: str, port: int, reason: str) -> None:
        self.host = host
        self.port = port
        self.reason = reason
        super().__init__(
            f"Unable to reach engine companion at {host}:{port} ({reason}). "
            f"Make sure the engine companion is running and listening on port {port}."
        )


class GatewayTimeoutError(GatewayConnectionError):
    """No response from the engine companion within the caller's timeout."""

    def __init__(self, host: str, port: int, timeout: float) -> None:
        self.timeout = timeout
        super().__init__(host, port, f"no response within {timeout:g}s")


class GatewayCommandError(EditorSyncError):
    """The engine companion answered with status "error"."""


class ProtocolParseError(EditorSyncError):
    """Malformed JSON or an invalid message shape at a process boundary."""


class UnknownActionError(EditorSyncError):
    """A bridge request or gateway command named an action nobody handles."""

    def __init__(self, action: object) -> None:
        self.action = action
        super().__init__(f"Unknown action: {action}")


class BridgeBusyError(EditorSyncError):
    """A refresh is already in flight and the busy policy is "reject"."""
