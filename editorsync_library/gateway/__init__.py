"""One-shot socket command gateway.

Public Interface:
    - CommandGatewayServer: Serves one command per connection
    - GatewayClient / send_command: Send one command with a timeout, no retries
    - encode_message / read_message: Wire helpers
"""

from .client import DEFAULT_TIMEOUT
from .client import GatewayClient
from .client import send_command
from .protocol import encode_message
from .protocol import read_message
from .protocol import try_decode_message
from .server import CommandGatewayServer
from .server import CommandHandler

__all__ = [
    "DEFAULT_TIMEOUT",
    "CommandGatewayServer",
    "CommandHandler",
    "GatewayClient",
    "encode_message",
    "read_message",
    "send_command",
    "try_decode_message",
]
