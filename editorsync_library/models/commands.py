"""Bridge command variants.

A bridge request is a tagged variant keyed by ``action``. Requests are
validated completely here, before any side effect runs; unknown actions and
malformed shapes are rejected rather than partially processed.
"""

from typing import Annotated
from typing import Any
from typing import Literal

from pydantic import BaseModel
from pydantic import ConfigDict
from pydantic import Field
from pydantic import TypeAdapter
from pydantic import ValidationError

from ..errors import ProtocolParseError
from ..errors import UnknownActionError


class RefreshProjectCommand(BaseModel):
    """Re-sync files from disk and collect diagnostics.

    An empty ``files`` list means the same as no list: all open files.
    """

    model_config = ConfigDict(extra="forbid")

    action: Literal["refresh_project"] = "refresh_project"
    files: list[str] | None = Field(default=None, description="Files to refresh (default: all open files)")
    is_add: bool = Field(default=False, description="Files were added; restart the analyzer and wait for it")


class GotoSymbolDefinitionCommand(BaseModel):
    """Resolve the definition of the symbol at a position."""

    model_config = ConfigDict(extra="forbid")

    action: Literal["goto_symbol_definition"] = "goto_symbol_definition"
    file_path: str = Field(min_length=1, description="File containing the symbol")
    line: int = Field(ge=1, description="Line number (1-based)")
    character: int = Field(ge=0, description="Character offset (0-based)")


BridgeCommand = Annotated[
    RefreshProjectCommand | GotoSymbolDefinitionCommand,
    Field(discriminator="action"),
]

BRIDGE_ACTIONS = ("refresh_project", "goto_symbol_definition")

_command_adapter: TypeAdapter[RefreshProjectCommand | GotoSymbolDefinitionCommand] = TypeAdapter(BridgeCommand)


def parse_bridge_command(data: Any) -> RefreshProjectCommand | GotoSymbolDefinitionCommand:
    """Validate a decoded request body into a bridge command.

    Keys with null values are treated as absent so that clients sending the
    full ``{action, files, file_path, line, character, is_add}`` shape work.

    Args:
        data: Decoded JSON body

    Returns:
        The validated command variant

    Raises:
        ProtocolParseError: If the body is not an object or fails validation
        UnknownActionError: If the action names no known command
    """
    if not isinstance(data, dict):
        raise ProtocolParseError("Request body must be a JSON object")

    action = data.get("action")
    if action is None:
        raise ProtocolParseError("Missing required field: action")
    if action not in BRIDGE_ACTIONS:
        raise UnknownActionError(action)

    present = {key: value for key, value in data.items() if value is not None}
    try:
        return _command_adapter.validate_python(present)
    except ValidationError as e:
        problems = "; ".join(
            f"{'.'.join(str(part) for part in err['loc'][1:]) or 'body'}: {err['msg']}" for err in e.errors()
        )
        raise ProtocolParseError(f"Invalid {action} request: {problems}") from e
