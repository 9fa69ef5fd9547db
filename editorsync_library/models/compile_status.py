"""Compile-status record shared between the engine and the editor side.

Persisted as a single indented JSON file at a well-known per-installation
path (see storage.paths.get_compile_status_path).
"""

import uuid
from datetime import datetime

from pydantic import Field

from .base import CamelCaseModel


def new_compile_id(now: datetime | None = None) -> str:
    """Generate a fresh compile cycle identifier.

    Args:
        now: Timestamp to embed (default: current local time)

    Returns:
        Identifier like "compile_20240101_120000_1a2b3c"
    """
    now = now or datetime.now()
    return f"compile_{now:%Y%m%d_%H%M%S}_{uuid.uuid4().hex[:6]}"


class CompileStatusRecord(CamelCaseModel):
    """Analyzer activity as last reported by the engine.

    isCompiling transitions false -> true -> false once per compile cycle.
    """

    is_compiling: bool = Field(description="True while a compile cycle is in flight")
    message: str = Field(default="", description="Human-readable status message")
    last_update: datetime = Field(default_factory=datetime.now, description="When the record was written")
    compile_id: str = Field(default_factory=new_compile_id, description="Identifier of the compile cycle")
