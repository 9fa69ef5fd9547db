"""Shared models for editorsync."""

from .base import CamelCaseModel
from .bridge import BridgeResponse
from .bridge import DetectionReason
from .bridge import DetectionResult
from .commands import BridgeCommand
from .commands import GotoSymbolDefinitionCommand
from .commands import RefreshProjectCommand
from .commands import parse_bridge_command
from .compile_status import CompileStatusRecord
from .compile_status import new_compile_id
from .diagnostics import Diagnostic
from .diagnostics import DiagnosticSeverity
from .diagnostics import DiagnosticSummary
from .diagnostics import Location
from .diagnostics import Position
from .diagnostics import Range

__all__ = [
    "CamelCaseModel",
    "BridgeCommand",
    "BridgeResponse",
    "CompileStatusRecord",
    "DetectionReason",
    "DetectionResult",
    "Diagnostic",
    "DiagnosticSeverity",
    "DiagnosticSummary",
    "GotoSymbolDefinitionCommand",
    "Location",
    "Position",
    "Range",
    "RefreshProjectCommand",
    "new_compile_id",
    "parse_bridge_command",
]
