"""editorsync library layer.

This is the shared logic used by the editor bridge daemon (editorsyncd),
the engine companion, and the agent-facing tool adapter (editorsync_mcp).

Public Interface:
    Modules:
    - storage: Path resolution for state, config, and the compile-status file
    - config: Client and engine settings loading
    - models: Shared data structures (commands, diagnostics, compile status)
    - beacon: Compile-status beacon and background-run toggle
    - gateway: One-shot socket command protocol (server and client)
    - detection: Diagnostic-stability detector
    - host: Editor host capability interface and workspace implementation
    - engine: Engine-side command handlers and companion service
"""

from .models import BridgeCommand
from .models import BridgeResponse
from .models import CompileStatusRecord
from .models import DiagnosticSummary

__all__ = [
    "BridgeCommand",
    "BridgeResponse",
    "CompileStatusRecord",
    "DiagnosticSummary",
]
