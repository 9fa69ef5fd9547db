"""Agent-facing MCP tool adapter for editorsync.

Exposes the bridge daemon and the engine companion as MCP tools over stdio.
Every result, including failures, is rendered as short text.
"""

__version__ = "0.1.0"
