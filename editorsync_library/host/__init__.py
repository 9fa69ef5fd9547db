"""Editor host capability boundary.

Public Interface:
    - EditorHost: Capability protocol used by the refresh bridge
    - WorkspaceHost: In-process implementation rooted at a workspace directory
    - TextSearchDefinitionProvider: Declaration search used for definitions
"""

from .base import EditorHost
from .definitions import DefinitionProvider
from .definitions import TextSearchDefinitionProvider
from .definitions import identifier_at
from .workspace import WorkspaceHost

__all__ = [
    "DefinitionProvider",
    "EditorHost",
    "TextSearchDefinitionProvider",
    "WorkspaceHost",
    "identifier_at",
]
