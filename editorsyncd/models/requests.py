"""Request models for the host endpoints.

The bridge request itself is validated by editorsync_library.models.parse_bridge_command.
"""

from pydantic import Field

from editorsync_library.models import CamelCaseModel
from editorsync_library.models import Diagnostic


class PublishDiagnosticsRequest(CamelCaseModel):
    """Full diagnostic list for one file, as reported by an analyzer."""

    file_path: str = Field(..., min_length=1, description="File the diagnostics belong to")
    diagnostics: list[Diagnostic] = Field(default_factory=list, description="Diagnostics (empty clears the file)")


class DocumentRequest(CamelCaseModel):
    """Open or close one document."""

    file_path: str = Field(..., min_length=1, description="File path (absolute or workspace-relative)")
