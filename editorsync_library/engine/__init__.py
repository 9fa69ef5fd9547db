"""Engine-side companion.

Public Interface:
    - EngineCompanion: Gateway server + beacon service
    - EngineCommandHandlers: project_files_refresher / focus_changed / compile_status
    - EngineHost: Engine capability protocol
    - SubprocessEngineHost: Engine host running configured commands
"""

from .companion import EngineCompanion
from .handlers import EngineCommandHandlers
from .host import EngineCommandFailed
from .host import EngineHost
from .host import SubprocessEngineHost

__all__ = [
    "EngineCommandFailed",
    "EngineCommandHandlers",
    "EngineCompanion",
    "EngineHost",
    "SubprocessEngineHost",
]
