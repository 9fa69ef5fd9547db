"""API routers for the editorsyncd daemon."""

from .bridge import router as bridge_router
from .events import router as events_router
from .host import router as host_router
from .status import router as status_router

__all__ = [
    "bridge_router",
    "events_router",
    "host_router",
    "status_router",
]
