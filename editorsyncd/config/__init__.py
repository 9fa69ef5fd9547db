"""Daemon configuration."""

from .loader import get_config_path
from .loader import load_config
from .loader import save_example_config
from .models import BeaconConfig
from .models import Config
from .models import DaemonConfig
from .models import DetectorConfig
from .models import GatewayConfig
from .models import RefreshConfig
from .models import WorkspaceConfig

__all__ = [
    "BeaconConfig",
    "Config",
    "DaemonConfig",
    "DetectorConfig",
    "GatewayConfig",
    "RefreshConfig",
    "WorkspaceConfig",
    "get_config_path",
    "load_config",
    "save_example_config",
]
