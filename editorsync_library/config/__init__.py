"""Configuration module for editorsync_library.

Public Interface:
    - ClientSettings: Bridge/engine addresses used by the agent-side tools
    - EngineSettings: Engine companion settings
    - load_client_settings: Load client settings from the environment
    - load_engine_settings: Load engine settings from engine.yaml and environment
    - create_default_engine_config: Create default engine config file
    - get_engine_config_path: Get engine config file path
"""

from .loader import create_default_engine_config
from .loader import get_engine_config_path
from .loader import load_client_settings
from .loader import load_engine_settings
from .settings import ClientSettings
from .settings import EngineSettings

__all__ = [
    "ClientSettings",
    "EngineSettings",
    "load_client_settings",
    "load_engine_settings",
    "create_default_engine_config",
    "get_engine_config_path",
]
