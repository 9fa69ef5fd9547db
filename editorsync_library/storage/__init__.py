"""Storage module for editorsync_library.

Public Interface:
    - get_home_dir: Get EDITORSYNC_HOME
    - get_config_dir: Get config directory
    - get_state_dir: Get state directory
    - get_log_dir: Get log directory
    - get_compile_status_path: Get the compile-status file path
"""

from .paths import get_compile_status_path
from .paths import get_config_dir
from .paths import get_home_dir
from .paths import get_log_dir
from .paths import get_state_dir

__all__ = [
    "get_home_dir",
    "get_config_dir",
    "get_state_dir",
    "get_log_dir",
    "get_compile_status_path",
]
