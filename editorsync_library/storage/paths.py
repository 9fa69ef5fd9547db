"""Path resolution for editorsync storage locations.

This module provides path resolution based on the EDITORSYNC_HOME environment
variable, following an XDG-like directory structure within that root.

Contract:
- Inputs: Environment variables (EDITORSYNC_HOME and per-directory overrides)
- Outputs: Resolved Path objects
- Side Effects: Creates directories if they don't exist
"""

import hashlib
import os
import tempfile
from pathlib import Path

COMPILE_STATUS_FILENAME = "mcp_compile_status.json"


def get_home_dir() -> Path:
    """Get EDITORSYNC_HOME from environment.

    Returns:
        Path to root directory (default: .editorsync)
    """
    root = os.environ.get("EDITORSYNC_HOME", ".editorsync")
    return Path(root).resolve()


def get_config_dir() -> Path:
    """Get configuration directory.

    Returns:
        Path to config directory ($EDITORSYNC_HOME/config)
    """
    config_dir: Path = get_home_dir() / "config"

    env_override: str | None = os.environ.get("EDITORSYNC_CONFIG_DIR")
    if env_override is not None:
        config_dir = Path(env_override).resolve()

    config_dir.mkdir(parents=True, exist_ok=True)
    return config_dir


def get_state_dir() -> Path:
    """Get state directory.

    Returns:
        Path to state directory ($EDITORSYNC_HOME/state)
    """
    state_dir: Path = get_home_dir() / "state"

    env_override: str | None = os.environ.get("EDITORSYNC_STATE_DIR")
    if env_override is not None:
        state_dir = Path(env_override).resolve()

    state_dir.mkdir(parents=True, exist_ok=True)
    return state_dir


def get_log_dir() -> Path:
    """Get log directory.

    Returns:
        Path to log directory ($EDITORSYNC_HOME/logs)

    Environment Variables:
        EDITORSYNC_LOG_DIR: Override log directory location
        (falls back to $EDITORSYNC_HOME/logs if not set)
    """
    log_dir: Path = get_home_dir() / "logs"

    env_override: str | None = os.environ.get("EDITORSYNC_LOG_DIR")
    if env_override is not None:
        log_dir = Path(env_override).resolve()

    log_dir.mkdir(parents=True, exist_ok=True)
    return log_dir


def get_compile_status_path() -> Path:
    """Get the well-known compile-status file for this installation.

    The file lives in the process temp directory, namespaced by a short hash
    of EDITORSYNC_HOME so that two installations never share a record.

    Returns:
        Path to the compile-status JSON file (may not exist yet)

    Environment Variables:
        EDITORSYNC_COMPILE_STATUS_FILE: Use this exact file instead
    """
    env_override: str | None = os.environ.get("EDITORSYNC_COMPILE_STATUS_FILE")
    if env_override is not None:
        return Path(env_override).expanduser().resolve()

    digest = hashlib.sha1(str(get_home_dir()).encode("utf-8")).hexdigest()[:10]
    return Path(tempfile.gettempdir()) / f"editorsync-{digest}" / COMPILE_STATUS_FILENAME
