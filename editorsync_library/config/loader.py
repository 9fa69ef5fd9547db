"""Configuration loading for the engine companion and client tools.

Contract:
- Inputs: Config file paths, environment variables
- Outputs: EngineSettings / ClientSettings objects
- Side Effects: Creates default engine config file if missing
"""

import logging
import os
from pathlib import Path

import yaml

from ..storage.paths import get_config_dir
from .settings import ClientSettings
from .settings import EngineSettings

logger = logging.getLogger(__name__)

DEFAULT_ENGINE_CONFIG = """# editorsync engine companion configuration
# The companion runs next to the game-engine editor and answers gateway commands.

# Gateway settings
host: "127.0.0.1"
port: 6400
log_level: "info"

# Commands are argv lists; leave empty to skip a step.
# project_dir: "~/projects/my-game"
# generate_command: ["dotnet", "new", "sln", "--force"]
# refresh_command: []
# compile_command: ["dotnet", "build", "--no-restore"]

# Initial value of the engine's run-in-background setting
run_in_background: false
"""


def get_engine_config_path() -> Path:
    """Get path to the engine companion config file.

    Returns:
        Path to engine.yaml in config directory

    Example:
        >>> config_path = get_engine_config_path()
        >>> assert config_path.name == "engine.yaml"
    """
    return get_config_dir() / "engine.yaml"


def create_default_engine_config() -> None:
    """Create default engine config file if it doesn't exist."""
    config_path = get_engine_config_path()

    if config_path.exists():
        logger.debug(f"Config file already exists: {config_path}")
        return

    config_path.write_text(DEFAULT_ENGINE_CONFIG, encoding="utf-8")
    logger.info(f"Created default config: {config_path}")


def load_engine_settings(config_path: Path | None = None) -> EngineSettings:
    """Load engine companion settings from YAML and environment.

    Environment variables take precedence over YAML settings.
    Variables should be prefixed with EDITORSYNC_ENGINE_ (e.g., EDITORSYNC_ENGINE_PORT).

    Args:
        config_path: Optional config file path (default: engine.yaml in config dir)

    Returns:
        Validated engine settings
    """
    if config_path is None:
        config_path = get_engine_config_path()
        if not config_path.exists():
            create_default_engine_config()

    yaml_settings = {}
    if config_path.exists():
        try:
            with open(config_path, encoding="utf-8") as f:
                yaml_settings = yaml.safe_load(f) or {}
            logger.debug(f"Loaded config from {config_path}")
        except Exception as e:
            logger.warning(f"Failed to load config from {config_path}: {e}")
            logger.info("Using default settings and environment variables")

    # Only pass YAML values that don't have corresponding env vars
    filtered_yaml = {}
    for key, value in yaml_settings.items():
        env_key = f"EDITORSYNC_ENGINE_{key.upper()}"
        if env_key not in os.environ:
            filtered_yaml[key] = value

    settings = EngineSettings(**filtered_yaml)

    logger.info(f"Engine configuration loaded: host={settings.host}, port={settings.port}")

    return settings


def load_client_settings(**overrides: object) -> ClientSettings:
    """Load client settings from the environment.

    Args:
        **overrides: Explicit values that win over the environment (None values are ignored)

    Returns:
        Validated client settings
    """
    explicit = {key: value for key, value in overrides.items() if value is not None}
    return ClientSettings(**explicit)
