"""Configuration loader for the editorsyncd daemon.

Handles loading configuration from files, environment variables, and defaults.
"""

from __future__ import annotations

import logging
import os
from pathlib import Path

from editorsync_library.storage.paths import get_config_dir

from .models import Config

logger = logging.getLogger(__name__)

ENV_PREFIX = "EDITORSYNCD"


def get_config_path() -> Path:
    """Get the default configuration file path.

    Returns:
        Path to configuration file (may not exist yet)
    """
    config_dir = get_config_dir()
    config_dir.mkdir(parents=True, exist_ok=True)
    return config_dir / "daemon.yaml"


def load_config(config_path: Path | None = None) -> Config:
    """Load daemon configuration.

    Loads configuration with the following precedence (highest to lowest):
    1. Environment variables (EDITORSYNCD_*)
    2. Configuration file (if exists)
    3. Default values

    Args:
        config_path: Optional path to configuration file. If None, uses default location.

    Returns:
        Loaded configuration
    """
    if config_path is None:
        env_path = os.environ.get(f"{ENV_PREFIX}_CONFIG")
        config_path = Path(env_path) if env_path else get_config_path()

    if config_path.exists():
        logger.info(f"Loading configuration from {config_path}")
        try:
            config = Config.load_from_file(config_path)
        except Exception as e:
            logger.error(f"Failed to load config from {config_path}: {e}")
            logger.info("Using default configuration")
            config = Config.get_default()
    else:
        logger.info(f"No configuration file found at {config_path}, using defaults")
        config = Config.get_default()

    return _apply_env_overrides(config)


def _apply_env_overrides(config: Config) -> Config:
    """Apply environment variable overrides to configuration.

    Environment variables follow the pattern: EDITORSYNCD_SECTION_KEY
    Examples:
        EDITORSYNCD_DAEMON_PORT=8791
        EDITORSYNCD_DETECTOR_STABILITY_WINDOW=5
        EDITORSYNCD_DETECTOR_WATCHED_EXTENSIONS=.cs,.shader
        EDITORSYNCD_BEACON_STATUS_FILE=none

    Values are coerced by the config models; list fields take comma-separated
    values and "none" clears an optional field.

    Args:
        config: Configuration to override

    Returns:
        Configuration with environment overrides applied
    """
    config_dict = config.model_dump()

    for section, values in config_dict.items():
        overrides = {}
        for key, current in values.items():
            env_var = f"{ENV_PREFIX}_{section.upper()}_{key.upper()}"
            if env_var not in os.environ:
                continue
            raw = os.environ[env_var]
            if isinstance(current, list):
                overrides[key] = [item.strip() for item in raw.split(",") if item.strip()]
            elif raw.lower() == "none":
                overrides[key] = None
            else:
                overrides[key] = raw
            logger.info(f"Environment override: {section}.{key} = {overrides[key]}")

        if overrides:
            values.update(overrides)

    return Config.model_validate(config_dict)


def save_example_config(path: Path | None = None) -> Path:
    """Save an example configuration file with all defaults documented.

    Args:
        path: Optional path to save to. If None, uses default location with .example suffix.

    Returns:
        Path where example config was saved
    """
    if path is None:
        path = get_config_path().with_suffix(".example.yaml")

    config = Config.get_default()
    config.save_to_file(path)

    content = path.read_text()
    header = """# editorsyncd Daemon Configuration
#
# This is an example configuration file showing all available options with their defaults.
# Copy this to daemon.yaml and customize as needed.
#
# Configuration precedence (highest to lowest):
# 1. Environment variables (EDITORSYNCD_SECTION_KEY)
# 2. This configuration file
# 3. Built-in defaults

"""
    path.write_text(header + content)

    logger.info(f"Saved example configuration to {path}")
    return path
