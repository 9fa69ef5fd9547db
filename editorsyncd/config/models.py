"""Configuration models for the editorsyncd bridge daemon.

These models define the structure of the daemon's configuration file:
HTTP server settings, the engine gateway address, stability detector
parameters, refresh behavior, the workspace, and compile-status watching.
"""

from __future__ import annotations

from pathlib import Path
from typing import Literal

from pydantic import BaseModel
from pydantic import Field
from pydantic import model_validator


class DaemonConfig(BaseModel):
    """Configuration for the HTTP server."""

    host: str = Field(
        default="localhost",
        description="Host to bind to",
    )
    port: int = Field(
        default=8790,
        ge=1024,
        le=65535,
        description="Port to listen on",
    )
    log_level: str = Field(
        default="INFO",
        description="Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)",
    )
    cors_origins: list[str] = Field(
        default=["*"],
        description="CORS allowed origins (the bridge is permissive by default)",
    )


class GatewayConfig(BaseModel):
    """Where the engine companion's command gateway listens."""

    host: str = Field(
        default="127.0.0.1",
        description="Engine companion host (e.g. the Windows host gateway address when running under WSL)",
    )
    port: int = Field(
        default=6400,
        ge=1,
        le=65535,
        description="Engine companion port",
    )
    timeout_seconds: float = Field(
        default=5.0,
        gt=0,
        description="Timeout for one gateway command; failed commands are never retried",
    )
    notify_on_refresh: bool = Field(
        default=True,
        description="Send project_files_refresher to the engine on every refresh_project",
    )


class DetectorConfig(BaseModel):
    """Stability detector parameters."""

    max_wait: float = Field(
        default=30.0,
        gt=0,
        description="Hard ceiling in seconds, regardless of event activity",
    )
    fallback_delay: float = Field(
        default=10.0,
        gt=0,
        description="Resolve after this many seconds if no relevant event arrives",
    )
    stability_window: float = Field(
        default=3.0,
        gt=0,
        description="Quiet period required after the last relevant event",
    )
    watched_extensions: list[str] = Field(
        default=[".cs"],
        description="File suffixes whose diagnostic changes count as relevant (empty = all files)",
    )


class RefreshConfig(BaseModel):
    """refresh_project behavior."""

    restart_analyzer: Literal["on_add", "always", "never"] = Field(
        default="on_add",
        description="When to restart the analyzer and wait for it to settle",
    )
    busy_policy: Literal["queue", "reject"] = Field(
        default="queue",
        description="What a refresh does while another is in flight",
    )
    pre_restart_delay: float = Field(
        default=1.0,
        ge=0,
        description="Seconds to let the engine start its compile before restarting the analyzer",
    )
    analyzer_restart_command: list[str] = Field(
        default_factory=list,
        description="Command run to restart the external analyzer (optional)",
    )
    analyzer_restart_timeout: float = Field(
        default=60.0,
        gt=0,
        description="Seconds to wait for the analyzer restart command",
    )


class WorkspaceConfig(BaseModel):
    """The workspace the bridge serves."""

    root: str = Field(
        default=".",
        description="Workspace root; relative file paths resolve against it",
    )

    @property
    def root_path(self) -> Path:
        return Path(self.root).expanduser().resolve()


class BeaconConfig(BaseModel):
    """Watching the engine's compile-status file."""

    status_file: str | None = Field(
        default=None,
        description="Compile-status file to watch (default: per-installation temp path)",
    )
    watch: bool = Field(
        default=True,
        description="Poll the compile-status file and emit compile events",
    )
    poll_interval_seconds: float = Field(
        default=2.0,
        ge=0.1,
        le=3600,
        description="Polling interval for the compile-status file",
    )


class Config(BaseModel):
    """Complete daemon configuration."""

    daemon: DaemonConfig = Field(default_factory=DaemonConfig)
    gateway: GatewayConfig = Field(default_factory=GatewayConfig)
    detector: DetectorConfig = Field(default_factory=DetectorConfig)
    refresh: RefreshConfig = Field(default_factory=RefreshConfig)
    workspace: WorkspaceConfig = Field(default_factory=WorkspaceConfig)
    beacon: BeaconConfig = Field(default_factory=BeaconConfig)

    @model_validator(mode="after")
    def check_detector_order(self) -> Config:
        if self.detector.stability_window > self.detector.max_wait:
            raise ValueError("detector.stability_window must not exceed detector.max_wait")
        return self

    @classmethod
    def load_from_file(cls, path: Path) -> Config:
        """Load configuration from YAML file.

        Args:
            path: Path to configuration file

        Returns:
            Loaded configuration

        Raises:
            FileNotFoundError: If config file doesn't exist
            ValueError: If config file is invalid
        """
        import yaml

        if not path.exists():
            raise FileNotFoundError(f"Configuration file not found: {path}")

        try:
            with path.open() as f:
                data = yaml.safe_load(f)
            return cls.model_validate(data or {})
        except yaml.YAMLError as e:
            raise ValueError(f"Invalid YAML in configuration file: {e}") from e
        except Exception as e:
            raise ValueError(f"Failed to load configuration: {e}") from e

    def save_to_file(self, path: Path) -> None:
        """Save configuration to YAML file.

        Args:
            path: Path to save configuration file

        Raises:
            OSError: If file cannot be written
        """
        import yaml

        path.parent.mkdir(parents=True, exist_ok=True)

        with path.open("w") as f:
            yaml.safe_dump(
                self.model_dump(mode="json"),
                f,
                default_flow_style=False,
                sort_keys=False,
            )

    @classmethod
    def get_default(cls) -> Config:
        """Get default configuration with all defaults."""
        return cls()
