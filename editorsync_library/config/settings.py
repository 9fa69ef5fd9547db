"""Settings models for editorsync clients and the engine companion.

The bridge daemon has its own sectioned configuration (editorsyncd.config);
these settings cover the processes on either side of it.

Contract:
- Inputs: Environment variables, YAML files
- Outputs: Validated settings objects
- Side Effects: None (read-only)
"""

from pathlib import Path

from pydantic import Field
from pydantic import field_validator
from pydantic_settings import BaseSettings
from pydantic_settings import SettingsConfigDict


class ClientSettings(BaseSettings):
    """Where the agent-side tools find the bridge daemon and engine companion.

    Attributes:
        bridge_host: Host of the editor bridge daemon (default: localhost)
        bridge_port: Port of the editor bridge daemon (default: 8790)
        bridge_timeout: Seconds to wait for a bridge response (default: 120)
        engine_host: Host of the engine companion gateway (default: 127.0.0.1)
        engine_port: Port of the engine companion gateway (default: 6400)
        gateway_timeout: Seconds to wait for a gateway response (default: 5)

    Example:
        >>> settings = ClientSettings()
        >>> assert settings.bridge_port == 8790
        >>> assert settings.bridge_url == "http://localhost:8790"
    """

    model_config = SettingsConfigDict(
        env_prefix="EDITORSYNC_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    bridge_host: str = "localhost"
    bridge_port: int = Field(default=8790, ge=1, le=65535)
    # A refresh with an analyzer restart may legitimately wait out the detector ceiling
    bridge_timeout: float = Field(default=120.0, gt=0)

    engine_host: str = "127.0.0.1"
    engine_port: int = Field(default=6400, ge=1, le=65535)
    gateway_timeout: float = Field(default=5.0, gt=0)

    @property
    def bridge_url(self) -> str:
        """Base URL of the bridge daemon."""
        return f"http://{self.bridge_host}:{self.bridge_port}"


class EngineSettings(BaseSettings):
    """Configuration for the engine companion process.

    Commands are argv lists; an empty list disables that step.

    Attributes:
        host: Gateway listen address (default: 127.0.0.1)
        port: Gateway listen port (default: 6400, 0 picks a free port)
        log_level: Logging level (default: info)
        project_dir: Working directory for engine commands (default: cwd)
        generate_command: Regenerates IDE project files
        refresh_command: Re-imports changed assets
        compile_command: Runs the script compilation
        run_in_background: Initial value of the background-run setting
        status_file: Explicit compile-status file (default: per-installation temp path)
    """

    model_config = SettingsConfigDict(
        env_prefix="EDITORSYNC_ENGINE_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    host: str = "127.0.0.1"
    port: int = Field(default=6400, ge=0, le=65535)
    log_level: str = "info"

    project_dir: str = "."
    generate_command: list[str] = Field(default_factory=list)
    refresh_command: list[str] = Field(default_factory=list)
    compile_command: list[str] = Field(default_factory=list)

    run_in_background: bool = False
    status_file: str | None = None

    @field_validator("project_dir")
    @classmethod
    def expand_and_resolve_path(cls, v: str) -> str:
        """Expand ~ and resolve to absolute path.

        Args:
            v: Path string (may contain ~ or be relative)

        Returns:
            Absolute path as string
        """
        return str(Path(v).expanduser().resolve())
