"""
Unit tests for daemon configuration loading.
"""

from pathlib import Path

import pytest

from editorsyncd.config import loader
from editorsyncd.config.models import Config


@pytest.mark.unit
class TestDaemonConfig:
    """Test daemon.yaml loading and environment overrides."""

    def test_defaults(self, mock_storage_env: Path) -> None:
        config = loader.load_config()

        assert config.daemon.port == 8790
        assert config.daemon.cors_origins == ["*"]
        assert config.gateway.port == 6400
        assert config.gateway.timeout_seconds == 5.0
        assert (config.detector.max_wait, config.detector.fallback_delay, config.detector.stability_window) == (
            30.0,
            10.0,
            3.0,
        )
        assert config.detector.watched_extensions == [".cs"]
        assert config.refresh.restart_analyzer == "on_add"
        assert config.refresh.busy_policy == "queue"

    def test_config_path_is_daemon_yaml(self, mock_storage_env: Path) -> None:
        assert loader.get_config_path() == mock_storage_env / "config" / "daemon.yaml"

    def test_loads_yaml_file(self, mock_storage_env: Path) -> None:
        loader.get_config_path().write_text(
            "daemon:\n  port: 8800\nrefresh:\n  restart_analyzer: always\n  busy_policy: reject\n"
        )

        config = loader.load_config()

        assert config.daemon.port == 8800
        assert config.refresh.restart_analyzer == "always"
        assert config.refresh.busy_policy == "reject"

    def test_invalid_file_falls_back_to_defaults(self, mock_storage_env: Path) -> None:
        loader.get_config_path().write_text("refresh:\n  restart_analyzer: sometimes\n")

        config = loader.load_config()

        assert config.refresh.restart_analyzer == "on_add"

    def test_env_overrides(self, mock_storage_env: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("EDITORSYNCD_DAEMON_PORT", "8791")
        monkeypatch.setenv("EDITORSYNCD_DETECTOR_STABILITY_WINDOW", "5")
        monkeypatch.setenv("EDITORSYNCD_DETECTOR_WATCHED_EXTENSIONS", ".cs, .shader")
        monkeypatch.setenv("EDITORSYNCD_GATEWAY_NOTIFY_ON_REFRESH", "false")

        config = loader.load_config()

        assert config.daemon.port == 8791
        assert config.detector.stability_window == 5.0
        assert config.detector.watched_extensions == [".cs", ".shader"]
        assert config.gateway.notify_on_refresh is False

    def test_config_env_path(self, mock_storage_env: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        custom = mock_storage_env / "custom.yaml"
        custom.write_text("gateway:\n  port: 6500\n")
        monkeypatch.setenv("EDITORSYNCD_CONFIG", str(custom))

        assert loader.load_config().gateway.port == 6500

    def test_stability_window_must_not_exceed_ceiling(self) -> None:
        with pytest.raises(ValueError, match="stability_window"):
            Config.model_validate({"detector": {"max_wait": 2, "stability_window": 3}})

    def test_example_config_round_trips(self, mock_storage_env: Path) -> None:
        path = loader.save_example_config()

        assert path.name == "daemon.example.yaml"
        assert "EDITORSYNCD_SECTION_KEY" in path.read_text()
        assert Config.load_from_file(path) == Config.get_default()
