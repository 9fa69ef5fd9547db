"""
Unit tests for storage path resolution.
"""

from pathlib import Path

import pytest

from editorsync_library.storage import paths


@pytest.mark.unit
class TestPaths:
    """Test path resolution functions."""

    def test_get_home_dir_default(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.delenv("EDITORSYNC_HOME", raising=False)

        assert paths.get_home_dir() == Path(".editorsync").resolve()

    def test_get_home_dir_custom(self, mock_storage_env: Path) -> None:
        assert paths.get_home_dir() == mock_storage_env

    def test_directories_are_created_under_home(self, mock_storage_env: Path) -> None:
        assert paths.get_config_dir() == mock_storage_env / "config"
        assert paths.get_state_dir() == mock_storage_env / "state"
        assert paths.get_log_dir() == mock_storage_env / "logs"
        assert (mock_storage_env / "logs").is_dir()

    def test_log_dir_override(self, mock_storage_env: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        custom = mock_storage_env / "elsewhere"
        monkeypatch.setenv("EDITORSYNC_LOG_DIR", str(custom))

        assert paths.get_log_dir() == custom.resolve()
        assert custom.is_dir()
