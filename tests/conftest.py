"""
Shared pytest fixtures for the editorsync test suite.

Provides fixtures for:
- Temporary storage directories (EDITORSYNC_HOME)
- An isolated compile-status file
- A small workspace with source files
"""

import tempfile
from collections.abc import Generator
from pathlib import Path

import pytest


@pytest.fixture
def temp_storage_dir() -> Generator[Path, None, None]:
    """Create temporary storage directory for tests.

    Automatically cleaned up after test completes.
    """
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir).resolve()


@pytest.fixture
def mock_storage_env(temp_storage_dir: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Point EDITORSYNC_HOME at a temp directory.

    Also clears path overrides so every directory derives from the home.

    Returns:
        Path to temporary storage directory
    """
    monkeypatch.setenv("EDITORSYNC_HOME", str(temp_storage_dir))
    for name in (
        "EDITORSYNC_CONFIG_DIR",
        "EDITORSYNC_STATE_DIR",
        "EDITORSYNC_LOG_DIR",
        "EDITORSYNC_COMPILE_STATUS_FILE",
        "EDITORSYNCD_CONFIG",
    ):
        monkeypatch.delenv(name, raising=False)
    return temp_storage_dir


@pytest.fixture
def status_file(mock_storage_env: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Isolated compile-status file, also exported via EDITORSYNC_COMPILE_STATUS_FILE."""
    path = mock_storage_env / "status" / "mcp_compile_status.json"
    monkeypatch.setenv("EDITORSYNC_COMPILE_STATUS_FILE", str(path))
    return path


@pytest.fixture
def workspace(tmp_path: Path) -> Path:
    """Workspace with two C# files and a README.

    Player.cs declares class Player with method Move; Game.cs uses both.
    """
    root = tmp_path / "workspace"
    (root / "Assets" / "Scripts").mkdir(parents=True)
    (root / "Assets" / "Scripts" / "Player.cs").write_text(
        "namespace Demo\n"
        "{\n"
        "    public class Player\n"
        "    {\n"
        "        public void Move(int dx) { }\n"
        "    }\n"
        "}\n",
        encoding="utf-8",
    )
    (root / "Assets" / "Scripts" / "Game.cs").write_text(
        "namespace Demo\n"
        "{\n"
        "    public class Game\n"
        "    {\n"
        "        private Player player = new Player();\n"
        "        public void Tick() { player.Move(1); }\n"
        "    }\n"
        "}\n",
        encoding="utf-8",
    )
    (root / "README.md").write_text("# Demo\n", encoding="utf-8")
    return root
