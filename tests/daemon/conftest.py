"""Fixtures for daemon API tests."""

from collections.abc import Generator
from pathlib import Path

import pytest
from fastapi.testclient import TestClient

from editorsyncd.config.models import BeaconConfig
from editorsyncd.config.models import Config
from editorsyncd.config.models import DetectorConfig
from editorsyncd.config.models import GatewayConfig
from editorsyncd.config.models import RefreshConfig
from editorsyncd.config.models import WorkspaceConfig
from editorsyncd.main import create_app


@pytest.fixture
def daemon_config(workspace: Path, status_file: Path) -> Config:
    """Config rooted at the test workspace with fast detector timings."""
    return Config(
        gateway=GatewayConfig(notify_on_refresh=False),
        detector=DetectorConfig(max_wait=1.0, fallback_delay=0.2, stability_window=0.1),
        refresh=RefreshConfig(pre_restart_delay=0.0),
        workspace=WorkspaceConfig(root=str(workspace)),
        beacon=BeaconConfig(status_file=str(status_file), watch=False),
    )


@pytest.fixture
def client(daemon_config: Config) -> Generator[TestClient, None, None]:
    """Create FastAPI test client with the application lifespan running."""
    with TestClient(create_app(daemon_config)) as test_client:
        yield test_client
