"""
Integration tests for status API endpoints.

Tests root, health, status and compile-status endpoints.
"""

from pathlib import Path

import pytest
from fastapi.testclient import TestClient

from editorsync_library.beacon import CompileStatusStore
from editorsync_library.models import CompileStatusRecord


@pytest.mark.integration
class TestStatusAPI:
    """Test status API endpoints."""

    def test_root_endpoint_returns_api_info(self, client: TestClient) -> None:
        response = client.get("/")

        assert response.status_code == 200
        data = response.json()
        assert data["name"] == "editorsyncd"
        assert data["bridge"] == "/bridge"

    def test_health_check_returns_healthy(self, client: TestClient) -> None:
        response = client.get("/health")

        assert response.status_code == 200
        assert response.json() == {"status": "healthy"}

    def test_status_endpoint_returns_running(self, client: TestClient, workspace: Path) -> None:
        response = client.get("/api/v1/status")

        assert response.status_code == 200
        data = response.json()
        assert data["status"] == "running"
        assert data["uptimeSeconds"] >= 0
        assert data["workspaceRoot"] == str(workspace.resolve())
        assert data["gateway"] == "127.0.0.1:6400"
        assert data["refreshInProgress"] is False
        assert data["openFiles"] == 0

    def test_compile_status_without_record(self, client: TestClient) -> None:
        response = client.get("/api/v1/compile-status")

        assert response.status_code == 200
        assert response.json() == {"isCompiling": False}

    def test_compile_status_with_record(self, client: TestClient, status_file: Path) -> None:
        CompileStatusStore(status_file).write(
            CompileStatusRecord(is_compiling=True, message="Compiling", compile_id="compile_z")
        )

        data = client.get("/api/v1/compile-status").json()

        assert data["isCompiling"] is True
        assert data["compileId"] == "compile_z"
        assert data["message"] == "Compiling"
