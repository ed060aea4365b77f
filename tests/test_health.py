"""Tests for health check endpoints."""

from collections.abc import Iterator
from unittest.mock import AsyncMock

import pytest
from fastapi.testclient import TestClient

from pim.infrastructure.database import get_session
from pim.main import app


@pytest.fixture
def session() -> Iterator[AsyncMock]:
    """Replace the database session with a mock."""
    mock_session = AsyncMock()

    async def override():
        yield mock_session

    app.dependency_overrides[get_session] = override
    yield mock_session
    app.dependency_overrides.clear()


@pytest.fixture
def client() -> TestClient:
    """Create test client."""
    return TestClient(app)


def test_health_check(client: TestClient) -> None:
    """Test health endpoint returns healthy status."""
    response = client.get("/health")
    assert response.status_code == 200
    data = response.json()
    assert data["status"] == "healthy"
    assert data["service"] == "pim-api"
    assert "version" in data


def test_readiness_check(client: TestClient, session: AsyncMock) -> None:
    """Test readiness endpoint returns ready status."""
    response = client.get("/ready")
    assert response.status_code == 200
    assert response.json()["status"] == "ready"
    session.execute.assert_awaited_once()


def test_readiness_database_down(client: TestClient, session: AsyncMock) -> None:
    """Test readiness endpoint reports an unreachable database."""
    session.execute.side_effect = OSError("connection refused")

    response = client.get("/ready")

    assert response.status_code == 503
    assert response.json()["status"] == "unavailable"
