"""Shared fixtures for API tests."""

from collections.abc import AsyncGenerator, Iterator
from unittest.mock import AsyncMock

import pytest
from fastapi.testclient import TestClient

from pim.infrastructure.config import settings
from pim.infrastructure.database import get_session
from pim.main import app


@pytest.fixture(autouse=True)
def mock_session() -> Iterator[AsyncMock]:
    """Replace the database session with a mock for every request."""
    session = AsyncMock()

    async def override() -> AsyncGenerator[AsyncMock, None]:
        yield session

    app.dependency_overrides[get_session] = override
    yield session
    app.dependency_overrides.clear()


@pytest.fixture
def client() -> TestClient:
    """Create test client without authentication."""
    return TestClient(app)


@pytest.fixture
def auth_client() -> TestClient:
    """Create test client with valid API key authentication."""
    return TestClient(
        app,
        headers={"Authorization": f"Bearer {settings.pim_api_key}"},
    )


@pytest.fixture
def auth_headers() -> dict[str, str]:
    """Get authentication headers."""
    return {"Authorization": f"Bearer {settings.pim_api_key}"}
