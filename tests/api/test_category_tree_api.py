"""Tests for category tree API endpoints."""

from collections.abc import Iterator
from unittest.mock import AsyncMock, MagicMock

import pytest
from fastapi.testclient import TestClient

from pim.api.category_tree import get_list_root_categories_query
from pim.catalog.category_tree import RootCategory
from pim.domain import Category
from pim.domain.exceptions import UnsupportedAttributeTypeError
from pim.infrastructure.search_client import SearchClientError
from pim.main import app


@pytest.fixture
def query() -> Iterator[MagicMock]:
    """Replace the root category query with a mock."""
    mock_query = MagicMock()
    mock_query.list = AsyncMock(return_value=[])
    app.dependency_overrides[get_list_root_categories_query] = lambda: mock_query
    yield mock_query
    app.dependency_overrides.pop(get_list_root_categories_query, None)


def make_root(id: int, code: str, count: int, label: str | None = None, selected: bool = False):
    """Create a counted root category."""
    labels = {"en_US": label} if label else {}
    return RootCategory(Category(code, id=id, labels=labels), count, selected)


class TestListRootCategories:
    """Tests for GET /category-tree/roots endpoint."""

    def test_requires_auth(self, client: TestClient, query: MagicMock) -> None:
        """Should require authentication."""
        response = client.get("/category-tree/roots")
        assert response.status_code == 401
        query.list.assert_not_called()

    def test_lists_roots_in_order(self, auth_client: TestClient, query: MagicMock) -> None:
        """Should return roots with counts in query order."""
        query.list.return_value = [
            make_root(1, "A", 5, "Tree A"),
            make_root(2, "B", 0),
        ]

        response = auth_client.get("/category-tree/roots")

        assert response.status_code == 200
        assert response.json() == [
            {"id": 1, "code": "A", "label": "Tree A", "count": 5, "selected": False},
            {"id": 2, "code": "B", "label": "[B]", "count": 0, "selected": False},
        ]
        query.list.assert_awaited_once_with("en_US", root_category_id_to_expand=None)

    def test_locale_and_selected(self, auth_client: TestClient, query: MagicMock) -> None:
        """Should pass locale and the root to expand to the query."""
        query.list.return_value = [make_root(3, "print", 2, selected=True)]

        response = auth_client.get("/category-tree/roots?locale=fr_FR&selected=3")

        assert response.status_code == 200
        assert response.json()[0]["selected"] is True
        query.list.assert_awaited_once_with("fr_FR", root_category_id_to_expand=3)

    def test_empty(self, auth_client: TestClient, query: MagicMock) -> None:
        """Should return an empty list without roots."""
        response = auth_client.get("/category-tree/roots")
        assert response.status_code == 200
        assert response.json() == []

    def test_invalid_selected(self, auth_client: TestClient, query: MagicMock) -> None:
        """Should reject a non numeric root id."""
        response = auth_client.get("/category-tree/roots?selected=abc")
        assert response.status_code == 422

    def test_search_error_is_bad_gateway(
        self, auth_client: TestClient, query: MagicMock
    ) -> None:
        """Should map search index failures to 502."""
        query.list.side_effect = SearchClientError("pim_catalog_product", "down", 503)

        response = auth_client.get(
            "/category-tree/roots", headers={"X-Request-ID": "req-502"}
        )

        assert response.status_code == 502
        data = response.json()
        assert data["error_code"] == "SEARCH_INDEX_ERROR"
        assert data["request_id"] == "req-502"

    def test_domain_error_is_unprocessable(
        self, auth_client: TestClient, query: MagicMock
    ) -> None:
        """Should map domain errors to 422 with details."""
        query.list.side_effect = UnsupportedAttributeTypeError("reference_data", ["text"])

        response = auth_client.get("/category-tree/roots")

        assert response.status_code == 422
        data = response.json()
        assert data["error_code"] == "UNSUPPORTED_ATTRIBUTE_TYPE"
        assert {"field": "attribute_type", "message": "reference_data"} in data["details"]
