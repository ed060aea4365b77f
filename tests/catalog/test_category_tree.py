"""Tests for category tree root queries."""

from types import SimpleNamespace
from unittest.mock import AsyncMock, MagicMock

import pytest

from pim.catalog.category_tree import (
    ListRootCategoriesWithCountIncludingSubCategories,
    ListRootCategoriesWithCountNotIncludingSubCategories,
    RootCategory,
    build_list_root_categories_with_count,
)
from pim.domain import Category
from pim.infrastructure.config import Settings
from pim.infrastructure.search_client import SearchClientError

INDEX = "pim_catalog_product_test"


# ============================================================================
# Test Fixtures
# ============================================================================


def make_result(rows: list) -> MagicMock:
    """Create a query result returning rows."""
    result = MagicMock()
    result.all.return_value = rows
    return result


def root_row(id: int, code: str, label: str | None) -> SimpleNamespace:
    """Create a root category row."""
    return SimpleNamespace(id=id, code=code, label=label)


def tree_row(root: int, code: str) -> SimpleNamespace:
    """Create a category tree row."""
    return SimpleNamespace(root=root, code=code)


@pytest.fixture
def session() -> AsyncMock:
    """Create mock database session."""
    return AsyncMock()


@pytest.fixture
def search_client() -> MagicMock:
    """Create mock search client."""
    client = MagicMock()
    client.search = AsyncMock()
    client.msearch = AsyncMock()
    return client


def aggregation_response(buckets: dict[str, int]) -> dict:
    """Create a terms aggregation search response."""
    return {
        "hits": {"total": {"value": sum(buckets.values()), "relation": "eq"}, "hits": []},
        "aggregations": {
            "categories": {
                "buckets": [{"key": k, "doc_count": v} for k, v in buckets.items()]
            }
        },
    }


# ============================================================================
# Root Category Tests
# ============================================================================


class TestRootCategory:
    """Tests for RootCategory."""

    def test_to_dict(self) -> None:
        """Root serializes with label in locale."""
        root = RootCategory(
            category=Category("master", id=1, labels={"en_US": "Master catalog"}),
            count=12,
            selected=True,
        )
        assert root.to_dict("en_US") == {
            "id": 1,
            "code": "master",
            "label": "Master catalog",
            "count": 12,
            "selected": True,
        }

    def test_label_fallback(self) -> None:
        """Missing label falls back to the bracketed code."""
        root = RootCategory(category=Category("sales", id=4), count=0)
        assert root.to_dict("fr_FR")["label"] == "[sales]"
        assert root.id == 4
        assert root.code == "sales"


# ============================================================================
# Not Including Sub-categories Tests
# ============================================================================


class TestListNotIncludingSubCategories:
    """Tests for counting products directly in roots."""

    @pytest.mark.asyncio
    async def test_counts_in_relational_order(
        self, session: AsyncMock, search_client: MagicMock
    ) -> None:
        """Roots keep database order and get zero when absent from buckets."""
        session.execute.return_value = make_result(
            [root_row(1, "A", "Tree A"), root_row(2, "B", "Tree B")]
        )
        search_client.search.return_value = aggregation_response({"A": 5})
        query = ListRootCategoriesWithCountNotIncludingSubCategories(
            session, search_client, INDEX
        )

        roots = await query.list("en_US")

        assert [(r.code, r.count) for r in roots] == [("A", 5), ("B", 0)]
        assert [r.category.label("en_US") for r in roots] == ["Tree A", "Tree B"]

    @pytest.mark.asyncio
    async def test_search_body_restricted_to_roots(
        self, session: AsyncMock, search_client: MagicMock
    ) -> None:
        """Aggregation only buckets root codes."""
        session.execute.return_value = make_result(
            [root_row(1, "master", None), root_row(2, "print", None)]
        )
        search_client.search.return_value = aggregation_response({})
        query = ListRootCategoriesWithCountNotIncludingSubCategories(
            session, search_client, INDEX
        )

        await query.list("en_US")

        index, body = search_client.search.call_args.args
        assert index == INDEX
        assert body["size"] == 0
        assert body["query"] == {"terms": {"categories": ["master", "print"]}}
        assert body["aggs"]["categories"]["terms"]["include"] == ["master", "print"]
        assert body["aggs"]["categories"]["terms"]["size"] == 2

    @pytest.mark.asyncio
    async def test_selected_root(
        self, session: AsyncMock, search_client: MagicMock
    ) -> None:
        """Only the root to expand is flagged as selected."""
        session.execute.return_value = make_result(
            [root_row(1, "A", None), root_row(2, "B", None)]
        )
        search_client.search.return_value = aggregation_response({"A": 1, "B": 2})
        query = ListRootCategoriesWithCountNotIncludingSubCategories(
            session, search_client, INDEX
        )

        roots = await query.list("en_US", root_category_id_to_expand=2)

        assert [r.selected for r in roots] == [False, True]

    @pytest.mark.asyncio
    async def test_missing_label_falls_back(
        self, session: AsyncMock, search_client: MagicMock
    ) -> None:
        """Roots without translation in the locale show their code."""
        session.execute.return_value = make_result([root_row(1, "A", None)])
        search_client.search.return_value = aggregation_response({})
        query = ListRootCategoriesWithCountNotIncludingSubCategories(
            session, search_client, INDEX
        )

        roots = await query.list("de_DE")

        assert roots[0].to_dict("de_DE")["label"] == "[A]"

    @pytest.mark.asyncio
    async def test_no_roots(self, session: AsyncMock, search_client: MagicMock) -> None:
        """No roots means no search at all."""
        session.execute.return_value = make_result([])
        query = ListRootCategoriesWithCountNotIncludingSubCategories(
            session, search_client, INDEX
        )

        assert await query.list("en_US") == []
        search_client.search.assert_not_called()

    @pytest.mark.asyncio
    async def test_search_error_propagates(
        self, session: AsyncMock, search_client: MagicMock
    ) -> None:
        """Search failures are not swallowed."""
        session.execute.return_value = make_result([root_row(1, "A", None)])
        search_client.search.side_effect = SearchClientError(INDEX, "boom", 500)
        query = ListRootCategoriesWithCountNotIncludingSubCategories(
            session, search_client, INDEX
        )

        with pytest.raises(SearchClientError):
            await query.list("en_US")


# ============================================================================
# Including Sub-categories Tests
# ============================================================================


class TestListIncludingSubCategories:
    """Tests for counting products of whole trees."""

    @pytest.mark.asyncio
    async def test_counts_whole_tree(
        self, session: AsyncMock, search_client: MagicMock
    ) -> None:
        """Each root gets the hit count of a search over its tree codes."""
        session.execute.side_effect = [
            make_result([root_row(1, "master", "Master"), root_row(5, "sales", "Sales")]),
            make_result(
                [
                    tree_row(1, "master"),
                    tree_row(1, "master_men"),
                    tree_row(1, "master_men_shoes"),
                    tree_row(5, "sales"),
                ]
            ),
        ]
        search_client.msearch.return_value = [
            {"hits": {"total": {"value": 7, "relation": "eq"}}},
            {"hits": {"total": 0}},
        ]
        query = ListRootCategoriesWithCountIncludingSubCategories(
            session, search_client, INDEX
        )

        roots = await query.list("en_US", root_category_id_to_expand=1)

        assert [(r.code, r.count, r.selected) for r in roots] == [
            ("master", 7, True),
            ("sales", 0, False),
        ]
        index, bodies = search_client.msearch.call_args.args
        assert index == INDEX
        assert [b["query"]["constant_score"]["filter"]["terms"]["categories"] for b in bodies] == [
            ["master", "master_men", "master_men_shoes"],
            ["sales"],
        ]
        assert all(b["track_total_hits"] is True for b in bodies)
        search_client.search.assert_not_called()

    @pytest.mark.asyncio
    async def test_root_without_rows_searches_own_code(
        self, session: AsyncMock, search_client: MagicMock
    ) -> None:
        """A root missing from the tree rows still searches its own code."""
        session.execute.side_effect = [
            make_result([root_row(3, "print", None)]),
            make_result([]),
        ]
        search_client.msearch.return_value = [{"hits": {"total": {"value": 2}}}]
        query = ListRootCategoriesWithCountIncludingSubCategories(
            session, search_client, INDEX
        )

        roots = await query.list("en_US")

        assert roots[0].count == 2
        bodies = search_client.msearch.call_args.args[1]
        assert bodies[0]["query"]["constant_score"]["filter"]["terms"]["categories"] == ["print"]

    @pytest.mark.asyncio
    async def test_missing_responses_fail(
        self, session: AsyncMock, search_client: MagicMock
    ) -> None:
        """Fewer responses than trees is an error, not a zero count."""
        session.execute.side_effect = [
            make_result([root_row(1, "A", None), root_row(2, "B", None)]),
            make_result([tree_row(1, "A"), tree_row(2, "B")]),
        ]
        search_client.msearch.return_value = [{"hits": {"total": {"value": 3}}}]
        query = ListRootCategoriesWithCountIncludingSubCategories(
            session, search_client, INDEX
        )

        with pytest.raises(SearchClientError) as exc_info:
            await query.list("en_US")
        assert exc_info.value.index == INDEX


# ============================================================================
# Builder Tests
# ============================================================================


class TestBuildListRootCategoriesWithCount:
    """Tests for strategy selection."""

    def test_including_sub_categories(self, session, search_client) -> None:
        """Flag on selects the whole-tree strategy."""
        config = Settings(category_tree_count_sub_categories=True, product_index_name="idx")
        query = build_list_root_categories_with_count(session, search_client, config)

        assert isinstance(query, ListRootCategoriesWithCountIncludingSubCategories)
        assert query.index_name == "idx"

    def test_not_including_sub_categories(self, session, search_client) -> None:
        """Flag off selects the direct strategy."""
        config = Settings(category_tree_count_sub_categories=False)
        query = build_list_root_categories_with_count(session, search_client, config)

        assert isinstance(query, ListRootCategoriesWithCountNotIncludingSubCategories)
