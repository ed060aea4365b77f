"""Tests for the category repository."""

from unittest.mock import AsyncMock, MagicMock

import pytest

from pim.catalog.repository import CategoryRepository
from pim.catalog.taxonomy import TaxonomyParser, iter_tree


@pytest.fixture
def session() -> MagicMock:
    """Create mock database session."""
    session = MagicMock()
    session.execute = AsyncMock()
    session.flush = AsyncMock()
    return session


class TestCategoryRepository:
    """Tests for CategoryRepository."""

    @pytest.mark.asyncio
    async def test_save_tree_sets_root(self, session: MagicMock) -> None:
        """Every row of a saved tree points at the root id."""
        parser = TaxonomyParser()
        parser.parse_embedded()
        root = parser.to_models()[0]

        async def assign_id() -> None:
            root.id = 17

        session.flush.side_effect = assign_id
        repo = CategoryRepository(session)

        saved = await repo.save_tree(root)

        assert saved is root
        session.add.assert_called_once_with(root)
        assert session.flush.await_count == 2
        assert {row.root for row in iter_tree(root)} == {17}

    @pytest.mark.asyncio
    async def test_count(self, session: MagicMock) -> None:
        """Count reads the scalar result."""
        result = MagicMock()
        result.scalar_one.return_value = 24
        session.execute.return_value = result

        assert await CategoryRepository(session).count() == 24

    @pytest.mark.asyncio
    async def test_delete_all_returns_count(self, session: MagicMock) -> None:
        """Deleting reports how many categories existed."""
        result = MagicMock()
        result.scalar_one.return_value = 5
        session.execute.return_value = result

        deleted = await CategoryRepository(session).delete_all()

        assert deleted == 5
        # count, then labels, then categories
        assert session.execute.await_count == 3
        session.flush.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_get_by_code(self, session: MagicMock) -> None:
        """Lookup returns the single matching row."""
        row = MagicMock()
        result = MagicMock()
        result.scalar_one_or_none.return_value = row
        session.execute.return_value = result

        assert await CategoryRepository(session).get_by_code("master") is row

    @pytest.mark.asyncio
    async def test_find_roots(self, session: MagicMock) -> None:
        """Roots are the rows without parent, ordered by code."""
        rows = [MagicMock(code="master"), MagicMock(code="sales")]
        result = MagicMock()
        result.scalars.return_value.all.return_value = rows
        session.execute.return_value = result

        roots = await CategoryRepository(session).find_roots()

        assert list(roots) == rows
        query = str(session.execute.call_args.args[0])
        assert "parent_id IS NULL" in query
        assert "ORDER BY pim_catalog_category.code" in query
