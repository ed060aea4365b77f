"""Category repository for database operations.

Stores and reads category trees. Listing roots with product counts is
not done here; see pim.catalog.category_tree.
"""

from collections.abc import Sequence

from sqlalchemy import delete, func, select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from pim.catalog.models import CategoryModel, CategoryTranslationModel
from pim.catalog.taxonomy import iter_tree


class CategoryRepository:
    """Repository for category database operations.

    Example usage:
        async with async_session_factory() as session:
            repo = CategoryRepository(session)
            parser = TaxonomyParser()
            parser.parse_embedded()
            for root in parser.to_models():
                await repo.save_tree(root)
    """

    def __init__(self, session: AsyncSession) -> None:
        """Initialize repository with database session.

        Args:
            session: Async SQLAlchemy session.
        """
        self.session = session

    async def save_tree(self, root: CategoryModel) -> CategoryModel:
        """Save a whole category tree.

        Inserts the rows, then points every row's ``root`` column at
        the id the root row received.

        Args:
            root: Root row with its descendants attached.

        Returns:
            Saved root row.
        """
        self.session.add(root)
        await self.session.flush()

        for model in iter_tree(root):
            model.root = root.id
        await self.session.flush()
        return root

    async def get_by_code(self, code: str) -> CategoryModel | None:
        """Get category by code, with its labels.

        Args:
            code: Category code.

        Returns:
            Category row if found, None otherwise.
        """
        query = (
            select(CategoryModel)
            .where(CategoryModel.code == code)
            .options(selectinload(CategoryModel.translations))
        )
        result = await self.session.execute(query)
        return result.scalar_one_or_none()

    async def find_roots(self) -> Sequence[CategoryModel]:
        """Get root categories ordered by code, with their labels."""
        query = (
            select(CategoryModel)
            .where(CategoryModel.parent_id.is_(None))
            .options(selectinload(CategoryModel.translations))
            .order_by(CategoryModel.code)
        )
        result = await self.session.execute(query)
        return result.scalars().all()

    async def count(self) -> int:
        """Count all categories."""
        result = await self.session.execute(select(func.count(CategoryModel.id)))
        return result.scalar_one()

    async def delete_all(self) -> int:
        """Delete all categories and their labels.

        Returns:
            Number of deleted categories.
        """
        deleted = await self.count()
        await self.session.execute(delete(CategoryTranslationModel))
        await self.session.execute(delete(CategoryModel))
        await self.session.flush()
        return deleted
