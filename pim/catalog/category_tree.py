"""Category tree queries combining the database and the search index.

Root categories and their labels are read from the relational
database; the number of products classified in each tree is read from
the product search index. Two counting strategies implement the same
ListRootCategoriesWithCount capability:

- ListRootCategoriesWithCountNotIncludingSubCategories counts products
  classified directly in the root category.
- ListRootCategoriesWithCountIncludingSubCategories counts products
  classified anywhere in the root's tree, each product once.

The strategy is chosen when the query is built, see
build_list_root_categories_with_count.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections import defaultdict
from dataclasses import dataclass
from typing import Any

import structlog
from sqlalchemy import and_, select
from sqlalchemy.ext.asyncio import AsyncSession

from pim.catalog.models import CategoryModel, CategoryTranslationModel
from pim.domain.entities import Category
from pim.infrastructure.config import Settings, settings
from pim.infrastructure.search_client import SearchClient, SearchClientError

logger = structlog.get_logger()

# Field of the product documents holding category codes
CATEGORIES_FIELD = "categories"


@dataclass(frozen=True)
class RootCategory:
    """A root category with the number of products it classifies.

    Attributes:
        category: The root category, labelled in the requested locale.
        count: Number of products counted for the tree.
        selected: Whether this is the tree the caller wants expanded.
    """

    category: Category
    count: int
    selected: bool = False

    @property
    def id(self) -> int | None:
        return self.category.id

    @property
    def code(self) -> str:
        return self.category.code

    def to_dict(self, locale: str | None = None) -> dict[str, Any]:
        """Convert to dictionary.

        Args:
            locale: Locale of the label.

        Returns:
            Dictionary representation.
        """
        return {
            "id": self.category.id,
            "code": self.category.code,
            "label": self.category.label(locale),
            "count": self.count,
            "selected": self.selected,
        }


class ListRootCategoriesWithCount(ABC):
    """List every root category with its product count.

    Example usage:
        query = ListRootCategoriesWithCountNotIncludingSubCategories(
            session, search_client, "pim_catalog_product"
        )
        roots = await query.list("en_US", root_category_id_to_expand=3)
    """

    def __init__(
        self,
        session: AsyncSession,
        search_client: SearchClient,
        index_name: str,
    ) -> None:
        """Initialize query.

        Args:
            session: Async SQLAlchemy session.
            search_client: Search index client.
            index_name: Name of the product index.
        """
        self.session = session
        self.search_client = search_client
        self.index_name = index_name

    async def list(
        self,
        translation_locale_code: str,
        root_category_id_to_expand: int | None = None,
    ) -> list[RootCategory]:
        """List root categories with their product count.

        Categories come in database order (by code). Roots without any
        product are listed with a count of zero.

        Args:
            translation_locale_code: Locale of the category labels.
            root_category_id_to_expand: Id of the root to flag as selected.

        Returns:
            Root categories with counts.
        """
        roots = await self._fetch_root_categories(translation_locale_code)
        if not roots:
            return []

        counts = await self._count_products(roots)

        logger.debug(
            "Root categories counted",
            strategy=self.__class__.__name__,
            roots=len(roots),
            index=self.index_name,
        )
        return [
            RootCategory(
                category=root,
                count=counts.get(root.code, 0),
                selected=root_category_id_to_expand is not None
                and root.id == root_category_id_to_expand,
            )
            for root in roots
        ]

    async def _fetch_root_categories(self, locale: str) -> list[Category]:
        query = (
            select(
                CategoryModel.id,
                CategoryModel.code,
                CategoryTranslationModel.label,
            )
            .outerjoin(
                CategoryTranslationModel,
                and_(
                    CategoryTranslationModel.foreign_key == CategoryModel.id,
                    CategoryTranslationModel.locale == locale,
                ),
            )
            .where(CategoryModel.parent_id.is_(None))
            .order_by(CategoryModel.code)
        )
        result = await self.session.execute(query)
        return [
            Category(row.code, id=row.id, labels={locale: row.label} if row.label else {})
            for row in result.all()
        ]

    @abstractmethod
    async def _count_products(self, roots: list[Category]) -> dict[str, int]:
        """Count products per root.

        Args:
            roots: Root categories, as read from the database.

        Returns:
            Product count keyed by root category code; roots may be missing.
        """


class ListRootCategoriesWithCountNotIncludingSubCategories(ListRootCategoriesWithCount):
    """Counts the products classified directly in each root category.

    A single search aggregates document counts per category code,
    restricted to the root codes.
    """

    async def _count_products(self, roots: list[Category]) -> dict[str, int]:
        codes = [root.code for root in roots]
        body = {
            "size": 0,
            "query": {"terms": {CATEGORIES_FIELD: codes}},
            "aggs": {
                "categories": {
                    "terms": {
                        "field": CATEGORIES_FIELD,
                        "include": codes,
                        "size": len(codes),
                    }
                }
            },
        }
        response = await self.search_client.search(self.index_name, body)

        buckets = response.get("aggregations", {}).get("categories", {}).get("buckets", [])
        return {bucket["key"]: bucket["doc_count"] for bucket in buckets}


class ListRootCategoriesWithCountIncludingSubCategories(ListRootCategoriesWithCount):
    """Counts the products classified anywhere in each root's tree.

    One search per tree, sent as a single multi-search, counts the
    documents tagged with any code of the tree, so a product classified
    in two sub-categories of the same tree counts once.
    """

    async def _count_products(self, roots: list[Category]) -> dict[str, int]:
        codes_by_root = await self._fetch_tree_codes(roots)

        bodies = [
            {
                "size": 0,
                "track_total_hits": True,
                "query": {
                    "constant_score": {
                        "filter": {"terms": {CATEGORIES_FIELD: codes_by_root[root.code]}}
                    }
                },
            }
            for root in roots
        ]
        responses = await self.search_client.msearch(self.index_name, bodies)
        if len(responses) != len(bodies):
            raise SearchClientError(
                self.index_name,
                f"Multi-search returned {len(responses)} responses for {len(bodies)} searches",
            )

        return {
            root.code: _total_hits(response)
            for root, response in zip(roots, responses)
        }

    async def _fetch_tree_codes(self, roots: list[Category]) -> dict[str, list[str]]:
        """Get the codes of every category of each tree, keyed by root code."""
        code_by_id = {root.id: root.code for root in roots}
        query = (
            select(CategoryModel.root, CategoryModel.code)
            .where(CategoryModel.root.in_(list(code_by_id)))
            .order_by(CategoryModel.root, CategoryModel.lft)
        )
        result = await self.session.execute(query)

        codes_by_root: dict[str, list[str]] = defaultdict(list)
        for root in roots:
            codes_by_root[root.code].append(root.code)
        for row in result.all():
            root_code = code_by_id.get(row.root)
            if root_code is not None and row.code != root_code:
                codes_by_root[root_code].append(row.code)
        return dict(codes_by_root)


def _total_hits(response: dict[str, Any]) -> int:
    """Read the total hit count of a search response."""
    total = response.get("hits", {}).get("total", 0)
    if isinstance(total, dict):
        return int(total.get("value", 0))
    return int(total)


def build_list_root_categories_with_count(
    session: AsyncSession,
    search_client: SearchClient,
    config: Settings = settings,
) -> ListRootCategoriesWithCount:
    """Build the root category query configured for the application.

    Args:
        session: Async SQLAlchemy session.
        search_client: Search index client.
        config: Settings selecting the counting strategy and index.

    Returns:
        Query counting sub-categories or not, per configuration.
    """
    query_class: type[ListRootCategoriesWithCount]
    if config.category_tree_count_sub_categories:
        query_class = ListRootCategoriesWithCountIncludingSubCategories
    else:
        query_class = ListRootCategoriesWithCountNotIncludingSubCategories
    return query_class(session, search_client, config.product_index_name)
