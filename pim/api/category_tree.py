"""Category tree API endpoints.

Provides the list of category tree roots with their product counts.
"""

from typing import Annotated

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from pim.api.schemas import ErrorResponse, RootCategorySchema
from pim.catalog.category_tree import (
    ListRootCategoriesWithCount,
    build_list_root_categories_with_count,
)
from pim.infrastructure.database import get_session
from pim.infrastructure.search_client import SearchClient, get_search_client

router = APIRouter(prefix="/category-tree", tags=["Category tree"])


# ============================================================================
# Dependencies
# ============================================================================


def get_list_root_categories_query(
    session: Annotated[AsyncSession, Depends(get_session)],
    search_client: Annotated[SearchClient, Depends(get_search_client)],
) -> ListRootCategoriesWithCount:
    """Get the root category query configured for the application."""
    return build_list_root_categories_with_count(session, search_client)


# ============================================================================
# Endpoints
# ============================================================================


@router.get(
    "/roots",
    response_model=list[RootCategorySchema],
    responses={
        401: {"model": ErrorResponse},
        502: {"model": ErrorResponse},
    },
    summary="List category tree roots",
    description="List every root category with the number of products in its tree.",
)
async def list_root_categories(
    query: Annotated[ListRootCategoriesWithCount, Depends(get_list_root_categories_query)],
    locale: Annotated[str, Query(min_length=2, description="Locale of the labels")] = "en_US",
    selected: Annotated[
        int | None, Query(description="Id of the root category to expand")
    ] = None,
) -> list[RootCategorySchema]:
    """List root categories with product counts.

    Roots are ordered by code. Roots without products are listed with a
    count of zero.

    Args:
        query: Root category query.
        locale: Locale of the category labels.
        selected: Id of the root to flag as selected.

    Returns:
        Root categories with counts.
    """
    roots = await query.list(locale, root_category_id_to_expand=selected)
    return [RootCategorySchema.from_root(root, locale) for root in roots]
