"""API layer module.

Contains FastAPI routers and request/response schemas.
"""

from pim.api.category_tree import router as category_tree_router
from pim.api.health import router as health_router

__all__ = [
    "category_tree_router",
    "health_router",
]
