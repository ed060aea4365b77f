"""Product search index normalization.

Turns Product aggregates into the documents stored in the product
search index. The category tree queries count these documents through
their ``categories`` field.
"""

from collections.abc import Iterable
from typing import Any

import structlog

from pim.domain.entities import Product

logger = structlog.get_logger()

# Mappings of the product index; category codes must be exact keywords
# for the terms queries and aggregations to match them.
PRODUCT_INDEX_MAPPINGS: dict[str, Any] = {
    "properties": {
        "id": {"type": "keyword"},
        "identifier": {"type": "keyword"},
        "family": {"type": "keyword"},
        "enabled": {"type": "boolean"},
        "categories": {"type": "keyword"},
        "label": {"type": "object", "dynamic": True},
        "values": {"type": "object", "enabled": False},
    }
}


class ProductIndexNormalizer:
    """Normalizes products into search index documents.

    Example usage:
        normalizer = ProductIndexNormalizer(locales=["en_US", "fr_FR"])
        document = normalizer.normalize(product)
    """

    def __init__(self, locales: Iterable[str] = ("en_US",), scope: str | None = None) -> None:
        """Initialize normalizer.

        Args:
            locales: Locales to index the product label in.
            scope: Channel used to resolve a scopable label attribute.
        """
        self.locales = list(locales)
        self.scope = scope

    def normalize(self, product: Product) -> dict[str, Any]:
        """Normalize one product.

        Args:
            product: Product to normalize.

        Returns:
            Search document.

        Raises:
            MissingIdentifierError: If the product has no identifier value.
        """
        identifier = product.get_identifier()
        return {
            "id": product.id,
            "identifier": identifier.data,
            "family": product.family.code if product.family else None,
            "enabled": product.is_enabled,
            "categories": [category.code for category in product.categories],
            "label": {
                locale: str(product.label(locale, self.scope)) for locale in self.locales
            },
            "values": {
                key: value.normalized_data()
                for key, value in sorted(product.get_values().items())
            },
        }

    def normalize_all(self, products: Iterable[Product]) -> list[dict[str, Any]]:
        """Normalize several products.

        Raises:
            MissingIdentifierError: If any product has no identifier value.
        """
        documents = [self.normalize(product) for product in products]
        logger.debug("Products normalized for indexing", count=len(documents))
        return documents
