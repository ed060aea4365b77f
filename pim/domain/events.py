"""Domain events for the product catalog.

Every change made through the Product aggregate records one of these
events. Collected events form the product's version history.
"""

from dataclasses import dataclass
from typing import Any, ClassVar

from pim.domain.base import DomainEvent


# ============================================================================
# Product Events
# ============================================================================


@dataclass(frozen=True)
class ProductValueAdded(DomainEvent):
    """Event raised when a value is set on a product."""

    event_type: ClassVar[str] = "product.value_added"

    product_id: str = ""
    value_key: str = ""
    attribute_code: str = ""
    replaced: bool = False

    def _payload(self) -> dict[str, Any]:
        """Get event-specific payload."""
        return {
            "product_id": self.product_id,
            "value_key": self.value_key,
            "attribute_code": self.attribute_code,
            "replaced": self.replaced,
        }


@dataclass(frozen=True)
class ProductValueRemoved(DomainEvent):
    """Event raised when a value is removed from a product."""

    event_type: ClassVar[str] = "product.value_removed"

    product_id: str = ""
    value_key: str = ""
    attribute_code: str = ""

    def _payload(self) -> dict[str, Any]:
        """Get event-specific payload."""
        return {
            "product_id": self.product_id,
            "value_key": self.value_key,
            "attribute_code": self.attribute_code,
        }


@dataclass(frozen=True)
class ProductFamilyChanged(DomainEvent):
    """Event raised when a product's family changes."""

    event_type: ClassVar[str] = "product.family_changed"

    product_id: str = ""
    previous_family: str | None = None
    new_family: str | None = None

    def _payload(self) -> dict[str, Any]:
        """Get event-specific payload."""
        return {
            "product_id": self.product_id,
            "previous_family": self.previous_family,
            "new_family": self.new_family,
        }


@dataclass(frozen=True)
class ProductStatusChanged(DomainEvent):
    """Event raised when a product is enabled or disabled."""

    event_type: ClassVar[str] = "product.status_changed"

    product_id: str = ""
    enabled: bool = True

    def _payload(self) -> dict[str, Any]:
        """Get event-specific payload."""
        return {"product_id": self.product_id, "enabled": self.enabled}


@dataclass(frozen=True)
class ProductCategorized(DomainEvent):
    """Event raised when a product is put into a category."""

    event_type: ClassVar[str] = "product.category_added"

    product_id: str = ""
    category_code: str = ""

    def _payload(self) -> dict[str, Any]:
        """Get event-specific payload."""
        return {"product_id": self.product_id, "category_code": self.category_code}


@dataclass(frozen=True)
class ProductUncategorized(DomainEvent):
    """Event raised when a product is taken out of a category."""

    event_type: ClassVar[str] = "product.category_removed"

    product_id: str = ""
    category_code: str = ""

    def _payload(self) -> dict[str, Any]:
        """Get event-specific payload."""
        return {"product_id": self.product_id, "category_code": self.category_code}


# ============================================================================
# Event Registry
# ============================================================================


EVENT_REGISTRY: dict[str, type[DomainEvent]] = {
    ProductValueAdded.event_type: ProductValueAdded,
    ProductValueRemoved.event_type: ProductValueRemoved,
    ProductFamilyChanged.event_type: ProductFamilyChanged,
    ProductStatusChanged.event_type: ProductStatusChanged,
    ProductCategorized.event_type: ProductCategorized,
    ProductUncategorized.event_type: ProductUncategorized,
}


def get_event_class(event_type: str) -> type[DomainEvent] | None:
    """Get event class by event type string.

    Args:
        event_type: Event type identifier (e.g., 'product.value_added').

    Returns:
        Event class if found, None otherwise.
    """
    return EVENT_REGISTRY.get(event_type)
