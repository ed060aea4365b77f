"""Domain layer - Catalog entities, values, domain events.

This module exports the core building blocks of the product catalog:

- **Entities**: Objects with identity (Product, Attribute, Family, Category)
- **Values**: Immutable attribute data held by products
- **Value Objects**: Attribute type tags, metrics and prices
- **Domain Events**: Changes recorded by the Product aggregate
- **Exceptions**: Domain-specific errors and invariant violations

Example usage:
    from pim.domain import Attribute, AttributeType, Product, ScalarValue

    sku = Attribute("sku", type=AttributeType.IDENTIFIER)
    product = Product(values=[ScalarValue(sku, "SKU-001")])

    print(product.get_identifier().data)  # SKU-001
"""

# Base classes
from pim.domain.base import AggregateRoot, CodedEntity, DomainEvent, Entity, ValueObject

# Entities
from pim.domain.entities import (
    Attribute,
    AttributeGroup,
    Category,
    DateValue,
    Family,
    MetricValue,
    OptionsValue,
    OptionValue,
    PriceCollectionValue,
    Product,
    ScalarValue,
    Value,
    compare_group_sort_orders,
)

# Domain Events
from pim.domain.events import (
    EVENT_REGISTRY,
    ProductCategorized,
    ProductFamilyChanged,
    ProductStatusChanged,
    ProductUncategorized,
    ProductValueAdded,
    ProductValueRemoved,
    get_event_class,
)

# Exceptions
from pim.domain.exceptions import (
    DomainError,
    InvalidValueDataError,
    MissingIdentifierError,
    ProductError,
    UnsupportedAttributeTypeError,
    ValueCreationError,
)

# Value Objects
from pim.domain.value_objects import AttributeType, Metric, Price, value_key

__all__ = [
    # Base
    "AggregateRoot",
    "CodedEntity",
    "DomainEvent",
    "Entity",
    "ValueObject",
    # Entities
    "Attribute",
    "AttributeGroup",
    "Category",
    "Family",
    "Product",
    # Values
    "DateValue",
    "MetricValue",
    "OptionValue",
    "OptionsValue",
    "PriceCollectionValue",
    "ScalarValue",
    "Value",
    # Ordering
    "compare_group_sort_orders",
    # Events
    "EVENT_REGISTRY",
    "ProductCategorized",
    "ProductFamilyChanged",
    "ProductStatusChanged",
    "ProductUncategorized",
    "ProductValueAdded",
    "ProductValueRemoved",
    "get_event_class",
    # Exceptions
    "DomainError",
    "InvalidValueDataError",
    "MissingIdentifierError",
    "ProductError",
    "UnsupportedAttributeTypeError",
    "ValueCreationError",
    # Value Objects
    "AttributeType",
    "Metric",
    "Price",
    "value_key",
]
