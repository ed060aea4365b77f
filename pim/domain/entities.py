"""Domain entities for the product catalog.

Entities are catalog objects with identity: attribute groups,
attributes, families, categories and the Product aggregate that owns
its values. Everything here is plain in-memory state; persistence is
handled outside the domain layer.
"""

from collections.abc import Iterator
from dataclasses import dataclass, field
from datetime import date
from decimal import Decimal
from functools import cmp_to_key
from typing import Any
from uuid import uuid4

from pim.domain.base import AggregateRoot, CodedEntity, ValueObject
from pim.domain.events import (
    ProductCategorized,
    ProductFamilyChanged,
    ProductStatusChanged,
    ProductUncategorized,
    ProductValueAdded,
    ProductValueRemoved,
)
from pim.domain.exceptions import MissingIdentifierError
from pim.domain.value_objects import AttributeType, Metric, Price, value_key


# ============================================================================
# Attribute Groups & Attributes
# ============================================================================


@dataclass(eq=False)
class AttributeGroup(CodedEntity):
    """Virtual group used to order attributes for display.

    A negative sort order marks the catch-all "other" group, which is
    always displayed after the regular groups.

    Attributes:
        code: Unique group code.
        sort_order: Display position of the group.
        labels: Group label per locale code.
    """

    sort_order: int = 0
    labels: dict[str, str] = field(default_factory=dict)

    @property
    def is_other(self) -> bool:
        """Check if this is a catch-all group sorted last."""
        return self.sort_order < 0


@dataclass(eq=False)
class Attribute(CodedEntity):
    """A typed field definable on products (e.g. "color", "sku").

    Attributes:
        code: Unique attribute code.
        type: Attribute type tag.
        localizable: Whether values vary by locale.
        scopable: Whether values vary by channel.
        group: Virtual group the attribute is displayed in.
        labels: Attribute label per locale code.
    """

    type: AttributeType | str = AttributeType.TEXT
    localizable: bool = False
    scopable: bool = False
    group: AttributeGroup | None = None
    labels: dict[str, str] = field(default_factory=dict)

    @property
    def is_identifier(self) -> bool:
        """Check if the attribute identifies products."""
        return self.type == AttributeType.IDENTIFIER


# ============================================================================
# Families
# ============================================================================


@dataclass(eq=False)
class Family(CodedEntity):
    """A named set of attributes applicable to a class of products.

    Attributes:
        code: Unique family code.
        attributes: Attributes of the family, in definition order.
        attribute_as_label: Attribute whose value labels the products.
        labels: Family label per locale code.
    """

    attributes: list[Attribute] = field(default_factory=list)
    attribute_as_label: Attribute | None = None
    labels: dict[str, str] = field(default_factory=dict)

    def __post_init__(self) -> None:
        unique: dict[str, Attribute] = {}
        for attribute in self.attributes:
            unique.setdefault(attribute.code, attribute)
        self.attributes = list(unique.values())

    @property
    def attribute_codes(self) -> list[str]:
        """Get codes of the family attributes, in order."""
        return [attribute.code for attribute in self.attributes]

    def has_attribute(self, attribute: Attribute) -> bool:
        """Check if the family contains an attribute.

        Args:
            attribute: Attribute to look for.

        Returns:
            True if an attribute with the same code belongs to the family.
        """
        return attribute in self.attributes

    def add_attribute(self, attribute: Attribute) -> None:
        """Add an attribute to the family, ignoring duplicates."""
        if not self.has_attribute(attribute):
            self.attributes.append(attribute)

    def remove_attribute(self, attribute: Attribute) -> None:
        """Remove an attribute from the family.

        The label attribute is unset when it is the one removed.
        """
        self.attributes = [a for a in self.attributes if a != attribute]
        if self.attribute_as_label == attribute:
            self.attribute_as_label = None


# ============================================================================
# Categories
# ============================================================================


@dataclass(eq=False)
class Category(CodedEntity):
    """A node of a category tree.

    Categories classify products; a product can sit in many categories
    and the category does not own it. A category without parent is the
    root of its tree.

    Attributes:
        code: Unique category code.
        id: Database identifier, None until persisted.
        labels: Category label per locale code.
        parent: Parent category, None for a root.
        children: Direct sub-categories.
    """

    id: int | None = None
    labels: dict[str, str] = field(default_factory=dict)
    parent: "Category | None" = field(default=None, repr=False)
    children: list["Category"] = field(default_factory=list, repr=False)

    def label(self, locale: str | None = None) -> str:
        """Get the category label.

        Args:
            locale: Locale code; when omitted the first label is used.

        Returns:
            The label, or ``[code]`` when no label is available.
        """
        if locale is not None:
            label = self.labels.get(locale)
        else:
            label = next(iter(self.labels.values()), None)
        return label or f"[{self.code}]"

    @property
    def title(self) -> str:
        """Default display title of the category."""
        return self.label()

    @property
    def is_root(self) -> bool:
        """Check if the category is the root of its tree."""
        return self.parent is None

    @property
    def root(self) -> "Category":
        """Get the root of the category's tree."""
        node = self
        while node.parent is not None:
            node = node.parent
        return node

    @property
    def level(self) -> int:
        """Get depth in the tree (root = 1)."""
        return len(self.path)

    @property
    def path(self) -> list["Category"]:
        """Get categories from the root down to this one."""
        nodes: list[Category] = []
        node: Category | None = self
        while node is not None:
            nodes.append(node)
            node = node.parent
        return list(reversed(nodes))

    def add_child(self, child: "Category") -> "Category":
        """Attach a sub-category.

        Args:
            child: Category to attach.

        Returns:
            The attached child.
        """
        child.parent = self
        if child not in self.children:
            self.children.append(child)
        return child

    def descendants(self) -> Iterator["Category"]:
        """Iterate over all sub-categories, depth first.

        Yields:
            Each descendant, parents before their children.
        """
        for child in self.children:
            yield child
            yield from child.descendants()

    def tree_codes(self) -> list[str]:
        """Get the codes of this category and all its descendants."""
        return [self.code] + [category.code for category in self.descendants()]


# ============================================================================
# Values
# ============================================================================


@dataclass(frozen=True)
class Value(ValueObject):
    """An attribute's data for one product.

    Values are immutable; changing a product's data means replacing the
    value. Locale and scope are only meaningful when the attribute is
    localizable or scopable.

    Attributes:
        attribute: Attribute the value belongs to.
        data: Type-dependent payload, None for an empty value.
        locale: Locale code for localizable attributes.
        scope: Channel code for scopable attributes.
    """

    attribute: Attribute
    data: Any = None
    locale: str | None = None
    scope: str | None = None

    @property
    def key(self) -> str:
        """Key the owning product exposes this value under."""
        return value_key(
            self.attribute.code,
            self.locale,
            self.scope,
            localizable=self.attribute.localizable,
            scopable=self.attribute.scopable,
        )

    @property
    def is_empty(self) -> bool:
        """Check if the value holds no data."""
        return self.data is None or self.data == "" or self.data == ()

    def normalized_data(self) -> Any:
        """Get the data in a JSON-friendly form."""
        return self.data

    def __str__(self) -> str:
        return "" if self.data is None else str(self.data)


@dataclass(frozen=True)
class ScalarValue(Value):
    """Value holding a string, number or boolean."""

    data: str | int | float | Decimal | bool | None = None

    def normalized_data(self) -> Any:
        if isinstance(self.data, Decimal):
            return str(self.data)
        return self.data


@dataclass(frozen=True)
class DateValue(Value):
    """Value holding a calendar date."""

    data: date | None = None

    def normalized_data(self) -> Any:
        return None if self.data is None else self.data.isoformat()


@dataclass(frozen=True)
class MetricValue(Value):
    """Value holding a measured amount and unit."""

    data: Metric | None = None

    def normalized_data(self) -> Any:
        return None if self.data is None else self.data.to_dict()


@dataclass(frozen=True)
class PriceCollectionValue(Value):
    """Value holding one price per currency, ordered by currency."""

    data: tuple[Price, ...] = ()

    def normalized_data(self) -> Any:
        return [price.to_dict() for price in self.data]

    def __str__(self) -> str:
        return ", ".join(str(price) for price in self.data)


@dataclass(frozen=True)
class OptionValue(Value):
    """Value holding the code of one option."""

    data: str | None = None


@dataclass(frozen=True)
class OptionsValue(Value):
    """Value holding the codes of several options."""

    data: tuple[str, ...] = ()

    def normalized_data(self) -> Any:
        return list(self.data)

    def __str__(self) -> str:
        return ", ".join(self.data)


# ============================================================================
# Attribute Group Ordering
# ============================================================================


def compare_group_sort_orders(first: int, second: int) -> int:
    """Three-way comparison of attribute group sort orders.

    Regular groups sort ascending; groups with a negative sort order
    go after every regular group.

    Args:
        first: Sort order of the first group.
        second: Sort order of the second group.

    Returns:
        Negative, zero or positive like a classic comparator.
    """
    if first == second:
        return 0
    if first < second and first < 0:
        return 1
    if first > second and second < 0:
        return -1
    return -1 if first < second else 1


_group_sort_key = cmp_to_key(
    lambda first, second: compare_group_sort_orders(first.sort_order, second.sort_order)
)


# ============================================================================
# Product Aggregate
# ============================================================================


@dataclass(eq=False, kw_only=True)
class Product(AggregateRoot[str]):
    """Product aggregate root.

    The product owns an unordered collection of values, at most one per
    value key, and exposes derived read views over them: the keyed value
    map, its identifier, its label and its ordered attribute groups.

    Attributes:
        id: Unique product identifier.
        values: Values of the product.
        family: Family of the product, if any.
        categories: Categories the product is classified in.
        enabled: Whether the product is enabled.
    """

    id: str = field(default_factory=lambda: str(uuid4()))
    values: list[Value] = field(default_factory=list)
    family: Family | None = None
    categories: list[Category] = field(default_factory=list)
    enabled: bool = True

    def __post_init__(self) -> None:
        # One value per key; a later value replaces an earlier one.
        keyed: dict[str, Value] = {}
        for value in self.values:
            keyed[value.key] = value
        self.values = list(keyed.values())

        # Categories form a set; the first occurrence of a code is kept.
        unique: dict[str, Category] = {}
        for category in self.categories:
            unique.setdefault(category.code, category)
        self.categories = list(unique.values())

    # -------------------------------------------------------------------------
    # Query Methods
    # -------------------------------------------------------------------------

    def get_values(self) -> dict[str, Value]:
        """Get the values keyed by attribute code, locale and scope.

        Returns:
            Mapping of value key to value, e.g.
            ``{"sku": ..., "name_en_US": ..., "description_en_US_ecommerce": ...}``.
        """
        return {value.key: value for value in self.values}

    def get_value(
        self,
        attribute_code: str,
        locale: str | None = None,
        scope: str | None = None,
    ) -> Value | None:
        """Find a value by attribute code and context.

        Locale and scope are ignored for attributes that do not vary by
        them.

        Args:
            attribute_code: Attribute code.
            locale: Locale code for localizable attributes.
            scope: Channel code for scopable attributes.

        Returns:
            The value if found, None otherwise.
        """
        for value in self.values:
            if value.attribute.code != attribute_code:
                continue
            key = value_key(
                attribute_code,
                locale,
                scope,
                localizable=value.attribute.localizable,
                scopable=value.attribute.scopable,
            )
            if value.key == key:
                return value
        return None

    def get_identifier(self) -> Value:
        """Get the value of the identifier attribute.

        Returns:
            The identifier value.

        Raises:
            MissingIdentifierError: If no value belongs to an identifier attribute.
        """
        for value in self.values:
            if value.attribute.is_identifier:
                return value
        raise MissingIdentifierError(self.id)

    @property
    def attributes(self) -> list[Attribute]:
        """Get the distinct attributes the product has values for."""
        unique: dict[str, Attribute] = {}
        for value in self.values:
            unique.setdefault(value.attribute.code, value.attribute)
        return list(unique.values())

    def ordered_groups(self) -> list[AttributeGroup]:
        """Get the groups of the product's attributes in display order.

        Groups sort by ascending sort order; groups with a negative sort
        order (the "other" group) come last.

        Returns:
            Distinct attribute groups, ordered.
        """
        unique: dict[str, AttributeGroup] = {}
        for attribute in self.attributes:
            if attribute.group is not None:
                unique.setdefault(attribute.group.code, attribute.group)
        return sorted(unique.values(), key=_group_sort_key)

    def label(self, locale: str | None = None, scope: str | None = None) -> Any:
        """Get the product label.

        The label is the data of the family's label attribute when that
        value exists and is not empty; the product id otherwise.

        Args:
            locale: Locale code for a localizable label attribute.
            scope: Channel code for a scopable label attribute.

        Returns:
            Label data or product id.
        """
        if self.family is not None and self.family.attribute_as_label is not None:
            value = self.get_value(self.family.attribute_as_label.code, locale, scope)
            if value is not None and value.data:
                return value.data
        return self.id

    def category_titles_as_string(self) -> str:
        """Get the titles of the product categories, comma separated."""
        return ", ".join(category.title for category in self.categories)

    @property
    def is_enabled(self) -> bool:
        """Check if the product is enabled."""
        return self.enabled

    def is_attribute_removable(self, attribute: Attribute) -> bool:
        """Check if an attribute can be removed from the product.

        Identifier attributes are never removable, and neither are the
        attributes the product's family requires.

        Args:
            attribute: Attribute to check.

        Returns:
            True if the attribute's values may be removed.
        """
        if attribute.is_identifier:
            return False
        if self.family is None:
            return True
        return not self.family.has_attribute(attribute)

    # -------------------------------------------------------------------------
    # Mutations
    # -------------------------------------------------------------------------

    def add_value(self, value: Value) -> Value | None:
        """Set a value on the product.

        A value already present under the same key is replaced.

        Args:
            value: Value to set.

        Returns:
            The replaced value, if any.
        """
        replaced: Value | None = None
        for index, existing in enumerate(self.values):
            if existing.key == value.key:
                replaced = existing
                self.values[index] = value
                break
        else:
            self.values.append(value)

        self._touch()
        self._record_event(
            ProductValueAdded(
                aggregate_id=self.id,
                aggregate_type="Product",
                product_id=self.id,
                value_key=value.key,
                attribute_code=value.attribute.code,
                replaced=replaced is not None,
            )
        )
        return replaced

    def remove_value(self, value: Value) -> bool:
        """Remove the value stored under the same key as ``value``.

        Args:
            value: Value to remove.

        Returns:
            True if a value was removed.
        """
        remaining = [v for v in self.values if v.key != value.key]
        if len(remaining) == len(self.values):
            return False

        self.values = remaining
        self._touch()
        self._record_event(
            ProductValueRemoved(
                aggregate_id=self.id,
                aggregate_type="Product",
                product_id=self.id,
                value_key=value.key,
                attribute_code=value.attribute.code,
            )
        )
        return True

    def set_family(self, family: Family | None) -> None:
        """Change the product family."""
        previous = self.family
        if previous == family:
            return

        self.family = family
        self._touch()
        self._record_event(
            ProductFamilyChanged(
                aggregate_id=self.id,
                aggregate_type="Product",
                product_id=self.id,
                previous_family=previous.code if previous else None,
                new_family=family.code if family else None,
            )
        )

    def set_enabled(self, enabled: bool) -> None:
        """Enable or disable the product."""
        if self.enabled == enabled:
            return

        self.enabled = enabled
        self._touch()
        self._record_event(
            ProductStatusChanged(
                aggregate_id=self.id,
                aggregate_type="Product",
                product_id=self.id,
                enabled=enabled,
            )
        )

    def add_category(self, category: Category) -> None:
        """Classify the product in a category, ignoring duplicates."""
        if category in self.categories:
            return

        self.categories.append(category)
        self._touch()
        self._record_event(
            ProductCategorized(
                aggregate_id=self.id,
                aggregate_type="Product",
                product_id=self.id,
                category_code=category.code,
            )
        )

    def remove_category(self, category: Category) -> None:
        """Take the product out of a category."""
        if category not in self.categories:
            return

        self.categories = [c for c in self.categories if c != category]
        self._touch()
        self._record_event(
            ProductUncategorized(
                aggregate_id=self.id,
                aggregate_type="Product",
                product_id=self.id,
                category_code=category.code,
            )
        )

    def __str__(self) -> str:
        # Without a locale, any non-empty label value names the product.
        if self.family is not None and self.family.attribute_as_label is not None:
            code = self.family.attribute_as_label.code
            for value in self.values:
                if value.attribute.code == code and value.data:
                    return str(value.data)
        return str(self.label())
