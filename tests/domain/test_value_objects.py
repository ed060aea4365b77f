"""Tests for domain value objects and events."""

from dataclasses import FrozenInstanceError
from decimal import Decimal

import pytest

from pim.domain import AttributeType, Metric, Price, value_key
from pim.domain.events import (
    EVENT_REGISTRY,
    ProductCategorized,
    ProductValueAdded,
    get_event_class,
)


class TestAttributeType:
    """Tests for AttributeType."""

    def test_compares_to_plain_string(self) -> None:
        """Members equal their string tag."""
        assert AttributeType.PRICE_COLLECTION == "price_collection"
        assert str(AttributeType.SIMPLESELECT) == "simpleselect"

    def test_lookup_by_tag(self) -> None:
        """Members can be looked up by tag."""
        assert AttributeType("metric") is AttributeType.METRIC

    def test_unknown_tag(self) -> None:
        """Unknown tags are rejected."""
        with pytest.raises(ValueError):
            AttributeType("reference_data")


class TestMetric:
    """Tests for Metric."""

    def test_to_dict(self) -> None:
        """Amount is serialized as string."""
        metric = Metric(amount=Decimal("1.250"), unit="KILOGRAM")
        assert metric.to_dict() == {"amount": "1.250", "unit": "KILOGRAM"}
        assert str(metric) == "1.250 KILOGRAM"

    def test_immutable(self) -> None:
        """Metrics cannot be changed."""
        metric = Metric(amount=Decimal("1"), unit="GRAM")
        with pytest.raises(FrozenInstanceError):
            metric.unit = "KILOGRAM"  # type: ignore

    def test_equality(self) -> None:
        """Metrics with the same amount and unit are equal."""
        assert Metric(Decimal("1.0"), "GRAM") == Metric(Decimal("1.0"), "GRAM")


class TestPrice:
    """Tests for Price."""

    def test_to_dict(self) -> None:
        """Amount is serialized as string."""
        assert Price(Decimal("19.99"), "EUR").to_dict() == {
            "amount": "19.99",
            "currency": "EUR",
        }

    def test_unpriced_currency(self) -> None:
        """A price may have no amount."""
        price = Price(None, "USD")
        assert price.to_dict() == {"amount": None, "currency": "USD"}
        assert str(price) == "USD"


class TestValueKey:
    """Tests for value_key."""

    def test_bare_code(self) -> None:
        """Non-localizable, non-scopable attributes use their code."""
        assert value_key("sku", "en_US", "ecommerce") == "sku"

    def test_localizable_and_scopable(self) -> None:
        """Locale suffix comes first."""
        key = value_key("description", "en_US", "ecommerce", localizable=True, scopable=True)
        assert key == "description_en_US_ecommerce"

    def test_missing_context_kept_empty(self) -> None:
        """A missing locale still adds its separator."""
        assert value_key("name", None, None, localizable=True) == "name_"


class TestDomainEvents:
    """Tests for domain events."""

    def test_to_dict(self) -> None:
        """Events serialize with their payload."""
        event = ProductValueAdded(
            aggregate_id="product-1",
            aggregate_type="Product",
            product_id="product-1",
            value_key="name_en_US",
            attribute_code="name",
        )
        data = event.to_dict()

        assert data["event_type"] == "product.value_added"
        assert data["aggregate_id"] == "product-1"
        assert data["payload"] == {
            "product_id": "product-1",
            "value_key": "name_en_US",
            "attribute_code": "name",
            "replaced": False,
        }

    def test_registry(self) -> None:
        """Event classes are registered by type."""
        assert EVENT_REGISTRY["product.category_added"] is ProductCategorized
        assert get_event_class("product.value_added") is ProductValueAdded
