"""Tests for product index normalization."""

from decimal import Decimal

import pytest

from pim.catalog.indexing import PRODUCT_INDEX_MAPPINGS, ProductIndexNormalizer
from pim.domain import (
    Attribute,
    AttributeType,
    Category,
    Family,
    MetricValue,
    Metric,
    Product,
    ScalarValue,
)
from pim.domain.exceptions import MissingIdentifierError


@pytest.fixture
def product() -> Product:
    """Create a labelled, classified product."""
    sku = Attribute("sku", type=AttributeType.IDENTIFIER)
    name = Attribute("name", type=AttributeType.TEXT, localizable=True)
    weight = Attribute("weight", type=AttributeType.METRIC)
    return Product(
        id="product-1",
        family=Family("clothing", attributes=[sku, name], attribute_as_label=name),
        categories=[Category("master_men_shoes"), Category("sales_clearance")],
        values=[
            ScalarValue(sku, "SKU-001"),
            ScalarValue(name, "Running shoe", locale="en_US"),
            MetricValue(weight, Metric(Decimal("0.800"), "KILOGRAM")),
        ],
    )


class TestProductIndexNormalizer:
    """Tests for ProductIndexNormalizer."""

    def test_normalize(self, product: Product) -> None:
        """Documents carry identifier, categories and labels."""
        document = ProductIndexNormalizer(locales=["en_US", "fr_FR"]).normalize(product)

        assert document["id"] == "product-1"
        assert document["identifier"] == "SKU-001"
        assert document["family"] == "clothing"
        assert document["enabled"] is True
        assert document["categories"] == ["master_men_shoes", "sales_clearance"]
        assert document["label"] == {"en_US": "Running shoe", "fr_FR": "product-1"}

    def test_values_normalized(self, product: Product) -> None:
        """Values are keyed and JSON friendly."""
        document = ProductIndexNormalizer().normalize(product)

        assert document["values"] == {
            "name_en_US": "Running shoe",
            "sku": "SKU-001",
            "weight": {"amount": "0.800", "unit": "KILOGRAM"},
        }
        assert list(document["values"]) == ["name_en_US", "sku", "weight"]

    def test_product_without_family(self) -> None:
        """Products without family are indexed with a null family."""
        sku = Attribute("sku", type=AttributeType.IDENTIFIER)
        document = ProductIndexNormalizer().normalize(
            Product(id="p", values=[ScalarValue(sku, "SKU-9")], enabled=False)
        )
        assert document["family"] is None
        assert document["enabled"] is False
        assert document["categories"] == []

    def test_missing_identifier_raises(self) -> None:
        """Products without identifier cannot be indexed."""
        with pytest.raises(MissingIdentifierError):
            ProductIndexNormalizer().normalize(Product(id="p"))

    def test_normalize_all(self, product: Product) -> None:
        """Several products are normalized in order."""
        documents = ProductIndexNormalizer().normalize_all([product, product])
        assert [d["id"] for d in documents] == ["product-1", "product-1"]

    def test_categories_mapped_as_keywords(self) -> None:
        """Category codes are exact-match keywords."""
        assert PRODUCT_INDEX_MAPPINGS["properties"]["categories"] == {"type": "keyword"}
