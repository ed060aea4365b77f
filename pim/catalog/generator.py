"""Sample catalog generator with deterministic seeding.

Generates attribute groups, attributes, families and products
classified in the leaf categories of the sample taxonomy. Product
values are built through the value factories, so generated products
look like products entered by users. Uses seeded random for
reproducibility.
"""

import hashlib
import random
import uuid
from dataclasses import dataclass, field
from decimal import Decimal
from typing import Iterator

from pim.catalog.taxonomy import TaxonomyParser
from pim.catalog.value_factory import ValueFactory, default_value_factory
from pim.domain.entities import Attribute, AttributeGroup, Category, Family, Product
from pim.domain.value_objects import AttributeType


# ============================================================================
# Constants
# ============================================================================

# Synthetic brand names (fictional companies)
BRANDS = [
    "Acme",
    "Contoso",
    "Northwind",
    "Fabrikam",
    "Tailwind",
    "Globex",
]

ADJECTIVES = [
    "Classic", "Urban", "Nova", "Summit", "Breeze",
    "Heritage", "Metro", "Aurora", "Drift", "Atlas",
]

# French labels of the adjectives, for the localized product names
ADJECTIVES_FR = {
    "Classic": "Classique", "Urban": "Urbain", "Nova": "Nova",
    "Summit": "Sommet", "Breeze": "Brise", "Heritage": "Héritage",
    "Metro": "Métro", "Aurora": "Aurore", "Drift": "Dérive", "Atlas": "Atlas",
}

COLORS = ["black", "white", "red", "blue", "green", "navy", "grey"]

MATERIALS = ["cotton", "leather", "wool", "polyester", "linen", "steel"]

CURRENCIES = ["EUR", "USD"]

# Price ranges by top-level branch of the category code (in cents)
PRICE_RANGES: dict[str, tuple[int, int]] = {
    "shoes": (4999, 24999),
    "shirts": (1999, 8999),
    "pants": (2999, 11999),
    "dresses": (3999, 19999),
    "blouses": (2499, 8999),
    "bags": (4999, 49999),
    "watches": (9999, 99999),
    "belts": (1499, 5999),
    "default": (999, 9999),
}

# Attribute group definitions: code -> (sort order, label)
ATTRIBUTE_GROUPS: dict[str, tuple[int, str]] = {
    "marketing": (1, "Marketing"),
    "technical": (2, "Technical"),
    "erp": (3, "ERP"),
    "other": (-1, "Other"),
}


# ============================================================================
# Generator Configuration
# ============================================================================


@dataclass
class GeneratorConfig:
    """Configuration for catalog generation.

    Attributes:
        seed: Random seed for reproducibility.
        products_per_category: Number of products per leaf category.
        locales: Locales of localizable values.
        channels: Channels of scopable values.
        cross_classification_rate: Share of products also put in a
            category of another tree.
        disabled_rate: Share of products generated disabled.
    """

    seed: int = 42
    products_per_category: int = 10
    locales: list[str] = field(default_factory=lambda: ["en_US", "fr_FR"])
    channels: list[str] = field(default_factory=lambda: ["ecommerce", "print"])
    cross_classification_rate: float = 0.3
    disabled_rate: float = 0.1

    @classmethod
    def small(cls) -> "GeneratorConfig":
        """Create config for small catalog (5 products per master leaf, 45 in all).

        Returns:
            Config for small catalog.
        """
        return cls(seed=42, products_per_category=5)

    @classmethod
    def full(cls) -> "GeneratorConfig":
        """Create config for full catalog (20 products per master leaf, 180 in all).

        Returns:
            Config for full catalog.
        """
        return cls(seed=42, products_per_category=20)


# ============================================================================
# Catalog Generator
# ============================================================================


class ProductGenerator:
    """Generates a sample catalog with deterministic seeding.

    Example usage:
        generator = ProductGenerator(GeneratorConfig.small())
        for product in generator.generate():
            print(product.get_identifier().data, product.label("en_US"))
    """

    def __init__(
        self,
        config: GeneratorConfig,
        value_factory: ValueFactory | None = None,
    ) -> None:
        """Initialize generator with configuration.

        Args:
            config: Generator configuration.
            value_factory: Factory building the product values.
        """
        self.config = config
        self.value_factory = value_factory or default_value_factory()
        self.taxonomy = TaxonomyParser()
        self.taxonomy.parse_embedded()

        self.groups = {
            code: AttributeGroup(code, sort_order=sort_order, labels={"en_US": label})
            for code, (sort_order, label) in ATTRIBUTE_GROUPS.items()
        }
        self.attributes = self._build_attributes()
        self.families = self._build_families()

    def _build_attributes(self) -> dict[str, Attribute]:
        definitions = [
            ("sku", AttributeType.IDENTIFIER, False, False, "other"),
            ("name", AttributeType.TEXT, True, False, "marketing"),
            ("description", AttributeType.TEXTAREA, True, True, "marketing"),
            ("price", AttributeType.PRICE_COLLECTION, False, False, "marketing"),
            ("brand", AttributeType.SIMPLESELECT, False, False, "marketing"),
            ("color", AttributeType.SIMPLESELECT, False, False, "technical"),
            ("materials", AttributeType.MULTISELECT, False, False, "technical"),
            ("weight", AttributeType.METRIC, False, False, "technical"),
            ("release_date", AttributeType.DATE, False, True, "erp"),
            ("stock_tracked", AttributeType.BOOLEAN, False, False, "erp"),
            ("warranty_years", AttributeType.NUMBER, False, False, "erp"),
        ]
        return {
            code: Attribute(
                code,
                type=attribute_type,
                localizable=localizable,
                scopable=scopable,
                group=self.groups[group],
                labels={"en_US": code.replace("_", " ").capitalize()},
            )
            for code, attribute_type, localizable, scopable, group in definitions
        }

    def _build_families(self) -> dict[str, Family]:
        a = self.attributes
        return {
            "clothing": Family(
                "clothing",
                attributes=[
                    a["sku"], a["name"], a["description"], a["price"],
                    a["brand"], a["color"], a["materials"], a["release_date"],
                ],
                attribute_as_label=a["name"],
                labels={"en_US": "Clothing"},
            ),
            "accessories": Family(
                "accessories",
                attributes=[
                    a["sku"], a["name"], a["price"], a["brand"],
                    a["weight"], a["warranty_years"], a["stock_tracked"],
                ],
                attribute_as_label=a["name"],
                labels={"en_US": "Accessories"},
            ),
        }

    def _deterministic_seed(self, *args: str | int) -> int:
        """Create deterministic seed from arguments.

        Args:
            args: Values to include in seed.

        Returns:
            Deterministic integer seed.
        """
        data = "|".join(str(a) for a in args)
        hash_bytes = hashlib.md5(data.encode()).digest()
        return int.from_bytes(hash_bytes[:4], "big")

    def _get_price_range(self, category: Category) -> tuple[int, int]:
        for part in reversed(category.code.split("_")):
            if part in PRICE_RANGES:
                return PRICE_RANGES[part]
        return PRICE_RANGES["default"]

    def _get_family(self, category: Category) -> Family:
        parent = category.parent
        if category.root.code == "master" and parent and parent.code == "master_accessories":
            return self.families["accessories"]
        return self.families["clothing"]

    def _generate_sku(self, category: Category, index: int) -> str:
        """Generate SKU for product.

        Args:
            category: Leaf category of the product.
            index: Product index within category.

        Returns:
            SKU string, e.g. ``MEN-SHO-003``.
        """
        parts = [p for p in category.code.split("_") if p != category.root.code][-2:]
        prefix = "-".join(p[:3].upper() for p in parts) or category.code[:3].upper()
        return f"{prefix}-{index:03d}"

    def _set(
        self,
        product: Product,
        code: str,
        data,
        locale: str | None = None,
        scope: str | None = None,
    ) -> None:
        attribute = self.attributes[code]
        product.add_value(self.value_factory.create(attribute, scope, locale, data))

    def _generate_product(
        self,
        category: Category,
        index: int,
        other_leaves: list[Category],
    ) -> Product:
        """Generate a single product.

        Args:
            category: Leaf category of the product.
            index: Product index within category.
            other_leaves: Leaves of the other trees, for cross classification.

        Returns:
            Generated Product.
        """
        rng = random.Random(self._deterministic_seed(self.config.seed, category.code, index))

        sku = self._generate_sku(category, index)
        family = self._get_family(category)
        brand = rng.choice(BRANDS)
        adj = rng.choice(ADJECTIVES)
        noun = category.label("en_US")

        product = Product(
            id=str(uuid.uuid5(uuid.NAMESPACE_URL, f"pim:{self.config.seed}:{sku}")),
            family=family,
            categories=[category],
            enabled=rng.random() >= self.config.disabled_rate,
        )

        self._set(product, "sku", sku)
        self._set(product, "brand", brand.lower())
        for locale in self.config.locales:
            if locale == "fr_FR":
                name = f"{noun} {ADJECTIVES_FR[adj]} {brand}"
            else:
                name = f"{brand} {adj} {noun}"
            self._set(product, "name", name, locale=locale)

        min_price, max_price = self._get_price_range(category)
        cents = (rng.randint(min_price, max_price) // 100) * 100 + 99
        self._set(
            product,
            "price",
            [
                {"amount": Decimal(cents) / 100, "currency": currency}
                for currency in CURRENCIES
            ],
        )

        if family.code == "clothing":
            for locale in self.config.locales:
                for channel in self.config.channels:
                    self._set(
                        product,
                        "description",
                        f"{brand} {adj.lower()} {noun.lower()} ({channel}).",
                        locale=locale,
                        scope=channel,
                    )
            self._set(product, "color", rng.choice(COLORS))
            self._set(product, "materials", rng.sample(MATERIALS, rng.randint(1, 3)))
            for channel in self.config.channels:
                self._set(
                    product,
                    "release_date",
                    f"20{rng.randint(20, 25)}-{rng.randint(1, 12):02d}-{rng.randint(1, 28):02d}",
                    scope=channel,
                )
        else:
            self._set(
                product,
                "weight",
                {"amount": Decimal(rng.randint(50, 2500)) / 1000, "unit": "KILOGRAM"},
            )
            self._set(product, "warranty_years", rng.randint(1, 5))
            self._set(product, "stock_tracked", rng.random() > 0.5)

        if other_leaves and rng.random() < self.config.cross_classification_rate:
            product.add_category(rng.choice(other_leaves))

        product.collect_events()
        return product

    def generate(self) -> Iterator[Product]:
        """Generate all products.

        Products are generated for the leaves of the "master" tree and
        some are also classified in a leaf of another tree.

        Yields:
            Generated Product instances.
        """
        leaves = self.taxonomy.get_leaf_categories()
        master_leaves = [c for c in leaves if c.root.code == "master"]
        other_leaves = [c for c in leaves if c.root.code != "master"]

        for category in master_leaves:
            for i in range(self.config.products_per_category):
                yield self._generate_product(category, i, other_leaves)

    def generate_list(self) -> list[Product]:
        """Generate all products as a list.

        Returns:
            List of generated products.
        """
        return list(self.generate())

    @property
    def expected_count(self) -> int:
        """Get expected number of products.

        Returns:
            Expected product count.
        """
        master_leaves = [
            c for c in self.taxonomy.get_leaf_categories() if c.root.code == "master"
        ]
        return len(master_leaves) * self.config.products_per_category
