"""Tests for the sample catalog generator."""

import pytest

from pim.catalog.generator import BRANDS, GeneratorConfig, ProductGenerator


class TestGeneratorConfig:
    """Tests for GeneratorConfig."""

    def test_small_config(self) -> None:
        """Small config creates reasonable defaults."""
        config = GeneratorConfig.small()
        assert config.products_per_category == 5
        assert config.seed == 42

    def test_full_config(self) -> None:
        """Full config creates larger catalog."""
        config = GeneratorConfig.full()
        assert config.products_per_category > GeneratorConfig.small().products_per_category

    def test_preset_sizes(self) -> None:
        """Presets generate a fixed number of products over the sample taxonomy."""
        assert ProductGenerator(GeneratorConfig.small()).expected_count == 45
        assert ProductGenerator(GeneratorConfig.full()).expected_count == 180


class TestProductGenerator:
    """Tests for ProductGenerator."""

    @pytest.fixture
    def generator(self) -> ProductGenerator:
        """Create generator with small config."""
        return ProductGenerator(GeneratorConfig.small())

    def test_generate_expected_count(self, generator: ProductGenerator) -> None:
        """Generator produces products for every master leaf."""
        products = generator.generate_list()
        assert len(products) == generator.expected_count
        assert len(products) > 0

    def test_deterministic(self) -> None:
        """Same seed gives the same catalog."""
        first = ProductGenerator(GeneratorConfig.small()).generate_list()
        second = ProductGenerator(GeneratorConfig.small()).generate_list()

        assert [p.id for p in first] == [p.id for p in second]
        assert [p.label("en_US") for p in first] == [p.label("en_US") for p in second]

    def test_different_seed(self) -> None:
        """Another seed gives other products."""
        first = ProductGenerator(GeneratorConfig(seed=1, products_per_category=2))
        second = ProductGenerator(GeneratorConfig(seed=2, products_per_category=2))

        assert [p.id for p in first.generate()] != [p.id for p in second.generate()]

    def test_unique_identifiers(self, generator: ProductGenerator) -> None:
        """Every product has its own identifier."""
        identifiers = [p.get_identifier().data for p in generator.generate()]
        assert len(identifiers) == len(set(identifiers))

    def test_products_in_master_leaves(self, generator: ProductGenerator) -> None:
        """Products are classified in a master leaf first."""
        for product in generator.generate():
            category = product.categories[0]
            assert category.root.code == "master"
            assert not category.children

    def test_cross_classification(self, generator: ProductGenerator) -> None:
        """Some products also sit in another tree."""
        products = generator.generate_list()
        crossed = [p for p in products if len(p.categories) > 1]
        assert crossed
        assert all(p.categories[1].root.code != "master" for p in crossed)

    def test_label_from_name(self, generator: ProductGenerator) -> None:
        """Products are labelled by their localized name."""
        product = generator.generate_list()[0]
        label = product.label("en_US")

        assert label != product.id
        assert label.split(" ")[0] in BRANDS
        assert product.label("fr_FR") != label

    def test_family_attributes_have_values(self, generator: ProductGenerator) -> None:
        """Products have values for the attributes of their family."""
        for product in generator.generate():
            codes = {a.code for a in product.attributes}
            assert set(product.family.attribute_codes) <= codes

    def test_accessories_family(self, generator: ProductGenerator) -> None:
        """Accessory leaves get the accessories family."""
        families = {
            p.categories[0].parent.code: p.family.code for p in generator.generate()
        }
        assert families["master_accessories"] == "accessories"
        assert families["master_men"] == "clothing"

    def test_values_keyed_by_context(self, generator: ProductGenerator) -> None:
        """Localizable and scopable values get their context in the key."""
        product = next(p for p in generator.generate() if p.family.code == "clothing")
        keys = set(product.get_values())

        assert {"sku", "name_en_US", "name_fr_FR"} <= keys
        assert "description_en_US_ecommerce" in keys
        assert "release_date_print" in keys

    def test_ordered_groups_other_last(self, generator: ProductGenerator) -> None:
        """The "other" group holding the identifier comes last."""
        groups = generator.generate_list()[0].ordered_groups()
        assert groups[-1].code == "other"
        assert [g.code for g in groups[:-1]] == sorted(
            (g.code for g in groups[:-1]),
            key=lambda code: generator.groups[code].sort_order,
        )

    def test_no_pending_events(self, generator: ProductGenerator) -> None:
        """Generated products come without recorded events."""
        product = generator.generate_list()[0]
        assert product.collect_events() == []
