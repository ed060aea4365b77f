"""Product Catalog.

Provides category trees with product counts, product value creation,
search indexing and sample catalog generation.
"""

from pim.catalog.category_tree import (
    ListRootCategoriesWithCount,
    ListRootCategoriesWithCountIncludingSubCategories,
    ListRootCategoriesWithCountNotIncludingSubCategories,
    RootCategory,
    build_list_root_categories_with_count,
)
from pim.catalog.generator import GeneratorConfig, ProductGenerator
from pim.catalog.indexing import PRODUCT_INDEX_MAPPINGS, ProductIndexNormalizer
from pim.catalog.models import CategoryModel, CategoryTranslationModel
from pim.catalog.repository import CategoryRepository
from pim.catalog.taxonomy import TaxonomyParser
from pim.catalog.value_factory import (
    ChainedValueFactory,
    ValueFactory,
    default_value_factory,
)

__all__ = [
    # Category tree
    "ListRootCategoriesWithCount",
    "ListRootCategoriesWithCountIncludingSubCategories",
    "ListRootCategoriesWithCountNotIncludingSubCategories",
    "RootCategory",
    "build_list_root_categories_with_count",
    # Taxonomy
    "TaxonomyParser",
    # Models
    "CategoryModel",
    "CategoryTranslationModel",
    # Repository
    "CategoryRepository",
    # Values
    "ChainedValueFactory",
    "ValueFactory",
    "default_value_factory",
    # Indexing
    "PRODUCT_INDEX_MAPPINGS",
    "ProductIndexNormalizer",
    # Generator
    "GeneratorConfig",
    "ProductGenerator",
]
