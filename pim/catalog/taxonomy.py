"""Category tree parser.

Builds category trees from a plain-text taxonomy where every line names
a category code and the label path leading to it.

Taxonomy format example:
    master - Master catalog
    master_men - Master catalog > Men
    master_men_shoes - Master catalog > Men > Shoes
    print - Print catalog
"""

from collections.abc import Iterator
from itertools import count
from pathlib import Path

from pim.catalog.models import CategoryModel, CategoryTranslationModel
from pim.domain.entities import Category


class TaxonomyParser:
    """Parser for category taxonomy files.

    Each line has the format:
        code - Root label > Child label > Grandchild label

    A category's parent is the category whose label path is its own
    path minus the last label. Lines whose parent path is unknown are
    skipped.

    Example usage:
        parser = TaxonomyParser(locale="en_US")
        roots = parser.parse_embedded()
        shoes = parser.get_by_code("master_men_shoes")
    """

    # Sample catalog trees for offline use
    EMBEDDED_TAXONOMY = '''
master - Master catalog
master_men - Master catalog > Men
master_men_shoes - Master catalog > Men > Shoes
master_men_shirts - Master catalog > Men > Shirts
master_men_pants - Master catalog > Men > Pants
master_women - Master catalog > Women
master_women_dresses - Master catalog > Women > Dresses
master_women_shoes - Master catalog > Women > Shoes
master_women_blouses - Master catalog > Women > Blouses
master_accessories - Master catalog > Accessories
master_accessories_bags - Master catalog > Accessories > Bags
master_accessories_watches - Master catalog > Accessories > Watches
master_accessories_belts - Master catalog > Accessories > Belts
print - Print catalog
print_spring - Print catalog > Spring collection
print_autumn - Print catalog > Autumn collection
print_autumn_outlet - Print catalog > Autumn collection > Outlet
suppliers - Suppliers
suppliers_zaro - Suppliers > Zaro
suppliers_mongo - Suppliers > Mongo
suppliers_sqlserver - Suppliers > SQL Server
sales - Sales
sales_clearance - Sales > Clearance
sales_new_arrivals - Sales > New arrivals
'''.strip()

    def __init__(self, locale: str = "en_US") -> None:
        """Initialize parser with empty category storage.

        Args:
            locale: Locale the taxonomy labels are written in.
        """
        self.locale = locale
        self._categories: dict[str, Category] = {}
        self._root_categories: list[Category] = []

    def parse_embedded(self) -> list[Category]:
        """Parse the embedded sample taxonomy.

        Returns:
            Root categories, children attached.
        """
        return self._parse_lines(self.EMBEDDED_TAXONOMY.splitlines())

    def parse_file(self, path: str | Path) -> list[Category]:
        """Parse taxonomy from file.

        Args:
            path: Path to taxonomy file.

        Returns:
            Root categories, children attached.
        """
        with open(path, encoding="utf-8") as f:
            lines = f.readlines()
        return self._parse_lines(lines)

    def _parse_lines(self, lines: list[str]) -> list[Category]:
        self._categories.clear()
        self._root_categories.clear()
        by_path: dict[tuple[str, ...], Category] = {}

        for line in lines:
            line = line.strip()
            if not line or line.startswith("#") or " - " not in line:
                continue

            code, path_part = (part.strip() for part in line.split(" - ", 1))
            labels = tuple(p.strip() for p in path_part.split(">"))
            if not code or code in self._categories:
                continue

            category = Category(code, labels={self.locale: labels[-1]})

            if len(labels) == 1:
                self._root_categories.append(category)
            else:
                parent = by_path.get(labels[:-1])
                if parent is None:
                    continue
                parent.add_child(category)

            by_path[labels] = category
            self._categories[code] = category

        return list(self._root_categories)

    def get_by_code(self, code: str) -> Category | None:
        """Get category by code.

        Args:
            code: Category code.

        Returns:
            Category if found, None otherwise.
        """
        return self._categories.get(code)

    def get_root_categories(self) -> list[Category]:
        """Get tree roots, in taxonomy order."""
        return list(self._root_categories)

    def get_all(self) -> list[Category]:
        """Get all categories, in taxonomy order."""
        return list(self._categories.values())

    def get_leaf_categories(self) -> list[Category]:
        """Get categories with no children.

        These are the most specific categories, best for product
        classification.

        Returns:
            List of leaf categories.
        """
        return [c for c in self._categories.values() if not c.children]

    def search(self, query: str) -> list[Category]:
        """Search categories by code or label (case-insensitive).

        Args:
            query: Search query.

        Returns:
            List of matching categories.
        """
        query_lower = query.lower()
        return [
            c for c in self._categories.values()
            if query_lower in c.code.lower() or query_lower in c.label(self.locale).lower()
        ]

    def to_models(self) -> list[CategoryModel]:
        """Convert the parsed trees into ORM rows.

        Returns:
            One CategoryModel per root, sub-categories attached through
            ``children`` with nested-set bounds filled in.
        """
        return [build_category_model(root, self.locale) for root in self._root_categories]


def build_category_model(root: Category, locale: str) -> CategoryModel:
    """Build the ORM rows of a category tree.

    The ``root`` column cannot be known before the root row is inserted;
    CategoryRepository.save_tree fills it in.

    Args:
        root: Root category of the tree.
        locale: Locale of the labels to persist.

    Returns:
        Root CategoryModel with its descendants attached.
    """
    bounds = count(1)

    def build(category: Category, level: int) -> CategoryModel:
        model = CategoryModel(code=category.code, lvl=level, lft=next(bounds))
        label = category.labels.get(locale)
        if label is not None:
            model.translations = [CategoryTranslationModel(locale=locale, label=label)]
        model.children = [build(child, level + 1) for child in category.children]
        model.rgt = next(bounds)
        return model

    return build(root, 0)


def iter_tree(model: CategoryModel) -> Iterator[CategoryModel]:
    """Iterate over a category row and its descendants, depth first."""
    yield model
    for child in model.children:
        yield from iter_tree(child)
