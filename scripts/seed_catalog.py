#!/usr/bin/env python3
"""Seed sample catalog script.

Stores the sample category trees in the database, generates products
classified in them and indexes the products in the search index.

Usage:
    python scripts/seed_catalog.py --mode small
    python scripts/seed_catalog.py --mode full --no-clear
"""

import argparse
import asyncio
import sys
from pathlib import Path

# Add parent directory to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent))

from pim.catalog.generator import GeneratorConfig, ProductGenerator
from pim.catalog.indexing import PRODUCT_INDEX_MAPPINGS, ProductIndexNormalizer
from pim.catalog.repository import CategoryRepository
from pim.catalog.taxonomy import TaxonomyParser
from pim.infrastructure.config import settings
from pim.infrastructure.database import async_session_factory, create_tables
from pim.infrastructure.logging_config import configure_logging
from pim.infrastructure.search_client import SearchClient

# Documents sent per bulk request
BULK_SIZE = 500


async def seed_categories(clear: bool = True) -> dict:
    """Store the sample category trees.

    Args:
        clear: Whether to delete existing categories first.

    Returns:
        Seeding result.
    """
    parser = TaxonomyParser()
    parser.parse_embedded()

    async with async_session_factory() as session:
        repo = CategoryRepository(session)
        deleted = await repo.delete_all() if clear else 0
        for root in parser.to_models():
            await repo.save_tree(root)
        created = await repo.count()
        roots = [root.code for root in await repo.find_roots()]
        await session.commit()

    return {
        "deleted": deleted,
        "categories": created,
        "roots": roots,
    }


async def index_products(mode: str) -> dict:
    """Generate the sample products and index them.

    Args:
        mode: Catalog size (small/full).

    Returns:
        Indexing result.
    """
    config = GeneratorConfig.full() if mode == "full" else GeneratorConfig.small()
    generator = ProductGenerator(config)
    normalizer = ProductIndexNormalizer(locales=config.locales, scope=config.channels[0])
    documents = normalizer.normalize_all(generator.generate())

    client = SearchClient(settings.search_url, timeout=settings.search_timeout)
    try:
        await client.create_index(settings.product_index_name, PRODUCT_INDEX_MAPPINGS)
        indexed = 0
        for start in range(0, len(documents), BULK_SIZE):
            indexed += await client.bulk_index(
                settings.product_index_name,
                documents[start:start + BULK_SIZE],
                refresh=start + BULK_SIZE >= len(documents),
            )
    finally:
        await client.close()

    return {
        "indexed": indexed,
        "disabled": sum(1 for d in documents if not d["enabled"]),
    }


async def main() -> None:
    """Main entry point."""
    parser = argparse.ArgumentParser(
        description="Seed the sample category trees and product index",
    )
    parser.add_argument(
        "--mode",
        choices=["small", "full"],
        default="small",
        help="Catalog size: small (5 products per category) or full (20)",
    )
    parser.add_argument(
        "--no-clear",
        action="store_true",
        help="Don't delete existing categories before seeding",
    )
    parser.add_argument(
        "--skip-index",
        action="store_true",
        help="Only seed the database, don't index products",
    )

    args = parser.parse_args()
    configure_logging()

    print("=" * 60)
    print("PIM Catalog Seeder")
    print("=" * 60)
    print(f"Mode: {args.mode}")
    print(f"Clear existing: {not args.no_clear}")
    print()

    print("Creating database tables...")
    await create_tables()
    print("Tables ready.")
    print()

    print("Seeding category trees...")
    result = await seed_categories(clear=not args.no_clear)
    print(f"  ✓ Deleted: {result['deleted']} existing categories")
    print(f"  ✓ Created: {result['categories']} categories in {len(result['roots'])} trees")
    print(f"    Trees: {', '.join(result['roots'])}")
    print()

    if not args.skip_index:
        print(f"Indexing products into {settings.product_index_name}...")
        result = await index_products(args.mode)
        print(f"  ✓ Indexed: {result['indexed']} products")
        print(f"  ✓ Disabled: {result['disabled']}")
        print()

    print("=" * 60)
    print("Seeding complete!")
    print("=" * 60)


if __name__ == "__main__":
    asyncio.run(main())
