#!/usr/bin/env python3

import sys
from pathlib import Path

from config import get_seed_taxonomy_path
from taxonomy.hierarchy import level
from taxonomy.loader import load_taxonomy
from logger import get_logger

logger = get_logger()


def taxonomy_source(services) -> Path:
    """Get the configured taxonomy file, or the bundled one."""
    return services.config.taxonomy_path or get_seed_taxonomy_path()


def get_categories(services):
    """Get the stored taxonomy, loading it from the taxonomy file on first use."""
    categories = services.categories.get_categories()
    if categories:
        return categories

    categories = load_taxonomy(taxonomy_source(services))
    services.categories.save_categories(categories)
    logger.info(f"Loaded {len(categories)} categories")
    return categories


def cmd_list(args, services):
    """List the category taxonomy as a tree."""
    categories = get_categories(services)

    logger.info("\nCategories:")
    logger.info("=" * 80)
    for category in categories:
        indent = "  " * level(category.name, categories)
        flags = " [subscription]" if category.is_subscription else ""
        logger.info(f"{indent}{category.name} ({category.color}){flags}")

    logger.info(f"\nTotal categories: {len(categories)}")


def cmd_reload(args, services):
    """Reload the taxonomy from its YAML file, replacing the stored one."""
    source = Path(args.file) if args.file else taxonomy_source(services)

    if args.file and not source.exists():
        logger.error(f"File not found: {args.file}")
        sys.exit(1)

    logger.info(f"Loading categories from {source}")
    categories = load_taxonomy(source)

    try:
        count = services.categories.save_categories(categories)
    except Exception as e:
        logger.error(f"Error saving categories: {e}")
        sys.exit(1)

    logger.info(f"✓ Saved {count} categories")

    known = {c.name for c in categories}
    orphaned = {
        t.category for t in services.transactions.get_all() if t.category
    } - known
    if orphaned:
        logger.warning(
            f"{len(orphaned)} category name(s) used by transactions are not in the taxonomy: "
            f"{', '.join(sorted(orphaned))}"
        )


def setup_parser(subparsers):
    """Setup categories subcommand parser.

    Args:
        subparsers: The subparsers object from the main CLI
    """
    parser = subparsers.add_parser(
        "categories",
        help="Manage categories",
        description="Show and reload the category taxonomy",
    )

    categories_subparsers = parser.add_subparsers(
        title="subcommands",
        description="Available category commands",
        dest="subcommand",
        required=True,
    )

    # categories list
    list_parser = categories_subparsers.add_parser(
        "list", help="Show the category tree"
    )
    list_parser.set_defaults(func=cmd_list)

    # categories reload
    reload_parser = categories_subparsers.add_parser(
        "reload", help="Reload categories from the taxonomy YAML file"
    )
    reload_parser.add_argument(
        "--file",
        help="Taxonomy YAML file (default: configured taxonomy path or bundled taxonomy)",
    )
    reload_parser.set_defaults(func=cmd_reload)
