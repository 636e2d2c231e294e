"""Category taxonomy loading and hierarchy queries."""

from taxonomy.loader import load_taxonomy, default_categories
from taxonomy.hierarchy import ancestor_chain, descendants, level, root

__all__ = [
    "load_taxonomy",
    "default_categories",
    "ancestor_chain",
    "descendants",
    "level",
    "root",
]
