"""Category taxonomy loading.

The taxonomy is described in YAML as a nested tree:

    categories:
      - name: Food & Dining
        color: "#ef4444"
        children:
          - name: Restaurants
            children:
              - name: Fine Dining

Loading flattens the tree into a pre-ordered list of Category objects with
explicit parent names and inherited color/subscription attributes.
"""

from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Optional

import yaml

from models.category import Category, DEFAULT_COLOR
from logger import get_logger

logger = get_logger()

# Root is depth 0, so the deepest node kept is at depth 3
MAX_DEPTH = 3


class TaxonomyError(Exception):
    """Raised when a taxonomy document is malformed."""


@dataclass
class TaxonomyNode:
    """A node of the taxonomy source tree."""

    name: str
    color: Optional[str] = None
    is_subscription: Optional[bool] = None
    children: List["TaxonomyNode"] = field(default_factory=list)

    @classmethod
    def from_dict(cls, data) -> "TaxonomyNode":
        if not isinstance(data, dict):
            raise TaxonomyError(f"Category node must be a mapping, got: {data!r}")

        name = data.get("name")
        if not name or not isinstance(name, str):
            raise TaxonomyError(f"Category node without a name: {data!r}")

        is_subscription = data.get("isSubscription")
        if is_subscription is not None and not isinstance(is_subscription, bool):
            raise TaxonomyError(f"isSubscription of '{name}' must be a boolean")

        children = data.get("children") or []
        if not isinstance(children, list):
            raise TaxonomyError(f"children of '{name}' must be a list")

        return cls(
            name=name,
            color=data.get("color") or None,
            is_subscription=is_subscription,
            children=[cls.from_dict(child) for child in children],
        )


def parse_taxonomy(text: str) -> List[TaxonomyNode]:
    """Parse a YAML taxonomy document into root nodes.

    Args:
        text: YAML document with a top-level 'categories' list.

    Returns:
        List of root TaxonomyNode objects.

    Raises:
        TaxonomyError: If the document is not valid YAML or has the wrong shape.
    """
    try:
        data = yaml.safe_load(text)
    except yaml.YAMLError as e:
        raise TaxonomyError(f"Invalid YAML: {e}") from e

    if not isinstance(data, dict) or not isinstance(data.get("categories"), list):
        raise TaxonomyError("Taxonomy must contain a top-level 'categories' list")

    return [TaxonomyNode.from_dict(node) for node in data["categories"]]


def flatten(
    nodes: List[TaxonomyNode],
    parent: Optional[str] = None,
    parent_color: Optional[str] = None,
    parent_is_subscription: Optional[bool] = None,
    depth: int = 0,
) -> List[Category]:
    """Flatten taxonomy nodes into a pre-ordered category list.

    Each node is immediately followed by its entire subtree. Color and
    subscription flag come from the node itself, else from the parent, else
    from the global defaults. Children of nodes at MAX_DEPTH are dropped.
    """
    result = []

    for node in nodes:
        color = node.color or parent_color or DEFAULT_COLOR
        if node.is_subscription is not None:
            is_subscription = node.is_subscription
        elif parent_is_subscription is not None:
            is_subscription = parent_is_subscription
        else:
            is_subscription = False

        result.append(
            Category(
                name=node.name,
                color=color,
                parent=parent,
                is_subscription=is_subscription,
            )
        )

        if node.children and depth < MAX_DEPTH:
            result.extend(
                flatten(node.children, node.name, color, is_subscription, depth + 1)
            )
        elif node.children:
            logger.debug(
                f"Dropping {len(node.children)} child(ren) of '{node.name}' beyond depth {MAX_DEPTH}"
            )

    return result


def load_taxonomy(path: Path) -> List[Category]:
    """Load the category taxonomy from a YAML file.

    Never fails: on any read or parse error, or if a category name is used
    twice, the default taxonomy is returned.

    Args:
        path: Path to the YAML taxonomy file.

    Returns:
        Pre-ordered list of Category objects.
    """
    try:
        with open(path, "r", encoding="utf-8") as f:
            nodes = parse_taxonomy(f.read())
        categories = flatten(nodes)
        check_unique_names(categories)
    except (OSError, UnicodeDecodeError, TaxonomyError) as e:
        logger.error(f"Failed to load categories from {path}: {e}")
        logger.warning("Using default categories")
        return default_categories()

    if not categories:
        logger.warning(f"No categories defined in {path}, using default categories")
        return default_categories()

    logger.info(f"Loaded {len(categories)} categories from {path}")
    return categories


def check_unique_names(categories: List[Category]) -> None:
    """Raise TaxonomyError if a category name appears more than once."""
    seen = set()
    for category in categories:
        if category.name in seen:
            raise TaxonomyError(f"Duplicate category name: '{category.name}'")
        seen.add(category.name)


def default_categories() -> List[Category]:
    """Hardcoded fallback taxonomy, in pre-order."""
    return [
        Category("Income", "#10b981"),
        Category("Food & Dining", "#ef4444"),
        Category("Restaurant", "#ef4444", "Food & Dining"),
        Category("Fast Food", "#ef4444", "Food & Dining"),
        Category("Groceries", "#ef4444", "Food & Dining"),
        Category("Transportation", "#f97316"),
        Category("Gas", "#f97316", "Transportation"),
        Category("Public Transit", "#f97316", "Transportation"),
        Category("Shopping", "#eab308"),
        Category("Entertainment", "#22c55e"),
        Category("Bills & Utilities", "#3b82f6"),
        Category("Healthcare", "#8b5cf6"),
        Category("Subscriptions", "#a855f7", is_subscription=True),
        Category("Streaming", "#a855f7", "Subscriptions", True),
        Category("Software", "#a855f7", "Subscriptions", True),
        Category("Gym", "#a855f7", "Subscriptions", True),
        Category("Other", DEFAULT_COLOR),
    ]
