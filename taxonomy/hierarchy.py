"""Hierarchy queries over a flat category list.

All lookups are by name. A name missing from the list is treated as an
unresolved singleton, never as an error: a transaction may still reference a
category that a reloaded taxonomy no longer contains.
"""

from typing import Dict, List, Optional

from models.category import Category, DEFAULT_COLOR

# Root + 3 levels; anything longer means a malformed (cyclic) parent chain
MAX_CHAIN_LENGTH = 4


def _index(categories: List[Category]) -> Dict[str, Category]:
    index = {}
    for category in categories:
        # First occurrence wins, matching a linear scan
        index.setdefault(category.name, category)
    return index


def find_category(name: str, categories: List[Category]) -> Optional[Category]:
    """Get a category by name, or None if it is not in the taxonomy."""
    return _index(categories).get(name)


def ancestor_chain(name: str, categories: List[Category]) -> List[str]:
    """Get the chain of category names from the root down to name (inclusive).

    Returns [name] if the category is unknown.
    """
    index = _index(categories)
    chain = [name]
    current = index.get(name)

    while current is not None and current.parent:
        if current.parent in chain or len(chain) > MAX_CHAIN_LENGTH:
            break
        chain.insert(0, current.parent)
        current = index.get(current.parent)

    return chain


def children(name: str, categories: List[Category]) -> List[Category]:
    """Direct children of a category, in list order."""
    return [c for c in categories if c.parent == name]


def descendants(name: str, categories: List[Category]) -> List[Category]:
    """Get every category below name.

    Direct children come first (in list order), followed by each child's own
    descendants in turn.
    """
    return _descendants(name, categories, set())


def _descendants(name: str, categories: List[Category], visited: set) -> List[Category]:
    visited.add(name)
    direct = [c for c in children(name, categories) if c.name not in visited]

    result = list(direct)
    for child in direct:
        result.extend(_descendants(child.name, categories, visited))
    return result


def level(name: str, categories: List[Category]) -> int:
    """Depth of a category (0 = root)."""
    return len(ancestor_chain(name, categories)) - 1


def root(name: str, categories: List[Category]) -> str:
    """Name of the root ancestor of a category."""
    return ancestor_chain(name, categories)[0]


def roots(categories: List[Category]) -> List[Category]:
    """All top-level categories, in list order."""
    return [c for c in categories if not c.parent]


def resolved_color(name: str, categories: List[Category]) -> str:
    category = find_category(name, categories)
    return category.color if category else DEFAULT_COLOR


def resolved_is_subscription(name: str, categories: List[Category]) -> bool:
    category = find_category(name, categories)
    return category.is_subscription if category else False
