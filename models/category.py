"""Category model for the hierarchical spending taxonomy."""

from dataclasses import dataclass
from typing import Optional

DEFAULT_COLOR = "#6b7280"


@dataclass
class Category:
    """Represents a node of the category taxonomy.

    Attributes:
        name: Category name (unique across the whole taxonomy).
        color: Display color, resolved by inheritance at load time.
        parent: Optional parent category name.
        is_subscription: Subscription flag, resolved by inheritance at load time.
    """

    name: str
    color: str = DEFAULT_COLOR
    parent: Optional[str] = None
    is_subscription: bool = False
