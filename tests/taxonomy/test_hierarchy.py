"""Tests for hierarchy queries."""

import pytest

from models.category import Category, DEFAULT_COLOR
from taxonomy.hierarchy import (
    ancestor_chain,
    children,
    descendants,
    find_category,
    level,
    resolved_color,
    resolved_is_subscription,
    root,
    roots,
)


@pytest.fixture
def categories():
    """A small pre-ordered taxonomy four levels deep."""
    return [
        Category(name="Food & Dining", color="#ef4444"),
        Category(name="Restaurants", color="#ef4444", parent="Food & Dining"),
        Category(name="Fine Dining", color="#ef4444", parent="Restaurants"),
        Category(name="Tasting Menus", color="#ef4444", parent="Fine Dining"),
        Category(name="Cafes", color="#ef4444", parent="Restaurants"),
        Category(name="Groceries", color="#22c55e", parent="Food & Dining"),
        Category(name="Subscriptions", color="#a855f7", is_subscription=True),
        Category(
            name="Streaming", color="#a855f7", parent="Subscriptions", is_subscription=True
        ),
    ]


class TestAncestorChain:
    """Tests for ancestor_chain."""

    def test_root_category(self, categories):
        assert ancestor_chain("Food & Dining", categories) == ["Food & Dining"]

    def test_chain_from_root_to_node(self, categories):
        assert ancestor_chain("Fine Dining", categories) == [
            "Food & Dining",
            "Restaurants",
            "Fine Dining",
        ]

    def test_deepest_level(self, categories):
        assert ancestor_chain("Tasting Menus", categories) == [
            "Food & Dining",
            "Restaurants",
            "Fine Dining",
            "Tasting Menus",
        ]

    def test_unknown_category_is_singleton(self, categories):
        """Test an unknown name resolves to itself instead of raising."""
        assert ancestor_chain("Crypto", categories) == ["Crypto"]
        assert level("Crypto", categories) == 0
        assert root("Crypto", categories) == "Crypto"

    def test_cyclic_parents_terminate(self):
        """Test a malformed cyclic taxonomy does not loop forever."""
        cyclic = [
            Category(name="A", parent="B"),
            Category(name="B", parent="A"),
        ]

        chain = ancestor_chain("A", cyclic)

        assert chain == ["B", "A"]

    def test_missing_parent_stops_chain(self):
        orphans = [Category(name="Child", parent="Gone")]

        assert ancestor_chain("Child", orphans) == ["Gone", "Child"]


class TestDescendants:
    """Tests for children and descendants."""

    def test_children_in_list_order(self, categories):
        names = [c.name for c in children("Food & Dining", categories)]

        assert names == ["Restaurants", "Groceries"]

    def test_direct_children_first(self, categories):
        """Test direct children precede deeper descendants."""
        names = [c.name for c in descendants("Food & Dining", categories)]

        assert names == [
            "Restaurants",
            "Groceries",
            "Fine Dining",
            "Cafes",
            "Tasting Menus",
        ]
        assert names.index("Restaurants") < names.index("Fine Dining")

    def test_leaf_has_no_descendants(self, categories):
        assert descendants("Tasting Menus", categories) == []

    def test_unknown_has_no_descendants(self, categories):
        assert descendants("Crypto", categories) == []

    def test_cycle_terminates(self):
        cyclic = [
            Category(name="A", parent="B"),
            Category(name="B", parent="A"),
        ]

        names = [c.name for c in descendants("A", cyclic)]

        assert names == ["B"]


class TestLevelAndRoot:
    """Tests for level, root and roots."""

    @pytest.mark.parametrize(
        "name,expected",
        [
            ("Food & Dining", 0),
            ("Restaurants", 1),
            ("Fine Dining", 2),
            ("Tasting Menus", 3),
            ("Streaming", 1),
        ],
    )
    def test_level(self, categories, name, expected):
        assert level(name, categories) == expected

    def test_root(self, categories):
        assert root("Tasting Menus", categories) == "Food & Dining"
        assert root("Streaming", categories) == "Subscriptions"

    def test_root_is_level_zero(self, categories):
        """Test the root of every category is itself a root."""
        for category in categories:
            assert level(root(category.name, categories), categories) == 0

    def test_roots(self, categories):
        assert [c.name for c in roots(categories)] == ["Food & Dining", "Subscriptions"]


class TestResolvedAttributes:
    """Tests for find_category and resolved display attributes."""

    def test_find_first_occurrence(self):
        duplicated = [
            Category(name="Gym", color="#111111"),
            Category(name="Gym", color="#222222"),
        ]

        assert find_category("Gym", duplicated).color == "#111111"

    def test_find_unknown(self, categories):
        assert find_category("Crypto", categories) is None

    def test_resolved_color(self, categories):
        assert resolved_color("Groceries", categories) == "#22c55e"
        assert resolved_color("Crypto", categories) == DEFAULT_COLOR

    def test_resolved_is_subscription(self, categories):
        assert resolved_is_subscription("Streaming", categories) is True
        assert resolved_is_subscription("Groceries", categories) is False
        assert resolved_is_subscription("Crypto", categories) is False
