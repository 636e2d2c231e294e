"""Tests for spending analytics."""

from datetime import datetime
from decimal import Decimal

import pytest

from config import SavingsGoal
from models.category import Category, DEFAULT_COLOR
from tests.helpers import make_transaction
from tools.analytics import (
    UNCATEGORIZED,
    category_breakdown,
    drilldown,
    monthly_series,
    rollup_by_root,
    rollup_total,
    savings_progress,
    spending_by_category,
    subscription_total,
    summary,
    top_payees,
)


@pytest.fixture
def categories():
    return [
        Category(name="Food & Dining", color="#ef4444"),
        Category(name="Restaurants", color="#ef4444", parent="Food & Dining"),
        Category(name="Fine Dining", color="#ef4444", parent="Restaurants"),
        Category(name="Groceries", color="#22c55e", parent="Food & Dining"),
        Category(name="Subscriptions", color="#a855f7", is_subscription=True),
        Category(
            name="Streaming", color="#a855f7", parent="Subscriptions", is_subscription=True
        ),
        Category(name="Income", color="#10b981"),
    ]


@pytest.fixture
def transactions():
    return [
        make_transaction("BISTRO", "-80.00", datetime(2025, 1, 5), category="Fine Dining"),
        make_transaction("DINER", "-20.00", datetime(2025, 1, 6), category="Restaurants"),
        make_transaction("GROCER", "-50.00", datetime(2025, 1, 7), category="Groceries"),
        make_transaction("FOOD HALL", "-5.00", datetime(2025, 1, 8), category="Food & Dining"),
        make_transaction("NETFLIX", "-15.99", datetime(2025, 2, 1), category="Streaming"),
        make_transaction("GROCER", "-35.00", datetime(2025, 2, 3), category="Groceries"),
        make_transaction("MYSTERY", "-7.00", datetime(2025, 2, 4)),
        make_transaction("CRYPTO EXCH", "-100.00", datetime(2025, 2, 5), category="Crypto"),
        make_transaction("ACME PAYROLL", "2500.00", datetime(2025, 1, 31), category="Income"),
        make_transaction("ACME PAYROLL", "2500.00", datetime(2025, 2, 28), category="Income"),
    ]


class TestCategoryTotals:
    """Tests for spending_by_category and category_breakdown."""

    def test_spending_by_category(self, transactions):
        totals = spending_by_category(transactions)

        assert totals["Groceries"] == Decimal("85.00")
        assert totals[UNCATEGORIZED] == Decimal("7.00")
        assert "Income" not in totals

    def test_breakdown_sorted_with_colors(self, transactions, categories):
        breakdown = category_breakdown(transactions, categories)

        totals = [entry.total for entry in breakdown]
        assert totals == sorted(totals, reverse=True)
        assert breakdown[0].name == "Crypto"
        assert breakdown[0].color == DEFAULT_COLOR
        groceries = next(entry for entry in breakdown if entry.name == "Groceries")
        assert groceries.color == "#22c55e"


class TestRollup:
    """Tests for hierarchy-aware aggregation."""

    def test_rollup_includes_descendants(self, transactions, categories):
        """Test a root's total covers every level below it."""
        assert rollup_total("Food & Dining", transactions, categories) == Decimal("190.00")
        assert rollup_total("Restaurants", transactions, categories) == Decimal("100.00")
        assert rollup_total("Fine Dining", transactions, categories) == Decimal("80.00")

    def test_rollup_unknown_category(self, transactions, categories):
        assert rollup_total("Crypto", transactions, categories) == Decimal("100.00")

    def test_rollup_by_root(self, transactions, categories):
        totals = rollup_by_root(transactions, categories)

        assert totals == {
            "Food & Dining": Decimal("190.00"),
            "Subscriptions": Decimal("15.99"),
            "Crypto": Decimal("100.00"),
            UNCATEGORIZED: Decimal("7.00"),
        }

    def test_rollup_by_root_accounts_for_all_spending(self, transactions, categories):
        """Test no spending is lost or double counted."""
        totals = rollup_by_root(transactions, categories)

        assert sum(totals.values()) == summary(transactions).spending

    def test_drilldown(self, transactions, categories):
        assert drilldown("Food & Dining", transactions, categories) == {
            "Food & Dining": Decimal("5.00"),
            "Restaurants": Decimal("100.00"),
            "Groceries": Decimal("85.00"),
        }

    def test_drilldown_leaf(self, transactions, categories):
        assert drilldown("Fine Dining", transactions, categories) == {
            "Fine Dining": Decimal("80.00")
        }

    def test_subscription_total(self, transactions, categories):
        assert subscription_total(transactions, categories) == Decimal("15.99")


class TestTimeSeries:
    """Tests for monthly_series, top_payees and summary."""

    def test_monthly_series(self, transactions):
        series = monthly_series(transactions)

        assert [bucket.month for bucket in series] == ["2025/01", "2025/02"]
        january = series[0]
        assert january.income == Decimal("2500.00")
        assert january.spending == Decimal("155.00")
        assert january.net == Decimal("2345.00")

    def test_top_payees(self, transactions):
        top = top_payees(transactions, n=2)

        assert [(p.payee, p.total) for p in top] == [
            ("CRYPTO EXCH", Decimal("100.00")),
            ("GROCER", Decimal("85.00")),
        ]

    def test_summary(self, transactions):
        result = summary(transactions)

        assert result.income == Decimal("5000.00")
        assert result.spending == Decimal("312.99")
        assert result.net == Decimal("4687.01")

    def test_empty_input(self, categories):
        assert spending_by_category([]) == {}
        assert rollup_by_root([], categories) == {}
        assert monthly_series([]) == []
        assert top_payees([]) == []
        assert summary([]).net == Decimal("0")


class TestSavingsProgress:
    """Tests for savings_progress."""

    def test_monthly_goal(self):
        transactions = [
            make_transaction("BROKERAGE", "-300.00", datetime(2025, 1, 10), is_saving=True),
            make_transaction("BROKERAGE", "-200.00", datetime(2025, 3, 10), is_saving=True),
            make_transaction("CAFE", "-4.00", datetime(2025, 2, 1)),
        ]

        progress = savings_progress(transactions, SavingsGoal(Decimal("250"), "month"))

        assert progress.months == 3
        assert progress.saved == Decimal("500.00")
        assert progress.target == Decimal("750")
        assert progress.ratio == Decimal("500.00") / Decimal("750")

    def test_yearly_goal(self):
        transactions = [
            make_transaction("BROKERAGE", "-100.00", datetime(2025, 6, 1), is_saving=True)
        ]

        progress = savings_progress(transactions, SavingsGoal(Decimal("1200"), "year"))

        assert progress.target == Decimal("100")
        assert progress.ratio == Decimal("1")

    def test_no_goal(self):
        transactions = [make_transaction("CAFE", "-4.00")]

        progress = savings_progress(transactions, SavingsGoal(Decimal("0"), "month"))

        assert progress.ratio is None

    def test_no_transactions(self):
        progress = savings_progress([], SavingsGoal(Decimal("100"), "month"))

        assert progress.months == 0
        assert progress.saved == Decimal("0")
