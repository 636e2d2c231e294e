"""Tests for duplicate reconciliation."""

from datetime import datetime

import pytest

from reconciliation import reconcile
from tests.helpers import make_transaction


@pytest.fixture
def existing():
    return [
        make_transaction("COFFEE HOUSE", "-3.50", datetime(2025, 1, 10)),
        make_transaction("GROCER", "-45.10", datetime(2025, 1, 11)),
    ]


class TestStrictPolicy:
    """Tests for the exact date + payee + amount match."""

    def test_exact_duplicate_skipped(self, existing):
        incoming = [make_transaction("COFFEE HOUSE", "-3.50", datetime(2025, 1, 10))]

        result = reconcile(incoming, existing, "strict")

        assert result.accepted == []
        assert result.skipped_count == 1

    def test_bank_id_ignored(self, existing):
        """Test a different bank transaction ID does not make a duplicate new."""
        incoming = [
            make_transaction(
                "COFFEE HOUSE",
                "-3.50",
                datetime(2025, 1, 10),
                transaction_id="BANK-999",
            )
        ]

        assert reconcile(incoming, existing).skipped_count == 1

    @pytest.mark.parametrize(
        "payee,amount,date",
        [
            ("COFFEE HOUSE", "-3.50", datetime(2025, 1, 12)),
            ("Coffee House", "-3.50", datetime(2025, 1, 10)),
            ("COFFEE HOUSE", "-3.51", datetime(2025, 1, 10)),
        ],
    )
    def test_any_difference_is_new(self, existing, payee, amount, date):
        incoming = [make_transaction(payee, amount, date)]

        result = reconcile(incoming, existing)

        assert result.accepted == incoming
        assert result.skipped_count == 0

    def test_amount_compared_by_value(self, existing):
        """Test "-3.5" and "-3.50" are the same amount."""
        incoming = [make_transaction("COFFEE HOUSE", "-3.5", datetime(2025, 1, 10))]

        assert reconcile(incoming, existing).skipped_count == 1

    def test_keeps_incoming_order(self, existing):
        incoming = [
            make_transaction("B", "-1.00"),
            make_transaction("GROCER", "-45.10", datetime(2025, 1, 11)),
            make_transaction("A", "-2.00"),
        ]

        result = reconcile(incoming, existing)

        assert [t.payee for t in result.accepted] == ["B", "A"]
        assert result.skipped_count == 1

    def test_duplicates_within_batch_kept(self):
        """Test two identical rows in one file are both imported."""
        incoming = [make_transaction("COFFEE", "-3.50"), make_transaction("COFFEE", "-3.50")]

        result = reconcile(incoming, [])

        assert len(result.accepted) == 2

    def test_reimport_is_idempotent(self, existing):
        """Test importing the same batch twice adds nothing the second time."""
        batch = [make_transaction("NEW SHOP", "-9.99", datetime(2025, 2, 1))]

        first = reconcile(batch, existing)
        stored = existing + first.accepted
        second = reconcile(batch, stored)

        assert len(first.accepted) == 1
        assert second.accepted == []
        assert second.skipped_count == 1

    def test_empty_inputs(self):
        result = reconcile([], [])

        assert result.accepted == []
        assert result.skipped_count == 0


class TestPolicies:
    """Tests for policy handling."""

    def test_off_accepts_everything(self, existing):
        incoming = list(existing)

        result = reconcile(incoming, existing, "off")

        assert result.accepted == incoming
        assert result.skipped_count == 0

    def test_unknown_policy(self, existing):
        with pytest.raises(ValueError):
            reconcile([], existing, "fuzzy")
