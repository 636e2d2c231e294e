"""Tests for the end-to-end CSV import flow."""

import io
from decimal import Decimal

import pytest

from config import SavingsGoal
from ingestion import import_transactions
from models.column_mapping import ColumnMapping
from tools.analytics import savings_progress

EXPORT = """Date,Payee,Amount
2025-01-15,JOES GRILL &/15-01-25,-23.50
2025-01-16,COFFEE HOUSE,-3.50
2025-01-16,COFFEE HOUSE,-3.50
2025-01-20,ACME PAYROLL,2500.00
"""

MAPPING = ColumnMapping(date="Date", payee="Payee", amount="Amount")


class TestImportTransactions:
    """Tests for import_transactions."""

    def test_first_import_saves_everything(self, services):
        result = import_transactions(io.StringIO(EXPORT), MAPPING, services.transactions)

        assert len(result.accepted) == 4
        assert result.skipped_count == 0
        assert len(services.transactions.get_all()) == 4

    def test_reimport_skips_duplicates(self, services):
        """Test importing the same file twice stores each row once."""
        import_transactions(io.StringIO(EXPORT), MAPPING, services.transactions)

        result = import_transactions(io.StringIO(EXPORT), MAPPING, services.transactions)

        assert result.accepted == []
        assert result.skipped_count == 4
        assert len(services.transactions.get_all()) == 4

    def test_overlapping_export(self, services):
        import_transactions(io.StringIO(EXPORT), MAPPING, services.transactions)
        overlapping = (
            "Date,Payee,Amount\n"
            "2025-01-20,ACME PAYROLL,2500.00\n"
            "2025-01-21,GROCER,-45.10\n"
        )

        result = import_transactions(
            io.StringIO(overlapping), MAPPING, services.transactions
        )

        assert [t.payee for t in result.accepted] == ["GROCER"]
        assert result.skipped_count == 1
        assert len(services.transactions.get_all()) == 5

    def test_policy_off_imports_again(self, services):
        import_transactions(io.StringIO(EXPORT), MAPPING, services.transactions)

        result = import_transactions(
            io.StringIO(EXPORT), MAPPING, services.transactions, policy="off"
        )

        assert len(result.accepted) == 4
        assert len(services.transactions.get_all()) == 8

    def test_amounts_round_trip(self, services):
        import_transactions(io.StringIO(EXPORT), MAPPING, services.transactions)

        amounts = sorted(t.amount for t in services.transactions.get_all())

        assert amounts == [
            Decimal("-23.50"),
            Decimal("-3.50"),
            Decimal("-3.50"),
            Decimal("2500.00"),
        ]

    def test_bad_mapping_saves_nothing(self, services):
        mapping = ColumnMapping(date="Booked", payee="Payee", amount="Amount")

        with pytest.raises(ValueError):
            import_transactions(io.StringIO(EXPORT), mapping, services.transactions)

        assert services.transactions.get_all() == []

    def test_mixed_timezone_export(self, services):
        """Test rows with and without an offset can be stored and reported together."""
        export = (
            "Date,Payee,Amount\n"
            "2025-01-05,COFFEE HOUSE,-3.50\n"
            "2025-02-05T10:00:00Z,GROCER,-45.10\n"
        )

        result = import_transactions(io.StringIO(export), MAPPING, services.transactions)
        stored = services.transactions.get_all()
        progress = savings_progress(stored, SavingsGoal(Decimal("100"), "month"))

        assert len(result.accepted) == 2
        assert all(t.date.tzinfo is None for t in stored)
        assert progress.months == 2

        again = import_transactions(io.StringIO(export), MAPPING, services.transactions)
        assert again.skipped_count == 2
