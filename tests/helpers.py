"""Helper utilities for tests."""

from datetime import datetime
from decimal import Decimal
from pathlib import Path
import sqlite3

from models.transaction import Transaction


def run_migrations(conn: sqlite3.Connection, migrations_dir: Path) -> None:
    """Run all SQL migrations in order.

    Args:
        conn: SQLite connection to run migrations against.
        migrations_dir: Path to directory containing .sql migration files.
    """
    for migration_file in sorted(migrations_dir.glob("*.sql")):
        conn.executescript(migration_file.read_text())

    conn.commit()


def make_transaction(
    payee: str,
    amount: str = "-10.00",
    date: datetime = datetime(2025, 1, 15),
    **kwargs,
) -> Transaction:
    """Build a Transaction with sensible defaults for tests."""
    return Transaction.create(date=date, payee=payee, amount=Decimal(amount), **kwargs)
