"""Transaction service for database operations."""

import json
import sqlite3
from datetime import datetime
from decimal import Decimal
from typing import Any, Dict, List, Optional

from models.transaction import Transaction
from services.store import TransactionStore, PersistenceError, atomic

# SQL Query Constants
_TRANSACTION_FIELDS = """id, transaction_id, date, payee, amount, type, description,
       category, tags, account, balance, reference, is_saving"""

# Automatically generate placeholders from field count
_TRANSACTION_INSERT_PLACEHOLDERS = (
    f"({', '.join(['?'] * len(_TRANSACTION_FIELDS.split(',')))})"
)

# Fields that can be changed after import
_UPDATABLE_FIELDS = {"category", "tags", "is_saving", "payee", "description"}


class TransactionService(TransactionStore):
    """SQLite-backed transaction store."""

    def __init__(self, db_manager):
        """Initialize the transaction service.

        Args:
            db_manager: Database manager instance for database operations.
        """
        self.db_manager = db_manager

    def get_all(self) -> List[Transaction]:
        """Get all transactions.

        Returns:
            List of Transaction objects ordered by date (newest first).
        """
        with self.db_manager.connect() as conn:
            try:
                cursor = conn.execute(
                    f"SELECT {_TRANSACTION_FIELDS} FROM transactions ORDER BY date DESC, id"
                )
                rows = cursor.fetchall()
            except sqlite3.Error as e:
                raise PersistenceError(f"Loading transactions failed: {e}") from e

            return [self._row_to_transaction(row) for row in rows]

    def find(self, transaction_id: str) -> Optional[Transaction]:
        """Get a single transaction by ID.

        Args:
            transaction_id: The generated transaction ID.

        Returns:
            Transaction object if found, None otherwise.
        """
        with self.db_manager.connect() as conn:
            try:
                cursor = conn.execute(
                    f"SELECT {_TRANSACTION_FIELDS} FROM transactions WHERE id = ?",
                    (transaction_id,),
                )
                row = cursor.fetchone()
            except sqlite3.Error as e:
                raise PersistenceError(f"Loading transaction failed: {e}") from e

            if row:
                return self._row_to_transaction(row)
            return None

    def add_all(self, transactions: List[Transaction]) -> int:
        """Insert multiple transactions in a single database transaction.

        Args:
            transactions: List of Transaction objects to insert.

        Returns:
            Number of transactions inserted.

        Raises:
            PersistenceError: If the insert fails. All inserts are rolled back.
        """
        if not transactions:
            return 0

        with self.db_manager.connect() as conn:
            with atomic(conn, "Saving imported transactions"):
                conn.executemany(
                    f"""
                    INSERT INTO transactions ({_TRANSACTION_FIELDS})
                    VALUES {_TRANSACTION_INSERT_PLACEHOLDERS}
                    """,
                    [self._transaction_to_row(t) for t in transactions],
                )

        return len(transactions)

    def save_all(self, transactions: List[Transaction]) -> int:
        """Replace every stored transaction with the given list.

        Raises:
            PersistenceError: If the write fails. The previous set is kept.
        """
        with self.db_manager.connect() as conn:
            with atomic(conn, "Saving transactions"):
                conn.execute("DELETE FROM transactions")
                conn.executemany(
                    f"""
                    INSERT INTO transactions ({_TRANSACTION_FIELDS})
                    VALUES {_TRANSACTION_INSERT_PLACEHOLDERS}
                    """,
                    [self._transaction_to_row(t) for t in transactions],
                )

        return len(transactions)

    def update_one(self, transaction_id: str, fields: Dict[str, Any]) -> bool:
        """Update fields of a single transaction.

        Args:
            transaction_id: ID of the transaction to update.
            fields: Mapping of field name to new value. Supported fields:
                    'category', 'tags', 'is_saving', 'payee', 'description'

        Returns:
            True if the transaction was updated, False if it doesn't exist.

        Raises:
            ValueError: If unsupported field names are provided.
            PersistenceError: If the update fails.
        """
        set_clause, values = self._set_clause(fields)

        with self.db_manager.connect() as conn:
            with atomic(conn, f"Updating transaction {transaction_id}"):
                cursor = conn.execute(
                    f"UPDATE transactions SET {set_clause} WHERE id = ?",
                    (*values, transaction_id),
                )
                return cursor.rowcount > 0

    def bulk_update(self, transaction_ids: List[str], fields: Dict[str, Any]) -> int:
        """Set the same fields on many transactions in one database transaction.

        Args:
            transaction_ids: IDs of the transactions to update.
            fields: Mapping of field name to new value (see update_one).

        Returns:
            Number of transactions updated.

        Raises:
            ValueError: If unsupported field names are provided.
            PersistenceError: If the update fails or any ID doesn't exist.
                Nothing is updated in that case.
        """
        if not transaction_ids:
            return 0

        set_clause, values = self._set_clause(fields)

        with self.db_manager.connect() as conn:
            with atomic(conn, f"Updating {len(transaction_ids)} transactions"):
                cursor = conn.executemany(
                    f"UPDATE transactions SET {set_clause} WHERE id = ?",
                    [(*values, transaction_id) for transaction_id in transaction_ids],
                )
                updated = cursor.rowcount

                if updated != len(transaction_ids):
                    raise PersistenceError(
                        f"Bulk update matched {updated} of {len(transaction_ids)} transactions; nothing was changed"
                    )

        return updated

    def delete_one(self, transaction_id: str) -> bool:
        """Delete a transaction by ID.

        Returns:
            True if transaction was deleted, False if not found.
        """
        with self.db_manager.connect() as conn:
            with atomic(conn, f"Deleting transaction {transaction_id}"):
                cursor = conn.execute(
                    "DELETE FROM transactions WHERE id = ?", (transaction_id,)
                )
                return cursor.rowcount > 0

    def clear_all(self) -> int:
        """Delete all transactions.

        Returns:
            Number of transactions deleted.
        """
        with self.db_manager.connect() as conn:
            with atomic(conn, "Clearing transactions"):
                cursor = conn.execute("DELETE FROM transactions")
                return cursor.rowcount

    def _set_clause(self, fields: Dict[str, Any]):
        if not fields:
            raise ValueError("fields cannot be empty")

        invalid_fields = set(fields) - _UPDATABLE_FIELDS
        if invalid_fields:
            raise ValueError(f"Unsupported field names: {invalid_fields}")

        names = list(fields)
        set_clause = ", ".join([f"{name} = ?" for name in names])
        values = [self._serialize(name, fields[name]) for name in names]
        return set_clause, values

    @staticmethod
    def _serialize(name: str, value: Any) -> Any:
        if name == "tags":
            return json.dumps(list(value or []))
        if name == "is_saving":
            return None if value is None else int(bool(value))
        return value

    def _transaction_to_row(self, t: Transaction) -> tuple:
        data = t.to_dict()
        return tuple(data[name.strip()] for name in _TRANSACTION_FIELDS.split(","))

    def _row_to_transaction(self, row: tuple) -> Transaction:
        """Convert a database row to a Transaction object."""
        return Transaction(
            id=row[0],
            transaction_id=row[1],
            date=datetime.fromisoformat(row[2]),
            payee=row[3],
            amount=Decimal(row[4]),
            type=row[5],
            description=row[6],
            category=row[7],
            tags=json.loads(row[8]) if row[8] else [],
            account=row[9],
            balance=Decimal(row[10]) if row[10] is not None else None,
            reference=row[11],
            is_saving=None if row[12] is None else bool(row[12]),
        )
