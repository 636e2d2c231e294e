"""Persistence interface used by the core.

The categorization controller and import flow only talk to these abstract
stores, so the SQLite services can be swapped for any other backend that
honours the same contract: every call either completes or raises
PersistenceError, and bulk calls are all-or-nothing.
"""

import sqlite3
from abc import ABC, abstractmethod
from contextlib import contextmanager
from typing import Any, Dict, List, Optional

from models.category import Category
from models.transaction import Transaction


class PersistenceError(Exception):
    """Raised when the store cannot complete an operation.

    Nothing from a failed bulk operation is left applied.
    """


@contextmanager
def atomic(conn, operation: str):
    """Run a block of statements as one transaction on a DB-API connection.

    Commits on success. On any error rolls back; sqlite errors are re-raised
    as PersistenceError.
    """
    try:
        yield conn
        conn.commit()
    except sqlite3.Error as e:
        conn.rollback()
        raise PersistenceError(f"{operation} failed: {e}") from e
    except Exception:
        conn.rollback()
        raise


class TransactionStore(ABC):
    """Storage contract for transactions."""

    @abstractmethod
    def get_all(self) -> List[Transaction]:
        """Get every stored transaction."""

    @abstractmethod
    def find(self, transaction_id: str) -> Optional[Transaction]:
        """Get a single transaction by ID, or None."""

    @abstractmethod
    def save_all(self, transactions: List[Transaction]) -> int:
        """Replace the stored set with transactions."""

    @abstractmethod
    def add_all(self, transactions: List[Transaction]) -> int:
        """Insert new transactions in one call."""

    @abstractmethod
    def update_one(self, transaction_id: str, fields: Dict[str, Any]) -> bool:
        """Update fields of a single transaction."""

    @abstractmethod
    def bulk_update(self, transaction_ids: List[str], fields: Dict[str, Any]) -> int:
        """Set the same fields on many transactions in one call.

        Raises:
            PersistenceError: If any transaction could not be updated. No
                transaction is updated in that case.
        """

    @abstractmethod
    def delete_one(self, transaction_id: str) -> bool:
        """Delete a single transaction."""

    @abstractmethod
    def clear_all(self) -> int:
        """Delete every transaction."""


class CategoryStore(ABC):
    """Storage contract for the flattened category taxonomy."""

    @abstractmethod
    def get_categories(self) -> List[Category]:
        """Get all categories in taxonomy (pre-)order."""

    @abstractmethod
    def save_categories(self, categories: List[Category]) -> int:
        """Replace the stored taxonomy."""
