"""Category service for database operations."""

import sqlite3
from typing import List

from models.category import Category
from services.store import CategoryStore, PersistenceError, atomic


class CategoryService(CategoryStore):
    """Service for persisting the flattened category taxonomy."""

    def __init__(self, db_manager):
        """Initialize the category service.

        Args:
            db_manager: Database manager instance for database operations.
        """
        self.db_manager = db_manager

    def get_categories(self) -> List[Category]:
        """Get all categories from the database.

        Returns:
            List of Category objects, in the order they were saved.
        """
        with self.db_manager.connect() as conn:
            try:
                cursor = conn.execute(
                    "SELECT name, color, parent, is_subscription FROM categories ORDER BY position"
                )
                rows = cursor.fetchall()
            except sqlite3.Error as e:
                raise PersistenceError(f"Loading categories failed: {e}") from e

            return [
                Category(
                    name=row[0],
                    color=row[1],
                    parent=row[2],
                    is_subscription=bool(row[3]),
                )
                for row in rows
            ]

    def save_categories(self, categories: List[Category]) -> int:
        """Replace the stored taxonomy.

        Args:
            categories: Pre-ordered list of categories.

        Returns:
            Number of categories saved.

        Raises:
            PersistenceError: If saving fails (e.g., duplicate name). The
                previous taxonomy is kept.
        """
        with self.db_manager.connect() as conn:
            with atomic(conn, "Saving categories"):
                conn.execute("DELETE FROM categories")
                conn.executemany(
                    """
                    INSERT INTO categories (name, color, parent, is_subscription, position)
                    VALUES (?, ?, ?, ?, ?)
                    """,
                    [
                        (c.name, c.color, c.parent, int(c.is_subscription), position)
                        for position, c in enumerate(categories)
                    ],
                )

        return len(categories)
