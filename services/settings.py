"""Keyed settings storage (JSON values in the settings table)."""

import json
import sqlite3
from typing import Any

from services.store import PersistenceError, atomic


class SettingsService:
    """Read and write whole JSON values by key."""

    def __init__(self, db_manager):
        self.db_manager = db_manager

    def get(self, key: str, default: Any = None) -> Any:
        """Get the value stored under key, or default if there is none."""
        with self.db_manager.connect() as conn:
            try:
                cursor = conn.execute(
                    "SELECT value FROM settings WHERE key = ?", (key,)
                )
                row = cursor.fetchone()
            except sqlite3.Error as e:
                raise PersistenceError(f"Loading setting '{key}' failed: {e}") from e

        if row is None:
            return default
        return json.loads(row[0])

    def set(self, key: str, value: Any) -> None:
        """Store value under key, replacing any previous value."""
        with self.db_manager.connect() as conn:
            with atomic(conn, f"Saving setting '{key}'"):
                conn.execute(
                    """
                    INSERT INTO settings (key, value) VALUES (?, ?)
                    ON CONFLICT(key) DO UPDATE SET
                        value = excluded.value,
                        updated_at = CURRENT_TIMESTAMP
                    """,
                    (key, json.dumps(value)),
                )
