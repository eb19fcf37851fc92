"""
SQLite key-value store (KeyValueStorePort implementation).

Backs the persisted gate state (install id, prompt cooldown, push
token) with a single `gate_kv` table created by the bundled migrations.
"""

from __future__ import annotations

import sqlite3
from datetime import UTC, datetime

from src.adapters.sqlite.migrator import SQLiteMigrator


class SQLiteKeyValueStore:
    """SQLite implementation of KeyValueStorePort."""

    def __init__(
        self,
        db_path: str,
        connection: sqlite3.Connection | None = None,
        *,
        migrate: bool = True,
    ) -> None:
        self.db_path = db_path
        self._external_conn = connection
        if migrate and connection is None:
            SQLiteMigrator(db_path).run_migrations()

    def _get_conn(self) -> sqlite3.Connection:
        """Get database connection (uses external if provided)."""
        if self._external_conn is not None:
            return self._external_conn
        return sqlite3.connect(self.db_path)

    def _should_close(self) -> bool:
        return self._external_conn is None

    def get(self, key: str) -> str | None:
        conn = self._get_conn()
        try:
            row = conn.execute("SELECT value FROM gate_kv WHERE key = ?", (key,)).fetchone()
            return row[0] if row else None
        finally:
            if self._should_close():
                conn.close()

    def set(self, key: str, value: str) -> None:
        conn = self._get_conn()
        try:
            conn.execute(
                """
                INSERT INTO gate_kv (key, value, updated_at) VALUES (?, ?, ?)
                ON CONFLICT(key) DO UPDATE SET
                    value = excluded.value,
                    updated_at = excluded.updated_at
                """,
                (key, value, datetime.now(UTC).isoformat()),
            )
            conn.commit()
        finally:
            if self._should_close():
                conn.close()

    def delete(self, key: str) -> None:
        conn = self._get_conn()
        try:
            conn.execute("DELETE FROM gate_kv WHERE key = ?", (key,))
            conn.commit()
        finally:
            if self._should_close():
                conn.close()
