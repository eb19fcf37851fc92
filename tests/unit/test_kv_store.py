"""
Tests for the key-value store adapters and migrations.
"""

from __future__ import annotations

import sqlite3
from pathlib import Path

import pytest

from src.adapters.memory_kv import InMemoryKeyValueStore
from src.adapters.sqlite.kv_store import SQLiteKeyValueStore
from src.adapters.sqlite.migrator import SQLiteMigrator


@pytest.fixture
def db_path(tmp_path: Path) -> str:
    return str(tmp_path / "gate.db")


class TestSQLiteMigrator:
    """Bundled schema migrations."""

    def test_applies_once(self, db_path: str) -> None:
        """Second run finds nothing pending."""
        migrator = SQLiteMigrator(db_path)
        assert migrator.run_migrations() == ["0001_gate_kv.sql"]
        assert migrator.run_migrations() == []

    def test_creates_table(self, db_path: str) -> None:
        SQLiteMigrator(db_path).run_migrations()
        conn = sqlite3.connect(db_path)
        try:
            tables = {
                row[0]
                for row in conn.execute("SELECT name FROM sqlite_master WHERE type='table'")
            }
        finally:
            conn.close()
        assert "gate_kv" in tables

    def test_failed_migration_raises(self, db_path: str, tmp_path: Path) -> None:
        migrations = tmp_path / "migrations"
        migrations.mkdir()
        (migrations / "0001_bad.sql").write_text("CREATE TABLE (;")
        with pytest.raises(RuntimeError, match="0001_bad.sql"):
            SQLiteMigrator(db_path, str(migrations)).run_migrations()


class TestSQLiteKeyValueStore:
    """Persistent store."""

    def test_get_missing(self, db_path: str) -> None:
        assert SQLiteKeyValueStore(db_path).get("nope") is None

    def test_set_get_overwrite_delete(self, db_path: str) -> None:
        store = SQLiteKeyValueStore(db_path)
        store.set("k", "v1")
        assert store.get("k") == "v1"
        store.set("k", "v2")
        assert store.get("k") == "v2"
        store.delete("k")
        assert store.get("k") is None
        store.delete("k")

    def test_persists_across_instances(self, db_path: str) -> None:
        SQLiteKeyValueStore(db_path).set("attribution.install_id", "af-1")
        assert SQLiteKeyValueStore(db_path).get("attribution.install_id") == "af-1"

    def test_external_connection(self, db_path: str) -> None:
        """An injected connection is reused and left open."""
        SQLiteMigrator(db_path).run_migrations()
        conn = sqlite3.connect(db_path)
        try:
            store = SQLiteKeyValueStore(db_path, connection=conn)
            store.set("k", "v")
            assert store.get("k") == "v"
            assert conn.execute("SELECT value FROM gate_kv WHERE key='k'").fetchone() == ("v",)
        finally:
            conn.close()


class TestInMemoryKeyValueStore:
    def test_basic_operations(self) -> None:
        store = InMemoryKeyValueStore({"a": "1"})
        assert store.get("a") == "1"
        store.set("b", "2")
        store.delete("a")
        store.delete("missing")
        assert store.items() == {"b": "2"}
