"""Synchronous string key/value stores with a finite capacity."""

import sqlite3
from pathlib import Path
from typing import Protocol


class StorageQuotaExceeded(Exception):
    """Raised when a write would push the store past its capacity."""

    def __init__(self, key: str, required: int, capacity: int):
        super().__init__(
            f"Writing {key!r} needs {required} bytes, capacity is {capacity}"
        )
        self.key = key
        self.required = required
        self.capacity = capacity


class KeyValueStore(Protocol):
    def get_item(self, key: str) -> str | None: ...

    def set_item(self, key: str, value: str) -> None: ...

    def remove_item(self, key: str) -> None: ...

    def keys(self) -> list[str]: ...


KV_ITEMS_DDL = """
CREATE TABLE IF NOT EXISTS kv_items (
    key TEXT PRIMARY KEY,
    value TEXT NOT NULL,
    updated_at TEXT NOT NULL DEFAULT CURRENT_TIMESTAMP
)
"""


def _entry_size(key: str, value: str) -> int:
    return len(key.encode()) + len(value.encode())


class MemoryKeyValueStore:
    """Dict-backed store, mainly for tests and throwaway sessions."""

    def __init__(self, capacity_bytes: int | None = None):
        self.capacity_bytes = capacity_bytes
        self._items: dict[str, str] = {}

    def get_item(self, key: str) -> str | None:
        return self._items.get(key)

    def set_item(self, key: str, value: str) -> None:
        if self.capacity_bytes is not None:
            used = sum(
                _entry_size(k, v) for k, v in self._items.items() if k != key
            )
            required = used + _entry_size(key, value)
            if required > self.capacity_bytes:
                raise StorageQuotaExceeded(key, required, self.capacity_bytes)
        self._items[key] = value

    def remove_item(self, key: str) -> None:
        self._items.pop(key, None)

    def keys(self) -> list[str]:
        return list(self._items)


class SqliteKeyValueStore:
    """Store backed by a single ``kv_items`` table, created on first use."""

    def __init__(self, conn: sqlite3.Connection, capacity_bytes: int | None = None):
        self.conn = conn
        self.capacity_bytes = capacity_bytes
        self.conn.execute(KV_ITEMS_DDL)
        self.conn.commit()

    @classmethod
    def open(
        cls, db_path: str | Path, capacity_bytes: int | None = None
    ) -> "SqliteKeyValueStore":
        """Open a WAL-mode database file, creating parent directories."""
        if str(db_path) != ":memory:":
            Path(db_path).parent.mkdir(parents=True, exist_ok=True)
        conn = sqlite3.connect(str(db_path))
        conn.execute("PRAGMA journal_mode=WAL")
        return cls(conn, capacity_bytes=capacity_bytes)

    def close(self) -> None:
        self.conn.close()

    def get_item(self, key: str) -> str | None:
        row = self.conn.execute(
            "SELECT value FROM kv_items WHERE key = ?", (key,)
        ).fetchone()
        if row is None:
            return None
        return row[0]

    def set_item(self, key: str, value: str) -> None:
        if self.capacity_bytes is not None:
            row = self.conn.execute(
                "SELECT COALESCE(SUM(LENGTH(CAST(key AS BLOB)) + LENGTH(CAST(value AS BLOB))), 0) "
                "FROM kv_items WHERE key != ?",
                (key,),
            ).fetchone()
            required = row[0] + _entry_size(key, value)
            if required > self.capacity_bytes:
                raise StorageQuotaExceeded(key, required, self.capacity_bytes)
        self.conn.execute(
            "INSERT INTO kv_items (key, value, updated_at) VALUES (?, ?, CURRENT_TIMESTAMP) "
            "ON CONFLICT(key) DO UPDATE SET value = excluded.value, updated_at = CURRENT_TIMESTAMP",
            (key, value),
        )
        self.conn.commit()

    def remove_item(self, key: str) -> None:
        self.conn.execute("DELETE FROM kv_items WHERE key = ?", (key,))
        self.conn.commit()

    def keys(self) -> list[str]:
        rows = self.conn.execute("SELECT key FROM kv_items ORDER BY key").fetchall()
        return [r[0] for r in rows]
