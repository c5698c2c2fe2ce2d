# =============================================================================
# setu_core/offline/storage.py
# Persistent key/value storage backends for the durable cache
# =============================================================================
"""
Synchronous key -> string storage with a capacity limit.

Backends:
- SQLiteStorage: file-backed, survives process restarts
- MemoryStorage: session-scoped, used for tests and ephemeral sessions

Both raise StorageQuotaError when a write would push the total stored size
over ``max_bytes``. Values are opaque strings; callers serialize.
"""

from __future__ import annotations
import sqlite3
from contextlib import contextmanager
from datetime import datetime
from pathlib import Path
from typing import Dict, Iterator, List, Optional, Protocol, runtime_checkable
import logging

from setu_core.errors import StorageError, StorageQuotaError

logger = logging.getLogger(__name__)


@runtime_checkable
class KeyValueStorage(Protocol):
    """Boundary consumed by DurableCache."""

    def get_item(self, key: str) -> Optional[str]:
        ...

    def set_item(self, key: str, value: str) -> None:
        ...

    def remove_item(self, key: str) -> None:
        ...

    def keys(self) -> List[str]:
        ...


def _size(value: str) -> int:
    return len(value.encode("utf-8"))


class MemoryStorage:
    """In-process storage; contents vanish with the session."""

    def __init__(self, max_bytes: Optional[int] = None):
        self.max_bytes = max_bytes
        self._data: Dict[str, str] = {}

    @property
    def used_bytes(self) -> int:
        return sum(_size(v) for v in self._data.values())

    def get_item(self, key: str) -> Optional[str]:
        return self._data.get(key)

    def set_item(self, key: str, value: str) -> None:
        if self.max_bytes is not None:
            current = self._data.get(key)
            projected = self.used_bytes - (_size(current) if current else 0) + _size(value)
            if projected > self.max_bytes:
                raise StorageQuotaError(
                    "Storage quota exceeded",
                    key=key,
                    limit_bytes=self.max_bytes,
                    requested_bytes=projected,
                )
        self._data[key] = value

    def remove_item(self, key: str) -> None:
        self._data.pop(key, None)

    def keys(self) -> List[str]:
        return list(self._data)


class SQLiteStorage:
    """
    SQLite-backed key/value storage.

    One table, ``kv_store``, holds serialized values keyed by name. The
    capacity check runs inside the write transaction so a rejected write
    leaves the previous value intact.
    """

    DEFAULT_DB_PATH = Path("local_data") / "setu_storage.db"

    SCHEMA = """
        CREATE TABLE IF NOT EXISTS kv_store (
            key TEXT PRIMARY KEY,
            value TEXT NOT NULL,
            size_bytes INTEGER NOT NULL,
            updated_at TEXT DEFAULT CURRENT_TIMESTAMP
        )
    """

    def __init__(self, db_path: Optional[Path] = None, max_bytes: Optional[int] = None):
        self.db_path = Path(db_path or self.DEFAULT_DB_PATH)
        self.max_bytes = max_bytes
        self._connection: Optional[sqlite3.Connection] = None
        self._initialized = False

    def _ensure_directory(self) -> None:
        """Ensure database directory exists."""
        self.db_path.parent.mkdir(parents=True, exist_ok=True)

    def _get_connection(self) -> sqlite3.Connection:
        if self._connection is None:
            self._ensure_directory()
            self._connection = sqlite3.connect(str(self.db_path))
            self._connection.row_factory = sqlite3.Row
        return self._connection

    @contextmanager
    def transaction(self) -> Iterator[sqlite3.Connection]:
        """Context manager for database transactions."""
        conn = self._get_connection()
        try:
            yield conn
            conn.commit()
        except Exception:
            conn.rollback()
            raise

    def initialize(self) -> None:
        """Initialize database schema."""
        if self._initialized:
            return

        try:
            with self.transaction() as conn:
                conn.execute(self.SCHEMA)
        except sqlite3.Error as e:
            raise StorageError(f"Could not initialize storage: {e}", details={"path": str(self.db_path)})

        self._initialized = True
        logger.info(f"Local storage initialized at: {self.db_path}")

    @property
    def used_bytes(self) -> int:
        self.initialize()
        row = self._get_connection().execute(
            "SELECT COALESCE(SUM(size_bytes), 0) AS total FROM kv_store"
        ).fetchone()
        return int(row["total"])

    def get_item(self, key: str) -> Optional[str]:
        self.initialize()
        row = self._get_connection().execute(
            "SELECT value FROM kv_store WHERE key = ?", [key]
        ).fetchone()
        return row["value"] if row else None

    def set_item(self, key: str, value: str) -> None:
        self.initialize()
        size = _size(value)
        try:
            with self.transaction() as conn:
                if self.max_bytes is not None:
                    row = conn.execute(
                        "SELECT COALESCE(SUM(size_bytes), 0) AS total FROM kv_store WHERE key != ?",
                        [key],
                    ).fetchone()
                    projected = int(row["total"]) + size
                    if projected > self.max_bytes:
                        raise StorageQuotaError(
                            "Storage quota exceeded",
                            key=key,
                            limit_bytes=self.max_bytes,
                            requested_bytes=projected,
                        )
                conn.execute(
                    """
                    INSERT OR REPLACE INTO kv_store (key, value, size_bytes, updated_at)
                    VALUES (?, ?, ?, ?)
                    """,
                    [key, value, size, datetime.now().isoformat()],
                )
        except sqlite3.Error as e:
            raise StorageError(f"Write failed: {e}", key=key)

    def remove_item(self, key: str) -> None:
        self.initialize()
        try:
            with self.transaction() as conn:
                conn.execute("DELETE FROM kv_store WHERE key = ?", [key])
        except sqlite3.Error as e:
            raise StorageError(f"Delete failed: {e}", key=key)

    def keys(self) -> List[str]:
        self.initialize()
        rows = self._get_connection().execute("SELECT key FROM kv_store ORDER BY key").fetchall()
        return [row["key"] for row in rows]

    def close(self) -> None:
        """Close database connection."""
        if self._connection is not None:
            self._connection.close()
            self._connection = None
