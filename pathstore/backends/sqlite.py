"""SQLite storage backend."""

import logging
import sqlite3
import threading
import time
from typing import Iterator, Optional

from .base import StorageBackend

logger = logging.getLogger(__name__)


class SQLiteBackend(StorageBackend):
    """SQLite storage backend.

    Stores one row per key in a SQLite database file. Several processes may
    open the same file; the Store's conflict check detects their writes.

    Example:
        backend = SQLiteBackend()
        backend.connect(path="settings.db")

        # Or in-memory
        backend.connect(path=":memory:")
    """

    def __init__(self):
        self._conn: Optional[sqlite3.Connection] = None
        self._path: Optional[str] = None
        self._lock = threading.Lock()

    def connect(self, path: str = ":memory:", **kwargs) -> None:
        """Connect to SQLite database.

        Args:
            path: Database file path, or ":memory:" for in-memory database
        """
        self._path = path
        # Debounced saves run on a timer thread
        self._conn = sqlite3.connect(path, check_same_thread=False)
        self._conn.row_factory = sqlite3.Row
        self._create_tables()
        logger.debug("Connected to SQLite database %s", path)

    def _create_tables(self) -> None:
        """Create the items table if it doesn't exist."""
        self._conn.execute(
            """
            CREATE TABLE IF NOT EXISTS items (
                key TEXT PRIMARY KEY,
                source TEXT NOT NULL,
                updated_at REAL NOT NULL
            )
            """
        )
        self._conn.commit()

    def close(self) -> None:
        """Close the database connection."""
        if self._conn:
            self._conn.close()
            self._conn = None

    def get(self, key: str) -> Optional[str]:
        """Read the raw source for a key."""
        cursor = self._conn.execute(
            "SELECT source FROM items WHERE key = ?", (key,)
        )
        row = cursor.fetchone()
        if row is None:
            return None
        return row["source"]

    def put(self, key: str, source: str) -> None:
        """Write the raw source for a key."""
        with self._lock:
            self._conn.execute(
                """
                INSERT OR REPLACE INTO items (key, source, updated_at)
                VALUES (?, ?, ?)
                """,
                (key, source, time.time()),
            )
            self._conn.commit()

    def delete(self, key: str) -> bool:
        """Delete the value for a key."""
        with self._lock:
            cursor = self._conn.execute(
                "DELETE FROM items WHERE key = ?", (key,)
            )
            self._conn.commit()
            return cursor.rowcount > 0

    def exists(self, key: str) -> bool:
        """Check if a key exists."""
        cursor = self._conn.execute(
            "SELECT 1 FROM items WHERE key = ?", (key,)
        )
        return cursor.fetchone() is not None

    def query(self, pattern: str) -> Iterator[str]:
        """Query keys matching a glob pattern.

        SQLite GLOB is case-sensitive and uses * and ? wildcards,
        matching fnmatchcase behavior.
        """
        cursor = self._conn.execute(
            "SELECT key FROM items WHERE key GLOB ? ORDER BY key",
            (pattern,),
        )
        for row in cursor:
            yield row["key"]
