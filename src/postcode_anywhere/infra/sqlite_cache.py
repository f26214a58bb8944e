"""Persistent postcode cache backed by a SQLite ``paAddress`` table."""

from __future__ import annotations

import logging
import sqlite3
import threading
from datetime import datetime
from pathlib import Path
from typing import Callable

from postcode_anywhere.core.freshness import as_utc, parse_timestamp
from postcode_anywhere.core.models import CacheEntry
from postcode_anywhere.infra.cache import CACHE_KEY_COLUMN, CACHE_TABLE, utcnow

log = logging.getLogger(__name__)

_SCHEMA = f"""
CREATE TABLE IF NOT EXISTS {CACHE_TABLE} (
    postcode TEXT PRIMARY KEY,
    content TEXT NOT NULL,
    created TEXT NOT NULL
)
"""

_UPSERT = f"""
INSERT INTO {CACHE_TABLE} (postcode, content, created)
VALUES (:postcode, :content, :created)
ON CONFLICT(postcode) DO UPDATE SET
    content = excluded.content,
    created = excluded.created
"""


class SqliteCache:
    """
    Holds one connection open across lookups.

    Writes are serialised with a lock so concurrent upserts on the same
    postcode resolve as last-writer-wins.
    """

    def __init__(
        self,
        path: str | Path,
        *,
        clock: Callable[[], datetime] = utcnow,
    ) -> None:
        self._path = Path(path)
        self._clock = clock
        self._lock = threading.Lock()
        self._conn: sqlite3.Connection | None = None

    def get_connection(self) -> sqlite3.Connection:
        """Return an open connection, creating the table if needed."""
        if self._conn is None:
            self._open()
        return self._conn

    def _open(self) -> None:
        self._conn = sqlite3.connect(str(self._path), check_same_thread=False)
        self._conn.execute(_SCHEMA)
        self._conn.commit()

    def find(self, table: str, key: str, key_column: str = CACHE_KEY_COLUMN) -> CacheEntry | None:
        # table/column names cannot be bound as parameters
        if table != CACHE_TABLE or key_column != CACHE_KEY_COLUMN:
            return None

        with self._lock:
            row = self.get_connection().execute(
                f"SELECT postcode, content, created FROM {CACHE_TABLE} WHERE postcode = ?",
                (key,),
            ).fetchone()
        if row is None:
            return None

        postcode, content, created = row
        return CacheEntry(postcode=postcode, content=content, created=parse_timestamp(created))

    def upsert(self, key: str, content: str) -> None:
        created = as_utc(self._clock()).isoformat()
        with self._lock:
            conn = self.get_connection()
            with conn:
                conn.execute(_UPSERT, {"postcode": key, "content": content, "created": created})
        log.debug("Cached addresses for postcode: %s", key)

    def close(self) -> None:
        """Close the connection if open."""
        with self._lock:
            if self._conn is not None:
                self._conn.close()
                self._conn = None

    def __enter__(self) -> SqliteCache:
        return self

    def __exit__(self, *exc: object) -> None:
        self.close()
