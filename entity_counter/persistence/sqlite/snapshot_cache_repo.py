"""SQLite-backed implementation of ``SnapshotCache``.

Stores one JSON document of ``{type_name: count}`` per cache key. Unlike the
record store, ``set`` commits immediately: the snapshot is a best-effort
cache written once per refresh pass and must not wait on caller transactions.
"""

from __future__ import annotations

import json
import sqlite3
from contextlib import suppress
from threading import Lock
from typing import Dict, Optional

from ...config.defaults import SQLITE_SNAPSHOT_TABLE
from ...base.interfaces import SnapshotCache
from .engine import init_snapshot_schema


class SnapshotCacheSqlite(SnapshotCache):
    """SQLite-backed snapshot cache."""

    def __init__(self, conn: sqlite3.Connection) -> None:
        """Initialize the cache and ensure its table exists.

        Parameters
        ----------
        conn:
            Connection opened by ``create_connection`` (thread-shareable).
        """
        self.conn = conn
        self._lock = Lock()
        init_snapshot_schema(conn)

    def get(self, key: str) -> Optional[Dict[str, int]]:
        """Return the stored counts for ``key``.

        Malformed documents are treated as absent.
        """
        with self._lock:
            row = self.conn.execute(
                f"SELECT counts_json FROM {SQLITE_SNAPSHOT_TABLE} WHERE cache_key = ?",
                (key,),
            ).fetchone()
        if not row or not row[0]:
            return None
        with suppress(ValueError, TypeError):
            data = json.loads(row[0])
            if isinstance(data, dict):
                return {str(k): int(v) for k, v in data.items()}
        return None

    def set(self, key: str, value: Dict[str, int]) -> None:
        """Replace the stored counts for ``key`` and commit."""
        payload = json.dumps(dict(value), ensure_ascii=False, sort_keys=True)
        with self._lock:
            self.conn.execute(
                f"INSERT INTO {SQLITE_SNAPSHOT_TABLE}(cache_key, counts_json, updated_at) "
                "VALUES(?, ?, CURRENT_TIMESTAMP) ON CONFLICT(cache_key) DO UPDATE SET "
                "counts_json=excluded.counts_json, updated_at=CURRENT_TIMESTAMP",
                (key, payload),
            )
            self.conn.commit()

    def keys(self) -> list[str]:
        with self._lock:
            rows = self.conn.execute(
                f"SELECT cache_key FROM {SQLITE_SNAPSHOT_TABLE} ORDER BY cache_key"
            ).fetchall()
        return [r[0] for r in rows]


__all__ = ["SnapshotCacheSqlite"]
