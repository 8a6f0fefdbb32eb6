"""SQLite-backed store handle.

``RecordStore`` is the handle an ``EntityCounter`` is bound to. It wraps one
connection, serializes access to it with a lock, and posts a ``did_save``
change event to its notifier after every successful ``save()``, which is what
drives counter refreshes.

Writes are never committed implicitly; callers decide when to ``save()``.
"""

from __future__ import annotations

import re
import sqlite3
from threading import RLock
from typing import Any, Iterable, Mapping, Optional, Sequence

from ...base.logging import get_logger, log_event
from ...config import CounterSettings, get_counter_config
from ...notifications import NotificationCenter, default_notification_center
from .engine import create_connection

logger = get_logger(__name__)

_IDENTIFIER = re.compile(r"^[A-Za-z_][A-Za-z0-9_]*$")


def _check_identifier(name: str) -> str:
    """Reject table/column names that could not be safely interpolated."""
    if not _IDENTIFIER.match(name or ""):
        raise ValueError(f"invalid SQL identifier: {name!r}")
    return name


class RecordStore:
    """Minimal persistence handle over a SQLite connection."""

    def __init__(
        self,
        conn: Optional[sqlite3.Connection] = None,
        *,
        db_path: Optional[str] = None,
        notifier: Optional[NotificationCenter] = None,
        name: Optional[str] = None,
    ) -> None:
        self._conn = conn if conn is not None else create_connection(db_path)
        self._owns_conn = conn is None
        self._lock = RLock()
        self._closed = False
        self.notifier = notifier if notifier is not None else default_notification_center()
        self.name = name or f"store-{id(self):x}"

    @classmethod
    def from_settings(
        cls,
        settings: Optional[CounterSettings] = None,
        *,
        notifier: Optional[NotificationCenter] = None,
    ) -> "RecordStore":
        """Open the database named by ``settings.db_path`` (in-memory when unset)."""
        settings = settings or get_counter_config()
        return cls(db_path=settings.db_path, notifier=notifier)

    @property
    def connection(self) -> sqlite3.Connection:
        return self._conn

    # ------------------------------ Schema ------------------------------ #
    def ensure_table(self, table: str, columns: Sequence[str]) -> None:
        """Create ``table`` with an integer id and the given untyped columns."""
        cols = ", ".join(f"{_check_identifier(c)}" for c in columns)
        sql = f"CREATE TABLE IF NOT EXISTS {_check_identifier(table)} (id INTEGER PRIMARY KEY AUTOINCREMENT"
        sql += f", {cols})" if cols else ")"
        with self._lock:
            self._conn.execute(sql)
            self._conn.commit()

    # ------------------------------ Writes ------------------------------ #
    def insert(self, table: str, values: Mapping[str, Any]) -> int:
        """Insert one row (uncommitted) and return its rowid."""
        names = [_check_identifier(k) for k in values]
        placeholders = ", ".join("?" for _ in names)
        sql = f"INSERT INTO {_check_identifier(table)} ({', '.join(names)}) VALUES ({placeholders})"
        with self._lock:
            cur = self._conn.execute(sql, tuple(values.values()))
            return int(cur.lastrowid)

    def insert_many(self, table: str, rows: Iterable[Mapping[str, Any]]) -> int:
        n = 0
        for row in rows:
            self.insert(table, row)
            n += 1
        return n

    def delete(self, table: str, where: Optional[str] = None, params: Sequence[Any] = ()) -> int:
        """Delete matching rows (uncommitted); return the affected row count."""
        sql = f"DELETE FROM {_check_identifier(table)}"
        if where:
            sql += f" WHERE {where}"
        with self._lock:
            return self._conn.execute(sql, tuple(params)).rowcount

    # ------------------------------ Reads ------------------------------- #
    def count(self, table: str, where: Optional[str] = None, params: Sequence[Any] = ()) -> int:
        """Return ``COUNT(*)`` of ``table`` optionally filtered by ``where``.

        Raises ``sqlite3.Error`` on query failure (e.g. missing table).
        """
        sql = f"SELECT COUNT(*) FROM {_check_identifier(table)}"
        if where:
            sql += f" WHERE {where}"
        with self._lock:
            row = self._conn.execute(sql, tuple(params)).fetchone()
        return int(row[0]) if row else 0

    # --------------------------- Transactions --------------------------- #
    def save(self) -> None:
        """Commit pending writes and notify observers of this store."""
        with self._lock:
            self._conn.commit()
        receivers = self.notifier.post_change(self)
        log_event(logger, "store.saved", store=self.name, receivers=receivers)

    def rollback(self) -> None:
        with self._lock:
            self._conn.rollback()

    def close(self) -> None:
        """Close the connection when this handle opened it (idempotent)."""
        if self._closed:
            return
        self._closed = True
        if self._owns_conn:
            with self._lock:
                self._conn.close()

    def __enter__(self) -> "RecordStore":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        try:
            if exc_type is None:
                self.save()
            else:
                self.rollback()
        finally:
            self.close()

    def __repr__(self) -> str:  # pragma: no cover - introspection aid
        return f"RecordStore(name={self.name!r})"


__all__ = ["RecordStore"]
