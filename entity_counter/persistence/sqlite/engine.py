"""SQLite engine helpers for the reference persistence adapters.

Purpose
-------
Centralize opening SQLite connections and creating the snapshot table.

Timeout and reliability strategy
--------------------------------
- Applies ``busy_timeout`` (milliseconds) from
  ``entity_counter.config.defaults`` to mitigate lock contention.
- Enables WAL journaling and NORMAL synchronous mode.
- Connections are opened with ``check_same_thread=False`` because the change
  observer counts from its own thread; ``RecordStore`` serializes access.
"""

from __future__ import annotations

import sqlite3
from contextlib import contextmanager
from pathlib import Path
from typing import Iterator, Optional

from ...config.defaults import (
    SQLITE_BUSY_TIMEOUT_MS,
    SQLITE_JOURNAL_MODE,
    SQLITE_SNAPSHOT_TABLE,
    SQLITE_SYNCHRONOUS,
)

MEMORY_DB = ":memory:"


def _ensure_dir(p: Path) -> None:
    p.mkdir(parents=True, exist_ok=True)


def create_connection(db_path: Optional[str] = None) -> sqlite3.Connection:
    """Open a SQLite connection with sane defaults and apply PRAGMA settings.

    Parameters
    ----------
    db_path:
        Path to the database file. ``None`` or ``":memory:"`` opens a private
        in-memory database.

    Returns
    -------
    sqlite3.Connection
        An open connection with ``row_factory`` set to ``sqlite3.Row``.
    """
    if db_path and db_path != MEMORY_DB:
        path = Path(db_path).expanduser()
        _ensure_dir(path.parent)
        conn = sqlite3.connect(str(path), check_same_thread=False)
        conn.execute(f"PRAGMA journal_mode={SQLITE_JOURNAL_MODE};")
    else:
        conn = sqlite3.connect(MEMORY_DB, check_same_thread=False)
    conn.row_factory = sqlite3.Row
    conn.execute(f"PRAGMA synchronous={SQLITE_SYNCHRONOUS};")
    conn.execute(f"PRAGMA busy_timeout={SQLITE_BUSY_TIMEOUT_MS};")  # ms
    return conn


def init_snapshot_schema(conn: sqlite3.Connection) -> None:
    """Create the snapshot table if it does not exist, then commit."""
    conn.execute(
        f"""
        CREATE TABLE IF NOT EXISTS {SQLITE_SNAPSHOT_TABLE} (
            cache_key   TEXT PRIMARY KEY,
            counts_json TEXT NOT NULL,
            updated_at  TIMESTAMP NOT NULL DEFAULT CURRENT_TIMESTAMP
        );
        """
    )
    conn.commit()


@contextmanager
def db_session(db_path: Optional[str] = None) -> Iterator[sqlite3.Connection]:
    """Context manager yielding a connection with the snapshot schema initialized.

    Commits on normal exit, rolls back on exception, always closes.
    """
    conn = create_connection(db_path)
    try:
        init_snapshot_schema(conn)
        yield conn
        conn.commit()
    except Exception:
        conn.rollback()
        raise
    finally:
        conn.close()


__all__ = ["create_connection", "init_snapshot_schema", "db_session", "MEMORY_DB"]
