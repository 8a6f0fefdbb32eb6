"""SQLite persistence adapters: engine, store handle, countable base, snapshot cache."""

from .engine import create_connection, db_session, init_snapshot_schema
from .record_store import RecordStore
from .countable import SqliteCountable
from .snapshot_cache_repo import SnapshotCacheSqlite

__all__ = [
    "create_connection",
    "db_session",
    "init_snapshot_schema",
    "RecordStore",
    "SqliteCountable",
    "SnapshotCacheSqlite",
]
