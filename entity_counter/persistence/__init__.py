"""Persistence adapters for the entity counter.

The counter itself only depends on the Protocols in
``entity_counter.base.interfaces``; the adapters here are reference
implementations (SQLite and in-memory).
"""

from .memory import InMemorySnapshotCache
from .sqlite import (
    RecordStore,
    SnapshotCacheSqlite,
    SqliteCountable,
    create_connection,
)

__all__ = [
    "InMemorySnapshotCache",
    "RecordStore",
    "SnapshotCacheSqlite",
    "SqliteCountable",
    "create_connection",
]
