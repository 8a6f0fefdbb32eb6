"""entity_counter.config.defaults
===============================

Central place for small, stable default values used across the entity
counter. These can be overridden via environment variables or an external
configuration file (see ``entity_counter.config``), but provide sensible
fallbacks for local development and tests.

This module intentionally imports nothing from the rest of the package to
avoid circular dependencies. Only plain constants live here.
"""

from __future__ import annotations

# ---- Snapshot cache keys ----
# Key shape: <prefix>_<SortedTypeNames joined by separator>_<suffix>
SNAPSHOT_KEY_PREFIX = "EntityCounter"
SNAPSHOT_KEY_SUFFIX = "Counts"
SNAPSHOT_KEY_SEPARATOR = "_"


# ---- Change observer ----
# Seconds the observer blocks on the subscription before re-checking its
# cancellation token.
OBSERVER_POLL_INTERVAL_SECONDS = 0.25
# Upper bound on how long stop_tracking() waits for the observer thread.
OBSERVER_JOIN_TIMEOUT_SECONDS = 2.0
OBSERVER_THREAD_NAME = "entity-counter-observer"


# ---- Limits ----
# Default limit applied when neither the registration nor the caller sets one.
# None means unlimited.
DEFAULT_LIMIT = None


# ---- SQLite tuning ----
# Busy timeout (ms) to mitigate transient lock contention.
SQLITE_BUSY_TIMEOUT_MS = 5000
# Journal mode for concurrent readers during writes.
SQLITE_JOURNAL_MODE = "WAL"
# Synchronous level balancing durability and throughput.
SQLITE_SYNCHRONOUS = "NORMAL"
# Table holding persisted count snapshots.
SQLITE_SNAPSHOT_TABLE = "counter_snapshots"


__all__ = [
    "SNAPSHOT_KEY_PREFIX",
    "SNAPSHOT_KEY_SUFFIX",
    "SNAPSHOT_KEY_SEPARATOR",
    "OBSERVER_POLL_INTERVAL_SECONDS",
    "OBSERVER_JOIN_TIMEOUT_SECONDS",
    "OBSERVER_THREAD_NAME",
    "DEFAULT_LIMIT",
    "SQLITE_BUSY_TIMEOUT_MS",
    "SQLITE_JOURNAL_MODE",
    "SQLITE_SYNCHRONOUS",
    "SQLITE_SNAPSHOT_TABLE",
]
