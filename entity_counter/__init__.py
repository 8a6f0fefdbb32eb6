"""entity_counter package

Cached record counts with optional per-type limits, kept fresh by store
change notifications.

Public API (re-exported):
    - Version: ``__version__``
    - Core: :class:`EntityCounter`, :class:`LimitScope`, :class:`TrackedType`,
      :class:`CountRecord`, :class:`CounterSnapshot`, :class:`ObserverState`
    - Exceptions: :class:`EntityCounterError`, :class:`UnsupportedTypeError`,
      :class:`CountingError`, :class:`ErrorCode`
    - Contracts: :class:`CountableType`, :class:`ChangeNotifier`,
      :class:`SnapshotCache`
    - Reference adapters: :class:`NotificationCenter`, :class:`RecordStore`,
      :class:`SqliteCountable`, :class:`SnapshotCacheSqlite`,
      :class:`InMemorySnapshotCache`
    - Configuration: :class:`CounterSettings`, :func:`get_counter_config`

Example::

    from entity_counter import EntityCounter, RecordStore, SqliteCountable

    class Item(SqliteCountable):
        __table__ = "items"

    store = RecordStore(db_path="app.db")
    counter = EntityCounter(store, (Item, 10))
"""

from .base.errors import (
    CountingError,
    EntityCounterError,
    ErrorCode,
    UnsupportedTypeError,
)
from .base.interfaces import ChangeNotifier, CountableType, SnapshotCache
from .base.models import (
    ChangeEvent,
    CountRecord,
    CounterSnapshot,
    LimitScope,
    TrackedType,
)
from .config import CounterSettings, get_counter_config
from .counter import EntityCounter, ObserverState, derive_snapshot_key
from .notifications import NotificationCenter, default_notification_center
from .persistence import (
    InMemorySnapshotCache,
    RecordStore,
    SnapshotCacheSqlite,
    SqliteCountable,
)

__version__ = "0.1.0"

__all__ = [
    "__version__",
    "EntityCounter",
    "LimitScope",
    "TrackedType",
    "CountRecord",
    "CounterSnapshot",
    "ChangeEvent",
    "ObserverState",
    "derive_snapshot_key",
    "EntityCounterError",
    "UnsupportedTypeError",
    "CountingError",
    "ErrorCode",
    "CountableType",
    "ChangeNotifier",
    "SnapshotCache",
    "NotificationCenter",
    "default_notification_center",
    "RecordStore",
    "SqliteCountable",
    "SnapshotCacheSqlite",
    "InMemorySnapshotCache",
    "CounterSettings",
    "get_counter_config",
]
