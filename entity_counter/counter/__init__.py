"""Counter core: the count store, its change observer and aggregate queries."""

from .entity_counter import EntityCounter, Registration, SnapshotListener
from .change_observer import ChangeObserver
from .observer_state import ObserverState
from .snapshot_keys import derive_snapshot_key
from . import aggregates

__all__ = [
    "EntityCounter",
    "Registration",
    "SnapshotListener",
    "ChangeObserver",
    "ObserverState",
    "derive_snapshot_key",
    "aggregates",
]
