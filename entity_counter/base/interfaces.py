"""Public interface surface for the entity counter.

External collaborators (entity types, notification stream, snapshot cache)
are expressed as structural ``Protocol`` types so any object with the right
shape can be plugged in, and tests can supply in-memory fakes.
"""

from .interfaces_parts import (
    ChangeNotifier,
    ChangeSubscription,
    CountableType,
    SnapshotCache,
)

__all__ = ["CountableType", "ChangeNotifier", "ChangeSubscription", "SnapshotCache"]
