"""Interface parts package.

One Protocol per module; import from ``entity_counter.base.interfaces``.
"""

from .countable_type import CountableType
from .change_notifier import ChangeNotifier, ChangeSubscription
from .snapshot_cache import SnapshotCache

__all__ = ["CountableType", "ChangeNotifier", "ChangeSubscription", "SnapshotCache"]
