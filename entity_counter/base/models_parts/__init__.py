"""Value types shared by the counter, its observer and the aggregate layer."""

from .count_record import CountRecord
from .limit_scope import LimitScope
from .change_event import ChangeEvent, DID_SAVE
from .tracked_type import TrackedType, type_name
from .counter_snapshot import CounterSnapshot

__all__ = [
    "CountRecord",
    "LimitScope",
    "ChangeEvent",
    "DID_SAVE",
    "TrackedType",
    "type_name",
    "CounterSnapshot",
]
