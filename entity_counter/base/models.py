"""Public model surface.

Re-exports the value types from ``models_parts`` under a stable import path.
"""

from .models_parts import (
    ChangeEvent,
    CountRecord,
    CounterSnapshot,
    DID_SAVE,
    LimitScope,
    TrackedType,
    type_name,
)

__all__ = [
    "CountRecord",
    "LimitScope",
    "ChangeEvent",
    "DID_SAVE",
    "TrackedType",
    "type_name",
    "CounterSnapshot",
]
