"""Errors parts package public surface.

Re-exports individual error taxonomy components for optional direct imports.
Prefer importing from `entity_counter.base.errors` for the stable surface.
"""

from .error_code import ErrorCode
from .counter_error import CountingError, EntityCounterError, UnsupportedTypeError
from .classification import classify_exception

__all__ = [
    "ErrorCode",
    "EntityCounterError",
    "UnsupportedTypeError",
    "CountingError",
    "classify_exception",
]
