"""Unified entity counter error taxonomy public surface.

This module re-exports the one-class-per-file implementations under
``entity_counter.base.errors_parts`` to maintain a stable import path.
"""

from .errors_parts.error_code import ErrorCode
from .errors_parts.counter_error import (
    CountingError,
    EntityCounterError,
    UnsupportedTypeError,
)
from .errors_parts.classification import classify_exception

__all__ = [
    "ErrorCode",
    "EntityCounterError",
    "UnsupportedTypeError",
    "CountingError",
    "classify_exception",
]
