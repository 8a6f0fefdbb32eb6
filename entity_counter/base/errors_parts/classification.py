"""
Error classification helper mapping exceptions to normalized ErrorCode values.
"""
from __future__ import annotations

import sqlite3

from ..cancellation_parts.cancelled_error import CancelledError
from .counter_error import EntityCounterError
from .error_code import ErrorCode


def classify_exception(exc: BaseException) -> ErrorCode:
    """Classify an exception into a normalized :class:`ErrorCode`.

    Precedence:
        1. EntityCounterError passthrough.
        2. Cooperative cancellation.
        3. Database driver errors (always a counting failure here).
        4. ``UNKNOWN`` fallback.
    """
    if isinstance(exc, EntityCounterError):
        return exc.code
    if isinstance(exc, CancelledError):
        return ErrorCode.CANCELLED
    if isinstance(exc, sqlite3.Error):
        return ErrorCode.COUNTING_FAILED
    return ErrorCode.UNKNOWN


__all__ = ["classify_exception"]
