"""
Normalized entity counter error codes (taxonomy).

Defines the `ErrorCode` enumeration used by the counter, its adapters and the
configuration layer. Values are lowercase snake_case and are considered a
stable public contract for logging.
"""
from __future__ import annotations

from enum import Enum


class ErrorCode(str, Enum):
    """Enumerated normalized error codes representing failure categories."""

    UNSUPPORTED_TYPE = "unsupported_type"
    COUNTING_FAILED = "counting_failed"
    CANCELLED = "cancelled"
    INVALID_CONFIG = "invalid_config"
    UNKNOWN = "unknown"


__all__ = ["ErrorCode"]
