"""
Structured entity counter exception types.

``EntityCounterError`` carries a normalized `ErrorCode` for consistent
handling and structured logging. The two failure kinds a refresh pass can
observe get their own subclasses so callers and tests can catch them
precisely.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from .error_code import ErrorCode


@dataclass
class EntityCounterError(Exception):
    """Represents a structured counter error with a normalized error code.

    Attributes:
        code: Normalized :class:`ErrorCode` classification for the failure.
        message: Human-readable error message suitable for logging.
        entity: Name of the entity type involved, when there is one.
        raw: Optional original exception for diagnostics.
    """

    code: ErrorCode
    message: str
    entity: Optional[str] = None
    raw: Optional[BaseException] = None

    def __str__(self) -> str:  # pragma: no cover - trivial
        """Return a compact string combining entity, code, and message."""
        return f"{self.entity or '-'} {self.code.value}: {self.message}"


class UnsupportedTypeError(EntityCounterError):
    """The entity type does not implement ``count_records(store)``."""

    def __init__(self, entity: str) -> None:
        super().__init__(
            code=ErrorCode.UNSUPPORTED_TYPE,
            message=f"Unsupported entity type: {entity}",
            entity=entity,
        )


class CountingError(EntityCounterError):
    """The persistence layer failed while counting records of a type."""

    def __init__(self, entity: str, raw: Optional[BaseException] = None) -> None:
        detail = str(raw) if raw is not None else "count query failed"
        super().__init__(
            code=ErrorCode.COUNTING_FAILED,
            message=f"Failed to count {entity}: {detail}",
            entity=entity,
            raw=raw,
        )


__all__ = ["EntityCounterError", "UnsupportedTypeError", "CountingError"]
