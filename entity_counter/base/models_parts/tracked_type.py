"""Tracked entity type registration.

A ``TrackedType`` pairs an entity class with its configured limit. The
capability check happens here, when the registration is built, so a type
without ``count_records`` is rejected before any counter uses it.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Optional, Tuple, Union

from ..errors_parts.counter_error import UnsupportedTypeError
from ..interfaces_parts.countable_type import CountableType


def type_name(entity_type: Any) -> str:
    """Return the stable display/cache name of an entity type.

    Uses ``__entity_name__`` when the class declares one, else ``__name__``.
    """
    explicit = getattr(entity_type, "__entity_name__", None)
    if isinstance(explicit, str) and explicit:
        return explicit
    return getattr(entity_type, "__name__", None) or repr(entity_type)


@dataclass(frozen=True)
class TrackedType:
    """Registration of one entity type with its configured limit.

    Attributes:
        entity_type: The entity class; also the mapping key.
        limit: Configured limit, ``None`` to fall back to the counter's
            default limit (or unlimited when there is none).
    """

    entity_type: type
    limit: Optional[int] = None

    def __post_init__(self) -> None:
        if not isinstance(self.entity_type, type) or not isinstance(self.entity_type, CountableType):
            raise UnsupportedTypeError(type_name(self.entity_type))

    @property
    def name(self) -> str:
        return type_name(self.entity_type)

    @classmethod
    def coerce(cls, value: Union["TrackedType", Tuple[type, Optional[int]], type]) -> "TrackedType":
        """Build a registration from a ``TrackedType``, a ``(type, limit)`` pair or a bare type."""
        if isinstance(value, TrackedType):
            return value
        if isinstance(value, tuple):
            entity_type, limit = value
            return cls(entity_type=entity_type, limit=limit)
        return cls(entity_type=value)


__all__ = ["TrackedType", "type_name"]
