"""Immutable counter snapshot.

Readers receive this value instead of the live mapping. Aggregate queries are
computed from it, so a reader always sees one consistent refresh state.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any, Dict, Mapping

from .count_record import CountRecord
from .tracked_type import type_name


@dataclass(frozen=True)
class CounterSnapshot:
    """Point-in-time copy of a counter's state.

    Attributes:
        totals: Read-only mapping of entity type to its ``CountRecord``.
        is_loaded: Whether at least one refresh pass has completed.
        generated_at_ms: Monotonic timestamp (ms) when the snapshot was taken.
    """

    totals: Mapping[type, CountRecord] = field(default_factory=lambda: MappingProxyType({}))
    is_loaded: bool = False
    generated_at_ms: int = 0

    @classmethod
    def of(cls, totals: Mapping[type, CountRecord], *, is_loaded: bool, generated_at_ms: int) -> "CounterSnapshot":
        return cls(
            totals=MappingProxyType(dict(totals)),
            is_loaded=is_loaded,
            generated_at_ms=generated_at_ms,
        )

    def get(self, entity_type: type) -> CountRecord | None:
        return self.totals.get(entity_type)

    def counts_by_name(self) -> Dict[str, int]:
        return {type_name(t): rec.count for t, rec in self.totals.items()}

    def to_dict(self) -> Dict[str, Any]:
        """Serialize to plain data keyed by entity type name."""
        return {
            "is_loaded": self.is_loaded,
            "generated_at_ms": self.generated_at_ms,
            "totals": {type_name(t): rec.to_dict() for t, rec in self.totals.items()},
        }


__all__ = ["CounterSnapshot"]
