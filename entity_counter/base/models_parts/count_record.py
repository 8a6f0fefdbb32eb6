"""Count record value type.

Holds the last known count and the effective limit for one tracked entity
type. Records are frozen; the counter replaces an entry instead of mutating
it so snapshots handed to readers can never change underneath them.
"""

from __future__ import annotations

from dataclasses import dataclass, asdict
from typing import Any, Dict, Optional


@dataclass(frozen=True)
class CountRecord:
    """Current count and optional limit for a tracked entity type.

    Attributes:
        count: Number of persisted records seen by the last refresh.
        limit: Maximum allowed count; ``None`` means unlimited.
    """

    count: int = 0
    limit: Optional[int] = None

    @property
    def is_unlimited(self) -> bool:
        return self.limit is None

    @property
    def remaining(self) -> Optional[int]:
        """Capacity left before the limit, never negative; ``None`` if unlimited."""
        if self.limit is None:
            return None
        return max(self.limit - self.count, 0)

    @property
    def is_over_limit(self) -> bool:
        """Strictly greater than the limit; equal is not over."""
        if self.limit is None:
            return False
        return self.count > self.limit

    def with_count(self, count: int) -> "CountRecord":
        return CountRecord(count=count, limit=self.limit)

    def with_limit(self, limit: Optional[int]) -> "CountRecord":
        return CountRecord(count=self.count, limit=limit)

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


__all__ = ["CountRecord"]
