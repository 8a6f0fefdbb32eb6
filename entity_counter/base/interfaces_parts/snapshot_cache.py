"""SnapshotCache Protocol (single-class module).

Lightweight key/value store holding the last known counts so a counter can
show values instantly on cold start.
"""

from __future__ import annotations

from typing import Dict, Optional, Protocol, runtime_checkable


@runtime_checkable
class SnapshotCache(Protocol):
    """Persist and load ``{type_name: count}`` documents by string key.

    No transactional guarantees are expected; last write wins.
    """

    def get(self, key: str) -> Optional[Dict[str, int]]:  # pragma: no cover - interface
        """Return the stored counts for ``key`` or ``None`` when absent."""
        ...

    def set(self, key: str, value: Dict[str, int]) -> None:  # pragma: no cover - interface
        """Replace the stored counts for ``key``."""
        ...


__all__ = ["SnapshotCache"]
