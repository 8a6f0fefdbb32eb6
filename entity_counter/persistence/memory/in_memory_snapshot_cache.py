"""In-memory implementation of SnapshotCache.

Reference implementation for tests and single-process use. Values are copied
on the way in and out so callers can never mutate stored snapshots.
"""

from __future__ import annotations

from threading import Lock
from typing import Dict, Optional


class InMemorySnapshotCache:
    """Dict-backed snapshot cache."""

    def __init__(self, initial: Optional[Dict[str, Dict[str, int]]] = None) -> None:
        self._lock = Lock()
        self._data: Dict[str, Dict[str, int]] = {k: dict(v) for k, v in (initial or {}).items()}
        self.writes = 0

    def get(self, key: str) -> Optional[Dict[str, int]]:
        with self._lock:
            value = self._data.get(key)
            return dict(value) if value is not None else None

    def set(self, key: str, value: Dict[str, int]) -> None:
        with self._lock:
            self._data[key] = dict(value)
            self.writes += 1

    def keys(self) -> list[str]:
        with self._lock:
            return sorted(self._data)


__all__ = ["InMemorySnapshotCache"]
