"""Snapshot cache key derivation.

The key is built from the sorted set of tracked type names so two counters
tracking different type sets never read or overwrite each other's snapshot,
while a counter re-created with the same types (in any order) finds the
previous one.
"""

from __future__ import annotations

from typing import Iterable

from ..config.defaults import (
    SNAPSHOT_KEY_PREFIX,
    SNAPSHOT_KEY_SEPARATOR,
    SNAPSHOT_KEY_SUFFIX,
)


def derive_snapshot_key(type_names: Iterable[str]) -> str:
    """Return ``EntityCounter_<SortedNames>_Counts`` for the given type names.

    >>> derive_snapshot_key(["Tag", "Item"])
    'EntityCounter_Item_Tag_Counts'
    """
    joined = SNAPSHOT_KEY_SEPARATOR.join(sorted(set(type_names)))
    return SNAPSHOT_KEY_SEPARATOR.join((SNAPSHOT_KEY_PREFIX, joined, SNAPSHOT_KEY_SUFFIX))


__all__ = ["derive_snapshot_key"]
