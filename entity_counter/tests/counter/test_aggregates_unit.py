"""Pure aggregate functions over hand-built snapshots."""
from __future__ import annotations

import pytest

from entity_counter.base.models import CountRecord, CounterSnapshot, LimitScope
from entity_counter.counter import aggregates


class Item:
    pass


class Tag:
    pass


class Note:
    pass


def _snap(**records: CountRecord) -> CounterSnapshot:
    types = {"item": Item, "tag": Tag, "note": Note}
    return CounterSnapshot.of({types[k]: v for k, v in records.items()}, is_loaded=True, generated_at_ms=0)


def test_empty_snapshot():
    snap = _snap()
    assert aggregates.grand_count(snap) == 0  # nosec B101
    assert aggregates.combined_limit(snap) == 0  # nosec B101
    assert aggregates.combined_remaining(snap) == 0  # nosec B101
    assert aggregates.is_over_any_limit(snap) is False  # nosec B101


def test_all_scope_with_every_type_limited():
    snap = _snap(item=CountRecord(3, 10), tag=CountRecord(4, 5))
    assert aggregates.grand_count(snap) == 7  # nosec B101
    assert aggregates.combined_limit(snap, LimitScope.ALL) == 15  # nosec B101
    assert aggregates.combined_remaining(snap, LimitScope.ALL) == 8  # nosec B101


def test_one_unlimited_type_makes_all_scope_unlimited():
    snap = _snap(item=CountRecord(3, 10), tag=CountRecord(5, None))
    assert aggregates.combined_limit(snap, LimitScope.ALL) is None  # nosec B101
    assert aggregates.combined_remaining(snap, LimitScope.ALL) is None  # nosec B101


def test_excluding_unlimited_drops_both_limit_and_count():
    snap = _snap(item=CountRecord(3, 10), tag=CountRecord(5, None), note=CountRecord(1, 2))
    assert aggregates.limited_count(snap) == 4  # nosec B101
    assert aggregates.combined_limit(snap, LimitScope.EXCLUDING_UNLIMITED) == 12  # nosec B101
    assert aggregates.combined_remaining(snap, LimitScope.EXCLUDING_UNLIMITED) == 8  # nosec B101


def test_excluding_unlimited_with_only_unlimited_types():
    snap = _snap(tag=CountRecord(5, None))
    assert aggregates.combined_limit(snap, LimitScope.EXCLUDING_UNLIMITED) == 0  # nosec B101
    assert aggregates.combined_remaining(snap, LimitScope.EXCLUDING_UNLIMITED) == 0  # nosec B101


def test_combined_remaining_clamps_at_zero():
    snap = _snap(item=CountRecord(30, 10), tag=CountRecord(0, 5))
    assert aggregates.combined_remaining(snap) == 0  # nosec B101
    assert aggregates.is_over_any_limit(snap) is True  # nosec B101


def test_scope_accepts_string_values():
    snap = _snap(item=CountRecord(3, 10), tag=CountRecord(5, None))
    assert aggregates.combined_remaining(snap, "excluding_unlimited") == 7  # nosec B101
    with pytest.raises(ValueError):
        aggregates.combined_limit(snap, "bogus")
