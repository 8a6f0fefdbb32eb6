"""Aggregate (multi-type) queries over a counter snapshot.

Every function here is pure: it reads a ``CounterSnapshot`` and returns a
value. ``EntityCounter`` exposes them as properties/methods over its current
snapshot.

Scope semantics
---------------
``LimitScope.ALL``
    Every tracked type participates; one unlimited type makes the combined
    limit (and therefore the combined remaining) unlimited.
``LimitScope.EXCLUDING_UNLIMITED``
    Unlimited types are left out of both sides of the arithmetic: their
    limits are not summed and their counts are not subtracted. A counter with
    Item (limit 10, count 3) and Tag (unlimited, count 5) therefore has
    ``combined_remaining == 7``, not ``10 - 8``.
"""

from __future__ import annotations

from typing import Optional, Union

from ..base.models import CounterSnapshot, LimitScope


def grand_count(snapshot: CounterSnapshot) -> int:
    """Sum of counts over every tracked type."""
    return sum(rec.count for rec in snapshot.totals.values())


def limited_count(snapshot: CounterSnapshot) -> int:
    """Sum of counts over tracked types that have a limit."""
    return sum(rec.count for rec in snapshot.totals.values() if rec.limit is not None)


def combined_limit(snapshot: CounterSnapshot, scope: Union[LimitScope, str] = LimitScope.ALL) -> Optional[int]:
    scope = LimitScope(scope)
    records = snapshot.totals.values()
    if scope is LimitScope.ALL and any(rec.limit is None for rec in records):
        return None
    return sum(rec.limit for rec in records if rec.limit is not None)


def combined_remaining(snapshot: CounterSnapshot, scope: Union[LimitScope, str] = LimitScope.ALL) -> Optional[int]:
    scope = LimitScope(scope)
    limit = combined_limit(snapshot, scope)
    if limit is None:
        return None
    used = grand_count(snapshot) if scope is LimitScope.ALL else limited_count(snapshot)
    return max(limit - used, 0)


def is_over_any_limit(snapshot: CounterSnapshot) -> bool:
    return any(rec.is_over_limit for rec in snapshot.totals.values())


__all__ = [
    "grand_count",
    "limited_count",
    "combined_limit",
    "combined_remaining",
    "is_over_any_limit",
]
