"""Scope selector for combined limit queries."""

from __future__ import annotations

from enum import Enum


class LimitScope(str, Enum):
    """Defines how combined limits are calculated.

    ``ALL`` includes every tracked type, so a single unlimited type makes the
    combined limit unlimited. ``EXCLUDING_UNLIMITED`` ignores unlimited types
    on both the limit and the count side.
    """

    ALL = "all"
    EXCLUDING_UNLIMITED = "excluding_unlimited"


__all__ = ["LimitScope"]
