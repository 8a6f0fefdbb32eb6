"""Change observer lifecycle states."""

from __future__ import annotations

from enum import Enum


class ObserverState(str, Enum):
    """``NOT_STARTED -> TRACKING -> STOPPED``; ``STOPPED`` is terminal."""

    NOT_STARTED = "not_started"
    TRACKING = "tracking"
    STOPPED = "stopped"


__all__ = ["ObserverState"]
