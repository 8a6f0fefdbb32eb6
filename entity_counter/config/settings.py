"""Validated counter settings model.

External dependencies
---------------------
- Pydantic v2 ``BaseModel`` for validation and ``model_dump()``.

Limits are configuration and therefore trusted: no range check is applied to
them beyond the integer type.
"""
from __future__ import annotations

from typing import Dict, Optional

from pydantic import BaseModel, ConfigDict, Field

from .defaults import (
    DEFAULT_LIMIT,
    OBSERVER_JOIN_TIMEOUT_SECONDS,
    OBSERVER_POLL_INTERVAL_SECONDS,
)


class CounterSettings(BaseModel):
    """Merged entity counter configuration.

    Attributes
    ----------
    default_limit:
        Limit used for registrations without their own; ``None`` = unlimited.
    limits:
        Per entity type name limits, used by ``EntityCounter.from_settings``.
        A ``None`` value marks the type as explicitly unlimited.
    poll_interval_seconds:
        How long the observer waits on its subscription between cancellation
        checks.
    join_timeout_seconds:
        How long ``stop_tracking()`` waits for the observer thread to exit.
    db_path:
        Optional SQLite path for the default record store / snapshot cache.
    """

    model_config = ConfigDict(frozen=True, extra="ignore")

    default_limit: Optional[int] = DEFAULT_LIMIT
    limits: Dict[str, Optional[int]] = Field(default_factory=dict)
    poll_interval_seconds: float = Field(default=OBSERVER_POLL_INTERVAL_SECONDS, gt=0)
    join_timeout_seconds: float = Field(default=OBSERVER_JOIN_TIMEOUT_SECONDS, gt=0)
    db_path: Optional[str] = None

    def limit_for(self, name: str) -> Optional[int]:
        """Return the configured limit for ``name`` falling back to ``default_limit``."""
        if name in self.limits:
            return self.limits[name]
        return self.default_limit


__all__ = ["CounterSettings"]
