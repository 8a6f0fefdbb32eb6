"""Structured logging context object for the entity counter.

Defines :class:`LogContext`, a dataclass carrying the fields shared by every
event a counter emits (its snapshot key and the entity type involved). The
``to_dict`` helper merges the ``extra`` mapping and prunes ``None`` values.
"""
from __future__ import annotations

from dataclasses import dataclass, asdict, field
from typing import Any, Dict, Optional


@dataclass
class LogContext:
    """Structured context for counter logging events."""

    counter: Optional[str] = None
    entity: Optional[str] = None
    extra: Dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> Dict[str, Any]:
        data = asdict(self)
        extra = data.pop("extra", {}) or {}
        data.update({k: v for k, v in extra.items() if v is not None})
        return {k: v for k, v in data.items() if v is not None}

    def for_entity(self, entity: str) -> "LogContext":
        """Return a copy of this context bound to ``entity``."""
        return LogContext(counter=self.counter, entity=entity, extra=dict(self.extra))


__all__ = ["LogContext"]
