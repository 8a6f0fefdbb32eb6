"""ChangeNotifier / ChangeSubscription Protocols.

Abstract change-notification stream consumed by the change observer.
"""

from __future__ import annotations

from typing import Optional, Protocol, runtime_checkable

from ..models_parts.change_event import ChangeEvent


@runtime_checkable
class ChangeSubscription(Protocol):
    """A live subscription to a change-notification stream."""

    def next_event(self, timeout: Optional[float] = None) -> Optional[ChangeEvent]:  # pragma: no cover - interface
        """Block up to ``timeout`` seconds for the next event.

        Returns ``None`` when the timeout elapses or the subscription is
        closed, so callers can check their cancellation token between waits.
        """
        ...

    def close(self) -> None:  # pragma: no cover - interface
        """Stop receiving events (idempotent)."""
        ...

    @property
    def closed(self) -> bool:  # pragma: no cover - interface
        ...


@runtime_checkable
class ChangeNotifier(Protocol):
    """Source of change events from one or more store handles."""

    def subscribe(self) -> ChangeSubscription:  # pragma: no cover - interface
        """Open a new subscription receiving every event posted from now on."""
        ...


__all__ = ["ChangeNotifier", "ChangeSubscription"]
