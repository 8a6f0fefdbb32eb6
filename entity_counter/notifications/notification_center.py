"""In-process change notification center.

Fans each posted ``ChangeEvent`` out to every open subscription. Store
handles post to it after a successful save; change observers subscribe to it
and filter events by origin.
"""

from __future__ import annotations

import logging
from threading import Lock
from typing import Any, List, Optional

from ..base.logging import get_logger, log_event
from ..base.models import ChangeEvent, DID_SAVE
from .subscription import QueueSubscription

logger = get_logger(__name__)


class NotificationCenter:
    """Thread-safe publish/subscribe hub for change events."""

    def __init__(self, name: str = "default") -> None:
        self.name = name
        self._lock = Lock()
        self._subscriptions: List[QueueSubscription] = []

    def subscribe(self) -> QueueSubscription:
        sub = QueueSubscription(on_close=self._detach)
        with self._lock:
            self._subscriptions.append(sub)
        return sub

    def post(self, event: ChangeEvent) -> int:
        """Deliver ``event`` to every open subscription; return how many received it."""
        with self._lock:
            targets = list(self._subscriptions)
        for sub in targets:
            sub.deliver(event)
        log_event(
            logger,
            "notification.posted",
            level=logging.DEBUG,
            center=self.name,
            kind=event.kind,
            subscribers=len(targets),
        )
        return len(targets)

    def post_change(self, origin: Any, kind: str = DID_SAVE) -> int:
        return self.post(ChangeEvent(origin=origin, kind=kind))

    @property
    def subscriber_count(self) -> int:
        with self._lock:
            return len(self._subscriptions)

    def _detach(self, sub: QueueSubscription) -> None:
        with self._lock:
            if sub in self._subscriptions:
                self._subscriptions.remove(sub)


_DEFAULT_CENTER: Optional[NotificationCenter] = None
_DEFAULT_LOCK = Lock()


def default_notification_center() -> NotificationCenter:
    """Return the process-wide center used when none is injected."""
    global _DEFAULT_CENTER
    with _DEFAULT_LOCK:
        if _DEFAULT_CENTER is None:
            _DEFAULT_CENTER = NotificationCenter()
        return _DEFAULT_CENTER


__all__ = ["NotificationCenter", "default_notification_center"]
