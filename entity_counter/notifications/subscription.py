"""Queue-backed subscription handed out by ``NotificationCenter``."""

from __future__ import annotations

import queue
from typing import Callable, Optional

from ..base.models import ChangeEvent

# Wakes a blocked ``next_event`` call when the subscription closes.
_CLOSED = object()


class QueueSubscription:
    """Receives every event posted to its center after ``subscribe()``.

    Thread safety: ``deliver`` may be called from any poster thread while one
    consumer thread calls ``next_event``.
    """

    def __init__(self, on_close: Optional[Callable[["QueueSubscription"], None]] = None) -> None:
        self._queue: "queue.Queue[object]" = queue.Queue()
        self._closed = False
        self._on_close = on_close

    @property
    def closed(self) -> bool:
        return self._closed

    def deliver(self, event: ChangeEvent) -> None:
        if not self._closed:
            self._queue.put(event)

    def next_event(self, timeout: Optional[float] = None) -> Optional[ChangeEvent]:
        if self._closed:
            return None
        try:
            item = self._queue.get(timeout=timeout)
        except queue.Empty:
            return None
        if item is _CLOSED:
            return None
        return item  # type: ignore[return-value]

    def pending(self) -> int:
        """Approximate number of undelivered events."""
        return self._queue.qsize()

    def close(self) -> None:
        if self._closed:
            return
        self._closed = True
        self._queue.put(_CLOSED)
        if self._on_close is not None:
            self._on_close(self)

    def __iter__(self):
        while not self._closed:
            event = self.next_event()
            if event is not None:
                yield event


__all__ = ["QueueSubscription"]
