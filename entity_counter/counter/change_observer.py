"""Background change observer.

Subscribes to a change-notification stream, keeps only events whose origin is
the store it is bound to, and invokes a callback (the counter's ``refresh``)
for them. The loop runs on a daemon thread and ends when its
``CancellationToken`` is cancelled, either through ``stop()`` or through a
parent token supplied by the caller.

Ordering
--------
The subscription is opened in ``start()`` on the caller's thread, before the
worker thread exists, so a save made right after construction is never
missed. Events already queued when a matching one is taken are drained first,
so a burst of saves costs one refresh.
"""

from __future__ import annotations

import logging
import threading
from typing import Any, Callable, Optional

from ..base.cancellation import CancellationToken, CancelledError
from ..base.errors import classify_exception
from ..base.interfaces import ChangeNotifier, ChangeSubscription
from ..base.logging import LogContext, get_logger, log_event
from ..config.defaults import (
    OBSERVER_JOIN_TIMEOUT_SECONDS,
    OBSERVER_POLL_INTERVAL_SECONDS,
    OBSERVER_THREAD_NAME,
)
from .observer_state import ObserverState

logger = get_logger(__name__)


class ChangeObserver:
    """Drive a callback from change events posted by one store handle."""

    def __init__(
        self,
        store: Any,
        notifier: ChangeNotifier,
        on_change: Callable[[], Any],
        *,
        poll_interval: float = OBSERVER_POLL_INTERVAL_SECONDS,
        join_timeout: float = OBSERVER_JOIN_TIMEOUT_SECONDS,
        parent_token: Optional[CancellationToken] = None,
        log_ctx: Optional[LogContext] = None,
    ) -> None:
        self._store = store
        self._notifier = notifier
        self._on_change = on_change
        self._poll_interval = poll_interval
        self._join_timeout = join_timeout
        self._token = CancellationToken(parent=parent_token)
        self._ctx = log_ctx or LogContext()
        self._state = ObserverState.NOT_STARTED
        self._state_lock = threading.Lock()
        self._subscription: Optional[ChangeSubscription] = None
        self._thread: Optional[threading.Thread] = None
        self.events_seen = 0
        self.events_ignored = 0
        self.refreshes_triggered = 0

    # ------------------------------ State ------------------------------- #
    @property
    def state(self) -> ObserverState:
        return self._state

    @property
    def is_tracking(self) -> bool:
        return self._state is ObserverState.TRACKING

    @property
    def token(self) -> CancellationToken:
        return self._token

    # ---------------------------- Lifecycle ----------------------------- #
    def start(self, *, initial_refresh: bool = True) -> None:
        """Subscribe and launch the worker thread.

        Raises ``RuntimeError`` when called twice; a stopped observer cannot
        be restarted.
        """
        with self._state_lock:
            if self._state is not ObserverState.NOT_STARTED:
                raise RuntimeError(f"observer cannot start from state {self._state.value}")
            self._subscription = self._notifier.subscribe()
            self._state = ObserverState.TRACKING
        self._thread = threading.Thread(
            target=self._run,
            args=(initial_refresh,),
            name=OBSERVER_THREAD_NAME,
            daemon=True,
        )
        self._thread.start()
        log_event(logger, "observer.started", self._ctx)

    def stop(self, reason: str = "stop_tracking") -> None:
        """Cancel the subscription loop; idempotent.

        Waits up to ``join_timeout`` for the worker to finish an in-flight
        refresh. Calling it from the worker thread itself (e.g. from a
        listener) does not join.
        """
        with self._state_lock:
            if self._state is ObserverState.STOPPED:
                return
            was_started = self._state is ObserverState.TRACKING
            self._state = ObserverState.STOPPED
        self._token.cancel(reason)
        if self._subscription is not None:
            self._subscription.close()
        thread = self._thread
        if thread is not None and thread.is_alive() and thread is not threading.current_thread():
            thread.join(self._join_timeout)
            if thread.is_alive():
                log_event(
                    logger,
                    "observer.join_timeout",
                    self._ctx,
                    level=logging.WARNING,
                    timeout_s=self._join_timeout,
                )
        if was_started:
            log_event(logger, "observer.stopped", self._ctx, reason=reason)

    # ------------------------------ Worker ------------------------------ #
    def _run(self, initial_refresh: bool) -> None:
        sub = self._subscription
        try:
            self._token.raise_if_cancelled()
            if initial_refresh:
                self._invoke("initial")
            while sub is not None and not sub.closed:
                event = sub.next_event(timeout=self._poll_interval)
                self._token.raise_if_cancelled()
                if event is None:
                    continue
                self.events_seen += 1
                if event.origin is not self._store:
                    self.events_ignored += 1
                    continue
                self._drain(sub)
                self._token.raise_if_cancelled()
                self._invoke(event.kind)
        except CancelledError as e:
            log_event(
                logger,
                "observer.cancelled",
                self._ctx,
                level=logging.DEBUG,
                error_code=classify_exception(e).value,
                reason=self._token.reason,
            )
        finally:
            with self._state_lock:
                self._state = ObserverState.STOPPED
            if sub is not None:
                sub.close()

    def _drain(self, sub: ChangeSubscription) -> None:
        """Consume already-queued events; they are covered by the next refresh."""
        while not self._token.cancelled:
            extra = sub.next_event(timeout=0)
            if extra is None:
                return
            self.events_seen += 1
            if extra.origin is not self._store:
                self.events_ignored += 1

    def _invoke(self, trigger: str) -> None:
        self.refreshes_triggered += 1
        try:
            self._on_change()
        except Exception as e:  # background refresh must not kill the loop
            log_event(
                logger,
                "observer.refresh_failed",
                self._ctx,
                level=logging.ERROR,
                trigger=trigger,
                error_code=classify_exception(e).value,
                error=repr(e),
            )


__all__ = ["ChangeObserver"]
