"""Entity count cache with optional per-type limits.

``EntityCounter`` keeps, for every registered entity type, the last known
number of persisted records and the type's effective limit. Counts are
reconciled against the store by ``refresh()``, which the bound
``ChangeObserver`` calls once at start-up and again after every save of the
store. Callers read per-type values (``count``, ``limit``, ``remaining``,
``is_over_limit``) or aggregates (``grand_count``, ``combined_limit``,
``combined_remaining``, ``is_over_any_limit``) at any time; none of the
queries raise.

Limits
------
The effective initial limit of a type is its registration limit, else the
counter's ``default_limit``, else unlimited. ``update_limit`` overrides it in
the live mapping, and every later refresh keeps the existing entry's limit,
so an override is never reverted by a refresh. Limits are never written to
the snapshot cache; a changed limit in code always takes effect on the next
start.

Concurrency
-----------
All mapping access is serialized by one re-entrant lock. Counting I/O happens
outside it; each result is merged under the lock, reading the entry's limit
at merge time. ``refresh()`` is single-flight: a call arriving while a pass is
running marks one more pass as pending and returns immediately.

Example::

    store = RecordStore(db_path="app.db")
    counter = EntityCounter(store, (Item, 10), (Tag, None))
    ...
    counter.remaining(Item)
    counter.combined_remaining(LimitScope.EXCLUDING_UNLIMITED)
    counter.stop_tracking()
"""

from __future__ import annotations

import logging
import threading
import time
from typing import Any, Callable, Dict, List, Optional, Tuple, Union

from ..base.cancellation import CancellationToken
from ..base.errors import CountingError, EntityCounterError, ErrorCode, UnsupportedTypeError, classify_exception
from ..base.interfaces import ChangeNotifier, SnapshotCache
from ..base.logging import LogContext, get_logger, log_event
from ..base.models import CountRecord, CounterSnapshot, LimitScope, TrackedType, type_name
from ..config import CounterSettings, get_counter_config
from . import aggregates
from .change_observer import ChangeObserver
from .observer_state import ObserverState
from .snapshot_keys import derive_snapshot_key

logger = get_logger(__name__)

Registration = Union[TrackedType, Tuple[type, Optional[int]], type]
SnapshotListener = Callable[[CounterSnapshot], Any]


def _monotonic_ms() -> int:
    return int(time.monotonic() * 1000)


class EntityCounter:
    """Track record counts and limits for several entity types of one store."""

    def __init__(
        self,
        store: Any,
        *registrations: Registration,
        default_limit: Optional[int] = None,
        snapshot_cache: Optional[SnapshotCache] = None,
        notifier: Optional[ChangeNotifier] = None,
        settings: Optional[CounterSettings] = None,
        cancellation: Optional[CancellationToken] = None,
    ) -> None:
        """Create a counter and start tracking ``store``.

        Args:
            store: Store handle passed to each type's ``count_records``. ``None``
                disables observation and makes ``refresh()`` a no-op.
            *registrations: ``TrackedType`` objects, ``(type, limit)`` pairs or
                bare types. Types without ``count_records`` raise
                ``UnsupportedTypeError`` here.
            default_limit: Limit for registrations without one and for types
                queried but not tracked.
            snapshot_cache: Where last known counts are loaded from and saved
                to; without one nothing is persisted.
            notifier: Change stream to observe; defaults to ``store.notifier``.
            settings: Observer timing; defaults to ``CounterSettings()``.
            cancellation: Optional parent token; cancelling it stops tracking.
        """
        self._store = store
        self._registrations: Tuple[TrackedType, ...] = tuple(TrackedType.coerce(r) for r in registrations)
        self._by_type: Dict[type, TrackedType] = {r.entity_type: r for r in self._registrations}
        self._default_limit = default_limit
        self._snapshot_cache = snapshot_cache
        self._settings = settings or CounterSettings()
        self._snapshot_key = derive_snapshot_key(r.name for r in self._registrations)
        self._ctx = LogContext(counter=self._snapshot_key)

        self._lock = threading.RLock()
        self._totals: Dict[type, CountRecord] = {}
        self._is_loaded = False
        self._refreshing = False
        self._refresh_pending = False
        self._listeners: List[SnapshotListener] = []

        self._log_registrations()
        self._seed_from_snapshot()

        self._observer: Optional[ChangeObserver] = None
        if store is not None:
            notifier = notifier if notifier is not None else getattr(store, "notifier", None)
            if notifier is None:
                raise EntityCounterError(
                    code=ErrorCode.INVALID_CONFIG,
                    message="store has no notifier; pass notifier= explicitly",
                    entity=type_name(type(store)),
                )
            self._observer = ChangeObserver(
                store,
                notifier,
                self.refresh,
                poll_interval=self._settings.poll_interval_seconds,
                join_timeout=self._settings.join_timeout_seconds,
                parent_token=cancellation,
                log_ctx=self._ctx,
            )
            self._observer.start(initial_refresh=True)

    # --------------------------- Constructors --------------------------- #
    @classmethod
    def with_default_limit(cls, store: Any, *types: type, default_limit: int, **kwargs: Any) -> "EntityCounter":
        """Track every type in ``types`` with the same ``default_limit``."""
        registrations = [TrackedType(entity_type=t, limit=default_limit) for t in types]
        return cls(store, *registrations, default_limit=default_limit, **kwargs)

    @classmethod
    def from_settings(
        cls,
        store: Any,
        *types: type,
        settings: Optional[CounterSettings] = None,
        **kwargs: Any,
    ) -> "EntityCounter":
        """Track ``types`` with limits resolved from configuration.

        Each type gets ``settings.limits[name]`` when present (``None`` there
        means unlimited), else ``settings.default_limit``. Settings default to
        ``get_counter_config()``.
        """
        settings = settings or get_counter_config()
        registrations = [TrackedType(entity_type=t, limit=settings.limit_for(type_name(t))) for t in types]
        kwargs.setdefault("default_limit", settings.default_limit)
        return cls(store, *registrations, settings=settings, **kwargs)

    # ---------------------------- Properties ---------------------------- #
    @property
    def registrations(self) -> Tuple[TrackedType, ...]:
        return self._registrations

    @property
    def default_limit(self) -> Optional[int]:
        return self._default_limit

    @property
    def snapshot_key(self) -> str:
        return self._snapshot_key

    @property
    def is_loaded(self) -> bool:
        """True once a refresh pass has completed; never reverts."""
        return self._is_loaded

    @property
    def is_refreshing(self) -> bool:
        """True while a refresh pass (or a queued follow-up) is running."""
        with self._lock:
            return self._refreshing

    @property
    def state(self) -> ObserverState:
        return self._observer.state if self._observer is not None else ObserverState.NOT_STARTED

    @property
    def is_tracking(self) -> bool:
        return self._observer is not None and self._observer.is_tracking

    @property
    def observer(self) -> Optional[ChangeObserver]:
        return self._observer

    # ------------------------- Per-type queries ------------------------- #
    def _record(self, entity_type: type) -> CountRecord:
        with self._lock:
            rec = self._totals.get(entity_type)
        return rec if rec is not None else CountRecord(count=0, limit=self._default_limit)

    def count(self, entity_type: type) -> int:
        """Current cached count, ``0`` when the type has no entry."""
        return self._record(entity_type).count

    def limit(self, entity_type: type) -> Optional[int]:
        """Effective limit (``None`` = unlimited); the default limit when the type has no entry."""
        return self._record(entity_type).limit

    def remaining(self, entity_type: type) -> Optional[int]:
        """``max(limit - count, 0)``, or ``None`` for unlimited types."""
        return self._record(entity_type).remaining

    def is_over_limit(self, entity_type: type) -> bool:
        """``count > limit``; a count equal to the limit is not over."""
        return self._record(entity_type).is_over_limit

    # ------------------------ Aggregate queries ------------------------- #
    def snapshot(self) -> CounterSnapshot:
        with self._lock:
            return self._snapshot_locked()

    def _snapshot_locked(self) -> CounterSnapshot:
        return CounterSnapshot.of(self._totals, is_loaded=self._is_loaded, generated_at_ms=_monotonic_ms())

    @property
    def grand_count(self) -> int:
        return aggregates.grand_count(self.snapshot())

    def combined_limit(self, scope: Union[LimitScope, str] = LimitScope.ALL) -> Optional[int]:
        return aggregates.combined_limit(self.snapshot(), scope)

    def combined_remaining(self, scope: Union[LimitScope, str] = LimitScope.ALL) -> Optional[int]:
        return aggregates.combined_remaining(self.snapshot(), scope)

    @property
    def is_over_any_limit(self) -> bool:
        return aggregates.is_over_any_limit(self.snapshot())

    # ----------------------------- Limits ------------------------------- #
    def update_limit(self, entity_type: type, new_limit: Optional[int]) -> bool:
        """Override the limit of a tracked type and refresh.

        No-op (returns ``False``) for types that were not registered and when
        ``new_limit`` equals the current limit (the configured limit when the
        type has not been counted yet). Otherwise the entry's limit is
        replaced, listeners are notified, and ``refresh()`` runs before this
        call returns (or is queued behind a pass already in flight). The
        override survives every later refresh.
        """
        reg = self._by_type.get(entity_type)
        if reg is None:
            return False
        with self._lock:
            current = self._totals.get(entity_type)
            old_limit = current.limit if current is not None else self._configured_limit(reg)
            if old_limit == new_limit:
                return False
            if current is None:
                current = CountRecord(count=0, limit=old_limit)
            self._totals[entity_type] = current.with_limit(new_limit)
            snapshot = self._snapshot_locked()
        log_event(
            logger,
            "limit.updated",
            self._ctx.for_entity(reg.name),
            keep_none=True,
            old_limit=old_limit,
            new_limit=new_limit,
        )
        self._notify_listeners(snapshot)
        self.refresh()
        return True

    # ----------------------------- Refresh ------------------------------ #
    def refresh(self) -> bool:
        """Re-count every registered type and persist a fresh snapshot.

        Returns ``True`` when this call ran the pass(es) itself, ``False`` when
        there is no store or a pass was already running (one more pass is then
        queued). Per-type failures are logged and skipped.
        """
        if self._store is None:
            return False
        with self._lock:
            if self._refreshing:
                self._refresh_pending = True
                return False
            self._refreshing = True
        done = False
        try:
            while not done:
                self._refresh_pass()
                with self._lock:
                    if self._refresh_pending:
                        self._refresh_pending = False
                    else:
                        self._refreshing = False
                        done = True
        finally:
            if not done:
                with self._lock:
                    self._refreshing = False
                    self._refresh_pending = False
        return True

    def _refresh_pass(self) -> None:
        started = _monotonic_ms()
        succeeded = 0
        failed = 0
        for reg in self._registrations:
            try:
                new_count = self._fetch_count(reg)
            except EntityCounterError as e:
                failed += 1
                log_event(
                    logger,
                    "count.failed",
                    self._ctx.for_entity(reg.name),
                    level=logging.ERROR,
                    error_code=e.code.value,
                    error=e.message,
                )
                continue
            with self._lock:
                previous = self._totals.get(reg.entity_type)
                limit = previous.limit if previous is not None else self._configured_limit(reg)
                self._totals[reg.entity_type] = CountRecord(count=new_count, limit=limit)
            succeeded += 1
            self._log_changes(reg, previous, new_count, limit)

        completed = bool(succeeded) or not self._registrations
        with self._lock:
            if completed:
                self._is_loaded = True
            snapshot = self._snapshot_locked()
        if completed:
            self._persist_snapshot(snapshot)
        log_event(
            logger,
            "refresh.completed",
            self._ctx,
            level=logging.DEBUG,
            succeeded=succeeded,
            failed=failed,
            elapsed_ms=_monotonic_ms() - started,
        )
        self._notify_listeners(snapshot)

    def _fetch_count(self, reg: TrackedType) -> int:
        """Ask the entity type for its count, normalizing every failure.

        Raises:
            UnsupportedTypeError: the type has no callable ``count_records``.
            CountingError: the query failed or returned something that is not
                a non-negative integer.
        """
        fetch = getattr(reg.entity_type, "count_records", None)
        if not callable(fetch):
            raise UnsupportedTypeError(reg.name)
        try:
            value = fetch(self._store)
        except EntityCounterError:
            raise
        except Exception as e:
            raise CountingError(reg.name, raw=e) from e
        if isinstance(value, bool) or not isinstance(value, int) or value < 0:
            raise CountingError(reg.name, raw=ValueError(f"invalid count {value!r}"))
        return value

    def _configured_limit(self, reg: TrackedType) -> Optional[int]:
        return reg.limit if reg.limit is not None else self._default_limit

    # ----------------------------- Snapshot ----------------------------- #
    def _seed_from_snapshot(self) -> None:
        if self._snapshot_cache is None:
            return
        try:
            cached = self._snapshot_cache.get(self._snapshot_key)
        except Exception as e:  # a broken cache only costs the warm start
            log_event(logger, "snapshot.load_failed", self._ctx, level=logging.WARNING, error=repr(e))
            return
        if cached is None:
            return
        with self._lock:
            for reg in self._registrations:
                raw = cached.get(reg.name, 0)
                seeded = raw if isinstance(raw, int) and not isinstance(raw, bool) and raw >= 0 else 0
                self._totals[reg.entity_type] = CountRecord(count=seeded, limit=self._configured_limit(reg))
        log_event(logger, "snapshot.loaded", self._ctx, entities=len(self._registrations))

    def _persist_snapshot(self, snapshot: CounterSnapshot) -> None:
        if self._snapshot_cache is None:
            return
        counts = snapshot.counts_by_name()
        try:
            self._snapshot_cache.set(self._snapshot_key, counts)
        except Exception as e:  # last write wins; a failed write is retried next pass
            log_event(logger, "snapshot.save_failed", self._ctx, level=logging.WARNING, error=repr(e))

    # ----------------------------- Listeners ---------------------------- #
    def add_listener(self, listener: SnapshotListener) -> None:
        """Call ``listener(snapshot)`` after every refresh pass and limit change."""
        with self._lock:
            self._listeners.append(listener)

    def remove_listener(self, listener: SnapshotListener) -> None:
        with self._lock:
            if listener in self._listeners:
                self._listeners.remove(listener)

    def _notify_listeners(self, snapshot: CounterSnapshot) -> None:
        with self._lock:
            listeners = list(self._listeners)
        for listener in listeners:
            try:
                listener(snapshot)
            except Exception as e:  # listeners are outside the counter's contract
                log_event(
                    logger,
                    "listener.failed",
                    self._ctx,
                    level=logging.ERROR,
                    error_code=classify_exception(e).value,
                    error=repr(e),
                )

    # ---------------------------- Lifecycle ----------------------------- #
    def stop_tracking(self) -> None:
        """Stop observing store changes; idempotent. Restarting is unsupported."""
        if self._observer is not None:
            self._observer.stop()

    def __enter__(self) -> "EntityCounter":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.stop_tracking()

    # ------------------------------ Logging ----------------------------- #
    def _log_registrations(self) -> None:
        log_event(
            logger,
            "counter.initialised",
            self._ctx,
            tracked=len(self._registrations),
            default_limit=self._default_limit,
        )
        for reg in self._registrations:
            log_event(
                logger,
                "counter.tracking",
                self._ctx.for_entity(reg.name),
                keep_none=True,
                limit=self._configured_limit(reg),
            )

    def _log_changes(
        self,
        reg: TrackedType,
        previous: Optional[CountRecord],
        new_count: int,
        limit: Optional[int],
    ) -> None:
        ctx = self._ctx.for_entity(reg.name)
        old_count = previous.count if previous is not None else None
        if old_count is None:
            log_event(logger, "count.initialised", ctx, count=new_count)
        elif old_count != new_count:
            log_event(logger, "count.changed", ctx, old_count=old_count, count=new_count)

        if limit is None:
            return
        was_over = (old_count or 0) > limit
        now_over = new_count > limit
        if now_over and not was_over:
            log_event(logger, "limit.exceeded", ctx, level=logging.WARNING, limit=limit, count=new_count)
        elif was_over and not now_over:
            log_event(logger, "limit.restored", ctx, limit=limit, count=new_count)

    def __repr__(self) -> str:  # pragma: no cover - introspection aid
        return (
            f"EntityCounter(key={self._snapshot_key!r}, tracked={len(self._registrations)}, "
            f"loaded={self._is_loaded}, state={self.state.value})"
        )


__all__ = ["EntityCounter", "Registration", "SnapshotListener"]
