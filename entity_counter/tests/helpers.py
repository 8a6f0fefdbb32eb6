"""Shared entity types and polling helpers for counter tests.

The SQLite entity types count rows of the ``items``/``tags``/``notes`` tables
created by the ``store`` fixture. ``FakeStore`` and ``ScriptedEntity`` let
tests drive counts (and failures) without a database.
"""
from __future__ import annotations

import threading
import time
from typing import Any, Callable, Dict, Optional

from entity_counter.notifications import NotificationCenter
from entity_counter.persistence import RecordStore, SqliteCountable


class Item(SqliteCountable):
    __table__ = "items"


class Tag(SqliteCountable):
    __table__ = "tags"


class Note(SqliteCountable):
    __table__ = "notes"


def add_rows(store: RecordStore, table: str, n: int, *, save: bool = True) -> None:
    store.insert_many(table, ({"title": f"{table}-{i}"} for i in range(n)))
    if save:
        store.save()


def wait_for(predicate: Callable[[], bool], timeout: float = 2.0, interval: float = 0.01) -> bool:
    """Poll ``predicate`` until it is truthy or ``timeout`` elapses."""
    deadline = time.monotonic() + timeout
    while time.monotonic() < deadline:
        if predicate():
            return True
        time.sleep(interval)
    return bool(predicate())


class FakeStore:
    """Store double whose counts are set directly by the test."""

    def __init__(self, notifier: Optional[NotificationCenter] = None) -> None:
        self.notifier = notifier or NotificationCenter("fake")
        self.counts: Dict[str, Any] = {}
        self.calls: Dict[str, int] = {}

    def save(self) -> None:
        self.notifier.post_change(self)


def scripted_entity(name: str, *, gate: Optional[threading.Event] = None, entered: Optional[threading.Event] = None):
    """Build an entity type reading its count from ``FakeStore.counts[name]``.

    A count value that is an exception instance is raised instead. When
    ``gate`` is given the first call blocks on it after setting ``entered``.
    """

    def count_records(cls, store: FakeStore) -> int:
        store.calls[name] = store.calls.get(name, 0) + 1
        if gate is not None and not gate.is_set():
            if entered is not None:
                entered.set()
            gate.wait(5.0)
        value = store.counts.get(name, 0)
        if isinstance(value, BaseException):
            raise value
        return value

    return type(name, (), {"count_records": classmethod(count_records)})


def wait_idle(counter: Any, timeout: float = 2.0) -> bool:
    """Wait until ``counter`` has loaded and no refresh pass is in flight."""
    return wait_for(lambda: counter.is_loaded and not counter.is_refreshing, timeout=timeout)
