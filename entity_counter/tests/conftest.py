"""Shared fixtures for the entity counter test suite.

Every test gets its own ``NotificationCenter`` and an on-disk ``RecordStore``
under ``tmp_path``; counters built through ``make_counter`` are stopped at
teardown so no observer thread outlives its test.
"""
from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any, Dict, Iterator, List

import pytest

from entity_counter.base.logging import BASE_LOGGER_NAME
from entity_counter.config import CounterSettings, reset_config_cache
from entity_counter.counter import EntityCounter
from entity_counter.notifications import NotificationCenter
from entity_counter.persistence import InMemorySnapshotCache, RecordStore


@pytest.fixture()
def center() -> NotificationCenter:
    return NotificationCenter("test")


@pytest.fixture()
def store(tmp_path: Path, center: NotificationCenter) -> Iterator[RecordStore]:
    """Record store with ``items``, ``tags`` and ``notes`` tables."""
    handle = RecordStore(db_path=str(tmp_path / "records.db"), notifier=center, name="test-store")
    for table in ("items", "tags", "notes"):
        handle.ensure_table(table, ["title"])
    try:
        yield handle
    finally:
        handle.close()


@pytest.fixture()
def snapshot_cache() -> InMemorySnapshotCache:
    return InMemorySnapshotCache()


@pytest.fixture()
def fast_settings() -> CounterSettings:
    return CounterSettings(poll_interval_seconds=0.02, join_timeout_seconds=2.0)


@pytest.fixture()
def make_counter(fast_settings: CounterSettings) -> Iterator[Any]:
    """Factory building counters with fast observer settings; stops them all afterwards."""
    built: List[EntityCounter] = []

    def _make(store: Any, *registrations: Any, **kwargs: Any) -> EntityCounter:
        kwargs.setdefault("settings", fast_settings)
        counter = EntityCounter(store, *registrations, **kwargs)
        built.append(counter)
        return counter

    yield _make
    for counter in built:
        counter.stop_tracking()


class _EventCapture(logging.Handler):
    def __init__(self) -> None:
        super().__init__(level=logging.DEBUG)
        self.events: List[Dict[str, Any]] = []

    def emit(self, record: logging.LogRecord) -> None:
        try:
            payload = json.loads(record.getMessage())
        except ValueError:
            return
        if isinstance(payload, dict):
            payload["_level"] = record.levelname
            self.events.append(payload)

    def named(self, event: str) -> List[Dict[str, Any]]:
        return [e for e in list(self.events) if e.get("event") == event]


@pytest.fixture()
def log_events() -> Iterator[_EventCapture]:
    """Capture structured ``log_event`` payloads emitted under the base logger."""
    logger = logging.getLogger(BASE_LOGGER_NAME)
    capture = _EventCapture()
    previous = logger.level
    logger.setLevel(logging.DEBUG)
    logger.addHandler(capture)
    try:
        yield capture
    finally:
        logger.removeHandler(capture)
        logger.setLevel(previous)


@pytest.fixture(autouse=True)
def _isolated_config(monkeypatch: pytest.MonkeyPatch) -> Iterator[None]:
    """Clear counter env vars and the cached config file between tests."""
    for name in (
        "ENTITY_COUNTER_CONFIG_FILE",
        "ENTITY_COUNTER_DEFAULT_LIMIT",
        "ENTITY_COUNTER_POLL_INTERVAL_SECONDS",
        "ENTITY_COUNTER_JOIN_TIMEOUT_SECONDS",
        "ENTITY_COUNTER_DB_PATH",
    ):
        monkeypatch.delenv(name, raising=False)
    reset_config_cache()
    yield
    reset_config_cache()
