"""RecordStore writes, counts and save notifications."""
from __future__ import annotations

import sqlite3

import pytest

from entity_counter.base.errors import UnsupportedTypeError
from entity_counter.persistence import RecordStore, SqliteCountable
from entity_counter.tests.helpers import Item, add_rows


class ActiveItem(SqliteCountable):
    __table__ = "items"
    __where__ = "title LIKE ?"
    __where_params__ = ("active-%",)


class Tableless(SqliteCountable):
    pass


def test_save_commits_and_posts_change(store, center):
    sub = center.subscribe()
    add_rows(store, "items", 3)

    event = sub.next_event(timeout=1.0)
    assert event is not None and event.origin is store  # nosec B101
    assert store.count("items") == 3  # nosec B101
    sub.close()


def test_count_with_filter_and_countable_mixin(store):
    store.insert("items", {"title": "active-1"})
    store.insert("items", {"title": "active-2"})
    store.insert("items", {"title": "archived-1"})
    store.save()

    assert Item.count_records(store) == 3  # nosec B101
    assert ActiveItem.count_records(store) == 2  # nosec B101
    with pytest.raises(UnsupportedTypeError):
        Tableless.count_records(store)


def test_delete_and_rollback(store):
    add_rows(store, "items", 4)
    assert store.delete("items", "id > ?", (2,)) == 2  # nosec B101
    store.rollback()
    assert store.count("items") == 4  # nosec B101


def test_missing_table_raises_sqlite_error(store):
    with pytest.raises(sqlite3.OperationalError):
        store.count("widgets")


def test_invalid_identifiers_are_rejected(store):
    with pytest.raises(ValueError):
        store.count("items; DROP TABLE items")
    with pytest.raises(ValueError):
        store.insert("items", {"title)": "x"})


def test_context_manager_commits_on_success(tmp_path, center):
    db = str(tmp_path / "ctx.db")
    with RecordStore(db_path=db, notifier=center) as handle:
        handle.ensure_table("items", ["title"])
        handle.insert("items", {"title": "kept"})

    with RecordStore(db_path=db, notifier=center) as reopened:
        assert reopened.count("items") == 1  # nosec B101


def test_context_manager_rolls_back_on_error(tmp_path, center):
    db = str(tmp_path / "ctx.db")
    with RecordStore(db_path=db, notifier=center) as handle:
        handle.ensure_table("items", ["title"])

    with pytest.raises(RuntimeError):
        with RecordStore(db_path=db, notifier=center) as handle:
            handle.insert("items", {"title": "lost"})
            raise RuntimeError("abort")

    with RecordStore(db_path=db, notifier=center) as reopened:
        assert reopened.count("items") == 0  # nosec B101


def test_in_memory_store_and_shared_connection(center):
    owner = RecordStore(notifier=center)
    owner.ensure_table("items", ["title"])
    borrower = RecordStore(owner.connection, notifier=center)
    borrower.insert("items", {"title": "x"})
    borrower.close()

    assert owner.count("items") == 1  # nosec B101
    owner.close()
    owner.close()


def test_from_settings_uses_configured_db_path(tmp_path, monkeypatch, center):
    db = tmp_path / "configured.db"
    monkeypatch.setenv("ENTITY_COUNTER_DB_PATH", str(db))
    handle = RecordStore.from_settings(notifier=center)
    try:
        handle.ensure_table("items", ["title"])
        assert db.exists()  # nosec B101
        assert handle.notifier is center  # nosec B101
    finally:
        handle.close()
