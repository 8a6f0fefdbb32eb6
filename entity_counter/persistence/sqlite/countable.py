"""Countable entity base for SQLite-backed record stores.

Subclasses declare the table they live in and, optionally, a filter that
narrows which rows count (the equivalent of a fetch predicate)::

    class Item(SqliteCountable):
        __table__ = "items"

    class ActiveItem(SqliteCountable):
        __table__ = "items"
        __entity_name__ = "ActiveItem"
        __where__ = "archived = ?"
        __where_params__ = (0,)
"""

from __future__ import annotations

from typing import Any, ClassVar, Optional, Tuple

from ...base.errors import UnsupportedTypeError
from ...base.models import type_name


class SqliteCountable:
    """Mixin implementing ``count_records`` against a ``RecordStore``."""

    __table__: ClassVar[Optional[str]] = None
    __where__: ClassVar[Optional[str]] = None
    __where_params__: ClassVar[Tuple[Any, ...]] = ()

    @classmethod
    def count_records(cls, store: Any) -> int:
        if not cls.__table__:
            raise UnsupportedTypeError(type_name(cls))
        return store.count(cls.__table__, cls.__where__, cls.__where_params__)


__all__ = ["SqliteCountable"]
