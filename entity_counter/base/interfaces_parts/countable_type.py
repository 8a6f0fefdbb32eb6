"""CountableType Protocol (single-class module).

Capability contract every tracked entity type must satisfy.
"""

from __future__ import annotations

from typing import Any, Protocol, runtime_checkable


@runtime_checkable
class CountableType(Protocol):
    """An entity type that can count its persisted records.

    Implemented as a classmethod on the entity class; the counter never
    instantiates entity types.
    """

    @classmethod
    def count_records(cls, store: Any) -> int:  # pragma: no cover - interface
        """Return the number of persisted records of this type in ``store``.

        Parameters
        ----------
        store:
            The store handle the counter was constructed with.

        Returns
        -------
        int
            Current non-negative record count.

        Raises
        ------
        Exception
            Any persistence failure; the counter wraps it in ``CountingError``.
        """
        ...


__all__ = ["CountableType"]
