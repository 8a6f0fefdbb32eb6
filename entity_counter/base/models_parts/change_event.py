"""Change notification event."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

DID_SAVE = "did_save"


@dataclass(frozen=True)
class ChangeEvent:
    """A "data changed" notification posted by a store handle.

    Attributes:
        origin: The store handle whose data changed. Observers compare it by
            identity against the store they are bound to.
        kind: Event name; stores post ``"did_save"`` after a commit.
    """

    origin: Any
    kind: str = DID_SAVE


__all__ = ["ChangeEvent", "DID_SAVE"]
