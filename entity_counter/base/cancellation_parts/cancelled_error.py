"""Cancellation error type.

Defines the public ``CancelledError`` used to signal cooperative cancellation
of the change observer loop.
"""

from __future__ import annotations


class CancelledError(RuntimeError):
    """Raised when an operation is cancelled cooperatively.

    Distinguishes an explicit ``stop_tracking()`` from real failures so the
    observer loop can exit quietly.
    """

__all__ = ["CancelledError"]
