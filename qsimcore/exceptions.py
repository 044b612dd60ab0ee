"""Exception types raised by qsimcore.

Out-of-range qubit and classical-bit indices raise the builtin ``IndexError``.
The remaining error classes subclass a builtin so that callers catching
``ValueError``, ``NotImplementedError`` or ``KeyError`` keep working.
"""

from __future__ import annotations


class InvalidArgumentError(ValueError):
    """An argument has an invalid value (qubit count, shots, shapes, rates)."""


class UnsupportedOperationError(NotImplementedError):
    """The requested gate kind or operation is not implemented."""


class NotFoundError(KeyError):
    """A named resource, such as a state snapshot, does not exist."""

    def __str__(self) -> str:
        # KeyError repr-quotes its message; keep it readable.
        return str(self.args[0]) if self.args else ""


__all__ = ["InvalidArgumentError", "UnsupportedOperationError", "NotFoundError"]
