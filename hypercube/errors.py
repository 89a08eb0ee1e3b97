"""Errors raised by puzzle operations.

Program invariants (a twist producing an invalid orientation, the displayed
state diverging from the latest one) are checked with ``assert`` instead.
"""

from __future__ import annotations


class PuzzleError(Exception):
    """Base class for recoverable puzzle errors."""

    def __init__(self, message: str) -> None:
        self.message = message
        super().__init__(message)


class TypeMismatchError(PuzzleError):
    """A twist was applied to a puzzle of a different type."""


class InvalidFaceError(PuzzleError):
    """The face has no valid recentering twist."""


class EmptyHistoryError(PuzzleError):
    """Undo or redo was requested with nothing to undo or redo."""


class UnimplementedError(PuzzleError, NotImplementedError):
    """The operation exists but is not built yet."""
