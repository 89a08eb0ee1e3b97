"""Tests for the error hierarchy."""

from __future__ import annotations

import pytest

from hypercube.errors import (
    EmptyHistoryError,
    InvalidFaceError,
    PuzzleError,
    TypeMismatchError,
    UnimplementedError,
)


@pytest.mark.parametrize("cls", [TypeMismatchError, InvalidFaceError, EmptyHistoryError, UnimplementedError])
def test_subclasses_keep_message(cls: type[PuzzleError]) -> None:
    err = cls("boom")
    assert isinstance(err, PuzzleError)
    assert err.message == "boom"
    assert str(err) == "boom"


def test_unimplemented_is_not_implemented() -> None:
    assert issubclass(UnimplementedError, NotImplementedError)
