"""Tests for piece orientations."""

from __future__ import annotations

import itertools
import logging

import pytest

from hypercube.orientation import PieceState, basis_faces
from hypercube.topology import (
    TWIST_DIRECTIONS_3D,
    TWIST_DIRECTIONS_4D,
    Face,
    PuzzleFamily,
    Sign,
    TwistDirectionInfo,
)


def image(state: PieceState, face: Face) -> Face:
    """Return where the sticker that started on `face` points now."""
    current = state[face.axis]
    return current if face.sign == Sign.POS else current.opposite


def closure(generators: list[PieceState]) -> set[PieceState]:
    """Return every state reachable from the identity by `generators`."""
    identity = PieceState.identity(4)
    seen = {identity}
    frontier = [identity]
    while frontier:
        state = frontier.pop()
        for gen in generators:
            # compose: apply gen's permutation to state
            nxt = PieceState(tuple(image(gen, f) for f in state.faces))
            if nxt not in seen:
                seen.add(nxt)
                frontier.append(nxt)
    return seen


class TestRotate:
    def test_identity(self) -> None:
        assert PieceState.identity(4).faces == (Face.R, Face.U, Face.F, Face.O)
        assert PieceState.identity(3).faces == (Face.R, Face.U, Face.F)
        assert str(PieceState.identity(4)) == "RUFO"

    def test_rotate_x_to_y(self) -> None:
        state = PieceState.identity(4).rotate(0, 1)
        assert state.faces == (Face.U, Face.L, Face.F, Face.O)

    @pytest.mark.parametrize("from_axis,to_axis", list(itertools.permutations(range(4), 2)))
    def test_four_rotations_are_identity(self, from_axis: int, to_axis: int) -> None:
        identity = PieceState.identity(4)
        state = identity
        for i in range(4):
            state = state.rotate(from_axis, to_axis)
            assert state.is_valid()
            assert (state == identity) == (i == 3)

    @pytest.mark.parametrize("from_axis,to_axis", list(itertools.permutations(range(3), 2)))
    def test_rotation_then_reverse(self, from_axis: int, to_axis: int) -> None:
        identity = PieceState.identity(3)
        assert identity.rotate(from_axis, to_axis).rotate(to_axis, from_axis) == identity

    def test_rotate_by_faces_maps_from_to(self) -> None:
        identity = PieceState.identity(4)
        for a, b in itertools.permutations(Face, 2):
            if a.axis == b.axis:
                continue
            state = identity.rotate_by_faces(a, b)
            assert image(state, a) == b
            assert image(state, b) == a.opposite

    def test_mirror(self) -> None:
        state = PieceState.identity(4).mirror(2)
        assert state.faces == (Face.R, Face.U, Face.B, Face.O)
        assert state.is_valid()
        assert state.mirror(2) == PieceState.identity(4)

    def test_invalid(self) -> None:
        assert not PieceState((Face.R, Face.L, Face.F, Face.O)).is_valid()

    def test_rotations_generate_even_signed_permutations(self) -> None:
        identity = PieceState.identity(4)
        rotations = [identity.rotate(a, b) for a, b in itertools.permutations(range(4), 2)]
        group = closure(rotations)
        assert len(group) == 192
        assert all(state.is_valid() for state in group)
        assert len(closure(rotations + [identity.mirror(0)])) == 384


class TestBasis:
    def test_4d(self) -> None:
        assert basis_faces(PuzzleFamily.RUBIKS_4D, Face.R) == (Face.O, Face.U, Face.F)
        assert basis_faces(PuzzleFamily.RUBIKS_4D, Face.D) == (Face.R, Face.I, Face.F)
        assert basis_faces(PuzzleFamily.RUBIKS_4D, Face.I) == (Face.R, Face.U, Face.F)

    def test_3d(self) -> None:
        assert basis_faces(PuzzleFamily.RUBIKS_3D, Face.F) == (Face.R, Face.U, Face.F)
        assert basis_faces(PuzzleFamily.RUBIKS_3D, Face.R) == (Face.U, Face.F, Face.R)
        assert basis_faces(PuzzleFamily.RUBIKS_3D, Face.L) == (Face.U, Face.B, Face.L)

    @pytest.mark.parametrize("family", list(PuzzleFamily))
    def test_basis_spans_distinct_axes(self, family: PuzzleFamily) -> None:
        for face in family.faces:
            axes = {f.axis for f in basis_faces(family, face)}
            assert len(axes) == 3


class TestTwist:
    @pytest.mark.parametrize("face", list(Face))
    @pytest.mark.parametrize("direction", TWIST_DIRECTIONS_4D, ids=lambda d: d.name)
    def test_period_4d(self, face: Face, direction: TwistDirectionInfo) -> None:
        identity = PieceState.identity(4)
        state = identity
        for i in range(direction.period):
            state = state.twist(PuzzleFamily.RUBIKS_4D, face, direction)
            assert state.is_valid()
            assert (state == identity) == (i == direction.period - 1)

    @pytest.mark.parametrize("face", PuzzleFamily.RUBIKS_3D.faces)
    @pytest.mark.parametrize("direction", TWIST_DIRECTIONS_3D, ids=lambda d: d.name)
    def test_period_3d(self, face: Face, direction: TwistDirectionInfo) -> None:
        identity = PieceState.identity(3)
        state = identity
        for _ in range(direction.period):
            state = state.twist(PuzzleFamily.RUBIKS_3D, face, direction)
        assert state == identity

    @pytest.mark.parametrize("face", list(Face))
    def test_reverse_pairs_cancel(self, face: Face) -> None:
        identity = PieceState.identity(4)
        for i in range(0, len(TWIST_DIRECTIONS_4D), 2):
            fwd, rev = TWIST_DIRECTIONS_4D[i], TWIST_DIRECTIONS_4D[i + 1]
            state = identity.twist(PuzzleFamily.RUBIKS_4D, face, fwd)
            assert state.twist(PuzzleFamily.RUBIKS_4D, face, rev) == identity

    def test_twist_keeps_face_fixed(self) -> None:
        # a twist about R never moves the R sticker off R
        for direction in TWIST_DIRECTIONS_4D:
            state = PieceState.identity(4).twist(PuzzleFamily.RUBIKS_4D, Face.R, direction)
            assert image(state, Face.R) == Face.R

    def test_3d_clockwise_on_front(self) -> None:
        state = PieceState.identity(3).twist(PuzzleFamily.RUBIKS_3D, Face.F, TWIST_DIRECTIONS_3D[0])
        # clockwise seen from the front moves up to right
        assert image(state, Face.U) == Face.R
        assert image(state, Face.R) == Face.D

    def test_invalid_symbol_is_skipped(self, caplog: pytest.LogCaptureFixture) -> None:
        bad = TwistDirectionInfo("bad", "xq", 4, (1.0, 0.0, 0.0))
        good = TWIST_DIRECTIONS_4D[0]
        identity = PieceState.identity(4)
        with caplog.at_level(logging.WARNING, logger="hypercube.orientation"):
            state = identity.twist(PuzzleFamily.RUBIKS_4D, Face.R, bad)
        assert state == identity.twist(PuzzleFamily.RUBIKS_4D, Face.R, good)
        assert "invalid twist symbol" in caplog.text
