"""Tests for sticker geometry and twist matrices."""

from __future__ import annotations

import numpy as np
import pytest

from hypercube.config import GfxPreferences
from hypercube.geometry import (
    DIRECTION_FROM_SIGNS,
    click_twists,
    face_basis_matrix,
    piece_center,
    sticker_center,
    sticker_geometry,
    twist_matrix,
    twist_model_transform,
)
from hypercube.projection import Quaternion, StickerGeometryParams
from hypercube.puzzle import PuzzleState
from hypercube.topology import TWIST_DIRECTIONS_4D, Face, PuzzleFamily, PuzzleType
from hypercube.twists import LayerMask, Twist


def find_piece(state: PuzzleState, location: tuple[int, ...]) -> int:
    return state.desc.piece_locations.index(location)


def find_sticker(state: PuzzleState, piece: int, color: Face) -> int:
    return next(s for s in state.desc.pieces[piece] if state.desc.stickers[s].color == color)


class TestTwistMatrix:
    def test_zero_progress_is_identity(self) -> None:
        for direction in TWIST_DIRECTIONS_4D:
            np.testing.assert_allclose(twist_matrix(PuzzleFamily.RUBIKS_4D, Face.R, direction, 0.0), np.eye(4))

    def test_leaves_twist_axis_alone(self) -> None:
        for direction in TWIST_DIRECTIONS_4D:
            m = twist_matrix(PuzzleFamily.RUBIKS_4D, Face.R, direction, 0.37)
            np.testing.assert_allclose(m[:, 0], [1.0, 0.0, 0.0, 0.0], atol=1e-6)
            np.testing.assert_allclose(m @ m.T, np.eye(4), atol=1e-5)

    def test_face_basis_is_orthonormal(self) -> None:
        for family in PuzzleFamily:
            for face in family.faces:
                basis = face_basis_matrix(family, face)
                assert basis.shape == (family.ndim, 3)
                np.testing.assert_allclose(basis.T @ basis, np.eye(3))

    @pytest.mark.parametrize("puzzle_type", [PuzzleType.rubiks_4d(3), PuzzleType.rubiks_3d(3)], ids=str)
    def test_full_progress_matches_discrete_twist(self, puzzle_type: PuzzleType) -> None:
        state = PuzzleState(puzzle_type)
        params = StickerGeometryParams.new(GfxPreferences(), puzzle_type)
        ndim = state.ndim
        for face in state.desc.twist_axes:
            for direction in range(len(state.desc.twist_directions)):
                twist = Twist(puzzle_type, face, direction, LayerMask(0b011))
                m = twist_model_transform(twist, 1.0)[:ndim, :ndim]
                after = state.copy()
                after.twist(twist)
                for piece in state.pieces_affected_by_twist(twist):
                    np.testing.assert_allclose(
                        m @ piece_center(state, piece, params), piece_center(after, piece, params), atol=1e-5
                    )
                    for sticker in state.desc.pieces[piece]:
                        np.testing.assert_allclose(
                            m @ sticker_center(state, sticker, params),
                            sticker_center(after, sticker, params),
                            atol=1e-5,
                        )


class TestStickerGeometry:
    def test_4d_sticker_is_a_cube(self, hypercube3: PuzzleType) -> None:
        state = PuzzleState(hypercube3)
        params = StickerGeometryParams.new(GfxPreferences(), hypercube3)
        for sticker in range(len(state.desc.stickers)):
            geometry = sticker_geometry(state, sticker, params)
            assert geometry is not None
            assert geometry.verts.shape == (8, 3)
            assert len(geometry.polygons) == 6
            assert all(xy.shape == (4, 2) for xy in geometry.polygon_xys())
            assert len(geometry.polygon_depths()) == 6

    def test_3d_sticker_is_a_square(self, cube3: PuzzleType) -> None:
        state = PuzzleState(cube3)
        params = StickerGeometryParams.new(GfxPreferences(), cube3)
        geometry = sticker_geometry(state, 0, params)
        assert geometry is not None
        assert geometry.verts.shape == (4, 3)
        assert len(geometry.polygons) == 1

    def test_front_stickers_are_nearer(self, cube3: PuzzleType) -> None:
        state = PuzzleState(cube3)
        params = StickerGeometryParams.new(GfxPreferences(), cube3, view=Quaternion.identity())
        depths = {face: [] for face in (Face.F, Face.B)}
        for sticker, info in enumerate(state.desc.stickers):
            if info.color in depths:
                geometry = sticker_geometry(state, sticker, params)
                assert geometry is not None
                depths[info.color].append(geometry.depth())
        assert min(depths[Face.F]) > max(depths[Face.B])

    def test_clipped_stickers(self, cube3: PuzzleType) -> None:
        state = PuzzleState(cube3)
        gfx = GfxPreferences(fov_3d=170.0, scale=2.0)
        params = StickerGeometryParams.new(gfx, cube3, view=Quaternion.identity())
        for sticker, info in enumerate(state.desc.stickers):
            if info.color == Face.F:
                assert sticker_geometry(state, sticker, params) is None
            elif info.color == Face.B:
                assert sticker_geometry(state, sticker, params) is not None

    def test_animation_end_matches_twisted_state(self, hypercube3: PuzzleType) -> None:
        state = PuzzleState(hypercube3)
        twist = Twist.from_face_with_layers(hypercube3, Face.U, "UFR")
        animated = StickerGeometryParams.new(GfxPreferences(), hypercube3, twist_animation=(twist, 1.0))
        still = StickerGeometryParams.new(GfxPreferences(), hypercube3)
        after = state.copy()
        after.twist(twist)
        for piece in state.pieces_affected_by_twist(twist):
            for sticker in state.desc.pieces[piece]:
                a = sticker_geometry(state, sticker, animated)
                b = sticker_geometry(after, sticker, still)
                assert a is not None and b is not None
                # same corners, possibly in another order
                np.testing.assert_allclose(a.verts.mean(axis=0), b.verts.mean(axis=0), atol=1e-4)

    def test_animation_ignores_unaffected_pieces(self, hypercube3: PuzzleType) -> None:
        state = PuzzleState(hypercube3)
        twist = Twist.from_face_with_layers(hypercube3, Face.R, "U")
        animated = StickerGeometryParams.new(GfxPreferences(), hypercube3, twist_animation=(twist, 0.5))
        still = StickerGeometryParams.new(GfxPreferences(), hypercube3)
        piece = find_piece(state, (0, 0, 0, 0))
        sticker = state.desc.pieces[piece][0]
        a = sticker_geometry(state, sticker, animated)
        b = sticker_geometry(state, sticker, still)
        assert a is not None and b is not None
        np.testing.assert_allclose(a.verts, b.verts)


class TestClickTwists:
    def test_table_names_are_directions(self) -> None:
        names = {d.name for d in TWIST_DIRECTIONS_4D}
        assert len(DIRECTION_FROM_SIGNS) == 26
        assert set(DIRECTION_FROM_SIGNS.values()) <= names
        assert (0, 0, 0) not in DIRECTION_FROM_SIGNS

    def test_corner_sticker(self, hypercube3: PuzzleType) -> None:
        state = PuzzleState(hypercube3)
        sticker = find_sticker(state, find_piece(state, (2, 2, 2, 2)), Face.R)
        twists = click_twists(state, sticker)
        assert twists.cw is not None and twists.ccw is not None
        assert twists.cw.axis == Face.R
        assert twists.cw.direction_info.name == "UFR"
        assert twists.ccw == twists.cw.rev()
        assert twists.recenter == state.make_recenter_twist(Face.R)

    def test_edge_sticker(self, hypercube3: PuzzleType) -> None:
        state = PuzzleState(hypercube3)
        sticker = find_sticker(state, find_piece(state, (0, 1, 0, 2)), Face.L)
        twists = click_twists(state, sticker)
        assert twists.cw is not None
        assert twists.cw.axis == Face.L
        # the basis of L is (I, U, F)
        assert twists.cw.direction_info.name == "BL"

    def test_center_sticker(self, hypercube3: PuzzleType) -> None:
        state = PuzzleState(hypercube3)
        sticker = find_sticker(state, find_piece(state, (2, 1, 1, 1)), Face.R)
        twists = click_twists(state, sticker)
        assert twists.cw is None
        assert twists.ccw is None
        assert twists.recenter is not None

    def test_w_face_has_no_recenter(self, hypercube3: PuzzleType) -> None:
        state = PuzzleState(hypercube3)
        sticker = find_sticker(state, find_piece(state, (2, 2, 2, 2)), Face.O)
        assert click_twists(state, sticker).recenter is None

    def test_3d_click_is_clockwise(self, cube3: PuzzleType) -> None:
        state = PuzzleState(cube3)
        sticker = find_sticker(state, find_piece(state, (1, 1, 2)), Face.F)
        twists = click_twists(state, sticker)
        assert twists.cw == Twist.from_face_with_layers(cube3, Face.F, "CW")
        assert twists.ccw == Twist.from_face_with_layers(cube3, Face.F, "CCW")
        assert twists.recenter is None

    def test_geometry_carries_click_twists(self, hypercube3: PuzzleType) -> None:
        state = PuzzleState(hypercube3)
        params = StickerGeometryParams.new(GfxPreferences(), hypercube3)
        geometry = sticker_geometry(state, 5, params)
        assert geometry is not None
        assert geometry.twists == click_twists(state, 5)
