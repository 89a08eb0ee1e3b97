"""Sticker geometry.

Each sticker is placed from the current location of its piece and the face
it points at, moved by the twist being animated (if it affects the piece),
and projected to the screen.  In 4D a sticker is a small cube, drawn as six
polygons; in 3D it is a single square.

Each sticker also knows which twists a click on it should trigger.
"""

from __future__ import annotations

from dataclasses import dataclass
import math
from typing import NamedTuple

import numpy as np
from numpy.typing import NDArray

from hypercube.errors import InvalidFaceError
from hypercube.orientation import basis_faces
from hypercube.projection import Quaternion, StickerGeometryParams
from hypercube.puzzle import PuzzleState, make_recenter_twist
from hypercube.topology import Face, PuzzleFamily, TwistDirectionInfo
from hypercube.twists import LayerMask, Twist

# piece location signs within a face -> direction of the twist to do on click
DIRECTION_FROM_SIGNS: dict[tuple[int, int, int], str] = {
    (1, 1, 1): "UFR",
    (-1, 1, 1): "UFL",
    (1, -1, 1): "DFR",
    (-1, -1, 1): "DFL",
    (1, 1, -1): "UBR",
    (-1, 1, -1): "UBL",
    (1, -1, -1): "DBR",
    (-1, -1, -1): "DBL",
    (1, 1, 0): "UR",
    (-1, 1, 0): "UL",
    (1, -1, 0): "DR",
    (-1, -1, 0): "DL",
    (1, 0, 1): "FR",
    (-1, 0, 1): "FL",
    (1, 0, -1): "BR",
    (-1, 0, -1): "BL",
    (0, 1, 1): "UF",
    (0, -1, 1): "DF",
    (0, 1, -1): "UB",
    (0, -1, -1): "DB",
    (1, 0, 0): "R",
    (-1, 0, 0): "L",
    (0, 1, 0): "U",
    (0, -1, 0): "D",
    (0, 0, 1): "F",
    (0, 0, -1): "B",
}

# corners of a 4D sticker are indexed by the signs of (x, y, z): bit 2 set
# for -x, bit 1 for -y, bit 0 for -z
CUBE_POLYGONS: tuple[tuple[int, int, int, int], ...] = (
    (0, 1, 3, 2),  # +x
    (4, 6, 7, 5),  # -x
    (0, 4, 5, 1),  # +y
    (2, 3, 7, 6),  # -y
    (0, 2, 6, 4),  # +z
    (1, 5, 7, 3),  # -z
)
SQUARE_POLYGONS: tuple[tuple[int, int, int, int], ...] = ((0, 1, 2, 3),)


class ClickTwists(NamedTuple):
    ccw: Twist | None
    cw: Twist | None
    recenter: Twist | None


@dataclass(frozen=True, eq=False)
class StickerGeometry:
    """Projected corners of a sticker.

    `verts` has one row per corner: screen X, screen Y and depth (larger is
    nearer the camera).
    """

    verts: NDArray[np.float32]
    polygons: tuple[tuple[int, ...], ...]
    twists: ClickTwists

    def polygon_xys(self) -> list[NDArray[np.float32]]:
        return [self.verts[list(polygon), :2] for polygon in self.polygons]

    def polygon_depths(self) -> list[float]:
        return [float(self.verts[list(polygon), 2].mean()) for polygon in self.polygons]

    def depth(self) -> float:
        return float(self.verts[:, 2].mean())


def face_basis_matrix(family: PuzzleFamily, face: Face) -> NDArray[np.float32]:
    """Return the signed basis vectors of `face` as the columns of a (ndim, 3) matrix."""
    ndim = family.ndim
    ret = np.zeros((ndim, 3), dtype=np.float32)
    for i, basis_face in enumerate(basis_faces(family, face)):
        ret[basis_face.axis, i] = int(basis_face.sign)
    return ret


def twist_matrix(
    family: PuzzleFamily, face: Face, direction: TwistDirectionInfo, progress: float
) -> NDArray[np.float32]:
    """Return the 4x4 rotation of a twist `progress` of the way through.

    The rotation is about ``direction.vector`` in the basis of `face`; the axis
    outside that basis is left alone.  At ``progress=1`` it moves pieces
    exactly like `PieceState.twist`.
    """
    angle = 2 * math.pi / direction.period * progress
    rot = Quaternion.from_v_theta(direction.vector, -angle).as_rotation_matrix()
    basis = np.zeros((4, 3), dtype=np.float32)
    basis[: family.ndim] = face_basis_matrix(family, face)
    return (basis @ rot @ basis.T + (np.eye(4, dtype=np.float32) - basis @ basis.T)).astype(np.float32)


def twist_model_transform(twist: Twist, progress: float) -> NDArray[np.float32]:
    return twist_matrix(twist.puzzle_type.family, twist.axis, twist.direction_info, progress)


def piece_center(state: PuzzleState, piece: int, params: StickerGeometryParams) -> NDArray[np.float32]:
    n = state.layer_count
    location = np.asarray(state.piece_location(piece), dtype=np.float32)
    return (2.0 * location - (n - 1)) * params.sticker_grid_scale


def sticker_center(state: PuzzleState, sticker: int, params: StickerGeometryParams) -> NDArray[np.float32]:
    ret = piece_center(state, state.desc.stickers[sticker].piece, params)
    face = state.sticker_face(sticker)
    ret[face.axis] = float(face.sign)
    return ret


def click_twists(state: PuzzleState, sticker: int) -> ClickTwists:
    """Return the twists a click on `sticker` should do."""
    face = state.sticker_face(sticker)
    if state.family is PuzzleFamily.RUBIKS_3D:
        direction: str | None = "CW"
    else:
        direction = DIRECTION_FROM_SIGNS.get(state.sticker_signs_within_face(sticker))

    cw = None
    if direction is not None:
        cw = Twist.from_face_with_layers(state.puzzle_type, face, direction, LayerMask())
    ccw = state.reverse_twist(cw) if cw is not None else None
    try:
        recenter: Twist | None = make_recenter_twist(state.puzzle_type, face)
    except InvalidFaceError:
        recenter = None
    return ClickTwists(ccw, cw, recenter)


def sticker_geometry(state: PuzzleState, sticker: int, params: StickerGeometryParams) -> StickerGeometry | None:
    """Project `sticker` to the screen, or return None if any corner is clipped."""
    ndim = state.ndim
    piece = state.desc.stickers[sticker].piece
    face = state.sticker_face(sticker)

    model_transform = np.eye(ndim, dtype=np.float32)
    if params.twist_animation is not None:
        twist, progress = params.twist_animation
        if twist.puzzle_type == state.puzzle_type and state.is_piece_affected_by_twist(twist, piece):
            model_transform = twist_model_transform(twist, progress)[:ndim, :ndim]

    center = model_transform @ sticker_center(state, sticker, params)
    spans = model_transform @ face_basis_matrix(state.family, face) * params.sticker_scale
    if face == Face.O:
        # invert outer face
        spans = -spans
    x, y, z = spans.T

    if ndim == 4:
        corners = [center + sx * x + sy * y + sz * z for sx in (1, -1) for sy in (1, -1) for sz in (1, -1)]
        polygons = CUBE_POLYGONS
    else:
        corners = [center + x + y, center + x - y, center - x - y, center - x + y]
        polygons = SQUARE_POLYGONS

    verts = []
    for corner in corners:
        point = params.project_4d(corner) if ndim == 4 else corner
        if point is None:
            return None
        point = params.transform_point(point)
        if point is None:
            return None
        verts.append(point)

    return StickerGeometry(np.asarray(verts, dtype=np.float32), polygons, click_twists(state, sticker))
