"""Puzzle state: one orientation per piece, and twists applied to it.

license
-------
Copyright 2012 David W. Hogg (NYU).

This program is free software; you can redistribute it and/or modify
it under the terms of the GNU General Public License as published by
the Free Software Foundation; either version 2 of the License, or (at
your option) any later version.

This program is distributed in the hope that it will be useful, but
WITHOUT ANY WARRANTY; without even the implied warranty of
MERCHANTABILITY or FITNESS FOR A PARTICULAR PURPOSE.  See the GNU
General Public License for more details.

You should have received a copy of the GNU General Public License
along with this program; if not, write to the Free Software
Foundation, Inc., 51 Franklin Street, Fifth Floor, Boston, MA
02110-1301 USA.
"""

from __future__ import annotations

from collections.abc import Iterator
import logging

from hypercube.errors import InvalidFaceError, TypeMismatchError
from hypercube.orientation import PieceState, basis_faces
from hypercube.topology import Face, PuzzleDescription, PuzzleFamily, PuzzleType, Sign, TopologyRegistry, describe
from hypercube.twists import LayerMask, Twist

logger = logging.getLogger(__name__)

# face -> (twist axis, direction name) of the whole-puzzle rotation that brings
# the face towards the viewer
_RECENTER_4D: dict[Face, tuple[Face, str]] = {
    Face.R: (Face.U, "F"),
    Face.L: (Face.U, "B"),
    Face.U: (Face.R, "B"),
    Face.D: (Face.R, "F"),
    Face.F: (Face.R, "U"),
    Face.B: (Face.R, "D"),
}
_RECENTER_3D: dict[Face, tuple[Face, str]] = {
    Face.R: (Face.U, "CW"),
    Face.L: (Face.U, "CCW"),
    Face.U: (Face.R, "CCW"),
    Face.D: (Face.R, "CW"),
    Face.B: (Face.U, "CW2"),
}


def make_recenter_twist(puzzle_type: PuzzleType, face: Face) -> Twist:
    """Return the whole-puzzle twist that brings `face` towards the viewer."""
    if puzzle_type.family is PuzzleFamily.RUBIKS_3D:
        table = _RECENTER_3D
    else:
        table = _RECENTER_4D
    if face not in table:
        if face == Face.O:
            raise InvalidFaceError("cannot recenter near face")
        if face == Face.I:
            raise InvalidFaceError("cannot recenter far face")
        raise InvalidFaceError(f"cannot recenter face {face.symbol}")
    axis, direction = table[face]
    return Twist.from_face_with_layers(puzzle_type, axis, direction, LayerMask.all_layers(puzzle_type.layer_count))


class PuzzleState:
    """Orientation of every piece of a puzzle.

    Two states compare equal iff every piece has the same orientation.
    """

    def __init__(self, puzzle_type: PuzzleType, registry: TopologyRegistry | None = None) -> None:
        if registry is None:
            self.desc: PuzzleDescription = describe(puzzle_type)
        else:
            self.desc = registry.describe(puzzle_type)
        self.piece_states: list[PieceState] = [PieceState.identity(self.ndim)] * self.desc.piece_count()

    @property
    def puzzle_type(self) -> PuzzleType:
        return self.desc.puzzle_type

    @property
    def family(self) -> PuzzleFamily:
        return self.desc.family

    @property
    def layer_count(self) -> int:
        return self.desc.layer_count

    @property
    def ndim(self) -> int:
        return self.desc.ndim

    def __getitem__(self, piece: int) -> PieceState:
        return self.piece_states[piece]

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, PuzzleState):
            return NotImplemented
        return self.puzzle_type == other.puzzle_type and self.piece_states == other.piece_states

    # mutated in place by twist()
    __hash__ = None  # type: ignore[assignment]

    def __repr__(self) -> str:
        return f"PuzzleState({self.puzzle_type})"

    @classmethod
    def from_description(cls, desc: PuzzleDescription) -> PuzzleState:
        """Return a solved state of an already generated puzzle."""
        ret = cls.__new__(cls)
        ret.desc = desc
        ret.piece_states = [PieceState.identity(desc.ndim)] * desc.piece_count()
        return ret

    def copy(self) -> PuzzleState:
        ret = PuzzleState.from_description(self.desc)
        ret.piece_states = list(self.piece_states)
        return ret

    def twist(self, twist: Twist) -> None:
        """Apply `twist` to every piece it affects."""
        if twist.puzzle_type != self.puzzle_type:
            raise TypeMismatchError("puzzle type mismatch")
        face = twist.axis
        direction = twist.direction_info
        for piece in self.pieces_affected_by_twist(twist):
            new_state = self.piece_states[piece].twist(self.family, face, direction)
            assert new_state.is_valid(), f"twist {twist} produced invalid orientation {new_state}"
            self.piece_states[piece] = new_state

    def pieces_affected_by_twist(self, twist: Twist) -> Iterator[int]:
        return (piece for piece in range(len(self.piece_states)) if self.is_piece_affected_by_twist(twist, piece))

    def is_piece_affected_by_twist(self, twist: Twist, piece: int) -> bool:
        return self.layer_from_twist_axis(twist.axis, piece) in twist.layers

    def layer_from_twist_axis(self, twist_axis: Face, piece: int) -> int:
        """Return the layer of `piece` counted from the face `twist_axis`."""
        face_coord = self.layer_count - 1 if twist_axis.sign == Sign.POS else 0
        piece_coord = self.piece_location(piece)[twist_axis.axis]
        return abs(face_coord - piece_coord)

    def piece_location(self, piece: int) -> tuple[int, ...]:
        """Return the current lattice coordinates of `piece`."""
        piece_state = self.piece_states[piece]
        initial_location = self.desc.piece_locations[piece]
        ret = [0] * self.ndim
        for i, face in enumerate(piece_state.faces):
            coord = initial_location[i]
            if face.sign == Sign.NEG:
                coord = self.layer_count - 1 - coord
            ret[face.axis] = coord
        return tuple(ret)

    def piece_location_signs(self, piece: int) -> tuple[int, ...]:
        """Return -1, 0 or 1 per axis depending on which end of it `piece` is at."""
        last = self.layer_count - 1

        def get_sign(coord: int) -> int:
            if coord == 0:
                return -1
            if coord == last:
                return 1
            return 0

        return tuple(get_sign(coord) for coord in self.piece_location(piece))

    def sticker_face(self, sticker: int) -> Face:
        """Return the face that `sticker` currently points at."""
        info = self.desc.stickers[sticker]
        current = self.piece_states[info.piece][info.color.axis]
        if info.color.sign == Sign.POS:
            return current
        return current.opposite

    def sticker_signs_within_face(self, sticker: int) -> tuple[int, int, int]:
        """Project the piece's location signs onto the basis of the sticker's face."""
        signs = self.piece_location_signs(self.desc.stickers[sticker].piece)
        ret = []
        for basis_face in basis_faces(self.family, self.sticker_face(sticker)):
            ret.append(signs[basis_face.axis] * int(basis_face.sign))
        return ret[0], ret[1], ret[2]

    def make_recenter_twist(self, face: Face) -> Twist:
        return make_recenter_twist(self.puzzle_type, face)

    def reverse_twist(self, twist: Twist) -> Twist:
        return twist.rev()

    def is_solved(self) -> bool:
        """Return whether every piece is in its starting orientation."""
        return self == PuzzleState.from_description(self.desc)
