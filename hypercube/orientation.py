"""Piece orientations as signed axis permutations.

A `PieceState` has one slot per canonical positive axis (X+, Y+, Z+ and, in
4D, W+).  Each slot holds the face that the piece's original sticker in that
direction points at now.  Valid states are exactly the signed permutations:
every axis appears in one slot.

All twists are built from one generator, `PieceState.rotate`, a 90-degree
rotation in the plane of two axes.  Twist directions are written as short
sequences of the generators ``x``, ``y`` and ``z`` relative to the basis of
the twisted face; ``2`` applies a generator twice and ``'`` inverts it.
"""

from __future__ import annotations

from dataclasses import dataclass
import logging

from hypercube.topology import Face, PuzzleFamily, Sign, TwistDirectionInfo

logger = logging.getLogger(__name__)


def basis_faces(family: PuzzleFamily, face: Face) -> tuple[Face, Face, Face]:
    """Return the three faces spanning the basis of `face`.

    In 4D this is ``R, U, F`` with the face's own axis replaced by ``O`` (for a
    positive face) or ``I`` (for a negative one).  In 3D it is a right-handed
    basis ``bx, by, face`` about the outward normal.
    """
    if family is PuzzleFamily.RUBIKS_3D:
        a = int(face.axis)
        bx = Face.of((a + 1) % 3, Sign.POS)
        by = Face.of((a + 2) % 3, face.sign)
        return bx, by, face

    w = Face.O if face.sign == Sign.POS else Face.I
    axis = face.axis
    return (
        w if axis == 0 else Face.R,
        w if axis == 1 else Face.U,
        w if axis == 2 else Face.F,
    )


@dataclass(frozen=True)
class PieceState:
    """Facing directions of the X+, Y+, Z+ (and W+) stickers of a piece."""

    faces: tuple[Face, ...]

    @classmethod
    def identity(cls, ndim: int) -> PieceState:
        return cls(tuple(Face.of(axis, Sign.POS) for axis in range(ndim)))

    def __getitem__(self, axis: int) -> Face:
        return self.faces[axis]

    @property
    def ndim(self) -> int:
        return len(self.faces)

    def rotate(self, from_axis: int, to_axis: int) -> PieceState:
        """Rotate 90 degrees so that ``+from_axis`` goes to ``+to_axis``.

        Swaps the two axes in every slot that lies on either of them, keeping
        the sign, and then flips every slot that ended up on `from_axis`.
        """
        swapped = []
        for face in self.faces:
            if face.axis == from_axis:
                face = Face.of(to_axis, face.sign)
            elif face.axis == to_axis:
                face = Face.of(from_axis, face.sign)
            swapped.append(face)
        return PieceState(tuple(swapped)).mirror(from_axis)

    def rotate_by_faces(self, from_face: Face, to_face: Face) -> PieceState:
        """Rotate 90 degrees so that `from_face` goes to `to_face`."""
        if from_face.sign == to_face.sign:
            return self.rotate(from_face.axis, to_face.axis)
        return self.rotate(to_face.axis, from_face.axis)

    def mirror(self, axis: int) -> PieceState:
        return PieceState(tuple(face.opposite if face.axis == axis else face for face in self.faces))

    def twist(self, family: PuzzleFamily, face: Face, direction: TwistDirectionInfo) -> PieceState:
        """Apply the generator sequence of `direction` about `face`."""
        bx, by, bz = basis_faces(family, face)
        generators = {"x": (bz, by), "y": (bx, bz), "z": (by, bx)}

        state = self
        symbol = direction.symbol
        i = 0
        while i < len(symbol):
            char = symbol[i]
            i += 1
            if char not in generators:
                logger.warning("invalid twist symbol %r in %r", char, symbol)
                continue
            a, b = generators[char]
            double = i < len(symbol) and symbol[i] == "2"
            if double:
                i += 1
            inverse = i < len(symbol) and symbol[i] == "'"
            if inverse:
                i += 1
                a, b = b, a
            state = state.rotate_by_faces(a, b)
            if double:
                state = state.rotate_by_faces(a, b)
        return state

    def is_valid(self) -> bool:
        """Return whether every axis appears in exactly one slot."""
        return sorted(face.axis for face in self.faces) == list(range(len(self.faces)))

    def __str__(self) -> str:
        return "".join(face.symbol for face in self.faces)
