"""Puzzle topology: faces, pieces, stickers and twist directions.

conventions
-----------
- A puzzle type is a family (3D or 4D cube) plus a layer count.
- Faces have integers and one-letter names, ``R L U D F B O I``.  Face ``2a``
  is the positive end of axis ``a`` and face ``2a + 1`` the negative end, so
  ``face ^ 1`` is always the opposite face.  3D puzzles use the first six.
- Every piece sits on a lattice point with coordinates in ``[0, N)``; only
  points on the surface of the lattice become pieces.
- Stickers are attached to pieces in face order and colored by the face they
  start on.
- Twist directions come in pairs, so ``direction ^ 1`` is the reverse
  direction.

Descriptions are immutable and generated once per puzzle type.  A
`TopologyRegistry` memoizes them; `describe()` uses a module-level registry.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum, IntEnum
import itertools
import logging
import threading
from typing import NamedTuple

logger = logging.getLogger(__name__)

MIN_LAYER_COUNT: int = 1
MAX_LAYER_COUNT: int = 9
DEFAULT_LAYER_COUNT: int = 3


class Axis(IntEnum):
    X = 0  # right
    Y = 1  # up
    Z = 2  # towards the 3D camera
    W = 3  # towards the 4D camera


class Sign(IntEnum):
    NEG = -1
    ZERO = 0
    POS = 1

    def __neg__(self) -> Sign:
        return Sign(-int(self))


class Face(IntEnum):
    R = 0
    L = 1
    U = 2
    D = 3
    F = 4
    B = 5
    O = 6  # noqa: E741
    I = 7  # noqa: E741

    @classmethod
    def of(cls, axis: int, sign: Sign) -> Face:
        """Return the face at the `sign` end of `axis`."""
        return cls(2 * int(axis) + (0 if sign == Sign.POS else 1))

    @property
    def axis(self) -> Axis:
        return Axis(int(self) >> 1)

    @property
    def sign(self) -> Sign:
        return Sign.NEG if int(self) & 1 else Sign.POS

    @property
    def opposite(self) -> Face:
        return Face(int(self) ^ 1)

    @property
    def symbol(self) -> str:
        return self.name

    @property
    def long_name(self) -> str:
        return _FACE_NAMES[self]

    def vector(self, ndim: int) -> tuple[int, ...]:
        """Return the outward unit normal of the face."""
        return tuple(int(self.sign) if i == self.axis else 0 for i in range(ndim))


_FACE_NAMES: dict[Face, str] = {
    Face.R: "Right",
    Face.L: "Left",
    Face.U: "Up",
    Face.D: "Down",
    Face.F: "Front",
    Face.B: "Back",
    Face.O: "Out",
    Face.I: "In",
}


class TwistDirectionInfo(NamedTuple):
    """A named rotation, written as a sequence of `x`, `y`, `z` generators.

    `vector` is the rotation axis in the coordinates of the twisted face's
    basis and `period` the number of applications that give the identity.
    """

    name: str
    symbol: str
    period: int
    vector: tuple[float, float, float]


def _direction_4d(name: str, symbol: str, period: int) -> TwistDirectionInfo:
    # the rotation axis can be read off the face letters in the name
    x = 1.0 if "R" in name else -1.0 if "L" in name else 0.0
    y = 1.0 if "U" in name else -1.0 if "D" in name else 0.0
    z = 1.0 if "F" in name else -1.0 if "B" in name else 0.0
    return TwistDirectionInfo(name, symbol, period, (x, y, z))


TWIST_DIRECTIONS_4D: tuple[TwistDirectionInfo, ...] = tuple(
    _direction_4d(name, symbol, period)
    for name, symbol, period in [
        # 90-degree face (2c) twists
        ("R", "x", 4),
        ("L", "x'", 4),
        ("U", "y", 4),
        ("D", "y'", 4),
        ("F", "z", 4),
        ("B", "z'", 4),
        # 180-degree face (2c) twists
        ("R2", "x2", 2),
        ("L2", "x2'", 2),
        ("U2", "y2", 2),
        ("D2", "y2'", 2),
        ("F2", "z2", 2),
        ("B2", "z2'", 2),
        # 180-degree edge (3c) twists
        ("UF", "xy2", 2),
        ("DB", "xy2'", 2),
        ("UR", "zx2", 2),
        ("DL", "zx2'", 2),
        ("FR", "yz2", 2),
        ("BL", "yz2'", 2),
        ("DF", "xz2", 2),
        ("UB", "xz2'", 2),
        ("UL", "zy2", 2),
        ("DR", "zy2'", 2),
        ("BR", "yx2", 2),
        ("FL", "yx2'", 2),
        # 120-degree corner (4c) twists
        ("UFR", "xy", 3),
        ("DBL", "y'x'", 3),
        ("UFL", "zy", 3),
        ("DBR", "xy'", 3),
        ("DFR", "xz", 3),
        ("UBL", "yz'", 3),
        ("UBR", "yx", 3),
        ("DFL", "zx'", 3),
    ]
)

TWIST_DIRECTIONS_3D: tuple[TwistDirectionInfo, ...] = (
    TwistDirectionInfo("CW", "z", 4, (0.0, 0.0, 1.0)),
    TwistDirectionInfo("CCW", "z'", 4, (0.0, 0.0, -1.0)),
    TwistDirectionInfo("CW2", "z2", 2, (0.0, 0.0, 1.0)),
    TwistDirectionInfo("CCW2", "z2'", 2, (0.0, 0.0, -1.0)),
)


class PuzzleFamily(Enum):
    RUBIKS_3D = "Rubiks3D"
    RUBIKS_4D = "Rubiks4D"

    @property
    def ndim(self) -> int:
        return 3 if self is PuzzleFamily.RUBIKS_3D else 4

    @property
    def display_name(self) -> str:
        return "Rubik's 3D" if self is PuzzleFamily.RUBIKS_3D else "Rubik's 4D"

    @property
    def faces(self) -> tuple[Face, ...]:
        return tuple(Face)[: 2 * self.ndim]

    @property
    def twist_directions(self) -> tuple[TwistDirectionInfo, ...]:
        if self is PuzzleFamily.RUBIKS_3D:
            return TWIST_DIRECTIONS_3D
        return TWIST_DIRECTIONS_4D

    def direction_by_name(self, name: str) -> int:
        """Look a twist direction up by its name (``"UFR"``) or symbol (``"xy"``)."""
        for i, info in enumerate(self.twist_directions):
            if name in (info.name, info.symbol):
                return i
        raise ValueError(f"unknown twist direction {name!r} for {self.display_name}")


@dataclass(frozen=True)
class PuzzleType:
    """A puzzle family together with its layer count."""

    family: PuzzleFamily
    layer_count: int = DEFAULT_LAYER_COUNT

    def __post_init__(self) -> None:
        if not MIN_LAYER_COUNT <= self.layer_count <= MAX_LAYER_COUNT:
            raise ValueError(f"layer count should be between {MIN_LAYER_COUNT} and {MAX_LAYER_COUNT}")

    @classmethod
    def rubiks_3d(cls, layer_count: int = DEFAULT_LAYER_COUNT) -> PuzzleType:
        return cls(PuzzleFamily.RUBIKS_3D, layer_count)

    @classmethod
    def rubiks_4d(cls, layer_count: int = DEFAULT_LAYER_COUNT) -> PuzzleType:
        return cls(PuzzleFamily.RUBIKS_4D, layer_count)

    @property
    def ndim(self) -> int:
        return self.family.ndim

    @property
    def name(self) -> str:
        return "x".join([str(self.layer_count)] * self.ndim)

    def __str__(self) -> str:
        return f"{self.family.display_name} {self.name}"


class StickerInfo(NamedTuple):
    piece: int
    color: Face


@dataclass(frozen=True)
class PuzzleDescription:
    """Immutable layout of one puzzle type."""

    puzzle_type: PuzzleType
    pieces: tuple[tuple[int, ...], ...]
    stickers: tuple[StickerInfo, ...]
    piece_locations: tuple[tuple[int, ...], ...]
    faces: tuple[Face, ...] = field(init=False)
    twist_axes: tuple[Face, ...] = field(init=False)
    twist_directions: tuple[TwistDirectionInfo, ...] = field(init=False)

    def __post_init__(self) -> None:
        faces = self.puzzle_type.family.faces
        object.__setattr__(self, "faces", faces)
        object.__setattr__(self, "twist_axes", faces)
        object.__setattr__(self, "twist_directions", self.puzzle_type.family.twist_directions)

    @property
    def name(self) -> str:
        return self.puzzle_type.name

    @property
    def family(self) -> PuzzleFamily:
        return self.puzzle_type.family

    @property
    def layer_count(self) -> int:
        return self.puzzle_type.layer_count

    @property
    def ndim(self) -> int:
        return self.puzzle_type.ndim

    def piece_count(self) -> int:
        return len(self.pieces)

    def direction_by_name(self, name: str) -> int:
        return self.family.direction_by_name(name)

    @staticmethod
    def reverse_twist_direction(direction: int) -> int:
        return direction ^ 1

    def scramble_moves_count(self) -> int:
        # no principled bound; grows with the layer count
        per_layer = 10 if self.family is PuzzleFamily.RUBIKS_3D else 15
        return per_layer * self.layer_count


def generate_description(puzzle_type: PuzzleType) -> PuzzleDescription:
    """Build the surface pieces and stickers of an N^d lattice."""
    n = puzzle_type.layer_count
    ndim = puzzle_type.ndim
    full_range = list(range(n))
    ends = sorted({0, n - 1})

    pieces: list[tuple[int, ...]] = []
    stickers: list[StickerInfo] = []
    piece_locations: list[tuple[int, ...]] = []

    # the last axis varies slowest and X fastest
    for outer in itertools.product(full_range, repeat=ndim - 1):
        on_surface = any(c in (0, n - 1) for c in outer)
        # interior combinations only need the two extreme X values
        for x in full_range if on_surface else ends:
            location = (x,) + tuple(reversed(outer))
            piece = len(pieces)
            piece_stickers = []
            for axis, coord in enumerate(location):
                for face, extreme in ((Face.of(axis, Sign.POS), n - 1), (Face.of(axis, Sign.NEG), 0)):
                    if coord == extreme:
                        piece_stickers.append(len(stickers))
                        stickers.append(StickerInfo(piece, face))
            pieces.append(tuple(piece_stickers))
            piece_locations.append(location)

    logger.debug("generated %s: %d pieces, %d stickers", puzzle_type, len(pieces), len(stickers))
    return PuzzleDescription(
        puzzle_type=puzzle_type,
        pieces=tuple(pieces),
        stickers=tuple(stickers),
        piece_locations=tuple(piece_locations),
    )


class TopologyRegistry:
    """Memoizes one `PuzzleDescription` per puzzle type.

    Entries are created lazily under a lock and never mutated afterwards, so
    they can be shared freely once returned.
    """

    def __init__(self) -> None:
        self._descriptions: dict[PuzzleType, PuzzleDescription] = {}
        self._lock = threading.Lock()

    def describe(self, puzzle_type: PuzzleType) -> PuzzleDescription:
        with self._lock:
            desc = self._descriptions.get(puzzle_type)
            if desc is None:
                desc = generate_description(puzzle_type)
                self._descriptions[puzzle_type] = desc
        return desc

    def __contains__(self, puzzle_type: object) -> bool:
        return puzzle_type in self._descriptions

    def __len__(self) -> int:
        return len(self._descriptions)

    def clear(self) -> None:
        with self._lock:
            self._descriptions.clear()


default_registry = TopologyRegistry()


def describe(puzzle_type: PuzzleType) -> PuzzleDescription:
    """Return the cached description of `puzzle_type`."""
    return default_registry.describe(puzzle_type)
