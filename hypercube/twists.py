"""Twists, layer masks and twist-counting metrics."""

from __future__ import annotations

from collections.abc import Iterator
from dataclasses import dataclass, replace
from enum import Enum

from hypercube.topology import Face, PuzzleDescription, PuzzleFamily, PuzzleType, TwistDirectionInfo


@dataclass(frozen=True)
class LayerMask:
    """Set of layers, counted from the twisted face, stored as a bitset."""

    bits: int = 1

    @classmethod
    def all_layers(cls, layer_count: int) -> LayerMask:
        return cls((1 << layer_count) - 1)

    @classmethod
    def slice_layers(cls, layer_count: int) -> LayerMask:
        """All layers except the two outermost ones."""
        outer = 1 | (1 << (layer_count - 1))
        return cls(((1 << layer_count) - 1) & ~outer)

    @classmethod
    def from_layers(cls, layers: list[int] | range) -> LayerMask:
        bits = 0
        for layer in layers:
            bits |= 1 << layer
        return cls(bits)

    def __contains__(self, layer: object) -> bool:
        return isinstance(layer, int) and layer >= 0 and bool(self.bits >> layer & 1)

    def __iter__(self) -> Iterator[int]:
        layer = 0
        bits = self.bits
        while bits:
            if bits & 1:
                yield layer
            bits >>= 1
            layer += 1

    def __bool__(self) -> bool:
        return self.bits != 0

    def __and__(self, other: LayerMask) -> LayerMask:
        return LayerMask(self.bits & other.bits)

    def count(self) -> int:
        return bin(self.bits).count("1")

    def is_default(self) -> bool:
        return self.bits == 1

    def is_contiguous_from_outermost(self) -> bool:
        return self.bits != 0 and self.bits & (self.bits + 1) == 0

    def single_layer(self) -> int | None:
        if self.count() == 1:
            return self.bits.bit_length() - 1
        return None

    def reversed(self, layer_count: int) -> LayerMask:
        """Return the same layers counted from the opposite face."""
        return LayerMask.from_layers([layer_count - 1 - layer for layer in self])

    def short_description(self) -> str:
        return ",".join(str(layer + 1) for layer in self)


class TwistMetric(Enum):
    """Rules for counting a twist sequence as a number of moves."""

    ETM = "ETM"  # execution turn metric: every twist counts
    QSTM = "QSTM"  # quarter slice turn metric: rotations are free
    STM = "STM"  # slice turn metric: repeated twists of one slab count once
    ATM = "ATM"  # axial turn metric: parallel twists count once

    @property
    def counts_rotations(self) -> bool:
        return self is TwistMetric.ETM


_SUFFIX_3D: dict[str, str] = {"CW": "", "CCW": "'", "CW2": "2", "CCW2": "2'"}
_SLICE_NAMES: dict[Face, tuple[str, bool]] = {
    # slice letter, whether the forward symbol follows the face
    Face.R: ("M", False),
    Face.L: ("M", True),
    Face.U: ("E", False),
    Face.D: ("E", True),
    Face.F: ("S", True),
    Face.B: ("S", False),
    Face.O: ("P", True),
    Face.I: ("P", True),
}


@dataclass(frozen=True)
class Twist:
    """A rotation of some layers of a puzzle about one face."""

    puzzle_type: PuzzleType
    axis: Face
    direction: int
    layers: LayerMask = LayerMask()

    @classmethod
    def from_face_with_layers(
        cls, puzzle_type: PuzzleType, face: Face, direction: str, layers: LayerMask | None = None
    ) -> Twist:
        """Build a twist from a face, a direction name or symbol, and a layer mask."""
        family = puzzle_type.family
        if face not in family.faces:
            raise ValueError(f"{face.symbol} is not a twist axis of {puzzle_type}")
        if layers is None:
            layers = LayerMask()
        return cls(puzzle_type, face, family.direction_by_name(direction), layers)

    @property
    def direction_info(self) -> TwistDirectionInfo:
        return self.puzzle_type.family.twist_directions[self.direction]

    def rev(self) -> Twist:
        """Return the twist that undoes this one."""
        return replace(self, direction=PuzzleDescription.reverse_twist_direction(self.direction))

    def is_whole_puzzle_rotation(self) -> bool:
        return self.layers == LayerMask.all_layers(self.puzzle_type.layer_count)

    def normalized_layers(self) -> LayerMask:
        """Return the layers counted from the positive face of the twist axis."""
        if self.axis.sign > 0:
            return self.layers
        return self.layers.reversed(self.puzzle_type.layer_count)

    def can_combine(self, prev: Twist | None, metric: TwistMetric) -> bool:
        """Return whether this twist merges into `prev` under `metric`.

        `prev` is the twist immediately before this one, or None for the
        first twist of a sequence.
        """
        if self.is_whole_puzzle_rotation() and not metric.counts_rotations:
            return True
        if prev is None or prev.puzzle_type != self.puzzle_type:
            return False
        if metric in (TwistMetric.ETM, TwistMetric.QSTM):
            return False
        if prev.axis.axis != self.axis.axis:
            return False
        this_layers = self.normalized_layers()
        prev_layers = prev.normalized_layers()
        if metric is TwistMetric.STM:
            return this_layers == prev_layers
        # ATM
        return this_layers == prev_layers or not (this_layers & prev_layers)

    def _suffix(self, direction: int) -> str:
        info = self.puzzle_type.family.twist_directions[direction]
        if self.puzzle_type.family is PuzzleFamily.RUBIKS_3D:
            return _SUFFIX_3D[info.name]
        return info.symbol

    def short_description(self) -> str:
        """Return the twist in the usual cubing notation."""
        layer_count = self.puzzle_type.layer_count
        face_upper = self.axis.symbol
        face_lower = face_upper.lower()
        fwd = self._suffix(self.direction)
        rev = self._suffix(PuzzleDescription.reverse_twist_direction(self.direction))

        if not self.layers:
            return "?"
        if self.layers == LayerMask.all_layers(layer_count):
            return f"{face_upper}*{fwd}"
        if self.layers.is_default():
            return f"{face_upper}{fwd}"
        if self.layers == LayerMask.slice_layers(layer_count):
            letter, follows_face = _SLICE_NAMES[self.axis]
            return f"{letter}{fwd if follows_face else rev}"
        if self.layers.bits == 3:
            return f"{face_upper}w{fwd}"
        if self.layers.is_contiguous_from_outermost():
            return f"{self.layers.count()}{face_upper}w{fwd}"
        layer = self.layers.single_layer()
        if layer is not None:
            return f"{layer + 1}{face_lower}{fwd}"
        return f"{{{self.layers.short_description()}}}{face_upper}{fwd}"

    def __str__(self) -> str:
        return self.short_description()
