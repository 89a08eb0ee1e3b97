"""Puzzle wrapper that adds animation and undo history.

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

usage
-----
- create a controller with ``c = PuzzleController(PuzzleType.rubiks_4d(3))``.
- twist with ``c.twist(t)`` or ``c.do_twist_command(Face.R, "UFR", LayerMask())``.
- call ``c.advance(dt, prefs.interaction)`` once per frame and redraw while it
  returns True.
- ``c.displayed`` lags behind the animation; ``c.latest`` has every queued
  twist applied already.

Access to one controller must be serialized by the caller.
"""

from __future__ import annotations

from collections import deque
from collections.abc import Callable
from enum import Enum
import logging
import math
from pathlib import Path

import numpy as np
from numpy.typing import NDArray

from hypercube.config import InteractionPreferences
from hypercube.errors import EmptyHistoryError, TypeMismatchError, UnimplementedError
from hypercube.geometry import twist_model_transform
from hypercube.puzzle import PuzzleState
from hypercube.topology import Face, PuzzleType, TopologyRegistry
from hypercube.twists import LayerMask, Twist, TwistMetric

logger = logging.getLogger(__name__)

# If at least this much of a twist is animated in one frame, just skip the
# animation to reduce unnecessary flashing.
MIN_TWIST_DELTA: float = 1.0 / 3.0

# Higher number means faster exponential increase in twist speed.
EXP_TWIST_FACTOR: float = 0.5

InterpolateFn = Callable[[float], float]


def cosine(x: float) -> float:
    """Interpolate using cosine from 0 to pi."""
    return (1.0 - math.cos(x * math.pi)) / 2.0


def cosine_accel(x: float) -> float:
    """Interpolate using cosine from 0 to pi/2."""
    return 1.0 - math.cos(x * math.pi / 2.0)


def cosine_decel(x: float) -> float:
    """Interpolate using cosine from pi/2 to 0."""
    return math.cos((1.0 - x) * math.pi / 2.0)


INTERPOLATION_FN: InterpolateFn = cosine


class ScrambleState(Enum):
    NONE = 0
    PARTIAL = 1
    FULL = 2
    # solved by the user, even if not solved right now
    SOLVED = 3


class PuzzleController:
    """Two puzzle states, the twists animating between them, and history."""

    def __init__(self, puzzle_type: PuzzleType, registry: TopologyRegistry | None = None) -> None:
        # state right before the twist being animated
        self.displayed: PuzzleState = PuzzleState(puzzle_type, registry)
        # state with every queued twist applied
        self.latest: PuzzleState = self.displayed.copy()
        # twists that transform `displayed` into `latest`
        self.twist_queue: deque[Twist] = deque()
        # longest the queue has been since it was last empty
        self.queue_max: int = 0
        # progress of the current twist animation, from 0 to 1
        self.progress: float = 0.0

        self.is_unsaved: bool = False

        self.scramble_state: ScrambleState = ScrambleState.NONE
        self.scramble: list[Twist] = []
        self.undo_buffer: list[Twist] = []
        self.redo_buffer: list[Twist] = []

    def __eq__(self, other: object) -> bool:
        if isinstance(other, PuzzleController):
            return self.latest == other.latest
        if isinstance(other, PuzzleState):
            return self.latest == other
        return NotImplemented

    __hash__ = None  # type: ignore[assignment]

    @property
    def puzzle_type(self) -> PuzzleType:
        return self.latest.puzzle_type

    def reset(self) -> None:
        """Return to a solved puzzle with empty history."""
        self.displayed = PuzzleState.from_description(self.latest.desc)
        self.latest = self.displayed.copy()
        self.twist_queue.clear()
        self.queue_max = 0
        self.progress = 0.0
        self.is_unsaved = False
        self.scramble_state = ScrambleState.NONE
        self.scramble = []
        self.undo_buffer = []
        self.redo_buffer = []

    def twist(self, twist: Twist) -> None:
        """Add a twist to the back of the twist queue.

        A twist that undoes the last one in the history is done as an undo.
        """
        if twist.puzzle_type != self.puzzle_type:
            raise TypeMismatchError("puzzle type mismatch")
        self.is_unsaved = True
        self.redo_buffer.clear()
        if self.undo_buffer and self.undo_buffer[-1] == twist.rev():
            self.undo()
            return
        self.latest.twist(twist)
        self.twist_queue.append(twist)
        self.undo_buffer.append(twist)
        logger.debug("twist %s", twist)

    def do_twist_command(self, face: Face, direction: str, layer_mask: LayerMask | None = None) -> None:
        self.twist(Twist.from_face_with_layers(self.puzzle_type, face, direction, layer_mask))

    def do_recenter_command(self, face: Face) -> None:
        """Rotate the whole puzzle to put `face` in the center of the view."""
        self.twist(self.latest.make_recenter_twist(face))

    def current_twist(self) -> tuple[Twist, float] | None:
        """Return the twist being animated and its eased progress, if any."""
        if not self.twist_queue:
            return None
        return self.twist_queue[0], INTERPOLATION_FN(self.progress)

    def advance(self, delta: float, prefs: InteractionPreferences) -> bool:
        """Advance the animation by `delta` seconds.

        Returns whether the puzzle needs to be repainted.
        """
        if not self.twist_queue:
            self.queue_max = 0
            return False
        if self.progress >= 1.0:
            self.displayed.twist(self.twist_queue.popleft())
            self.progress = 0.0
            # repaint to finalize the twist
            return True
        self.queue_max = max(self.queue_max, len(self.twist_queue))
        # twist_duration is seconds per twist; speed is fraction of a twist per frame
        base_speed = delta / prefs.twist_duration if prefs.twist_duration else math.inf
        speed_mod = 1.0
        if prefs.dynamic_twist_speed:
            # twist exponentially faster when more twists are queued
            speed_mod = math.exp((len(self.twist_queue) - 1) * EXP_TWIST_FACTOR)
        twist_delta = base_speed * speed_mod
        # also catches infinity from a zero duration
        if not 0.0 <= twist_delta < MIN_TWIST_DELTA:
            twist_delta = 1.0
        self.progress = min(self.progress + twist_delta, 1.0)
        return True

    def catch_up(self) -> None:
        """Skip the animations of every twist in the queue."""
        while self.twist_queue:
            self.displayed.twist(self.twist_queue.popleft())
        self.progress = 0.0
        assert self.displayed == self.latest, "displayed state diverged from latest state"

    def has_undo(self) -> bool:
        return bool(self.undo_buffer)

    def has_redo(self) -> bool:
        return bool(self.redo_buffer)

    def undo(self) -> None:
        if not self.undo_buffer:
            raise EmptyHistoryError("Nothing to undo")
        twist = self.undo_buffer.pop()
        self.is_unsaved = True
        self.latest.twist(twist.rev())
        self.twist_queue.append(twist.rev())
        self.redo_buffer.append(twist)
        logger.debug("undo %s", twist)

    def redo(self) -> None:
        if not self.redo_buffer:
            raise EmptyHistoryError("Nothing to redo")
        twist = self.redo_buffer.pop()
        self.is_unsaved = True
        self.latest.twist(twist)
        self.twist_queue.append(twist)
        self.undo_buffer.append(twist)
        logger.debug("redo %s", twist)

    def model_transform_for_piece(self, piece: int) -> NDArray[np.float32]:
        """Return the 4x4 transform of `piece` for the animation in progress."""
        current = self.current_twist()
        if current is not None:
            twist, t = current
            if self.displayed.is_piece_affected_by_twist(twist, piece):
                return twist_model_transform(twist, t)
        return np.eye(4, dtype=np.float32)

    def twist_count(self, metric: TwistMetric) -> int:
        """Return the number of moves in the undo history under `metric`."""
        prev_twists: list[Twist | None] = [None, *self.undo_buffer[:-1]]
        return sum(
            1 for this, prev in zip(self.undo_buffer, prev_twists) if not this.can_combine(prev, metric)
        )

    def scramble_n(self, n: int, rng: np.random.Generator | None = None) -> None:
        """Reset and apply `n` random twists, recorded as the scramble."""
        if rng is None:
            rng = np.random.default_rng()
        self.reset()
        desc = self.latest.desc
        faces = desc.twist_axes
        layer_count = desc.layer_count
        for _ in range(n):
            face = faces[rng.integers(len(faces))]
            direction = int(rng.integers(len(desc.twist_directions)))
            layers = LayerMask(1 << int(rng.integers(layer_count)))
            twist = Twist(desc.puzzle_type, face, direction, layers)
            self.latest.twist(twist)
            self.twist_queue.append(twist)
            self.scramble.append(twist)
        self.catch_up()
        self.scramble_state = ScrambleState.PARTIAL
        logger.debug("scrambled %s with %d twists", self.puzzle_type, n)

    def scramble_full(self, rng: np.random.Generator | None = None) -> None:
        self.scramble_n(self.latest.desc.scramble_moves_count(), rng)
        self.scramble_state = ScrambleState.FULL

    def check_solved(self) -> bool:
        """Mark a scrambled puzzle as solved once its latest state is solved."""
        if self.scramble_state in (ScrambleState.PARTIAL, ScrambleState.FULL) and self.latest.is_solved():
            self.scramble_state = ScrambleState.SOLVED
            logger.info("%s solved in %d twists", self.puzzle_type, self.twist_count(TwistMetric.STM))
        return self.scramble_state is ScrambleState.SOLVED

    @classmethod
    def load_file(cls, path: Path) -> PuzzleController:
        raise UnimplementedError(f"cannot load {path}: log files are not supported yet")

    def save_file(self, path: Path) -> None:
        raise UnimplementedError(f"cannot save {path}: log files are not supported yet")
