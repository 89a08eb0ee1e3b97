"""View rotation and perspective projection from 4D down to the screen.

Points go through three steps:

1. `StickerGeometryParams.project_4d` divides by a W-dependent factor
   (4D perspective) and drops the W coordinate.
2. ``view_transform`` rotates and scales the 3D point.
3. `StickerGeometryParams.project_3d` divides by a Z-dependent factor
   (3D perspective), keeping Z for depth sorting.

Either perspective step returns None when its divisor is degenerate, which
means the point is at or behind the camera.
"""

from __future__ import annotations

from dataclasses import dataclass
import math
from typing import TYPE_CHECKING

import numpy as np
from numpy.typing import NDArray

from hypercube.config import GfxPreferences

if TYPE_CHECKING:
    from hypercube.topology import PuzzleType
    from hypercube.twists import Twist

# divisors smaller than this are clipped
NEAR_CLIPPING_DIVISOR: float = 0.01


class Quaternion:
    """Quaternion Rotation.

    Class to aid in representing 3D rotations via quaternions.  Components
    are stored as ``(w, x, y, z)`` in the last dimension of ``self.x``.
    """

    @classmethod
    def from_v_theta(
        cls,
        v: NDArray[np.float32] | tuple[float, float, float],
        theta: NDArray[np.float32] | float,
    ) -> Quaternion:
        """Construct quaternions from rotation axes v and rotation angles theta.

        Parameters
        ----------
        v : array_like
            array of vectors, last dimension 3. Vectors will be normalized.
        theta : array_like
            array of rotation angles in radians, shape = v.shape[:-1].

        Returns
        -------
        q : Quaternion
            quaternion representing the rotations
        """
        theta_array = np.asarray(theta, dtype=np.float32)
        v_array = np.asarray(v, dtype=np.float32)
        s = np.sin(0.5 * theta_array)
        c = np.cos(0.5 * theta_array)

        v_normalized = v_array / np.sqrt(np.sum(v_array * v_array, -1, keepdims=True))
        return cls(np.concatenate([c[..., None], v_normalized * s[..., None]], -1))

    @classmethod
    def identity(cls) -> Quaternion:
        return cls((1.0, 0.0, 0.0, 0.0))

    def __init__(self, x: NDArray[np.float32] | list[float] | tuple[float, ...]) -> None:
        self.x = np.asarray(x, dtype=np.float32)

    def __repr__(self) -> str:
        return "Quaternion:\n" + self.x.__repr__()

    def __mul__(self, other: Quaternion) -> Quaternion:
        """Hamilton product; the result rotates by `other` first, then `self`."""
        a0, a1, a2, a3 = np.moveaxis(self.x, -1, 0)
        b0, b1, b2, b3 = np.moveaxis(other.x, -1, 0)
        ret = np.stack(
            [
                a0 * b0 - a1 * b1 - a2 * b2 - a3 * b3,
                a0 * b1 + a1 * b0 + a2 * b3 - a3 * b2,
                a0 * b2 - a1 * b3 + a2 * b0 + a3 * b1,
                a0 * b3 + a1 * b2 - a2 * b1 + a3 * b0,
            ],
            axis=-1,
        )
        return self.__class__(ret)

    def as_rotation_matrix(self) -> NDArray[np.float32]:
        """Return the rotation matrix of the (normalized) quaternion.

        Works directly on the components, so a zero rotation gives the
        identity instead of an undefined axis.
        """
        q = self.x / np.sqrt(np.sum(self.x * self.x, -1, keepdims=True))
        w, x, y, z = np.moveaxis(q, -1, 0)
        mat = np.stack(
            [
                np.stack([1 - 2 * (y * y + z * z), 2 * (x * y - w * z), 2 * (x * z + w * y)], -1),
                np.stack([2 * (x * y + w * z), 1 - 2 * (x * x + z * z), 2 * (y * z - w * x)], -1),
                np.stack([2 * (x * z - w * y), 2 * (y * z + w * x), 1 - 2 * (x * x + y * y)], -1),
            ],
            -2,
        )
        return mat.astype(np.float32)

    def rotate(self, points: NDArray[np.float32]) -> NDArray[np.float32]:
        """Rotate points (last dimension 3) by the quaternion."""
        return np.dot(points, self.as_rotation_matrix().T)


def view_rotation(theta: float, phi: float) -> Quaternion:
    """Tilt by `theta` degrees about X after turning `phi` degrees about Y."""
    rot_x = Quaternion.from_v_theta((1.0, 0.0, 0.0), math.radians(theta))
    rot_y = Quaternion.from_v_theta((0.0, 1.0, 0.0), math.radians(phi))
    return rot_x * rot_y


@dataclass(frozen=True, eq=False)
class StickerGeometryParams:
    """Everything needed to place stickers on screen for one frame."""

    sticker_grid_scale: float
    sticker_scale: float
    face_scale: float
    fov_3d: float
    fov_4d: float
    w_factor_3d: float
    w_factor_4d: float
    view_transform: NDArray[np.float32]
    # twist being animated and its eased progress
    twist_animation: tuple[Twist, float] | None = None

    @classmethod
    def new(
        cls,
        gfx: GfxPreferences,
        puzzle_type: PuzzleType,
        twist_animation: tuple[Twist, float] | None = None,
        view: Quaternion | None = None,
    ) -> StickerGeometryParams:
        if view is None:
            view = view_rotation(gfx.theta, gfx.phi)
        face_scale = 1.0 - gfx.face_spacing
        sticker_grid_scale = face_scale / puzzle_type.layer_count
        sticker_scale = (1.0 - gfx.sticker_spacing) * sticker_grid_scale
        return cls(
            sticker_grid_scale=sticker_grid_scale,
            sticker_scale=sticker_scale,
            face_scale=face_scale,
            fov_3d=gfx.fov_3d,
            fov_4d=gfx.fov_4d,
            w_factor_3d=math.tan(math.radians(gfx.fov_3d) / 2.0),
            w_factor_4d=math.tan(math.radians(gfx.fov_4d) / 2.0),
            view_transform=(gfx.scale * view.as_rotation_matrix()).astype(np.float32),
            twist_animation=twist_animation,
        )

    def project_4d(self, point: NDArray[np.float32]) -> NDArray[np.float32] | None:
        """Apply 4D perspective and drop W."""
        divisor = 1.0 + (np.sign(self.fov_4d) - point[3]) * self.w_factor_4d
        if not np.isfinite(divisor) or divisor < NEAR_CLIPPING_DIVISOR:
            return None
        return (point[:3] / divisor).astype(np.float32)

    def project_3d(self, point: NDArray[np.float32]) -> NDArray[np.float32] | None:
        """Apply 3D perspective, keeping Z for depth sorting."""
        divisor = 1.0 + (np.sign(self.fov_3d) - point[2]) * self.w_factor_3d
        if not np.isfinite(divisor) or divisor < NEAR_CLIPPING_DIVISOR:
            return None
        return np.array([point[0] / divisor, point[1] / divisor, point[2]], dtype=np.float32)

    def transform_point(self, point: NDArray[np.float32]) -> NDArray[np.float32] | None:
        """Take a 3D point (already out of 4D) through the view to the screen."""
        return self.project_3d(np.dot(self.view_transform, point))
