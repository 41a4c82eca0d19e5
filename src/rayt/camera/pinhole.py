"""Look-at pinhole camera.

The camera maps normalized image-plane coordinates (s, t) in [0, 1] to
world-space rays. It is built once per render from an eye position, a look-at
target, an up vector, a vertical field of view and an aspect ratio:

- w points from the look-at target back toward the eye
- u points right in the image plane
- v points up in the image plane

The image plane sits at unit distance in front of the eye. Its lower-left
corner plus ``s * horizontal + t * vertical`` is the point a ray passes
through, so ``s = 0`` is the left edge and ``t = 0`` the bottom edge.

Degenerate inputs (eye equal to target, or ``vup`` parallel to the view
direction) produce NaN basis vectors. They are not checked.

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu, default_fp=ti.f64)
    >>> from rayt.camera.pinhole import Camera, setup_camera, get_ray
    >>> camera = Camera.from_lookat(
    ...     origin=(278.0, 278.0, -800.0),
    ...     lookat=(278.0, 278.0, 0.0),
    ...     vup=(0.0, 1.0, 0.0),
    ...     vfov=40.0,
    ...     aspect=1.0,
    ... )
    >>> setup_camera(camera)
    >>> @ti.kernel
    ... def center_ray():
    ...     ray = get_ray(0.5, 0.5)
"""

import logging
import math
from dataclasses import dataclass

import numpy as np
import taichi as ti

from rayt.core.device import device_lock
from rayt.core.ray import Ray, make_ray
from rayt.core.vector import real

logger = logging.getLogger(__name__)

Vec3Tuple = tuple[float, float, float]


def _as_tuple(array: np.ndarray) -> Vec3Tuple:
    return (float(array[0]), float(array[1]), float(array[2]))


# =============================================================================
# Camera Data Structure
# =============================================================================


@dataclass(frozen=True)
class Camera:
    """Pinhole camera state sufficient to generate rays.

    Attributes:
        origin: Eye position in world space.
        lower_left_corner: World-space position of the image plane's
            lower-left corner.
        horizontal: Vector spanning the full image plane width.
        vertical: Vector spanning the full image plane height.
    """

    origin: Vec3Tuple
    lower_left_corner: Vec3Tuple
    horizontal: Vec3Tuple
    vertical: Vec3Tuple

    @classmethod
    def from_lookat(
        cls,
        origin: Vec3Tuple,
        lookat: Vec3Tuple,
        vup: Vec3Tuple,
        vfov: float,
        aspect: float,
    ) -> "Camera":
        """Build a camera from look-at parameters.

        Args:
            origin: Eye position.
            lookat: Point the camera looks at.
            vup: Approximate up direction, typically (0, 1, 0).
            vfov: Vertical field of view in degrees.
            aspect: Image width divided by image height.

        Returns:
            The camera.
        """
        half_height = math.tan(math.radians(vfov) / 2.0)
        half_width = aspect * half_height

        eye = np.asarray(origin, dtype=np.float64)
        target = np.asarray(lookat, dtype=np.float64)
        up = np.asarray(vup, dtype=np.float64)

        w = eye - target
        w = w / np.linalg.norm(w)
        u = np.cross(up, w)
        u = u / np.linalg.norm(u)
        v = np.cross(w, u)

        horizontal = 2.0 * half_width * u
        vertical = 2.0 * half_height * v
        lower_left = eye - half_width * u - half_height * v - w

        return cls(
            origin=_as_tuple(eye),
            lower_left_corner=_as_tuple(lower_left),
            horizontal=_as_tuple(horizontal),
            vertical=_as_tuple(vertical),
        )

    def ray(self, s: float, t: float) -> tuple[Vec3Tuple, Vec3Tuple]:
        """Compute the (origin, direction) of the ray through (s, t) in Python.

        The direction is not normalized.
        """
        origin = np.asarray(self.origin)
        target = (
            np.asarray(self.lower_left_corner)
            + s * np.asarray(self.horizontal)
            + t * np.asarray(self.vertical)
        )
        return self.origin, _as_tuple(target - origin)


# =============================================================================
# Taichi Fields for Camera State
# =============================================================================

_camera_origin = ti.Vector.field(3, dtype=real, shape=())
_lower_left_corner = ti.Vector.field(3, dtype=real, shape=())
_viewport_horizontal = ti.Vector.field(3, dtype=real, shape=())
_viewport_vertical = ti.Vector.field(3, dtype=real, shape=())

# Camera last uploaded with setup_camera()
_active_camera: Camera | None = None


def setup_camera(camera: Camera) -> None:
    """Upload camera state to the Taichi fields read by get_ray().

    Args:
        camera: The camera to activate.
    """
    global _active_camera
    with device_lock:
        _camera_origin[None] = list(camera.origin)
        _lower_left_corner[None] = list(camera.lower_left_corner)
        _viewport_horizontal[None] = list(camera.horizontal)
        _viewport_vertical[None] = list(camera.vertical)
        _active_camera = camera
    logger.debug("Camera set up at origin %s", camera.origin)


def get_active_camera() -> Camera | None:
    """Return the camera most recently passed to setup_camera(), if any."""
    return _active_camera


# =============================================================================
# Ray Generation
# =============================================================================


@ti.func
def get_ray(s: real, t: real) -> Ray:
    """Generate the ray through normalized image coordinates (s, t).

    Args:
        s: Horizontal coordinate, 0 = left edge, 1 = right edge.
        t: Vertical coordinate, 0 = bottom edge, 1 = top edge.

    Returns:
        A ray from the camera origin through the image-plane point. The
        direction is not normalized.
    """
    origin = _camera_origin[None]
    target = _lower_left_corner[None] + s * _viewport_horizontal[None] + t * _viewport_vertical[None]
    return make_ray(origin, target - origin)


def get_camera_info() -> dict[str, Vec3Tuple]:
    """Read the uploaded camera state back for debugging.

    Returns:
        Dictionary with origin, lower_left, horizontal and vertical.
    """
    with device_lock:
        return {
            "origin": _as_tuple(_camera_origin[None]),
            "lower_left": _as_tuple(_lower_left_corner[None]),
            "horizontal": _as_tuple(_viewport_horizontal[None]),
            "vertical": _as_tuple(_viewport_vertical[None]),
        }
