"""Pinhole camera with a fixed position and forward direction.

Primary rays all start at the camera position. Their direction is the
forward vector plus an offset proportional to the pixel's distance from the
image center, measured in units of the image height:

    direction = forward + ((width // 2 - x) / height * fov_scale,
                           (height // 2 - y) / height * fov_scale,
                           0)

There is no camera-to-world matrix; the offset is always applied in the x/y
plane, so the camera is meant to look roughly along +z. The image center is
computed with integer division so odd widths place it on a pixel boundary to
the left of the true center. Directions are not normalized here.

Example:
    >>> from whitted.camera.pinhole import PinholeCamera, camera_ray_direction
    >>> camera = PinholeCamera(position=(0.0, 0.0, 0.0), forward=(0.0, 0.0, 1.0))
    >>> camera_ray_direction(camera, 50, 50, 100, 100)
    (0.0, 0.0, 1.0)
"""

import math
from dataclasses import dataclass

import taichi as ti
import taichi.math as tm

# Type alias for 3D vectors
vec3 = tm.vec3

DEFAULT_FOV_SCALE = 1.5


@dataclass
class PinholeCamera:
    """Configuration for a pinhole camera.

    Attributes:
        position: Origin of every primary ray (x, y, z).
        forward: Direction through the image center. Need not be unit length.
        fov_scale: Image-plane offset per image height; larger is wider.
    """

    position: tuple[float, float, float] = (0.0, 0.0, 0.0)
    forward: tuple[float, float, float] = (0.0, 0.0, 1.0)
    fov_scale: float = DEFAULT_FOV_SCALE

    def validate(self) -> None:
        """Check the camera configuration.

        Raises:
            ValueError: If the forward vector has zero length or the field of
                view scale is not positive.
        """
        norm = math.sqrt(sum(c * c for c in self.forward))
        if norm == 0.0:
            raise ValueError(f"Camera forward vector must be non-zero, got {self.forward}")
        if self.fov_scale <= 0.0:
            raise ValueError(f"fov_scale must be positive, got {self.fov_scale}")


@ti.func
def primary_ray_direction(
    forward: vec3,
    fov_scale: ti.f32,
    px: ti.f32,
    py: ti.f32,
    width: ti.i32,
    height: ti.i32,
) -> vec3:
    """Direction of the primary ray through image position ``(px, py)``.

    ``px``/``py`` are pixel coordinates and may be fractional for
    supersampling; integer values give the pixel's nominal ray.
    """
    h = ti.cast(height, ti.f32)
    cx = ti.cast(width // 2, ti.f32)
    cy = ti.cast(height // 2, ti.f32)
    offset = vec3((cx - px) / h * fov_scale, (cy - py) / h * fov_scale, 0.0)
    return forward + offset


def camera_ray_direction(
    camera: PinholeCamera, x: float, y: float, width: int, height: int
) -> tuple[float, float, float]:
    """Host-side counterpart of ``primary_ray_direction``."""
    fx, fy, fz = camera.forward
    return (
        fx + (width // 2 - x) / height * camera.fov_scale,
        fy + (height // 2 - y) / height * camera.fov_scale,
        float(fz),
    )
