"""Camera module.

Components:
    pinhole: Fixed-orientation pinhole camera
"""

from .pinhole import PinholeCamera, camera_ray_direction, primary_ray_direction

__all__ = ["PinholeCamera", "camera_ray_direction", "primary_ray_direction"]
