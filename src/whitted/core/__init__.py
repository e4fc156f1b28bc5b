"""Core rendering module.

Components:
    ray: Ray data structure plus vector and color algebra
    shading: Phong direct lighting with shadow rays
    integrator: Recursive (frame-stack) color resolution
    raster: Packed 32-bit output buffer
    progressive: Pixel-at-a-time render scheduling
"""

from .ray import (
    RAY_EPSILON,
    Ray,
    add_clamped,
    build_onb_from_normal,
    fresnel_transmittance,
    lerp_color,
    normalize,
    offset_origin,
    ray_at,
    reflect,
    refract,
    sanitize_color,
    vec3,
)
from .raster import Raster, pack_color, unpack_color

# Note: shading, integrator and progressive are NOT imported here to avoid
# circular imports with the scene package. Import them directly, e.g.
#   from whitted.core.progressive import ProgressiveRenderer

__all__ = [
    "RAY_EPSILON",
    "Ray",
    "ray_at",
    "offset_origin",
    "vec3",
    "normalize",
    "reflect",
    "refract",
    "fresnel_transmittance",
    "build_onb_from_normal",
    "add_clamped",
    "lerp_color",
    "sanitize_color",
    "Raster",
    "pack_color",
    "unpack_color",
]
