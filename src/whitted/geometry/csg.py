"""Indented sphere: a "real" sphere with an "anti" sphere subtracted.

The visible surface is the real sphere's boundary wherever that boundary is
outside the anti sphere. Inside the anti sphere the real surface has been
carved away, and the ray instead sees the far wall of the anti sphere (the
cavity wall), provided that wall point is still inside the real sphere. The
cavity wall faces inward, so its normal is the anti sphere's normal negated.

This handles exactly two spheres (real minus anti). It is not a general CSG
evaluator.

Example:
    >>> # Within a Taichi kernel:
    >>> # rec = hit_indent_sphere(origin, direction, real, anti)
    >>> # rec.normal points into the cavity when the cavity wall was hit
"""

import taichi as ti
import taichi.math as tm

from whitted.core.ray import normalize
from whitted.geometry.sphere import (
    HitRecord,
    Sphere,
    hit_sphere,
    inside_sphere,
    miss_record,
    sphere_roots,
)

# Type alias for 3D vectors
vec3 = tm.vec3


@ti.func
def hit_indent_sphere(
    origin: vec3,
    direction: vec3,
    real: Sphere,
    anti: Sphere,
) -> HitRecord:
    """Intersect a ray with ``real - anti``.

    1. Intersect the real sphere. If that hit point is outside the anti
       sphere it is the answer, with the real sphere's outward normal.
    2. Otherwise the hit was carved away. Take the far (larger-root) crossing
       of the anti sphere. If that point is inside the real sphere it is the
       cavity wall, reported with the inverted anti-sphere normal.
    3. Otherwise the ray leaves through the cavity and misses this object.

    A ray starting inside the anti sphere (a reflection off the cavity wall)
    first meets the far cavity wall, so that crossing is checked before the
    steps above.

    Args:
        origin: The starting point of the ray.
        direction: The ray direction (need not be normalized).
        real: The sphere material is kept from.
        anti: The sphere whose volume is removed.

    Returns:
        A HitRecord for the visible surface, or a miss.
    """
    result = miss_record()
    from_cavity = 0
    if inside_sphere(origin, anti) == 1:
        count, _, far = sphere_roots(origin, direction, anti)
        if count > 0:
            wall = origin + far * direction
            if inside_sphere(wall, real) == 1:
                result = HitRecord(hit=1, t=far, normal=-normalize(wall - anti.center))
                from_cavity = 1
    rec = hit_sphere(origin, direction, real)
    if from_cavity == 0 and rec.hit == 1:
        point = origin + rec.t * direction
        if inside_sphere(point, anti) == 0:
            result = rec
        else:
            count, _, far = sphere_roots(origin, direction, anti)
            if count > 0:
                wall = origin + far * direction
                if inside_sphere(wall, real) == 1:
                    result = HitRecord(hit=1, t=far, normal=-normalize(wall - anti.center))
    return result


@ti.func
def inside_indent_sphere(point: vec3, real: Sphere, anti: Sphere) -> ti.i32:
    """1 if ``point`` is inside the real sphere but not inside the anti sphere."""
    result = 0
    if inside_sphere(point, real) == 1 and inside_sphere(point, anti) == 0:
        result = 1
    return result
