"""Infinite plane primitive.

A plane is stored as a point on the plane and a unit normal. The ray hits it
where ``dot(normal, origin + t * direction) == dot(normal, point)``, i.e.

    t = (dot(normal, point) - dot(normal, origin)) / dot(normal, direction)

Only ``t > 0`` counts as a hit, so planes behind the ray origin are ignored.
Checkerboards reuse this primitive and only differ in material selection.
"""

import taichi as ti
import taichi.math as tm

from whitted.geometry.sphere import HitRecord, miss_record

# Type alias for 3D vectors
vec3 = tm.vec3

# Rays whose direction is this close to parallel with the plane never hit it.
PARALLEL_EPSILON = 1e-8


@ti.dataclass
class Plane:
    """A plane defined by a point on it and its unit normal.

    Attributes:
        point: Any point lying on the plane.
        normal: The unit normal. Points "in front" are on the side it faces.
    """

    point: vec3
    normal: vec3


@ti.func
def hit_plane(origin: vec3, direction: vec3, plane: Plane) -> HitRecord:
    """Test for ray-plane intersection.

    Args:
        origin: The starting point of the ray.
        direction: The ray direction (need not be normalized).
        plane: The plane to test.

    Returns:
        A HitRecord carrying the plane's normal, or a miss when the ray is
        parallel to the plane or the plane lies behind the origin.
    """
    result = miss_record()
    denom = tm.dot(plane.normal, direction)
    if ti.abs(denom) > PARALLEL_EPSILON:
        plane_offset = tm.dot(plane.normal, plane.point)
        t = (plane_offset - tm.dot(plane.normal, origin)) / denom
        if t > 0.0:
            result = HitRecord(hit=1, t=t, normal=plane.normal)
    return result


@ti.func
def inside_plane(point: vec3, plane: Plane) -> ti.i32:
    """1 if ``point`` lies behind the plane (the half-space its normal faces away from)."""
    result = 0
    if tm.dot(point - plane.point, plane.normal) < 0.0:
        result = 1
    return result
