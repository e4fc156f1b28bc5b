"""Torus approximated as a ring of small spheres.

The torus lies in the plane z = center.z. It is modelled as
``RING_SEGMENTS`` spheres of radius ``(outer - inner) / 2``, one per degree,
centred on the circle of radius ``(outer + inner) / 2``. A bounding sphere of
radius ``outer`` is tested first so that rays which cannot touch the ring skip
the per-segment loop.

The normal at a hit is the outward normal of the ring sphere that was hit.
"""

import math

import taichi as ti
import taichi.math as tm

from whitted.geometry.sphere import HitRecord, Sphere, hit_sphere, miss_record

# Type alias for 3D vectors
vec3 = tm.vec3

# Number of spheres used to approximate the ring (one per degree)
RING_SEGMENTS = 360


@ti.dataclass
class Torus:
    """A torus around ``center`` lying in the plane z = center.z.

    Attributes:
        center: Center of the ring.
        inner_radius: Distance from the center to the inner edge of the tube.
        outer_radius: Distance from the center to the outer edge of the tube.
    """

    center: vec3
    inner_radius: ti.f32
    outer_radius: ti.f32


@ti.func
def ring_sphere(torus: Torus, segment: ti.i32) -> Sphere:
    """The ``segment``-th sphere of the ring approximation."""
    angle = ti.cast(segment, ti.f32) / 180.0 * math.pi
    middle = 0.5 * (torus.inner_radius + torus.outer_radius)
    offset = vec3(ti.cos(angle) * middle, ti.sin(angle) * middle, 0.0)
    return Sphere(
        center=torus.center + offset,
        radius=0.5 * (torus.outer_radius - torus.inner_radius),
    )


@ti.func
def hit_torus(origin: vec3, direction: vec3, torus: Torus) -> HitRecord:
    """Nearest hit against the ring of spheres, gated by a bounding sphere."""
    result = miss_record()
    bound = hit_sphere(origin, direction, Sphere(center=torus.center, radius=torus.outer_radius))
    if bound.hit == 1:
        for segment in range(RING_SEGMENTS):
            rec = hit_sphere(origin, direction, ring_sphere(torus, segment))
            if rec.hit == 1 and (result.hit == 0 or rec.t < result.t):
                result = rec
    return result


@ti.func
def inside_torus(point: vec3, torus: Torus) -> ti.i32:
    """1 if ``point`` is within the tube radius of the torus' centre circle."""
    offset = point - torus.center
    middle = 0.5 * (torus.inner_radius + torus.outer_radius)
    tube = 0.5 * (torus.outer_radius - torus.inner_radius)
    radial = ti.sqrt(offset.x * offset.x + offset.y * offset.y) - middle
    result = 0
    if radial * radial + offset.z * offset.z < tube * tube:
        result = 1
    return result
