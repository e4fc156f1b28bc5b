"""Sphere primitive with closed-form ray-sphere intersection.

Substituting the parametric ray ``origin + t * direction`` into the sphere
equation ``|p - center|^2 = r^2`` gives the quadratic

    a*t^2 + b*t + c = 0

with ``a = |direction|^2``, ``b = 2 * direction . (origin - center)`` and
``c = |origin - center|^2 - r^2``. Only roots with ``t >= 0`` are kept. A
discriminant within ``DISCRIMINANT_EPSILON`` of zero counts as a tangent
(single-root) hit, which keeps floating-point noise from turning grazing hits
into misses.

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu)
    >>> from whitted.geometry.sphere import Sphere, hit_sphere
    >>> sphere = Sphere(center=ti.math.vec3(0, 0, 5), radius=1.0)
    >>> # Use hit_sphere within a Taichi kernel
"""

import taichi as ti
import taichi.math as tm

from whitted.core.ray import normalize

# Type alias for 3D vectors using Taichi's math module
vec3 = tm.vec3

# Discriminants closer than this to zero are treated as exactly zero
# (squared-distance units).
DISCRIMINANT_EPSILON = 4e-4

# Directions shorter than this (squared) cannot produce a hit.
MIN_DIRECTION_LENGTH_SQUARED = 1e-12


@ti.dataclass
class Sphere:
    """A sphere defined by center point and radius.

    Attributes:
        center: The center point of the sphere (vec3).
        radius: The radius of the sphere (positive float).
    """

    center: vec3
    radius: ti.f32


@ti.dataclass
class HitRecord:
    """Result of intersecting a ray with a single primitive.

    Attributes:
        hit: 1 if the ray hit the primitive, 0 otherwise.
        t: Parametric distance along the ray. Only valid if hit == 1.
        normal: Unit surface normal at the hit point. Spheres report the
            outward normal; the cavity wall of an indented sphere reports
            the inverted (inward-facing) normal. Only valid if hit == 1.
    """

    hit: ti.i32
    t: ti.f32
    normal: vec3


@ti.func
def miss_record() -> HitRecord:
    """Create a HitRecord indicating no intersection."""
    return HitRecord(hit=0, t=0.0, normal=vec3(0.0, 0.0, 0.0))


@ti.func
def sphere_roots(origin: vec3, direction: vec3, sphere: Sphere):
    """Non-negative roots of the ray-sphere quadratic.

    Args:
        origin: The starting point of the ray.
        direction: The ray direction (need not be normalized).
        sphere: The sphere to test.

    Returns:
        A tuple ``(count, near, far)``. ``count`` is the number of roots with
        ``t >= 0`` (0, 1 or 2). With a single root, ``near == far``. A tangent
        hit only counts when its root is strictly positive.
    """
    oc = origin - sphere.center
    a = tm.dot(direction, direction)
    b = 2.0 * tm.dot(direction, oc)
    c = tm.dot(oc, oc) - sphere.radius * sphere.radius
    discriminant = b * b - 4.0 * a * c

    count = 0
    near = 0.0
    far = 0.0

    if a > MIN_DIRECTION_LENGTH_SQUARED and discriminant >= 0.0:
        if discriminant < DISCRIMINANT_EPSILON:
            # Tangent ray: a single touching root
            t = -b / (2.0 * a)
            if t > 0.0:
                count = 1
                near = t
                far = t
        else:
            sqrt_d = ti.sqrt(discriminant)
            t0 = (-b - sqrt_d) / (2.0 * a)
            t1 = (-b + sqrt_d) / (2.0 * a)
            if t0 >= 0.0:
                count = 2
                near = t0
                far = t1
            elif t1 >= 0.0:
                # Origin is inside the sphere, only the exit root remains
                count = 1
                near = t1
                far = t1

    return count, near, far


@ti.func
def hit_sphere(origin: vec3, direction: vec3, sphere: Sphere) -> HitRecord:
    """Test for ray-sphere intersection.

    Of two non-negative roots the smaller one (the nearer surface) is
    returned.

    Args:
        origin: The starting point of the ray.
        direction: The direction of the ray (need not be normalized; ``t`` is
            measured in units of this vector's length).
        sphere: The sphere to test intersection against.

    Returns:
        A HitRecord with the outward unit normal at the hit point.
    """
    result = miss_record()
    count, near, _ = sphere_roots(origin, direction, sphere)
    if count > 0:
        point = origin + near * direction
        result = HitRecord(hit=1, t=near, normal=normalize(point - sphere.center))
    return result


@ti.func
def inside_sphere(point: vec3, sphere: Sphere) -> ti.i32:
    """1 if ``point`` lies strictly inside the sphere, 0 otherwise."""
    offset = point - sphere.center
    result = 0
    if tm.dot(offset, offset) < sphere.radius * sphere.radius:
        result = 1
    return result
