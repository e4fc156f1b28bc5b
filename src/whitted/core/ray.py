"""Ray data structure plus vector and color algebra for Taichi kernels.

Every function here is a pure ``@ti.func``. Colors share the ``vec3`` type
with positions and directions: ``(r, g, b)`` floats that are conventionally
in [0, 1] once clamped, but may leave that range in intermediate arithmetic.

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu)
    >>> origin = ti.math.vec3(0.0, 0.0, 0.0)
    >>> direction = ti.math.vec3(0.0, 0.0, 1.0)
    >>> ray = Ray(origin=origin, direction=direction)
    >>> point = ray_at(ray, 5.0)  # Point 5 units along the ray
"""

import taichi as ti
import taichi.math as tm

# Type alias for 3D vectors (and RGB colors) using Taichi's math module
vec3 = tm.vec3

# Offset applied along a secondary ray's direction to step off the surface
# it starts from.
RAY_EPSILON = 4e-4

# Squared lengths below this are treated as the zero vector.
ZERO_LENGTH_SQUARED = 1e-12


@ti.dataclass
class Ray:
    """A ray with an origin point and direction vector.

    Attributes:
        origin: The starting point of the ray (vec3).
        direction: The direction of the ray (vec3). Not required to be
            normalized; callers normalize where a formula needs it.
    """

    origin: vec3
    direction: vec3


@ti.func
def ray_at(ray: Ray, t: ti.f32) -> vec3:
    """Compute the point ``origin + t * direction``."""
    return ray.origin + t * ray.direction


@ti.func
def offset_origin(point: vec3, direction: vec3) -> vec3:
    """Start point for a secondary ray leaving ``point`` along ``direction``."""
    return point + direction * RAY_EPSILON


# =============================================================================
# Vector Utility Functions
# =============================================================================


@ti.func
def normalize(v: vec3) -> vec3:
    """Normalize a vector to unit length.

    A zero-length input yields the zero vector instead of NaNs. Rays built
    from it miss every primitive, so the pixel falls back to the background.

    Args:
        v: The input vector.

    Returns:
        A unit vector in the same direction as v, or the zero vector.
    """
    result = vec3(0.0, 0.0, 0.0)
    len_sq = tm.dot(v, v)
    if len_sq > ZERO_LENGTH_SQUARED:
        result = v / ti.sqrt(len_sq)
    return result


@ti.func
def reflect(incident: vec3, normal: vec3) -> vec3:
    """Mirror ``incident`` about a unit ``normal``: ``d - 2 (d . n) n``."""
    return incident - 2.0 * tm.dot(incident, normal) * normal


@ti.func
def refract(incident: vec3, normal: vec3, eta: ti.f32):
    """Refract a unit incident direction through a surface (Snell's law).

    Uses the vector form ``t = eta*d + (eta*cos_i - cos_t)*n`` with
    ``cos_i = -dot(d, n)`` and ``cos_t = sqrt(1 - eta^2 (1 - cos_i^2))``.
    When the term under the root is negative (total internal reflection) no
    transmitted direction exists.

    Args:
        incident: The incoming direction (normalized).
        normal: The surface normal facing the incoming ray (normalized).
        eta: Ratio of refractive indices, incident over transmitted.

    Returns:
        A tuple ``(direction, cos_t, valid)``. ``valid`` is 0 on total
        internal reflection, in which case direction is the zero vector.
    """
    cos_i = tm.clamp(-tm.dot(incident, normal), -1.0, 1.0)
    k = 1.0 - eta * eta * (1.0 - cos_i * cos_i)
    direction = vec3(0.0, 0.0, 0.0)
    cos_t = 0.0
    valid = 0
    if k >= 0.0:
        cos_t = ti.sqrt(k)
        direction = eta * incident + (eta * cos_i - cos_t) * normal
        valid = 1
    return direction, cos_t, valid


@ti.func
def fresnel_transmittance(cos_i: ti.f32, cos_t: ti.f32, eta: ti.f32) -> ti.f32:
    """Fraction of light transmitted through a dielectric interface.

    Averages the perpendicular (Rs) and parallel (Rp) polarization
    reflectances and returns ``1 - (Rs + Rp) / 2``. Both are written in terms
    of ``eta = n1 / n2`` so only the ratio is needed.

    Args:
        cos_i: Cosine of the incident angle.
        cos_t: Cosine of the transmitted angle.
        eta: Ratio of refractive indices, incident over transmitted.

    Returns:
        Transmittance in [0, 1]. Degenerate grazing configurations return 0
        (everything reflects).
    """
    ci = ti.max(cos_i, 0.0)
    denom_s = eta * ci + cos_t
    denom_p = ci + eta * cos_t
    transmittance = 0.0
    if denom_s > 1e-8 and denom_p > 1e-8:
        rs = (eta * ci - cos_t) / denom_s
        rp = (ci - eta * cos_t) / denom_p
        transmittance = 1.0 - 0.5 * (rs * rs + rp * rp)
    return tm.clamp(transmittance, 0.0, 1.0)


@ti.func
def build_onb_from_normal(normal: vec3):
    """Build an orthonormal basis from a normal vector.

    Args:
        normal: The surface normal (should be normalized).

    Returns:
        A tuple (tangent, bitangent, normal) forming an orthonormal basis.
    """
    # Choose a vector not parallel to normal
    a = vec3(1.0, 0.0, 0.0)
    if ti.abs(normal.x) > 0.9:
        a = vec3(0.0, 1.0, 0.0)
    tangent = normalize(tm.cross(a, normal))
    bitangent = tm.cross(normal, tangent)
    return tangent, bitangent, normal


# =============================================================================
# Color Utility Functions
# =============================================================================


@ti.func
def add_clamped(a: vec3, b: vec3) -> vec3:
    """Add two colors, clamping each channel of the sum to [0, 1]."""
    return tm.clamp(a + b, 0.0, 1.0)


@ti.func
def lerp_color(a: vec3, b: vec3, alpha: ti.f32) -> vec3:
    """Linear interpolation: ``a`` at alpha 0, ``b`` at alpha 1."""
    return (1.0 - alpha) * a + alpha * b


@ti.func
def sanitize_color(c: vec3) -> vec3:
    """Replace NaN/Inf channels with 0 and clamp to [0, 1]."""
    result = c
    for k in ti.static(range(3)):
        if tm.isnan(result[k]) or tm.isinf(result[k]):
            result[k] = 0.0
    return tm.clamp(result, 0.0, 1.0)
