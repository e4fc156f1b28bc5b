"""Procedural two-tone checkerboard pattern.

A checkerboard is a plane whose material alternates between two stored
materials. The hit point is projected onto an orthonormal in-plane basis
``(u, v)`` built from the plane normal, each coordinate is divided by the
tile scale and rounded up with ``ceil``, and the parity of the two tile
indices picks the material.
"""

import taichi as ti
import taichi.math as tm

from whitted.core.ray import build_onb_from_normal

# Type alias for 3D vectors
vec3 = tm.vec3


@ti.func
def checker_tile(point: vec3, origin: vec3, normal: vec3, scale: ti.f32):
    """Integer tile indices ``(u, v)`` of ``point`` on the board.

    Args:
        point: A point on the plane.
        origin: The plane's reference point (tile corner).
        normal: Unit plane normal.
        scale: Tile edge length (> 0).
    """
    u_axis, v_axis, _ = build_onb_from_normal(normal)
    local = point - origin
    u = ti.cast(ti.ceil(tm.dot(local, u_axis) / scale), ti.i32)
    v = ti.cast(ti.ceil(tm.dot(local, v_axis) / scale), ti.i32)
    return u, v


@ti.func
def select_checker_material(
    point: vec3,
    origin: vec3,
    normal: vec3,
    scale: ti.f32,
    primary: ti.i32,
    secondary: ti.i32,
) -> ti.i32:
    """Material id at ``point``: ``primary`` where the tile parities differ."""
    u, v = checker_tile(point, origin, normal, scale)
    result = secondary
    if ((u - v) & 1) == 1:
        result = primary
    return result
