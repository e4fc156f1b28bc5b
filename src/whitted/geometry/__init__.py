"""Geometry module for shape primitives.

Components:
    sphere: Sphere primitive with ray-sphere intersection
    plane: Infinite plane primitive
    csg: Sphere with a spherical cavity (real minus anti sphere)
    torus: Torus approximated by a ring of spheres

All intersection routines are Taichi functions (@ti.func) returning a
HitRecord:
    rec = hit_shape(ray_origin, ray_direction, shape)
"""

from .csg import hit_indent_sphere, inside_indent_sphere
from .plane import Plane, hit_plane, inside_plane
from .sphere import HitRecord, Sphere, hit_sphere, inside_sphere, sphere_roots
from .torus import RING_SEGMENTS, Torus, hit_torus, inside_torus

__all__ = [
    "HitRecord",
    "Sphere",
    "hit_sphere",
    "inside_sphere",
    "sphere_roots",
    "Plane",
    "hit_plane",
    "inside_plane",
    "hit_indent_sphere",
    "inside_indent_sphere",
    "RING_SEGMENTS",
    "Torus",
    "hit_torus",
    "inside_torus",
]
