"""Scene storage and scene-level intersection queries.

A ``Scene`` holds a fixed, ordered list of objects and lights in Taichi
fields (structure-of-arrays layout) and exposes the per-object queries the
renderer needs as ``@ti.func`` methods:

- ``intersect_object``: ray test against one object, dispatched on its type
- ``nearest_hit``: smallest positive hit over all objects; on ties the object
  added first wins
- ``is_occluded``: shadow test toward one light; refractive occluders never
  cast shadows
- ``material_at``: effective material id at a point (checkerboards alternate)
- ``contains``: point-in-object test used to tell entering from exiting rays

Each has a host-callable counterpart (``find_nearest_hit``,
``is_point_occluded``, ``resolve_material``, ``point_inside``) for tests and
tooling. Scenes are built once by ``SceneManager.build`` and never modified
afterwards.

Example:
    >>> from whitted.scene.manager import SceneManager
    >>> manager = SceneManager()
    >>> mat = manager.add_material((1.0, 1.0, 1.0))
    >>> manager.add_sphere((0, 0, 5), 1.0, mat)
    >>> manager.add_light((0, 0, 0))
    >>> scene = manager.build()
    >>> scene.find_nearest_hit((0, 0, 0), (0, 0, 1)).t
    4.0
"""

from dataclasses import dataclass

import taichi as ti
import taichi.math as tm

from whitted.core.ray import normalize, offset_origin
from whitted.geometry.csg import hit_indent_sphere, inside_indent_sphere
from whitted.geometry.plane import Plane, hit_plane, inside_plane
from whitted.geometry.sphere import HitRecord, Sphere, hit_sphere, inside_sphere, miss_record
from whitted.geometry.torus import Torus, hit_torus, inside_torus
from whitted.materials.checkerboard import select_checker_material
from whitted.materials.material import MaterialInfo, MaterialTable
from whitted.scene.objects import (
    CheckerboardInfo,
    IndentSphereInfo,
    LightInfo,
    ObjectInfo,
    ObjectType,
    PlaneInfo,
    SphereInfo,
    TorusInfo,
    normalized,
)

# Type alias for 3D vectors using Taichi's math module
vec3 = tm.vec3

# Maximum number of objects and lights supported in a scene
MAX_OBJECTS = 64
MAX_LIGHTS = 16

# Object type tags as plain ints for use inside Taichi functions
_SPHERE = int(ObjectType.SPHERE)
_PLANE = int(ObjectType.PLANE)
_CHECKERBOARD = int(ObjectType.CHECKERBOARD)
_INDENT_SPHERE = int(ObjectType.INDENT_SPHERE)
_TORUS = int(ObjectType.TORUS)


@ti.dataclass
class SceneHit:
    """Nearest intersection of a ray with the scene.

    Attributes:
        hit: 1 if any object was hit, 0 otherwise.
        t: Parametric distance of the hit. Only valid if hit == 1.
        normal: Surface normal at the hit, inverted for indent cavity walls.
        object_index: Index of the object that was hit, -1 on a miss.
    """

    hit: ti.i32
    t: ti.f32
    normal: vec3
    object_index: ti.i32


@dataclass
class HitInfo:
    """Host-side copy of a SceneHit."""

    t: float
    normal: tuple[float, float, float]
    object_index: int


def _object_row(info: ObjectInfo) -> dict:
    """Flatten an object description into the Scene's field columns."""
    row = {
        "kind": int(info.kind),
        "position": (0.0, 0.0, 0.0),
        "normal": (0.0, 0.0, 1.0),
        "radius": 0.0,
        "aux_position": (0.0, 0.0, 0.0),
        "aux_radius": 0.0,
        "scale": 1.0,
        "material_id": info.material_id,
        "material_id_2": info.material_id,
    }
    if isinstance(info, SphereInfo):
        row.update(position=info.center, radius=info.radius)
    elif isinstance(info, PlaneInfo):
        row.update(position=info.point, normal=normalized(info.normal))
    elif isinstance(info, CheckerboardInfo):
        row.update(
            position=info.point,
            normal=normalized(info.normal),
            scale=info.scale,
            material_id_2=info.material_id_2,
        )
    elif isinstance(info, IndentSphereInfo):
        row.update(
            position=info.center,
            radius=info.radius,
            aux_position=info.anti_center,
            aux_radius=info.anti_radius,
        )
    elif isinstance(info, TorusInfo):
        row.update(
            position=info.center,
            radius=info.inner_radius,
            aux_radius=info.outer_radius,
        )
    else:
        raise ValueError(f"Unsupported object: {info!r}")
    return row


@ti.data_oriented
class Scene:
    """An immutable scene: objects, lights and their materials.

    Args:
        objects: Objects in evaluation order.
        lights: Point lights.
        materials: Material table; object material ids index into it.

    Raises:
        RuntimeError: If the object or light capacity is exceeded.
        ValueError: If an object is invalid or references an unknown
            material.
    """

    def __init__(
        self,
        objects: list[ObjectInfo],
        lights: list[LightInfo],
        materials: list[MaterialInfo],
    ) -> None:
        if len(objects) > MAX_OBJECTS:
            raise RuntimeError(f"Maximum number of objects ({MAX_OBJECTS}) exceeded")
        if len(lights) > MAX_LIGHTS:
            raise RuntimeError(f"Maximum number of lights ({MAX_LIGHTS}) exceeded")

        self.materials = MaterialTable(materials)
        rows = []
        for info in objects:
            info.validate()
            row = _object_row(info)
            for key in ("material_id", "material_id_2"):
                if not 0 <= row[key] < len(materials):
                    raise ValueError(f"Invalid material_id: {row[key]}")
            rows.append(row)
        for light in lights:
            light.validate()

        self.num_objects = len(rows)
        self.num_lights = len(lights)

        # Object storage: Structure of Arrays layout
        # radii holds the sphere radius or torus inner radius; aux_radii the
        # anti-sphere radius or torus outer radius.
        self.kinds = ti.field(dtype=ti.i32, shape=MAX_OBJECTS)
        self.positions = ti.Vector.field(3, dtype=ti.f32, shape=MAX_OBJECTS)
        self.normals = ti.Vector.field(3, dtype=ti.f32, shape=MAX_OBJECTS)
        self.radii = ti.field(dtype=ti.f32, shape=MAX_OBJECTS)
        self.aux_positions = ti.Vector.field(3, dtype=ti.f32, shape=MAX_OBJECTS)
        self.aux_radii = ti.field(dtype=ti.f32, shape=MAX_OBJECTS)
        self.scales = ti.field(dtype=ti.f32, shape=MAX_OBJECTS)
        self.material_ids = ti.field(dtype=ti.i32, shape=MAX_OBJECTS)
        self.material_ids_2 = ti.field(dtype=ti.i32, shape=MAX_OBJECTS)

        self.light_positions = ti.Vector.field(3, dtype=ti.f32, shape=MAX_LIGHTS)
        self.light_colors = ti.Vector.field(3, dtype=ti.f32, shape=MAX_LIGHTS)

        for i, row in enumerate(rows):
            self.kinds[i] = row["kind"]
            self.positions[i] = row["position"]
            self.normals[i] = row["normal"]
            self.radii[i] = row["radius"]
            self.aux_positions[i] = row["aux_position"]
            self.aux_radii[i] = row["aux_radius"]
            self.scales[i] = row["scale"]
            self.material_ids[i] = row["material_id"]
            self.material_ids_2[i] = row["material_id_2"]
        for i, light in enumerate(lights):
            self.light_positions[i] = light.position
            self.light_colors[i] = light.color

        # Scratch storage for host-side queries
        self._query_i = ti.field(dtype=ti.i32, shape=2)
        self._query_f = ti.field(dtype=ti.f32, shape=4)

    # =========================================================================
    # Per-object Queries
    # =========================================================================

    @ti.func
    def _sphere(self, i: ti.i32) -> Sphere:
        return Sphere(center=self.positions[i], radius=self.radii[i])

    @ti.func
    def _anti_sphere(self, i: ti.i32) -> Sphere:
        return Sphere(center=self.aux_positions[i], radius=self.aux_radii[i])

    @ti.func
    def _plane(self, i: ti.i32) -> Plane:
        return Plane(point=self.positions[i], normal=self.normals[i])

    @ti.func
    def _torus(self, i: ti.i32) -> Torus:
        return Torus(
            center=self.positions[i],
            inner_radius=self.radii[i],
            outer_radius=self.aux_radii[i],
        )

    @ti.func
    def intersect_object(self, i: ti.i32, origin: vec3, direction: vec3) -> HitRecord:
        """Intersect a ray with object ``i``, dispatching on its type."""
        rec = miss_record()
        kind = self.kinds[i]
        if kind == _SPHERE:
            rec = hit_sphere(origin, direction, self._sphere(i))
        elif kind == _PLANE or kind == _CHECKERBOARD:
            rec = hit_plane(origin, direction, self._plane(i))
        elif kind == _INDENT_SPHERE:
            rec = hit_indent_sphere(origin, direction, self._sphere(i), self._anti_sphere(i))
        elif kind == _TORUS:
            rec = hit_torus(origin, direction, self._torus(i))
        return rec

    @ti.func
    def material_at(self, i: ti.i32, point: vec3) -> ti.i32:
        """Effective material id of object ``i`` at ``point``."""
        material_id = self.material_ids[i]
        if self.kinds[i] == _CHECKERBOARD:
            material_id = select_checker_material(
                point,
                self.positions[i],
                self.normals[i],
                self.scales[i],
                self.material_ids[i],
                self.material_ids_2[i],
            )
        return material_id

    @ti.func
    def contains(self, i: ti.i32, point: vec3) -> ti.i32:
        """1 if ``point`` lies inside object ``i`` (behind it, for planes)."""
        result = 0
        kind = self.kinds[i]
        if kind == _SPHERE:
            result = inside_sphere(point, self._sphere(i))
        elif kind == _PLANE or kind == _CHECKERBOARD:
            result = inside_plane(point, self._plane(i))
        elif kind == _INDENT_SPHERE:
            result = inside_indent_sphere(point, self._sphere(i), self._anti_sphere(i))
        elif kind == _TORUS:
            result = inside_torus(point, self._torus(i))
        return result

    # =========================================================================
    # Scene-wide Queries
    # =========================================================================

    @ti.func
    def nearest_hit(self, origin: vec3, direction: vec3) -> SceneHit:
        """Closest hit over all objects in evaluation order."""
        result = SceneHit(hit=0, t=0.0, normal=vec3(0.0, 0.0, 0.0), object_index=-1)
        for i in range(self.num_objects):
            rec = self.intersect_object(i, origin, direction)
            # Strict comparison keeps the earlier object on ties
            if rec.hit == 1 and (result.hit == 0 or rec.t < result.t):
                result = SceneHit(hit=1, t=rec.t, normal=rec.normal, object_index=i)
        return result

    @ti.func
    def is_occluded(self, point: vec3, light_index: ti.i32) -> ti.i32:
        """1 if a non-refractive object lies between ``point`` and the light."""
        to_light = self.light_positions[light_index] - point
        dist_sq = tm.dot(to_light, to_light)
        direction = normalize(to_light)
        origin = offset_origin(point, direction)
        occluded = 0
        for i in range(self.num_objects):
            if occluded == 0:
                rec = self.intersect_object(i, origin, direction)
                if rec.hit == 1 and rec.t * rec.t < dist_sq:
                    blocker = self.material_at(i, origin + rec.t * direction)
                    if self.materials.is_refractive(blocker) == 0:
                        occluded = 1
        return occluded

    # =========================================================================
    # Host-side Queries
    # =========================================================================

    @ti.kernel
    def _nearest_hit_kernel(
        self, ox: ti.f32, oy: ti.f32, oz: ti.f32, dx: ti.f32, dy: ti.f32, dz: ti.f32
    ):
        # Single outer iteration keeps the per-object loops serial
        for _ in range(1):
            rec = self.nearest_hit(vec3(ox, oy, oz), vec3(dx, dy, dz))
            self._query_i[0] = rec.hit
            self._query_i[1] = rec.object_index
            self._query_f[0] = rec.t
            self._query_f[1] = rec.normal.x
            self._query_f[2] = rec.normal.y
            self._query_f[3] = rec.normal.z

    @ti.kernel
    def _occluded_kernel(self, px: ti.f32, py: ti.f32, pz: ti.f32, light_index: ti.i32):
        for _ in range(1):
            self._query_i[0] = self.is_occluded(vec3(px, py, pz), light_index)

    @ti.kernel
    def _material_kernel(self, i: ti.i32, px: ti.f32, py: ti.f32, pz: ti.f32):
        self._query_i[0] = self.material_at(i, vec3(px, py, pz))

    @ti.kernel
    def _contains_kernel(self, i: ti.i32, px: ti.f32, py: ti.f32, pz: ti.f32):
        self._query_i[0] = self.contains(i, vec3(px, py, pz))

    def find_nearest_hit(self, origin, direction) -> HitInfo | None:
        """Nearest hit of the ray ``origin + t * direction``, or None on a miss."""
        self._nearest_hit_kernel(*origin, *direction)
        if self._query_i[0] == 0:
            return None
        return HitInfo(
            t=float(self._query_f[0]),
            normal=(
                float(self._query_f[1]),
                float(self._query_f[2]),
                float(self._query_f[3]),
            ),
            object_index=int(self._query_i[1]),
        )

    def is_point_occluded(self, point, light_index: int) -> bool:
        self._check_light(light_index)
        self._occluded_kernel(*point, light_index)
        return bool(self._query_i[0])

    def resolve_material(self, object_index: int, point) -> int:
        """Material id of ``object_index`` at ``point``."""
        self._check_object(object_index)
        self._material_kernel(object_index, *point)
        return int(self._query_i[0])

    def point_inside(self, object_index: int, point) -> bool:
        self._check_object(object_index)
        self._contains_kernel(object_index, *point)
        return bool(self._query_i[0])

    def _check_object(self, object_index: int) -> None:
        if not 0 <= object_index < self.num_objects:
            raise IndexError(f"Object index out of range: {object_index}")

    def _check_light(self, light_index: int) -> None:
        if not 0 <= light_index < self.num_lights:
            raise IndexError(f"Light index out of range: {light_index}")

    def object_kinds(self) -> list[ObjectType]:
        kinds = self.kinds.to_numpy()[: self.num_objects]
        return [ObjectType(int(k)) for k in kinds]
