"""Host-side descriptions of scene objects and lights.

Each object variant is a small dataclass carrying its geometry and material
id(s). ``ObjectType`` is the tag stored per object in the Scene's Taichi
fields and switched on by the intersection dispatcher.
"""

import math
from dataclasses import dataclass
from enum import IntEnum
from typing import Any, ClassVar

Vec3Tuple = tuple[float, float, float]


class ObjectType(IntEnum):
    """Primitive variant of a scene object."""

    SPHERE = 0
    PLANE = 1
    CHECKERBOARD = 2
    INDENT_SPHERE = 3
    TORUS = 4


def _as_vec3(values: Any) -> Vec3Tuple:
    return (float(values[0]), float(values[1]), float(values[2]))


def normalized(v: Vec3Tuple) -> Vec3Tuple:
    """Unit-length copy of ``v``.

    Raises:
        ValueError: If ``v`` has zero length.
    """
    norm = math.sqrt(v[0] * v[0] + v[1] * v[1] + v[2] * v[2])
    if norm == 0.0:
        raise ValueError(f"Cannot normalize zero-length vector {v}")
    return (v[0] / norm, v[1] / norm, v[2] / norm)


@dataclass
class SphereInfo:
    """A sphere object.

    Attributes:
        center: The center of the sphere.
        radius: The radius of the sphere.
        material_id: The material assigned to the sphere.
    """

    kind: ClassVar[ObjectType] = ObjectType.SPHERE

    center: Vec3Tuple
    radius: float
    material_id: int

    def validate(self) -> None:
        if self.radius <= 0.0:
            raise ValueError(f"Sphere radius must be positive, got {self.radius}")


@dataclass
class PlaneInfo:
    """An infinite plane through ``point`` facing ``normal``."""

    kind: ClassVar[ObjectType] = ObjectType.PLANE

    point: Vec3Tuple
    normal: Vec3Tuple
    material_id: int

    def validate(self) -> None:
        normalized(self.normal)


@dataclass
class CheckerboardInfo:
    """A plane tiled with two alternating materials.

    Attributes:
        point: A point on the plane; tile corners are aligned to it.
        normal: The plane normal (normalized when the scene is built).
        scale: Tile edge length.
        material_id: Material of tiles whose index parities differ.
        material_id_2: Material of the remaining tiles.
    """

    kind: ClassVar[ObjectType] = ObjectType.CHECKERBOARD

    point: Vec3Tuple
    normal: Vec3Tuple
    scale: float
    material_id: int
    material_id_2: int

    def validate(self) -> None:
        normalized(self.normal)
        if self.scale <= 0.0:
            raise ValueError(f"Checkerboard scale must be positive, got {self.scale}")


@dataclass
class IndentSphereInfo:
    """A sphere (``real``) with a second sphere (``anti``) carved out of it."""

    kind: ClassVar[ObjectType] = ObjectType.INDENT_SPHERE

    center: Vec3Tuple
    radius: float
    anti_center: Vec3Tuple
    anti_radius: float
    material_id: int

    def validate(self) -> None:
        if self.radius <= 0.0:
            raise ValueError(f"Sphere radius must be positive, got {self.radius}")
        if self.anti_radius <= 0.0:
            raise ValueError(f"Anti-sphere radius must be positive, got {self.anti_radius}")


@dataclass
class TorusInfo:
    """A torus lying in the plane z = center.z."""

    kind: ClassVar[ObjectType] = ObjectType.TORUS

    center: Vec3Tuple
    inner_radius: float
    outer_radius: float
    material_id: int

    def validate(self) -> None:
        if self.inner_radius < 0.0:
            raise ValueError(
                f"Torus inner radius must be non-negative, got {self.inner_radius}"
            )
        if self.outer_radius <= self.inner_radius:
            raise ValueError(
                f"Torus outer radius ({self.outer_radius}) must exceed "
                f"inner radius ({self.inner_radius})"
            )


ObjectInfo = SphereInfo | PlaneInfo | CheckerboardInfo | IndentSphereInfo | TorusInfo

_OBJECT_CLASSES: dict[str, type] = {
    "sphere": SphereInfo,
    "plane": PlaneInfo,
    "checkerboard": CheckerboardInfo,
    "indent_sphere": IndentSphereInfo,
    "torus": TorusInfo,
}

_VECTOR_KEYS = ("center", "point", "normal", "anti_center")


@dataclass
class LightInfo:
    """A point light. Intensity does not fall off with distance."""

    position: Vec3Tuple
    color: Vec3Tuple = (1.0, 1.0, 1.0)

    def validate(self) -> None:
        for c in self.color:
            if c < 0.0:
                raise ValueError(f"Light color must be non-negative, got {self.color}")

    def to_dict(self) -> dict[str, Any]:
        return {"position": list(self.position), "color": list(self.color)}

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "LightInfo":
        return cls(
            position=_as_vec3(data.get("position", [0.0, 0.0, 0.0])),
            color=_as_vec3(data.get("color", [1.0, 1.0, 1.0])),
        )


def object_to_dict(info: ObjectInfo) -> dict[str, Any]:
    """Serialize an object description, tagging it with its type name."""
    data: dict[str, Any] = {"type": info.kind.name.lower()}
    for key, value in vars(info).items():
        data[key] = list(value) if key in _VECTOR_KEYS else value
    return data


def object_from_dict(data: dict[str, Any]) -> ObjectInfo:
    """Inverse of ``object_to_dict``.

    Raises:
        ValueError: If the type tag is missing or unknown, or a required
            field is absent.
    """
    obj_type = str(data.get("type", "")).lower()
    cls = _OBJECT_CLASSES.get(obj_type)
    if cls is None:
        raise ValueError(f"Unknown object type: {obj_type}")
    kwargs = {key: value for key, value in data.items() if key != "type"}
    for key in _VECTOR_KEYS:
        if key in kwargs:
            kwargs[key] = _as_vec3(kwargs[key])
    try:
        return cls(**kwargs)
    except TypeError as exc:
        raise ValueError(f"Invalid {obj_type} configuration: {exc}") from exc
