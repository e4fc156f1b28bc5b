"""Surface material model shared by every primitive.

A single material type covers all surfaces. Each material carries:

- ``color``: base surface color (RGB in [0, 1])
- ``mirror``: weight in [0, 1] blending the base color with the reflected
  color before shading
- ``metalness``: stored for completeness; it does not affect shading
- ``specularness`` / ``diffuseness``: non-negative weights of the Phong
  specular and diffuse terms
- ``shininess``: Phong exponent (> 0)
- ``refractive`` / ``refraction_ratio``: a refractive surface transmits and
  reflects according to Fresnel; the ratio is incident over transmitted
  index, not an absolute index of refraction

Materials are validated on the host as ``MaterialInfo`` dataclasses, then
uploaded into a ``MaterialTable`` whose Taichi fields are read by kernels.

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu)
    >>> from whitted.materials.material import MaterialInfo, MaterialTable
    >>> table = MaterialTable([MaterialInfo(color=(1.0, 0.0, 0.0))])
    >>> # Within a Taichi function: mat = table.get(material_id)
"""

from dataclasses import asdict, dataclass
from typing import Any

import numpy as np
import taichi as ti
import taichi.math as tm

# Type alias for 3D vectors
vec3 = tm.vec3

# Maximum number of materials a scene can hold
MAX_MATERIALS = 256


@ti.dataclass
class Material:
    """Kernel-side view of one material (see module docstring for fields)."""

    color: vec3
    mirror: ti.f32
    metalness: ti.f32
    specularness: ti.f32
    diffuseness: ti.f32
    shininess: ti.f32
    refractive: ti.i32
    refraction_ratio: ti.f32


@dataclass
class MaterialInfo:
    """Host-side material description.

    Defaults give a plain white diffuse surface with a weak highlight.
    """

    color: tuple[float, float, float] = (1.0, 1.0, 1.0)
    mirror: float = 0.0
    metalness: float = 0.2
    specularness: float = 0.4
    diffuseness: float = 1.0
    shininess: float = 4.0
    refractive: bool = False
    refraction_ratio: float = 1.0

    def validate(self) -> None:
        """Check parameter ranges.

        Raises:
            ValueError: If any parameter is outside its valid range.
        """
        if len(self.color) != 3:
            raise ValueError(f"color must have 3 components, got {self.color}")
        for c in self.color:
            if not 0.0 <= c <= 1.0:
                raise ValueError(f"color components must be in [0, 1], got {self.color}")
        if not 0.0 <= self.mirror <= 1.0:
            raise ValueError(f"mirror must be in [0, 1], got {self.mirror}")
        if not 0.0 <= self.metalness <= 1.0:
            raise ValueError(f"metalness must be in [0, 1], got {self.metalness}")
        if self.specularness < 0.0:
            raise ValueError(f"specularness must be non-negative, got {self.specularness}")
        if self.diffuseness < 0.0:
            raise ValueError(f"diffuseness must be non-negative, got {self.diffuseness}")
        if self.shininess <= 0.0:
            raise ValueError(f"shininess must be positive, got {self.shininess}")
        if self.refraction_ratio <= 0.0:
            raise ValueError(
                f"refraction_ratio must be positive, got {self.refraction_ratio}"
            )

    def to_dict(self) -> dict[str, Any]:
        data = asdict(self)
        data["color"] = list(self.color)
        return data

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "MaterialInfo":
        color_list = data.get("color", [1.0, 1.0, 1.0])
        return cls(
            color=(color_list[0], color_list[1], color_list[2]),
            mirror=data.get("mirror", 0.0),
            metalness=data.get("metalness", 0.2),
            specularness=data.get("specularness", 0.4),
            diffuseness=data.get("diffuseness", 1.0),
            shininess=data.get("shininess", 4.0),
            refractive=bool(data.get("refractive", False)),
            refraction_ratio=data.get("refraction_ratio", 1.0),
        )


@ti.data_oriented
class MaterialTable:
    """Materials stored in structure-of-arrays Taichi fields.

    Args:
        materials: Materials in id order; ``materials[i]`` has id ``i``.

    Raises:
        RuntimeError: If more than ``MAX_MATERIALS`` materials are given.
        ValueError: If any material fails validation.
    """

    def __init__(self, materials: list[MaterialInfo]) -> None:
        if len(materials) > MAX_MATERIALS:
            raise RuntimeError(f"Maximum number of materials ({MAX_MATERIALS}) exceeded")
        for info in materials:
            info.validate()

        self.count = len(materials)
        self.colors = ti.Vector.field(3, dtype=ti.f32, shape=MAX_MATERIALS)
        self.mirrors = ti.field(dtype=ti.f32, shape=MAX_MATERIALS)
        self.metalness = ti.field(dtype=ti.f32, shape=MAX_MATERIALS)
        self.specularness = ti.field(dtype=ti.f32, shape=MAX_MATERIALS)
        self.diffuseness = ti.field(dtype=ti.f32, shape=MAX_MATERIALS)
        self.shininess = ti.field(dtype=ti.f32, shape=MAX_MATERIALS)
        self.refractive = ti.field(dtype=ti.i32, shape=MAX_MATERIALS)
        self.refraction_ratios = ti.field(dtype=ti.f32, shape=MAX_MATERIALS)

        # Unused slots keep the default material so stray ids stay finite
        padded = list(materials) + [MaterialInfo()] * (MAX_MATERIALS - len(materials))
        self.colors.from_numpy(np.array([m.color for m in padded], dtype=np.float32))
        self.mirrors.from_numpy(np.array([m.mirror for m in padded], dtype=np.float32))
        self.metalness.from_numpy(np.array([m.metalness for m in padded], dtype=np.float32))
        self.specularness.from_numpy(
            np.array([m.specularness for m in padded], dtype=np.float32)
        )
        self.diffuseness.from_numpy(
            np.array([m.diffuseness for m in padded], dtype=np.float32)
        )
        self.shininess.from_numpy(np.array([m.shininess for m in padded], dtype=np.float32))
        self.refractive.from_numpy(
            np.array([1 if m.refractive else 0 for m in padded], dtype=np.int32)
        )
        self.refraction_ratios.from_numpy(
            np.array([m.refraction_ratio for m in padded], dtype=np.float32)
        )

    @ti.func
    def get(self, material_id: ti.i32) -> Material:
        """Gather material ``material_id`` into a Material struct."""
        return Material(
            color=self.colors[material_id],
            mirror=self.mirrors[material_id],
            metalness=self.metalness[material_id],
            specularness=self.specularness[material_id],
            diffuseness=self.diffuseness[material_id],
            shininess=self.shininess[material_id],
            refractive=self.refractive[material_id],
            refraction_ratio=self.refraction_ratios[material_id],
        )

    @ti.func
    def is_refractive(self, material_id: ti.i32) -> ti.i32:
        return self.refractive[material_id]

    def __len__(self) -> int:
        return self.count
