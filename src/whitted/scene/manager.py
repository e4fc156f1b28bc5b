"""Scene manager for assembling objects, materials and lights.

The SceneManager is the mutable, host-side builder for a scene. Materials
are registered first and referred to by id; objects and lights are added in
evaluation order. ``build()`` validates everything and uploads it into an
immutable ``Scene`` whose Taichi fields the renderer reads.

The SceneManager maintains:
- A material_id space (ids are assigned in registration order)
- The ordered object list (the first object wins intersection ties)
- The light list
- Scene serialization/configuration support

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu)
    >>> from whitted.scene.manager import SceneManager
    >>> manager = SceneManager()
    >>> red = manager.add_material((0.8, 0.1, 0.1))
    >>> manager.add_sphere(center=(0, 0, 5), radius=1.0, material_id=red)
    >>> manager.add_light(position=(0, 0, 0))
    >>> scene = manager.build()
"""

import logging
from dataclasses import dataclass, field
from typing import Any

from whitted.materials.material import MAX_MATERIALS, MaterialInfo
from whitted.scene.intersection import MAX_LIGHTS, MAX_OBJECTS, Scene
from whitted.scene.objects import (
    CheckerboardInfo,
    IndentSphereInfo,
    LightInfo,
    ObjectInfo,
    PlaneInfo,
    SphereInfo,
    TorusInfo,
    object_from_dict,
    object_to_dict,
)

logger = logging.getLogger(__name__)

Vec3Tuple = tuple[float, float, float]


@dataclass
class SceneConfig:
    """Configuration for scene serialization.

    Attributes:
        materials: List of material configurations.
        objects: List of object configurations, each tagged with a "type".
        lights: List of light configurations.
    """

    materials: list[dict[str, Any]] = field(default_factory=list)
    objects: list[dict[str, Any]] = field(default_factory=list)
    lights: list[dict[str, Any]] = field(default_factory=list)


class SceneManager:
    """Builder for a Scene.

    Attributes:
        materials: Registered materials; index is the material id.
        objects: Objects in evaluation order.
        lights: Point lights.
    """

    def __init__(self) -> None:
        """Initialize an empty scene."""
        self.materials: list[MaterialInfo] = []
        self.objects: list[ObjectInfo] = []
        self.lights: list[LightInfo] = []

    def clear(self) -> None:
        """Remove all materials, objects and lights."""
        self.materials.clear()
        self.objects.clear()
        self.lights.clear()

    # =========================================================================
    # Material Management
    # =========================================================================

    def add_material(
        self,
        color: Vec3Tuple = (1.0, 1.0, 1.0),
        *,
        mirror: float = 0.0,
        metalness: float = 0.2,
        specularness: float = 0.4,
        diffuseness: float = 1.0,
        shininess: float = 4.0,
        refractive: bool = False,
        refraction_ratio: float = 1.0,
    ) -> int:
        """Register a material.

        Args:
            color: Base surface color as (R, G, B), each in [0, 1].
            mirror: Reflection blend weight in [0, 1].
            metalness: Metalness in [0, 1].
            specularness: Weight of the specular highlight (>= 0).
            diffuseness: Weight of the diffuse term (>= 0).
            shininess: Phong exponent (> 0).
            refractive: Whether the surface transmits light.
            refraction_ratio: Incident over transmitted refractive index (> 0).

        Returns:
            The material ID for this material.

        Raises:
            RuntimeError: If the maximum number of materials is exceeded.
            ValueError: If any parameter is out of range.
        """
        info = MaterialInfo(
            color=tuple(float(c) for c in color),
            mirror=mirror,
            metalness=metalness,
            specularness=specularness,
            diffuseness=diffuseness,
            shininess=shininess,
            refractive=refractive,
            refraction_ratio=refraction_ratio,
        )
        return self.add_material_info(info)

    def add_material_info(self, info: MaterialInfo) -> int:
        """Register an already constructed MaterialInfo."""
        if len(self.materials) >= MAX_MATERIALS:
            raise RuntimeError(f"Maximum number of materials ({MAX_MATERIALS}) exceeded")
        info.validate()
        self.materials.append(info)
        return len(self.materials) - 1

    def get_material_count(self) -> int:
        return len(self.materials)

    def get_material_info(self, material_id: int) -> MaterialInfo | None:
        """Get the material registered under ``material_id``, if any."""
        if 0 <= material_id < len(self.materials):
            return self.materials[material_id]
        return None

    def _check_material(self, material_id: int) -> None:
        if material_id < 0 or material_id >= len(self.materials):
            raise ValueError(f"Invalid material_id: {material_id}")

    # =========================================================================
    # Object Management
    # =========================================================================

    def add_object(self, info: ObjectInfo) -> int:
        """Validate and append an object.

        Returns:
            The index of the added object.

        Raises:
            RuntimeError: If the maximum number of objects is exceeded.
            ValueError: If the object is invalid or a material id is unknown.
        """
        if len(self.objects) >= MAX_OBJECTS:
            raise RuntimeError(f"Maximum number of objects ({MAX_OBJECTS}) exceeded")
        info.validate()
        self._check_material(info.material_id)
        if isinstance(info, CheckerboardInfo):
            self._check_material(info.material_id_2)
        self.objects.append(info)
        return len(self.objects) - 1

    def add_sphere(self, center: Vec3Tuple, radius: float, material_id: int) -> int:
        """Add a sphere to the scene.

        Args:
            center: The center point of the sphere as (x, y, z).
            radius: The radius of the sphere (must be positive).
            material_id: The material ID to assign to the sphere.

        Returns:
            The index of the added object.
        """
        return self.add_object(SphereInfo(center=center, radius=radius, material_id=material_id))

    def add_plane(self, point: Vec3Tuple, normal: Vec3Tuple, material_id: int) -> int:
        return self.add_object(PlaneInfo(point=point, normal=normal, material_id=material_id))

    def add_checkerboard(
        self,
        point: Vec3Tuple,
        normal: Vec3Tuple,
        scale: float,
        material_id: int,
        material_id_2: int,
    ) -> int:
        """Add a checkerboard plane alternating between two materials.

        Args:
            point: A point on the plane; tiles are aligned to it.
            normal: The plane normal (need not be unit length).
            scale: Tile edge length (must be positive).
            material_id: Material of tiles whose index parities differ.
            material_id_2: Material of the other tiles.

        Returns:
            The index of the added object.
        """
        return self.add_object(
            CheckerboardInfo(
                point=point,
                normal=normal,
                scale=scale,
                material_id=material_id,
                material_id_2=material_id_2,
            )
        )

    def add_indent_sphere(
        self,
        center: Vec3Tuple,
        radius: float,
        anti_center: Vec3Tuple,
        anti_radius: float,
        material_id: int,
    ) -> int:
        """Add a sphere with a spherical cavity carved out of it."""
        return self.add_object(
            IndentSphereInfo(
                center=center,
                radius=radius,
                anti_center=anti_center,
                anti_radius=anti_radius,
                material_id=material_id,
            )
        )

    def add_torus(
        self,
        center: Vec3Tuple,
        inner_radius: float,
        outer_radius: float,
        material_id: int,
    ) -> int:
        return self.add_object(
            TorusInfo(
                center=center,
                inner_radius=inner_radius,
                outer_radius=outer_radius,
                material_id=material_id,
            )
        )

    def add_light(self, position: Vec3Tuple, color: Vec3Tuple = (1.0, 1.0, 1.0)) -> int:
        """Add a point light.

        Returns:
            The index of the added light.

        Raises:
            RuntimeError: If the maximum number of lights is exceeded.
            ValueError: If any color component is negative.
        """
        if len(self.lights) >= MAX_LIGHTS:
            raise RuntimeError(f"Maximum number of lights ({MAX_LIGHTS}) exceeded")
        light = LightInfo(position=position, color=color)
        light.validate()
        self.lights.append(light)
        return len(self.lights) - 1

    def get_object_count(self) -> int:
        return len(self.objects)

    def get_light_count(self) -> int:
        return len(self.lights)

    # =========================================================================
    # Building
    # =========================================================================

    def build(self) -> Scene:
        """Upload the current contents into an immutable Scene.

        Later changes to this manager do not affect scenes already built.
        """
        scene = Scene(list(self.objects), list(self.lights), list(self.materials))
        logger.debug(
            "Built scene with %d objects, %d lights, %d materials",
            len(self.objects),
            len(self.lights),
            len(self.materials),
        )
        return scene

    # =========================================================================
    # Serialization
    # =========================================================================

    def to_config(self) -> SceneConfig:
        """Export the scene to a configuration object.

        Returns:
            A SceneConfig containing all materials, objects and lights.
        """
        return SceneConfig(
            materials=[mat.to_dict() for mat in self.materials],
            objects=[object_to_dict(obj) for obj in self.objects],
            lights=[light.to_dict() for light in self.lights],
        )

    def from_config(self, config: SceneConfig) -> None:
        """Load a scene from a configuration object.

        Clears the current scene and loads the configuration.

        Args:
            config: The scene configuration to load.

        Raises:
            ValueError: If the configuration contains invalid data.
        """
        self.clear()

        # Load materials first (needed for objects)
        for mat_config in config.materials:
            self.add_material_info(MaterialInfo.from_dict(mat_config))

        for obj_config in config.objects:
            self.add_object(object_from_dict(obj_config))

        for light_config in config.lights:
            light = LightInfo.from_dict(light_config)
            self.add_light(light.position, light.color)

    def to_dict(self) -> dict[str, Any]:
        """Export the scene to a dictionary (for JSON serialization).

        Returns:
            A dictionary representation of the scene.
        """
        config = self.to_config()
        return {
            "materials": config.materials,
            "objects": config.objects,
            "lights": config.lights,
        }

    def from_dict(self, data: dict[str, Any]) -> None:
        """Load a scene from a dictionary.

        Args:
            data: Dictionary with 'materials', 'objects', 'lights' keys.
        """
        config = SceneConfig(
            materials=data.get("materials", []),
            objects=data.get("objects", []),
            lights=data.get("lights", []),
        )
        self.from_config(config)

    # =========================================================================
    # Capacity Information
    # =========================================================================

    @staticmethod
    def get_max_objects() -> int:
        """Get the maximum number of objects supported."""
        return MAX_OBJECTS

    @staticmethod
    def get_max_lights() -> int:
        return MAX_LIGHTS

    @staticmethod
    def get_max_materials() -> int:
        """Get the maximum number of materials supported."""
        return MAX_MATERIALS
