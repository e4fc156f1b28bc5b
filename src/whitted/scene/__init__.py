"""Scene module for scene building, storage and queries.

Components:
    objects: Host-side object and light descriptions
    intersection: Immutable Scene with intersection, shadow and material queries
    manager: SceneManager builder with serialization
    showcase: The bundled demo scene
"""

from .intersection import MAX_LIGHTS, MAX_OBJECTS, HitInfo, Scene, SceneHit
from .manager import SceneConfig, SceneManager
from .objects import (
    CheckerboardInfo,
    IndentSphereInfo,
    LightInfo,
    ObjectType,
    PlaneInfo,
    SphereInfo,
    TorusInfo,
)
from .showcase import ShowcaseParams, create_showcase_scene

__all__ = [
    "MAX_LIGHTS",
    "MAX_OBJECTS",
    "HitInfo",
    "Scene",
    "SceneHit",
    "SceneConfig",
    "SceneManager",
    "ObjectType",
    "SphereInfo",
    "PlaneInfo",
    "CheckerboardInfo",
    "IndentSphereInfo",
    "TorusInfo",
    "LightInfo",
    "ShowcaseParams",
    "create_showcase_scene",
]
