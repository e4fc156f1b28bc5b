"""Showcase scene exercising every primitive and material path.

The layout is a small still life seen from the origin looking down +z:

- A green and a red diffuse sphere either side of a large blue mirror sphere
- A blue diffuse sphere hovering above the mirror sphere
- A tilted white/grey checkerboard floor with a light mirror finish
- A glass sphere in the foreground (refraction and Fresnel blending)
- An indented sphere whose cavity faces the camera
- A thin torus ringing the mirror sphere (optional)
- Two colored point lights

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu)
    >>> from whitted.scene.showcase import create_showcase_scene
    >>> manager, camera = create_showcase_scene()
    >>> scene = manager.build()
"""

from dataclasses import dataclass

from whitted.camera.pinhole import PinholeCamera
from whitted.scene.manager import SceneManager

# =============================================================================
# Showcase Parameters
# =============================================================================


@dataclass
class ShowcaseParams:
    """Parameters for configuring the showcase scene.

    Attributes:
        checker_scale: Tile edge length of the checkerboard floor.
        mirror_strength: Mirror weight of the large central sphere.
        glass_ratio: Refraction ratio (outside over inside index) of the
            glass sphere; 1 / 1.5 approximates air to glass.
        include_glass: Whether to add the glass sphere.
        include_indent: Whether to add the indented sphere.
        include_torus: Whether to add the torus. Each ray tests 360 ring
            spheres once it enters the torus bounds, so it is off by default.
        light_colors: Colors of the two point lights.

    Example:
        >>> params = ShowcaseParams(checker_scale=2.5, include_torus=True)
        >>> params.glass_ratio
        0.6666666666666666
    """

    checker_scale: float = 5.0
    mirror_strength: float = 0.8
    glass_ratio: float = 1.0 / 1.5
    include_glass: bool = True
    include_indent: bool = True
    include_torus: bool = False
    light_colors: tuple[tuple[float, float, float], tuple[float, float, float]] = (
        (0.5, 1.0, 1.0),
        (0.7, 0.7, 0.5),
    )


# =============================================================================
# Scene Constants
# =============================================================================

GREEN = (0.3, 1.0, 0.3)
RED = (1.0, 0.3, 0.3)
BLUE = (0.3, 0.3, 1.0)
WHITE = (1.0, 1.0, 1.0)
GREY = (0.3, 0.3, 0.3)

CHECKERBOARD_POINT = (0.0, 3.0, 27.0)
CHECKERBOARD_NORMAL = (-0.5, 1.0, -1.0)

LIGHT_POSITIONS = ((20.0, 15.0, 15.0), (5.0, 0.0, 5.0))


# =============================================================================
# Showcase Factory
# =============================================================================


def create_showcase_scene(
    params: ShowcaseParams | None = None,
) -> tuple[SceneManager, PinholeCamera]:
    """Create the showcase scene.

    Args:
        params: Optional scene parameters. Defaults to ``ShowcaseParams()``.

    Returns:
        Tuple of (manager, camera). Call ``manager.build()`` to obtain the
        renderable Scene.
    """
    if params is None:
        params = ShowcaseParams()

    manager = SceneManager()

    green = manager.add_material(GREEN)
    red = manager.add_material(RED)
    blue_mirror = manager.add_material(
        BLUE,
        mirror=params.mirror_strength,
        specularness=1.0,
        shininess=30.0,
        metalness=1.0,
    )
    white_tile = manager.add_material(WHITE, mirror=0.2)
    grey_tile = manager.add_material(GREY, mirror=0.2)
    blue = manager.add_material(BLUE)

    manager.add_sphere((-9.0, 1.2, 25.0), 4.0, green)
    manager.add_sphere((8.0, 1.5, 22.5), 3.0, red)
    manager.add_sphere((0.0, 3.0, 25.0), 6.0, blue_mirror)
    manager.add_checkerboard(
        CHECKERBOARD_POINT,
        CHECKERBOARD_NORMAL,
        params.checker_scale,
        white_tile,
        grey_tile,
    )
    manager.add_sphere((0.0, 16.0, 21.0), 4.0, blue)

    if params.include_glass:
        glass = manager.add_material(
            WHITE,
            specularness=1.0,
            shininess=60.0,
            refractive=True,
            refraction_ratio=params.glass_ratio,
        )
        manager.add_sphere((-4.0, -3.0, 14.0), 2.0, glass)

    if params.include_indent:
        ivory = manager.add_material((1.0, 0.95, 0.8), specularness=0.6, shininess=12.0)
        manager.add_indent_sphere((7.0, 1.0, 15.0), 2.5, (6.0, 0.5, 13.0), 1.6, ivory)

    if params.include_torus:
        gold = manager.add_material((1.0, 0.8, 0.3), specularness=0.8, shininess=20.0)
        manager.add_torus((0.0, 3.0, 25.0), 7.0, 8.0, gold)

    for position, color in zip(LIGHT_POSITIONS, params.light_colors):
        manager.add_light(position, color)

    camera = PinholeCamera(position=(0.0, 0.0, 0.0), forward=(0.0, 0.0, 1.0), fov_scale=1.5)
    return manager, camera
