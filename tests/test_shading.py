"""Unit tests for Phong shading with hard shadows."""

import math

import pytest

from whitted.core.shading import Shader
from whitted.scene.manager import SceneManager

UP = (0.0, 1.0, 0.0)
DOWN = (0.0, -1.0, 0.0)


def _floor_shader(light=(0.0, 1.0, 0.0), light_color=(1.0, 1.0, 1.0), **material):
    """A single material over the plane y = 0 and one light."""
    manager = SceneManager()
    mat = manager.add_material(**material)
    manager.add_plane((0.0, 0.0, 0.0), UP, mat)
    manager.add_light(light, light_color)
    return Shader(manager.build()), mat


class TestDiffuse:
    def test_light_facing_surface(self, single_sphere_scene):
        shader = Shader(single_sphere_scene)
        color = shader.shade_surface(0, (0.0, 0.0, 4.0), (0.0, 0.0, -1.0), (0.0, 0.0, 1.0))
        assert color == pytest.approx((1.0, 1.0, 1.0), abs=1e-4)

    def test_lambert_falloff(self):
        shader, mat = _floor_shader(color=(0.5, 0.5, 0.5), specularness=0.0)
        color = shader.shade_surface(mat, (1.0, 0.0, 0.0), UP, DOWN)
        expected = 0.5 * math.cos(math.radians(45.0))
        assert color == pytest.approx((expected, expected, expected), abs=1e-4)

    def test_back_facing_surface_is_black(self, single_sphere_scene):
        shader = Shader(single_sphere_scene)
        # Top of the sphere; the light at the origin is below its tangent plane
        color = shader.shade_surface(0, (0.0, 1.0, 5.0), UP, (0.0, 0.0, 1.0))
        assert color == pytest.approx((0.0, 0.0, 0.0), abs=1e-6)

    def test_light_color_tints(self):
        shader, mat = _floor_shader(light_color=(0.5, 1.0, 0.25), specularness=0.0)
        color = shader.shade_surface(mat, (0.0, 0.0, 0.0), UP, DOWN)
        assert color == pytest.approx((0.5, 1.0, 0.25), abs=1e-4)

    def test_diffuseness_scales(self):
        shader, mat = _floor_shader(
            color=(0.4, 0.4, 0.4), diffuseness=0.5, specularness=0.0
        )
        color = shader.shade_surface(mat, (0.0, 0.0, 0.0), UP, DOWN)
        assert color[0] == pytest.approx(0.2, abs=1e-4)


class TestSpecular:
    def test_mirror_direction_peak(self):
        shader, mat = _floor_shader(diffuseness=0.0, specularness=1.0, shininess=1.0)
        color = shader.shade_surface(mat, (0.0, 0.0, 0.0), UP, DOWN)
        assert color == pytest.approx((1.0, 1.0, 1.0), abs=1e-4)

    def test_shininess_exponent(self):
        shader, mat = _floor_shader(diffuseness=0.0, specularness=1.0, shininess=2.0)
        # Viewed at 45 degrees from the reflected light direction
        color = shader.shade_surface(mat, (0.0, 0.0, 0.0), UP, (1.0, -1.0, 0.0))
        assert color[0] == pytest.approx(0.5, abs=1e-4)

    def test_highlight_is_not_tinted(self):
        shader, mat = _floor_shader(
            color=(1.0, 0.0, 0.0), diffuseness=0.0, specularness=1.0, shininess=1.0
        )
        color = shader.shade_surface(mat, (0.0, 0.0, 0.0), UP, DOWN)
        assert color == pytest.approx((1.0, 1.0, 1.0), abs=1e-4)


class TestAccumulation:
    def test_lights_sum_and_clamp(self):
        manager = SceneManager()
        mat = manager.add_material((0.6, 0.6, 0.6), specularness=0.0)
        manager.add_plane((0.0, 0.0, 0.0), UP, mat)
        manager.add_light((0.0, 1.0, 0.0))
        manager.add_light((0.0, 2.0, 0.0))
        shader = Shader(manager.build())
        color = shader.shade_surface(mat, (0.0, 0.0, 0.0), UP, DOWN)
        # 0.6 + 0.6 clamps to 1
        assert color == pytest.approx((1.0, 1.0, 1.0), abs=1e-4)

    def test_no_lights_is_black(self):
        manager = SceneManager()
        mat = manager.add_material()
        manager.add_plane((0.0, 0.0, 0.0), UP, mat)
        shader = Shader(manager.build())
        assert shader.shade_surface(mat, (0.0, 0.0, 0.0), UP, DOWN) == (0.0, 0.0, 0.0)


class TestShadows:
    def _shadowed(self, refractive):
        manager = SceneManager()
        floor = manager.add_material(specularness=0.0)
        blocker = manager.add_material(refractive=refractive)
        manager.add_plane((0.0, 0.0, 0.0), UP, floor)
        manager.add_sphere((0.0, 5.0, 0.0), 1.0, blocker)
        manager.add_light((0.0, 10.0, 0.0))
        return Shader(manager.build()), floor

    def test_opaque_blocker_shadows(self):
        shader, floor = self._shadowed(refractive=False)
        assert shader.shade_surface(floor, (0.0, 0.0, 0.0), UP, DOWN) == pytest.approx(
            (0.0, 0.0, 0.0), abs=1e-6
        )

    def test_refractive_blocker_lets_light_through(self):
        shader, floor = self._shadowed(refractive=True)
        assert shader.shade_surface(floor, (0.0, 0.0, 0.0), UP, DOWN) == pytest.approx(
            (1.0, 1.0, 1.0), abs=1e-4
        )


def test_invalid_material_id(single_sphere_scene):
    shader = Shader(single_sphere_scene)
    with pytest.raises(ValueError):
        shader.shade_surface(5, (0.0, 0.0, 4.0), (0.0, 0.0, -1.0), (0.0, 0.0, 1.0))
