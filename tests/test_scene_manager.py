"""Unit tests for the SceneManager.

Tests cover:
- Material registration and validation
- Object and light addition with validation
- Capacity limits
- Scene serialization (to_config, from_config, to_dict, from_dict)
- Building a Scene
"""

import json
import logging

import pytest


class TestMaterialRegistration:
    """Tests for material registration."""

    def test_ids_are_sequential(self, manager):
        assert manager.add_material((0.8, 0.3, 0.3)) == 0
        assert manager.add_material((0.1, 0.8, 0.1), mirror=0.5) == 1
        assert manager.add_material(refractive=True, refraction_ratio=1 / 1.5) == 2
        assert manager.get_material_count() == 3

    def test_material_validation(self, manager):
        with pytest.raises(ValueError):
            manager.add_material((1.5, 0.0, 0.0))
        with pytest.raises(ValueError):
            manager.add_material(mirror=2.0)
        with pytest.raises(ValueError):
            manager.add_material(shininess=0.0)
        assert manager.get_material_count() == 0

    def test_get_material_info(self, manager):
        mat_id = manager.add_material((0.2, 0.4, 0.6), specularness=0.9)
        info = manager.get_material_info(mat_id)
        assert info is not None
        assert info.color == pytest.approx((0.2, 0.4, 0.6))
        assert info.specularness == 0.9
        assert manager.get_material_info(99) is None


class TestObjectAddition:
    """Tests for adding objects and lights."""

    def test_add_each_kind(self, manager):
        from whitted.scene.objects import ObjectType

        mat = manager.add_material()
        mat2 = manager.add_material((0.3, 0.3, 0.3))
        assert manager.add_sphere((0, 0, 5), 1.0, mat) == 0
        assert manager.add_plane((0, -1, 0), (0, 1, 0), mat) == 1
        assert manager.add_checkerboard((0, -2, 0), (0, 1, 0), 2.0, mat, mat2) == 2
        assert manager.add_indent_sphere((0, 0, 9), 2.0, (0, 0, 7), 1.0, mat) == 3
        assert manager.add_torus((0, 0, 12), 1.0, 2.0, mat) == 4
        assert [obj.kind for obj in manager.objects] == [
            ObjectType.SPHERE,
            ObjectType.PLANE,
            ObjectType.CHECKERBOARD,
            ObjectType.INDENT_SPHERE,
            ObjectType.TORUS,
        ]
        assert manager.get_object_count() == 5

    def test_invalid_material_id(self, manager):
        manager.add_material()
        with pytest.raises(ValueError, match="Invalid material_id"):
            manager.add_sphere((0, 0, 5), 1.0, 3)
        with pytest.raises(ValueError):
            manager.add_checkerboard((0, 0, 0), (0, 1, 0), 1.0, 0, -1)

    @pytest.mark.parametrize(
        "adder",
        [
            lambda m: m.add_sphere((0, 0, 5), 0.0, 0),
            lambda m: m.add_plane((0, 0, 0), (0, 0, 0), 0),
            lambda m: m.add_checkerboard((0, 0, 0), (0, 1, 0), 0.0, 0, 0),
            lambda m: m.add_indent_sphere((0, 0, 0), 1.0, (0, 0, 1), -1.0, 0),
            lambda m: m.add_torus((0, 0, 0), 2.0, 1.0, 0),
        ],
    )
    def test_invalid_geometry(self, manager, adder):
        manager.add_material()
        with pytest.raises(ValueError):
            adder(manager)
        assert manager.get_object_count() == 0

    def test_lights(self, manager):
        assert manager.add_light((20, 15, 15), (0.5, 1.0, 1.0)) == 0
        assert manager.add_light((5, 0, 5)) == 1
        assert manager.get_light_count() == 2
        with pytest.raises(ValueError):
            manager.add_light((0, 0, 0), (-1.0, 0.0, 0.0))

    def test_object_capacity(self, manager):
        from whitted.scene.manager import SceneManager

        mat = manager.add_material()
        for i in range(SceneManager.get_max_objects()):
            manager.add_sphere((float(i), 0.0, 10.0), 0.1, mat)
        with pytest.raises(RuntimeError):
            manager.add_sphere((0.0, 0.0, 0.0), 0.1, mat)

    def test_light_capacity(self, manager):
        from whitted.scene.manager import SceneManager

        for _ in range(SceneManager.get_max_lights()):
            manager.add_light((0.0, 0.0, 0.0))
        with pytest.raises(RuntimeError):
            manager.add_light((0.0, 0.0, 0.0))

    def test_clear(self, manager):
        mat = manager.add_material()
        manager.add_sphere((0, 0, 5), 1.0, mat)
        manager.add_light((0, 0, 0))
        manager.clear()
        assert manager.get_material_count() == 0
        assert manager.get_object_count() == 0
        assert manager.get_light_count() == 0


class TestSerialization:
    """Tests for scene serialization."""

    def _populate(self, manager):
        white = manager.add_material((1.0, 1.0, 1.0), mirror=0.2)
        grey = manager.add_material((0.3, 0.3, 0.3), mirror=0.2)
        glass = manager.add_material(refractive=True, refraction_ratio=0.5)
        manager.add_sphere((0.0, 3.0, 25.0), 6.0, glass)
        manager.add_checkerboard((0.0, 3.0, 27.0), (-0.5, 1.0, -1.0), 5.0, white, grey)
        manager.add_indent_sphere((7.0, 1.0, 15.0), 2.5, (6.0, 0.5, 13.0), 1.6, white)
        manager.add_torus((0.0, 0.0, 20.0), 1.0, 2.0, grey)
        manager.add_plane((0.0, -5.0, 0.0), (0.0, 1.0, 0.0), white)
        manager.add_light((20.0, 15.0, 15.0), (0.5, 1.0, 1.0))

    def test_dict_round_trip(self, manager):
        from whitted.scene.manager import SceneManager

        self._populate(manager)
        data = manager.to_dict()

        # Must survive JSON encoding
        restored = SceneManager()
        restored.from_dict(json.loads(json.dumps(data)))

        assert restored.to_dict() == data
        assert restored.objects == manager.objects
        assert restored.lights == manager.lights
        assert restored.materials == manager.materials

    def test_config_round_trip(self, manager):
        from whitted.scene.manager import SceneManager

        self._populate(manager)
        restored = SceneManager()
        restored.from_config(manager.to_config())
        assert restored.objects == manager.objects

    def test_object_types_are_tagged(self, manager):
        self._populate(manager)
        types = [obj["type"] for obj in manager.to_dict()["objects"]]
        assert types == ["sphere", "checkerboard", "indent_sphere", "torus", "plane"]

    def test_unknown_object_type(self, manager):
        with pytest.raises(ValueError, match="Unknown object type"):
            manager.from_dict(
                {
                    "materials": [{}],
                    "objects": [{"type": "cube", "material_id": 0}],
                }
            )

    def test_missing_field(self, manager):
        with pytest.raises(ValueError):
            manager.from_dict(
                {"materials": [{}], "objects": [{"type": "sphere", "material_id": 0}]}
            )

    def test_from_dict_replaces_contents(self, manager):
        mat = manager.add_material()
        manager.add_sphere((0, 0, 5), 1.0, mat)
        manager.from_dict({"materials": [], "objects": [], "lights": []})
        assert manager.get_object_count() == 0
        assert manager.get_material_count() == 0


class TestBuild:
    def test_build_scene_counts(self, manager):
        mat = manager.add_material()
        manager.add_sphere((0, 0, 5), 1.0, mat)
        manager.add_plane((0, -1, 0), (0, 2, 0), mat)
        manager.add_light((0, 0, 0))
        scene = manager.build()
        assert scene.num_objects == 2
        assert scene.num_lights == 1
        assert len(scene.materials) == 1

    def test_build_logs_counts(self, manager, caplog):
        mat = manager.add_material()
        manager.add_sphere((0, 0, 5), 1.0, mat)
        with caplog.at_level(logging.DEBUG, logger="whitted.scene.manager"):
            manager.build()
        assert "1 objects" in caplog.text

    def test_built_scene_is_independent(self, manager):
        mat = manager.add_material()
        manager.add_sphere((0, 0, 5), 1.0, mat)
        scene = manager.build()
        manager.add_sphere((0, 0, 9), 1.0, mat)
        assert scene.num_objects == 1
