"""Pytest configuration for raytracer tests.

This module provides shared fixtures for all test modules, including
Taichi initialization which must happen once per session.
"""

import pytest
import taichi as ti


@pytest.fixture(scope="session", autouse=True)
def init_taichi_session():
    """Initialize Taichi once for the entire test session.

    Using session scope prevents multiple ti.init() calls which can cause
    segmentation faults due to Taichi runtime conflicts.
    """
    ti.init(arch=ti.cpu, random_seed=42)
    yield


@pytest.fixture
def manager():
    """A fresh SceneManager for each test."""
    from whitted.scene.manager import SceneManager

    scene_manager = SceneManager()
    yield scene_manager
    scene_manager.clear()


@pytest.fixture
def single_sphere_scene():
    """White diffuse unit sphere at (0, 0, 5) lit from the camera position."""
    from whitted.scene.manager import SceneManager

    scene_manager = SceneManager()
    white = scene_manager.add_material((1.0, 1.0, 1.0), specularness=0.0)
    scene_manager.add_sphere((0.0, 0.0, 5.0), 1.0, white)
    scene_manager.add_light((0.0, 0.0, 0.0))
    return scene_manager.build()
