"""Pytest configuration for csgtracer tests.

This module provides shared fixtures for all test modules, including
Taichi initialization which must happen once per session.
"""

import pytest
import taichi as ti


@pytest.fixture(scope="session", autouse=True)
def init_taichi_session():
    """Initialize Taichi once for the entire test session.

    Using session scope prevents multiple ti.init() calls which can cause
    segmentation faults due to Taichi runtime conflicts. Image buffers are
    float64, so the CPU backend is used with f64 as the default float type.
    """
    ti.init(arch=ti.cpu, default_fp=ti.f64, random_seed=42)
    yield


@pytest.fixture
def matte_box_scene():
    """A single matte cube in front of the camera, lit from the camera position.

    The cube (half-size 1) is centered at z=-10, so its top face (+z) is the
    plane z=-9 facing the camera. The light sits at the origin with color
    100, giving a matte intensity of 0.5 * 100 / 81 where the camera's
    central ray meets the face.
    """
    from csgtracer.core.vector import Color, Vector
    from csgtracer.geometry.cuboid import Cuboid
    from csgtracer.scene.manager import LightSource, Scene

    scene = Scene()
    cube = Cuboid(1.0, 1.0, 1.0)
    cube.set_full_matte(Color(0.5, 0.5, 0.5))
    cube.move(0.0, 0.0, -10.0)
    scene.add_solid_object(cube)
    scene.add_light_source(LightSource(Vector(0.0, 0.0, 0.0), Color(100.0, 100.0, 100.0)))
    return scene
