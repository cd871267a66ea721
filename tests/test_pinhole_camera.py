"""Unit tests for the pinhole camera."""

import pytest

from csgtracer.camera.pinhole import PinholeCamera
from csgtracer.core.errors import InvalidConfigurationError
from csgtracer.core.vector import Vector


class TestRayDirection:
    def test_center_ray_looks_down_negative_z(self):
        camera = PinholeCamera(pixels_wide=300, pixels_high=300, zoom=3.0)
        assert camera.ray_direction(150, 150) == Vector(0.0, 0.0, -1.0)

    def test_corners(self):
        camera = PinholeCamera(pixels_wide=4, pixels_high=2, zoom=1.0)
        # Z = 1 * 1 * min(4, 2) = 2
        assert camera.ray_direction(0, 0) == Vector(-1.0, 0.5, -1.0)
        assert camera.ray_direction(4, 2) == Vector(1.0, -0.5, -1.0)

    def test_anti_aliasing_enlarges_grid(self):
        camera = PinholeCamera(pixels_wide=4, pixels_high=4, zoom=1.0, anti_alias_factor=2)
        assert camera.large_width == 8
        assert camera.large_height == 8
        assert camera.large_zoom == 8.0
        # Same field of view as the un-anti-aliased grid
        assert camera.ray_direction(0, 0) == Vector(-0.5, 0.5, -1.0)

    def test_vantage_is_origin(self):
        assert PinholeCamera(10, 10, 1.0).vantage == Vector()

    def test_camera_info(self):
        info = PinholeCamera(10, 20, 2.0, anti_alias_factor=3).get_camera_info()
        assert info["large_width"] == 30.0
        assert info["large_zoom"] == 60.0
        assert info["samples_per_pixel"] == 9.0


class TestValidation:
    @pytest.mark.parametrize(
        "kwargs",
        [
            {"pixels_wide": 0, "pixels_high": 10, "zoom": 1.0},
            {"pixels_wide": 10, "pixels_high": -1, "zoom": 1.0},
            {"pixels_wide": 10, "pixels_high": 10, "zoom": 0.0},
            {"pixels_wide": 10, "pixels_high": 10, "zoom": 1.0, "anti_alias_factor": 0},
        ],
    )
    def test_invalid_configuration(self, kwargs):
        with pytest.raises(InvalidConfigurationError):
            PinholeCamera(**kwargs)
