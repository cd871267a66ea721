"""End-to-end rendering tests.

Each test renders a tiny image through Scene.render() and checks values
that can be worked out by hand.

The 4x4 camera at zoom 1 has large_zoom 4, so the primary ray through
pixel (i, j) has direction ((i - 2) / 4, (2 - j) / 4, -1). Only the
central ray (2, 2) meets the unit cube of the matte_box_scene fixture,
whose lit face is the plane z = -9.
"""

import logging

import numpy as np
import pytest
from PIL import Image

from csgtracer.core.config import RenderConfig
from csgtracer.core.errors import AmbiguousTransitionError
from csgtracer.core.vector import BLACK, Color, Vector
from csgtracer.geometry.block import ConcreteBlock
from csgtracer.geometry.csg import SetDifference, SetIntersection
from csgtracer.geometry.cuboid import Cuboid
from csgtracer.geometry.sphere import Sphere
from csgtracer.geometry.torus import Torus
from csgtracer.materials.optics import Optics
from csgtracer.geometry.solid import SolidObject
from csgtracer.scene.manager import LightSource, Scene

CENTER_VALUE = 0.5 * 100.0 / 81.0


class EdgeOnCuboid(Cuboid):
    """A cuboid that reports an edge-on crossing for every leftward ray."""

    def append_all_intersections(self, vantage, direction, intersection_list):
        if direction.x < 0.0:
            raise AmbiguousTransitionError(f"edge-on crossing from {vantage}")
        super().append_all_intersections(vantage, direction, intersection_list)


def edge_on_scene(policy):
    scene = Scene(config=RenderConfig(ambiguity_policy=policy))
    box = scene.add_solid_object(EdgeOnCuboid(1.0, 1.0, 1.0))
    box.set_full_matte(Color(0.5, 0.5, 0.5)).move(0.0, 0.0, -10.0)
    scene.add_light_source(LightSource(Vector(), Color(100.0, 100.0, 100.0)))
    return scene


class ParityBall(SolidObject):
    """A sphere whose containment test counts vertical crossings."""

    def __init__(self, radius):
        super().__init__(tag="parity ball")
        self.ball = Sphere(radius)

    def append_all_intersections(self, vantage, direction, intersection_list):
        self.ball.append_all_intersections(vantage, direction, intersection_list)

    def translate(self, dx, dy, dz):
        super().translate(dx, dy, dz)
        self.ball.translate(dx, dy, dz)
        return self

    def rotate_x(self, angle_in_degrees):
        self.ball.rotate_x(angle_in_degrees)
        return self

    def rotate_y(self, angle_in_degrees):
        self.ball.rotate_y(angle_in_degrees)
        return self

    def rotate_z(self, angle_in_degrees):
        self.ball.rotate_z(angle_in_degrees)
        return self


def tangent_slab_scene(policy):
    """A slab clipped by a parity ball, viewed through a 4x4 camera at zoom 5.

    The ray through pixel (3, 2) leaves the slab x <= 1 at (1, 0, -20).
    The vertical line through that point just touches the unit ball
    centered at (0, 0, -10), so the containment count meets an edge-on
    crossing there and nowhere else in the image.
    """
    scene = Scene(config=RenderConfig(ambiguity_policy=policy))
    slab = Cuboid(0.5, 5.0, 5.0)
    slab.set_full_matte(Color(0.5, 0.5, 0.5)).move(0.5, 0.0, -20.0)
    ball = ParityBall(1.0).move(0.0, 0.0, -10.0)
    ball.ball.set_full_matte(Color(0.5, 0.5, 0.5))
    scene.add_solid_object(SetIntersection(Vector(), slab, ball))
    return scene


class TestMatteBoxRender:
    def test_only_center_pixel_lit(self, matte_box_scene):
        image = matte_box_scene.render(4, 4, 1.0)
        assert (image.pixels_wide, image.pixels_high) == (4, 4)

        center = image.pixel(2, 2).color
        assert center.red == pytest.approx(CENTER_VALUE)
        assert center.green == pytest.approx(CENTER_VALUE)

        colors = image.to_numpy()
        colors[2, 2] = 0.0
        assert not colors.any()

    def test_normalized_output(self, matte_box_scene):
        pixels = matte_box_scene.render(4, 4, 1.0).to_uint8()
        expected = np.zeros((4, 4, 3), dtype=np.uint8)
        expected[2, 2] = 255
        np.testing.assert_array_equal(pixels, expected)

    def test_render_is_deterministic(self, matte_box_scene):
        first = matte_box_scene.render(4, 4, 1.0)
        second = matte_box_scene.render(4, 4, 1.0)
        np.testing.assert_array_equal(first.to_numpy(), second.to_numpy())
        assert first.to_uint8().tobytes() == second.to_uint8().tobytes()

    def test_anti_aliasing_averages_samples(self, matte_box_scene):
        """At 2x2 anti-aliasing only one of the four samples in pixel (2, 2) hits."""
        image = matte_box_scene.render(4, 4, 1.0, anti_alias_factor=2)
        assert (image.pixels_wide, image.pixels_high) == (4, 4)
        assert image.pixel(2, 2).color.blue == pytest.approx(CENTER_VALUE / 4.0)
        assert image.pixel(1, 1).color == BLACK

    def test_progress_callback(self, matte_box_scene):
        calls = []
        matte_box_scene.render(4, 4, 1.0, callback=lambda done, total: calls.append((done, total)))
        assert calls == [(1, 4), (2, 4), (3, 4), (4, 4)]

    def test_anti_aliased_output_normalized_by_averaged_pixels(self, matte_box_scene):
        """The brightest downsampled pixel maps to 255, not the brightest sample."""
        pixels = matte_box_scene.render(4, 4, 1.0, anti_alias_factor=2).to_uint8()
        expected = np.zeros((4, 4, 3), dtype=np.uint8)
        expected[2, 2] = 255
        np.testing.assert_array_equal(pixels, expected)

    def test_rendering_leaves_scene_unchanged(self, matte_box_scene):
        cube = matte_box_scene.solids[0]
        before = (cube.center, matte_box_scene.get_light_count())
        matte_box_scene.render(4, 4, 1.0)
        assert (cube.center, matte_box_scene.get_light_count()) == before


class TestAmbiguityPolicy:
    def test_raise_policy_aborts(self):
        with pytest.raises(AmbiguousTransitionError):
            edge_on_scene("raise").render(4, 4, 1.0)

    def test_raise_policy_aborts_on_containment_count(self):
        with pytest.raises(AmbiguousTransitionError):
            tangent_slab_scene("raise").render(4, 4, 5.0)

    def test_resolve_policy_flags_containment_count(self, caplog):
        caplog.set_level(logging.WARNING, logger="csgtracer")
        image = tangent_slab_scene("resolve").render(4, 4, 5.0)

        expected = np.zeros((4, 4), dtype=bool)
        expected[2, 3] = True
        np.testing.assert_array_equal(image.ambiguous_mask(), expected)
        assert image.pixel(3, 2).is_ambiguous
        assert any("ambiguous" in record.getMessage() for record in caplog.records)

    def test_resolve_policy_fills_from_neighbours(self, caplog):
        caplog.set_level(logging.WARNING, logger="csgtracer")
        image = edge_on_scene("resolve").render(4, 4, 1.0)

        mask = image.ambiguous_mask()
        assert mask[:, :2].all()
        assert not mask[:, 2:].any()

        # Column 1 borrows from column 2; only (2, 2) there is lit
        assert image.pixel(1, 2).color.red == pytest.approx(CENTER_VALUE / 3.0)
        assert image.pixel(1, 3).color.red == pytest.approx(CENTER_VALUE / 2.0)
        assert image.pixel(1, 0).color.red == 0.0
        # Column 0 has no unflagged neighbour
        assert image.pixel(0, 2).color == BLACK
        assert image.pixel(2, 2).color.red == pytest.approx(CENTER_VALUE)

        assert any("ambiguous" in record.getMessage() for record in caplog.records)


class TestDebugPoints:
    def test_debug_pixel_is_traced_verbosely(self, matte_box_scene, caplog):
        caplog.set_level(logging.DEBUG, logger="csgtracer")
        matte_box_scene.add_debug_point(2, 2)
        matte_box_scene.render(4, 4, 1.0)

        messages = [record.getMessage() for record in caplog.records]
        assert any(message.startswith("[2, 2]") and "top face" in message for message in messages)
        assert not any(message.startswith("[1, 1]") for message in messages)


class TestSaveImage:
    def test_save_image_writes_png(self, matte_box_scene, tmp_path):
        path = tmp_path / "box.png"
        image = matte_box_scene.save_image(str(path), 4, 4, 1.0)

        assert path.exists()
        with Image.open(path) as png:
            assert png.size == (4, 4)
            assert png.mode == "RGB"
            assert png.getpixel((2, 2)) == (255, 255, 255)
            assert png.getpixel((0, 0)) == (0, 0, 0)
        assert image.pixels_wide == 4


class TestCompositeScene:
    def test_mixed_scene_renders(self):
        """Glass, mirror, torus, and a CSG frame in one small image."""
        scene = Scene(background_color=Color(0.1, 0.1, 0.2))

        glass = scene.add_solid_object(Sphere(1.5))
        glass.set_opacity(0.1).set_refraction(1.5).move(-2.0, 0.0, -12.0)

        frame = SetDifference(Vector(), Cuboid(2.0, 2.0, 2.0), Cuboid(1.0, 1.0, 3.0))
        frame.set_uniform_optics(Optics(Color(0.6, 0.3, 0.3)))
        scene.add_solid_object(frame).rotate_y(20.0).move(3.0, 0.0, -15.0)

        ring = scene.add_solid_object(Torus(2.0, 0.5))
        ring.set_matte_gloss_balance(0.4, Color(0.2, 0.8, 0.2), Color(1.0, 1.0, 1.0))
        ring.rotate_x(60.0).move(0.0, 3.0, -14.0)

        scene.add_solid_object(ConcreteBlock(Vector(0.0, -30.0, -60.0), Optics()))
        scene.add_light_source(LightSource(Vector(-5.0, 20.0, 10.0), Color(400.0, 400.0, 400.0)))

        image = scene.render(8, 8, 0.5, anti_alias_factor=2)
        colors = image.to_numpy()
        assert colors.shape == (8, 8, 3)
        assert (colors >= 0.0).all()
        assert colors.max() > 0.0
        assert image.ambiguous_count() == 0


class TestRepeatedRendering:
    """Buffers are released between renders, so a process can keep rendering."""

    def test_many_anti_aliased_renders(self, matte_box_scene):
        first = matte_box_scene.render(2, 2, 1.0, anti_alias_factor=2).to_numpy()
        for _ in range(600):
            image = matte_box_scene.render(2, 2, 1.0, anti_alias_factor=2)
        np.testing.assert_array_equal(image.to_numpy(), first)

    def test_many_resolved_renders(self):
        scene = edge_on_scene("resolve")
        for _ in range(300):
            image = scene.render(2, 2, 1.0, anti_alias_factor=2)
        assert image.ambiguous_count() > 0
