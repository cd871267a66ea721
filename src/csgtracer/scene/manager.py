"""Scene management: solids, lights, and rendering.

The Scene owns every top-level solid and a list of point light sources. It
is built up front, then rendered any number of times; rendering never
modifies it.

Example:
    >>> from csgtracer.core.vector import Color, Vector
    >>> from csgtracer.geometry.cuboid import Cuboid
    >>> from csgtracer.scene.manager import LightSource, Scene
    >>> scene = Scene()
    >>> cube = scene.add_solid_object(Cuboid(2.0, 2.0, 2.0))
    >>> cube.set_full_matte(Color(0.7, 0.7, 0.8)).move(0.0, 0.0, -50.0)
    >>> scene.add_light_source(LightSource(Vector(-5.0, 50.0, 20.0), Color(0.7, 0.7, 0.7)))
    >>> scene.save_image("cube.png", 300, 300, 3.0, 2)
"""

from __future__ import annotations

from dataclasses import dataclass, field

from csgtracer.camera.pinhole import PinholeCamera
from csgtracer.core.config import RenderConfig
from csgtracer.core.image_buffer import ImageBuffer
from csgtracer.core.renderer import ProgressCallback, render_scene
from csgtracer.core.vector import BLACK, Color, Vector
from csgtracer.geometry.solid import SolidObject
from csgtracer.logging_config import get_logger
from csgtracer.materials.optics import REFRACTION_VACUUM, validate_refraction
from csgtracer.preview.export import save_png

logger = get_logger(__name__)


@dataclass(frozen=True)
class LightSource:
    """A point light.

    Attributes:
        location: Position in world space.
        color: Light color and intensity. Matte illumination falls off with
            the inverse square of the distance, so distant lights need large
            values.
        tag: Optional label for diagnostics.
    """

    location: Vector
    color: Color
    tag: str = ""

    def __post_init__(self) -> None:
        self.color.validate()


@dataclass
class SceneConfig:
    """Summary of a scene's contents, for logging and inspection.

    Attributes:
        solids: Tags of the top-level solids, in scene order.
        lights: Locations of the light sources.
        background_color: Color returned by rays that hit nothing.
        ambient_refraction: Refractive index of the space between solids.
    """

    solids: list[str] = field(default_factory=list)
    lights: list[tuple[float, float, float]] = field(default_factory=list)
    background_color: tuple[float, float, float] = (0.0, 0.0, 0.0)
    ambient_refraction: float = REFRACTION_VACUUM


class Scene:
    """A collection of solids and lights, and the entry point for rendering.

    Attributes:
        solids: Top-level solids, in the order they were added. Order
            matters: it breaks ties between equally close hits and picks
            the primary container of a point inside overlapping solids.
        lights: Point light sources.
        debug_points: Output pixels whose traces are logged at DEBUG level.
        config: Render settings.
    """

    def __init__(
        self,
        background_color: Color = BLACK,
        config: RenderConfig | None = None,
    ) -> None:
        self.solids: list[SolidObject] = []
        self.lights: list[LightSource] = []
        self.debug_points: set[tuple[int, int]] = set()
        self.config = config if config is not None else RenderConfig()
        self._ambient_refraction = REFRACTION_VACUUM
        self._background_color = BLACK
        self.set_background_color(background_color)

    @property
    def background_color(self) -> Color:
        return self._background_color

    @property
    def ambient_refraction(self) -> float:
        return self._ambient_refraction

    def clear(self) -> None:
        """Remove every solid, light, and debug point."""
        self.solids.clear()
        self.lights.clear()
        self.debug_points.clear()

    # =========================================================================
    # Scene Construction
    # =========================================================================

    def add_solid_object(self, solid: SolidObject) -> SolidObject:
        """Add a solid to the scene and return it for further setup."""
        self.solids.append(solid)
        return solid

    def add_light_source(self, light: LightSource) -> None:
        self.lights.append(light)

    def set_ambient_refraction(self, refraction: float) -> None:
        """Set the refractive index of the medium surrounding all solids.

        Raises:
            InvalidConfigurationError: If refraction is out of range.
        """
        validate_refraction(refraction)
        self._ambient_refraction = refraction

    def set_background_color(self, color: Color) -> None:
        """Set the color seen by rays that escape the scene.

        Raises:
            NegativeColorError: If any channel is negative.
        """
        color.validate()
        self._background_color = color

    def add_debug_point(self, i: int, j: int) -> None:
        """Log every step of the traces through output pixel (i, j)."""
        self.debug_points.add((i, j))

    def get_solid_count(self) -> int:
        return len(self.solids)

    def get_light_count(self) -> int:
        return len(self.lights)

    def to_config(self) -> SceneConfig:
        """Summarize the scene contents."""
        return SceneConfig(
            solids=[solid.tag for solid in self.solids],
            lights=[tuple(light.location) for light in self.lights],
            background_color=tuple(self._background_color),
            ambient_refraction=self._ambient_refraction,
        )

    # =========================================================================
    # Rendering
    # =========================================================================

    def render(
        self,
        pixels_wide: int,
        pixels_high: int,
        zoom: float,
        anti_alias_factor: int = 1,
        callback: ProgressCallback | None = None,
    ) -> ImageBuffer:
        """Render the scene from a camera at the origin looking down -z.

        Args:
            pixels_wide: Output image width.
            pixels_high: Output image height.
            zoom: Magnification factor.
            anti_alias_factor: Samples per pixel along each axis.
            callback: Optional progress callback, see render_scene().

        Returns:
            The rendered image.

        Raises:
            InvalidConfigurationError: If any argument is out of range.
        """
        camera = PinholeCamera(pixels_wide, pixels_high, zoom, anti_alias_factor)
        return render_scene(self, camera, callback)

    def save_image(
        self,
        filepath: str,
        pixels_wide: int,
        pixels_high: int,
        zoom: float,
        anti_alias_factor: int = 1,
    ) -> ImageBuffer:
        """Render the scene and write it to a PNG file.

        Returns:
            The rendered image, for further inspection.
        """
        image = self.render(pixels_wide, pixels_high, zoom, anti_alias_factor)
        save_png(image, filepath)
        logger.info("Wrote %s", filepath)
        return image

    def __repr__(self) -> str:
        return f"Scene(solids={len(self.solids)}, lights={len(self.lights)})"
