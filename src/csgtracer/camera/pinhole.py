"""Pinhole camera for primary ray generation.

The camera sits at the origin looking down the -z axis with +y up. The image
plane is at z = -1; a zoom factor converts pixel offsets from the image
center into image-plane coordinates. With anti-aliasing enabled, rays are
generated for an enlarged grid of anti_alias_factor^2 samples per output
pixel, which the renderer later averages back down.

For sample (i, j) of the enlarged grid (i to the right, j downward):

    direction = ((i - W/2) / Z, (H/2 - j) / Z, -1)

where W and H are the enlarged dimensions and
Z = anti_alias_factor * zoom * min(pixels_wide, pixels_high).

Example:
    >>> from csgtracer.camera.pinhole import PinholeCamera
    >>> camera = PinholeCamera(pixels_wide=300, pixels_high=300, zoom=3.0)
    >>> camera.ray_direction(150, 150)
    Vector(x=0.0, y=0.0, z=-1.0)
"""

from dataclasses import dataclass

from csgtracer.core.errors import InvalidConfigurationError
from csgtracer.core.vector import Vector

# =============================================================================
# Camera Configuration
# =============================================================================


@dataclass
class PinholeCamera:
    """Configuration of the fixed pinhole camera.

    Attributes:
        pixels_wide: Output image width in pixels.
        pixels_high: Output image height in pixels.
        zoom: Magnification; larger values narrow the field of view.
        anti_alias_factor: Samples per output pixel along each axis.
    """

    pixels_wide: int
    pixels_high: int
    zoom: float
    anti_alias_factor: int = 1

    def __post_init__(self) -> None:
        if self.pixels_wide < 1 or self.pixels_high < 1:
            raise InvalidConfigurationError(
                f"Image dimensions must be positive, got {self.pixels_wide}x{self.pixels_high}"
            )
        if self.zoom <= 0.0:
            raise InvalidConfigurationError(f"zoom must be positive, got {self.zoom}")
        if self.anti_alias_factor < 1:
            raise InvalidConfigurationError(
                f"anti_alias_factor must be at least 1, got {self.anti_alias_factor}"
            )

    @property
    def vantage(self) -> Vector:
        """Camera position in world space."""
        return Vector(0.0, 0.0, 0.0)

    @property
    def large_width(self) -> int:
        return self.anti_alias_factor * self.pixels_wide

    @property
    def large_height(self) -> int:
        return self.anti_alias_factor * self.pixels_high

    @property
    def large_zoom(self) -> float:
        return self.anti_alias_factor * self.zoom * min(self.pixels_wide, self.pixels_high)

    # =========================================================================
    # Ray Generation
    # =========================================================================

    def ray_direction(self, i: int, j: int) -> Vector:
        """Direction of the primary ray through sample (i, j) of the large grid.

        The direction is not normalized; its z component is always -1.
        """
        zoom = self.large_zoom
        return Vector(
            (i - self.large_width / 2.0) / zoom,
            (self.large_height / 2.0 - j) / zoom,
            -1.0,
        )

    def get_camera_info(self) -> dict[str, float]:
        """Summary of the derived sampling grid, for logging and debugging."""
        return {
            "large_width": float(self.large_width),
            "large_height": float(self.large_height),
            "large_zoom": self.large_zoom,
            "samples_per_pixel": float(self.anti_alias_factor**2),
        }
