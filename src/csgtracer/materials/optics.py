"""Surface optics: matte, gloss, and opacity.

An Optics value describes how a point on a solid's surface interacts with
light:
    - matte color: fraction of light scattered diffusely (Lambertian)
    - gloss color: fraction of light mirror-reflected
    - opacity: fraction of light that meets the surface rather than passing
      into the solid (the rest is refracted)

Refraction itself is a property of the solid, not of its surface, so the
refractive index lives on SolidObject. The index limits and validation are
kept here next to the other optical checks.

Example:
    >>> from csgtracer.core.vector import Color
    >>> from csgtracer.materials.optics import Optics
    >>> optics = Optics()
    >>> optics.set_matte_gloss_balance(0.25, Color(1.0, 0.5, 0.5), Color(1.0, 1.0, 1.0))
    >>> optics.matte_color
    Color(red=0.75, green=0.375, blue=0.375)
"""

from __future__ import annotations

import copy

from csgtracer.core.errors import InvalidConfigurationError
from csgtracer.core.vector import Color

# =============================================================================
# Refractive Index Limits
# =============================================================================

REFRACTION_VACUUM = 1.0000
REFRACTION_AIR = 1.0003
REFRACTION_WATER = 1.3330
REFRACTION_GLASS = 1.5500
REFRACTION_DIAMOND = 2.4190

REFRACTION_MINIMUM = 1.0000
REFRACTION_MAXIMUM = 9.0000


def validate_refraction(refraction: float) -> None:
    """Check that a refractive index is physically plausible.

    Raises:
        InvalidConfigurationError: If refraction is outside
            [REFRACTION_MINIMUM, REFRACTION_MAXIMUM].
    """
    if not REFRACTION_MINIMUM <= refraction <= REFRACTION_MAXIMUM:
        raise InvalidConfigurationError(
            f"Invalid refractive index {refraction}: must be in "
            f"[{REFRACTION_MINIMUM}, {REFRACTION_MAXIMUM}]"
        )


def validate_reflection_color(color: Color) -> None:
    """Check that each channel of a reflection color lies in [0, 1].

    Raises:
        InvalidConfigurationError: If any channel is out of range.
    """
    for name, value in (("red", color.red), ("green", color.green), ("blue", color.blue)):
        if value < 0.0 or value > 1.0:
            raise InvalidConfigurationError(f"Invalid {name} color component: {value}")


class Optics:
    """Optical properties of a point on a solid's surface.

    All setters validate their input and raise InvalidConfigurationError
    instead of clamping.

    Attributes:
        matte_color: Color and intensity of diffuse reflection.
        gloss_color: Color and intensity of mirror reflection.
        opacity: Fraction 0..1 of light reflected rather than refracted.
    """

    def __init__(
        self,
        matte_color: Color | None = None,
        gloss_color: Color | None = None,
        opacity: float = 1.0,
    ) -> None:
        self._matte_color = Color(1.0, 1.0, 1.0)
        self._gloss_color = Color(0.0, 0.0, 0.0)
        self._opacity = 1.0

        if matte_color is not None:
            self.set_matte_color(matte_color)
        if gloss_color is not None:
            self.set_gloss_color(gloss_color)
        self.set_opacity(opacity)

    @property
    def matte_color(self) -> Color:
        return self._matte_color

    @property
    def gloss_color(self) -> Color:
        return self._gloss_color

    @property
    def opacity(self) -> float:
        return self._opacity

    def set_matte_color(self, matte_color: Color) -> None:
        validate_reflection_color(matte_color)
        self._matte_color = matte_color

    def set_gloss_color(self, gloss_color: Color) -> None:
        validate_reflection_color(gloss_color)
        self._gloss_color = gloss_color

    def set_opacity(self, opacity: float) -> None:
        if opacity < 0.0 or opacity > 1.0:
            raise InvalidConfigurationError(f"Invalid opacity {opacity}: must be in [0, 1]")
        self._opacity = opacity

    def set_matte_gloss_balance(
        self,
        gloss_factor: float,
        raw_matte_color: Color,
        raw_gloss_color: Color,
    ) -> None:
        """Split reflected light between matte and gloss.

        The matte color becomes (1 - gloss_factor) * raw_matte_color and the
        gloss color becomes gloss_factor * raw_gloss_color, so each channel
        of matte + gloss never exceeds the larger raw input.

        Args:
            gloss_factor: Balance in [0, 1]; 0 is fully matte, 1 fully glossy.
            raw_matte_color: Matte color before balancing.
            raw_gloss_color: Gloss color before balancing.

        Raises:
            InvalidConfigurationError: If gloss_factor or a raw color is out
                of range.
        """
        validate_reflection_color(raw_matte_color)
        validate_reflection_color(raw_gloss_color)

        if gloss_factor < 0.0 or gloss_factor > 1.0:
            raise InvalidConfigurationError(
                f"Gloss factor must be in the range 0..1, got {gloss_factor}"
            )

        self.set_matte_color((1.0 - gloss_factor) * raw_matte_color)
        self.set_gloss_color(gloss_factor * raw_gloss_color)

    def copy(self) -> Optics:
        """Return an independent copy of these optics."""
        return copy.copy(self)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Optics):
            return NotImplemented
        return (
            self._matte_color == other._matte_color
            and self._gloss_color == other._gloss_color
            and self._opacity == other._opacity
        )

    def __repr__(self) -> str:
        return (
            f"Optics(matte_color={self._matte_color!r}, "
            f"gloss_color={self._gloss_color!r}, opacity={self._opacity})"
        )
