"""Vector and color value types for ray tracing.

This module provides the Vector and Color dataclasses plus the handful of
vector helpers (dot/cross products, reflection) that the geometry and shading
code build on. Both types are immutable values; arithmetic always returns a
new instance.

Example:
    >>> from csgtracer.core.vector import Vector, dot, cross
    >>> a = Vector(1.0, 0.0, 0.0)
    >>> b = Vector(0.0, 1.0, 0.0)
    >>> cross(a, b)
    Vector(x=0.0, y=0.0, z=1.0)
    >>> dot(a + b, a)
    1.0
"""

from __future__ import annotations

import math
from dataclasses import dataclass

from csgtracer.core.errors import NegativeColorError

# Geometric tolerance shared by every intersection and containment test
EPSILON = 1.0e-6


def radians_from_degrees(degrees: float) -> float:
    """Convert an angle in degrees to radians."""
    return degrees * (math.pi / 180.0)


# =============================================================================
# Vector
# =============================================================================


@dataclass(frozen=True)
class Vector:
    """A 3D vector or point.

    Attributes:
        x: The x component.
        y: The y component.
        z: The z component.
    """

    x: float = 0.0
    y: float = 0.0
    z: float = 0.0

    def magnitude_squared(self) -> float:
        """Return the squared length, avoiding the square root."""
        return self.x * self.x + self.y * self.y + self.z * self.z

    def magnitude(self) -> float:
        """Return the Euclidean length of the vector."""
        return math.sqrt(self.magnitude_squared())

    def unit_vector(self) -> Vector:
        """Return a vector of length 1 pointing the same way.

        Raises:
            ZeroDivisionError: If the vector has zero length.
        """
        mag = self.magnitude()
        return Vector(self.x / mag, self.y / mag, self.z / mag)

    def __add__(self, other: Vector) -> Vector:
        return Vector(self.x + other.x, self.y + other.y, self.z + other.z)

    def __sub__(self, other: Vector) -> Vector:
        return Vector(self.x - other.x, self.y - other.y, self.z - other.z)

    def __neg__(self) -> Vector:
        return Vector(-self.x, -self.y, -self.z)

    def __mul__(self, scalar: float) -> Vector:
        return Vector(scalar * self.x, scalar * self.y, scalar * self.z)

    __rmul__ = __mul__

    def __truediv__(self, scalar: float) -> Vector:
        return Vector(self.x / scalar, self.y / scalar, self.z / scalar)

    def __iter__(self):
        yield self.x
        yield self.y
        yield self.z


def dot(a: Vector, b: Vector) -> float:
    """Compute the dot product a . b."""
    return a.x * b.x + a.y * b.y + a.z * b.z


def cross(a: Vector, b: Vector) -> Vector:
    """Compute the cross product a x b."""
    return Vector(
        a.y * b.z - a.z * b.y,
        a.z * b.x - a.x * b.z,
        a.x * b.y - a.y * b.x,
    )


def reflect(incident: Vector, normal: Vector) -> Vector:
    """Reflect an incident direction about a surface normal.

    Args:
        incident: The incoming direction (pointing toward the surface).
        normal: The unit surface normal.

    Returns:
        The mirror-reflected direction, with the same length as incident.
    """
    return incident - (2.0 * dot(incident, normal)) * normal


# =============================================================================
# Color
# =============================================================================


@dataclass(frozen=True)
class Color:
    """An RGB light intensity.

    Components are linear (pre-gamma) intensities. They are not limited to
    [0, 1] because light from several sources accumulates, but they must
    never be negative by the time an image is produced; see validate().

    Attributes:
        red: Red intensity.
        green: Green intensity.
        blue: Blue intensity.
    """

    red: float = 0.0
    green: float = 0.0
    blue: float = 0.0

    @classmethod
    def from_luminosity(
        cls, red: float, green: float, blue: float, luminosity: float = 1.0
    ) -> Color:
        """Create a color with every component scaled by luminosity."""
        return cls(luminosity * red, luminosity * green, luminosity * blue)

    def validate(self) -> None:
        """Check that no component is negative.

        Raises:
            NegativeColorError: If any component is below zero.
        """
        if self.red < 0.0 or self.green < 0.0 or self.blue < 0.0:
            raise NegativeColorError(f"Negative color values not allowed: {self}")

    def max_component(self) -> float:
        """Return the largest of the three components."""
        return max(self.red, self.green, self.blue)

    def __add__(self, other: Color) -> Color:
        return Color(self.red + other.red, self.green + other.green, self.blue + other.blue)

    def __mul__(self, other: Color | float) -> Color:
        # Color * Color blends channel by channel; Color * float scales.
        if isinstance(other, Color):
            return Color(
                self.red * other.red,
                self.green * other.green,
                self.blue * other.blue,
            )
        return Color(other * self.red, other * self.green, other * self.blue)

    __rmul__ = __mul__

    def __truediv__(self, denom: float) -> Color:
        return Color(self.red / denom, self.green / denom, self.blue / denom)

    def __iter__(self):
        yield self.red
        yield self.green
        yield self.blue


BLACK = Color(0.0, 0.0, 0.0)
WHITE = Color(1.0, 1.0, 1.0)
