"""Base class for every solid in a constructive solid geometry tree.

A SolidObject is anything a ray can hit: a primitive such as a cuboid, or a
set operation (union, intersection, complement, difference) combining other
solids. Every solid supports two queries:

    append_all_intersections(vantage, direction, intersection_list)
        Append every point where the ray vantage + t*direction (t > 0)
        crosses the solid's boundary. Existing list entries are left alone.

    contains(point)
        Whether the point is inside (or on the surface of) the solid.

The default contains() counts boundary crossings along a vertical ray, which
only makes sense for solids whose surface fully encloses their interior.
Primitives with a cheap analytic test override it.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any

from csgtracer.core.errors import AmbiguousTransitionError, ContainmentError
from csgtracer.core.vector import EPSILON, Color, Vector, dot
from csgtracer.geometry.intersection import (
    Intersection,
    IntersectionList,
    pick_closest_intersection,
)
from csgtracer.materials.optics import REFRACTION_GLASS, Optics, validate_refraction

# Direction of the ray cast by parity_contains()
CONTAINMENT_DIRECTION = Vector(0.0, 0.0, 1.0)


class SolidObject(ABC):
    """Abstract solid with a center, uniform optics, and a refractive index.

    Attributes:
        tag: Free-form label used in diagnostics.
        is_fully_enclosed: Whether ray parity counting can decide containment.
            Fixed at construction.
    """

    def __init__(
        self,
        center: Vector | None = None,
        is_fully_enclosed: bool = True,
        tag: str = "",
    ) -> None:
        self._center = center if center is not None else Vector()
        self._uniform_optics = Optics()
        self._refractive_index = REFRACTION_GLASS
        self._is_fully_enclosed = is_fully_enclosed
        self.tag = tag

    @property
    def is_fully_enclosed(self) -> bool:
        return self._is_fully_enclosed

    @property
    def center(self) -> Vector:
        return self._center

    @property
    def refractive_index(self) -> float:
        return self._refractive_index

    @property
    def uniform_optics(self) -> Optics:
        return self._uniform_optics

    # =========================================================================
    # Ray Queries
    # =========================================================================

    @abstractmethod
    def append_all_intersections(
        self,
        vantage: Vector,
        direction: Vector,
        intersection_list: IntersectionList,
    ) -> None:
        """Append every intersection of the ray with this solid's surface."""

    def find_closest_intersection(
        self, vantage: Vector, direction: Vector
    ) -> Intersection | None:
        """Return the nearest intersection along the ray, or None."""
        intersection_list: IntersectionList = []
        self.append_all_intersections(vantage, direction, intersection_list)
        return pick_closest_intersection(intersection_list)

    def contains(self, point: Vector) -> bool:
        """Return whether point lies inside this solid."""
        return self.parity_contains(point)

    def parity_contains(self, point: Vector) -> bool:
        """Decide containment by counting surface crossings.

        A ray is cast from point straight up the z-axis. Each crossing is an
        entry if the outward normal opposes the ray and an exit if it agrees
        with it. A point inside a closed surface sees exactly one more exit
        than entries; a point outside sees a balanced count.

        Raises:
            AmbiguousTransitionError: If a crossing is edge-on (the normal is
                perpendicular to the ray).
            ContainmentError: If the exit/entry balance is neither 0 nor 1.
        """
        if not self._is_fully_enclosed:
            return False

        enclosure_list: IntersectionList = []
        self.append_all_intersections(point, CONTAINMENT_DIRECTION, enclosure_list)

        enter_count = 0
        exit_count = 0
        for intersection in enclosure_list:
            dotprod = dot(CONTAINMENT_DIRECTION, intersection.surface_normal)
            if dotprod > EPSILON:
                exit_count += 1
            elif dotprod < -EPSILON:
                enter_count += 1
            else:
                raise AmbiguousTransitionError(
                    f"Ambiguous transition at {intersection.point} on "
                    f"{intersection.tag or self.tag!r}"
                )

        balance = exit_count - enter_count
        if balance == 0:
            return False
        if balance == 1:
            return True
        raise ContainmentError(
            f"Cannot determine containment of {point} in {self.tag!r}: "
            f"{exit_count} exits, {enter_count} entries"
        )

    def surface_optics(self, surface_point: Vector, context: Any = None) -> Optics:
        """Return the optics at a point on the surface.

        The base implementation is uniform across the whole solid.
        """
        return self._uniform_optics

    # =========================================================================
    # Positioning
    # =========================================================================

    @abstractmethod
    def rotate_x(self, angle_in_degrees: float) -> SolidObject:
        """Rotate counterclockwise about an x-parallel axis through the center."""

    @abstractmethod
    def rotate_y(self, angle_in_degrees: float) -> SolidObject:
        """Rotate counterclockwise about a y-parallel axis through the center."""

    @abstractmethod
    def rotate_z(self, angle_in_degrees: float) -> SolidObject:
        """Rotate counterclockwise about a z-parallel axis through the center."""

    def translate(self, dx: float, dy: float, dz: float) -> SolidObject:
        """Shift the solid by the given offsets."""
        c = self._center
        self._center = Vector(c.x + dx, c.y + dy, c.z + dz)
        return self

    def move(self, cx: float, cy: float, cz: float) -> SolidObject:
        """Translate the solid so its center lands on (cx, cy, cz)."""
        c = self.center
        return self.translate(cx - c.x, cy - c.y, cz - c.z)

    def move_to(self, new_center: Vector) -> SolidObject:
        """Translate the solid so its center lands on new_center."""
        return self.move(new_center.x, new_center.y, new_center.z)

    # =========================================================================
    # Optics
    # =========================================================================

    def set_uniform_optics(self, optics: Optics) -> SolidObject:
        self._uniform_optics = optics.copy()
        return self

    def set_matte_gloss_balance(
        self,
        gloss_factor: float,
        raw_matte_color: Color,
        raw_gloss_color: Color,
    ) -> SolidObject:
        self._uniform_optics.set_matte_gloss_balance(
            gloss_factor, raw_matte_color, raw_gloss_color
        )
        return self

    def set_full_matte(self, matte_color: Color) -> SolidObject:
        """Make the surface purely diffuse with the given color."""
        return self.set_matte_gloss_balance(0.0, matte_color, Color(0.0, 0.0, 0.0))

    def set_opacity(self, opacity: float) -> SolidObject:
        self._uniform_optics.set_opacity(opacity)
        return self

    def set_refraction(self, refraction: float) -> SolidObject:
        """Set the refractive index of the solid's interior.

        Raises:
            InvalidConfigurationError: If refraction is out of range.
        """
        validate_refraction(refraction)
        self._refractive_index = refraction
        return self

    def __repr__(self) -> str:
        return f"{type(self).__name__}(tag={self.tag!r}, center={self._center!r})"
