"""Intersection records and closest-hit selection.

An Intersection describes one place where a ray crosses the boundary of a
solid. Lists of intersections are built fresh for every ray query and are
never stored on the solids themselves, so a solid tree can be queried from
several places at once.

Example:
    >>> from csgtracer.geometry.cuboid import Cuboid
    >>> from csgtracer.core.vector import Vector
    >>> box = Cuboid(1.0, 1.0, 1.0).move(0.0, 0.0, -10.0)
    >>> hits = []
    >>> box.append_all_intersections(Vector(), Vector(0.0, 0.0, -1.0), hits)
    >>> closest = pick_closest_intersection(hits)
    >>> closest.tag
    'top face'
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

from csgtracer.core.vector import Vector

if TYPE_CHECKING:
    from csgtracer.geometry.solid import SolidObject

# Squared distance reported by an intersection that has not been filled in
UNSET_DISTANCE_SQUARED = 1.0e20


@dataclass
class Intersection:
    """Record of a ray crossing a solid's surface.

    Attributes:
        distance_squared: Squared distance from the ray origin to the point.
        point: The crossing point, in camera (world) space.
        surface_normal: Unit normal at the point, pointing out of the solid.
        solid: The solid whose surface was hit. Not owned by the record.
        context: Optional primitive-specific data (e.g. for surface optics).
        tag: Short human-readable description of the surface hit.
    """

    distance_squared: float = UNSET_DISTANCE_SQUARED
    point: Vector = Vector()
    surface_normal: Vector = Vector()
    solid: SolidObject | None = None
    context: Any = None
    tag: str = ""


IntersectionList = list[Intersection]


def pick_closest_intersection(intersection_list: IntersectionList) -> Intersection | None:
    """Return the intersection nearest to the ray origin.

    When several entries share the minimum distance the first one in the
    list wins.

    Returns:
        The closest intersection, or None if the list is empty.
    """
    closest = None
    for intersection in intersection_list:
        if closest is None or intersection.distance_squared < closest.distance_squared:
            closest = intersection
    return closest
