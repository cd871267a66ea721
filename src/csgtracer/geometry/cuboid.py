"""Cuboid primitive: a rectangular box with independent half-sizes.

In object space the cuboid occupies |r| <= a, |s| <= b, |t| <= c. A ray is
tested against each pair of parallel face planes (slabs); a hit on a plane
counts only when the point lies within the other two half-sizes.

Faces are tagged by their outward normal:

    +r "right face"   -r "left face"
    +s "front face"   -s "back face"
    +t "top face"     -t "bottom face"

Example:
    >>> from csgtracer.core.vector import Vector
    >>> from csgtracer.geometry.cuboid import Cuboid
    >>> box = Cuboid(2.0, 2.0, 2.0).move(0.0, 0.0, -50.0)
    >>> box.contains(Vector(0.0, 0.0, -49.0))
    True
"""

from __future__ import annotations

from csgtracer.core.vector import EPSILON, Vector
from csgtracer.geometry.intersection import Intersection, IntersectionList
from csgtracer.geometry.reorient import ReorientableSolid

# (axis index, sign, outward normal, tag)
_FACES = (
    (0, +1.0, Vector(+1.0, 0.0, 0.0), "right face"),
    (0, -1.0, Vector(-1.0, 0.0, 0.0), "left face"),
    (1, +1.0, Vector(0.0, +1.0, 0.0), "front face"),
    (1, -1.0, Vector(0.0, -1.0, 0.0), "back face"),
    (2, +1.0, Vector(0.0, 0.0, +1.0), "top face"),
    (2, -1.0, Vector(0.0, 0.0, -1.0), "bottom face"),
)


class Cuboid(ReorientableSolid):
    """An axis-aligned (in object space) rectangular box.

    Args:
        a: Half-size along the r axis.
        b: Half-size along the s axis.
        c: Half-size along the t axis.
    """

    def __init__(self, a: float, b: float, c: float, tag: str = "Cuboid") -> None:
        if a <= 0.0 or b <= 0.0 or c <= 0.0:
            raise ValueError(f"Cuboid half-sizes must be positive, got ({a}, {b}, {c})")
        super().__init__(Vector(), True, tag)
        self.a = a
        self.b = b
        self.c = c

    @property
    def half_sizes(self) -> tuple[float, float, float]:
        return (self.a, self.b, self.c)

    def object_space_contains(self, point: Vector) -> bool:
        return (
            abs(point.x) <= self.a + EPSILON
            and abs(point.y) <= self.b + EPSILON
            and abs(point.z) <= self.c + EPSILON
        )

    def object_space_append_all_intersections(
        self,
        vantage: Vector,
        direction: Vector,
        intersection_list: IntersectionList,
    ) -> None:
        half = self.half_sizes
        v = tuple(vantage)
        d = tuple(direction)

        for axis, sign, normal, tag in _FACES:
            if abs(d[axis]) <= EPSILON:
                continue

            u = (sign * half[axis] - v[axis]) / d[axis]
            if u <= EPSILON:
                continue

            displacement = u * direction
            point = vantage + displacement
            if not self.object_space_contains(point):
                continue

            intersection_list.append(
                Intersection(
                    distance_squared=displacement.magnitude_squared(),
                    point=point,
                    surface_normal=normal,
                    solid=self,
                    tag=tag,
                )
            )
