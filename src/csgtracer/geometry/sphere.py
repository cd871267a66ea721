"""Sphere primitive.

The ray-sphere intersection is found by solving

    |vantage + u * direction|^2 = radius^2

in object space (sphere centered at the origin), which expands to the
quadratic

    (d.d) u^2 + 2 (p.d) u + (p.p - radius^2) = 0

Both real roots beyond EPSILON are surface crossings: the nearer one enters
the sphere and the farther one exits (or, from inside, only the exit).

Example:
    >>> from csgtracer.core.vector import Vector
    >>> from csgtracer.geometry.sphere import Sphere
    >>> ball = Sphere(2.0).move(0.0, 0.0, -10.0)
    >>> hit = ball.find_closest_intersection(Vector(), Vector(0.0, 0.0, -1.0))
    >>> hit.point
    Vector(x=0.0, y=0.0, z=-8.0)
"""

from __future__ import annotations

from csgtracer.core.algebra import solve_quadratic_real
from csgtracer.core.vector import EPSILON, Vector, dot
from csgtracer.geometry.intersection import Intersection, IntersectionList
from csgtracer.geometry.reorient import ReorientableSolid


class Sphere(ReorientableSolid):
    """A sphere of the given radius centered on the solid's center."""

    def __init__(self, radius: float, tag: str = "Sphere") -> None:
        if radius <= 0.0:
            raise ValueError(f"Sphere radius must be positive, got {radius}")
        super().__init__(Vector(), True, tag)
        self.radius = radius

    def object_space_contains(self, point: Vector) -> bool:
        return point.magnitude_squared() <= self.radius * self.radius + EPSILON

    def object_space_append_all_intersections(
        self,
        vantage: Vector,
        direction: Vector,
        intersection_list: IntersectionList,
    ) -> None:
        a = direction.magnitude_squared()
        b = 2.0 * dot(vantage, direction)
        c = vantage.magnitude_squared() - self.radius * self.radius

        for u in solve_quadratic_real(a, b, c):
            if u <= EPSILON:
                continue
            displacement = u * direction
            point = vantage + displacement
            intersection_list.append(
                Intersection(
                    distance_squared=displacement.magnitude_squared(),
                    point=point,
                    surface_normal=point / self.radius,
                    solid=self,
                    tag=self.tag,
                )
            )
