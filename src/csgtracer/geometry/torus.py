"""Torus primitive.

In object space the torus is centered at the origin with its axis of
symmetry along t. Its surface is the set of points at distance r (the minor
radius) from the circle of radius R (the major radius) in the r/s plane:

    (sqrt(x^2 + y^2) - R)^2 + z^2 = r^2

Substituting the ray p + u*d and squaring away the root gives a quartic in
u, solved with the closed-form quartic solver. The outward normal is the
gradient of the implicit surface

    (x^2 + y^2 + z^2 + R^2 - r^2)^2 - 4 R^2 (x^2 + y^2) = 0
"""

from __future__ import annotations

from csgtracer.core.algebra import solve_quartic_real
from csgtracer.core.vector import EPSILON, Vector, dot
from csgtracer.geometry.intersection import Intersection, IntersectionList
from csgtracer.geometry.reorient import ReorientableSolid


class Torus(ReorientableSolid):
    """A ring-shaped solid.

    Args:
        major_radius: Distance from the center to the middle of the tube.
        minor_radius: Radius of the tube. Must be smaller than major_radius.
    """

    def __init__(self, major_radius: float, minor_radius: float, tag: str = "Torus") -> None:
        if minor_radius <= 0.0 or major_radius <= minor_radius:
            raise ValueError(
                f"Torus needs 0 < minor_radius < major_radius, got "
                f"R={major_radius}, r={minor_radius}"
            )
        super().__init__(Vector(), True, tag)
        self.major_radius = major_radius
        self.minor_radius = minor_radius

    def object_space_contains(self, point: Vector) -> bool:
        R = self.major_radius
        rho_squared = point.x * point.x + point.y * point.y
        if rho_squared > (R + self.minor_radius) ** 2 + EPSILON:
            return False
        ring_offset = rho_squared**0.5 - R
        return (
            ring_offset * ring_offset + point.z * point.z
            <= self.minor_radius * self.minor_radius + EPSILON
        )

    def surface_normal_at(self, point: Vector) -> Vector:
        """Return the outward unit normal at an object-space surface point."""
        S = point.magnitude_squared() + self.major_radius**2 - self.minor_radius**2
        T = 2.0 * self.major_radius**2
        return Vector(point.x * (S - T), point.y * (S - T), point.z * S).unit_vector()

    def object_space_append_all_intersections(
        self,
        vantage: Vector,
        direction: Vector,
        intersection_list: IntersectionList,
    ) -> None:
        R = self.major_radius
        r = self.minor_radius
        p = vantage
        d = direction

        G = 4.0 * R * R * (d.x * d.x + d.y * d.y)
        H = 8.0 * R * R * (p.x * d.x + p.y * d.y)
        I = 4.0 * R * R * (p.x * p.x + p.y * p.y)
        J = d.magnitude_squared()
        K = 2.0 * dot(p, d)
        L = p.magnitude_squared() + R * R - r * r

        roots = solve_quartic_real(
            J * J,
            2.0 * J * K,
            2.0 * J * L + K * K - G,
            2.0 * K * L - H,
            L * L - I,
        )

        for u in roots:
            if u <= EPSILON:
                continue
            displacement = u * direction
            point = vantage + displacement
            intersection_list.append(
                Intersection(
                    distance_squared=displacement.magnitude_squared(),
                    point=point,
                    surface_normal=self.surface_normal_at(point),
                    solid=self,
                    tag=self.tag,
                )
            )
