"""Camera/object coordinate transforms for primitives.

Primitives solve their intersection math in a local "object space" where the
solid sits at the origin aligned with the axes. A Reorientation tracks how
that local frame is currently rotated relative to camera (world) space:

    - r, s, t: the object-space axes expressed in camera coordinates
    - x, y, z: the camera axes expressed in object coordinates (the inverse,
      i.e. the transpose of the orthonormal r/s/t matrix)

ReorientableSolid wraps a primitive's object-space queries with the
transforms so that a ray arriving in camera space is converted, solved, and
its hits converted back.
"""

from __future__ import annotations

import math
from abc import abstractmethod
from typing import Any

from csgtracer.core.vector import Vector, dot, radians_from_degrees
from csgtracer.geometry.intersection import Intersection, IntersectionList
from csgtracer.geometry.solid import SolidObject
from csgtracer.materials.optics import Optics


def _rotate_about_x(v: Vector, a: float, b: float) -> Vector:
    return Vector(v.x, a * v.y - b * v.z, a * v.z + b * v.y)


def _rotate_about_y(v: Vector, a: float, b: float) -> Vector:
    return Vector(a * v.x + b * v.z, v.y, a * v.z - b * v.x)


def _rotate_about_z(v: Vector, a: float, b: float) -> Vector:
    return Vector(a * v.x - b * v.y, a * v.y + b * v.x, v.z)


def rotate_vector_x(v: Vector, angle_in_degrees: float) -> Vector:
    """Rotate v counterclockwise about the x-axis."""
    radians = radians_from_degrees(angle_in_degrees)
    return _rotate_about_x(v, math.cos(radians), math.sin(radians))


def rotate_vector_y(v: Vector, angle_in_degrees: float) -> Vector:
    """Rotate v counterclockwise about the y-axis."""
    radians = radians_from_degrees(angle_in_degrees)
    return _rotate_about_y(v, math.cos(radians), math.sin(radians))


def rotate_vector_z(v: Vector, angle_in_degrees: float) -> Vector:
    """Rotate v counterclockwise about the z-axis."""
    radians = radians_from_degrees(angle_in_degrees)
    return _rotate_about_z(v, math.cos(radians), math.sin(radians))


class Reorientation:
    """Orthonormal basis relating object space to camera space.

    Attributes:
        r_dir, s_dir, t_dir: Object axes in camera coordinates.
        x_dir, y_dir, z_dir: Camera axes in object coordinates.
    """

    def __init__(self) -> None:
        self.r_dir = Vector(1.0, 0.0, 0.0)
        self.s_dir = Vector(0.0, 1.0, 0.0)
        self.t_dir = Vector(0.0, 0.0, 1.0)
        self._update_inverse()

    def rotate_x(self, angle_in_degrees: float) -> None:
        self._apply(_rotate_about_x, angle_in_degrees)

    def rotate_y(self, angle_in_degrees: float) -> None:
        self._apply(_rotate_about_y, angle_in_degrees)

    def rotate_z(self, angle_in_degrees: float) -> None:
        self._apply(_rotate_about_z, angle_in_degrees)

    def _apply(self, rotation, angle_in_degrees: float) -> None:
        radians = radians_from_degrees(angle_in_degrees)
        a = math.cos(radians)
        b = math.sin(radians)
        self.r_dir = rotation(self.r_dir, a, b)
        self.s_dir = rotation(self.s_dir, a, b)
        self.t_dir = rotation(self.t_dir, a, b)
        self._update_inverse()

    def _update_inverse(self) -> None:
        # Transpose of the (r, s, t) rotation matrix
        r, s, t = self.r_dir, self.s_dir, self.t_dir
        self.x_dir = Vector(r.x, s.x, t.x)
        self.y_dir = Vector(r.y, s.y, t.y)
        self.z_dir = Vector(r.z, s.z, t.z)

    def object_dir(self, camera_dir: Vector) -> Vector:
        """Express a camera-space direction in object coordinates."""
        return Vector(
            dot(camera_dir, self.r_dir),
            dot(camera_dir, self.s_dir),
            dot(camera_dir, self.t_dir),
        )

    def object_point(self, camera_point: Vector, center: Vector) -> Vector:
        """Express a camera-space point relative to center in object coordinates."""
        return self.object_dir(camera_point - center)

    def camera_dir(self, object_dir: Vector) -> Vector:
        """Express an object-space direction in camera coordinates."""
        return Vector(
            dot(object_dir, self.x_dir),
            dot(object_dir, self.y_dir),
            dot(object_dir, self.z_dir),
        )

    def camera_point(self, object_point: Vector, center: Vector) -> Vector:
        """Express an object-space point in camera coordinates."""
        return center + self.camera_dir(object_point)


class ReorientableSolid(SolidObject):
    """A primitive that can be rotated arbitrarily about its own center.

    Subclasses implement the object_space_* hooks in their local frame; this
    class converts rays, points, and normals between the two spaces.
    """

    def __init__(
        self,
        center: Vector | None = None,
        is_fully_enclosed: bool = True,
        tag: str = "",
    ) -> None:
        super().__init__(center, is_fully_enclosed, tag)
        self.reorientation = Reorientation()

    @abstractmethod
    def object_space_append_all_intersections(
        self,
        vantage: Vector,
        direction: Vector,
        intersection_list: IntersectionList,
    ) -> None:
        """Append intersections for a ray given in object coordinates.

        Appended points and normals are in object coordinates too.
        """

    def object_space_contains(self, point: Vector) -> bool:
        """Containment test in object coordinates; parity counting by default."""
        return self.parity_contains(self.reorientation.camera_point(point, self.center))

    def object_space_surface_optics(self, point: Vector, context: Any) -> Optics:
        return self.uniform_optics

    def append_all_intersections(
        self,
        vantage: Vector,
        direction: Vector,
        intersection_list: IntersectionList,
    ) -> None:
        orient = self.reorientation
        object_vantage = orient.object_point(vantage, self.center)
        object_direction = orient.object_dir(direction)

        first_new = len(intersection_list)
        self.object_space_append_all_intersections(
            object_vantage, object_direction, intersection_list
        )

        for i in range(first_new, len(intersection_list)):
            hit = intersection_list[i]
            intersection_list[i] = Intersection(
                distance_squared=hit.distance_squared,
                point=orient.camera_point(hit.point, self.center),
                surface_normal=orient.camera_dir(hit.surface_normal),
                solid=self,
                context=hit.context,
                tag=hit.tag,
            )

    def contains(self, point: Vector) -> bool:
        return self.object_space_contains(self.reorientation.object_point(point, self.center))

    def surface_optics(self, surface_point: Vector, context: Any = None) -> Optics:
        object_point = self.reorientation.object_point(surface_point, self.center)
        return self.object_space_surface_optics(object_point, context)

    def rotate_x(self, angle_in_degrees: float) -> ReorientableSolid:
        self.reorientation.rotate_x(angle_in_degrees)
        return self

    def rotate_y(self, angle_in_degrees: float) -> ReorientableSolid:
        self.reorientation.rotate_y(angle_in_degrees)
        return self

    def rotate_z(self, angle_in_degrees: float) -> ReorientableSolid:
        self.reorientation.rotate_z(angle_in_degrees)
        return self
