"""Set operations over solids.

    SetUnion(A, B)          points in A or B
    SetIntersection(A, B)   points in both A and B
    SetComplement(A)        points not in A
    SetDifference(A, B)     points in A but not in B

Combinators own their operands. Once a solid has been handed to a
combinator it should only be moved or rotated through the combinator.

Example:
    >>> from csgtracer.core.vector import Vector
    >>> from csgtracer.geometry.csg import SetDifference
    >>> from csgtracer.geometry.cuboid import Cuboid
    >>> frame = SetDifference(Vector(), Cuboid(2.0, 2.0, 2.0), Cuboid(1.0, 1.0, 3.0))
    >>> frame.contains(Vector(1.5, 0.0, 0.0)), frame.contains(Vector())
    (True, False)
"""

from __future__ import annotations

from csgtracer.core.vector import Vector
from csgtracer.geometry.intersection import Intersection, IntersectionList
from csgtracer.geometry.reorient import rotate_vector_x, rotate_vector_y, rotate_vector_z
from csgtracer.geometry.solid import SolidObject


class SetComplement(SolidObject):
    """Everything outside another solid.

    The complement's surface is its operand's surface with every normal
    reversed. Position and orientation are delegated to the operand.
    """

    def __init__(self, other: SolidObject, tag: str = "SetComplement") -> None:
        super().__init__(other.center, other.is_fully_enclosed, tag)
        self.other = other

    @property
    def center(self) -> Vector:
        return self.other.center

    def contains(self, point: Vector) -> bool:
        return not self.other.contains(point)

    def append_all_intersections(
        self,
        vantage: Vector,
        direction: Vector,
        intersection_list: IntersectionList,
    ) -> None:
        first_new = len(intersection_list)
        self.other.append_all_intersections(vantage, direction, intersection_list)
        for i in range(first_new, len(intersection_list)):
            hit = intersection_list[i]
            intersection_list[i] = Intersection(
                distance_squared=hit.distance_squared,
                point=hit.point,
                surface_normal=-hit.surface_normal,
                solid=hit.solid,
                context=hit.context,
                tag=hit.tag,
            )

    def translate(self, dx: float, dy: float, dz: float) -> SetComplement:
        self.other.translate(dx, dy, dz)
        return self

    def rotate_x(self, angle_in_degrees: float) -> SetComplement:
        self.other.rotate_x(angle_in_degrees)
        return self

    def rotate_y(self, angle_in_degrees: float) -> SetComplement:
        self.other.rotate_y(angle_in_degrees)
        return self

    def rotate_z(self, angle_in_degrees: float) -> SetComplement:
        self.other.rotate_z(angle_in_degrees)
        return self


class SetBinaryOperator(SolidObject):
    """Base for combinators with a left and a right operand.

    The combinator has its own center, which rotations pivot about: each
    operand is first rotated about its own center, then its center is
    revolved about the combinator's.
    """

    def __init__(
        self,
        center: Vector,
        left: SolidObject,
        right: SolidObject,
        tag: str = "",
    ) -> None:
        super().__init__(center, True, tag)
        self.left = left
        self.right = right

    def translate(self, dx: float, dy: float, dz: float) -> SetBinaryOperator:
        super().translate(dx, dy, dz)
        self.left.translate(dx, dy, dz)
        self.right.translate(dx, dy, dz)
        return self

    def rotate_x(self, angle_in_degrees: float) -> SetBinaryOperator:
        self._nested_rotate("rotate_x", rotate_vector_x, angle_in_degrees)
        return self

    def rotate_y(self, angle_in_degrees: float) -> SetBinaryOperator:
        self._nested_rotate("rotate_y", rotate_vector_y, angle_in_degrees)
        return self

    def rotate_z(self, angle_in_degrees: float) -> SetBinaryOperator:
        self._nested_rotate("rotate_z", rotate_vector_z, angle_in_degrees)
        return self

    def _nested_rotate(self, method_name: str, rotate_vector, angle_in_degrees: float) -> None:
        for child in (self.left, self.right):
            getattr(child, method_name)(angle_in_degrees)
            offset = rotate_vector(child.center - self.center, angle_in_degrees)
            child.move_to(self.center + offset)


class SetUnion(SetBinaryOperator):
    """Points belonging to either operand.

    Every surface crossing of either operand is reported, including the
    parts of one operand's surface buried inside the other.
    """

    def __init__(
        self,
        center: Vector,
        left: SolidObject,
        right: SolidObject,
        tag: str = "SetUnion",
    ) -> None:
        super().__init__(center, left, right, tag)

    def contains(self, point: Vector) -> bool:
        return self.left.contains(point) or self.right.contains(point)

    def append_all_intersections(
        self,
        vantage: Vector,
        direction: Vector,
        intersection_list: IntersectionList,
    ) -> None:
        self.left.append_all_intersections(vantage, direction, intersection_list)
        self.right.append_all_intersections(vantage, direction, intersection_list)


class SetIntersection(SetBinaryOperator):
    """Points belonging to both operands."""

    def __init__(
        self,
        center: Vector,
        left: SolidObject,
        right: SolidObject,
        tag: str = "SetIntersection",
    ) -> None:
        super().__init__(center, left, right, tag)

    def contains(self, point: Vector) -> bool:
        return self.left.contains(point) and self.right.contains(point)

    def append_all_intersections(
        self,
        vantage: Vector,
        direction: Vector,
        intersection_list: IntersectionList,
    ) -> None:
        # Only the parts of each surface lying inside the other operand
        # bound the intersection.
        self._append_overlapping(self.left, self.right, vantage, direction, intersection_list)
        self._append_overlapping(self.right, self.left, vantage, direction, intersection_list)

    @staticmethod
    def _append_overlapping(
        a: SolidObject,
        b: SolidObject,
        vantage: Vector,
        direction: Vector,
        intersection_list: IntersectionList,
    ) -> None:
        candidates: IntersectionList = []
        a.append_all_intersections(vantage, direction, candidates)
        intersection_list.extend(hit for hit in candidates if b.contains(hit.point))


class SetDifference(SetIntersection):
    """Points in the left operand that are not in the right operand."""

    def __init__(
        self,
        center: Vector,
        left: SolidObject,
        right: SolidObject,
        tag: str = "SetDifference",
    ) -> None:
        super().__init__(center, left, SetComplement(right), tag)
