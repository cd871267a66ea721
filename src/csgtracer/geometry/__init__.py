"""Geometry module: the solid object model.

Components:
    solid: SolidObject base class and parity-count containment
    intersection: Intersection records and closest-hit selection
    reorient: Object/camera coordinate transforms for primitives
    csg: Set operations (union, intersection, complement, difference)
    cuboid, sphere, torus: Primitives solved in object space
    block: ConcreteBlock composite solid

Ray queries follow the pattern:
    solid.append_all_intersections(vantage, direction, intersection_list)
"""

from .block import ConcreteBlock
from .csg import SetComplement, SetDifference, SetIntersection, SetUnion
from .cuboid import Cuboid
from .intersection import Intersection, pick_closest_intersection
from .reorient import ReorientableSolid, Reorientation
from .solid import SolidObject
from .sphere import Sphere
from .torus import Torus

__all__ = [
    "SolidObject",
    "Intersection",
    "pick_closest_intersection",
    "Reorientation",
    "ReorientableSolid",
    "SetUnion",
    "SetIntersection",
    "SetComplement",
    "SetDifference",
    "Cuboid",
    "Sphere",
    "Torus",
    "ConcreteBlock",
]
