"""Concrete building block: a composite solid built from cuboids.

The block is a large cuboid with two rectangular cavities punched through
it along the t axis, like a standard cinder block:

    SetDifference(
        Cuboid(8, 16, 8),
        SetUnion(Cuboid(6, 6.5, 8.01) at s=+7.5, Cuboid(6, 6.5, 8.01) at s=-7.5),
    )

The cavities are slightly taller than the block so their end faces never
coincide with the block's top and bottom faces.
"""

from __future__ import annotations

from csgtracer.core.vector import Vector
from csgtracer.geometry.csg import SetDifference, SetUnion
from csgtracer.geometry.cuboid import Cuboid
from csgtracer.materials.optics import Optics

BLOCK_HALF_SIZES = (8.0, 16.0, 8.0)
CAVITY_HALF_SIZES = (6.0, 6.5, 8.01)
CAVITY_OFFSET = 7.5


class ConcreteBlock(SetDifference):
    """A block with two cavities, positioned at center.

    Args:
        center: Where to place the middle of the block.
        optics: Surface optics applied to every face, inside and out.
    """

    def __init__(self, center: Vector, optics: Optics, tag: str = "ConcreteBlock") -> None:
        large = Cuboid(*BLOCK_HALF_SIZES, tag="ConcreteBlock body")
        near_cavity = Cuboid(*CAVITY_HALF_SIZES, tag="ConcreteBlock cavity")
        far_cavity = Cuboid(*CAVITY_HALF_SIZES, tag="ConcreteBlock cavity")
        near_cavity.move(0.0, +CAVITY_OFFSET, 0.0)
        far_cavity.move(0.0, -CAVITY_OFFSET, 0.0)

        for solid in (large, near_cavity, far_cavity):
            solid.set_uniform_optics(optics)

        super().__init__(Vector(), large, SetUnion(Vector(), near_cavity, far_cavity), tag)
        self.set_uniform_optics(optics)
        self.move_to(center)
