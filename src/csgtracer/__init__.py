"""Constructive solid geometry ray tracer.

This package renders scenes built from solids combined with set operations
(union, intersection, complement, difference), using recursive ray tracing
with matte, gloss, reflection, and refraction.

Subpackages:
    core: Vector/color algebra, polynomial solvers, light transport,
        render loop, and the Taichi-backed image buffer
    geometry: Solid object model, set operations, and primitives
    materials: Surface optics and refractive indices
    scene: Scene container and light sources
    camera: Pinhole camera ray generation
    preview: PNG export
"""

__version__ = "0.1.0"
