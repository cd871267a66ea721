"""Core rendering module.

Components:
    vector: Vector and Color value types
    algebra: Closed-form linear, quadratic, cubic, and quartic solvers
    errors: Exception hierarchy
    config: Render configuration and light-transport limits
    integrator: Recursive light transport (matte, reflection, refraction)
    renderer: Render loop with anti-aliasing and ambiguity handling
    image_buffer: Taichi-backed pixel buffer

Tracing runs in Python because it recurses through a polymorphic solid
tree. Per-pixel post-processing of the image buffer runs in Taichi kernels.
"""

from .config import RenderConfig
from .errors import (
    AmbiguousTransitionError,
    ContainmentError,
    GeometryError,
    ImagerError,
    InvalidConfigurationError,
    NegativeColorError,
    PixelOutOfBoundsError,
    SolverError,
)
from .vector import BLACK, EPSILON, WHITE, Color, Vector, cross, dot, reflect

# Note: integrator, renderer, and image_buffer are NOT imported here; they pull
# in the geometry package. Import them directly from their modules.

__all__ = [
    "Vector",
    "Color",
    "BLACK",
    "WHITE",
    "EPSILON",
    "dot",
    "cross",
    "reflect",
    "RenderConfig",
    "ImagerError",
    "InvalidConfigurationError",
    "NegativeColorError",
    "PixelOutOfBoundsError",
    "GeometryError",
    "ContainmentError",
    "AmbiguousTransitionError",
    "SolverError",
]
