"""Render configuration and light-transport constants.

The RenderConfig dataclass collects the tunable limits of the recursive
light-transport algorithm. Every field is validated on construction so an
out-of-range value fails before any ray is cast.

Example:
    >>> from csgtracer.core.config import RenderConfig
    >>> config = RenderConfig(max_recursion_depth=8, ambiguity_policy="resolve")
    >>> config.min_optical_intensity
    0.001
"""

from dataclasses import dataclass
from typing import Literal

from csgtracer.core.errors import InvalidConfigurationError

# =============================================================================
# Light Transport Constants
# =============================================================================

# Deepest chain of reflected/refracted rays followed for one camera ray
MAX_OPTICAL_RECURSION_DEPTH = 20

# Ray intensity below which no channel is worth tracing further
MIN_OPTICAL_INTENSITY = 0.001

# Distance a refraction test point is pushed past the surface it just hit
SMALL_SHIFT = 0.001

# How a sample whose containment test hit a surface edge-on is handled:
#   "raise":   the AmbiguousTransitionError aborts the render
#   "resolve": the sample is flagged and replaced by its neighbours' average
AmbiguityPolicy = Literal["raise", "resolve"]


@dataclass
class RenderConfig:
    """Tunable settings for Scene.render().

    Attributes:
        max_recursion_depth: Maximum number of bounces followed per camera
            ray. Deeper rays contribute black.
        min_optical_intensity: Rays whose every channel is below this
            intensity are not traced.
        surface_shift: Offset used to probe which solid lies just beyond a
            refracting surface.
        ambiguity_policy: "raise" (default) or "resolve"; see
            AmbiguityPolicy.
    """

    max_recursion_depth: int = MAX_OPTICAL_RECURSION_DEPTH
    min_optical_intensity: float = MIN_OPTICAL_INTENSITY
    surface_shift: float = SMALL_SHIFT
    ambiguity_policy: AmbiguityPolicy = "raise"

    def __post_init__(self) -> None:
        if self.max_recursion_depth < 1:
            raise InvalidConfigurationError(
                f"max_recursion_depth must be at least 1, got {self.max_recursion_depth}"
            )
        if not 0.0 <= self.min_optical_intensity < 1.0:
            raise InvalidConfigurationError(
                f"min_optical_intensity must be in [0, 1), got {self.min_optical_intensity}"
            )
        if self.surface_shift <= 0.0:
            raise InvalidConfigurationError(
                f"surface_shift must be positive, got {self.surface_shift}"
            )
        if self.ambiguity_policy not in ("raise", "resolve"):
            raise InvalidConfigurationError(
                f"Unknown ambiguity_policy {self.ambiguity_policy!r}"
            )
