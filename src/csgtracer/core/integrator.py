"""Recursive light transport for CSG scenes.

This module implements the shading model used by Scene.render(). A camera
ray is traced into the scene; at the closest surface it hits, the color is
built from three contributions:

1. Matte: diffuse light from every point light with a clear line of sight,
   weighted by the cosine of incidence and the inverse square distance.
2. Refraction: when the surface is not fully opaque, a transmitted ray is
   bent by Snell's law and traced into the next medium. The fraction of
   light reflected at the interface (R) follows the polarized-reflection
   formula.
3. Reflection: a mirror ray is traced carrying both the surface's gloss
   and the light rejected by refraction.

Every recursive ray carries an intensity that is the incoming intensity
multiplied by factors no larger than one, and every returned color is
already scaled by its ray's intensity. Recursion stops at the configured
depth or once a ray's intensity is too weak to matter.

All functions read the scene and never modify it. The only per-ray state is
the TraceContext, which is passed down explicitly.

Example:
    >>> from csgtracer.core.integrator import trace_ray
    >>> from csgtracer.core.vector import Vector, WHITE
    >>> color = trace_ray(scene, Vector(), Vector(0.0, 0.0, -1.0),
    ...                   scene.ambient_refraction, WHITE, 0)
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import TYPE_CHECKING

from csgtracer.core.algebra import solve_quadratic_real
from csgtracer.core.errors import GeometryError
from csgtracer.core.vector import BLACK, EPSILON, WHITE, Color, Vector, dot, reflect
from csgtracer.geometry.intersection import Intersection
from csgtracer.logging_config import get_logger

if TYPE_CHECKING:
    from csgtracer.geometry.solid import SolidObject
    from csgtracer.scene.manager import Scene

logger = get_logger(__name__)

# Alignment a refracted candidate must beat to be accepted
MIN_REFRACTION_ALIGNMENT = -0.0001

# How far past +/-1 a cosine may drift from rounding before it is an error
COSINE_SLOP = 1.0001


@dataclass(frozen=True)
class TraceContext:
    """Per-ray diagnostic state.

    Attributes:
        pixel_i: Column of the sample being traced.
        pixel_j: Row of the sample being traced.
        is_debug: Whether to log every step of this trace at DEBUG level.
    """

    pixel_i: int = -1
    pixel_j: int = -1
    is_debug: bool = False


def _debug(context: TraceContext | None, message: str, *args) -> None:
    if context is not None and context.is_debug:
        logger.debug("[%d, %d] " + message, context.pixel_i, context.pixel_j, *args)


def is_significant(intensity: Color, min_optical_intensity: float) -> bool:
    """Return whether any channel of a ray intensity is worth tracing."""
    return (
        intensity.red >= min_optical_intensity
        or intensity.green >= min_optical_intensity
        or intensity.blue >= min_optical_intensity
    )


# =============================================================================
# Scene Queries
# =============================================================================


def find_closest_intersection(
    solids: list[SolidObject], vantage: Vector, direction: Vector
) -> Intersection | None:
    """Return the nearest intersection with any solid, or None.

    Ties go to the solid added to the scene first.
    """
    closest = None
    for solid in solids:
        hit = solid.find_closest_intersection(vantage, direction)
        if hit is not None and (closest is None or hit.distance_squared < closest.distance_squared):
            closest = hit
    return closest


def primary_container(solids: list[SolidObject], point: Vector) -> SolidObject | None:
    """Return the first solid in scene order that contains point."""
    for solid in solids:
        if solid.contains(point):
            return solid
    return None


def has_clear_line_of_sight(solids: list[SolidObject], p1: Vector, p2: Vector) -> bool:
    """Return whether no surface lies strictly between p1 and p2."""
    direction = p2 - p1
    gap_squared = direction.magnitude_squared()
    for solid in solids:
        hit = solid.find_closest_intersection(p1, direction)
        if hit is not None and hit.distance_squared < gap_squared:
            return False
    return True


# =============================================================================
# Light Transport
# =============================================================================


def trace_ray(
    scene: Scene,
    vantage: Vector,
    direction: Vector,
    refractive_index: float,
    ray_intensity: Color,
    recursion_depth: int,
    context: TraceContext | None = None,
) -> Color:
    """Return the light arriving at vantage from the given direction.

    Args:
        scene: The scene being rendered.
        vantage: Ray origin.
        direction: Ray direction (need not be normalized).
        refractive_index: Index of the medium the ray travels through.
        ray_intensity: Fraction of light (per channel) this ray can carry
            back to the camera.
        recursion_depth: Number of surfaces already visited.
        context: Optional diagnostics for the pixel being traced.

    Returns:
        The color contribution, already scaled by ray_intensity.
    """
    intersection = find_closest_intersection(scene.solids, vantage, direction)
    if intersection is None:
        _debug(context, "depth %d: no hit, background", recursion_depth)
        return scene.background_color * ray_intensity

    _debug(
        context,
        "depth %d: hit %r at %s",
        recursion_depth,
        intersection.tag,
        intersection.point,
    )
    return calculate_lighting(
        scene,
        intersection,
        direction,
        refractive_index,
        ray_intensity,
        recursion_depth + 1,
        context,
    )


def calculate_lighting(
    scene: Scene,
    intersection: Intersection,
    direction: Vector,
    refractive_index: float,
    ray_intensity: Color,
    recursion_depth: int,
    context: TraceContext | None = None,
) -> Color:
    """Combine matte, refracted, and reflected light at a surface point."""
    config = scene.config
    if recursion_depth > config.max_recursion_depth:
        return BLACK
    if not is_significant(ray_intensity, config.min_optical_intensity):
        return BLACK

    optics = intersection.solid.surface_optics(intersection.point, intersection.context)
    opacity = optics.opacity
    transparency = 1.0 - opacity

    color = BLACK

    if opacity > 0.0:
        matte = calculate_matte(scene, intersection)
        color = color + opacity * optics.matte_color * ray_intensity * matte

    refractive_reflection_factor = 0.0
    if transparency > 0.0:
        refracted, refractive_reflection_factor = calculate_refraction(
            scene,
            intersection,
            direction,
            refractive_index,
            transparency * ray_intensity,
            recursion_depth,
            context,
        )
        color = color + refracted

    reflection_intensity = (
        (transparency * refractive_reflection_factor) * WHITE + opacity * optics.gloss_color
    ) * ray_intensity
    if is_significant(reflection_intensity, config.min_optical_intensity):
        color = color + calculate_reflection(
            scene,
            intersection,
            direction,
            refractive_index,
            reflection_intensity,
            recursion_depth,
            context,
        )

    return color


def calculate_matte(scene: Scene, intersection: Intersection) -> Color:
    """Sum the diffuse light reaching a surface point from every visible light.

    The result is not scaled by the surface's matte color or the ray
    intensity; calculate_lighting() applies both. A light sitting exactly on
    the surface point has no direction and contributes nothing.
    """
    total = BLACK
    for light in scene.lights:
        to_light = light.location - intersection.point
        if to_light.magnitude_squared() == 0.0:
            continue
        if not has_clear_line_of_sight(scene.solids, intersection.point, light.location):
            continue
        incidence = dot(intersection.surface_normal, to_light.unit_vector())
        if incidence > 0.0:
            total = total + (incidence / to_light.magnitude_squared()) * light.color
    return total


def calculate_reflection(
    scene: Scene,
    intersection: Intersection,
    incident_direction: Vector,
    refractive_index: float,
    ray_intensity: Color,
    recursion_depth: int,
    context: TraceContext | None = None,
) -> Color:
    """Trace the mirror-reflected ray leaving a surface point."""
    bounce = reflect(incident_direction, intersection.surface_normal)
    return trace_ray(
        scene,
        intersection.point,
        bounce,
        refractive_index,
        ray_intensity,
        recursion_depth,
        context,
    )


def polarized_reflection(
    n1: float,
    n2: float,
    cos_a1: float,
    cos_a2: float,
) -> float:
    """Fraction of light reflected at an interface between two media.

    Args:
        n1: Refractive index the light leaves.
        n2: Refractive index the light enters.
        cos_a1: Cosine of the incident angle.
        cos_a2: Cosine of the refracted angle.

    Returns:
        Reflectance in [0, 1]. A vanishing denominator counts as total
        reflection.
    """
    left = n1 * cos_a1
    right = n2 * cos_a2
    numer = left - right
    denom = left + right
    denom *= denom
    if denom < EPSILON:
        return 1.0
    reflection = (numer * numer) / denom
    return min(reflection, 1.0)


def calculate_refraction(
    scene: Scene,
    intersection: Intersection,
    direction: Vector,
    source_refractive_index: float,
    ray_intensity: Color,
    recursion_depth: int,
    context: TraceContext | None = None,
) -> tuple[Color, float]:
    """Trace the transmitted ray through a surface.

    The medium on the far side is whichever solid contains a point just
    past the surface (or the scene's ambient medium if none does).

    Returns:
        (color, reflection_factor): the transmitted light, already scaled by
        its intensity, and the fraction R of the incoming light reflected at
        the interface instead. Total internal reflection gives black and
        R = 1.

    Raises:
        GeometryError: If the incidence cosine is out of range or no
            refracted direction can be found.
    """
    dir_unit = direction.unit_vector()
    normal = intersection.surface_normal

    cos_a1 = dot(dir_unit, normal)
    if cos_a1 <= -1.0:
        if cos_a1 < -COSINE_SLOP:
            raise GeometryError(f"Dot product too small: {cos_a1}")
        cos_a1 = -1.0
    elif cos_a1 >= +1.0:
        if cos_a1 > +COSINE_SLOP:
            raise GeometryError(f"Dot product too large: {cos_a1}")
        cos_a1 = +1.0
    sin_a1 = math.sqrt(1.0 - cos_a1 * cos_a1)

    test_point = intersection.point + scene.config.surface_shift * dir_unit
    container = primary_container(scene.solids, test_point)
    target_refractive_index = (
        container.refractive_index if container is not None else scene.ambient_refraction
    )

    ratio = source_refractive_index / target_refractive_index
    sin_a2 = ratio * sin_a1
    if abs(sin_a2) >= 1.0:
        _debug(context, "total internal reflection at %s", intersection.point)
        return BLACK, 1.0

    # The refracted ray is dir_unit + k*normal where
    # k^2 + 2k cos(a1) + 1 - 1/ratio^2 = 0.
    roots = solve_quadratic_real(1.0, 2.0 * cos_a1, 1.0 - 1.0 / (ratio * ratio))

    max_alignment = MIN_REFRACTION_ALIGNMENT
    refract_dir = None
    for k in roots:
        candidate = dir_unit + k * normal
        alignment = dot(dir_unit, candidate)
        if alignment > max_alignment:
            max_alignment = alignment
            refract_dir = candidate

    if refract_dir is None or max_alignment <= 0.0:
        raise GeometryError(
            f"Refraction failure at {intersection.point}: no refracted direction"
        )

    cos_a2 = math.sqrt(1.0 - sin_a2 * sin_a2)
    if cos_a1 < 0.0:
        cos_a2 = -cos_a2

    reflection_factor = polarized_reflection(
        source_refractive_index, target_refractive_index, cos_a1, cos_a2
    )

    color = trace_ray(
        scene,
        intersection.point,
        refract_dir,
        target_refractive_index,
        (1.0 - reflection_factor) * ray_intensity,
        recursion_depth,
        context,
    )
    return color, reflection_factor
