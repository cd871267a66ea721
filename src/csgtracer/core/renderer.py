"""Render loop: from a scene and a camera to a finished ImageBuffer.

render_scene() traces one primary ray per sample of the camera's enlarged
grid, post-processes the samples on the Taichi image buffer, and returns the
output-sized image:

1. Trace every sample (rows top to bottom). With ambiguity_policy="resolve",
   a sample whose trace raised AmbiguousTransitionError is flagged instead
   of aborting the render.
2. Replace flagged samples with the average of their unflagged neighbours.
3. Average anti_alias_factor x anti_alias_factor blocks down to the output
   size.

Example:
    >>> from csgtracer.camera.pinhole import PinholeCamera
    >>> from csgtracer.core.renderer import render_scene
    >>> camera = PinholeCamera(pixels_wide=64, pixels_high=64, zoom=3.0)
    >>> image = render_scene(scene, camera)
    >>> image.to_uint8().shape
    (64, 64, 3)
"""

from __future__ import annotations

import time
from collections.abc import Callable
from typing import TYPE_CHECKING

import numpy as np

from csgtracer.camera.pinhole import PinholeCamera
from csgtracer.core.errors import AmbiguousTransitionError
from csgtracer.core.image_buffer import ImageBuffer
from csgtracer.core.integrator import TraceContext, trace_ray
from csgtracer.core.vector import WHITE
from csgtracer.logging_config import get_logger

if TYPE_CHECKING:
    from csgtracer.scene.manager import Scene

logger = get_logger(__name__)

# Callback receives (rows_completed, total_rows) of the enlarged grid
ProgressCallback = Callable[[int, int], None]


def render_scene(
    scene: Scene,
    camera: PinholeCamera,
    callback: ProgressCallback | None = None,
) -> ImageBuffer:
    """Render scene through camera.

    Args:
        scene: The scene to render. Its config selects the ambiguity policy
            and recursion limits.
        camera: Image size, zoom, and anti-aliasing factor.
        callback: Optional progress callback, called after each row.

    Returns:
        An ImageBuffer of camera.pixels_wide x camera.pixels_high pixels.

    Raises:
        AmbiguousTransitionError: If a sample hits a surface edge-on and the
            scene's ambiguity_policy is "raise".
        ContainmentError: If a containment test is inconsistent.
    """
    large_width = camera.large_width
    large_height = camera.large_height
    resolve_ambiguity = scene.config.ambiguity_policy == "resolve"
    debug_points = scene.debug_points
    factor = camera.anti_alias_factor

    logger.info(
        "Rendering %dx%d (anti-alias %d, %d solids, %d lights)",
        camera.pixels_wide,
        camera.pixels_high,
        factor,
        len(scene.solids),
        len(scene.lights),
    )
    start_time = time.perf_counter()

    colors = np.zeros((large_height, large_width, 3), dtype=np.float64)
    ambiguous = np.zeros((large_height, large_width), dtype=bool)
    vantage = camera.vantage

    for j in range(large_height):
        for i in range(large_width):
            is_debug = (i // factor, j // factor) in debug_points
            context = TraceContext(i, j, is_debug)
            try:
                color = trace_ray(
                    scene,
                    vantage,
                    camera.ray_direction(i, j),
                    scene.ambient_refraction,
                    WHITE,
                    0,
                    context,
                )
            except AmbiguousTransitionError:
                if not resolve_ambiguity:
                    logger.error("Ambiguous transition tracing sample (%d, %d)", i, j)
                    raise
                ambiguous[j, i] = True
                continue
            colors[j, i] = (color.red, color.green, color.blue)

        if callback is not None:
            callback(j + 1, large_height)

    buffer = ImageBuffer.from_numpy(colors, ambiguous)

    resolved = buffer.resolve_ambiguous_pixels()
    if resolved > 0:
        logger.warning("Resolved %d ambiguous samples from their neighbours", resolved)

    # Output normalization later uses the max of this averaged image
    image = buffer.downsample(factor)

    logger.info("Render finished in %.2f s", time.perf_counter() - start_time)
    return image
