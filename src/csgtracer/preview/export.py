"""Image export utilities for rendered images.

Rendered buffers hold linear intensities with no fixed upper bound. For
8-bit output the whole image is normalized by its brightest channel, so the
brightest pixel becomes 255 and relative brightness is preserved.

Supported formats:
    - PNG (8-bit RGB via Pillow)

Example:
    >>> from csgtracer.preview.export import save_png
    >>> image = scene.render(300, 300, 3.0, 2)
    >>> save_png(image, "output.png")
"""

from __future__ import annotations

from typing import TYPE_CHECKING

import numpy as np
import numpy.typing as npt
from PIL import Image as PILImage

from csgtracer.core.errors import NegativeColorError

if TYPE_CHECKING:
    from csgtracer.core.image_buffer import ImageBuffer


def save_png(image: ImageBuffer, filepath: str) -> None:
    """Save a rendered image as an 8-bit RGB PNG.

    Args:
        image: The rendered ImageBuffer.
        filepath: Output file path (should end in .png).

    Raises:
        NegativeColorError: If the image contains negative intensities.
    """
    save_png_from_array(image.to_uint8(), filepath)


def save_png_from_array(image_uint8: npt.NDArray[np.uint8], filepath: str) -> None:
    """Save a (height, width, 3) uint8 array as a PNG file."""
    if image_uint8.ndim != 3 or image_uint8.shape[2] != 3:
        raise ValueError(f"Expected a (height, width, 3) array, got shape {image_uint8.shape}")
    pil_image = PILImage.fromarray(np.ascontiguousarray(image_uint8, dtype=np.uint8))
    pil_image.save(filepath)


def image_to_uint8(image: npt.NDArray[np.float64]) -> npt.NDArray[np.uint8]:
    """Normalize a linear (height, width, 3) float image to uint8.

    Mirrors ImageBuffer.to_uint8() for plain NumPy arrays: each channel
    becomes int(255 * value / max), clamped to 0..255, where max is the
    largest channel in the image (1.0 for an all-black image).

    Raises:
        NegativeColorError: If the image contains negative values.
    """
    if np.any(image < 0.0):
        raise NegativeColorError("Negative color values not allowed")
    max_value = float(image.max()) if image.size else 0.0
    if max_value <= 0.0:
        max_value = 1.0
    scaled = (255.0 * image / max_value).astype(np.int64)
    return np.clip(scaled, 0, 255).astype(np.uint8)
