"""Preview module: converting rendered images for output."""

from .export import image_to_uint8, save_png, save_png_from_array

__all__ = ["save_png", "save_png_from_array", "image_to_uint8"]
