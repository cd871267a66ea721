"""Materials module: surface optics and refractive indices."""

from .optics import (
    REFRACTION_AIR,
    REFRACTION_DIAMOND,
    REFRACTION_GLASS,
    REFRACTION_MAXIMUM,
    REFRACTION_MINIMUM,
    REFRACTION_VACUUM,
    REFRACTION_WATER,
    Optics,
    validate_refraction,
)

__all__ = [
    "Optics",
    "validate_refraction",
    "REFRACTION_VACUUM",
    "REFRACTION_AIR",
    "REFRACTION_WATER",
    "REFRACTION_GLASS",
    "REFRACTION_DIAMOND",
    "REFRACTION_MINIMUM",
    "REFRACTION_MAXIMUM",
]
