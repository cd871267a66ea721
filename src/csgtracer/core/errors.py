"""Exception hierarchy for the ray tracer.

Every error raised by the package derives from ImagerError so callers can
catch rendering failures in one place. Validation errors also derive from
ValueError and pixel access errors from IndexError, matching what the
builtin types would raise for the same mistake.

Hierarchy:
    ImagerError
        InvalidConfigurationError (also ValueError)
        NegativeColorError (also ValueError)
        PixelOutOfBoundsError (also IndexError)
        GeometryError
            ContainmentError
            AmbiguousTransitionError
        SolverError
"""


class ImagerError(Exception):
    """Base class for all ray tracer errors."""


class InvalidConfigurationError(ImagerError, ValueError):
    """An optics, refraction, color, or render setting is out of range.

    Raised immediately by the setter that received the value. Values are
    never clamped into range.
    """


class NegativeColorError(ImagerError, ValueError):
    """A color has a negative component."""


class PixelOutOfBoundsError(ImagerError, IndexError):
    """Pixel coordinates fall outside the image buffer."""


class GeometryError(ImagerError):
    """The geometry of the scene cannot be resolved for a ray."""


class ContainmentError(GeometryError):
    """Ray parity counting produced an impossible enter/exit balance."""


class AmbiguousTransitionError(GeometryError):
    """A containment ray crossed a surface edge-on.

    The surface normal at the crossing was perpendicular to the ray, so it
    is impossible to tell whether the ray entered or exited the solid.
    """


class SolverError(ImagerError):
    """A polynomial solver self-check failed.

    Only raised by the validation helpers in csgtracer.core.algebra.
    """
