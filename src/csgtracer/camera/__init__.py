"""Camera module: pinhole camera at the origin looking down -z."""

from .pinhole import PinholeCamera

__all__ = ["PinholeCamera"]
