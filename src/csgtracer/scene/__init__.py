"""Scene module: solids, point lights, and the render entry point."""

from .manager import LightSource, Scene, SceneConfig

__all__ = ["Scene", "LightSource", "SceneConfig"]
