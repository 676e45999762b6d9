"""Environment models for the lander: terrain, platform, ranging."""

from lander.environment.terrain import Terrain

__all__ = [
    "Terrain",
]
