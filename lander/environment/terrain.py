"""Terrain model with landing platform and ranging.

Terrain is a ground-surface profile: for every integer x column the screen y
of the ground (y grows downward, so larger y is lower). Anything at or below
the surface is solid. The landing platform is a flat segment carved into the
profile at the platform height.

Ranging follows the sonar convention: bearings are degrees clockwise from
vertical, so bearing 0 looks straight up and bearing 180 straight down.
"""

from dataclasses import dataclass, field

import numpy as np
from beartype import beartype
from numpy.typing import NDArray

from lander.constants import SONAR_BINS, SONAR_INVALID, WORLD_SIZE
from lander.interface import PlatformLocation

# =============================================================================
# Terrain
# =============================================================================


@beartype
@dataclass
class Terrain:
    """Ground profile with a landing platform.

    Attributes:
        heights: Ground surface y per x column [px], length = world width
        platform_x: Platform centre x [px]
        platform_y: Platform surface y [px]
        platform_half_width: Half the platform length [px]
    """
    heights: NDArray[np.float64]
    platform_x: float
    platform_y: float
    platform_half_width: float = 50.0

    _columns: NDArray[np.float64] = field(init=False, repr=False)

    def __post_init__(self) -> None:
        """Validate the profile and carve the platform into it."""
        if self.heights.ndim != 1 or len(self.heights) < 2:
            raise ValueError("Terrain heights must be a 1D array with at least 2 columns")
        if self.platform_half_width <= 0:
            raise ValueError("Platform half width must be positive")
        if not 0.0 <= self.platform_x < len(self.heights):
            raise ValueError(
                f"Platform x={self.platform_x} outside terrain of width {len(self.heights)}"
            )

        self.heights = self.heights.copy()
        self._columns = np.arange(len(self.heights), dtype=np.float64)
        on_platform = np.abs(self._columns - self.platform_x) <= self.platform_half_width
        self.heights[on_platform] = self.platform_y

    @classmethod
    def flat(
        cls,
        ground_y: float = 1000.0,
        platform_x: float = 512.0,
        platform_half_width: float = 50.0,
        width: float = WORLD_SIZE,
    ) -> "Terrain":
        """Flat ground with the platform flush to the surface."""
        return cls(
            heights=np.full(int(width), ground_y, dtype=np.float64),
            platform_x=platform_x,
            platform_y=ground_y,
            platform_half_width=platform_half_width,
        )

    @classmethod
    def from_profile(
        cls,
        heights: NDArray[np.float64],
        platform_x: float,
        platform_y: float,
        platform_half_width: float = 50.0,
    ) -> "Terrain":
        """Terrain from an arbitrary ground profile."""
        return cls(
            heights=np.asarray(heights, dtype=np.float64),
            platform_x=platform_x,
            platform_y=platform_y,
            platform_half_width=platform_half_width,
        )

    @property
    def width(self) -> float:
        """World width [px]."""
        return float(len(self.heights))

    @property
    def platform(self) -> PlatformLocation:
        """Exact platform location."""
        return PlatformLocation(x=self.platform_x, y=self.platform_y)

    def ground_at(self, x: float) -> float:
        """Ground surface y below horizontal position x [px]."""
        return float(np.interp(x, self._columns, self.heights))

    def on_platform(self, x: float) -> bool:
        """Whether x lies over the platform."""
        return bool(abs(x - self.platform_x) <= self.platform_half_width)

    def is_solid(self, x: NDArray[np.float64], y: NDArray[np.float64]) -> NDArray[np.bool_]:
        """Vectorised solid test. Points outside the world columns are empty."""
        inside = (x >= 0.0) & (x <= self.width - 1.0)
        ground = np.interp(x, self._columns, self.heights)
        return inside & (y >= ground)

    # =========================================================================
    # Ranging
    # =========================================================================

    def _march(
        self,
        x: float,
        y: float,
        bearings_deg: NDArray[np.float64],
        max_range: float,
        step: float,
    ) -> NDArray[np.float64]:
        """Distance to first solid point along each bearing, or SONAR_INVALID."""
        ranges = np.arange(step, max_range + step, step)
        bearings = np.radians(bearings_deg)

        # Screen frame: bearing 0 is up, which is -y
        px = x + np.outer(np.sin(bearings), ranges)
        py = y - np.outer(np.cos(bearings), ranges)

        hit = self.is_solid(px, py)
        any_hit = hit.any(axis=1)
        first = np.argmax(hit, axis=1)

        return np.where(any_hit, ranges[first], SONAR_INVALID)

    def ray_distance(
        self,
        x: float,
        y: float,
        bearing: float,
        max_range: float = 2000.0,
        step: float = 1.0,
    ) -> float:
        """Distance to ground along a single bearing [px]."""
        result = self._march(x, y, np.array([bearing]), max_range, step)
        return float(result[0])

    def sonar_scan(
        self,
        x: float,
        y: float,
        max_range: float,
        step: float = 2.0,
    ) -> NDArray[np.float64]:
        """Full 36-bin sonar sweep from (x, y).

        Returns:
            Array of SONAR_BINS distances [px], SONAR_INVALID where nothing
            was found within max_range
        """
        bearings = np.arange(SONAR_BINS, dtype=np.float64) * (360.0 / SONAR_BINS)
        return self._march(x, y, bearings, max_range, step)
