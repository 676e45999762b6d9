"""Planar state vector for the lander simulation.

The state vector contains:
- Position (2): [x, y] in screen pixels (y grows downward)
- Velocity (2): [vx, vy] in m/s (vy positive upward)
- Angle (1): orientation in degrees clockwise from vertical, in [0, 360)
- Time (1): simulation time [s]

The mixed convention is deliberate: it is what the lander's sensors report,
so flight software sees exactly the same frame as the truth state.
"""

from dataclasses import dataclass

import numpy as np
from beartype import beartype

# =============================================================================
# Angle Utilities
# =============================================================================


@beartype
def wrap_angle(angle: float) -> float:
    """Wrap an angle in degrees to [0, 360)."""
    wrapped = angle % 360.0
    # -1e-17 % 360.0 rounds to 360.0
    if wrapped >= 360.0:
        return 0.0
    return wrapped


@beartype
def tilt_from_vertical(angle: float) -> float:
    """Absolute deviation from upright [deg], in [0, 180]."""
    a = wrap_angle(angle)
    return min(a, 360.0 - a)


# =============================================================================
# Lander State
# =============================================================================


@beartype
@dataclass
class LanderState:
    """Planar lander state.

    Attributes:
        x: Horizontal position [px]
        y: Vertical position [px], increasing downward
        vx: Horizontal velocity [m/s], positive right
        vy: Vertical velocity [m/s], positive up
        angle: Orientation [deg], clockwise from vertical
        time: Simulation time [s]
    """
    x: float
    y: float
    vx: float = 0.0
    vy: float = 0.0
    angle: float = 0.0
    time: float = 0.0

    def __post_init__(self) -> None:
        """Validate and normalize."""
        values = (self.x, self.y, self.vx, self.vy, self.angle, self.time)
        if not all(np.isfinite(values)):
            raise ValueError(f"State values must be finite, got {values}")
        self.angle = wrap_angle(self.angle)

    def copy(self) -> "LanderState":
        """Create an independent copy."""
        return LanderState(
            x=self.x,
            y=self.y,
            vx=self.vx,
            vy=self.vy,
            angle=self.angle,
            time=self.time,
        )

    @property
    def speed(self) -> float:
        """Speed magnitude [m/s]."""
        return float(np.hypot(self.vx, self.vy))

    @property
    def tilt(self) -> float:
        """Deviation from upright [deg]."""
        return tilt_from_vertical(self.angle)

    def __repr__(self) -> str:
        return (
            f"LanderState(t={self.time:.3f}s, x={self.x:.1f}px, y={self.y:.1f}px, "
            f"vx={self.vx:.2f}m/s, vy={self.vy:.2f}m/s, angle={self.angle:.1f}deg)"
        )
