"""Lander state representation."""

from lander.dynamics.state import LanderState, tilt_from_vertical, wrap_angle

__all__ = [
    "LanderState",
    "tilt_from_vertical",
    "wrap_angle",
]
