"""Attitude commands.

The vehicle rotates by relative amounts, so every orientation change is
expressed as the shortest signed rotation from the current heading.
"""

import math

from beartype import beartype

from lander.dynamics.state import wrap_angle
from lander.interface import LanderInterface


@beartype
def shortest_rotation(current: float, destination: float) -> float:
    """Signed rotation from current to destination with magnitude <= 180.

    Args:
        current: Current orientation [deg]
        destination: Desired orientation [deg]

    Returns:
        Rotation [deg], positive clockwise
    """
    delta = wrap_angle(destination) - wrap_angle(current)
    if abs(delta) <= 180.0:
        return delta
    return delta - 360.0 if delta > 0 else delta + 360.0


@beartype
def angular_difference(a: float, b: float) -> float:
    """Unsigned angle between two orientations, in [0, 180]."""
    return abs(shortest_rotation(a, b))


def is_oriented(current: float, destination: float, tolerance: float = 1.0) -> bool:
    return angular_difference(current, destination) <= tolerance


def rotate_to(
    lander: LanderInterface,
    current: float,
    destination: float,
    tolerance: float = 1.0,
) -> bool:
    """Command the shortest rotation toward destination.

    Returns:
        True if already within tolerance (no command issued)
    """
    if not math.isfinite(current):
        return False
    if is_oriented(current, destination, tolerance):
        return True
    lander.rotate(shortest_rotation(current, destination))
    return False
