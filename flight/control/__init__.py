"""Actuator commands for the lander.

Available helpers:
    set_thrust / cut_all: Thruster power commands
    shortest_rotation / rotate_to: Relative rotation commands
"""

from flight.control.actuators import Thruster, cut_all, is_operational, set_thrust
from flight.control.rotation import (
    angular_difference,
    is_oriented,
    rotate_to,
    shortest_rotation,
)

__all__ = [
    "Thruster",
    "angular_difference",
    "cut_all",
    "is_operational",
    "is_oriented",
    "rotate_to",
    "set_thrust",
    "shortest_rotation",
]
