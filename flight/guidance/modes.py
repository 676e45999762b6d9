"""Control mode selection from actuator health."""

from enum import Enum

from flight.control.actuators import Thruster, is_operational
from lander.interface import ActuatorHealth


class ControlMode(Enum):
    """Which thruster drives guidance this tick."""
    MAIN = "main"
    RIGHT_ONLY = "right_only"
    LEFT_ONLY = "left_only"
    UNPOWERED = "unpowered"


# Highest priority first
MODE_PRIORITY = (
    (ControlMode.MAIN, Thruster.MAIN),
    (ControlMode.RIGHT_ONLY, Thruster.RIGHT),
    (ControlMode.LEFT_ONLY, Thruster.LEFT),
)


def select_mode(health: ActuatorHealth) -> ControlMode:
    """Pick the control mode, preferring main, then right, then left.

    Side modes are used whenever main has failed and that side still works,
    regardless of the state of the opposite side thruster.
    """
    for mode, thruster in MODE_PRIORITY:
        if is_operational(health, thruster):
            return mode
    return ControlMode.UNPOWERED
