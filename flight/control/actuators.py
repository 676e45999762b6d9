"""Thruster addressing."""

import math
from enum import Enum

from lander.interface import ActuatorHealth, LanderInterface


class Thruster(Enum):
    MAIN = "main"
    LEFT = "left"
    RIGHT = "right"


def set_thrust(lander: LanderInterface, thruster: Thruster, power: float) -> None:
    """Command one thruster. Power is clamped to [0, 1]; non-finite power is 0."""
    power = float(power)
    power = min(max(power, 0.0), 1.0) if math.isfinite(power) else 0.0
    if thruster is Thruster.MAIN:
        lander.main_thruster(power)
    elif thruster is Thruster.LEFT:
        lander.left_thruster(power)
    else:
        lander.right_thruster(power)


def cut_all(lander: LanderInterface) -> None:
    for thruster in Thruster:
        set_thrust(lander, thruster, 0.0)


def is_operational(health: ActuatorHealth, thruster: Thruster) -> bool:
    return getattr(health, thruster.value)
