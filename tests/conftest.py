"""Shared fixtures: a scripted stand-in for the lander interface."""

from itertools import cycle

import numpy as np
import pytest

from lander.constants import SONAR_BINS, SONAR_INVALID
from lander.interface import ActuatorHealth, PlatformLocation


class FakeLander:
    """Vehicle with fixed (or scripted) readings that records every command.

    Scripts are cycled: each read of a scripted quantity returns the next
    value of its script.
    """

    def __init__(
        self,
        x: float = 512.0,
        y: float = 500.0,
        vx: float = 0.0,
        vy: float = 0.0,
        angle: float = 0.0,
        platform: tuple[float, float] = (512.0, 1000.0),
    ):
        self.readings = {
            "position_x": x,
            "position_y": y,
            "velocity_x": vx,
            "velocity_y": vy,
            "angle": angle,
        }
        self.platform = PlatformLocation(*platform)
        self.health = ActuatorHealth(main=True, left=True, right=True)
        self.sonar_returns = np.full(SONAR_BINS, SONAR_INVALID)
        self.power = {"main": 0.0, "left": 0.0, "right": 0.0}
        self.rotations: list[float] = []
        self.reads = 0
        self._scripts = {}

    def script(self, quantity: str, values) -> None:
        self._scripts[quantity] = cycle(values)

    def _read(self, quantity: str) -> float:
        self.reads += 1
        if quantity in self._scripts:
            return float(next(self._scripts[quantity]))
        return self.readings[quantity]

    def velocity_x(self) -> float:
        return self._read("velocity_x")

    def velocity_y(self) -> float:
        return self._read("velocity_y")

    def position_x(self) -> float:
        return self._read("position_x")

    def position_y(self) -> float:
        return self._read("position_y")

    def angle(self) -> float:
        return self._read("angle")

    def range_dist(self) -> float:
        return self.platform.y - self.readings["position_y"]

    def sonar(self):
        return self.sonar_returns.copy()

    def actuator_health(self) -> ActuatorHealth:
        return self.health

    def platform_location(self) -> PlatformLocation:
        return self.platform

    def main_thruster(self, power: float) -> None:
        self.power["main"] = power

    def left_thruster(self, power: float) -> None:
        self.power["left"] = power

    def right_thruster(self, power: float) -> None:
        self.power["right"] = power

    def rotate(self, angle: float) -> None:
        self.rotations.append(angle)


@pytest.fixture
def make_lander():
    """Factory for scripted landers."""
    return FakeLander


@pytest.fixture
def lander():
    """Lander hovering 500 px straight above the platform."""
    return FakeLander()
