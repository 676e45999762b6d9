"""Types exchanged between the lander environment and flight software.

The environment (simulator or real vehicle) exposes noisy scalar sensors,
a sonar array, actuator health and the platform location. Flight software
reads those once or many times per tick and writes thrust/rotation commands.
"""

from typing import NamedTuple, Protocol

import numpy as np
from numpy.typing import NDArray


class ActuatorHealth(NamedTuple):
    """Operational status of each thruster."""
    main: bool
    left: bool
    right: bool


class PlatformLocation(NamedTuple):
    """Exact landing platform coordinates [px]."""
    x: float
    y: float


class LanderInterface(Protocol):
    """What flight software may call on the vehicle each tick."""

    def velocity_x(self) -> float: ...
    def velocity_y(self) -> float: ...
    def position_x(self) -> float: ...
    def position_y(self) -> float: ...
    def angle(self) -> float: ...
    def range_dist(self) -> float: ...
    def sonar(self) -> NDArray[np.float64]: ...
    def actuator_health(self) -> ActuatorHealth: ...
    def platform_location(self) -> PlatformLocation: ...
    def main_thruster(self, power: float) -> None: ...
    def left_thruster(self, power: float) -> None: ...
    def right_thruster(self, power: float) -> None: ...
    def rotate(self, angle: float) -> None: ...


class FlightSoftware(Protocol):
    """Anything the mission loop can tick once per step."""

    def tick(self) -> object: ...
