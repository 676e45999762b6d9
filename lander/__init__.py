"""Lander - planar lander plant model for flight software development.

This package provides the environment that the flight software in
flight/ is developed and tested against: physical constants, the
sensor/actuator interface, terrain with ranging, and a noisy step-driven
simulator with fault injection.

Example:
    >>> from lander import FaultConfig, LanderSimulator, Terrain, fly
    >>> from flight import FlightComputer
    >>>
    >>> sim = LanderSimulator.from_position(
    ...     x=800.0, y=150.0,
    ...     terrain=Terrain.flat(platform_x=400.0),
    ...     faults=FaultConfig.from_codes([1]),   # main thruster out
    ... )
    >>> result = fly(sim, FlightComputer.create(sim), max_time=90.0)
    >>> print(result.outcome)
"""

__version__ = "0.1.0"

from lander.dynamics import LanderState
from lander.environment import Terrain
from lander.interface import ActuatorHealth, LanderInterface, PlatformLocation
from lander.simulation import (
    Component,
    FaultConfig,
    LanderSimulator,
    LandingOutcome,
    SimConfig,
    SimulationResult,
    fly,
)

__all__ = [
    "__version__",
    "ActuatorHealth",
    "Component",
    "FaultConfig",
    "LanderInterface",
    "LanderSimulator",
    "LanderState",
    "LandingOutcome",
    "PlatformLocation",
    "SimConfig",
    "SimulationResult",
    "Terrain",
    "fly",
]
