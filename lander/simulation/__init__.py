"""Simulation module for the planar lander.

Provides the step-driven environment the flight computer controls,
including noisy sensors, failable actuators and a stale sonar array.

Example:
    >>> from lander.environment import Terrain
    >>> from lander.simulation import LanderSimulator, SimConfig, fly
    >>>
    >>> sim = LanderSimulator.from_position(300.0, 150.0, Terrain.flat())
    >>> computer = FlightComputer.create(sim)
    >>> result = fly(sim, computer, max_time=60.0)
    >>> result.outcome
"""

from lander.simulation.mission import fly
from lander.simulation.simulator import (
    Component,
    FaultConfig,
    LanderSimulator,
    LandingOutcome,
    SimConfig,
    SimulationResult,
)

__all__ = [
    "Component",
    "FaultConfig",
    "LanderSimulator",
    "LandingOutcome",
    "SimConfig",
    "SimulationResult",
    "fly",
]
