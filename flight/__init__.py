"""Flight software package - autonomous landing for a 2D planetary lander.

This package contains the navigation, guidance and control algorithms that
run on the lander's flight computer. They are developed and tested against
the simulated vehicle in lander/.

Architecture:
    The simulation (lander/) provides the "plant" - vehicle dynamics,
    terrain, noisy sensors and injected faults. Flight software (flight/)
    reads the sensors and commands the thrusters once per tick.

    Simulation loop:
        computer.tick()    # Sense, diagnose, guide, command
        sim.step()         # Apply to plant

Subpackages:
    navigation: Sensor health monitoring, history and fallback estimators
    guidance: Control mode selection and landing guidance
    control: Thruster and rotation commands
    safety: Sonar collision avoidance

Example:
    >>> from lander import Terrain, LanderSimulator, FaultConfig, fly
    >>> from flight import FlightComputer
    >>>
    >>> sim = LanderSimulator.from_position(
    ...     x=300.0, y=200.0, terrain=Terrain.flat(),
    ...     faults=FaultConfig.from_codes([1]),
    ... )
    >>> result = fly(sim, FlightComputer.create(sim))
"""

from flight.computer import FlightComputer
from flight.config import AllFailedPolicy, FlightConfig
from flight.context import FlightContext
from flight.guidance import ControlMode, LandingGuidance, select_mode
from flight.navigation import Quantity, Source

__all__ = [
    "AllFailedPolicy",
    "ControlMode",
    "FlightComputer",
    "FlightConfig",
    "FlightContext",
    "LandingGuidance",
    "Quantity",
    "Source",
    "select_mode",
]
