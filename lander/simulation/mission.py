"""Fixed-timestep mission loop.

Each tick the flight software runs to completion (reads sensors, writes
commands), then the plant advances one step. The loop stops at touchdown,
crash, or when the time budget runs out.
"""

import logging

from lander.interface import FlightSoftware
from lander.simulation.simulator import LanderSimulator, LandingOutcome, SimulationResult

logger = logging.getLogger(__name__)


def fly(
    sim: LanderSimulator,
    computer: FlightSoftware,
    max_time: float = 120.0,
) -> SimulationResult:
    """Run the tick loop until the mission ends.

    Args:
        sim: Plant to fly
        computer: Flight software bound to the same plant
        max_time: Simulation time budget [s]

    Returns:
        SimulationResult with the recorded trajectory and outcome
    """
    while sim.outcome is LandingOutcome.FLYING and sim.time < max_time:
        computer.tick()
        sim.step()

    if sim.outcome is LandingOutcome.FLYING:
        logger.warning("Time budget of %.1f s exhausted before touchdown", max_time)
    else:
        logger.info("Mission ended at t=%.2f s: %s (%s)", sim.time, sim.outcome.value, sim.state)

    return SimulationResult.from_simulator(sim)
