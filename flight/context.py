"""Flight context: everything the flight computer components share.

One context per vehicle. Components receive it explicitly on every call
instead of reaching for module globals. Ownership:

- health: written by the sensor health monitor only
- selection: written by the estimator selector only
- history: written by the history update only
"""

from dataclasses import dataclass, field

from flight.config import FlightConfig
from flight.navigation.health import EstimatorSelection, SensorHealth
from flight.navigation.history import Axis, HistoryBuffer
from lander.interface import LanderInterface


@dataclass
class FlightContext:
    """Shared flight software state.

    Attributes:
        lander: Vehicle interface (sensors and actuators)
        config: Flight software configuration
        health: Latched sensor health verdicts
        selection: Raw/estimated source per quantity
        history: Position history per axis
        ticks: Completed control ticks
    """
    lander: LanderInterface
    config: FlightConfig = field(default_factory=FlightConfig)
    health: SensorHealth = field(default_factory=SensorHealth)
    selection: EstimatorSelection = field(default_factory=EstimatorSelection)
    history: dict[Axis, HistoryBuffer] = field(init=False)
    ticks: int = 0

    def __post_init__(self) -> None:
        self.history = {
            axis: HistoryBuffer(length=self.config.history_length) for axis in Axis
        }
