"""Flight computer: the per-tick control cycle.

Each tick runs, in order:

1. Sensor health monitoring (latches condemned sensors)
2. Estimator selection (routes condemned quantities to estimators)
3. History update (one averaged position sample per axis)
4. Control mode selection from actuator health
5. Landing guidance for the active mode
6. Safety override, which may replace guidance's commands

Example:
    >>> from lander import Terrain, LanderSimulator, fly
    >>> from flight import FlightComputer
    >>>
    >>> sim = LanderSimulator.from_position(x=300.0, y=200.0, terrain=Terrain.flat())
    >>> computer = FlightComputer.create(sim)
    >>> result = fly(sim, computer)
    >>> print(result.outcome)
"""

import logging
from dataclasses import dataclass, field

from flight.config import AllFailedPolicy, FlightConfig
from flight.context import FlightContext
from flight.control.actuators import cut_all
from flight.guidance.landing import LandingGuidance
from flight.guidance.modes import ControlMode, select_mode
from flight.guidance.profiles import PROFILES
from flight.navigation.estimator import update_history
from flight.navigation.monitor import SensorHealthMonitor
from flight.navigation.selector import update_selection
from flight.safety.override import SafetyOverride
from lander.interface import LanderInterface

logger = logging.getLogger(__name__)


@dataclass
class FlightComputer:
    """Autonomous landing flight software for one vehicle.

    Attributes:
        context: Shared flight state
        monitor: Sensor health monitor
    """
    context: FlightContext
    monitor: SensorHealthMonitor = field(default_factory=SensorHealthMonitor)
    _guidance: dict[ControlMode, LandingGuidance] = field(init=False, repr=False)
    _overrides: dict[ControlMode, SafetyOverride] = field(init=False, repr=False)
    _mode: ControlMode | None = field(default=None, init=False, repr=False)

    def __post_init__(self) -> None:
        self._guidance = {mode: LandingGuidance(p) for mode, p in PROFILES.items()}
        self._overrides = {mode: SafetyOverride(p) for mode, p in PROFILES.items()}

    @classmethod
    def create(cls, lander: LanderInterface, config: FlightConfig | None = None) -> "FlightComputer":
        """Build a flight computer with fresh state for a vehicle."""
        return cls(context=FlightContext(lander=lander, config=config or FlightConfig()))

    @property
    def mode(self) -> ControlMode | None:
        """Control mode used on the last tick."""
        return self._mode

    def guidance(self, mode: ControlMode) -> LandingGuidance:
        return self._guidance[mode]

    def tick(self) -> ControlMode:
        """Run one control cycle and return the control mode used."""
        ctx = self.context
        self.monitor.diagnose(ctx)
        update_selection(ctx)
        update_history(ctx)

        mode = select_mode(ctx.lander.actuator_health())
        if mode is not self._mode:
            self._enter(mode)

        if mode is not ControlMode.UNPOWERED:
            self._guidance[mode].compute(ctx)
            self._overrides[mode].apply(ctx)
        elif ctx.config.all_failed_policy is AllFailedPolicy.CUT_THRUST:
            cut_all(ctx.lander)

        ctx.ticks += 1
        return mode

    def _enter(self, mode: ControlMode) -> None:
        ctx = self.context
        if self._mode is not None and mode is not ControlMode.UNPOWERED:
            cut_all(ctx.lander)
        if mode is ControlMode.UNPOWERED:
            logger.error(
                "Tick %d: no operational thruster, policy %s",
                ctx.ticks, ctx.config.all_failed_policy.value,
            )
        else:
            logger.info("Tick %d: control mode %s", ctx.ticks, mode.value)
            self._guidance[mode].reset()
        self._mode = mode
