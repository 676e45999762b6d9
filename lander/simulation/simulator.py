"""Step-driven 2D lander simulation with sensor and actuator faults.

Provides the environment the flight computer reads from and writes to.
The simulator maintains the truth state and propagates physics in response
to the latest thrust and rotation commands.

Architecture:
    Flight software owns the tick and calls, in order:
    - noisy sensor reads (velocity_x(), position_y(), angle(), sonar(), ...)
    - actuator commands (main_thruster(), left_thruster(), right_thruster(), rotate())
    The mission loop then calls sim.step() to advance one T_STEP.

Example:
    >>> from lander.environment import Terrain
    >>> from lander.simulation import FaultConfig, LanderSimulator, SimConfig
    >>>
    >>> sim = LanderSimulator.from_position(
    ...     x=300.0, y=200.0,
    ...     terrain=Terrain.flat(),
    ...     faults=FaultConfig.from_codes([1, 6]),  # main thruster, position x
    ... )
    >>> sim.right_thruster(1.0)
    >>> sim.step()
"""

import math
from collections.abc import Sequence
from dataclasses import dataclass, field
from enum import Enum

import numpy as np
from beartype import beartype
from numba import njit
from numpy.typing import NDArray

from lander.constants import (
    G_ACCEL,
    LT_ACCEL,
    MAX_LANDING_ANGLE,
    MAX_LANDING_SPEED,
    MAX_ROT_RATE,
    MT_ACCEL,
    NP1,
    NP2,
    RT_ACCEL,
    S_SCALE,
    SONAR_BINS,
    SONAR_INVALID,
    T_STEP,
)
from lander.dynamics.state import LanderState, wrap_angle
from lander.environment.terrain import Terrain
from lander.interface import ActuatorHealth, PlatformLocation

# =============================================================================
# Faults
# =============================================================================


class Component(Enum):
    """Failable components, numbered as in the fault-selection front end."""
    MAIN_THRUSTER = 1
    LEFT_THRUSTER = 2
    RIGHT_THRUSTER = 3
    VELOCITY_X = 4
    VELOCITY_Y = 5
    POSITION_X = 6
    POSITION_Y = 7
    ANGLE = 8
    SONAR = 9


@beartype
@dataclass(frozen=True)
class FaultConfig:
    """Injected component failures.

    A failed thruster produces no force and reports unhealthy. A failed
    sensor keeps reporting, but with its noise inflated to a malfunction
    level. Failures are permanent from onset_time on.

    Attributes:
        failed: Components that fail during the run
        onset_time: Simulation time at which the failures start [s]
    """
    failed: frozenset[Component] = frozenset()
    onset_time: float = 0.0

    @classmethod
    def from_codes(cls, codes: Sequence[int], onset_time: float = 0.0) -> "FaultConfig":
        """Build from numeric component codes (1 = main thruster ... 9 = sonar)."""
        try:
            failed = frozenset(Component(code) for code in codes)
        except ValueError as err:
            valid = ", ".join(f"{c.value}={c.name}" for c in Component)
            raise ValueError(f"Unknown component code in {list(codes)}. Valid: {valid}") from err
        return cls(failed=failed, onset_time=onset_time)

    def is_failed(self, component: Component, time: float) -> bool:
        """Whether a component is failed at the given time."""
        return component in self.failed and time >= self.onset_time


# =============================================================================
# Configuration
# =============================================================================


@beartype
@dataclass(frozen=True)
class SimConfig:
    """Simulation configuration.

    Attributes:
        dt: Time step [s]
        position_noise: Nominal position sensor noise, 1-sigma [px]
        velocity_noise: Nominal velocity sensor noise, 1-sigma [m/s]
        angle_noise: Nominal angle sensor noise, 1-sigma [deg]
        failed_position_noise: Malfunctioning position sensor noise [px]
        failed_velocity_noise: Malfunctioning velocity sensor noise [m/s]
        failed_angle_noise: Malfunctioning angle sensor noise [deg]
        thrust_noise: Relative thrust noise, 1-sigma
        rotation_noise: Relative rotation noise, 1-sigma
        sonar_range: Maximum sonar range [px]
        sonar_refresh_steps: Steps between sonar sweeps (stale in between)
        seed: RNG seed (None for nondeterministic)
    """
    dt: float = T_STEP
    position_noise: float = 1.0
    velocity_noise: float = 0.2
    angle_noise: float = 0.2
    failed_position_noise: float = 120.0
    failed_velocity_noise: float = 12.0
    failed_angle_noise: float = 12.0
    thrust_noise: float = NP1
    rotation_noise: float = NP2
    sonar_range: float = 450.0
    sonar_refresh_steps: int = 10
    seed: int | None = None

    def __post_init__(self) -> None:
        if self.dt <= 0:
            raise ValueError(f"Time step must be positive, got {self.dt}")
        if self.sonar_refresh_steps < 1:
            raise ValueError("Sonar refresh interval must be at least one step")
        if self.sonar_range <= 0:
            raise ValueError("Sonar range must be positive")

    @classmethod
    def noiseless(cls, seed: int | None = 0, sonar_refresh_steps: int = 10) -> "SimConfig":
        """Deterministic plant: exact nominal sensors, exact actuators.

        Failed sensors still read with malfunction noise.
        """
        return cls(
            position_noise=0.0,
            velocity_noise=0.0,
            angle_noise=0.0,
            thrust_noise=0.0,
            rotation_noise=0.0,
            sonar_refresh_steps=sonar_refresh_steps,
            seed=seed,
        )


class LandingOutcome(Enum):
    """Mission status as judged by the environment."""
    FLYING = "flying"
    LANDED = "landed"
    CRASHED = "crashed"


# =============================================================================
# Numba-Optimized Integration
# =============================================================================


@njit(cache=True, fastmath=True)
def _integrate_step(
    x: float, y: float, vx: float, vy: float, angle: float,
    main: float, left: float, right: float,
    rotation: float, rotation_gain: float,
    dt: float, scale: float, max_rotation: float,
) -> tuple[float, float, float, float, float, float]:
    """Advance the planar lander by one step (semi-implicit Euler).

    Thrust directions, as bearings clockwise from vertical:
    main along the body angle, right along angle - 90, left along angle + 90.
    """
    applied = min(max(rotation, -max_rotation), max_rotation)
    angle = (angle + applied * rotation_gain) % 360.0

    theta = math.radians(angle)
    s = math.sin(theta)
    c = math.cos(theta)

    ax = main * MT_ACCEL * s - right * RT_ACCEL * c + left * LT_ACCEL * c
    ay = main * MT_ACCEL * c + right * RT_ACCEL * s - left * LT_ACCEL * s - G_ACCEL

    vx = vx + ax * dt
    vy = vy + ay * dt
    # Screen y grows downward while vy is positive up
    x = x + vx * dt * scale
    y = y - vy * dt * scale

    return (x, y, vx, vy, angle, rotation - applied)


# =============================================================================
# Simulator
# =============================================================================


@beartype
@dataclass
class LanderSimulator:
    """Step-driven planar lander simulator.

    Maintains truth state, answers noisy sensor queries and latches actuator
    commands. Only the latest rotate() request is pursued; it is consumed at
    no more than MAX_ROT_RATE per step.

    Example:
        >>> sim = LanderSimulator.from_position(512.0, 200.0, Terrain.flat())
        >>> while sim.outcome is LandingOutcome.FLYING:
        ...     computer.tick()
        ...     sim.step()
    """
    state: LanderState
    terrain: Terrain
    config: SimConfig = field(default_factory=SimConfig)
    faults: FaultConfig = field(default_factory=FaultConfig)
    record_history: bool = True

    # Internal
    _rng: np.random.Generator = field(init=False, repr=False)
    _main: float = field(default=0.0, init=False, repr=False)
    _left: float = field(default=0.0, init=False, repr=False)
    _right: float = field(default=0.0, init=False, repr=False)
    _rotation: float = field(default=0.0, init=False, repr=False)
    _sonar: NDArray[np.float64] = field(init=False, repr=False)
    _steps: int = field(default=0, init=False, repr=False)
    _outcome: LandingOutcome = field(default=LandingOutcome.FLYING, init=False, repr=False)
    _history: list[LanderState] = field(default_factory=list, init=False, repr=False)

    def __post_init__(self) -> None:
        """Seed the RNG, take the first sonar sweep and start the history."""
        self._rng = np.random.default_rng(self.config.seed)
        self._sonar = np.full(SONAR_BINS, SONAR_INVALID)
        self._refresh_sonar()
        if self.record_history:
            self._history = [self.state.copy()]

    @classmethod
    def from_position(
        cls,
        x: float,
        y: float,
        terrain: Terrain,
        vx: float = 0.0,
        vy: float = 0.0,
        angle: float = 0.0,
        config: SimConfig | None = None,
        faults: FaultConfig | None = None,
    ) -> "LanderSimulator":
        """Create a simulator with the lander at rest (or moving) at (x, y)."""
        return cls(
            state=LanderState(x=x, y=y, vx=vx, vy=vy, angle=angle),
            terrain=terrain,
            config=config or SimConfig(),
            faults=faults or FaultConfig(),
        )

    # =========================================================================
    # Sensors
    # =========================================================================

    def _failed(self, component: Component) -> bool:
        return self.faults.is_failed(component, self.state.time)

    def _read(self, component: Component, truth: float, nominal: float, failed: float) -> float:
        if self._failed(component):
            return truth + float(self._rng.normal(0.0, failed))
        if nominal > 0.0:
            return truth + float(self._rng.normal(0.0, nominal))
        return truth

    def velocity_x(self) -> float:
        """Horizontal velocity [m/s], positive right."""
        cfg = self.config
        return self._read(
            Component.VELOCITY_X, self.state.vx, cfg.velocity_noise, cfg.failed_velocity_noise
        )

    def velocity_y(self) -> float:
        """Vertical velocity [m/s], positive up."""
        cfg = self.config
        return self._read(
            Component.VELOCITY_Y, self.state.vy, cfg.velocity_noise, cfg.failed_velocity_noise
        )

    def position_x(self) -> float:
        """Horizontal position [px]."""
        cfg = self.config
        return self._read(
            Component.POSITION_X, self.state.x, cfg.position_noise, cfg.failed_position_noise
        )

    def position_y(self) -> float:
        """Vertical position [px], increasing downward."""
        cfg = self.config
        return self._read(
            Component.POSITION_Y, self.state.y, cfg.position_noise, cfg.failed_position_noise
        )

    def angle(self) -> float:
        """Orientation [deg] clockwise from vertical, in [0, 360)."""
        cfg = self.config
        reading = self._read(Component.ANGLE, self.state.angle, cfg.angle_noise, cfg.failed_angle_noise)
        return wrap_angle(reading)

    def range_dist(self) -> float:
        """Exact distance to ground along the main thruster axis [px].

        The laser range finder never fails and is noise free.
        """
        bearing = wrap_angle(self.state.angle + 180.0)
        return self.terrain.ray_distance(self.state.x, self.state.y, bearing)

    def sonar(self) -> NDArray[np.float64]:
        """Latest sonar sweep (stale between refreshes)."""
        return self._sonar.copy()

    def _refresh_sonar(self) -> None:
        if self._failed(Component.SONAR):
            self._sonar = np.full(SONAR_BINS, SONAR_INVALID)
            return
        self._sonar = self.terrain.sonar_scan(
            self.state.x, self.state.y, self.config.sonar_range
        )

    def actuator_health(self) -> ActuatorHealth:
        """Operational status of the three thrusters."""
        return ActuatorHealth(
            main=not self._failed(Component.MAIN_THRUSTER),
            left=not self._failed(Component.LEFT_THRUSTER),
            right=not self._failed(Component.RIGHT_THRUSTER),
        )

    def platform_location(self) -> PlatformLocation:
        """Exact platform coordinates."""
        return self.terrain.platform

    # =========================================================================
    # Actuators
    # =========================================================================

    def main_thruster(self, power: float) -> None:
        """Set main thruster power in [0, 1]."""
        self._main = float(np.clip(power, 0.0, 1.0))

    def left_thruster(self, power: float) -> None:
        """Set left thruster power in [0, 1]."""
        self._left = float(np.clip(power, 0.0, 1.0))

    def right_thruster(self, power: float) -> None:
        """Set right thruster power in [0, 1]."""
        self._right = float(np.clip(power, 0.0, 1.0))

    def rotate(self, angle: float) -> None:
        """Request a rotation of angle degrees clockwise (ccw if negative).

        Replaces any rotation still in progress.
        """
        self._rotation = angle

    @property
    def commands(self) -> tuple[float, float, float, float]:
        """Latched (main, left, right, pending rotation) commands."""
        return (self._main, self._left, self._right, self._rotation)

    def _effective_power(self, component: Component, power: float) -> float:
        if self._failed(component) or power <= 0.0:
            return 0.0
        if self.config.thrust_noise > 0.0:
            power *= 1.0 + float(self._rng.normal(0.0, self.config.thrust_noise))
        return max(power, 0.0)

    # =========================================================================
    # Propagation
    # =========================================================================

    def step(self) -> LanderState:
        """Propagate physics by one time step.

        Returns:
            New state (unchanged once the lander has touched down)
        """
        if self._outcome is not LandingOutcome.FLYING:
            return self.state

        main = self._effective_power(Component.MAIN_THRUSTER, self._main)
        left = self._effective_power(Component.LEFT_THRUSTER, self._left)
        right = self._effective_power(Component.RIGHT_THRUSTER, self._right)

        rotation_gain = 1.0
        if self.config.rotation_noise > 0.0 and self._rotation != 0.0:
            rotation_gain += float(self._rng.normal(0.0, self.config.rotation_noise))

        s = self.state
        x, y, vx, vy, angle, remaining = _integrate_step(
            s.x, s.y, s.vx, s.vy, s.angle,
            main, left, right,
            self._rotation, rotation_gain,
            self.config.dt, S_SCALE, math.degrees(MAX_ROT_RATE),
        )
        self._rotation = remaining
        self.state = LanderState(x=x, y=y, vx=vx, vy=vy, angle=angle, time=s.time + self.config.dt)
        self._steps += 1

        if self._steps % self.config.sonar_refresh_steps == 0:
            self._refresh_sonar()

        self._check_touchdown()

        if self.record_history:
            self._history.append(self.state.copy())

        return self.state

    def _check_touchdown(self) -> None:
        s = self.state
        if s.x < 0.0 or s.x > self.terrain.width - 1.0:
            self._outcome = LandingOutcome.CRASHED
            return

        ground = self.terrain.ground_at(s.x)
        if s.y < ground:
            return

        s.y = ground
        soft = -s.vy < MAX_LANDING_SPEED and s.tilt <= MAX_LANDING_ANGLE
        if self.terrain.on_platform(s.x) and soft:
            self._outcome = LandingOutcome.LANDED
        else:
            self._outcome = LandingOutcome.CRASHED

    def get_history(self) -> list[LanderState]:
        """Get recorded state history."""
        return self._history.copy()

    @property
    def outcome(self) -> LandingOutcome:
        """Current mission status."""
        return self._outcome

    @property
    def time(self) -> float:
        """Current simulation time [s]."""
        return self.state.time

    @property
    def steps(self) -> int:
        """Number of steps taken."""
        return self._steps


# =============================================================================
# Results and Analysis
# =============================================================================


@beartype
@dataclass
class SimulationResult:
    """Results from a completed flight.

    Provides convenient access to trajectory data.
    """
    states: list[LanderState]
    outcome: LandingOutcome
    platform: PlatformLocation

    @property
    def time(self) -> NDArray[np.float64]:
        """Time array [s]."""
        return np.array([s.time for s in self.states])

    @property
    def x(self) -> NDArray[np.float64]:
        """Horizontal position history [px]."""
        return np.array([s.x for s in self.states])

    @property
    def y(self) -> NDArray[np.float64]:
        """Vertical position history [px]."""
        return np.array([s.y for s in self.states])

    @property
    def vx(self) -> NDArray[np.float64]:
        """Horizontal velocity history [m/s]."""
        return np.array([s.vx for s in self.states])

    @property
    def vy(self) -> NDArray[np.float64]:
        """Vertical velocity history [m/s]."""
        return np.array([s.vy for s in self.states])

    @property
    def angle(self) -> NDArray[np.float64]:
        """Orientation history [deg]."""
        return np.array([s.angle for s in self.states])

    @property
    def horizontal_offset(self) -> NDArray[np.float64]:
        """Signed horizontal distance from the platform [px]."""
        return self.x - self.platform.x

    @property
    def height_above_platform(self) -> NDArray[np.float64]:
        """Vertical distance above the platform [px]."""
        return self.platform.y - self.y

    @property
    def final_state(self) -> LanderState:
        return self.states[-1]

    @classmethod
    def from_simulator(cls, sim: LanderSimulator) -> "SimulationResult":
        """Create result from simulator history."""
        return cls(
            states=sim.get_history(),
            outcome=sim.outcome,
            platform=sim.platform_location(),
        )

    def to_dataframe(self):
        """Convert to Polars DataFrame."""
        import polars as pl

        return pl.DataFrame({
            "time": self.time,
            "x": self.x,
            "y": self.y,
            "vx": self.vx,
            "vy": self.vy,
            "angle": self.angle,
            "dx_platform": self.horizontal_offset,
            "dy_platform": self.height_above_platform,
        })
