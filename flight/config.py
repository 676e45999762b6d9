"""Flight software configuration.

All tunables of the flight computer live in one immutable object that is
handed to every component through the flight context.
"""

from dataclasses import dataclass
from enum import Enum

from beartype import beartype

from lander.constants import S_SCALE, T_STEP


class AllFailedPolicy(Enum):
    """What to do when no thruster is operational.

    CUT_THRUST: command zero power on every thruster and stop steering (free fall)
    HOLD_LAST: leave the last latched commands untouched
    """
    CUT_THRUST = "cut_thrust"
    HOLD_LAST = "hold_last"


@beartype
@dataclass(frozen=True)
class FlightConfig:
    """Flight computer configuration.

    Attributes:
        dt: Control tick / simulation time step [s]
        spatial_scale: Pixels per metre
        velocity_tolerance: Max plausible difference between two velocity reads [m/s]
        position_tolerance: Max plausible difference between two position reads [px]
        angle_tolerance: Max plausible difference between two angle reads [deg]
        diagnostic_trials: Two-sample trials per sensor per tick
        fault_threshold: Excess trials in one tick that condemn a sensor
        history_length: Slots in each position history buffer
        history_samples: Position reads averaged into each history sample
        navigation_samples: Raw reads averaged into each position and velocity used by guidance
        rotation_tolerance: Orientation error accepted as converged [deg]
        alignment_margin: Coupling ratio between horizontal and vertical time-to-go
        all_failed_policy: Behaviour when every thruster has failed
    """
    dt: float = T_STEP
    spatial_scale: float = S_SCALE
    velocity_tolerance: float = 5.0
    position_tolerance: float = 50.0
    angle_tolerance: float = 5.0
    diagnostic_trials: int = 25
    fault_threshold: int = 1
    history_length: int = 22
    history_samples: int = 250
    navigation_samples: int = 16
    rotation_tolerance: float = 1.0
    alignment_margin: float = 1.25
    all_failed_policy: AllFailedPolicy = AllFailedPolicy.CUT_THRUST

    def __post_init__(self) -> None:
        """Validate configuration."""
        if self.dt <= 0 or self.spatial_scale <= 0:
            raise ValueError("Time step and spatial scale must be positive")
        tolerances = (self.velocity_tolerance, self.position_tolerance, self.angle_tolerance)
        if min(tolerances) <= 0:
            raise ValueError(f"Diagnostic tolerances must be positive, got {tolerances}")
        if self.diagnostic_trials < 1:
            raise ValueError("Need at least one diagnostic trial per tick")
        if not 1 <= self.fault_threshold <= self.diagnostic_trials:
            raise ValueError(
                f"Fault threshold must be in [1, {self.diagnostic_trials}], "
                f"got {self.fault_threshold}"
            )
        if self.history_length < 2:
            raise ValueError("History needs at least 2 slots to estimate velocity")
        if self.history_samples < 1 or self.navigation_samples < 1:
            raise ValueError("Need at least one read per averaged sample")
        if self.rotation_tolerance < 0:
            raise ValueError("Rotation tolerance must be non-negative")
        if self.alignment_margin <= 0:
            raise ValueError(f"Alignment margin must be positive, got {self.alignment_margin}")
