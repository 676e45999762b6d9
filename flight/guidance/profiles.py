"""Per-thruster guidance parameters.

All three powered modes run the same landing law; they differ only in
which thruster they drive, how that thruster is mounted, and how
aggressively they are allowed to move.

Thrust geometry: the main engine pushes along the body's up axis, the
right thruster pushes the body to its left and the left thruster pushes it
to its right. With body orientation measured clockwise from vertical, the
world bearing of the thrust force is orientation + offset, where offset is
0 for main, -90 for right and +90 for left.
"""

import math
from dataclasses import dataclass

from beartype import beartype

from flight.control.actuators import Thruster
from flight.guidance.modes import ControlMode
from lander.constants import LT_ACCEL, MT_ACCEL, RT_ACCEL
from lander.dynamics.state import wrap_angle


@beartype
@dataclass(frozen=True)
class VelocityBands:
    """Speed bound as a step function of distance to the platform.

    Attributes:
        far: Bound beyond far_distance
        mid: Bound between mid_distance and far_distance
        near: Bound within mid_distance
    """
    far: float
    mid: float
    near: float
    far_distance: float = 200.0
    mid_distance: float = 100.0

    def bound(self, distance: float) -> float:
        if distance > self.far_distance:
            return self.far
        if distance > self.mid_distance:
            return self.mid
        return self.near

    def envelope(self, distance: float, deceleration: float, lead: float, scale: float) -> float:
        """Speed allowed at distance when braking ahead of each band edge.

        The band bound is lowered wherever braking at `deceleration` would
        not bring the speed down to the next band's bound by that band's
        edge. `lead` is subtracted from those braking curves so a tracking
        controller that lags its target still meets the bound.

        Args:
            distance: Distance to the platform [px]
            deceleration: Braking deceleration assumed [m/s^2]
            lead: Margin for tracking lag [m/s]
            scale: Pixels per metre

        Returns:
            Speed magnitude [m/s]
        """
        speed = abs(self.bound(distance))
        for edge, inner in ((self.far_distance, self.mid), (self.mid_distance, self.near)):
            if distance > edge:
                braking = math.sqrt(inner ** 2 + 2.0 * deceleration * (distance - edge) / scale)
                speed = min(speed, braking - lead)
        return max(speed, 0.0)


@beartype
@dataclass(frozen=True)
class ThrusterProfile:
    """Guidance parameters for one control mode.

    Attributes:
        thruster: Thruster driven in this mode
        thrust_offset: World thrust bearing minus body orientation [deg]
        max_acceleration: Acceleration at full power [m/s^2]
        horizontal: Max speed toward the platform [m/s]
        vertical: Min vertical velocity, negative is descending [m/s]
        dead_band: Horizontal offset within which no lateral correction is made [px]
        approach_deceleration: Horizontal braking planned ahead of band edges [m/s^2]
        descent_deceleration: Vertical braking planned ahead of band edges [m/s^2]
        override_box: (|dx|, |dy|) around the platform where the safety override is off [px]
        touchdown_box: (|dx|, |dy|) below which lateral correction stops for touchdown [px]
        cut_at_touchdown: Cut thrust and stand upright inside the touchdown box
        ranged_touchdown: Also measure height with the range finder (thruster axis points down)
        override_power: Power of the override's upward burn
    """
    thruster: Thruster
    thrust_offset: float
    max_acceleration: float
    horizontal: VelocityBands
    vertical: VelocityBands
    dead_band: float
    approach_deceleration: float = 2.0
    descent_deceleration: float = 5.0
    override_box: tuple[float, float] = (100.0, 200.0)
    touchdown_box: tuple[float, float] = (40.0, 15.0)
    cut_at_touchdown: bool = False
    ranged_touchdown: bool = False
    override_power: float = 1.0

    def orientation_for(self, bearing: float) -> float:
        """Body orientation that points this thruster's force along bearing."""
        return wrap_angle(bearing - self.thrust_offset)

    @property
    def descent_angle(self) -> float:
        """Orientation that thrusts straight up."""
        return self.orientation_for(0.0)


MAIN_PROFILE = ThrusterProfile(
    thruster=Thruster.MAIN,
    thrust_offset=0.0,
    max_acceleration=MT_ACCEL,
    horizontal=VelocityBands(far=15.0, mid=10.0, near=5.0),
    vertical=VelocityBands(far=-20.0, mid=-10.0, near=-4.0),
    dead_band=30.0,
    descent_deceleration=8.0,
    touchdown_box=(50.0, 30.0),
    ranged_touchdown=True,
)

RIGHT_PROFILE = ThrusterProfile(
    thruster=Thruster.RIGHT,
    thrust_offset=-90.0,
    max_acceleration=RT_ACCEL,
    horizontal=VelocityBands(far=15.0, mid=10.0, near=5.0),
    vertical=VelocityBands(far=-16.0, mid=-7.0, near=-2.0),
    dead_band=15.0,
    override_box=(50.0, 200.0),
    cut_at_touchdown=True,
    override_power=0.8,
)

LEFT_PROFILE = ThrusterProfile(
    thruster=Thruster.LEFT,
    thrust_offset=90.0,
    max_acceleration=LT_ACCEL,
    horizontal=VelocityBands(far=15.0, mid=10.0, near=5.0),
    vertical=VelocityBands(far=-16.0, mid=-7.0, near=-2.0),
    dead_band=20.0,
    override_box=(50.0, 200.0),
    cut_at_touchdown=True,
)

PROFILES = {
    ControlMode.MAIN: MAIN_PROFILE,
    ControlMode.RIGHT_ONLY: RIGHT_PROFILE,
    ControlMode.LEFT_ONLY: LEFT_PROFILE,
}
