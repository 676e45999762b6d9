"""Platform landing guidance.

A single bounded-velocity law drives every powered control mode:

1. Distance bands give a maximum approach speed toward the platform and a
   maximum descent rate. Both are lowered ahead of each band edge so the
   vehicle has already slowed to the inner band's bound when it crosses.
2. Outside the dead-band the descent rate is limited so that, at the
   current closing speed, the time left to descend stays at least `margin`
   times the time left to line up. With no closing speed the descent stops.
3. Velocity errors against those targets give a desired acceleration. Its
   thrust vector, tilted at most `max_tilt` from vertical, sets the heading
   the thruster is turned to and the power it fires at.
4. Thrust is only applied once the vehicle is oriented; until then it rotates.
5. Inside the profile's touchdown box lateral correction stops. The main
   engine keeps braking the descent upright; a side thruster is cut and the
   vehicle stands upright for the final drop.
"""

import logging
import math
from dataclasses import dataclass, field
from enum import IntEnum
from typing import NamedTuple

import numpy as np

from flight.context import FlightContext
from flight.control.actuators import set_thrust
from flight.control.rotation import angular_difference, rotate_to
from flight.guidance.profiles import ThrusterProfile
from flight.navigation.estimator import NavigationSolution, navigate
from lander.constants import G_ACCEL, S_SCALE

logger = logging.getLogger(__name__)


class GuidancePhase(IntEnum):
    """What the landing law decided this tick."""
    HOLD = 0  # inside the dead-band, only damping drift
    ACCELERATE = 1  # closing on the platform below the approach target
    BRAKE = 2  # closing faster than the approach target
    DESCENT_BRAKE = 3  # descending faster than the vertical target
    TOUCHDOWN = 4  # final descent without lateral correction


class GuidanceCommand(NamedTuple):
    """Guidance output for one tick.

    Attributes:
        phase: Branch taken
        power: Thrust commanded (0 while still rotating) [0-1]
        target_angle: Orientation guidance steered toward [deg]
        oriented: Whether the vehicle was already at target_angle
        vx_target: Horizontal velocity target [m/s]
        vy_target: Vertical velocity target, negative when descending [m/s]
    """
    phase: GuidancePhase
    power: float
    target_angle: float
    oriented: bool
    vx_target: float
    vy_target: float


def coupled_descent_limit(distance: float, height: float, closing: float, margin: float) -> float:
    """Fastest descent that keeps the vertical time-to-go `margin` times the horizontal one.

    Args:
        distance: Horizontal distance to the platform [px]
        height: Height above the platform [px]
        closing: Speed toward the platform [m/s]
        margin: Ratio of vertical to horizontal time-to-go

    Returns:
        Vertical velocity bound [m/s]; 0 when not closing, -inf when there
        is nothing to line up or descend
    """
    if distance <= 0.0 or height <= 0.0:
        return -math.inf
    return -height * max(closing, 0.0) / (margin * distance)


@dataclass
class LandingGuidance:
    """Landing law bound to one thruster profile.

    Attributes:
        profile: Thruster geometry, speed bands and touchdown box
        horizontal_gain: Horizontal acceleration per unit velocity error [1/s]
        vertical_gain: Vertical acceleration per unit velocity error [1/s]
        max_tilt: Largest thrust angle from vertical [deg]
        retarget_angle: Heading changes up to this size keep the held heading [deg]
        steering_threshold: Thrust demand, as a fraction of full power, below
            which the held heading is kept
    """
    profile: ThrusterProfile
    horizontal_gain: float = 1.5
    vertical_gain: float = 10.0
    max_tilt: float = 45.0
    retarget_angle: float = 3.0
    steering_threshold: float = 0.05
    _bearing: float | None = field(default=None, init=False, repr=False)
    _touchdown: bool = field(default=False, init=False, repr=False)

    def reset(self) -> None:
        """Forget the held heading and touchdown state (on control mode changes)."""
        self._bearing = None
        self._touchdown = False

    @property
    def bearing(self) -> float | None:
        """World bearing of the thrust the vehicle is held at [deg]."""
        return self._bearing

    @property
    def touchdown(self) -> bool:
        """Whether the final upright drop has been committed to."""
        return self._touchdown

    def descent_target(self, dy: float, scale: float = S_SCALE) -> float:
        """Vertical velocity target from height alone [m/s], negative when descending."""
        profile = self.profile
        lead = profile.descent_deceleration / self.vertical_gain
        return -profile.vertical.envelope(dy, profile.descent_deceleration, lead, scale)

    def approach_speed(self, distance: float, scale: float = S_SCALE) -> float:
        """Speed toward the platform allowed at a horizontal distance [m/s].

        The speed also stays under a braking curve that reaches zero at the
        platform.
        """
        decel = self.profile.approach_deceleration
        return min(
            self.profile.horizontal.envelope(distance, decel, decel / self.horizontal_gain, scale),
            math.sqrt(2.0 * decel * distance / scale),
        )

    def velocity_targets(
        self,
        dx: float,
        dy: float,
        vx: float,
        scale: float = S_SCALE,
        margin: float = 1.25,
    ) -> tuple[float, float]:
        """Horizontal and vertical velocity targets for the current geometry.

        Args:
            dx: Horizontal offset from platform [px]
            dy: Height above platform [px]
            vx: Horizontal velocity [m/s]
            scale: Pixels per metre
            margin: Coupling ratio between vertical and horizontal time-to-go

        Returns:
            (vx target, vy target) [m/s]
        """
        vy_target = self.descent_target(dy, scale)
        distance = abs(dx)
        if not distance > self.profile.dead_band:
            return 0.0, vy_target

        toward = -math.copysign(1.0, dx)
        vy_target = max(vy_target, coupled_descent_limit(distance, dy, toward * vx, margin))
        return toward * self.approach_speed(distance, scale), vy_target

    def compute(self, ctx: FlightContext) -> GuidanceCommand:
        """Run one tick of guidance and command the profile's thruster."""
        cfg = ctx.config
        profile = self.profile
        nav = navigate(ctx)
        platform = ctx.lander.platform_location()
        dx = nav.x - platform.x
        dy = platform.y - nav.y
        box_x, box_y = profile.touchdown_box
        landing = abs(dx) < box_x and self._clearance(ctx, dy) < box_y
        if landing:
            vx_target, vy_target = 0.0, self.descent_target(dy, cfg.spatial_scale)
        else:
            vx_target, vy_target = self.velocity_targets(
                dx, dy, nav.vx, cfg.spatial_scale, cfg.alignment_margin
            )
        if landing and profile.cut_at_touchdown and not self._touchdown:
            logger.debug("Tick %d: committed to touchdown at dx=%.1f dy=%.1f", ctx.ticks, dx, dy)
            self._touchdown = True

        if self._touchdown:
            return self._actuate(ctx, nav, GuidancePhase.TOUCHDOWN, 0.0, 0.0, vx_target, vy_target)

        if landing:
            self._bearing = 0.0
            ax = 0.0
        else:
            ax = self.horizontal_gain * (vx_target - nav.vx)
        ay = self.vertical_gain * (vy_target - nav.vy) + G_ACCEL
        power = self._steer(ax, ay)
        target = profile.orientation_for(self._bearing)

        toward = -math.copysign(1.0, dx)
        if landing:
            phase = GuidancePhase.TOUCHDOWN
        elif nav.vy < vy_target:
            phase = GuidancePhase.DESCENT_BRAKE
        elif not abs(dx) > profile.dead_band:
            phase = GuidancePhase.HOLD
        elif toward * nav.vx > abs(vx_target):
            phase = GuidancePhase.BRAKE
        else:
            phase = GuidancePhase.ACCELERATE
        return self._actuate(ctx, nav, phase, power, target, vx_target, vy_target)

    def _steer(self, ax: float, ay: float) -> float:
        """Update the held thrust bearing for a desired acceleration; return the power.

        ay includes gravity compensation. The vertical component is raised
        as needed so the thrust never tilts past max_tilt.
        """
        full = self.profile.max_acceleration
        tx = ax
        ty = max(ay, abs(ax) / math.tan(math.radians(self.max_tilt)))
        if self._bearing is None:
            self._bearing = 0.0

        demand = math.hypot(tx, ty)
        if not math.isfinite(demand):
            return 0.0
        if demand >= self.steering_threshold * full:
            bearing = math.degrees(math.atan2(tx, ty))
            if angular_difference(bearing, self._bearing) > self.retarget_angle:
                self._bearing = bearing

        held = math.radians(self._bearing)
        along = tx * math.sin(held) + ty * math.cos(held)
        return float(np.clip(along / full, 0.0, 1.0))

    def _clearance(self, ctx: FlightContext, dy: float) -> float:
        """Height above the platform, or above nearer ground under the main engine."""
        if self.profile.ranged_touchdown:
            ranged = ctx.lander.range_dist()
            if ranged >= 0.0:
                return min(dy, ranged)
        return dy

    def _actuate(
        self,
        ctx: FlightContext,
        nav: NavigationSolution,
        phase: GuidancePhase,
        power: float,
        target: float,
        vx_target: float,
        vy_target: float,
    ) -> GuidanceCommand:
        oriented = rotate_to(ctx.lander, nav.angle, target, ctx.config.rotation_tolerance)
        applied = power if oriented else 0.0
        set_thrust(ctx.lander, self.profile.thruster, applied)
        return GuidanceCommand(phase, applied, target, oriented, vx_target, vy_target)
