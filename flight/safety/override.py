"""Sonar-based collision avoidance.

Runs after guidance each tick and may replace its commands. The sonar
returns one distance per 10 degree bin, bin 0 pointing straight up and bins
increasing clockwise; -1 marks a bin with no return.

The reaction distance grows with the square of the speed, floored at
`min_distance`. Near the platform the override stands down so that it does
not fight the final approach.
"""

import logging
from dataclasses import dataclass, field
from enum import IntEnum

import numpy as np
from numpy.typing import NDArray

from flight.context import FlightContext
from flight.control.actuators import set_thrust
from flight.control.rotation import rotate_to
from flight.guidance.profiles import ThrusterProfile
from flight.navigation.estimator import navigate
from lander.constants import SONAR_BINS, SONAR_INVALID
from lander.dynamics.state import wrap_angle

logger = logging.getLogger(__name__)

BIN_WIDTH = 360.0 / SONAR_BINS

# Sectors scanned for each direction of motion
RIGHTWARD_BINS = np.arange(5, 14)
LEFTWARD_BINS = np.arange(22, 32)
DOWNWARD_BINS = np.arange(14, 22)
UPWARD_BINS = np.concatenate([np.arange(0, 5), np.arange(32, 36)])


class OverrideAction(IntEnum):
    NONE = 0
    HORIZONTAL_ROTATE = 1
    HORIZONTAL_THRUST = 2
    VERTICAL_ROTATE = 3
    VERTICAL_THRUST = 4


def nearest_return(sonar: NDArray[np.float64], bins: NDArray[np.int64]) -> tuple[float, float]:
    """Closest valid return within a sector.

    Returns:
        (distance [px], bearing [deg]); (inf, nan) if the sector is empty
    """
    sector = sonar[bins]
    valid = sector > SONAR_INVALID
    if not valid.any():
        return float("inf"), float("nan")
    distances = np.where(valid, sector, np.inf)
    idx = int(np.argmin(distances))
    return float(distances[idx]), float(bins[idx] * BIN_WIDTH)


@dataclass
class SafetyOverride:
    """Collision avoidance for one thruster profile.

    Attributes:
        profile: Thruster geometry and stand-down box
        min_distance: Reaction distance floor [px]
        low_speed_fraction: Smallest fraction of the reaction distance used horizontally
        full_speed: Horizontal speed at which the full reaction distance applies [m/s]
        ascent_speed: Vertical velocity above which the upward sector is scanned [m/s]
        hover_speed: Vertical velocity above which the upward burn is cut [m/s]
    """
    profile: ThrusterProfile
    min_distance: float = 75.0
    low_speed_fraction: float = 0.25
    full_speed: float = 5.0
    ascent_speed: float = 5.0
    hover_speed: float = 1.0
    _last: OverrideAction = field(default=OverrideAction.NONE, init=False, repr=False)

    def apply(self, ctx: FlightContext) -> OverrideAction:
        """Check the sonar and override guidance if an obstacle is too close."""
        lander = ctx.lander
        tolerance = ctx.config.rotation_tolerance
        profile = self.profile
        nav = navigate(ctx)
        platform = lander.platform_location()
        dx = platform.x - nav.x
        dy = platform.y - nav.y

        box_x, box_y = profile.override_box
        if abs(dx) < box_x and abs(dy) < box_y:
            return self._report(ctx, OverrideAction.NONE)

        reaction = max(self.min_distance, nav.vx ** 2 + nav.vy ** 2)
        sonar = lander.sonar()
        action = OverrideAction.NONE

        bins = RIGHTWARD_BINS if nav.vx > 0 else LEFTWARD_BINS
        distance, bearing = nearest_return(sonar, bins)
        fraction = max(self.low_speed_fraction, min(abs(nav.vx) / self.full_speed, 1.0))
        if distance < reaction * fraction and distance < min(reaction, abs(dx)):
            away = profile.orientation_for(wrap_angle(bearing + 180.0))
            if not rotate_to(lander, nav.angle, away, tolerance):
                set_thrust(lander, profile.thruster, 0.0)
                return self._report(ctx, OverrideAction.HORIZONTAL_ROTATE)
            set_thrust(lander, profile.thruster, 1.0)
            action = OverrideAction.HORIZONTAL_THRUST

        bins = UPWARD_BINS if nav.vy > self.ascent_speed else DOWNWARD_BINS
        distance, _ = nearest_return(sonar, bins)
        if distance < reaction:
            if not rotate_to(lander, nav.angle, profile.descent_angle, tolerance):
                set_thrust(lander, profile.thruster, 0.0)
                return self._report(ctx, OverrideAction.VERTICAL_ROTATE)
            power = 0.0 if nav.vy > self.hover_speed else profile.override_power
            set_thrust(lander, profile.thruster, power)
            action = OverrideAction.VERTICAL_THRUST

        return self._report(ctx, action)

    def _report(self, ctx: FlightContext, action: OverrideAction) -> OverrideAction:
        if (action is OverrideAction.NONE) != (self._last is OverrideAction.NONE):
            if action is OverrideAction.NONE:
                logger.debug("Tick %d: override released", ctx.ticks)
            else:
                logger.debug("Tick %d: override engaged (%s)", ctx.ticks, action.name)
        self._last = action
        return action
