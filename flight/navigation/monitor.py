"""Runtime sensor health monitoring.

Each tick every still-healthy sensor is read twice per trial. Readings of
the same quantity taken microseconds apart should agree within the sensor's
nominal noise; a difference beyond tolerance reveals a degraded sensor.
Verdicts latch: a condemned sensor is never re-trusted.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING

from flight.config import FlightConfig
from flight.control.rotation import angular_difference
from flight.navigation.health import Quantity
from flight.navigation.selector import raw_reader

if TYPE_CHECKING:
    from flight.context import FlightContext

logger = logging.getLogger(__name__)


def tolerance_for(config: FlightConfig, quantity: Quantity) -> float:
    if quantity is Quantity.ANGLE:
        return config.angle_tolerance
    if quantity in (Quantity.VELOCITY_X, Quantity.VELOCITY_Y):
        return config.velocity_tolerance
    return config.position_tolerance


def read_difference(quantity: Quantity, a: float, b: float) -> float:
    """Disagreement between two reads; angles are compared across the 0/360 seam."""
    if quantity is Quantity.ANGLE:
        return angular_difference(a, b)
    return abs(a - b)


@dataclass
class SensorHealthMonitor:
    """Two-sample consistency check on every healthy sensor."""

    def diagnose(self, ctx: FlightContext) -> list[Quantity]:
        """Run one round of trials.

        Returns:
            Sensors condemned during this call
        """
        cfg = ctx.config
        condemned = []
        for quantity in Quantity:
            if not ctx.health.is_healthy(quantity):
                continue
            sensor = raw_reader(ctx.lander, quantity)
            tolerance = tolerance_for(cfg, quantity)
            exceedances = sum(
                1
                for _ in range(cfg.diagnostic_trials)
                if read_difference(quantity, sensor(), sensor()) > tolerance
            )
            if exceedances >= cfg.fault_threshold and ctx.health.condemn(quantity):
                logger.warning(
                    "Tick %d: %s sensor condemned (%d/%d trials beyond %.2f)",
                    ctx.ticks, quantity.value, exceedances, cfg.diagnostic_trials, tolerance,
                )
                condemned.append(quantity)
        return condemned
