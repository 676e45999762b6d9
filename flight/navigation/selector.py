"""Estimator selection and source-resolved reads.

Downstream code never calls a raw sensor for an estimable quantity
directly: it goes through `read`, which dispatches on the active source so
that the binding is decided in one place.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Callable

from flight.navigation.health import ESTIMABLE, Quantity, Source
from flight.navigation.history import Axis, estimate_position, estimate_velocity
from lander.interface import LanderInterface

if TYPE_CHECKING:
    from flight.context import FlightContext

logger = logging.getLogger(__name__)

_AXIS = {
    Quantity.VELOCITY_X: Axis.X,
    Quantity.POSITION_X: Axis.X,
    Quantity.VELOCITY_Y: Axis.Y,
    Quantity.POSITION_Y: Axis.Y,
}

_VELOCITY_ON = {Axis.X: Quantity.VELOCITY_X, Axis.Y: Quantity.VELOCITY_Y}
POSITION_ON = {Axis.X: Quantity.POSITION_X, Axis.Y: Quantity.POSITION_Y}


def raw_reader(lander: LanderInterface, quantity: Quantity) -> Callable[[], float]:
    """Bound raw sensor accessor for a quantity."""
    return getattr(lander, quantity.value)


def update_selection(ctx: FlightContext) -> list[Quantity]:
    """Switch every condemned estimable quantity over to its estimator.

    Returns:
        Quantities switched during this call
    """
    switched = []
    for quantity in ESTIMABLE:
        if ctx.health.is_healthy(quantity):
            continue
        if ctx.selection.use_estimator(quantity):
            logger.info("%s now served by estimator", quantity.value)
            switched.append(quantity)
    return switched


def read(ctx: FlightContext, quantity: Quantity) -> float:
    """Read a quantity from its active source.

    Estimated velocities come from the position history. Estimated
    positions dead-reckon from the history using whichever velocity source
    is active on the same axis. Angle always comes from the raw sensor.
    """
    if ctx.selection.source(quantity) is Source.RAW:
        return raw_reader(ctx.lander, quantity)()

    cfg = ctx.config
    axis = _AXIS[quantity]
    buffer = ctx.history[axis]
    if quantity is _VELOCITY_ON[axis]:
        return estimate_velocity(buffer, axis, cfg.dt, cfg.spatial_scale)

    velocity = read(ctx, _VELOCITY_ON[axis])
    return estimate_position(buffer, axis, velocity, cfg.dt, cfg.spatial_scale)
