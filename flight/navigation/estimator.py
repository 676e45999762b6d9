"""History maintenance and the per-tick navigation solution."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, NamedTuple

import numpy as np

from flight.navigation.health import Quantity, Source
from flight.navigation.history import Axis
from flight.navigation.selector import POSITION_ON, read

if TYPE_CHECKING:
    from flight.context import FlightContext

logger = logging.getLogger(__name__)


class NavigationSolution(NamedTuple):
    """One consistent snapshot of the vehicle state for a control tick."""
    x: float  # px
    y: float  # px, down positive
    vx: float  # m/s
    vy: float  # m/s, up positive
    angle: float  # deg, clockwise from vertical


def sample_mean(ctx: FlightContext, quantity: Quantity, count: int) -> float:
    """Average `count` reads of a quantity through its active source."""
    reads = np.fromiter((read(ctx, quantity) for _ in range(count)), dtype=np.float64, count=count)
    return float(reads.mean())


def update_history(ctx: FlightContext) -> None:
    """Push one averaged position sample per axis into the history.

    Samples go through the active source, so a condemned position sensor
    keeps the history alive by dead reckoning. Non-finite samples are not
    stored.
    """
    samples = ctx.config.history_samples
    for axis in Axis:
        sample = sample_mean(ctx, POSITION_ON[axis], samples)
        if not np.isfinite(sample):
            logger.debug("Tick %d: no usable %s position sample", ctx.ticks, axis.value)
            continue
        ctx.history[axis].push(sample)


def navigate(ctx: FlightContext) -> NavigationSolution:
    """Read every quantity from its active source.

    Raw position and velocity readings are averaged over
    `navigation_samples` reads. Estimates are read once, as is the angle,
    which wraps at 360.
    """
    samples = ctx.config.navigation_samples

    def linear(quantity: Quantity) -> float:
        count = samples if ctx.selection.source(quantity) is Source.RAW else 1
        return sample_mean(ctx, quantity, count)

    return NavigationSolution(
        x=linear(Quantity.POSITION_X),
        y=linear(Quantity.POSITION_Y),
        vx=linear(Quantity.VELOCITY_X),
        vy=linear(Quantity.VELOCITY_Y),
        angle=read(ctx, Quantity.ANGLE),
    )
