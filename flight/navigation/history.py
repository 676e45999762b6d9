"""Position history and the fallback velocity/position estimators.

Each axis keeps a fixed-length buffer of averaged position samples, most
recent first. A slot holding exactly 0.0 has never been written and is
excluded from estimation.

Velocity is recovered by finite differences over the buffer; position is
dead-reckoned one step forward from the latest sample. Both convert between
pixels and metres with the spatial scale, and flip sign on the vertical axis
because screen y grows downward while vertical velocity is positive up.
"""

from dataclasses import dataclass, field
from enum import Enum

import numpy as np
from numpy.typing import NDArray


class Axis(Enum):
    X = "x"
    Y = "y"


@dataclass
class HistoryBuffer:
    """Fixed-capacity position history, most recent first.

    Attributes:
        length: Number of slots
        samples: Buffer contents [px]; 0.0 marks an unpopulated slot
    """
    length: int = 22
    samples: NDArray[np.float64] = field(init=False)

    def __post_init__(self) -> None:
        if self.length < 2:
            raise ValueError(f"History length must be at least 2, got {self.length}")
        self.samples = np.zeros(self.length)

    def push(self, sample: float) -> None:
        """Shift everything one slot back (oldest drops off) and insert at the front."""
        self.samples[1:] = self.samples[:-1]
        self.samples[0] = sample

    @property
    def latest(self) -> float:
        return float(self.samples[0])

    @property
    def populated(self) -> int:
        """Number of written slots."""
        return int(np.count_nonzero(self.samples))


def estimate_velocity(buffer: HistoryBuffer, axis: Axis, dt: float, scale: float) -> float:
    """Mean velocity over all consecutive populated pairs [m/s].

    Returns:
        NaN until at least two consecutive slots are populated
    """
    newer = buffer.samples[:-1]
    older = buffer.samples[1:]
    valid = (newer != 0.0) & (older != 0.0)
    if not valid.any():
        return float("nan")

    step = float(np.mean(newer[valid] - older[valid]))
    if axis is Axis.Y:
        step = -step
    return step / dt / scale


def estimate_position(
    buffer: HistoryBuffer,
    axis: Axis,
    velocity: float,
    dt: float,
    scale: float,
) -> float:
    """Dead-reckon one step forward from the latest history sample [px].

    Args:
        buffer: History for this axis
        axis: Which axis the buffer holds
        velocity: Currently trusted velocity on this axis [m/s]
        dt: Time step [s]
        scale: Pixels per metre

    Returns:
        Estimated position; NaN if the buffer is still empty. A non-finite
        velocity holds the latest sample.
    """
    latest = buffer.latest
    if latest == 0.0:
        return float("nan")
    if not np.isfinite(velocity):
        return latest

    displacement = velocity * dt * scale
    if axis is Axis.Y:
        return latest - displacement
    return latest + displacement
