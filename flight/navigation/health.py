"""Sensor health and estimator selection state.

Both are latches: a sensor goes from healthy to condemned at most once, and
an estimable quantity goes from raw sensor to estimator at most once.
"""

from dataclasses import dataclass, field
from enum import Enum


class Quantity(Enum):
    """Monitored sensor quantities."""
    VELOCITY_X = "velocity_x"
    VELOCITY_Y = "velocity_y"
    POSITION_X = "position_x"
    POSITION_Y = "position_y"
    ANGLE = "angle"


# Quantities that have a fallback estimator. Angle has none.
ESTIMABLE = (
    Quantity.VELOCITY_X,
    Quantity.VELOCITY_Y,
    Quantity.POSITION_X,
    Quantity.POSITION_Y,
)


class Source(Enum):
    """Where reads of a quantity come from."""
    RAW = "raw"
    ESTIMATED = "estimated"


@dataclass
class SensorHealth:
    """Latched per-sensor health verdicts. Written only by the monitor."""
    _healthy: dict[Quantity, bool] = field(
        default_factory=lambda: {q: True for q in Quantity},
        init=False,
        repr=False,
    )

    def is_healthy(self, quantity: Quantity) -> bool:
        return self._healthy[quantity]

    def condemn(self, quantity: Quantity) -> bool:
        """Mark a sensor unreliable for the rest of the run.

        Returns:
            True if this call changed the verdict
        """
        if not self._healthy[quantity]:
            return False
        self._healthy[quantity] = False
        return True

    @property
    def condemned(self) -> list[Quantity]:
        return [q for q, ok in self._healthy.items() if not ok]

    def __repr__(self) -> str:
        names = ", ".join(q.value for q in self.condemned) or "none"
        return f"SensorHealth(condemned: {names})"


@dataclass
class EstimatorSelection:
    """Active source per estimable quantity."""
    _sources: dict[Quantity, Source] = field(
        default_factory=lambda: {q: Source.RAW for q in ESTIMABLE},
        init=False,
        repr=False,
    )

    def source(self, quantity: Quantity) -> Source:
        return self._sources.get(quantity, Source.RAW)

    def use_estimator(self, quantity: Quantity) -> bool:
        """Permanently route reads of quantity through its estimator.

        Returns:
            True if this call changed the binding
        """
        if quantity not in self._sources:
            raise ValueError(f"No estimator exists for {quantity.value}")
        if self._sources[quantity] is Source.ESTIMATED:
            return False
        self._sources[quantity] = Source.ESTIMATED
        return True

    @property
    def estimated(self) -> list[Quantity]:
        return [q for q, s in self._sources.items() if s is Source.ESTIMATED]
