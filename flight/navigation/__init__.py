"""Navigation: sensor health, position history and fallback estimators."""

from flight.navigation.estimator import (
    NavigationSolution,
    navigate,
    sample_mean,
    update_history,
)
from flight.navigation.health import (
    ESTIMABLE,
    EstimatorSelection,
    Quantity,
    SensorHealth,
    Source,
)
from flight.navigation.history import (
    Axis,
    HistoryBuffer,
    estimate_position,
    estimate_velocity,
)
from flight.navigation.monitor import SensorHealthMonitor, tolerance_for
from flight.navigation.selector import read, update_selection

__all__ = [
    "Axis",
    "ESTIMABLE",
    "EstimatorSelection",
    "HistoryBuffer",
    "NavigationSolution",
    "Quantity",
    "SensorHealth",
    "SensorHealthMonitor",
    "Source",
    "estimate_position",
    "estimate_velocity",
    "navigate",
    "read",
    "sample_mean",
    "tolerance_for",
    "update_history",
    "update_selection",
]
