"""Collision avoidance."""

from flight.safety.override import OverrideAction, SafetyOverride, nearest_return

__all__ = ["OverrideAction", "SafetyOverride", "nearest_return"]
