"""Guidance algorithms for the lander.

Guidance decides which thruster flies the vehicle and how it should move
toward the landing platform given the current navigation solution.

Available algorithms:
    select_mode: Control mode from actuator health
    LandingGuidance: Bounded-velocity platform landing law
"""

from flight.guidance.landing import (
    GuidanceCommand,
    GuidancePhase,
    LandingGuidance,
    coupled_descent_limit,
)
from flight.guidance.modes import MODE_PRIORITY, ControlMode, select_mode
from flight.guidance.profiles import (
    LEFT_PROFILE,
    MAIN_PROFILE,
    PROFILES,
    RIGHT_PROFILE,
    ThrusterProfile,
    VelocityBands,
)

__all__ = [
    "ControlMode",
    "GuidanceCommand",
    "GuidancePhase",
    "LandingGuidance",
    "LEFT_PROFILE",
    "MAIN_PROFILE",
    "MODE_PRIORITY",
    "PROFILES",
    "RIGHT_PROFILE",
    "ThrusterProfile",
    "VelocityBands",
    "coupled_descent_limit",
    "select_mode",
]
