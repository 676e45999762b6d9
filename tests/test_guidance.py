"""Tests for control mode selection and landing guidance."""

import itertools
import math

import numpy as np
import pytest
from numpy.testing import assert_allclose

from flight.config import FlightConfig
from flight.context import FlightContext
from flight.control import Thruster
from flight.guidance import (
    LEFT_PROFILE,
    MAIN_PROFILE,
    MODE_PRIORITY,
    RIGHT_PROFILE,
    ControlMode,
    GuidancePhase,
    LandingGuidance,
    VelocityBands,
    coupled_descent_limit,
    select_mode,
)
from lander.constants import G_ACCEL, MT_ACCEL
from lander.interface import ActuatorHealth

# =============================================================================
# Mode Selection
# =============================================================================


class TestSelectMode:
    """Test control mode priority."""

    @pytest.mark.parametrize(
        "main,left,right",
        list(itertools.product([True, False], repeat=3)),
    )
    def test_priority(self, main, left, right):
        mode = select_mode(ActuatorHealth(main=main, left=left, right=right))
        if main:
            assert mode is ControlMode.MAIN
        elif right:
            assert mode is ControlMode.RIGHT_ONLY
        elif left:
            assert mode is ControlMode.LEFT_ONLY
        else:
            assert mode is ControlMode.UNPOWERED

    def test_right_used_regardless_of_left(self):
        assert select_mode(ActuatorHealth(False, False, True)) is ControlMode.RIGHT_ONLY
        assert select_mode(ActuatorHealth(False, True, True)) is ControlMode.RIGHT_ONLY

    def test_priority_order(self):
        assert [mode for mode, _ in MODE_PRIORITY] == [
            ControlMode.MAIN, ControlMode.RIGHT_ONLY, ControlMode.LEFT_ONLY
        ]
        assert [thruster for _, thruster in MODE_PRIORITY] == [
            Thruster.MAIN, Thruster.RIGHT, Thruster.LEFT
        ]


# =============================================================================
# Profiles
# =============================================================================


class TestProfiles:
    """Test thruster geometry and speed bands."""

    def test_bands(self):
        bands = VelocityBands(far=15.0, mid=10.0, near=5.0)
        assert bands.bound(300.0) == 15.0
        assert bands.bound(150.0) == 10.0
        assert bands.bound(100.0) == 5.0
        assert bands.bound(-50.0) == 5.0

    def test_envelope_inside_near_band(self):
        assert MAIN_PROFILE.vertical.envelope(50.0, 8.0, 0.8, 5.0) == 4.0

    def test_envelope_far_from_edges(self):
        assert MAIN_PROFILE.vertical.envelope(500.0, 8.0, 0.8, 5.0) == 20.0

    def test_envelope_brakes_ahead_of_edge(self):
        # 50 px outside the far edge: sqrt(10^2 + 2 * 8 * 10) less the lead
        assert_allclose(MAIN_PROFILE.vertical.envelope(250.0, 8.0, 0.8, 5.0), math.sqrt(260.0) - 0.8)

    def test_envelope_never_negative(self):
        bands = VelocityBands(far=15.0, mid=1.0, near=0.0)
        assert bands.envelope(201.0, 2.0, 5.0, 5.0) == 0.0

    @pytest.mark.parametrize(
        "profile,descent,push_left,push_right",
        [
            (MAIN_PROFILE, 0.0, 270.0, 90.0),
            (RIGHT_PROFILE, 90.0, 0.0, 180.0),
            (LEFT_PROFILE, 270.0, 180.0, 0.0),
        ],
    )
    def test_orientations(self, profile, descent, push_left, push_right):
        assert_allclose(profile.descent_angle, descent)
        assert_allclose(profile.orientation_for(270.0), push_left)
        assert_allclose(profile.orientation_for(90.0), push_right)

    def test_side_modes_are_more_cautious(self):
        for side in (RIGHT_PROFILE, LEFT_PROFILE):
            assert side.vertical.far > MAIN_PROFILE.vertical.far
            assert side.dead_band < MAIN_PROFILE.dead_band
            assert side.cut_at_touchdown
            assert not side.ranged_touchdown
        assert not MAIN_PROFILE.cut_at_touchdown
        assert MAIN_PROFILE.ranged_touchdown

    def test_override_power(self):
        assert MAIN_PROFILE.override_power == 1.0
        assert LEFT_PROFILE.override_power == 1.0
        assert RIGHT_PROFILE.override_power == 0.8


# =============================================================================
# Velocity Targets
# =============================================================================


class TestVelocityTargets:
    """Test distance envelopes and horizontal/vertical coupling."""

    def test_coupled_descent_limit(self):
        assert_allclose(coupled_descent_limit(300.0, 500.0, 10.0, 1.25), -500.0 * 10.0 / 375.0)
        assert coupled_descent_limit(300.0, 500.0, -3.0, 1.25) == 0.0
        assert coupled_descent_limit(0.0, 500.0, 3.0, 1.25) == -math.inf

    def test_aligned(self):
        guidance = LandingGuidance(MAIN_PROFILE)
        assert guidance.velocity_targets(0.0, 500.0, 0.0) == (0.0, -20.0)

    def test_no_coupling_inside_dead_band(self):
        guidance = LandingGuidance(MAIN_PROFILE)
        assert guidance.velocity_targets(10.0, 500.0, 0.0) == (0.0, -20.0)

    def test_not_closing_holds_altitude(self):
        guidance = LandingGuidance(MAIN_PROFILE)
        vx_target, vy_target = guidance.velocity_targets(-300.0, 500.0, 0.0)
        assert_allclose(vx_target, math.sqrt(180.0) - 2.0 / 1.5)
        assert vy_target == 0.0

    def test_receding_holds_altitude(self):
        guidance = LandingGuidance(MAIN_PROFILE)
        _, vy_target = guidance.velocity_targets(-300.0, 500.0, -5.0)
        assert vy_target == 0.0

    def test_descent_follows_closing_speed(self):
        guidance = LandingGuidance(MAIN_PROFILE)
        _, vy_target = guidance.velocity_targets(-300.0, 500.0, 10.0)
        assert_allclose(vy_target, -500.0 * 10.0 / (1.25 * 300.0))

    def test_descent_capped_by_band(self):
        guidance = LandingGuidance(MAIN_PROFILE)
        _, vy_target = guidance.velocity_targets(-300.0, 500.0, 15.0)
        assert vy_target == -20.0

    def test_points_at_platform(self):
        guidance = LandingGuidance(MAIN_PROFILE)
        assert guidance.velocity_targets(-300.0, 500.0, 0.0)[0] > 0.0
        assert guidance.velocity_targets(300.0, 500.0, 0.0)[0] < 0.0

    @pytest.mark.parametrize("profile", [MAIN_PROFILE, RIGHT_PROFILE, LEFT_PROFILE])
    def test_targets_within_bands(self, profile):
        guidance = LandingGuidance(profile)
        for distance in np.linspace(0.0, 500.0, 101):
            assert guidance.approach_speed(distance) <= profile.horizontal.bound(distance)
            assert guidance.descent_target(distance) >= profile.vertical.bound(distance)

    def test_approach_speed_positive_outside_dead_band(self):
        guidance = LandingGuidance(RIGHT_PROFILE)
        for distance in np.linspace(RIGHT_PROFILE.dead_band + 1.0, 500.0, 50):
            assert guidance.approach_speed(distance) > 0.0


# =============================================================================
# Landing Guidance
# =============================================================================


def make_context(lander) -> FlightContext:
    return FlightContext(lander=lander, config=FlightConfig(history_samples=5))


APPROACH_THRUST = 1.5 * (math.sqrt(180.0) - 2.0 / 1.5)


class TestMainGuidance:
    """Test the landing law driving the main thruster."""

    def test_hold_when_aligned(self, lander):
        command = LandingGuidance(MAIN_PROFILE).compute(make_context(lander))
        assert command.phase is GuidancePhase.HOLD
        assert lander.power["main"] == 0.0
        assert lander.rotations == []

    def test_descent_brake(self, lander):
        lander.readings["velocity_y"] = -25.0
        command = LandingGuidance(MAIN_PROFILE).compute(make_context(lander))
        assert command.phase is GuidancePhase.DESCENT_BRAKE
        assert lander.power["main"] == 1.0

    def test_descent_power_proportional(self, lander):
        lander.readings["velocity_y"] = -20.5
        command = LandingGuidance(MAIN_PROFILE).compute(make_context(lander))
        assert command.phase is GuidancePhase.DESCENT_BRAKE
        assert_allclose(lander.power["main"], (G_ACCEL + 5.0) / MT_ACCEL)

    def test_no_brake_below_target(self, lander):
        ctx = make_context(lander)
        guidance = LandingGuidance(MAIN_PROFILE)

        lander.readings["velocity_y"] = -25.0
        guidance.compute(ctx)
        lander.readings["velocity_y"] = -19.0
        assert guidance.compute(ctx).phase is GuidancePhase.HOLD
        assert lander.power["main"] == 0.0

    def test_rotates_before_thrusting(self, make_lander):
        lander = make_lander(x=212.0)
        command = LandingGuidance(MAIN_PROFILE).compute(make_context(lander))
        assert command.phase is GuidancePhase.ACCELERATE
        assert not command.oriented
        assert command.power == 0.0
        assert lander.power["main"] == 0.0
        assert_allclose(lander.rotations, [45.0])

    def test_accelerates_toward_platform_holding_altitude(self, make_lander):
        lander = make_lander(x=212.0, angle=45.0)
        command = LandingGuidance(MAIN_PROFILE).compute(make_context(lander))
        assert command.phase is GuidancePhase.ACCELERATE
        assert command.oriented
        assert command.vy_target == 0.0
        assert_allclose(lander.power["main"], math.sqrt(2.0) * APPROACH_THRUST / MT_ACCEL)
        assert lander.rotations == []

    def test_brakes_above_target(self, make_lander):
        lander = make_lander(x=812.0, vx=-20.0, angle=45.0)
        command = LandingGuidance(MAIN_PROFILE).compute(make_context(lander))
        assert command.phase is GuidancePhase.BRAKE
        assert_allclose(command.target_angle, 45.0)
        braking = 1.5 * (20.0 - (math.sqrt(180.0) - 2.0 / 1.5))
        assert_allclose(command.power, math.sqrt(2.0) * braking / MT_ACCEL)

    def test_damps_drift_inside_dead_band(self, make_lander):
        lander = make_lander(x=522.0, vx=3.0)
        command = LandingGuidance(MAIN_PROFILE).compute(make_context(lander))
        assert command.phase is GuidancePhase.HOLD
        assert command.vx_target == 0.0
        assert_allclose(command.target_angle, 315.0)
        assert_allclose(lander.rotations, [-45.0])

    def test_small_heading_change_keeps_heading(self, make_lander):
        ctx = make_context(make_lander(x=212.0, angle=45.0))
        guidance = LandingGuidance(MAIN_PROFILE)
        guidance.compute(ctx)
        ctx.lander.readings["velocity_y"] = -1.0
        command = guidance.compute(ctx)
        assert command.oriented
        assert_allclose(guidance.bearing, 45.0)

    def test_touchdown_stands_upright(self, make_lander):
        lander = make_lander(x=552.0, y=980.0, angle=10.0)
        command = LandingGuidance(MAIN_PROFILE).compute(make_context(lander))
        assert command.phase is GuidancePhase.TOUCHDOWN
        assert command.target_angle == 0.0
        assert command.vx_target == 0.0
        assert command.vy_target == -4.0
        assert_allclose(lander.rotations, [-10.0])

    def test_touchdown_keeps_braking_descent(self, make_lander):
        lander = make_lander(x=552.0, y=980.0, vy=-8.0)
        command = LandingGuidance(MAIN_PROFILE).compute(make_context(lander))
        assert command.phase is GuidancePhase.TOUCHDOWN
        assert lander.power["main"] == 1.0

    def test_no_touchdown_off_platform(self, make_lander):
        lander = make_lander(x=572.0, y=980.0)
        command = LandingGuidance(MAIN_PROFILE).compute(make_context(lander))
        assert command.phase is not GuidancePhase.TOUCHDOWN

    def test_touchdown_over_nearer_ground(self, make_lander):
        lander = make_lander(x=552.0, y=900.0, angle=10.0)
        lander.range_dist = lambda: 20.0
        command = LandingGuidance(MAIN_PROFILE).compute(make_context(lander))
        assert command.phase is GuidancePhase.TOUCHDOWN

    def test_touchdown_not_latched(self, make_lander):
        lander = make_lander(x=552.0, y=980.0)
        ctx = make_context(lander)
        guidance = LandingGuidance(MAIN_PROFILE)
        assert guidance.compute(ctx).phase is GuidancePhase.TOUCHDOWN
        lander.readings["position_y"] = 900.0
        assert guidance.compute(ctx).phase is not GuidancePhase.TOUCHDOWN
        assert not guidance.touchdown

    def test_reset_forgets_heading(self, make_lander):
        guidance = LandingGuidance(MAIN_PROFILE)
        guidance.compute(make_context(make_lander(x=212.0)))
        assert_allclose(guidance.bearing, 45.0)
        guidance.reset()
        assert guidance.bearing is None

    def test_never_touches_other_thrusters(self, make_lander):
        lander = make_lander(x=212.0, angle=45.0)
        LandingGuidance(MAIN_PROFILE).compute(make_context(lander))
        assert lander.power["left"] == 0.0
        assert lander.power["right"] == 0.0


class TestSideGuidance:
    """Test the landing law driving a single side thruster."""

    def test_right_tilts_to_push_left(self, make_lander):
        lander = make_lander(x=812.0)
        command = LandingGuidance(RIGHT_PROFILE).compute(make_context(lander))
        assert command.phase is GuidancePhase.ACCELERATE
        assert_allclose(command.target_angle, 45.0)
        assert lander.power["right"] == 0.0
        assert_allclose(lander.rotations, [45.0])

    def test_right_pushes_left(self, make_lander):
        lander = make_lander(x=812.0, angle=45.0)
        LandingGuidance(RIGHT_PROFILE).compute(make_context(lander))
        assert lander.power["right"] == 1.0
        assert lander.power["main"] == 0.0

    def test_right_descent_brake_rotates_first(self, lander):
        lander.readings["velocity_y"] = -30.0
        command = LandingGuidance(RIGHT_PROFILE).compute(make_context(lander))
        assert command.phase is GuidancePhase.DESCENT_BRAKE
        assert command.target_angle == 90.0
        assert lander.power["right"] == 0.0
        assert_allclose(lander.rotations, [90.0])

    def test_left_pushes_right(self, make_lander):
        lander = make_lander(x=212.0, angle=315.0)
        command = LandingGuidance(LEFT_PROFILE).compute(make_context(lander))
        assert_allclose(command.target_angle, 315.0)
        assert lander.power["left"] == 1.0

    def test_touchdown_flare(self, make_lander):
        lander = make_lander(x=522.0, y=990.0, vy=-5.0, angle=90.0)
        lander.right_thruster(1.0)
        guidance = LandingGuidance(RIGHT_PROFILE)
        command = guidance.compute(make_context(lander))
        assert command.phase is GuidancePhase.TOUCHDOWN
        assert guidance.touchdown
        assert lander.power["right"] == 0.0
        assert_allclose(lander.rotations, [-90.0])

    def test_touchdown_latched(self, make_lander):
        lander = make_lander(x=522.0, y=990.0, angle=90.0)
        ctx = make_context(lander)
        guidance = LandingGuidance(RIGHT_PROFILE)
        guidance.compute(ctx)
        lander.readings["position_x"] = 600.0
        lander.readings["position_y"] = 900.0
        assert guidance.compute(ctx).phase is GuidancePhase.TOUCHDOWN
        assert lander.power["right"] == 0.0

    def test_no_flare_outside_box(self, make_lander):
        lander = make_lander(x=562.0, y=990.0, angle=90.0)
        command = LandingGuidance(RIGHT_PROFILE).compute(make_context(lander))
        assert command.phase is not GuidancePhase.TOUCHDOWN
