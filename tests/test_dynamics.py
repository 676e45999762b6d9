"""Unit tests for the planar lander state."""

import math

import pytest
from numpy.testing import assert_allclose

from lander.dynamics import LanderState, tilt_from_vertical, wrap_angle


class TestAngles:
    """Test angle normalisation helpers."""

    @pytest.mark.parametrize(
        "angle,expected",
        [(0.0, 0.0), (360.0, 0.0), (370.0, 10.0), (-10.0, 350.0), (-1e-17, 0.0)],
    )
    def test_wrap(self, angle, expected):
        assert_allclose(wrap_angle(angle), expected)

    @pytest.mark.parametrize("angle,expected", [(0.0, 0.0), (10.0, 10.0), (350.0, 10.0), (180.0, 180.0)])
    def test_tilt(self, angle, expected):
        assert_allclose(tilt_from_vertical(angle), expected)


class TestLanderState:
    """Test state construction and helpers."""

    def test_defaults(self):
        state = LanderState(x=100.0, y=200.0)
        assert (state.vx, state.vy, state.angle, state.time) == (0.0, 0.0, 0.0, 0.0)

    def test_angle_wrapped(self):
        assert_allclose(LanderState(x=0.0, y=0.0, angle=-90.0).angle, 270.0)

    def test_non_finite_rejected(self):
        with pytest.raises(ValueError):
            LanderState(x=math.nan, y=0.0)

    def test_copy_is_independent(self):
        state = LanderState(x=1.0, y=2.0, vx=3.0)
        copy = state.copy()
        copy.x = 50.0
        assert state.x == 1.0

    def test_speed_and_tilt(self):
        state = LanderState(x=0.0, y=0.0, vx=3.0, vy=-4.0, angle=340.0)
        assert_allclose(state.speed, 5.0)
        assert_allclose(state.tilt, 20.0)
