"""Tests for the ease-out curve and ramp values."""

import pytest

from brightsync.easing import DEFAULT_STEPS, ease_out_quad, transition_values


class TestEaseOutQuad:
    def test_endpoints(self):
        assert ease_out_quad(0.0) == 0.0
        assert ease_out_quad(1.0) == 1.0

    def test_midpoint_is_ahead_of_linear(self):
        assert ease_out_quad(0.5) == pytest.approx(0.75)


class TestTransitionValues:
    def test_equal_endpoints_yield_nothing(self):
        assert list(transition_values(40, 40)) == []

    def test_rising_ramp(self):
        values = list(transition_values(20, 80))

        assert len(values) == DEFAULT_STEPS
        assert values[-1] == pytest.approx(80)
        assert all(b >= a for a, b in zip(values, values[1:]))

    def test_ease_out_increments_shrink(self):
        values = [20.0] + list(transition_values(20, 80))
        deltas = [b - a for a, b in zip(values, values[1:])]

        assert deltas[0] > deltas[-1]
        assert all(later < earlier for earlier, later in zip(deltas, deltas[1:]))

    def test_falling_ramp(self):
        values = list(transition_values(90, 10))

        assert values[-1] == pytest.approx(10)
        assert all(b <= a for a, b in zip(values, values[1:]))

    def test_first_step(self):
        values = list(transition_values(20, 80))
        # progress 1/15 -> eased 1 - (14/15)^2
        assert values[0] == pytest.approx(20 + 60 * (1 - (14 / 15) ** 2))

    def test_custom_step_count(self):
        assert list(transition_values(0, 100, steps=2)) == pytest.approx([75, 100])
