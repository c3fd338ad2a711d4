import math

import pytest

from breath_clock import BreathClock, phase_at
from breath_models import BreathDirection
from config import ConfigurationError


@pytest.mark.parametrize('period', [1.0, 250.0, 10000.0, 12345.6])
def test_phase_extremes(period):
    assert phase_at(0, period).value == pytest.approx(0.0, abs=1e-9)
    assert phase_at(period / 2, period).value == pytest.approx(1.0, abs=1e-9)
    assert phase_at(period, period).value == pytest.approx(0.0, abs=1e-9)


def test_phase_quarter_cycle_is_midpoint():
    expected = 0.5 - 0.5 * math.cos(math.pi / 2)
    assert phase_at(2500, 10000).value == pytest.approx(expected)
    assert phase_at(2500, 10000).value == pytest.approx(0.5)


def test_phase_value_stays_in_unit_interval():
    for elapsed in range(0, 30000, 37):
        value = phase_at(elapsed, 10000).value
        assert 0.0 <= value <= 1.0


def test_direction_boundaries_are_offset_by_a_quarter_period():
    period = 10000
    assert phase_at(0, period).direction == BreathDirection.INHALING
    assert phase_at(2499, period).direction == BreathDirection.INHALING
    assert phase_at(2500, period).direction == BreathDirection.EXHALING
    assert phase_at(5000, period).direction == BreathDirection.EXHALING
    assert phase_at(7499, period).direction == BreathDirection.EXHALING
    assert phase_at(7500, period).direction == BreathDirection.INHALING


def test_clock_clamps_negative_elapsed_time():
    clock = BreathClock(10000)
    phase = clock.update_elapsed_ms(-250)
    assert clock.elapsed_ms() == 0.0
    assert phase.value == 0.0
    assert phase.direction == BreathDirection.INHALING


@pytest.mark.parametrize('period', [0, -1, -10000])
def test_clock_rejects_non_positive_period(period):
    with pytest.raises(ConfigurationError):
        BreathClock(period)
