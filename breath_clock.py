# -*- coding: utf-8 -*-
########################
# breath_clock.py
########################
# Purpose:
# - Single source of truth for the breathing cycle.
# - Converts elapsed session time into a phase value in [0, 1] and a direction label.
#
# Design notes:
# - No Qt usage. Keep this module pure and deterministic.
# - phase_at is a pure function. BreathClock only remembers the last elapsed time it was given.
# - Elapsed time is clamped to non-negative, so a session that has not started reads as phase 0, inhaling.
#
########################
# Interfaces:
# Public functions:
# - phase_at(elapsed_ms: float, rhythm_period_ms: float) -> BreathPhase
#
# Public classes:
# - class BreathClock
#   - __init__(rhythm_period_ms: float)
#   - rhythm_period_ms() -> float
#   - elapsed_ms() -> float
#   - update_elapsed_ms(elapsed_ms: float) -> BreathPhase
#   - phase() -> BreathPhase
#
# Inputs:
# - elapsed_ms from GameSession (milliseconds since the session started).
#
# Outputs:
# - BreathPhase used by PhaseGate, GameSession scoring and the harness renderer.
#
########################

from __future__ import annotations

import math

from breath_models import BreathDirection, BreathPhase
from config import ConfigurationError


def phase_at(elapsed_ms: float, rhythm_period_ms: float) -> BreathPhase:
    period = float(rhythm_period_ms)
    elapsed = float(elapsed_ms)

    value = 0.5 - 0.5 * math.cos(2.0 * math.pi * elapsed / period)
    # Guard against float drift pushing the value a hair outside [0, 1].
    value = min(1.0, max(0.0, value))

    # Direction flips a quarter period away from the value extremes, near the midpoint crossings.
    if (elapsed + period / 4.0) % period < period / 2.0:
        direction = BreathDirection.INHALING
    else:
        direction = BreathDirection.EXHALING

    return BreathPhase(value=value, direction=direction)


class BreathClock:
    def __init__(self, rhythm_period_ms: float) -> None:
        period = float(rhythm_period_ms)
        if not period > 0.0:
            raise ConfigurationError(f"rhythm period must be positive, got {rhythm_period_ms}")
        self._rhythm_period_ms = period
        self._elapsed_ms = 0.0

    def rhythm_period_ms(self) -> float:
        return float(self._rhythm_period_ms)

    def elapsed_ms(self) -> float:
        return float(self._elapsed_ms)

    def update_elapsed_ms(self, elapsed_ms: float) -> BreathPhase:
        value = float(elapsed_ms)
        if value < 0.0:
            value = 0.0
        self._elapsed_ms = value
        return self.phase()

    def phase(self) -> BreathPhase:
        return phase_at(self._elapsed_ms, self._rhythm_period_ms)


def _run_unit_tests() -> None:
    period = 10000.0
    assert abs(phase_at(0.0, period).value - 0.0) < 1e-9
    assert abs(phase_at(period / 2.0, period).value - 1.0) < 1e-9
    assert abs(phase_at(period, period).value - 0.0) < 1e-9
    assert abs(phase_at(period / 4.0, period).value - 0.5) < 1e-9

    assert phase_at(0.0, period).direction == BreathDirection.INHALING
    assert phase_at(period / 2.0, period).direction == BreathDirection.EXHALING

    clock = BreathClock(period)
    clock.update_elapsed_ms(-500.0)
    assert clock.elapsed_ms() == 0.0
    assert clock.phase().value == 0.0

    try:
        BreathClock(0.0)
    except ConfigurationError:
        pass
    else:
        raise AssertionError("zero period must be rejected")


if __name__ == "__main__":
    _run_unit_tests()
    print("breath_clock.py: ok")
