# -*- coding: utf-8 -*-
########################
# phase_gate.py
########################
# Purpose:
# - Per half-cycle attempt gate.
# - Allows at most one scored press per inhale window and one scored release per exhale window.
#
# Design notes:
# - No Qt usage. Pure gameplay logic.
# - Both "attempt used" flags start set, so nothing scores before the player has seen a full window.
# - A window's flag is cleared only once the opposite window has been entered. Staying inside one long
#   window never re-arms it.
# - update_for_phase must run before any input is accepted in the same tick.
#
########################
# Interfaces:
# Public classes:
# - class PhaseGate
#   - __init__(inhale_threshold: float = 0.25, exhale_threshold: float = 0.75)
#   - is_inhale_window(value: float) -> bool
#   - is_exhale_window(value: float) -> bool
#   - update_for_phase(value: float) -> None
#   - try_consume_inhale_attempt() -> bool
#   - try_consume_exhale_attempt() -> bool
#   - inhale_attempt_used() -> bool
#   - exhale_attempt_used() -> bool
#   - reset() -> None
#
# Inputs:
# - Breath phase value from BreathClock, once per tick.
#
# Outputs:
# - Accept or reject decisions for press and release inputs routed by GameSession.
#
########################

from __future__ import annotations

from config import ConfigurationError


class PhaseGate:
    def __init__(self, inhale_threshold: float = 0.25, exhale_threshold: float = 0.75) -> None:
        inhale = float(inhale_threshold)
        exhale = float(exhale_threshold)
        if not 0.0 < inhale < exhale < 1.0:
            raise ConfigurationError(
                f"window thresholds must satisfy 0 < inhale < exhale < 1, got inhale={inhale} exhale={exhale}"
            )
        self._inhale_threshold = inhale
        self._exhale_threshold = exhale
        self._value = 0.0
        self._inhale_attempt_used = True
        self._exhale_attempt_used = True

    def reset(self) -> None:
        self._value = 0.0
        self._inhale_attempt_used = True
        self._exhale_attempt_used = True

    def is_inhale_window(self, value: float) -> bool:
        return float(value) < self._inhale_threshold

    def is_exhale_window(self, value: float) -> bool:
        return float(value) > self._exhale_threshold

    def inhale_attempt_used(self) -> bool:
        return bool(self._inhale_attempt_used)

    def exhale_attempt_used(self) -> bool:
        return bool(self._exhale_attempt_used)

    def update_for_phase(self, value: float) -> None:
        self._value = float(value)
        if self._exhale_attempt_used and self.is_inhale_window(self._value):
            self._exhale_attempt_used = False
        if self._inhale_attempt_used and self.is_exhale_window(self._value):
            self._inhale_attempt_used = False

    def try_consume_inhale_attempt(self) -> bool:
        if self._inhale_attempt_used or not self.is_inhale_window(self._value):
            return False
        self._inhale_attempt_used = True
        return True

    def try_consume_exhale_attempt(self) -> bool:
        if self._exhale_attempt_used or not self.is_exhale_window(self._value):
            return False
        self._exhale_attempt_used = True
        return True


def _run_unit_tests() -> None:
    gate = PhaseGate()

    # Nothing scores before a full window has been observed.
    gate.update_for_phase(0.0)
    assert gate.try_consume_inhale_attempt() is False

    # Entering the inhale window re-armed the exhale attempt.
    gate.update_for_phase(0.9)
    assert gate.try_consume_exhale_attempt() is True
    assert gate.try_consume_exhale_attempt() is False

    gate.update_for_phase(0.1)
    assert gate.try_consume_inhale_attempt() is True
    assert gate.try_consume_inhale_attempt() is False

    gate.update_for_phase(0.95)
    assert gate.try_consume_exhale_attempt() is True
    assert gate.try_consume_exhale_attempt() is False

    # Mid-cycle inputs are silent no-ops.
    gate.update_for_phase(0.5)
    assert gate.try_consume_inhale_attempt() is False


if __name__ == "__main__":
    _run_unit_tests()
    print("phase_gate.py: ok")
