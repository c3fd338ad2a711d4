import pytest

from config import ConfigurationError
from phase_gate import PhaseGate


def test_no_attempt_before_a_full_window_is_observed():
    gate = PhaseGate()
    gate.update_for_phase(0.01)
    assert gate.try_consume_inhale_attempt() is False
    assert gate.inhale_attempt_used() is True


def test_inhale_attempt_once_per_window():
    gate = PhaseGate()
    gate.update_for_phase(0.9)
    gate.update_for_phase(0.1)
    assert gate.try_consume_inhale_attempt() is True
    assert gate.try_consume_inhale_attempt() is False

    # Leaving the window without reaching the exhale window does not re-arm it.
    gate.update_for_phase(0.5)
    gate.update_for_phase(0.1)
    assert gate.try_consume_inhale_attempt() is False

    gate.update_for_phase(0.8)
    gate.update_for_phase(0.05)
    assert gate.try_consume_inhale_attempt() is True


def test_exhale_attempt_once_per_window():
    gate = PhaseGate()
    gate.update_for_phase(0.1)
    gate.update_for_phase(0.9)
    assert gate.try_consume_exhale_attempt() is True
    assert gate.try_consume_exhale_attempt() is False
    gate.update_for_phase(0.99)
    assert gate.try_consume_exhale_attempt() is False


def test_out_of_window_attempts_are_silent_no_ops():
    gate = PhaseGate()
    gate.update_for_phase(0.1)
    gate.update_for_phase(0.9)
    gate.update_for_phase(0.5)
    assert gate.try_consume_inhale_attempt() is False
    assert gate.try_consume_exhale_attempt() is False
    # The failed attempts did not use anything up.
    assert gate.inhale_attempt_used() is False
    assert gate.exhale_attempt_used() is False


def test_window_thresholds_are_strict():
    gate = PhaseGate(inhale_threshold=0.25, exhale_threshold=0.75)
    assert gate.is_inhale_window(0.2499) is True
    assert gate.is_inhale_window(0.25) is False
    assert gate.is_exhale_window(0.75) is False
    assert gate.is_exhale_window(0.7501) is True


def test_reset_restores_both_flags():
    gate = PhaseGate()
    gate.update_for_phase(0.1)
    gate.update_for_phase(0.9)
    gate.reset()
    assert gate.inhale_attempt_used() is True
    assert gate.exhale_attempt_used() is True


@pytest.mark.parametrize('inhale,exhale', [(0.8, 0.2), (0.5, 0.5), (0.0, 0.75), (0.25, 1.0)])
def test_invalid_thresholds_are_rejected(inhale, exhale):
    with pytest.raises(ConfigurationError):
        PhaseGate(inhale_threshold=inhale, exhale_threshold=exhale)
