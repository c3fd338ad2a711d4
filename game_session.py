# -*- coding: utf-8 -*-
########################
# game_session.py
########################
# Purpose:
# - Top level session state machine: NOT_STARTED -> RUNNING -> ENDED.
# - Owns every piece of mutable game state (clock, gate, scoring, feedback text, pending events)
#   and wires them together once per tick and once per input.
#
# Design notes:
# - No Qt usage. The driver (harness QTimer or tests) calls tick(now_ms) at a fixed rate and routes
#   press() and release() between ticks on the same thread.
# - Tick order: elapsed time, end check, breath phase, gate transitions, due scheduled events,
#   feedback motion. Inputs always see the phase and gate state of the latest tick.
# - The first press starts the session and never scores, because the gate starts with both attempts used.
# - A press scores the distance to phase 0 (start of inhale). A release scores the distance to phase 1.
# - Combo announcements are ScheduledEvent records polled against elapsed time, not timer callbacks.
#   Pending events are dropped when the session ends.
# - ENDED is terminal. total score is frozen because no scoring calls happen after the transition.
#
########################
# Interfaces:
# Public classes:
# - class GameSession
#   - __init__(app_config: Optional[AppConfig] = None, *, rng: Optional[random.Random] = None,
#              logger: Optional[logging.Logger] = None)
#   - state() -> SessionState
#   - tick(now_ms: float) -> None
#   - press() -> Optional[ScoreEvent]
#   - release() -> Optional[ScoreEvent]
#   - phase() -> BreathPhase
#   - elapsed_ms() -> float
#   - remaining_ms() -> float
#   - total_score() -> int
#   - feedback_entries() -> list[FeedbackTextEntry]
#   - pending_events() -> list[ScheduledEvent]
#   - scoring_engine() -> ScoringEngine
#   - snapshot() -> SessionSnapshot
#   - summary() -> SessionSummary
#
# Inputs:
# - tick(now_ms) from the driving clock, press() and release() from the input layer.
#
# Outputs:
# - SessionSnapshot for the renderer and SessionSummary for the end screen.
#
########################

from __future__ import annotations

import logging
import random
from typing import List, Optional

import breath_clock
import feedback_text
import phase_gate
import scoring_engine
from breath_models import (
    BreathPhase,
    FeedbackTextEntry,
    ScheduledEvent,
    ScoreEvent,
    SessionSnapshot,
    SessionState,
    SessionSummary,
)
from config import AppConfig, ConfigurationError


class GameSession:
    def __init__(
        self,
        app_config: Optional[AppConfig] = None,
        *,
        rng: Optional[random.Random] = None,
        logger: Optional[logging.Logger] = None,
    ) -> None:
        config = app_config if app_config is not None else AppConfig()
        self._logger = logger if logger is not None else logging.getLogger("Breathe")

        time_limit_ms = float(config.session.time_limit_ms)
        if not time_limit_ms > 0.0:
            raise ConfigurationError(f"session time limit must be positive, got {config.session.time_limit_ms}")

        self._time_limit_ms = time_limit_ms
        self._clock = breath_clock.BreathClock(config.rhythm.period_ms)
        self._gate = phase_gate.PhaseGate(
            inhale_threshold=config.rhythm.inhale_threshold,
            exhale_threshold=config.rhythm.exhale_threshold,
        )
        self._scoring = scoring_engine.ScoringEngine(
            config.scoring.score_tiers(),
            combo_exponent=config.scoring.combo_exponent,
            combo_announce_lengths=config.scoring.combo_announce_lengths,
            combo_announce_above=config.scoring.combo_announce_above,
        )
        self._feedback = feedback_text.FeedbackTextStream(
            damping=config.feedback.damping,
            removal_epsilon=config.feedback.removal_epsilon,
            velocity_x_range=config.feedback.velocity_x_range,
            velocity_y_range=config.feedback.velocity_y_range,
            rng=rng,
        )
        self._feedback_origin = (float(config.feedback.origin[0]), float(config.feedback.origin[1]))
        self._combo_announce_delay_ms = float(config.scoring.combo_announce_delay_ms)

        self._state = SessionState.NOT_STARTED
        self._start_timestamp_ms: Optional[float] = None
        self._last_now_ms = 0.0
        self._elapsed_ms = 0.0
        self._phase = self._clock.phase()
        self._pending_events: List[ScheduledEvent] = []
        self._attempts = 0

    # -----------------
    # Read accessors
    # -----------------

    def state(self) -> SessionState:
        return self._state

    def time_limit_ms(self) -> float:
        return float(self._time_limit_ms)

    def start_timestamp_ms(self) -> Optional[float]:
        return self._start_timestamp_ms

    def phase(self) -> BreathPhase:
        return self._phase

    def elapsed_ms(self) -> float:
        return float(self._elapsed_ms)

    def remaining_ms(self) -> float:
        return max(0.0, self._time_limit_ms - self._elapsed_ms)

    def total_score(self) -> int:
        return self._scoring.total_score()

    def scoring_engine(self) -> scoring_engine.ScoringEngine:
        return self._scoring

    def phase_gate(self) -> phase_gate.PhaseGate:
        return self._gate

    def feedback_entries(self) -> List[FeedbackTextEntry]:
        return self._feedback.entries()

    def pending_events(self) -> List[ScheduledEvent]:
        return list(self._pending_events)

    # -----------------
    # Tick loop
    # -----------------

    def tick(self, now_ms: float) -> None:
        self._last_now_ms = float(now_ms)

        if self._state == SessionState.RUNNING:
            assert self._start_timestamp_ms is not None
            elapsed_ms = self._last_now_ms - self._start_timestamp_ms
            if elapsed_ms >= self._time_limit_ms:
                self._end_session()
            else:
                self._elapsed_ms = max(0.0, elapsed_ms)
                self._phase = self._clock.update_elapsed_ms(self._elapsed_ms)
                self._gate.update_for_phase(self._phase.value)
                self._fire_due_events()

        # Text keeps drifting on the start and end screens.
        self._feedback.tick()

    def _fire_due_events(self) -> None:
        due = [event for event in self._pending_events if event.fire_at_ms <= self._elapsed_ms]
        if not due:
            return
        self._pending_events = [event for event in self._pending_events if event.fire_at_ms > self._elapsed_ms]
        for event in due:
            self._feedback.spawn(
                event.text,
                self._feedback_origin,
                hint="combo",
                combo_length=event.combo_length,
            )
            self._logger.debug("Combo announcement shown: %s", event.text)

    def _end_session(self) -> None:
        self._state = SessionState.ENDED
        self._elapsed_ms = self._time_limit_ms
        if self._pending_events:
            self._logger.debug("Dropping %d pending event(s) at session end", len(self._pending_events))
            self._pending_events.clear()
        self._logger.info(
            "Session ended: score=%d max_combo=%d attempts=%d",
            self._scoring.total_score(),
            self._scoring.max_combo(),
            self._attempts,
        )

    # -----------------
    # Input path
    # -----------------

    def press(self) -> Optional[ScoreEvent]:
        if self._state == SessionState.NOT_STARTED:
            self._start_timestamp_ms = self._last_now_ms
            self._state = SessionState.RUNNING
            self._logger.info("Session started at %.1f ms (limit %.0f ms)", self._last_now_ms, self._time_limit_ms)
            return None

        if self._state != SessionState.RUNNING:
            return None
        if not self._gate.try_consume_inhale_attempt():
            return None
        return self._score_attempt(self._phase.value)

    def release(self) -> Optional[ScoreEvent]:
        if self._state != SessionState.RUNNING:
            return None
        if not self._gate.try_consume_exhale_attempt():
            return None
        return self._score_attempt(1.0 - self._phase.value)

    def _score_attempt(self, delta: float) -> ScoreEvent:
        score_event = self._scoring.score(delta)
        self._attempts += 1

        self._feedback.spawn(
            score_event.tier.label,
            self._feedback_origin,
            hint=score_event.tier.label.lower(),
        )

        if score_event.combo_announcement is not None:
            self._pending_events.append(
                ScheduledEvent(
                    fire_at_ms=self._elapsed_ms + self._combo_announce_delay_ms,
                    text=score_event.combo_announcement,
                    combo_length=score_event.combo_length_after,
                )
            )
        return score_event

    # -----------------
    # Render outputs
    # -----------------

    def snapshot(self) -> SessionSnapshot:
        return SessionSnapshot(
            state=self._state,
            phase=self._phase,
            feedback_entries=tuple(self._feedback.entries()),
            combo_sum=self._scoring.combo_sum(),
            combo_length=self._scoring.combo_length(),
            elapsed_ms=self.elapsed_ms(),
            remaining_ms=self.remaining_ms(),
            total_score=self._scoring.total_score(),
        )

    def summary(self) -> SessionSummary:
        return SessionSummary(
            total_score=self._scoring.total_score(),
            max_combo=self._scoring.max_combo(),
            attempts=int(self._attempts),
            tier_counts=self._scoring.tier_counts(),
        )


def _run_unit_tests() -> None:
    from config import ScoringConfig, TierConfig

    app_config = AppConfig(
        scoring=ScoringConfig(
            tiers=[
                TierConfig(label="PERFECT", threshold=0.001, points=1000),
                TierConfig(label="GOOD", threshold=0.016, points=300),
                TierConfig(label="POOR", threshold=1.0, points=0),
            ]
        )
    )
    session = GameSession(app_config, rng=random.Random(1))
    assert session.state() == SessionState.NOT_STARTED

    session.tick(1000.0)
    assert session.press() is None
    assert session.state() == SessionState.RUNNING

    # Still inside the first inhale window: the starting press used it up.
    session.tick(1016.0)
    assert session.press() is None

    # Exhale peak at half a cycle.
    session.tick(1000.0 + 5000.0)
    released = session.release()
    assert released is not None
    assert released.tier.label == "PERFECT"

    # Next inhale trough.
    session.tick(1000.0 + 10000.0)
    pressed = session.press()
    assert pressed is not None
    assert pressed.combo_length_after == 2
    assert session.total_score() == 1000 + 2639

    session.tick(1000.0 + 60000.0)
    assert session.state() == SessionState.ENDED
    final_score = session.total_score()
    session.tick(1000.0 + 65000.0)
    assert session.release() is None
    assert session.total_score() == final_score


if __name__ == "__main__":
    _run_unit_tests()
    print("game_session.py: ok")
