# -*- coding: utf-8 -*-
########################
# breath_models.py
########################
# Purpose:
# - Core data models for the breathing game pipeline.
# - Defines breath phase values, score tiers, scoring events, feedback text entries and session views.
#
# Design notes:
# - Keep these models stable. Prefer extending with new optional fields rather than breaking changes.
# - No Qt usage. These are plain dataclasses and enums.
# - FeedbackTextEntry is the only mutable model; FeedbackTextStream owns every instance.
#
########################
# Interfaces:
# Public enums:
# - class BreathDirection(enum.Enum): INHALING | EXHALING
# - class SessionState(enum.Enum): NOT_STARTED | RUNNING | ENDED
#
# Public dataclasses:
# - BreathPhase(value: float, direction: BreathDirection)
# - ScoreTier(label: str, threshold: float, points: int)
# - ScoreEvent(tier: ScoreTier, delta: float, points_awarded: int, combo_length_after: int,
#              combo_announcement: Optional[str])
# - FeedbackTextEntry(text: str, x: float, y: float, velocity_x: float, velocity_y: float,
#                     hint: Optional[str], combo_length: Optional[int])
# - ScheduledEvent(fire_at_ms: float, text: str, combo_length: int)
# - SessionSnapshot(...)
# - SessionSummary(...)
#
# Inputs/Outputs:
# - These types are exchanged between BreathClock, PhaseGate, ScoringEngine, FeedbackTextStream,
#   GameSession and the harness renderer.
#
########################

from __future__ import annotations

from dataclasses import dataclass
import enum
from typing import Dict, Optional, Tuple


class BreathDirection(enum.Enum):
    INHALING = "inhaling"
    EXHALING = "exhaling"


class SessionState(enum.Enum):
    NOT_STARTED = "not_started"
    RUNNING = "running"
    ENDED = "ended"


@dataclass(frozen=True)
class BreathPhase:
    value: float
    direction: BreathDirection


@dataclass(frozen=True)
class ScoreTier:
    label: str
    threshold: float
    points: int


@dataclass(frozen=True)
class ScoreEvent:
    tier: ScoreTier
    delta: float
    points_awarded: int
    combo_length_after: int
    combo_announcement: Optional[str] = None


@dataclass
class FeedbackTextEntry:
    text: str
    x: float
    y: float
    velocity_x: float
    velocity_y: float
    hint: Optional[str] = None
    combo_length: Optional[int] = None

    def speed_squared(self) -> float:
        return self.velocity_x * self.velocity_x + self.velocity_y * self.velocity_y


@dataclass(frozen=True)
class ScheduledEvent:
    fire_at_ms: float
    text: str
    combo_length: int


@dataclass(frozen=True)
class SessionSnapshot:
    state: SessionState
    phase: BreathPhase
    feedback_entries: Tuple[FeedbackTextEntry, ...]
    combo_sum: int
    combo_length: int
    elapsed_ms: float
    remaining_ms: float
    total_score: int


@dataclass(frozen=True)
class SessionSummary:
    total_score: int
    max_combo: int
    attempts: int
    tier_counts: Dict[str, int]
