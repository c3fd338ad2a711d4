# -*- coding: utf-8 -*-
########################
# scoring_engine.py
########################
# Purpose:
# - Tiered scoring and combo engine.
# - Converts a timing delta (0 = perfect) into a ScoreTier, applies the combo multiplier,
#   and accumulates the total score.
#
# Design notes:
# - No Qt usage. Pure gameplay logic.
# - Tier selection scans tiers in ascending threshold order and picks the first with delta < threshold.
#   A delta equal to a threshold falls through to the next tier.
# - Negative deltas are clamped to 0. Deltas >= 1 land on the catch-all (last) tier.
# - Any zero-point tier clears the combo. Non-zero tiers append their base points.
# - Awarded points = floor(points * combo_length_after ** combo_exponent).
# - Combo announcements are only flagged here. GameSession schedules and delivers them.
#
########################
# Interfaces:
# Public dataclasses:
# - ComboState(points: list[int], max_length: int)
#   - length() -> int
#   - total() -> int
#
# Public classes:
# - class ScoringEngine
#   - __init__(tiers: Sequence[ScoreTier], *, combo_exponent: float = 1.4,
#              combo_announce_lengths: Iterable[int] = (3,), combo_announce_above: Optional[int] = 4)
#   - tiers() -> list[ScoreTier]
#   - classify_delta(delta: float) -> ScoreTier
#   - score(delta: float) -> ScoreEvent
#   - is_combo_announcement(combo_length: int) -> bool
#   - combo_sum() -> int
#   - combo_length() -> int
#   - max_combo() -> int
#   - total_score() -> int
#   - tier_counts() -> dict[str, int]
#   - score_history() -> list[ScoreEvent]
#   - reset() -> None
#
# Inputs:
# - delta values computed by GameSession from the breath phase at press or release time.
#
# Outputs:
# - ScoreEvent objects for GameSession, FeedbackTextStream and the HUD.
#
########################

from __future__ import annotations

from dataclasses import dataclass, field
import math
from typing import Dict, Iterable, List, Optional, Sequence

from breath_models import ScoreEvent, ScoreTier
from config import ConfigurationError, validate_tier_table


@dataclass
class ComboState:
    points: List[int] = field(default_factory=list)
    max_length: int = 0

    def length(self) -> int:
        return len(self.points)

    def total(self) -> int:
        return sum(self.points)

    def extend(self, tier_points: int) -> None:
        self.points.append(int(tier_points))
        if len(self.points) > self.max_length:
            self.max_length = len(self.points)

    def clear(self) -> None:
        self.points.clear()


class ScoringEngine:
    def __init__(
        self,
        tiers: Sequence[ScoreTier],
        *,
        combo_exponent: float = 1.4,
        combo_announce_lengths: Iterable[int] = (3,),
        combo_announce_above: Optional[int] = 4,
    ) -> None:
        tier_list = list(tiers)
        validate_tier_table(tier_list)
        if float(combo_exponent) < 0.0:
            raise ConfigurationError(f"combo exponent must be non-negative, got {combo_exponent}")

        self._tiers: List[ScoreTier] = tier_list
        self._combo_exponent = float(combo_exponent)
        self._combo_announce_lengths = frozenset(int(length) for length in combo_announce_lengths)
        self._combo_announce_above = None if combo_announce_above is None else int(combo_announce_above)

        self._combo = ComboState()
        self._total_score = 0
        self._tier_counts: Dict[str, int] = {tier.label: 0 for tier in self._tiers}
        self._history: List[ScoreEvent] = []

    def tiers(self) -> List[ScoreTier]:
        return list(self._tiers)

    def reset(self) -> None:
        self._combo = ComboState()
        self._total_score = 0
        self._tier_counts = {tier.label: 0 for tier in self._tiers}
        self._history.clear()

    def classify_delta(self, delta: float) -> ScoreTier:
        clamped_delta = max(0.0, float(delta))
        for tier in self._tiers:
            if clamped_delta < float(tier.threshold):
                return tier
        return self._tiers[-1]

    def is_combo_announcement(self, combo_length: int) -> bool:
        length = int(combo_length)
        if length in self._combo_announce_lengths:
            return True
        return self._combo_announce_above is not None and length > self._combo_announce_above

    def score(self, delta: float) -> ScoreEvent:
        clamped_delta = max(0.0, float(delta))
        tier = self.classify_delta(clamped_delta)

        if int(tier.points) == 0:
            self._combo.clear()
            points_awarded = 0
        else:
            self._combo.extend(int(tier.points))
            multiplier = float(self._combo.length()) ** self._combo_exponent
            points_awarded = int(math.floor(int(tier.points) * multiplier))

        self._total_score += points_awarded
        self._tier_counts[tier.label] = self._tier_counts.get(tier.label, 0) + 1

        combo_length_after = self._combo.length()
        announcement: Optional[str] = None
        if combo_length_after > 0 and self.is_combo_announcement(combo_length_after):
            announcement = f"{combo_length_after}x Combo!!"

        event = ScoreEvent(
            tier=tier,
            delta=clamped_delta,
            points_awarded=points_awarded,
            combo_length_after=combo_length_after,
            combo_announcement=announcement,
        )
        self._history.append(event)
        return event

    def combo_sum(self) -> int:
        return self._combo.total()

    def combo_length(self) -> int:
        return self._combo.length()

    def max_combo(self) -> int:
        return int(self._combo.max_length)

    def total_score(self) -> int:
        return int(self._total_score)

    def tier_counts(self) -> Dict[str, int]:
        return dict(self._tier_counts)

    def score_history(self) -> List[ScoreEvent]:
        return list(self._history)


def _run_unit_tests() -> None:
    tiers = [
        ScoreTier(label="PERFECT", threshold=0.001, points=1000),
        ScoreTier(label="GOOD", threshold=0.016, points=300),
        ScoreTier(label="POOR", threshold=1.0, points=0),
    ]
    engine = ScoringEngine(tiers)

    first = engine.score(0.0005)
    assert first.tier.label == "PERFECT"
    assert first.points_awarded == 1000
    assert engine.total_score() == 1000

    second = engine.score(0.0)
    assert second.combo_length_after == 2
    assert second.points_awarded == 2639
    assert engine.total_score() == 3639

    miss = engine.score(0.02)
    assert miss.tier.label == "POOR"
    assert engine.combo_length() == 0
    assert engine.combo_sum() == 0
    assert engine.total_score() == 3639

    # Equal to a threshold falls to the next tier.
    assert engine.classify_delta(0.001).label == "GOOD"
    assert engine.classify_delta(-1.0).label == "PERFECT"
    assert engine.classify_delta(5.0).label == "POOR"


if __name__ == "__main__":
    _run_unit_tests()
    print("scoring_engine.py: ok")
