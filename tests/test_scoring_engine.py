import math

import pytest

from breath_models import ScoreTier
from config import ConfigurationError, TierConfig, _default_tiers, validate_tier_table
from scoring_engine import ScoringEngine


def test_zero_delta_selects_best_tier(scenario_tiers):
    engine = ScoringEngine(scenario_tiers)
    assert engine.score(0.0).tier.label == 'PERFECT'


def test_delta_one_selects_catch_all_and_clears_combo(scenario_tiers):
    engine = ScoringEngine(scenario_tiers)
    engine.score(0.0)
    engine.score(0.0)
    event = engine.score(1.0)
    assert event.tier.label == 'POOR'
    assert event.points_awarded == 0
    assert engine.combo_length() == 0
    assert engine.combo_sum() == 0


def test_delta_equal_to_threshold_falls_to_next_tier(scenario_tiers):
    engine = ScoringEngine(scenario_tiers)
    assert engine.classify_delta(0.001).label == 'GOOD'
    assert engine.classify_delta(0.016).label == 'POOR'


def test_out_of_range_deltas(scenario_tiers):
    engine = ScoringEngine(scenario_tiers)
    assert engine.classify_delta(7.5).label == 'POOR'
    event = engine.score(-0.3)
    assert event.tier.label == 'PERFECT'
    assert event.delta == 0.0


def test_scenario_perfect_then_poor(scenario_tiers):
    engine = ScoringEngine(scenario_tiers)
    first = engine.score(0.0005)
    assert first.tier.label == 'PERFECT'
    assert first.points_awarded == 1000
    assert first.combo_length_after == 1
    assert engine.combo_sum() == 1000
    assert engine.total_score() == 1000

    second = engine.score(0.02)
    assert second.tier.label == 'POOR'
    assert engine.combo_length() == 0
    assert engine.total_score() == 1000


def test_scenario_two_perfects(scenario_tiers):
    engine = ScoringEngine(scenario_tiers)
    engine.score(0.0)
    second = engine.score(0.0)
    assert second.combo_length_after == 2
    assert second.points_awarded == 2639
    assert engine.total_score() == 3639


def test_combo_tracks_consecutive_non_zero_scores(scenario_tiers):
    engine = ScoringEngine(scenario_tiers)
    deltas = [0.0, 0.005, 0.0002, 0.01, 0.0]
    expected_points = [1000, 300, 1000, 300, 1000]
    total = 0
    for index, delta in enumerate(deltas, start=1):
        event = engine.score(delta)
        total += math.floor(expected_points[index - 1] * index ** 1.4)
        assert event.points_awarded == math.floor(expected_points[index - 1] * index ** 1.4)
    assert engine.combo_length() == len(deltas)
    assert engine.combo_sum() == sum(expected_points)
    assert engine.total_score() == total

    engine.score(0.5)
    assert engine.combo_length() == 0
    engine.score(0.0)
    assert engine.combo_length() == 1
    assert engine.combo_sum() == 1000


def test_custom_exponent():
    tiers = [ScoreTier('HIT', 0.5, 10), ScoreTier('MISS', 1.0, 0)]
    engine = ScoringEngine(tiers, combo_exponent=0.0)
    engine.score(0.1)
    engine.score(0.1)
    assert engine.total_score() == 20


def test_combo_announcements_are_flagged(scenario_tiers):
    engine = ScoringEngine(scenario_tiers)
    announcements = [engine.score(0.0).combo_announcement for _ in range(6)]
    assert announcements == [None, None, '3x Combo!!', None, '5x Combo!!', '6x Combo!!']


def test_history_counts_and_max_combo(scenario_tiers):
    engine = ScoringEngine(scenario_tiers)
    for delta in [0.0, 0.0, 0.0, 0.9, 0.005]:
        engine.score(delta)
    assert engine.max_combo() == 3
    assert engine.tier_counts() == {'PERFECT': 3, 'GOOD': 1, 'POOR': 1}
    assert [event.tier.label for event in engine.score_history()] == ['PERFECT', 'PERFECT', 'PERFECT', 'POOR', 'GOOD']

    engine.reset()
    assert engine.total_score() == 0
    assert engine.score_history() == []
    assert engine.max_combo() == 0


def test_default_tier_table_is_valid():
    tiers = [tier.to_score_tier() for tier in _default_tiers()]
    validate_tier_table(tiers)
    thresholds = [tier.threshold for tier in tiers]
    assert thresholds == sorted(set(thresholds))
    assert thresholds[-1] == 1.0
    assert tiers[-1].points == 0


@pytest.mark.parametrize(
    'tiers',
    [
        [],
        [ScoreTier('A', 0.5, 10), ScoreTier('B', 0.5, 0), ScoreTier('C', 1.0, 0)],
        [ScoreTier('A', 0.5, 10), ScoreTier('B', 0.2, 0), ScoreTier('C', 1.0, 0)],
        [ScoreTier('A', 0.1, 10), ScoreTier('B', 0.9, 0)],
        [ScoreTier('A', 0.1, -5), ScoreTier('B', 1.0, 0)],
    ],
)
def test_invalid_tier_tables_fail_fast(tiers):
    with pytest.raises(ConfigurationError):
        ScoringEngine(tiers)


def test_tier_config_converts_to_score_tier():
    tier = TierConfig(label='  GREAT ', threshold=0.008, points=450).to_score_tier()
    assert tier == ScoreTier(label='GREAT', threshold=0.008, points=450)
