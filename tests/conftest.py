import os
import random
import sys

import pytest

# Ensure the project root (containing the flat game modules) is on sys.path
CURRENT_DIR = os.path.dirname(__file__)
PROJECT_ROOT = os.path.abspath(os.path.join(CURRENT_DIR, '..'))
if PROJECT_ROOT not in sys.path:
    sys.path.insert(0, PROJECT_ROOT)

from breath_models import ScoreTier
from config import AppConfig, ScoringConfig, TierConfig


SCENARIO_TIERS = [
    ('PERFECT', 0.001, 1000),
    ('GOOD', 0.016, 300),
    ('POOR', 1.0, 0),
]


@pytest.fixture()
def scenario_tiers():
    return [ScoreTier(label=label, threshold=threshold, points=points) for label, threshold, points in SCENARIO_TIERS]


@pytest.fixture()
def scenario_config():
    return AppConfig(
        scoring=ScoringConfig(
            tiers=[TierConfig(label=label, threshold=threshold, points=points) for label, threshold, points in SCENARIO_TIERS]
        )
    )


@pytest.fixture()
def rng():
    return random.Random(1234)


@pytest.fixture(autouse=True)
def clean_breathe_env(monkeypatch):
    for name in list(os.environ):
        if name.startswith('BREATHE_'):
            monkeypatch.delenv(name, raising=False)
