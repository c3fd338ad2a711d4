# -*- coding: utf-8 -*-
########################
# feedback_text.py
########################
# Purpose:
# - Transient floating text spawned by scoring events ("PERFECT", "3x Combo!!", ...).
# - Owns every FeedbackTextEntry and advances its motion once per tick.
#
# Design notes:
# - No Qt usage. Positions and velocities are abstract units per tick; the renderer maps them to pixels.
# - Each tick: position += velocity, then velocity *= damping.
# - An entry is removed once |velocity|^2 < removal_epsilon, so every entry vanishes after a bounded
#   number of ticks.
# - Removal walks the list in reverse index order so no entry is skipped or visited twice.
# - No cap on live entries. Bursts of scoring simply produce more entries that decay on their own.
# - The random source is injected for deterministic tests.
#
########################
# Interfaces:
# Public classes:
# - class FeedbackTextStream
#   - __init__(*, damping: float = 0.9, removal_epsilon: float = 0.11,
#              velocity_x_range: tuple[float, float] = (-1.5, 1.5),
#              velocity_y_range: tuple[float, float] = (-6.0, -3.0),
#              rng: Optional[random.Random] = None)
#   - spawn(text, origin, *, velocity_x_range=None, velocity_y_range=None, hint=None, combo_length=None)
#       -> FeedbackTextEntry
#   - tick() -> int
#   - entries() -> list[FeedbackTextEntry]
#   - clear() -> None
#
# Inputs:
# - ScoreEvent text from GameSession, plus deferred combo announcements.
#
# Outputs:
# - Live entries read by the harness renderer every frame.
#
########################

from __future__ import annotations

import random
from typing import List, Optional, Tuple

from breath_models import FeedbackTextEntry
from config import ConfigurationError


class FeedbackTextStream:
    def __init__(
        self,
        *,
        damping: float = 0.9,
        removal_epsilon: float = 0.11,
        velocity_x_range: Tuple[float, float] = (-1.5, 1.5),
        velocity_y_range: Tuple[float, float] = (-6.0, -3.0),
        rng: Optional[random.Random] = None,
    ) -> None:
        if not 0.0 < float(damping) < 1.0:
            raise ConfigurationError(f"feedback damping must be in (0, 1), got {damping}")
        if not float(removal_epsilon) > 0.0:
            raise ConfigurationError(f"feedback removal epsilon must be positive, got {removal_epsilon}")

        self._damping = float(damping)
        self._removal_epsilon = float(removal_epsilon)
        self._velocity_x_range = (float(velocity_x_range[0]), float(velocity_x_range[1]))
        self._velocity_y_range = (float(velocity_y_range[0]), float(velocity_y_range[1]))
        self._rng = rng if rng is not None else random.Random()
        self._entries: List[FeedbackTextEntry] = []

    def entries(self) -> List[FeedbackTextEntry]:
        return list(self._entries)

    def clear(self) -> None:
        self._entries.clear()

    def spawn(
        self,
        text: str,
        origin: Tuple[float, float],
        *,
        velocity_x_range: Optional[Tuple[float, float]] = None,
        velocity_y_range: Optional[Tuple[float, float]] = None,
        hint: Optional[str] = None,
        combo_length: Optional[int] = None,
    ) -> FeedbackTextEntry:
        x_low, x_high = velocity_x_range if velocity_x_range is not None else self._velocity_x_range
        y_low, y_high = velocity_y_range if velocity_y_range is not None else self._velocity_y_range

        entry = FeedbackTextEntry(
            text=str(text),
            x=float(origin[0]),
            y=float(origin[1]),
            velocity_x=self._rng.uniform(float(x_low), float(x_high)),
            velocity_y=self._rng.uniform(float(y_low), float(y_high)),
            hint=hint,
            combo_length=combo_length,
        )
        self._entries.append(entry)
        return entry

    def tick(self) -> int:
        """Advance every entry one step and drop the ones that have decayed.

        Returns the number of entries removed.
        """
        removed = 0
        for index in range(len(self._entries) - 1, -1, -1):
            entry = self._entries[index]
            entry.x += entry.velocity_x
            entry.y += entry.velocity_y
            entry.velocity_x *= self._damping
            entry.velocity_y *= self._damping
            if entry.speed_squared() < self._removal_epsilon:
                del self._entries[index]
                removed += 1
        return removed


def _run_unit_tests() -> None:
    stream = FeedbackTextStream(
        velocity_x_range=(0.0, 0.0),
        velocity_y_range=(-1.0, -1.0),
        rng=random.Random(7),
    )
    entry = stream.spawn("PERFECT", (10.0, 20.0))
    assert entry.velocity_y == -1.0

    # 0.9 ** k < sqrt(0.11) first holds at k = 11.
    ticks = 0
    while stream.entries():
        stream.tick()
        ticks += 1
    assert ticks == 11, ticks
    assert entry.y < 20.0

    for _ in range(50):
        stream.spawn("GOOD", (0.0, 0.0))
    assert len(stream.entries()) == 50
    for _ in range(200):
        stream.tick()
    assert stream.entries() == []


if __name__ == "__main__":
    _run_unit_tests()
    print("feedback_text.py: ok")
