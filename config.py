"""
config.py

Typed configuration loading and validation for Breathe.

Design goals
- Load at most one UTF-8 JSON config file
- Validate with pydantic (defaults included)
- Support environment variable overrides
- No other I/O beyond reading the config file (no directory creation)

Config file location
- If BREATHE_CONFIG_PATH is set, that file is used.
- Otherwise Breathe searches these paths in order and uses the first one that exists:
  1) ./breathe_config.json (current working directory)
  2) <user config dir>/Breathe/breathe_config.json
- If none exists, the built-in defaults below are used.

Example config file (breathe_config.json)
{
  "rhythm": {
    "period_ms": 10000,
    "inhale_threshold": 0.25,
    "exhale_threshold": 0.75
  },
  "session": {
    "time_limit_ms": 60000
  },
  "scoring": {
    "tiers": [
      {"label": "PERFECT", "threshold": 0.001, "points": 1000},
      {"label": "GOOD", "threshold": 0.016, "points": 300},
      {"label": "POOR", "threshold": 1.0, "points": 0}
    ],
    "combo_exponent": 1.4,
    "combo_announce_lengths": [3],
    "combo_announce_above": 4,
    "combo_announce_delay_ms": 300
  },
  "feedback": {
    "damping": 0.9,
    "removal_epsilon": 0.11,
    "velocity_x_range": [-1.5, 1.5],
    "velocity_y_range": [-6.0, -3.0]
  }
}
"""

from __future__ import annotations

import json
import os
from functools import lru_cache
from pathlib import Path
from typing import Any, Dict, List, Optional, Sequence, Tuple

from platformdirs import user_config_dir
from pydantic import BaseModel, Field, ValidationError, field_validator, model_validator

from breath_models import ScoreTier


class ConfigurationError(ValueError):
    pass


def validate_tier_table(tiers: Sequence[ScoreTier]) -> None:
    if not tiers:
        raise ConfigurationError("tier table must not be empty")

    previous_threshold = 0.0
    for index, tier in enumerate(tiers):
        threshold = float(tier.threshold)
        if not 0.0 < threshold <= 1.0:
            raise ConfigurationError(f"tier {tier.label!r} threshold must be in (0, 1], got {threshold}")
        if index > 0 and threshold <= previous_threshold:
            raise ConfigurationError(
                f"tier thresholds must be strictly increasing: {tier.label!r} has {threshold} after {previous_threshold}"
            )
        if int(tier.points) < 0:
            raise ConfigurationError(f"tier {tier.label!r} points must be non-negative, got {tier.points}")
        previous_threshold = threshold

    if float(tiers[-1].threshold) != 1.0:
        raise ConfigurationError(f"last tier threshold must be 1, got {tiers[-1].threshold}")


class TierConfig(BaseModel):
    label: str = Field(description="Text shown when this tier is scored.")
    threshold: float = Field(gt=0.0, le=1.0, description="Deltas strictly below this value select the tier.")
    points: int = Field(ge=0, description="Base points before the combo multiplier.")

    @field_validator("label")
    @classmethod
    def normalize_label(cls, value: str) -> str:
        trimmed = (value or "").strip()
        if not trimmed:
            raise ValueError("label must not be empty")
        return trimmed

    def to_score_tier(self) -> ScoreTier:
        return ScoreTier(label=self.label, threshold=float(self.threshold), points=int(self.points))


def _default_tiers() -> List[TierConfig]:
    return [
        TierConfig(label="PERFECT", threshold=0.001, points=1000),
        TierConfig(label="INCREDIBLE", threshold=0.002, points=800),
        TierConfig(label="AMAZING", threshold=0.004, points=600),
        TierConfig(label="GREAT", threshold=0.008, points=450),
        TierConfig(label="GOOD", threshold=0.016, points=300),
        TierConfig(label="POOR", threshold=1.0, points=0),
    ]


class RhythmConfig(BaseModel):
    period_ms: float = Field(default=10000.0, gt=0.0, description="Length of one full breath cycle.")
    inhale_threshold: float = Field(default=0.25, gt=0.0, lt=1.0, description="Phase values below this are the inhale window.")
    exhale_threshold: float = Field(default=0.75, gt=0.0, lt=1.0, description="Phase values above this are the exhale window.")

    @model_validator(mode="after")
    def validate_window_order(self) -> "RhythmConfig":
        if self.inhale_threshold >= self.exhale_threshold:
            raise ValueError("inhale_threshold must be below exhale_threshold")
        return self


class SessionConfig(BaseModel):
    time_limit_ms: float = Field(default=60000.0, gt=0.0, description="Session length.")


class ScoringConfig(BaseModel):
    tiers: List[TierConfig] = Field(default_factory=_default_tiers)
    combo_exponent: float = Field(default=1.4, ge=0.0, description="Awarded points = floor(points * combo_length ** exponent).")
    combo_announce_lengths: List[int] = Field(default_factory=lambda: [3], description="Combo lengths that are announced.")
    combo_announce_above: Optional[int] = Field(default=4, description="Every combo length above this is announced.")
    combo_announce_delay_ms: float = Field(default=300.0, ge=0.0, description="Delay before a combo announcement appears.")

    @field_validator("tiers")
    @classmethod
    def validate_tiers(cls, value: List[TierConfig]) -> List[TierConfig]:
        try:
            validate_tier_table([tier.to_score_tier() for tier in value])
        except ConfigurationError as exception:
            raise ValueError(str(exception)) from exception
        return value

    def score_tiers(self) -> List[ScoreTier]:
        return [tier.to_score_tier() for tier in self.tiers]


class FeedbackConfig(BaseModel):
    damping: float = Field(default=0.9, gt=0.0, lt=1.0, description="Velocity multiplier applied every tick.")
    removal_epsilon: float = Field(default=0.11, gt=0.0, description="Entries are removed once |velocity|^2 drops below this.")
    velocity_x_range: Tuple[float, float] = Field(default=(-1.5, 1.5))
    velocity_y_range: Tuple[float, float] = Field(default=(-6.0, -3.0))
    origin: Tuple[float, float] = Field(default=(0.0, 0.0), description="Spawn point, relative to the circle centre.")

    @field_validator("velocity_x_range", "velocity_y_range")
    @classmethod
    def validate_range(cls, value: Tuple[float, float]) -> Tuple[float, float]:
        low, high = value
        if low > high:
            raise ValueError("velocity range must be (low, high) with low <= high")
        return value


class DisplayConfig(BaseModel):
    width: int = Field(default=960, ge=100)
    height: int = Field(default=720, ge=100)
    inner_radius: float = Field(default=25.0, ge=0.0)
    breath_radius: float = Field(default=150.0, ge=0.0, description="Extra diameter at a fully inhaled phase.")


class AppConfig(BaseModel):
    rhythm: RhythmConfig = Field(default_factory=RhythmConfig)
    session: SessionConfig = Field(default_factory=SessionConfig)
    scoring: ScoringConfig = Field(default_factory=ScoringConfig)
    feedback: FeedbackConfig = Field(default_factory=FeedbackConfig)
    display: DisplayConfig = Field(default_factory=DisplayConfig)


def _default_config_candidates() -> List[Path]:
    config_directory = Path(user_config_dir("Breathe", "Breathe"))
    return [
        Path.cwd() / "breathe_config.json",
        config_directory / "breathe_config.json",
    ]


def _resolve_config_path() -> Optional[Path]:
    explicit_path_text = os.environ.get("BREATHE_CONFIG_PATH", "").strip()
    if explicit_path_text:
        return Path(explicit_path_text)

    for candidate_path in _default_config_candidates():
        if candidate_path.exists():
            return candidate_path

    return None


def _read_json_file_utf8(config_path: Path) -> Dict[str, Any]:
    try:
        raw_text = config_path.read_text(encoding="utf-8")
    except FileNotFoundError:
        raise
    except OSError as exception:
        raise OSError(f"Failed to read config file: {config_path}. Error: {exception}") from exception

    try:
        parsed = json.loads(raw_text)
    except json.JSONDecodeError as exception:
        raise ConfigurationError(f"Config file is not valid JSON: {config_path}. Error: {exception}") from exception

    if not isinstance(parsed, dict):
        raise ConfigurationError(f"Config file root must be a JSON object: {config_path}")

    return parsed


def _apply_environment_overrides(config_dict: Dict[str, Any]) -> Dict[str, Any]:
    """
    Environment overrides are optional. The config file is the primary source of truth.

    Override variables:
    - BREATHE_RHYTHM_PERIOD_MS
    - BREATHE_INHALE_THRESHOLD
    - BREATHE_EXHALE_THRESHOLD
    - BREATHE_TIME_LIMIT_MS
    - BREATHE_COMBO_EXPONENT
    """
    def ensure_nested(config_root: Dict[str, Any], section_name: str) -> Dict[str, Any]:
        section = config_root.get(section_name)
        if isinstance(section, dict):
            return section
        section = {}
        config_root[section_name] = section
        return section

    updated_config = dict(config_dict)

    rhythm_section = ensure_nested(updated_config, "rhythm")
    session_section = ensure_nested(updated_config, "session")
    scoring_section = ensure_nested(updated_config, "scoring")

    def override_float(env_name: str, target_dict: Dict[str, Any], key_name: str) -> None:
        value_text = os.environ.get(env_name, "").strip()
        if not value_text:
            return
        try:
            target_dict[key_name] = float(value_text)
        except ValueError:
            return

    override_float("BREATHE_RHYTHM_PERIOD_MS", rhythm_section, "period_ms")
    override_float("BREATHE_INHALE_THRESHOLD", rhythm_section, "inhale_threshold")
    override_float("BREATHE_EXHALE_THRESHOLD", rhythm_section, "exhale_threshold")
    override_float("BREATHE_TIME_LIMIT_MS", session_section, "time_limit_ms")
    override_float("BREATHE_COMBO_EXPONENT", scoring_section, "combo_exponent")

    return updated_config


def load_config(config_path: Optional[Path] = None) -> Tuple[AppConfig, Optional[Path]]:
    resolved_path = config_path if config_path is not None else _resolve_config_path()
    json_dict: Dict[str, Any] = {}
    if resolved_path is not None:
        json_dict = _read_json_file_utf8(resolved_path)
    json_dict = _apply_environment_overrides(json_dict)

    try:
        config = AppConfig.model_validate(json_dict)
    except ValidationError as exception:
        source_text = str(resolved_path) if resolved_path is not None else "built-in defaults"
        raise ConfigurationError(f"Config validation failed for {source_text}:\n{exception}") from exception

    return config, resolved_path


@lru_cache(maxsize=1)
def get_config() -> Tuple[AppConfig, Optional[Path]]:
    return load_config()


def to_json(config: AppConfig) -> str:
    return json.dumps(config.model_dump(), ensure_ascii=False, indent=2)


def main() -> int:
    try:
        config, resolved_path = load_config()
    except Exception as exception:
        error_payload = {"ok": False, "error": str(exception)}
        print(json.dumps(error_payload, ensure_ascii=False, indent=2))
        return 2

    output_payload = {
        "ok": True,
        "config_path": str(resolved_path) if resolved_path is not None else None,
        "config": json.loads(to_json(config)),
    }
    print(json.dumps(output_payload, ensure_ascii=False, indent=2))
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
