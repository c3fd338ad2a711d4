"""
breathe.py

Entrypoint that launches the breathing game.

Integration
- Loads config (file, environment overrides, command line overrides)
- Sets up the rotating file logger
- Runs the pure logic self tests, or opens the Qt window
"""

from __future__ import annotations

import argparse
import json
from pathlib import Path

from pydantic import ValidationError

import config as config_module
from logging_setup import setup_logger


def _run_self_tests() -> None:
    import breath_clock
    import feedback_text
    import game_session
    import phase_gate
    import scoring_engine

    breath_clock._run_unit_tests()
    phase_gate._run_unit_tests()
    scoring_engine._run_unit_tests()
    feedback_text._run_unit_tests()
    game_session._run_unit_tests()


def build_argument_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Breathe: click on the inhale, release on the exhale.")
    parser.add_argument("--config", type=Path, default=None, help="Path to a breathe_config.json file.")
    parser.add_argument("--time-limit-ms", type=float, default=None, help="Override the session length.")
    parser.add_argument("--fullscreen", action="store_true", help="Start in fullscreen.")
    parser.add_argument("--run-tests", action="store_true", help="Run pure logic tests (no Qt).")
    return parser


def main() -> int:
    args = build_argument_parser().parse_args()

    if args.run_tests:
        _run_self_tests()
        print("Self tests passed.")
        return 0

    try:
        app_config, config_path = config_module.load_config(args.config)
        if args.time_limit_ms is not None:
            app_config = app_config.model_copy(
                update={"session": config_module.SessionConfig(time_limit_ms=args.time_limit_ms)}
            )
    except (config_module.ConfigurationError, ValidationError, OSError) as exception:
        print(json.dumps({"ok": False, "error": str(exception)}, ensure_ascii=False, indent=2))
        return 2

    logger = setup_logger()
    logger.info("Starting Breathe with config from %s", config_path if config_path is not None else "defaults")

    import breath_harness

    return breath_harness.run_gui(app_config, fullscreen=bool(args.fullscreen))


if __name__ == "__main__":
    raise SystemExit(main())
