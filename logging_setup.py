# -*- coding: utf-8 -*-
########################
# logging_setup.py
########################
# Purpose:
# - Configure the shared "Breathe" logger with a rotating log file.
#
# Design notes:
# - Safe to call more than once. Handlers are only attached on the first call.
# - Log files live in the platformdirs user log directory unless a directory is passed in.
#
########################

from __future__ import annotations

import logging
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Optional

from platformdirs import user_log_dir

LOGGER_NAME = "Breathe"
LOG_FILE_NAME = "breathe.log"


def default_log_dir() -> Path:
    return Path(user_log_dir("Breathe", "Breathe"))


def setup_logger(log_dir: Optional[Path] = None, level: int = logging.INFO) -> logging.Logger:
    logger = logging.getLogger(LOGGER_NAME)
    logger.setLevel(level)

    if not logger.handlers:
        target_dir = Path(log_dir) if log_dir is not None else default_log_dir()
        target_dir.mkdir(parents=True, exist_ok=True)
        handler = RotatingFileHandler(
            target_dir / LOG_FILE_NAME,
            maxBytes=1_000_000,
            backupCount=3,
            encoding="utf-8",
        )
        fmt = logging.Formatter("%(asctime)s | %(levelname)s | %(message)s")
        handler.setFormatter(fmt)
        logger.addHandler(handler)

    return logger
