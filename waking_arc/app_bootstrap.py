#!/usr/bin/env python3
"""
Application bootstrap utilities.

Provides shared, UI-agnostic setup for logging.
"""

from __future__ import annotations

import logging
from pathlib import Path

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def setup_logging(level: int = logging.WARNING, log_file: Path | None = None) -> Path | None:
    """
    Set up root logging for the engine.

    Args:
        level: Root log level
        log_file: Optional file to log to in addition to stderr

    Returns:
        Path to log file, or None if using default stderr.

    """
    if log_file is not None:
        log_file.parent.mkdir(parents=True, exist_ok=True)
        logging.basicConfig(
            level=level,
            format=LOG_FORMAT,
            handlers=[logging.FileHandler(log_file), logging.StreamHandler()],
        )
    else:
        logging.basicConfig(level=level, format=LOG_FORMAT)

    return log_file
