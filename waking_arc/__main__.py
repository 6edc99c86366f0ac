#!/usr/bin/env python
"""
Module entry point for the waking arc engine.

Prints the waking window, its hour markers and time/angle conversions:
    python -m waking_arc --wake 07:00 --bed 19:00 --time 13:00 --angle 270
or via the installed console script:
    waking-arc
"""

from __future__ import annotations

import argparse
import logging
import sys
from datetime import date, datetime, timedelta
from pathlib import Path

from waking_arc.app_bootstrap import setup_logging
from waking_arc.core.constants import TimeFormat
from waking_arc.core.dataclasses_arc import ArcBounds
from waking_arc.core.exceptions import ValidationError
from waking_arc.core.time_angle import angle_for_time, hour_markers, time_for_angle, waking_window
from waking_arc.core.validation import InputValidator
from waking_arc.utils.config import ConfigManager

logger = logging.getLogger(__name__)


def _format_minutes(minutes: int) -> str:
    hours, mins = divmod(minutes % 1440, 60)
    return f"{hours:02d}:{mins:02d}"


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="waking-arc", description="Inspect the waking arc for a wake/bed window.")
    parser.add_argument("--wake", help="Wake time as HH:MM (default from config)")
    parser.add_argument("--bed", help="Bed time as HH:MM; 00:00 or 24:00 means midnight")
    parser.add_argument("--time", action="append", default=[], help="Time to convert to an angle (repeatable)")
    parser.add_argument("--angle", action="append", type=float, default=[], help="Angle to convert to a time (repeatable)")
    parser.add_argument("--config", type=Path, help="Path to a JSON config file")
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")
    return parser


def run(args: argparse.Namespace) -> list[str]:
    """
    Produce the report lines for parsed arguments.

    Raises:
        ValidationError: If a time argument is malformed

    """
    config = ConfigManager(args.config).config
    wake = InputValidator.parse_time_of_day(args.wake) if args.wake else config.default_wake_time
    if args.bed:
        bed = InputValidator.parse_time_of_day(args.bed)
    else:
        bed = (datetime.combine(date.today(), wake) + timedelta(minutes=config.default_window_minutes)).time()
    bounds = ArcBounds(config.arc_start_angle, config.arc_end_angle, wake, bed)

    window = waking_window(bounds)
    kind = "midnight bedtime" if window.is_midnight_bedtime else ("overnight" if window.is_overnight else "same day")
    hours, minutes = divmod(window.total_minutes, 60)
    lines = [
        f"Waking window: {_format_minutes(window.wake_minutes)} -> "
        f"{_format_minutes(window.wake_minutes + window.total_minutes)} ({hours}h{minutes:02d}m, {kind})",
        f"Arc: {bounds.start_angle:.1f} deg -> {bounds.end_angle:.1f} deg (sweep {bounds.sweep:.1f} deg)",
        "Hour markers:",
    ]
    lines.extend(f"  {marker.label:>5} at {marker.angle:6.1f} deg" for marker in hour_markers(bounds))

    for raw in args.time:
        value = InputValidator.parse_time_of_day(raw)
        lines.append(f"{value.strftime(TimeFormat.HOUR_MINUTE)} -> {angle_for_time(value, bounds):.2f} deg")

    today = date.today()
    for raw_angle in args.angle:
        angle = InputValidator.validate_angle(raw_angle)
        result = time_for_angle(angle, bounds, today)
        suffix = " (+1 day)" if result.date() > today else ""
        lines.append(f"{angle:.2f} deg -> {result.strftime(TimeFormat.HOUR_MINUTE)}{suffix}")

    return lines


def main(argv: list[str] | None = None) -> int:
    """Main entry point for the module."""
    args = build_parser().parse_args(argv)
    setup_logging(logging.DEBUG if args.verbose else logging.WARNING)

    try:
        for line in run(args):
            print(line)
        return 0
    except ValidationError as e:
        logger.error("Invalid input: %s", e)
        print(f"error: {e.message}", file=sys.stderr)
        return 2
    except KeyboardInterrupt:
        logger.info("Interrupted by user")
        return 130
    except Exception:
        logger.exception("Unexpected error")
        return 1


if __name__ == "__main__":
    sys.exit(main())
