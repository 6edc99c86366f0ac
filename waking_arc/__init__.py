#!/usr/bin/env python3
"""
Waking Arc Engine.

Maps a caregiver's day onto a circular waking-window arc and turns drag
gestures on that arc into validated schedule edits.
"""

__version__ = "0.1.0"
__author__ = "Waking Arc Team"
__description__ = "Time-to-arc mapping and drag interaction engine for daily schedules"
