#!/usr/bin/env python3
"""
Custom Exception Classes for the Waking Arc Engine.
Geometry and validation are total and never raise; these types are used at
the edges (user input parsing, configuration files, store lookups).
"""

from __future__ import annotations

from enum import StrEnum
from typing import Any


class WakingArcError(Exception):
    """Base exception for all waking arc engine errors."""

    def __init__(self, message: str, error_code: str | None = None, context: dict[str, Any] | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.error_code = error_code
        self.context = context or {}

    def __str__(self) -> str:
        if self.error_code:
            return f"[{self.error_code}] {self.message}"
        return self.message


class ValidationError(WakingArcError):
    """Raised when input validation fails."""


class ConfigurationError(WakingArcError):
    """Raised when configuration is invalid."""


class EntryNotFoundError(WakingArcError):
    """Raised when a store operation targets an unknown entry."""


# Error codes for specific error types
class ErrorCodes(StrEnum):
    """Standardized error codes."""

    # Validation errors
    INVALID_INPUT = "INVALID_INPUT"
    OUT_OF_RANGE = "OUT_OF_RANGE"
    INVALID_FORMAT = "INVALID_FORMAT"
    MISSING_REQUIRED = "MISSING_REQUIRED"

    # Configuration errors
    CONFIG_INVALID = "CONFIG_INVALID"

    # Store errors
    ENTRY_NOT_FOUND = "ENTRY_NOT_FOUND"
    ENTRY_NOT_ONGOING = "ENTRY_NOT_ONGOING"
