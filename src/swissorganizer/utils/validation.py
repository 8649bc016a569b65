"""Validation utilities for Swiss Organizer.

This module provides reusable validation functions with consistent error handling.
"""

import re
from datetime import date
from typing import Any, Optional

from swissorganizer.exceptions import (
    InvalidPlayerDataException,
    InvalidResultException,
    ValidationException,
)


class ValidationResult:
    """Result of a validation operation.

    Attributes:
        is_valid: Whether the validation passed
        error_message: Human-readable error message if invalid
        sanitized_value: Cleaned/normalized value if valid
    """

    def __init__(
        self,
        is_valid: bool,
        error_message: Optional[str] = None,
        sanitized_value: Any = None,
    ):
        self.is_valid = is_valid
        self.error_message = error_message
        self.sanitized_value = sanitized_value

    def __bool__(self) -> bool:
        """Allow using result in boolean context: if result: ..."""
        return self.is_valid

    def __repr__(self) -> str:
        if self.is_valid:
            return f"ValidationResult(VALID, {self.sanitized_value!r})"
        return f"ValidationResult(INVALID, {self.error_message!r})"


# ========== Name Validation ==========


def validate_name(name: Optional[str]) -> ValidationResult:
    """Validate a player's display name.

    Names are trimmed; anything non-empty is accepted so that nicknames,
    digits and non-latin scripts all work.

    Args:
        name: Name to validate

    Returns:
        ValidationResult with the trimmed name
    """
    if name is None or not str(name).strip():
        return ValidationResult(is_valid=False, error_message="Name is required")
    return ValidationResult(is_valid=True, sanitized_value=str(name).strip())


def validate_name_strict(name: Optional[str]) -> str:
    """Validate a name and raise if it is empty.

    Raises:
        InvalidPlayerDataException: If the name is empty
    """
    result = validate_name(name)
    if not result.is_valid:
        raise InvalidPlayerDataException(result.error_message)
    return result.sanitized_value


# ========== Date Validation ==========

_DATE_PATTERN = re.compile(r"^\d{4}-\d{2}-\d{2}$")


def validate_date_str(value: Optional[str]) -> ValidationResult:
    """Validate a ``YYYY-MM-DD`` calendar date.

    Args:
        value: Date string to validate

    Returns:
        ValidationResult with the date string
    """
    if not value or not _DATE_PATTERN.match(value.strip()):
        return ValidationResult(
            is_valid=False,
            error_message=f"Date must look like YYYY-MM-DD: {value!r}",
        )
    value = value.strip()
    try:
        date.fromisoformat(value)
    except ValueError:
        return ValidationResult(
            is_valid=False, error_message=f"Not a calendar date: {value}"
        )
    return ValidationResult(is_valid=True, sanitized_value=value)


def validate_date_str_strict(value: Optional[str]) -> str:
    """Validate a date string and raise if it is not a calendar date.

    Raises:
        ValidationException: If the date is malformed
    """
    result = validate_date_str(value)
    if not result.is_valid:
        raise ValidationException(result.error_message)
    return result.sanitized_value


# ========== Result Validation ==========


def validate_game_count(value: Any, field_name: str = "Game count") -> ValidationResult:
    """Validate a non-negative whole number of games."""
    if isinstance(value, bool) or not isinstance(value, int):
        return ValidationResult(
            is_valid=False, error_message=f"{field_name} must be a whole number"
        )
    if value < 0:
        return ValidationResult(
            is_valid=False, error_message=f"{field_name} cannot be negative"
        )
    return ValidationResult(is_valid=True, sanitized_value=value)


def validate_match_score_strict(
    player1_wins: Any, player2_wins: Any, draws: Any
) -> None:
    """Validate the three game counts of a match result.

    Raises:
        InvalidResultException: If any count is negative or not an integer
    """
    for value, field_name in (
        (player1_wins, "Player 1 wins"),
        (player2_wins, "Player 2 wins"),
        (draws, "Draws"),
    ):
        result = validate_game_count(value, field_name)
        if not result.is_valid:
            raise InvalidResultException(result.error_message)
