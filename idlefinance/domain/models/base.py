"""
Base domain validation for Idle Finance.

Purpose
-------
Provide the validation primitives every domain model uses to enforce its
invariants at construction time. Domain models in this package are frozen
dataclasses: they validate themselves in ``__post_init__`` and are
"modified" only by building new instances.

Responsibilities
----------------
- Define ``DomainValidationError`` for invariant violations
- Provide small, reusable field validators

Non-Responsibilities
--------------------
- Economic degenerate-input handling (formulas return zero-effect results)
- Persistence or serialization (handled by modules.persistence)
"""

from __future__ import annotations

import math
from typing import Optional


class DomainValidationError(Exception):
    """
    Exception raised when domain model validation fails.

    This is the base exception for all invariant violations in domain
    models (negative cash, non-integer asset counts, malformed configs).
    """

    def __init__(self, message: str, field: Optional[str] = None):
        """
        Initialize validation error.

        Parameters
        ----------
        message : str
            Human-readable error message
        field : Optional[str]
            Field name that failed validation (if applicable)
        """
        super().__init__(message)
        self.field = field


def validate_finite(value: float, field_name: str) -> None:
    """
    Validate that a value is a real, finite number.

    Raises
    ------
    DomainValidationError
        If value is not an int/float, is a bool, NaN or infinite
    """
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise DomainValidationError(
            f"{field_name} must be a number, got {type(value).__name__}",
            field=field_name,
        )
    if not math.isfinite(value):
        raise DomainValidationError(
            f"{field_name} must be finite, got {value}",
            field=field_name,
        )


def validate_positive(value: float, field_name: str) -> None:
    """
    Validate that a value is positive.

    Parameters
    ----------
    value : float
        Value to validate
    field_name : str
        Name of the field (for error messages)

    Raises
    ------
    DomainValidationError
        If value is not positive
    """
    validate_finite(value, field_name)
    if value <= 0:
        raise DomainValidationError(
            f"{field_name} must be positive, got {value}",
            field=field_name,
        )


def validate_non_negative(value: float, field_name: str) -> None:
    """
    Validate that a value is non-negative.

    Parameters
    ----------
    value : float
        Value to validate
    field_name : str
        Name of the field (for error messages)

    Raises
    ------
    DomainValidationError
        If value is negative
    """
    validate_finite(value, field_name)
    if value < 0:
        raise DomainValidationError(
            f"{field_name} must be non-negative, got {value}",
            field=field_name,
        )


def validate_count(value: int, field_name: str) -> None:
    """Validate that a value is a non-negative integer count."""
    if isinstance(value, bool) or not isinstance(value, int):
        raise DomainValidationError(
            f"{field_name} must be an integer, got {type(value).__name__}",
            field=field_name,
        )
    if value < 0:
        raise DomainValidationError(
            f"{field_name} must be non-negative, got {value}",
            field=field_name,
        )


def validate_not_empty(value: str, field_name: str) -> None:
    """
    Validate that a string is not empty.

    Raises
    ------
    DomainValidationError
        If value is empty or whitespace-only
    """
    if not isinstance(value, str) or not value.strip():
        raise DomainValidationError(
            f"{field_name} cannot be empty",
            field=field_name,
        )
