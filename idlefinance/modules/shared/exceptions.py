"""
Domain exceptions for Idle Finance.

Purpose
-------
Define the structured exception hierarchy for caller/configuration
mismatches in the economy core. The core favors total functions: an
unaffordable purchase or a degenerate numeric input is a zero-effect
result, not an exception. Exceptions are reserved for caller bugs, such
as referencing an asset or upgrade id that the static configuration does
not define.

Design Notes
------------
- All domain exceptions inherit from ``IdleFinanceDomainException``.
- Each exception carries:
  - ``message``: human-readable description
  - ``details``: additional structured context (dict-like)
  - ``error_code``: short, stable identifier for programmatic use
"""

from __future__ import annotations

from typing import Any, Dict, Optional


class IdleFinanceDomainException(Exception):
    """
    Base exception for all Idle Finance domain-level errors.

    Args:
        message: Human-readable error message
        details: Additional structured data about the error (dict-like)
        error_code: Optional code for programmatic handling

    Example:
        >>> raise IdleFinanceDomainException(
        ...     "Purchase rejected",
        ...     {"reason": "unknown asset"}
        ... )
    """

    def __init__(
        self,
        message: str,
        details: Optional[Dict[str, Any]] = None,
        error_code: Optional[str] = None,
    ) -> None:
        self.message: str = message
        self.details: Dict[str, Any] = details or {}
        self.error_code: str = error_code or self.__class__.__name__
        super().__init__(self.message)

    def to_dict(self) -> Dict[str, Any]:
        """Convert exception to dictionary for logging/serialization."""
        return {
            "error_type": self.__class__.__name__,
            "error_code": self.error_code,
            "message": self.message,
            "details": self.details,
        }

    def __str__(self) -> str:
        details_str = f" | Details: {self.details}" if self.details else ""
        return f"[{self.error_code}] {self.message}{details_str}"

    def __repr__(self) -> str:
        return (
            f"{self.__class__.__name__}("
            f"message={self.message!r}, "
            f"details={self.details!r}, "
            f"error_code={self.error_code!r}"
            ")"
        )


class NotFoundError(IdleFinanceDomainException):
    """
    Raised when a referenced catalog entry does not exist.

    Args:
        resource_type: Type of resource (e.g., "Asset", "Upgrade")
        identifier: Optional identifier for the missing resource
    """

    def __init__(self, resource_type: str, identifier: Optional[Any] = None) -> None:
        self.resource_type = resource_type
        self.identifier = identifier

        if identifier is not None:
            message = f"{resource_type} not found: {identifier}"
        else:
            message = f"{resource_type} not found"

        super().__init__(
            message,
            details={
                "resource_type": resource_type,
                "identifier": identifier,
            },
            error_code=f"{resource_type.upper()}_NOT_FOUND",
        )


class UnknownAssetError(NotFoundError):
    """Raised when an asset id is absent from the engine configuration."""

    def __init__(self, asset_id: str) -> None:
        self.asset_id = asset_id
        super().__init__("Asset", asset_id)


class UnknownUpgradeError(NotFoundError):
    """Raised when an upgrade id is absent from the engine configuration."""

    def __init__(self, upgrade_id: str) -> None:
        self.upgrade_id = upgrade_id
        super().__init__("Upgrade", upgrade_id)
