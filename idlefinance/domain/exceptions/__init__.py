"""
Domain exceptions package for Idle Finance.

Re-exports the exception hierarchy defined in
``idlefinance.modules.shared.exceptions`` together with the model
validation error, so callers can import every domain error from one place.
"""

from idlefinance.domain.models.base import DomainValidationError
from idlefinance.modules.shared.exceptions import (
    IdleFinanceDomainException,
    NotFoundError,
    UnknownAssetError,
    UnknownUpgradeError,
)

__all__ = [
    "IdleFinanceDomainException",
    "DomainValidationError",
    "NotFoundError",
    "UnknownAssetError",
    "UnknownUpgradeError",
]
