"""
Domain models package for Idle Finance.

Purpose
-------
Immutable value objects for the economy core: the static catalog
(assets, upgrades, prestige tuning), the player state snapshot, and the
per-frame derived state.

Design Notes
------------
All models are frozen dataclasses that validate their invariants on
construction. Operations in ``idlefinance.modules`` return new instances
built with ``dataclasses.replace``.
"""

from .base import (
    DomainValidationError,
    validate_count,
    validate_finite,
    validate_non_negative,
    validate_not_empty,
    validate_positive,
)
from .catalog import AssetConfig, EngineConfig, PrestigeParams, UpgradeConfig, UpgradeType
from .derived import DerivedState
from .player import (
    CURRENT_SCHEMA_VERSION,
    DEFAULT_OFFLINE_CAP_SEC,
    DEFAULT_OFFLINE_MULTIPLIER,
    Modifiers,
    PlayerState,
    PrestigeState,
    create_empty_ownership,
    create_empty_upgrade_ownership,
    create_initial_player_state,
    now_ms,
)

__all__ = [
    # Validation
    "DomainValidationError",
    "validate_count",
    "validate_finite",
    "validate_positive",
    "validate_non_negative",
    "validate_not_empty",
    # Catalog
    "AssetConfig",
    "UpgradeConfig",
    "UpgradeType",
    "PrestigeParams",
    "EngineConfig",
    # State
    "PlayerState",
    "PrestigeState",
    "Modifiers",
    "DerivedState",
    "CURRENT_SCHEMA_VERSION",
    "DEFAULT_OFFLINE_CAP_SEC",
    "DEFAULT_OFFLINE_MULTIPLIER",
    "create_empty_ownership",
    "create_empty_upgrade_ownership",
    "create_initial_player_state",
    "now_ms",
]
