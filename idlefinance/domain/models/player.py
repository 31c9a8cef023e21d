"""
Player state domain model for Idle Finance.

Purpose
-------
Immutable snapshot of a player's progress. The calling driver is the
single owner of the current snapshot; every core operation returns a new
``PlayerState`` rather than mutating the one it was given.

Responsibilities
----------------
- Hold cash, asset/upgrade ownership, prestige progress and offline modifiers
- Validate invariants on construction (non-negative cash, integer counts,
  offline multiplier of at least 1)
- Carry the ``marketing`` and ``entitlements`` side channels opaquely
- Convert to/from the JSON-compatible save shape

Non-Responsibilities
--------------------
- Economic rules (handled by modules.economy / modules.prestige)
- Reading or writing save payloads (handled by modules.persistence)

Usage Example
-------------
>>> state = create_initial_player_state(schema_version=1, asset_ids=["savings_account"])
>>> state.cash
0.0
>>> PlayerState.from_dict(state.to_dict()) == state
True
"""

from __future__ import annotations

import copy
import time
from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, Mapping, Optional, Union

from idlefinance.domain.models.base import (
    DomainValidationError,
    validate_count,
    validate_finite,
    validate_non_negative,
)

# Upgrades are marked True when owned; stackable upgrades record a stack count.
UpgradeOwnership = Union[bool, int]

CURRENT_SCHEMA_VERSION = 1
DEFAULT_OFFLINE_CAP_SEC = 8 * 60 * 60
DEFAULT_OFFLINE_MULTIPLIER = 1.0


def now_ms() -> int:
    """Current wall-clock time as epoch milliseconds."""
    return int(time.time() * 1000)


# ============================================================================
# VALUE OBJECTS
# ============================================================================


@dataclass(frozen=True)
class PrestigeState:
    """
    Accumulated prestige progress.

    Attributes
    ----------
    points_total : int
        Prestige points earned across all resets (never decreases)
    last_reset_at : Optional[float]
        Epoch ms of the last reset, or None if the player never prestiged
    """

    points_total: int = 0
    last_reset_at: Optional[float] = None

    def __post_init__(self) -> None:
        validate_count(self.points_total, "points_total")
        if self.last_reset_at is not None:
            validate_finite(self.last_reset_at, "last_reset_at")


@dataclass(frozen=True)
class Modifiers:
    """Offline-earnings ceiling and multiplier granted by upgrades."""

    offline_cap_sec: float = DEFAULT_OFFLINE_CAP_SEC
    offline_multiplier: float = DEFAULT_OFFLINE_MULTIPLIER

    def __post_init__(self) -> None:
        validate_non_negative(self.offline_cap_sec, "offline_cap_sec")
        validate_finite(self.offline_multiplier, "offline_multiplier")
        if self.offline_multiplier < 1:
            raise DomainValidationError(
                f"offline_multiplier must be at least 1, got {self.offline_multiplier}",
                field="offline_multiplier",
            )


# ============================================================================
# PLAYER STATE
# ============================================================================


@dataclass(frozen=True)
class PlayerState:
    """
    Immutable player progress snapshot.

    Business Rules
    --------------
    - Cash is never negative
    - Asset counts are non-negative integers
    - Upgrade ownership is a bool, or a non-negative stack count
    - ``marketing`` and ``entitlements`` are never interpreted by the core
      and survive every transformation unchanged
    """

    schema_version: int
    created_at: float
    last_seen_at: float
    cash: float = 0.0
    assets_owned: Dict[str, int] = field(default_factory=dict)
    upgrades_owned: Dict[str, UpgradeOwnership] = field(default_factory=dict)
    prestige: PrestigeState = field(default_factory=PrestigeState)
    modifiers: Modifiers = field(default_factory=Modifiers)
    marketing: Dict[str, Any] = field(default_factory=lambda: {"utm": {}})
    entitlements: Dict[str, Any] = field(default_factory=dict)

    def __post_init__(self) -> None:
        validate_count(self.schema_version, "schema_version")
        validate_finite(self.created_at, "created_at")
        validate_finite(self.last_seen_at, "last_seen_at")
        validate_non_negative(self.cash, "cash")
        for asset_id, owned in self.assets_owned.items():
            validate_count(owned, f"assets_owned.{asset_id}")
        for upgrade_id, owned in self.upgrades_owned.items():
            if not isinstance(owned, bool):
                validate_count(owned, f"upgrades_owned.{upgrade_id}")

    def owned_count(self, asset_id: str) -> int:
        """Units of an asset owned (0 when the asset was never recorded)."""
        return self.assets_owned.get(asset_id, 0)

    def upgrade_stacks(self, upgrade_id: str) -> int:
        """Number of times an upgrade applies (``True`` counts as one stack)."""
        owned = self.upgrades_owned.get(upgrade_id, False)
        if isinstance(owned, bool):
            return 1 if owned else 0
        return owned

    def owns_upgrade(self, upgrade_id: str) -> bool:
        return self.upgrade_stacks(upgrade_id) > 0

    # ========================================================================
    # CONVERSION TO/FROM THE SAVE SHAPE
    # ========================================================================

    def to_dict(self) -> Dict[str, Any]:
        """
        Convert to the JSON-compatible save shape (camelCase keys).

        Returns
        -------
        dict
            Plain structure safe to pass to ``json.dumps``
        """
        return {
            "schemaVersion": self.schema_version,
            "createdAt": self.created_at,
            "lastSeenAt": self.last_seen_at,
            "cash": self.cash,
            "assetsOwned": dict(self.assets_owned),
            "upgradesOwned": dict(self.upgrades_owned),
            "prestige": {
                "pointsTotal": self.prestige.points_total,
                "lastResetAt": self.prestige.last_reset_at,
            },
            "modifiers": {
                "offlineCapSec": self.modifiers.offline_cap_sec,
                "offlineMultiplier": self.modifiers.offline_multiplier,
            },
            "marketing": copy.deepcopy(self.marketing),
            "entitlements": copy.deepcopy(self.entitlements),
        }

    @classmethod
    def from_dict(cls, payload: Mapping[str, Any]) -> PlayerState:
        """
        Build a ``PlayerState`` from the save shape.

        Raises
        ------
        DomainValidationError
            If required fields are missing, mistyped, or violate invariants
        """
        try:
            prestige = payload.get("prestige") or {}
            modifiers = payload.get("modifiers") or {}
            return cls(
                schema_version=payload["schemaVersion"],
                created_at=payload["createdAt"],
                last_seen_at=payload["lastSeenAt"],
                cash=payload["cash"],
                assets_owned=dict(payload.get("assetsOwned") or {}),
                upgrades_owned=dict(payload.get("upgradesOwned") or {}),
                prestige=PrestigeState(
                    points_total=prestige.get("pointsTotal", 0),
                    last_reset_at=prestige.get("lastResetAt"),
                ),
                modifiers=Modifiers(
                    offline_cap_sec=modifiers.get("offlineCapSec", DEFAULT_OFFLINE_CAP_SEC),
                    offline_multiplier=modifiers.get(
                        "offlineMultiplier", DEFAULT_OFFLINE_MULTIPLIER
                    ),
                ),
                marketing=copy.deepcopy(payload.get("marketing", {"utm": {}})),
                entitlements=copy.deepcopy(payload.get("entitlements", {})),
            )
        except KeyError as e:
            raise DomainValidationError(f"Missing field: {e.args[0]}", field=e.args[0]) from e
        except (AttributeError, TypeError, ValueError, RecursionError) as e:
            raise DomainValidationError(f"Malformed player state: {e}") from e


# ============================================================================
# FACTORIES
# ============================================================================


def create_empty_ownership(ids: Iterable[str], initial_value: int = 0) -> Dict[str, int]:
    return {item_id: initial_value for item_id in ids}


def create_empty_upgrade_ownership(ids: Iterable[str]) -> Dict[str, UpgradeOwnership]:
    return {item_id: False for item_id in ids}


def create_initial_player_state(
    schema_version: int = CURRENT_SCHEMA_VERSION,
    now: Optional[float] = None,
    asset_ids: Iterable[str] = (),
    upgrade_ids: Iterable[str] = (),
    offline_cap_sec: float = DEFAULT_OFFLINE_CAP_SEC,
    offline_multiplier: float = DEFAULT_OFFLINE_MULTIPLIER,
    cash: float = 0.0,
) -> PlayerState:
    """
    Create a fresh player state.

    Parameters
    ----------
    schema_version : int
        Save schema version stamped on the state
    now : Optional[float]
        Epoch ms used for ``created_at`` and ``last_seen_at`` (defaults to now)
    asset_ids, upgrade_ids : Iterable[str]
        Catalog ids to pre-populate with zero ownership
    cash : float
        Starting cash

    Returns
    -------
    PlayerState
        New state with no prestige progress
    """
    timestamp = now_ms() if now is None else now
    return PlayerState(
        schema_version=schema_version,
        created_at=timestamp,
        last_seen_at=timestamp,
        cash=cash,
        assets_owned=create_empty_ownership(asset_ids, 0),
        upgrades_owned=create_empty_upgrade_ownership(upgrade_ids),
        prestige=PrestigeState(points_total=0, last_reset_at=None),
        modifiers=Modifiers(
            offline_cap_sec=offline_cap_sec,
            offline_multiplier=offline_multiplier,
        ),
        marketing={"utm": {}},
        entitlements={},
    )
