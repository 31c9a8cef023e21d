"""
Static catalog models for Idle Finance.

Purpose
-------
Immutable value objects describing the static economy configuration:
asset definitions, upgrade definitions, prestige tuning, and the
``EngineConfig`` bundle that the driver supplies once per session.

Responsibilities
----------------
- Represent assets and upgrades as validated, frozen structures
- Represent upgrade kinds as a closed enum (``UpgradeType``)
- Resolve catalog ids, failing loudly on unknown ids

Non-Responsibilities
--------------------
- Loading from files (handled by core.config.balance)
- Economic calculations (handled by modules.shared.formulas)

Usage Example
-------------
>>> asset = AssetConfig(id="savings_account", name="Savings Account",
...                     base_cost=10, cost_growth=1.15, base_income_per_sec=1)
>>> config = EngineConfig(assets=(asset,), upgrades=(), prestige=PrestigeParams())
>>> config.get_asset("savings_account").base_cost
10
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Iterable, Optional, Set, Tuple

from idlefinance.domain.models.base import (
    DomainValidationError,
    validate_finite,
    validate_non_negative,
    validate_not_empty,
    validate_positive,
)
from idlefinance.modules.shared.exceptions import UnknownAssetError, UnknownUpgradeError


# ============================================================================
# ENUMS
# ============================================================================


class UpgradeType(str, Enum):
    """
    Closed set of upgrade kinds.

    ``value`` on an ``UpgradeConfig`` is interpreted per kind:
    a multiplier for the multiplier kinds, hours for ``OFFLINE_CAP``,
    and ignored for ``QOL``.
    """

    GLOBAL_MULTIPLIER = "global_multiplier"
    ASSET_MULTIPLIER = "asset_multiplier"
    OFFLINE_CAP = "offline_cap"
    OFFLINE_MULTIPLIER = "offline_multiplier"
    QOL = "qol"


# ============================================================================
# VALUE OBJECTS
# ============================================================================


@dataclass(frozen=True)
class AssetConfig:
    """
    Immutable definition of a purchasable, income-producing asset.

    Attributes
    ----------
    id : str
        Catalog identifier
    name : str
        Display name
    base_cost : float
        Price of the first unit
    cost_growth : float
        Geometric growth factor per owned unit (1 means flat pricing)
    base_income_per_sec : float
        Income produced per owned unit per second
    unlock_at_cash : float
        Cash threshold at which the asset becomes visible
    category : str
        Portfolio category used for allocation breakdowns
    """

    id: str
    name: str
    base_cost: float
    cost_growth: float
    base_income_per_sec: float
    unlock_at_cash: float = 0.0
    category: str = "cash"
    description: str = ""
    icon: Optional[str] = None

    def __post_init__(self) -> None:
        validate_not_empty(self.id, "id")
        validate_non_negative(self.base_cost, "base_cost")
        validate_positive(self.cost_growth, "cost_growth")
        validate_non_negative(self.base_income_per_sec, "base_income_per_sec")
        validate_non_negative(self.unlock_at_cash, "unlock_at_cash")


@dataclass(frozen=True)
class UpgradeConfig:
    """
    Immutable definition of an upgrade.

    Non-stackable upgrades can be bought at most once. ``target_asset_id``
    is required for ``ASSET_MULTIPLIER`` upgrades and ignored otherwise.
    """

    id: str
    name: str
    price: float
    type: UpgradeType
    value: float
    unlock_at_cash: float = 0.0
    target_asset_id: Optional[str] = None
    stackable: bool = False
    description: str = ""

    def __post_init__(self) -> None:
        validate_not_empty(self.id, "id")
        validate_non_negative(self.price, "price")
        validate_non_negative(self.unlock_at_cash, "unlock_at_cash")
        validate_finite(self.value, "value")
        if not isinstance(self.type, UpgradeType):
            try:
                object.__setattr__(self, "type", UpgradeType(self.type))
            except ValueError:
                raise DomainValidationError(
                    f"Unknown upgrade type: {self.type}",
                    field="type",
                ) from None
        if self.type is UpgradeType.ASSET_MULTIPLIER and not self.target_asset_id:
            raise DomainValidationError(
                f"asset_multiplier upgrade {self.id} requires target_asset_id",
                field="target_asset_id",
            )


@dataclass(frozen=True)
class PrestigeParams:
    """Prestige tuning: eligibility threshold, point curve and per-point bonus."""

    prestige_min_net_worth: float = 1_000_000.0
    prestige_divisor: float = 1_000_000.0
    prestige_exponent: float = 0.5
    prestige_multiplier_per_point: float = 0.02


@dataclass(frozen=True)
class EngineConfig:
    """
    Static configuration for one session.

    The core treats this as immutable for the session's duration. Assets
    and upgrades keep their declared order; aggregation walks them in it.
    Ids are unique and every ``asset_multiplier`` upgrade targets a
    configured asset.
    """

    assets: Tuple[AssetConfig, ...]
    upgrades: Tuple[UpgradeConfig, ...]
    prestige: PrestigeParams = field(default_factory=PrestigeParams)
    event_multiplier: float = 1.0
    schema_version: int = 1
    starting_cash: float = 0.0

    def __post_init__(self) -> None:
        object.__setattr__(self, "assets", tuple(self.assets))
        object.__setattr__(self, "upgrades", tuple(self.upgrades))
        _ensure_unique((a.id for a in self.assets), "assets")
        _ensure_unique((u.id for u in self.upgrades), "upgrades")
        asset_ids = set(self.asset_ids)
        for upgrade in self.upgrades:
            if (
                upgrade.type is UpgradeType.ASSET_MULTIPLIER
                and upgrade.target_asset_id not in asset_ids
            ):
                raise DomainValidationError(
                    f"Upgrade {upgrade.id} targets unknown asset: {upgrade.target_asset_id}",
                    field="target_asset_id",
                )
        validate_finite(self.event_multiplier, "event_multiplier")
        validate_non_negative(self.starting_cash, "starting_cash")

    @property
    def asset_ids(self) -> Tuple[str, ...]:
        return tuple(a.id for a in self.assets)

    @property
    def upgrade_ids(self) -> Tuple[str, ...]:
        return tuple(u.id for u in self.upgrades)

    def get_asset(self, asset_id: str) -> AssetConfig:
        """
        Resolve an asset by id.

        Raises
        ------
        UnknownAssetError
            If the id is not part of this configuration
        """
        for asset in self.assets:
            if asset.id == asset_id:
                return asset
        raise UnknownAssetError(asset_id)

    def get_upgrade(self, upgrade_id: str) -> UpgradeConfig:
        """
        Resolve an upgrade by id.

        Raises
        ------
        UnknownUpgradeError
            If the id is not part of this configuration
        """
        for upgrade in self.upgrades:
            if upgrade.id == upgrade_id:
                return upgrade
        raise UnknownUpgradeError(upgrade_id)


def _ensure_unique(ids: Iterable[str], field_name: str) -> None:
    seen: Set[str] = set()
    for item_id in ids:
        if item_id in seen:
            raise DomainValidationError(
                f"Duplicate id in {field_name}: {item_id}",
                field=field_name,
            )
        seen.add(item_id)
