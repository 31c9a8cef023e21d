"""
Economy engine for Idle Finance.

Purpose
-------
Discrete state transformations driven by the caller: accrue passive income
over an elapsed interval, buy assets, and buy upgrades.

Responsibilities
----------------
- Advance cash and ``last_seen_at`` by a time delta (``tick``)
- Price and apply asset purchases atomically (``purchase_asset``)
- Apply upgrade purchases, including offline modifier max-merge (``buy_upgrade``)

Non-Responsibilities
--------------------
- Deciding when to tick (the driver owns the clock)
- Resolving catalog ids (handled by GameService)
- Computing the income rate (handled by modules.game.derived)

Design Notes
------------
Every function returns a new ``PlayerState``. A rejected purchase is a
normal outcome (``success=False``) carrying the untouched input state,
never an exception.
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from typing import Optional

from idlefinance.core.logging.logger import get_logger
from idlefinance.domain.models.catalog import AssetConfig, UpgradeConfig, UpgradeType
from idlefinance.domain.models.player import Modifiers, PlayerState
from idlefinance.modules.shared.formulas import add_cash, calculate_asset_cost, calculate_bulk_cost

logger = get_logger(__name__)

SECONDS_PER_HOUR = 3600
MS_PER_SECOND = 1000


# ============================================================================
# RESULTS
# ============================================================================


@dataclass(frozen=True)
class PurchaseResult:
    """Outcome of an asset purchase attempt."""

    state: PlayerState
    success: bool
    total_cost: float


@dataclass(frozen=True)
class UpgradePurchaseResult:
    """
    Outcome of an upgrade purchase attempt.

    ``applied_modifier`` names the ``Modifiers`` field the upgrade touched
    (``"offline_cap_sec"`` or ``"offline_multiplier"``), or None.
    """

    state: PlayerState
    success: bool
    total_cost: float
    applied_modifier: Optional[str] = None


# ============================================================================
# TICK
# ============================================================================


def tick(state: PlayerState, income_per_sec: float, delta_seconds: float) -> PlayerState:
    """
    Accrue passive income over ``delta_seconds``.

    Returns the input object itself when nothing accrues (non-positive
    delta or income). The delta is never clamped; capping long gaps is the
    offline module's job. Cash saturates at ``MAX_CASH`` rather than
    overflowing.

    Args:
        state: Current snapshot
        income_per_sec: Income rate from the derived state
        delta_seconds: Elapsed seconds since the previous tick

    Returns:
        New snapshot with cash and ``last_seen_at`` advanced
    """
    if delta_seconds <= 0 or income_per_sec <= 0:
        return state

    return replace(
        state,
        cash=add_cash(state.cash, income_per_sec * delta_seconds),
        last_seen_at=state.last_seen_at + delta_seconds * MS_PER_SECOND,
    )


# ============================================================================
# PURCHASES
# ============================================================================


def purchase_asset(state: PlayerState, asset: AssetConfig, quantity: int = 1) -> PurchaseResult:
    """
    Buy ``quantity`` units of an asset at the current escalating price.

    Pricing starts at the units already owned: a single unit uses the
    next-unit cost, larger quantities use the geometric bulk sum.

    Args:
        state: Current snapshot
        asset: Asset definition to buy
        quantity: Units to buy

    Returns:
        PurchaseResult. On failure ``state`` is the input object and
        ``total_cost`` is 0 for a non-positive quantity, or the price the
        player could not afford.
    """
    if quantity <= 0:
        return PurchaseResult(state=state, success=False, total_cost=0.0)

    owned = state.owned_count(asset.id)
    if quantity == 1:
        total_cost = calculate_asset_cost(asset.base_cost, asset.cost_growth, owned)
    else:
        total_cost = calculate_bulk_cost(asset.base_cost, asset.cost_growth, owned, quantity)

    if state.cash < total_cost:
        logger.debug(
            "Asset purchase rejected: insufficient cash",
            extra={"asset_id": asset.id, "quantity": quantity, "cost": total_cost, "cash": state.cash},
        )
        return PurchaseResult(state=state, success=False, total_cost=total_cost)

    assets_owned = dict(state.assets_owned)
    assets_owned[asset.id] = owned + quantity
    new_state = replace(
        state,
        cash=max(0.0, state.cash - total_cost),
        assets_owned=assets_owned,
    )

    logger.debug(
        "Asset purchased",
        extra={"asset_id": asset.id, "quantity": quantity, "cost": total_cost, "owned": owned + quantity},
    )
    return PurchaseResult(state=new_state, success=True, total_cost=total_cost)


def buy_upgrade(state: PlayerState, upgrade: UpgradeConfig) -> UpgradePurchaseResult:
    """
    Buy an upgrade.

    Non-stackable upgrades are marked ``True``; stackable ones record a
    stack count. Offline upgrades raise the matching modifier to at least
    the upgrade's value (``offline_cap`` values are hours). Modifiers never
    decrease: a weaker upgrade bought after a stronger one is a no-op on
    the modifier but still consumes its price.

    Returns:
        UpgradePurchaseResult. Fails with ``total_cost`` 0 when a
        non-stackable upgrade is already owned, or with the price when
        cash is short.
    """
    stacks = state.upgrade_stacks(upgrade.id)
    if stacks > 0 and not upgrade.stackable:
        return UpgradePurchaseResult(state=state, success=False, total_cost=0.0)

    price = upgrade.price
    if state.cash < price:
        logger.debug(
            "Upgrade purchase rejected: insufficient cash",
            extra={"upgrade_id": upgrade.id, "price": price, "cash": state.cash},
        )
        return UpgradePurchaseResult(state=state, success=False, total_cost=price)

    upgrades_owned = dict(state.upgrades_owned)
    upgrades_owned[upgrade.id] = stacks + 1 if upgrade.stackable else True

    modifiers = state.modifiers
    applied_modifier: Optional[str] = None
    if upgrade.type is UpgradeType.OFFLINE_CAP:
        modifiers = Modifiers(
            offline_cap_sec=max(modifiers.offline_cap_sec, upgrade.value * SECONDS_PER_HOUR),
            offline_multiplier=modifiers.offline_multiplier,
        )
        applied_modifier = "offline_cap_sec"
    elif upgrade.type is UpgradeType.OFFLINE_MULTIPLIER:
        modifiers = Modifiers(
            offline_cap_sec=modifiers.offline_cap_sec,
            offline_multiplier=max(modifiers.offline_multiplier, upgrade.value),
        )
        applied_modifier = "offline_multiplier"

    new_state = replace(
        state,
        cash=max(0.0, state.cash - price),
        upgrades_owned=upgrades_owned,
        modifiers=modifiers,
    )

    logger.debug(
        "Upgrade purchased",
        extra={
            "upgrade_id": upgrade.id,
            "upgrade_type": upgrade.type.value,
            "price": price,
            "applied_modifier": applied_modifier,
        },
    )
    return UpgradePurchaseResult(
        state=new_state,
        success=True,
        total_cost=price,
        applied_modifier=applied_modifier,
    )
