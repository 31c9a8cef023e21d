"""
GameService: driver-facing API for the Idle Finance economy core.

Purpose
-------
Single entry point a driver (UI loop, server, CLI) uses to create, advance
and transform player state against a static ``EngineConfig``.

Responsibilities
----------------
- Create the default state for a configuration
- Resolve catalog ids and delegate to the economy, offline and prestige modules
- Recompute derived state on demand (never cached)
- Unlock visibility, price quotes and portfolio allocation views

Non-Responsibilities
--------------------
- Scheduling ticks or owning the clock
- Persisting state (handled by modules.persistence)
- Interpreting marketing or entitlement data

Design Notes
------------
Stateless: every method is a ``@staticmethod`` taking the snapshot and the
configuration explicitly. Unknown asset or upgrade ids are caller bugs and
raise ``UnknownAssetError`` / ``UnknownUpgradeError``.

Usage Example
-------------
>>> state = GameService.create_default_state(config, now=0)
>>> state = GameService.purchase_asset(state, "savings_account", 1, config)
>>> state = GameService.tick(state, 1.0, config)
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from typing import Dict, List, Optional

from idlefinance.core.logging.logger import get_logger
from idlefinance.domain.models.catalog import AssetConfig, EngineConfig, UpgradeConfig
from idlefinance.domain.models.derived import DerivedState
from idlefinance.domain.models.player import (
    DEFAULT_OFFLINE_CAP_SEC,
    DEFAULT_OFFLINE_MULTIPLIER,
    PlayerState,
    create_initial_player_state,
    now_ms,
)
from idlefinance.modules.economy import engine
from idlefinance.modules.game.derived import compute_derived
from idlefinance.modules.offline.logic import calculate_offline_earnings
from idlefinance.modules.prestige.logic import is_prestige_unlocked, perform_prestige_reset
from idlefinance.modules.shared.formulas import (
    MAX_CASH,
    add_cash,
    calculate_asset_cost,
    calculate_bulk_cost,
    calculate_income_breakdown,
    calculate_net_worth_breakdown,
)

logger = get_logger(__name__)


# ============================================================================
# OUTCOMES
# ============================================================================


@dataclass(frozen=True)
class PrestigeOutcome:
    state: PlayerState
    points_earned: int


@dataclass(frozen=True)
class OfflineOutcome:
    state: PlayerState
    earned: float


@dataclass(frozen=True)
class PortfolioBreakdown:
    """
    Share of income and of asset value held in each asset category.

    Shares are fractions in ``[0, 1]`` keyed by category, in catalog
    order; a category's share is 0 when the matching total is 0.
    """

    income_share: Dict[str, float]
    net_worth_share: Dict[str, float]


class GameService:
    """Stateless economy operations over ``PlayerState`` + ``EngineConfig``."""

    # ========================================================================
    # STATE
    # ========================================================================

    @staticmethod
    def create_default_state(config: EngineConfig, now: Optional[float] = None) -> PlayerState:
        """
        Create a fresh state for ``config``.

        Every configured asset starts at 0 and every upgrade unowned; cash
        starts at ``config.starting_cash``.
        """
        return create_initial_player_state(
            schema_version=config.schema_version,
            now=now,
            asset_ids=config.asset_ids,
            upgrade_ids=config.upgrade_ids,
            offline_cap_sec=DEFAULT_OFFLINE_CAP_SEC,
            offline_multiplier=DEFAULT_OFFLINE_MULTIPLIER,
            cash=config.starting_cash,
        )

    @staticmethod
    def compute_derived(state: PlayerState, config: EngineConfig) -> DerivedState:
        return compute_derived(state, config)

    @staticmethod
    def tick(state: PlayerState, dt_seconds: float, config: EngineConfig) -> PlayerState:
        """Accrue income for ``dt_seconds`` at the current derived rate."""
        derived = compute_derived(state, config)
        return engine.tick(state, derived.income_per_sec, dt_seconds)

    # ========================================================================
    # PURCHASES
    # ========================================================================

    @staticmethod
    def purchase_asset(
        state: PlayerState, asset_id: str, quantity: int, config: EngineConfig
    ) -> PlayerState:
        """
        Buy ``quantity`` units of ``asset_id``.

        Returns the input state unchanged when the purchase is rejected.

        Raises:
            UnknownAssetError: ``asset_id`` is not configured
        """
        asset = config.get_asset(asset_id)
        return engine.purchase_asset(state, asset, quantity).state

    @staticmethod
    def buy_upgrade(state: PlayerState, upgrade_id: str, config: EngineConfig) -> PlayerState:
        """
        Buy ``upgrade_id``.

        Returns the input state unchanged when the purchase is rejected.

        Raises:
            UnknownUpgradeError: ``upgrade_id`` is not configured
        """
        upgrade = config.get_upgrade(upgrade_id)
        return engine.buy_upgrade(state, upgrade).state

    @staticmethod
    def quote_asset(
        state: PlayerState, asset_id: str, quantity: int, config: EngineConfig
    ) -> float:
        """Price of the next ``quantity`` units of ``asset_id`` (0 for quantity <= 0)."""
        asset = config.get_asset(asset_id)
        owned = state.owned_count(asset.id)
        if quantity == 1:
            return calculate_asset_cost(asset.base_cost, asset.cost_growth, owned)
        return calculate_bulk_cost(asset.base_cost, asset.cost_growth, owned, quantity)

    # ========================================================================
    # PRESTIGE
    # ========================================================================

    @staticmethod
    def can_prestige(state: PlayerState, config: EngineConfig) -> bool:
        derived = compute_derived(state, config)
        return is_prestige_unlocked(derived.net_worth, config.prestige)

    @staticmethod
    def prestige_reset(
        state: PlayerState, config: EngineConfig, now: Optional[float] = None
    ) -> PrestigeOutcome:
        """
        Reset progress for prestige points.

        Below the prestige floor the outcome carries the input state and
        0 points.
        """
        timestamp = now_ms() if now is None else now
        result = perform_prestige_reset(
            state,
            config.assets,
            config.upgrade_ids,
            config.prestige,
            timestamp,
        )
        return PrestigeOutcome(state=result.state, points_earned=result.points_earned)

    # ========================================================================
    # OFFLINE
    # ========================================================================

    @staticmethod
    def apply_offline_earnings(
        state: PlayerState, now: float, config: EngineConfig
    ) -> OfflineOutcome:
        """
        Credit earnings for the time since ``state.last_seen_at``.

        Uses the income rate derived from the saved snapshot. ``last_seen_at``
        advances by the credited seconds only, so time beyond the offline
        cap is not carried forward. Cash saturates at ``MAX_CASH``, and
        ``earned`` reports what was actually credited.
        """
        derived = compute_derived(state, config)
        result = calculate_offline_earnings(state, now, derived.income_per_sec)

        new_state = replace(
            state,
            cash=add_cash(state.cash, result.offline_earnings),
            last_seen_at=state.last_seen_at + result.offline_seconds * 1000,
        )

        earned = min(result.offline_earnings, MAX_CASH - state.cash)
        if earned > 0:
            logger.info(
                "Offline earnings applied",
                extra={
                    "offline_seconds": result.offline_seconds,
                    "offline_earnings": earned,
                },
            )
        return OfflineOutcome(state=new_state, earned=earned)

    # ========================================================================
    # VISIBILITY & VIEWS
    # ========================================================================

    @staticmethod
    def is_asset_unlocked(state: PlayerState, asset: AssetConfig) -> bool:
        """Owned assets stay visible even if cash later drops below the threshold."""
        return state.owned_count(asset.id) > 0 or state.cash >= asset.unlock_at_cash

    @staticmethod
    def is_upgrade_unlocked(state: PlayerState, upgrade: UpgradeConfig) -> bool:
        return state.cash >= upgrade.unlock_at_cash

    @staticmethod
    def unlocked_assets(state: PlayerState, config: EngineConfig) -> List[AssetConfig]:
        return [a for a in config.assets if GameService.is_asset_unlocked(state, a)]

    @staticmethod
    def unlocked_upgrades(state: PlayerState, config: EngineConfig) -> List[UpgradeConfig]:
        return [u for u in config.upgrades if GameService.is_upgrade_unlocked(state, u)]

    @staticmethod
    def portfolio_breakdown(
        state: PlayerState, config: EngineConfig
    ) -> Optional[PortfolioBreakdown]:
        """
        Compute the portfolio allocation by asset category.

        Returns:
            PortfolioBreakdown, or None when the player has neither income
            nor asset value
        """
        derived = compute_derived(state, config)
        income = calculate_income_breakdown(
            config.assets, state.assets_owned, derived.asset_multipliers
        )
        value = calculate_net_worth_breakdown(config.assets, state.assets_owned)

        total_income = sum(income.values())
        total_value = sum(value.values())
        if total_income <= 0 and total_value <= 0:
            return None

        income_share: Dict[str, float] = {}
        net_worth_share: Dict[str, float] = {}
        for asset in config.assets:
            category = asset.category
            if category in income_share:
                continue
            income_share[category] = (
                income.get(category, 0.0) / total_income if total_income > 0 else 0.0
            )
            net_worth_share[category] = (
                value.get(category, 0.0) / total_value if total_value > 0 else 0.0
            )

        return PortfolioBreakdown(income_share=income_share, net_worth_share=net_worth_share)
