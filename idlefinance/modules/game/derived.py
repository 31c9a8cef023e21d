"""
Derived-state aggregation.

Resolves owned upgrades into multipliers and combines them with the
prestige and event multipliers to produce the per-frame ``DerivedState``.
"""

from __future__ import annotations

from typing import Dict, List

from idlefinance.domain.models.catalog import EngineConfig, UpgradeType
from idlefinance.domain.models.derived import DerivedState
from idlefinance.domain.models.player import PlayerState
from idlefinance.modules.prestige.logic import calculate_prestige_multiplier
from idlefinance.modules.shared.formulas import (
    calculate_net_worth,
    calculate_total_income_per_sec,
)


def compute_derived(state: PlayerState, config: EngineConfig) -> DerivedState:
    """
    Compute income rate, net worth and resolved multipliers for a snapshot.

    Upgrades are walked in configuration order. Each owned stack of a
    ``global_multiplier`` upgrade contributes one entry to
    ``global_multipliers``; each owned stack of an ``asset_multiplier``
    upgrade compounds into its target's multiplier. Offline and QoL
    upgrades do not affect income.

    Args:
        state: Current snapshot
        config: Session configuration

    Returns:
        DerivedState (never cached; recompute after every change)
    """
    asset_multipliers: Dict[str, float] = {}
    global_multipliers: List[float] = []

    for upgrade in config.upgrades:
        stacks = state.upgrade_stacks(upgrade.id)
        if stacks <= 0:
            continue

        if upgrade.type is UpgradeType.GLOBAL_MULTIPLIER:
            global_multipliers.extend([upgrade.value] * stacks)
        elif upgrade.type is UpgradeType.ASSET_MULTIPLIER:
            target = upgrade.target_asset_id
            current = asset_multipliers.get(target, 1.0)
            for _ in range(stacks):
                current *= upgrade.value
            asset_multipliers[target] = current

    prestige_multiplier = calculate_prestige_multiplier(
        state.prestige.points_total,
        config.prestige.prestige_multiplier_per_point,
    )

    income_per_sec = calculate_total_income_per_sec(
        config.assets,
        state.assets_owned,
        asset_multipliers=asset_multipliers,
        global_multipliers=global_multipliers,
        event_multiplier=config.event_multiplier,
        prestige_multiplier=prestige_multiplier,
    )
    net_worth = calculate_net_worth(state.cash, state.assets_owned, config.assets)

    return DerivedState(
        income_per_sec=income_per_sec,
        net_worth=net_worth,
        asset_multipliers=asset_multipliers,
        global_multipliers=global_multipliers,
        event_multiplier=config.event_multiplier,
        prestige_multiplier=prestige_multiplier,
    )
