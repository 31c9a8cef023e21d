"""
Prestige system for Idle Finance.

Purpose
-------
Convert accumulated net worth into permanent prestige points and reset
run progress. Points grow sublinearly with net worth; each point adds a
flat percentage to all income.

Responsibilities
----------------
- Point curve: floor((net_worth / divisor) ^ exponent)
- Multiplier: 1 + points_total * multiplier_per_point
- Eligibility check against the configured net-worth floor
- Reset transformation (cash, assets and upgrades cleared; prestige kept)

Non-Responsibilities
--------------------
- Computing net worth (handled by modules.shared.formulas)
- Deciding when to reset (the driver asks; GameService wires it up)
"""

from __future__ import annotations

import math
from dataclasses import dataclass, replace
from typing import Iterable

from idlefinance.core.logging.logger import get_logger
from idlefinance.domain.models.catalog import AssetConfig, PrestigeParams
from idlefinance.domain.models.player import (
    PlayerState,
    PrestigeState,
    create_empty_ownership,
    create_empty_upgrade_ownership,
)
from idlefinance.modules.shared.formulas import calculate_net_worth

logger = get_logger(__name__)


@dataclass(frozen=True)
class PrestigeResult:
    """
    Outcome of a prestige reset attempt.

    Attributes
    ----------
    state : PlayerState
        The reset snapshot, or the untouched input when not unlocked
    points_earned : int
        Points granted by this reset (0 when not unlocked)
    net_worth : float
        Net worth evaluated before the reset
    prestige_unlocked : bool
        Whether net worth met the prestige floor
    """

    state: PlayerState
    points_earned: int
    net_worth: float
    prestige_unlocked: bool


# ============================================================================
# FORMULAS
# ============================================================================


def calculate_prestige_points(net_worth: float, divisor: float, exponent: float) -> int:
    """
    Calculate prestige points earned for a given net worth.

    Formula: floor((net_worth / divisor) ^ exponent)

    Returns 0 when any input is not positive.

    Example:
        >>> calculate_prestige_points(4_000_000, 1_000_000, 0.5)
        2
    """
    if net_worth <= 0 or divisor <= 0 or exponent <= 0:
        return 0
    try:
        raw = math.pow(net_worth / divisor, exponent)
    except OverflowError:
        raw = math.inf
    if math.isinf(raw):
        # floor(inf) is not an int; cap at the largest exactly representable count
        return int(2**53)
    return int(math.floor(raw))


def calculate_prestige_multiplier(total_points: int, multiplier_per_point: float) -> float:
    """
    Calculate the permanent income multiplier from prestige points.

    Formula: 1 + total_points * multiplier_per_point (1 when either is not positive)

    Example:
        >>> calculate_prestige_multiplier(10, 0.02)
        1.2
    """
    if total_points <= 0 or multiplier_per_point <= 0:
        return 1.0
    return 1.0 + total_points * multiplier_per_point


def is_prestige_unlocked(net_worth: float, params: PrestigeParams) -> bool:
    return net_worth >= params.prestige_min_net_worth


# ============================================================================
# RESET
# ============================================================================


def perform_prestige_reset(
    state: PlayerState,
    assets: Iterable[AssetConfig],
    upgrade_ids: Iterable[str],
    params: PrestigeParams,
    now: float,
) -> PrestigeResult:
    """
    Reset run progress in exchange for prestige points.

    Below ``params.prestige_min_net_worth`` this is a no-op that returns
    the very same state object. Otherwise cash drops to 0, every configured
    asset and upgrade (and any other id already recorded in the state) is
    cleared, earned points are added to the running total, and both
    ``prestige.last_reset_at`` and ``last_seen_at`` become ``now``.
    Modifiers, side channels and creation time pass through.

    Args:
        state: Current snapshot
        assets: Configured assets (valued for net worth and cleared)
        upgrade_ids: Configured upgrade ids to clear
        params: Prestige tuning
        now: Epoch ms of the reset

    Returns:
        PrestigeResult
    """
    assets = tuple(assets)
    net_worth = calculate_net_worth(state.cash, state.assets_owned, assets)

    if not is_prestige_unlocked(net_worth, params):
        return PrestigeResult(
            state=state,
            points_earned=0,
            net_worth=net_worth,
            prestige_unlocked=False,
        )

    points_earned = calculate_prestige_points(
        net_worth, params.prestige_divisor, params.prestige_exponent
    )

    # Ids from an older catalog are cleared as well
    assets_owned = create_empty_ownership([*state.assets_owned, *(a.id for a in assets)])
    upgrades_owned = create_empty_upgrade_ownership([*state.upgrades_owned, *upgrade_ids])

    new_state = replace(
        state,
        cash=0.0,
        assets_owned=assets_owned,
        upgrades_owned=upgrades_owned,
        prestige=PrestigeState(
            points_total=state.prestige.points_total + points_earned,
            last_reset_at=now,
        ),
        last_seen_at=now,
    )

    logger.info(
        "Prestige reset performed",
        extra={
            "net_worth": net_worth,
            "points_earned": points_earned,
            "points_total": new_state.prestige.points_total,
        },
    )
    return PrestigeResult(
        state=new_state,
        points_earned=points_earned,
        net_worth=net_worth,
        prestige_unlocked=True,
    )
