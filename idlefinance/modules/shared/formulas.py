"""
Idle Finance Economy Formulas

Purpose
-------
Pure calculation functions for the economy: geometric cost curves
(single and bulk purchases), per-asset and total passive income, and net
worth valuation.

Design Notes
------------
All formulas:
- Accept parameters explicitly
- Return calculated values
- Never raise for degenerate numeric input (zero-effect results instead)
- Have no infrastructure or config dependencies

Usage
-----
    from idlefinance.modules.shared.formulas import calculate_bulk_cost

    cost = calculate_bulk_cost(base_cost=10, cost_growth=1.15, owned=5, quantity=10)
"""

from __future__ import annotations

import math
import sys
from typing import TYPE_CHECKING, Dict, Iterable, Mapping, Optional, Sequence

if TYPE_CHECKING:
    from idlefinance.domain.models.catalog import AssetConfig

# Below this distance from 1 the closed-form geometric sum divides by a
# near-zero denominator; pricing is treated as flat.
GROWTH_EPSILON = 1e-9

# Largest balance a snapshot can hold; credits past it saturate here
MAX_CASH = sys.float_info.max


def _safe_pow(base: float, exponent: float) -> float:
    try:
        return math.pow(base, exponent)
    except OverflowError:
        return math.inf


def calculate_asset_cost(base_cost: float, cost_growth: float, owned: int) -> float:
    """
    Calculate the price of the next single unit of an asset.

    Formula: base_cost * cost_growth ^ owned

    Args:
        base_cost: Price of the first unit
        cost_growth: Geometric growth factor per owned unit
        owned: Units already owned (negative values are treated as 0)

    Returns:
        Price of the next unit (``inf`` if the curve overflows a float)

    Example:
        >>> calculate_asset_cost(10, 1.15, 0)
        10.0
        >>> round(calculate_asset_cost(10, 1.15, 2), 3)
        13.225
    """
    if owned < 0:
        owned = 0
    if cost_growth <= 0:
        return float(base_cost)
    return base_cost * _safe_pow(cost_growth, owned)


def calculate_bulk_cost(
    base_cost: float, cost_growth: float, owned: int, quantity: int
) -> float:
    """
    Calculate the total price of ``quantity`` consecutive units.

    Uses the closed-form geometric series

        base_cost * g^owned * (g^quantity - 1) / (g - 1)

    and falls back to flat pricing (``base_cost * quantity``) when the
    growth factor is 1 or within ``GROWTH_EPSILON`` of it. The result
    always equals the sum of ``calculate_asset_cost`` over the same units
    within floating-point tolerance.

    Args:
        base_cost: Price of the first unit
        cost_growth: Geometric growth factor per owned unit
        owned: Units already owned before this purchase
        quantity: Units to buy

    Returns:
        Total price; 0 when quantity <= 0

    Example:
        >>> round(calculate_bulk_cost(10, 1.1, 0, 3), 6)
        33.1
        >>> calculate_bulk_cost(10, 1.0, 7, 4)
        40.0
    """
    if quantity <= 0:
        return 0.0
    if owned < 0:
        owned = 0

    # Non-positive growth prices every unit at base_cost, as calculate_asset_cost does.
    if cost_growth == 1 or cost_growth <= 0:
        return float(base_cost * quantity)
    denominator = cost_growth - 1
    if abs(denominator) < GROWTH_EPSILON:
        return float(base_cost * quantity)

    start_cost = _safe_pow(cost_growth, owned)
    numerator = _safe_pow(cost_growth, quantity) - 1
    if math.isinf(start_cost) or math.isinf(numerator):
        return math.inf
    return base_cost * start_cost * (numerator / denominator)


def calculate_asset_income_per_sec(
    base_income_per_sec: float, owned: int, multiplier: float = 1.0
) -> float:
    """
    Calculate income per second produced by ``owned`` units of one asset.

    Example:
        >>> calculate_asset_income_per_sec(5, 2, 1.2)
        12.0
    """
    return owned * base_income_per_sec * multiplier


def calculate_total_income_per_sec(
    assets: Iterable[AssetConfig],
    assets_owned: Mapping[str, int],
    asset_multipliers: Optional[Mapping[str, float]] = None,
    global_multipliers: Optional[Sequence[float]] = None,
    event_multiplier: float = 1.0,
    prestige_multiplier: float = 1.0,
) -> float:
    """
    Calculate total passive income per second.

    Sums per-asset income (applying each asset's own multiplier, default 1,
    and skipping assets with nothing owned), then multiplies the sum by the
    product of all global multipliers, the event multiplier and the
    prestige multiplier. Composition is purely multiplicative.

    Args:
        assets: Asset definitions to aggregate over
        assets_owned: Asset id -> units owned
        asset_multipliers: Asset id -> resolved per-asset multiplier
        global_multipliers: Multipliers applied to the whole sum (empty -> 1)
        event_multiplier: Session-wide multiplier (e.g. demo boost)
        prestige_multiplier: Permanent prestige multiplier

    Returns:
        Income per second
    """
    asset_multipliers = asset_multipliers or {}
    global_multipliers = global_multipliers or ()

    base_sum = 0.0
    for asset in assets:
        owned = assets_owned.get(asset.id, 0)
        if owned <= 0:
            continue
        per_asset = asset_multipliers.get(asset.id, 1.0)
        base_sum += calculate_asset_income_per_sec(asset.base_income_per_sec, owned, per_asset)

    global_product = 1.0
    for value in global_multipliers:
        global_product *= value

    return base_sum * global_product * event_multiplier * prestige_multiplier


def calculate_net_worth(
    cash: float, assets_owned: Mapping[str, int], assets: Iterable[AssetConfig]
) -> float:
    """
    Calculate net worth: cash plus the base-cost valuation of owned assets.

    Base cost (not the escalated current price) keeps valuations stable
    regardless of purchase order.

    Example:
        >>> calculate_net_worth(100, {}, [])
        100.0
    """
    asset_value = 0.0
    for asset in assets:
        asset_value += assets_owned.get(asset.id, 0) * asset.base_cost
    return cash + asset_value


def add_cash(cash: float, amount: float) -> float:
    """
    Credit ``amount`` to ``cash``, saturating at ``MAX_CASH``.

    Snapshots reject infinite cash, so an overflowing sum is clamped to
    the largest finite float instead.

    Example:
        >>> add_cash(MAX_CASH, MAX_CASH) == MAX_CASH
        True
    """
    total = cash + amount
    if total > MAX_CASH:
        return MAX_CASH
    return total


def calculate_income_breakdown(
    assets: Iterable[AssetConfig],
    assets_owned: Mapping[str, int],
    asset_multipliers: Optional[Mapping[str, float]] = None,
) -> Dict[str, float]:
    """
    Group base income (per-asset multipliers applied) by asset category.

    Global, event and prestige multipliers scale every category equally,
    so they are left out of the breakdown.

    Returns:
        Category -> income per second, for categories with owned assets
    """
    asset_multipliers = asset_multipliers or {}
    breakdown: Dict[str, float] = {}
    for asset in assets:
        owned = assets_owned.get(asset.id, 0)
        if owned <= 0:
            continue
        income = calculate_asset_income_per_sec(
            asset.base_income_per_sec, owned, asset_multipliers.get(asset.id, 1.0)
        )
        breakdown[asset.category] = breakdown.get(asset.category, 0.0) + income
    return breakdown


def calculate_net_worth_breakdown(
    assets: Iterable[AssetConfig], assets_owned: Mapping[str, int]
) -> Dict[str, float]:
    """
    Group the cost basis of owned assets by asset category.

    Cost basis is what the owned units cost to buy from zero
    (``calculate_bulk_cost(base, growth, 0, owned)``), so heavily
    escalated assets weigh more than in ``calculate_net_worth``.

    Returns:
        Category -> asset value, for categories with owned assets
    """
    breakdown: Dict[str, float] = {}
    for asset in assets:
        owned = assets_owned.get(asset.id, 0)
        if owned <= 0:
            continue
        breakdown[asset.category] = breakdown.get(asset.category, 0.0) + calculate_bulk_cost(
            asset.base_cost, asset.cost_growth, 0, owned
        )
    return breakdown
