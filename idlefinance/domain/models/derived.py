"""
Derived (per-frame) state for Idle Finance.

``DerivedState`` is a pure function of ``PlayerState`` + ``EngineConfig``.
It is never persisted and never cached across mutations: recompute it
after every tick, purchase or reset.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, List


@dataclass(frozen=True)
class DerivedState:
    """
    Resolved multipliers and aggregates for the current snapshot.

    Attributes
    ----------
    income_per_sec : float
        Total passive income with every multiplier applied
    net_worth : float
        Cash plus base-cost valuation of owned assets
    asset_multipliers : Dict[str, float]
        Compounded per-asset multipliers from owned asset upgrades
    global_multipliers : List[float]
        One entry per owned global upgrade stack
    event_multiplier : float
        Session-wide multiplier from the engine configuration
    prestige_multiplier : float
        Permanent multiplier from accumulated prestige points
    """

    income_per_sec: float
    net_worth: float
    asset_multipliers: Dict[str, float] = field(default_factory=dict)
    global_multipliers: List[float] = field(default_factory=list)
    event_multiplier: float = 1.0
    prestige_multiplier: float = 1.0
