"""Prestige point algebra and reset."""

from idlefinance.modules.prestige.logic import (
    PrestigeResult,
    calculate_prestige_multiplier,
    calculate_prestige_points,
    is_prestige_unlocked,
    perform_prestige_reset,
)

__all__ = [
    "PrestigeResult",
    "calculate_prestige_points",
    "calculate_prestige_multiplier",
    "is_prestige_unlocked",
    "perform_prestige_reset",
]
