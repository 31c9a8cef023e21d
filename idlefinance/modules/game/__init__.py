"""
Derived-state aggregation and the driver-facing game API.
"""

from idlefinance.modules.game.derived import compute_derived
from idlefinance.modules.game.service import (
    GameService,
    OfflineOutcome,
    PortfolioBreakdown,
    PrestigeOutcome,
)

__all__ = [
    "compute_derived",
    "GameService",
    "OfflineOutcome",
    "PrestigeOutcome",
    "PortfolioBreakdown",
]
