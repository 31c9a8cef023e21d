"""
Idle Finance: a deterministic idle-game economy core.

Players accumulate cash through income-producing assets, buy upgrades
that multiply income or improve offline earnings, and prestige for a
permanent multiplier. The core is pure: every operation takes an
immutable ``PlayerState`` and a static ``EngineConfig`` and returns a new
state. Drivers own the clock, storage and presentation.

Usage
-----
    from idlefinance import GameService
    from idlefinance.core.config.balance import load_engine_config

    config = load_engine_config()
    state = GameService.create_default_state(config)
    state = GameService.purchase_asset(state, "savings_account", 1, config)
    state = GameService.tick(state, 1.0, config)
"""

from idlefinance.domain.models import (
    AssetConfig,
    DerivedState,
    EngineConfig,
    Modifiers,
    PlayerState,
    PrestigeParams,
    PrestigeState,
    UpgradeConfig,
    UpgradeType,
)
from idlefinance.modules.game import GameService, OfflineOutcome, PrestigeOutcome
from idlefinance.modules.persistence import deserialize_player_state, serialize_player_state

__version__ = "0.1.0"

__all__ = [
    "GameService",
    "OfflineOutcome",
    "PrestigeOutcome",
    "AssetConfig",
    "UpgradeConfig",
    "UpgradeType",
    "PrestigeParams",
    "EngineConfig",
    "PlayerState",
    "PrestigeState",
    "Modifiers",
    "DerivedState",
    "serialize_player_state",
    "deserialize_player_state",
]
