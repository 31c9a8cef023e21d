"""Economy engine: passive-income ticks and purchases."""

from idlefinance.modules.economy.engine import (
    PurchaseResult,
    UpgradePurchaseResult,
    buy_upgrade,
    purchase_asset,
    tick,
)

__all__ = [
    "PurchaseResult",
    "UpgradePurchaseResult",
    "tick",
    "purchase_asset",
    "buy_upgrade",
]
