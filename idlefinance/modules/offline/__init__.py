"""Offline-earnings reconciliation."""

from idlefinance.modules.offline.logic import OfflineResult, calculate_offline_earnings

__all__ = ["OfflineResult", "calculate_offline_earnings"]
