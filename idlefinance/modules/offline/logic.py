"""
Offline-earnings reconciliation.

When a player returns after a gap, earnings are projected at the single
income rate observed at save time, clamped to the offline cap and scaled
by the offline multiplier. No compounding and no simulated purchases.
"""

from __future__ import annotations

from dataclasses import dataclass

from idlefinance.domain.models.player import PlayerState

MS_PER_SECOND = 1000


@dataclass(frozen=True)
class OfflineResult:
    """Credited offline seconds and the earnings they produced."""

    offline_seconds: float
    offline_earnings: float


def calculate_offline_earnings(
    state: PlayerState, now: float, income_per_sec_at_save: float
) -> OfflineResult:
    """
    Project earnings accrued while the player was away.

    Args:
        state: Snapshot as it was saved
        now: Current epoch ms
        income_per_sec_at_save: Income rate derived from the saved snapshot

    Returns:
        OfflineResult with elapsed seconds clamped to
        ``[0, modifiers.offline_cap_sec]``. Both fields are 0 when the
        income rate is not positive.

    Example:
        >>> # 2h away at 100/s with a 1h cap and no multiplier
        >>> # -> OfflineResult(offline_seconds=3600, offline_earnings=360000)
    """
    if income_per_sec_at_save <= 0:
        return OfflineResult(offline_seconds=0.0, offline_earnings=0.0)

    elapsed = (now - state.last_seen_at) / MS_PER_SECOND
    elapsed = max(0.0, min(elapsed, state.modifiers.offline_cap_sec))

    earnings = income_per_sec_at_save * elapsed * state.modifiers.offline_multiplier
    return OfflineResult(offline_seconds=elapsed, offline_earnings=earnings)
