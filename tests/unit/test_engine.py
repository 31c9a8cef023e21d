"""
Unit Tests for the Economy Engine
=================================

Test Coverage
-------------
- tick: accrual, no-op cases, additivity over split intervals
- purchase_asset: pricing, atomic rejection, bulk purchases
- buy_upgrade: ownership flags, stacking, offline modifier max-merge

Testing Strategy
----------------
- AAA pattern (Arrange, Act, Assert)
- Values chosen to be exactly representable so equality checks are exact
"""

from dataclasses import replace

import pytest

from idlefinance.domain.models import Modifiers
from idlefinance.modules.economy import buy_upgrade, purchase_asset, tick
from idlefinance.modules.shared.formulas import MAX_CASH, calculate_bulk_cost


# ============================================================================
# TICK TESTS
# ============================================================================


@pytest.mark.unit
class TestTick:
    """Test passive income accrual."""

    def test_tick_accrues_income_and_advances_clock(self, fresh_state):
        """Test cash += income * dt and last_seen_at += dt * 1000."""
        # Act
        state = tick(fresh_state, income_per_sec=2.5, delta_seconds=4)

        # Assert
        assert state.cash == 10.0
        assert state.last_seen_at == 4_000

    @pytest.mark.parametrize("income,dt", [(0, 10), (-1, 10), (5, 0), (5, -3)])
    def test_tick_noop_returns_same_object(self, fresh_state, income, dt):
        """Test that nothing accrues for non-positive income or delta."""
        assert tick(fresh_state, income, dt) is fresh_state

    def test_tick_is_additive(self, fresh_state):
        """Test tick(tick(s, a), b) == tick(s, a + b) at a fixed rate."""
        # Arrange
        split = tick(tick(fresh_state, 2.5, 4), 2.5, 6)

        # Act
        whole = tick(fresh_state, 2.5, 10)

        # Assert
        assert split.cash == whole.cash == 25.0
        assert split.last_seen_at == whole.last_seen_at == 10_000

    def test_tick_does_not_clamp_long_gaps(self, fresh_state):
        """Test that a day-long delta is accrued in full."""
        state = tick(fresh_state, 1, 86_400)

        assert state.cash == 86_400

    def test_tick_saturates_instead_of_overflowing(self, fresh_state):
        """Test that an overflowing balance is clamped to the largest finite float."""
        # Arrange
        state = replace(fresh_state, cash=1e308)

        # Act
        result = tick(state, 1e308, 10)

        # Assert
        assert result.cash == MAX_CASH
        assert result.last_seen_at == 10_000


# ============================================================================
# ASSET PURCHASE TESTS
# ============================================================================


@pytest.mark.unit
class TestPurchaseAsset:
    """Test asset purchases."""

    def test_buy_then_tick_scenario(self, funded_state, lemonade_stand):
        """Test 100 cash, buy a 10-cost 1/s asset, tick 60s -> 150 cash."""
        # Act
        result = purchase_asset(funded_state, lemonade_stand)
        after_tick = tick(result.state, lemonade_stand.base_income_per_sec, 60)

        # Assert
        assert result.success
        assert result.total_cost == 10
        assert result.state.cash == 90
        assert result.state.assets_owned["lemonade_stand"] == 1
        assert after_tick.cash == 150

    def test_second_unit_costs_more(self, funded_state, lemonade_stand):
        """Test that the price escalates with owned count."""
        first = purchase_asset(funded_state, lemonade_stand)
        second = purchase_asset(first.state, lemonade_stand)

        assert second.total_cost == pytest.approx(11.5)
        assert second.state.cash == pytest.approx(100 - 10 - 11.5)

    def test_insufficient_cash_is_atomic(self, fresh_state, rental_flat):
        """Test that a rejected purchase returns the very same state."""
        # Act
        result = purchase_asset(fresh_state, rental_flat)

        # Assert
        assert not result.success
        assert result.state is fresh_state
        assert result.total_cost == 100

    @pytest.mark.parametrize("quantity", [0, -2])
    def test_non_positive_quantity_rejected(self, funded_state, lemonade_stand, quantity):
        """Test that quantity <= 0 fails with zero cost."""
        result = purchase_asset(funded_state, lemonade_stand, quantity)

        assert not result.success
        assert result.total_cost == 0
        assert result.state is funded_state

    def test_bulk_purchase_uses_geometric_sum(self, funded_state, lemonade_stand):
        """Test that buying several units charges the bulk price."""
        # Arrange
        expected = calculate_bulk_cost(10, 1.15, 0, 5)

        # Act
        result = purchase_asset(funded_state, lemonade_stand, 5)

        # Assert
        assert result.success
        assert result.total_cost == pytest.approx(expected)
        assert result.state.assets_owned["lemonade_stand"] == 5
        assert result.state.cash == pytest.approx(100 - expected)

    def test_bulk_purchase_all_or_nothing(self, funded_state, lemonade_stand):
        """Test that an unaffordable bulk buys nothing rather than fewer units."""
        result = purchase_asset(funded_state, lemonade_stand, 50)

        assert not result.success
        assert result.state.assets_owned["lemonade_stand"] == 0

    def test_exact_cash_purchase_leaves_zero(self, fresh_state, lemonade_stand):
        """Test that spending exactly all cash is allowed."""
        state = replace(fresh_state, cash=10.0)

        result = purchase_asset(state, lemonade_stand)

        assert result.success
        assert result.state.cash == 0


# ============================================================================
# UPGRADE PURCHASE TESTS
# ============================================================================


@pytest.mark.unit
class TestBuyUpgrade:
    """Test upgrade purchases."""

    @pytest.fixture
    def rich_state(self, fresh_state):
        return replace(fresh_state, cash=1_000.0)

    @pytest.fixture
    def upgrades(self, engine_config):
        return {u.id: u for u in engine_config.upgrades}

    def test_buy_marks_upgrade_owned(self, rich_state, upgrades):
        """Test that a non-stackable upgrade is flagged True."""
        # Act
        result = buy_upgrade(rich_state, upgrades["double_lemons"])

        # Assert
        assert result.success
        assert result.total_cost == 50
        assert result.state.cash == 950
        assert result.state.upgrades_owned["double_lemons"] is True
        assert result.applied_modifier is None

    def test_rebuy_non_stackable_rejected(self, rich_state, upgrades):
        """Test that an owned non-stackable upgrade cannot be bought again."""
        owned = buy_upgrade(rich_state, upgrades["double_lemons"]).state

        result = buy_upgrade(owned, upgrades["double_lemons"])

        assert not result.success
        assert result.total_cost == 0
        assert result.state is owned

    def test_stackable_upgrade_counts_stacks(self, rich_state, upgrades):
        """Test that each purchase of a stackable upgrade adds a stack."""
        # Act
        once = buy_upgrade(rich_state, upgrades["franchise"]).state
        twice = buy_upgrade(once, upgrades["franchise"]).state

        # Assert
        assert twice.upgrades_owned["franchise"] == 2
        assert twice.upgrade_stacks("franchise") == 2
        assert twice.cash == 400

    def test_insufficient_cash_rejected(self, fresh_state, upgrades):
        """Test that an unaffordable upgrade reports its price."""
        result = buy_upgrade(fresh_state, upgrades["marketing_push"])

        assert not result.success
        assert result.total_cost == 200
        assert result.state is fresh_state

    def test_offline_cap_upgrade_raises_cap(self, rich_state, upgrades):
        """Test that offline_cap values are hours converted to seconds."""
        result = buy_upgrade(rich_state, upgrades["night_owl"])

        assert result.applied_modifier == "offline_cap_sec"
        assert result.state.modifiers.offline_cap_sec == 12 * 3600

    def test_offline_cap_never_decreases(self, rich_state, upgrades):
        """Test max-merge: a weaker cap upgrade keeps the larger cap but is still charged."""
        # Arrange
        state = replace(rich_state, modifiers=Modifiers(offline_cap_sec=86_400, offline_multiplier=1))

        # Act
        result = buy_upgrade(state, upgrades["night_owl"])

        # Assert
        assert result.success
        assert result.state.modifiers.offline_cap_sec == 86_400
        assert result.state.cash == 900

    def test_offline_multiplier_upgrade(self, rich_state, upgrades):
        """Test that offline_multiplier raises the multiplier to the upgrade value."""
        result = buy_upgrade(rich_state, upgrades["remote_office"])

        assert result.applied_modifier == "offline_multiplier"
        assert result.state.modifiers.offline_multiplier == 2
        assert result.state.modifiers.offline_cap_sec == rich_state.modifiers.offline_cap_sec

    def test_offline_multiplier_never_decreases(self, rich_state, upgrades):
        """Test max-merge on the offline multiplier."""
        state = replace(rich_state, modifiers=Modifiers(offline_cap_sec=3_600, offline_multiplier=3))

        result = buy_upgrade(state, upgrades["remote_office"])

        assert result.state.modifiers.offline_multiplier == 3

    def test_qol_upgrade_only_marks_ownership(self, rich_state, upgrades):
        """Test that a QoL upgrade changes nothing but ownership and cash."""
        result = buy_upgrade(rich_state, upgrades["dark_mode"])

        assert result.state.upgrades_owned["dark_mode"] is True
        assert result.state.modifiers == rich_state.modifiers
        assert result.state.cash == 995
