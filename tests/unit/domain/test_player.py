"""
Unit Tests for Player State and Catalog Domain Models
=====================================================

Purpose
-------
Test invariant enforcement and conversions in the domain models without
touching the economy modules.

Test Coverage
-------------
- PlayerState construction and invariant checks
- Upgrade ownership helpers (bool flags and stack counts)
- to_dict / from_dict save shape
- AssetConfig / UpgradeConfig / EngineConfig validation and lookups

Testing Strategy
----------------
- AAA pattern (Arrange, Act, Assert)
- Test one behavior per test
"""

from dataclasses import FrozenInstanceError, replace

import pytest

from idlefinance.domain.exceptions import UnknownAssetError, UnknownUpgradeError
from idlefinance.domain.models import (
    CURRENT_SCHEMA_VERSION,
    DEFAULT_OFFLINE_CAP_SEC,
    AssetConfig,
    EngineConfig,
    Modifiers,
    PlayerState,
    PrestigeState,
    UpgradeConfig,
    UpgradeType,
    create_initial_player_state,
)
from idlefinance.domain.models.base import DomainValidationError


# ============================================================================
# PLAYER STATE TESTS
# ============================================================================


@pytest.mark.unit
@pytest.mark.domain
class TestPlayerState:
    """Test PlayerState value object."""

    def test_create_initial_state_defaults(self):
        """Test that a fresh state starts empty with default modifiers."""
        # Arrange & Act
        state = create_initial_player_state(
            now=1_000, asset_ids=["a", "b"], upgrade_ids=["u"]
        )

        # Assert
        assert state.schema_version == CURRENT_SCHEMA_VERSION
        assert state.created_at == 1_000
        assert state.last_seen_at == 1_000
        assert state.cash == 0.0
        assert state.assets_owned == {"a": 0, "b": 0}
        assert state.upgrades_owned == {"u": False}
        assert state.prestige == PrestigeState(points_total=0, last_reset_at=None)
        assert state.modifiers.offline_cap_sec == DEFAULT_OFFLINE_CAP_SEC == 28_800
        assert state.modifiers.offline_multiplier == 1
        assert state.marketing == {"utm": {}}
        assert state.entitlements == {}

    def test_negative_cash_rejected(self, fresh_state):
        """Test that cash can never be negative."""
        # Arrange & Act & Assert
        with pytest.raises(DomainValidationError) as exc_info:
            replace(fresh_state, cash=-0.01)

        assert exc_info.value.field == "cash"

    def test_fractional_asset_count_rejected(self, fresh_state):
        """Test that owned counts must be integers."""
        # Arrange & Act & Assert
        with pytest.raises(DomainValidationError) as exc_info:
            replace(fresh_state, assets_owned={"lemonade_stand": 1.5})

        assert "must be an integer" in str(exc_info.value)

    def test_negative_asset_count_rejected(self, fresh_state):
        """Test that owned counts cannot be negative."""
        with pytest.raises(DomainValidationError):
            replace(fresh_state, assets_owned={"lemonade_stand": -1})

    def test_offline_multiplier_below_one_rejected(self):
        """Test that the offline multiplier never penalizes."""
        with pytest.raises(DomainValidationError) as exc_info:
            Modifiers(offline_cap_sec=3600, offline_multiplier=0.5)

        assert exc_info.value.field == "offline_multiplier"

    def test_nan_cash_rejected(self, fresh_state):
        """Test that non-finite numbers are rejected."""
        with pytest.raises(DomainValidationError):
            replace(fresh_state, cash=float("nan"))

    def test_state_is_immutable(self, fresh_state):
        """Test that PlayerState is a frozen dataclass."""
        with pytest.raises(FrozenInstanceError):
            fresh_state.cash = 10  # type: ignore[misc]

    def test_upgrade_stacks_for_flags_and_counts(self, fresh_state):
        """Test that True counts as one stack and ints count as themselves."""
        # Arrange
        state = replace(
            fresh_state,
            upgrades_owned={"flag": True, "unowned": False, "stacked": 3},
        )

        # Act & Assert
        assert state.upgrade_stacks("flag") == 1
        assert state.upgrade_stacks("unowned") == 0
        assert state.upgrade_stacks("stacked") == 3
        assert state.upgrade_stacks("missing") == 0
        assert state.owns_upgrade("flag")
        assert not state.owns_upgrade("unowned")

    def test_owned_count_defaults_to_zero(self, fresh_state):
        """Test that unknown assets read as zero owned."""
        assert fresh_state.owned_count("not_configured") == 0


# ============================================================================
# SAVE SHAPE TESTS
# ============================================================================


@pytest.mark.unit
@pytest.mark.domain
class TestPlayerStateSaveShape:
    """Test conversion to and from the camelCase save shape."""

    def test_to_dict_uses_camel_case_keys(self, fresh_state):
        """Test the persisted key names."""
        # Act
        payload = fresh_state.to_dict()

        # Assert
        assert set(payload) == {
            "schemaVersion",
            "createdAt",
            "lastSeenAt",
            "cash",
            "assetsOwned",
            "upgradesOwned",
            "prestige",
            "modifiers",
            "marketing",
            "entitlements",
        }
        assert payload["prestige"] == {"pointsTotal": 0, "lastResetAt": None}
        assert payload["modifiers"] == {
            "offlineCapSec": DEFAULT_OFFLINE_CAP_SEC,
            "offlineMultiplier": 1.0,
        }

    def test_from_dict_restores_equal_state(self, fresh_state):
        """Test that from_dict(to_dict()) reproduces the snapshot."""
        # Arrange
        state = replace(
            fresh_state,
            cash=42.5,
            assets_owned={"lemonade_stand": 3, "rental_flat": 1},
            upgrades_owned={"double_lemons": True, "franchise": 2},
            marketing={"utm": {"source": "newsletter"}},
            entitlements={"vip": {"active": True}},
        )

        # Act
        restored = PlayerState.from_dict(state.to_dict())

        # Assert
        assert restored == state

    def test_to_dict_does_not_share_side_channels(self, fresh_state):
        """Test that mutating the payload leaves the state untouched."""
        # Arrange
        state = replace(fresh_state, marketing={"utm": {"source": "ads"}})

        # Act
        payload = state.to_dict()
        payload["marketing"]["utm"]["source"] = "changed"

        # Assert
        assert state.marketing == {"utm": {"source": "ads"}}

    def test_from_dict_missing_field(self, fresh_state):
        """Test that a missing required field is reported by name."""
        # Arrange
        payload = fresh_state.to_dict()
        del payload["cash"]

        # Act & Assert
        with pytest.raises(DomainValidationError) as exc_info:
            PlayerState.from_dict(payload)

        assert exc_info.value.field == "cash"

    def test_from_dict_malformed_nested_section(self, fresh_state):
        """Test that a non-mapping prestige section is rejected."""
        payload = fresh_state.to_dict()
        payload["prestige"] = 7

        with pytest.raises(DomainValidationError):
            PlayerState.from_dict(payload)

    def test_from_dict_deeply_nested_side_channel(self, fresh_state):
        """Test that a side channel too deep to copy is rejected, not crashed on."""
        # Arrange
        nested = {}
        for _ in range(5_000):
            nested = {"inner": nested}
        payload = fresh_state.to_dict()
        payload["marketing"] = nested

        # Act & Assert
        with pytest.raises(DomainValidationError, match="Malformed player state"):
            PlayerState.from_dict(payload)


# ============================================================================
# CATALOG TESTS
# ============================================================================


@pytest.mark.unit
@pytest.mark.domain
class TestCatalogModels:
    """Test AssetConfig, UpgradeConfig and EngineConfig."""

    def test_asset_requires_positive_growth(self):
        """Test that cost_growth must be positive."""
        with pytest.raises(DomainValidationError) as exc_info:
            AssetConfig(id="a", name="A", base_cost=1, cost_growth=0, base_income_per_sec=1)

        assert "cost_growth must be positive" in str(exc_info.value)

    def test_asset_requires_id(self):
        """Test that an asset id cannot be blank."""
        with pytest.raises(DomainValidationError):
            AssetConfig(id=" ", name="A", base_cost=1, cost_growth=1, base_income_per_sec=1)

    def test_upgrade_type_coerced_from_string(self):
        """Test that a string type is converted to the enum."""
        # Act
        upgrade = UpgradeConfig(id="u", name="U", price=1, type="offline_cap", value=4)

        # Assert
        assert upgrade.type is UpgradeType.OFFLINE_CAP

    def test_upgrade_unknown_type_rejected(self):
        """Test that the upgrade type set is closed."""
        with pytest.raises(DomainValidationError) as exc_info:
            UpgradeConfig(id="u", name="U", price=1, type="time_travel", value=1)

        assert exc_info.value.field == "type"

    def test_asset_multiplier_requires_target(self):
        """Test that asset_multiplier upgrades name their target."""
        with pytest.raises(DomainValidationError) as exc_info:
            UpgradeConfig(
                id="u", name="U", price=1, type=UpgradeType.ASSET_MULTIPLIER, value=2
            )

        assert exc_info.value.field == "target_asset_id"

    def test_engine_config_rejects_unknown_multiplier_target(self, lemonade_stand):
        """Test that an asset_multiplier upgrade must target a configured asset."""
        # Arrange
        upgrade = UpgradeConfig(
            id="yacht_polish",
            name="Yacht Polish",
            price=1,
            type=UpgradeType.ASSET_MULTIPLIER,
            value=2,
            target_asset_id="yacht",
        )

        # Act & Assert
        with pytest.raises(DomainValidationError) as exc_info:
            EngineConfig(assets=[lemonade_stand], upgrades=[upgrade])

        assert exc_info.value.field == "target_asset_id"
        assert "yacht" in str(exc_info.value)

    def test_engine_config_rejects_duplicate_ids(self, lemonade_stand):
        """Test that asset ids are unique."""
        with pytest.raises(DomainValidationError) as exc_info:
            EngineConfig(assets=[lemonade_stand, lemonade_stand], upgrades=[])

        assert "Duplicate id" in str(exc_info.value)

    def test_engine_config_lists_become_tuples(self, lemonade_stand):
        """Test that the configuration is immutable even if built from lists."""
        config = EngineConfig(assets=[lemonade_stand], upgrades=[])

        assert isinstance(config.assets, tuple)
        assert config.asset_ids == ("lemonade_stand",)

    def test_lookup_unknown_ids(self, engine_config):
        """Test that unknown ids raise the typed not-found errors."""
        with pytest.raises(UnknownAssetError) as asset_exc:
            engine_config.get_asset("yacht")
        with pytest.raises(UnknownUpgradeError) as upgrade_exc:
            engine_config.get_upgrade("time_machine")

        assert asset_exc.value.error_code == "ASSET_NOT_FOUND"
        assert upgrade_exc.value.identifier == "time_machine"

    def test_lookup_known_ids(self, engine_config, lemonade_stand):
        """Test that lookups return the configured entries."""
        assert engine_config.get_asset("lemonade_stand") == lemonade_stand
        assert engine_config.get_upgrade("dark_mode").type is UpgradeType.QOL
