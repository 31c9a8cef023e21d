"""
Pytest Configuration and Fixtures for Idle Finance Tests
========================================================

Purpose
-------
Centralized test fixtures for the Idle Finance test suite: a small,
hand-checkable asset/upgrade catalog, the engine configuration built from
it, and fresh player states.

Responsibilities
----------------
- Domain model factories for test data
- Isolation of global state (log context, Config class attributes)

Non-Responsibilities
--------------------
- Test implementation (delegated to test files)
- Business logic (delegated to idlefinance.modules)

Architecture Notes
------------------
- All tests are unit tests: the core is pure and needs no infrastructure
- Balance-file tests write YAML into ``tmp_path``
"""

from __future__ import annotations

from dataclasses import replace
from typing import Tuple

import pytest

from idlefinance.core.config import Config
from idlefinance.core.logging import clear_log_context
from idlefinance.domain.models import (
    AssetConfig,
    EngineConfig,
    PlayerState,
    PrestigeParams,
    UpgradeConfig,
    UpgradeType,
)
from idlefinance.modules.game.service import GameService

# ============================================================================
# GLOBAL STATE
# ============================================================================


@pytest.fixture(autouse=True)
def isolate_global_state():
    """Reset the log context and restore Config attributes after each test."""
    saved = {
        key: getattr(Config, key)
        for key in dir(Config)
        if key.isupper() and not callable(getattr(Config, key))
    }
    clear_log_context()
    yield
    clear_log_context()
    for key, value in saved.items():
        setattr(Config, key, value)


# ============================================================================
# CATALOG FIXTURES
# ============================================================================


@pytest.fixture
def lemonade_stand() -> AssetConfig:
    """Cheap starter asset: costs 10, earns 1/sec."""
    return AssetConfig(
        id="lemonade_stand",
        name="Lemonade Stand",
        base_cost=10,
        cost_growth=1.15,
        base_income_per_sec=1,
        category="business",
    )


@pytest.fixture
def rental_flat() -> AssetConfig:
    """Mid-tier asset: costs 100, earns 5/sec, unlocks at 50 cash."""
    return AssetConfig(
        id="rental_flat",
        name="Rental Flat",
        base_cost=100,
        cost_growth=1.2,
        base_income_per_sec=5,
        unlock_at_cash=50,
        category="real_estate",
    )


@pytest.fixture
def sample_assets(lemonade_stand, rental_flat) -> Tuple[AssetConfig, ...]:
    return (lemonade_stand, rental_flat)


@pytest.fixture
def sample_upgrades() -> Tuple[UpgradeConfig, ...]:
    """One upgrade of every kind, plus a stackable global multiplier."""
    return (
        UpgradeConfig(
            id="double_lemons",
            name="Double Lemons",
            price=50,
            type=UpgradeType.ASSET_MULTIPLIER,
            value=2,
            target_asset_id="lemonade_stand",
        ),
        UpgradeConfig(
            id="marketing_push",
            name="Marketing Push",
            price=200,
            type=UpgradeType.GLOBAL_MULTIPLIER,
            value=1.5,
            unlock_at_cash=100,
        ),
        UpgradeConfig(
            id="franchise",
            name="Franchise",
            price=300,
            type=UpgradeType.GLOBAL_MULTIPLIER,
            value=1.1,
            stackable=True,
        ),
        UpgradeConfig(
            id="night_owl",
            name="Night Owl",
            price=100,
            type=UpgradeType.OFFLINE_CAP,
            value=12,
        ),
        UpgradeConfig(
            id="remote_office",
            name="Remote Office",
            price=150,
            type=UpgradeType.OFFLINE_MULTIPLIER,
            value=2,
        ),
        UpgradeConfig(
            id="dark_mode",
            name="Dark Mode",
            price=5,
            type=UpgradeType.QOL,
            value=0,
        ),
    )


@pytest.fixture
def prestige_params() -> PrestigeParams:
    return PrestigeParams(
        prestige_min_net_worth=1000,
        prestige_divisor=1000,
        prestige_exponent=0.5,
        prestige_multiplier_per_point=0.1,
    )


@pytest.fixture
def engine_config(sample_assets, sample_upgrades, prestige_params) -> EngineConfig:
    return EngineConfig(
        assets=sample_assets,
        upgrades=sample_upgrades,
        prestige=prestige_params,
    )


# ============================================================================
# STATE FIXTURES
# ============================================================================


@pytest.fixture
def fresh_state(engine_config) -> PlayerState:
    """Default state at epoch 0 with no cash."""
    return GameService.create_default_state(engine_config, now=0)


@pytest.fixture
def funded_state(fresh_state) -> PlayerState:
    """Default state holding 100 cash."""
    return replace(fresh_state, cash=100.0)
