"""
Balance file loader for Idle Finance.

Purpose
-------
Build the session ``EngineConfig`` from a YAML balance file: the asset
catalog, the upgrade catalog, prestige tuning and the optional demo
settings.

Responsibilities
----------------
- Read YAML with ``yaml.safe_load``
- Validate structure and convert entries into domain models
- Apply demo settings (income boost, starting cash) on request
- Fall back to the bundled balance when a custom file is unusable

Non-Responsibilities
--------------------
- Runtime settings from the environment (handled by Config)
- Economic rules (handled by idlefinance.modules)

File Layout
-----------
::

    economy:
      starting_cash: 200
      schema_version: 1
      prestige_min_net_worth: 1000000
      prestige_divisor: 1000000
      prestige_exponent: 0.5
      prestige_multiplier_per_point: 0.02
    demo:                      # optional
      income_multiplier: 100
      tick_multiplier: 100
      starting_cash: 200
    assets:
      - id: savings_account
        name: Savings Account
        base_cost: 10
        cost_growth: 1.07
        base_income_per_sec: 0.1
    upgrades:
      - id: compound_interest
        name: Compound Interest
        price: 500
        type: global_multiplier
        value: 1.5

Keys are snake_case; the camelCase spelling of any key (``baseCost``,
``prestigeMinNetWorth``) is accepted too.
"""

from __future__ import annotations

import math
from dataclasses import dataclass, field, replace
from pathlib import Path
from typing import Any, List, Mapping, Optional, Union

import yaml

from idlefinance.core.config.config import Config
from idlefinance.core.config.errors import ConfigValidationError
from idlefinance.core.logging.logger import get_logger
from idlefinance.domain.models.base import DomainValidationError
from idlefinance.domain.models.catalog import (
    AssetConfig,
    EngineConfig,
    PrestigeParams,
    UpgradeConfig,
)
from idlefinance.domain.models.player import CURRENT_SCHEMA_VERSION

logger = get_logger(__name__)

BUNDLED_BALANCE_PATH = Path(__file__).resolve().parents[2] / "data" / "balance.yaml"

PathLike = Union[str, Path]

_MISSING = object()


# ============================================================================
# MODELS
# ============================================================================


@dataclass(frozen=True)
class DemoSettings:
    """
    Demo-mode tuning.

    ``income_multiplier`` becomes the engine's event multiplier;
    ``tick_multiplier`` scales elapsed time in drivers that support it.
    """

    income_multiplier: float = 100.0
    tick_multiplier: float = 100.0
    starting_cash: float = 200.0


@dataclass(frozen=True)
class BalanceFile:
    """A parsed balance file: the engine configuration plus demo settings."""

    engine_config: EngineConfig
    demo: DemoSettings = field(default_factory=DemoSettings)
    source: Optional[str] = None

    def for_demo(self) -> EngineConfig:
        """Engine configuration with the demo income boost and starting cash applied."""
        return replace(
            self.engine_config,
            event_multiplier=self.demo.income_multiplier,
            starting_cash=self.demo.starting_cash,
        )


# ============================================================================
# PUBLIC API
# ============================================================================


def resolve_balance_path(path: Optional[PathLike] = None) -> Path:
    """Explicit path, else ``Config.BALANCE_CONFIG_PATH``, else the bundled file."""
    if path:
        return Path(path)
    if Config.BALANCE_CONFIG_PATH:
        return Path(Config.BALANCE_CONFIG_PATH)
    return BUNDLED_BALANCE_PATH


def load_balance_file(path: Optional[PathLike] = None) -> BalanceFile:
    """
    Read and parse a balance file.

    Raises
    ------
    ConfigValidationError
        If the file cannot be read, is not valid YAML, or is malformed
    """
    resolved = resolve_balance_path(path)
    try:
        with resolved.open("r", encoding="utf-8") as handle:
            data = yaml.safe_load(handle)
    except OSError as e:
        raise ConfigValidationError(
            f"Cannot read balance file: {e}", path=str(resolved)
        ) from e
    except yaml.YAMLError as e:
        raise ConfigValidationError(
            f"Invalid YAML in balance file: {e}", path=str(resolved)
        ) from e

    balance = parse_balance(data, source=str(resolved))
    logger.debug(
        "Loaded balance file",
        extra={
            "file": str(resolved),
            "assets": len(balance.engine_config.assets),
            "upgrades": len(balance.engine_config.upgrades),
        },
    )
    return balance


def load_engine_config(path: Optional[PathLike] = None, demo: bool = False) -> EngineConfig:
    """
    Load an ``EngineConfig`` from a balance file.

    Args:
        path: Balance file (defaults to BALANCE_CONFIG_PATH or the bundled file)
        demo: Apply the file's demo settings

    Raises:
        ConfigValidationError: The file is unreadable or malformed
    """
    balance = load_balance_file(path)
    return balance.for_demo() if demo else balance.engine_config


def load_engine_config_or_default(
    path: Optional[PathLike] = None, demo: bool = False
) -> EngineConfig:
    """
    Load an ``EngineConfig``, falling back to the bundled balance.

    A missing or malformed custom file is logged at WARNING and replaced
    by the bundled defaults rather than failing the session.
    """
    try:
        return load_engine_config(path, demo=demo)
    except ConfigValidationError as e:
        logger.warning(
            "Balance file unusable; using bundled defaults",
            extra={"file": e.path, "error": str(e)},
        )
        return load_engine_config(BUNDLED_BALANCE_PATH, demo=demo)


def parse_balance(data: Any, source: str = "<memory>") -> BalanceFile:
    """
    Convert a decoded balance mapping into a ``BalanceFile``.

    Raises
    ------
    ConfigValidationError
        If sections are missing or entries violate model invariants
    """
    if not isinstance(data, Mapping):
        raise ConfigValidationError("Balance file must contain a mapping", path=source)

    economy = _get(data, "economy", {})
    if not isinstance(economy, Mapping):
        raise ConfigValidationError("'economy' must be a mapping", path=source)

    raw_assets = _get(data, "assets")
    if not isinstance(raw_assets, list) or not raw_assets:
        raise ConfigValidationError("'assets' must be a non-empty list", path=source)

    raw_upgrades = _get(data, "upgrades", [])
    if raw_upgrades is None:
        raw_upgrades = []
    if not isinstance(raw_upgrades, list):
        raise ConfigValidationError("'upgrades' must be a list", path=source)

    try:
        assets = [_parse_asset(entry, index, source) for index, entry in enumerate(raw_assets)]
        upgrades = [
            _parse_upgrade(entry, index, source) for index, entry in enumerate(raw_upgrades)
        ]
        defaults = PrestigeParams()
        prestige = PrestigeParams(
            prestige_min_net_worth=_number(
                economy, "prestige_min_net_worth", defaults.prestige_min_net_worth, source
            ),
            prestige_divisor=_number(
                economy, "prestige_divisor", defaults.prestige_divisor, source
            ),
            prestige_exponent=_number(
                economy, "prestige_exponent", defaults.prestige_exponent, source
            ),
            prestige_multiplier_per_point=_number(
                economy,
                "prestige_multiplier_per_point",
                defaults.prestige_multiplier_per_point,
                source,
            ),
        )
        schema_version = _get(economy, "schema_version", CURRENT_SCHEMA_VERSION)
        if isinstance(schema_version, bool) or not isinstance(schema_version, int):
            raise ConfigValidationError("economy.schema_version must be an integer", path=source)

        engine_config = EngineConfig(
            assets=tuple(assets),
            upgrades=tuple(upgrades),
            prestige=prestige,
            event_multiplier=_number(economy, "event_multiplier", 1.0, source),
            schema_version=schema_version,
            starting_cash=_number(economy, "starting_cash", 0.0, source),
        )
    except DomainValidationError as e:
        raise ConfigValidationError(
            f"Invalid balance entry ({e.field or 'config'}): {e}", path=source
        ) from e

    return BalanceFile(
        engine_config=engine_config,
        demo=_parse_demo(_get(data, "demo", None), source),
        source=source,
    )


# ============================================================================
# HELPERS
# ============================================================================


def _camel(name: str) -> str:
    head, *rest = name.split("_")
    return head + "".join(part.capitalize() for part in rest)


def _get(mapping: Mapping[str, Any], key: str, default: Any = _MISSING) -> Any:
    """Look up ``key`` by its snake_case or camelCase spelling."""
    if key in mapping:
        return mapping[key]
    camel = _camel(key)
    if camel in mapping:
        return mapping[camel]
    return default


def _require(mapping: Mapping[str, Any], key: str, where: str, source: str) -> Any:
    value = _get(mapping, key)
    if value is _MISSING:
        raise ConfigValidationError(f"{where}: missing required key '{key}'", path=source)
    return value


def _number(mapping: Mapping[str, Any], key: str, default: float, source: str) -> float:
    value = _get(mapping, key, default)
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise ConfigValidationError(f"'{key}' must be a number, got {value!r}", path=source)
    if not math.isfinite(value):
        raise ConfigValidationError(f"'{key}' must be finite, got {value!r}", path=source)
    return value


def _parse_asset(entry: Any, index: int, source: str) -> AssetConfig:
    where = f"assets[{index}]"
    if not isinstance(entry, Mapping):
        raise ConfigValidationError(f"{where} must be a mapping", path=source)
    return AssetConfig(
        id=_require(entry, "id", where, source),
        name=_get(entry, "name", None) or _require(entry, "id", where, source),
        base_cost=_require(entry, "base_cost", where, source),
        cost_growth=_require(entry, "cost_growth", where, source),
        base_income_per_sec=_require(entry, "base_income_per_sec", where, source),
        unlock_at_cash=_get(entry, "unlock_at_cash", 0.0),
        category=_get(entry, "category", "cash"),
        description=_get(entry, "description", ""),
        icon=_get(entry, "icon", None),
    )


def _parse_upgrade(entry: Any, index: int, source: str) -> UpgradeConfig:
    where = f"upgrades[{index}]"
    if not isinstance(entry, Mapping):
        raise ConfigValidationError(f"{where} must be a mapping", path=source)
    return UpgradeConfig(
        id=_require(entry, "id", where, source),
        name=_get(entry, "name", None) or _require(entry, "id", where, source),
        price=_require(entry, "price", where, source),
        type=_require(entry, "type", where, source),
        value=_require(entry, "value", where, source),
        unlock_at_cash=_get(entry, "unlock_at_cash", 0.0),
        target_asset_id=_get(entry, "target_asset_id", None),
        stackable=bool(_get(entry, "stackable", False)),
        description=_get(entry, "description", ""),
    )


def _parse_demo(raw: Any, source: str) -> DemoSettings:
    if raw is None:
        return DemoSettings()
    if not isinstance(raw, Mapping):
        raise ConfigValidationError("'demo' must be a mapping", path=source)
    defaults = DemoSettings()
    settings = DemoSettings(
        income_multiplier=_number(raw, "income_multiplier", defaults.income_multiplier, source),
        tick_multiplier=_number(raw, "tick_multiplier", defaults.tick_multiplier, source),
        starting_cash=_number(raw, "starting_cash", defaults.starting_cash, source),
    )
    if settings.starting_cash < 0:
        raise ConfigValidationError("demo.starting_cash cannot be negative", path=source)
    return settings


__all__: List[str] = [
    "BUNDLED_BALANCE_PATH",
    "BalanceFile",
    "DemoSettings",
    "resolve_balance_path",
    "load_balance_file",
    "load_engine_config",
    "load_engine_config_or_default",
    "parse_balance",
]
