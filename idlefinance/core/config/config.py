"""
Static runtime configuration for Idle Finance.

Purpose
-------
Provides process-level settings loaded from environment variables (with
``.env`` support) and sensible defaults. Game balance lives in the YAML
balance file instead (see ``idlefinance.core.config.balance``).

Responsibilities
----------------
- Load settings from environment variables with .env support
- Parse values safely, falling back to defaults on invalid input
- Track which values came from the environment versus defaults

Non-Responsibilities
--------------------
- Economy balance (handled by the balance loader)
- Logging setup (handled by idlefinance.core.logging)

Architecture Notes
------------------
- Class-level settings accessed via ``Config.X`` (no instantiation)
- Auto-loads on module import via ``Config.load()``
- Metrics track which values came from environment vs defaults

Environment Variables
---------------------
- ENVIRONMENT: Environment type (default: development)
- DEBUG: Debug mode flag, forces DEBUG logging (default: False)
- LOG_LEVEL: Logging level (default: INFO)
- LOG_JSON: Force JSON console logs (default: unset, JSON in production)
- LOG_COLORS: Colored console logs on TTYs (default: True)
- LOG_TO_FILE: Also write rotating JSON logs to LOGS_DIR (default: False)
- LOGS_DIR: Directory for log files (default: ./logs)
- LOG_BACKUP_COUNT: Rotated log files kept (default: 1)
- BALANCE_CONFIG_PATH: Balance YAML to load instead of the bundled one
- SIM_STEP_SECONDS: Default step for the simulate command (default: 1.0)
"""

import logging
import os
from datetime import datetime, timezone
from enum import Enum
from pathlib import Path
from typing import Any, Dict, Optional

from dotenv import load_dotenv

# Load environment variables from .env file
load_dotenv()

# ============================================================================
# Enums and Constants
# ============================================================================


class Environment(Enum):
    """Deployment environment types."""

    DEVELOPMENT = "development"
    TESTING = "testing"
    STAGING = "staging"
    PRODUCTION = "production"

    @classmethod
    def from_string(cls, value: str) -> "Environment":
        """
        Parse environment string safely with fallback.

        Example
        -------
        >>> Environment.from_string("PRODUCTION") == Environment.PRODUCTION
        True
        >>> Environment.from_string("invalid") == Environment.DEVELOPMENT
        True
        """
        try:
            return cls(value.lower())
        except ValueError:
            # Structured logger not yet initialized during bootstrap
            logging.warning(f"Unknown environment '{value}', defaulting to development")
            return cls.DEVELOPMENT


# ============================================================================
# Configuration Metrics Tracker
# ============================================================================


class _ConfigLoadMetrics:
    """
    Internal metrics tracker for configuration loading.

    Tracks which configuration values came from environment variables
    versus defaults, and any validation errors encountered.
    """

    def __init__(self):
        self.env_vars_loaded: Dict[str, bool] = {}
        self.validation_errors: Dict[str, str] = {}
        self.defaults_used: Dict[str, Any] = {}
        self.last_reload: Optional[str] = None

    def record_env_load(self, key: str, from_env: bool, value: Any, default: Any):
        """Record whether a config value came from environment."""
        self.env_vars_loaded[key] = from_env
        if not from_env:
            self.defaults_used[key] = default
        else:
            self.defaults_used.pop(key, None)

    def record_validation_error(self, key: str, error: str):
        self.validation_errors[key] = error

    def get_summary(self) -> Dict[str, Any]:
        """Get configuration loading summary."""
        return {
            "total_configs": len(self.env_vars_loaded),
            "from_environment": sum(1 for v in self.env_vars_loaded.values() if v),
            "from_defaults": sum(1 for v in self.env_vars_loaded.values() if not v),
            "validation_errors": len(self.validation_errors),
            "defaults_used": list(self.defaults_used.keys()),
            "last_reload": self.last_reload,
        }


# ============================================================================
# Main Configuration Class
# ============================================================================


class Config:
    """
    Centralized static configuration for Idle Finance.

    Usage
    -----
    >>> if Config.is_production():
    ...     logger.info("Running in production mode")
    >>> summary = Config.get_config_summary()
    """

    # =========================================================================
    # Internal State
    # =========================================================================

    _metrics: Optional[_ConfigLoadMetrics] = None
    _enable_metrics: bool = True

    # =========================================================================
    # Environment Configuration
    # =========================================================================

    ENVIRONMENT: str = "development"
    DEBUG: bool = False
    LOG_LEVEL: str = "INFO"

    # =========================================================================
    # Logging Configuration
    # =========================================================================

    LOG_JSON: Optional[bool] = None
    LOG_COLORS: bool = True
    LOG_TO_FILE: bool = False
    LOGS_DIR: Path = Path.cwd() / "logs"
    LOG_BACKUP_COUNT: int = 1

    # =========================================================================
    # Balance Configuration
    # =========================================================================

    # None means the bundled idlefinance/data/balance.yaml
    BALANCE_CONFIG_PATH: Optional[str] = None

    # =========================================================================
    # Simulation Defaults
    # =========================================================================

    SIM_STEP_SECONDS: float = 1.0

    # =========================================================================
    # Helper Methods
    # =========================================================================

    @classmethod
    def _init_metrics(cls):
        """Initialize metrics tracking if enabled."""
        if cls._enable_metrics and cls._metrics is None:
            cls._metrics = _ConfigLoadMetrics()

    @classmethod
    def _record_invalid(cls, key: str, error: str) -> None:
        logging.warning(error)
        if cls._metrics:
            cls._metrics.record_validation_error(key, error)

    @classmethod
    def _safe_int(
        cls,
        key: str,
        default: int,
        min_val: Optional[int] = None,
        max_val: Optional[int] = None,
    ) -> int:
        """
        Safely parse integer from environment with validation.

        Parameters
        ----------
        key:
            Environment variable name.
        default:
            Default value if not set or invalid.
        min_val:
            Minimum allowed value (inclusive).
        max_val:
            Maximum allowed value (inclusive).
        """
        cls._init_metrics()

        raw_value = os.getenv(key)

        if raw_value is None:
            if cls._metrics:
                cls._metrics.record_env_load(key, False, default, default)
            return default

        try:
            value = int(raw_value)
        except ValueError:
            cls._record_invalid(
                key, f"{key}='{raw_value}' is not a valid integer, using default {default}"
            )
            return default

        if min_val is not None and value < min_val:
            cls._record_invalid(
                key, f"{key}={value} is below minimum {min_val}, using default {default}"
            )
            return default

        if max_val is not None and value > max_val:
            cls._record_invalid(
                key, f"{key}={value} exceeds maximum {max_val}, using default {default}"
            )
            return default

        if cls._metrics:
            cls._metrics.record_env_load(key, True, value, default)
        return value

    @classmethod
    def _safe_float(
        cls,
        key: str,
        default: float,
        min_val: Optional[float] = None,
    ) -> float:
        """Safely parse a finite float from environment."""
        cls._init_metrics()

        raw_value = os.getenv(key)

        if raw_value is None:
            if cls._metrics:
                cls._metrics.record_env_load(key, False, default, default)
            return default

        try:
            value = float(raw_value)
        except ValueError:
            cls._record_invalid(
                key, f"{key}='{raw_value}' is not a valid number, using default {default}"
            )
            return default

        if value != value or value in (float("inf"), float("-inf")):
            cls._record_invalid(key, f"{key}={raw_value} is not finite, using default {default}")
            return default

        if min_val is not None and value < min_val:
            cls._record_invalid(
                key, f"{key}={value} is below minimum {min_val}, using default {default}"
            )
            return default

        if cls._metrics:
            cls._metrics.record_env_load(key, True, value, default)
        return value

    @classmethod
    def _safe_bool(cls, key: str, default: Optional[bool]) -> Optional[bool]:
        """
        Safely parse boolean from environment.

        Recognizes: true/false, yes/no, 1/0, on/off (case-insensitive).

        Example
        -------
        >>> Config._safe_bool("DEBUG", False)
        False
        """
        cls._init_metrics()

        raw_value = os.getenv(key)

        if raw_value is None:
            if cls._metrics:
                cls._metrics.record_env_load(key, False, default, default)
            return default

        normalized = raw_value.lower().strip()
        true_values = {"true", "yes", "1", "on"}
        false_values = {"false", "no", "0", "off"}

        if normalized in true_values:
            value = True
        elif normalized in false_values:
            value = False
        else:
            cls._record_invalid(
                key, f"{key}='{raw_value}' is not a valid boolean, using default {default}"
            )
            return default

        if cls._metrics:
            cls._metrics.record_env_load(key, True, value, default)
        return value

    @classmethod
    def _safe_str(cls, key: str, default: Optional[str]) -> Optional[str]:
        """Get a string from environment (empty values count as unset)."""
        cls._init_metrics()

        raw_value = os.getenv(key)
        from_env = bool(raw_value)
        value = raw_value if from_env else default

        if cls._metrics:
            cls._metrics.record_env_load(key, from_env, value, default)
        return value

    # =========================================================================
    # Configuration Loading
    # =========================================================================

    @classmethod
    def load(cls) -> None:
        """
        Load all configuration from environment variables.

        Called automatically on module import; call again to pick up
        environment changes (tests do this after monkeypatching).
        """
        cls._init_metrics()

        cls.ENVIRONMENT = Environment.from_string(
            cls._safe_str("ENVIRONMENT", "development")
        ).value
        cls.DEBUG = cls._safe_bool("DEBUG", False)

        log_level = cls._safe_str("LOG_LEVEL", "INFO").upper()
        if log_level not in {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}:
            cls._record_invalid("LOG_LEVEL", f"Invalid LOG_LEVEL '{log_level}', using INFO")
            log_level = "INFO"
        cls.LOG_LEVEL = log_level

        cls.LOG_JSON = cls._safe_bool("LOG_JSON", None)
        cls.LOG_COLORS = cls._safe_bool("LOG_COLORS", True)
        cls.LOG_TO_FILE = cls._safe_bool("LOG_TO_FILE", False)
        cls.LOGS_DIR = Path(cls._safe_str("LOGS_DIR", str(Path.cwd() / "logs")))
        cls.LOG_BACKUP_COUNT = cls._safe_int("LOG_BACKUP_COUNT", 1, min_val=0, max_val=30)

        cls.BALANCE_CONFIG_PATH = cls._safe_str("BALANCE_CONFIG_PATH", None)
        cls.SIM_STEP_SECONDS = cls._safe_float("SIM_STEP_SECONDS", 1.0, min_val=0.001)

        if cls._metrics:
            cls._metrics.last_reload = datetime.now(timezone.utc).isoformat()

    # =========================================================================
    # Environment Checks
    # =========================================================================

    @classmethod
    def is_production(cls) -> bool:
        """Check if running in production environment."""
        return cls.ENVIRONMENT.lower() == "production"

    @classmethod
    def is_development(cls) -> bool:
        return cls.ENVIRONMENT.lower() == "development"

    # =========================================================================
    # Metrics & Summary
    # =========================================================================

    @classmethod
    def get_metrics(cls) -> Optional[_ConfigLoadMetrics]:
        """Get configuration loading metrics."""
        return cls._metrics

    @classmethod
    def get_config_summary(cls) -> Dict[str, Any]:
        """
        Get configuration summary for debugging.

        Example
        -------
        >>> Config.get_config_summary()["environment"]
        'development'
        """
        return {
            "environment": cls.ENVIRONMENT,
            "debug": cls.DEBUG,
            "log_level": cls.LOG_LEVEL,
            "log_json": cls.LOG_JSON,
            "log_to_file": cls.LOG_TO_FILE,
            "logs_dir": str(cls.LOGS_DIR),
            "balance_config_path": cls.BALANCE_CONFIG_PATH,
            "sim_step_seconds": cls.SIM_STEP_SECONDS,
        }


# Auto-load on import
Config.load()
