"""
Idle Finance Logging Subsystem

Purpose
-------
Provide the structured logging stack for Idle Finance:

- Structured JSON logs for aggregation and analysis.
- LogContext-based propagation of session/operation context via ContextVars.
- Correlation IDs for end-to-end traceability of a simulation or request.
- Component-aware metadata derived from logger names and explicit context.
- Hybrid output:
  - Console handler (JSON in production, colored human text in dev).
  - Optional rotating JSON file handler for local backup.

Responsibilities
----------------
- Initialize and configure the global logging stack (``setup_logging``).
- Enrich all log records with contextual fields:
  - session_id
  - correlation_id
  - component, operation
- Provide simple helper APIs:
  - get_logger()
  - LogContext (context manager)
  - set_log_context() / clear_log_context()

Design Decisions
----------------
- Library modules only call ``get_logger(__name__)``; handlers are
  installed by the application entry point calling ``setup_logging()``.
- JSONFormatter is the canonical representation.
- Extra fields passed via ``logger.info("msg", extra={...})`` are merged into JSON.

Dependencies
------------
- idlefinance.core.config.config.Config
"""

from __future__ import annotations

import json
import logging
import sys
import uuid
from contextvars import ContextVar, Token
from dataclasses import dataclass
from datetime import datetime, timezone
from logging import Logger
from logging.handlers import TimedRotatingFileHandler
from pathlib import Path
from typing import Any, Dict, List, Optional

from idlefinance.core.config.config import Config


# ============================================================================
# Session / Operation Context (ContextVars)
# ============================================================================

_log_context: ContextVar[Dict[str, Any]] = ContextVar(
    "log_context",
    default={},
)


# ============================================================================
# Config / Environment
# ============================================================================


@dataclass(frozen=True, slots=True)
class LoggerConfig:
    """Configuration for the logging subsystem (values read live from ``Config``)."""

    CONSOLE_FORMAT: str = "%(asctime)s | %(levelname)-8s | %(name)-30s | %(message)s"
    DATE_FORMAT: str = "%Y-%m-%d %H:%M:%S"

    DAILY_BASENAME: str = "idlefinance_daily.json.log"

    @property
    def environment(self) -> str:
        env = getattr(Config, "ENVIRONMENT", "development")
        return str(env).lower()

    @property
    def is_production(self) -> bool:
        return self.environment == "production"

    @property
    def logs_dir(self) -> Path:
        return Path(Config.LOGS_DIR).resolve()

    @property
    def backup_count(self) -> int:
        return int(getattr(Config, "LOG_BACKUP_COUNT", 1))

    @property
    def log_level(self) -> int:
        # DEBUG mode overrides LOG_LEVEL
        if getattr(Config, "DEBUG", False):
            return logging.DEBUG
        level_name = getattr(Config, "LOG_LEVEL", "INFO")
        if not isinstance(level_name, str):
            level_name = "INFO"
        return getattr(logging, level_name.upper(), logging.INFO)

    @property
    def use_json(self) -> bool:
        json_flag = getattr(Config, "LOG_JSON", None)
        if json_flag is None:
            return self.is_production
        return bool(json_flag)

    @property
    def use_colors(self) -> bool:
        if self.is_production or self.use_json:
            return False
        colors_flag = getattr(Config, "LOG_COLORS", True)
        return bool(colors_flag) and sys.stdout.isatty()

    @property
    def log_to_file(self) -> bool:
        return bool(getattr(Config, "LOG_TO_FILE", False))


LOGGER_CONFIG = LoggerConfig()


# ============================================================================
# Filters & Formatters
# ============================================================================


class ContextFilter(logging.Filter):
    def filter(self, record: logging.LogRecord) -> bool:  # type: ignore[override]
        context: Dict[str, Any] = _log_context.get({})

        record.session_id = context.get("session_id", "N/A")
        record.correlation_id = context.get("correlation_id") or "N/A"
        record.component = context.get("component") or record.name.split(".", 1)[0]
        record.operation = context.get("operation", "N/A")

        for key, value in context.items():
            if not hasattr(record, key):
                setattr(record, key, value)

        return True


class ColoredFormatter(logging.Formatter):
    COLORS: Dict[str, str] = {
        "DEBUG": "\033[90m",
        "INFO": "\033[94m",
        "WARNING": "\033[93m",
        "ERROR": "\033[91m",
        "CRITICAL": "\033[91m\033[1m",
        "RESET": "\033[0m",
    }

    def format(self, record: logging.LogRecord) -> str:  # type: ignore[override]
        original = record.levelname
        prefix = self.COLORS.get(original, "")
        reset = self.COLORS["RESET"] if prefix else ""

        if prefix:
            record.levelname = f"{prefix}{original}{reset}"

        try:
            return super().format(record)
        finally:
            record.levelname = original


class JSONFormatter(logging.Formatter):
    STANDARD_ATTRS = {
        "name",
        "msg",
        "args",
        "levelname",
        "levelno",
        "pathname",
        "filename",
        "module",
        "exc_info",
        "exc_text",
        "stack_info",
        "lineno",
        "funcName",
        "created",
        "msecs",
        "relativeCreated",
        "thread",
        "threadName",
        "processName",
        "process",
        "taskName",
    }

    CONTEXT_ATTRS = {
        "session_id",
        "correlation_id",
        "component",
        "operation",
    }

    def format(self, record: logging.LogRecord) -> str:  # type: ignore[override]
        created_dt = datetime.fromtimestamp(record.created, tz=timezone.utc)

        log_data: Dict[str, Any] = {
            "timestamp": created_dt.isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            "module": record.module,
            "function": record.funcName,
            "line": record.lineno,
        }

        for attr in self.CONTEXT_ATTRS:
            value = getattr(record, attr, None)
            if value not in (None, "N/A"):
                log_data[attr] = value

        if record.exc_info:
            log_data["exception"] = self.formatException(record.exc_info)

        extra: Dict[str, Any] = {}
        for key, val in record.__dict__.items():
            if key in self.STANDARD_ATTRS or key in self.CONTEXT_ATTRS:
                continue
            if key.startswith("_"):
                continue
            if key in {"levelname", "name", "message", "asctime"}:
                continue
            extra[key] = val

        if extra:
            log_data["extra"] = extra

        # default=str keeps non-JSON extras (Paths, enums) from breaking the log line
        return json.dumps(log_data, ensure_ascii=False, default=str)


# ============================================================================
# Global Setup
# ============================================================================

_INITIALIZED_ATTR = "_idlefinance_logging_initialized"


def _build_console_handler() -> logging.Handler:
    handler = logging.StreamHandler(sys.stdout)
    handler.setLevel(LOGGER_CONFIG.log_level)

    if LOGGER_CONFIG.use_json:
        handler.setFormatter(JSONFormatter())
    elif LOGGER_CONFIG.use_colors:
        handler.setFormatter(
            ColoredFormatter(
                fmt=LOGGER_CONFIG.CONSOLE_FORMAT,
                datefmt=LOGGER_CONFIG.DATE_FORMAT,
            )
        )
    else:
        handler.setFormatter(
            logging.Formatter(
                fmt=LOGGER_CONFIG.CONSOLE_FORMAT,
                datefmt=LOGGER_CONFIG.DATE_FORMAT,
            )
        )

    return handler


def _build_daily_file_handler() -> logging.Handler:
    LOGGER_CONFIG.logs_dir.mkdir(parents=True, exist_ok=True)
    log_file = LOGGER_CONFIG.logs_dir / LOGGER_CONFIG.DAILY_BASENAME

    handler = TimedRotatingFileHandler(
        filename=str(log_file),
        when="midnight",
        interval=1,
        backupCount=LOGGER_CONFIG.backup_count,
        encoding="utf-8",
        utc=True,
    )
    handler.setLevel(LOGGER_CONFIG.log_level)
    handler.setFormatter(JSONFormatter())
    return handler


def setup_logging() -> None:
    """
    Install the Idle Finance handlers on the root logger.

    Idempotent: later calls are no-ops until ``shutdown_logging()``.
    """
    root = logging.getLogger()

    if getattr(root, _INITIALIZED_ATTR, False):
        return

    root.setLevel(LOGGER_CONFIG.log_level)
    root.handlers.clear()
    root.filters.clear()

    handlers: List[logging.Handler] = [_build_console_handler()]
    if LOGGER_CONFIG.log_to_file:
        handlers.append(_build_daily_file_handler())

    # Filters on handlers see records propagated from child loggers too
    context_filter = ContextFilter()
    for handler in handlers:
        handler.addFilter(context_filter)
        root.addHandler(handler)

    setattr(root, _INITIALIZED_ATTR, True)

    log = logging.getLogger(__name__)
    log.debug(
        "Logging initialized",
        extra={
            "environment": LOGGER_CONFIG.environment,
            "log_level": logging.getLevelName(LOGGER_CONFIG.log_level),
            "json": LOGGER_CONFIG.use_json,
            "colors": LOGGER_CONFIG.use_colors,
            "log_to_file": LOGGER_CONFIG.log_to_file,
        },
    )


def shutdown_logging() -> None:
    root = logging.getLogger()
    log = logging.getLogger(__name__)

    if not getattr(root, _INITIALIZED_ATTR, False):
        return

    log.debug("Shutting down logging subsystem.")

    for handler in list(root.handlers):
        try:
            handler.flush()
            handler.close()
        except (OSError, ValueError):
            sys.stderr.write("Error while closing logging handler.\n")
        root.removeHandler(handler)

    root.filters.clear()
    setattr(root, _INITIALIZED_ATTR, False)


def is_logging_initialized() -> bool:
    return bool(getattr(logging.getLogger(), _INITIALIZED_ATTR, False))


# ============================================================================
# Public API
# ============================================================================


def get_logger(name: str) -> Logger:
    return logging.getLogger(name)


class LogContext:
    """
    Scope log context for a block of work.

    Example
    -------
    >>> with LogContext(session_id="sim-1", operation="simulate"):
    ...     logger.info("Step complete")
    """

    def __init__(
        self,
        session_id: Optional[str] = None,
        component: Optional[str] = None,
        operation: Optional[str] = None,
        correlation_id: Optional[str] = None,
        **extra: Any,
    ) -> None:
        self.context: Dict[str, Any] = {
            "session_id": session_id or "N/A",
            "component": component,
            "operation": operation,
            "correlation_id": correlation_id or self._generate_correlation_id(),
            **extra,
        }

        self._token: Optional[Token[Dict[str, Any]]] = None

    @staticmethod
    def _generate_correlation_id() -> str:
        return str(uuid.uuid4())[:8]

    def __enter__(self) -> "LogContext":
        self._token = _log_context.set(self.context)
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        if self._token is not None:
            _log_context.reset(self._token)
            self._token = None


def get_log_context() -> Dict[str, Any]:
    return dict(_log_context.get({}))


def set_log_context(
    session_id: Optional[str] = None,
    component: Optional[str] = None,
    operation: Optional[str] = None,
    correlation_id: Optional[str] = None,
    **extra: Any,
) -> None:
    current = _log_context.get({}).copy()

    if session_id is not None:
        current["session_id"] = session_id
    if component is not None:
        current["component"] = component
    if operation is not None:
        current["operation"] = operation
    if correlation_id:
        current["correlation_id"] = correlation_id

    current.update(extra)
    _log_context.set(current)


def clear_log_context() -> None:
    _log_context.set({})
