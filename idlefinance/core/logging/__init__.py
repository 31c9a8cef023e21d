"""
Idle Finance Logging Infrastructure

Exports the structured logging subsystem, log context helpers,
and configuration interface.

This module provides:
- JSON / colored console logging
- ContextVar-based contextual logging (`LogContext`)
- Setup and teardown helpers for the global logging system
"""

from idlefinance.core.logging.logger import (
    ColoredFormatter,
    ContextFilter,
    JSONFormatter,
    LogContext,
    LoggerConfig,
    clear_log_context,
    get_log_context,
    get_logger,
    is_logging_initialized,
    set_log_context,
    setup_logging,
    shutdown_logging,
)

__all__ = [
    "setup_logging",
    "shutdown_logging",
    "is_logging_initialized",
    "get_logger",
    "LogContext",
    "get_log_context",
    "set_log_context",
    "clear_log_context",
    "LoggerConfig",
    "ContextFilter",
    "JSONFormatter",
    "ColoredFormatter",
]
