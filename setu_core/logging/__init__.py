# =============================================================================
# setu_core/logging/__init__.py
# Centralized Logging Configuration
# =============================================================================

from .config import (
    LogContext,
    get_logger,
    resolve_level,
    setup_logging,
    setup_logging_from_settings,
)

__all__ = [
    "setup_logging",
    "setup_logging_from_settings",
    "resolve_level",
    "get_logger",
    "LogContext",
]
