# =============================================================================
# setu_core/logging/config.py
# Logging Configuration for the Shiksha Setu offline core
# =============================================================================

import logging
import sys
import time
from pathlib import Path
from datetime import datetime
from typing import List, Optional, Union


LOG_FORMAT = "%(asctime)s | %(name)s | %(levelname)s | %(message)s"
LOG_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

LOG_DIR = Path("logs")

# Chatty dependencies of the Supabase / HTTP stack
NOISY_LOGGERS = ("httpx", "httpcore", "hpack", "supabase", "postgrest")


def resolve_level(level: Union[int, str]) -> int:
    """Accept 10 / "DEBUG" / "debug"; unknown names raise ValueError."""
    if isinstance(level, int):
        return level
    resolved = logging.getLevelName(str(level).strip().upper())
    if not isinstance(resolved, int):
        raise ValueError(f"Unknown log level: {level!r}")
    return resolved


def setup_logging(
    level: Union[int, str] = logging.INFO,
    log_dir: Optional[Path] = LOG_DIR,
    log_filename: Optional[str] = None,
) -> Optional[Path]:
    """
    Configure application-wide logging.

    Args:
        level: Logging level or level name (default: INFO)
        log_dir: Directory for the daily log file; None logs to stdout only
        log_filename: Custom log filename (default: setu_YYYY-MM-DD.log)

    Returns:
        Path of the log file, if one is written
    """
    handlers: List[logging.Handler] = [logging.StreamHandler(sys.stdout)]
    log_path = None

    if log_dir is not None:
        log_dir = Path(log_dir)
        log_dir.mkdir(parents=True, exist_ok=True)
        log_path = log_dir / (log_filename or f"setu_{datetime.now().strftime('%Y-%m-%d')}.log")
        handlers.append(logging.FileHandler(log_path, encoding="utf-8"))

    logging.basicConfig(
        level=resolve_level(level),
        format=LOG_FORMAT,
        datefmt=LOG_DATE_FORMAT,
        handlers=handlers,
        force=True,  # Override any existing configuration
    )

    for name in NOISY_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)

    logging.getLogger("setu_core").info(
        f"Logging initialized ({logging.getLevelName(resolve_level(level))}"
        f"{f', file {log_path}' if log_path else ''})"
    )
    return log_path


def setup_logging_from_settings(settings) -> Optional[Path]:
    """Configure logging from Settings.log_level / Settings.log_dir."""
    return setup_logging(level=settings.log_level, log_dir=settings.log_dir)


def get_logger(name: str) -> logging.Logger:
    """
    Get a logger instance with the given name.

    Usage:
        from setu_core.logging import get_logger
        logger = get_logger(__name__)
    """
    return logging.getLogger(name)


class LogContext:
    """
    Context manager for logging operation timing and status.

    Usage:
        with LogContext(logger, "Sync pass over 3 pending operations"):
            ...
        # Logs: "Sync pass over 3 pending operations... started"
        # Logs: "Sync pass over 3 pending operations... completed (0.42s)"

    Failures are always logged at ERROR; ``level`` applies to start/completion.
    """

    def __init__(self, logger: logging.Logger, operation: str, level: int = logging.INFO):
        self.logger = logger
        self.operation = operation
        self.level = level
        self.start_time: Optional[float] = None

    @property
    def elapsed(self) -> float:
        if self.start_time is None:
            return 0.0
        return time.monotonic() - self.start_time

    def __enter__(self):
        self.start_time = time.monotonic()
        self.logger.log(self.level, f"{self.operation}... started")
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        if exc_type is None:
            self.logger.log(self.level, f"{self.operation}... completed ({self.elapsed:.2f}s)")
        else:
            self.logger.error(f"{self.operation}... failed ({self.elapsed:.2f}s): {exc_val}", exc_info=True)
        return False
