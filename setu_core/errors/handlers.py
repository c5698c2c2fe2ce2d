# =============================================================================
# setu_core/errors/handlers.py
# Error Handling Utilities for the Shiksha Setu offline core
# =============================================================================

from __future__ import annotations
import traceback
from typing import Optional, Callable

from setu_core.logging import get_logger
from .exceptions import SetuError

logger = get_logger(__name__)

# Receives (level, message); level is "info", "warning" or "error"
Notifier = Callable[[str, str], None]


def handle_error(
    error: BaseException,
    notify: Optional[Notifier] = None,
    log_error: bool = True,
    user_message: Optional[str] = None,
) -> None:
    """
    Centralized error handling function.

    Args:
        error: The exception to handle
        notify: Optional callback used to surface a soft notice to the user
        log_error: Whether to log the error
        user_message: Custom message to show user (uses error message if None)
    """
    if isinstance(error, SetuError):
        message = user_message or error.message
        code = error.code
        details = error.details
        recoverable = error.recoverable
    else:
        message = user_message or str(error)
        code = "UNKNOWN"
        details = {"traceback": traceback.format_exc()}
        recoverable = True

    if log_error:
        logger.error(
            f"[{code}] {message}",
            extra={"details": details},
            exc_info=not isinstance(error, SetuError),
        )

    if notify is not None:
        try:
            if recoverable:
                notify("warning", message)
            else:
                notify("error", f"{message}. Please contact support.")
        except Exception as e:
            logger.error(f"Error in notification callback: {e}")


class ErrorContext:
    """
    Context manager for error handling with automatic logging and user feedback.

    Usage:
        with ErrorContext("Caching chapter summaries", recoverable=True):
            cache.put("chapter_summaries", rows)
    """

    def __init__(
        self,
        operation: str,
        recoverable: bool = True,
        notify: Optional[Notifier] = None,
    ):
        self.operation = operation
        self.recoverable = recoverable
        self.notify = notify
        self.error: Optional[BaseException] = None

    def __enter__(self) -> ErrorContext:
        logger.debug(f"Starting: {self.operation}")
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> bool:
        if exc_type is None:
            logger.debug(f"Completed: {self.operation}")
            return False

        # Cancellation is never absorbed
        if not issubclass(exc_type, Exception):
            return False

        self.error = exc_val
        if isinstance(exc_val, SetuError):
            handle_error(exc_val, notify=self.notify)
        else:
            handle_error(
                exc_val,
                notify=self.notify,
                user_message=f"Error during: {self.operation}",
            )

        # Suppress exception if recoverable
        return self.recoverable

