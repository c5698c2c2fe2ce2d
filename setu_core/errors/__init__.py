# =============================================================================
# setu_core/errors/__init__.py
# Centralized Error Handling for the Shiksha Setu offline core
# =============================================================================

from .exceptions import (
    SetuError,
    StorageError,
    StorageQuotaError,
    RemoteStoreError,
    RemoteRejectedError,
    RemoteUnavailableError,
    UnknownOperationError,
    ChatTransportError,
    ChatRateLimitError,
    MessageFinalizedError,
    ConfigurationError,
)

from .handlers import (
    handle_error,
    ErrorContext,
)

__all__ = [
    # Exceptions
    "SetuError",
    "StorageError",
    "StorageQuotaError",
    "RemoteStoreError",
    "RemoteRejectedError",
    "RemoteUnavailableError",
    "UnknownOperationError",
    "ChatTransportError",
    "ChatRateLimitError",
    "MessageFinalizedError",
    "ConfigurationError",
    # Handlers
    "handle_error",
    "ErrorContext",
]
