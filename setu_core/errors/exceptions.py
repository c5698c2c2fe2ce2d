# =============================================================================
# setu_core/errors/exceptions.py
# Custom Exception Hierarchy for the Shiksha Setu offline core
# =============================================================================

from typing import Optional, Dict, Any


class SetuError(Exception):
    """
    Base exception for all offline-core errors.

    Attributes:
        message: Human-readable error description
        code: Machine-readable error code (e.g., "STORE_001")
        details: Additional context as a dictionary
        recoverable: Whether the error can be recovered from
    """

    def __init__(
        self,
        message: str,
        code: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None,
        recoverable: bool = True,
    ):
        super().__init__(message)
        self.message = message
        self.code = code or "SETU_000"
        self.details = details or {}
        self.recoverable = recoverable

    def __str__(self) -> str:
        base = f"[{self.code}] {self.message}"
        if self.details:
            base += f" | Details: {self.details}"
        return base

    def to_dict(self) -> Dict[str, Any]:
        """Convert exception to dictionary for logging/serialization"""
        return {
            "error_type": self.__class__.__name__,
            "code": self.code,
            "message": self.message,
            "details": self.details,
            "recoverable": self.recoverable,
        }


# =============================================================================
# LOCAL STORAGE EXCEPTIONS
# =============================================================================

class StorageError(SetuError):
    """Raised when the persistent key/value storage cannot be written"""

    def __init__(
        self,
        message: str,
        key: Optional[str] = None,
        **kwargs,
    ):
        details = kwargs.pop("details", {})
        if key:
            details["key"] = key
        kwargs.setdefault("code", "STORE_001")

        super().__init__(
            message=message,
            details=details,
            **kwargs,
        )


class StorageQuotaError(StorageError):
    """Raised when a write would exceed the storage capacity limit"""

    def __init__(
        self,
        message: str,
        key: Optional[str] = None,
        limit_bytes: Optional[int] = None,
        requested_bytes: Optional[int] = None,
        **kwargs,
    ):
        details = kwargs.pop("details", {})
        if limit_bytes is not None:
            details["limit_bytes"] = limit_bytes
        if requested_bytes is not None:
            details["requested_bytes"] = requested_bytes

        super().__init__(
            message=message,
            key=key,
            code="STORE_002",
            details=details,
            **kwargs,
        )


# =============================================================================
# REMOTE STORE EXCEPTIONS
# =============================================================================

class RemoteStoreError(SetuError):
    """Base class for failures talking to the remote data store"""

    def __init__(
        self,
        message: str,
        table: Optional[str] = None,
        operation_id: Optional[str] = None,
        **kwargs,
    ):
        details = kwargs.pop("details", {})
        if table:
            details["table"] = table
        if operation_id:
            details["operation_id"] = operation_id
        kwargs.setdefault("code", "SYNC_001")

        super().__init__(
            message=message,
            details=details,
            **kwargs,
        )


class RemoteRejectedError(RemoteStoreError):
    """The remote store answered and refused the write (validation, authorization)"""

    def __init__(
        self,
        message: str,
        status: Optional[str] = None,
        **kwargs,
    ):
        details = kwargs.pop("details", {})
        if status:
            details["status"] = status

        super().__init__(
            message=message,
            code="SYNC_002",
            details=details,
            **kwargs,
        )


class RemoteUnavailableError(RemoteStoreError):
    """The remote store could not be reached; the outcome is unknown"""

    def __init__(self, message: str, **kwargs):
        super().__init__(message=message, code="SYNC_003", **kwargs)


class UnknownOperationError(RemoteRejectedError):
    """A pending operation carries a type no handler is registered for"""

    def __init__(self, message: str, operation_type: Optional[str] = None, **kwargs):
        details = kwargs.pop("details", {})
        if operation_type:
            details["operation_type"] = operation_type
        super().__init__(message=message, details=details, **kwargs)
        self.code = "SYNC_004"


# =============================================================================
# CHAT EXCEPTIONS
# =============================================================================

class ChatTransportError(SetuError):
    """Raised when the chat endpoint fails or the stream is aborted"""

    def __init__(
        self,
        message: str,
        status_code: Optional[int] = None,
        **kwargs,
    ):
        details = kwargs.pop("details", {})
        if status_code is not None:
            details["status_code"] = status_code
        kwargs.setdefault("code", "CHAT_001")

        super().__init__(
            message=message,
            details=details,
            **kwargs,
        )
        self.status_code = status_code


class ChatRateLimitError(ChatTransportError):
    """The chat endpoint refused the request because of rate limits (HTTP 429)"""

    def __init__(self, message: str = "Rate limits exceeded. Please try again later.", **kwargs):
        super().__init__(message=message, status_code=429, code="CHAT_002", **kwargs)


class MessageFinalizedError(SetuError):
    """Raised when a completed chat message is mutated"""

    def __init__(self, message: str, message_id: Optional[str] = None, **kwargs):
        details = kwargs.pop("details", {})
        if message_id:
            details["message_id"] = message_id

        super().__init__(
            message=message,
            code="CHAT_003",
            details=details,
            recoverable=False,
            **kwargs,
        )


# =============================================================================
# CONFIGURATION EXCEPTIONS
# =============================================================================

class ConfigurationError(SetuError):
    """Raised when configuration is invalid or missing"""

    def __init__(
        self,
        message: str,
        config_key: Optional[str] = None,
        expected_type: Optional[str] = None,
        **kwargs,
    ):
        details = kwargs.pop("details", {})
        if config_key:
            details["config_key"] = config_key
        if expected_type:
            details["expected_type"] = expected_type

        super().__init__(
            message=message,
            code="CONFIG_001",
            details=details,
            recoverable=False,
            **kwargs,
        )
