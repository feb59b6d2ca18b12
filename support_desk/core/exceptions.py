"""
Exception hierarchy for the support desk.

Provides layered exception structure for domain-specific errors.
All exceptions include context for observability and debugging.

Dependencies: None (pure domain layer)
System role: Centralized exception handling across the application
"""

from typing import Any


class SupportDeskException(Exception):
    """Base exception for all support desk errors."""

    def __init__(self, message: str, details: dict[str, Any] | None = None) -> None:
        """
        Initialize base exception with message and optional context.

        Args:
            message: Human-readable error message
            details: Optional dictionary of additional context for debugging
        """
        self.message = message
        self.details = details or {}
        super().__init__(message)

    def __str__(self) -> str:
        """Return string representation including details."""
        if self.details:
            return f"{self.message} | Details: {self.details}"
        return self.message


class ValidationError(SupportDeskException):
    """Raised when request input fails a domain rule."""

    def __init__(
        self,
        message: str,
        field: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        """
        Initialize validation error.

        Args:
            message: Error message
            field: Field name that failed validation
            details: Additional context
        """
        details = details or {}
        if field:
            details["field"] = field
        super().__init__(message, details)


class SessionNotFoundError(SupportDeskException):
    """Raised when a chat session cannot be found."""

    def __init__(self, session_id: str, details: dict[str, Any] | None = None) -> None:
        details = details or {}
        details["session_id"] = str(session_id)
        self.session_id = str(session_id)
        super().__init__("Session not found", details)


class UploadRejectedError(ValidationError):
    """Raised when an uploaded file has a disallowed type or exceeds its size cap."""

    def __init__(
        self,
        message: str,
        mime_type: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        details = details or {}
        if mime_type:
            details["mime_type"] = mime_type
        super().__init__(message, field="file", details=details)


class StorageError(SupportDeskException):
    """Raised when the file storage backend fails."""

    def __init__(
        self,
        message: str,
        key: str | None = None,
        operation: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        """
        Initialize storage error.

        Args:
            message: Error message
            key: Storage key involved
            operation: Operation that failed (put, get, delete, exists)
            details: Additional context
        """
        details = details or {}
        if key:
            details["key"] = key
        if operation:
            details["operation"] = operation
        super().__init__(message, details)


class StoredFileNotFoundError(StorageError):
    """Raised when a requested stored file does not exist."""

    def __init__(self, key: str) -> None:
        super().__init__("File not found", key=key, operation="get")


class NotificationError(SupportDeskException):
    """Raised when a push notification cannot be delivered (non-critical)."""

    pass
