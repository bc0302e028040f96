"""Custom exceptions and error codes."""

from enum import StrEnum
from typing import Any


class ErrorCode(StrEnum):
    """Standardized error codes for the API."""

    # Authentication errors (401)
    UNAUTHORIZED = "UNAUTHORIZED"
    INVALID_TOKEN = "INVALID_TOKEN"

    # Authorization errors (403)
    FORBIDDEN = "FORBIDDEN"
    INSUFFICIENT_PERMISSIONS = "INSUFFICIENT_PERMISSIONS"
    NOTIFICATION_FORBIDDEN = "NOTIFICATION_FORBIDDEN"

    # Not found errors (404)
    NOTIFICATION_NOT_FOUND = "NOTIFICATION_NOT_FOUND"
    NO_RECIPIENTS = "NO_RECIPIENTS"

    # Validation errors (400)
    VALIDATION_ERROR = "VALIDATION_ERROR"

    # Rate limiting (429)
    RATE_LIMIT_EXCEEDED = "RATE_LIMIT_EXCEEDED"

    # Server errors (5xx)
    INTERNAL_ERROR = "INTERNAL_ERROR"
    DATABASE_ERROR = "DATABASE_ERROR"


class AppException(Exception):
    """Base application exception."""

    def __init__(
        self,
        error_code: ErrorCode,
        message: str,
        status_code: int = 400,
        details: Any | None = None,
    ) -> None:
        self.error_code = error_code
        self.message = message
        self.status_code = status_code
        self.details = details
        super().__init__(self.message)


class AuthenticationError(AppException):
    """Authentication failed."""

    def __init__(
        self,
        message: str = "Authentication required",
        error_code: ErrorCode = ErrorCode.UNAUTHORIZED,
    ) -> None:
        super().__init__(
            error_code=error_code,
            message=message,
            status_code=401,
        )


class AuthorizationError(AppException):
    """Authorization failed."""

    def __init__(self, message: str = "Access denied") -> None:
        super().__init__(
            error_code=ErrorCode.FORBIDDEN,
            message=message,
            status_code=403,
        )


class InsufficientPermissionsError(AppException):
    """User does not have sufficient permissions."""

    def __init__(self, required_role: str = "admin") -> None:
        super().__init__(
            error_code=ErrorCode.INSUFFICIENT_PERMISSIONS,
            message=f"Insufficient permissions. Required role: {required_role}",
            status_code=403,
            details={"required_role": required_role},
        )


class NotificationValidationError(AppException):
    """A notification event is malformed and was rejected before any side effect."""

    def __init__(self, message: str, field: str | None = None) -> None:
        super().__init__(
            error_code=ErrorCode.VALIDATION_ERROR,
            message=message,
            status_code=400,
            details={"field": field} if field else None,
        )


class PersistenceError(AppException):
    """The durable notification write failed."""

    def __init__(self, message: str = "Failed to store notifications") -> None:
        super().__init__(
            error_code=ErrorCode.DATABASE_ERROR,
            message=message,
            status_code=503,
        )


class NotificationNotFoundError(AppException):
    """Notification not found."""

    def __init__(self, notification_id: str) -> None:
        super().__init__(
            error_code=ErrorCode.NOTIFICATION_NOT_FOUND,
            message=f"Notification not found: {notification_id}",
            status_code=404,
            details={"notification_id": notification_id},
        )


class NotificationPermissionError(AppException):
    """The notification belongs to another user."""

    def __init__(self, notification_id: str) -> None:
        super().__init__(
            error_code=ErrorCode.NOTIFICATION_FORBIDDEN,
            message="You cannot modify a notification you do not own",
            status_code=403,
            details={"notification_id": notification_id},
        )


class NoRecipientsError(AppException):
    """The requested target resolved to nobody."""

    def __init__(self) -> None:
        super().__init__(
            error_code=ErrorCode.NO_RECIPIENTS,
            message="No users found for the requested target",
            status_code=404,
        )
