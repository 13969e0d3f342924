"""
Shared error handling for the Notification Service.
"""

from typing import Dict, Any, List, Optional
from pydantic import BaseModel, Field

from notification_shared.logging import request_id_var


class ErrorResponse(BaseModel):
    """Standard error response format."""

    request_id: Optional[str] = None
    code: str
    message: str
    details: Dict[str, Any] = Field(default_factory=dict)


class NotificationServiceException(Exception):
    """Base exception for the Notification Service."""

    status_code: int = 400

    def __init__(self, code: str, message: str, details: Optional[Dict[str, Any]] = None):
        self.code = code
        self.message = message
        self.details = details or {}
        super().__init__(message)

    def to_response(self) -> ErrorResponse:
        """Convert to error response."""
        return ErrorResponse(
            request_id=request_id_var.get(),
            code=self.code,
            message=self.message,
            details=self.details
        )


class MissingConfigurationError(NotificationServiceException):
    """A required configuration value is absent or blank at startup."""

    status_code = 500

    def __init__(self, missing_keys: List[str], message: str = "Missing configuration"):
        self.missing_keys = list(missing_keys)
        super().__init__(
            "MISSING_CONFIGURATION",
            f"{message}: {', '.join(self.missing_keys)}",
            {"missing_keys": self.missing_keys}
        )


class SecretFetchError(NotificationServiceException):
    """A parameter store lookup failed."""

    status_code = 502

    def __init__(self, parameter_name: str, message: str = "Failed to fetch parameter",
                 details: Optional[Dict[str, Any]] = None):
        self.parameter_name = parameter_name
        details = {"parameter": parameter_name, **(details or {})}
        super().__init__("SECRET_FETCH_FAILURE", f"{message}: {parameter_name}", details)


class AuthenticationError(NotificationServiceException):
    """Authentication-related errors."""

    status_code = 401

    def __init__(self, message: str = "Authentication failed", details: Optional[Dict[str, Any]] = None):
        super().__init__("AUTHENTICATION_ERROR", message, details)


class DatabaseError(NotificationServiceException):
    """Database-related errors."""

    status_code = 503

    def __init__(self, message: str = "Database error", details: Optional[Dict[str, Any]] = None):
        super().__init__("DATABASE_ERROR", message, details)
