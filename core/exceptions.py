"""
API error taxonomy.

Every error raised by a handler or middleware dependency is an APIError
subclass; the error handlers in core.middleware.error_handling turn them
into `{"error": ..., "code": ..., **extra}` JSON responses.
"""

from typing import Any, Optional

from fastapi import status


class APIError(Exception):
    """Base class for errors that map directly to an HTTP response."""

    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR
    code: str = "INTERNAL_SERVER_ERROR"
    default_message: str = "Internal server error"

    def __init__(self, message: Optional[str] = None, **extra: Any):
        self.message = message or self.default_message
        self.extra = extra
        super().__init__(self.message)

    def to_dict(self) -> dict[str, Any]:
        body: dict[str, Any] = {"error": self.message, "code": self.code}
        body.update(self.extra)
        return body


class ValidationError(APIError):
    status_code = status.HTTP_400_BAD_REQUEST
    code = "VALIDATION_ERROR"
    default_message = "Invalid request"


class Conflict(APIError):
    # Uniqueness collisions are reported as 400 to match the public API.
    status_code = status.HTTP_400_BAD_REQUEST
    code = "CONFLICT"
    default_message = "Resource already exists"


class InvalidCredentials(APIError):
    status_code = status.HTTP_401_UNAUTHORIZED
    code = "INVALID_CREDENTIALS"
    default_message = "Invalid credentials"


class Unauthenticated(APIError):
    status_code = status.HTTP_401_UNAUTHORIZED
    code = "UNAUTHENTICATED"
    default_message = "Authentication required"


class MissingToken(Unauthenticated):
    code = "MISSING_TOKEN"
    default_message = "Access token required"


class PrincipalNotFound(Unauthenticated):
    code = "PRINCIPAL_NOT_FOUND"
    default_message = "Invalid token - user not found"


class NoTenantContext(Unauthenticated):
    code = "NO_TENANT_CONTEXT"
    default_message = "Company context required"


class InvalidToken(APIError):
    status_code = status.HTTP_403_FORBIDDEN
    code = "INVALID_TOKEN"
    default_message = "Invalid or expired token"


class Forbidden(APIError):
    status_code = status.HTTP_403_FORBIDDEN
    code = "FORBIDDEN"
    default_message = "Insufficient permissions"


class NotFound(APIError):
    status_code = status.HTTP_404_NOT_FOUND
    code = "NOT_FOUND"
    default_message = "Not found"


class PayloadTooLarge(APIError):
    status_code = 413
    code = "PAYLOAD_TOO_LARGE"
    default_message = "Payload too large"


class UnsupportedMedia(APIError):
    status_code = status.HTTP_415_UNSUPPORTED_MEDIA_TYPE
    code = "UNSUPPORTED_MEDIA"
    default_message = "Only PDF, DOC, and DOCX files are allowed"


class Internal(APIError):
    pass
