"""
Core middleware package.

- Error handling with sensitive data sanitization
- Structured request logging
- Request body size limits
- Authentication -> tenant isolation -> role authorization dependencies
"""

from core.middleware.error_handling import (
    ErrorHandlingMiddleware,
    handler_boundary,
    sanitize_error_message,
    setup_error_handlers,
)

from core.middleware.logging import (
    StructuredLoggingMiddleware,
    setup_logging,
)

from core.middleware.limits import BodySizeLimitMiddleware

from core.middleware.authentication import (
    Principal,
    authenticate,
    get_current_principal,
)

from core.middleware.tenancy import require_tenant

from core.middleware.authorization import (
    ELEVATED_ROLES,
    RequireRoles,
    check_role,
    require_hr_or_admin,
)

__all__ = [
    # Error handling
    "ErrorHandlingMiddleware",
    "handler_boundary",
    "sanitize_error_message",
    "setup_error_handlers",
    # Logging
    "StructuredLoggingMiddleware",
    "setup_logging",
    # Limits
    "BodySizeLimitMiddleware",
    # Authentication
    "Principal",
    "authenticate",
    "get_current_principal",
    # Tenant isolation
    "require_tenant",
    # Authorization
    "ELEVATED_ROLES",
    "RequireRoles",
    "check_role",
    "require_hr_or_admin",
]
