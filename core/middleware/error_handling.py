"""
Error handling with security-compliant error sanitization.

- APIError subclasses become `{"error", "code", ...}` responses
- Unmatched routes become a uniform 404
- Anything unexpected becomes a uniform 500; raw detail is only echoed
  in development
"""

import functools
import logging
import re
from typing import Any, Callable

from fastapi import Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from core.exceptions import APIError, Internal

logger = logging.getLogger(__name__)

# Patterns for sensitive data that should never be logged or echoed
SENSITIVE_PATTERNS = [
    re.compile(r'password["\s:=]+[^"\s,}]+', re.IGNORECASE),
    re.compile(r'token["\s:=]+[^"\s,}]+', re.IGNORECASE),
    re.compile(r'secret["\s:=]+[^"\s,}]+', re.IGNORECASE),
    re.compile(r'authorization["\s:]+[^"\s,}]+', re.IGNORECASE),
    re.compile(r'bearer\s+[A-Za-z0-9\-_.]+', re.IGNORECASE),
    re.compile(r'postgres(ql)?(\+\w+)?://[^\s]+', re.IGNORECASE),
]

GENERIC_ERROR = "Something went wrong!"


def sanitize_error_message(message: str) -> str:
    """
    Remove sensitive information from error messages.

    Args:
        message: Original error message

    Returns:
        Sanitized error message
    """
    sanitized = str(message)
    for pattern in SENSITIVE_PATTERNS:
        sanitized = pattern.sub("[REDACTED]", sanitized)
    return sanitized


def _expose_details(request: Request) -> bool:
    settings = getattr(request.app.state, "settings", None)
    return bool(settings and settings.app_env == "development")


def internal_error_body(exc: BaseException, expose_details: bool) -> dict[str, Any]:
    """Uniform 500 body; the exception text only leaves the process in development."""
    return {
        "error": GENERIC_ERROR,
        "code": Internal.code,
        "message": sanitize_error_message(str(exc)) if expose_details else "Internal server error",
    }


def handler_boundary(failure_message: str) -> Callable:
    """
    Decorator translating unexpected failures inside a route handler.

    APIErrors pass through untouched. Anything else is logged with its
    traceback and re-raised as Internal(failure_message), so storage-layer
    detail never reaches the client outside development.

    Usage:
        @router.get("")
        @handler_boundary("Failed to fetch jobs")
        async def list_jobs(...):
            ...
    """
    def decorator(func: Callable) -> Callable:
        @functools.wraps(func)
        async def wrapper(*args, **kwargs):
            try:
                return await func(*args, **kwargs)
            except APIError:
                raise
            except Exception as exc:
                logger.error(
                    f"{failure_message}: {type(exc).__name__}: "
                    f"{sanitize_error_message(str(exc))}",
                    exc_info=True,
                )
                raise Internal(failure_message, detail=sanitize_error_message(str(exc))) from exc
        return wrapper
    return decorator


class ErrorHandlingMiddleware:
    """
    Last-resort ASGI guard: anything that escapes the route-level handlers
    is logged and turned into a uniform 500 response.
    """

    def __init__(self, app: Callable, debug: bool = False):
        self.app = app
        self.debug = debug

    async def __call__(self, scope: dict, receive: Callable, send: Callable) -> None:
        if scope["type"] != "http":
            await self.app(scope, receive, send)
            return

        response_started = False

        async def send_wrapper(message: dict) -> None:
            nonlocal response_started
            if message["type"] == "http.response.start":
                response_started = True
            await send(message)

        try:
            await self.app(scope, receive, send_wrapper)
        except Exception as exc:
            logger.error(
                f"Unhandled exception: {scope.get('method')} {scope.get('path')} - "
                f"{type(exc).__name__}: {sanitize_error_message(str(exc))}",
                exc_info=True,
            )
            if response_started:
                raise
            response = JSONResponse(
                status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
                content=internal_error_body(exc, self.debug),
            )
            await response(scope, receive, send)


def setup_error_handlers(app) -> None:
    """
    Set up exception handlers for FastAPI application.

    Args:
        app: FastAPI application instance
    """

    @app.exception_handler(APIError)
    async def api_error_handler(request: Request, exc: APIError):
        """Handle the API error taxonomy."""
        body = exc.to_dict()
        if isinstance(exc, Internal):
            detail = body.pop("detail", None)
            body["message"] = detail if (detail and _expose_details(request)) else "Internal server error"
        if exc.status_code >= 500:
            logger.error(f"{request.method} {request.url.path} - {exc.message}")
        return JSONResponse(status_code=exc.status_code, content=body)

    @app.exception_handler(StarletteHTTPException)
    async def http_exception_handler(request: Request, exc: StarletteHTTPException):
        """Handle HTTP exceptions raised by routing."""
        if exc.status_code == status.HTTP_404_NOT_FOUND:
            content = {"error": "Route not found", "code": "ROUTE_NOT_FOUND"}
        else:
            content = {
                "error": sanitize_error_message(exc.detail),
                "code": "HTTP_EXCEPTION",
            }
        return JSONResponse(
            status_code=exc.status_code,
            content=content,
            headers=getattr(exc, "headers", None),
        )

    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(request: Request, exc: RequestValidationError):
        """Handle malformed request bodies and parameters."""
        details = []
        for error in exc.errors():
            details.append({
                "field": ".".join(str(loc) for loc in error["loc"] if loc not in ("body", "query", "path", "form")),
                "message": sanitize_error_message(error["msg"]),
                "type": error["type"],
            })

        logger.warning(f"Validation error: {request.method} {request.url.path} - {details}")
        return JSONResponse(
            status_code=status.HTTP_400_BAD_REQUEST,
            content={
                "error": "Invalid request",
                "code": "VALIDATION_ERROR",
                "details": details,
            },
        )
