"""
Structured request logging with credential masking.
"""

import json
import logging
import time
import traceback
import uuid
from typing import Callable

from fastapi import Request, Response
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.types import ASGIApp

logger = logging.getLogger(__name__)

SENSITIVE_HEADERS = {"authorization", "cookie", "set-cookie", "x-api-key"}

# Probes are too noisy to log
SKIP_PATHS = ("/api/health",)


def mask_headers(headers: dict) -> dict:
    """
    Mask sensitive headers while keeping the auth scheme visible.

    Args:
        headers: Dictionary of HTTP headers

    Returns:
        Headers with sensitive values masked
    """
    masked = {}
    for key, value in headers.items():
        if key.lower() not in SENSITIVE_HEADERS:
            masked[key] = value
            continue

        scheme, sep, _ = str(value).partition(" ")
        masked[key] = f"{scheme} [REDACTED]" if sep else "[REDACTED]"
    return masked


def get_client_ip(request: Request) -> str:
    """Client IP with the last IPv4 octet masked."""
    forwarded_for = request.headers.get("x-forwarded-for")
    if forwarded_for:
        ip = forwarded_for.split(",")[0].strip()
    else:
        ip = request.client.host if request.client else "unknown"

    parts = ip.split(".")
    if len(parts) == 4:
        return f"{parts[0]}.{parts[1]}.{parts[2]}.xxx"
    return ip


class StructuredLoggingMiddleware(BaseHTTPMiddleware):
    """
    Logs one `request_started` and one `request_completed` event per
    request and stamps every response with an x-request-id header.
    """

    def __init__(self, app: ASGIApp, slow_request_seconds: float = 1.0):
        super().__init__(app)
        self.slow_request_seconds = slow_request_seconds

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        request_id = request.headers.get("x-request-id", str(uuid.uuid4()))
        request.state.request_id = request_id

        if request.url.path.startswith(SKIP_PATHS):
            response = await call_next(request)
            response.headers["x-request-id"] = request_id
            return response

        start_time = time.perf_counter()
        logger.info(json.dumps({
            "event": "request_started",
            "request_id": request_id,
            "method": request.method,
            "path": request.url.path,
            "client_ip": get_client_ip(request),
            "headers": mask_headers(dict(request.headers)),
        }))

        response = await call_next(request)

        duration = time.perf_counter() - start_time
        principal = getattr(request.state, "principal", None)
        completed = {
            "event": "request_completed",
            "request_id": request_id,
            "method": request.method,
            "path": request.url.path,
            "status_code": response.status_code,
            "duration_ms": round(duration * 1000, 2),
            "user_id": principal.user_id if principal else None,
            "company_id": getattr(request.state, "company_id", None),
        }
        if duration > self.slow_request_seconds:
            completed["performance"] = "slow"

        if response.status_code >= 500:
            logger.error(json.dumps(completed))
        elif response.status_code >= 400:
            logger.warning(json.dumps(completed))
        else:
            logger.info(json.dumps(completed))

        response.headers["x-request-id"] = request_id
        return response


class StructuredFormatter(logging.Formatter):
    """Format log records as one JSON object per line."""

    def format(self, record: logging.LogRecord) -> str:
        log_data = {
            "timestamp": self.formatTime(record, self.datefmt),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }

        if hasattr(record, "request_id"):
            log_data["request_id"] = record.request_id

        if record.exc_info:
            log_data["exception"] = {
                "type": record.exc_info[0].__name__,
                "message": str(record.exc_info[1]),
                "traceback": traceback.format_exception(*record.exc_info),
            }

        return json.dumps(log_data)


def setup_logging(log_level: str = "INFO", json_logs: bool = True) -> None:
    """
    Configure application-wide logging.

    Args:
        log_level: Logging level (DEBUG, INFO, WARNING, ERROR)
        json_logs: Whether to format logs as JSON
    """
    level = getattr(logging, log_level.upper())
    root_logger = logging.getLogger()
    root_logger.setLevel(level)

    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)

    console_handler = logging.StreamHandler()
    console_handler.setLevel(level)
    if json_logs:
        console_handler.setFormatter(StructuredFormatter())
    else:
        console_handler.setFormatter(
            logging.Formatter("%(asctime)s - %(name)s - %(levelname)s - %(message)s")
        )
    root_logger.addHandler(console_handler)

    # Reduce noise from third-party libraries
    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)
    logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)
