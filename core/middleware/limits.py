"""Request body size limit."""

import logging
from typing import Callable

from fastapi.responses import JSONResponse

from core.exceptions import PayloadTooLarge

logger = logging.getLogger(__name__)


class BodySizeLimitMiddleware:
    """
    Reject requests whose declared Content-Length exceeds max_body_size
    before they reach routing.
    """

    def __init__(self, app: Callable, max_body_size: int):
        self.app = app
        self.max_body_size = max_body_size

    async def __call__(self, scope: dict, receive: Callable, send: Callable) -> None:
        if scope["type"] != "http":
            await self.app(scope, receive, send)
            return

        content_length = None
        for name, value in scope.get("headers", []):
            if name == b"content-length":
                content_length = value
                break

        if content_length is not None:
            try:
                declared = int(content_length)
            except ValueError:
                declared = 0
            if declared > self.max_body_size:
                logger.warning(
                    f"Rejected {scope.get('method')} {scope.get('path')}: "
                    f"body of {declared} bytes exceeds {self.max_body_size}"
                )
                error = PayloadTooLarge("Request body too large", limit=self.max_body_size)
                response = JSONResponse(status_code=error.status_code, content=error.to_dict())
                await response(scope, receive, send)
                return

        await self.app(scope, receive, send)
