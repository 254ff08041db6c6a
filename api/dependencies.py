"""FastAPI dependencies for dependency injection."""

from fastapi import Request

from core.config import Settings
from core.storage.local import ResumeStorage


def get_app_settings(request: Request) -> Settings:
    """Settings the running application was built with."""
    return request.app.state.settings


def get_storage(request: Request) -> ResumeStorage:
    return request.app.state.storage
