"""
FastAPI application initialization and configuration.

The application is built by `create_app`; run it with
`uvicorn api.main:create_app --factory` or `python -m api.main`.
"""

import logging
from contextlib import asynccontextmanager
from pathlib import Path
from typing import Optional

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.staticfiles import StaticFiles

from api.routes import health
from api.routes.v1 import auth, jobs, placeholders
from core.config import Settings, get_settings
from core.middleware import (
    BodySizeLimitMiddleware,
    ErrorHandlingMiddleware,
    StructuredLoggingMiddleware,
    setup_error_handlers,
    setup_logging,
)
from core.storage.local import ResumeStorage
from database.engine import Database

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Open the database gateway at startup and close it at shutdown."""
    settings: Settings = app.state.settings
    database: Database = app.state.db

    # Startup
    logger.info(f"Starting {settings.app_name} in {settings.app_env} environment")
    await database.init_db()
    if not await database.ping():
        await database.close()
        raise RuntimeError("Database is unreachable; refusing to start")

    yield

    # Shutdown
    logger.info(f"Shutting down {settings.app_name}")
    await database.close()


def create_app(
    settings: Optional[Settings] = None,
    database: Optional[Database] = None,
) -> FastAPI:
    """
    Build the application.

    Args:
        settings: Configuration; loaded from the environment when omitted
        database: Persistence gateway; built from settings when omitted

    Returns:
        Configured FastAPI instance
    """
    settings = settings or get_settings()

    # Setup structured logging (do this first, before anything else)
    setup_logging(log_level=settings.log_level, json_logs=settings.json_logs)

    app = FastAPI(
        title=settings.app_name,
        description="Multi-tenant HR platform: companies, job postings and applicant tracking",
        version="0.1.0",
        docs_url="/docs" if settings.debug else None,
        redoc_url="/redoc" if settings.debug else None,
        lifespan=lifespan,
    )
    app.state.settings = settings
    app.state.db = database or Database.from_settings(settings)
    app.state.storage = ResumeStorage(
        base_path=settings.upload_dir,
        max_size=settings.max_resume_size,
    )

    # Setup error handlers (before middleware)
    setup_error_handlers(app)

    # Add middleware (order matters - the last one added runs first)
    # 1. Error handling middleware (innermost - catches anything handlers let escape)
    app.add_middleware(
        ErrorHandlingMiddleware,
        debug=settings.app_env == "development",
    )

    # 2. Structured logging middleware (logs all requests/responses)
    app.add_middleware(StructuredLoggingMiddleware)

    # 3. Body size limit (rejects oversized requests before they are read)
    app.add_middleware(BodySizeLimitMiddleware, max_body_size=settings.max_body_size)

    # 4. CORS middleware (outermost)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # Uploaded resumes
    upload_dir = Path(settings.upload_dir)
    upload_dir.mkdir(parents=True, exist_ok=True)
    app.mount("/uploads", StaticFiles(directory=upload_dir), name="uploads")

    # Health check routes
    app.include_router(health.router, prefix=settings.api_prefix, tags=["Health"])

    # API routes
    app.include_router(
        auth.router,
        prefix=f"{settings.api_prefix}/auth",
        tags=["Authentication"],
    )
    app.include_router(
        jobs.router,
        prefix=f"{settings.api_prefix}/jobs",
        tags=["Jobs"],
    )
    app.include_router(
        placeholders.onboarding_router,
        prefix=f"{settings.api_prefix}/onboarding",
        tags=["Onboarding"],
    )
    app.include_router(
        placeholders.time_router,
        prefix=f"{settings.api_prefix}/time",
        tags=["Time"],
    )
    app.include_router(
        placeholders.tickets_router,
        prefix=f"{settings.api_prefix}/tickets",
        tags=["Tickets"],
    )
    app.include_router(
        placeholders.analytics_router,
        prefix=f"{settings.api_prefix}/analytics",
        tags=["Analytics"],
    )

    return app


if __name__ == "__main__":
    import uvicorn

    settings = get_settings()
    uvicorn.run(
        "api.main:create_app",
        factory=True,
        host="0.0.0.0",
        port=settings.port,
        reload=settings.debug,
        log_level=settings.log_level.lower(),
    )
