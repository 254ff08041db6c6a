"""
Authentication endpoints.

Provides:
- Company registration with its first admin user
- Email/password login
- Own profile read/update
- Token verification
"""

import logging

from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from api.dependencies import get_app_settings
from api.schemas.auth import LoginRequest, ProfileUpdateRequest, RegisterRequest
from api.services import auth as auth_service
from core.config import Settings
from core.middleware.authentication import Principal, authenticate
from core.middleware.error_handling import handler_boundary
from database.engine import Database, get_database, get_db

logger = logging.getLogger(__name__)

router = APIRouter(tags=["authentication"])


@router.post(
    "/register",
    status_code=status.HTTP_201_CREATED,
    summary="Register Company",
    description="Create a company and its admin user, and return a session token.",
)
@handler_boundary("Registration failed")
async def register(
    request: RegisterRequest,
    database: Database = Depends(get_database),
    settings: Settings = Depends(get_app_settings),
):
    return await auth_service.register_company(database, request, settings)


@router.post("/login", summary="Login")
@handler_boundary("Login failed")
async def login(
    request: LoginRequest,
    db: AsyncSession = Depends(get_db),
    settings: Settings = Depends(get_app_settings),
):
    """Authenticate with email and password."""
    return await auth_service.login(db, request, settings)


@router.get("/profile", summary="Get Own Profile")
@handler_boundary("Failed to get profile")
async def get_profile(principal: Principal = Depends(authenticate)):
    return auth_service.profile_to_dict(principal)


@router.put("/profile", summary="Update Own Profile")
@handler_boundary("Failed to update profile")
async def update_profile(
    request: ProfileUpdateRequest,
    principal: Principal = Depends(authenticate),
    db: AsyncSession = Depends(get_db),
):
    """Overwrite first/last name, department and position of the caller."""
    return await auth_service.update_profile(db, principal, request)


@router.get("/verify", summary="Verify Token")
async def verify_token(principal: Principal = Depends(authenticate)):
    """Confirm the presented token still maps to a live user."""
    user = principal.user
    return {
        "valid": True,
        "user": {
            "id": user.id,
            "email": user.email,
            "role": user.role,
            "company": auth_service.company_to_dict(principal.company),
        },
    }
