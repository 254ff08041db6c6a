"""
Registration, login and profile service functions.
"""

from datetime import date
from typing import Any, Dict
import logging

from sqlalchemy import func, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from api.schemas.auth import (
    REGISTER_REQUIRED,
    LoginRequest,
    ProfileUpdateRequest,
    RegisterRequest,
)
from api.services import isoformat
from core.config import Settings
from core.exceptions import Conflict, InvalidCredentials, NotFound, ValidationError
from core.middleware.authentication import Principal
from core.security import create_access_token, hash_password_async, verify_password_async
from database.engine import Database
from database.models.companies import Company
from database.models.users import User, UserRole

logger = logging.getLogger(__name__)


def issue_token(user_id: int, settings: Settings) -> str:
    return create_access_token(
        user_id=user_id,
        secret_key=settings.jwt_secret,
        algorithm=settings.jwt_algorithm,
        expires_in=settings.jwt_expires_in,
    )


def company_to_dict(company: Company) -> Dict[str, Any]:
    return {
        "id": company.id,
        "name": company.name,
        "subdomain": company.subdomain,
    }


def user_to_dict(user: User, company: Company) -> Dict[str, Any]:
    """Sanitized user projection. Never includes the password hash."""
    return {
        "id": user.id,
        "email": user.email,
        "firstName": user.first_name,
        "lastName": user.last_name,
        "role": user.role,
        "department": user.department,
        "position": user.position,
        "company": company_to_dict(company),
    }


async def register_company(
    database: Database,
    data: RegisterRequest,
    settings: Settings,
) -> Dict[str, Any]:
    """
    Create a company and its admin user atomically, then issue a token.

    Raises:
        ValidationError: Required fields missing
        Conflict: Subdomain or email already taken
    """
    data.require(REGISTER_REQUIRED)
    subdomain = data.subdomain.lower()
    email = data.email.lower()

    async with database.session() as db:
        existing_company = await db.scalar(
            select(Company.id).where(func.lower(Company.subdomain) == subdomain)
        )
        if existing_company is not None:
            raise Conflict("Subdomain already taken")

        existing_user = await db.scalar(select(User.id).where(User.email == email))
        if existing_user is not None:
            raise Conflict("Email already registered")

    password_hash = await hash_password_async(data.password)

    try:
        async with database.transaction() as db:
            company = Company(
                name=data.company_name,
                subdomain=subdomain,
                email=email,
                phone=data.phone,
                address=data.address,
            )
            db.add(company)
            await db.flush()

            user = User(
                company_id=company.id,
                email=email,
                password_hash=password_hash,
                first_name=data.first_name,
                last_name=data.last_name,
                role=UserRole.ADMIN.value,
                hire_date=date.today(),
            )
            db.add(user)
            await db.flush()
    except IntegrityError:
        # Lost a race with a concurrent registration
        logger.warning(f"Registration conflict for subdomain {subdomain}")
        raise Conflict("Subdomain or email already registered")

    logger.info(f"Registered company {company.id} with admin user {user.id}")

    return {
        "message": "Company registered successfully",
        "token": issue_token(user.id, settings),
        "user": user_to_dict(user, company),
    }


async def login(db: AsyncSession, data: LoginRequest, settings: Settings) -> Dict[str, Any]:
    """
    Check credentials and issue a token.

    Unknown email, inactive company and wrong password all raise the same
    InvalidCredentials so callers cannot tell which check failed.
    """
    if not data.email or not data.password:
        raise ValidationError("Email and password are required")

    result = await db.execute(
        select(User, Company)
        .join(Company, User.company_id == Company.id)
        .where(User.email == data.email.lower(), User.is_active.is_(True))
    )
    row = result.first()
    if row is None:
        raise InvalidCredentials()

    user, company = row
    if not company.is_active:
        logger.info(f"Login refused for user {user.id}: company {company.id} inactive")
        raise InvalidCredentials()

    if not await verify_password_async(data.password, user.password_hash):
        raise InvalidCredentials()

    return {
        "message": "Login successful",
        "token": issue_token(user.id, settings),
        "user": user_to_dict(user, company),
    }


def profile_to_dict(principal: Principal) -> Dict[str, Any]:
    user, company = principal.user, principal.company
    profile = user_to_dict(user, company)
    profile["hireDate"] = isoformat(user.hire_date)
    profile["createdAt"] = isoformat(user.created_at)
    return {"user": profile}


async def update_profile(
    db: AsyncSession,
    principal: Principal,
    data: ProfileUpdateRequest,
) -> Dict[str, Any]:
    """Overwrite the caller's own name, department and position."""
    data.require(("first_name", "last_name"), "First name and last name are required")

    user = await db.scalar(
        select(User).where(
            User.id == principal.user_id,
            User.company_id == principal.company_id,
        )
    )
    if user is None:
        raise NotFound("User not found")

    user.first_name = data.first_name
    user.last_name = data.last_name
    user.department = data.department
    user.position = data.position
    user.updated_at = func.now()
    await db.commit()
    await db.refresh(user)

    return {
        "message": "Profile updated successfully",
        "user": {
            "id": user.id,
            "firstName": user.first_name,
            "lastName": user.last_name,
            "department": user.department,
            "position": user.position,
            "updatedAt": isoformat(user.updated_at),
        },
    }
