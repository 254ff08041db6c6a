"""
Authentication dependency for verifying caller identity.

For every protected request this:
1. Extracts the bearer token from the Authorization header
2. Verifies its signature and expiry
3. Resolves the token subject to a live user joined with its company
4. Publishes the resolved principal on request.state

There is no session cache: each request re-reads the user
and company rows, so deactivating either revokes access immediately.
"""

import logging
from dataclasses import dataclass
from typing import Optional

import jwt
from fastapi import Depends, Request
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from core.exceptions import InvalidToken, MissingToken, PrincipalNotFound, Unauthenticated
from core.security import JWTPayload, verify_jwt_token
from database.engine import get_db
from database.models.companies import Company
from database.models.users import User

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Principal:
    """Authenticated user together with the company that owns it."""

    user: User
    company: Company

    @property
    def user_id(self) -> int:
        return self.user.id

    @property
    def company_id(self) -> Optional[int]:
        return self.user.company_id

    @property
    def role(self) -> str:
        return self.user.role


def extract_token(authorization: Optional[str]) -> Optional[str]:
    """
    Extract a JWT from an Authorization header value.

    Args:
        authorization: Raw header value, e.g. "Bearer <token>"

    Returns:
        The token, or None if the header is absent or not a bearer header
    """
    if not authorization:
        return None

    scheme, _, token = authorization.partition(" ")
    if scheme.lower() != "bearer" or not token.strip():
        return None

    return token.strip()


def subject_from_payload(payload: JWTPayload) -> int:
    """Return the user id embedded in a verified token payload."""
    user_id = payload.get("userId")
    # bool is an int subclass; reject it explicitly
    if isinstance(user_id, bool) or not isinstance(user_id, int):
        raise InvalidToken()
    return user_id


def decode_session_token(token: str, secret: str, algorithm: str) -> int:
    """
    Verify a session token and return its subject.

    Raises:
        InvalidToken: On bad signature, expiry or malformed payload
    """
    try:
        payload = verify_jwt_token(token, secret, algorithm)
    except jwt.ExpiredSignatureError:
        logger.info("Expired session token presented")
        raise InvalidToken()
    except jwt.InvalidTokenError as e:
        logger.warning(f"Invalid session token: {e}")
        raise InvalidToken()

    return subject_from_payload(payload)


async def load_principal(db: AsyncSession, user_id: int) -> Principal:
    """
    Resolve a user id to an active user of an active company.

    One query; a missing user, an inactive user and an inactive company
    are indistinguishable to the caller.

    Raises:
        PrincipalNotFound: If no live user/company pair matches
    """
    result = await db.execute(
        select(User, Company)
        .join(Company, User.company_id == Company.id)
        .where(
            User.id == user_id,
            User.is_active.is_(True),
            Company.is_active.is_(True),
        )
    )
    row = result.first()

    if row is None:
        logger.warning(f"Token subject {user_id} has no active user/company")
        raise PrincipalNotFound()

    user, company = row
    return Principal(user=user, company=company)


async def authenticate(
    request: Request,
    db: AsyncSession = Depends(get_db),
) -> Principal:
    """
    FastAPI dependency: authenticate the caller and attach the principal.

    Raises:
        MissingToken: No bearer token supplied (401)
        InvalidToken: Bad signature, expired or malformed token (403)
        PrincipalNotFound: User or company missing or inactive (401)
    """
    token = extract_token(request.headers.get("Authorization"))
    if not token:
        raise MissingToken()

    settings = request.app.state.settings
    user_id = decode_session_token(token, settings.jwt_secret, settings.jwt_algorithm)

    principal = await load_principal(db, user_id)
    request.state.principal = principal
    return principal


def get_current_principal(request: Request) -> Principal:
    """
    Get the principal attached by `authenticate`.

    Raises:
        Unauthenticated: If authentication has not run for this request
    """
    principal = getattr(request.state, "principal", None)
    if principal is None:
        raise Unauthenticated()
    return principal
