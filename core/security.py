"""
Credential and session-token primitives.

Password hashing uses bcrypt with a fixed work factor. Session tokens are
HS256 JWTs carrying the user id and an expiry.
"""

import logging
import re
from datetime import datetime, timedelta, timezone
from typing import Any, Dict

import bcrypt
import jwt
from starlette.concurrency import run_in_threadpool

logger = logging.getLogger("security")

BCRYPT_ROUNDS = 12

# bcrypt only reads the first 72 bytes of a secret; newer releases refuse longer input
BCRYPT_MAX_BYTES = 72

JWTPayload = Dict[str, Any]

_DURATION_RE = re.compile(r"^\s*(\d+)\s*([smhdw]?)\s*$", re.IGNORECASE)
_DURATION_UNITS = {
    "": "seconds",
    "s": "seconds",
    "m": "minutes",
    "h": "hours",
    "d": "days",
    "w": "weeks",
}


def parse_duration(value: str | int) -> timedelta:
    """
    Parse a token lifetime such as "7d", "12h", "30m" or "3600".

    Args:
        value: Duration string or number of seconds

    Returns:
        Equivalent timedelta

    Raises:
        ValueError: If the value is not a recognised duration
    """
    if isinstance(value, int):
        return timedelta(seconds=value)

    match = _DURATION_RE.match(value or "")
    if not match:
        raise ValueError(f"Invalid duration: {value!r}")

    amount, unit = match.groups()
    return timedelta(**{_DURATION_UNITS[unit.lower()]: int(amount)})


def _password_bytes(password: str) -> bytes:
    return password.encode("utf-8")[:BCRYPT_MAX_BYTES]


def hash_password(password: str) -> str:
    """Hash a password with a per-call random salt."""
    salt = bcrypt.gensalt(rounds=BCRYPT_ROUNDS)
    return bcrypt.hashpw(_password_bytes(password), salt).decode("utf-8")


def verify_password(password: str, password_hash: str) -> bool:
    """Compare a plaintext password against a stored bcrypt hash."""
    try:
        return bcrypt.checkpw(_password_bytes(password), password_hash.encode("utf-8"))
    except (ValueError, TypeError):
        # Malformed or missing hash in storage
        logger.warning("Password hash could not be parsed")
        return False


async def hash_password_async(password: str) -> str:
    return await run_in_threadpool(hash_password, password)


async def verify_password_async(password: str, password_hash: str) -> bool:
    return await run_in_threadpool(verify_password, password, password_hash)


def create_access_token(
    user_id: int,
    secret_key: str,
    algorithm: str = "HS256",
    expires_in: str | int = "7d",
) -> str:
    """
    Issue a signed session token bound to a user id.

    Args:
        user_id: Subject of the token
        secret_key: Signing secret
        algorithm: JWT algorithm
        expires_in: Token lifetime (see parse_duration)

    Returns:
        Encoded JWT
    """
    now = datetime.now(timezone.utc)
    payload = {
        "userId": user_id,
        "iat": now,
        "exp": now + parse_duration(expires_in),
    }
    return jwt.encode(payload, secret_key, algorithm=algorithm)


def verify_jwt_token(token: str, secret_key: str, algorithm: str = "HS256") -> JWTPayload:
    """
    Verify signature and expiry of a session token.

    Raises:
        jwt.ExpiredSignatureError: If the token has expired
        jwt.InvalidTokenError: If the token is malformed or tampered with
    """
    return jwt.decode(
        token,
        secret_key,
        algorithms=[algorithm],
        options={"require": ["exp"]},
    )
