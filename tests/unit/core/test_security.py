"""
Tests for core security utilities.

Tests:
- Password hashing and verification
- Duration parsing for token lifetimes
- Session token creation and validation
"""

import pytest
from datetime import datetime, timedelta, timezone
import jwt as pyjwt

from core.security import (
    BCRYPT_ROUNDS,
    create_access_token,
    hash_password,
    hash_password_async,
    parse_duration,
    verify_jwt_token,
    verify_password,
    verify_password_async,
)

SECRET = "unit-test-secret"


class TestPasswordHashing:
    """Test password hashing and verification."""

    def test_hash_password(self):
        """Test password hashing."""
        hashed = hash_password("secret1")

        assert isinstance(hashed, str)
        assert hashed != "secret1"
        assert hashed.startswith(f"$2b${BCRYPT_ROUNDS}$")

    def test_hash_password_different_each_time(self):
        """Same password, different salts."""
        assert hash_password("secret1") != hash_password("secret1")

    def test_verify_password_success(self):
        hashed = hash_password("secret1")
        assert verify_password("secret1", hashed) is True

    def test_verify_password_failure(self):
        hashed = hash_password("secret1")
        assert verify_password("secret2", hashed) is False

    def test_verify_password_malformed_hash(self):
        """A corrupt stored hash is a failed check, not a crash."""
        assert verify_password("secret1", "not-a-bcrypt-hash") is False

    def test_password_longer_than_bcrypt_limit(self):
        """Only the first 72 bytes take part in hashing and verification."""
        password = "x" * 80
        hashed = hash_password(password)

        assert verify_password(password, hashed) is True
        assert verify_password("x" * 72, hashed) is True
        assert verify_password("x" * 71, hashed) is False

    def test_multibyte_password_over_limit(self):
        password = "é" * 50  # 100 bytes in UTF-8
        hashed = hash_password(password)
        assert verify_password(password, hashed) is True

    @pytest.mark.asyncio
    async def test_async_helpers(self):
        hashed = await hash_password_async("secret1")
        assert await verify_password_async("secret1", hashed) is True
        assert await verify_password_async("wrong", hashed) is False


class TestParseDuration:
    """Test token lifetime parsing."""

    @pytest.mark.parametrize(
        "value,expected",
        [
            ("7d", timedelta(days=7)),
            ("12h", timedelta(hours=12)),
            ("30m", timedelta(minutes=30)),
            ("45s", timedelta(seconds=45)),
            ("1w", timedelta(weeks=1)),
            ("3600", timedelta(seconds=3600)),
            (90, timedelta(seconds=90)),
        ],
    )
    def test_valid_durations(self, value, expected):
        assert parse_duration(value) == expected

    @pytest.mark.parametrize("value", ["", "seven days", "7y", "-1d"])
    def test_invalid_durations(self, value):
        with pytest.raises(ValueError):
            parse_duration(value)


class TestSessionTokens:
    """Test session token creation and verification."""

    def test_token_carries_user_id_and_expiry(self):
        token = create_access_token(42, SECRET)
        payload = verify_jwt_token(token, SECRET)

        assert payload["userId"] == 42
        assert "iat" in payload
        lifetime = payload["exp"] - payload["iat"]
        assert lifetime == int(timedelta(days=7).total_seconds())

    def test_custom_expiry(self):
        token = create_access_token(1, SECRET, expires_in="1h")
        payload = verify_jwt_token(token, SECRET)
        assert payload["exp"] - payload["iat"] == 3600

    def test_wrong_secret_rejected(self):
        token = create_access_token(1, SECRET)
        with pytest.raises(pyjwt.InvalidSignatureError):
            verify_jwt_token(token, "other-secret")

    def test_expired_token_rejected(self):
        past = datetime.now(timezone.utc) - timedelta(hours=2)
        token = pyjwt.encode(
            {"userId": 1, "iat": past, "exp": past + timedelta(hours=1)},
            SECRET,
            algorithm="HS256",
        )
        with pytest.raises(pyjwt.ExpiredSignatureError):
            verify_jwt_token(token, SECRET)

    def test_token_without_expiry_rejected(self):
        token = pyjwt.encode({"userId": 1}, SECRET, algorithm="HS256")
        with pytest.raises(pyjwt.MissingRequiredClaimError):
            verify_jwt_token(token, SECRET)

    def test_tampered_token_rejected(self):
        token = create_access_token(1, SECRET)
        with pytest.raises(pyjwt.InvalidTokenError):
            verify_jwt_token(token[:-2] + "xx", SECRET)
