"""Shared fixtures and utilities for tests."""

import os
from typing import Callable, Optional

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import update
from sqlalchemy.pool import StaticPool

# Settings require a signing secret; set it before anything reads the environment
os.environ.setdefault("JWT_SECRET", "test-jwt-secret-key-min-32-chars-long-for-security")

from api.main import create_app  # noqa: E402
from core.config import Settings  # noqa: E402
from core.security import create_access_token, hash_password  # noqa: E402
from database.engine import Database  # noqa: E402
from database.models.companies import Company  # noqa: E402
from database.models.users import User  # noqa: E402

TEST_SECRET = "test-jwt-secret-key-min-32-chars-long-for-security"
TEST_PASSWORD = "secret1"


def _create_minimal_pdf(text: str = "Test PDF") -> bytes:
    """Create a tiny but well-formed PDF document."""
    stream = f"BT /F1 12 Tf 72 720 Td ({text}) Tj ET".encode()
    return (
        b"%PDF-1.4\n"
        b"1 0 obj << /Type /Catalog /Pages 2 0 R >> endobj\n"
        b"2 0 obj << /Type /Pages /Kids [3 0 R] /Count 1 >> endobj\n"
        b"3 0 obj << /Type /Page /Parent 2 0 R /Contents 4 0 R >> endobj\n"
        b"4 0 obj << /Length " + str(len(stream)).encode() + b" >> stream\n"
        + stream
        + b"\nendstream endobj\ntrailer << /Root 1 0 R >>\n%%EOF\n"
    )


@pytest.fixture
def minimal_pdf() -> bytes:
    """Fixture providing a minimal valid PDF."""
    return _create_minimal_pdf()


@pytest.fixture
def settings(tmp_path) -> Settings:
    """Settings isolated from the developer's .env and environment."""
    return Settings(
        _env_file=None,
        JWT_SECRET=TEST_SECRET,
        APP_ENV="development",
        JSON_LOGS=False,
        LOG_LEVEL="WARNING",
        UPLOAD_DIR=str(tmp_path / "uploads"),
    )


@pytest.fixture
def database() -> Database:
    """In-memory SQLite standing in for PostgreSQL; one shared connection."""
    return Database("sqlite+aiosqlite:///:memory:", poolclass=StaticPool)


@pytest.fixture
def app(settings, database):
    return create_app(settings, database=database)


@pytest.fixture
def client(app):
    """Test client with the lifespan (table creation) running."""
    with TestClient(app) as test_client:
        yield test_client


def _auth_headers(token: str) -> dict:
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def auth_headers() -> Callable[[str], dict]:
    return _auth_headers


@pytest.fixture
def register(client) -> Callable[..., dict]:
    """Register a company with an admin user; returns the response body."""

    def _register(
        subdomain: str = "acme",
        email: Optional[str] = None,
        company_name: Optional[str] = None,
    ) -> dict:
        response = client.post(
            "/api/auth/register",
            json={
                "companyName": company_name or subdomain.title(),
                "subdomain": subdomain,
                "email": email or f"admin@{subdomain}.com",
                "password": TEST_PASSWORD,
                "firstName": "Ada",
                "lastName": "Admin",
            },
        )
        assert response.status_code == 201, response.text
        return response.json()

    return _register


@pytest.fixture
def add_user(client, database, settings) -> Callable[..., str]:
    """Insert a user directly into a company; returns a session token for it."""

    async def _insert(company_id: int, email: str, role: str) -> int:
        async with database.transaction() as db:
            user = User(
                company_id=company_id,
                email=email,
                password_hash=hash_password(TEST_PASSWORD),
                first_name="Eve",
                last_name="Member",
                role=role,
            )
            db.add(user)
            await db.flush()
            return user.id

    def _add_user(company_id: int, email: str, role: str = "employee") -> str:
        user_id = client.portal.call(_insert, company_id, email, role)
        return create_access_token(user_id, settings.jwt_secret, expires_in="1h")

    return _add_user


@pytest.fixture
def deactivate_company(client, database) -> Callable[[int], None]:
    async def _deactivate(company_id: int) -> None:
        async with database.transaction() as db:
            await db.execute(
                update(Company).where(Company.id == company_id).values(is_active=False)
            )

    def _call(company_id: int) -> None:
        client.portal.call(_deactivate, company_id)

    return _call


@pytest.fixture
def create_job(client) -> Callable[..., dict]:
    """Create a job as the given admin token; returns the job body."""

    def _create_job(token: str, **fields) -> dict:
        payload = {"title": "Engineer", "description": "Build stuff"}
        payload.update(fields)
        response = client.post("/api/jobs", json=payload, headers=_auth_headers(token))
        assert response.status_code == 201, response.text
        return response.json()["job"]

    return _create_job


@pytest.fixture
def apply(client, minimal_pdf) -> Callable:
    """Submit a public application; returns the raw response."""

    def _apply(job_id: int, resume: Optional[tuple] = ("cv.pdf", None, "application/pdf"), **fields):
        data = {"firstName": "Jane", "lastName": "Doe", "email": "jane@example.com"}
        data.update(fields)
        files = None
        if resume is not None:
            name, content, content_type = resume
            files = {"resume": (name, content if content is not None else minimal_pdf, content_type)}
        return client.post(f"/api/jobs/{job_id}/apply", data=data, files=files)

    return _apply
