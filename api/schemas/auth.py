"""Request models for registration, login and profile updates."""

from typing import Any, Optional

from pydantic import ConfigDict, ValidationInfo, field_validator

from api.schemas.common import CamelModel

REGISTER_REQUIRED = (
    "company_name",
    "subdomain",
    "email",
    "password",
    "first_name",
    "last_name",
)


class CredentialsModel(CamelModel):
    """Trims text fields except the password, which is kept as sent."""

    model_config = ConfigDict(str_strip_whitespace=False)

    @field_validator("*")
    @classmethod
    def strip_non_secret(cls, value: Any, info: ValidationInfo) -> Any:
        if info.field_name != "password" and isinstance(value, str):
            return value.strip()
        return value


class RegisterRequest(CredentialsModel):
    """Company signup together with its first admin user."""

    company_name: Optional[str] = None
    subdomain: Optional[str] = None
    email: Optional[str] = None
    password: Optional[str] = None
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    phone: Optional[str] = None
    address: Optional[str] = None


class LoginRequest(CredentialsModel):
    email: Optional[str] = None
    password: Optional[str] = None


class ProfileUpdateRequest(CamelModel):
    """Self-service profile fields. Omitted fields are cleared."""

    first_name: Optional[str] = None
    last_name: Optional[str] = None
    department: Optional[str] = None
    position: Optional[str] = None
