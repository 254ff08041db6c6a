"""Common Pydantic schemas shared across the API."""

from typing import Any, Iterable, Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from core.exceptions import ValidationError


class CamelModel(BaseModel):
    """Request model whose JSON keys are camelCase (firstName, salaryMin, ...)."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        str_strip_whitespace=True,
        extra="ignore",
    )

    def missing_fields(self, fields: Iterable[str]) -> list[str]:
        """camelCase names of the given fields that are absent or blank."""
        missing = []
        for name in fields:
            value = getattr(self, name)
            if value is None or (isinstance(value, str) and not value):
                missing.append(to_camel(name))
        return missing

    def require(self, fields: Iterable[str], message: str = "Missing required fields") -> None:
        """
        Raises:
            ValidationError: Naming every missing field in `missing`, and
                the full required set in `required`
        """
        fields = list(fields)
        missing = self.missing_fields(fields)
        if missing:
            raise ValidationError(
                message,
                required=[to_camel(name) for name in fields],
                missing=missing,
            )


def check_choice(value: Optional[str], choices: Iterable[Any], field: str) -> None:
    """
    Raises:
        ValidationError: If value is set and not one of choices
    """
    valid = [getattr(choice, "value", choice) for choice in choices]
    if value is not None and value not in valid:
        raise ValidationError(f"Invalid {field}", field=field, validValues=valid)


class ErrorResponse(BaseModel):
    """Error response model."""

    error: str = Field(description="Human readable error message")
    code: Optional[str] = Field(None, description="Error code for programmatic handling")
