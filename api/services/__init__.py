"""
Service layer for API endpoints.

Every function that touches a tenant-owned table takes the caller's
company id and filters on it.
"""

from datetime import date, datetime
from decimal import Decimal
from typing import Optional


def isoformat(value: Optional[date | datetime]) -> Optional[str]:
    return value.isoformat() if value else None


def as_number(value: Optional[Decimal]) -> Optional[float]:
    return float(value) if value is not None else None


def enum_value(value) -> Optional[str]:
    return getattr(value, "value", value)


def as_decimal(value: Optional[float]) -> Optional[Decimal]:
    return Decimal(str(value)) if value is not None else None
