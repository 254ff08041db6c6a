"""
Companies Module

The tenant root. Every user, job and application belongs to exactly one
company, and a deactivated company denies access to everything under it.
"""

from datetime import datetime
from typing import TYPE_CHECKING

from sqlalchemy import Boolean, DateTime, Integer, String, Text, func, true
from sqlalchemy.orm import Mapped, mapped_column, relationship

from database.engine import Base

if TYPE_CHECKING:
    from database.models.users import User
    from database.models.jobs import Job


class Company(Base):
    """Tenant company. Subdomains are stored lowercased and globally unique."""

    __tablename__: str = "companies"
    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    subdomain: Mapped[str] = mapped_column(
        String(100), unique=True, nullable=False, index=True
    )
    email: Mapped[str | None] = mapped_column(String(255))
    phone: Mapped[str | None] = mapped_column(String(50))
    address: Mapped[str | None] = mapped_column(Text)
    is_active: Mapped[bool] = mapped_column(
        Boolean, nullable=False, default=True, server_default=true()
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, server_default=func.now()
    )

    users: Mapped[list["User"]] = relationship(back_populates="company")
    jobs: Mapped[list["Job"]] = relationship(back_populates="company")

    def __repr__(self) -> str:
        return f"<Company id={self.id} subdomain={self.subdomain!r}>"
