"""
Jobs Module

Job postings owned by a company. Only active postings accept public
applications; status changes are otherwise unrestricted.
"""

from datetime import datetime
from decimal import Decimal
from enum import Enum as PyEnum
from typing import TYPE_CHECKING

from sqlalchemy import (
    DateTime,
    Enum as SQLEnum,
    ForeignKey,
    Index,
    Integer,
    Numeric,
    String,
    Text,
    func,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship

from database.engine import Base

if TYPE_CHECKING:
    from database.models.applications import Application
    from database.models.companies import Company
    from database.models.users import User


# ==================== Job Enums ===================== #
class JobStatus(str, PyEnum):
    """Job posting status."""

    ACTIVE = "active"
    PAUSED = "paused"
    CLOSED = "closed"


class EmploymentType(str, PyEnum):
    """Job employment type."""

    FULL_TIME = "full-time"
    PART_TIME = "part-time"
    CONTRACT = "contract"
    INTERNSHIP = "internship"


def _enum_values(enum_cls: type[PyEnum]) -> list[str]:
    return [member.value for member in enum_cls]


class Job(Base):
    """Job posting scoped to one company."""

    __tablename__: str = "jobs"
    __table_args__ = (
        Index("idx_jobs_company_status", "company_id", "status"),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    company_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("companies.id", ondelete="CASCADE"), nullable=False, index=True
    )
    title: Mapped[str] = mapped_column(String(255), nullable=False)
    description: Mapped[str] = mapped_column(Text, nullable=False)
    department: Mapped[str | None] = mapped_column(String(100))
    location: Mapped[str | None] = mapped_column(String(255))
    employment_type: Mapped[EmploymentType] = mapped_column(
        SQLEnum(
            EmploymentType,
            native_enum=False,
            length=20,
            values_callable=_enum_values,
        ),
        nullable=False,
        default=EmploymentType.FULL_TIME,
        server_default=EmploymentType.FULL_TIME.value,
    )
    status: Mapped[JobStatus] = mapped_column(
        SQLEnum(
            JobStatus,
            native_enum=False,
            length=20,
            values_callable=_enum_values,
        ),
        nullable=False,
        default=JobStatus.ACTIVE,
        server_default=JobStatus.ACTIVE.value,
    )
    salary_min: Mapped[Decimal | None] = mapped_column(Numeric(12, 2))
    salary_max: Mapped[Decimal | None] = mapped_column(Numeric(12, 2))
    requirements: Mapped[str | None] = mapped_column(Text)
    benefits: Mapped[str | None] = mapped_column(Text)
    posted_by: Mapped[int | None] = mapped_column(
        Integer, ForeignKey("users.id", ondelete="SET NULL")
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, server_default=func.now()
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        server_default=func.now(),
        onupdate=func.now(),
    )

    company: Mapped["Company"] = relationship(back_populates="jobs")
    poster: Mapped["User | None"] = relationship()
    applications: Mapped[list["Application"]] = relationship(
        back_populates="job",
        cascade="all, delete-orphan",
        passive_deletes=True,
    )

    def __repr__(self) -> str:
        return f"<Job id={self.id} company_id={self.company_id} status={self.status}>"
