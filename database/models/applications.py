"""
Applications Module

Public applications to a job. The owning company is copied from the job
at creation so tenant filters never need a join, and the job/company link
never changes afterwards; only status and notes are mutable.
"""

from datetime import datetime
from enum import Enum as PyEnum
from typing import TYPE_CHECKING

from sqlalchemy import (
    DateTime,
    Enum as SQLEnum,
    ForeignKey,
    Index,
    Integer,
    String,
    Text,
    func,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship

from database.engine import Base

if TYPE_CHECKING:
    from database.models.jobs import Job


# ==================== Application Enums ===================== #
class ApplicationStatus(str, PyEnum):
    """Hiring workflow status of an application."""

    PENDING = "pending"
    REVIEWING = "reviewing"
    INTERVIEW = "interview"
    REJECTED = "rejected"
    HIRED = "hired"


# Forward moves of the hiring workflow. Only consulted when
# ENFORCE_APPLICATION_TRANSITIONS is enabled.
APPLICATION_TRANSITIONS: dict[ApplicationStatus, frozenset[ApplicationStatus]] = {
    ApplicationStatus.PENDING: frozenset(
        {ApplicationStatus.REVIEWING, ApplicationStatus.REJECTED, ApplicationStatus.HIRED}
    ),
    ApplicationStatus.REVIEWING: frozenset(
        {ApplicationStatus.INTERVIEW, ApplicationStatus.REJECTED, ApplicationStatus.HIRED}
    ),
    ApplicationStatus.INTERVIEW: frozenset(
        {ApplicationStatus.REJECTED, ApplicationStatus.HIRED}
    ),
    ApplicationStatus.REJECTED: frozenset(),
    ApplicationStatus.HIRED: frozenset(),
}


class Application(Base):
    """Applicant submission for a job."""

    __tablename__: str = "applications"
    __table_args__ = (
        Index("idx_applications_company_job", "company_id", "job_id"),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    job_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("jobs.id", ondelete="CASCADE"), nullable=False, index=True
    )
    company_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("companies.id", ondelete="CASCADE"), nullable=False, index=True
    )
    first_name: Mapped[str] = mapped_column(String(100), nullable=False)
    last_name: Mapped[str] = mapped_column(String(100), nullable=False)
    email: Mapped[str] = mapped_column(String(255), nullable=False)
    phone: Mapped[str | None] = mapped_column(String(50))
    resume_filename: Mapped[str | None] = mapped_column(String(255))
    cover_letter: Mapped[str | None] = mapped_column(Text)
    status: Mapped[ApplicationStatus] = mapped_column(
        SQLEnum(
            ApplicationStatus,
            native_enum=False,
            length=20,
            values_callable=lambda enum_cls: [m.value for m in enum_cls],
        ),
        nullable=False,
        default=ApplicationStatus.PENDING,
        server_default=ApplicationStatus.PENDING.value,
    )
    notes: Mapped[str | None] = mapped_column(Text)
    applied_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, server_default=func.now()
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        server_default=func.now(),
        onupdate=func.now(),
    )

    job: Mapped["Job"] = relationship(back_populates="applications")

    def __repr__(self) -> str:
        return f"<Application id={self.id} job_id={self.job_id} status={self.status}>"
