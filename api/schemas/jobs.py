"""Request models for job postings and application status changes."""

from typing import Optional

from api.schemas.common import CamelModel, check_choice
from core.exceptions import ValidationError
from database.models.applications import ApplicationStatus
from database.models.jobs import EmploymentType, JobStatus


class JobCreateRequest(CamelModel):
    title: Optional[str] = None
    description: Optional[str] = None
    department: Optional[str] = None
    location: Optional[str] = None
    employment_type: Optional[str] = EmploymentType.FULL_TIME.value
    salary_min: Optional[float] = None
    salary_max: Optional[float] = None
    requirements: Optional[str] = None
    benefits: Optional[str] = None

    def validate_for_create(self) -> None:
        self.require(("title", "description"), "Title and description are required")
        if self.employment_type is None:
            self.employment_type = EmploymentType.FULL_TIME.value
        self._validate_common()

    def _validate_common(self) -> None:
        check_choice(self.employment_type, EmploymentType, "employmentType")
        if (
            self.salary_min is not None
            and self.salary_max is not None
            and self.salary_min > self.salary_max
        ):
            raise ValidationError("salaryMin cannot exceed salaryMax")


class JobUpdateRequest(JobCreateRequest):
    """Full replacement of a job posting's editable fields."""

    employment_type: Optional[str] = None
    status: Optional[str] = None

    def validate_for_update(self) -> None:
        self.require(("title", "description", "employment_type", "status"))
        check_choice(self.status, JobStatus, "status")
        self._validate_common()


class ApplicationStatusUpdate(CamelModel):
    status: Optional[str] = None
    notes: Optional[str] = None

    def validate_status(self) -> ApplicationStatus:
        valid = [s.value for s in ApplicationStatus]
        if self.status not in valid:
            raise ValidationError("Invalid status", validStatuses=valid)
        return ApplicationStatus(self.status)
