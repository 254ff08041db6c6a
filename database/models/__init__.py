from database.models.companies import Company
from database.models.users import User, UserRole
from database.models.jobs import Job, JobStatus, EmploymentType
from database.models.applications import (
    Application,
    ApplicationStatus,
    APPLICATION_TRANSITIONS,
)

__all__ = [
    "Company",
    "User",
    "UserRole",
    "Job",
    "JobStatus",
    "EmploymentType",
    "Application",
    "ApplicationStatus",
    "APPLICATION_TRANSITIONS",
]
