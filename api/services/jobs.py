"""Job service functions."""

from typing import Any, Dict, List, Optional
import logging

from sqlalchemy import delete, func, select
from sqlalchemy.ext.asyncio import AsyncSession

from api.schemas.common import check_choice
from api.schemas.jobs import JobCreateRequest, JobUpdateRequest
from api.services import as_decimal, as_number, enum_value, isoformat
from core.exceptions import NotFound
from core.middleware.authentication import Principal
from database.models.applications import Application
from database.models.jobs import EmploymentType, Job, JobStatus
from database.models.users import User

logger = logging.getLogger(__name__)


def _application_count(company_id: int):
    return (
        select(func.count(Application.id))
        .where(Application.job_id == Job.id, Application.company_id == company_id)
        .correlate(Job)
        .scalar_subquery()
        .label("application_count")
    )


def _scoped_job_query(company_id: int):
    """Jobs of one company with poster name and application count."""
    return (
        select(Job, User.first_name, User.last_name, _application_count(company_id))
        .outerjoin(User, Job.posted_by == User.id)
        .where(Job.company_id == company_id)
    )


def poster_name(first_name: Optional[str], last_name: Optional[str]) -> str:
    if first_name and last_name:
        return f"{first_name} {last_name}"
    return "Unknown"


def job_to_dict(
    job: Job,
    first_name: Optional[str],
    last_name: Optional[str],
    application_count: int,
    detail: bool = False,
) -> Dict[str, Any]:
    data = {
        "id": job.id,
        "title": job.title,
        "department": job.department,
        "location": job.location,
        "employmentType": enum_value(job.employment_type),
        "status": enum_value(job.status),
        "salaryMin": as_number(job.salary_min),
        "salaryMax": as_number(job.salary_max),
        "applicationCount": int(application_count or 0),
        "postedBy": poster_name(first_name, last_name),
        "createdAt": isoformat(job.created_at),
        "updatedAt": isoformat(job.updated_at),
    }
    if detail:
        data["description"] = job.description
        data["requirements"] = job.requirements
        data["benefits"] = job.benefits
    return data


async def list_jobs(
    db: AsyncSession,
    company_id: int,
    status: Optional[str] = None,
    department: Optional[str] = None,
) -> Dict[str, List[Dict[str, Any]]]:
    """List a company's jobs, newest first."""
    check_choice(status, JobStatus, "status")

    query = _scoped_job_query(company_id)
    if status:
        query = query.where(Job.status == JobStatus(status))
    if department:
        query = query.where(Job.department == department)
    query = query.order_by(Job.created_at.desc(), Job.id.desc())

    result = await db.execute(query)
    return {"jobs": [job_to_dict(*row) for row in result.all()]}


async def get_job(db: AsyncSession, company_id: int, job_id: int) -> Dict[str, Any]:
    """
    Raises:
        NotFound: Job missing or owned by another company
    """
    result = await db.execute(_scoped_job_query(company_id).where(Job.id == job_id))
    row = result.first()
    if row is None:
        raise NotFound("Job not found")
    return {"job": job_to_dict(*row, detail=True)}


async def _get_scoped_job(db: AsyncSession, company_id: int, job_id: int) -> Job:
    job = await db.scalar(
        select(Job).where(Job.id == job_id, Job.company_id == company_id)
    )
    if job is None:
        raise NotFound("Job not found")
    return job


async def create_job(
    db: AsyncSession,
    principal: Principal,
    company_id: int,
    data: JobCreateRequest,
) -> Dict[str, Any]:
    """Create a job owned by the caller's company and posted by the caller."""
    data.validate_for_create()

    job = Job(
        company_id=company_id,
        title=data.title,
        description=data.description,
        department=data.department,
        location=data.location,
        employment_type=EmploymentType(data.employment_type),
        salary_min=as_decimal(data.salary_min),
        salary_max=as_decimal(data.salary_max),
        requirements=data.requirements,
        benefits=data.benefits,
        posted_by=principal.user_id,
    )
    db.add(job)
    await db.commit()
    await db.refresh(job)

    logger.info(f"User {principal.user_id} created job {job.id} for company {company_id}")
    user = principal.user
    return {
        "message": "Job created successfully",
        "job": job_to_dict(job, user.first_name, user.last_name, 0, detail=True),
    }


async def update_job(
    db: AsyncSession,
    company_id: int,
    job_id: int,
    data: JobUpdateRequest,
) -> Dict[str, Any]:
    """
    Replace every editable field of a job.

    Raises:
        NotFound: Job missing or owned by another company
    """
    data.validate_for_update()
    job = await _get_scoped_job(db, company_id, job_id)

    job.title = data.title
    job.description = data.description
    job.department = data.department
    job.location = data.location
    job.employment_type = EmploymentType(data.employment_type)
    job.salary_min = as_decimal(data.salary_min)
    job.salary_max = as_decimal(data.salary_max)
    job.requirements = data.requirements
    job.benefits = data.benefits
    job.status = JobStatus(data.status)
    job.updated_at = func.now()
    await db.commit()

    result = await db.execute(_scoped_job_query(company_id).where(Job.id == job_id))
    logger.info(f"Job {job_id} of company {company_id} updated (status={data.status})")
    return {"message": "Job updated successfully", "job": job_to_dict(*result.one(), detail=True)}


async def delete_job(db: AsyncSession, company_id: int, job_id: int) -> List[str]:
    """
    Delete a job and its applications.

    Returns:
        Resume filenames that belonged to the deleted applications

    Raises:
        NotFound: Job missing or owned by another company
    """
    await _get_scoped_job(db, company_id, job_id)

    resumes = await db.scalars(
        select(Application.resume_filename).where(
            Application.job_id == job_id,
            Application.company_id == company_id,
            Application.resume_filename.is_not(None),
        )
    )
    resume_files = list(resumes)

    await db.execute(
        delete(Application).where(
            Application.job_id == job_id, Application.company_id == company_id
        )
    )
    await db.execute(delete(Job).where(Job.id == job_id, Job.company_id == company_id))
    await db.commit()

    logger.info(f"Job {job_id} of company {company_id} deleted")
    return resume_files
