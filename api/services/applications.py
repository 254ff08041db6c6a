"""
Application service functions.

The public apply flow is the only write path that runs without a
principal; it takes the company id from the job itself.
"""

from pathlib import Path
from typing import Any, Dict, Optional
import logging

from fastapi import UploadFile
from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from api.schemas.common import CamelModel, check_choice
from api.schemas.jobs import ApplicationStatusUpdate
from api.services import enum_value, isoformat
from core.exceptions import NotFound, ValidationError
from core.storage.local import ResumeStorage
from database.models.applications import (
    APPLICATION_TRANSITIONS,
    Application,
    ApplicationStatus,
)
from database.models.jobs import Job, JobStatus

logger = logging.getLogger(__name__)


class ApplyForm(CamelModel):
    """Applicant fields of the multipart apply form."""

    first_name: Optional[str] = None
    last_name: Optional[str] = None
    email: Optional[str] = None
    phone: Optional[str] = None
    cover_letter: Optional[str] = None


def application_to_dict(application: Application, storage: Optional[ResumeStorage] = None) -> Dict[str, Any]:
    resume = application.resume_filename
    return {
        "id": application.id,
        "jobId": application.job_id,
        "firstName": application.first_name,
        "lastName": application.last_name,
        "email": application.email,
        "phone": application.phone,
        "resumeFilename": resume,
        "resumeUrl": storage.url_for(resume) if (storage and resume) else None,
        "coverLetter": application.cover_letter,
        "status": enum_value(application.status),
        "notes": application.notes,
        "appliedAt": isoformat(application.applied_at),
        "updatedAt": isoformat(application.updated_at),
    }


async def apply_to_job(
    db: AsyncSession,
    storage: ResumeStorage,
    job_id: int,
    form: ApplyForm,
    resume: Optional[UploadFile] = None,
) -> Dict[str, Any]:
    """
    Submit a public application to an active job.

    The resume is validated before anything is written, and the stored
    file is removed again if the insert fails.

    Raises:
        ValidationError: Name or email missing
        UnsupportedMedia: Resume is not PDF/DOC/DOCX
        PayloadTooLarge: Resume exceeds the size limit
        NotFound: Job missing or not active (indistinguishable)
    """
    form.require(
        ("first_name", "last_name", "email"),
        "First name, last name, and email are required",
    )

    resume_data = None
    if resume is not None and resume.filename:
        resume_data = await storage.read_upload(resume)

    job = await db.scalar(
        select(Job).where(Job.id == job_id, Job.status == JobStatus.ACTIVE)
    )
    if job is None:
        raise NotFound("Job not found")

    resume_filename = None
    if resume_data is not None:
        resume_filename = await storage.save(resume_data, resume.filename)

    application = Application(
        job_id=job.id,
        company_id=job.company_id,
        first_name=form.first_name,
        last_name=form.last_name,
        email=form.email,
        phone=form.phone,
        resume_filename=resume_filename,
        cover_letter=form.cover_letter,
        status=ApplicationStatus.PENDING,
    )
    try:
        db.add(application)
        await db.commit()
    except Exception:
        if resume_filename:
            storage.delete(resume_filename)
        raise
    await db.refresh(application)

    logger.info(f"Application {application.id} submitted for job {job.id}")
    return {
        "message": "Application submitted successfully",
        "application": {
            "id": application.id,
            "status": enum_value(application.status),
            "appliedAt": isoformat(application.applied_at),
        },
    }


async def list_applications(
    db: AsyncSession,
    storage: ResumeStorage,
    company_id: int,
    job_id: int,
    status: Optional[str] = None,
) -> Dict[str, Any]:
    """
    Applications for one of the company's jobs, newest first.

    Raises:
        NotFound: Job missing or owned by another company
    """
    check_choice(status, ApplicationStatus, "status")

    job_id_found = await db.scalar(
        select(Job.id).where(Job.id == job_id, Job.company_id == company_id)
    )
    if job_id_found is None:
        raise NotFound("Job not found")

    query = select(Application).where(
        Application.job_id == job_id, Application.company_id == company_id
    )
    if status:
        query = query.where(Application.status == ApplicationStatus(status))
    query = query.order_by(Application.applied_at.desc(), Application.id.desc())

    applications = await db.scalars(query)
    return {"applications": [application_to_dict(a, storage) for a in applications]}


def check_transition(current: ApplicationStatus, target: ApplicationStatus) -> None:
    """
    Raises:
        ValidationError: If target is not reachable from current
    """
    if current == target:
        return
    allowed = APPLICATION_TRANSITIONS[current]
    if target not in allowed:
        raise ValidationError(
            f"Cannot move application from {current.value} to {target.value}",
            allowedStatuses=sorted(s.value for s in allowed),
        )


async def update_application_status(
    db: AsyncSession,
    company_id: int,
    application_id: int,
    data: ApplicationStatusUpdate,
    enforce_transitions: bool = False,
) -> Dict[str, Any]:
    """
    Set an application's status and overwrite its notes.

    Raises:
        ValidationError: Unknown status, or a disallowed move when
            transitions are enforced
        NotFound: Application missing or owned by another company
    """
    target = data.validate_status()

    application = await db.scalar(
        select(Application).where(
            Application.id == application_id,
            Application.company_id == company_id,
        )
    )
    if application is None:
        raise NotFound("Application not found")

    if enforce_transitions:
        check_transition(ApplicationStatus(application.status), target)

    previous = enum_value(application.status)
    application.status = target
    application.notes = data.notes
    application.updated_at = func.now()
    await db.commit()
    await db.refresh(application)

    logger.info(
        f"Application {application_id} of company {company_id} moved "
        f"{previous} -> {target.value}"
    )
    return {
        "message": "Application status updated successfully",
        "application": application_to_dict(application),
    }


async def get_resume_path(
    db: AsyncSession,
    storage: ResumeStorage,
    company_id: int,
    application_id: int,
) -> tuple[Path, str]:
    """
    Locate the stored resume of one of the company's applications.

    Returns:
        (path on disk, download filename)

    Raises:
        NotFound: Application outside the company, no resume, or file gone
    """
    application = await db.scalar(
        select(Application).where(
            Application.id == application_id,
            Application.company_id == company_id,
        )
    )
    if application is None or not application.resume_filename:
        raise NotFound("Resume not found")

    path = storage.path_for(application.resume_filename)
    if path is None:
        logger.warning(f"Resume file for application {application_id} is missing on disk")
        raise NotFound("Resume not found")

    download_name = (
        f"{application.first_name}_{application.last_name}_resume{path.suffix}"
    ).replace(" ", "_")
    return path, download_name
