"""
Job posting management endpoints.

Listing and reading jobs needs only a company-scoped caller; writes and
everything touching applications need an elevated role. Applying to a
job is public.
"""

import logging
from typing import Optional

from fastapi import APIRouter, Depends, File, Form, Path, Query, UploadFile, status
from fastapi.responses import FileResponse
from sqlalchemy.ext.asyncio import AsyncSession

from api.dependencies import get_app_settings, get_storage
from api.schemas.jobs import ApplicationStatusUpdate, JobCreateRequest, JobUpdateRequest
from api.services import applications as application_service
from api.services import jobs as job_service
from core.config import Settings
from core.middleware.authentication import Principal
from core.middleware.authorization import require_hr_or_admin
from core.middleware.error_handling import handler_boundary
from core.middleware.tenancy import require_tenant
from core.storage.local import ResumeStorage
from database.engine import get_db

logger = logging.getLogger(__name__)

router = APIRouter(tags=["jobs"])


# ==================== Public ==================== #

@router.post(
    "/{job_id}/apply",
    status_code=status.HTTP_201_CREATED,
    summary="Apply To Job",
    description="Public multipart endpoint; the optional `resume` file must be PDF, DOC or DOCX.",
)
@handler_boundary("Failed to submit application")
async def apply_to_job(
    job_id: int = Path(..., description="Job ID"),
    first_name: Optional[str] = Form(None, alias="firstName"),
    last_name: Optional[str] = Form(None, alias="lastName"),
    email: Optional[str] = Form(None),
    phone: Optional[str] = Form(None),
    cover_letter: Optional[str] = Form(None, alias="coverLetter"),
    resume: Optional[UploadFile] = File(None),
    db: AsyncSession = Depends(get_db),
    storage: ResumeStorage = Depends(get_storage),
):
    form = application_service.ApplyForm(
        first_name=first_name,
        last_name=last_name,
        email=email,
        phone=phone,
        cover_letter=cover_letter,
    )
    return await application_service.apply_to_job(db, storage, job_id, form, resume)


# ==================== Applications (elevated) ==================== #

@router.put("/applications/{application_id}/status", summary="Update Application Status")
@handler_boundary("Failed to update application status")
async def update_application_status(
    body: ApplicationStatusUpdate,
    application_id: int = Path(..., description="Application ID"),
    _: Principal = Depends(require_hr_or_admin),
    company_id: int = Depends(require_tenant),
    db: AsyncSession = Depends(get_db),
    settings: Settings = Depends(get_app_settings),
):
    return await application_service.update_application_status(
        db,
        company_id,
        application_id,
        body,
        enforce_transitions=settings.enforce_application_transitions,
    )


@router.get("/applications/{application_id}/resume", summary="Download Resume")
@handler_boundary("Failed to fetch resume")
async def download_resume(
    application_id: int = Path(..., description="Application ID"),
    _: Principal = Depends(require_hr_or_admin),
    company_id: int = Depends(require_tenant),
    db: AsyncSession = Depends(get_db),
    storage: ResumeStorage = Depends(get_storage),
):
    path, download_name = await application_service.get_resume_path(
        db, storage, company_id, application_id
    )
    return FileResponse(path, filename=download_name)


@router.get("/{job_id}/applications", summary="List Job Applications")
@handler_boundary("Failed to fetch applications")
async def list_applications(
    job_id: int = Path(..., description="Job ID"),
    status_filter: Optional[str] = Query(None, alias="status", description="Filter by status"),
    _: Principal = Depends(require_hr_or_admin),
    company_id: int = Depends(require_tenant),
    db: AsyncSession = Depends(get_db),
    storage: ResumeStorage = Depends(get_storage),
):
    return await application_service.list_applications(
        db, storage, company_id, job_id, status_filter
    )


# ==================== Jobs ==================== #

@router.get("", summary="List Jobs")
@handler_boundary("Failed to fetch jobs")
async def list_jobs(
    status_filter: Optional[str] = Query(
        None, alias="status", description="Filter by status (active, paused, closed)"
    ),
    department: Optional[str] = Query(None, description="Filter by department"),
    company_id: int = Depends(require_tenant),
    db: AsyncSession = Depends(get_db),
):
    """Jobs of the caller's company, newest first."""
    return await job_service.list_jobs(db, company_id, status_filter, department)


@router.get("/{job_id}", summary="Get Job Details")
@handler_boundary("Failed to fetch job")
async def get_job(
    job_id: int = Path(..., description="Job ID"),
    company_id: int = Depends(require_tenant),
    db: AsyncSession = Depends(get_db),
):
    return await job_service.get_job(db, company_id, job_id)


@router.post("", status_code=status.HTTP_201_CREATED, summary="Create Job")
@handler_boundary("Failed to create job")
async def create_job(
    body: JobCreateRequest,
    principal: Principal = Depends(require_hr_or_admin),
    company_id: int = Depends(require_tenant),
    db: AsyncSession = Depends(get_db),
):
    return await job_service.create_job(db, principal, company_id, body)


@router.put("/{job_id}", summary="Update Job")
@handler_boundary("Failed to update job")
async def update_job(
    body: JobUpdateRequest,
    job_id: int = Path(..., description="Job ID"),
    _: Principal = Depends(require_hr_or_admin),
    company_id: int = Depends(require_tenant),
    db: AsyncSession = Depends(get_db),
):
    return await job_service.update_job(db, company_id, job_id, body)


@router.delete("/{job_id}", summary="Delete Job")
@handler_boundary("Failed to delete job")
async def delete_job(
    job_id: int = Path(..., description="Job ID"),
    _: Principal = Depends(require_hr_or_admin),
    company_id: int = Depends(require_tenant),
    db: AsyncSession = Depends(get_db),
    storage: ResumeStorage = Depends(get_storage),
):
    """Delete a job together with its applications and their resume files."""
    resume_files = await job_service.delete_job(db, company_id, job_id)
    for filename in resume_files:
        try:
            storage.delete(filename)
        except OSError as e:
            logger.warning(f"Could not remove resume {filename} of deleted job {job_id}: {e}")
    return {"message": "Job deleted successfully"}
