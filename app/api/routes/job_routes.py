"""
Job Application Routes (student side)

GET /jobs/{job_id}/readiness - Pre-check eligibility against current profile
GET /jobs/{job_id}/missing-fields - Form descriptors for fixable gaps
POST /jobs/{job_id}/apply - Submit application (with optional profile updates)
"""

from fastapi import APIRouter, Depends

from app.core.auth import get_current_student
from app.services import application_service, readiness_service
from app.schemas.schemas import (
    ApplicationSubmit, ApplicationResult, MissingFieldsResponse, ReadinessResponse
)

router = APIRouter(prefix="/jobs", tags=["Jobs"])


@router.get("/{job_id}/readiness", response_model=ReadinessResponse)
def check_readiness(job_id: int, student: dict = Depends(get_current_student)):
    """Can the student apply right now? Reasons are advisory only."""
    return readiness_service.check_readiness(job_id, student["student_id"])


@router.get("/{job_id}/missing-fields", response_model=MissingFieldsResponse)
def get_missing_fields(job_id: int, student: dict = Depends(get_current_student)):
    return readiness_service.get_missing_fields(job_id, student["student_id"])


@router.post("/{job_id}/apply", response_model=ApplicationResult, status_code=201)
def apply_to_job(
    job_id: int,
    data: ApplicationSubmit,
    student: dict = Depends(get_current_student)
):
    """
    Apply to a job. Eligibility is re-checked on the submitted data:
    - threshold failures (CGPA, backlogs, branch, targeting) record a rejected application
    - field limit failures reject the request (422) and nothing is saved
    """
    return application_service.submit_application(
        job_id,
        student["student_id"],
        profile_updates=data.profile_updates,
        custom_field_responses=data.custom_field_responses,
        additional_data=data.additional_data,
    )
