"""
Requirement Authoring Routes (placement officer / super admin)

GET /requirements/jobs/{job_id} - Stored requirement spec (null if none)
PUT /requirements/jobs/{job_id} - Create or replace the requirement spec
POST /requirements/jobs/{job_id}/apply-template - Copy a template onto the job
GET /requirements/jobs/{job_id}/eligible-count - Eligible approved students
GET /requirements/templates - List templates
POST /requirements/templates - Create template
GET /requirements/templates/{template_id} - Get template
PUT /requirements/templates/{template_id} - Partial update
DELETE /requirements/templates/{template_id} - Delete template
"""

from fastapi import APIRouter, Depends
from typing import List, Optional

from app.core.auth import get_current_officer
from app.services import requirements_service
from app.schemas.schemas import (
    ApplyTemplateRequest, AuthContext, EligibleCountResponse, MessageResponse,
    RequirementSpecPayload, RequirementSpecResponse, TemplateCreate, TemplateResponse,
    TemplateUpdate
)

router = APIRouter(prefix="/requirements", tags=["Requirements"])


@router.get("/jobs/{job_id}", response_model=Optional[RequirementSpecResponse])
def get_job_requirements(job_id: int, officer: AuthContext = Depends(get_current_officer)):
    return requirements_service.get_job_requirements(job_id)


@router.put("/jobs/{job_id}", response_model=RequirementSpecResponse)
def save_job_requirements(
    job_id: int,
    data: RequirementSpecPayload,
    officer: AuthContext = Depends(get_current_officer)
):
    return requirements_service.save_requirement_spec(job_id, data)


@router.post("/jobs/{job_id}/apply-template", response_model=RequirementSpecResponse)
def apply_template(
    job_id: int,
    data: ApplyTemplateRequest,
    officer: AuthContext = Depends(get_current_officer)
):
    """Overwrites the job's spec with every criterion of the template."""
    return requirements_service.apply_template(job_id, data.template_id)


@router.get("/jobs/{job_id}/eligible-count", response_model=EligibleCountResponse)
def get_eligible_count(job_id: int, officer: AuthContext = Depends(get_current_officer)):
    return requirements_service.get_eligible_count(job_id)


@router.get("/templates", response_model=List[TemplateResponse])
def list_templates(officer: AuthContext = Depends(get_current_officer)):
    return requirements_service.list_templates()


@router.post("/templates", response_model=TemplateResponse, status_code=201)
def create_template(data: TemplateCreate, officer: AuthContext = Depends(get_current_officer)):
    return requirements_service.create_template(data, created_by=officer.user_id)


@router.get("/templates/{template_id}", response_model=TemplateResponse)
def get_template(template_id: int, officer: AuthContext = Depends(get_current_officer)):
    return requirements_service.get_template(template_id)


@router.put("/templates/{template_id}", response_model=TemplateResponse)
def update_template(
    template_id: int,
    data: TemplateUpdate,
    officer: AuthContext = Depends(get_current_officer)
):
    return requirements_service.update_template(template_id, data)


@router.delete("/templates/{template_id}", response_model=MessageResponse)
def delete_template(template_id: int, officer: AuthContext = Depends(get_current_officer)):
    requirements_service.delete_template(template_id)
    return MessageResponse(message="Template deleted successfully")
