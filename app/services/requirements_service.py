"""
Requirement Authoring Service

Officer-side operations on job requirement specs and company templates:
- get / save a job's RequirementSpec (upsert on job_id)
- template CRUD
- apply a template onto a job (copies every criterion)
- eligible-count over the approved cohort, using the same evaluator as
  the student-side checks
"""

import logging
from typing import Any, Dict, List, Optional

from app.core.exceptions import DuplicateTemplateError, NotFoundError
from app.db.gateway import CRITERIA_COLUMNS, PlacementGateway
from app.db.postgres import transaction
from app.models.eligibility import EvaluationStage
from app.models.profile import MergedProfile
from app.models.requirements import RequirementSpec
from app.schemas.schemas import (
    EligibleCountResponse, RequirementSpecPayload, RequirementSpecResponse,
    TemplateCreate, TemplateResponse, TemplateUpdate
)
from app.services.eligibility_service import evaluate

logger = logging.getLogger(__name__)

APPROVED = "approved"


def _criteria_values(spec) -> Dict[str, Any]:
    """Criteria columns of a spec/template/payload, JSON-ready."""
    data = spec.model_dump(mode="json")
    return {col: data.get(col) for col in CRITERIA_COLUMNS}


def _spec_response(spec: RequirementSpec) -> RequirementSpecResponse:
    return RequirementSpecResponse(job_id=spec.job_id, **_criteria_values(spec))


def _template_response(template) -> TemplateResponse:
    return TemplateResponse(
        id=template.id,
        template_name=template.template_name,
        company_name=template.company_name,
        description=template.description,
        created_by=template.created_by,
        **_criteria_values(template),
    )


def _require_job(gateway: PlacementGateway, job_id: int):
    job = gateway.get_job(job_id)
    if job is None:
        raise NotFoundError("Job not found")
    return job


# ============================================================
# JOB REQUIREMENT SPECS
# ============================================================

def get_job_requirements(job_id: int) -> Optional[RequirementSpecResponse]:
    with transaction() as db:
        gateway = PlacementGateway(db)
        _require_job(gateway, job_id)
        spec = gateway.get_requirement_spec(job_id)
    return _spec_response(spec) if spec else None


def save_requirement_spec(job_id: int, payload: RequirementSpecPayload) -> RequirementSpecResponse:
    with transaction() as db:
        gateway = PlacementGateway(db)
        _require_job(gateway, job_id)
        spec = gateway.upsert_requirement_spec(job_id, _criteria_values(payload))

    logger.info(
        "Saved requirements for job %s (sections: %s)",
        job_id, ", ".join(spec.required_sections()) or "none"
    )
    return _spec_response(spec)


def apply_template(job_id: int, template_id: int) -> RequirementSpecResponse:
    with transaction() as db:
        gateway = PlacementGateway(db)
        _require_job(gateway, job_id)
        template = gateway.get_template(template_id)
        if template is None:
            raise NotFoundError("Template not found")
        spec = gateway.upsert_requirement_spec(job_id, _criteria_values(template))

    logger.info("Applied template %s (%s) to job %s", template_id, template.template_name, job_id)
    return _spec_response(spec)


# ============================================================
# COMPANY TEMPLATES
# ============================================================

def list_templates() -> List[TemplateResponse]:
    with transaction() as db:
        templates = PlacementGateway(db).list_templates()
    return [_template_response(t) for t in templates]


def get_template(template_id: int) -> TemplateResponse:
    with transaction() as db:
        template = PlacementGateway(db).get_template(template_id)
    if template is None:
        raise NotFoundError("Template not found")
    return _template_response(template)


def create_template(payload: TemplateCreate, created_by: Optional[int] = None) -> TemplateResponse:
    with transaction() as db:
        gateway = PlacementGateway(db)
        if gateway.template_name_exists(payload.template_name):
            raise DuplicateTemplateError()

        template_id = gateway.insert_template({
            "template_name": payload.template_name,
            "company_name": payload.company_name,
            "description": payload.description,
            "created_by": created_by,
            **_criteria_values(payload),
        })
        template = gateway.get_template(template_id)

    logger.info("Created requirement template %s (%s)", template_id, payload.template_name)
    return _template_response(template)


def update_template(template_id: int, payload: TemplateUpdate) -> TemplateResponse:
    # Only supplied values change
    values = payload.model_dump(mode="json", exclude_unset=True)

    with transaction() as db:
        gateway = PlacementGateway(db)
        template = gateway.get_template(template_id)
        if template is None:
            raise NotFoundError("Template not found")

        new_name = values.get("template_name")
        if new_name and new_name != template.template_name and gateway.template_name_exists(new_name):
            raise DuplicateTemplateError()

        if values:
            gateway.update_template(template_id, values)
        template = gateway.get_template(template_id)

    logger.info("Updated requirement template %s: %s", template_id, ", ".join(sorted(values)) or "no changes")
    return _template_response(template)


def delete_template(template_id: int) -> None:
    with transaction() as db:
        if PlacementGateway(db).delete_template(template_id) == 0:
            raise NotFoundError("Template not found")
    logger.info("Deleted requirement template %s", template_id)


# ============================================================
# ELIGIBLE COUNT
# ============================================================

def get_eligible_count(job_id: int) -> EligibleCountResponse:
    """Batch pre-check over every approved student."""
    with transaction() as db:
        gateway = PlacementGateway(db)
        job = _require_job(gateway, job_id)
        spec = gateway.get_requirement_spec(job_id)
        cohort = gateway.list_students(registration_status=APPROVED)
        extended = gateway.list_extended_profiles(s.id for s in cohort)

    eligible = 0
    for student in cohort:
        verdict = evaluate(job, spec, MergedProfile(student, extended.get(student.id)))
        if verdict.eligible:
            eligible += 1

    return EligibleCountResponse(
        job_id=job_id,
        total=len(cohort),
        eligible=eligible,
        ineligible=len(cohort) - eligible,
    )
