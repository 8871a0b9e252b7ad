"""
Readiness Checker

Read-only orchestration of the evaluator against the applicant's current data:
- check_readiness()    : reasons, blocking flag, ready flag, custom fields
- get_missing_fields() : per-section form descriptors for the fixable gaps

Nothing here writes; each call runs in its own short read transaction.
"""

import logging
from typing import Dict, List, Optional, Tuple

from app.core.exceptions import JobClosedError, NotFoundError
from app.db.gateway import PlacementGateway
from app.db.postgres import transaction
from app.models.eligibility import EvaluationStage, ReasonCategory
from app.models.profile import MergedProfile
from app.models.requirements import JobPosting, RequirementSpec
from app.schemas.schemas import (
    FieldDescriptor, MissingFieldsResponse, MissingSection, ReadinessResponse
)
from app.services.eligibility_service import evaluate
from app.services.field_registry import (
    CONDITIONAL_FIELDS, FIELD_FORMS, SECTION_FIELDS, SECTION_LABELS, SECTION_ORDER,
    SECTION_REQUIREMENTS, humanize
)

logger = logging.getLogger(__name__)


def load_evaluation_inputs(
    gateway: PlacementGateway, job_id: int, student_id: int
) -> Tuple[JobPosting, Optional[RequirementSpec], MergedProfile]:
    """Fetch (job, spec, merged profile); inactive jobs count as missing."""
    job = gateway.get_job(job_id)
    if job is None or not job.is_active:
        raise JobClosedError()

    student = gateway.get_student(student_id)
    if student is None:
        raise NotFoundError("Student profile not found")

    spec = gateway.get_requirement_spec(job_id)
    profile = MergedProfile(student, gateway.get_extended_profile(student_id))
    return job, spec, profile


def check_readiness(job_id: int, student_id: int) -> ReadinessResponse:
    with transaction() as db:
        job, spec, profile = load_evaluation_inputs(PlacementGateway(db), job_id, student_id)

    verdict = evaluate(job, spec, profile, EvaluationStage.precheck)

    if verdict.ready:
        message = "You can apply for this job"
    elif verdict.has_blocking_issues:
        message = "You do not meet the eligibility criteria for this job"
    else:
        message = "Please complete some additional information before applying"

    logger.info(
        "Readiness job=%s student=%s ready=%s blocking=%s reasons=%d",
        job_id, student_id, verdict.ready, verdict.has_blocking_issues, len(verdict.reasons)
    )

    return ReadinessResponse(
        job_id=job_id,
        student_id=student_id,
        ready_to_apply=verdict.ready,
        has_blocking_issues=verdict.has_blocking_issues,
        reasons=verdict.reasons,
        custom_fields=spec.custom_fields if spec else [],
        message=message,
    )


def _required_fields(spec: RequirementSpec, section: str) -> set:
    required = set()
    if section in spec.required_sections():
        for group in SECTION_REQUIREMENTS[section]:
            if group.mode == "all":
                required.update(group.fields)
    for name, constraint in spec.specific_field_requirements.items():
        if constraint.required:
            required.add(name)
    return required


def get_missing_fields(job_id: int, student_id: int) -> MissingFieldsResponse:
    """
    Group the fixable (non-blocking) gaps by section, each with every form
    field of that section and its current value.
    """
    with transaction() as db:
        job, spec, profile = load_evaluation_inputs(PlacementGateway(db), job_id, student_id)

    if spec is None:
        return MissingFieldsResponse(job_id=job_id)

    verdict = evaluate(job, spec, profile, EvaluationStage.precheck)

    messages: Dict[str, List[str]] = {}
    for reason in verdict.reasons:
        if reason.blocking or reason.section not in SECTION_FIELDS:
            continue
        if reason.category not in (ReasonCategory.section, ReasonCategory.field_constraint):
            continue
        messages.setdefault(reason.section, []).append(reason.message)

    missing_sections = []
    for section in SECTION_ORDER:
        if section not in messages:
            continue
        required = _required_fields(spec, section)
        fields = []
        for name in SECTION_FIELDS[section]:
            label, input_type = FIELD_FORMS.get(name, (humanize(name), "text"))
            fields.append(FieldDescriptor(
                name=name,
                label=label,
                type=input_type,
                value=profile.resolve_field(name),
                required=name in required,
                conditional=CONDITIONAL_FIELDS.get(name),
            ))
        missing_sections.append(MissingSection(
            section=section,
            label=SECTION_LABELS[section],
            messages=messages[section],
            fields=fields,
        ))

    return MissingFieldsResponse(
        job_id=job_id,
        missing_sections=missing_sections,
        custom_fields=spec.custom_fields,
    )
