"""
Job posting and requirement models.

JobPosting      - primary criteria + targeting, straight from the jobs table
RequirementSpec - optional per-job override with secondary/custom requirements
CompanyTemplate - a reusable, unbound RequirementSpec
"""

import json
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Dict, List, Optional
from pydantic import BaseModel, field_validator

from app.services.field_registry import REQUIREMENT_FLAGS, SECTION_ORDER


class TargetType(str, Enum):
    all = "all"
    region = "region"
    college = "college"
    specific = "specific"


def _decode_json(value: Any, default: Any) -> Any:
    """JSON columns may arrive decoded, as text, or as NULL."""
    if value is None or value == "":
        return default
    if isinstance(value, str):
        return json.loads(value)
    return value


def _as_utc(value: datetime) -> datetime:
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


class FieldConstraint(BaseModel):
    min: Optional[float] = None
    max: Optional[float] = None
    required: bool = False


class Criteria(BaseModel):
    """Primary (Tier 1) thresholds shared by jobs, specs and templates."""
    min_cgpa: Optional[float] = None
    max_backlogs: Optional[int] = None
    backlog_max_semester: Optional[int] = None
    allowed_backlog_semesters: List[int] = []
    allowed_branches: List[str] = []

    @field_validator("allowed_backlog_semesters", "allowed_branches", mode="before")
    @classmethod
    def _decode_list(cls, value):
        return _decode_json(value, [])


class JobPosting(Criteria):
    id: int
    job_title: str
    company_name: str
    is_active: bool = True
    application_deadline: Optional[datetime] = None
    target_type: TargetType = TargetType.all
    target_regions: List[int] = []
    target_colleges: List[int] = []

    @field_validator("target_regions", "target_colleges", mode="before")
    @classmethod
    def _decode_ids(cls, value):
        return [int(v) for v in _decode_json(value, [])]

    @field_validator("target_type", mode="before")
    @classmethod
    def _default_target(cls, value):
        return value or TargetType.all

    def deadline_passed(self, now: datetime) -> bool:
        """Naive datetimes (deadline or now) are taken as UTC."""
        if self.application_deadline is None:
            return False
        return _as_utc(self.application_deadline) < _as_utc(now)


class RequirementSpec(Criteria):
    job_id: Optional[int] = None
    requires_academic_extended: bool = False
    requires_physical_details: bool = False
    requires_family_details: bool = False
    requires_personal_details: bool = False
    requires_document_verification: bool = False
    requires_education_preferences: bool = False
    specific_field_requirements: Dict[str, FieldConstraint] = {}
    custom_fields: List[Dict[str, Any]] = []

    @field_validator("specific_field_requirements", mode="before")
    @classmethod
    def _decode_constraints(cls, value):
        return _decode_json(value, {})

    @field_validator("custom_fields", mode="before")
    @classmethod
    def _decode_custom_fields(cls, value):
        return _decode_json(value, [])

    @field_validator(
        "requires_academic_extended", "requires_physical_details", "requires_family_details",
        "requires_personal_details", "requires_document_verification",
        "requires_education_preferences", mode="before"
    )
    @classmethod
    def _null_flag(cls, value):
        return bool(value)

    def required_sections(self) -> List[str]:
        return [s for s in SECTION_ORDER if getattr(self, REQUIREMENT_FLAGS[s])]

    @classmethod
    def from_job(cls, job: JobPosting) -> "RequirementSpec":
        """Spec equivalent of a job that has no stored requirements."""
        return cls(
            job_id=job.id,
            min_cgpa=job.min_cgpa,
            max_backlogs=job.max_backlogs,
            backlog_max_semester=job.backlog_max_semester,
            allowed_backlog_semesters=job.allowed_backlog_semesters,
            allowed_branches=job.allowed_branches,
        )


class CompanyTemplate(RequirementSpec):
    id: int
    template_name: str
    company_name: Optional[str] = None
    description: Optional[str] = None
    created_by: Optional[int] = None
