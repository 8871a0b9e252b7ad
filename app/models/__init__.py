"""
Models module - Pydantic models for internal data.

These models are used for:
- Rows loaded from the database (profiles, jobs, requirement specs)
- The eligibility verdict passed between services

API request/response contracts live in app.schemas.
"""

from app.models.profile import StudentProfile, ExtendedProfile, MergedProfile
from app.models.requirements import (
    TargetType, FieldConstraint, Criteria, JobPosting, RequirementSpec, CompanyTemplate
)
from app.models.eligibility import EvaluationStage, ReasonCategory, Reason, Verdict

__all__ = [
    "StudentProfile", "ExtendedProfile", "MergedProfile",
    "TargetType", "FieldConstraint", "Criteria", "JobPosting", "RequirementSpec", "CompanyTemplate",
    "EvaluationStage", "ReasonCategory", "Reason", "Verdict",
]
