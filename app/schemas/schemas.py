"""
Pydantic Schemas - Request/Response Validation

All API request and response schemas in one file for simplicity.
"""

from pydantic import BaseModel, Field, field_validator
from typing import Optional, List, Any, Dict
from datetime import datetime
from enum import Enum

from app.models.eligibility import Reason
from app.models.requirements import FieldConstraint


# ============================================================
# ENUMS
# ============================================================

class UserRole(str, Enum):
    student = "student"
    placement_officer = "placement_officer"
    super_admin = "super_admin"


class ApplicationStatus(str, Enum):
    submitted = "submitted"
    rejected = "rejected"


# ============================================================
# AUTH
# ============================================================

class AuthContext(BaseModel):
    user_id: int
    role: str


# ============================================================
# READINESS SCHEMAS
# ============================================================

class ReadinessResponse(BaseModel):
    job_id: int
    student_id: int
    ready_to_apply: bool
    has_blocking_issues: bool
    reasons: List[Reason] = []
    custom_fields: List[Dict[str, Any]] = []
    message: str


class FieldDescriptor(BaseModel):
    name: str
    label: str
    type: str
    value: Optional[Any] = None
    required: bool = False
    conditional: Optional[str] = None


class MissingSection(BaseModel):
    section: str
    label: str
    messages: List[str] = []
    fields: List[FieldDescriptor] = []


class MissingFieldsResponse(BaseModel):
    job_id: int
    missing_sections: List[MissingSection] = []
    custom_fields: List[Dict[str, Any]] = []


# ============================================================
# APPLICATION SCHEMAS
# ============================================================

class ApplicationSubmit(BaseModel):
    profile_updates: Dict[str, Any] = {}
    custom_field_responses: Dict[str, Any] = {}
    additional_data: Dict[str, Any] = {}


class ApplicationResult(BaseModel):
    application_id: int
    job_id: int
    student_id: int
    meets_requirements: bool
    status: ApplicationStatus
    validation_errors: List[str] = []
    profile_updated: bool = False
    sections_updated: List[str] = []


# ============================================================
# EXTENDED PROFILE SCHEMAS
# ============================================================

class SectionCompletionResponse(BaseModel):
    section_name: str
    label: str
    is_completed: bool
    completion_percentage: int


class ExtendedProfileResponse(BaseModel):
    student_id: int
    profile: Dict[str, Any]
    sections: List[SectionCompletionResponse]
    overall_completion: int


class ProfileCompletionResponse(BaseModel):
    student_id: int
    overall_completion: int
    sections: List[SectionCompletionResponse]


class SectionUpdate(BaseModel):
    values: Dict[str, Any] = Field(..., description="Field -> value for one section")


# ============================================================
# REQUIREMENT SCHEMAS
# ============================================================

def _check_semesters(value: List[int]) -> List[int]:
    for sem in value:
        if sem < 1 or sem > 6:
            raise ValueError("Semesters must be between 1 and 6")
    return sorted(set(value))


class RequirementSpecPayload(BaseModel):
    min_cgpa: Optional[float] = Field(None, ge=0, le=10)
    max_backlogs: Optional[int] = Field(None, ge=0)
    backlog_max_semester: Optional[int] = Field(None, ge=1, le=6)
    allowed_backlog_semesters: List[int] = []
    allowed_branches: List[str] = []
    requires_academic_extended: bool = False
    requires_physical_details: bool = False
    requires_family_details: bool = False
    requires_personal_details: bool = False
    requires_document_verification: bool = False
    requires_education_preferences: bool = False
    specific_field_requirements: Dict[str, FieldConstraint] = {}
    custom_fields: List[Dict[str, Any]] = []

    @field_validator("allowed_backlog_semesters")
    @classmethod
    def _semesters_in_range(cls, value):
        return _check_semesters(value)


class RequirementSpecResponse(RequirementSpecPayload):
    job_id: int


class TemplateCreate(RequirementSpecPayload):
    template_name: str = Field(..., min_length=2, max_length=200)
    company_name: Optional[str] = None
    description: Optional[str] = None


class TemplateUpdate(BaseModel):
    template_name: Optional[str] = Field(None, min_length=2, max_length=200)
    company_name: Optional[str] = None
    description: Optional[str] = None
    min_cgpa: Optional[float] = Field(None, ge=0, le=10)
    max_backlogs: Optional[int] = Field(None, ge=0)
    backlog_max_semester: Optional[int] = Field(None, ge=1, le=6)
    allowed_backlog_semesters: Optional[List[int]] = None
    allowed_branches: Optional[List[str]] = None
    requires_academic_extended: Optional[bool] = None
    requires_physical_details: Optional[bool] = None
    requires_family_details: Optional[bool] = None
    requires_personal_details: Optional[bool] = None
    requires_document_verification: Optional[bool] = None
    requires_education_preferences: Optional[bool] = None
    specific_field_requirements: Optional[Dict[str, FieldConstraint]] = None
    custom_fields: Optional[List[Dict[str, Any]]] = None

    # Only runs for values the caller actually sent
    @field_validator(
        "template_name", "requires_academic_extended", "requires_physical_details",
        "requires_family_details", "requires_personal_details",
        "requires_document_verification", "requires_education_preferences"
    )
    @classmethod
    def _not_null(cls, value, info):
        if value is None:
            raise ValueError(f"{info.field_name} cannot be null")
        return value

    @field_validator("allowed_backlog_semesters")
    @classmethod
    def _semesters_in_range(cls, value):
        if value is None:
            return value
        return _check_semesters(value)


class TemplateResponse(RequirementSpecPayload):
    id: int
    template_name: str
    company_name: Optional[str] = None
    description: Optional[str] = None
    created_by: Optional[int] = None


class ApplyTemplateRequest(BaseModel):
    template_id: int


class EligibleCountResponse(BaseModel):
    job_id: int
    total: int
    eligible: int
    ineligible: int


# ============================================================
# GENERIC SCHEMAS
# ============================================================

class MessageResponse(BaseModel):
    message: str
    success: bool = True

class ErrorResponse(BaseModel):
    success: bool = False
    detail: str
    errors: List[str] = []
