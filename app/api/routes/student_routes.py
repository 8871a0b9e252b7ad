"""
Student Extended Profile Routes

GET /students/extended-profile - Merged profile + section completion
GET /students/extended-profile/completion - Completion percentages only
PUT /students/extended-profile/{section} - Update one section
"""

from fastapi import APIRouter, Depends

from app.core.auth import get_current_student
from app.services import profile_service
from app.schemas.schemas import (
    ExtendedProfileResponse, ProfileCompletionResponse, SectionUpdate
)

router = APIRouter(prefix="/students", tags=["Students"])


@router.get("/extended-profile", response_model=ExtendedProfileResponse)
def get_extended_profile(student: dict = Depends(get_current_student)):
    return profile_service.get_extended_profile(student["student_id"])


@router.get("/extended-profile/completion", response_model=ProfileCompletionResponse)
def get_profile_completion(student: dict = Depends(get_current_student)):
    return profile_service.get_profile_completion(student["student_id"])


@router.put("/extended-profile/{section}", response_model=ExtendedProfileResponse)
def update_section(section: str, data: SectionUpdate, student: dict = Depends(get_current_student)):
    """Only the supplied fields change; empty strings clear nothing."""
    return profile_service.update_section(student["student_id"], section, data.values)
