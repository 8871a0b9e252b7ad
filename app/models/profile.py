"""
Applicant profile models.

StudentProfile  - primary (Tier 1) attributes from the students table
ExtendedProfile - secondary (Tier 2) sections, all nullable
MergedProfile   - read view over both, resolving every field through the
                  FIELD_PRECEDENCE table
"""

from typing import Any, Dict, List, Optional
from pydantic import BaseModel

from app.services.field_registry import (
    EXTENDED, SECONDARY_FIELDS, field_sources, is_present
)


class StudentProfile(BaseModel):
    id: int
    user_id: Optional[int] = None
    student_name: Optional[str] = None
    prn: Optional[str] = None
    branch: Optional[str] = None
    programme_cgpa: Optional[float] = None
    cgpa: Optional[float] = None
    cgpa_sem1: Optional[float] = None
    cgpa_sem2: Optional[float] = None
    cgpa_sem3: Optional[float] = None
    cgpa_sem4: Optional[float] = None
    cgpa_sem5: Optional[float] = None
    cgpa_sem6: Optional[float] = None
    backlogs_sem1: Optional[int] = None
    backlogs_sem2: Optional[int] = None
    backlogs_sem3: Optional[int] = None
    backlogs_sem4: Optional[int] = None
    backlogs_sem5: Optional[int] = None
    backlogs_sem6: Optional[int] = None
    college_id: Optional[int] = None
    region_id: Optional[int] = None
    registration_status: str = "pending"
    height: Optional[float] = None
    weight: Optional[float] = None
    complete_address: Optional[str] = None
    has_driving_license: Optional[bool] = None
    has_pan_card: Optional[bool] = None
    has_aadhar_card: Optional[bool] = None
    has_passport: Optional[bool] = None

    def semester_backlogs(self) -> List[int]:
        """Backlog counts for semesters 1..6, unset treated as 0."""
        return [
            getattr(self, f"backlogs_sem{sem}") or 0
            for sem in range(1, 7)
        ]


class ExtendedProfile(BaseModel):
    student_id: int
    # Academic extended
    sslc_marks: Optional[float] = None
    sslc_year: Optional[int] = None
    sslc_board: Optional[str] = None
    twelfth_marks: Optional[float] = None
    twelfth_year: Optional[int] = None
    twelfth_board: Optional[str] = None
    # Physical
    height_cm: Optional[float] = None
    weight_kg: Optional[float] = None
    physically_handicapped: Optional[bool] = None
    handicap_details: Optional[str] = None
    # Family
    father_name: Optional[str] = None
    father_occupation: Optional[str] = None
    father_annual_income: Optional[float] = None
    mother_name: Optional[str] = None
    mother_occupation: Optional[str] = None
    mother_annual_income: Optional[float] = None
    siblings_count: Optional[int] = None
    siblings_details: Optional[str] = None
    # Personal
    district: Optional[str] = None
    permanent_address: Optional[str] = None
    interests_hobbies: Optional[str] = None
    # Documents
    has_driving_license: Optional[bool] = None
    has_pan_card: Optional[bool] = None
    pan_number: Optional[str] = None
    has_aadhar_card: Optional[bool] = None
    aadhar_number: Optional[str] = None
    has_passport: Optional[bool] = None
    passport_number: Optional[str] = None
    # Education preferences
    interested_in_btech: Optional[bool] = None
    interested_in_mtech: Optional[bool] = None
    not_interested_in_higher_education: Optional[bool] = None
    preferred_study_mode: Optional[str] = None

    profile_completion_percentage: int = 0


class MergedProfile:
    """
    Student + extended profile seen as one record.

    resolve_field() is the only place a value is looked up; the order of
    sources comes from field_registry.FIELD_PRECEDENCE.
    """

    def __init__(self, student: StudentProfile, extended: Optional[ExtendedProfile] = None):
        self.student = student
        self.extended = extended

    @property
    def student_id(self) -> int:
        return self.student.id

    def resolve_field(self, name: str) -> Any:
        for source, attr in field_sources(name):
            record = self.extended if source == EXTENDED else self.student
            if record is None:
                continue
            value = getattr(record, attr, None)
            if is_present(value):
                return value
        return None

    def snapshot(self) -> Dict[str, Any]:
        """Every secondary field plus the primary values eligibility reads."""
        data = {name: self.resolve_field(name) for name in SECONDARY_FIELDS}
        data["branch"] = self.student.branch
        data["programme_cgpa"] = self.resolve_field("programme_cgpa")
        data["college_id"] = self.student.college_id
        data["region_id"] = self.student.region_id
        data["semester_backlogs"] = self.student.semester_backlogs()
        return data
