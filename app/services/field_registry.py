"""
Field Registry - static lookup tables for profile sections and fields.

Every section/field rule used by the completion tracker, the eligibility
evaluator and the submission workflow is defined here exactly once:

- SECTION_FIELDS         : which secondary fields belong to which section
- COMPLETION_RULES       : how each section's completion percentage is counted
- SECTION_REQUIREMENTS   : what "section filled" means when a job makes it mandatory
- FIELD_PRECEDENCE       : where resolve_field() looks for a value, in order
- FIELD_RANGES           : accepted numeric ranges for applicant-supplied values
- FIELD_FORMS            : label + input type used for missing-field forms
- BRANCH_REPLACEMENTS    : branch-name normalization
"""

import re
from collections import namedtuple
from enum import Enum
from typing import Any, Dict, Optional, Tuple


class Section(str, Enum):
    academic_extended = "academic_extended"
    physical_details = "physical_details"
    family_details = "family_details"
    personal_details = "personal_details"
    document_verification = "document_verification"
    education_preferences = "education_preferences"


# Canonical display order
SECTION_ORDER: Tuple[str, ...] = tuple(s.value for s in Section)

SECTION_LABELS: Dict[str, str] = {
    "academic_extended": "Academic Extended Details",
    "physical_details": "Physical Details",
    "family_details": "Family Details",
    "personal_details": "Personal Details",
    "document_verification": "Document Verification",
    "education_preferences": "Education Preferences",
}


# ============================================================
# SECTION -> FIELDS
# ============================================================

SECTION_FIELDS: Dict[str, Tuple[str, ...]] = {
    "academic_extended": (
        "sslc_marks", "sslc_year", "sslc_board",
        "twelfth_marks", "twelfth_year", "twelfth_board",
    ),
    "physical_details": (
        "height_cm", "weight_kg", "physically_handicapped", "handicap_details",
    ),
    "family_details": (
        "father_name", "father_occupation", "father_annual_income",
        "mother_name", "mother_occupation", "mother_annual_income",
        "siblings_count", "siblings_details",
    ),
    "personal_details": (
        "district", "permanent_address", "interests_hobbies",
    ),
    "document_verification": (
        "has_driving_license", "has_pan_card", "pan_number",
        "has_aadhar_card", "aadhar_number", "has_passport", "passport_number",
    ),
    "education_preferences": (
        "interested_in_btech", "interested_in_mtech",
        "not_interested_in_higher_education", "preferred_study_mode",
    ),
}

FIELD_SECTIONS: Dict[str, str] = {
    field: section
    for section, fields in SECTION_FIELDS.items()
    for field in fields
}

SECONDARY_FIELDS: Tuple[str, ...] = tuple(FIELD_SECTIONS)

BOOLEAN_FIELDS = frozenset({
    "physically_handicapped",
    "has_driving_license", "has_pan_card", "has_aadhar_card", "has_passport",
    "interested_in_btech", "interested_in_mtech", "not_interested_in_higher_education",
})

INTEGER_FIELDS = frozenset({"sslc_year", "twelfth_year", "siblings_count"})

FLOAT_FIELDS = frozenset({
    "sslc_marks", "twelfth_marks", "height_cm", "weight_kg",
    "father_annual_income", "mother_annual_income",
})


# ============================================================
# COMPLETION RULES
# any_present     : percentage = filled / N, completed when at least one is filled
# true_only       : like any_present but only explicit True counts as filled
# any_true_binary : 100 if any listed flag is True, else 0
# ============================================================

ANY_PRESENT = "any_present"
TRUE_ONLY = "true_only"
ANY_TRUE_BINARY = "any_true_binary"

COMPLETION_RULES: Dict[str, Tuple[str, Tuple[str, ...]]] = {
    "academic_extended": (
        ANY_PRESENT,
        ("sslc_marks", "sslc_year", "sslc_board", "twelfth_marks", "twelfth_year"),
    ),
    # physically_handicapped is optional and not counted
    "physical_details": (ANY_PRESENT, ("height_cm", "weight_kg")),
    "family_details": (
        ANY_PRESENT,
        (
            "father_name", "father_occupation", "father_annual_income",
            "mother_name", "mother_occupation", "mother_annual_income",
            "siblings_count", "siblings_details",
        ),
    ),
    "personal_details": (ANY_PRESENT, ("district", "permanent_address", "interests_hobbies")),
    "document_verification": (
        TRUE_ONLY,
        ("has_driving_license", "has_pan_card", "has_aadhar_card", "has_passport"),
    ),
    "education_preferences": (
        ANY_TRUE_BINARY,
        ("interested_in_btech", "interested_in_mtech", "not_interested_in_higher_education"),
    ),
}


# ============================================================
# MANDATORY-SECTION REQUIREMENTS
# Each group yields one reason when unmet.
# mode "all": every field must be present; mode "any": at least one.
# ============================================================

RequirementGroup = namedtuple("RequirementGroup", ["key", "label", "message", "fields", "mode"])

SECTION_REQUIREMENTS: Dict[str, Tuple[RequirementGroup, ...]] = {
    "academic_extended": (
        RequirementGroup(
            "sslc_details", "SSLC Details",
            "Please complete your SSLC details (marks, year, board)",
            ("sslc_marks", "sslc_year"), "all",
        ),
        RequirementGroup(
            "twelfth_details", "12th Standard Details",
            "Please complete your 12th standard details (marks, year, board)",
            ("twelfth_marks", "twelfth_year"), "all",
        ),
    ),
    "physical_details": (
        RequirementGroup(
            "physical_details", "Physical Details",
            "Please complete your physical details (height, weight)",
            ("height_cm", "weight_kg"), "all",
        ),
    ),
    "family_details": (
        RequirementGroup(
            "family_details", "Family Details",
            "Please complete your family details",
            ("father_name", "mother_name"), "all",
        ),
    ),
    "personal_details": (
        RequirementGroup(
            "personal_details", "Personal Details",
            "Please complete your personal details (district, address)",
            ("district", "permanent_address"), "all",
        ),
    ),
    "document_verification": (
        RequirementGroup(
            "document_verification", "Document Verification",
            "Please verify your document status (PAN, Aadhar)",
            ("has_pan_card", "has_aadhar_card"), "all",
        ),
    ),
    "education_preferences": (
        RequirementGroup(
            "education_preferences", "Education Preferences",
            "Please specify your education preferences",
            ("interested_in_btech", "interested_in_mtech", "not_interested_in_higher_education"),
            "any",
        ),
    ),
}

# Section -> RequirementSpec flag that makes it mandatory
REQUIREMENT_FLAGS: Dict[str, str] = {
    section: f"requires_{section}" for section in SECTION_ORDER
}


# ============================================================
# FIELD PRECEDENCE (resolve_field)
# Sources are tried left to right; the first non-null value wins.
# ============================================================

EXTENDED = "extended"
STUDENT = "student"

FIELD_PRECEDENCE: Dict[str, Tuple[Tuple[str, str], ...]] = {
    "height_cm": ((EXTENDED, "height_cm"), (STUDENT, "height")),
    "weight_kg": ((EXTENDED, "weight_kg"), (STUDENT, "weight")),
    "permanent_address": ((EXTENDED, "permanent_address"), (STUDENT, "complete_address")),
    "has_driving_license": ((EXTENDED, "has_driving_license"), (STUDENT, "has_driving_license")),
    "has_pan_card": ((EXTENDED, "has_pan_card"), (STUDENT, "has_pan_card")),
    "has_aadhar_card": ((EXTENDED, "has_aadhar_card"), (STUDENT, "has_aadhar_card")),
    "has_passport": ((EXTENDED, "has_passport"), (STUDENT, "has_passport")),
    "programme_cgpa": ((STUDENT, "programme_cgpa"), (STUDENT, "cgpa")),
}


def field_sources(name: str) -> Tuple[Tuple[str, str], ...]:
    """Lookup order for a field; unlisted fields read from their own tier."""
    if name in FIELD_PRECEDENCE:
        return FIELD_PRECEDENCE[name]
    if name in FIELD_SECTIONS:
        return ((EXTENDED, name),)
    return ((STUDENT, name),)


# ============================================================
# VALIDATION RANGES (inclusive)
# ============================================================

FIELD_RANGES: Dict[str, Tuple[Optional[float], Optional[float], str]] = {
    "sslc_marks": (0, 100, "SSLC marks must be between 0 and 100"),
    "twelfth_marks": (0, 100, "12th marks must be between 0 and 100"),
    "height_cm": (100, 250, "Height must be between 100 and 250 cm"),
    "weight_kg": (30, 200, "Weight must be between 30 and 200 kg"),
    "father_annual_income": (0, None, "Father's annual income cannot be negative"),
    "mother_annual_income": (0, None, "Mother's annual income cannot be negative"),
    "siblings_count": (0, 20, "Siblings count must be between 0 and 20"),
}


# ============================================================
# FORM DESCRIPTORS (label, input type)
# ============================================================

FIELD_FORMS: Dict[str, Tuple[str, str]] = {
    "sslc_marks": ("SSLC Marks (%)", "number"),
    "sslc_year": ("SSLC Year", "number"),
    "sslc_board": ("SSLC Board", "text"),
    "twelfth_marks": ("12th Marks (%)", "number"),
    "twelfth_year": ("12th Year", "number"),
    "twelfth_board": ("12th Board", "text"),
    "height_cm": ("Height (cm)", "number"),
    "weight_kg": ("Weight (kg)", "number"),
    "physically_handicapped": ("Physically Handicapped", "boolean"),
    "handicap_details": ("Handicap Details", "text"),
    "father_name": ("Father's Name", "text"),
    "father_occupation": ("Father's Occupation", "text"),
    "father_annual_income": ("Father's Annual Income", "number"),
    "mother_name": ("Mother's Name", "text"),
    "mother_occupation": ("Mother's Occupation", "text"),
    "mother_annual_income": ("Mother's Annual Income", "number"),
    "siblings_count": ("Number of Siblings", "number"),
    "siblings_details": ("Siblings Details", "text"),
    "district": ("District", "text"),
    "permanent_address": ("Permanent Address", "text"),
    "interests_hobbies": ("Interests & Hobbies", "text"),
    "has_driving_license": ("Do you have a Driving License?", "boolean"),
    "has_pan_card": ("Do you have PAN Card?", "boolean"),
    "pan_number": ("PAN Number", "text"),
    "has_aadhar_card": ("Do you have Aadhar Card?", "boolean"),
    "aadhar_number": ("Aadhar Number", "text"),
    "has_passport": ("Do you have a Passport?", "boolean"),
    "passport_number": ("Passport Number", "text"),
    "interested_in_btech": ("Interested in B.Tech", "boolean"),
    "interested_in_mtech": ("Interested in M.Tech", "boolean"),
    "not_interested_in_higher_education": ("Not interested in higher education", "boolean"),
    "preferred_study_mode": ("Preferred Study Mode", "text"),
}

# Text fields only shown when their flag is answered True
CONDITIONAL_FIELDS: Dict[str, str] = {
    "pan_number": "has_pan_card",
    "aadhar_number": "has_aadhar_card",
    "passport_number": "has_passport",
}


def humanize(name: str) -> str:
    """sslc_marks -> 'Sslc Marks'"""
    return name.replace("_", " ").title()


def field_label(name: str) -> str:
    if name in FIELD_FORMS:
        return FIELD_FORMS[name][0]
    return humanize(name)


# ============================================================
# VALUE PRESENCE
# ============================================================

def is_present(value: Any) -> bool:
    """Unset means None or an empty string; False and 0 are real answers."""
    if value is None:
        return False
    if isinstance(value, str) and value.strip() == "":
        return False
    return True


def is_filled_for_completion(value: Any) -> bool:
    """Completion counting: numeric defaults (0) never count, booleans do."""
    if not is_present(value):
        return False
    if isinstance(value, bool):
        return True
    if isinstance(value, (int, float)) and value == 0:
        return False
    return True


# ============================================================
# BRANCH NORMALIZATION
# ============================================================

BRANCH_REPLACEMENTS: Tuple[Tuple[str, str], ...] = (
    ("&", " and "),
)

_WHITESPACE = re.compile(r"\s+")


def normalize_branch(name: Optional[str]) -> str:
    """'Electronics & Communication ' -> 'electronics and communication'"""
    if name is None:
        return ""
    value = str(name).lower()
    for old, new in BRANCH_REPLACEMENTS:
        value = value.replace(old, new)
    return _WHITESPACE.sub(" ", value).strip()
