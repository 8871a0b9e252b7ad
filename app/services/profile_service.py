"""
Extended Profile Service

Secondary (Tier 2) profile management:
- sanitize / validate applicant-supplied values
- apply_profile_updates(): write values grouped by section, creating the
  extended row if needed, then refresh completion (used by the section
  endpoints and by the submission workflow inside its transaction)
- read the merged profile and completion status
"""

import logging
import math
from typing import Any, Dict, List

from app.core.exceptions import NotFoundError, ProfileValidationError
from app.db.gateway import PlacementGateway
from app.db.postgres import transaction
from app.models.profile import MergedProfile
from app.schemas.schemas import (
    ExtendedProfileResponse, ProfileCompletionResponse, SectionCompletionResponse
)
from app.services.completion_service import CompletionTracker
from app.services.field_registry import (
    BOOLEAN_FIELDS, FIELD_RANGES, FIELD_SECTIONS, FLOAT_FIELDS, INTEGER_FIELDS,
    SECONDARY_FIELDS, SECTION_FIELDS, SECTION_ORDER, Section, field_label, is_present
)

logger = logging.getLogger(__name__)

TRUE_STRINGS = {"true", "1", "yes"}
FALSE_STRINGS = {"false", "0", "no"}

# Sections whose completion also reads registration-time student columns
REGISTRATION_BACKED_SECTIONS = (
    Section.physical_details.value,
    Section.personal_details.value,
    Section.document_verification.value,
)


# ============================================================
# SANITIZATION
# ============================================================

def sanitize_value(field: str, value: Any) -> Any:
    """
    Normalize one supplied value.
    Empty strings become None (unset); boolean fields accept yes/no/true/false/1/0.
    """
    if not is_present(value):
        return None

    if field in BOOLEAN_FIELDS:
        if isinstance(value, bool):
            return value
        if isinstance(value, str):
            lower = value.strip().lower()
            if lower in TRUE_STRINGS:
                return True
            if lower in FALSE_STRINGS:
                return False
            raise ProfileValidationError(errors=[f"{field_label(field)} must be yes or no"])
        return bool(value)

    try:
        if field in INTEGER_FIELDS:
            return int(value)
        if field in FLOAT_FIELDS:
            number = float(value)
            if not math.isfinite(number):
                raise ValueError(value)
            return number
    except (TypeError, ValueError, OverflowError):
        raise ProfileValidationError(errors=[f"{field_label(field)} must be a number"])

    if isinstance(value, str):
        return value.strip()
    return value


def validate_ranges(values: Dict[str, Any]) -> List[str]:
    errors = []
    for field, value in values.items():
        if field not in FIELD_RANGES or value is None:
            continue
        low, high, message = FIELD_RANGES[field]
        if (low is not None and value < low) or (high is not None and value > high):
            errors.append(message)
    return errors


def group_by_section(updates: Dict[str, Any]) -> Dict[str, Dict[str, Any]]:
    """Sanitize and bucket supplied values; unknown fields and unset values are dropped."""
    grouped: Dict[str, Dict[str, Any]] = {}
    for field, raw in updates.items():
        section = FIELD_SECTIONS.get(field)
        if section is None:
            logger.warning("Ignoring unknown profile field '%s'", field)
            continue
        value = sanitize_value(field, raw)
        if value is None:
            continue
        grouped.setdefault(section, {})[field] = value

    errors = []
    for values in grouped.values():
        errors += validate_ranges(values)
    if errors:
        raise ProfileValidationError(errors=errors)
    return grouped


def apply_profile_updates(
    gateway: PlacementGateway, student_id: int, updates: Dict[str, Any]
) -> List[str]:
    """
    Write supplied secondary values inside the caller's transaction.

    Returns:
        Names of the sections that were touched, in canonical order
    """
    grouped = group_by_section(updates)
    if not grouped:
        return []

    if gateway.ensure_extended_profile(student_id):
        logger.info("Created extended profile for student %s", student_id)

    touched = [s for s in SECTION_ORDER if s in grouped]
    for section in touched:
        gateway.update_extended_profile(student_id, grouped[section])
        logger.info(
            "Updated %s for student %s: %s",
            section, student_id, ", ".join(sorted(grouped[section]))
        )

    CompletionTracker(gateway).refresh(student_id, touched)
    return touched


# ============================================================
# READ / UPDATE OPERATIONS
# ============================================================

def _merged_view(profile: MergedProfile) -> Dict[str, Any]:
    data = {name: profile.resolve_field(name) for name in SECONDARY_FIELDS}
    data["student_name"] = profile.student.student_name
    data["prn"] = profile.student.prn
    data["branch"] = profile.student.branch
    data["programme_cgpa"] = profile.resolve_field("programme_cgpa")
    return data


def _build_response(gateway: PlacementGateway, student_id: int) -> ExtendedProfileResponse:
    student = gateway.get_student(student_id)
    extended = gateway.get_extended_profile(student_id)
    tracker = CompletionTracker(gateway)
    return ExtendedProfileResponse(
        student_id=student_id,
        profile=_merged_view(MergedProfile(student, extended)),
        sections=[SectionCompletionResponse(**s) for s in tracker.sections(student_id)],
        overall_completion=extended.profile_completion_percentage if extended else 0,
    )


def get_extended_profile(student_id: int) -> ExtendedProfileResponse:
    with transaction() as db:
        gateway = PlacementGateway(db)
        if gateway.get_student(student_id) is None:
            raise NotFoundError("Student record not found")
        if gateway.get_extended_profile(student_id) is None:
            raise NotFoundError("Extended profile not found")

        # Registration data may have changed since the last section write
        CompletionTracker(gateway).refresh(student_id, REGISTRATION_BACKED_SECTIONS)
        return _build_response(gateway, student_id)


def update_section(student_id: int, section: str, values: Dict[str, Any]) -> ExtendedProfileResponse:
    if section not in SECTION_FIELDS:
        raise NotFoundError(f"Unknown profile section '{section}'")

    foreign = sorted(f for f in values if FIELD_SECTIONS.get(f) != section)
    if foreign:
        raise ProfileValidationError(
            f"Fields do not belong to {section}",
            errors=[f"Unexpected field: {f}" for f in foreign],
        )

    with transaction() as db:
        gateway = PlacementGateway(db)
        if gateway.get_student(student_id) is None:
            raise NotFoundError("Student not found")

        gateway.ensure_extended_profile(student_id)
        touched = apply_profile_updates(gateway, student_id, values)
        if not touched:
            # Nothing supplied, still reflect current data
            CompletionTracker(gateway).refresh(student_id, [section])
        return _build_response(gateway, student_id)


def get_profile_completion(student_id: int) -> ProfileCompletionResponse:
    with transaction() as db:
        gateway = PlacementGateway(db)
        if gateway.get_student(student_id) is None:
            raise NotFoundError("Student not found")

        tracker = CompletionTracker(gateway)
        tracker.refresh(student_id, REGISTRATION_BACKED_SECTIONS)
        overall = tracker.refresh_overall(student_id)
        return ProfileCompletionResponse(
            student_id=student_id,
            overall_completion=overall,
            sections=[SectionCompletionResponse(**s) for s in tracker.sections(student_id)],
        )
