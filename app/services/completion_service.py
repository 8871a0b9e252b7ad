"""
Section Completion Tracker

PURPOSE:
Derive {is_completed, percentage} for each secondary profile section from
the merged profile view and keep profile_section_completion in sync.

RULES (see field_registry.COMPLETION_RULES):
- any_present     : percentage = filled / N, completed when at least one is filled
- true_only       : documents count only when explicitly True
- any_true_binary : education preferences are 100% once any choice is True

Recomputing a section with no field change writes the same values again,
so calls are idempotent and order-independent.
"""

import logging
from typing import Dict, Iterable, List, Optional

from pydantic import BaseModel

from app.db.gateway import PlacementGateway
from app.models.profile import MergedProfile
from app.services.field_registry import (
    ANY_PRESENT, TRUE_ONLY, ANY_TRUE_BINARY, COMPLETION_RULES, SECTION_ORDER,
    SECTION_LABELS, is_filled_for_completion
)

logger = logging.getLogger(__name__)


class SectionStatus(BaseModel):
    section_name: str
    is_completed: bool
    completion_percentage: int


def compute_section(section: str, profile: MergedProfile) -> SectionStatus:
    """Pure computation of one section's completion."""
    rule, fields = COMPLETION_RULES[section]
    values = [profile.resolve_field(f) for f in fields]

    if rule == ANY_TRUE_BINARY:
        selected = any(v is True for v in values)
        return SectionStatus(
            section_name=section,
            is_completed=selected,
            completion_percentage=100 if selected else 0,
        )

    if rule == TRUE_ONLY:
        filled = sum(1 for v in values if v is True)
    elif rule == ANY_PRESENT:
        filled = sum(1 for v in values if is_filled_for_completion(v))
    else:
        raise ValueError(f"Unknown completion rule: {rule}")

    return SectionStatus(
        section_name=section,
        is_completed=filled > 0,
        completion_percentage=round(filled / len(fields) * 100),
    )


def overall_percentage(statuses: Iterable[SectionStatus]) -> int:
    """Mean over all six sections; a section never computed counts as 0."""
    by_name = {s.section_name: s.completion_percentage for s in statuses}
    return round(sum(by_name.get(s, 0) for s in SECTION_ORDER) / len(SECTION_ORDER))


class CompletionTracker:
    """Persists section completion through a gateway (inside the caller's transaction)."""

    def __init__(self, gateway: PlacementGateway):
        self.gateway = gateway

    def _load(self, student_id: int) -> Optional[MergedProfile]:
        student = self.gateway.get_student(student_id)
        if student is None:
            return None
        return MergedProfile(student, self.gateway.get_extended_profile(student_id))

    def refresh(self, student_id: int, sections: Iterable[str]) -> List[SectionStatus]:
        """
        Recompute the given sections, then the aggregate.
        Without an extended row the registration columns alone are counted.
        """
        profile = self._load(student_id)
        if profile is None:
            return []

        statuses = []
        for section in sections:
            status = compute_section(section, profile)
            self.gateway.upsert_section_completion(
                student_id, section, status.is_completed, status.completion_percentage
            )
            statuses.append(status)

        self.refresh_overall(student_id)
        return statuses

    def refresh_all(self, student_id: int) -> List[SectionStatus]:
        return self.refresh(student_id, SECTION_ORDER)

    def refresh_overall(self, student_id: int) -> int:
        stored = [SectionStatus(**row) for row in self.gateway.list_section_completion(student_id)]
        percentage = overall_percentage(stored)
        self.gateway.set_overall_completion(student_id, percentage)
        logger.debug("Overall completion for student %s: %s%%", student_id, percentage)
        return percentage

    def sections(self, student_id: int) -> List[Dict]:
        """Stored section rows in canonical order, with labels."""
        stored = {
            row["section_name"]: row
            for row in self.gateway.list_section_completion(student_id)
        }
        result = []
        for section in SECTION_ORDER:
            row = stored.get(section)
            result.append({
                "section_name": section,
                "label": SECTION_LABELS[section],
                "is_completed": bool(row["is_completed"]) if row else False,
                "completion_percentage": row["completion_percentage"] if row else 0,
            })
        return result
