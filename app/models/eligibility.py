"""
Eligibility verdict models.
"""

from enum import Enum
from typing import Any, List, Optional
from pydantic import BaseModel


class EvaluationStage(str, Enum):
    precheck = "precheck"
    submission = "submission"


class ReasonCategory(str, Enum):
    targeting = "targeting"
    cgpa = "cgpa"
    backlogs = "backlogs"
    branch = "branch"
    section = "section"
    field_constraint = "field_constraint"


class Reason(BaseModel):
    field: str
    section: str
    label: str
    message: str
    blocking: bool
    category: ReasonCategory
    required_value: Optional[Any] = None
    current_value: Optional[Any] = None


class Verdict(BaseModel):
    stage: EvaluationStage
    reasons: List[Reason] = []

    @property
    def eligible(self) -> bool:
        """No blocking reasons."""
        return not any(r.blocking for r in self.reasons)

    @property
    def ready(self) -> bool:
        """No reasons of any kind."""
        return not self.reasons

    @property
    def has_blocking_issues(self) -> bool:
        return not self.eligible

    def blocking_reasons(self, category: Optional[ReasonCategory] = None) -> List[Reason]:
        return [
            r for r in self.reasons
            if r.blocking and (category is None or r.category == category)
        ]

    @property
    def messages(self) -> List[str]:
        return [r.message for r in self.reasons]
