"""
Eligibility Evaluator

PURPOSE:
One pure function, evaluate(), used by every place that decides
eligibility: the readiness pre-check, the submission re-check and the
officer-side eligible-count. Nothing here touches the database.

CHECKS (all run, none short-circuits):
1. Targeting      - region / college / specific
2. CGPA           - programme CGPA (legacy cgpa fallback) vs minimum
3. Backlogs       - allowed-semester list > semester boundary > plain total
4. Branch         - normalized exact match against the allowed list
5. Sections       - mandatory secondary sections have their defining fields
6. Field limits   - per-field min / max / required

STAGES:
- precheck   : missing data (steps 5 and 6 "required") is fixable, non-blocking
- submission : the same gaps are blocking
Threshold failures are blocking at both stages.
"""

import math
from typing import Any, List, Optional

from app.models.eligibility import EvaluationStage, Reason, ReasonCategory, Verdict
from app.models.profile import MergedProfile
from app.models.requirements import JobPosting, RequirementSpec, TargetType
from app.services.field_registry import (
    FIELD_SECTIONS, SECTION_REQUIREMENTS, field_label, is_present, normalize_branch
)

CORE = "core"


def _fmt(value: Any) -> str:
    """7.0 -> '7', 7.5 -> '7.5'"""
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


def _to_number(value: Any) -> Optional[float]:
    if isinstance(value, bool):
        return None
    try:
        number = float(value)
    except (TypeError, ValueError):
        return None
    return number if math.isfinite(number) else None


# ============================================================
# 1. TARGETING
# ============================================================

def check_targeting(job: JobPosting, profile: MergedProfile) -> List[Reason]:
    student = profile.student
    regions = set(job.target_regions)
    colleges = set(job.target_colleges)
    in_region = student.region_id in regions
    in_college = student.college_id in colleges

    if job.target_type == TargetType.region and regions and not in_region:
        return [Reason(
            field="region_id", section=CORE, label="Region",
            message="This job is not available for your region",
            blocking=True, category=ReasonCategory.targeting,
        )]

    if job.target_type == TargetType.college and colleges and not in_college:
        return [Reason(
            field="college_id", section=CORE, label="College",
            message="This job is not available for your college",
            blocking=True, category=ReasonCategory.targeting,
        )]

    if job.target_type == TargetType.specific:
        if regions and colleges:
            if not (in_region or in_college):
                return [Reason(
                    field="college_id", section=CORE, label="College/Region",
                    message="This job is not available for your college or region",
                    blocking=True, category=ReasonCategory.targeting,
                )]
        elif regions and not in_region:
            return [Reason(
                field="region_id", section=CORE, label="Region",
                message="This job is not available for your region",
                blocking=True, category=ReasonCategory.targeting,
            )]
        elif colleges and not in_college:
            return [Reason(
                field="college_id", section=CORE, label="College",
                message="This job is not available for your college",
                blocking=True, category=ReasonCategory.targeting,
            )]

    return []


# ============================================================
# 2. CGPA
# ============================================================

def check_cgpa(spec: RequirementSpec, profile: MergedProfile) -> List[Reason]:
    if not spec.min_cgpa:
        return []
    cgpa = _to_number(profile.resolve_field("programme_cgpa"))
    if cgpa is not None and cgpa >= spec.min_cgpa:
        return []
    return [Reason(
        field="programme_cgpa", section=CORE, label="CGPA",
        message=f"CGPA below minimum: {_fmt(spec.min_cgpa)}",
        blocking=True, category=ReasonCategory.cgpa,
        required_value=spec.min_cgpa, current_value=cgpa,
    )]


# ============================================================
# 3. BACKLOGS
# ============================================================

def check_backlogs(spec: RequirementSpec, profile: MergedProfile) -> List[Reason]:
    cap = spec.max_backlogs
    if cap is None:
        return []

    per_semester = profile.student.semester_backlogs()
    total = sum(per_semester)
    message = None

    if spec.allowed_backlog_semesters:
        allowed = set(spec.allowed_backlog_semesters)
        inside = sum(n for sem, n in enumerate(per_semester, start=1) if sem in allowed)
        outside = total - inside
        listed = ", ".join(str(s) for s in sorted(allowed))
        if outside > 0:
            message = (
                f"You have backlogs outside the allowed semesters. "
                f"Backlogs are only allowed in Sem {listed}"
            )
        elif inside > cap:
            message = f"Maximum {cap} backlogs allowed in Sem {listed}. You have {inside}"

    elif spec.backlog_max_semester:
        boundary = spec.backlog_max_semester
        within = sum(per_semester[:boundary])
        after = sum(per_semester[boundary:])
        if after > 0:
            message = (
                f"You have backlogs in semesters after Sem {boundary}. "
                f"Only backlogs within Sem 1-{boundary} are allowed"
            )
        elif within > cap:
            message = f"Maximum {cap} backlogs allowed within Sem 1-{boundary}. You have {within}"

    elif total > cap:
        message = f"Maximum {cap} backlogs allowed. You have {total}"

    if message is None:
        return []
    return [Reason(
        field="backlog_count", section=CORE, label="Active Backlogs",
        message=message, blocking=True, category=ReasonCategory.backlogs,
        required_value=cap, current_value=total,
    )]


# ============================================================
# 4. BRANCH
# ============================================================

def check_branch(spec: RequirementSpec, profile: MergedProfile) -> List[Reason]:
    if not spec.allowed_branches:
        return []
    branch = profile.student.branch
    allowed = {normalize_branch(b) for b in spec.allowed_branches}
    if normalize_branch(branch) in allowed:
        return []
    return [Reason(
        field="branch", section=CORE, label="Branch",
        message=(
            f"Your branch ({branch}) is not in the allowed list: "
            f"{', '.join(spec.allowed_branches)}"
        ),
        blocking=True, category=ReasonCategory.branch,
        required_value=spec.allowed_branches, current_value=branch,
    )]


# ============================================================
# 5. MANDATORY SECONDARY SECTIONS
# ============================================================

def check_sections(spec: RequirementSpec, profile: MergedProfile, stage: EvaluationStage) -> List[Reason]:
    blocking = stage == EvaluationStage.submission
    reasons = []
    for section in spec.required_sections():
        for group in SECTION_REQUIREMENTS[section]:
            present = [is_present(profile.resolve_field(f)) for f in group.fields]
            satisfied = all(present) if group.mode == "all" else any(present)
            if satisfied:
                continue
            reasons.append(Reason(
                field=group.key, section=section, label=group.label,
                message=group.message, blocking=blocking,
                category=ReasonCategory.section,
            ))
    return reasons


# ============================================================
# 6. PER-FIELD CONSTRAINTS
# ============================================================

def check_field_constraints(
    spec: RequirementSpec, profile: MergedProfile, stage: EvaluationStage
) -> List[Reason]:
    reasons = []
    for name, constraint in spec.specific_field_requirements.items():
        value = profile.resolve_field(name)
        label = field_label(name)
        section = FIELD_SECTIONS.get(name, "specific")

        if not is_present(value):
            if constraint.required:
                reasons.append(Reason(
                    field=name, section=section, label=label,
                    message=f"{label} is required",
                    blocking=stage == EvaluationStage.submission,
                    category=ReasonCategory.field_constraint,
                ))
            continue

        number = _to_number(value)
        if number is None:
            # A limit cannot be checked against a non-numeric value
            if constraint.min is not None or constraint.max is not None:
                reasons.append(Reason(
                    field=name, section=section, label=label,
                    message=f"{label}: Your value ({value}) is not a valid number",
                    blocking=True, category=ReasonCategory.field_constraint,
                    required_value=constraint.min if constraint.min is not None else constraint.max,
                    current_value=str(value),
                ))
            continue

        if constraint.min is not None and number < constraint.min:
            reasons.append(Reason(
                field=name, section=section, label=label,
                message=(
                    f"{label}: Your value ({_fmt(value)}) does not meet "
                    f"the minimum requirement ({_fmt(constraint.min)})"
                ),
                blocking=True, category=ReasonCategory.field_constraint,
                required_value=constraint.min, current_value=value,
            ))

        if constraint.max is not None and number > constraint.max:
            reasons.append(Reason(
                field=name, section=section, label=label,
                message=(
                    f"{label}: Your value ({_fmt(value)}) exceeds "
                    f"the maximum allowed ({_fmt(constraint.max)})"
                ),
                blocking=True, category=ReasonCategory.field_constraint,
                required_value=constraint.max, current_value=value,
            ))
    return reasons


# ============================================================
# ENTRY POINT
# ============================================================

def evaluate(
    job: JobPosting,
    spec: Optional[RequirementSpec],
    profile: MergedProfile,
    stage: EvaluationStage = EvaluationStage.precheck,
) -> Verdict:
    """
    Evaluate one applicant against one job.

    Args:
        job: Posting (targeting always comes from here)
        spec: Stored RequirementSpec, or None to use the job's own criteria
        profile: Merged primary + secondary profile
        stage: precheck or submission

    Returns:
        Verdict with every reason found
    """
    effective = spec if spec is not None else RequirementSpec.from_job(job)

    reasons: List[Reason] = []
    reasons += check_targeting(job, profile)
    reasons += check_cgpa(effective, profile)
    reasons += check_backlogs(effective, profile)
    reasons += check_branch(effective, profile)
    reasons += check_sections(effective, profile, stage)
    reasons += check_field_constraints(effective, profile, stage)

    return Verdict(stage=stage, reasons=reasons)
