"""
Eligibility evaluator - pure function tests, no database.
"""

from datetime import datetime, timedelta, timezone

from app.models.eligibility import EvaluationStage, ReasonCategory
from app.models.profile import ExtendedProfile, MergedProfile, StudentProfile
from app.models.requirements import FieldConstraint, JobPosting, RequirementSpec
from app.services.eligibility_service import evaluate


def make_job(**overrides):
    values = {"id": 1, "job_title": "GET", "company_name": "Acme"}
    values.update(overrides)
    return JobPosting(**values)


def make_profile(extended=None, **overrides):
    values = {"id": 7, "branch": "Computer Engineering", "programme_cgpa": 8.0, "college_id": 1, "region_id": 1}
    values.update(overrides)
    student = StudentProfile(**values)
    ext = ExtendedProfile(student_id=student.id, **extended) if extended is not None else None
    return MergedProfile(student, ext)


def messages(verdict):
    return [r.message for r in verdict.reasons]


def test_no_criteria_is_ready():
    verdict = evaluate(make_job(), None, make_profile())
    assert verdict.ready
    assert verdict.eligible


def test_cgpa_below_minimum_is_blocking():
    verdict = evaluate(make_job(min_cgpa=7.0), None, make_profile(programme_cgpa=6.5))
    assert not verdict.eligible
    assert "CGPA below minimum: 7" in messages(verdict)


def test_cgpa_falls_back_to_legacy_column():
    profile = make_profile(programme_cgpa=None, cgpa=7.5)
    assert evaluate(make_job(min_cgpa=7.0), None, profile).eligible


def test_missing_cgpa_fails_minimum():
    profile = make_profile(programme_cgpa=None)
    verdict = evaluate(make_job(min_cgpa=6.0), None, profile)
    assert verdict.blocking_reasons(ReasonCategory.cgpa)


def test_backlog_outside_allowed_semesters_rejected():
    job = make_job(max_backlogs=2, allowed_backlog_semesters=[1, 2, 3])
    profile = make_profile(backlogs_sem4=1)
    verdict = evaluate(job, None, profile)
    reasons = verdict.blocking_reasons(ReasonCategory.backlogs)
    assert len(reasons) == 1
    assert "outside the allowed semesters" in reasons[0].message


def test_backlogs_inside_allowed_semesters_over_cap():
    job = make_job(max_backlogs=2, allowed_backlog_semesters=[1, 2, 3])
    profile = make_profile(backlogs_sem1=2, backlogs_sem3=1)
    verdict = evaluate(job, None, profile)
    assert "Maximum 2 backlogs allowed in Sem 1, 2, 3. You have 3" in messages(verdict)


def test_allowed_semesters_take_priority_over_boundary():
    job = make_job(max_backlogs=1, allowed_backlog_semesters=[5], backlog_max_semester=2)
    profile = make_profile(backlogs_sem5=1)
    assert evaluate(job, None, profile).eligible


def test_backlog_after_boundary_rejected():
    job = make_job(max_backlogs=3, backlog_max_semester=4)
    profile = make_profile(backlogs_sem5=1)
    verdict = evaluate(job, None, profile)
    assert verdict.blocking_reasons(ReasonCategory.backlogs)


def test_backlogs_within_boundary_accepted():
    job = make_job(max_backlogs=2, backlog_max_semester=4)
    profile = make_profile(backlogs_sem2=1, backlogs_sem4=1)
    assert evaluate(job, None, profile).eligible


def test_plain_total_over_cap():
    job = make_job(max_backlogs=1)
    profile = make_profile(backlogs_sem1=1, backlogs_sem6=1)
    assert "Maximum 1 backlogs allowed. You have 2" in messages(evaluate(job, None, profile))


def test_no_cap_skips_backlog_check():
    job = make_job(allowed_backlog_semesters=[1])
    profile = make_profile(backlogs_sem6=4)
    assert evaluate(job, None, profile).eligible


def test_zero_cap_rejects_any_backlog():
    profile = make_profile(backlogs_sem1=1)
    assert not evaluate(make_job(max_backlogs=0), None, profile).eligible


def test_branch_ampersand_normalized():
    job = make_job(allowed_branches=["Electronics & Communication"])
    profile = make_profile(branch="electronics and communication")
    assert evaluate(job, None, profile).eligible


def test_branch_trailing_whitespace_normalized():
    job = make_job(allowed_branches=["Computer Engineering"])
    profile = make_profile(branch="computer engineering ")
    assert evaluate(job, None, profile).eligible


def test_branch_mismatch_is_blocking():
    job = make_job(allowed_branches=["Mechanical Engineering"])
    verdict = evaluate(job, None, make_profile())
    assert verdict.blocking_reasons(ReasonCategory.branch)


def test_region_targeting():
    job = make_job(target_type="region", target_regions=[2, 3])
    verdict = evaluate(job, None, make_profile(region_id=1))
    assert "This job is not available for your region" in messages(verdict)
    assert evaluate(job, None, make_profile(region_id=3)).eligible


def test_college_targeting_with_json_text_ids():
    job = make_job(target_type="college", target_colleges="[4, 5]")
    assert not evaluate(job, None, make_profile(college_id=1)).eligible


def test_specific_targeting_either_axis_passes():
    job = make_job(target_type="specific", target_regions=[9], target_colleges=[1])
    assert evaluate(job, None, make_profile(college_id=1, region_id=2)).eligible
    assert evaluate(job, None, make_profile(college_id=5, region_id=9)).eligible
    verdict = evaluate(job, None, make_profile(college_id=5, region_id=2))
    assert verdict.blocking_reasons(ReasonCategory.targeting)


def test_all_checks_run_without_short_circuit():
    job = make_job(min_cgpa=9.0, max_backlogs=0, allowed_branches=["Civil"])
    profile = make_profile(backlogs_sem1=1)
    categories = {r.category for r in evaluate(job, None, profile).reasons}
    assert categories == {ReasonCategory.cgpa, ReasonCategory.backlogs, ReasonCategory.branch}


def test_missing_section_fixable_at_precheck_blocking_at_submission():
    spec = RequirementSpec(job_id=1, requires_physical_details=True)
    profile = make_profile(extended={})

    precheck = evaluate(make_job(), spec, profile, EvaluationStage.precheck)
    assert not precheck.ready
    assert precheck.eligible

    submission = evaluate(make_job(), spec, profile, EvaluationStage.submission)
    assert not submission.eligible
    assert submission.blocking_reasons(ReasonCategory.section)


def test_physical_section_satisfied_from_registration_data():
    spec = RequirementSpec(job_id=1, requires_physical_details=True)
    profile = make_profile(height=170, weight=65)
    assert evaluate(make_job(), spec, profile).ready


def test_document_flags_false_count_as_answered():
    spec = RequirementSpec(job_id=1, requires_document_verification=True)
    profile = make_profile(extended={"has_pan_card": False, "has_aadhar_card": False})
    assert evaluate(make_job(), spec, profile).ready


def test_education_preferences_any_choice():
    spec = RequirementSpec(job_id=1, requires_education_preferences=True)
    assert not evaluate(make_job(), spec, make_profile(extended={})).ready
    profile = make_profile(extended={"interested_in_mtech": True})
    assert evaluate(make_job(), spec, profile).ready


def test_academic_section_reports_each_group():
    spec = RequirementSpec(job_id=1, requires_academic_extended=True)
    profile = make_profile(extended={"sslc_marks": 90, "sslc_year": 2018})
    verdict = evaluate(make_job(), spec, profile)
    assert [r.field for r in verdict.reasons] == ["twelfth_details"]


def test_field_minimum_uses_extended_value_first():
    spec = RequirementSpec(
        job_id=1, specific_field_requirements={"height_cm": FieldConstraint(min=155)}
    )
    profile = make_profile(extended={"height_cm": 150}, height=180)
    verdict = evaluate(make_job(), spec, profile)
    reasons = verdict.blocking_reasons(ReasonCategory.field_constraint)
    assert reasons[0].message == (
        "Height (cm): Your value (150) does not meet the minimum requirement (155)"
    )


def test_field_maximum():
    spec = RequirementSpec(
        job_id=1, specific_field_requirements={"weight_kg": {"max": 90}}
    )
    verdict = evaluate(make_job(), spec, make_profile(extended={"weight_kg": 95.5}))
    assert "exceeds the maximum allowed (90)" in verdict.reasons[0].message


def test_non_numeric_value_fails_field_limit():
    spec = RequirementSpec(
        job_id=1, specific_field_requirements={"height_cm": {"min": 155}}
    )
    verdict = evaluate(make_job(), spec, make_profile(extended={"height_cm": float("nan")}))
    reasons = verdict.blocking_reasons(ReasonCategory.field_constraint)
    assert len(reasons) == 1
    assert reasons[0].message == "Height (cm): Your value (nan) is not a valid number"


def test_deadline_compared_in_utc():
    ist = timezone(timedelta(hours=5, minutes=30))
    # 10:00 IST is 04:30 UTC
    job = make_job(application_deadline=datetime(2026, 1, 1, 10, 0, tzinfo=ist))
    assert job.deadline_passed(datetime(2026, 1, 1, 5, 0, tzinfo=timezone.utc))
    assert job.deadline_passed(datetime(2026, 1, 1, 5, 0))
    assert not job.deadline_passed(datetime(2026, 1, 1, 4, 0, tzinfo=timezone.utc))

    naive = make_job(application_deadline=datetime(2026, 1, 1, 10, 0))
    assert not naive.deadline_passed(datetime(2026, 1, 1, 9, 0, tzinfo=timezone.utc))
    assert naive.deadline_passed(datetime(2026, 1, 1, 16, 0, tzinfo=ist))


def test_required_field_missing_is_fixable_until_submission():
    spec = RequirementSpec(
        job_id=1, specific_field_requirements={"district": {"required": True}}
    )
    profile = make_profile(extended={"district": "  "})
    precheck = evaluate(make_job(), spec, profile)
    assert precheck.reasons[0].message == "District is required"
    assert not precheck.reasons[0].blocking
    assert not evaluate(make_job(), spec, profile, EvaluationStage.submission).eligible


def test_spec_overrides_job_criteria():
    job = make_job(min_cgpa=9.0)
    spec = RequirementSpec(job_id=1, min_cgpa=6.0)
    assert evaluate(job, spec, make_profile(programme_cgpa=7.0)).eligible


def test_targeting_applies_even_with_spec():
    job = make_job(target_type="region", target_regions=[5])
    spec = RequirementSpec(job_id=1)
    assert not evaluate(job, spec, make_profile(region_id=1)).eligible
