"""
Application submission workflow tests.
"""

from datetime import datetime, timedelta, timezone

import pytest
from sqlalchemy import func, select

from app.core.exceptions import (
    AlreadyAppliedError, DeadlinePassedError, JobClosedError, ValidationFailedError
)
from app.db.gateway import PlacementGateway
from app.db.postgres import get_db_session
from app.db.schema import job_applications, profile_section_completion, student_extended_profiles
from app.models.eligibility import EvaluationStage
from app.services.application_service import submit_application
from app.services.profile_service import update_section
from app.services.readiness_service import check_readiness, load_evaluation_inputs
from app.services.eligibility_service import evaluate


def count_rows(table):
    with get_db_session() as db:
        return db.execute(select(func.count()).select_from(table)).scalar()


def stored_snapshot(application_id):
    with get_db_session() as db:
        return PlacementGateway(db).get_snapshot(application_id)


def test_eligible_submission(make_student, make_job):
    student_id = make_student()
    job_id = make_job(min_cgpa=7.0, max_backlogs=1)

    result = submit_application(job_id, student_id, custom_field_responses={"tshirt": "M"})

    assert result.status == "submitted"
    assert result.meets_requirements
    assert result.validation_errors == []

    snapshot = stored_snapshot(result.application_id)
    assert snapshot["meets_requirements"]
    assert snapshot["validation_errors"] == []
    assert snapshot["custom_field_responses"] == {"tshirt": "M"}
    assert snapshot["profile_snapshot"]["branch"] == "Computer Engineering"


def test_low_cgpa_commits_rejected_application(make_student, make_job):
    student_id = make_student(programme_cgpa=6.5)
    job_id = make_job(min_cgpa=7.0, max_backlogs=1)

    result = submit_application(job_id, student_id)

    assert result.status == "rejected"
    assert not result.meets_requirements
    assert any("CGPA below minimum: 7" in e for e in result.validation_errors)

    with get_db_session() as db:
        row = PlacementGateway(db).find_application(job_id, student_id)
    assert row["application_status"] == "rejected"
    assert stored_snapshot(result.application_id)["validation_errors"] == result.validation_errors


def test_height_below_minimum_aborts_without_writes(make_student, make_job, make_spec):
    student_id = make_student()
    job_id = make_job()
    make_spec(job_id, specific_field_requirements={"height_cm": {"min": 155}})

    with pytest.raises(ValidationFailedError) as exc:
        submit_application(job_id, student_id, profile_updates={"height_cm": 150})

    assert "Height" in exc.value.errors[0]
    assert count_rows(job_applications) == 0
    # The profile update was rolled back with the rest of the transaction
    assert count_rows(student_extended_profiles) == 0
    assert count_rows(profile_section_completion) == 0


def test_non_finite_height_aborts_without_writes(make_student, make_job, make_spec):
    student_id = make_student()
    job_id = make_job()
    make_spec(job_id, specific_field_requirements={"height_cm": {"min": 155}})

    for bad in ("nan", "inf", float("nan")):
        with pytest.raises(ValidationFailedError) as exc:
            submit_application(job_id, student_id, profile_updates={"height_cm": bad})
        assert exc.value.errors == ["Height (cm) must be a number"]

    assert count_rows(job_applications) == 0
    assert count_rows(student_extended_profiles) == 0


def test_profile_update_satisfies_requirement(make_student, make_job, make_spec):
    student_id = make_student()
    job_id = make_job()
    make_spec(
        job_id,
        requires_physical_details=True,
        specific_field_requirements={"height_cm": {"min": 155}},
    )

    assert not check_readiness(job_id, student_id).ready_to_apply

    result = submit_application(
        job_id, student_id, profile_updates={"height_cm": "172", "weight_kg": "64", "bogus": 1}
    )

    assert result.status == "submitted"
    assert result.profile_updated
    assert result.sections_updated == ["physical_details"]

    with get_db_session() as db:
        gateway = PlacementGateway(db)
        assert gateway.get_extended_profile(student_id).height_cm == 172.0
        sections = {r["section_name"]: r for r in gateway.list_section_completion(student_id)}
    assert sections["physical_details"]["completion_percentage"] == 100


def test_missing_mandatory_section_commits_rejection(make_student, make_job, make_spec):
    student_id = make_student()
    job_id = make_job()
    make_spec(job_id, requires_family_details=True)

    result = submit_application(job_id, student_id)

    assert result.status == "rejected"
    assert result.validation_errors == ["Please complete your family details"]


def test_required_custom_constraint_missing_aborts(make_student, make_job, make_spec):
    student_id = make_student()
    job_id = make_job()
    make_spec(job_id, specific_field_requirements={"district": {"required": True}})

    with pytest.raises(ValidationFailedError):
        submit_application(job_id, student_id)
    assert count_rows(job_applications) == 0


def test_out_of_range_update_aborts(make_student, make_job):
    student_id = make_student()
    job_id = make_job()
    with pytest.raises(ValidationFailedError) as exc:
        submit_application(job_id, student_id, profile_updates={"height_cm": 20})
    assert exc.value.errors == ["Height must be between 100 and 250 cm"]
    assert count_rows(job_applications) == 0


def test_duplicate_submission(make_student, make_job):
    student_id = make_student()
    job_id = make_job()
    submit_application(job_id, student_id)

    with pytest.raises(AlreadyAppliedError):
        submit_application(job_id, student_id)
    assert count_rows(job_applications) == 1


def test_unique_constraint_reported_as_already_applied(make_student, make_job, monkeypatch):
    """Second writer that missed the duplicate check still gets AlreadyApplied."""
    student_id = make_student()
    job_id = make_job()
    submit_application(job_id, student_id)

    monkeypatch.setattr(PlacementGateway, "find_application", lambda self, job_id, student_id: None)

    with pytest.raises(AlreadyAppliedError):
        submit_application(job_id, student_id)
    assert count_rows(job_applications) == 1


def test_deadline_passed(make_student, make_job):
    student_id = make_student()
    job_id = make_job(application_deadline=datetime.now(timezone.utc) - timedelta(days=1))
    with pytest.raises(DeadlinePassedError):
        submit_application(job_id, student_id)


def test_inactive_job(make_student, make_job):
    student_id = make_student()
    job_id = make_job(is_active=False)
    with pytest.raises(JobClosedError):
        submit_application(job_id, student_id)


def test_snapshot_unchanged_by_later_edits(make_student, make_job):
    student_id = make_student()
    job_id = make_job()
    result = submit_application(job_id, student_id, profile_updates={"district": "Pune"})

    update_section(student_id, "personal_details", {"district": "Nashik"})

    snapshot = stored_snapshot(result.application_id)["profile_snapshot"]
    assert snapshot["district"] == "Pune"


def test_additional_data_never_overrides_profile(make_student, make_job, make_extended):
    student_id = make_student()
    make_extended(student_id, district="Pune")
    job_id = make_job()

    result = submit_application(
        job_id, student_id, additional_data={"district": "Elsewhere", "portfolio": "https://x.dev"}
    )

    snapshot = stored_snapshot(result.application_id)["profile_snapshot"]
    assert snapshot["district"] == "Pune"
    assert snapshot["portfolio"] == "https://x.dev"


def test_readiness_and_submission_agree(make_student, make_job, make_spec):
    """Without updates, the submission re-check sees what the pre-check saw."""
    cases = [
        ({"programme_cgpa": 6.0}, {"min_cgpa": 7.0}),
        ({"backlogs_sem4": 1}, {"max_backlogs": 2, "allowed_backlog_semesters": [1, 2, 3]}),
        ({"branch": "Civil Engineering"}, {"allowed_branches": ["Computer Engineering"]}),
        ({}, {"min_cgpa": 7.0}),
    ]
    for student_values, job_values in cases:
        student_id = make_student(**student_values)
        job_id = make_job(**job_values)

        readiness = check_readiness(job_id, student_id)
        with get_db_session() as db:
            job, spec, profile = load_evaluation_inputs(PlacementGateway(db), job_id, student_id)
        submission_verdict = evaluate(job, spec, profile, EvaluationStage.submission)
        result = submit_application(job_id, student_id)

        assert readiness.has_blocking_issues == submission_verdict.has_blocking_issues
        assert result.meets_requirements == (not readiness.has_blocking_issues)
