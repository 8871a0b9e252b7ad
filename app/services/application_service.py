"""
Application Submission

submit_application() runs the whole workflow in ONE transaction:

1. Job active, deadline not passed, student exists, not applied yet
2. Apply supplied profile updates + refresh section completion
3. Re-evaluate eligibility at the submission stage (missing data now blocks)
4. Field-limit failures abort with 422 and nothing is written
5. Otherwise record the application (submitted / rejected) with an
   immutable snapshot of the data that was evaluated

Any error rolls back every write made in steps 2-5.
"""

import logging
from datetime import datetime, timezone
from typing import Any, Dict, Optional

from sqlalchemy.exc import IntegrityError

from app.core.exceptions import (
    AlreadyAppliedError, DeadlinePassedError, ProfileValidationError, ValidationFailedError
)
from app.db.gateway import PlacementGateway
from app.db.postgres import transaction
from app.models.eligibility import EvaluationStage, ReasonCategory
from app.models.profile import MergedProfile
from app.schemas.schemas import ApplicationResult, ApplicationStatus
from app.services.eligibility_service import evaluate
from app.services.profile_service import apply_profile_updates
from app.services.readiness_service import load_evaluation_inputs

logger = logging.getLogger(__name__)


def build_snapshot(profile: MergedProfile, additional_data: Dict[str, Any]) -> Dict[str, Any]:
    """Profile values always win over keys of the same name in additional_data."""
    snapshot = profile.snapshot()
    extra = {k: v for k, v in additional_data.items() if k not in snapshot}
    return {**extra, **snapshot}


def submit_application(
    job_id: int,
    student_id: int,
    profile_updates: Optional[Dict[str, Any]] = None,
    custom_field_responses: Optional[Dict[str, Any]] = None,
    additional_data: Optional[Dict[str, Any]] = None,
) -> ApplicationResult:
    """
    Submit one application.

    Raises:
        JobClosedError, DeadlinePassedError, NotFoundError, AlreadyAppliedError,
        ValidationFailedError, PersistenceError
    """
    profile_updates = profile_updates or {}
    custom_field_responses = custom_field_responses or {}
    additional_data = additional_data or {}

    with transaction() as db:
        gateway = PlacementGateway(db)

        # Step 1: preconditions
        job, _, _ = load_evaluation_inputs(gateway, job_id, student_id)
        if job.deadline_passed(datetime.now(timezone.utc)):
            raise DeadlinePassedError()
        if gateway.find_application(job_id, student_id):
            raise AlreadyAppliedError()

        # Step 2: profile updates (same transaction)
        try:
            sections_updated = apply_profile_updates(gateway, student_id, profile_updates)
        except ProfileValidationError as e:
            raise ValidationFailedError("Invalid profile data", errors=e.errors) from e

        # Step 3: re-evaluate on the post-update data
        job, spec, profile = load_evaluation_inputs(gateway, job_id, student_id)
        verdict = evaluate(job, spec, profile, EvaluationStage.submission)

        # Step 4: field limits abort the whole submission
        constraint_failures = verdict.blocking_reasons(ReasonCategory.field_constraint)
        if constraint_failures:
            messages = [r.message for r in constraint_failures]
            logger.info(
                "Submission aborted job=%s student=%s: %s", job_id, student_id, "; ".join(messages)
            )
            raise ValidationFailedError(
                f"Application rejected: {'; '.join(messages)}", errors=messages
            )

        # Step 5: record the outcome
        meets_requirements = not verdict.has_blocking_issues
        errors = [r.message for r in verdict.blocking_reasons()]
        status = ApplicationStatus.submitted if meets_requirements else ApplicationStatus.rejected

        try:
            application_id = gateway.insert_application(job_id, student_id, status.value)
        except IntegrityError as e:
            # Lost the race against a concurrent submission for the same pair
            raise AlreadyAppliedError() from e

        gateway.insert_snapshot(
            application_id,
            profile_snapshot=build_snapshot(profile, additional_data),
            custom_field_responses=custom_field_responses,
            meets_requirements=meets_requirements,
            validation_errors=errors,
        )

    logger.info(
        "Application %s job=%s student=%s status=%s", application_id, job_id, student_id, status.value
    )

    return ApplicationResult(
        application_id=application_id,
        job_id=job_id,
        student_id=student_id,
        meets_requirements=meets_requirements,
        status=status,
        validation_errors=errors,
        profile_updated=bool(sections_updated),
        sections_updated=sections_updated,
    )
