"""
Persistence Gateway - all reads and writes of the eligibility engine.

One gateway wraps one Session; the caller owns the transaction boundary
(see app.db.postgres.get_db_session / transaction). Verbs:
- read-one / read-many-by-filter
- insert
- update-by-id
- upsert-on-conflict (PostgreSQL and SQLite ON CONFLICT DO UPDATE)

application_snapshots only has an insert verb: snapshots are write-once.
"""

from typing import Any, Dict, Iterable, List, Optional

from sqlalchemy import select, update, delete, func
from sqlalchemy.dialects import postgresql, sqlite
from sqlalchemy.orm import Session

from app.db.schema import (
    students, student_extended_profiles, profile_section_completion, jobs,
    job_requirements, requirement_templates, job_applications, application_snapshots
)
from app.models.profile import StudentProfile, ExtendedProfile
from app.models.requirements import JobPosting, RequirementSpec, CompanyTemplate

# Columns a RequirementSpec / template row carries
CRITERIA_COLUMNS = (
    "min_cgpa", "max_backlogs", "backlog_max_semester", "allowed_backlog_semesters",
    "allowed_branches", "requires_academic_extended", "requires_physical_details",
    "requires_family_details", "requires_personal_details", "requires_document_verification",
    "requires_education_preferences", "specific_field_requirements", "custom_fields",
)


class PlacementGateway:

    def __init__(self, session: Session):
        self.session = session

    # ------------------------------------------------------------
    # helpers
    # ------------------------------------------------------------

    def _insert(self, table):
        """Dialect-specific INSERT that supports on_conflict_do_*."""
        dialect = self.session.get_bind().dialect.name
        if dialect == "postgresql":
            return postgresql.insert(table)
        if dialect == "sqlite":
            return sqlite.insert(table)
        raise NotImplementedError(f"Upsert not supported for dialect '{dialect}'")

    def _one(self, stmt) -> Optional[Dict[str, Any]]:
        row = self.session.execute(stmt).mappings().first()
        return dict(row) if row else None

    def _many(self, stmt) -> List[Dict[str, Any]]:
        return [dict(row) for row in self.session.execute(stmt).mappings().all()]

    # ------------------------------------------------------------
    # students
    # ------------------------------------------------------------

    def get_student(self, student_id: int) -> Optional[StudentProfile]:
        row = self._one(select(students).where(students.c.id == student_id))
        return StudentProfile.model_validate(row) if row else None

    def get_student_id_for_user(self, user_id: int) -> Optional[int]:
        row = self._one(select(students.c.id).where(students.c.user_id == user_id))
        return row["id"] if row else None

    def list_students(self, registration_status: Optional[str] = None) -> List[StudentProfile]:
        stmt = select(students).order_by(students.c.id)
        if registration_status is not None:
            stmt = stmt.where(students.c.registration_status == registration_status)
        return [StudentProfile.model_validate(r) for r in self._many(stmt)]

    # ------------------------------------------------------------
    # extended profiles
    # ------------------------------------------------------------

    def get_extended_profile(self, student_id: int) -> Optional[ExtendedProfile]:
        row = self._one(
            select(student_extended_profiles)
            .where(student_extended_profiles.c.student_id == student_id)
        )
        return ExtendedProfile.model_validate(row) if row else None

    def list_extended_profiles(self, student_ids: Iterable[int]) -> Dict[int, ExtendedProfile]:
        ids = list(student_ids)
        if not ids:
            return {}
        rows = self._many(
            select(student_extended_profiles)
            .where(student_extended_profiles.c.student_id.in_(ids))
        )
        return {r["student_id"]: ExtendedProfile.model_validate(r) for r in rows}

    def ensure_extended_profile(self, student_id: int) -> bool:
        """Create the extended row if missing. Returns True when created."""
        stmt = (
            self._insert(student_extended_profiles)
            .values(student_id=student_id)
            .on_conflict_do_nothing(index_elements=["student_id"])
        )
        return self.session.execute(stmt).rowcount == 1

    def update_extended_profile(self, student_id: int, values: Dict[str, Any]) -> int:
        if not values:
            return 0
        stmt = (
            update(student_extended_profiles)
            .where(student_extended_profiles.c.student_id == student_id)
            .values(**values, last_updated=func.now())
        )
        return self.session.execute(stmt).rowcount

    def set_overall_completion(self, student_id: int, percentage: int) -> None:
        self.session.execute(
            update(student_extended_profiles)
            .where(student_extended_profiles.c.student_id == student_id)
            .values(profile_completion_percentage=percentage)
        )

    # ------------------------------------------------------------
    # section completion
    # ------------------------------------------------------------

    def upsert_section_completion(
        self, student_id: int, section_name: str, is_completed: bool, percentage: int
    ) -> None:
        stmt = self._insert(profile_section_completion).values(
            student_id=student_id,
            section_name=section_name,
            is_completed=is_completed,
            completion_percentage=percentage,
        )
        stmt = stmt.on_conflict_do_update(
            index_elements=["student_id", "section_name"],
            set_={
                "is_completed": stmt.excluded.is_completed,
                "completion_percentage": stmt.excluded.completion_percentage,
                "last_updated": func.now(),
            },
        )
        self.session.execute(stmt)

    def list_section_completion(self, student_id: int) -> List[Dict[str, Any]]:
        return self._many(
            select(
                profile_section_completion.c.section_name,
                profile_section_completion.c.is_completed,
                profile_section_completion.c.completion_percentage,
            ).where(profile_section_completion.c.student_id == student_id)
        )

    # ------------------------------------------------------------
    # jobs and requirement specs
    # ------------------------------------------------------------

    def get_job(self, job_id: int) -> Optional[JobPosting]:
        row = self._one(select(jobs).where(jobs.c.id == job_id))
        return JobPosting.model_validate(row) if row else None

    def get_requirement_spec(self, job_id: int) -> Optional[RequirementSpec]:
        row = self._one(select(job_requirements).where(job_requirements.c.job_id == job_id))
        return RequirementSpec.model_validate(row) if row else None

    def upsert_requirement_spec(self, job_id: int, values: Dict[str, Any]) -> RequirementSpec:
        criteria = {col: values.get(col) for col in CRITERIA_COLUMNS}
        stmt = self._insert(job_requirements).values(job_id=job_id, **criteria)
        stmt = stmt.on_conflict_do_update(
            index_elements=["job_id"],
            set_={**{col: stmt.excluded[col] for col in CRITERIA_COLUMNS}, "updated_at": func.now()},
        )
        self.session.execute(stmt)
        return self.get_requirement_spec(job_id)

    # ------------------------------------------------------------
    # company templates
    # ------------------------------------------------------------

    def get_template(self, template_id: int) -> Optional[CompanyTemplate]:
        row = self._one(select(requirement_templates).where(requirement_templates.c.id == template_id))
        return CompanyTemplate.model_validate(row) if row else None

    def template_name_exists(self, template_name: str) -> bool:
        row = self._one(
            select(requirement_templates.c.id)
            .where(requirement_templates.c.template_name == template_name)
        )
        return row is not None

    def list_templates(self) -> List[CompanyTemplate]:
        rows = self._many(select(requirement_templates).order_by(requirement_templates.c.id.desc()))
        return [CompanyTemplate.model_validate(r) for r in rows]

    def insert_template(self, values: Dict[str, Any]) -> int:
        result = self.session.execute(requirement_templates.insert().values(**values))
        return result.inserted_primary_key[0]

    def update_template(self, template_id: int, values: Dict[str, Any]) -> int:
        stmt = (
            update(requirement_templates)
            .where(requirement_templates.c.id == template_id)
            .values(**values, updated_at=func.now())
        )
        return self.session.execute(stmt).rowcount

    def delete_template(self, template_id: int) -> int:
        stmt = delete(requirement_templates).where(requirement_templates.c.id == template_id)
        return self.session.execute(stmt).rowcount

    # ------------------------------------------------------------
    # applications and snapshots
    # ------------------------------------------------------------

    def find_application(self, job_id: int, student_id: int) -> Optional[Dict[str, Any]]:
        return self._one(
            select(job_applications).where(
                job_applications.c.job_id == job_id,
                job_applications.c.student_id == student_id,
            )
        )

    def insert_application(self, job_id: int, student_id: int, status: str) -> int:
        """Raises IntegrityError when the (job, student) pair already exists."""
        result = self.session.execute(
            job_applications.insert().values(
                job_id=job_id, student_id=student_id, application_status=status
            )
        )
        return result.inserted_primary_key[0]

    def insert_snapshot(
        self,
        application_id: int,
        profile_snapshot: Dict[str, Any],
        custom_field_responses: Dict[str, Any],
        meets_requirements: bool,
        validation_errors: List[str],
    ) -> None:
        self.session.execute(
            application_snapshots.insert().values(
                application_id=application_id,
                profile_snapshot=profile_snapshot,
                custom_field_responses=custom_field_responses,
                meets_requirements=meets_requirements,
                validation_errors=validation_errors,
            )
        )

    def get_snapshot(self, application_id: int) -> Optional[Dict[str, Any]]:
        return self._one(
            select(application_snapshots)
            .where(application_snapshots.c.application_id == application_id)
        )
