"""
Table definitions - the relational schema of the eligibility engine.

Tables:
- students                   - Primary (Tier 1) profile: branch, CGPA, backlogs, college/region
- student_extended_profiles  - Secondary (Tier 2) sections, one row per student
- profile_section_completion - Derived completion flags per (student, section)
- jobs                       - Job postings with primary criteria and targeting
- job_requirements           - Optional richer RequirementSpec bound to a job
- requirement_templates      - Reusable, unbound company templates
- job_applications           - One row per (job, student)
- application_snapshots      - Write-once audit copy taken at submission

Declared with SQLAlchemy Core so the same definitions drive PostgreSQL in
production and SQLite in the test suite.
"""

from sqlalchemy import (
    MetaData, Table, Column, Integer, String, Text, Boolean, Float,
    DateTime, JSON, ForeignKey, UniqueConstraint, func
)

metadata = MetaData()


students = Table(
    "students",
    metadata,
    Column("id", Integer, primary_key=True),
    Column("user_id", Integer, unique=True, index=True),
    Column("student_name", String(200)),
    Column("prn", String(50)),
    Column("branch", String(200)),
    Column("programme_cgpa", Float),
    Column("cgpa", Float),  # legacy column, superseded by programme_cgpa
    Column("cgpa_sem1", Float),
    Column("cgpa_sem2", Float),
    Column("cgpa_sem3", Float),
    Column("cgpa_sem4", Float),
    Column("cgpa_sem5", Float),
    Column("cgpa_sem6", Float),
    Column("backlogs_sem1", Integer),
    Column("backlogs_sem2", Integer),
    Column("backlogs_sem3", Integer),
    Column("backlogs_sem4", Integer),
    Column("backlogs_sem5", Integer),
    Column("backlogs_sem6", Integer),
    Column("college_id", Integer, index=True),
    Column("region_id", Integer, index=True),
    Column("registration_status", String(30), nullable=False, server_default="pending"),
    # Registration-time values that back some secondary fields
    Column("height", Float),
    Column("weight", Float),
    Column("complete_address", Text),
    Column("has_driving_license", Boolean),
    Column("has_pan_card", Boolean),
    Column("has_aadhar_card", Boolean),
    Column("has_passport", Boolean),
    Column("created_at", DateTime, server_default=func.now()),
)


student_extended_profiles = Table(
    "student_extended_profiles",
    metadata,
    Column("id", Integer, primary_key=True),
    Column("student_id", Integer, ForeignKey("students.id", ondelete="CASCADE"),
           unique=True, nullable=False),
    # Academic extended
    Column("sslc_marks", Float),
    Column("sslc_year", Integer),
    Column("sslc_board", String(100)),
    Column("twelfth_marks", Float),
    Column("twelfth_year", Integer),
    Column("twelfth_board", String(100)),
    # Physical details
    Column("height_cm", Float),
    Column("weight_kg", Float),
    Column("physically_handicapped", Boolean),
    Column("handicap_details", Text),
    # Family details
    Column("father_name", String(200)),
    Column("father_occupation", String(200)),
    Column("father_annual_income", Float),
    Column("mother_name", String(200)),
    Column("mother_occupation", String(200)),
    Column("mother_annual_income", Float),
    Column("siblings_count", Integer),
    Column("siblings_details", Text),
    # Personal details
    Column("district", String(100)),
    Column("permanent_address", Text),
    Column("interests_hobbies", Text),
    # Document verification
    Column("has_driving_license", Boolean),
    Column("has_pan_card", Boolean),
    Column("pan_number", String(20)),
    Column("has_aadhar_card", Boolean),
    Column("aadhar_number", String(20)),
    Column("has_passport", Boolean),
    Column("passport_number", String(20)),
    # Education preferences
    Column("interested_in_btech", Boolean),
    Column("interested_in_mtech", Boolean),
    Column("not_interested_in_higher_education", Boolean),
    Column("preferred_study_mode", String(50)),
    Column("profile_completion_percentage", Integer, nullable=False, server_default="0"),
    Column("last_updated", DateTime, server_default=func.now()),
    Column("created_at", DateTime, server_default=func.now()),
)


profile_section_completion = Table(
    "profile_section_completion",
    metadata,
    Column("id", Integer, primary_key=True),
    Column("student_id", Integer, ForeignKey("students.id", ondelete="CASCADE"), nullable=False),
    Column("section_name", String(50), nullable=False),
    Column("is_completed", Boolean, nullable=False, server_default="0"),
    Column("completion_percentage", Integer, nullable=False, server_default="0"),
    Column("last_updated", DateTime, server_default=func.now()),
    UniqueConstraint("student_id", "section_name", name="uq_section_completion_student_section"),
)


jobs = Table(
    "jobs",
    metadata,
    Column("id", Integer, primary_key=True),
    Column("job_title", String(200), nullable=False),
    Column("company_name", String(200), nullable=False),
    Column("is_active", Boolean, nullable=False, server_default="1"),
    Column("application_deadline", DateTime),
    Column("min_cgpa", Float),
    Column("max_backlogs", Integer),
    Column("backlog_max_semester", Integer),
    Column("allowed_backlog_semesters", JSON),
    Column("allowed_branches", JSON),
    Column("target_type", String(20), nullable=False, server_default="all"),
    Column("target_regions", JSON),
    Column("target_colleges", JSON),
    Column("created_at", DateTime, server_default=func.now()),
)


def _criteria_columns():
    """Columns shared by job_requirements and requirement_templates."""
    return [
        Column("min_cgpa", Float),
        Column("max_backlogs", Integer),
        Column("backlog_max_semester", Integer),
        Column("allowed_backlog_semesters", JSON),
        Column("allowed_branches", JSON),
        Column("requires_academic_extended", Boolean, nullable=False, server_default="0"),
        Column("requires_physical_details", Boolean, nullable=False, server_default="0"),
        Column("requires_family_details", Boolean, nullable=False, server_default="0"),
        Column("requires_personal_details", Boolean, nullable=False, server_default="0"),
        Column("requires_document_verification", Boolean, nullable=False, server_default="0"),
        Column("requires_education_preferences", Boolean, nullable=False, server_default="0"),
        Column("specific_field_requirements", JSON),
        Column("custom_fields", JSON),
        Column("created_at", DateTime, server_default=func.now()),
        Column("updated_at", DateTime, server_default=func.now()),
    ]


job_requirements = Table(
    "job_requirements",
    metadata,
    Column("id", Integer, primary_key=True),
    Column("job_id", Integer, ForeignKey("jobs.id", ondelete="CASCADE"), unique=True, nullable=False),
    *_criteria_columns(),
)


requirement_templates = Table(
    "requirement_templates",
    metadata,
    Column("id", Integer, primary_key=True),
    Column("template_name", String(200), unique=True, nullable=False),
    Column("company_name", String(200)),
    Column("description", Text),
    Column("created_by", Integer),
    *_criteria_columns(),
)


job_applications = Table(
    "job_applications",
    metadata,
    Column("id", Integer, primary_key=True),
    Column("job_id", Integer, ForeignKey("jobs.id", ondelete="CASCADE"), nullable=False),
    Column("student_id", Integer, ForeignKey("students.id", ondelete="CASCADE"), nullable=False),
    Column("application_status", String(30), nullable=False),
    Column("applied_at", DateTime, server_default=func.now()),
    UniqueConstraint("job_id", "student_id", name="uq_job_applications_job_student"),
)


application_snapshots = Table(
    "application_snapshots",
    metadata,
    Column("application_id", Integer, ForeignKey("job_applications.id", ondelete="CASCADE"),
           primary_key=True),
    Column("profile_snapshot", JSON, nullable=False),
    Column("custom_field_responses", JSON, nullable=False),
    Column("meets_requirements", Boolean, nullable=False),
    Column("validation_errors", JSON, nullable=False),
    Column("created_at", DateTime, server_default=func.now()),
)


def init_schema(bind) -> None:
    """Create any missing tables on the given engine/connection."""
    metadata.create_all(bind)
