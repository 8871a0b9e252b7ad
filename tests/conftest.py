"""
Shared fixtures: in-memory SQLite database, seed helpers, HTTP client.
"""

import os

# Must be set before app.core.config builds Settings
os.environ["DATABASE_URL"] = "sqlite://"
os.environ["AUTO_CREATE_SCHEMA"] = "false"

import pytest

from app.db.postgres import engine, get_db_session
from app.db.schema import (
    metadata, students, student_extended_profiles, jobs, job_requirements, requirement_templates
)


@pytest.fixture(autouse=True)
def database():
    """Fresh schema for every test."""
    metadata.create_all(engine)
    yield engine
    metadata.drop_all(engine)


def _insert(table, values):
    with get_db_session() as db:
        result = db.execute(table.insert().values(**values))
        return result.inserted_primary_key[0]


@pytest.fixture
def make_student():
    counter = {"n": 0}

    def _make(**overrides):
        counter["n"] += 1
        values = {
            "user_id": 1000 + counter["n"],
            "student_name": f"Student {counter['n']}",
            "prn": f"PRN{counter['n']:04d}",
            "branch": "Computer Engineering",
            "programme_cgpa": 8.0,
            "college_id": 1,
            "region_id": 1,
            "registration_status": "approved",
        }
        values.update(overrides)
        return _insert(students, values)

    return _make


@pytest.fixture
def make_job():
    def _make(**overrides):
        values = {
            "job_title": "Graduate Engineer Trainee",
            "company_name": "Acme Systems",
            "is_active": True,
            "target_type": "all",
        }
        values.update(overrides)
        return _insert(jobs, values)

    return _make


@pytest.fixture
def make_spec():
    def _make(job_id, **values):
        return _insert(job_requirements, {"job_id": job_id, **values})

    return _make


@pytest.fixture
def make_extended():
    def _make(student_id, **values):
        return _insert(student_extended_profiles, {"student_id": student_id, **values})

    return _make


@pytest.fixture
def make_template():
    def _make(**overrides):
        values = {"template_name": "Core Engineering", "company_name": "Acme Systems"}
        values.update(overrides)
        return _insert(requirement_templates, values)

    return _make
