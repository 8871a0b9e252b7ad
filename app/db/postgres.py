import logging
from contextlib import contextmanager

from sqlalchemy import create_engine, text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from app.core.config import get_settings
from app.core.exceptions import PersistenceError

logger = logging.getLogger(__name__)

settings = get_settings()


def build_engine(url: str):
    """
    Create the SQLAlchemy engine.

    PostgreSQL gets a connection pool:
    pool_size=5: maintain 5 connections ready
    max_overflow=10: allow 10 extra connections under load
    SQLite (tests) shares one connection so in-memory data survives sessions.
    """
    if url.startswith("sqlite"):
        return create_engine(
            url,
            connect_args={"check_same_thread": False},
            poolclass=StaticPool,
            echo=settings.sql_echo
        )
    return create_engine(
        url,
        pool_size=settings.db_pool_size,
        max_overflow=settings.db_max_overflow,
        pool_pre_ping=True,
        echo=settings.sql_echo  # Log SQL queries when asked to
    )


engine = build_engine(settings.sqlalchemy_url)

# Session factory
SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


@contextmanager
def get_db_session():
    """
    Context manager for database sessions.
    One block == one transaction: commit on success, rollback on any error.
    Usage:
        with get_db_session() as db:
            gateway = PlacementGateway(db)
    """
    session = SessionLocal()
    try:
        yield session
        session.commit()
    except Exception:
        session.rollback()
        raise
    finally:
        session.close()


@contextmanager
def transaction():
    """
    get_db_session() for service code: storage errors surface as
    PersistenceError after the rollback, domain errors pass through untouched.
    """
    try:
        with get_db_session() as db:
            yield db
    except SQLAlchemyError as e:
        logger.exception("Transaction rolled back after storage failure")
        raise PersistenceError() from e


def test_postgres_connection() -> bool:
    """
    Test if the database is reachable.
    Returns True if connection successful, False otherwise.
    """
    try:
        rows = execute_raw_sql("SELECT 1 as test")
        return rows[0]["test"] == 1
    except SQLAlchemyError as e:
        logger.error("Database connection failed: %s", e)
        return False


def execute_raw_sql(sql: str, params: dict = None) -> list:
    """
    Execute raw SQL and return results as list of dicts.
    This is useful for ad hoc reads and health checks.
    """
    with get_db_session() as db:
        result = db.execute(text(sql), params or {})
        # Convert rows to dicts
        columns = result.keys()
        return [dict(zip(columns, row)) for row in result.fetchall()]
