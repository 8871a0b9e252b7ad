"""
Database module - engine/session handling, table definitions, gateway.
"""
from app.db.postgres import get_db_session, transaction, test_postgres_connection, execute_raw_sql
from app.db.schema import metadata, init_schema

__all__ = [
    "get_db_session",
    "transaction",
    "test_postgres_connection",
    "execute_raw_sql",
    "metadata",
    "init_schema",
]
