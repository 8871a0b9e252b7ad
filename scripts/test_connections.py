#!/usr/bin/env python3
"""
Connection Test Script

Run this to verify the database is reachable and the schema is in place.
Usage: python scripts/test_connections.py [--create-schema]
"""
import sys

from sqlalchemy import inspect

from app.core.config import get_settings
from app.db.postgres import engine, test_postgres_connection
from app.db.schema import init_schema, metadata


def main():
    settings = get_settings()
    print("=" * 50)
    print("PLACEMENT ELIGIBILITY ENGINE - CONNECTION TEST")
    print("=" * 50)

    # Test database
    print("\n[1] Testing database...")
    if settings.database_url:
        print(f"    URL: {settings.database_url.split('@')[-1]}")
    else:
        print(f"    URL: postgresql://{settings.postgres_user}:****@{settings.postgres_host}:{settings.postgres_port}/{settings.postgres_db}")
    if not test_postgres_connection():
        print("    FAILED")
        return 1
    print("    CONNECTED")

    if "--create-schema" in sys.argv:
        init_schema(engine)
        print("    Schema created")

    # Check tables
    print("\n[2] Checking tables...")
    existing = set(inspect(engine).get_table_names())
    missing = [name for name in metadata.tables if name not in existing]
    for name in metadata.tables:
        print(f"    {'ok     ' if name in existing else 'MISSING'} {name}")

    print("\n" + "=" * 50)
    print("Connection test complete!" if not missing else f"{len(missing)} table(s) missing")
    print("=" * 50)
    return 0 if not missing else 1


if __name__ == "__main__":
    sys.exit(main())
