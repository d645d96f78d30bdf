#!/usr/bin/env python3
"""
Connection Test Script

Run this to verify the database connection and schema.
Usage: python scripts/test_connections.py
"""
import sys
sys.path.insert(0, '.')

from sqlalchemy import inspect

from app.core.config import get_settings
from app.db.postgres import engine, test_postgres_connection
from app.db.tables import metadata


def main():
    settings = get_settings()
    print("=" * 50)
    print("INTERNSHIP PLATFORM - CONNECTION TEST")
    print("=" * 50)

    print("\n[1] Testing database...")
    if settings.database_url:
        print(f"    URL: {engine.url.render_as_string(hide_password=True)}")
    else:
        print(f"    URL: postgresql://{settings.postgres_user}:****@{settings.postgres_host}:{settings.postgres_port}/{settings.postgres_db}")
    if not test_postgres_connection():
        print("    ❌ Database: FAILED")
        return 1
    print("    ✅ Database: CONNECTED")

    print("\n[2] Checking schema...")
    existing = set(inspect(engine).get_table_names())
    missing = [name for name in metadata.tables if name not in existing]
    if missing:
        print(f"    ⚠️  Missing tables: {', '.join(missing)} (created on app startup)")
    else:
        print(f"    ✅ All {len(metadata.tables)} tables present")

    print("\n" + "=" * 50)
    print("Connection test complete!")
    print("=" * 50)
    return 0


if __name__ == "__main__":
    sys.exit(main())
