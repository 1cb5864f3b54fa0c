#!/usr/bin/env python3
"""
Schema Setup Script

Creates the guardians, students and schedules tables (and the guardian
cleanup trigger) in the configured database.
Usage: python scripts/init_db.py
"""
import sys
sys.path.insert(0, '.')

from app.core.config import get_settings
from app.db.postgres import Database
from app.db.schema import init_schema


def main():
    settings = get_settings()
    db = Database(settings)
    print("=" * 50)
    print("SCHOOL API - SCHEMA SETUP")
    print("=" * 50)
    print(f"\nDatabase: {db.engine.url.render_as_string(hide_password=True)}")

    try:
        init_schema(db.engine)
        print("    Tables ready: guardians, students, schedules")
    finally:
        db.dispose()


if __name__ == "__main__":
    main()
