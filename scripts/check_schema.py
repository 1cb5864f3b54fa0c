#!/usr/bin/env python3
"""
Schema Check Script

Prints the column layout of the students and guardians tables.
Usage: python scripts/check_schema.py
"""
import sys
sys.path.insert(0, '.')

from sqlalchemy import inspect

from app.core.config import get_settings
from app.db.postgres import Database


def print_table(inspector, table_name):
    print(f"\n{table_name} table schema:")
    print(f"    {'column_name':<15} {'data_type':<20} {'is_nullable':<12} column_default")
    for column in inspector.get_columns(table_name):
        print(
            f"    {column['name']:<15} {str(column['type']):<20} "
            f"{'YES' if column['nullable'] else 'NO':<12} {column.get('default')}"
        )


def main():
    db = Database(get_settings())
    try:
        inspector = inspect(db.engine)
        for table_name in ("students", "guardians"):
            if not inspector.has_table(table_name):
                print(f"\n{table_name}: table missing (run scripts/init_db.py)")
                continue
            print_table(inspector, table_name)
    finally:
        db.dispose()


if __name__ == "__main__":
    main()
