"""
Database module - PostgreSQL connection pool, schema and query helpers.
"""
from app.db.postgres import Database, get_database
from app.db.schema import init_schema

__all__ = [
    "Database",
    "get_database",
    "init_schema",
]
