"""
Table definitions for guardians, students and schedules.

Queries elsewhere are written as raw SQL; these definitions only exist so
the schema can be created portably (PostgreSQL in production, SQLite in tests).
"""

from sqlalchemy import (
    DDL, Column, Date, ForeignKey, Integer, MetaData, String, Table, Text,
    UniqueConstraint, event,
)
from sqlalchemy.engine import Engine

metadata = MetaData()

guardians = Table(
    "guardians",
    metadata,
    Column("id", Integer, primary_key=True, autoincrement=True),
    Column("name", String(100), nullable=False),
    Column("phone", String(20), nullable=False),
    Column("status", String(20), nullable=False),
    Column("email", String(255), nullable=False),
    Column("img", Text),
    UniqueConstraint("email", name="guardians_email_key"),
)

students = Table(
    "students",
    metadata,
    Column("id", Integer, primary_key=True, autoincrement=True),
    Column("firstName", String(100), nullable=False),
    Column("lastName", String(100), nullable=False),
    Column("middleName", String(100)),
    Column("admissioNo", String(50), nullable=False),
    Column("form", String(20), nullable=False),
    Column("section", String(10), nullable=False),
    Column("address", String(500), nullable=False),
    Column("bloodgroup", String(3), nullable=False),
    Column("genotype", String(2), nullable=False),
    Column("religion", String(50), nullable=False),
    Column("tribe", String(50), nullable=False),
    Column("gender", String(10), nullable=False),
    Column("dob", Date, nullable=False),
    Column("phone", String(15), nullable=False),
    Column("studentImg", Text),
    Column("email", String(255), nullable=False),
    Column("password", String(255), nullable=False),
    Column(
        "guardian_id",
        Integer,
        ForeignKey("guardians.id", ondelete="CASCADE"),
        nullable=False,
    ),
    UniqueConstraint("email", name="students_email_key"),
    UniqueConstraint("admissioNo", name="students_admissioNo_key"),
)

schedules = Table(
    "schedules",
    metadata,
    Column("id", Integer, primary_key=True, autoincrement=True),
    Column("title", String(100), nullable=False),
    Column("category", String(100), nullable=False),
    Column("start_date", Date, nullable=False),
    Column("end_date", Date, nullable=False),
    Column("img", Text),
)

# Deleting a student removes its guardian; the FK cascade then removes any
# other student still linked to that guardian.
_pg_guardian_cascade_fn = DDL("""
CREATE OR REPLACE FUNCTION delete_student_guardian() RETURNS trigger AS $$
BEGIN
    DELETE FROM guardians WHERE id = OLD.guardian_id;
    RETURN OLD;
END;
$$ LANGUAGE plpgsql
""")

_pg_guardian_cascade_trigger = DDL("""
CREATE TRIGGER students_guardian_cascade
AFTER DELETE ON students
FOR EACH ROW EXECUTE FUNCTION delete_student_guardian()
""")

_sqlite_guardian_cascade_trigger = DDL("""
CREATE TRIGGER students_guardian_cascade
AFTER DELETE ON students
BEGIN
    DELETE FROM guardians WHERE id = OLD.guardian_id;
END
""")

event.listen(students, "after_create", _pg_guardian_cascade_fn.execute_if(dialect="postgresql"))
event.listen(students, "after_create", _pg_guardian_cascade_trigger.execute_if(dialect="postgresql"))
event.listen(students, "after_create", _sqlite_guardian_cascade_trigger.execute_if(dialect="sqlite"))


def init_schema(engine: Engine) -> None:
    """Create any missing tables (and the guardian trigger with them)."""
    metadata.create_all(engine, checkfirst=True)
