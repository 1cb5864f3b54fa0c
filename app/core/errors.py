"""
Error mapping - turns validation and storage failures into API responses.

Every error body has the shape {"detail": "<message>"}.
"""

from typing import Optional

from fastapi import Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from sqlalchemy.exc import IntegrityError

# PostgreSQL SQLSTATE for unique_violation
UNIQUE_VIOLATION = "23505"

# Constraint names as created by app.db.schema, plus the SQLite "table.column" form
DUPLICATE_MESSAGES = (
    (("students_admissioNo_key", "students.admissioNo"), "A student with this admission number already exists."),
    (("students_email_key", "students.email"), "A student with this email already exists."),
)


def first_validation_message(exc: RequestValidationError) -> str:
    """Message of the first failing rule, prefixed with the offending field."""
    errors = exc.errors()
    if not errors:
        return "Invalid request"
    error = errors[0]
    loc = [str(part) for part in error.get("loc", ()) if part not in ("body", "query", "path")]
    message = error.get("msg", "Invalid value")
    return f"{'.'.join(loc)}: {message}" if loc else message


async def validation_exception_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={"detail": first_validation_message(exc)},
    )


def _constraint_text(exc: IntegrityError) -> str:
    orig = getattr(exc, "orig", None)
    diag = getattr(orig, "diag", None)
    constraint = getattr(diag, "constraint_name", None)
    if constraint:
        return constraint
    return str(orig or exc)


def is_unique_violation(exc: IntegrityError) -> bool:
    orig = getattr(exc, "orig", None)
    pgcode = getattr(orig, "pgcode", None)
    if pgcode is not None:
        return pgcode == UNIQUE_VIOLATION
    text = str(orig or exc)
    return "UNIQUE constraint failed" in text or "duplicate key" in text


def duplicate_message(exc: IntegrityError) -> Optional[str]:
    """
    Map a unique violation on the students table to a field-specific message.

    Returns None when the error is not a recognised student duplicate.
    """
    if not is_unique_violation(exc):
        return None
    text = _constraint_text(exc)
    for needles, message in DUPLICATE_MESSAGES:
        if any(needle in text for needle in needles):
            return message
    return None
