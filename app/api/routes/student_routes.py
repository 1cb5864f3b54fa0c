"""
Student Routes (bearer token required)

GET /students - List students with guardian info (paginated, searchable, sortable)
GET /students/{student_id} - Get one student with guardian info
PUT /students/{student_id} - Update a student's own fields
DELETE /students/{student_id} - Delete a student (guardian is removed with it)
"""

import logging
from typing import Optional

from fastapi import APIRouter, HTTPException, Depends, Query
from sqlalchemy import text
from sqlalchemy.exc import IntegrityError

from app.db.postgres import Database, get_database
from app.db.query import ListParams, SortOrder, build_update
from app.core.auth import get_current_student, hash_password
from app.core.errors import duplicate_message
from app.services.student_service import STUDENT_UPDATE_COLUMNS, get_student, student_list_query
from app.schemas.schemas import (
    StudentSortField, StudentUpdate, StudentWithGuardian, StudentListResponse,
    StudentPagination, UpdatedResponse, MessageResponse
)

logger = logging.getLogger(__name__)

router = APIRouter(
    prefix="/students",
    tags=["Students"],
    dependencies=[Depends(get_current_student)],
)


@router.get("", response_model=StudentListResponse)
def list_students(
    page: int = Query(1, ge=1),
    limit: int = Query(10, ge=1, le=100),
    search: Optional[str] = Query(None, description="Search names, admission number, email, form or guardian name"),
    sortBy: StudentSortField = Query(StudentSortField.lastName),
    sortOrder: SortOrder = Query(SortOrder.asc),
    db: Database = Depends(get_database),
):
    """List students joined with their guardian, with pagination, search and sorting."""
    params = ListParams(page=page, limit=limit, search=search, sort_by=sortBy, sort_order=sortOrder)
    result = student_list_query.run(db, params)

    return StudentListResponse(
        students=[StudentWithGuardian(**row) for row in result.rows],
        pagination=StudentPagination(
            totalStudents=result.total,
            totalPages=result.total_pages,
            currentPage=result.page,
            limit=result.limit,
        ),
    )


@router.get("/{student_id}", response_model=StudentWithGuardian)
def get_student_by_id(student_id: int, db: Database = Depends(get_database)):
    """Get a single student with guardian information."""
    student = get_student(db, student_id)
    if not student:
        raise HTTPException(status_code=404, detail="Student not found")
    return StudentWithGuardian(**student)


@router.put("/{student_id}", response_model=UpdatedResponse)
def update_student(student_id: int, data: StudentUpdate, db: Database = Depends(get_database)):
    """Update a student. Only provided fields are updated; a new password is re-hashed."""
    values = {
        field: value
        for field, value in data.model_dump(mode="json", exclude_unset=True).items()
        if value is not None
    }
    if values.get("password"):
        values["password"] = hash_password(values["password"])

    if not values:
        raise HTTPException(status_code=400, detail="No fields to update.")

    sql, params = build_update("students", STUDENT_UPDATE_COLUMNS, values, key=student_id)
    try:
        with db.session() as session:
            row = session.execute(text(sql), params).fetchone()
    except IntegrityError as e:
        message = duplicate_message(e)
        if message:
            logger.warning("Update of student %s rejected: %s", student_id, message)
            raise HTTPException(status_code=400, detail=message)
        logger.exception("Error updating student %s", student_id)
        raise HTTPException(status_code=500, detail="Internal server error")

    if not row:
        raise HTTPException(status_code=404, detail="Student not found")

    return UpdatedResponse(message="Student updated successfully.", id=row[0])


@router.delete("/{student_id}", response_model=MessageResponse)
def delete_student(student_id: int, db: Database = Depends(get_database)):
    """Delete a student. The database trigger removes the linked guardian."""
    with db.session() as session:
        result = session.execute(
            text("DELETE FROM students WHERE id = :id"),
            {"id": student_id}
        )
        if result.rowcount == 0:
            raise HTTPException(status_code=404, detail="Student not found")

    logger.info("Deleted student %s", student_id)
    return MessageResponse(message="Student and associated guardian deleted successfully")
