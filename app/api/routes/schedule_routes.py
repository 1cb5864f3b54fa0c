"""
Schedule Routes (bearer token required)

GET /schedules - List schedules (paginated, searchable, sortable)
GET /schedules/{schedule_id} - Get schedule details
POST /schedules - Create schedule
PUT /schedules/{schedule_id} - Update schedule
DELETE /schedules/{schedule_id} - Delete schedule
"""

import logging
from typing import Optional

from fastapi import APIRouter, HTTPException, Depends, Query
from sqlalchemy import text

from app.db.postgres import Database, get_database
from app.db.query import ListParams, ListQuery, SortOrder, build_update
from app.core.auth import get_current_student
from app.schemas.schemas import (
    ScheduleCreate, ScheduleUpdate, Schedule, ScheduleListResponse, SchedulePagination,
    ScheduleResponse, ScheduleSortField, MessageResponse
)

logger = logging.getLogger(__name__)

router = APIRouter(
    prefix="/schedules",
    tags=["Schedules"],
    dependencies=[Depends(get_current_student)],
)

SCHEDULE_COLUMNS = "id, title, category, start_date, end_date, img"

SCHEDULE_UPDATE_COLUMNS = {
    "title": "title",
    "category": "category",
    "start_date": "start_date",
    "end_date": "end_date",
    "img": "img",
}

schedule_list_query = ListQuery(
    select_sql=f"SELECT {SCHEDULE_COLUMNS} FROM schedules",
    search_columns=["title", "category"],
    sort_columns={
        ScheduleSortField.title: "title",
        ScheduleSortField.category: "category",
        ScheduleSortField.start_date: "start_date",
        ScheduleSortField.end_date: "end_date",
        ScheduleSortField.id: "id",
    },
    tiebreaker="id",
)


@router.get("", response_model=ScheduleListResponse)
def list_schedules(
    page: int = Query(1, ge=1),
    limit: int = Query(10, ge=1, le=100),
    search: Optional[str] = Query(None, description="Search in title or category"),
    sortBy: ScheduleSortField = Query(ScheduleSortField.start_date),
    sortOrder: SortOrder = Query(SortOrder.asc),
    db: Database = Depends(get_database),
):
    """List schedules with pagination, search and sorting."""
    params = ListParams(page=page, limit=limit, search=search, sort_by=sortBy, sort_order=sortOrder)
    result = schedule_list_query.run(db, params)

    return ScheduleListResponse(
        schedules=[Schedule(**row) for row in result.rows],
        pagination=SchedulePagination(
            totalSchedules=result.total,
            totalPages=result.total_pages,
            currentPage=result.page,
            limit=result.limit,
        ),
    )


@router.get("/{schedule_id}", response_model=Schedule)
def get_schedule(schedule_id: int, db: Database = Depends(get_database)):
    row = db.fetch_one(f"SELECT {SCHEDULE_COLUMNS} FROM schedules WHERE id = :id", {"id": schedule_id})
    if not row:
        raise HTTPException(status_code=404, detail="Schedule not found")
    return Schedule(**row)


@router.post("", response_model=ScheduleResponse, status_code=201)
def create_schedule(data: ScheduleCreate, db: Database = Depends(get_database)):
    """Create a new schedule. A missing image is stored as an empty string."""
    payload = data.model_dump(mode="json")
    row = db.fetch_one(
        f"""
        INSERT INTO schedules (title, category, start_date, end_date, img)
        VALUES (:title, :category, :start_date, :end_date, :img)
        RETURNING {SCHEDULE_COLUMNS}
        """,
        {**payload, "img": payload.get("img") or ""}
    )
    logger.info("Created schedule %s", row["id"])
    return ScheduleResponse(message="Schedule created successfully", schedule=Schedule(**row))


@router.put("/{schedule_id}", response_model=ScheduleResponse)
def update_schedule(schedule_id: int, data: ScheduleUpdate, db: Database = Depends(get_database)):
    """Update a schedule. Only provided fields are updated."""
    values = {
        field: value
        for field, value in data.model_dump(mode="json", exclude_unset=True).items()
        if value is not None
    }
    if not values:
        raise HTTPException(status_code=400, detail="No fields to update.")

    sql, params = build_update(
        "schedules", SCHEDULE_UPDATE_COLUMNS, values, key=schedule_id, returning=SCHEDULE_COLUMNS
    )
    row = db.fetch_one(sql, params)
    if not row:
        raise HTTPException(status_code=404, detail="Schedule not found")

    return ScheduleResponse(message="Schedule updated successfully.", schedule=Schedule(**row))


@router.delete("/{schedule_id}", response_model=MessageResponse)
def delete_schedule(schedule_id: int, db: Database = Depends(get_database)):
    with db.session() as session:
        result = session.execute(
            text("DELETE FROM schedules WHERE id = :id"),
            {"id": schedule_id}
        )
        if result.rowcount == 0:
            raise HTTPException(status_code=404, detail="Schedule not found")

    return MessageResponse(message="Schedule deleted successfully")
