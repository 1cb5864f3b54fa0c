"""
List query builder - pagination, search and sorting over raw SQL.

Identifiers (sort and search columns) only ever come from the fixed mappings
given to ListQuery; caller-supplied values are always bound parameters.
"""

import math
from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, List, Optional, Sequence, Tuple

from sqlalchemy import text

from app.db.postgres import Database


def escape_like(term: str) -> str:
    """Escape LIKE wildcards so the term matches literally (ESCAPE '\\')."""
    return term.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")


class SortOrder(str, Enum):
    asc = "asc"
    desc = "desc"


@dataclass
class ListParams:
    sort_by: Enum
    page: int = 1
    limit: int = 10
    search: Optional[str] = None
    sort_order: SortOrder = SortOrder.asc

    def __post_init__(self):
        if self.page < 1:
            raise ValueError("page must be at least 1")
        if self.limit < 1:
            raise ValueError("limit must be at least 1")

    @property
    def offset(self) -> int:
        return (self.page - 1) * self.limit


@dataclass
class Page:
    rows: List[dict]
    total: int
    page: int
    limit: int
    total_pages: int = field(init=False)

    def __post_init__(self):
        self.total_pages = math.ceil(self.total / self.limit)


class ListQuery:
    """
    Builds the count and page statements for one resource.

    select_sql: base SELECT ... FROM ... without WHERE/ORDER/LIMIT
    search_columns: SQL column expressions matched by the search term
    sort_columns: sort enum member -> SQL column expression
    tiebreaker: column appended to ORDER BY so pages are stable
    """

    def __init__(
        self,
        select_sql: str,
        search_columns: Sequence[str],
        sort_columns: Dict[Enum, str],
        tiebreaker: Optional[str] = None,
    ):
        self.select_sql = select_sql.strip()
        self.search_columns = tuple(search_columns)
        self.sort_columns = dict(sort_columns)
        self.tiebreaker = tiebreaker

    def _filtered(self, params: ListParams) -> Tuple[str, dict]:
        if not params.search:
            return self.select_sql, {}
        clauses = " OR ".join(f"LOWER({col}) LIKE :search ESCAPE '\\'" for col in self.search_columns)
        return (
            f"{self.select_sql} WHERE ({clauses})",
            {"search": f"%{escape_like(params.search.lower())}%"},
        )

    def _order_by(self, params: ListParams) -> str:
        try:
            column = self.sort_columns[params.sort_by]
        except KeyError:
            raise ValueError(f"Unsupported sort field: {params.sort_by!r}")
        direction = "DESC" if params.sort_order == SortOrder.desc else "ASC"
        order = f"{column} {direction}"
        if self.tiebreaker and self.tiebreaker != column:
            order += f", {self.tiebreaker} {direction}"
        return order

    def build(self, params: ListParams) -> Tuple[str, str, dict]:
        """Return (count_sql, page_sql, bound_params)."""
        filtered_sql, bound = self._filtered(params)
        count_sql = f"SELECT COUNT(*) AS total FROM ({filtered_sql}) AS filtered"
        page_sql = f"{filtered_sql} ORDER BY {self._order_by(params)} LIMIT :limit OFFSET :offset"
        return count_sql, page_sql, bound

    def run(self, db: Database, params: ListParams) -> Page:
        count_sql, page_sql, bound = self.build(params)
        with db.session() as session:
            total = int(session.execute(text(count_sql), bound).scalar_one())
            if params.offset >= total:
                return Page(rows=[], total=total, page=params.page, limit=params.limit)
            result = session.execute(
                text(page_sql),
                {**bound, "limit": params.limit, "offset": params.offset},
            )
            rows = [dict(row) for row in result.mappings().all()]
        return Page(rows=rows, total=total, page=params.page, limit=params.limit)


def build_update(
    table: str,
    columns: Dict[str, str],
    values: dict,
    key: int,
    returning: str = "id",
) -> Tuple[str, dict]:
    """
    Build an UPDATE for the supplied fields only.

    columns maps payload field -> SQL column; fields not in the mapping are
    rejected so no caller-supplied name reaches the SQL text.
    """
    unknown = set(values) - set(columns)
    if unknown:
        raise ValueError(f"Unsupported update fields: {sorted(unknown)}")
    if not values:
        raise ValueError("No fields to update.")

    set_clauses = [f"{columns[name]} = :{name}" for name in values]
    params = dict(values)
    params["_key"] = key
    sql = f"UPDATE {table} SET {', '.join(set_clauses)} WHERE id = :_key RETURNING {returning}"
    return sql, params
