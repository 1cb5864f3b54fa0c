import logging
from contextlib import contextmanager
from typing import Iterator, Optional

from fastapi import Request
from sqlalchemy import create_engine, event, text
from sqlalchemy.orm import sessionmaker, Session

from app.core.config import Settings

logger = logging.getLogger(__name__)


def _enable_sqlite_foreign_keys(dbapi_connection, connection_record):
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()


class Database:
    """
    Process-scoped connection pool.

    Created once at startup, handed to route handlers through
    `Depends(get_database)` and disposed at shutdown.
    """

    def __init__(self, settings: Settings):
        url = settings.postgres_url
        self.is_sqlite = url.startswith("sqlite")

        if self.is_sqlite:
            # SQLite has no server-side pool; the check_same_thread flag lets
            # the threadpool that runs sync handlers share connections.
            self.engine = create_engine(
                url,
                connect_args={"check_same_thread": False},
                echo=settings.db_echo,
            )
            event.listen(self.engine, "connect", _enable_sqlite_foreign_keys)
        else:
            # pool_size: connections kept ready
            # max_overflow: extra connections allowed under load
            self.engine = create_engine(
                url,
                pool_size=settings.db_pool_size,
                max_overflow=settings.db_max_overflow,
                pool_pre_ping=True,
                echo=settings.db_echo,
            )

        self.SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=self.engine)

    @contextmanager
    def session(self) -> Iterator[Session]:
        """
        Transactional session. Commits on success, rolls back on any error.
        Usage:
            with db.session() as session:
                session.execute(text("SELECT * FROM students"))
        """
        session = self.SessionLocal()
        try:
            yield session
            session.commit()
        except Exception:
            session.rollback()
            raise
        finally:
            session.close()

    def fetch_all(self, sql: str, params: Optional[dict] = None) -> list:
        """Execute one query and return its rows as a list of dicts."""
        with self.session() as session:
            result = session.execute(text(sql), params or {})
            return [dict(row) for row in result.mappings().all()]

    def fetch_one(self, sql: str, params: Optional[dict] = None) -> Optional[dict]:
        rows = self.fetch_all(sql, params)
        return rows[0] if rows else None

    def ping(self) -> bool:
        """Return True if the database answers a trivial query."""
        try:
            row = self.fetch_one("SELECT 1 AS ok")
            return row is not None and row["ok"] == 1
        except Exception:
            logger.exception("Database connection failed")
            return False

    def dispose(self) -> None:
        self.engine.dispose()


def get_database(request: Request) -> Database:
    """
    Dependency for FastAPI route injection.
    Usage:
        @router.get("/students")
        def list_students(db: Database = Depends(get_database)):
            ...
    """
    return request.app.state.db
