"""
School Management API - Main Application

FastAPI backend with:
- PostgreSQL for students, guardians and schedules
- JWT authentication for students
- Swagger docs at /api-docs

Run: uvicorn app.main:app --reload
"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError

from app import __version__
from app.api.routes import api_router
from app.core.config import get_settings
from app.core.errors import validation_exception_handler
from app.core.logging_config import configure_logging
from app.db.postgres import Database
from app.db.schema import init_schema

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Open the connection pool on startup and drain it on shutdown."""
    settings = get_settings()
    db = Database(settings)
    logger.info("Connecting to %s database", db.engine.dialect.name)
    if settings.create_schema:
        init_schema(db.engine)
        logger.info("Database schema ready")
    app.state.db = db
    try:
        yield
    finally:
        db.dispose()
        logger.info("Database pool disposed")


async def storage_exception_handler(request: Request, exc: SQLAlchemyError) -> JSONResponse:
    """Storage errors no route mapped: log them and hide the details."""
    logger.error("Unhandled database error on %s %s", request.method, request.url.path, exc_info=exc)
    return JSONResponse(status_code=500, content={"detail": "Internal server error"})


async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.error("Unhandled error on %s %s", request.method, request.url.path, exc_info=exc)
    return JSONResponse(status_code=500, content={"detail": "Internal server error"})


def create_app() -> FastAPI:
    settings = get_settings()
    configure_logging(settings.log_level)

    app = FastAPI(
        title="School Management API",
        description="""
        API for registering and managing students and their guardians.

        ## Features
        - **Authentication**: student registration (with guardian) and JWT login
        - **Students**: paginated listing, lookup, partial update, delete
        - **Schedules**: paginated listing and CRUD
        """,
        version=__version__,
        docs_url="/api-docs",
        redoc_url=None,
        lifespan=lifespan,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.add_exception_handler(RequestValidationError, validation_exception_handler)
    app.add_exception_handler(SQLAlchemyError, storage_exception_handler)
    app.add_exception_handler(Exception, unhandled_exception_handler)

    app.include_router(api_router)

    @app.get("/health", tags=["Health"])
    def health_check(request: Request):
        """Report database connectivity."""
        db: Database = request.app.state.db
        return {
            "status": "healthy",
            "database": "connected" if db.ping() else "disconnected",
        }

    return app


app = create_app()
