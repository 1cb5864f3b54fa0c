"""
Schemas module - Request/Response schemas for API endpoints.
"""

from app.schemas.schemas import *  # noqa: F401,F403
