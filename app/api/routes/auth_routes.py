"""
Authentication Routes

POST /auth/register - Register a student and their guardian
POST /auth/login - Login and get JWT token
GET /auth/me - Get the claims of the current token
"""

import logging

from fastapi import APIRouter, HTTPException, Depends
from sqlalchemy.exc import IntegrityError, SQLAlchemyError

from app.db.postgres import Database, get_database
from app.core.auth import (
    create_access_token, get_current_student, pwd_context, student_claims, verify_password
)
from app.core.errors import duplicate_message
from app.services import student_service
from app.schemas.schemas import (
    RegistrationRequest, LoginRequest, TokenResponse, StudentWithGuardian
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/auth", tags=["Authentication"])


@router.post("/register", response_model=StudentWithGuardian, status_code=201)
def register(request: RegistrationRequest, db: Database = Depends(get_database)):
    """
    Register a new student and their guardian.

    The guardian is matched by email and reused if it already exists.
    Guardian and student are written in a single transaction.
    """
    try:
        student = student_service.register_student(db, request.model_dump(mode="json"))
    except IntegrityError as e:
        message = duplicate_message(e)
        if message:
            logger.warning("Registration rejected: %s", message)
            raise HTTPException(status_code=400, detail=message)
        logger.exception("Registration transaction error")
        raise HTTPException(status_code=500, detail="Internal server error during registration.")
    except SQLAlchemyError:
        logger.exception("Registration transaction error")
        raise HTTPException(status_code=500, detail="Internal server error during registration.")

    return StudentWithGuardian(**student)


@router.post("/login", response_model=TokenResponse)
def login(request: LoginRequest, db: Database = Depends(get_database)):
    """
    Login and receive JWT access token.

    Include token in requests: Authorization: Bearer <token>
    """
    try:
        student = student_service.find_login(db, request.email)
    except SQLAlchemyError:
        logger.exception("Login error")
        raise HTTPException(status_code=500, detail="Internal server error during login")

    if not student:
        # unknown emails cost one bcrypt verification as well
        pwd_context().dummy_verify()
        raise HTTPException(status_code=401, detail="Invalid email or password")

    if not verify_password(request.password, student["password"]):
        raise HTTPException(status_code=401, detail="Invalid email or password")

    token = create_access_token(data=student_claims(student))
    return TokenResponse(token=token)


@router.get("/me")
def get_me(user: dict = Depends(get_current_student)):
    """Claims carried by the current bearer token."""
    return user
