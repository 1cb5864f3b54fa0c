"""
Authentication Utility - JWT and Password handling.

Provides:
- Password hashing with bcrypt
- JWT token creation/verification
- FastAPI dependency for protected routes
"""

from datetime import datetime, timedelta, timezone
from functools import lru_cache
from typing import Optional
from jose import ExpiredSignatureError, JWTError, jwt
from passlib.context import CryptContext
from fastapi import Depends, HTTPException, Request, status
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials

from app.core.config import get_settings

STUDENT_ROLE = "student"

# Bearer token extractor; missing, empty or non-Bearer headers come back as None
bearer_scheme = HTTPBearer(auto_error=False)


class TokenExpiredError(Exception):
    """Token signature is valid but its exp claim has passed."""


class InvalidTokenError(Exception):
    """Token is malformed or its signature does not verify."""


@lru_cache()
def _pwd_context(rounds: int) -> CryptContext:
    return CryptContext(schemes=["bcrypt"], deprecated="auto", bcrypt__rounds=rounds)


def pwd_context() -> CryptContext:
    return _pwd_context(get_settings().bcrypt_rounds)


def hash_password(password: str) -> str:
    """Hash password with bcrypt."""
    return pwd_context().hash(password)


def verify_password(plain_password: str, hashed_password: str) -> bool:
    """Verify password against hash (constant-time compare)."""
    try:
        return pwd_context().verify(plain_password, hashed_password)
    except ValueError:
        # stored value is not a recognisable hash
        return False


def create_access_token(data: dict, expires_delta: Optional[timedelta] = None) -> str:
    """Create JWT access token."""
    settings = get_settings()
    to_encode = data.copy()
    expire = datetime.now(timezone.utc) + (expires_delta or timedelta(minutes=settings.jwt_expire_minutes))
    to_encode.update({"exp": expire})
    return jwt.encode(to_encode, settings.jwt_secret_key, algorithm=settings.jwt_algorithm)


def decode_token(token: str) -> dict:
    """Decode and verify JWT token."""
    settings = get_settings()
    try:
        return jwt.decode(token, settings.jwt_secret_key, algorithms=[settings.jwt_algorithm])
    except ExpiredSignatureError as e:
        raise TokenExpiredError(str(e)) from e
    except JWTError as e:
        raise InvalidTokenError(str(e)) from e


def student_claims(student: dict) -> dict:
    """Claims embedded in a student's session token."""
    return {
        "id": student["id"],
        "email": student["email"],
        "name": student["firstName"],
        "role": STUDENT_ROLE,
    }


async def get_current_student(
    request: Request,
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
) -> dict:
    """
    FastAPI dependency - reject requests without a valid bearer token.

    Usage:
        @router.get("/protected")
        async def route(user: dict = Depends(get_current_student)):
            return user
    """
    if credentials is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Authorization header missing or malformed",
            headers={"WWW-Authenticate": "Bearer"},
        )

    try:
        claims = decode_token(credentials.credentials)
    except TokenExpiredError:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Token expired",
            headers={"WWW-Authenticate": "Bearer"},
        )
    except InvalidTokenError:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Invalid token")

    request.state.user = claims
    return claims
