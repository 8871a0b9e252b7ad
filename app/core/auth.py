"""
Authentication Utility - JWT bearer tokens.

Tokens are issued by the external session layer; this module only
verifies them and turns the claims into an AuthContext.

Provides:
- JWT token creation (for tooling and tests) / verification
- FastAPI dependencies for protected routes
"""

from datetime import datetime, timedelta, timezone
from typing import Optional
from jose import JWTError, jwt
from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials

from app.core.config import get_settings
from app.db.gateway import PlacementGateway
from app.db.postgres import get_db_session
from app.schemas.schemas import AuthContext, UserRole

settings = get_settings()

# Bearer token extractor
bearer_scheme = HTTPBearer()

OFFICER_ROLES = {UserRole.placement_officer.value, UserRole.super_admin.value}


def create_access_token(data: dict, expires_delta: Optional[timedelta] = None) -> str:
    """Create JWT access token."""
    to_encode = data.copy()
    expire = datetime.now(timezone.utc) + (expires_delta or timedelta(minutes=settings.jwt_expire_minutes))
    to_encode.update({"exp": expire})
    return jwt.encode(to_encode, settings.jwt_secret_key, algorithm=settings.jwt_algorithm)


def decode_token(token: str) -> Optional[dict]:
    """Decode and verify JWT token."""
    try:
        return jwt.decode(token, settings.jwt_secret_key, algorithms=[settings.jwt_algorithm])
    except JWTError:
        return None


def get_current_user(credentials: HTTPAuthorizationCredentials = Depends(bearer_scheme)) -> AuthContext:
    """
    FastAPI dependency - Get current authenticated user.

    Usage:
        @app.get("/protected")
        def route(user: AuthContext = Depends(get_current_user)):
            return user
    """
    credentials_exception = HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail="Invalid or expired token",
        headers={"WWW-Authenticate": "Bearer"},
    )

    payload = decode_token(credentials.credentials)
    if not payload:
        raise credentials_exception

    user_id = payload.get("sub")
    role = payload.get("role")
    if not user_id or not role:
        raise credentials_exception

    try:
        return AuthContext(user_id=int(user_id), role=role)
    except ValueError:
        raise credentials_exception


def get_current_student(user: AuthContext = Depends(get_current_user)) -> dict:
    """Dependency - Require student role and get student_id."""
    if user.role != UserRole.student.value:
        raise HTTPException(status_code=403, detail="Students only")

    with get_db_session() as db:
        student_id = PlacementGateway(db).get_student_id_for_user(user.user_id)

    if student_id is None:
        raise HTTPException(status_code=404, detail="Student profile not found. Create profile first.")

    return {"user_id": user.user_id, "role": user.role, "student_id": student_id}


def get_current_officer(user: AuthContext = Depends(get_current_user)) -> AuthContext:
    """Dependency - Require placement officer or super admin."""
    if user.role not in OFFICER_ROLES:
        raise HTTPException(status_code=403, detail="Placement officers only")
    return user
