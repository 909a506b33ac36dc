"""
FastAPI dependency injection helpers for authentication and authorisation.
The authenticated user resolved here is the acting user handed to services.
"""
from typing import Generator

from fastapi import Depends, HTTPException, status
from fastapi.security import OAuth2PasswordBearer
from jose import JWTError
import logging

from timetracker.core.security import decode_token
from timetracker.db.database import get_db
from timetracker.models.user import User, UserRole
from timetracker.repositories.user_repository import UserRepository

logger = logging.getLogger(__name__)

oauth2_scheme = OAuth2PasswordBearer(tokenUrl="/api/v1/auth/login")


# ---------------------------------------------------------------------------
# DB dependency
# ---------------------------------------------------------------------------

def db_dependency() -> Generator:
    """Yield a database connection for the duration of a request."""
    with get_db() as conn:
        yield conn


# ---------------------------------------------------------------------------
# Auth dependencies
# ---------------------------------------------------------------------------

def get_current_user(
    token: str = Depends(oauth2_scheme),
    conn=Depends(db_dependency),
) -> User:
    """
    Decode the Bearer access token and return the corresponding active User.
    Raises HTTP 401 if the token is invalid, expired, or the user is not found.
    """
    credentials_exception = HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail="Could not validate credentials",
        headers={"WWW-Authenticate": "Bearer"},
    )
    try:
        payload = decode_token(token)
        if payload.get("type") != "access":
            logger.warning("Access token type mismatch")
            raise credentials_exception
        user_id = payload.get("sub")
        if user_id is None:
            logger.warning("Access token missing subject")
            raise credentials_exception
    except JWTError:
        logger.warning("Failed to decode access token")
        raise credentials_exception

    user = UserRepository(conn).get_by_id(int(user_id))
    if user is None or not user.is_active:
        logger.warning("User not found or inactive for token subject")
        raise credentials_exception
    logger.info("Authenticated user id=%s", user.id)
    return user


# ---------------------------------------------------------------------------
# Role-based access control
# ---------------------------------------------------------------------------

def require_roles(*roles: UserRole):
    """
    Factory that returns a dependency which enforces that the current user
    has one of the specified roles.

    Usage::
        @router.put("/{entry_id}/approve")
        def approve(user: User = Depends(require_roles(UserRole.MANAGER))):
            ...
    """
    def _check(current_user: User = Depends(get_current_user)) -> User:
        if current_user.role not in roles:
            logger.warning(
                "User id=%s lacks required roles: %s",
                current_user.id,
                ", ".join(role.value for role in roles),
            )
            raise HTTPException(
                status_code=status.HTTP_403_FORBIDDEN,
                detail="You do not have permission to perform this action",
            )
        return current_user
    return _check


# Convenience shortcuts
require_director = require_roles(UserRole.DIRECTOR)
require_reviewer = require_roles(UserRole.MANAGER, UserRole.DIRECTOR)
