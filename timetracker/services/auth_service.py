"""
Authentication service: credential check and access token issue.
"""
import sqlite3
import logging

from fastapi import HTTPException, status

from timetracker.core.security import verify_password, create_access_token
from timetracker.schemas.token import Token
from timetracker.services.user_service import UserService

logger = logging.getLogger(__name__)


class AuthService:
    def __init__(self, conn: sqlite3.Connection) -> None:
        logger.trace("Initializing AuthService")
        self._users = UserService(conn)

    def login(self, username: str, password: str) -> Token:
        """
        Validate credentials and issue an access token.
        Accepts either username or email in the *username* field.
        """
        logger.info("Authenticating user '%s'", username)
        user = self._users.find_by_login(username)

        if not user or not verify_password(password, user.hashed_password):
            logger.warning("Invalid login attempt for '%s'", username)
            raise HTTPException(
                status_code=status.HTTP_401_UNAUTHORIZED,
                detail="Incorrect username or password",
                headers={"WWW-Authenticate": "Bearer"},
            )

        if not user.is_active:
            logger.warning("Inactive user attempted login id=%s", user.id)
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail="Inactive user account",
            )

        logger.info("Login successful for user id=%s", user.id)
        return Token(access_token=create_access_token(user.id, user.role.value))
