"""
Authentication endpoints:
  POST /auth/login   – OAuth2 password flow, returns an access token
  GET  /auth/me      – Return the currently authenticated user's profile
"""
from fastapi import APIRouter, Depends
from fastapi.security import OAuth2PasswordRequestForm
import logging

from timetracker.core.dependencies import db_dependency, get_current_user
from timetracker.models.user import User
from timetracker.schemas.token import Token
from timetracker.schemas.user import UserResponse
from timetracker.services.auth_service import AuthService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/auth", tags=["Authentication"])


@router.post(
    "/login",
    response_model=Token,
    summary="Login with username/email and password (OAuth2 Password Flow)",
)
def login(
    form_data: OAuth2PasswordRequestForm = Depends(),
    conn=Depends(db_dependency),
):
    """
    Standard OAuth2 Password Flow endpoint.
    - **username**: your username *or* email address
    - **password**: your password
    """
    service = AuthService(conn)
    return service.login(form_data.username, form_data.password)


@router.get(
    "/me",
    response_model=UserResponse,
    summary="Get the current authenticated user's profile",
)
def get_me(current_user: User = Depends(get_current_user)):
    return current_user
