"""
User management endpoints:
  POST   /users              – Create a user (Director only)
  GET    /users              – List all users (Director only)
  PUT    /users/me/password  – Change the current user's password
  GET    /users/{id}         – Get a specific user (Director, Manager or self)
  PUT    /users/{id}         – Update a user (Director only)
  DELETE /users/{id}         – Delete a user (Director only)
"""
from fastapi import APIRouter, Depends, status

from timetracker.core.dependencies import db_dependency, get_current_user, require_director
from timetracker.core.exceptions import PermissionDeniedError
from timetracker.models.user import User, UserRole
from timetracker.schemas.user import PasswordChange, UserCreate, UserResponse, UserUpdate
from timetracker.services.user_service import UserService

router = APIRouter(prefix="/users", tags=["Users"])


@router.post(
    "",
    response_model=UserResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Create a new user (Director only)",
)
def create_user(
    data: UserCreate,
    conn=Depends(db_dependency),
    _: User = Depends(require_director),
):
    """
    Create a user account with its contract terms.

    - **contract_type**: `UOP` (needs `uop_gross_rate`) or `B2B` (needs `b2b_hourly_net_rate`)
    - **language**: `PL`, `EN` or `UA`
    """
    return UserService(conn).create_user(data)


@router.get("", response_model=list[UserResponse], summary="List all users (Director only)")
def list_users(
    conn=Depends(db_dependency),
    _: User = Depends(require_director),
):
    return UserService(conn).list_users()


@router.put(
    "/me/password",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Change the current user's password",
)
def change_my_password(
    data: PasswordChange,
    conn=Depends(db_dependency),
    current_user: User = Depends(get_current_user),
):
    UserService(conn).change_password(current_user, data)


@router.get("/{user_id}", response_model=UserResponse, summary="Get a specific user")
def get_user(
    user_id: int,
    conn=Depends(db_dependency),
    current_user: User = Depends(get_current_user),
):
    if current_user.role == UserRole.EMPLOYEE and current_user.id != user_id:
        raise PermissionDeniedError("You can only view your own profile")
    return UserService(conn).get_user(user_id)


@router.put("/{user_id}", response_model=UserResponse, summary="Update a user (Director only)")
def update_user(
    user_id: int,
    data: UserUpdate,
    conn=Depends(db_dependency),
    _: User = Depends(require_director),
):
    """Only the fields present in the body are applied."""
    return UserService(conn).update_user(user_id, data)


@router.delete(
    "/{user_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Delete a user (Director only)",
)
def delete_user(
    user_id: int,
    conn=Depends(db_dependency),
    _: User = Depends(require_director),
):
    """Removes the account together with its time entries and project memberships."""
    UserService(conn).delete_user(user_id)
