"""
Time entry endpoints:
  POST   /time-entries                                   – Create a time entry
  GET    /time-entries                                   – List my entries (optional month+year)
  GET    /time-entries/user/{user_id}                    – All entries of a user
  GET    /time-entries/user/{user_id}/month/{year}/{month} – Entries of a user for a month
  GET    /time-entries/{entry_id}                        – Get a specific time entry
  PUT    /time-entries/{entry_id}                        – Update an entry's editable fields
  DELETE /time-entries/{entry_id}                        – Delete an entry
  PUT    /time-entries/{entry_id}/approve                – Approve (Manager/Director)
  PUT    /time-entries/{entry_id}/reject                 – Reject (Manager/Director)
"""
from typing import Optional
from fastapi import APIRouter, Depends, Query, status

from timetracker.core.dependencies import db_dependency, get_current_user, require_reviewer
from timetracker.core.exceptions import PermissionDeniedError
from timetracker.models.user import User, UserRole
from timetracker.schemas.time_entry import TimeEntryCreate, TimeEntryResponse, TimeEntryUpdate
from timetracker.services.time_entry_service import TimeEntryService

router = APIRouter(prefix="/time-entries", tags=["Time Entries"])


@router.post(
    "",
    response_model=TimeEntryResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Create a new time entry",
)
def create_time_entry(
    data: TimeEntryCreate,
    conn=Depends(db_dependency),
    current_user: User = Depends(get_current_user),
):
    """
    Create a time entry in `SUBMITTED` state.

    - **date**: day of the work (YYYY-MM-DD)
    - **project_id** or **task_id**: where the work belongs
    - **total_hours**: hours worked, required unless the task is unit-billed
    - **quantity**: units delivered, required for unit-billed tasks
    - **hours_from** / **hours_to**: legacy range used when `total_hours` is omitted
    """
    return TimeEntryService(conn).create_entry(data, acting_user=current_user)


@router.get("", response_model=list[TimeEntryResponse], summary="List my time entries")
def list_my_entries(
    month: Optional[int] = Query(None, description="Month (1-12), used together with year"),
    year: Optional[int] = Query(None, description="Year, used together with month"),
    conn=Depends(db_dependency),
    current_user: User = Depends(get_current_user),
):
    """Entries of the current user; filtered only when both month and year are given."""
    return TimeEntryService(conn).list_for_user(current_user.id, month=month, year=year)


@router.get(
    "/user/{user_id}",
    response_model=list[TimeEntryResponse],
    summary="List all entries of a user",
)
def list_user_entries(
    user_id: int,
    conn=Depends(db_dependency),
    current_user: User = Depends(get_current_user),
):
    """Unfiltered entries of any user for managers and directors; employees only see their own."""
    if current_user.role == UserRole.EMPLOYEE and current_user.id != user_id:
        raise PermissionDeniedError("You can only view your own time entries")
    return TimeEntryService(conn).list_for_user(user_id)


@router.get(
    "/user/{user_id}/month/{year}/{month}",
    response_model=list[TimeEntryResponse],
    summary="List a user's entries for one month",
)
def list_user_month_entries(
    user_id: int,
    year: int,
    month: int,
    conn=Depends(db_dependency),
    current_user: User = Depends(get_current_user),
):
    if current_user.role == UserRole.EMPLOYEE and current_user.id != user_id:
        raise PermissionDeniedError("You can only view your own time entries")
    return TimeEntryService(conn).list_by_user_and_month(user_id, year, month)


@router.get("/{entry_id}", response_model=TimeEntryResponse, summary="Get a specific time entry")
def get_entry(
    entry_id: int,
    conn=Depends(db_dependency),
    current_user: User = Depends(get_current_user),
):
    entry = TimeEntryService(conn).get_entry(entry_id)
    if current_user.role == UserRole.EMPLOYEE and entry.user_id != current_user.id:
        raise PermissionDeniedError("You can only view your own time entries")
    return entry


@router.put("/{entry_id}", response_model=TimeEntryResponse, summary="Update a time entry")
def update_entry(
    entry_id: int,
    data: TimeEntryUpdate,
    conn=Depends(db_dependency),
    current_user: User = Depends(get_current_user),
):
    """Only the fields present in the body are applied. Status never changes here."""
    return TimeEntryService(conn).update_entry(entry_id, data, acting_user=current_user)


@router.delete(
    "/{entry_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Delete a time entry",
)
def delete_entry(
    entry_id: int,
    conn=Depends(db_dependency),
    current_user: User = Depends(get_current_user),
):
    TimeEntryService(conn).delete_entry(entry_id, acting_user=current_user)


@router.put(
    "/{entry_id}/approve",
    response_model=TimeEntryResponse,
    summary="Approve a time entry (Manager/Director)",
)
def approve_entry(
    entry_id: int,
    conn=Depends(db_dependency),
    current_user: User = Depends(require_reviewer),
):
    """Sets `APPROVED` and stamps the acting user as approver."""
    return TimeEntryService(conn).approve_entry(entry_id, approver_id=current_user.id)


@router.put(
    "/{entry_id}/reject",
    response_model=TimeEntryResponse,
    summary="Reject a time entry (Manager/Director)",
)
def reject_entry(
    entry_id: int,
    conn=Depends(db_dependency),
    _: User = Depends(require_reviewer),
):
    return TimeEntryService(conn).reject_entry(entry_id)
