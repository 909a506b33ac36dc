"""
Time entry lifecycle service.
Users create entries in SUBMITTED state and may edit or delete them.
Managers and directors review them: SUBMITTED -> APPROVED | REJECTED,
APPROVED -> REJECTED. Nothing ever returns to SUBMITTED.
"""
import sqlite3
from datetime import time
from decimal import Decimal, ROUND_HALF_UP
from typing import Optional
import logging

from timetracker.core.exceptions import NotFoundError, PermissionDeniedError, ValidationError
from timetracker.models.project import BillingType, Task
from timetracker.models.time_entry import TimeEntry
from timetracker.models.user import User, UserRole
from timetracker.repositories.project_repository import ProjectRepository
from timetracker.repositories.task_repository import TaskRepository
from timetracker.repositories.time_entry_repository import TimeEntryRepository
from timetracker.repositories.user_repository import UserRepository
from timetracker.schemas.time_entry import TimeEntryCreate, TimeEntryUpdate

logger = logging.getLogger(__name__)

REVIEWER_ROLES = (UserRole.MANAGER, UserRole.DIRECTOR)


def hours_between(start: time, end: time) -> Decimal:
    """Hours between two times of day, rounded to 2 places half-up."""
    if end <= start:
        raise ValidationError("hours_to must be after hours_from")
    start_minutes = start.hour * 60 + start.minute
    end_minutes = end.hour * 60 + end.minute
    hours = Decimal(end_minutes - start_minutes) / Decimal(60)
    return hours.quantize(Decimal("0.01"), rounding=ROUND_HALF_UP)


def validate_month(year: int, month: int) -> None:
    if not 1 <= month <= 12:
        raise ValidationError(f"Month must be between 1 and 12, got {month}")
    if year < 1:
        raise ValidationError(f"Invalid year {year}")


def _require_positive(value: Optional[Decimal], field: str) -> Decimal:
    if value is None:
        raise ValidationError(f"{field} is required")
    if value <= 0:
        raise ValidationError(f"{field} must be positive")
    return value


class TimeEntryService:
    def __init__(self, conn: sqlite3.Connection) -> None:
        logger.trace("Initializing TimeEntryService")
        self._repo = TimeEntryRepository(conn)
        self._users = UserRepository(conn)
        self._projects = ProjectRepository(conn)
        self._tasks = TaskRepository(conn)

    # ------------------------------------------------------------------
    # Read
    # ------------------------------------------------------------------

    def get_entry(self, entry_id: int) -> TimeEntry:
        logger.info("Fetching time entry id=%s", entry_id)
        entry = self._repo.get_by_id(entry_id)
        if not entry:
            logger.warning("Time entry id=%s not found", entry_id)
            raise NotFoundError(f"Time entry with id={entry_id} not found")
        return entry

    def list_for_user(
        self,
        user_id: int,
        month: Optional[int] = None,
        year: Optional[int] = None,
    ) -> list[TimeEntry]:
        """
        Entries of a user in insertion order.
        Filtered to one calendar month only when both month and year are given;
        with just one of them the full set is returned.
        """
        if month is not None and year is not None:
            return self.list_by_user_and_month(user_id, year, month)
        logger.info("Listing all time entries for user id=%s", user_id)
        return self._repo.list_by_user(user_id)

    def list_by_user_and_month(self, user_id: int, year: int, month: int) -> list[TimeEntry]:
        validate_month(year, month)
        logger.info("Listing time entries user id=%s period=%s-%02d", user_id, year, month)
        return self._repo.list_by_user_and_period(user_id, year, month)

    # ------------------------------------------------------------------
    # Create
    # ------------------------------------------------------------------

    def create_entry(self, data: TimeEntryCreate, acting_user: Optional[User] = None) -> TimeEntry:
        """
        Create a SUBMITTED entry.

        The owner defaults to the acting user. A task implies its project.
        Hourly work (or no task) needs positive total_hours; unit-billed tasks
        need a positive quantity and drop total_hours.
        """
        user_id = data.user_id
        if user_id is None and acting_user is not None:
            user_id = acting_user.id
        if user_id is None:
            logger.warning("Time entry without user rejected")
            raise ValidationError("User ID is required")
        self._check_owner(user_id, acting_user)

        if data.date is None:
            logger.warning("Time entry without date rejected user id=%s", user_id)
            raise ValidationError("Date is required")
        if data.project_id is None and data.task_id is None:
            logger.warning("Time entry without project or task rejected user id=%s", user_id)
            raise ValidationError("Project ID or task ID is required")

        if self._users.get_by_id(user_id) is None:
            logger.warning("Time entry for unknown user id=%s", user_id)
            raise NotFoundError(f"User with id={user_id} not found")

        task = self._resolve_task(data.task_id)
        project_id = self._resolve_project_id(data.project_id, task)

        total_hours = data.total_hours
        hours_from, hours_to = data.hours_from, data.hours_to
        if total_hours is None and hours_from is not None and hours_to is not None:
            total_hours = hours_between(hours_from, hours_to)

        quantity = data.quantity
        if task is not None and task.billing_type == BillingType.UNIT:
            quantity = _require_positive(quantity, "Quantity")
            total_hours, hours_from, hours_to = None, None, None
        else:
            total_hours = _require_positive(total_hours, "Total hours")
            quantity = None

        entry = self._repo.create(
            user_id=user_id,
            project_id=project_id,
            entry_date=data.date,
            total_hours=total_hours,
            quantity=quantity,
            description=data.description,
            subproject_id=data.subproject_id,
            task_id=task.id if task else None,
            hours_from=hours_from,
            hours_to=hours_to,
        )
        logger.info("Time entry created id=%s", entry.id)
        return entry

    # ------------------------------------------------------------------
    # Update / delete
    # ------------------------------------------------------------------

    def update_entry(
        self,
        entry_id: int,
        data: TimeEntryUpdate,
        acting_user: Optional[User] = None,
    ) -> TimeEntry:
        """
        Apply the non-null editable fields; status, owner and references never change.

        The patch follows the entry's billing mode: unit-billed entries only
        take a quantity, everything else only takes hours. A partial hours
        range is merged with the stored one, and total_hours is derived from
        the merged range unless the patch sets it.
        """
        logger.info("Updating time entry id=%s", entry_id)
        entry = self.get_entry(entry_id)
        self._check_owner(entry.user_id, acting_user)

        task = self._resolve_task(entry.task_id)
        fields: dict = {}
        if task is not None and task.billing_type == BillingType.UNIT:
            if data.total_hours is not None or data.hours_from is not None or data.hours_to is not None:
                logger.warning("Hours patch on unit-billed entry id=%s rejected", entry.id)
                raise ValidationError("Unit-billed entries take a quantity, not hours")
            if data.quantity is not None:
                fields["quantity"] = _require_positive(data.quantity, "Quantity")
        else:
            if data.quantity is not None:
                logger.warning("Quantity patch on hourly entry id=%s rejected", entry.id)
                raise ValidationError("Quantity is only accepted for unit-billed tasks")
            if data.hours_from is not None or data.hours_to is not None:
                hours_from = data.hours_from if data.hours_from is not None else entry.hours_from
                hours_to = data.hours_to if data.hours_to is not None else entry.hours_to
                fields["hours_from"] = hours_from
                fields["hours_to"] = hours_to
                if hours_from is not None and hours_to is not None:
                    derived = hours_between(hours_from, hours_to)
                    if data.total_hours is None:
                        fields["total_hours"] = derived
            if data.total_hours is not None:
                fields["total_hours"] = _require_positive(data.total_hours, "Total hours")

        if data.description is not None:
            fields["description"] = data.description

        updated = self._found(self._repo.update(entry.id, **fields), entry.id)
        logger.info("Time entry updated id=%s fields=%s", entry.id, sorted(fields))
        return updated

    def delete_entry(self, entry_id: int, acting_user: Optional[User] = None) -> None:
        """Permanently remove an entry."""
        logger.info("Deleting time entry id=%s", entry_id)
        if acting_user is not None:
            self._check_owner(self.get_entry(entry_id).user_id, acting_user)
        elif not self._repo.exists(entry_id):
            logger.warning("Time entry id=%s not found for deletion", entry_id)
            raise NotFoundError(f"Time entry with id={entry_id} not found")

        self._repo.delete(entry_id)
        logger.info("Time entry deleted id=%s", entry_id)

    # ------------------------------------------------------------------
    # Review (manager/director only, enforced by the API layer)
    # ------------------------------------------------------------------

    def approve_entry(self, entry_id: int, approver_id: int) -> TimeEntry:
        """Approve an entry; re-approval overwrites the previous approver and time."""
        logger.info("Approving time entry id=%s approver id=%s", entry_id, approver_id)
        entry = self.get_entry(entry_id)
        approved = self._found(self._repo.approve(entry.id, approver_id), entry.id)
        logger.info("Time entry approved id=%s", entry.id)
        return approved

    def reject_entry(self, entry_id: int) -> TimeEntry:
        """Reject an entry; a previous approver and approval time are kept."""
        logger.info("Rejecting time entry id=%s", entry_id)
        entry = self.get_entry(entry_id)
        rejected = self._found(self._repo.reject(entry.id), entry.id)
        logger.info("Time entry rejected id=%s", entry.id)
        return rejected

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------

    def _found(self, entry: Optional[TimeEntry], entry_id: int) -> TimeEntry:
        """Raise NotFoundError when the re-read after a write finds no row."""
        if entry is None:
            logger.warning("Time entry id=%s disappeared during write", entry_id)
            raise NotFoundError(f"Time entry with id={entry_id} not found")
        return entry

    def _check_owner(self, owner_id: int, acting_user: Optional[User]) -> None:
        """Employees may only touch their own entries."""
        if acting_user is None or acting_user.role in REVIEWER_ROLES:
            return
        if owner_id != acting_user.id:
            logger.warning("User id=%s cannot modify entries of user id=%s", acting_user.id, owner_id)
            raise PermissionDeniedError("You can only manage your own time entries")

    def _resolve_task(self, task_id: Optional[int]) -> Optional[Task]:
        if task_id is None:
            return None
        task = self._tasks.get_by_id(task_id)
        if task is None:
            logger.warning("Task id=%s not found", task_id)
            raise NotFoundError(f"Task with id={task_id} not found")
        return task

    def _resolve_project_id(self, project_id: Optional[int], task: Optional[Task]) -> int:
        if task is not None:
            if project_id is not None and project_id != task.project_id:
                logger.warning("Task id=%s does not belong to project id=%s", task.id, project_id)
                raise ValidationError(f"Task {task.id} does not belong to project {project_id}")
            return task.project_id
        if project_id is None or self._projects.get_by_id(project_id) is None:
            logger.warning("Project id=%s not found", project_id)
            raise NotFoundError(f"Project with id={project_id} not found")
        return project_id
