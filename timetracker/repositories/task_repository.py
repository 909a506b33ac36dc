"""
Repository layer for Task persistence.
All SQL for the `tasks` table lives here.
"""
import sqlite3
from datetime import datetime, timezone
from decimal import Decimal
from typing import Optional
import logging

from timetracker.core.exceptions import ConflictError
from timetracker.core.logging_config import log_db_timing
from timetracker.models.project import BillingType, Task

logger = logging.getLogger(__name__)

DUPLICATE_NUMBER_MESSAGE = (
    "Task number already exists in this project. Task numbers must be unique per project."
)


def _translate_integrity_error(exc: sqlite3.IntegrityError) -> Exception:
    """Map the task-number uniqueness violation onto a ConflictError."""
    text = str(exc)
    if "tasks.project_id, tasks.number" in text or "idx_task_project_number" in text:
        logger.warning("Duplicate task number rejected by database")
        return ConflictError(DUPLICATE_NUMBER_MESSAGE)
    return exc


class TaskRepository:
    """Data access layer for task records."""

    def __init__(self, conn: sqlite3.Connection) -> None:
        logger.trace("Initializing TaskRepository")
        self._conn = conn

    # ------------------------------------------------------------------
    # Read
    # ------------------------------------------------------------------

    @log_db_timing
    def get_by_id(self, task_id: int) -> Optional[Task]:
        """Return a task by id or None if missing."""
        row = self._conn.execute(
            "SELECT * FROM tasks WHERE id = ?", (task_id,)
        ).fetchone()
        return Task.from_row(row) if row else None

    @log_db_timing
    def list_by_project(self, project_id: int) -> list[Task]:
        rows = self._conn.execute(
            "SELECT * FROM tasks WHERE project_id = ? ORDER BY id", (project_id,)
        ).fetchall()
        return [Task.from_row(r) for r in rows]

    # ------------------------------------------------------------------
    # Write
    # ------------------------------------------------------------------

    @log_db_timing
    def create(
        self,
        project_id: int,
        title: str,
        description: Optional[str],
        number: str,
        billing_type: BillingType,
        unit_price: Optional[Decimal],
        unit_name: Optional[str],
    ) -> Task:
        """Insert a task row and return it."""
        logger.info("Creating task record project_id=%s number=%s", project_id, number)
        try:
            cursor = self._conn.execute(
                """
                INSERT INTO tasks (
                    project_id, title, description, number,
                    billing_type, unit_price, unit_name
                )
                VALUES (?, ?, ?, ?, ?, ?, ?)
                """,
                (
                    project_id,
                    title,
                    description,
                    number,
                    billing_type.value,
                    str(unit_price) if unit_price is not None else None,
                    unit_name,
                ),
            )
        except sqlite3.IntegrityError as exc:
            raise _translate_integrity_error(exc) from exc
        return self.get_by_id(cursor.lastrowid)  # type: ignore[return-value]

    @log_db_timing
    def update(
        self,
        task_id: int,
        title: str,
        description: Optional[str],
        is_active: bool,
        number: str,
        billing_type: BillingType,
        unit_price: Optional[Decimal],
        unit_name: Optional[str],
    ) -> Optional[Task]:
        """Overwrite the editable task columns and return the updated row."""
        logger.info("Updating task record id=%s", task_id)
        try:
            self._conn.execute(
                """
                UPDATE tasks
                   SET title = ?, description = ?, is_active = ?, number = ?,
                       billing_type = ?, unit_price = ?, unit_name = ?, updated_at = ?
                 WHERE id = ?
                """,
                (
                    title,
                    description,
                    int(is_active),
                    number,
                    billing_type.value,
                    str(unit_price) if unit_price is not None else None,
                    unit_name,
                    datetime.now(tz=timezone.utc).isoformat(),
                    task_id,
                ),
            )
        except sqlite3.IntegrityError as exc:
            raise _translate_integrity_error(exc) from exc
        return self.get_by_id(task_id)

    @log_db_timing
    def delete(self, task_id: int) -> bool:
        """Delete a task by id and return True if removed."""
        logger.info("Deleting task record id=%s", task_id)
        cursor = self._conn.execute("DELETE FROM tasks WHERE id = ?", (task_id,))
        return cursor.rowcount > 0
