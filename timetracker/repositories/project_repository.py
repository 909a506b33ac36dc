"""
Repository layer for Project persistence.
All SQL for the `projects` and `project_members` tables lives here.
"""
import sqlite3
from datetime import datetime, timezone
from typing import Optional
import logging

from timetracker.models.project import Project
from timetracker.models.user import User
from timetracker.core.logging_config import log_db_timing

logger = logging.getLogger(__name__)


class ProjectRepository:
    """Data access layer for project records."""

    def __init__(self, conn: sqlite3.Connection) -> None:
        logger.trace("Initializing ProjectRepository")
        self._conn = conn

    @log_db_timing
    def get_by_id(self, project_id: int) -> Optional[Project]:
        """Return a project by id or None if missing."""
        row = self._conn.execute(
            "SELECT * FROM projects WHERE id = ?", (project_id,)
        ).fetchone()
        return Project.from_row(row) if row else None

    @log_db_timing
    def list_all(self, active_only: bool = False) -> list[Project]:
        if active_only:
            rows = self._conn.execute(
                "SELECT * FROM projects WHERE is_active = 1 ORDER BY id"
            ).fetchall()
        else:
            rows = self._conn.execute("SELECT * FROM projects ORDER BY id").fetchall()
        return [Project.from_row(r) for r in rows]

    @log_db_timing
    def create(
        self,
        name: str,
        number: str,
        description: Optional[str],
        manager_id: Optional[int],
    ) -> Project:
        """Insert a project row and return it."""
        logger.info("Creating project record number=%s", number)
        cursor = self._conn.execute(
            """
            INSERT INTO projects (name, number, description, manager_id)
            VALUES (?, ?, ?, ?)
            """,
            (name, number, description, manager_id),
        )
        return self.get_by_id(cursor.lastrowid)  # type: ignore[return-value]

    @log_db_timing
    def update(
        self,
        project_id: int,
        name: str,
        number: str,
        description: Optional[str],
        manager_id: Optional[int],
        is_active: bool,
    ) -> Optional[Project]:
        """Overwrite the editable project columns and return the updated row."""
        logger.info("Updating project record id=%s", project_id)
        self._conn.execute(
            """
            UPDATE projects
               SET name = ?, number = ?, description = ?, manager_id = ?,
                   is_active = ?, updated_at = ?
             WHERE id = ?
            """,
            (
                name,
                number,
                description,
                manager_id,
                int(is_active),
                datetime.now(tz=timezone.utc).isoformat(),
                project_id,
            ),
        )
        return self.get_by_id(project_id)

    @log_db_timing
    def delete(self, project_id: int) -> bool:
        """Delete a project (its tasks and memberships cascade)."""
        logger.info("Deleting project record id=%s", project_id)
        cursor = self._conn.execute("DELETE FROM projects WHERE id = ?", (project_id,))
        return cursor.rowcount > 0

    @log_db_timing
    def count_time_entries(self, project_id: int) -> int:
        row = self._conn.execute(
            "SELECT COUNT(*) FROM time_entries WHERE project_id = ?", (project_id,)
        ).fetchone()
        return row[0]

    # ------------------------------------------------------------------
    # Members
    # ------------------------------------------------------------------

    @log_db_timing
    def list_members(self, project_id: int) -> list[User]:
        """Return the member users of a project ordered by user id."""
        rows = self._conn.execute(
            """
            SELECT u.* FROM users u
              JOIN project_members m ON m.user_id = u.id
             WHERE m.project_id = ?
             ORDER BY u.id
            """,
            (project_id,),
        ).fetchall()
        return [User.from_row(r) for r in rows]

    @log_db_timing
    def replace_members(self, project_id: int, user_ids: list[int]) -> None:
        """Drop every membership of the project and insert *user_ids*."""
        logger.info("Replacing members of project id=%s count=%s", project_id, len(user_ids))
        self._conn.execute("DELETE FROM project_members WHERE project_id = ?", (project_id,))
        self._conn.executemany(
            "INSERT INTO project_members (project_id, user_id) VALUES (?, ?)",
            [(project_id, user_id) for user_id in user_ids],
        )
