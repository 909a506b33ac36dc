"""
Repository layer for TimeEntry persistence.
All SQL for the `time_entries` table lives here.
"""
import sqlite3
from datetime import datetime, timezone, date, time
from decimal import Decimal
from typing import Optional
import logging

from timetracker.models.time_entry import TimeEntry, TimeEntryStatus
from timetracker.core.logging_config import log_db_timing

logger = logging.getLogger(__name__)

_UPDATABLE_COLUMNS = ("hours_from", "hours_to", "total_hours", "quantity", "description")


def _month_bounds(year: int, month: int) -> tuple[str, str]:
    """Return the [first day, first day of next month) ISO bounds."""
    start = date(year, month, 1)
    end = date(year + 1, 1, 1) if month == 12 else date(year, month + 1, 1)
    return start.isoformat(), end.isoformat()


def _to_db(value):
    if isinstance(value, Decimal):
        return str(value)
    if isinstance(value, (date, time)):
        return value.isoformat()
    return value


class TimeEntryRepository:
    """Data access layer for time entry records."""

    def __init__(self, conn: sqlite3.Connection) -> None:
        """Store the database connection for query execution."""
        logger.trace("Initializing TimeEntryRepository")
        self._conn = conn

    # ------------------------------------------------------------------
    # Read
    # ------------------------------------------------------------------

    @log_db_timing
    def get_by_id(self, entry_id: int) -> Optional[TimeEntry]:
        """Return a time entry by id or None if missing."""
        row = self._conn.execute(
            "SELECT * FROM time_entries WHERE id = ?",
            (entry_id,),
        ).fetchone()
        return TimeEntry.from_row(row) if row else None

    @log_db_timing
    def exists(self, entry_id: int) -> bool:
        row = self._conn.execute(
            "SELECT 1 FROM time_entries WHERE id = ?",
            (entry_id,),
        ).fetchone()
        return row is not None

    @log_db_timing
    def list_by_user(self, user_id: int) -> list[TimeEntry]:
        """Return every entry of a user in insertion order."""
        rows = self._conn.execute(
            "SELECT * FROM time_entries WHERE user_id = ? ORDER BY id",
            (user_id,),
        ).fetchall()
        return [TimeEntry.from_row(row) for row in rows]

    @log_db_timing
    def list_by_user_and_period(self, user_id: int, year: int, month: int) -> list[TimeEntry]:
        """Return the entries of a user dated within one calendar month."""
        start, end = _month_bounds(year, month)
        rows = self._conn.execute(
            """
            SELECT * FROM time_entries
            WHERE user_id = ? AND date >= ? AND date < ?
            ORDER BY id
            """,
            (user_id, start, end),
        ).fetchall()
        return [TimeEntry.from_row(row) for row in rows]

    # ------------------------------------------------------------------
    # Write
    # ------------------------------------------------------------------

    @log_db_timing
    def create(
        self,
        user_id: int,
        project_id: int,
        entry_date: date,
        total_hours: Optional[Decimal],
        quantity: Optional[Decimal],
        description: Optional[str] = None,
        subproject_id: Optional[int] = None,
        task_id: Optional[int] = None,
        hours_from: Optional[time] = None,
        hours_to: Optional[time] = None,
    ) -> TimeEntry:
        """Insert a SUBMITTED time entry row and return it."""
        logger.info("Creating time entry user_id=%s project_id=%s", user_id, project_id)
        now = datetime.now(tz=timezone.utc).isoformat()
        cursor = self._conn.execute(
            """
            INSERT INTO time_entries (
                user_id, project_id, subproject_id, task_id, date,
                hours_from, hours_to, total_hours, quantity, description,
                status, approved_by, approved_at, created_at, updated_at
            )
            VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, NULL, NULL, ?, ?)
            """,
            (
                user_id,
                project_id,
                subproject_id,
                task_id,
                entry_date.isoformat(),
                _to_db(hours_from),
                _to_db(hours_to),
                _to_db(total_hours),
                _to_db(quantity),
                description,
                TimeEntryStatus.SUBMITTED.value,
                now,
                now,
            ),
        )
        return self.get_by_id(cursor.lastrowid)  # type: ignore[return-value]

    @log_db_timing
    def update(self, entry_id: int, **fields) -> Optional[TimeEntry]:
        """Update the editable entry columns and return the updated row."""
        unknown = set(fields) - set(_UPDATABLE_COLUMNS)
        if unknown:
            raise ValueError(f"Columns not updatable: {', '.join(sorted(unknown))}")
        if not fields:
            logger.trace("No time entry fields to update id=%s", entry_id)
            return self.get_by_id(entry_id)

        logger.info("Updating time entry record id=%s", entry_id)
        values = {col: _to_db(value) for col, value in fields.items()}
        values["updated_at"] = datetime.now(tz=timezone.utc).isoformat()
        set_clause = ", ".join(f"{col} = ?" for col in values)
        self._conn.execute(
            f"UPDATE time_entries SET {set_clause} WHERE id = ?",
            list(values.values()) + [entry_id],
        )
        return self.get_by_id(entry_id)

    @log_db_timing
    def approve(self, entry_id: int, approver_id: int) -> Optional[TimeEntry]:
        """Mark an entry APPROVED and stamp approver and approval time together."""
        logger.info("Approving time entry record id=%s", entry_id)
        now = datetime.now(tz=timezone.utc).isoformat()
        self._conn.execute(
            """
            UPDATE time_entries
               SET status = ?, approved_by = ?, approved_at = ?, updated_at = ?
             WHERE id = ?
            """,
            (TimeEntryStatus.APPROVED.value, approver_id, now, now, entry_id),
        )
        return self.get_by_id(entry_id)

    @log_db_timing
    def reject(self, entry_id: int) -> Optional[TimeEntry]:
        """Mark an entry REJECTED, leaving approver fields untouched."""
        logger.info("Rejecting time entry record id=%s", entry_id)
        now = datetime.now(tz=timezone.utc).isoformat()
        self._conn.execute(
            "UPDATE time_entries SET status = ?, updated_at = ? WHERE id = ?",
            (TimeEntryStatus.REJECTED.value, now, entry_id),
        )
        return self.get_by_id(entry_id)

    @log_db_timing
    def delete(self, entry_id: int) -> bool:
        """Delete a time entry by id and return True if removed."""
        logger.info("Deleting time entry record id=%s", entry_id)
        cursor = self._conn.execute(
            "DELETE FROM time_entries WHERE id = ?",
            (entry_id,),
        )
        logger.info("Time entry delete affected %s rows", cursor.rowcount)
        return cursor.rowcount > 0
