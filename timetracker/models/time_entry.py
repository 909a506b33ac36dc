"""
Domain model representing a time_entries row from the DB.
"""
from dataclasses import dataclass
from datetime import datetime, date, time
from decimal import Decimal
from enum import Enum
from typing import Optional


class TimeEntryStatus(str, Enum):
    SUBMITTED = "SUBMITTED"
    APPROVED = "APPROVED"
    REJECTED = "REJECTED"


def _parse_decimal(raw) -> Optional[Decimal]:
    return Decimal(raw) if raw is not None else None


def _parse_time(raw) -> Optional[time]:
    return time.fromisoformat(raw) if raw else None


@dataclass
class TimeEntry:
    id: int
    user_id: int
    project_id: int
    subproject_id: Optional[int]
    task_id: Optional[int]
    date: date
    hours_from: Optional[time]
    hours_to: Optional[time]
    total_hours: Optional[Decimal]
    quantity: Optional[Decimal]
    description: Optional[str]
    status: TimeEntryStatus
    approved_by: Optional[int]
    approved_at: Optional[datetime]
    created_at: datetime
    updated_at: datetime

    @classmethod
    def from_row(cls, row) -> "TimeEntry":
        """Build a TimeEntry from a sqlite3.Row object."""
        approved_at_raw = row["approved_at"]
        return cls(
            id=row["id"],
            user_id=row["user_id"],
            project_id=row["project_id"],
            subproject_id=row["subproject_id"],
            task_id=row["task_id"],
            date=date.fromisoformat(row["date"]),
            hours_from=_parse_time(row["hours_from"]),
            hours_to=_parse_time(row["hours_to"]),
            total_hours=_parse_decimal(row["total_hours"]),
            quantity=_parse_decimal(row["quantity"]),
            description=row["description"],
            status=TimeEntryStatus(row["status"]),
            approved_by=row["approved_by"],
            approved_at=datetime.fromisoformat(approved_at_raw) if approved_at_raw else None,
            created_at=datetime.fromisoformat(row["created_at"]),
            updated_at=datetime.fromisoformat(row["updated_at"]),
        )
