"""
Domain models for projects and their tasks.
"""
from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal
from enum import Enum
from typing import Optional


class BillingType(str, Enum):
    HOURLY = "HOURLY"
    UNIT = "UNIT"


@dataclass
class Project:
    id: int
    name: str
    number: str
    description: Optional[str]
    manager_id: Optional[int]
    is_active: bool
    created_at: datetime
    updated_at: datetime

    @classmethod
    def from_row(cls, row) -> "Project":
        """Build a Project from a sqlite3.Row object."""
        return cls(
            id=row["id"],
            name=row["name"],
            number=row["number"],
            description=row["description"],
            manager_id=row["manager_id"],
            is_active=bool(row["is_active"]),
            created_at=datetime.fromisoformat(row["created_at"]),
            updated_at=datetime.fromisoformat(row["updated_at"]),
        )


@dataclass
class Task:
    id: int
    project_id: int
    title: str
    description: Optional[str]
    number: str
    billing_type: BillingType
    unit_price: Optional[Decimal]
    unit_name: Optional[str]
    is_active: bool
    created_at: datetime
    updated_at: datetime

    @classmethod
    def from_row(cls, row) -> "Task":
        """Build a Task from a sqlite3.Row object."""
        unit_price_raw = row["unit_price"]
        return cls(
            id=row["id"],
            project_id=row["project_id"],
            title=row["title"],
            description=row["description"],
            number=row["number"],
            billing_type=BillingType(row["billing_type"]),
            unit_price=Decimal(unit_price_raw) if unit_price_raw is not None else None,
            unit_name=row["unit_name"],
            is_active=bool(row["is_active"]),
            created_at=datetime.fromisoformat(row["created_at"]),
            updated_at=datetime.fromisoformat(row["updated_at"]),
        )
