"""
Pydantic schemas for TimeEntry request/response validation.

Request schemas only check shapes and types. Required-field, positivity and
billing-mode rules live in TimeEntryService so they surface as ValidationError.
"""
import datetime as dt
from decimal import Decimal
from typing import Optional

from pydantic import BaseModel, Field

from timetracker.models.time_entry import TimeEntryStatus


# ---------------------------------------------------------------------------
# Request schemas
# ---------------------------------------------------------------------------

class TimeEntryCreate(BaseModel):
    """Payload for creating time entries."""

    user_id: Optional[int] = Field(None, description="Owner of the entry; defaults to the acting user")
    project_id: Optional[int] = Field(None, description="Project the work belongs to")
    subproject_id: Optional[int] = None
    task_id: Optional[int] = Field(None, description="Task the work belongs to; implies its project")
    date: Optional[dt.date] = Field(None, description="Date when the work was performed")
    total_hours: Optional[Decimal] = Field(None, description="Hours worked (hourly tasks)")
    quantity: Optional[Decimal] = Field(None, description="Units delivered (unit-billed tasks)")
    hours_from: Optional[dt.time] = Field(None, description="Legacy range start, used when total_hours is absent")
    hours_to: Optional[dt.time] = Field(None, description="Legacy range end, used when total_hours is absent")
    description: Optional[str] = Field(None, max_length=1000)


class TimeEntryUpdate(BaseModel):
    """Payload for editing an entry. Only the fields that are set are applied."""

    total_hours: Optional[Decimal] = None
    quantity: Optional[Decimal] = None
    hours_from: Optional[dt.time] = None
    hours_to: Optional[dt.time] = None
    description: Optional[str] = Field(None, max_length=1000)


# ---------------------------------------------------------------------------
# Response schemas
# ---------------------------------------------------------------------------

class TimeEntryResponse(BaseModel):
    """Response model for time entry data."""

    id: int
    user_id: int
    project_id: int
    subproject_id: Optional[int]
    task_id: Optional[int]
    date: dt.date
    hours_from: Optional[dt.time]
    hours_to: Optional[dt.time]
    total_hours: Optional[Decimal]
    quantity: Optional[Decimal]
    description: Optional[str]
    status: TimeEntryStatus
    approved_by: Optional[int]
    approved_at: Optional[dt.datetime]
    created_at: dt.datetime
    updated_at: dt.datetime

    model_config = {"from_attributes": True}
