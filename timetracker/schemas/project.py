"""
Pydantic schemas for Project and Task request/response validation.
"""
from datetime import datetime
from decimal import Decimal
from typing import Optional

from pydantic import BaseModel, Field

from timetracker.models.project import BillingType


# ---------------------------------------------------------------------------
# Request schemas
# ---------------------------------------------------------------------------

class ProjectCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=255)
    number: str = Field(..., min_length=1, max_length=12, description="Project number, e.g. '20031-00'")
    description: Optional[str] = Field(None, max_length=1000)
    manager_id: Optional[int] = None


class ProjectUpdate(ProjectCreate):
    """Full replacement of a project's editable fields."""

    is_active: bool = True


class ProjectMembers(BaseModel):
    """Replacement member list; an empty list removes every member."""

    user_ids: list[int] = Field(default_factory=list)


class TaskCreate(BaseModel):
    """Payload for creating tasks under a project."""

    title: str = Field(..., min_length=1, max_length=255)
    description: Optional[str] = Field(None, max_length=1000)
    number: Optional[str] = Field(None, max_length=32, description="Must start with the project prefix")
    billing_type: str = Field("HOURLY", description="'HOURLY' or 'UNIT'")
    unit_price: Optional[Decimal] = Field(None, description="Required for UNIT billing")
    unit_name: Optional[str] = Field(None, max_length=64, description="Required for UNIT billing")


class TaskUpdate(TaskCreate):
    """Payload for updating tasks. Validated exactly like creation."""

    is_active: bool = True


# ---------------------------------------------------------------------------
# Response schemas
# ---------------------------------------------------------------------------

class ProjectResponse(BaseModel):
    id: int
    name: str
    number: str
    description: Optional[str]
    manager_id: Optional[int]
    is_active: bool
    created_at: datetime
    updated_at: datetime

    model_config = {"from_attributes": True}


class TaskResponse(BaseModel):
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

    model_config = {"from_attributes": True}
