"""
Pydantic schemas for User request/response validation.
"""
from pydantic import BaseModel, EmailStr, Field, field_validator
from datetime import datetime
from decimal import Decimal
from typing import Optional

from timetracker.models.user import ContractType, Language, UserRole


def _check_password_strength(v: str) -> str:
    if not any(c.isupper() for c in v):
        raise ValueError("Password must contain at least one uppercase letter")
    if not any(c.isdigit() for c in v):
        raise ValueError("Password must contain at least one digit")
    return v


# ---------------------------------------------------------------------------
# Request schemas
# ---------------------------------------------------------------------------

class UserCreate(BaseModel):
    username: str = Field(..., min_length=3, max_length=64, pattern=r"^[a-zA-Z0-9_.]+$")
    email: EmailStr
    first_name: str = Field(..., min_length=1, max_length=100)
    last_name: str = Field(..., min_length=1, max_length=100)
    password: str = Field(..., min_length=8, max_length=72)
    # Enum fields arrive as strings and are parsed by UserService
    role: str = "EMPLOYEE"
    contract_type: str
    language: str = "PL"
    uop_gross_rate: Optional[Decimal] = None
    b2b_hourly_net_rate: Optional[Decimal] = None

    @field_validator("password")
    @classmethod
    def password_strength(cls, v: str) -> str:
        return _check_password_strength(v)


class UserUpdate(BaseModel):
    """Partial update; only the fields that are set are applied."""

    email: Optional[EmailStr] = None
    first_name: Optional[str] = Field(None, min_length=1, max_length=100)
    last_name: Optional[str] = Field(None, min_length=1, max_length=100)
    role: Optional[str] = None
    contract_type: Optional[str] = None
    language: Optional[str] = None
    uop_gross_rate: Optional[Decimal] = None
    b2b_hourly_net_rate: Optional[Decimal] = None
    is_active: Optional[bool] = None


class PasswordChange(BaseModel):
    old_password: str
    new_password: str = Field(..., min_length=8, max_length=72)

    @field_validator("new_password")
    @classmethod
    def password_strength(cls, v: str) -> str:
        return _check_password_strength(v)


# ---------------------------------------------------------------------------
# Response schemas
# ---------------------------------------------------------------------------

class UserResponse(BaseModel):
    id: int
    username: str
    email: str
    first_name: str
    last_name: str
    role: UserRole
    contract_type: ContractType
    uop_gross_rate: Optional[Decimal]
    b2b_hourly_net_rate: Optional[Decimal]
    language: Language
    is_active: bool
    created_at: datetime
    updated_at: datetime

    model_config = {"from_attributes": True}
