"""
Domain model (plain Python dataclass) representing a User row from the DB.
This is the internal representation used across service and repository layers.
"""
from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal
from enum import Enum
from typing import Optional


class UserRole(str, Enum):
    EMPLOYEE = "EMPLOYEE"
    MANAGER = "MANAGER"
    DIRECTOR = "DIRECTOR"


class ContractType(str, Enum):
    UOP = "UOP"
    B2B = "B2B"


class Language(str, Enum):
    PL = "PL"
    EN = "EN"
    UA = "UA"


def _decimal_or_none(raw) -> Optional[Decimal]:
    return Decimal(str(raw)) if raw is not None else None


@dataclass
class User:
    id: int
    username: str
    email: str
    first_name: str
    last_name: str
    hashed_password: str
    role: UserRole
    contract_type: ContractType
    language: Language
    is_active: bool
    created_at: datetime
    updated_at: datetime
    uop_gross_rate: Optional[Decimal] = None
    b2b_hourly_net_rate: Optional[Decimal] = None

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}".strip()

    @classmethod
    def from_row(cls, row) -> "User":
        """Build a User from a sqlite3.Row object."""
        return cls(
            id=row["id"],
            username=row["username"],
            email=row["email"],
            first_name=row["first_name"],
            last_name=row["last_name"],
            hashed_password=row["hashed_password"],
            role=UserRole(row["role"]),
            contract_type=ContractType(row["contract_type"]),
            language=Language(row["language"]),
            is_active=bool(row["is_active"]),
            uop_gross_rate=_decimal_or_none(row["uop_gross_rate"]),
            b2b_hourly_net_rate=_decimal_or_none(row["b2b_hourly_net_rate"]),
            created_at=datetime.fromisoformat(row["created_at"]),
            updated_at=datetime.fromisoformat(row["updated_at"]),
        )
