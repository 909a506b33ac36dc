"""
Repository layer for User persistence.
All SQL for the `users` table lives here.
"""
import sqlite3
from datetime import datetime, timezone
from decimal import Decimal
from enum import Enum
from typing import Optional
import logging

from timetracker.models.user import ContractType, Language, User, UserRole
from timetracker.core.logging_config import log_db_timing

logger = logging.getLogger(__name__)

_UPDATABLE_COLUMNS = (
    "email",
    "first_name",
    "last_name",
    "role",
    "contract_type",
    "language",
    "uop_gross_rate",
    "b2b_hourly_net_rate",
    "is_active",
)


def _to_db(value):
    if isinstance(value, Enum):
        return value.value
    if isinstance(value, Decimal):
        return str(value)
    if isinstance(value, bool):
        return int(value)
    return value


class UserRepository:
    """Data access layer for user records."""

    def __init__(self, conn: sqlite3.Connection) -> None:
        """Store the database connection for query execution."""
        logger.trace("Initializing UserRepository")
        self._conn = conn

    # ------------------------------------------------------------------
    # Read
    # ------------------------------------------------------------------

    @log_db_timing
    def get_by_id(self, user_id: int) -> Optional[User]:
        """Return a user by id or None if missing."""
        row = self._conn.execute(
            "SELECT * FROM users WHERE id = ?", (user_id,)
        ).fetchone()
        return User.from_row(row) if row else None

    @log_db_timing
    def get_by_username(self, username: str) -> Optional[User]:
        row = self._conn.execute(
            "SELECT * FROM users WHERE username = ?", (username,)
        ).fetchone()
        return User.from_row(row) if row else None

    @log_db_timing
    def get_by_email(self, email: str) -> Optional[User]:
        row = self._conn.execute(
            "SELECT * FROM users WHERE email = ?", (email,)
        ).fetchone()
        return User.from_row(row) if row else None

    @log_db_timing
    def list_all(self) -> list[User]:
        rows = self._conn.execute("SELECT * FROM users ORDER BY id").fetchall()
        return [User.from_row(r) for r in rows]

    # ------------------------------------------------------------------
    # Write
    # ------------------------------------------------------------------

    @log_db_timing
    def create(
        self,
        username: str,
        email: str,
        first_name: str,
        last_name: str,
        hashed_password: str,
        role: UserRole,
        contract_type: ContractType,
        language: Language,
        uop_gross_rate: Optional[Decimal] = None,
        b2b_hourly_net_rate: Optional[Decimal] = None,
    ) -> User:
        """Insert a new user row and return the created user."""
        logger.info("Creating user record username=%s", username)
        cursor = self._conn.execute(
            """
            INSERT INTO users (
                username, email, first_name, last_name, hashed_password, role,
                contract_type, uop_gross_rate, b2b_hourly_net_rate, language
            )
            VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?)
            """,
            (
                username,
                email,
                first_name,
                last_name,
                hashed_password,
                role.value,
                contract_type.value,
                str(uop_gross_rate) if uop_gross_rate is not None else None,
                str(b2b_hourly_net_rate) if b2b_hourly_net_rate is not None else None,
                language.value,
            ),
        )
        return self.get_by_id(cursor.lastrowid)  # type: ignore[return-value]

    @log_db_timing
    def update(self, user_id: int, **fields) -> Optional[User]:
        """Update profile/contract columns and return the updated row."""
        unknown = set(fields) - set(_UPDATABLE_COLUMNS)
        if unknown:
            raise ValueError(f"Columns not updatable: {', '.join(sorted(unknown))}")
        if not fields:
            return self.get_by_id(user_id)

        logger.info("Updating user record id=%s", user_id)
        values = {col: _to_db(value) for col, value in fields.items()}
        values["updated_at"] = datetime.now(tz=timezone.utc).isoformat()
        set_clause = ", ".join(f"{col} = ?" for col in values)
        self._conn.execute(
            f"UPDATE users SET {set_clause} WHERE id = ?",
            list(values.values()) + [user_id],
        )
        return self.get_by_id(user_id)

    @log_db_timing
    def update_password(self, user_id: int, hashed_password: str) -> None:
        logger.info("Updating password for user id=%s", user_id)
        self._conn.execute(
            "UPDATE users SET hashed_password = ?, updated_at = ? WHERE id = ?",
            (hashed_password, datetime.now(tz=timezone.utc).isoformat(), user_id),
        )

    @log_db_timing
    def delete(self, user_id: int) -> bool:
        """Delete a user; their entries and memberships cascade."""
        logger.info("Deleting user record id=%s", user_id)
        cursor = self._conn.execute("DELETE FROM users WHERE id = ?", (user_id,))
        return cursor.rowcount > 0
