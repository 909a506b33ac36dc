"""
User management service: account creation, retrieval, update and deletion.

Business rules enforced here:
- Username and email are unique.
- The rate matching the contract type is required (UOP: monthly gross,
  B2B: hourly net). The other rate may be stored but is never used for cost.
- Rates, when given, are positive.
- A password change needs the current password.
"""
import sqlite3
from decimal import Decimal
from typing import Optional
import logging

from timetracker.core.exceptions import ConflictError, NotFoundError, ValidationError, parse_enum
from timetracker.core.security import hash_password, verify_password
from timetracker.models.user import ContractType, Language, User, UserRole
from timetracker.repositories.user_repository import UserRepository
from timetracker.schemas.user import PasswordChange, UserCreate, UserUpdate

logger = logging.getLogger(__name__)


def _check_rates(
    contract_type: ContractType,
    uop_gross_rate: Optional[Decimal],
    b2b_hourly_net_rate: Optional[Decimal],
) -> None:
    for field, value in (
        ("UoP gross rate", uop_gross_rate),
        ("B2B hourly rate", b2b_hourly_net_rate),
    ):
        if value is not None and value <= 0:
            raise ValidationError(f"{field} must be positive")
    if contract_type == ContractType.UOP and uop_gross_rate is None:
        raise ValidationError("UoP gross rate is required for UOP contracts")
    if contract_type == ContractType.B2B and b2b_hourly_net_rate is None:
        raise ValidationError("B2B hourly rate is required for B2B contracts")


class UserService:
    def __init__(self, conn: sqlite3.Connection) -> None:
        logger.trace("Initializing UserService")
        self._repo = UserRepository(conn)

    # ------------------------------------------------------------------
    # Read
    # ------------------------------------------------------------------

    def get_user(self, user_id: int) -> User:
        """Return a user or raise NotFoundError."""
        logger.info("Fetching user id=%s", user_id)
        user = self._repo.get_by_id(user_id)
        if not user:
            logger.warning("User id=%s not found", user_id)
            raise NotFoundError(f"User with id={user_id} not found")
        return user

    def find_by_login(self, login: str) -> Optional[User]:
        """Look a user up by username, falling back to email."""
        return self._repo.get_by_username(login) or self._repo.get_by_email(login)

    def list_users(self) -> list[User]:
        logger.info("Listing users")
        return self._repo.list_all()

    # ------------------------------------------------------------------
    # Create
    # ------------------------------------------------------------------

    def create_user(self, data: UserCreate) -> User:
        logger.info("Creating user %s", data.username)
        role = parse_enum(UserRole, data.role, "role")
        contract_type = parse_enum(ContractType, data.contract_type, "contract type")
        language = parse_enum(Language, data.language, "language")
        try:
            _check_rates(contract_type, data.uop_gross_rate, data.b2b_hourly_net_rate)
        except ValidationError as exc:
            logger.warning("Rates rejected for user %s: %s", data.username, exc.message)
            raise

        if self._repo.get_by_username(data.username):
            logger.warning("Duplicate username registration attempt: %s", data.username)
            raise ConflictError("Username already exists")
        if self._repo.get_by_email(data.email):
            logger.warning("Duplicate email registration attempt: %s", data.email)
            raise ConflictError("Email is already registered")

        user = self._repo.create(
            username=data.username,
            email=data.email,
            first_name=data.first_name,
            last_name=data.last_name,
            hashed_password=hash_password(data.password),
            role=role,
            contract_type=contract_type,
            language=language,
            uop_gross_rate=data.uop_gross_rate,
            b2b_hourly_net_rate=data.b2b_hourly_net_rate,
        )
        logger.info("User created id=%s", user.id)
        return user

    # ------------------------------------------------------------------
    # Update / delete
    # ------------------------------------------------------------------

    def update_user(self, user_id: int, data: UserUpdate) -> User:
        """
        Apply the fields that are set. Enum fields are parsed, and the merged
        contract type must still have its matching rate.
        """
        logger.info("Updating user id=%s", user_id)
        user = self.get_user(user_id)
        fields = data.model_dump(exclude_none=True)

        if "role" in fields:
            fields["role"] = parse_enum(UserRole, fields["role"], "role")
        if "contract_type" in fields:
            fields["contract_type"] = parse_enum(ContractType, fields["contract_type"], "contract type")
        if "language" in fields:
            fields["language"] = parse_enum(Language, fields["language"], "language")

        try:
            _check_rates(
                fields.get("contract_type", user.contract_type),
                fields.get("uop_gross_rate", user.uop_gross_rate),
                fields.get("b2b_hourly_net_rate", user.b2b_hourly_net_rate),
            )
        except ValidationError as exc:
            logger.warning("Rates rejected for user id=%s: %s", user_id, exc.message)
            raise

        email = fields.get("email")
        if email is not None and email != user.email:
            other = self._repo.get_by_email(email)
            if other is not None and other.id != user.id:
                logger.warning("Email %s already taken, update of user id=%s rejected", email, user_id)
                raise ConflictError("Email is already registered")

        updated = self._repo.update(user.id, **fields)
        if updated is None:
            logger.warning("User id=%s disappeared during update", user.id)
            raise NotFoundError(f"User with id={user.id} not found")
        logger.info("User updated id=%s fields=%s", user.id, sorted(fields))
        return updated

    def delete_user(self, user_id: int) -> None:
        """Permanently remove a user together with their time entries and memberships."""
        logger.info("Deleting user id=%s", user_id)
        if not self._repo.delete(user_id):
            logger.warning("User id=%s not found for deletion", user_id)
            raise NotFoundError(f"User with id={user_id} not found")
        logger.info("User deleted id=%s", user_id)

    def change_password(self, user: User, data: PasswordChange) -> None:
        logger.info("Changing password for user id=%s", user.id)
        if not verify_password(data.old_password, user.hashed_password):
            logger.warning("Wrong current password for user id=%s", user.id)
            raise ValidationError("Old password is incorrect")
        self._repo.update_password(user.id, hash_password(data.new_password))
        logger.info("Password changed for user id=%s", user.id)
