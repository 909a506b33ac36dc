"""
Database seeder – creates a default director account on first startup.

⚠️  FOR DEVELOPMENT ONLY.
    Remove the call to seed_director() from main.py before deploying to production.

Default credentials:
    username : director
    password : Director1234!
    email    : director@timetracker.local
"""
import logging

from timetracker.core.security import hash_password
from timetracker.db.database import get_connection
from timetracker.models.user import ContractType, Language, UserRole

logger = logging.getLogger(__name__)

# ---------------------------------------------------------------------------
# Seed data – change these values freely during development
# ---------------------------------------------------------------------------
DIRECTOR_USERNAME = "director"
DIRECTOR_EMAIL = "director@timetracker.local"
DIRECTOR_PASSWORD = "Director1234!"
DIRECTOR_FIRST_NAME = "Default"
DIRECTOR_LAST_NAME = "Director"
DIRECTOR_GROSS_RATE = "12000.00"


def seed_director() -> None:
    """
    Insert the default director user if it does not already exist.
    Safe to call on every startup – it is a no-op when the user is present.
    """
    conn = get_connection()
    try:
        existing = conn.execute(
            "SELECT id FROM users WHERE username = ?", (DIRECTOR_USERNAME,)
        ).fetchone()

        if existing:
            logger.info("Seeder: director user '%s' already exists – skipping.", DIRECTOR_USERNAME)
            return

        conn.execute(
            """
            INSERT INTO users (
                username, email, first_name, last_name, hashed_password,
                role, contract_type, uop_gross_rate, language, is_active
            )
            VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, 1)
            """,
            (
                DIRECTOR_USERNAME,
                DIRECTOR_EMAIL,
                DIRECTOR_FIRST_NAME,
                DIRECTOR_LAST_NAME,
                hash_password(DIRECTOR_PASSWORD),
                UserRole.DIRECTOR.value,
                ContractType.UOP.value,
                DIRECTOR_GROSS_RATE,
                Language.PL.value,
            ),
        )
        conn.commit()
        logger.info(
            "Seeder: created default director user '%s' (email: %s).",
            DIRECTOR_USERNAME,
            DIRECTOR_EMAIL,
        )
    finally:
        conn.close()
