"""
SQL DDL statements for all application tables.
Tables are created in dependency order so foreign keys resolve correctly.

Migration helpers run ALTER TABLE only when a column does not yet exist,
making them safe to call on every startup (idempotent).

Monetary and hour values are stored as TEXT so Decimal values round-trip exactly.
"""
import sqlite3
from typing import Optional

from timetracker.db.database import get_connection

# ---------------------------------------------------------------------------
# DDL
# ---------------------------------------------------------------------------

CREATE_USERS_TABLE = """
CREATE TABLE IF NOT EXISTS users (
    id                   INTEGER PRIMARY KEY AUTOINCREMENT,
    username             TEXT    NOT NULL UNIQUE,
    email                TEXT    NOT NULL UNIQUE,
    first_name           TEXT    NOT NULL,
    last_name            TEXT    NOT NULL,
    hashed_password      TEXT    NOT NULL,
    role                 TEXT    NOT NULL DEFAULT 'EMPLOYEE'
                                 CHECK(role IN ('EMPLOYEE', 'MANAGER', 'DIRECTOR')),
    contract_type        TEXT    NOT NULL CHECK(contract_type IN ('UOP', 'B2B')),
    uop_gross_rate       TEXT,
    b2b_hourly_net_rate  TEXT,
    language             TEXT    NOT NULL DEFAULT 'PL'
                                 CHECK(language IN ('PL', 'EN', 'UA')),
    is_active            INTEGER NOT NULL DEFAULT 1,
    created_at           TEXT    NOT NULL DEFAULT (datetime('now')),
    updated_at           TEXT    NOT NULL DEFAULT (datetime('now'))
);
"""

CREATE_PROJECTS_TABLE = """
CREATE TABLE IF NOT EXISTS projects (
    id          INTEGER PRIMARY KEY AUTOINCREMENT,
    name        TEXT    NOT NULL,
    number      TEXT    NOT NULL,
    description TEXT,
    manager_id  INTEGER REFERENCES users(id) ON DELETE SET NULL,
    is_active   INTEGER NOT NULL DEFAULT 1,
    created_at  TEXT    NOT NULL DEFAULT (datetime('now')),
    updated_at  TEXT    NOT NULL DEFAULT (datetime('now'))
);
"""

CREATE_PROJECT_MEMBERS_TABLE = """
CREATE TABLE IF NOT EXISTS project_members (
    project_id  INTEGER NOT NULL REFERENCES projects(id) ON DELETE CASCADE,
    user_id     INTEGER NOT NULL REFERENCES users(id) ON DELETE CASCADE,
    PRIMARY KEY (project_id, user_id)
);
"""

CREATE_TASKS_TABLE = """
CREATE TABLE IF NOT EXISTS tasks (
    id            INTEGER PRIMARY KEY AUTOINCREMENT,
    project_id    INTEGER NOT NULL REFERENCES projects(id) ON DELETE CASCADE,
    title         TEXT    NOT NULL,
    description   TEXT,
    number        TEXT    NOT NULL,
    billing_type  TEXT    NOT NULL DEFAULT 'HOURLY'
                          CHECK(billing_type IN ('HOURLY', 'UNIT')),
    unit_price    TEXT,
    unit_name     TEXT,
    is_active     INTEGER NOT NULL DEFAULT 1,
    created_at    TEXT    NOT NULL DEFAULT (datetime('now')),
    updated_at    TEXT    NOT NULL DEFAULT (datetime('now'))
);
"""

CREATE_TIME_ENTRIES_TABLE = """
CREATE TABLE IF NOT EXISTS time_entries (
    id             INTEGER PRIMARY KEY AUTOINCREMENT,
    user_id        INTEGER NOT NULL REFERENCES users(id) ON DELETE CASCADE,
    project_id     INTEGER NOT NULL REFERENCES projects(id) ON DELETE CASCADE,
    subproject_id  INTEGER,
    task_id        INTEGER REFERENCES tasks(id) ON DELETE SET NULL,
    date           TEXT    NOT NULL,
    hours_from     TEXT,
    hours_to       TEXT,
    total_hours    TEXT,
    quantity       TEXT,
    description    TEXT,
    status         TEXT    NOT NULL DEFAULT 'SUBMITTED'
                           CHECK(status IN ('SUBMITTED', 'APPROVED', 'REJECTED')),
    approved_by    INTEGER REFERENCES users(id) ON DELETE SET NULL,
    approved_at    TEXT,
    created_at     TEXT    NOT NULL,
    updated_at     TEXT    NOT NULL
);
"""

INDEXES = [
    "CREATE UNIQUE INDEX IF NOT EXISTS idx_task_project_number ON tasks(project_id, number)",
    "CREATE INDEX IF NOT EXISTS idx_entry_user_date ON time_entries(user_id, date)",
    "CREATE INDEX IF NOT EXISTS idx_entry_project_date ON time_entries(project_id, date)",
    "CREATE INDEX IF NOT EXISTS idx_entry_status ON time_entries(status)",
]

# ---------------------------------------------------------------------------
# Incremental migrations (idempotent – safe to run every startup)
# ---------------------------------------------------------------------------

MIGRATIONS = [
    # Legacy hours-range columns predate the task/quantity model
    ("time_entries", "hours_from", "ALTER TABLE time_entries ADD COLUMN hours_from TEXT"),
    ("time_entries", "hours_to",   "ALTER TABLE time_entries ADD COLUMN hours_to   TEXT"),
]

# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

ALL_TABLES = [
    CREATE_USERS_TABLE,
    CREATE_PROJECTS_TABLE,
    CREATE_PROJECT_MEMBERS_TABLE,
    CREATE_TASKS_TABLE,
    CREATE_TIME_ENTRIES_TABLE,
]


def _column_exists(conn, table: str, column: str) -> bool:
    rows = conn.execute(f"PRAGMA table_info({table})").fetchall()
    return any(r[1] == column for r in rows)


def create_tables(conn: Optional[sqlite3.Connection] = None) -> None:
    """Create all tables, indexes and apply incremental migrations."""
    owns_connection = conn is None
    if owns_connection:
        conn = get_connection()
    try:
        cursor = conn.cursor()

        # 1. Create tables (IF NOT EXISTS – safe on every restart)
        for ddl in ALL_TABLES:
            cursor.execute(ddl)
        for ddl in INDEXES:
            cursor.execute(ddl)

        # 2. Run migrations only when the column is missing
        for table, column, alter_sql in MIGRATIONS:
            if not _column_exists(conn, table, column):
                cursor.execute(alter_sql)

        conn.commit()
    finally:
        if owns_connection:
            conn.close()
