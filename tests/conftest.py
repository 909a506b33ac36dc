from __future__ import annotations

import sqlite3
from datetime import date, datetime, timezone
from decimal import Decimal

import pytest

from timetracker.core.config import RateConfig
from timetracker.db.schema import create_tables
from timetracker.models.project import BillingType
from timetracker.models.time_entry import TimeEntry, TimeEntryStatus
from timetracker.models.user import ContractType, Language, UserRole
from timetracker.repositories.project_repository import ProjectRepository
from timetracker.repositories.task_repository import TaskRepository
from timetracker.repositories.user_repository import UserRepository


@pytest.fixture
def conn():
    connection = sqlite3.connect(":memory:", check_same_thread=False)
    connection.row_factory = sqlite3.Row
    connection.execute("PRAGMA foreign_keys = ON")
    create_tables(connection)
    yield connection
    connection.close()


@pytest.fixture
def rates():
    return RateConfig(pln_to_uah_rate=Decimal("10.5"), monthly_hours=160)


def add_user(conn, username, contract_type=ContractType.UOP, role=UserRole.EMPLOYEE, **rates):
    return UserRepository(conn).create(
        username=username,
        email=f"{username}@example.com",
        first_name=username.capitalize(),
        last_name="Tester",
        hashed_password="not-a-real-hash",
        role=role,
        contract_type=contract_type,
        language=Language.PL,
        **rates,
    )


@pytest.fixture
def uop_user(conn):
    return add_user(conn, "anna", ContractType.UOP, uop_gross_rate=Decimal("6000"))


@pytest.fixture
def b2b_user(conn):
    return add_user(conn, "bogdan", ContractType.B2B, b2b_hourly_net_rate=Decimal("120"))


@pytest.fixture
def manager(conn):
    return add_user(conn, "marta", role=UserRole.MANAGER, uop_gross_rate=Decimal("9000"))


@pytest.fixture
def project(conn):
    return ProjectRepository(conn).create(
        name="Bridge survey", number="20031-00", description=None, manager_id=None
    )


@pytest.fixture
def hourly_task(conn, project):
    return TaskRepository(conn).create(
        project_id=project.id,
        title="Field work",
        description=None,
        number="20031-A1",
        billing_type=BillingType.HOURLY,
        unit_price=None,
        unit_name=None,
    )


@pytest.fixture
def unit_task(conn, project):
    return TaskRepository(conn).create(
        project_id=project.id,
        title="Drawings",
        description=None,
        number="20031-D1",
        billing_type=BillingType.UNIT,
        unit_price=Decimal("250.00"),
        unit_name="sheet",
    )


def make_entry(total_hours=None, quantity=None, entry_id=1, user_id=1) -> TimeEntry:
    """Build an in-memory entry for pure calculation tests."""
    now = datetime.now(tz=timezone.utc)
    return TimeEntry(
        id=entry_id,
        user_id=user_id,
        project_id=1,
        subproject_id=None,
        task_id=None,
        date=date(2025, 3, 3),
        hours_from=None,
        hours_to=None,
        total_hours=Decimal(total_hours) if total_hours is not None else None,
        quantity=Decimal(quantity) if quantity is not None else None,
        description=None,
        status=TimeEntryStatus.SUBMITTED,
        approved_by=None,
        approved_at=None,
        created_at=now,
        updated_at=now,
    )


@pytest.fixture
def client(tmp_path, monkeypatch):
    """TestClient bound to a throwaway database file; startup seeds the director."""
    from fastapi.testclient import TestClient

    from timetracker.core.config import settings

    monkeypatch.setattr(settings, "DATABASE_URL", f"sqlite:///{tmp_path / 'api.db'}")
    from timetracker.main import app

    with TestClient(app) as test_client:
        yield test_client
