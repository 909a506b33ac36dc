from decimal import Decimal

import pytest

from timetracker.core.exceptions import ConflictError, NotFoundError, ValidationError
from timetracker.models.project import BillingType
from timetracker.schemas.project import TaskCreate, TaskUpdate
from timetracker.services.task_service import TaskService


@pytest.fixture
def service(conn):
    return TaskService(conn)


def test_create_hourly_task_drops_unit_fields(service, project):
    task = service.create_task(
        project.id,
        TaskCreate(title="Survey", number="20031-S1", unit_price=Decimal("10"), unit_name="m"),
    )

    assert task.project_id == project.id
    assert task.number == "20031-S1"
    assert task.billing_type == BillingType.HOURLY
    assert task.unit_price is None
    assert task.unit_name is None
    assert task.is_active


def test_create_unit_task(service, project):
    task = service.create_task(
        project.id,
        TaskCreate(title="Sheets", number="20031-D9", billing_type="unit", unit_price=Decimal("99.90"), unit_name=" sheet "),
    )

    assert task.billing_type == BillingType.UNIT
    assert task.unit_price == Decimal("99.90")
    assert task.unit_name == "sheet"


@pytest.mark.parametrize(
    "number, message",
    [
        (None, "Task number is required"),
        ("  ", "Task number is required"),
        ("30000-A1", "must start with 20031-"),
        ("20031-", "suffix is required"),
        ("20031-ABCDEF", "at most 5"),
    ],
)
def test_create_rejects_bad_numbers(service, project, number, message):
    with pytest.raises(ValidationError) as exc:
        service.create_task(project.id, TaskCreate(title="Bad", number=number))
    assert message in exc.value.message


@pytest.mark.parametrize(
    "fields, message",
    [
        ({}, "Unit price is required"),
        ({"unit_price": Decimal("0"), "unit_name": "sheet"}, "Unit price must be positive"),
        ({"unit_price": Decimal("10")}, "Unit name is required"),
        ({"unit_price": Decimal("10"), "unit_name": " "}, "Unit name is required"),
    ],
)
def test_unit_billing_requirements(service, project, fields, message):
    with pytest.raises(ValidationError) as exc:
        service.create_task(project.id, TaskCreate(title="Sheets", number="20031-D2", billing_type="UNIT", **fields))
    assert message in exc.value.message


def test_unknown_billing_type(service, project):
    with pytest.raises(ValidationError) as exc:
        service.create_task(project.id, TaskCreate(title="X", number="20031-X", billing_type="FIXED"))
    assert "HOURLY, UNIT" in exc.value.message


def test_duplicate_number_in_project_conflicts(service, hourly_task, project):
    with pytest.raises(ConflictError) as exc:
        service.create_task(project.id, TaskCreate(title="Again", number=hourly_task.number))
    assert "unique per project" in exc.value.message


def test_same_number_in_other_project_is_allowed(service, conn, hourly_task):
    from timetracker.repositories.project_repository import ProjectRepository

    other = ProjectRepository(conn).create(name="Annex", number="20031-01", description=None, manager_id=None)
    task = service.create_task(other.id, TaskCreate(title="Field work", number=hourly_task.number))
    assert task.project_id == other.id


def test_create_in_unknown_project(service):
    with pytest.raises(NotFoundError):
        service.create_task(999, TaskCreate(title="X", number="20031-X"))


def test_update_revalidates_number_and_billing(service, hourly_task, unit_task):
    with pytest.raises(ValidationError):
        service.update_task(hourly_task.id, TaskUpdate(title="Field work", number="99999-A1"))
    with pytest.raises(ValidationError):
        service.update_task(hourly_task.id, TaskUpdate(title="Field work", number="20031-A1", billing_type="UNIT"))
    with pytest.raises(ConflictError):
        service.update_task(hourly_task.id, TaskUpdate(title="Field work", number=unit_task.number))

    assert service.get_task(hourly_task.id).number == "20031-A1"


def test_update_switches_billing_mode(service, unit_task):
    updated = service.update_task(
        unit_task.id,
        TaskUpdate(title="Drawings (hourly)", number="20031-D1", billing_type="HOURLY", is_active=False),
    )

    assert updated.title == "Drawings (hourly)"
    assert updated.billing_type == BillingType.HOURLY
    assert updated.unit_price is None
    assert updated.unit_name is None
    assert not updated.is_active


def test_list_and_delete(service, project, hourly_task, unit_task):
    assert [t.id for t in service.list_tasks(project.id)] == [hourly_task.id, unit_task.id]

    service.delete_task(hourly_task.id)

    assert [t.id for t in service.list_tasks(project.id)] == [unit_task.id]
    with pytest.raises(NotFoundError):
        service.delete_task(hourly_task.id)
    with pytest.raises(NotFoundError):
        service.get_task(hourly_task.id)
