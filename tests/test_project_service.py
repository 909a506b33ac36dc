from datetime import date
from decimal import Decimal

import pytest

from timetracker.core.exceptions import ConflictError, NotFoundError, ValidationError
from timetracker.repositories.task_repository import TaskRepository
from timetracker.repositories.time_entry_repository import TimeEntryRepository
from timetracker.schemas.project import ProjectCreate, ProjectUpdate
from timetracker.services.project_service import ProjectService


@pytest.fixture
def service(conn):
    return ProjectService(conn)


def update_payload(project, **overrides):
    data = {
        "name": project.name,
        "number": project.number,
        "description": project.description,
        "manager_id": project.manager_id,
        "is_active": project.is_active,
    }
    data.update(overrides)
    return ProjectUpdate(**data)


# ---------------------------------------------------------------------------
# create / read
# ---------------------------------------------------------------------------

def test_create_and_list(service, manager):
    created = service.create_project(
        ProjectCreate(name="Harbour", number=" 40100-00 ", manager_id=manager.id)
    )

    assert created.number == "40100-00"
    assert created.manager_id == manager.id
    assert created.is_active
    assert service.get_project(created.id).name == "Harbour"
    assert [p.id for p in service.list_projects()] == [created.id]


def test_create_with_unknown_manager(service):
    with pytest.raises(NotFoundError):
        service.create_project(ProjectCreate(name="Harbour", number="40100-00", manager_id=77))


def test_unknown_project(service):
    with pytest.raises(NotFoundError):
        service.get_project(404)


# ---------------------------------------------------------------------------
# update
# ---------------------------------------------------------------------------

def test_update_replaces_fields(service, project, manager):
    updated = service.update_project(
        project.id,
        update_payload(project, name="Bridge survey II", manager_id=manager.id, is_active=False),
    )

    assert updated.name == "Bridge survey II"
    assert updated.manager_id == manager.id
    assert not updated.is_active
    assert service.list_projects(active_only=True) == []


def test_prefix_is_locked_while_tasks_exist(service, project, hourly_task):
    with pytest.raises(ValidationError) as exc:
        service.update_project(project.id, update_payload(project, number="20032-00"))
    assert "20031-" in exc.value.message

    suffix_only = service.update_project(project.id, update_payload(project, number="20031-01"))
    assert suffix_only.number == "20031-01"


def test_prefix_change_without_tasks(service, project):
    updated = service.update_project(project.id, update_payload(project, number="20032-00"))
    assert updated.number == "20032-00"


def test_update_unknown_project_or_manager(service, project):
    with pytest.raises(NotFoundError):
        service.update_project(404, update_payload(project))
    with pytest.raises(NotFoundError):
        service.update_project(project.id, update_payload(project, manager_id=77))


# ---------------------------------------------------------------------------
# delete
# ---------------------------------------------------------------------------

def test_delete_refused_while_entries_exist(service, conn, project, uop_user):
    TimeEntryRepository(conn).create(uop_user.id, project.id, date(2025, 3, 3), Decimal("8"), None)

    with pytest.raises(ConflictError) as exc:
        service.delete_project(project.id)
    assert "1 time entries" in exc.value.message
    assert service.get_project(project.id).id == project.id


def test_delete_removes_tasks(service, conn, project, hourly_task):
    service.delete_project(project.id)

    with pytest.raises(NotFoundError):
        service.get_project(project.id)
    assert TaskRepository(conn).get_by_id(hourly_task.id) is None
    with pytest.raises(NotFoundError):
        service.delete_project(project.id)


# ---------------------------------------------------------------------------
# members
# ---------------------------------------------------------------------------

def test_replace_members(service, project, uop_user, b2b_user, manager):
    members = service.replace_members(project.id, [b2b_user.id, uop_user.id, b2b_user.id])
    assert [u.id for u in members] == [uop_user.id, b2b_user.id]

    members = service.replace_members(project.id, [manager.id])
    assert [u.username for u in service.list_members(project.id)] == ["marta"]

    assert service.replace_members(project.id, []) == []
    assert service.list_members(project.id) == []


def test_replace_members_with_unknown_user_keeps_old_set(service, project, uop_user):
    service.replace_members(project.id, [uop_user.id])

    with pytest.raises(NotFoundError):
        service.replace_members(project.id, [uop_user.id, 999])
    assert [u.id for u in service.list_members(project.id)] == [uop_user.id]


def test_members_of_unknown_project(service):
    with pytest.raises(NotFoundError):
        service.list_members(404)
    with pytest.raises(NotFoundError):
        service.replace_members(404, [])
