from datetime import date, time
from decimal import Decimal

import pytest

from conftest import add_user

from timetracker.core.exceptions import NotFoundError, PermissionDeniedError, ValidationError
from timetracker.models.time_entry import TimeEntryStatus
from timetracker.schemas.time_entry import TimeEntryCreate, TimeEntryUpdate
from timetracker.services.time_entry_service import TimeEntryService, hours_between


@pytest.fixture
def service(conn):
    return TimeEntryService(conn)


def submit(service, user, project, hours="8", day=date(2025, 3, 3), **extra):
    payload = {"user_id": user.id, "project_id": project.id, "date": day, "total_hours": Decimal(hours)}
    payload.update(extra)
    return service.create_entry(TimeEntryCreate(**payload))


# ---------------------------------------------------------------------------
# create
# ---------------------------------------------------------------------------

@pytest.mark.parametrize("hours", ["0.25", "1", "7.5", "24"])
def test_create_is_submitted_without_approval(service, uop_user, project, hours):
    entry = submit(service, uop_user, project, hours)

    assert entry.status == TimeEntryStatus.SUBMITTED
    assert entry.approved_by is None
    assert entry.approved_at is None
    assert entry.total_hours == Decimal(hours)
    assert entry.created_at == entry.updated_at


def test_create_defaults_owner_to_acting_user(service, uop_user, project):
    entry = service.create_entry(
        TimeEntryCreate(project_id=project.id, date=date(2025, 3, 3), total_hours=Decimal("2")),
        acting_user=uop_user,
    )
    assert entry.user_id == uop_user.id


@pytest.mark.parametrize(
    "payload, message",
    [
        ({"project_id": 1, "date": date(2025, 3, 3), "total_hours": Decimal("1")}, "User ID"),
        ({"user_id": 1, "project_id": 1, "total_hours": Decimal("1")}, "Date"),
        ({"user_id": 1, "date": date(2025, 3, 3), "total_hours": Decimal("1")}, "Project ID or task ID"),
        ({"user_id": 1, "project_id": 1, "date": date(2025, 3, 3)}, "Total hours is required"),
        ({"user_id": 1, "project_id": 1, "date": date(2025, 3, 3), "total_hours": Decimal("0")}, "positive"),
        ({"user_id": 1, "project_id": 1, "date": date(2025, 3, 3), "total_hours": Decimal("-2")}, "positive"),
    ],
)
def test_create_rejects_invalid_payloads(service, uop_user, project, payload, message):
    with pytest.raises(ValidationError) as exc:
        service.create_entry(TimeEntryCreate(**payload))
    assert message in exc.value.message


def test_create_with_unknown_project(service, uop_user):
    with pytest.raises(NotFoundError):
        service.create_entry(
            TimeEntryCreate(user_id=uop_user.id, project_id=999, date=date(2025, 3, 3), total_hours=Decimal("1"))
        )


def test_create_for_unknown_user(service, project):
    with pytest.raises(NotFoundError):
        service.create_entry(
            TimeEntryCreate(user_id=999, project_id=project.id, date=date(2025, 3, 3), total_hours=Decimal("1"))
        )


def test_hourly_task_requires_hours_and_clears_quantity(service, uop_user, hourly_task, project):
    entry = service.create_entry(
        TimeEntryCreate(
            user_id=uop_user.id,
            task_id=hourly_task.id,
            date=date(2025, 3, 3),
            total_hours=Decimal("6"),
            quantity=Decimal("3"),
        )
    )
    assert entry.project_id == project.id
    assert entry.task_id == hourly_task.id
    assert entry.total_hours == Decimal("6")
    assert entry.quantity is None

    with pytest.raises(ValidationError):
        service.create_entry(
            TimeEntryCreate(user_id=uop_user.id, task_id=hourly_task.id, date=date(2025, 3, 3), quantity=Decimal("3"))
        )


def test_unit_task_requires_quantity_and_clears_hours(service, uop_user, unit_task):
    entry = service.create_entry(
        TimeEntryCreate(
            user_id=uop_user.id,
            task_id=unit_task.id,
            date=date(2025, 3, 3),
            total_hours=Decimal("6"),
            quantity=Decimal("3"),
        )
    )
    assert entry.quantity == Decimal("3")
    assert entry.total_hours is None

    with pytest.raises(ValidationError) as exc:
        service.create_entry(
            TimeEntryCreate(user_id=uop_user.id, task_id=unit_task.id, date=date(2025, 3, 3), total_hours=Decimal("6"))
        )
    assert "Quantity" in exc.value.message


def test_task_from_other_project_is_rejected(service, conn, uop_user, hourly_task):
    from timetracker.repositories.project_repository import ProjectRepository

    other = ProjectRepository(conn).create(name="Other", number="30000-00", description=None, manager_id=None)
    with pytest.raises(ValidationError):
        service.create_entry(
            TimeEntryCreate(
                user_id=uop_user.id,
                project_id=other.id,
                task_id=hourly_task.id,
                date=date(2025, 3, 3),
                total_hours=Decimal("1"),
            )
        )


def test_legacy_hours_range_derives_total(service, uop_user, project):
    entry = submit(service, uop_user, project, hours="1", total_hours=None, hours_from=time(8, 0), hours_to=time(15, 20))
    assert entry.total_hours == Decimal("7.33")
    assert entry.hours_from == time(8, 0)
    assert entry.hours_to == time(15, 20)


def test_hours_between_rejects_inverted_range():
    with pytest.raises(ValidationError):
        hours_between(time(10, 0), time(9, 0))
    assert hours_between(time(9, 0), time(9, 10)) == Decimal("0.17")


def test_employee_cannot_create_for_someone_else(service, uop_user, b2b_user, project):
    with pytest.raises(PermissionDeniedError):
        service.create_entry(
            TimeEntryCreate(user_id=b2b_user.id, project_id=project.id, date=date(2025, 3, 3), total_hours=Decimal("1")),
            acting_user=uop_user,
        )


# ---------------------------------------------------------------------------
# approve / reject
# ---------------------------------------------------------------------------

def test_approve_stamps_approver(service, uop_user, manager, project):
    entry = submit(service, uop_user, project)

    approved = service.approve_entry(entry.id, manager.id)

    assert approved.status == TimeEntryStatus.APPROVED
    assert approved.approved_by == manager.id
    assert approved.approved_at is not None


def test_reapprove_overwrites_approver(service, conn, uop_user, manager, project):
    director = add_user(conn, "dora", uop_gross_rate=Decimal("1"))
    entry = submit(service, uop_user, project)
    first = service.approve_entry(entry.id, manager.id)

    second = service.approve_entry(entry.id, director.id)

    assert second.status == TimeEntryStatus.APPROVED
    assert second.approved_by == director.id
    assert second.approved_at >= first.approved_at


def test_reject_after_approve_keeps_approval_stamp(service, uop_user, manager, project):
    entry = submit(service, uop_user, project)
    approved = service.approve_entry(entry.id, manager.id)

    rejected = service.reject_entry(entry.id)

    assert rejected.status == TimeEntryStatus.REJECTED
    assert rejected.approved_by == manager.id
    assert rejected.approved_at == approved.approved_at


def test_reject_submitted_entry(service, uop_user, project):
    entry = submit(service, uop_user, project)
    rejected = service.reject_entry(entry.id)
    assert rejected.status == TimeEntryStatus.REJECTED
    assert rejected.approved_by is None


def test_review_unknown_entry(service, manager):
    with pytest.raises(NotFoundError):
        service.approve_entry(404, manager.id)
    with pytest.raises(NotFoundError):
        service.reject_entry(404)


# ---------------------------------------------------------------------------
# update / delete
# ---------------------------------------------------------------------------

def test_update_description_only(service, uop_user, manager, project):
    entry = submit(service, uop_user, project, hours="5")
    service.approve_entry(entry.id, manager.id)

    updated = service.update_entry(entry.id, TimeEntryUpdate(description="Site visit"))

    assert updated.description == "Site visit"
    assert updated.total_hours == Decimal("5")
    assert updated.quantity is None
    assert updated.status == TimeEntryStatus.APPROVED
    assert updated.approved_by == manager.id


def test_update_hours_must_be_positive(service, uop_user, project):
    entry = submit(service, uop_user, project)
    with pytest.raises(ValidationError):
        service.update_entry(entry.id, TimeEntryUpdate(total_hours=Decimal("0")))
    assert service.get_entry(entry.id).total_hours == Decimal("8")


def test_update_hours(service, uop_user, project):
    entry = submit(service, uop_user, project)
    updated = service.update_entry(entry.id, TimeEntryUpdate(total_hours=Decimal("6.5")))
    assert updated.total_hours == Decimal("6.5")
    assert updated.user_id == uop_user.id
    assert updated.project_id == project.id


def test_update_unknown_entry(service):
    with pytest.raises(NotFoundError):
        service.update_entry(404, TimeEntryUpdate(description="x"))


def test_employee_cannot_edit_foreign_entry(service, uop_user, b2b_user, project):
    entry = submit(service, uop_user, project)
    with pytest.raises(PermissionDeniedError):
        service.update_entry(entry.id, TimeEntryUpdate(description="x"), acting_user=b2b_user)


def test_delete_removes_entry(service, uop_user, project):
    entry = submit(service, uop_user, project)

    service.delete_entry(entry.id)

    with pytest.raises(NotFoundError):
        service.get_entry(entry.id)


def test_delete_unknown_entry_has_no_side_effect(service, uop_user, project):
    kept = submit(service, uop_user, project)

    with pytest.raises(NotFoundError):
        service.delete_entry(kept.id + 100)
    with pytest.raises(NotFoundError):
        service.delete_entry(kept.id + 100, acting_user=uop_user)

    assert [e.id for e in service.list_for_user(uop_user.id)] == [kept.id]


# ---------------------------------------------------------------------------
# listing
# ---------------------------------------------------------------------------

def test_list_for_user_filters_month_only_with_both_parts(service, uop_user, b2b_user, project):
    march_a = submit(service, uop_user, project, day=date(2025, 3, 31))
    february = submit(service, uop_user, project, day=date(2025, 2, 28))
    march_b = submit(service, uop_user, project, day=date(2025, 3, 1))
    submit(service, b2b_user, project, day=date(2025, 3, 10))

    assert [e.id for e in service.list_for_user(uop_user.id, month=3, year=2025)] == [march_a.id, march_b.id]
    everything = [march_a.id, february.id, march_b.id]
    assert [e.id for e in service.list_for_user(uop_user.id)] == everything
    assert [e.id for e in service.list_for_user(uop_user.id, month=3)] == everything
    assert [e.id for e in service.list_for_user(uop_user.id, year=2025)] == everything


def test_december_period_ends_at_year_boundary(service, uop_user, project):
    december = submit(service, uop_user, project, day=date(2024, 12, 31))
    submit(service, uop_user, project, day=date(2025, 1, 1))
    assert [e.id for e in service.list_by_user_and_month(uop_user.id, 2024, 12)] == [december.id]


def test_invalid_month_is_rejected(service, uop_user):
    with pytest.raises(ValidationError):
        service.list_by_user_and_month(uop_user.id, 2025, 13)


# ---------------------------------------------------------------------------
# update: hours range and billing mode
# ---------------------------------------------------------------------------

@pytest.fixture
def ranged_entry(service, uop_user, project):
    return submit(service, uop_user, project, total_hours=None, hours_from=time(8, 0), hours_to=time(10, 0))


def test_partial_range_update_that_inverts_range_is_rejected(service, ranged_entry):
    with pytest.raises(ValidationError):
        service.update_entry(ranged_entry.id, TimeEntryUpdate(hours_to=time(7, 0)))
    with pytest.raises(ValidationError):
        service.update_entry(ranged_entry.id, TimeEntryUpdate(hours_from=time(11, 0)))

    stored = service.get_entry(ranged_entry.id)
    assert (stored.hours_from, stored.hours_to) == (time(8, 0), time(10, 0))
    assert stored.total_hours == Decimal("2.00")


def test_partial_range_update_recomputes_total(service, ranged_entry):
    later = service.update_entry(ranged_entry.id, TimeEntryUpdate(hours_to=time(12, 30)))
    assert (later.hours_from, later.hours_to) == (time(8, 0), time(12, 30))
    assert later.total_hours == Decimal("4.50")

    shorter = service.update_entry(ranged_entry.id, TimeEntryUpdate(hours_from=time(12, 0)))
    assert shorter.total_hours == Decimal("0.50")


def test_explicit_total_wins_over_range(service, ranged_entry):
    updated = service.update_entry(
        ranged_entry.id, TimeEntryUpdate(hours_to=time(11, 0), total_hours=Decimal("2.5"))
    )
    assert updated.hours_to == time(11, 0)
    assert updated.total_hours == Decimal("2.5")


def test_unit_entry_rejects_hours_patch(service, uop_user, unit_task):
    entry = service.create_entry(
        TimeEntryCreate(user_id=uop_user.id, task_id=unit_task.id, date=date(2025, 3, 3), quantity=Decimal("3"))
    )

    with pytest.raises(ValidationError):
        service.update_entry(entry.id, TimeEntryUpdate(total_hours=Decimal("40")))
    with pytest.raises(ValidationError):
        service.update_entry(entry.id, TimeEntryUpdate(hours_from=time(8, 0), hours_to=time(9, 0)))

    stored = service.get_entry(entry.id)
    assert stored.total_hours is None
    assert stored.quantity == Decimal("3")

    updated = service.update_entry(entry.id, TimeEntryUpdate(quantity=Decimal("5")))
    assert updated.quantity == Decimal("5")
    assert updated.total_hours is None


@pytest.mark.parametrize("use_task", [True, False])
def test_hourly_entry_rejects_quantity_patch(service, uop_user, project, hourly_task, use_task):
    if use_task:
        entry = service.create_entry(
            TimeEntryCreate(user_id=uop_user.id, task_id=hourly_task.id, date=date(2025, 3, 3), total_hours=Decimal("4"))
        )
    else:
        entry = submit(service, uop_user, project, hours="4")

    with pytest.raises(ValidationError) as exc:
        service.update_entry(entry.id, TimeEntryUpdate(quantity=Decimal("2")))
    assert "unit-billed" in exc.value.message
    assert service.get_entry(entry.id).quantity is None


def test_write_that_loses_the_row_reports_not_found(service, uop_user, manager, project, monkeypatch):
    entry = submit(service, uop_user, project)
    monkeypatch.setattr(service._repo, "approve", lambda entry_id, approver_id: None)
    monkeypatch.setattr(service._repo, "reject", lambda entry_id: None)
    monkeypatch.setattr(service._repo, "update", lambda entry_id, **fields: None)

    with pytest.raises(NotFoundError):
        service.approve_entry(entry.id, manager.id)
    with pytest.raises(NotFoundError):
        service.reject_entry(entry.id)
    with pytest.raises(NotFoundError):
        service.update_entry(entry.id, TimeEntryUpdate(description="x"))
