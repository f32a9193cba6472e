from datetime import date, datetime

import pytest

from office_attendance.common.datetime_utils import LocalClock
from office_attendance.core.enums import PermissionType, StaffStatus
from office_attendance.core.exceptions import NotFoundError, ValidationError
from office_attendance.staff.model import Permission
from office_attendance.staff.permissions import PermissionGate
from tests.fakes import InMemoryStaff, make_staff


def test_grant_with_dates_covers_whole_days_and_sets_status():
    repo = InMemoryStaff(make_staff(1))
    gate = PermissionGate(repo, clock=LocalClock())

    permission = gate.grant(staff_id=1, permission_type="Sickness", reason=" flu ", start=date(2025, 3, 3), end=date(2025, 3, 4))

    assert permission.start_date == datetime(2025, 3, 3, 0, 0, 0)
    assert permission.end_date == datetime(2025, 3, 4, 23, 59, 59)
    assert permission.reason == "flu"
    staff = repo.get_by_id(1)
    assert staff.status == StaffStatus.SICK
    assert staff.permission == permission


def test_emergency_maps_to_on_leave():
    repo = InMemoryStaff(make_staff(1))

    PermissionGate(repo).grant(staff_id=1, permission_type="Emergency", reason=None, start=date(2025, 3, 3), end=date(2025, 3, 3))

    assert repo.get_by_id(1).status == StaffStatus.ON_LEAVE


def test_new_grant_archives_the_previous_permission():
    repo = InMemoryStaff(make_staff(1))
    gate = PermissionGate(repo)
    first = gate.grant(staff_id=1, permission_type="Leave", reason=None, start=date(2025, 3, 3), end=date(2025, 3, 7))

    gate.grant(staff_id=1, permission_type="Official", reason="Conference", start=date(2025, 3, 10), end=date(2025, 3, 11))

    assert repo.list_permission_history(1) == [first]
    assert repo.get_by_id(1).status == StaffStatus.ON_OFFICIAL_DUTY


@pytest.mark.parametrize(
    "kwargs, error",
    [
        ({"permission_type": "Holiday"}, ValidationError),
        ({"start": date(2025, 3, 5), "end": date(2025, 3, 4)}, ValidationError),
        ({"start": None}, ValidationError),
        ({"staff_id": 42}, NotFoundError),
    ],
)
def test_grant_rejects_bad_input(kwargs, error):
    repo = InMemoryStaff(make_staff(1))
    params = {"staff_id": 1, "permission_type": "Leave", "reason": None, "start": date(2025, 3, 3), "end": date(2025, 3, 4)}
    params.update(kwargs)

    with pytest.raises(error):
        PermissionGate(repo).grant(**params)

    assert repo.get_by_id(1).permission is None


def test_is_under_permission_is_inclusive_at_both_ends():
    permission = Permission(PermissionType.LEAVE, None, datetime(2025, 3, 3), datetime(2025, 3, 4, 23, 59, 59))
    staff = make_staff(1, permission=permission)

    assert PermissionGate.is_under_permission(staff, datetime(2025, 3, 3, 0, 0))
    assert PermissionGate.is_under_permission(staff, datetime(2025, 3, 4, 23, 59, 59))
    assert not PermissionGate.is_under_permission(staff, datetime(2025, 3, 5, 0, 0))
    assert not PermissionGate.is_under_permission(staff, datetime(2025, 3, 2, 23, 59))


def test_expired_permission_never_counts_even_before_archiving():
    permission = Permission(PermissionType.LEAVE, None, datetime(2025, 3, 3), datetime(2025, 3, 4, 23, 59, 59))
    repo = InMemoryStaff(make_staff(1, permission=permission, status=StaffStatus.ON_LEAVE))

    assert not PermissionGate.is_under_permission(repo.get_by_id(1), datetime(2025, 3, 6, 9, 0))
    assert repo.get_by_id(1).permission == permission


def test_expire_if_due_leaves_active_permission_alone():
    permission = Permission(PermissionType.LEAVE, None, datetime(2025, 3, 3), datetime(2025, 3, 9, 23, 59, 59))
    staff = make_staff(1, permission=permission, status=StaffStatus.ON_LEAVE)
    repo = InMemoryStaff(staff)

    assert PermissionGate(repo).expire_if_due(staff, datetime(2025, 3, 5, 9, 0)) is staff
    assert repo.list_permission_history(1) == []


def test_expire_due_sweeps_the_roster():
    ended = Permission(PermissionType.SUSPENSION, None, datetime(2025, 2, 1), datetime(2025, 2, 28, 23, 59, 59))
    running = Permission(PermissionType.LEAVE, None, datetime(2025, 3, 1), datetime(2025, 3, 31, 23, 59, 59))
    repo = InMemoryStaff(
        make_staff(1, permission=ended, status=StaffStatus.SUSPENDED),
        make_staff(2, permission=running, status=StaffStatus.ON_LEAVE),
        make_staff(3),
    )

    cleared = PermissionGate(repo).expire_due(datetime(2025, 3, 1, 0, 0))

    assert cleared == 1
    assert repo.get_by_id(1).status == StaffStatus.ACTIVE
    assert repo.get_by_id(1).permission is None
    assert repo.get_by_id(2).permission == running
    assert PermissionGate(repo).expire_due(datetime(2025, 3, 1, 0, 0)) == 0
