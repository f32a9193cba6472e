from datetime import date

import pytest

from office_attendance.core.exceptions import NotFoundError, ValidationError
from office_attendance.schedules.service import ScheduleService
from tests.fakes import InMemorySchedules, InMemoryStaff, make_staff

MARCH = (date(2025, 3, 1), date(2025, 3, 31))


def build():
    schedules = InMemorySchedules()
    return ScheduleService(schedules, InMemoryStaff(make_staff(1), make_staff(2))), schedules


def test_assign_dates_for_several_staff():
    svc, schedules = build()

    ids = svc.assign_dates(staff_ids=[2, 1, 1], start=MARCH[0], end=MARCH[1], dates=[date(2025, 3, 5), date(2025, 3, 3)])

    assert len(ids) == 2
    rows = svc.list_range(start=MARCH[0], end=MARCH[1])
    assert sorted(r.staff_id for r in rows) == [1, 2]
    assert rows[0].assigned_dates == (date(2025, 3, 3), date(2025, 3, 5))


def test_reassigning_replaces_instead_of_merging():
    svc, schedules = build()
    svc.assign_dates(staff_ids=[1], start=MARCH[0], end=MARCH[1], dates=[date(2025, 3, 3)])

    svc.assign_dates(staff_ids=[1], start=MARCH[0], end=MARCH[1], dates=[date(2025, 3, 4)])

    rows = svc.list_range(start=MARCH[0], end=MARCH[1], staff_id=1)
    assert len(rows) == 1
    assert rows[0].assigned_dates == (date(2025, 3, 4),)
    assert not schedules.is_date_assigned(staff_id=1, work_date=date(2025, 3, 3))


@pytest.mark.parametrize(
    "kwargs, error",
    [
        ({"staff_ids": []}, ValidationError),
        ({"staff_ids": [5]}, NotFoundError),
        ({"dates": []}, ValidationError),
        ({"dates": [date(2025, 4, 1)]}, ValidationError),
        ({"start": date(2025, 3, 31), "end": date(2025, 3, 1)}, ValidationError),
    ],
)
def test_assign_dates_validation(kwargs, error):
    svc, schedules = build()
    params = {"staff_ids": [1], "start": MARCH[0], "end": MARCH[1], "dates": [date(2025, 3, 3)]}
    params.update(kwargs)

    with pytest.raises(error):
        svc.assign_dates(**params)

    assert schedules.schedules == []


@pytest.mark.parametrize("quota", [0, 8, "x"])
def test_days_per_week_must_be_between_one_and_seven(quota):
    svc, _ = build()

    with pytest.raises(ValidationError):
        svc.assign_days_per_week(staff_ids=[1], start=MARCH[0], end=MARCH[1], days_per_week=quota)


def test_office_days_are_normalised_and_versioned():
    svc, _ = build()

    first = svc.set_office_days(days=["friday", " Monday ", "Friday"])
    second = svc.set_office_days(days=["Tuesday"])

    assert first.days == ("Monday", "Friday")
    assert second.version == first.version + 1
    assert svc.get_office_days().days == ("Tuesday",)


def test_office_days_validation_keeps_existing_policy():
    svc, _ = build()
    svc.set_office_days(days=["Monday"])

    with pytest.raises(ValidationError):
        svc.set_office_days(days=["Funday"])
    with pytest.raises(ValidationError):
        svc.set_office_days(days=[])

    assert svc.get_office_days().days == ("Monday",)


def test_clear_office_days():
    svc, _ = build()
    svc.set_office_days(days=["Monday"])

    assert svc.clear_office_days() is True
    assert svc.get_office_days() is None
    assert svc.clear_office_days() is False
