from __future__ import annotations

from dataclasses import replace
from datetime import date, datetime
from typing import Optional

from office_attendance.attendance.model import AttendanceRecord
from office_attendance.core.enums import AttendanceStatus, LocationStatus, StaffStatus
from office_attendance.core.exceptions import DuplicateCheckInError, NotificationDeliveryError
from office_attendance.schedules.model import OfficeDayPolicy, StaffSchedule
from office_attendance.staff.model import Permission, Staff


class InMemoryStaff:
    def __init__(self, *staff: Staff):
        self.by_id: dict[int, Staff] = {s.staff_id: s for s in staff}
        self.history: dict[int, list[Permission]] = {}

    def _update(self, staff_id: int, **changes) -> bool:
        current = self.by_id.get(staff_id)
        if current is None:
            return False
        self.by_id[staff_id] = replace(current, **changes)
        return True

    def get_by_id(self, staff_id: int) -> Optional[Staff]:
        return self.by_id.get(staff_id)

    def get_by_device(self, device_id: str) -> Optional[Staff]:
        return next((s for s in self.by_id.values() if s.device_id == device_id), None)

    def list_all(self):
        return sorted(self.by_id.values(), key=lambda s: s.staff_id)

    def list_with_permission(self):
        return [s for s in self.list_all() if s.permission is not None]

    def list_with_expired_permission(self, now: datetime):
        return [s for s in self.list_with_permission() if s.permission.end_date < now]

    def bind_device(self, staff_id: int, device_id: str) -> bool:
        staff = self.by_id.get(staff_id)
        if staff is None or staff.device_id:
            return False
        return self._update(staff_id, device_id=device_id)

    def set_permission(self, staff_id: int, *, permission: Permission, status: StaffStatus) -> bool:
        staff = self.by_id.get(staff_id)
        if staff is None:
            return False
        if staff.permission is not None:
            self.history.setdefault(staff_id, []).append(staff.permission)
        return self._update(staff_id, permission=permission, status=status)

    def archive_permission(self, staff_id: int) -> bool:
        staff = self.by_id.get(staff_id)
        if staff is None or staff.permission is None:
            return False
        self.history.setdefault(staff_id, []).append(staff.permission)
        return self._update(staff_id, permission=None, status=StaffStatus.ACTIVE)

    def list_permission_history(self, staff_id: int):
        return list(self.history.get(staff_id, []))

    def increment_monthly_absence(self, staff_id: int) -> None:
        self._update(staff_id, monthly_absence=self.by_id[staff_id].monthly_absence + 1)

    def decrement_monthly_absence(self, staff_id: int) -> None:
        self._update(staff_id, monthly_absence=max(0, self.by_id[staff_id].monthly_absence - 1))

    def set_monthly_absence(self, staff_id: int, count: int) -> None:
        self._update(staff_id, monthly_absence=count)

    def stamp_warning_sent(self, staff_id: int, month: str) -> bool:
        if self.by_id[staff_id].warning_sent_month == month:
            return False
        return self._update(staff_id, warning_sent_month=month)

    def stamp_query_sent(self, staff_id: int, month: str) -> bool:
        if self.by_id[staff_id].query_sent_month == month:
            return False
        return self._update(staff_id, query_sent_month=month)

    def delete_by_id(self, staff_id: int) -> bool:
        return self.by_id.pop(staff_id, None) is not None


class InMemoryAttendance:
    """Enforces one record per staff member per day, like the UNIQUE key."""

    def __init__(self):
        self.by_id: dict[int, AttendanceRecord] = {}
        self._id = 0

    def _insert(self, **fields) -> int:
        self._id += 1
        self.by_id[self._id] = AttendanceRecord(attendance_id=self._id, **fields)
        return self._id

    def get_by_id(self, attendance_id: int) -> Optional[AttendanceRecord]:
        return self.by_id.get(attendance_id)

    def get_for_staff_and_date(self, staff_id: int, work_date: date) -> Optional[AttendanceRecord]:
        return next((r for r in self.by_id.values() if r.staff_id == staff_id and r.work_date == work_date), None)

    def get_recent_for_staff(self, staff_id: int, limit: int):
        items = [r for r in self.by_id.values() if r.staff_id == staff_id]
        items.sort(key=lambda r: r.work_date, reverse=True)
        return items[:limit]

    def list_for_date(self, work_date: date):
        return [r for r in self.by_id.values() if r.work_date == work_date]

    def list_for_staff_between(self, staff_id: int, start: date, end: date):
        items = [r for r in self.by_id.values() if r.staff_id == staff_id and start <= r.work_date <= end]
        return sorted(items, key=lambda r: r.work_date)

    def count_check_ins_between(self, staff_id: int, start: date, end: date) -> int:
        return sum(1 for r in self.list_for_staff_between(staff_id, start, end) if r.check_in_time is not None)

    def check_in_counts_by_staff(self) -> dict[int, int]:
        counts: dict[int, int] = {}
        for r in self.by_id.values():
            if r.check_in_time is not None:
                counts[r.staff_id] = counts.get(r.staff_id, 0) + 1
        return counts

    def create_checkin(self, *, staff_id, work_date, check_in_time, latitude, longitude, office_name, location_status, status, device_id) -> int:
        if self.get_for_staff_and_date(staff_id, work_date):
            raise DuplicateCheckInError("You have already checked in today")
        return self._insert(
            staff_id=staff_id,
            work_date=work_date,
            check_in_time=check_in_time,
            check_out_time=None,
            status=status,
            location_status=location_status,
            office_name=office_name,
            latitude=latitude,
            longitude=longitude,
            device_id=device_id,
        )

    def create_sweep_record(self, *, staff_id: int, work_date: date, status: AttendanceStatus) -> Optional[int]:
        if self.get_for_staff_and_date(staff_id, work_date):
            return None
        return self._insert(
            staff_id=staff_id,
            work_date=work_date,
            check_in_time=None,
            check_out_time=None,
            status=status,
            location_status=LocationStatus.UNKNOWN,
        )

    def add(self, **fields) -> int:
        """Test helper: insert a record directly."""
        fields.setdefault("check_out_time", None)
        return self._insert(**fields)

    def update_checkout(self, *, attendance_id, check_out_time, office_name=None, location_status=None) -> bool:
        rec = self.by_id.get(attendance_id)
        if rec is None or rec.check_out_time is not None:
            return False
        self.by_id[attendance_id] = replace(
            rec,
            check_out_time=check_out_time,
            check_out_office_name=office_name,
            check_out_location_status=location_status,
        )
        return True

    def update_status(self, *, attendance_id: int, status: AttendanceStatus) -> bool:
        rec = self.by_id.get(attendance_id)
        if rec is None or rec.status == status:
            return False
        self.by_id[attendance_id] = replace(rec, status=status)
        return True

    def admin_override(self, *, attendance_id, status, admin_id, reason, overridden_at) -> bool:
        rec = self.by_id.get(attendance_id)
        if rec is None:
            return False
        self.by_id[attendance_id] = replace(
            rec,
            status=status,
            overridden=True,
            overridden_by=admin_id,
            override_reason=reason,
            overridden_at=overridden_at,
        )
        return True


class InMemorySchedules:
    def __init__(self):
        self.policy: Optional[OfficeDayPolicy] = None
        self.schedules: list[StaffSchedule] = []
        self._id = 0

    def get_office_day_policy(self) -> Optional[OfficeDayPolicy]:
        return self.policy

    def save_office_day_policy(self, *, days, week_start=None) -> OfficeDayPolicy:
        version = self.policy.version + 1 if self.policy else 1
        self.policy = OfficeDayPolicy(days=tuple(days), version=version, week_start=week_start)
        return self.policy

    def clear_office_day_policy(self) -> bool:
        cleared = self.policy is not None
        self.policy = None
        return cleared

    def is_date_assigned(self, *, staff_id: int, work_date: date) -> bool:
        return any(sc.staff_id == staff_id and work_date in sc.assigned_dates for sc in self.schedules)

    def replace_schedule(self, *, staff_id, start_date, end_date, days_per_week=None, assigned_dates=()) -> int:
        self.schedules = [
            sc for sc in self.schedules if not (sc.staff_id == staff_id and sc.overlaps(start_date, end_date))
        ]
        self._id += 1
        self.schedules.append(
            StaffSchedule(
                schedule_id=self._id,
                staff_id=staff_id,
                start_date=start_date,
                end_date=end_date,
                days_per_week=days_per_week,
                assigned_dates=tuple(sorted(assigned_dates)),
            )
        )
        return self._id

    def list_range(self, *, start: date, end: date, staff_id: Optional[int] = None):
        return [
            sc
            for sc in self.schedules
            if sc.overlaps(start, end) and (staff_id is None or sc.staff_id == staff_id)
        ]


class FailingNotifier:
    def __init__(self):
        self.attempts = 0

    def send(self, recipients, subject: str, body_html: str) -> None:
        self.attempts += 1
        raise NotificationDeliveryError("SMTP unavailable")


def make_staff(staff_id: int = 1, **overrides) -> Staff:
    fields = {"name": f"Staff {staff_id}", "email": f"staff{staff_id}@example.com"}
    fields.update(overrides)
    return Staff(staff_id=staff_id, **fields)
