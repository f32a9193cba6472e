from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from ..attendance.repository import AttendanceRepository
from ..common.datetime_utils import LocalClock
from ..core.constants import OFFICE_CLOSE
from ..core.enums import AttendanceStatus, StaffStatus
from ..staff.permissions import PermissionGate
from ..staff.repository import StaffRepository


@dataclass(frozen=True)
class DailyReportData:
    work_date: str
    total_staff: int
    present: int
    absent: int
    late: list[dict]
    after_close: list[dict]


class AttendanceReportService:
    """Read-side views for administrators: dashboard, today's check-ins, daily report."""

    def __init__(
        self,
        attendance: AttendanceRepository,
        staff: StaffRepository,
        permissions: Optional[PermissionGate] = None,
        *,
        clock: Optional[LocalClock] = None,
    ):
        self._attendance = attendance
        self._staff = staff
        self._clock = clock or LocalClock()
        self._permissions = permissions or PermissionGate(staff, clock=self._clock)

    def present_today(self, *, now: Optional[datetime] = None) -> list[dict]:
        today = self._clock.today(now)
        names = {s.staff_id: s for s in self._staff.list_all()}

        out: list[dict] = []
        for r in self._attendance.list_for_date(today):
            if r.check_in_time is None:
                continue
            staff = names.get(r.staff_id)
            out.append(
                {
                    "staff_id": r.staff_id,
                    "name": staff.name if staff else "-",
                    "email": staff.email if staff else "-",
                    "office": r.office_name,
                    "check_in_time": r.check_in_time.isoformat(),
                    "latitude": r.latitude,
                    "longitude": r.longitude,
                    "status": r.status.value,
                }
            )
        return out

    def dashboard(self, *, now: Optional[datetime] = None) -> dict:
        local_now = self._clock.to_local(now or self._clock.now())
        today = local_now.date()
        roster = [self._permissions.expire_if_due(s, local_now) for s in self._staff.list_all()]
        checked_in = {r.staff_id for r in self._attendance.list_for_date(today) if r.check_in_time is not None}

        def with_status(status: StaffStatus) -> list[dict]:
            return [{"staff_id": s.staff_id, "name": s.name} for s in roster if s.status == status]

        counts = self._attendance.check_in_counts_by_staff()
        ranked = sorted(counts.items(), key=lambda kv: kv[1], reverse=True)
        by_id = {s.staff_id: s for s in roster}

        def pick(index: int) -> Optional[dict]:
            if not ranked:
                return None
            staff = by_id.get(ranked[index][0])
            return {"staff_id": staff.staff_id, "name": staff.name} if staff else None

        suspended = with_status(StaffStatus.SUSPENDED)
        on_leave = with_status(StaffStatus.ON_LEAVE)
        sick = with_status(StaffStatus.SICK)
        official = with_status(StaffStatus.ON_OFFICIAL_DUTY)

        return {
            "total_staff": len(roster),
            "present_today": len(checked_in),
            "absent_today": sum(1 for s in roster if s.status == StaffStatus.ACTIVE and s.staff_id not in checked_in),
            "suspended": len(suspended),
            "on_leave": len(on_leave),
            "sick": len(sick),
            "on_official_duty": len(official),
            "most_present": pick(0),
            "most_absent": pick(-1),
            "suspended_staff": suspended,
            "sick_staff": sick,
            "official_duty_staff": official,
        }

    def daily_report(self, *, now: Optional[datetime] = None) -> DailyReportData:
        today = self._clock.today(now)
        roster = {s.staff_id: s for s in self._staff.list_all()}
        records = [r for r in self._attendance.list_for_date(today) if r.check_in_time is not None]

        def row(r) -> dict:
            staff = roster.get(r.staff_id)
            return {"name": staff.name if staff else "-", "check_in": r.check_in_time.strftime("%H:%M")}

        present = [r for r in records if r.status in (AttendanceStatus.PRESENT, AttendanceStatus.LATE)]
        return DailyReportData(
            work_date=today.isoformat(),
            total_staff=len(roster),
            present=len(present),
            absent=len(roster) - len(present),
            late=[row(r) for r in records if r.status == AttendanceStatus.LATE],
            after_close=[row(r) for r in records if r.check_in_time.time() >= OFFICE_CLOSE],
        )
