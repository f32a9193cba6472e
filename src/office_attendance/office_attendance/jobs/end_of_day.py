from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import datetime
from typing import Optional

from ..attendance.factory import AttendanceStrategyFactory
from ..attendance.repository import AttendanceRepository
from ..common.datetime_utils import LocalClock
from ..core.enums import AttendanceStatus
from ..schedules.resolver import ScheduleResolver
from ..staff.model import Staff
from ..staff.permissions import PermissionGate
from ..staff.repository import StaffRepository

logger = logging.getLogger(__name__)


@dataclass
class SweepReport:
    work_date: str
    skipped_before_close: bool = False
    expired_permissions: int = 0
    absent_created: list[int] = field(default_factory=list)
    permission_created: list[int] = field(default_factory=list)
    reclassified: list[int] = field(default_factory=list)
    failures: list[int] = field(default_factory=list)


class EndOfDaySweeper:
    """Daily reconciliation after the office closes.

    - expires stale permissions across the whole roster
    - backfills a record for every scheduled staff member who never checked in
    - forces Absent on any check-in recorded at or after close

    Safe to run more than once for the same day.
    """

    def __init__(
        self,
        attendance: AttendanceRepository,
        staff: StaffRepository,
        permissions: PermissionGate,
        resolver: ScheduleResolver,
        *,
        clock: Optional[LocalClock] = None,
        strategy_factory: Optional[AttendanceStrategyFactory] = None,
    ):
        self._attendance = attendance
        self._staff = staff
        self._permissions = permissions
        self._resolver = resolver
        self._clock = clock or LocalClock()
        self._factory = strategy_factory or AttendanceStrategyFactory()

    def run(self, now: Optional[datetime] = None) -> SweepReport:
        local_now = self._clock.to_local(now or self._clock.now())
        today = local_now.date()
        report = SweepReport(work_date=today.isoformat())
        logger.info("Running end-of-day sweep for %s", report.work_date)

        report.expired_permissions = self._permissions.expire_due(local_now)

        if not self._factory.is_after_close(local_now):
            report.skipped_before_close = True
            logger.info("Office still open at %s; absence backfill skipped", local_now.strftime("%H:%M"))
            return report

        for staff in self._staff.list_all():
            try:
                self._backfill(staff, local_now, report)
            except Exception:
                logger.exception("End-of-day backfill failed for staff %s", staff.staff_id)
                report.failures.append(staff.staff_id)

        for record in self._attendance.list_for_date(today):
            try:
                self._reclassify(record, report)
            except Exception:
                logger.exception("End-of-day reclassification failed for attendance %s", record.attendance_id)
                report.failures.append(record.staff_id)

        logger.info(
            "End-of-day sweep completed: %s absent, %s on permission, %s reclassified, %s failures",
            len(report.absent_created),
            len(report.permission_created),
            len(report.reclassified),
            len(report.failures),
        )
        return report

    def _backfill(self, staff: Staff, local_now: datetime, report: SweepReport) -> None:
        today = local_now.date()
        if not self._resolver.is_scheduled(staff.staff_id, today):
            return
        if self._attendance.get_for_staff_and_date(staff.staff_id, today):
            return

        if self._permissions.is_under_permission(staff, local_now):
            status = AttendanceStatus.PERMISSION
        else:
            status = AttendanceStatus.ABSENT

        created = self._attendance.create_sweep_record(staff_id=staff.staff_id, work_date=today, status=status)
        if created is None:
            return

        if status == AttendanceStatus.ABSENT:
            self._staff.increment_monthly_absence(staff.staff_id)
            report.absent_created.append(staff.staff_id)
        else:
            report.permission_created.append(staff.staff_id)

    def _reclassify(self, record, report: SweepReport) -> None:
        if record.check_in_time is None or record.overridden:
            return
        if record.status in (AttendanceStatus.ABSENT, AttendanceStatus.PERMISSION):
            return
        if not self._factory.is_after_close(record.check_in_time):
            return

        if self._attendance.update_status(attendance_id=record.attendance_id, status=AttendanceStatus.ABSENT):
            self._staff.increment_monthly_absence(record.staff_id)
            report.reclassified.append(record.staff_id)
            logger.warning(
                "Attendance %s for staff %s checked in at %s; reclassified as Absent",
                record.attendance_id,
                record.staff_id,
                record.check_in_time.strftime("%H:%M:%S"),
            )
