from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import date, datetime
from typing import Optional, Sequence

from ..attendance.repository import AttendanceRepository
from ..common.datetime_utils import LocalClock, month_start, month_token
from ..core.constants import QUERY_ABSENCE_THRESHOLD, WARNING_ABSENCE_THRESHOLD
from ..core.enums import AttendanceStatus
from ..core.exceptions import NotificationDeliveryError
from ..notifications.notifier import Notifier
from ..staff.model import Permission, Staff
from ..staff.permissions import PermissionGate
from ..staff.repository import StaffRepository
from .templates import QUERY_SUBJECT, WARNING_SUBJECT, query_email_html, warning_email_html

logger = logging.getLogger(__name__)


@dataclass
class ComplianceReport:
    month: str
    checked: int = 0
    warnings_sent: list[int] = field(default_factory=list)
    queries_sent: list[int] = field(default_factory=list)
    failures: list[int] = field(default_factory=list)


class ComplianceAggregator:
    """Monthly absence rollup and escalation e-mails.

    Each escalation is send-then-stamp against a `YYYY-MM` marker on the staff row,
    so re-running within the month never repeats a warning or a query. A failed
    send leaves the marker untouched and is retried on the next run.
    """

    def __init__(
        self,
        attendance: AttendanceRepository,
        staff: StaffRepository,
        permissions: PermissionGate,
        notifier: Notifier,
        *,
        admin_emails: Sequence[str] = (),
        clock: Optional[LocalClock] = None,
        warning_threshold: int = WARNING_ABSENCE_THRESHOLD,
        query_threshold: int = QUERY_ABSENCE_THRESHOLD,
    ):
        self._attendance = attendance
        self._staff = staff
        self._permissions = permissions
        self._notifier = notifier
        self._admin_emails = list(admin_emails)
        self._clock = clock or LocalClock()
        self._warning_threshold = int(warning_threshold)
        self._query_threshold = int(query_threshold)

    def count_absences(self, staff: Staff, *, since: date, until: date) -> int:
        """Absent days in [since, until], skipping days covered by any permission."""
        windows: list[Permission] = list(self._staff.list_permission_history(staff.staff_id))
        if staff.permission:
            windows.append(staff.permission)

        return sum(
            1
            for r in self._attendance.list_for_staff_between(staff.staff_id, since, until)
            if r.status == AttendanceStatus.ABSENT and not any(p.covers_day(r.work_date) for p in windows)
        )

    def check_staff(self, staff: Staff, now: datetime) -> tuple[bool, bool]:
        """Evaluate one staff member. Returns (warning_sent, query_sent)."""
        local_now = self._clock.to_local(now)
        today = local_now.date()
        month = month_token(today)

        staff = self._permissions.expire_if_due(staff, local_now)
        absences = self.count_absences(staff, since=month_start(today), until=today)
        if absences != staff.monthly_absence:
            self._staff.set_monthly_absence(staff.staff_id, absences)

        warned = False
        queried = False

        if absences >= self._warning_threshold and staff.warning_sent_month != month:
            if self._notify(staff.email, WARNING_SUBJECT, warning_email_html(staff.name, absences), staff):
                self._staff.stamp_warning_sent(staff.staff_id, month)
                warned = True

        if absences >= self._query_threshold and staff.query_sent_month != month:
            recipients = [staff.email, *self._admin_emails]
            if self._notify(recipients, QUERY_SUBJECT, query_email_html(staff.name, absences), staff):
                self._staff.stamp_query_sent(staff.staff_id, month)
                queried = True

        return warned, queried

    def _notify(self, recipients, subject: str, html: str, staff: Staff) -> bool:
        try:
            self._notifier.send(recipients, subject, html)
            return True
        except NotificationDeliveryError as e:
            logger.error("Could not send '%s' to staff %s: %s", subject, staff.staff_id, e)
            return False

    def run(self, now: Optional[datetime] = None) -> ComplianceReport:
        local_now = self._clock.to_local(now or self._clock.now())
        report = ComplianceReport(month=month_token(local_now.date()))
        logger.info("Running monthly absence check for %s", report.month)

        for staff in self._staff.list_all():
            report.checked += 1
            try:
                warned, queried = self.check_staff(staff, local_now)
            except Exception:
                logger.exception("Monthly absence check failed for staff %s", staff.staff_id)
                report.failures.append(staff.staff_id)
                continue
            if warned:
                report.warnings_sent.append(staff.staff_id)
            if queried:
                report.queries_sent.append(staff.staff_id)

        logger.info(
            "Monthly absence check completed: %s staff, %s warnings, %s queries, %s failures",
            report.checked,
            len(report.warnings_sent),
            len(report.queries_sent),
            len(report.failures),
        )
        return report
