from __future__ import annotations

import logging
from datetime import datetime
from html import escape
from typing import Optional, Sequence

from ..core.exceptions import NotificationDeliveryError
from ..notifications.notifier import Notifier
from ..reports.service import AttendanceReportService, DailyReportData

logger = logging.getLogger(__name__)

SUBJECT = "Daily Attendance Report"


def render_daily_report(data: DailyReportData) -> str:
    def lines(rows: list[dict]) -> str:
        return "".join(f"<p>{escape(r['name'])} - {r['check_in']}</p>" for r in rows) or "<p>None</p>"

    return f"""
      <h2>Daily Attendance Report - {data.work_date}</h2>
      <p><strong>Total Staff:</strong> {data.total_staff}</p>
      <p><strong>Present:</strong> {data.present}</p>
      <p><strong>Absent:</strong> {data.absent}</p>
      <p><strong>Late:</strong> {len(data.late)}</p>
      <p><strong>Checked in after 5 PM:</strong> {len(data.after_close)}</p>

      <h3>Late Staff:</h3>
      {lines(data.late)}

      <h3>Checked in After 5 PM:</h3>
      {lines(data.after_close)}
    """


class DailyReportJob:
    """E-mails the day's attendance summary to the administrative list."""

    def __init__(self, reports: AttendanceReportService, notifier: Notifier, *, recipients: Sequence[str]):
        self._reports = reports
        self._notifier = notifier
        self._recipients = list(recipients)

    def run(self, now: Optional[datetime] = None) -> bool:
        data = self._reports.daily_report(now=now)
        if not self._recipients:
            logger.warning("Daily report for %s not sent: no admin recipients configured", data.work_date)
            return False
        try:
            self._notifier.send(self._recipients, f"{SUBJECT} - {data.work_date}", render_daily_report(data))
        except NotificationDeliveryError as e:
            logger.error("Daily report for %s not sent: %s", data.work_date, e)
            return False
        logger.info("Daily report for %s sent", data.work_date)
        return True
