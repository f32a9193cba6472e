from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from typing import Optional

from ..common.datetime_utils import weekday_name


@dataclass(frozen=True)
class StaffSchedule:
    """Per-staff schedule: explicit office dates, or a days-per-week quota."""

    schedule_id: int
    staff_id: int
    start_date: date
    end_date: date
    days_per_week: Optional[int] = None
    assigned_dates: tuple[date, ...] = ()

    def overlaps(self, start: date, end: date) -> bool:
        return self.start_date <= end and start <= self.end_date


@dataclass(frozen=True)
class OfficeDayPolicy:
    """Weekdays on which every staff member is expected in the office.

    `week_start`, when set, is the first day the policy governs; earlier days
    fall back to per-staff schedules.
    """

    days: tuple[str, ...]
    version: int = 1
    week_start: Optional[date] = None

    def in_effect(self, day: date) -> bool:
        return self.week_start is None or day >= self.week_start

    def includes(self, day: date) -> bool:
        return weekday_name(day) in self.days
