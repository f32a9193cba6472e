from __future__ import annotations

from datetime import date
from typing import Optional, Protocol, Sequence

from .model import OfficeDayPolicy, StaffSchedule


class ScheduleRepository(Protocol):
    def get_office_day_policy(self) -> Optional[OfficeDayPolicy]:
        raise NotImplementedError

    def save_office_day_policy(self, *, days: Sequence[str], week_start: Optional[date] = None) -> OfficeDayPolicy:
        """Swap the policy in one statement and bump its version."""

        raise NotImplementedError

    def clear_office_day_policy(self) -> bool:
        raise NotImplementedError

    def is_date_assigned(self, *, staff_id: int, work_date: date) -> bool:
        raise NotImplementedError

    def replace_schedule(
        self,
        *,
        staff_id: int,
        start_date: date,
        end_date: date,
        days_per_week: Optional[int] = None,
        assigned_dates: Sequence[date] = (),
    ) -> int:
        """Delete the staff's schedules overlapping the range, then insert the new one.

        Returns schedule_id.
        """

        raise NotImplementedError

    def list_range(self, *, start: date, end: date, staff_id: Optional[int] = None) -> Sequence[StaffSchedule]:
        """Schedules overlapping [start, end]."""

        raise NotImplementedError
