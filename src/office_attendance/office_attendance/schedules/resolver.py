from __future__ import annotations

from datetime import date

from ..common.datetime_utils import WeekWindow
from .repository import ScheduleRepository


class ScheduleResolver:
    """Decides whether a staff member is expected in the office on a given day.

    Two tiers, in priority order:
    1. the office-day policy, on days it is in effect, governs every staff member;
    2. otherwise the staff member's own assigned dates.
    With neither source the staff member is not scheduled.
    """

    def __init__(self, schedules: ScheduleRepository):
        self._schedules = schedules

    def is_scheduled(self, staff_id: int, day: date) -> bool:
        policy = self._schedules.get_office_day_policy()
        if policy is not None and policy.in_effect(day):
            return policy.includes(day)
        return self._schedules.is_date_assigned(staff_id=int(staff_id), work_date=day)

    def required_days(self, staff_id: int, window: WeekWindow) -> int:
        """How many office days the window demands of the staff member."""
        policy = self._schedules.get_office_day_policy()
        days = window.days()
        governed = [d for d in days if policy is not None and policy.in_effect(d)]
        required = sum(1 for d in governed if policy.includes(d))
        if len(governed) == len(days):
            return required

        # A policy starts on week_start, so the days it does not govern are a prefix.
        end = days[len(days) - len(governed) - 1]
        schedules = self._schedules.list_range(start=window.start, end=end, staff_id=int(staff_id))
        assigned = {d for sc in schedules for d in sc.assigned_dates if window.start <= d <= end}
        if assigned or governed:
            return required + len(assigned)

        quotas = [sc.days_per_week for sc in schedules if sc.days_per_week]
        return max(quotas) if quotas else 0
