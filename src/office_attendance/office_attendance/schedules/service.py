from __future__ import annotations

import logging
from datetime import date
from typing import Iterable, Optional, Sequence

from ..core.constants import WEEKDAY_NAMES
from ..core.exceptions import NotFoundError, ValidationError
from ..staff.repository import StaffRepository
from .model import OfficeDayPolicy, StaffSchedule
from .repository import ScheduleRepository

logger = logging.getLogger(__name__)


class ScheduleService:
    """Use case: admin bulk scheduling and the office-day policy."""

    def __init__(self, schedules: ScheduleRepository, staff: StaffRepository):
        self._schedules = schedules
        self._staff = staff

    def _validate_targets(self, staff_ids: Iterable[int], start: date, end: date) -> list[int]:
        ids = sorted({int(s) for s in staff_ids or []})
        if not ids:
            raise ValidationError("At least one staff member is required")
        if end < start:
            raise ValidationError("End date must not be before start date")
        for staff_id in ids:
            if not self._staff.get_by_id(staff_id):
                raise NotFoundError(f"Staff {staff_id} not found")
        return ids

    def assign_dates(self, *, staff_ids: Iterable[int], start: date, end: date, dates: Iterable[date]) -> list[int]:
        """Replace each staff member's schedule in the range with explicit office dates."""
        ids = self._validate_targets(staff_ids, start, end)
        assigned = sorted(set(dates or []))
        if not assigned:
            raise ValidationError("At least one date is required")
        outside = [d for d in assigned if not start <= d <= end]
        if outside:
            raise ValidationError(f"Date {outside[0].isoformat()} is outside the schedule range")

        schedule_ids = [
            self._schedules.replace_schedule(staff_id=sid, start_date=start, end_date=end, assigned_dates=assigned)
            for sid in ids
        ]
        logger.info("Scheduled %s staff for %s dates between %s and %s", len(ids), len(assigned), start, end)
        return schedule_ids

    def assign_days_per_week(self, *, staff_ids: Iterable[int], start: date, end: date, days_per_week: int) -> list[int]:
        ids = self._validate_targets(staff_ids, start, end)
        try:
            quota = int(days_per_week)
        except (TypeError, ValueError):
            raise ValidationError("Days per week is invalid")
        if not 1 <= quota <= 7:
            raise ValidationError("Days per week must be between 1 and 7")

        schedule_ids = [
            self._schedules.replace_schedule(staff_id=sid, start_date=start, end_date=end, days_per_week=quota)
            for sid in ids
        ]
        logger.info("Scheduled %s staff for %s days/week between %s and %s", len(ids), quota, start, end)
        return schedule_ids

    def set_office_days(self, *, days: Iterable[str], week_start: Optional[date] = None) -> OfficeDayPolicy:
        by_lower = {name.lower(): name for name in WEEKDAY_NAMES}
        chosen = set()
        for raw in days or []:
            name = by_lower.get(str(raw).strip().lower())
            if not name:
                raise ValidationError(f"Unknown weekday: {raw}")
            chosen.add(name)
        if not chosen:
            raise ValidationError("At least one office day is required")

        ordered = tuple(name for name in WEEKDAY_NAMES if name in chosen)
        policy = self._schedules.save_office_day_policy(days=ordered, week_start=week_start)
        logger.info("Office-day policy v%s set to %s", policy.version, ", ".join(policy.days))
        return policy

    def clear_office_days(self) -> bool:
        cleared = self._schedules.clear_office_day_policy()
        if cleared:
            logger.info("Office-day policy cleared; per-staff schedules apply")
        return cleared

    def get_office_days(self) -> Optional[OfficeDayPolicy]:
        return self._schedules.get_office_day_policy()

    def list_range(self, *, start: date, end: date, staff_id: Optional[int] = None) -> Sequence[StaffSchedule]:
        if end < start:
            raise ValidationError("End date must not be before start date")
        return self._schedules.list_range(start=start, end=end, staff_id=staff_id)
