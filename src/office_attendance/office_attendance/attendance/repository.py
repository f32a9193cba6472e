from __future__ import annotations

from datetime import date, datetime
from typing import Optional, Protocol, Sequence

from ..core.enums import AttendanceStatus, LocationStatus
from .model import AttendanceRecord


class AttendanceRepository(Protocol):
    def get_by_id(self, attendance_id: int) -> Optional[AttendanceRecord]:
        raise NotImplementedError

    def get_for_staff_and_date(self, staff_id: int, work_date: date) -> Optional[AttendanceRecord]:
        raise NotImplementedError

    def get_recent_for_staff(self, staff_id: int, limit: int) -> Sequence[AttendanceRecord]:
        raise NotImplementedError

    def list_for_date(self, work_date: date) -> Sequence[AttendanceRecord]:
        raise NotImplementedError

    def list_for_staff_between(self, staff_id: int, start: date, end: date) -> Sequence[AttendanceRecord]:
        raise NotImplementedError

    def count_check_ins_between(self, staff_id: int, start: date, end: date) -> int:
        raise NotImplementedError

    def check_in_counts_by_staff(self) -> dict[int, int]:
        raise NotImplementedError

    def create_checkin(
        self,
        *,
        staff_id: int,
        work_date: date,
        check_in_time: datetime,
        latitude: float,
        longitude: float,
        office_name: Optional[str],
        location_status: LocationStatus,
        status: AttendanceStatus,
        device_id: str,
    ) -> int:
        """Insert today's record.

        Raises DuplicateCheckInError when (staff_id, work_date) already exists.
        """

        raise NotImplementedError

    def create_sweep_record(self, *, staff_id: int, work_date: date, status: AttendanceStatus) -> Optional[int]:
        """Insert a record without a check-in. Returns None if the day already has one."""

        raise NotImplementedError

    def update_checkout(
        self,
        *,
        attendance_id: int,
        check_out_time: datetime,
        office_name: Optional[str] = None,
        location_status: Optional[LocationStatus] = None,
    ) -> bool:
        raise NotImplementedError

    def update_status(self, *, attendance_id: int, status: AttendanceStatus) -> bool:
        raise NotImplementedError

    def admin_override(
        self,
        *,
        attendance_id: int,
        status: AttendanceStatus,
        admin_id: int,
        reason: str,
        overridden_at: datetime,
    ) -> bool:
        raise NotImplementedError
