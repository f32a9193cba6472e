from __future__ import annotations

import logging
from datetime import datetime
from typing import Any, Optional, Union

from ..common.datetime_utils import LocalClock, WeekWindow, month_start, week_start
from ..common.validators import require_latitude, require_longitude, require_non_empty, require_positive_int
from ..core.constants import DEFAULT_HISTORY_LIMIT
from ..core.enums import AttendanceStatus, LocationStatus
from ..core.exceptions import DeviceConflictError, DuplicateCheckInError, NotFoundError, ValidationError
from ..geo.matcher import GeoMatcher
from ..schedules.resolver import ScheduleResolver
from ..staff.model import Staff
from ..staff.permissions import PermissionGate
from ..staff.repository import StaffRepository
from .factory import AttendanceStrategyFactory
from .model import AttendanceRecord, CheckInResult, CheckOutResult, ComplianceResult
from .repository import AttendanceRepository

logger = logging.getLogger(__name__)

ATTENDED = frozenset({AttendanceStatus.PRESENT, AttendanceStatus.LATE, AttendanceStatus.PERMISSION})


class AttendanceService:
    """Use case: live check-in/check-out and per-staff attendance views."""

    def __init__(
        self,
        attendance: AttendanceRepository,
        staff: StaffRepository,
        geo: GeoMatcher,
        permissions: PermissionGate,
        resolver: ScheduleResolver,
        *,
        clock: Optional[LocalClock] = None,
        strategy_factory: Optional[AttendanceStrategyFactory] = None,
    ):
        self._attendance = attendance
        self._staff = staff
        self._geo = geo
        self._permissions = permissions
        self._resolver = resolver
        self._clock = clock or LocalClock()
        self._factory = strategy_factory or AttendanceStrategyFactory()

    def _load_staff(self, staff_id: Any, local_now: datetime) -> Staff:
        staff = self._staff.get_by_id(require_positive_int(staff_id, "staff_id"))
        if not staff:
            raise NotFoundError("Staff not found")
        return self._permissions.expire_if_due(staff, local_now)

    def _guard_device(self, staff: Staff, device_id: str) -> None:
        if staff.device_id and staff.device_id != device_id:
            raise DeviceConflictError(
                DeviceConflictError.WRONG_DEVICE,
                "This account is bound to another device",
            )
        owner = self._staff.get_by_device(device_id)
        if owner and owner.staff_id != staff.staff_id:
            raise DeviceConflictError(
                DeviceConflictError.DEVICE_REUSE,
                "This device is already registered to another staff member",
            )

    def check_in(
        self,
        staff_id: int,
        *,
        latitude: Any,
        longitude: Any,
        device_id: str,
        now: Optional[datetime] = None,
    ) -> CheckInResult:
        lat = require_latitude(latitude)
        lng = require_longitude(longitude)
        device_id = require_non_empty(device_id, "device_id")

        local_now = self._clock.to_local(now or self._clock.now())
        today = local_now.date()

        staff = self._load_staff(staff_id, local_now)

        if self._attendance.get_for_staff_and_date(staff.staff_id, today):
            raise DuplicateCheckInError("You have already checked in today")

        self._guard_device(staff, device_id)

        office = self._geo.match(lat, lng)
        location_status = LocationStatus.IN_OFFICE if office else LocationStatus.NOT_IN_OFFICE
        has_permission = self._permissions.is_under_permission(staff, local_now)

        strategy = self._factory.for_checkin(has_permission=has_permission, in_office=office is not None, local_now=local_now)
        decision = strategy.decide_checkin(local_now=local_now, office=office)

        self._attendance.create_checkin(
            staff_id=staff.staff_id,
            work_date=today,
            check_in_time=local_now,
            latitude=lat,
            longitude=lng,
            office_name=office.name if office else None,
            location_status=location_status,
            status=decision.status,
            device_id=device_id,
        )

        if not staff.device_id:
            self._staff.bind_device(staff.staff_id, device_id)
        if decision.status == AttendanceStatus.ABSENT:
            self._staff.increment_monthly_absence(staff.staff_id)

        logger.info(
            "Staff %s checked in at %s: %s (%s)",
            staff.staff_id,
            local_now.strftime("%H:%M:%S"),
            decision.status.value,
            decision.note or location_status.value,
        )
        return CheckInResult(
            status=decision.status,
            office=office.name if office else None,
            location_status=location_status,
        )

    def check_out(
        self,
        staff_id: int,
        *,
        latitude: Any = None,
        longitude: Any = None,
        now: Optional[datetime] = None,
    ) -> CheckOutResult:
        local_now = self._clock.to_local(now or self._clock.now())
        staff = self._load_staff(staff_id, local_now)

        record = self._attendance.get_for_staff_and_date(staff.staff_id, local_now.date())
        if not record or record.check_in_time is None:
            return CheckOutResult(ok=False, message="Not checked in today.")
        if record.check_out_time is not None:
            return CheckOutResult(ok=False, message="Already checked out today.")

        office_name = None
        location_status = None
        if latitude is not None and longitude is not None:
            office = self._geo.match(require_latitude(latitude), require_longitude(longitude))
            office_name = office.name if office else None
            location_status = LocationStatus.IN_OFFICE if office else LocationStatus.NOT_IN_OFFICE

        self._attendance.update_checkout(
            attendance_id=record.attendance_id,
            check_out_time=local_now,
            office_name=office_name,
            location_status=location_status,
        )
        logger.info("Staff %s checked out at %s", staff.staff_id, local_now.strftime("%H:%M:%S"))
        return CheckOutResult(ok=True, message="Checked out successfully.")

    def is_compliant(
        self,
        staff_id: int,
        *,
        window: Optional[WeekWindow] = None,
        now: Optional[datetime] = None,
    ) -> ComplianceResult:
        """Weekly check: days attended against office days required in the window."""
        local_now = self._clock.to_local(now or self._clock.now())
        staff = self._load_staff(staff_id, local_now)
        window = window or WeekWindow.containing(local_now.date())

        records = self._attendance.list_for_staff_between(staff.staff_id, window.start, window.end)
        attended = sum(1 for r in records if r.status in ATTENDED)
        required = self._resolver.required_days(staff.staff_id, window)
        return ComplianceResult(window=window, attendance_count=attended, required_days=required)

    def summary(self, staff_id: int, *, now: Optional[datetime] = None) -> dict:
        local_now = self._clock.to_local(now or self._clock.now())
        staff = self._load_staff(staff_id, local_now)
        today = local_now.date()

        return {
            "week_attendance": self._attendance.count_check_ins_between(staff.staff_id, week_start(today), today),
            "month_attendance": self._attendance.count_check_ins_between(staff.staff_id, month_start(today), today),
            "year_attendance": self._attendance.count_check_ins_between(
                staff.staff_id, today.replace(month=1, day=1), today
            ),
        }

    def history(self, staff_id: int, *, limit: int = DEFAULT_HISTORY_LIMIT) -> list[dict]:
        rows = self._attendance.get_recent_for_staff(require_positive_int(staff_id, "staff_id"), int(limit))
        return [r.to_dict() for r in rows]

    def is_scheduled_today(self, staff_id: int, *, now: Optional[datetime] = None) -> bool:
        local_now = self._clock.to_local(now or self._clock.now())
        return self._resolver.is_scheduled(int(staff_id), local_now.date())

    def override_status(
        self,
        *,
        attendance_id: int,
        admin_id: int,
        status: Union[str, AttendanceStatus],
        reason: str,
        now: Optional[datetime] = None,
    ) -> AttendanceRecord:
        """Admin correction of a day's status, stamped with who, why and when."""
        try:
            new_status = AttendanceStatus(status)
        except ValueError:
            raise ValidationError("Invalid attendance status")
        reason = require_non_empty(reason, "reason")

        record = self._attendance.get_by_id(require_positive_int(attendance_id, "attendance_id"))
        if not record:
            raise NotFoundError("Attendance record not found")

        local_now = self._clock.to_local(now or self._clock.now())
        self._attendance.admin_override(
            attendance_id=record.attendance_id,
            status=new_status,
            admin_id=require_positive_int(admin_id, "admin_id"),
            reason=reason,
            overridden_at=local_now,
        )
        if new_status == AttendanceStatus.ABSENT and record.status != AttendanceStatus.ABSENT:
            self._staff.increment_monthly_absence(record.staff_id)
        elif record.status == AttendanceStatus.ABSENT and new_status != AttendanceStatus.ABSENT:
            self._staff.decrement_monthly_absence(record.staff_id)

        logger.info(
            "Admin %s overrode attendance %s: %s -> %s",
            admin_id,
            record.attendance_id,
            record.status.value,
            new_status.value,
        )
        updated = self._attendance.get_by_id(record.attendance_id)
        return updated or record
