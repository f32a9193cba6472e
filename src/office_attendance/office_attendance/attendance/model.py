from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from typing import Optional

from ..common.datetime_utils import WeekWindow
from ..core.enums import AttendanceStatus, LocationStatus


@dataclass(frozen=True)
class AttendanceRecord:
    """Domain entity: one attendance entry per staff member per calendar day."""

    attendance_id: int
    staff_id: int
    work_date: date
    check_in_time: Optional[datetime]
    check_out_time: Optional[datetime]
    status: AttendanceStatus
    location_status: LocationStatus = LocationStatus.UNKNOWN
    office_name: Optional[str] = None
    latitude: Optional[float] = None
    longitude: Optional[float] = None
    device_id: Optional[str] = None
    check_out_office_name: Optional[str] = None
    check_out_location_status: Optional[LocationStatus] = None
    overridden: bool = False
    overridden_by: Optional[int] = None
    override_reason: Optional[str] = None
    overridden_at: Optional[datetime] = None

    def to_dict(self) -> dict:
        return {
            "attendance_id": self.attendance_id,
            "staff_id": self.staff_id,
            "date": self.work_date.strftime("%Y-%m-%d"),
            "check_in": self.check_in_time.isoformat() if self.check_in_time else None,
            "check_out": self.check_out_time.isoformat() if self.check_out_time else None,
            "status": self.status.value,
            "location_status": self.location_status.value,
            "office": self.office_name,
            "latitude": self.latitude,
            "longitude": self.longitude,
            "overridden": self.overridden,
            "override_reason": self.override_reason,
        }


@dataclass(frozen=True)
class CheckInResult:
    status: AttendanceStatus
    office: Optional[str]
    location_status: LocationStatus

    def to_dict(self) -> dict:
        return {"status": self.status.value, "office": self.office, "location_status": self.location_status.value}


@dataclass(frozen=True)
class CheckOutResult:
    ok: bool
    message: str


@dataclass(frozen=True)
class ComplianceResult:
    window: WeekWindow
    attendance_count: int
    required_days: int

    @property
    def compliant(self) -> bool:
        return self.attendance_count >= self.required_days

    def to_dict(self) -> dict:
        return {
            "week_start": self.window.start.isoformat(),
            "week_end": self.window.end.isoformat(),
            "attendance_count": self.attendance_count,
            "required_days": self.required_days,
            "compliant": self.compliant,
        }
