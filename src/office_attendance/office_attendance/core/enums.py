from __future__ import annotations

from enum import Enum


class Role(str, Enum):
    """Roles carried in the authenticated session."""

    ADMIN = "admin"
    STAFF = "staff"


class StaffStatus(str, Enum):
    ACTIVE = "Active"
    ON_LEAVE = "On Leave"
    ON_OFFICIAL_DUTY = "On Official Duty"
    SICK = "Sick"
    SUSPENDED = "Suspended"


class PermissionType(str, Enum):
    """Admin-granted override periods."""

    LEAVE = "Leave"
    OFFICIAL = "Official"
    SICKNESS = "Sickness"
    EMERGENCY = "Emergency"
    SUSPENSION = "Suspension"

    @property
    def staff_status(self) -> StaffStatus:
        # Emergency has no status of its own and counts as leave.
        return {
            PermissionType.LEAVE: StaffStatus.ON_LEAVE,
            PermissionType.EMERGENCY: StaffStatus.ON_LEAVE,
            PermissionType.OFFICIAL: StaffStatus.ON_OFFICIAL_DUTY,
            PermissionType.SICKNESS: StaffStatus.SICK,
            PermissionType.SUSPENSION: StaffStatus.SUSPENDED,
        }[self]


class AttendanceStatus(str, Enum):
    """Final per-day attendance state stored in the database."""

    PRESENT = "Present"
    LATE = "Late"
    ABSENT = "Absent"
    PERMISSION = "Permission"


class LocationStatus(str, Enum):
    IN_OFFICE = "In Office"
    NOT_IN_OFFICE = "Not in Office"
    UNKNOWN = "Unknown"
