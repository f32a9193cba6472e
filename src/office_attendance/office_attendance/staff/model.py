from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from typing import Optional

from ..core.enums import PermissionType, StaffStatus


@dataclass(frozen=True)
class Permission:
    """Admin-granted override period (leave, official duty, sickness...)."""

    permission_type: PermissionType
    reason: Optional[str]
    start_date: datetime
    end_date: datetime

    def covers(self, moment: datetime) -> bool:
        return self.start_date <= moment <= self.end_date

    def covers_day(self, day: date) -> bool:
        return self.start_date.date() <= day <= self.end_date.date()

    def is_expired(self, moment: datetime) -> bool:
        return moment > self.end_date


@dataclass(frozen=True)
class Staff:
    """Domain entity: a staff member on the flat roster.

    Note: Credentials live with the external identity provider and are not loaded here.
    """

    staff_id: int
    name: str
    email: str
    status: StaffStatus = StaffStatus.ACTIVE
    permission: Optional[Permission] = None
    device_id: Optional[str] = None
    monthly_absence: int = 0
    warning_sent_month: Optional[str] = None
    query_sent_month: Optional[str] = None
