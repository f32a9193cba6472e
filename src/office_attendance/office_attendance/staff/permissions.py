from __future__ import annotations

import logging
from dataclasses import replace
from datetime import date, datetime, time
from typing import Optional, Union

from ..common.datetime_utils import LocalClock
from ..core.enums import PermissionType, StaffStatus
from ..core.exceptions import NotFoundError, ValidationError
from .model import Permission, Staff
from .repository import StaffRepository

logger = logging.getLogger(__name__)

DateLike = Union[date, datetime]


class PermissionGate:
    """Owns the permission lifecycle of a staff member: grant, check, expire.

    Checks are pure: an expired permission never counts as active, whether or not
    the expiry pass has archived it yet. Archiving happens only in `expire_if_due`
    and `expire_due`, which entry points call explicitly.
    """

    def __init__(self, staff: StaffRepository, *, clock: Optional[LocalClock] = None):
        self._staff = staff
        self._clock = clock or LocalClock()

    @staticmethod
    def is_under_permission(staff: Staff, now: datetime) -> bool:
        return staff.permission is not None and staff.permission.covers(now)

    def expire_if_due(self, staff: Staff, now: datetime) -> Staff:
        local_now = self._clock.to_local(now)
        if staff.permission is None or not staff.permission.is_expired(local_now):
            return staff

        self._staff.archive_permission(staff.staff_id)
        logger.info(
            "Permission %s for staff %s expired on %s; status reset to Active",
            staff.permission.permission_type.value,
            staff.staff_id,
            staff.permission.end_date,
        )
        return replace(staff, permission=None, status=StaffStatus.ACTIVE)

    def expire_due(self, now: datetime) -> int:
        """Archive every expired permission on the roster. Returns how many were cleared."""
        local_now = self._clock.to_local(now)
        cleared = 0
        for staff in self._staff.list_with_expired_permission(local_now):
            try:
                self.expire_if_due(staff, local_now)
                cleared += 1
            except Exception:
                logger.exception("Failed to expire permission for staff %s", staff.staff_id)
        logger.info("Expired permissions cleared: %s staff updated", cleared)
        return cleared

    def grant(
        self,
        *,
        staff_id: int,
        permission_type: Union[str, PermissionType],
        reason: Optional[str],
        start: DateLike,
        end: DateLike,
    ) -> Permission:
        try:
            ptype = PermissionType(permission_type)
        except ValueError:
            raise ValidationError("Invalid permission type")

        start_dt = self._as_start(start)
        end_dt = self._as_end(end)
        if end_dt < start_dt:
            raise ValidationError("End date must not be before start date")

        staff = self._staff.get_by_id(int(staff_id))
        if not staff:
            raise NotFoundError("Staff not found")

        permission = Permission(
            permission_type=ptype,
            reason=(reason or "").strip() or None,
            start_date=start_dt,
            end_date=end_dt,
        )
        if not self._staff.set_permission(staff.staff_id, permission=permission, status=ptype.staff_status):
            raise NotFoundError("Staff not found")

        logger.info("Granted %s permission to staff %s (%s -> %s)", ptype.value, staff.staff_id, start_dt, end_dt)
        return permission

    def _as_start(self, value: DateLike) -> datetime:
        if isinstance(value, datetime):
            return self._clock.to_local(value)
        if isinstance(value, date):
            return datetime.combine(value, time.min)
        raise ValidationError("Start date is required")

    def _as_end(self, value: DateLike) -> datetime:
        if isinstance(value, datetime):
            return self._clock.to_local(value)
        if isinstance(value, date):
            return datetime.combine(value, time(23, 59, 59))
        raise ValidationError("End date is required")
