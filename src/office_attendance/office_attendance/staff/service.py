from __future__ import annotations

import logging
from datetime import datetime
from typing import Optional, Sequence

from ..common.datetime_utils import LocalClock
from ..core.exceptions import NotFoundError
from .model import Staff
from .permissions import PermissionGate
from .repository import StaffRepository

logger = logging.getLogger(__name__)


class StaffService:
    """Use case: admin views over the roster.

    Every listing passes staff through the permission gate first, so a permission
    that ended earlier today is already gone from what admins see.
    """

    def __init__(
        self,
        staff: StaffRepository,
        permissions: Optional[PermissionGate] = None,
        *,
        clock: Optional[LocalClock] = None,
    ):
        self._staff = staff
        self._clock = clock or LocalClock()
        self._permissions = permissions or PermissionGate(staff, clock=self._clock)

    def get(self, staff_id: int) -> Staff:
        staff = self._staff.get_by_id(int(staff_id))
        if not staff:
            raise NotFoundError("Staff not found")
        return staff

    def list_staff(self, *, now: Optional[datetime] = None) -> Sequence[dict]:
        local_now = self._clock.to_local(now or self._clock.now())
        roster = [self._permissions.expire_if_due(s, local_now) for s in self._staff.list_all()]
        return [
            {"staff_id": s.staff_id, "name": s.name, "email": s.email, "status": s.status.value}
            for s in roster
        ]

    def list_permissions(self, *, now: Optional[datetime] = None) -> Sequence[dict]:
        local_now = self._clock.to_local(now or self._clock.now())
        holders = [self._permissions.expire_if_due(s, local_now) for s in self._staff.list_with_permission()]
        return [
            {
                "staff_id": s.staff_id,
                "name": s.name,
                "status": s.status.value,
                "permission": {
                    "type": s.permission.permission_type.value,
                    "reason": s.permission.reason,
                    "start_date": s.permission.start_date.isoformat(),
                    "end_date": s.permission.end_date.isoformat(),
                },
            }
            for s in holders
            if s.permission is not None
        ]

    def delete_staff(self, staff_id: int) -> None:
        """Attendance, schedules and permission history cascade with the staff row."""
        if not self._staff.delete_by_id(int(staff_id)):
            raise NotFoundError("Staff not found")
        logger.info("Deleted staff %s", staff_id)
