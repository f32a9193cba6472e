from __future__ import annotations

from datetime import datetime
from typing import Optional, Protocol, Sequence

from ..core.enums import StaffStatus
from .model import Permission, Staff


class StaffRepository(Protocol):
    """Repository interface for Staff.

    Note (DIP): services depend on this interface, never on a concrete database.
    """

    def get_by_id(self, staff_id: int) -> Optional[Staff]:
        raise NotImplementedError

    def get_by_device(self, device_id: str) -> Optional[Staff]:
        raise NotImplementedError

    def list_all(self) -> Sequence[Staff]:
        raise NotImplementedError

    def list_with_permission(self) -> Sequence[Staff]:
        raise NotImplementedError

    def list_with_expired_permission(self, now: datetime) -> Sequence[Staff]:
        raise NotImplementedError

    def bind_device(self, staff_id: int, device_id: str) -> bool:
        """Bind the device only if the staff member has none yet."""

        raise NotImplementedError

    def set_permission(self, staff_id: int, *, permission: Permission, status: StaffStatus) -> bool:
        """Activate a permission. Any current permission is archived into history first."""

        raise NotImplementedError

    def archive_permission(self, staff_id: int) -> bool:
        """Move the current permission into history and reset status to Active."""

        raise NotImplementedError

    def list_permission_history(self, staff_id: int) -> Sequence[Permission]:
        raise NotImplementedError

    def increment_monthly_absence(self, staff_id: int) -> None:
        raise NotImplementedError

    def decrement_monthly_absence(self, staff_id: int) -> None:
        """Never goes below zero."""

        raise NotImplementedError

    def set_monthly_absence(self, staff_id: int, count: int) -> None:
        raise NotImplementedError

    def stamp_warning_sent(self, staff_id: int, month: str) -> bool:
        raise NotImplementedError

    def stamp_query_sent(self, staff_id: int, month: str) -> bool:
        raise NotImplementedError

    def delete_by_id(self, staff_id: int) -> bool:
        raise NotImplementedError
