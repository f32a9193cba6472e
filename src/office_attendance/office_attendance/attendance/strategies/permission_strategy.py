from __future__ import annotations

from datetime import datetime
from typing import Optional

from ...core.enums import AttendanceStatus
from ...geo.model import Office
from .base import AttendanceStrategy, StatusDecision


class PermissionStrategy(AttendanceStrategy):
    """Staff under an active permission, regardless of time or place."""

    def decide_checkin(self, *, local_now: datetime, office: Optional[Office]) -> StatusDecision:
        return StatusDecision(status=AttendanceStatus.PERMISSION)
