from __future__ import annotations

from datetime import datetime
from typing import Optional

from ...core.enums import AttendanceStatus
from ...geo.model import Office
from .base import AttendanceStrategy, StatusDecision


class LateStrategy(AttendanceStrategy):
    """Late check-in."""

    def decide_checkin(self, *, local_now: datetime, office: Optional[Office]) -> StatusDecision:
        return StatusDecision(status=AttendanceStatus.LATE)
