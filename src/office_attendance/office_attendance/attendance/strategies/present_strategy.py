from __future__ import annotations

from datetime import datetime
from typing import Optional

from ...core.enums import AttendanceStatus
from ...geo.model import Office
from .base import AttendanceStrategy, StatusDecision


class PresentStrategy(AttendanceStrategy):
    """On-time check-in at an office."""

    def decide_checkin(self, *, local_now: datetime, office: Optional[Office]) -> StatusDecision:
        return StatusDecision(status=AttendanceStatus.PRESENT)
