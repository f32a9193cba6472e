from __future__ import annotations

from datetime import datetime
from typing import Optional

from ...core.enums import AttendanceStatus
from ...geo.model import Office
from .base import AttendanceStrategy, StatusDecision


class AbsentStrategy(AttendanceStrategy):
    """Outside every office, or arriving after close."""

    def __init__(self, reason: str):
        self._reason = reason

    def decide_checkin(self, *, local_now: datetime, office: Optional[Office]) -> StatusDecision:
        return StatusDecision(status=AttendanceStatus.ABSENT, note=self._reason)
