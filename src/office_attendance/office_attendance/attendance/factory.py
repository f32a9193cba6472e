from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, time

from ..core.constants import LATE_FROM, OFFICE_CLOSE
from .strategies.absent_strategy import AbsentStrategy
from .strategies.base import AttendanceStrategy
from .strategies.late_strategy import LateStrategy
from .strategies.permission_strategy import PermissionStrategy
from .strategies.present_strategy import PresentStrategy

OUT_OF_OFFICE = "Not at a recognized office"
AFTER_HOURS = "Checked in after office close"


@dataclass
class AttendanceStrategyFactory:
    """Factory Pattern: choose the strategy for a check-in. First matching rule wins.

    1. active permission -> Permission
    2. not at an office -> Absent
    3. at or after close -> Absent
    4. from LATE_FROM until close -> Late
    5. otherwise -> Present
    """

    late_from: time = LATE_FROM
    office_close: time = OFFICE_CLOSE

    def for_checkin(self, *, has_permission: bool, in_office: bool, local_now: datetime) -> AttendanceStrategy:
        if has_permission:
            return PermissionStrategy()
        if not in_office:
            return AbsentStrategy(OUT_OF_OFFICE)

        clock = local_now.time()
        if clock >= self.office_close:
            return AbsentStrategy(AFTER_HOURS)
        if clock >= self.late_from:
            return LateStrategy()
        return PresentStrategy()

    def is_after_close(self, moment: datetime) -> bool:
        return moment.time() >= self.office_close
