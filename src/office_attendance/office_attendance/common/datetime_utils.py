from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime, timedelta, timezone, tzinfo

from ..core.constants import DEFAULT_UTC_OFFSET_HOURS, WEEKDAY_NAMES


def parse_iso_date(value: str) -> date:
    """Parse YYYY-MM-DD string into date."""
    return datetime.strptime(value, "%Y-%m-%d").date()


def weekday_name(day: date) -> str:
    return WEEKDAY_NAMES[day.weekday()]


def month_token(day: date) -> str:
    """`YYYY-MM` marker used to gate monthly escalation e-mails."""
    return f"{day.year:04d}-{day.month:02d}"


def month_start(day: date) -> date:
    return day.replace(day=1)


def week_start(day: date) -> date:
    """Sunday that opens the week containing `day`."""
    return day - timedelta(days=(day.weekday() + 1) % 7)


@dataclass(frozen=True)
class WeekWindow:
    """Inclusive calendar range used by weekly compliance checks."""

    start: date
    end: date

    @classmethod
    def containing(cls, day: date) -> "WeekWindow":
        start = week_start(day)
        return cls(start=start, end=start + timedelta(days=6))

    def days(self) -> list[date]:
        return [self.start + timedelta(days=i) for i in range((self.end - self.start).days + 1)]


class LocalClock:
    """Normalizes timestamps to the organization's local time zone.

    Aware datetimes are converted; naive ones are taken as already local.
    Returned datetimes are naive local wall-clock values, the way they are stored.
    """

    def __init__(self, tz: tzinfo | None = None):
        self._tz = tz or timezone(timedelta(hours=DEFAULT_UTC_OFFSET_HOURS))

    @classmethod
    def from_offset(cls, hours: float) -> "LocalClock":
        return cls(timezone(timedelta(hours=hours)))

    @property
    def tz(self) -> tzinfo:
        return self._tz

    def to_local(self, value: datetime) -> datetime:
        if value.tzinfo is None:
            return value
        return value.astimezone(self._tz).replace(tzinfo=None)

    def now(self) -> datetime:
        """Current local time.

        Note: Wrapped so tests can patch/mocked easier.
        """
        return datetime.now(self._tz).replace(tzinfo=None)

    def today(self, now: datetime | None = None) -> date:
        return self.to_local(now or self.now()).date()


def parse_date_or_datetime(value: str) -> date:
    """Accept `YYYY-MM-DD` (returns date) or an ISO-8601 timestamp (returns datetime)."""
    value = (value or "").strip()
    if len(value) == 10:
        return parse_iso_date(value)
    return datetime.fromisoformat(value)
