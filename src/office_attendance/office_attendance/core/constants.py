"""Constants and defaults.

Note: Keep constants here to avoid magic numbers spread across code.
"""

from datetime import time

EARTH_RADIUS_KM = 6371.0
DEFAULT_OFFICE_RADIUS_METERS = 50.0

# Office hours, organization-local wall clock.
LATE_FROM = time(9, 1)
OFFICE_CLOSE = time(17, 0)

WARNING_ABSENCE_THRESHOLD = 4
QUERY_ABSENCE_THRESHOLD = 6

DEFAULT_HISTORY_LIMIT = 30
DEFAULT_UTC_OFFSET_HOURS = 1

WEEKDAY_NAMES = ("Monday", "Tuesday", "Wednesday", "Thursday", "Friday", "Saturday", "Sunday")
