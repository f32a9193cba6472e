"""Values shared by every settings module."""

import os

OFFICES = [
    {"name": "Office 1 - Head Office", "lat": 6.5244, "lng": 3.3792},
    {"name": "Office 2 - Mushin", "lat": 6.544980, "lng": 3.354078},
    {"name": "Office 3 - Ikeja", "lat": 6.62191, "lng": 3.35309},
]

OFFICE_RADIUS_METERS = float(os.getenv("OFFICE_RADIUS_METERS", "50"))

# Organization local time as a fixed UTC offset (West Africa Time).
ORG_UTC_OFFSET_HOURS = float(os.getenv("ORG_UTC_OFFSET_HOURS", "1"))


def env_list(name: str) -> list:
    return [item.strip() for item in os.getenv(name, "").split(",") if item.strip()]


def env_flag(name: str, default: str = "0") -> bool:
    return bool(int(os.getenv(name, default)))
