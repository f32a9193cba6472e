from __future__ import annotations

import math
from typing import Iterable, Optional, Sequence

from ..core.constants import DEFAULT_OFFICE_RADIUS_METERS, EARTH_RADIUS_KM
from .model import Office

DEFAULT_OFFICES: tuple[Office, ...] = (
    Office(name="Office 1 - Head Office", latitude=6.5244, longitude=3.3792),
    Office(name="Office 2 - Mushin", latitude=6.544980, longitude=3.354078),
    Office(name="Office 3 - Ikeja", latitude=6.62191, longitude=3.35309),
)


def haversine_km(lat1: float, lng1: float, lat2: float, lng2: float) -> float:
    """Great-circle distance in kilometres."""
    d_lat = math.radians(lat2 - lat1)
    d_lng = math.radians(lng2 - lng1)
    a = (
        math.sin(d_lat / 2) ** 2
        + math.cos(math.radians(lat1)) * math.cos(math.radians(lat2)) * math.sin(d_lng / 2) ** 2
    )
    c = 2 * math.atan2(math.sqrt(a), math.sqrt(1 - a))
    return EARTH_RADIUS_KM * c


class GeoMatcher:
    """Resolves a reported coordinate to the first office within the radius.

    No fuzzy fallback: outside every radius the point is simply out of office.
    """

    def __init__(self, offices: Iterable[Office] = DEFAULT_OFFICES, *, radius_meters: float = DEFAULT_OFFICE_RADIUS_METERS):
        self._offices: Sequence[Office] = tuple(offices)
        self._radius_km = float(radius_meters) / 1000.0

    @classmethod
    def from_settings(cls, offices: Iterable[dict], *, radius_meters: float) -> "GeoMatcher":
        return cls(
            [Office(name=str(o["name"]), latitude=float(o["lat"]), longitude=float(o["lng"])) for o in offices],
            radius_meters=radius_meters,
        )

    @property
    def offices(self) -> Sequence[Office]:
        return self._offices

    def match(self, latitude: float, longitude: float) -> Optional[Office]:
        for office in self._offices:
            if haversine_km(latitude, longitude, office.latitude, office.longitude) <= self._radius_km:
                return office
        return None
