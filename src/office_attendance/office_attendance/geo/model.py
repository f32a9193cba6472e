from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class Office:
    """A named office location staff may check in from."""

    name: str
    latitude: float
    longitude: float
