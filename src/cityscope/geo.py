"""Geographic primitives: validated points, haversine distance, Web Mercator scale."""

from __future__ import annotations

import math
from dataclasses import dataclass

from cityscope.validation import require, validate_coordinates

EARTH_RADIUS_KM = 6371.0
EARTH_RADIUS_MI = 3959.0
EARTH_RADIUS_M = EARTH_RADIUS_KM * 1000.0

# Ground meters per pixel at the equator, zoom 0, 256px tiles
WEB_MERCATOR_M_PER_PX = 156543.03392

_RADIUS_BY_UNIT = {
    "mi": EARTH_RADIUS_MI,
    "km": EARTH_RADIUS_KM,
    "m": EARTH_RADIUS_M,
}


@dataclass(frozen=True)
class GeoPoint:
    """WGS84 coordinate. Construction fails on NaN or out-of-range values."""

    lat: float
    lng: float

    def __post_init__(self):
        require(validate_coordinates(self.lat, self.lng))

    def to_dict(self) -> dict:
        return {"lat": self.lat, "lng": self.lng}

    @classmethod
    def from_dict(cls, d: dict) -> GeoPoint:
        return cls(lat=d["lat"], lng=d["lng"])


def _central_angle(lat1: float, lon1: float, lat2: float, lon2: float) -> float:
    rlat1, rlon1 = math.radians(lat1), math.radians(lon1)
    rlat2, rlon2 = math.radians(lat2), math.radians(lon2)

    dlat = rlat2 - rlat1
    dlon = rlon2 - rlon1

    a = math.sin(dlat / 2) ** 2 + math.cos(rlat1) * math.cos(rlat2) * math.sin(dlon / 2) ** 2
    # Float error can push a a hair past 1 for near-antipodal points
    a = min(1.0, a)
    return 2 * math.atan2(math.sqrt(a), math.sqrt(1 - a))


def haversine_km(lat1: float, lon1: float, lat2: float, lon2: float) -> float:
    """Great-circle distance between two points on Earth in kilometers.

    Uses the Haversine formula. Inputs are WGS84 decimal degrees.
    """
    return EARTH_RADIUS_KM * _central_angle(lat1, lon1, lat2, lon2)


def haversine_miles(lat1: float, lon1: float, lat2: float, lon2: float) -> float:
    """Great-circle distance in statute miles."""
    return EARTH_RADIUS_MI * _central_angle(lat1, lon1, lat2, lon2)


def distance(a: GeoPoint, b: GeoPoint, unit: str = "mi") -> float:
    """Haversine distance between two points.

    Miles are the system unit: every catalog radius and resolver distance is
    expressed in miles. ``unit`` may also be ``"km"`` or ``"m"``.
    """
    try:
        radius = _RADIUS_BY_UNIT[unit]
    except KeyError:
        raise ValueError(f"unknown distance unit {unit!r}") from None
    if a == b:
        return 0.0
    return radius * _central_angle(a.lat, a.lng, b.lat, b.lng)


def meters_per_pixel(lat: float, zoom: float) -> float:
    """Ground resolution of a Web Mercator tile pixel at ``lat`` and ``zoom``."""
    return WEB_MERCATOR_M_PER_PX * math.cos(math.radians(lat)) / (2 ** zoom)


def midpoint_of_bounds(north: float, south: float, east: float, west: float) -> GeoPoint:
    """Arithmetic centre of a viewport bounding box."""
    require(validate_coordinates(north, east) + validate_coordinates(south, west))
    return GeoPoint(lat=(north + south) / 2, lng=(east + west) / 2)
