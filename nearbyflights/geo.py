"""Geospatial helpers: great-circle distance and search bounding boxes."""

from __future__ import annotations

from dataclasses import dataclass
import math

EARTH_RADIUS_KM = 6371.0
KM_PER_DEGREE = 111.0

# Keeps the longitude span finite at the poles.
_MIN_COS_LAT = 1e-4


@dataclass(frozen=True)
class QueryBox:
    """Rectangular lat/lon region enclosing a circular search area.

    The box is a superset of the circle; callers filter precisely with
    :func:`distance_km`.
    """

    north: float
    south: float
    east: float
    west: float

    def to_opensky_params(self) -> dict[str, float]:
        return {
            "lamin": self.south,
            "lamax": self.north,
            "lomin": self.west,
            "lomax": self.east,
        }

    def to_fr24_bounds(self) -> str:
        return f"{self.north:.6f},{self.south:.6f},{self.west:.6f},{self.east:.6f}"


def distance_km(lat1: float, lon1: float, lat2: float, lon2: float) -> float:
    """Haversine distance between two points in kilometers."""

    d_lat = math.radians(lat2 - lat1)
    d_lon = math.radians(lon2 - lon1)

    a = (
        math.sin(d_lat / 2) ** 2
        + math.cos(math.radians(lat1))
        * math.cos(math.radians(lat2))
        * math.sin(d_lon / 2) ** 2
    )
    c = 2 * math.atan2(math.sqrt(a), math.sqrt(1 - a))
    return EARTH_RADIUS_KM * c


def is_within_radius(
    lat1: float, lon1: float, lat2: float, lon2: float, radius_km: float
) -> bool:
    return distance_km(lat1, lon1, lat2, lon2) <= radius_km


def bounding_box(lat: float, lon: float, radius_km: float) -> QueryBox:
    """Approximate the box around ``(lat, lon)`` covering ``radius_km``.

    Uses 1 degree ~ 111 km for latitude and scales longitude by
    ``cos(lat)``. Not geodesically exact.
    """

    lat_delta = radius_km / KM_PER_DEGREE
    lon_delta = radius_km / (
        KM_PER_DEGREE * max(math.cos(math.radians(lat)), _MIN_COS_LAT)
    )
    return QueryBox(
        north=lat + lat_delta,
        south=lat - lat_delta,
        east=lon + lon_delta,
        west=lon - lon_delta,
    )


__all__ = [
    "EARTH_RADIUS_KM",
    "QueryBox",
    "bounding_box",
    "distance_km",
    "is_within_radius",
]
