"""Query every tracking source around a point and reconcile the results."""

from __future__ import annotations

import asyncio
import logging
import math
import time
from typing import Optional, Sequence

from nearbyflights.config import settings
from nearbyflights.ingestors import FlightRadar24Ingestor, FlightSource, OpenSkyIngestor
from nearbyflights.models.flight import FlightRecord, NearbyFlightsResult
from nearbyflights.services.merge import merge_flights

logger = logging.getLogger("nearbyflights.aggregator")


class FlightQueryError(ValueError):
    """Raised when query coordinates or radius are out of range."""


def validate_query(lat: float, lon: float, radius_km: float) -> None:
    if not (-90 <= lat <= 90 and -180 <= lon <= 180):
        raise FlightQueryError("Invalid latitude/longitude values")

    max_radius = settings.max_radius_km
    if not 0 < radius_km <= max_radius:
        raise FlightQueryError(
            f"Invalid radius. Must be between 0 and {max_radius:g} km"
        )


def _distance_sort_key(flight: FlightRecord) -> float:
    distance = flight.distance_km
    if distance is None or not math.isfinite(distance):
        return math.inf
    return distance


class FlightAggregator:
    """Fetches from all sources concurrently, merges and sorts by distance.

    Sources are merged in the order given; earlier sources win descriptive
    fields, later sources win position and motion.
    """

    def __init__(self, sources: Optional[Sequence[FlightSource]] = None) -> None:
        self.sources: list[FlightSource] = (
            list(sources)
            if sources is not None
            else [OpenSkyIngestor(), FlightRadar24Ingestor()]
        )

    @property
    def source_tag(self) -> str:
        return "+".join(source.name for source in self.sources)

    async def get_nearby_flights(
        self, lat: float, lon: float, radius_km: float
    ) -> NearbyFlightsResult:
        validate_query(lat, lon, radius_km)

        results = await asyncio.gather(
            *(source.fetch(lat, lon, radius_km) for source in self.sources),
            return_exceptions=True,
        )

        per_source: list[list[FlightRecord]] = []
        for source, result in zip(self.sources, results):
            if isinstance(result, BaseException):
                logger.error("Source %s failed unexpectedly: %s", source.name, result)
                per_source.append([])
            else:
                logger.debug("Source %s returned %s flights", source.name, len(result))
                per_source.append(result)

        flights = merge_flights(*per_source)
        flights.sort(key=_distance_sort_key)

        logger.info(
            "Found %s flights within %.1f km of (%.4f, %.4f)",
            len(flights),
            radius_km,
            lat,
            lon,
        )
        return NearbyFlightsResult(
            flights=flights,
            source=self.source_tag,
            timestamp=int(time.time() * 1000),
        )


_default_aggregator: FlightAggregator | None = None


def get_aggregator() -> FlightAggregator:
    global _default_aggregator
    if _default_aggregator is None:
        _default_aggregator = FlightAggregator()
    return _default_aggregator


async def get_nearby_flights(
    lat: float, lon: float, radius_km: float
) -> NearbyFlightsResult:
    """Convenience wrapper using the default aggregator."""

    return await get_aggregator().get_nearby_flights(lat, lon, radius_km)


__all__ = [
    "FlightAggregator",
    "FlightQueryError",
    "get_aggregator",
    "get_nearby_flights",
    "validate_query",
]
