"""Primary tracker: OpenSky state vectors enriched with recent routes."""

from __future__ import annotations

from functools import partial
import logging
import time
from typing import Any, Optional

import httpx

from nearbyflights.config import settings
from nearbyflights.geo import bounding_box, distance_km
from nearbyflights.ingestors.base import FlightSource
from nearbyflights.models.flight import AirportRef, FlightRecord

logger = logging.getLogger("nearbyflights.ingestors.opensky")


def _optional_float(value: Any) -> float | None:
    if value is None:
        return None
    return float(value)


def _normalize_state(entry: Any, lat: float, lon: float) -> Optional[FlightRecord]:
    """Build a record from one OpenSky state vector, or None if unusable.

    Indices: 0 icao24, 1 callsign, 2 origin country, 5 longitude,
    6 latitude, 7 baro altitude (m), 9 velocity (m/s), 10 true track,
    13 geo altitude (m).
    """

    if not isinstance(entry, (list, tuple)) or len(entry) < 11:
        return None

    icao24 = str(entry[0] or "").strip().lower()
    if not icao24:
        return None

    try:
        latitude = _optional_float(entry[6])
        longitude = _optional_float(entry[5])
        if latitude is None or longitude is None:
            return None
        baro_altitude = _optional_float(entry[7])
        geo_altitude = _optional_float(entry[13]) if len(entry) > 13 else None
        speed = _optional_float(entry[9])
        heading = _optional_float(entry[10])
    except (TypeError, ValueError):
        logger.debug("Skipping malformed OpenSky state for %s", icao24)
        return None

    if baro_altitude is not None:
        altitude = baro_altitude
    elif geo_altitude is not None:
        altitude = geo_altitude
    else:
        altitude = 0.0

    return FlightRecord(
        icao24=icao24,
        callsign=str(entry[1] or "").strip(),
        latitude=latitude,
        longitude=longitude,
        altitude=altitude,
        speed=speed if speed is not None else 0.0,
        heading=heading if heading is not None else 0.0,
        distance_km=distance_km(lat, lon, latitude, longitude),
        origin=AirportRef(country=str(entry[2] or "")),
    )


class OpenSkyIngestor(FlightSource):
    """Fetch aircraft near a point from the OpenSky REST API."""

    name = "opensky"

    def __init__(
        self,
        *,
        base_url: str | None = None,
        username: str | None = None,
        password: str | None = None,
        timeout: float | None = None,
        lookback_hours: int | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
        concurrency: int | None = None,
        lookup_timeout: float | None = None,
    ) -> None:
        super().__init__(
            timeout=timeout or settings.opensky_timeout,
            transport=transport,
            concurrency=concurrency,
            lookup_timeout=lookup_timeout,
        )
        self.base_url = (base_url or settings.opensky_base_url).rstrip("/")
        self.lookback_hours = lookback_hours or settings.route_lookback_hours

        username = username or settings.opensky_username
        password = password or settings.opensky_password
        self.auth = httpx.BasicAuth(username, password) if username and password else None
        if self.auth is None:
            logger.debug("OpenSky ingestor running without authentication")

    async def fetch(
        self, lat: float, lon: float, radius_km: float
    ) -> list[FlightRecord]:
        box = bounding_box(lat, lon, radius_km)
        end = int(time.time())
        begin = end - self.lookback_hours * 3600

        async with self._client(auth=self.auth) as client:
            response = await self._get(
                client,
                f"{self.base_url}/states/all",
                params=box.to_opensky_params(),
                what="state vector request",
            )
            if response is None:
                return []

            try:
                payload = response.json()
            except ValueError as exc:
                logger.warning("Failed to parse OpenSky JSON response: %s", exc)
                return []

            if not isinstance(payload, dict):
                logger.warning("Unexpected OpenSky payload type: %s", type(payload).__name__)
                return []
            raw_states = payload.get("states") or []
            if not isinstance(raw_states, list):
                logger.warning("Unexpected OpenSky states type: %s", type(raw_states).__name__)
                return []

            records: list[FlightRecord] = []
            for entry in raw_states:
                record = _normalize_state(entry, lat, lon)
                if record is not None and record.distance_km <= radius_km:
                    records.append(record)

            await self._enrich_all(
                (record.icao24, partial(self._lookup_route, client, record, begin, end))
                for record in records
            )

        flights = [record for record in records if record.has_route()]
        logger.debug(
            "OpenSky returned %s states in range, %s with a known route",
            len(records),
            len(flights),
        )
        return flights

    async def _lookup_route(
        self,
        client: httpx.AsyncClient,
        record: FlightRecord,
        begin: int,
        end: int,
    ) -> None:
        """Fill origin/destination ids from the aircraft's most recent flight."""

        response = await self._get(
            client,
            f"{self.base_url}/flights/aircraft",
            params={"icao24": record.icao24, "begin": begin, "end": end},
            what=f"route lookup for {record.icao24}",
        )
        if response is None:
            return

        routes = response.json()
        if not isinstance(routes, list) or not routes:
            return

        latest = routes[0] or {}
        record.origin.id = latest.get("estDepartureAirport") or ""
        record.destination.id = latest.get("estArrivalAirport") or ""


__all__ = ["OpenSkyIngestor"]
