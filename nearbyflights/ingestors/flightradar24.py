"""Secondary tracker: Flightradar24 live feed with per-flight details."""

from __future__ import annotations

from dataclasses import dataclass
from functools import partial
import json
import logging
import re
from typing import Any, Optional

import httpx

from nearbyflights.config import settings
from nearbyflights.geo import bounding_box, distance_km
from nearbyflights.ingestors.base import FlightSource
from nearbyflights.models.flight import AircraftInfo, AirportRef, FlightRecord

logger = logging.getLogger("nearbyflights.ingestors.flightradar24")

FEET_TO_METERS = 0.3048

FEED_PARAMS: dict[str, Any] = {
    "faa": 1,
    "satellite": 1,
    "mlat": 1,
    "flarm": 1,
    "adsb": 1,
    "gnd": 0,
    "air": 1,
    "vehicles": 0,
    "estimated": 1,
    "maxage": 14400,
    "gliders": 0,
    "stats": 0,
}

DEFAULT_HEADERS = {
    "User-Agent": (
        "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 "
        "(KHTML, like Gecko) Chrome/124 Safari/537.36"
    ),
    "Accept": "application/json,text/javascript,*/*",
    "Referer": "https://www.flightradar24.com/",
    "Origin": "https://www.flightradar24.com",
}

_JSONP_RE = re.compile(r"^\s*[\w$.]+\s*\((?P<body>.*)\)\s*;?\s*$", re.DOTALL)


def parse_jsonp(text: str) -> Any:
    """Decode a JSONP body such as ``cb({...});``; plain JSON is accepted too.

    Raises ``ValueError`` when the payload is not valid JSON.
    """

    match = _JSONP_RE.match(text)
    body = match.group("body") if match else text
    return json.loads(body)


@dataclass
class FlightDetail:
    """Subset of the detailed flight lookup used for enrichment."""

    airline: str | None = None
    model: str | None = None
    registration: str | None = None
    origin: AirportRef | None = None
    destination: AirportRef | None = None


def _get_path(payload: Any, *keys: str) -> Any:
    for key in keys:
        if not isinstance(payload, dict):
            return None
        payload = payload.get(key)
    return payload


def _parse_airport(raw: Any) -> AirportRef | None:
    if not isinstance(raw, dict):
        return None
    return AirportRef(
        id=_get_path(raw, "code", "iata") or _get_path(raw, "code", "icao") or "",
        name=raw.get("name") or "",
        country=_get_path(raw, "position", "country", "name") or "",
    )


def parse_flight_detail(payload: Any) -> FlightDetail:
    """Extract airline, model and airports from a detailed flight payload."""

    if not isinstance(payload, dict):
        raise ValueError("Flight detail payload is not an object")

    return FlightDetail(
        airline=_get_path(payload, "airline", "code", "icao")
        or _get_path(payload, "airline", "code", "iata"),
        model=_get_path(payload, "aircraft", "model", "code"),
        registration=_get_path(payload, "aircraft", "registration"),
        origin=_parse_airport(_get_path(payload, "airport", "origin")),
        destination=_parse_airport(_get_path(payload, "airport", "destination")),
    )


def _field(entry: list, index: int) -> Any:
    return entry[index] if len(entry) > index else None


def _text(entry: list, index: int) -> str:
    value = _field(entry, index)
    return str(value).strip() if value else ""


def _normalize_track(
    flight_id: str, entry: Any, lat: float, lon: float
) -> Optional[FlightRecord]:
    """Build a record from one feed track, or None if unusable.

    Indices: 0 mode-S code, 1 lat, 2 lon, 3 track, 4 altitude (ft),
    5 speed (kt), 8 type code, 9 registration, 11 origin, 12 destination,
    13 flight number, 16 callsign.
    """

    if not isinstance(entry, list) or len(entry) < 6:
        return None

    icao24 = str(entry[0] or "").strip().lower()
    if not icao24:
        return None

    try:
        latitude = float(entry[1])
        longitude = float(entry[2])
        heading = float(entry[3] or 0)
        altitude_ft = float(entry[4] or 0)
        speed = float(entry[5] or 0)
    except (TypeError, ValueError):
        logger.debug("Skipping malformed Flightradar24 track %s", flight_id)
        return None

    model = _text(entry, 8) or None
    return FlightRecord(
        icao24=icao24,
        callsign=_text(entry, 16) or _text(entry, 13),
        latitude=latitude,
        longitude=longitude,
        altitude=altitude_ft * FEET_TO_METERS,
        speed=speed,
        heading=heading,
        distance_km=distance_km(lat, lon, latitude, longitude),
        aircraft=AircraftInfo(
            type=model,
            model=model,
            registration=_text(entry, 9) or None,
        ),
        origin=AirportRef(id=_text(entry, 11)),
        destination=AirportRef(id=_text(entry, 12)),
    )


def _apply_detail(record: FlightRecord, detail: FlightDetail) -> None:
    record.airline = detail.airline or None
    record.aircraft.model = detail.model or record.aircraft.model
    record.aircraft.type = detail.model or record.aircraft.type
    record.aircraft.registration = detail.registration or record.aircraft.registration

    for current, incoming in (
        (record.origin, detail.origin),
        (record.destination, detail.destination),
    ):
        if incoming is None:
            continue
        current.id = incoming.id or current.id
        current.name = incoming.name
        current.country = incoming.country


class FlightRadar24Ingestor(FlightSource):
    """Fetch live tracks near a point from the Flightradar24 feed."""

    name = "flightradar24"

    def __init__(
        self,
        *,
        feed_url: str | None = None,
        detail_url: str | None = None,
        timeout: float | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
        concurrency: int | None = None,
        lookup_timeout: float | None = None,
    ) -> None:
        super().__init__(
            timeout=timeout or settings.fr24_timeout,
            transport=transport,
            concurrency=concurrency,
            lookup_timeout=lookup_timeout,
        )
        self.feed_url = feed_url or settings.fr24_feed_url
        self.detail_url = detail_url or settings.fr24_detail_url

    async def fetch(
        self, lat: float, lon: float, radius_km: float
    ) -> list[FlightRecord]:
        box = bounding_box(lat, lon, radius_km)
        params = dict(FEED_PARAMS, bounds=box.to_fr24_bounds())

        async with self._client(headers=DEFAULT_HEADERS) as client:
            response = await self._get(
                client, self.feed_url, params=params, what="feed request"
            )
            if response is None:
                return []

            try:
                payload = parse_jsonp(response.text)
            except ValueError as exc:
                logger.warning("Failed to parse Flightradar24 feed: %s", exc)
                return []
            if not isinstance(payload, dict):
                logger.warning("Unexpected Flightradar24 feed payload type")
                return []

            records: list[tuple[str, FlightRecord]] = []
            for flight_id, entry in payload.items():
                record = _normalize_track(flight_id, entry, lat, lon)
                if record is not None:
                    records.append((flight_id, record))

            await self._enrich_all(
                (flight_id, partial(self._lookup_detail, client, record, flight_id))
                for flight_id, record in records
                if flight_id
            )

        flights = [record for _, record in records if record.has_route()]
        logger.debug(
            "Flightradar24 returned %s tracks, %s with a known route",
            len(records),
            len(flights),
        )
        return flights

    async def _lookup_detail(
        self, client: httpx.AsyncClient, record: FlightRecord, flight_id: str
    ) -> None:
        response = await self._get(
            client,
            self.detail_url,
            params={"version": "1.5", "flight": flight_id},
            what=f"detail lookup for {flight_id}",
        )
        if response is None:
            return
        _apply_detail(record, parse_flight_detail(response.json()))


__all__ = [
    "FlightDetail",
    "FlightRadar24Ingestor",
    "parse_flight_detail",
    "parse_jsonp",
]
