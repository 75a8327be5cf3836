"""Merge flight records from several sources into one deduplicated list."""

from __future__ import annotations

from itertools import chain
from typing import Iterable

from nearbyflights.models.flight import AirportRef, FlightRecord

KINEMATIC_FIELDS = ("latitude", "longitude", "altitude", "speed", "heading", "distance_km")


def _merge_airport(existing: AirportRef, incoming: AirportRef) -> None:
    existing.id = existing.id or incoming.id
    existing.name = existing.name or incoming.name
    existing.country = existing.country or incoming.country


def _merge_into(existing: FlightRecord, incoming: FlightRecord) -> None:
    """Latest kinematics win; descriptive fields keep the first non-empty value."""

    for field in KINEMATIC_FIELDS:
        setattr(existing, field, getattr(incoming, field))

    existing.callsign = existing.callsign or incoming.callsign
    existing.airline = existing.airline or incoming.airline

    aircraft = existing.aircraft
    aircraft.type = aircraft.type or incoming.aircraft.type
    aircraft.model = aircraft.model or incoming.aircraft.model
    aircraft.registration = aircraft.registration or incoming.aircraft.registration

    _merge_airport(existing.origin, incoming.origin)
    _merge_airport(existing.destination, incoming.destination)


def merge_flights(*sources: Iterable[FlightRecord]) -> list[FlightRecord]:
    """Combine source result lists keyed by ``icao24``.

    Lists are given in precedence order. Records without an identity code are
    skipped, and an identity is only admitted by a record that has a route.
    Input records are never modified.
    """

    merged: dict[str, FlightRecord] = {}

    for flight in chain.from_iterable(sources):
        if not flight.icao24:
            continue

        existing = merged.get(flight.icao24)
        if existing is None:
            if flight.has_route():
                merged[flight.icao24] = flight.model_copy(deep=True)
            continue

        _merge_into(existing, flight)

    return list(merged.values())


__all__ = ["KINEMATIC_FIELDS", "merge_flights"]
