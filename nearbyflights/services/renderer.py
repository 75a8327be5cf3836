"""Plain-text rendering of flight lists."""

from __future__ import annotations

from typing import Sequence

from nearbyflights.domain import AIRCRAFT_MODELS, AIRLINE_NAMES
from nearbyflights.models.flight import FlightRecord

EMPTY_MESSAGE = "No flights to display."
UNKNOWN_AIRCRAFT = "Unknown Aircraft Type"
COLUMN_WIDTH = 12


def _describe_aircraft(flight: FlightRecord) -> str:
    aircraft = flight.aircraft
    description = (
        AIRCRAFT_MODELS.get(aircraft.model or "")
        or aircraft.type
        or aircraft.model
        or UNKNOWN_AIRCRAFT
    )
    if aircraft.registration:
        description += f" ({aircraft.registration})"
    return description


def _render_flight(flight: FlightRecord) -> str:
    lines = [
        _describe_aircraft(flight),
        f"✈︎ {flight.origin.id} → {flight.destination.id}",
        f"{flight.distance_km:.2f} km".ljust(COLUMN_WIDTH)
        + f" | ⛰️ {flight.altitude:.0f} m",
        f"\U0001f4a8 {flight.speed:.0f} kt".ljust(COLUMN_WIDTH)
        + f" | \U0001f9ed {flight.heading:.0f}°",
    ]
    if flight.airline:
        lines.append(AIRLINE_NAMES.get(flight.airline, flight.airline))
    return "\n".join(lines)


def render_flights(flights: Sequence[FlightRecord]) -> str:
    """Format flights (assumed nearest first) followed by an airport list."""

    if not flights:
        return EMPTY_MESSAGE

    airports: dict[str, str] = {}
    blocks = []
    for flight in flights:
        blocks.append(_render_flight(flight))
        for airport in (flight.origin, flight.destination):
            airports[airport.id] = airports.get(airport.id) or airport.name

    directory = [f"{code}: {airports[code]}" for code in sorted(airports) if code]
    return "\n\n".join(blocks) + "\n\n---\nAirports:\n" + "\n".join(directory)


__all__ = ["EMPTY_MESSAGE", "render_flights"]
