"""Models for flights aggregated from the tracking sources."""

from __future__ import annotations

from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


class AircraftInfo(BaseModel):
    """Descriptive aircraft details; all optional."""

    type: Optional[str] = Field(default=None, description="Aircraft type")
    model: Optional[str] = Field(
        default=None, description="ICAO aircraft type designator, e.g. A320"
    )
    registration: Optional[str] = Field(default=None, description="Tail number")


class AirportRef(BaseModel):
    """Origin or destination airport reference."""

    id: str = Field(default="", description="Airport code (IATA or ICAO)")
    name: str = Field(default="", description="Airport name")
    country: str = Field(default="", description="Airport country")


class FlightRecord(BaseModel):
    """Normalized flight built by a tracking source and reconciled on merge."""

    icao24: str = Field(..., description="ICAO 24-bit hex identity code")
    callsign: str = Field(default="", description="Flight callsign")
    latitude: float = Field(..., description="Latitude in decimal degrees")
    longitude: float = Field(..., description="Longitude in decimal degrees")
    altitude: float = Field(default=0.0, description="Altitude in meters")
    speed: float = Field(
        default=0.0,
        description="Ground speed in source-native units (m/s or knots)",
    )
    heading: float = Field(default=0.0, description="Track heading in degrees")
    distance_km: float = Field(
        ..., description="Distance from the query point in kilometers"
    )
    airline: Optional[str] = Field(default=None, description="Airline code")
    aircraft: AircraftInfo = Field(default_factory=AircraftInfo)
    origin: AirportRef = Field(default_factory=AirportRef)
    destination: AirportRef = Field(default_factory=AirportRef)

    model_config = ConfigDict(extra="ignore")

    def has_route(self) -> bool:
        """True when an origin or destination airport is known."""

        return bool(self.origin.id or self.destination.id)


class NearbyFlightsResult(BaseModel):
    """Aggregated flights around a point, nearest first."""

    flights: list[FlightRecord] = Field(default_factory=list)
    source: str = Field(..., description="Sources consulted, joined with '+'")
    timestamp: int = Field(..., description="Capture time in epoch milliseconds")


__all__ = ["AircraftInfo", "AirportRef", "FlightRecord", "NearbyFlightsResult"]
