"""Request and response models for the flights API."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field

from nearbyflights.config import settings
from nearbyflights.models.flight import FlightRecord


class NearbyFlightsRequest(BaseModel):
    """Body of a nearby-flights query."""

    lat: float = Field(..., description="Latitude between -90 and 90")
    lon: float = Field(..., description="Longitude between -180 and 180")
    radius: float = Field(
        default=settings.default_radius_km, description="Search radius in kilometers"
    )
    pretty_print: bool = Field(
        default=False,
        alias="pretty-print",
        description="Return a human-readable plain text response instead of JSON",
    )

    model_config = ConfigDict(populate_by_name=True)


class NearbyFlightsResponse(BaseModel):
    """JSON response for a successful query."""

    success: bool = True
    flights: list[FlightRecord] = Field(default_factory=list)
    source: str
    timestamp: int


class ErrorResponse(BaseModel):
    success: bool = False
    error: str


__all__ = ["ErrorResponse", "NearbyFlightsRequest", "NearbyFlightsResponse"]
