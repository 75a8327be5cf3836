"""Pydantic models for the nearby flights service."""

from .flight import AircraftInfo, AirportRef, FlightRecord, NearbyFlightsResult
from .request import ErrorResponse, NearbyFlightsRequest, NearbyFlightsResponse

__all__ = [
    "AircraftInfo",
    "AirportRef",
    "ErrorResponse",
    "FlightRecord",
    "NearbyFlightsRequest",
    "NearbyFlightsResponse",
    "NearbyFlightsResult",
]
