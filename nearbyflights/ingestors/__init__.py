"""Flight tracking sources for the nearby flights service."""

from .base import FlightSource
from .flightradar24 import FlightRadar24Ingestor, parse_flight_detail, parse_jsonp
from .opensky import OpenSkyIngestor

__all__ = [
    "FlightRadar24Ingestor",
    "FlightSource",
    "OpenSkyIngestor",
    "parse_flight_detail",
    "parse_jsonp",
]
