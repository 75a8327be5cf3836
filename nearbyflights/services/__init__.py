"""Service-layer helpers for the nearby flights service."""

from .aggregator import (
    FlightAggregator,
    FlightQueryError,
    get_aggregator,
    get_nearby_flights,
    validate_query,
)
from .merge import merge_flights
from .renderer import render_flights

__all__ = [
    "FlightAggregator",
    "FlightQueryError",
    "get_aggregator",
    "get_nearby_flights",
    "merge_flights",
    "render_flights",
    "validate_query",
]
