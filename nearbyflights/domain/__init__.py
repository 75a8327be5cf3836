"""Static reference data for the nearby flights service."""

from .names import AIRCRAFT_MODELS, AIRLINE_NAMES

__all__ = ["AIRCRAFT_MODELS", "AIRLINE_NAMES"]
