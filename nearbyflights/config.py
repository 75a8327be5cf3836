"""Configuration settings for the nearby flights service."""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass

logger = logging.getLogger("nearbyflights.config")


def _get_bool(env_var: str, default: bool = False) -> bool:
    """Parse an environment variable into a boolean with a default."""

    value = os.getenv(env_var)
    if value is None:
        return default

    return value.lower() in {"1", "true", "yes", "on"}


@dataclass
class Settings:
    """Application configuration loaded from environment variables."""

    nearbyflights_env: str = os.getenv("NEARBYFLIGHTS_ENV", "local")
    log_level: str = os.getenv("NEARBYFLIGHTS_LOG_LEVEL", "INFO")

    # OpenSky (primary tracker)
    opensky_base_url: str = os.getenv(
        "OPENSKY_BASE_URL", "https://opensky-network.org/api"
    )
    opensky_username: str | None = os.getenv("OPENSKY_USERNAME") or None
    opensky_password: str | None = os.getenv("OPENSKY_PASSWORD") or None
    opensky_timeout: float = float(os.getenv("OPENSKY_TIMEOUT", "10.0"))
    route_lookback_hours: int = int(os.getenv("ROUTE_LOOKBACK_HOURS", "24"))

    # Flightradar24 (secondary tracker)
    fr24_feed_url: str = os.getenv(
        "FR24_FEED_URL",
        "https://data-cloud.flightradar24.com/zones/fcgi/feed.js",
    )
    fr24_detail_url: str = os.getenv(
        "FR24_DETAIL_URL", "https://data-live.flightradar24.com/clickhandler/"
    )
    fr24_timeout: float = float(os.getenv("FR24_TIMEOUT", "10.0"))

    # Per-record enrichment fan-out
    enrichment_concurrency: int = int(os.getenv("ENRICHMENT_CONCURRENCY", "8"))
    lookup_timeout: float = float(os.getenv("LOOKUP_TIMEOUT", "10.0"))

    default_radius_km: float = float(os.getenv("DEFAULT_RADIUS_KM", "10.0"))
    max_radius_km: float = 500.0

    # API key authentication
    api_key: str | None = os.getenv("API_KEY") or None
    require_api_key: bool = _get_bool(
        "REQUIRE_API_KEY",
        default=os.getenv("NEARBYFLIGHTS_ENV", "local").lower()
        in {"prod", "production"},
    )

    # Request/response audit log
    enable_request_logging: bool = _get_bool("ENABLE_REQUEST_LOGGING", default=True)

    @property
    def opensky_authenticated(self) -> bool:
        return bool(self.opensky_username and self.opensky_password)


settings = Settings()

if settings.require_api_key and not settings.api_key:
    logger.warning("API key required but API_KEY is not configured")

__all__ = ["settings", "Settings"]
