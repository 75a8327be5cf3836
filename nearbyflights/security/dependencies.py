"""FastAPI dependencies for request authentication."""

from __future__ import annotations

import hmac
import logging

from fastapi import HTTPException, Security, status
from fastapi.security import APIKeyHeader

from nearbyflights.config import settings

logger = logging.getLogger("nearbyflights.security")

API_KEY_HEADER = "api-key"
UNAUTHORIZED_MESSAGE = "Unauthorized: Invalid or missing API key"

api_key_header = APIKeyHeader(name=API_KEY_HEADER, auto_error=False)


async def require_api_key(api_key: str | None = Security(api_key_header)) -> None:
    """Reject requests whose ``api-key`` header does not match the configured key."""

    if not settings.require_api_key:
        return

    if not settings.api_key:
        logger.error("API key is required but not configured; rejecting request")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail={"success": False, "error": "API key is not configured"},
        )

    if not api_key or not hmac.compare_digest(
        api_key.strip().encode(), settings.api_key.encode()
    ):
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail={"success": False, "error": UNAUTHORIZED_MESSAGE},
        )
