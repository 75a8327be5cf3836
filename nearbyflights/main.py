from __future__ import annotations

import contextlib
import logging
import time

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError

from nearbyflights.api import api_router, validation_exception_handler
from nearbyflights.config import settings
from nearbyflights.db import init_db

logging.basicConfig(
    level=settings.log_level.upper(),
    format="%(asctime)s %(levelname)s %(name)s - %(message)s",
)
logger = logging.getLogger("nearbyflights")


@contextlib.asynccontextmanager
async def lifespan(app: FastAPI):
    """Manage application startup and shutdown lifecycle."""

    init_db()
    logger.info("Database initialized")
    if settings.require_api_key and not settings.api_key:
        logger.warning("API key authentication enabled without a configured key")
    yield


app = FastAPI(title="Nearby Flights", lifespan=lifespan)


@app.middleware("http")
async def log_requests(request: Request, call_next):
    """Log basic request information for observability."""

    start_time = time.time()
    response = await call_next(request)
    duration_ms = (time.time() - start_time) * 1000
    logger.info(
        "HTTP %s %s -> %s (%.2f ms)",
        request.method,
        request.url.path,
        response.status_code,
        duration_ms,
    )
    return response


app.add_exception_handler(RequestValidationError, validation_exception_handler)
app.include_router(api_router)
