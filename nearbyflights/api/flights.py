"""Nearby flights endpoint."""

from __future__ import annotations

from datetime import datetime
import logging
from typing import Any

from fastapi import APIRouter, Depends, Request, Response, status
from fastapi.exception_handlers import request_validation_exception_handler
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse, PlainTextResponse
from sqlalchemy.orm import Session

from nearbyflights import db_models
from nearbyflights.config import settings
from nearbyflights.db import get_db
from nearbyflights.models import ErrorResponse, NearbyFlightsRequest, NearbyFlightsResponse
from nearbyflights.security import require_api_key
from nearbyflights.services import (
    FlightAggregator,
    FlightQueryError,
    get_aggregator,
    render_flights,
)

NEARBY_PATH = "/api/flights/nearby"

router = APIRouter(
    prefix="/api/flights",
    tags=["flights"],
    dependencies=[Depends(require_api_key)],
)

logger = logging.getLogger("nearbyflights.api.flights")


@router.post(
    "/nearby",
    response_model=None,
    summary="Get nearby flights",
    responses={
        200: {
            "description": "Nearby flights as JSON, or plain text when pretty-printed",
            "model": NearbyFlightsResponse,
            "content": {"text/plain": {"schema": {"type": "string"}}},
        },
        400: {"description": "Invalid request parameters", "model": ErrorResponse},
    },
)
async def get_nearby_flights(
    request: NearbyFlightsRequest,
    db: Session = Depends(get_db),
    aggregator: FlightAggregator = Depends(get_aggregator),
) -> Response:
    """Return flights near a point, nearest first."""

    logger.info(
        "Nearby flights requested: lat=%s lon=%s radius=%s pretty=%s",
        request.lat,
        request.lon,
        request.radius,
        request.pretty_print,
    )
    query = {
        "latitude": request.lat,
        "longitude": request.lon,
        "radius": request.radius,
        "pretty_print": request.pretty_print,
    }

    try:
        result = await aggregator.get_nearby_flights(
            request.lat, request.lon, request.radius
        )
    except FlightQueryError as exc:
        error = ErrorResponse(error=str(exc))
        _log_request(
            db,
            query,
            response_type="application/json",
            response_body=error.model_dump_json(),
            success=False,
        )
        return JSONResponse(
            status_code=status.HTTP_400_BAD_REQUEST, content=error.model_dump()
        )

    raw_flight_data = result.model_dump_json()

    if request.pretty_print:
        text = render_flights(result.flights)
        _log_request(
            db,
            query,
            response_type="text/plain",
            response_body=text,
            success=True,
            raw_flight_data=raw_flight_data,
        )
        return PlainTextResponse(text)

    body = NearbyFlightsResponse(
        flights=result.flights, source=result.source, timestamp=result.timestamp
    ).model_dump_json()
    _log_request(
        db,
        query,
        response_type="application/json",
        response_body=body,
        success=True,
        raw_flight_data=raw_flight_data,
    )
    return Response(content=body, media_type="application/json")


async def validation_exception_handler(
    request: Request, exc: RequestValidationError
) -> Response:
    """Answer malformed nearby-flights bodies with 400 and record them.

    Other routes keep FastAPI's default 422 response.
    """

    if request.url.path != NEARBY_PATH:
        return await request_validation_exception_handler(request, exc)

    error = ErrorResponse(error=_describe_errors(exc))
    logger.info("Rejected nearby flights request: %s", error.error)

    if settings.enable_request_logging:
        provider = request.app.dependency_overrides.get(get_db, get_db)
        sessions = provider()
        db = next(sessions)
        try:
            _log_request(
                db,
                _query_from_body(exc.body),
                response_type="application/json",
                response_body=error.model_dump_json(),
                success=False,
            )
        finally:
            sessions.close()

    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST, content=error.model_dump()
    )


def _describe_errors(exc: RequestValidationError) -> str:
    parts = []
    for err in exc.errors():
        location = ".".join(str(part) for part in err.get("loc", ())[1:]) or "body"
        parts.append(f"{location}: {err.get('msg', 'invalid value')}")
    return "Invalid request body: " + "; ".join(parts)


def _number(value: Any) -> float | None:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return None
    return float(value)


def _query_from_body(body: Any) -> dict[str, Any]:
    if not isinstance(body, dict):
        body = {}
    return {
        "latitude": _number(body.get("lat")),
        "longitude": _number(body.get("lon")),
        "radius": _number(body.get("radius")),
        "pretty_print": body.get("pretty-print") is True,
    }


def _log_request(
    db: Session,
    query: dict[str, Any],
    *,
    response_type: str,
    response_body: str,
    success: bool,
    raw_flight_data: str | None = None,
) -> None:
    """Store the request/response pair in the audit log; never fails the request."""

    if not settings.enable_request_logging:
        return

    try:
        db.add(
            db_models.RequestLog(
                timestamp=datetime.utcnow(),
                latitude=query["latitude"],
                longitude=query["longitude"],
                radius=query["radius"],
                request_pretty_print=query["pretty_print"],
                response_type=response_type,
                response_body=response_body,
                response_success=success,
                raw_flight_data=raw_flight_data,
            )
        )
        db.commit()
    except Exception as exc:  # pragma: no cover - fail soft
        db.rollback()
        logger.warning("Request logging failed: %s", exc)
