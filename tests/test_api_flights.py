import json

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from nearbyflights.config import settings
from nearbyflights.db import Base, get_db
from nearbyflights.db_models import RequestLog
from nearbyflights.ingestors import FlightSource
from nearbyflights.main import app
from nearbyflights.models.flight import AirportRef, FlightRecord
from nearbyflights.security import API_KEY_HEADER
from nearbyflights.services import FlightAggregator, get_aggregator


class FakeSource(FlightSource):
    def __init__(self, name: str, flights: list[FlightRecord]):
        super().__init__()
        self.name = name
        self.flights = flights
        self.call_count = 0

    async def fetch(self, lat, lon, radius_km):
        self.call_count += 1
        return self.flights


FLIGHT = FlightRecord(
    icao24="489789",
    callsign="LOT26",
    latitude=52.2,
    longitude=21.0,
    altitude=10668.0,
    speed=450.0,
    heading=270.0,
    distance_km=4.2,
    airline="LOT",
    origin=AirportRef(id="WAW", name="Warsaw Chopin Airport"),
    destination=AirportRef(id="JFK", name="John F. Kennedy International Airport"),
)


@pytest.fixture
def api_context(monkeypatch):
    monkeypatch.setattr(settings, "require_api_key", True)
    monkeypatch.setattr(settings, "api_key", "test-api-key")
    monkeypatch.setattr(settings, "enable_request_logging", True)

    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    TestingSession = sessionmaker(autocommit=False, autoflush=False, bind=engine)

    def override_get_db():
        db = TestingSession()
        try:
            yield db
        finally:
            db.close()

    primary = FakeSource("opensky", [FLIGHT])
    secondary = FakeSource("flightradar24", [])
    aggregator = FlightAggregator(sources=[primary, secondary])

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_aggregator] = lambda: aggregator

    client = TestClient(app)
    session = TestingSession()
    try:
        yield {
            "client": client,
            "session": session,
            "sources": (primary, secondary),
            "headers": {API_KEY_HEADER: "test-api-key"},
        }
    finally:
        client.close()
        session.close()
        app.dependency_overrides.clear()


def test_nearby_flights_returns_json(api_context):
    response = api_context["client"].post(
        "/api/flights/nearby",
        json={"lat": 52.2, "lon": 21.0, "radius": 25},
        headers=api_context["headers"],
    )

    assert response.status_code == 200
    body = response.json()
    assert body["success"] is True
    assert body["source"] == "opensky+flightradar24"
    assert [f["icao24"] for f in body["flights"]] == ["489789"]
    assert body["flights"][0]["origin"]["id"] == "WAW"

    log = api_context["session"].query(RequestLog).one()
    assert log.response_type == "application/json"
    assert log.response_success is True
    assert log.request_pretty_print is False
    assert log.radius == 25
    assert json.loads(log.raw_flight_data)["flights"][0]["icao24"] == "489789"


def test_nearby_flights_pretty_print(api_context):
    response = api_context["client"].post(
        "/api/flights/nearby",
        json={"lat": 52.2, "lon": 21.0, "pretty-print": True},
        headers=api_context["headers"],
    )

    assert response.status_code == 200
    assert response.headers["content-type"].startswith("text/plain")
    assert "✈︎ WAW → JFK" in response.text
    assert "WAW: Warsaw Chopin Airport" in response.text

    log = api_context["session"].query(RequestLog).one()
    assert log.response_type == "text/plain"
    assert log.request_pretty_print is True
    assert log.radius == settings.default_radius_km


def test_nearby_flights_rejects_invalid_radius(api_context):
    response = api_context["client"].post(
        "/api/flights/nearby",
        json={"lat": 52.2, "lon": 21.0, "radius": 501},
        headers=api_context["headers"],
    )

    assert response.status_code == 400
    assert response.json() == {
        "success": False,
        "error": "Invalid radius. Must be between 0 and 500 km",
    }
    assert all(source.call_count == 0 for source in api_context["sources"])

    log = api_context["session"].query(RequestLog).one()
    assert log.response_success is False
    assert log.raw_flight_data is None


def test_nearby_flights_rejects_malformed_body(api_context):
    response = api_context["client"].post(
        "/api/flights/nearby",
        json={"lat": "north", "lon": 21.0, "radius": 5, "pretty-print": True},
        headers=api_context["headers"],
    )

    assert response.status_code == 400
    body = response.json()
    assert body["success"] is False
    assert body["error"].startswith("Invalid request body: lat")
    assert all(source.call_count == 0 for source in api_context["sources"])

    log = api_context["session"].query(RequestLog).one()
    assert log.response_success is False
    assert log.latitude is None
    assert log.longitude == 21.0
    assert log.radius == 5
    assert log.request_pretty_print is True
    assert json.loads(log.response_body)["error"] == body["error"]


def test_nearby_flights_rejects_missing_coordinates(api_context):
    response = api_context["client"].post(
        "/api/flights/nearby", json={}, headers=api_context["headers"]
    )

    assert response.status_code == 400
    assert response.json()["success"] is False
    assert api_context["session"].query(RequestLog).count() == 1


def test_nearby_flights_requires_api_key(api_context):
    response = api_context["client"].post(
        "/api/flights/nearby", json={"lat": 52.2, "lon": 21.0}
    )

    assert response.status_code == 401
    assert response.json()["detail"]["error"] == "Unauthorized: Invalid or missing API key"


def test_nearby_flights_rejects_wrong_api_key(api_context):
    response = api_context["client"].post(
        "/api/flights/nearby",
        json={"lat": 52.2, "lon": 21.0},
        headers={API_KEY_HEADER: "nope"},
    )

    assert response.status_code == 401
    assert api_context["session"].query(RequestLog).count() == 0


def test_api_key_check_can_be_disabled(monkeypatch, api_context):
    monkeypatch.setattr(settings, "require_api_key", False)

    response = api_context["client"].post(
        "/api/flights/nearby", json={"lat": 52.2, "lon": 21.0}
    )

    assert response.status_code == 200


def test_request_logging_can_be_disabled(monkeypatch, api_context):
    monkeypatch.setattr(settings, "enable_request_logging", False)

    response = api_context["client"].post(
        "/api/flights/nearby",
        json={"lat": 52.2, "lon": 21.0},
        headers=api_context["headers"],
    )

    assert response.status_code == 200
    assert api_context["session"].query(RequestLog).count() == 0


def test_health_check():
    client = TestClient(app)

    response = client.get("/healthz")

    assert response.status_code == 200
    assert response.json()["status"] == "ok"
