from nearbyflights.models.flight import AircraftInfo, AirportRef, FlightRecord
from nearbyflights.services.merge import merge_flights


def _flight(icao24: str, **overrides) -> FlightRecord:
    data = {
        "icao24": icao24,
        "callsign": "",
        "latitude": 52.0,
        "longitude": 21.0,
        "altitude": 1000.0,
        "speed": 100.0,
        "heading": 90.0,
        "distance_km": 5.0,
        "origin": AirportRef(id="WAW"),
    }
    data.update(overrides)
    return FlightRecord(**data)


def test_merge_skips_empty_identifiers_and_routeless_records():
    flights = merge_flights(
        [_flight(""), _flight("aaa111", origin=AirportRef())],
        [_flight("bbb222", origin=AirportRef(), destination=AirportRef(id="JFK"))],
    )

    assert [f.icao24 for f in flights] == ["bbb222"]


def test_routeless_record_does_not_claim_identity():
    flights = merge_flights(
        [_flight("aaa111", origin=AirportRef(), callsign="FIRST")],
        [_flight("aaa111", callsign="SECOND")],
    )

    assert len(flights) == 1
    assert flights[0].callsign == "SECOND"


def test_merge_prefers_later_kinematics_and_earlier_descriptions():
    primary = _flight(
        "abc123",
        callsign="LOT1",
        latitude=52.0,
        longitude=21.0,
        altitude=3000.0,
        speed=150.0,
        heading=10.0,
        distance_km=7.0,
        origin=AirportRef(id="EPWA", country="Poland"),
    )
    secondary = _flight(
        "abc123",
        callsign="LO1",
        latitude=52.1,
        longitude=21.1,
        altitude=3100.0,
        speed=290.0,
        heading=12.0,
        distance_km=3.0,
        airline="LOT",
        aircraft=AircraftInfo(type="B788", model="B788", registration="SP-LRA"),
        origin=AirportRef(id="WAW", name="Warsaw Chopin Airport", country="Polska"),
        destination=AirportRef(id="JFK", name="John F. Kennedy", country="United States"),
    )

    [merged] = merge_flights([primary], [secondary])

    assert (merged.latitude, merged.longitude, merged.altitude) == (52.1, 21.1, 3100.0)
    assert (merged.speed, merged.heading, merged.distance_km) == (290.0, 12.0, 3.0)
    assert merged.callsign == "LOT1"
    assert merged.airline == "LOT"
    assert merged.aircraft == AircraftInfo(type="B788", model="B788", registration="SP-LRA")
    assert merged.origin == AirportRef(id="EPWA", name="Warsaw Chopin Airport", country="Poland")
    assert merged.destination.id == "JFK"


def test_merge_does_not_mutate_inputs():
    primary = _flight("abc123", callsign="")
    secondary = _flight("abc123", callsign="LO1", latitude=50.0)

    merge_flights([primary], [secondary])

    assert primary.callsign == ""
    assert primary.latitude == 52.0


def test_self_merge_is_idempotent():
    flights = [
        _flight("abc123", callsign="LOT1", airline="LOT"),
        _flight("def456", destination=AirportRef(id="JFK", name="JFK Intl")),
    ]

    merged = merge_flights(flights, flights)

    assert [f.icao24 for f in merged] == ["abc123", "def456"]
    for original, result in zip(flights, merged):
        assert result == original


def test_merge_preserves_first_seen_order():
    flights = merge_flights(
        [_flight("c"), _flight("a")],
        [_flight("b"), _flight("a")],
    )

    assert [f.icao24 for f in flights] == ["c", "a", "b"]
