import pytest

from wayfarer import geo
from wayfarer.models import Coordinate


def test_haversine_one_degree_latitude():
    assert geo.haversine_distance(0, 0, 1, 0) == pytest.approx(111195, rel=1e-3)


def test_destination_point_round_trip():
    origin = Coordinate(48.8566, 2.3522)
    target = geo.destination_point(origin, 2500, 135)
    assert geo.distance_between(origin, target) == pytest.approx(2500, rel=1e-6)
    bearing = geo.bearing_between(origin.lat, origin.lon, target.lat, target.lon)
    assert bearing == pytest.approx(135, abs=0.1)


def test_destination_point_wraps_longitude():
    target = geo.destination_point(Coordinate(0.0, 179.999), 1000, 90)
    assert -180 <= target.lon <= 180
    assert target.lon < 0


@pytest.mark.parametrize("coordinate, valid", [
    (Coordinate(0, 0), True),
    (Coordinate(90, 180), True),
    (Coordinate(90.1, 0), False),
    (Coordinate(0, -180.5), False),
    (Coordinate(float("nan"), 0), False),
    (None, False),
])
def test_is_valid_coordinate(coordinate, valid):
    assert geo.is_valid_coordinate(coordinate) is valid


def test_cumulative_distances():
    route = [Coordinate(0, 0), Coordinate(0, 0.01), Coordinate(0, 0.02)]
    table = geo.cumulative_distances(route)
    assert table[0] == 0.0
    assert table[2] == pytest.approx(2 * table[1])
    assert geo.polyline_length([]) == 0.0


def test_bearing_to_compass():
    assert geo.bearing_to_compass(0) == "north"
    assert geo.bearing_to_compass(100) == "east"
    assert geo.bearing_to_compass(350) == "north"


def test_retry_with_backoff(monkeypatch):
    monkeypatch.setattr(geo.time, "sleep", lambda seconds: None)
    results = iter([None, None, {"ok": True}])
    messages = []
    result = geo.retry_with_backoff(lambda: next(results), max_time=60, log=messages.append)
    assert result == {"ok": True}
    assert len(messages) == 2


def test_interpolate_takes_short_way_across_antimeridian():
    a = Coordinate(0.0, 179.99)
    b = Coordinate(0.0, -179.99)
    middle = geo.interpolate(a, b, 0.5)
    assert abs(middle.lon) == pytest.approx(180.0)
    quarter = geo.interpolate(a, b, 0.75)
    assert quarter.lon == pytest.approx(-179.995)
    assert geo.distance_between(a, quarter) < geo.distance_between(a, b)


def test_interpolate_keeps_in_range_longitudes_exact():
    a = Coordinate(0.0, 0.0)
    b = Coordinate(0.0, 0.01)
    assert geo.interpolate(a, b, 1.0) == b
