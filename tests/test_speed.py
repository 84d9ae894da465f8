import random

import pytest

from wayfarer.models import Coordinate, TransitStop, TransportMode
from wayfarer.speed import SpeedModel

STOPS = (
    TransitStop("Alpha", Coordinate(0, 0), 0.0),
    TransitStop("Bravo", Coordinate(0, 0.01), 1000.0),
    TransitStop("Charlie", Coordinate(0, 0.02), 2000.0),
)


@pytest.mark.parametrize("mode, low, high", [
    (TransportMode.WALKING, 3, 6),
    (TransportMode.CYCLING, 15, 25),
    (TransportMode.DRIVING, 40, 100),
])
def test_speed_stays_in_range(mode, low, high):
    model = SpeedModel(mode, rng=random.Random(1))
    for _ in range(50):
        reading = model.update()
        assert low <= reading.speed <= high


def test_driving_speed_changes_gradually():
    model = SpeedModel(TransportMode.DRIVING, rng=random.Random(4))
    previous = model.speed
    for _ in range(100):
        speed = model.update().speed
        assert abs(speed - previous) <= 20 + 1e-9
        previous = speed


def test_transit_without_stops_uses_range():
    model = SpeedModel(TransportMode.TRANSIT, rng=random.Random(1))
    reading = model.update(500)
    assert 50 <= reading.speed <= 90
    assert reading.next_stop is None


def test_transit_stops_near_station():
    model = SpeedModel(TransportMode.TRANSIT, STOPS, rng=random.Random(1))
    assert model.update(20).speed == 0.0
    assert 50 <= model.update(500).speed <= 90
    slowing = model.update(125).speed
    assert 25 <= slowing <= 45


def test_transit_arrivals_and_reversal():
    model = SpeedModel(TransportMode.TRANSIT, STOPS, rng=random.Random(1))
    assert model.next_stop == "Bravo"

    reading = model.update(400)
    assert reading.arrived_stop is None
    assert reading.next_stop == "Bravo"

    reading = model.update(960)
    assert reading.arrived_stop == "Bravo"
    assert reading.next_stop == "Charlie"
    assert reading.speed == 0.0

    reading = model.update(1990)
    assert reading.arrived_stop == "Charlie"
    assert reading.direction == -1
    assert reading.next_stop == "Bravo"


def test_transit_jump_passes_several_stops():
    model = SpeedModel(TransportMode.TRANSIT, STOPS, rng=random.Random(1))
    reading = model.update(2000)
    assert reading.arrived_stop == "Charlie"
    assert reading.direction == -1
