"""Shared fixtures: a manual clock and an engine with timers switched off."""

import pytest

from wayfarer.engine import JourneyEngine
from wayfarer.geo import polyline_length
from wayfarer.models import CandidatePOI, Coordinate, JourneyPlan, TransportMode
from wayfarer.poi import POICatalog, SyntheticPOICatalog
from wayfarer.route import RouteSynthesizer

START_TIME = 1_000_000.0


class FakeClock:
    def __init__(self, now: float = START_TIME):
        self.now = now

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float):
        self.now += seconds


class StaticCatalog(POICatalog):
    """Hands out the same candidates for every plan"""

    def __init__(self, thresholds=(0.1, 0.25, 0.5, 0.75, 0.9)):
        self.thresholds = thresholds

    def candidates_for(self, plan):
        return [
            CandidatePOI(
                id=f"poi-{i}",
                name=f"Place {i}",
                category="landmark",
                coordinate=plan.route[0],
                threshold=threshold,
            )
            for i, threshold in enumerate(self.thresholds)
        ]


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def origin():
    return Coordinate(0.0, 0.0)


@pytest.fixture
def engine(clock):
    engine = JourneyEngine(
        RouteSynthesizer(seed=42),
        SyntheticPOICatalog(seed=42),
        clock=clock,
        run_timers=False,
    )
    yield engine
    engine.close()


@pytest.fixture
def static_engine(clock):
    engine = JourneyEngine(
        RouteSynthesizer(seed=7),
        StaticCatalog(),
        clock=clock,
        run_timers=False,
    )
    yield engine
    engine.close()


def make_plan(duration: float = 300.0, mode=None, stops=None, route=None, start_timestamp=START_TIME):
    """Plan along the equator: three points about 1112 m apart"""
    route = route or (Coordinate(0.0, 0.0), Coordinate(0.0, 0.01), Coordinate(0.0, 0.02))
    return JourneyPlan(
        id="plan-1",
        start=route[0],
        destination=route[-1],
        route=tuple(route),
        total_distance=polyline_length(route),
        duration=duration,
        transport_mode=mode or TransportMode.WALKING,
        start_timestamp=start_timestamp,
        transit_stops=stops,
    )


@pytest.fixture
def plan():
    return make_plan()
