import pytest

from wayfarer.clock import JourneyClock
from wayfarer.geo import cumulative_distances
from wayfarer.interpolator import PositionInterpolator, point_along
from wayfarer.models import Coordinate

from conftest import START_TIME, make_plan


def test_point_along_vertices_and_midpoints(plan):
    table = cumulative_distances(plan.route)
    assert point_along(plan.route, table, 0) == plan.route[0]
    assert point_along(plan.route, table, table[-1]) == plan.route[-1]
    assert point_along(plan.route, table, table[1]) == plan.route[1]

    quarter = point_along(plan.route, table, table[-1] / 4)
    assert quarter.lat == pytest.approx(0.0)
    assert quarter.lon == pytest.approx(0.005)

    three_quarters = point_along(plan.route, table, table[-1] * 0.75)
    assert three_quarters.lon == pytest.approx(0.015)


def test_point_along_clamps(plan):
    table = cumulative_distances(plan.route)
    assert point_along(plan.route, table, -10) == plan.route[0]
    assert point_along(plan.route, table, table[-1] + 10) == plan.route[-1]


def test_point_along_skips_zero_length_segments():
    route = (Coordinate(0, 0), Coordinate(0, 0), Coordinate(0, 0.01))
    table = cumulative_distances(route)
    point = point_along(route, table, table[-1] / 2)
    assert point.lon == pytest.approx(0.005)


def test_position_progress(plan):
    interpolator = PositionInterpolator(plan)
    position = interpolator.position(75)
    assert position.progress == pytest.approx(0.25)
    assert position.coordinate.lon == pytest.approx(0.005)
    assert position.distance_traveled == pytest.approx(0.25 * plan.total_distance)
    assert position.remaining_time == pytest.approx(225)


def test_position_clamps_to_route(plan):
    interpolator = PositionInterpolator(plan)
    assert interpolator.position(-20).progress == 0.0
    end = interpolator.position(10_000)
    assert end.progress == 1.0
    assert end.coordinate == plan.destination
    assert end.remaining_time == 0.0


def test_position_never_goes_backwards(plan):
    interpolator = PositionInterpolator(plan)
    assert interpolator.position(30, min_progress=0.5).progress == 0.5


def test_single_point_route():
    start = Coordinate(10.0, 10.0)
    plan = make_plan(route=(start,))
    interpolator = PositionInterpolator(plan)
    position = interpolator.position(150)
    assert position.coordinate == start
    assert position.progress == pytest.approx(0.5)
    assert position.distance_traveled == 0.0


def test_clock_active_elapsed():
    clock = JourneyClock(START_TIME)
    assert clock.active_elapsed(START_TIME + 40) == 40

    assert clock.pause(START_TIME + 40)
    assert not clock.pause(START_TIME + 45)
    assert clock.is_paused
    assert clock.active_elapsed(START_TIME + 100) == 40

    assert clock.resume(START_TIME + 100)
    assert not clock.resume(START_TIME + 110)
    assert clock.total_paused == 60
    assert clock.active_elapsed(START_TIME + 110) == 50


def test_clock_step_back_during_pause():
    clock = JourneyClock(START_TIME)
    clock.pause(START_TIME + 50)
    clock.resume(START_TIME + 30)
    assert clock.total_paused == 0.0
