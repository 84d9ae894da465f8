import json

from wayfarer.interpolator import PositionInterpolator
from wayfarer.models import Coordinate, DiscoveredPOI, TransitStop, TransportMode
from wayfarer.trace import TraceRecorder, build_gpx, export_gpx

from conftest import START_TIME, make_plan


def test_trace_recorder(plan, tmp_path):
    path = tmp_path / "trace.json"
    recorder = TraceRecorder(str(path))
    interpolator = PositionInterpolator(plan)
    recorder.listener("position", interpolator.position(30))
    recorder.listener("poi", object())
    recorder.listener("position", interpolator.position(60))
    recorder.record(None, "paused")
    recorder.save()

    data = json.loads(path.read_text())
    trace = data["trace"]
    assert len(trace) == 3
    assert trace[0]["progress"] == 0.1
    assert trace[1]["location"]["lon"] > trace[0]["location"]["lon"]
    assert trace[2]["state"] == "paused"
    assert trace[2]["location"] is None


def test_gpx_contains_route_and_waypoints(tmp_path):
    stops = (
        TransitStop("Market Station", Coordinate(0.0, 0.0), 0.0),
        TransitStop("Fish & Chips Station", Coordinate(0.0, 0.02), 2224.0),
    )
    plan = make_plan(mode=TransportMode.TRANSIT, stops=stops)
    pois = [DiscoveredPOI("p", "Lantern Gallery", "museum", Coordinate(0.0, 0.01), START_TIME)]
    path = tmp_path / "route.gpx"
    export_gpx(plan, str(path), pois)

    content = path.read_text()
    assert content.startswith('<?xml version="1.0" encoding="UTF-8"?>')
    assert content.count("<trkpt ") == len(plan.route)
    assert content.count("<wpt ") == 5
    assert "Fish &amp; Chips Station" in content
    assert "Lantern Gallery" in content
    assert "<name>Destination</name>" in content


def test_gpx_start_name(plan):
    assert "<name>Start</name>" in build_gpx(plan)
