import pytest
import requests

from wayfarer.config import CONFIG
from wayfarer.geo import cumulative_distances
from wayfarer.interpolator import point_along
from wayfarer.logger import Logger
from wayfarer.models import Coordinate
from wayfarer.poi import OverpassPOICatalog, SyntheticPOICatalog

from conftest import make_plan


def test_synthetic_candidates(plan):
    candidates = SyntheticPOICatalog(seed=3).candidates_for(plan)
    assert candidates
    min_threshold = CONFIG["poi_min_travel_distance"] / plan.total_distance
    assert all(min_threshold <= c.threshold <= 1.0 for c in candidates)
    assert len({c.name for c in candidates}) == len(candidates)
    assert len({c.id for c in candidates}) == len(candidates)


def test_synthetic_candidates_are_seeded(plan):
    first = SyntheticPOICatalog(seed=3).candidates_for(plan)
    second = SyntheticPOICatalog(seed=3).candidates_for(plan)
    assert first == second


def test_short_route_has_no_candidates():
    plan = make_plan(route=(Coordinate(0, 0), Coordinate(0, 0.001)))
    assert SyntheticPOICatalog(seed=3).candidates_for(plan) == []


class FakeResponse:
    def __init__(self, data, status=200):
        self.data = data
        self.status = status

    def raise_for_status(self):
        if self.status >= 400:
            raise requests.HTTPError(f"{self.status} error")

    def json(self):
        return self.data


@pytest.fixture
def overpass_config(tmp_path):
    return dict(CONFIG, overpass_cache_dir=str(tmp_path / "cache"), overpass_retry_time=0.0)


def overpass_elements(plan):
    table = cumulative_distances(plan.route)
    near = point_along(plan.route, table, 600)
    return {"elements": [
        {"type": "node", "id": 1, "lat": near.lat, "lon": near.lon,
         "tags": {"name": "Harbour Museum", "tourism": "museum"}},
        {"type": "node", "id": 2, "lat": near.lat, "lon": near.lon, "tags": {"amenity": "bench"}},
        {"type": "node", "id": 3, "lat": 10.0, "lon": 10.0, "tags": {"name": "Far Away", "amenity": "cafe"}},
        {"type": "way", "id": 4, "tags": {"name": "Some Street"}},
    ]}


def test_overpass_candidates(plan, overpass_config, monkeypatch):
    calls = []

    def fake_post(url, data=None, timeout=None):
        calls.append(data["data"])
        return FakeResponse(overpass_elements(plan))

    monkeypatch.setattr(requests, "post", fake_post)
    catalog = OverpassPOICatalog(config=overpass_config, logger=Logger(echo=False))
    candidates = catalog.candidates_for(plan)

    assert [c.id for c in candidates] == ["osm-1"]
    museum = candidates[0]
    assert museum.name == "Harbour Museum"
    assert museum.category == "museum"
    assert museum.threshold == pytest.approx(600 / plan.total_distance, abs=0.1)
    assert len(calls) == 1
    assert "around:100," in calls[0]


def test_overpass_uses_cache(plan, overpass_config, monkeypatch):
    calls = []

    def fake_post(url, data=None, timeout=None):
        calls.append(url)
        return FakeResponse(overpass_elements(plan))

    monkeypatch.setattr(requests, "post", fake_post)
    catalog = OverpassPOICatalog(config=overpass_config, logger=Logger(echo=False))
    first = catalog.candidates_for(plan)
    second = catalog.candidates_for(plan)
    assert first == second
    assert len(calls) == 1


def test_overpass_failure_gives_empty_catalog(plan, overpass_config, monkeypatch):
    def fake_post(url, data=None, timeout=None):
        raise requests.ConnectionError("offline")

    messages = []
    monkeypatch.setattr(requests, "post", fake_post)
    catalog = OverpassPOICatalog(config=overpass_config,
                                 logger=Logger(echo=False, callback=lambda m, d: messages.append(m)))
    assert catalog.candidates_for(plan) == []
    assert "POI fetch error" in messages


def test_overpass_http_error(plan, overpass_config, monkeypatch):
    monkeypatch.setattr(requests, "post", lambda url, data=None, timeout=None: FakeResponse({}, status=429))
    catalog = OverpassPOICatalog(config=overpass_config, logger=Logger(echo=False))
    assert catalog.candidates_for(plan) == []


@pytest.mark.parametrize("payload", [[1, 2], "elements", {"elements": "none"}])
def test_overpass_unexpected_payload_gives_empty_catalog(plan, overpass_config, monkeypatch, payload):
    messages = []
    monkeypatch.setattr(requests, "post", lambda url, data=None, timeout=None: FakeResponse(payload))
    catalog = OverpassPOICatalog(config=overpass_config,
                                 logger=Logger(echo=False, callback=lambda m, d: messages.append(m)))
    assert catalog.candidates_for(plan) == []
    assert "POI fetch error" in messages


def test_overpass_skips_malformed_elements(plan, overpass_config, monkeypatch):
    payload = overpass_elements(plan)
    payload["elements"].insert(0, "junk")
    monkeypatch.setattr(requests, "post", lambda url, data=None, timeout=None: FakeResponse(payload))
    catalog = OverpassPOICatalog(config=overpass_config, logger=Logger(echo=False))
    assert [c.id for c in catalog.candidates_for(plan)] == ["osm-1"]
