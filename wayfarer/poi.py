"""Point-of-interest catalogs that feed the discovery scheduler."""

import hashlib
import json
import os
import random
import time
from typing import Optional

import requests

from .config import CONFIG
from .geo import cumulative_distances, destination_point, distance_between, retry_with_backoff
from .interpolator import point_along
from .logger import Logger
from .models import CandidatePOI, Coordinate, JourneyPlan

POI_NAMES = {
    "cafe": ["Café", "Coffee House", "Tea Room", "Espresso Bar"],
    "restaurant": ["Bistro", "Noodle House", "Trattoria", "Diner", "Kitchen"],
    "park": ["Park", "Gardens", "Green", "Commons"],
    "museum": ["Museum", "Gallery", "Heritage Centre"],
    "landmark": ["Clock Tower", "Monument", "Old Bridge", "Lighthouse", "Fountain"],
}
POI_PREFIXES = [
    "Amber", "Maple", "Willow", "Harbour", "Silver", "Juniper", "Copper",
    "Lantern", "Meadow", "Granite", "Saffron", "Cedar", "Blue Door",
    "Kingsway", "Orchard", "Riverbend", "Old Mill", "Starling",
]
OVERPASS_TAGS = ("amenity", "tourism", "leisure", "historic")


class POICatalog:
    """Supplies candidate POIs for a plan, keyed by progress threshold"""

    def candidates_for(self, plan: JourneyPlan) -> list[CandidatePOI]:
        raise NotImplementedError


class SyntheticPOICatalog(POICatalog):
    """Generated names scattered along the route. Deterministic for a seed."""

    def __init__(self, seed: Optional[int] = None, config: Optional[dict] = None):
        self.config = config or CONFIG
        self.rng = random.Random(seed)

    def candidates_for(self, plan: JourneyPlan) -> list[CandidatePOI]:
        table = cumulative_distances(plan.route)
        total = table[-1]
        min_distance = self.config["poi_min_travel_distance"]
        if total <= min_distance:
            return []

        count = int(total / self.config["poi_spacing"])
        count = max(1, min(self.config["poi_max_candidates"], count))
        radius = self.config["poi_discovery_radius"]

        candidates = []
        used_names: set[str] = set()
        for index in range(count):
            distance = self.rng.uniform(min_distance, total)
            on_route = point_along(plan.route, table, distance)
            coordinate = destination_point(on_route, self.rng.uniform(0, radius),
                                           self.rng.uniform(0, 360))
            category = self.rng.choice(sorted(POI_NAMES))
            name = self._unique_name(category, used_names)
            candidates.append(CandidatePOI(
                id=f"{plan.id}-poi-{index}",
                name=name,
                category=category,
                coordinate=coordinate,
                threshold=distance / total,
            ))
        return candidates

    def _unique_name(self, category: str, used: set[str]) -> str:
        for _ in range(20):
            name = f"{self.rng.choice(POI_PREFIXES)} {self.rng.choice(POI_NAMES[category])}"
            if name not in used:
                used.add(name)
                return name
        name = f"{self.rng.choice(POI_PREFIXES)} {POI_NAMES[category][0]} {len(used) + 1}"
        used.add(name)
        return name


class OverpassPOICatalog(POICatalog):
    """Named OpenStreetMap features near the route, via the Overpass API.

    Features are looked up within the discovery radius of points sampled
    along the route; each one is discovered at the progress of the nearest
    sample. Failures give an empty catalog since discovery is not critical.
    """

    def __init__(self, config: Optional[dict] = None, logger: Optional[Logger] = None):
        self.config = config or CONFIG
        self.logger = logger or Logger(echo=False)
        self.cache_dir = self.config["overpass_cache_dir"]

    def candidates_for(self, plan: JourneyPlan) -> list[CandidatePOI]:
        table = cumulative_distances(plan.route)
        total = table[-1]
        min_distance = self.config["poi_min_travel_distance"]
        if total <= min_distance:
            return []

        samples = self._sample_points(plan, table, min_distance)
        data = self.fetch(samples)
        if not data:
            return []

        radius = self.config["poi_discovery_radius"]
        candidates = []
        for element in data.get("elements", []):
            if not isinstance(element, dict):
                continue
            tags = element.get("tags") or {}
            name = tags.get("name")
            if element.get("type") != "node" or not name or "lat" not in element:
                continue
            coordinate = Coordinate(lat=element["lat"], lon=element["lon"])
            nearest_distance, nearest_along = min(
                (distance_between(coordinate, point), along) for along, point in samples
            )
            if nearest_distance > radius:
                continue
            category = next((tags[key] for key in OVERPASS_TAGS if key in tags), "landmark")
            candidates.append(CandidatePOI(
                id=f"osm-{element['id']}",
                name=name,
                category=category,
                coordinate=coordinate,
                threshold=nearest_along / total,
            ))

        self.logger.log("POI catalog loaded", {"candidates": len(candidates), "samples": len(samples)})
        return candidates

    def _sample_points(self, plan: JourneyPlan, table: list[float],
                       min_distance: float) -> list[tuple[float, Coordinate]]:
        total = table[-1]
        spacing = self.config["overpass_sample_spacing"]
        max_samples = self.config["overpass_max_samples"]
        span = total - min_distance
        if span / spacing > max_samples - 1:
            spacing = span / (max_samples - 1)

        samples = []
        along = min_distance
        while along <= total:
            samples.append((along, point_along(plan.route, table, along)))
            along += spacing
        return samples

    def _build_query(self, samples: list[tuple[float, Coordinate]]) -> str:
        radius = self.config["poi_discovery_radius"]
        line = ",".join(f"{point.lat:.6f},{point.lon:.6f}" for _, point in samples)
        clauses = "\n".join(
            f'  node["name"]["{key}"](around:{radius},{line});' for key in OVERPASS_TAGS
        )
        return f"[out:json][timeout:30];\n(\n{clauses}\n);\nout body;"

    def _cache_path(self, query: str) -> str:
        h = hashlib.md5(query.encode()).hexdigest()[:12]
        return os.path.join(self.cache_dir, f"poi_{h}.json")

    def _load_cache(self, path: str) -> Optional[dict]:
        if not os.path.exists(path):
            return None
        try:
            age = time.time() - os.path.getmtime(path)
            if age > self.config["overpass_cache_max_age"]:
                return None
            with open(path) as f:
                data = json.load(f)
            return data if isinstance(data, dict) else None
        except (json.JSONDecodeError, OSError):
            return None

    def fetch(self, samples: list[tuple[float, Coordinate]]) -> Optional[dict]:
        """Overpass response for the sample points, from disk cache when fresh"""
        if not samples:
            return None
        query = self._build_query(samples)
        cache_path = self._cache_path(query)
        cached = self._load_cache(cache_path)
        if cached is not None:
            self.logger.log("Using cached POI data", {"path": cache_path})
            return cached

        def try_fetch():
            try:
                response = requests.post(self.config["overpass_url"], data={"data": query}, timeout=60)
                response.raise_for_status()
                data = response.json()
            except (requests.RequestException, ValueError) as e:
                self.logger.log("POI fetch error", {"error": str(e)})
                return None
            if not isinstance(data, dict) or not isinstance(data.get("elements", []), list):
                self.logger.log("POI fetch error", {"error": f"unexpected response: {type(data).__name__}"})
                return None
            return data

        data = retry_with_backoff(
            try_fetch,
            max_time=self.config["overpass_retry_time"],
            initial_delay=1.0,
            max_delay=8.0,
            description="POI fetch",
            log=self.logger.log,
        )
        if data is None:
            return None

        if data.get("elements"):
            os.makedirs(self.cache_dir, exist_ok=True)
            with open(cache_path, "w") as f:
                json.dump(data, f)
            self.logger.log("Cached POI data", {"path": cache_path})
        return data
