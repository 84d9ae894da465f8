"""Route synthesis between two coordinates."""

import math
import random
import time
from dataclasses import dataclass
from typing import Optional, Sequence

import networkx as nx

from .config import CONFIG
from .errors import RouteSynthesisFailed
from .geo import (
    bearing_between,
    cumulative_distances,
    destination_point,
    distance_between,
    interpolate,
    is_valid_coordinate,
)
from .interpolator import point_along
from .models import Coordinate, TransitStop, TransportMode

STATION_WORDS = [
    "Central", "Harbour", "Market", "Riverside", "Park", "Museum",
    "University", "Garden", "Bridge", "Old Town", "North Gate", "Library",
    "Cathedral", "Exchange", "Lakeside", "Stadium", "Hospital", "Castle",
    "Airport Road", "Docklands", "Theatre", "Observatory", "Mill Lane",
    "Victoria", "Chinatown", "Hillside", "Fountain", "Art Centre",
]


@dataclass(frozen=True)
class Route:
    coordinates: tuple[Coordinate, ...]
    total_distance: float  # meters, cumulative great-circle arc length
    transit_stops: Optional[tuple[TransitStop, ...]] = None


class RouteSynthesizer:
    """Builds plausible-looking routes without a street network.

    Candidate waypoints are laid out on a lattice between start and
    destination: columns along the straight line, rows across it. Edges only
    go from one column to the next, so every path makes forward progress.
    The lateral range tapers to zero at both ends and edge weights get a
    random multiplier, so the cheapest path wanders instead of running
    straight.
    """

    def __init__(self, seed: Optional[int] = None, config: Optional[dict] = None):
        self.config = config or CONFIG
        self.seed = seed if seed is not None else time.time_ns()
        self.rng = random.Random(self.seed)

    def pick_destination(self, start: Coordinate, distance: float) -> Coordinate:
        """Destination at a random bearing, so the route comes out near `distance` meters"""
        if not is_valid_coordinate(start):
            raise RouteSynthesisFailed(f"Invalid start coordinate: {start}")
        if not math.isfinite(distance) or distance <= 0:
            raise RouteSynthesisFailed(f"Invalid journey distance: {distance}")
        bearing = self.rng.uniform(0, 360)
        straight = distance / self.config["route_detour_factor"]
        return destination_point(start, straight, bearing)

    def synthesize(self, start: Coordinate, destination: Coordinate, mode: TransportMode,
                   stop_names: Optional[Sequence[str]] = None) -> Route:
        if not is_valid_coordinate(start) or not is_valid_coordinate(destination):
            raise RouteSynthesisFailed(f"Invalid route endpoints: {start} -> {destination}")

        straight = distance_between(start, destination)
        if straight < 1.0:
            coordinates = (start,) if start == destination else (start, destination)
        else:
            coordinates = self._lattice_path(start, destination, straight)

        table = cumulative_distances(coordinates)
        total_distance = table[-1]
        if not math.isfinite(total_distance):
            raise RouteSynthesisFailed("Route length is not finite")
        if coordinates[0] != start or coordinates[-1] != destination:
            raise RouteSynthesisFailed("Route endpoints do not match the request")

        stops = None
        if mode is TransportMode.TRANSIT:
            stops = self._place_stops(coordinates, table, stop_names)

        return Route(coordinates=coordinates, total_distance=total_distance, transit_stops=stops)

    def _lattice_path(self, start: Coordinate, destination: Coordinate,
                      straight: float) -> tuple[Coordinate, ...]:
        cfg = self.config
        columns = int(round(straight / cfg["route_segment_length"]))
        columns = max(cfg["route_min_columns"], min(cfg["route_max_columns"], columns))
        rows = cfg["route_lattice_rows"]
        max_offset = min(straight * cfg["route_lateral_ratio"], cfg["route_max_lateral_offset"])
        row_spacing = max_offset / rows
        col_spacing = straight / columns
        along_jitter = cfg["route_along_jitter"]
        low, high = cfg["route_weight_jitter"]

        # node -> (meters along the axis, meters across it, positive = right)
        positions: dict[tuple[int, int], tuple[float, float]] = {}
        for i in range(columns + 1):
            reach = min(rows, i, columns - i)
            for j in range(-reach, reach + 1):
                if i == 0 or i == columns:
                    positions[(i, j)] = (i * col_spacing, 0.0)
                    continue
                along = (i + self.rng.uniform(-along_jitter, along_jitter)) * col_spacing
                across = (j + self.rng.uniform(-0.3, 0.3)) * row_spacing
                positions[(i, j)] = (along, across)

        graph = nx.DiGraph()
        for (i, j), (along, across) in positions.items():
            for dj in (-1, 0, 1):
                neighbor = (i + 1, j + dj)
                if neighbor not in positions:
                    continue
                next_along, next_across = positions[neighbor]
                length = math.hypot(next_along - along, next_across - across)
                graph.add_edge((i, j), neighbor, weight=length * self.rng.uniform(low, high))

        try:
            path = nx.shortest_path(graph, (0, 0), (columns, 0), weight="weight")
        except (nx.NetworkXNoPath, nx.NodeNotFound) as e:
            raise RouteSynthesisFailed(f"No path through route lattice: {e}") from e

        bearing = bearing_between(start.lat, start.lon, destination.lat, destination.lon)
        coordinates = [start]
        for node in path[1:-1]:
            along, across = positions[node]
            base = interpolate(start, destination, along / straight)
            if abs(across) > 1e-9:
                side = bearing + 90 if across > 0 else bearing - 90
                base = destination_point(base, abs(across), side % 360)
            coordinates.append(base)
        coordinates.append(destination)

        if not all(is_valid_coordinate(c) for c in coordinates):
            raise RouteSynthesisFailed("Synthesized route left the valid coordinate range")
        return tuple(coordinates)

    def _place_stops(self, route: Sequence[Coordinate], table: Sequence[float],
                     stop_names: Optional[Sequence[str]]) -> tuple[TransitStop, ...]:
        total = table[-1]
        count = int(round(total / self.config["transit_stop_spacing"])) + 1
        count = max(2, min(self.config["transit_max_stops"], count))
        names = self._stop_names(count, stop_names)

        stops = []
        spacing = total / (count - 1)
        for k in range(count):
            if k == 0:
                distance = 0.0
            elif k == count - 1:
                distance = total
            else:
                distance = (k + self.rng.uniform(-0.2, 0.2)) * spacing
            stops.append(TransitStop(
                name=names[k],
                coordinate=point_along(route, table, distance),
                distance_along=distance,
            ))
        return tuple(stops)

    def _stop_names(self, count: int, preferred: Optional[Sequence[str]]) -> list[str]:
        names = list(preferred or [])[:count]
        pool = [w for w in STATION_WORDS if f"{w} Station" not in names]
        self.rng.shuffle(pool)
        while len(names) < count:
            if pool:
                names.append(f"{pool.pop()} Station")
            else:
                names.append(f"Stop {len(names) + 1}")
        return names
