"""Geographic utility functions."""

from __future__ import annotations

import math
import time
from typing import Callable, Optional, Sequence

from .models import Coordinate

EARTH_RADIUS = 6371000  # meters


def haversine_distance(lat1: float, lon1: float, lat2: float, lon2: float) -> float:
    """Calculate distance between two points in meters using Haversine formula"""
    phi1 = math.radians(lat1)
    phi2 = math.radians(lat2)
    delta_phi = math.radians(lat2 - lat1)
    delta_lambda = math.radians(lon2 - lon1)

    a = (math.sin(delta_phi / 2) ** 2 +
         math.cos(phi1) * math.cos(phi2) * math.sin(delta_lambda / 2) ** 2)
    c = 2 * math.atan2(math.sqrt(a), math.sqrt(1 - a))

    return EARTH_RADIUS * c


def distance_between(a: Coordinate, b: Coordinate) -> float:
    return haversine_distance(a.lat, a.lon, b.lat, b.lon)


def bearing_between(lat1: float, lon1: float, lat2: float, lon2: float) -> float:
    """Calculate bearing from point 1 to point 2 in degrees (0-360, 0=North)"""
    phi1 = math.radians(lat1)
    phi2 = math.radians(lat2)
    delta_lambda = math.radians(lon2 - lon1)

    x = math.sin(delta_lambda) * math.cos(phi2)
    y = (math.cos(phi1) * math.sin(phi2) -
         math.sin(phi1) * math.cos(phi2) * math.cos(delta_lambda))

    bearing = math.degrees(math.atan2(x, y))
    return (bearing + 360) % 360


def destination_point(origin: Coordinate, distance: float, bearing: float) -> Coordinate:
    """Point reached by travelling `distance` meters from origin on `bearing` degrees"""
    angular = distance / EARTH_RADIUS
    theta = math.radians(bearing)
    phi1 = math.radians(origin.lat)
    lambda1 = math.radians(origin.lon)

    phi2 = math.asin(math.sin(phi1) * math.cos(angular) +
                     math.cos(phi1) * math.sin(angular) * math.cos(theta))
    lambda2 = lambda1 + math.atan2(
        math.sin(theta) * math.sin(angular) * math.cos(phi1),
        math.cos(angular) - math.sin(phi1) * math.sin(phi2),
    )

    lon = (math.degrees(lambda2) + 540) % 360 - 180
    return Coordinate(lat=math.degrees(phi2), lon=lon)


def interpolate(a: Coordinate, b: Coordinate, fraction: float) -> Coordinate:
    """Linear interpolation between two coordinates, the short way across 180 degrees"""
    delta_lon = b.lon - a.lon
    if delta_lon > 180:
        delta_lon -= 360
    elif delta_lon < -180:
        delta_lon += 360

    lon = a.lon + delta_lon * fraction
    if lon > 180:
        lon -= 360
    elif lon < -180:
        lon += 360
    return Coordinate(lat=a.lat + (b.lat - a.lat) * fraction, lon=lon)


def cumulative_distances(route: Sequence[Coordinate]) -> list[float]:
    """Cumulative great-circle arc length at each route vertex"""
    if not route:
        return []
    cumulative = [0.0]
    for prev, point in zip(route, route[1:]):
        cumulative.append(cumulative[-1] + distance_between(prev, point))
    return cumulative


def polyline_length(route: Sequence[Coordinate]) -> float:
    table = cumulative_distances(route)
    return table[-1] if table else 0.0


def is_valid_coordinate(coordinate: Optional[Coordinate]) -> bool:
    if coordinate is None:
        return False
    if not (math.isfinite(coordinate.lat) and math.isfinite(coordinate.lon)):
        return False
    return -90 <= coordinate.lat <= 90 and -180 <= coordinate.lon <= 180


def bearing_to_compass(bearing: float) -> str:
    """Convert bearing to compass direction"""
    directions = ["north", "northeast", "east", "southeast",
                  "south", "southwest", "west", "northwest"]
    index = round(bearing / 45) % 8
    return directions[index]


def retry_with_backoff(func, max_time: float = 30.0, initial_delay: float = 1.0,
                       max_delay: float = 8.0, description: str = "operation",
                       log: Optional[Callable[[str], None]] = None):
    """Retry a function with exponential backoff.

    Args:
        func: Function that returns a truthy value on success, falsy on failure
        max_time: Maximum total time to retry (seconds)
        initial_delay: Initial delay between retries (seconds)
        max_delay: Maximum delay between retries (seconds)
        description: Description for logging
        log: Where retry messages go (default: print)

    Returns:
        The result of func() on success, or None if all retries failed
    """
    log = log or print
    start_time = time.time()
    delay = initial_delay
    attempt = 1

    while True:
        result = func()
        if result:
            return result

        elapsed = time.time() - start_time
        if elapsed >= max_time:
            log(f"Failed to complete {description} after {elapsed:.1f}s ({attempt} attempts)")
            return None

        remaining = max_time - elapsed
        sleep_time = min(delay, remaining, max_delay)
        if sleep_time > 0:
            log(f"Retrying {description} in {sleep_time:.1f}s (attempt {attempt})...")
            time.sleep(sleep_time)

        delay = min(delay * 2, max_delay)
        attempt += 1
