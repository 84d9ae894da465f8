"""Data classes for Wayfarer."""

from dataclasses import dataclass, asdict, field
from enum import Enum
from typing import Optional

from .config import CONFIG


@dataclass(frozen=True)
class Coordinate:
    lat: float
    lon: float

    def to_dict(self) -> dict:
        return asdict(self)

    @classmethod
    def from_dict(cls, d: dict) -> "Coordinate":
        return cls(lat=d["lat"], lon=d["lon"])


class TransportMode(str, Enum):
    WALKING = "walking"
    CYCLING = "cycling"
    DRIVING = "driving"
    TRANSIT = "transit"

    def speed_kmh(self, config: Optional[dict] = None) -> float:
        """Nominal speed used to size a journey"""
        return (config or CONFIG)["nominal_speeds"][self.value]

    def speed_mps(self, config: Optional[dict] = None) -> float:
        return self.speed_kmh(config) * 1000.0 / 3600.0

    def display_speed_range(self, config: Optional[dict] = None) -> tuple[float, float]:
        """Cosmetic speed range (km/h) shown while travelling"""
        low, high = (config or CONFIG)["display_speed_ranges"][self.value]
        return low, high


@dataclass(frozen=True)
class TransitStop:
    """A named waypoint on a transit route"""
    name: str
    coordinate: Coordinate
    distance_along: float  # meters of route arc length


@dataclass(frozen=True)
class JourneyPlan:
    """Immutable plan of one session, created once at start"""
    id: str
    start: Coordinate
    destination: Coordinate
    route: tuple[Coordinate, ...]
    total_distance: float  # meters
    duration: float  # seconds
    transport_mode: TransportMode
    start_timestamp: float
    transit_stops: Optional[tuple[TransitStop, ...]] = None
    start_name: Optional[str] = None

    def __post_init__(self):
        if not self.route:
            raise ValueError("route must not be empty")
        if self.duration <= 0:
            raise ValueError("duration must be positive")

    @property
    def end_timestamp(self) -> float:
        """Planned end, ignoring pauses"""
        return self.start_timestamp + self.duration


@dataclass(frozen=True)
class VirtualPosition:
    """The virtual traveller's position, recomputed every tick"""
    coordinate: Coordinate
    progress: float  # 0.0 to 1.0
    distance_traveled: float  # meters
    remaining_time: float  # seconds


@dataclass(frozen=True)
class CandidatePOI:
    """A point of interest waiting to be discovered at a progress threshold"""
    id: str
    name: str
    category: str
    coordinate: Coordinate
    threshold: float


@dataclass(frozen=True)
class DiscoveredPOI:
    id: str
    name: str
    category: str
    coordinate: Coordinate
    discovered_at: float

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "name": self.name,
            "category": self.category,
            "lat": self.coordinate.lat,
            "lon": self.coordinate.lon,
            "discovered_at": self.discovered_at,
        }


@dataclass(frozen=True)
class SpeedReading:
    """Cosmetic speed for display. Never feeds back into progress."""
    speed: float  # km/h
    next_stop: Optional[str] = None
    arrived_stop: Optional[str] = None
    direction: int = 1


@dataclass(frozen=True)
class JourneySummary:
    journey_id: str
    start_time: float
    end_time: float
    actual_duration: float
    planned_duration: float
    transport_mode: TransportMode
    start_name: str
    start_coordinate: Coordinate
    destination_name: str
    destination_coordinate: Coordinate
    total_distance: float
    distance_traveled: float
    final_progress: float
    discovered_pois: tuple[DiscoveredPOI, ...] = field(default_factory=tuple)
    is_completed: bool = False

    def to_dict(self) -> dict:
        return {
            "journey_id": self.journey_id,
            "start_time": self.start_time,
            "end_time": self.end_time,
            "actual_duration": self.actual_duration,
            "planned_duration": self.planned_duration,
            "transport_mode": self.transport_mode.value,
            "start_name": self.start_name,
            "start": self.start_coordinate.to_dict(),
            "destination_name": self.destination_name,
            "destination": self.destination_coordinate.to_dict(),
            "total_distance": self.total_distance,
            "distance_traveled": self.distance_traveled,
            "final_progress": self.final_progress,
            "discovered_pois": [poi.to_dict() for poi in self.discovered_pois],
            "is_completed": self.is_completed,
        }
