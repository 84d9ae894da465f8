"""Wayfarer - Focus sessions as virtual journeys."""

from .config import CONFIG
from .models import (
    Coordinate,
    TransportMode,
    TransitStop,
    JourneyPlan,
    VirtualPosition,
    CandidatePOI,
    DiscoveredPOI,
    SpeedReading,
    JourneySummary,
)
from .errors import EngineError, LocationUnavailable, RouteSynthesisFailed
from .logger import Logger
from .geo import (
    haversine_distance,
    distance_between,
    bearing_between,
    bearing_to_compass,
    destination_point,
    retry_with_backoff,
)
from .presets import PresetLocation, PRESETS, find_preset, match_preset
from .clock import JourneyClock
from .interpolator import PositionInterpolator
from .route import Route, RouteSynthesizer
from .speed import SpeedModel
from .discovery import POIDiscoveryScheduler
from .poi import POICatalog, SyntheticPOICatalog, OverpassPOICatalog
from .state import (
    JourneyState,
    Idle,
    Active,
    Paused,
    Completed,
    Cancelled,
    Failed,
    JourneyStateMachine,
)
from .summary import SummaryAssembler
from .engine import JourneyEngine
from .history import HistoryDB
from .trace import TraceRecorder, export_gpx
from .__main__ import main

__all__ = [
    "CONFIG",
    "Coordinate",
    "TransportMode",
    "TransitStop",
    "JourneyPlan",
    "VirtualPosition",
    "CandidatePOI",
    "DiscoveredPOI",
    "SpeedReading",
    "JourneySummary",
    "EngineError",
    "LocationUnavailable",
    "RouteSynthesisFailed",
    "Logger",
    "haversine_distance",
    "distance_between",
    "bearing_between",
    "bearing_to_compass",
    "destination_point",
    "retry_with_backoff",
    "PresetLocation",
    "PRESETS",
    "find_preset",
    "match_preset",
    "JourneyClock",
    "PositionInterpolator",
    "Route",
    "RouteSynthesizer",
    "SpeedModel",
    "POIDiscoveryScheduler",
    "POICatalog",
    "SyntheticPOICatalog",
    "OverpassPOICatalog",
    "JourneyState",
    "Idle",
    "Active",
    "Paused",
    "Completed",
    "Cancelled",
    "Failed",
    "JourneyStateMachine",
    "SummaryAssembler",
    "JourneyEngine",
    "HistoryDB",
    "TraceRecorder",
    "export_gpx",
    "main",
]
