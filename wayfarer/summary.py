"""Turns a finished session into a summary value for the caller to persist."""

from typing import Optional, Sequence

from .config import CONFIG
from .geo import distance_between
from .models import Coordinate, DiscoveredPOI, JourneyPlan, JourneySummary, VirtualPosition
from .presets import match_preset
from .state import Completed, JourneyState, plan_of


class SummaryAssembler:
    """Pure: reads a terminal state snapshot and returns a JourneySummary"""

    def __init__(self, config: Optional[dict] = None):
        self.config = config or CONFIG

    def assemble(self, state: JourneyState, position: VirtualPosition, active_elapsed: float,
                 discovered: Sequence[DiscoveredPOI], now: float) -> Optional[JourneySummary]:
        """Summary for a completed or cancelled state, None for anything else"""
        plan = plan_of(state)
        if plan is None or not state.terminal:
            return None

        progress = position.progress
        if isinstance(state, Completed):
            # Natural completion always lands exactly on the destination
            progress = 1.0

        return JourneySummary(
            journey_id=plan.id,
            start_time=plan.start_timestamp,
            end_time=now,
            actual_duration=active_elapsed,
            planned_duration=plan.duration,
            transport_mode=plan.transport_mode,
            start_name=self.start_name(plan),
            start_coordinate=plan.start,
            destination_name=self.destination_name(position.coordinate, discovered),
            destination_coordinate=position.coordinate,
            total_distance=plan.total_distance,
            distance_traveled=progress * plan.total_distance,
            final_progress=progress,
            discovered_pois=tuple(discovered),
            is_completed=progress >= 1.0,
        )

    def start_name(self, plan: JourneyPlan) -> str:
        if plan.start_name:
            return plan.start_name
        preset = match_preset(plan.start, self.config["preset_match_tolerance"])
        if preset:
            return preset.name
        return self.config["start_placeholder"]

    def destination_name(self, final: Coordinate, discovered: Sequence[DiscoveredPOI]) -> str:
        if not discovered:
            return self.config["destination_placeholder"]
        nearest = min(discovered, key=lambda poi: distance_between(final, poi.coordinate))
        return nearest.name
