"""Time-to-position interpolation along a journey route."""

from bisect import bisect_left
from typing import Sequence

from .geo import cumulative_distances, interpolate
from .models import Coordinate, JourneyPlan, VirtualPosition


def point_along(route: Sequence[Coordinate], table: Sequence[float], target: float) -> Coordinate:
    """Coordinate at `target` meters of arc length along route.

    `table` is the cumulative arc-length table of `route`.
    """
    if len(route) == 1 or target <= 0:
        return route[0]
    if target >= table[-1]:
        return route[-1]

    # First vertex whose cumulative distance reaches the target
    index = bisect_left(table, target, 1, len(table) - 1)
    segment_start = table[index - 1]
    segment_length = table[index] - segment_start
    if segment_length <= 0:
        return route[index - 1]
    fraction = (target - segment_start) / segment_length
    return interpolate(route[index - 1], route[index], fraction)


class PositionInterpolator:
    """Converts active elapsed time into a VirtualPosition for one plan.

    The arc-length table is built once; each call is a binary search plus a
    linear interpolation inside the containing segment.
    """

    def __init__(self, plan: JourneyPlan):
        self.plan = plan
        self.route = plan.route
        self.table = cumulative_distances(plan.route)
        # Interpolate over the measured polyline; total_distance is the same
        # value within floating tolerance.
        self.route_length = self.table[-1]

    def progress_at(self, active_elapsed: float) -> float:
        return min(max(active_elapsed / self.plan.duration, 0.0), 1.0)

    def coordinate_at(self, progress: float) -> Coordinate:
        if progress <= 0:
            return self.route[0]
        if progress >= 1.0:
            return self.route[-1]
        return point_along(self.route, self.table, self.route_length * progress)

    def position(self, active_elapsed: float, min_progress: float = 0.0) -> VirtualPosition:
        """Position after `active_elapsed` seconds of travel.

        `min_progress` keeps progress from moving backwards when the wall
        clock is stepped back between ticks.
        """
        progress = max(self.progress_at(active_elapsed), min(min_progress, 1.0))
        return self.position_for_progress(progress, active_elapsed)

    def position_for_progress(self, progress: float, active_elapsed: float) -> VirtualPosition:
        return VirtualPosition(
            coordinate=self.coordinate_at(progress),
            progress=progress,
            distance_traveled=progress * self.plan.total_distance,
            remaining_time=max(self.plan.duration - active_elapsed, 0.0),
        )
