"""Cosmetic speed readings for display.

Nothing in this module is authoritative. Progress and position come only
from JourneyClock and PositionInterpolator; the speed model may read the
route and the current position but nothing reads the speed model to compute
progress. Keep it that way.
"""

import random
from typing import Optional, Sequence

from .config import CONFIG
from .models import SpeedReading, TransitStop, TransportMode


class SpeedModel:
    """Produces a plausible "current speed" per transport mode"""

    def __init__(self, mode: TransportMode, stops: Optional[Sequence[TransitStop]] = None,
                 rng: Optional[random.Random] = None, config: Optional[dict] = None):
        self.mode = mode
        self.config = config or CONFIG
        self.rng = rng or random.Random()
        self.low, self.high = mode.display_speed_range(self.config)
        self.stops = list(stops or [])
        self.speed = self._draw()

        # Transit bookkeeping: the stop we are heading to and which way
        self.direction = 1
        # The journey begins at the first stop
        self.target_index = 1 if len(self.stops) > 1 else 0

    def _draw(self) -> float:
        return self.rng.uniform(self.low, self.high)

    @property
    def next_stop(self) -> Optional[str]:
        if not self.stops:
            return None
        return self.stops[self.target_index].name

    def update(self, distance_traveled: Optional[float] = None) -> SpeedReading:
        """Next reading. `distance_traveled` is only used for transit."""
        if self.mode is TransportMode.TRANSIT and self.stops and distance_traveled is not None:
            return self._transit_update(distance_traveled)

        if self.mode is TransportMode.DRIVING:
            target = self._draw()
            max_change = self.config["driving_max_speed_change"]
            diff = target - self.speed
            if abs(diff) > max_change:
                self.speed = self.speed + (max_change if diff > 0 else -max_change)
            else:
                self.speed = target
        else:
            self.speed = self._draw()
        return SpeedReading(speed=self.speed)

    def _transit_update(self, distance_traveled: float) -> SpeedReading:
        slowdown = self.config["transit_slowdown_radius"]
        arrival = self.config["transit_arrival_radius"]

        nearest = min(abs(stop.distance_along - distance_traveled) for stop in self.stops)
        if nearest <= arrival:
            self.speed = 0.0
        elif nearest >= slowdown:
            self.speed = self._draw()
        else:
            self.speed = self._draw() * (nearest - arrival) / (slowdown - arrival)

        # Real progress only moves forward, so a stop counts as reached once we
        # are inside its arrival radius or past it. After turning around at a
        # terminus the reversed direction is display-only.
        arrived = None
        while self.direction == 1 and len(self.stops) > 1:
            target = self.stops[self.target_index]
            if distance_traveled < target.distance_along - arrival:
                break
            arrived = target.name
            self._advance_target()

        return SpeedReading(
            speed=self.speed,
            next_stop=self.next_stop,
            arrived_stop=arrived,
            direction=self.direction,
        )

    def _advance_target(self):
        if len(self.stops) < 2:
            return
        if self.target_index in (0, len(self.stops) - 1):
            # Terminus: turn around
            self.direction = -1 if self.target_index == len(self.stops) - 1 else 1
        self.target_index += self.direction
