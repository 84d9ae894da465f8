"""Active elapsed time of a journey, derived from absolute timestamps."""

from typing import Optional


class JourneyClock:
    """Tracks pauses for one session.

    Elapsed time is never accumulated tick by tick; it is recomputed from the
    start timestamp and the total paused duration on every call, so a late
    or skipped tick (process suspended, machine asleep) corrects itself.
    """

    def __init__(self, start_timestamp: float):
        self.start_timestamp = start_timestamp
        self.total_paused = 0.0
        self.paused_at: Optional[float] = None

    @property
    def is_paused(self) -> bool:
        return self.paused_at is not None

    def active_elapsed(self, now: float) -> float:
        # While paused the frozen term replaces `now`
        reference = self.paused_at if self.paused_at is not None else now
        return reference - self.start_timestamp - self.total_paused

    def pause(self, now: float) -> bool:
        if self.paused_at is not None:
            return False
        self.paused_at = now
        return True

    def resume(self, now: float) -> bool:
        if self.paused_at is None:
            return False
        # A clock stepped backwards must not shrink the paused total
        self.total_paused += max(now - self.paused_at, 0.0)
        self.paused_at = None
        return True
