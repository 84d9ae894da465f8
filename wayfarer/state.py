"""Journey session states and the state machine that moves between them."""

from dataclasses import dataclass
from typing import ClassVar, Optional

from .clock import JourneyClock
from .interpolator import PositionInterpolator
from .models import JourneyPlan, VirtualPosition


@dataclass(frozen=True)
class JourneyState:
    name: ClassVar[str] = "state"
    terminal: ClassVar[bool] = False


@dataclass(frozen=True)
class Idle(JourneyState):
    name: ClassVar[str] = "idle"


@dataclass(frozen=True)
class Active(JourneyState):
    plan: JourneyPlan
    name: ClassVar[str] = "active"


@dataclass(frozen=True)
class Paused(JourneyState):
    plan: JourneyPlan
    paused_at: float
    name: ClassVar[str] = "paused"


@dataclass(frozen=True)
class Completed(JourneyState):
    plan: JourneyPlan
    name: ClassVar[str] = "completed"
    terminal: ClassVar[bool] = True


@dataclass(frozen=True)
class Cancelled(JourneyState):
    plan: JourneyPlan
    name: ClassVar[str] = "cancelled"
    terminal: ClassVar[bool] = True


@dataclass(frozen=True)
class Failed(JourneyState):
    reason: str
    name: ClassVar[str] = "failed"
    terminal: ClassVar[bool] = True


def plan_of(state: JourneyState) -> Optional[JourneyPlan]:
    return getattr(state, "plan", None)


class JourneyStateMachine:
    """Single source of truth for a session's lifecycle.

    Requests that make no sense in the current state return False and leave
    the state untouched. Callers are responsible for serializing access.
    """

    def __init__(self):
        self.state: JourneyState = Idle()
        self.clock: Optional[JourneyClock] = None
        self.interpolator: Optional[PositionInterpolator] = None
        self.last_progress = 0.0

    @property
    def plan(self) -> Optional[JourneyPlan]:
        return plan_of(self.state)

    def start(self, plan: JourneyPlan) -> bool:
        if not isinstance(self.state, Idle):
            return False
        self.clock = JourneyClock(plan.start_timestamp)
        self.interpolator = PositionInterpolator(plan)
        self.last_progress = 0.0
        self.state = Active(plan)
        return True

    def active_elapsed(self, now: float) -> float:
        if self.clock is None:
            return 0.0
        return self.clock.active_elapsed(now)

    def position(self, now: float) -> Optional[VirtualPosition]:
        """Current position; None unless a plan is in flight or just ended"""
        if self.interpolator is None or self.clock is None:
            return None
        position = self.interpolator.position(self.clock.active_elapsed(now), self.last_progress)
        if isinstance(self.state, Active):
            self.last_progress = position.progress
        return position

    def evaluate(self, now: float) -> bool:
        """Complete the journey if progress has reached 1.0. Returns True on completion."""
        if not isinstance(self.state, Active):
            return False
        position = self.position(now)
        if position.progress >= 1.0:
            self._finish(Completed, now)
            return True
        return False

    def _finish(self, state_cls, now: float):
        # Freeze the clock so the final position stays put after the session ends
        self.clock.pause(now)
        self.state = state_cls(self.state.plan)

    def pause(self, now: float) -> bool:
        if not isinstance(self.state, Active):
            return False
        if self.evaluate(now):
            return False
        self.clock.pause(now)
        self.state = Paused(self.state.plan, paused_at=now)
        return True

    def resume(self, now: float) -> bool:
        if not isinstance(self.state, Paused):
            return False
        self.clock.resume(now)
        self.state = Active(self.state.plan)
        return True

    def stop(self, now: float) -> bool:
        """End the session early. Completion wins if progress already reached 1.0."""
        if isinstance(self.state, Active):
            if self.evaluate(now):
                return True
            self._finish(Cancelled, now)
            return True
        if isinstance(self.state, Paused):
            if self.position(now).progress >= 1.0:
                self._finish(Completed, now)
            else:
                self._finish(Cancelled, now)
            return True
        return False

    def fail(self, reason: str) -> bool:
        if self.state.terminal:
            return False
        self.state = Failed(reason)
        return True

    def reset(self) -> bool:
        """Return a consumed terminal state to idle"""
        if not self.state.terminal:
            return False
        self.state = Idle()
        self.clock = None
        self.interpolator = None
        self.last_progress = 0.0
        return True
