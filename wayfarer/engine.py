"""The journey simulation engine: one session, driven by wall-clock time."""

import dataclasses
import random
import threading
import time
import uuid
from typing import Callable, Optional

from .config import CONFIG
from .discovery import POIDiscoveryScheduler
from .errors import EngineError, LocationUnavailable, RouteSynthesisFailed
from .geo import is_valid_coordinate
from .logger import Logger
from .models import (
    CandidatePOI,
    Coordinate,
    DiscoveredPOI,
    JourneyPlan,
    JourneySummary,
    SpeedReading,
    TransportMode,
    VirtualPosition,
)
from .poi import POICatalog, SyntheticPOICatalog
from .presets import PresetLocation
from .route import RouteSynthesizer
from .speed import SpeedModel
from .state import Active, Idle, JourneyState, JourneyStateMachine
from .summary import SummaryAssembler

Listener = Callable[[str, object], None]


class PeriodicTask:
    """Calls `callback` every `interval` seconds on a daemon thread until stopped"""

    def __init__(self, interval: float, callback: Callable[[], object], name: str):
        self.interval = interval
        self.callback = callback
        self._stop = threading.Event()
        self._thread = threading.Thread(target=self._run, name=name, daemon=True)

    def start(self):
        self._thread.start()

    def _run(self):
        while not self._stop.wait(self.interval):
            self.callback()

    def stop(self):
        self._stop.set()

    @property
    def stopped(self) -> bool:
        return self._stop.is_set()


class JourneyEngine:
    """Runs one journey at a time.

    Every mutation (start, pause, resume, cancel, tick-driven completion,
    failure) happens under a single lock, so requests from the UI and from
    the timers form one ordered stream. Two timers drive the session: the
    position tick recomputes the virtual position and discovers POIs, the
    speed tick refreshes the cosmetic speed. Terminal transitions stop both
    timers inside the same critical section, and every tick re-checks its
    timer generation under the lock, so no tick runs against a finished
    session.

    Pass `run_timers=False` to drive `tick()` and `speed_tick()` yourself.
    """

    def __init__(self, synthesizer: Optional[RouteSynthesizer] = None,
                 catalog: Optional[POICatalog] = None,
                 clock: Callable[[], float] = time.time,
                 logger: Optional[Logger] = None,
                 config: Optional[dict] = None,
                 run_timers: bool = True):
        self.config = config or CONFIG
        self.synthesizer = synthesizer or RouteSynthesizer(config=self.config)
        self.catalog = catalog if catalog is not None else SyntheticPOICatalog(
            seed=self.synthesizer.seed, config=self.config)
        self.clock = clock
        self.logger = logger or Logger(echo=False)
        self.run_timers = run_timers

        self.machine = JourneyStateMachine()
        self.assembler = SummaryAssembler(self.config)
        self._lock = threading.RLock()
        self._listeners: list[Listener] = []

        self._generation = 0
        self._position_task: Optional[PeriodicTask] = None
        self._speed_task: Optional[PeriodicTask] = None

        self._scheduler: Optional[POIDiscoveryScheduler] = None
        self._speed_model: Optional[SpeedModel] = None
        self._discovered: list[DiscoveredPOI] = []
        self.position: Optional[VirtualPosition] = None
        self.speed: Optional[SpeedReading] = None
        self.pending_summary: Optional[JourneySummary] = None
        self._last_state_log = 0.0

    # -- observables -------------------------------------------------------

    @property
    def state(self) -> JourneyState:
        return self.machine.state

    @property
    def plan(self) -> Optional[JourneyPlan]:
        return self.machine.plan

    @property
    def discovered_pois(self) -> tuple[DiscoveredPOI, ...]:
        with self._lock:
            return tuple(self._discovered)

    def add_listener(self, listener: Listener):
        """Register `listener(event, payload)`.

        Events: state, position, poi, speed, stop, summary. Listeners run on
        the mutating thread while the engine lock is held.
        """
        self._listeners.append(listener)

    def remove_listener(self, listener: Listener):
        if listener in self._listeners:
            self._listeners.remove(listener)

    def _emit(self, event: str, payload: object):
        for listener in list(self._listeners):
            listener(event, payload)

    def get_state(self) -> dict:
        """Current state as dict for logging"""
        with self._lock:
            state = {"state": self.machine.state.name, "pois": len(self._discovered)}
            plan = self.machine.plan
            if plan:
                state["mode"] = plan.transport_mode.value
                state["total_distance"] = round(plan.total_distance, 1)
                state["duration"] = plan.duration
            if self.position:
                state["progress"] = round(self.position.progress, 4)
                state["distance_traveled"] = round(self.position.distance_traveled, 1)
                state["remaining_time"] = round(self.position.remaining_time, 1)
                state["location"] = self.position.coordinate.to_dict()
            if self.speed:
                state["speed"] = round(self.speed.speed, 1)
            return state

    # -- control -----------------------------------------------------------

    def start(self, origin: Optional[Coordinate], mode, duration: float,
              preset: Optional[PresetLocation] = None) -> bool:
        """Plan and start a journey.

        Returns False if a session is already in flight, including one that
        started while this call was planning. Raises LocationUnavailable or
        RouteSynthesisFailed after moving to `failed`. A failing POI catalog
        does not stop the journey; it runs without discoveries.
        """
        mode = TransportMode(mode)
        with self._lock:
            if not isinstance(self.machine.state, Idle):
                self.logger.log("Start ignored", {"state": self.machine.state.name})
                return False

        try:
            plan = self.plan_journey(origin, mode, duration, preset)
        except EngineError as e:
            if not self._fail_start(str(e)):
                # Another start won the race; its session stays untouched
                return False
            raise
        candidates = self._load_candidates(plan)

        with self._lock:
            if not isinstance(self.machine.state, Idle):
                self.logger.log("Start ignored", {"state": self.machine.state.name})
                return False
            now = self.clock()
            plan = dataclasses.replace(plan, start_timestamp=now)
            self.machine.start(plan)
            self._scheduler = POIDiscoveryScheduler(candidates)
            self._speed_model = SpeedModel(mode, plan.transit_stops,
                                           rng=random.Random(self.synthesizer.seed),
                                           config=self.config)
            self._discovered = []
            self.pending_summary = None
            self.position = self.machine.position(now)
            self.speed = SpeedReading(speed=self._speed_model.speed,
                                      next_stop=self._speed_model.next_stop)
            self._last_state_log = now

            self.logger.set_journey(plan.id)
            self.logger.log("Journey started", {
                "id": plan.id,
                "mode": mode.value,
                "duration": plan.duration,
                "total_distance": round(plan.total_distance, 1),
                "route_points": len(plan.route),
                "transit_stops": len(plan.transit_stops or ()),
                "poi_candidates": self._scheduler.pending,
                "seed": self.synthesizer.seed,
            })
            self._emit("state", self.machine.state)
            self._start_timers()
        return True

    def plan_journey(self, origin: Optional[Coordinate], mode, duration: float,
                     preset: Optional[PresetLocation] = None) -> JourneyPlan:
        """Build a plan without starting it. The origin falls back to the preset's coordinate."""
        mode = TransportMode(mode)
        if origin is None and preset is not None:
            origin = preset.coordinate
        if not is_valid_coordinate(origin):
            raise LocationUnavailable()

        distance = mode.speed_mps(self.config) * duration
        destination = self.synthesizer.pick_destination(origin, distance)
        stop_names = preset.transit_stations if preset else None
        route = self.synthesizer.synthesize(origin, destination, mode, stop_names)
        try:
            return JourneyPlan(
                id=uuid.uuid4().hex,
                start=origin,
                destination=destination,
                route=route.coordinates,
                total_distance=route.total_distance,
                duration=float(duration),
                transport_mode=mode,
                start_timestamp=self.clock(),
                transit_stops=route.transit_stops,
                start_name=preset.name if preset else None,
            )
        except ValueError as e:
            raise RouteSynthesisFailed(str(e)) from e

    def _fail_start(self, reason: str) -> bool:
        """Move an idle engine to `failed`. False if a session started meanwhile."""
        with self._lock:
            if not isinstance(self.machine.state, Idle):
                self.logger.log("Start failure ignored", {"reason": reason, "state": self.machine.state.name})
                return False
            self.machine.fail(reason)
            self.logger.log("Journey failed", {"reason": reason})
            self._emit("state", self.machine.state)
            return True

    def _load_candidates(self, plan: JourneyPlan) -> list[CandidatePOI]:
        try:
            return self.catalog.candidates_for(plan)
        except Exception as e:
            # Discovery is optional; the journey runs without POIs
            self.logger.log("POI catalog failed", {"error": repr(e)})
            return []

    def pause(self) -> bool:
        with self._lock:
            now = self.clock()
            if isinstance(self.machine.state, Active):
                self._refresh(now)
            accepted = self.machine.pause(now)
            if accepted:
                self._stop_timers()
                self.position = self.machine.position(now)
                self.speed = dataclasses.replace(self.speed, speed=0.0) if self.speed else None
                self.logger.log("Journey paused", self.get_state())
                self._emit("state", self.machine.state)
            else:
                self._finish_if_terminal(now)
            return accepted

    def resume(self) -> bool:
        with self._lock:
            now = self.clock()
            accepted = self.machine.resume(now)
            if accepted:
                self.position = self.machine.position(now)
                self.logger.log("Journey resumed", {"total_paused": round(self.machine.clock.total_paused, 1)})
                self._emit("state", self.machine.state)
                self._start_timers()
            return accepted

    def cancel(self) -> bool:
        """Stop the journey early. Resolves to `completed` if progress already reached 1.0."""
        with self._lock:
            now = self.clock()
            if isinstance(self.machine.state, Active):
                self._refresh(now)
            accepted = self.machine.stop(now)
            if accepted:
                self._finish_if_terminal(now)
            return accepted

    stop = cancel

    def fail(self, reason: str) -> bool:
        """Report an unrecoverable error from the host"""
        with self._lock:
            if not self.machine.fail(reason):
                return False
            self._stop_timers()
            self.position = None
            self.logger.log("Journey failed", {"reason": reason})
            self._emit("state", self.machine.state)
            return True

    def take_summary(self) -> Optional[JourneySummary]:
        """Consume a terminal state: returns its summary (None for `failed`) and goes back to idle"""
        with self._lock:
            if not self.machine.state.terminal:
                return None
            summary = self.pending_summary
            self.pending_summary = None
            self.machine.reset()
            self._scheduler = None
            self._speed_model = None
            self._discovered = []
            self.position = None
            self.speed = None
            self.logger.set_journey(None)
            self._emit("state", self.machine.state)
            return summary

    def close(self):
        with self._lock:
            self._stop_timers()

    # -- ticks -------------------------------------------------------------

    def tick(self, generation: Optional[int] = None) -> Optional[VirtualPosition]:
        """Recompute position, discover POIs and complete the journey when due"""
        with self._lock:
            if generation is not None and generation != self._generation:
                return None
            if not isinstance(self.machine.state, Active):
                return None
            now = self.clock()
            try:
                position = self._refresh(now)
                if self.machine.evaluate(now):
                    self._finish_if_terminal(now)
                return position
            except Exception as e:
                # Unrecoverable: keep the failure as state rather than a dead timer thread
                self.logger.log("Tick failed", {"error": repr(e)})
                self.fail(f"Tick failed: {e}")
                return None

    def speed_tick(self, generation: Optional[int] = None) -> Optional[SpeedReading]:
        """Refresh the cosmetic speed. Never touches progress."""
        with self._lock:
            if generation is not None and generation != self._generation:
                return None
            if not isinstance(self.machine.state, Active) or self._speed_model is None:
                return None
            distance = self.position.distance_traveled if self.position else 0.0
            reading = self._speed_model.update(distance)
            self.speed = reading
            if reading.arrived_stop:
                self.logger.log("Arrived at stop", {
                    "stop": reading.arrived_stop,
                    "next_stop": reading.next_stop,
                    "direction": reading.direction,
                })
                self._emit("stop", reading)
            self._emit("speed", reading)
            return reading

    def _refresh(self, now: float) -> VirtualPosition:
        position = self.machine.position(now)
        self.position = position
        for poi in self._scheduler.evaluate(position.progress, now):
            self._discovered.append(poi)
            self.logger.log("Discovered POI", {"name": poi.name, "category": poi.category,
                                                "progress": round(position.progress, 4)})
            self._emit("poi", poi)
        self._emit("position", position)

        if now - self._last_state_log >= self.config["log_interval"]:
            self.logger.log("STATE", self.get_state())
            self._last_state_log = now
        return position

    def _finish_if_terminal(self, now: float):
        """Stop timers and assemble the summary once a session has ended"""
        state = self.machine.state
        if not state.terminal or self.pending_summary is not None or self.machine.plan is None:
            return
        self._stop_timers()
        final = self.machine.position(now)
        # Crossed-but-unfired thresholds still count on the way out
        for poi in self._scheduler.evaluate(final.progress, now):
            self._discovered.append(poi)
            self._emit("poi", poi)
        self.pending_summary = self.assembler.assemble(
            state, final, self.machine.active_elapsed(now), self._discovered, now)
        self.position = None
        self.speed = None
        self.logger.log(f"Journey {state.name}", {
            "progress": round(final.progress, 4),
            "actual_duration": round(self.machine.active_elapsed(now), 1),
            "pois": len(self._discovered),
        })
        self._emit("state", state)
        self._emit("summary", self.pending_summary)

    # -- timers ------------------------------------------------------------

    def _start_timers(self):
        self._stop_timers()
        if not self.run_timers:
            return
        generation = self._generation
        self._position_task = PeriodicTask(
            self.config["position_tick_interval"], lambda: self.tick(generation), "wayfarer-position")
        self._speed_task = PeriodicTask(
            self.config["speed_tick_interval"], lambda: self.speed_tick(generation), "wayfarer-speed")
        self._position_task.start()
        self._speed_task.start()

    def _stop_timers(self):
        # Bumping the generation invalidates any tick already waiting on the lock
        self._generation += 1
        for task in (self._position_task, self._speed_task):
            if task:
                task.stop()
        self._position_task = None
        self._speed_task = None
