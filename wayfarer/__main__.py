#!/usr/bin/env python3
"""
Wayfarer - Focus sessions as virtual journeys

Usage:
    python -m wayfarer [minutes] [options]

Options:
    --mode MODE       walking, cycling, driving or transit (default: walking)
    --lat LAT         Starting latitude
    --lon LON         Starting longitude
    --preset NAME     Start from a preset city (e.g. "Tokyo")
    --seed N          Seed for route and POI generation
    --speedup FACTOR  Run the journey clock faster than real time
    --preview         Print the planned route without travelling
    --gpx FILE        Export route to GPX file
    --record FILE     Record the position trace to a JSON file
    --log FILE        Log file path (default: wayfarer_TIMESTAMP.log)
    --db FILE         History database (default: wayfarer_history.db)
    --overpass        Discover real OpenStreetMap places via Overpass
    --history         Show recent journeys and exit
    --reset           Erase all journey history and exit
    --list-presets    List preset cities and exit
"""

import argparse
import sys
import time
from datetime import datetime

from .engine import JourneyEngine
from .errors import EngineError
from .geo import bearing_between, bearing_to_compass
from .history import HistoryDB
from .logger import Logger
from .models import Coordinate, JourneySummary, TransportMode
from .poi import OverpassPOICatalog
from .presets import PRESETS, find_preset
from .route import RouteSynthesizer
from .state import Failed
from .trace import TraceRecorder, export_gpx


class ScaledClock:
    """Wall clock that runs `factor` times faster from the moment it is created"""

    def __init__(self, factor: float):
        self.factor = factor
        self.origin = time.time()

    def __call__(self) -> float:
        return self.origin + (time.time() - self.origin) * self.factor


def _print_presets():
    print("Preset cities:")
    for preset in PRESETS:
        stations = f" ({len(preset.transit_stations)} stations)" if preset.transit_stations else ""
        print(f"  {preset.name:<24} {preset.coordinate.lat:9.4f}, {preset.coordinate.lon:9.4f}{stations}")


def _print_history(history: HistoryDB):
    stats = history.get_stats()
    print("Journey history:")
    print(f"  Journeys: {stats['total_journeys']} ({stats['completed_journeys']} completed)")
    print(f"  Focus time: {stats['focus_minutes']:.0f} minutes")
    print(f"  Distance: {stats['total_distance_km']:.1f} km")
    print(f"  Places discovered: {stats['pois_discovered']}")
    recent = history.get_recent(10)
    if recent:
        print("\nRecent journeys:")
    for journey in recent:
        status = "completed" if journey["is_completed"] else f"{journey['progress']*100:.0f}%"
        print(f"  {journey['started_at'][:16]}  {journey['transport_mode']:<8} "
              f"{journey['start_name']} -> {journey['destination_name']} "
              f"({journey['distance_traveled']/1000:.2f} km, {status})")


def _print_plan(plan, config=None):
    bearing = bearing_between(plan.start.lat, plan.start.lon, plan.destination.lat, plan.destination.lon)
    print("\n" + "=" * 60)
    print(f"JOURNEY PLAN ({plan.transport_mode.value})")
    print("=" * 60)
    print(f"  From: {plan.start_name or 'Current Location'} ({plan.start.lat:.5f}, {plan.start.lon:.5f})")
    print(f"  Heading {bearing_to_compass(bearing)} to ({plan.destination.lat:.5f}, {plan.destination.lon:.5f})")
    mode = plan.transport_mode
    low, high = mode.display_speed_range(config)
    print(f"  Distance: {plan.total_distance/1000:.2f} km at {mode.speed_kmh(config):.0f} km/h "
          f"(cruising {low:.0f}-{high:.0f} km/h)")
    print(f"  Duration: {plan.duration/60:.0f} minutes, arriving {datetime.fromtimestamp(plan.end_timestamp):%H:%M}")
    print(f"  Route points: {len(plan.route)}")
    for stop in plan.transit_stops or ():
        print(f"    {stop.distance_along/1000:6.2f} km  {stop.name}")


def _print_summary(summary: JourneySummary):
    print("\nJourney summary:")
    print(f"  {summary.start_name} -> {summary.destination_name}")
    print(f"  Status: {'completed' if summary.is_completed else 'cancelled'}")
    print(f"  Distance: {summary.distance_traveled:.0f}m of {summary.total_distance:.0f}m")
    print(f"  Progress: {summary.final_progress*100:.1f}%")
    print(f"  Duration: {summary.actual_duration/60:.1f} of {summary.planned_duration/60:.0f} minutes")
    if summary.discovered_pois:
        print(f"  Discovered: {', '.join(poi.name for poi in summary.discovered_pois)}")


def _console_listener(event: str, payload: object):
    if event == "poi":
        print(f"  Discovered {payload.name} ({payload.category})")
    elif event == "stop":
        print(f"  Arrived at {payload.arrived_stop}, next stop {payload.next_stop}")
    elif event == "state":
        print(f"  [{payload.name}]")


def main():
    parser = argparse.ArgumentParser(
        description="Wayfarer - Focus sessions as virtual journeys"
    )
    parser.add_argument("minutes", type=float, nargs="?", default=25.0,
                        help="Focus duration in minutes (default: 25)")
    parser.add_argument("--mode", choices=[mode.value for mode in TransportMode], default="walking",
                        help="Transport mode (default: walking)")
    parser.add_argument("--lat", type=float, metavar="LAT",
                        help="Starting latitude")
    parser.add_argument("--lon", type=float, metavar="LON",
                        help="Starting longitude")
    parser.add_argument("--preset", metavar="NAME",
                        help="Start from a preset city")
    parser.add_argument("--seed", type=int,
                        help="Seed for route and POI generation")
    parser.add_argument("--speedup", type=float, default=1.0,
                        help="Journey clock multiplier (default: 1.0)")
    parser.add_argument("--preview", action="store_true",
                        help="Print the planned route without travelling")
    parser.add_argument("--gpx", metavar="FILE",
                        help="Export route to GPX file")
    parser.add_argument("--record", metavar="FILE",
                        help="Record position trace to JSON file")
    parser.add_argument("--log", metavar="FILE",
                        help="Log file path (default: wayfarer_TIMESTAMP.log)")
    parser.add_argument("--db", metavar="FILE", default="wayfarer_history.db",
                        help="History database (default: wayfarer_history.db)")
    parser.add_argument("--overpass", action="store_true",
                        help="Discover real places from OpenStreetMap")
    parser.add_argument("--history", action="store_true",
                        help="Show recent journeys and exit")
    parser.add_argument("--reset", action="store_true",
                        help="Erase all journey history and exit")
    parser.add_argument("--list-presets", action="store_true",
                        help="List preset cities and exit")

    args = parser.parse_args()

    # Validate lat/lon - must provide both or neither
    if (args.lat is None) != (args.lon is None):
        parser.error("--lat and --lon must be used together")
    if args.minutes <= 0:
        parser.error("minutes must be positive")
    if args.speedup <= 0:
        parser.error("--speedup must be positive")

    if args.list_presets:
        _print_presets()
        return

    if args.reset or args.history:
        history = HistoryDB(args.db)
        if args.reset:
            count = history.get_stats()["total_journeys"]
            history.reset_history()
            print(f"Cleared {count} journeys.")
        else:
            _print_history(history)
        history.close()
        return

    preset = None
    if args.preset:
        preset = find_preset(args.preset)
        if preset is None:
            parser.error(f"unknown preset: {args.preset} (see --list-presets)")

    origin = Coordinate(args.lat, args.lon) if args.lat is not None else None

    # Determine log path
    log_path = args.log
    if not log_path:
        timestamp = datetime.now().strftime("%Y%m%d_%H%M%S")
        log_path = f"wayfarer_{timestamp}.log"
    logger = Logger(log_path, echo=False)

    clock = ScaledClock(args.speedup) if args.speedup != 1.0 else time.time
    synthesizer = RouteSynthesizer(seed=args.seed)
    catalog = OverpassPOICatalog(logger=logger) if args.overpass else None
    engine = JourneyEngine(synthesizer, catalog, clock=clock, logger=logger)
    duration = args.minutes * 60

    if args.preview:
        try:
            plan = engine.plan_journey(origin, args.mode, duration, preset)
        except EngineError as e:
            print(f"Cannot plan journey: {e}")
            logger.close()
            sys.exit(1)
        _print_plan(plan, engine.config)
        if args.gpx:
            export_gpx(plan, args.gpx)
        logger.close()
        return

    recorder = TraceRecorder(args.record) if args.record else None
    if recorder:
        engine.add_listener(recorder.listener)
    engine.add_listener(_console_listener)

    try:
        engine.start(origin, args.mode, duration, preset)
    except EngineError as e:
        print(f"Cannot start journey: {e}")
        engine.take_summary()
        logger.close()
        sys.exit(1)

    plan = engine.plan
    _print_plan(plan, engine.config)
    print("\nTravelling... (Ctrl+C to stop)")

    history = HistoryDB(args.db)
    try:
        last_report = 0.0
        while not engine.state.terminal:
            time.sleep(0.5)
            now = time.time()
            position = engine.position
            if position and now - last_report >= 30:
                speed = engine.speed.speed if engine.speed else 0.0
                print(f"  {position.progress*100:5.1f}%  {position.distance_traveled/1000:.2f} km  "
                      f"{speed:.0f} km/h  {position.remaining_time/60:.1f} min left")
                last_report = now
    except KeyboardInterrupt:
        print("\nJourney stopped")
        engine.cancel()
    finally:
        engine.close()
        final_state = engine.state
        summary = engine.take_summary()
        if isinstance(final_state, Failed):
            print(f"Journey failed: {final_state.reason}")
        if summary:
            history.record_journey(summary)
            logger.log("Journey summary", summary.to_dict())
            _print_summary(summary)
            if args.gpx:
                export_gpx(plan, args.gpx, summary.discovered_pois)

        if recorder:
            recorder.save()

        history.close()
        logger.close()


if __name__ == "__main__":
    main()
