"""Journey trace recording and GPX export."""

import json
import time
from datetime import datetime
from typing import Optional, Sequence
from xml.sax.saxutils import escape

from .models import DiscoveredPOI, JourneyPlan, VirtualPosition


class TraceRecorder:
    """Records the virtual position over a journey to a JSON file"""

    def __init__(self, record_path: str):
        self.record_path = record_path
        self.trace: list[dict] = []
        self.start_time = time.time()

    def record(self, position: Optional[VirtualPosition], state: str, speed: Optional[float] = None):
        """Record a position sample; a missing position is recorded too"""
        entry = {
            "elapsed": time.time() - self.start_time,
            "timestamp": time.time(),
            "state": state,
            "location": position.coordinate.to_dict() if position else None,
            "progress": position.progress if position else None,
            "distance_traveled": position.distance_traveled if position else None,
            "speed": speed,
        }
        self.trace.append(entry)

    def listener(self, event: str, payload: object):
        """Engine listener: records every position update"""
        if event == "position":
            self.record(payload, "active")

    def save(self):
        """Save trace to file"""
        with open(self.record_path, "w") as f:
            json.dump({
                "recorded_at": datetime.now().isoformat(),
                "trace": self.trace
            }, f, indent=2)
        print(f"Journey trace saved to {self.record_path} ({len(self.trace)} entries)")


def build_gpx(plan: JourneyPlan, pois: Sequence[DiscoveredPOI] = ()) -> str:
    """GPX document with the route as a track and start, stops, POIs and destination as waypoints"""
    timestamp = datetime.fromtimestamp(plan.start_timestamp).isoformat()

    waypoints = [{"lat": plan.start.lat, "lon": plan.start.lon, "name": plan.start_name or "Start"}]
    for stop in plan.transit_stops or ():
        waypoints.append({"lat": stop.coordinate.lat, "lon": stop.coordinate.lon, "name": stop.name})
    for poi in pois:
        waypoints.append({"lat": poi.coordinate.lat, "lon": poi.coordinate.lon, "name": poi.name})
    waypoints.append({"lat": plan.destination.lat, "lon": plan.destination.lon, "name": "Destination"})

    title = f"Wayfarer {plan.transport_mode.value.capitalize()} ({plan.total_distance/1000:.2f} km)"
    gpx_lines = [
        '<?xml version="1.0" encoding="UTF-8"?>',
        '<gpx version="1.1" creator="Wayfarer"',
        '     xmlns="http://www.topografix.com/GPX/1/1"',
        '     xmlns:xsi="http://www.w3.org/2001/XMLSchema-instance"',
        '     xsi:schemaLocation="http://www.topografix.com/GPX/1/1 http://www.topografix.com/GPX/1/1/gpx.xsd">',
        '  <metadata>',
        f'    <name>{escape(title)}</name>',
        f'    <time>{timestamp}</time>',
        '  </metadata>',
    ]

    for wp in waypoints:
        gpx_lines.append(f'  <wpt lat="{wp["lat"]:.6f}" lon="{wp["lon"]:.6f}">')
        gpx_lines.append(f'    <name>{escape(wp["name"])}</name>')
        gpx_lines.append('  </wpt>')

    gpx_lines.append('  <trk>')
    gpx_lines.append(f'    <name>{escape(title)}</name>')
    gpx_lines.append('    <trkseg>')
    for point in plan.route:
        gpx_lines.append(f'      <trkpt lat="{point.lat:.6f}" lon="{point.lon:.6f}"/>')
    gpx_lines.append('    </trkseg>')
    gpx_lines.append('  </trk>')
    gpx_lines.append('</gpx>')
    return '\n'.join(gpx_lines)


def export_gpx(plan: JourneyPlan, path: str, pois: Sequence[DiscoveredPOI] = ()):
    """Write the plan as a GPX file for OsmAnd or other map apps"""
    with open(path, 'w') as f:
        f.write(build_gpx(plan, pois))
    print(f"\nGPX route saved to: {path}")
    print(f"  {len(plan.route)} track points, {len(plan.transit_stops or ())} stops")
