"""History database for finished journeys."""

import json
import sqlite3
from datetime import datetime
from typing import Optional

from .models import JourneySummary


class HistoryDB:
    """SQLite database of journey summaries"""

    def __init__(self, db_path: str = "wayfarer_history.db"):
        self.conn = sqlite3.connect(db_path, check_same_thread=False)
        self._init_schema()

    def _init_schema(self):
        """Create database tables"""
        self.conn.execute("""
            CREATE TABLE IF NOT EXISTS journeys (
                id TEXT PRIMARY KEY,
                started_at TEXT,
                ended_at TEXT,
                actual_duration REAL,
                planned_duration REAL,
                transport_mode TEXT,
                start_name TEXT,
                start_lat REAL,
                start_lon REAL,
                destination_name TEXT,
                destination_lat REAL,
                destination_lon REAL,
                total_distance REAL,
                distance_traveled REAL,
                progress REAL,
                poi_count INTEGER,
                pois TEXT,
                is_completed INTEGER
            )
        """)
        self.conn.commit()

    def record_journey(self, summary: JourneySummary):
        """Store a finished journey. Recording the same journey twice keeps the latest."""
        pois = [poi.to_dict() for poi in summary.discovered_pois]
        self.conn.execute("""
            INSERT OR REPLACE INTO journeys (
                id, started_at, ended_at, actual_duration, planned_duration,
                transport_mode, start_name, start_lat, start_lon,
                destination_name, destination_lat, destination_lon,
                total_distance, distance_traveled, progress, poi_count, pois,
                is_completed
            ) VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?)
        """, (
            summary.journey_id,
            datetime.fromtimestamp(summary.start_time).isoformat(),
            datetime.fromtimestamp(summary.end_time).isoformat(),
            summary.actual_duration,
            summary.planned_duration,
            summary.transport_mode.value,
            summary.start_name,
            summary.start_coordinate.lat,
            summary.start_coordinate.lon,
            summary.destination_name,
            summary.destination_coordinate.lat,
            summary.destination_coordinate.lon,
            summary.total_distance,
            summary.distance_traveled,
            summary.final_progress,
            len(pois),
            json.dumps(pois),
            int(summary.is_completed),
        ))
        self.conn.commit()

    def get_recent(self, limit: int = 10) -> list[dict]:
        """Most recent journeys first"""
        cursor = self.conn.execute("""
            SELECT id, started_at, actual_duration, planned_duration, transport_mode,
                   start_name, destination_name, distance_traveled, progress,
                   poi_count, pois, is_completed
            FROM journeys ORDER BY started_at DESC LIMIT ?
        """, (limit,))
        journeys = []
        for row in cursor.fetchall():
            journeys.append({
                "id": row[0],
                "started_at": row[1],
                "actual_duration": row[2],
                "planned_duration": row[3],
                "transport_mode": row[4],
                "start_name": row[5],
                "destination_name": row[6],
                "distance_traveled": row[7],
                "progress": row[8],
                "poi_count": row[9],
                "pois": json.loads(row[10]),
                "is_completed": bool(row[11]),
            })
        return journeys

    def get_stats(self) -> dict:
        """Get overall journey stats"""
        cursor = self.conn.execute("""
            SELECT
                COUNT(*),
                SUM(is_completed),
                SUM(actual_duration),
                SUM(distance_traveled),
                SUM(poi_count)
            FROM journeys
        """)
        row = cursor.fetchone()
        return {
            "total_journeys": row[0] or 0,
            "completed_journeys": row[1] or 0,
            "focus_minutes": (row[2] or 0) / 60,
            "total_distance_km": (row[3] or 0) / 1000,
            "pois_discovered": row[4] or 0,
        }

    def get_journey(self, journey_id: str) -> Optional[dict]:
        for journey in self.get_recent(limit=-1):
            if journey["id"] == journey_id:
                return journey
        return None

    def reset_history(self):
        """Erase all journeys"""
        self.conn.execute("DELETE FROM journeys")
        self.conn.commit()

    def close(self):
        self.conn.close()
