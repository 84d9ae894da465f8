"""Preset start locations around the world."""

from dataclasses import dataclass, field
from typing import Optional

from .config import CONFIG
from .models import Coordinate


@dataclass(frozen=True)
class PresetLocation:
    name: str
    coordinate: Coordinate
    country: str
    transit_stations: tuple[str, ...] = field(default_factory=tuple)


PRESETS = [
    PresetLocation("Tokyo, Japan", Coordinate(35.6762, 139.6503), "Japan", (
        "Shinjuku", "Yoyogi", "Harajuku", "Shibuya", "Ebisu", "Meguro",
        "Gotanda", "Osaki", "Shinagawa",
    )),
    PresetLocation("Seoul, South Korea", Coordinate(37.5665, 126.9780), "South Korea", (
        "City Hall", "Euljiro 1-ga", "Euljiro 3-ga", "Euljiro 4-ga",
        "Dongdaemun History & Culture Park", "Sindang", "Sangwangsimni",
    )),
    PresetLocation("Beijing, China", Coordinate(39.9042, 116.4074), "China", (
        "Xidan", "Tiananmen West", "Tiananmen East", "Wangfujing", "Dongdan",
        "Jianguomen", "Yong'anli", "Guomao",
    )),
    PresetLocation("Shanghai, China", Coordinate(31.2304, 121.4737), "China", (
        "Jing'an Temple", "West Nanjing Road", "People's Square",
        "East Nanjing Road", "Lujiazui", "Dongchang Road", "Century Avenue",
    )),
    PresetLocation("Nanjing, China", Coordinate(32.0603, 118.7969), "China"),
    PresetLocation("New York, USA", Coordinate(40.7128, -74.0060), "USA", (
        "Times Sq-42 St", "34 St-Penn Station", "28 St", "23 St", "18 St",
        "14 St", "Christopher St", "Houston St",
    )),
    PresetLocation("San Francisco, USA", Coordinate(37.7749, -122.4194), "USA"),
    PresetLocation("Los Angeles, USA", Coordinate(34.0522, -118.2437), "USA"),
    PresetLocation("London, UK", Coordinate(51.5074, -0.1278), "UK", (
        "King's Cross St. Pancras", "Euston", "Warren Street", "Oxford Circus",
        "Green Park", "Victoria", "Pimlico", "Vauxhall",
    )),
    PresetLocation("Paris, France", Coordinate(48.8566, 2.3522), "France", (
        "Châtelet", "Louvre-Rivoli", "Palais Royal", "Tuileries", "Concorde",
        "Champs-Élysées-Clemenceau", "Franklin D. Roosevelt", "George V",
    )),
    PresetLocation("Rome, Italy", Coordinate(41.9028, 12.4964), "Italy"),
    PresetLocation("Sydney, Australia", Coordinate(-33.8688, 151.2093), "Australia"),
]


def find_preset(name: str) -> Optional[PresetLocation]:
    """Case-insensitive lookup by full name or by city alone"""
    wanted = name.strip().lower()
    for preset in PRESETS:
        full = preset.name.lower()
        if wanted == full or wanted == full.split(",")[0]:
            return preset
    return None


def match_preset(coordinate: Coordinate, tolerance: Optional[float] = None) -> Optional[PresetLocation]:
    """Preset whose coordinate lies within `tolerance` degrees of the given one"""
    if tolerance is None:
        tolerance = CONFIG["preset_match_tolerance"]
    for preset in PRESETS:
        if (abs(preset.coordinate.lat - coordinate.lat) < tolerance and
                abs(preset.coordinate.lon - coordinate.lon) < tolerance):
            return preset
    return None
