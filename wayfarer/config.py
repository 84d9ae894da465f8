"""Configuration settings for Wayfarer."""

CONFIG = {
    "position_tick_interval": 1.0,  # seconds
    "speed_tick_interval": 5.0,  # seconds
    "log_interval": 10,  # seconds between STATE log entries
    # Nominal speeds (km/h) - size the journey: distance = speed * duration
    "nominal_speeds": {
        "walking": 5.0,
        "cycling": 18.0,
        "driving": 50.0,
        "transit": 35.0,
    },
    # Cosmetic display speed ranges (km/h) - never used for progress
    "display_speed_ranges": {
        "walking": (3.0, 6.0),
        "cycling": (15.0, 25.0),
        "driving": (40.0, 100.0),
        "transit": (50.0, 90.0),
    },
    "driving_max_speed_change": 20.0,  # km/h per speed tick
    "transit_slowdown_radius": 200,  # meters - start slowing down for a stop
    "transit_arrival_radius": 50,  # meters - speed is 0 inside this radius
    # Route lattice
    "route_segment_length": 250,  # meters between lattice columns
    "route_min_columns": 4,
    "route_max_columns": 60,
    "route_lattice_rows": 3,  # rows each side of the centre line
    "route_lateral_ratio": 0.08,  # max lateral offset as a fraction of straight distance
    "route_max_lateral_offset": 2000,  # meters
    "route_along_jitter": 0.25,  # fraction of column spacing
    "route_weight_jitter": (1.0, 2.0),  # random multiplier range for edge weights
    "route_detour_factor": 1.15,  # expected route length / straight distance
    "transit_stop_spacing": 1200,  # meters between transit stops
    "transit_max_stops": 12,
    # POI discovery
    "poi_min_travel_distance": 200,  # meters - no discoveries this close to the start
    "poi_discovery_radius": 100,  # meters
    "poi_spacing": 600,  # meters of route per synthetic candidate
    "poi_max_candidates": 40,
    # Overpass
    "overpass_url": "https://overpass-api.de/api/interpreter",
    "overpass_cache_dir": "poi_cache",
    "overpass_cache_max_age": 7 * 24 * 3600,  # 7 days
    "overpass_sample_spacing": 150,  # meters between route sample points
    "overpass_max_samples": 60,
    "overpass_retry_time": 20.0,  # seconds
    # Summary
    "destination_placeholder": "Destination",
    "start_placeholder": "Current Location",
    "preset_match_tolerance": 0.01,  # degrees
}
