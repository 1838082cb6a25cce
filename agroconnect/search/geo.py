"""Great-circle distance and location display helpers."""

from math import asin, cos, radians, sin, sqrt

EARTH_RADIUS_KM = 6371.0

# Approximate bounding box of Nigeria.
NIGERIA_BOUNDS = {"min_lat": 4.0, "max_lat": 14.0, "min_lng": 2.5, "max_lng": 14.5}

AVERAGE_SPEED_KMH = {"driving": 60, "transit": 30}


def calculate_distance(lat1: float, lng1: float, lat2: float, lng2: float) -> float:
    """Haversine distance in kilometers between two points given in degrees."""
    d_lat = radians(lat2 - lat1)
    d_lng = radians(lng2 - lng1)

    value = (
        sin(d_lat / 2) ** 2
        + cos(radians(lat1)) * cos(radians(lat2)) * sin(d_lng / 2) ** 2
    )

    arc = 2 * asin(sqrt(min(value, 1.0)))
    return EARTH_RADIUS_KM * arc


def validate_coordinates(lat: float, lng: float) -> bool:
    return -90 <= lat <= 90 and -180 <= lng <= 180


def is_within_nigeria(lat: float, lng: float) -> bool:
    return (
        NIGERIA_BOUNDS["min_lat"] <= lat <= NIGERIA_BOUNDS["max_lat"]
        and NIGERIA_BOUNDS["min_lng"] <= lng <= NIGERIA_BOUNDS["max_lng"]
    )


def format_distance(distance_km: float) -> str:
    """Human readable distance: metres below 1 km, one decimal below 10 km."""
    if distance_km < 1:
        return f"{round(distance_km * 1000)}m"
    if distance_km < 10:
        return f"{distance_km:.1f}km"
    return f"{round(distance_km)}km"


def estimate_travel_time(distance_km: float, mode: str = "driving") -> int:
    """Rough travel time in minutes."""
    speed = AVERAGE_SPEED_KMH.get(mode)
    if speed is None:
        raise ValueError(f"Unknown travel mode: {mode}")
    return round(distance_km / speed * 60)


def format_travel_time(minutes: int) -> str:
    if minutes < 60:
        return f"{minutes} min"
    hours, remaining = divmod(minutes, 60)
    return f"{hours}h {remaining}m" if remaining else f"{hours}h"
