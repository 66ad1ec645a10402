"""
Geodesy helpers: NMEA coordinate conversion and great circle distance.
"""

import math

EARTH_RADIUS_M = 6371000.0


def nmea_to_degrees(value: float) -> float:
    """
    Convert an NMEA DDMM.MMMM / DDDMM.MMMM value to decimal degrees.

    Degrees occupy every integer digit except the last two, which belong to
    the minutes: 4807.038 -> 48 + 7.038 / 60.
    """
    degrees = int(value / 100.0)
    minutes = value - degrees * 100.0
    return degrees + minutes / 60.0


def haversine_distance(lat1: float, lon1: float, lat2: float, lon2: float) -> float:
    """
    Calculate great circle distance between two GPS points in meters.

    Args:
        lat1, lon1: First point (decimal degrees)
        lat2, lon2: Second point (decimal degrees)

    Returns:
        Distance in meters (0.0 for identical points)
    """
    phi1 = math.radians(lat1)
    phi2 = math.radians(lat2)
    delta_phi = math.radians(lat2 - lat1)
    delta_lambda = math.radians(lon2 - lon1)

    a = (math.sin(delta_phi / 2) ** 2 +
         math.cos(phi1) * math.cos(phi2) * math.sin(delta_lambda / 2) ** 2)
    c = 2 * math.atan2(math.sqrt(a), math.sqrt(1 - a))

    return EARTH_RADIUS_M * c
