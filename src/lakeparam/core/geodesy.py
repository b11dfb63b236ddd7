"""
Geodetic helpers converting a grid's angular cell size to meters.
"""

import math

from lakeparam.config.defaults import DEFAULT_EARTH_RADIUS_KM
from lakeparam.core.grid import GridHeader


def great_circle_distance(
    lat1: float,
    lon1: float,
    lat2: float,
    lon2: float,
    radius_km: float = DEFAULT_EARTH_RADIUS_KM,
) -> float:
    """
    Distance in km between two points on a sphere (spherical law of cosines).

    Args:
        lat1: Latitude of the first point in decimal degrees
        lon1: Longitude of the first point in decimal degrees
        lat2: Latitude of the second point in decimal degrees
        lon2: Longitude of the second point in decimal degrees
        radius_km: Sphere radius

    Returns:
        Great-circle distance in km
    """
    phi1, theta1, phi2, theta2 = map(math.radians, (lat1, lon1, lat2, lon2))
    cosine = (
        math.cos(phi1) * math.cos(theta1) * math.cos(phi2) * math.cos(theta2)
        + math.cos(phi1) * math.sin(theta1) * math.cos(phi2) * math.sin(theta2)
        + math.sin(phi1) * math.sin(phi2)
    )
    # rounding can push the cosine just outside [-1, 1]
    cosine = min(1.0, max(-1.0, cosine))
    return radius_km * math.acos(cosine)


def cell_dimensions(header: GridHeader, radius_km: float = DEFAULT_EARTH_RADIUS_KM) -> tuple[float, float]:
    """
    Metric cell width and height at the centroid of a geographic grid.

    Returns:
        Tuple of (dx, dy) in meters
    """
    lat, lon = header.centroid
    dx = 1000.0 * great_circle_distance(lat, lon, lat, lon + header.cellsize, radius_km)
    dy = 1000.0 * great_circle_distance(lat, lon, lat + header.cellsize, lon, radius_km)
    return dx, dy
