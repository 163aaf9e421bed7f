from math import atan2, cos, radians, sin, sqrt
from typing import NamedTuple

EARTH_RADIUS_KM = 6371


class GeoPoint(NamedTuple):
    latitude: float  # decimal degrees
    longitude: float  # decimal degrees
    elevation: float  # meters


def distance(a: GeoPoint, b: GeoPoint) -> float:
    """
    Distance in meters between two points given as latitude, longitude and elevation.

    The haversine great-circle distance and the elevation difference are
    combined as the legs of a right triangle. This is an approximation of a
    true 3-D distance; station selection depends on this exact number.
    """
    lat_distance = radians(b.latitude - a.latitude)
    lon_distance = radians(b.longitude - a.longitude)
    h = (
        sin(lat_distance / 2) * sin(lat_distance / 2)
        + cos(radians(a.latitude)) * cos(radians(b.latitude))
        * sin(lon_distance / 2) * sin(lon_distance / 2)
    )
    c = 2 * atan2(sqrt(h), sqrt(1 - h))
    surface = EARTH_RADIUS_KM * c * 1000

    height = a.elevation - b.elevation

    return sqrt(surface ** 2 + height ** 2)
