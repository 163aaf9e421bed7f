from typing import Iterable, List, Set, Tuple

from storm_hunter.models.station import Station
from storm_hunter.services.distance import GeoPoint, distance


def station_point(station: Station) -> GeoPoint:
    return GeoPoint(station.latitude, station.longitude, station.elevation)


def stations_within(
    target: GeoPoint,
    radius: float,
    catalog: Iterable[Station],
) -> List[Tuple[Station, float]]:
    """
    Stations whose distance to `target` is at most `radius` meters.

    Stations missing latitude, longitude or elevation are skipped.

    Returns:
        `(station, distance)` pairs ordered by distance, then identifier.
    """
    matches = []
    for station in catalog:
        if not station.has_location:
            continue
        d = distance(target, station_point(station))
        if d <= radius:
            matches.append((station, d))
    matches.sort(key=lambda pair: (pair[1], pair[0].identifier))
    return matches


def select_stations(target: GeoPoint, radius: float, catalog: Iterable[Station]) -> Set[str]:
    """Identifiers of the stations within `radius` meters of `target`."""
    return {station.identifier for station, _ in stations_within(target, radius, catalog)}
