from storm_hunter.models.base import Base
from storm_hunter.models.station import Station

__all__ = ["Base", "Station"]
