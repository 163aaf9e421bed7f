import math
from typing import Optional

from pydantic import BaseModel, Field

from storm_hunter.services.outlier_extractor import OutlierCandidate


def format_latitude(value: Optional[float]) -> Optional[str]:
    return None if value is None else format(value, "+07.3f")


def format_longitude(value: Optional[float]) -> Optional[str]:
    return None if value is None else format(value, "+08.3f")


def format_elevation(value: Optional[float]) -> Optional[str]:
    return None if value is None else format(value, "+07.1f")


class OutlierQuery(BaseModel):
    """
    Request body for a storm search. Omitted fields use the configured defaults.
    """

    latitude: Optional[float] = Field(default=None, ge=-90, le=90, examples=[29.761993])
    longitude: Optional[float] = Field(default=None, ge=-180, le=180, examples=[-95.366302])
    elevation: Optional[float] = Field(default=None, description="Meters", examples=[12])
    radius: Optional[float] = Field(default=None, description="Search radius in meters", examples=[600000])
    delta: Optional[float] = Field(default=None, description="Threshold is mean + delta * stdev", examples=[3])
    data_directory: Optional[str] = Field(default=None, description="Override DATA_DIRECTORY")


class OutlierOut(BaseModel):
    """
    One storm candidate as shown in reports.

    Station metadata fields are `None` when unknown.
    """

    year: int
    month: int
    day: int
    hour: int
    wind_speed: float = Field(..., description="Wind speed in m/s, one decimal")
    station_id: str = Field(..., description="USAF-WBAN")
    station_name: Optional[str] = None
    country: Optional[str] = None
    state: Optional[str] = None
    latitude: Optional[str] = None
    longitude: Optional[str] = None
    elevation: Optional[str] = None

    @classmethod
    def from_candidate(cls, candidate: OutlierCandidate) -> "OutlierOut":
        record, station = candidate.record, candidate.station
        return cls(
            year=record.year,
            month=record.month,
            day=record.day,
            hour=record.hour,
            wind_speed=round(record.wind_speed, 1),
            station_id=record.station_id,
            station_name=station.name if station else None,
            country=station.country if station else None,
            state=station.state if station else None,
            latitude=format_latitude(station.latitude) if station else None,
            longitude=format_longitude(station.longitude) if station else None,
            elevation=format_elevation(station.elevation) if station else None,
        )


class OutlierReportResponse(BaseModel):
    """
    Response payload of a storm search.
    """

    stations_selected: int
    shards_processed: int
    sample_count: int
    mean: Optional[float] = None
    stdev: Optional[float] = None
    threshold: Optional[float] = Field(
        default=None,
        description="mean + delta * stdev; null when fewer than two samples exist",
    )
    items: list[OutlierOut] = Field(default_factory=list)
    total: int


def finite_or_none(value: float) -> Optional[float]:
    return value if math.isfinite(value) else None
