from datetime import date
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


class StationOut(BaseModel):
    """
    Public representation of a stored ISD station.
    """

    model_config = ConfigDict(from_attributes=True)

    identifier: str
    usaf: str
    wban: str
    name: Optional[str] = None
    country: Optional[str] = None
    state: Optional[str] = None
    icao: Optional[str] = None
    latitude: Optional[float] = None
    longitude: Optional[float] = None
    elevation: Optional[float] = None
    begin: date
    end: date
    distance: Optional[float] = Field(
        default=None,
        description="Distance in meters to the searched point, when searching by radius",
    )


class StationListResponse(BaseModel):
    """
    Response payload for listing stations with pagination.
    """

    items: list[StationOut] = Field(default_factory=list)
    total: int
