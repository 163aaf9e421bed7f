from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field


class StationIngestionRequest(BaseModel):
    """
    Request body for importing the station history catalog.
    """

    path: Optional[str] = Field(
        default=None,
        description="Path to isd-history.csv (otherwise uses HISTORY_FILE).",
        examples=["isd-history.csv"],
    )


class StationIngestionResponse(BaseModel):
    """
    Response payload for a catalog import.
    """

    source: str = Field(..., description="Imported file name.")
    imported_at: datetime = Field(..., description="Import time (UTC).")
    stations_read: int = Field(..., description="Distinct stations found in the file.", examples=[29700])
    stations_created: int = Field(..., examples=[29650])
    stations_updated: int = Field(..., examples=[50])
