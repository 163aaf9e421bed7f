from pathlib import Path

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.ext.asyncio import AsyncSession

from storm_hunter.core.config import settings
from storm_hunter.core.db import get_db
from storm_hunter.core.errors import ConfigurationError, DataFormatError
from storm_hunter.schemas.ingestion import StationIngestionRequest, StationIngestionResponse
from storm_hunter.services.ingestion_service import IngestionService

router = APIRouter(prefix="/ingestion", tags=["Ingestion"])


@router.post(
    "/stations",
    response_model=StationIngestionResponse,
    summary="Import the ISD station history",
    description=(
        "Parses `isd-history.csv` and upserts every station by `USAF-WBAN` identifier.\n\n"
        "- If `path` is omitted, the configured `HISTORY_FILE` is used.\n"
        "- A malformed row aborts the import (HTTP 422) and nothing is written."
    ),
)
async def ingest_stations(payload: StationIngestionRequest, db: AsyncSession = Depends(get_db)):
    """
    Station catalog ingestion endpoint.
    """
    service = IngestionService(db=db)
    try:
        return await service.import_catalog(Path(payload.path or settings.history_file))
    except ConfigurationError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except DataFormatError as e:
        raise HTTPException(status_code=422, detail=str(e))
