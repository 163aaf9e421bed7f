import asyncio
import io
from pathlib import Path

from fastapi import APIRouter, Depends, HTTPException
from fastapi.responses import PlainTextResponse
from sqlalchemy.ext.asyncio import AsyncSession

from storm_hunter.core.config import settings
from storm_hunter.core.db import get_db
from storm_hunter.core.errors import ConfigurationError, DataFormatError
from storm_hunter.repositories.shard_repository import ShardRepository
from storm_hunter.repositories.station_repository import StationRepository
from storm_hunter.schemas.outliers import OutlierQuery, OutlierReportResponse
from storm_hunter.services.distance import GeoPoint
from storm_hunter.services.report import build_response, write_csv
from storm_hunter.services.storm_service import OutlierReport, StormService

router = APIRouter(prefix="/outliers", tags=["Outliers"])


def _pick(value, default):
    return default if value is None else value


async def run_search(query: OutlierQuery, db: AsyncSession) -> OutlierReport:
    """
    Load the catalog, then run the blocking two-pass search in a worker thread.

    Raises:
        HTTPException: 400 on configuration errors, 422 on malformed shards.
    """
    target = GeoPoint(
        _pick(query.latitude, settings.target_latitude),
        _pick(query.longitude, settings.target_longitude),
        _pick(query.elevation, settings.target_elevation),
    )
    radius = _pick(query.radius, settings.search_radius)
    delta = _pick(query.delta, settings.outlier_delta)

    catalog = await StationRepository(db).list_all()
    try:
        shard_repo = ShardRepository(Path(query.data_directory or settings.data_directory))
        service = StormService(shard_repo, catalog, max_workers=settings.max_workers)
        return await asyncio.to_thread(service.find_outliers, target, radius, delta)
    except ConfigurationError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except DataFormatError as e:
        raise HTTPException(status_code=422, detail=str(e))


@router.post(
    "",
    response_model=OutlierReportResponse,
    summary="Find storm candidates",
    description=(
        "Selects stations within `radius` meters of the point, summarises the wind speed of "
        "all their shards, and returns every hourly record whose wind speed is strictly above "
        "`mean + delta * stdev`, ordered by time then station.\n\n"
        "- Omitted fields use the configured defaults.\n"
        "- With fewer than two wind speed samples the threshold is `null` and no record is returned."
    ),
)
async def find_outliers(query: OutlierQuery, db: AsyncSession = Depends(get_db)):
    report = await run_search(query, db)
    return build_response(report)


@router.post(
    "/csv",
    response_class=PlainTextResponse,
    summary="Find storm candidates (CSV report)",
)
async def find_outliers_csv(query: OutlierQuery, db: AsyncSession = Depends(get_db)):
    """
    Same search as `POST /outliers`, rendered as the CSV report.
    """
    report = await run_search(query, db)
    buffer = io.StringIO()
    write_csv(report.candidates, buffer)
    return PlainTextResponse(buffer.getvalue(), media_type="text/csv")
