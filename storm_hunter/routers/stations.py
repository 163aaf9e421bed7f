from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.ext.asyncio import AsyncSession

from storm_hunter.core.db import get_db
from storm_hunter.repositories.station_repository import StationRepository
from storm_hunter.schemas.stations import StationListResponse, StationOut
from storm_hunter.services.distance import GeoPoint
from storm_hunter.services.station_selector import stations_within

router = APIRouter(prefix="/stations", tags=["Stations"])


@router.get(
    "",
    response_model=StationListResponse,
    summary="List or search stations",
    description=(
        "Returns stations stored in the catalog.\n\n"
        "- Optionally filter by FIPS `country`.\n"
        "- With `latitude`, `longitude` and `radius` (meters), only stations within the "
        "radius are returned, nearest first, with their distance. `elevation` defaults to 0. "
        "Stations without a full location are never returned by a radius search."
    ),
)
async def list_stations(
    country: Optional[str] = Query(default=None, description="Filter by FIPS country code, e.g. 'US'"),
    latitude: Optional[float] = Query(default=None, ge=-90, le=90),
    longitude: Optional[float] = Query(default=None, ge=-180, le=180),
    elevation: float = Query(default=0.0, description="Meters"),
    radius: Optional[float] = Query(default=None, ge=0, description="Meters"),
    limit: int = Query(default=200, ge=1, le=5000),
    offset: int = Query(default=0, ge=0),
    db: AsyncSession = Depends(get_db),
) -> StationListResponse:
    """
    List stored stations, or search them around a point.
    """
    repo = StationRepository(db)

    geo = (latitude, longitude, radius)
    if all(v is None for v in geo):
        items = await repo.list_stations(country=country, limit=limit, offset=offset)
        total = await repo.count_stations(country=country)
        return StationListResponse(
            items=[StationOut.model_validate(x) for x in items],
            total=total,
        )

    if any(v is None for v in geo):
        raise HTTPException(
            status_code=400,
            detail="Provide latitude, longitude and radius together",
        )

    catalog = await repo.list_all()
    if country:
        catalog = [station for station in catalog if station.country == country]
    matches = stations_within(GeoPoint(latitude, longitude, elevation), radius, catalog)

    return StationListResponse(
        items=[
            StationOut.model_validate(station).model_copy(update={"distance": d})
            for station, d in matches[offset:offset + limit]
        ],
        total=len(matches),
    )
