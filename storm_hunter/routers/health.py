from pathlib import Path

from fastapi import APIRouter, Depends
from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncSession

from storm_hunter.core.config import settings
from storm_hunter.core.db import get_db

router = APIRouter(tags=["Health"])


@router.get(
    "/health",
    summary="Service health check",
    description=(
        "Checks whether the API service is running and returns basic service information. "
        "This endpoint **does not** verify database connectivity."
    ),
    response_description="Service status",
)
def health():
    """
    Basic health check for the API.

    **Returns:**
    - `status`: Always `ok` if the service is running
    - `service`: Service name (configured via `APP_NAME`)
    - `environment`: Current environment (configured via `ENVIRONMENT`)
    - `data_directory`: Whether the shard directory (`DATA_DIRECTORY`) exists
    """
    return {
        "status": "ok",
        "service": settings.app_name,
        "environment": settings.environment,
        "data_directory": "ok" if Path(settings.data_directory).is_dir() else "missing",
    }


@router.get(
    "/health/db",
    summary="Database health check",
    description=(
        "Checks whether the API can reach the station catalog database by executing "
        "`SELECT 1`. If this endpoint fails, the database is down or `DATABASE_URL` is wrong."
    ),
    response_description="Database connection status",
)
async def health_db(db: AsyncSession = Depends(get_db)):
    """
    Database connectivity health check.

    **Returns:**
    - `status`: `ok` if the query executes successfully
    - `db`: `ok` if the database connection is healthy
    """
    await db.execute(text("SELECT 1"))
    return {"status": "ok", "db": "ok"}
