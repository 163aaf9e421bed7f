from contextlib import asynccontextmanager

from fastapi import FastAPI

from storm_hunter.core.config import settings
from storm_hunter.core.init_db import init_db
from storm_hunter.core.logging import setup_logging
from storm_hunter.routers.health import router as health_router
from storm_hunter.routers.ingestion import router as ingestion_router
from storm_hunter.routers.outliers import router as outliers_router
from storm_hunter.routers.stations import router as stations_router


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Application lifespan context manager.

    On startup:
    - Configures logging from `LOG_LEVEL`.
    - Initializes the station catalog schema (development/MVP setup).
    """
    setup_logging(settings.log_level)
    await init_db()
    yield


def create_app() -> FastAPI:
    """
    Create and configure the FastAPI application.

    This factory function:
    - Initializes the FastAPI app with metadata and documentation endpoints.
    - Registers all API routers.
    - Applies the application lifespan handler.

    Returns:
        Configured FastAPI application instance.
    """
    app = FastAPI(
        title=settings.app_name,
        version="0.1.0",
        description="Storm hunter: ISD station catalog and wind speed outlier search",
        docs_url="/docs",
        redoc_url="/redoc",
        openapi_url="/openapi.json",
        lifespan=lifespan,
    )

    # Register API routers
    app.include_router(health_router)
    app.include_router(ingestion_router)
    app.include_router(stations_router)
    app.include_router(outliers_router)

    return app


# Application entry point
app = create_app()
