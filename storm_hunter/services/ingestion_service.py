from __future__ import annotations

import asyncio
import logging
from datetime import datetime, timezone
from pathlib import Path

from sqlalchemy.ext.asyncio import AsyncSession

from storm_hunter.core.errors import ConfigurationError
from storm_hunter.repositories.station_repository import StationRepository
from storm_hunter.schemas.ingestion import StationIngestionResponse
from storm_hunter.services.sources.isd_history import load_catalog

logger = logging.getLogger(__name__)


class IngestionService:
    """
    Loads the ISD station history into the database.

    Observation shards are not ingested: they stay on disk and are streamed
    by the storm search.
    """

    def __init__(self, db: AsyncSession):
        self.db = db
        self.station_repo = StationRepository(db)

    async def import_catalog(self, path: Path) -> StationIngestionResponse:
        """
        Parse `path` and upsert every station.

        Raises:
            ConfigurationError: the file does not exist.
            DataFormatError: a row could not be parsed; nothing is written.
        """
        path = Path(path)
        if not path.is_file():
            raise ConfigurationError(f"Station history file not found: {path}")

        # Parse everything first so a bad row aborts before any write.
        catalog = await asyncio.to_thread(load_catalog, path)
        counts = await self.station_repo.upsert_stations(catalog.values())
        logger.info(
            "Imported %s: %d created, %d updated",
            path.name, counts["created"], counts["updated"],
        )

        return StationIngestionResponse(
            source=path.name,
            imported_at=datetime.now(timezone.utc),
            stations_read=len(catalog),
            stations_created=counts["created"],
            stations_updated=counts["updated"],
        )
