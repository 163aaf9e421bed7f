from typing import Dict, Iterable, List, Optional

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from storm_hunter.models.station import Station

UPDATABLE_COLUMNS = (
    "usaf",
    "wban",
    "name",
    "country",
    "state",
    "icao",
    "latitude",
    "longitude",
    "elevation",
    "begin",
    "end",
)


class StationRepository:
    """
    Repository for managing the persisted station catalog.

    This repository encapsulates all database operations related to
    `Station` entities, providing a clean abstraction over SQLAlchemy
    queries and avoiding direct database access from services or routers.
    """

    def __init__(self, db: AsyncSession):
        """
        Initialize the repository with an active database session.

        Args:
            db: Asynchronous SQLAlchemy session.
        """
        self.db = db

    async def list_all(self) -> List[Station]:
        """
        Return the whole catalog, used as input of the station selector.
        """
        stmt = select(Station).order_by(Station.identifier.asc())
        return list((await self.db.execute(stmt)).scalars().all())

    async def list_stations(
        self,
        country: Optional[str] = None,
        limit: int = 200,
        offset: int = 0,
    ) -> List[Station]:
        """
        List stations ordered by identifier, optionally filtered by country.
        """
        stmt = select(Station).order_by(Station.identifier.asc()).limit(limit).offset(offset)
        if country:
            stmt = stmt.where(Station.country == country)
        return list((await self.db.execute(stmt)).scalars().all())

    async def count_stations(self, country: Optional[str] = None) -> int:
        stmt = select(func.count(Station.id))
        if country:
            stmt = stmt.where(Station.country == country)
        return int((await self.db.execute(stmt)).scalar_one())

    async def upsert_stations(self, stations: Iterable[Station]) -> Dict[str, int]:
        """
        Insert or update stations keyed by identifier.

        Existing rows get every catalog column overwritten, new rows are
        added. The whole batch is committed once.

        Returns:
            Counts of `created` and `updated` stations.
        """
        existing = {station.identifier: station for station in await self.list_all()}
        created = updated = 0

        for station in stations:
            current = existing.get(station.identifier)
            if current is None:
                self.db.add(station)
                existing[station.identifier] = station
                created += 1
                continue
            for column in UPDATABLE_COLUMNS:
                setattr(current, column, getattr(station, column))
            updated += 1

        await self.db.flush()
        await self.db.commit()
        return {"created": created, "updated": updated}
