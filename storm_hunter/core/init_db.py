from storm_hunter.core.db import engine
from storm_hunter.models import Base


async def init_db() -> None:
    """
    Create the station catalog table if it does not already exist.

    Notes:
    - This uses `Base.metadata.create_all`, which is suitable for
      development and prototyping.
    - Observation shards are never stored in the database; they are
      streamed from the data directory on every run.
    """
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
