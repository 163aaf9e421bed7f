from sqlalchemy.engine import make_url
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, create_async_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from storm_hunter.core.config import settings


def make_engine(url: str) -> AsyncEngine:
    """
    Build the async engine for the station catalog.

    An in-memory SQLite URL gets a single shared connection, otherwise
    every new connection would see an empty database.
    """
    parsed = make_url(url)
    if parsed.get_backend_name() == "sqlite" and parsed.database in (None, "", ":memory:"):
        return create_async_engine(url, poolclass=StaticPool)
    return create_async_engine(url, pool_pre_ping=True)


# ---------------------------------------------------------------------
# Engine and session factory
# ---------------------------------------------------------------------

engine: AsyncEngine = make_engine(settings.database_url)

# Loaded stations stay usable after commit, including from the worker
# threads of the storm pipeline.
AsyncSessionLocal = sessionmaker(
    bind=engine,
    class_=AsyncSession,
    expire_on_commit=False,
)


async def get_db() -> AsyncSession:
    """
    FastAPI dependency yielding one `AsyncSession` per request.
    """
    async with AsyncSessionLocal() as session:
        yield session
