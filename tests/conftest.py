import gzip
import os
from datetime import date

# Must be set before storm_hunter.core.config is imported.
os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite:///:memory:")

import pytest
import pytest_asyncio
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import sessionmaker

from storm_hunter.core.db import get_db, make_engine
from storm_hunter.main import app
from storm_hunter.models import Base, Station

TEST_DB_URL = "sqlite+aiosqlite:///:memory:"

HISTORY_HEADER = '"USAF","WBAN","STATION NAME","CTRY","STATE","ICAO","LAT","LON","ELEV(M)","BEGIN","END"'

# Houston area and one far away station (New York, LaGuardia)
HOUSTON = ("722430", "12960", "HOUSTON INTERCONTINENTAL AP", "US", "TX", "KIAH", "+29.980", "-095.360", "+0029.0", "19730101", "20180514")
GALVESTON = ("722429", "12975", "GALVESTON SCHOLES FIELD", "US", "TX", "KGLS", "+29.270", "-094.864", "+0016.8", "19730101", "20180514")
LAGUARDIA = ("725030", "14732", "LA GUARDIA AIRPORT", "US", "NY", "KLGA", "+40.779", "-073.880", "+0003.4", "19730101", "20180514")
NOWHERE = ("999999", "00001", "UNKNOWN LOCATION", "US", "TX", "", "", "-095.000", "+0010.0", "20000101", "20180514")


def isd_line(year, month, day, hour, wind_speed=-9999, air_temperature=215, wind_direction=180):
    """One fixed-width ISD-Lite line; wind speed is given in tenths of m/s."""
    values = [air_temperature, 180, 10150, wind_direction, wind_speed, 4, 0, -9999]
    return f"{year:4d} {month:02d} {day:02d} {hour:02d}" + "".join(f"{v:6d}" for v in values)


def history_row(columns):
    return ",".join(f'"{c}"' for c in columns)


@pytest.fixture
def write_shard(tmp_path):
    """
    Write an ISD-Lite shard into `tmp_path / "data"` and return its path.
    """
    data_dir = tmp_path / "data"
    data_dir.mkdir(exist_ok=True)

    def _write(name, lines, compress=False):
        text = "\n".join(lines) + "\n"
        path = data_dir / name
        if compress:
            with gzip.open(path, "wt", encoding="utf-8") as fh:
                fh.write(text)
        else:
            path.write_text(text, encoding="utf-8")
        return path

    return _write


@pytest.fixture
def write_history(tmp_path):
    """
    Write an isd-history.csv with the given rows and return its path.
    """
    def _write(rows, name="isd-history.csv"):
        path = tmp_path / name
        path.write_text("\n".join([HISTORY_HEADER] + [history_row(r) for r in rows]) + "\n", encoding="utf-8")
        return path

    return _write


@pytest.fixture
def station_factory():
    def _make(identifier, latitude=None, longitude=None, elevation=None, **kwargs):
        usaf, wban = identifier.split("-")
        return Station(
            identifier=identifier,
            usaf=usaf,
            wban=wban,
            name=kwargs.get("name"),
            country=kwargs.get("country"),
            state=kwargs.get("state"),
            icao=kwargs.get("icao"),
            latitude=latitude,
            longitude=longitude,
            elevation=elevation,
            begin=kwargs.get("begin", date(2000, 1, 1)),
            end=kwargs.get("end", date(2018, 1, 1)),
        )

    return _make


@pytest.fixture
def storm_dataset(write_shard, write_history):
    """
    Two Houston-area stations with a storm hour on 2008-09-13 05:00, a far
    station with an even stronger wind and a station without latitude.

    Wind speeds of the selected stations: 24 x 4.0 and 24 x 6.0 m/s, plus
    40.0 (Houston) and 35.0 (Galveston); threshold for delta 3 is ~25.9 m/s.
    """
    calm = [4 * 10 if hour % 2 else 6 * 10 for hour in range(24)]

    write_shard(
        "722430-12960-2008.gz",
        [isd_line(2008, 8, 1, hour, wind) for hour, wind in enumerate(calm)]
        + [isd_line(2008, 9, 13, 5, 400)],
        compress=True,
    )
    write_shard(
        "722429-12975-2008",
        [isd_line(2008, 9, 13, 5, 350)]
        + [isd_line(2008, 8, 1, hour, wind) for hour, wind in enumerate(calm)]
        + [isd_line(2008, 8, 2, 0)],
    )
    write_shard("725030-14732-2008", [isd_line(2008, 9, 13, 5, 1000), isd_line(2008, 9, 13, 6, 10)])
    write_shard("999999-00001-2008", [isd_line(2008, 9, 13, 5, 900), isd_line(2008, 9, 13, 6, 10)])
    write_shard("README.txt", ["not a shard"])

    history = write_history([HOUSTON, GALVESTON, LAGUARDIA, NOWHERE])
    return history, history.parent / "data"


# ---------------------------------------------------------------------
# Database / API fixtures
# ---------------------------------------------------------------------

@pytest_asyncio.fixture
async def test_engine():
    """
    Create an in-memory SQLite async engine with all tables for one test.
    """
    engine = make_engine(TEST_DB_URL)

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield engine
    await engine.dispose()


@pytest_asyncio.fixture
async def db_session(test_engine):
    """
    Provide a fresh AsyncSession for each test.
    """
    TestingSessionLocal = sessionmaker(
        bind=test_engine,
        class_=AsyncSession,
        expire_on_commit=False,
    )

    async with TestingSessionLocal() as session:
        yield session


@pytest.fixture
def test_app(db_session):
    """
    Return the FastAPI app with get_db overridden to use the test session.
    """
    async def override_get_db():
        yield db_session

    app.dependency_overrides[get_db] = override_get_db
    yield app
    app.dependency_overrides.clear()
