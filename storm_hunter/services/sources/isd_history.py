"""
Integrated Surface Database station history (`isd-history.csv`).

Columns: USAF, WBAN, STATION NAME, CTRY, STATE, ICAO, LAT, LON, ELEV(M),
BEGIN, END. Every field is quoted; an empty field means the metadata is
not available. BEGIN and END are `YYYYMMDD`.
"""

from __future__ import annotations

import csv
import logging
from datetime import date, datetime
from pathlib import Path
from typing import IO, Dict, Iterator, List, Optional

from storm_hunter.core.errors import DataFormatError
from storm_hunter.models.station import Station

logger = logging.getLogger(__name__)

COLUMN_COUNT = 11
DATE_FORMAT = "%Y%m%d"


def make_identifier(usaf: str, wban: str) -> str:
    return f"{usaf}-{wban}"


def _text(column: str) -> Optional[str]:
    column = column.strip()
    return column or None


def _number(column: str) -> Optional[float]:
    column = column.strip()
    return float(column) if column else None


def _date(column: str) -> date:
    return datetime.strptime(column.strip(), DATE_FORMAT).date()


def parse_row(row: List[str], source: str, line_number: int) -> Station:
    """
    Build a transient `Station` from one CSV row.

    Raises:
        DataFormatError: wrong column count, bad number or bad date.
    """
    if len(row) != COLUMN_COUNT:
        raise DataFormatError(
            source, line_number, f"expected {COLUMN_COUNT} columns, found {len(row)}"
        )
    usaf, wban = row[0].strip(), row[1].strip()
    try:
        return Station(
            identifier=make_identifier(usaf, wban),
            usaf=usaf,
            wban=wban,
            name=_text(row[2]),
            country=_text(row[3]),
            state=_text(row[4]),
            icao=_text(row[5]),
            latitude=_number(row[6]),
            longitude=_number(row[7]),
            elevation=_number(row[8]),
            begin=_date(row[9]),
            end=_date(row[10]),
        )
    except ValueError as e:
        raise DataFormatError(source, line_number, str(e)) from e


def parse_catalog(fh: IO[str], source: str = "isd-history.csv") -> Iterator[Station]:
    reader = csv.reader(fh)
    next(reader, None)  # header
    for row in reader:
        if not row:
            continue
        yield parse_row(row, source, reader.line_num)


def load_catalog(path: Path) -> Dict[str, Station]:
    """
    Read the whole station history keyed by identifier.

    Duplicate identifiers keep the last row.
    """
    with path.open("r", encoding="utf-8", newline="") as fh:
        stations = {station.identifier: station for station in parse_catalog(fh, path.name)}
    logger.info("Loaded %d stations from %s", len(stations), path)
    return stations
