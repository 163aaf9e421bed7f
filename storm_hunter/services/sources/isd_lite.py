"""
ISD-Lite hourly observation records.

Each line of an ISD-Lite file holds twelve whitespace separated integers:

    year month day hour air_temp dew_point slp wind_dir wind_speed sky precip_1h precip_6h

Temperatures, pressure, wind speed and precipitation carry a scaling
factor of 10. Any field may hold the sentinel -9999 for "not measured";
the sentinel is mapped to `None` here and restored only by
`ObservationRecord.to_raw_fields`.
"""

from __future__ import annotations

import gzip
from dataclasses import dataclass
from pathlib import Path
from typing import IO, Iterator, List, Optional

from storm_hunter.core.errors import DataFormatError

MISSING_VALUE = -9999
SCALING_FACTOR = 10
FIELD_COUNT = 12


def _scaled(raw: int) -> Optional[float]:
    return None if raw == MISSING_VALUE else raw / SCALING_FACTOR


def _coded(raw: int) -> Optional[int]:
    return None if raw == MISSING_VALUE else raw


def _unscaled(value: Optional[float]) -> int:
    return MISSING_VALUE if value is None else int(round(value * SCALING_FACTOR))


def _uncoded(value: Optional[int]) -> int:
    return MISSING_VALUE if value is None else value


@dataclass(frozen=True)
class ObservationRecord:
    """
    One hourly observation of one station.

    `shard_id` is the source file name without extension
    (`722430-12960-2008`), `station_id` the catalog identifier
    (`722430-12960`).
    """

    shard_id: str
    station_id: str
    year: int
    month: int
    day: int
    hour: int
    air_temperature: Optional[float] = None  # Celsius
    dew_point: Optional[float] = None  # Celsius
    sea_level_pressure: Optional[float] = None  # hectopascals
    wind_direction: Optional[int] = None  # angular degrees, calm is 0
    wind_speed: Optional[float] = None  # meters per second
    sky_coverage: Optional[int] = None  # coded
    precipitation_1h: Optional[float] = None  # millimeters, trace is -0.1
    precipitation_6h: Optional[float] = None  # millimeters, trace is -0.1

    @classmethod
    def from_fields(cls, shard_id: str, station_id: str, raw: List[int]) -> "ObservationRecord":
        return cls(
            shard_id=shard_id,
            station_id=station_id,
            year=raw[0],
            month=raw[1],
            day=raw[2],
            hour=raw[3],
            air_temperature=_scaled(raw[4]),
            dew_point=_scaled(raw[5]),
            sea_level_pressure=_scaled(raw[6]),
            wind_direction=_coded(raw[7]),
            wind_speed=_scaled(raw[8]),
            sky_coverage=_coded(raw[9]),
            precipitation_1h=_scaled(raw[10]),
            precipitation_6h=_scaled(raw[11]),
        )

    def to_raw_fields(self) -> List[int]:
        """Raw ISD-Lite integers, with the missing sentinel restored."""
        return [
            self.year,
            self.month,
            self.day,
            self.hour,
            _unscaled(self.air_temperature),
            _unscaled(self.dew_point),
            _unscaled(self.sea_level_pressure),
            _uncoded(self.wind_direction),
            _unscaled(self.wind_speed),
            _uncoded(self.sky_coverage),
            _unscaled(self.precipitation_1h),
            _unscaled(self.precipitation_6h),
        ]


def shard_id_from_name(name: str) -> str:
    """Strip path and extension: `data/722430-12960-2008.gz` -> `722430-12960-2008`."""
    filename = Path(name).name
    return filename.rsplit(".", 1)[0] if "." in filename else filename


def station_id_from_shard(shard_id: str) -> Optional[str]:
    """Drop the trailing year: `722430-12960-2008` -> `722430-12960`."""
    if "-" not in shard_id:
        return None
    return shard_id.rsplit("-", 1)[0]


def parse_line(shard_id: str, station_id: str, line: str, line_number: int) -> ObservationRecord:
    """
    Parse one ISD-Lite line.

    Raises:
        DataFormatError: wrong field count or non integer field.
    """
    parts = line.split()
    if len(parts) != FIELD_COUNT:
        raise DataFormatError(
            shard_id, line_number, f"expected {FIELD_COUNT} fields, found {len(parts)}"
        )
    try:
        raw = [int(part) for part in parts]
    except ValueError as e:
        raise DataFormatError(shard_id, line_number, f"non integer field: {e}") from e
    return ObservationRecord.from_fields(shard_id, station_id, raw)


def parse_lines(shard_id: str, station_id: str, lines: IO[str]) -> Iterator[ObservationRecord]:
    for line_number, line in enumerate(lines, start=1):
        if not line.strip():
            continue
        yield parse_line(shard_id, station_id, line, line_number)


def open_shard(path: Path) -> IO[str]:
    """Open a shard as text, transparently decompressing `.gz` files."""
    if path.suffix == ".gz":
        return gzip.open(path, "rt", encoding="utf-8")
    return path.open("r", encoding="utf-8")


def read_records(path: Path) -> Iterator[ObservationRecord]:
    """
    Stream every record of one shard file.

    Raises:
        DataFormatError: the file name is not a shard name, a line is malformed,
            or the file is unreadable (bad encoding, corrupt gzip stream).
    """
    shard_id = shard_id_from_name(path.name)
    station_id = station_id_from_shard(shard_id)
    if station_id is None:
        raise DataFormatError(shard_id, None, "file name is not USAF-WBAN-YEAR")
    try:
        with open_shard(path) as fh:
            yield from parse_lines(shard_id, station_id, fh)
    except (OSError, EOFError, UnicodeDecodeError) as e:
        raise DataFormatError(shard_id, None, f"unreadable shard: {e}") from e
