import csv
from typing import IO, Iterable, List

from storm_hunter.schemas.outliers import (
    OutlierOut,
    OutlierReportResponse,
    finite_or_none,
)
from storm_hunter.services.outlier_extractor import OutlierCandidate
from storm_hunter.services.storm_service import OutlierReport

HEADER = [
    "YEAR",
    "MONTH",
    "DAY",
    "HOUR",
    "WIND SPEED(m/s)",
    "USAF-WBAN",
    "STATION_NAME",
    "COUNTRY",
    "STATE",
    "LATITUDE",
    "LONGITUDE",
    "ELEVATION(m)",
]


def _blank(value) -> str:
    return "" if value is None else str(value)


def csv_row(item: OutlierOut) -> List[str]:
    return [
        str(item.year),
        str(item.month),
        str(item.day),
        str(item.hour),
        format(item.wind_speed, ".1f"),
        item.station_id,
        _blank(item.station_name),
        _blank(item.country),
        _blank(item.state),
        _blank(item.latitude),
        _blank(item.longitude),
        _blank(item.elevation),
    ]


def write_csv(candidates: Iterable[OutlierCandidate], out: IO[str]) -> int:
    """
    Write the CSV report, header first, one line per candidate.

    Returns:
        Number of candidate lines written.
    """
    writer = csv.writer(out, lineterminator="\n")
    writer.writerow(HEADER)
    written = 0
    for candidate in candidates:
        writer.writerow(csv_row(OutlierOut.from_candidate(candidate)))
        written += 1
    return written


def build_response(report: OutlierReport) -> OutlierReportResponse:
    stats = report.statistics
    stdev = stats.sample_stdev() if stats.count >= 2 else None
    items = [OutlierOut.from_candidate(candidate) for candidate in report.candidates]
    return OutlierReportResponse(
        stations_selected=len(report.station_ids),
        shards_processed=len(report.shards),
        sample_count=stats.count,
        mean=stats.mean if stats.count else None,
        stdev=stdev,
        threshold=finite_or_none(report.threshold),
        items=items,
        total=len(items),
    )
