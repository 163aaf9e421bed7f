from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from typing import Iterable, Iterator, List, Mapping, Optional, Tuple

from storm_hunter.models.station import Station
from storm_hunter.services.sources.isd_lite import ObservationRecord
from storm_hunter.services.wind_statistics import WindStatistics

logger = logging.getLogger(__name__)

DEFAULT_DELTA = 3.0


@dataclass(frozen=True)
class OutlierCandidate:
    """A storm candidate: one hourly record joined with its station metadata."""

    record: ObservationRecord
    station: Optional[Station]


def candidate_key(record: ObservationRecord) -> Tuple[int, int, int, int, str]:
    # One record per station-hour, so the key is unique per candidate.
    return (record.year, record.month, record.day, record.hour, record.station_id)


def compute_threshold(stats: WindStatistics, delta: float = DEFAULT_DELTA) -> float:
    """
    Storm threshold `mean + delta * sample_stdev`.

    With fewer than two samples the standard deviation is undefined and the
    threshold is unreachable (`inf`): the run reports no candidates.
    """
    if stats.count < 2:
        logger.warning(
            "Only %d wind speed sample(s); standard deviation undefined, no outliers reported",
            stats.count,
        )
        return math.inf
    return stats.mean + delta * stats.sample_stdev()


def is_outlier(record: ObservationRecord, threshold: float) -> bool:
    return record.wind_speed is not None and record.wind_speed > threshold


def filter_outliers(records: Iterable[ObservationRecord], threshold: float) -> Iterator[ObservationRecord]:
    return (record for record in records if is_outlier(record, threshold))


def sort_records(records: Iterable[ObservationRecord]) -> List[ObservationRecord]:
    return sorted(records, key=candidate_key)


def attach_stations(
    records: Iterable[ObservationRecord],
    catalog: Mapping[str, Station],
) -> List[OutlierCandidate]:
    """Join each record with its station, keeping the record order."""
    return [OutlierCandidate(record, catalog.get(record.station_id)) for record in records]


def rank_candidates(
    records: Iterable[ObservationRecord],
    catalog: Mapping[str, Station],
) -> List[OutlierCandidate]:
    """Sort outlier records by time then station and join their metadata."""
    return attach_stations(sort_records(records), catalog)
