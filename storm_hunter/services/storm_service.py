from __future__ import annotations

import logging
import warnings
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass
from typing import Dict, FrozenSet, Iterable, List, Sequence, Set, Tuple

from storm_hunter.core.errors import ConfigurationError, EmptySelectionWarning
from storm_hunter.models.station import Station
from storm_hunter.repositories.shard_repository import Shard, ShardRepository
from storm_hunter.services.distance import GeoPoint
from storm_hunter.services.outlier_extractor import (
    OutlierCandidate,
    compute_threshold,
    filter_outliers,
    rank_candidates,
)
from storm_hunter.services.sources.isd_lite import ObservationRecord
from storm_hunter.services.station_selector import select_stations
from storm_hunter.services.wind_statistics import WindStatistics, shard_statistics

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class OutlierReport:
    """Everything one storm search produced, in report order."""

    target: GeoPoint
    radius: float
    delta: float
    station_ids: FrozenSet[str]
    shards: Tuple[Shard, ...]
    statistics: WindStatistics
    threshold: float
    candidates: List[OutlierCandidate]


def validate_parameters(radius: float, delta: float) -> None:
    """
    Raises:
        ConfigurationError: negative radius or non positive delta (NaN included).
    """
    if not radius >= 0:
        raise ConfigurationError(f"Search radius must be >= 0 meters, got {radius}")
    if not delta > 0:
        raise ConfigurationError(f"Outlier delta must be > 0, got {delta}")


def _shard_outliers(shard: Shard, threshold: float) -> List[ObservationRecord]:
    return list(filter_outliers(shard.records(), threshold))


def _shard_statistics(shard: Shard) -> WindStatistics:
    stats = shard_statistics(shard.records())
    logger.debug("Shard %s: %d wind speed samples", shard.shard_id, stats.count)
    return stats


class StormService:
    """
    Two-pass storm search over ISD-Lite shards.

    Pass 1 summarises wind speed per shard in worker threads and merges the
    partial statistics once every shard is done. Pass 2 reads the same
    shards again and keeps the records strictly above the frozen threshold.
    A failing shard fails the whole run.
    """

    def __init__(
        self,
        shard_repo: ShardRepository,
        catalog: Iterable[Station],
        max_workers: int = 4,
    ):
        self.shard_repo = shard_repo
        self.catalog: Dict[str, Station] = {station.identifier: station for station in catalog}
        self.max_workers = max_workers

    def select(self, target: GeoPoint, radius: float) -> Set[str]:
        identifiers = select_stations(target, radius, self.catalog.values())
        if not identifiers:
            logger.warning("No station within %.0f m of %s", radius, target)
            warnings.warn(
                f"no station within {radius} m of {tuple(target)}",
                EmptySelectionWarning,
                stacklevel=2,
            )
        return identifiers

    def compute_statistics(self, shards: Sequence[Shard]) -> WindStatistics:
        with ThreadPoolExecutor(max_workers=self.max_workers) as executor:
            # list() waits for every shard before merging
            partials = list(executor.map(_shard_statistics, shards))
        return WindStatistics.combine(partials)

    def extract(self, shards: Sequence[Shard], threshold: float) -> List[ObservationRecord]:
        with ThreadPoolExecutor(max_workers=self.max_workers) as executor:
            per_shard = list(executor.map(_shard_outliers, shards, [threshold] * len(shards)))
        return [record for records in per_shard for record in records]

    def find_outliers(
        self,
        target: GeoPoint,
        radius: float,
        delta: float,
    ) -> OutlierReport:
        """
        Run the full search around `target`.

        Raises:
            ConfigurationError: invalid radius or delta.
            DataFormatError: a shard line could not be parsed.
        """
        validate_parameters(radius, delta)

        identifiers = self.select(target, radius)
        shards = self.shard_repo.list_shards(identifiers)
        logger.info(
            "Selected %d station(s), %d shard(s) within %.0f m",
            len(identifiers), len(shards), radius,
        )

        stats = self.compute_statistics(shards)
        threshold = compute_threshold(stats, delta)
        logger.info(
            "Wind speed: %d samples, mean %.3f m/s, threshold %.3f m/s",
            stats.count, stats.mean, threshold,
        )

        records = self.extract(shards, threshold)
        logger.info("Found %d storm candidate(s)", len(records))

        return OutlierReport(
            target=target,
            radius=radius,
            delta=delta,
            station_ids=frozenset(identifiers),
            shards=tuple(shards),
            statistics=stats,
            threshold=threshold,
            candidates=rank_candidates(records, self.catalog),
        )
