import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Dict, Iterable, Iterator, List

from storm_hunter.core.errors import ConfigurationError
from storm_hunter.services.sources.isd_lite import (
    ObservationRecord,
    read_records,
    shard_id_from_name,
    station_id_from_shard,
)

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Shard:
    """One ISD-Lite file: the records of one station for one year."""

    path: Path
    shard_id: str
    station_id: str

    def records(self) -> Iterator[ObservationRecord]:
        return read_records(self.path)


class ShardRepository:
    """
    Repository for ISD-Lite shard files.

    Encapsulates the layout of the data directory (one
    `USAF-WBAN-YEAR[.gz]` file per station-year) so that services only
    deal with `Shard` objects and record streams.
    """

    def __init__(self, directory: Path):
        """
        Args:
            directory: Directory holding the shard files.

        Raises:
            ConfigurationError: the directory does not exist.
        """
        self.directory = Path(directory)
        if not self.directory.is_dir():
            raise ConfigurationError(f"Data directory not found: {self.directory}")

    def iter_shards(self) -> Iterator[Shard]:
        for path in self.directory.iterdir():
            if not path.is_file():
                continue
            shard_id = shard_id_from_name(path.name)
            station_id = station_id_from_shard(shard_id)
            if station_id is None:
                logger.debug("Ignoring non shard file %s", path.name)
                continue
            yield Shard(path=path, shard_id=shard_id, station_id=station_id)

    def list_shards(self, identifiers: Iterable[str]) -> List[Shard]:
        """
        Shards belonging to the given station identifiers, ordered by shard id.

        Raises:
            ConfigurationError: two files hold the same shard
                (`X-2008` next to `X-2008.gz`); reading both would count
                every sample twice.
        """
        wanted = set(identifiers)
        if not wanted:
            return []
        by_id: Dict[str, Shard] = {}
        for shard in self.iter_shards():
            if shard.station_id not in wanted:
                continue
            seen = by_id.get(shard.shard_id)
            if seen is not None:
                names = sorted([seen.path.name, shard.path.name])
                raise ConfigurationError(
                    f"Duplicate shard {shard.shard_id}: {names[0]} and {names[1]}"
                )
            by_id[shard.shard_id] = shard
        return [by_id[shard_id] for shard_id in sorted(by_id)]
