"""
Command line storm search.

Reads the station history and the ISD-Lite shards straight from disk (no
database), finds the hourly records whose wind speed is more than `delta`
standard deviations above the mean of every station within the radius,
and writes the CSV report.

    storm-hunter --data-dir 2008 --output results.txt
    storm-hunter --latitude 29.76 --longitude -95.37 --radius 600000 --output -
"""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path
from typing import Optional, Sequence

from storm_hunter.core.config import settings
from storm_hunter.core.errors import ConfigurationError, DataFormatError
from storm_hunter.core.logging import setup_logging
from storm_hunter.repositories.shard_repository import ShardRepository
from storm_hunter.services.distance import GeoPoint
from storm_hunter.services.report import write_csv
from storm_hunter.services.sources.isd_history import load_catalog
from storm_hunter.services.storm_service import OutlierReport, StormService

logger = logging.getLogger("storm_hunter.cli")


def latitude(value: str) -> float:
    v = float(value)
    if not -90 <= v <= 90:
        raise argparse.ArgumentTypeError(f"latitude must be within [-90, 90], got {value}")
    return v


def longitude(value: str) -> float:
    v = float(value)
    if not -180 <= v <= 180:
        raise argparse.ArgumentTypeError(f"longitude must be within [-180, 180], got {value}")
    return v


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="storm-hunter",
        description="Find hourly wind speed outliers (storms) near a point from ISD-Lite data.",
    )
    parser.add_argument("--data-dir", default=settings.data_directory,
                        help="directory of USAF-WBAN-YEAR[.gz] shards (default: %(default)s)")
    parser.add_argument("--output", default=settings.output_file,
                        help="CSV report path, '-' for stdout (default: %(default)s)")
    parser.add_argument("--history", default=settings.history_file,
                        help="ISD station history CSV (default: %(default)s)")
    parser.add_argument("--latitude", type=latitude, default=settings.target_latitude)
    parser.add_argument("--longitude", type=longitude, default=settings.target_longitude)
    parser.add_argument("--elevation", type=float, default=settings.target_elevation,
                        help="meters (default: %(default)s)")
    parser.add_argument("--radius", type=float, default=settings.search_radius,
                        help="search radius in meters (default: %(default)s)")
    parser.add_argument("--delta", type=float, default=settings.outlier_delta,
                        help="threshold is mean + delta * stdev (default: %(default)s)")
    parser.add_argument("--workers", type=int, default=settings.max_workers,
                        help="shard reader threads (default: %(default)s)")
    parser.add_argument("--log-level", default=settings.log_level)
    return parser


def run(args: argparse.Namespace) -> OutlierReport:
    history = Path(args.history)
    if not history.is_file():
        raise ConfigurationError(f"Station history file not found: {history}")
    if args.workers < 1:
        raise ConfigurationError(f"--workers must be >= 1, got {args.workers}")

    catalog = load_catalog(history)
    service = StormService(ShardRepository(Path(args.data_dir)), catalog.values(), max_workers=args.workers)
    report = service.find_outliers(GeoPoint(args.latitude, args.longitude, args.elevation), args.radius, args.delta)

    if args.output == "-":
        write_csv(report.candidates, sys.stdout)
    else:
        output = Path(args.output)
        output.parent.mkdir(parents=True, exist_ok=True)
        with output.open("w", encoding="utf-8", newline="") as fh:
            write_csv(report.candidates, fh)
        logger.info("Wrote %d storm candidate(s) to %s", len(report.candidates), output)
    return report


def main(argv: Optional[Sequence[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    setup_logging(args.log_level)
    try:
        run(args)
    except (ConfigurationError, DataFormatError) as e:
        logger.error("%s", e)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
