import gzip

import pytest

from storm_hunter.core.errors import DataFormatError
from storm_hunter.services.sources.isd_lite import (
    MISSING_VALUE,
    parse_line,
    read_records,
    shard_id_from_name,
    station_id_from_shard,
)

from conftest import isd_line


def test_parse_line_scales_and_maps_sentinel():
    line = "2008 09 13 05   256   239 10001    90   283     8    48 -9999"

    r = parse_line("722430-12960-2008", "722430-12960", line, 1)

    assert (r.year, r.month, r.day, r.hour) == (2008, 9, 13, 5)
    assert r.air_temperature == pytest.approx(25.6)
    assert r.dew_point == pytest.approx(23.9)
    assert r.sea_level_pressure == pytest.approx(1000.1)
    assert r.wind_direction == 90
    assert r.wind_speed == pytest.approx(28.3)
    assert r.sky_coverage == 8
    assert r.precipitation_1h == pytest.approx(4.8)
    assert r.precipitation_6h is None


def test_zero_wind_is_a_measurement_not_missing():
    calm = parse_line("s-1-2008", "s-1", isd_line(2008, 1, 1, 0, wind_speed=0, wind_direction=0), 1)
    missing = parse_line("s-1-2008", "s-1", isd_line(2008, 1, 1, 1), 2)

    assert calm.wind_speed == 0.0
    assert calm.wind_direction == 0
    assert missing.wind_speed is None


def test_raw_fields_restore_sentinel():
    line = isd_line(2008, 1, 1, 3, wind_speed=57)
    r = parse_line("s-1-2008", "s-1", line, 1)

    raw = r.to_raw_fields()

    assert raw == [int(v) for v in line.split()]
    assert raw[-1] == MISSING_VALUE


@pytest.mark.parametrize(
    "line, message",
    [
        ("2008 09 13 05   256   239 10001    90   283     8    48", "expected 12 fields, found 11"),
        ("2008 09 13 05   256   239 10001    90   2x3     8    48 -9999", "non integer field"),
    ],
)
def test_malformed_line_names_shard_and_line(line, message):
    with pytest.raises(DataFormatError) as exc:
        parse_line("722430-12960-2008", "722430-12960", line, 17)

    assert exc.value.source == "722430-12960-2008"
    assert exc.value.line_number == 17
    assert message in str(exc.value)
    assert str(exc.value).startswith("722430-12960-2008:17:")


def test_read_gzip_shard_skips_blank_lines(write_shard):
    path = write_shard(
        "722430-12960-2008.gz",
        [isd_line(2008, 1, 1, 0, 30), "", isd_line(2008, 1, 1, 1, 45)],
        compress=True,
    )

    records = list(read_records(path))

    assert [r.wind_speed for r in records] == [3.0, 4.5]
    assert {r.shard_id for r in records} == {"722430-12960-2008"}
    assert {r.station_id for r in records} == {"722430-12960"}


def test_read_plain_shard_reports_line_number(write_shard):
    path = write_shard("722430-12960-2009", [isd_line(2009, 1, 1, 0, 30), "garbage"])

    with pytest.raises(DataFormatError) as exc:
        list(read_records(path))

    assert exc.value.line_number == 2


def test_shard_names():
    assert shard_id_from_name("/data/2008/722430-12960-2008.gz") == "722430-12960-2008"
    assert shard_id_from_name("722430-12960-2008") == "722430-12960-2008"
    assert station_id_from_shard("722430-12960-2008") == "722430-12960"
    assert station_id_from_shard("README") is None


SHARD_GZIP = gzip.compress("".join(isd_line(2008, 1, 1, h, 30) + "\n" for h in range(24)).encode())
TRUNCATED_GZIP = SHARD_GZIP[: len(SHARD_GZIP) // 2]


@pytest.mark.parametrize(
    "name, content",
    [
        ("722430-12960-2008", isd_line(2008, 1, 1, 0, 30).encode() + b"\n\xff\xfe\n"),
        ("722430-12960-2008.gz", b"not gzip at all"),
        ("722430-12960-2008.gz", TRUNCATED_GZIP),
    ],
    ids=["bad-encoding", "not-gzip", "truncated-gzip"],
)
def test_unreadable_shard_names_the_shard(tmp_path, name, content):
    path = tmp_path / name
    path.write_bytes(content)

    with pytest.raises(DataFormatError) as exc:
        list(read_records(path))

    assert exc.value.source == "722430-12960-2008"
    assert exc.value.line_number is None
    assert "unreadable shard" in str(exc.value)
