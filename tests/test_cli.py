import pytest

from storm_hunter.cli import build_parser, main
from storm_hunter.services.report import HEADER

GALVESTON_ROW = "2008,9,13,5,35.0,722429-12975,GALVESTON SCHOLES FIELD,US,TX,+29.270,-094.864,+0016.8"
HOUSTON_ROW = "2008,9,13,5,40.0,722430-12960,HOUSTON INTERCONTINENTAL AP,US,TX,+29.980,-095.360,+0029.0"


def cli_args(history, data_dir, *extra):
    return ["--history", str(history), "--data-dir", str(data_dir), "--log-level", "WARNING", *extra]


def test_cli_writes_report(storm_dataset, tmp_path):
    history, data_dir = storm_dataset
    output = tmp_path / "out" / "results.txt"

    code = main(cli_args(history, data_dir, "--output", str(output)))

    assert code == 0
    assert output.read_text(encoding="utf-8").splitlines() == [",".join(HEADER), GALVESTON_ROW, HOUSTON_ROW]


def test_cli_stdout(storm_dataset, capsys):
    history, data_dir = storm_dataset

    code = main(cli_args(history, data_dir, "--output", "-", "--workers", "1"))

    assert code == 0
    assert capsys.readouterr().out.splitlines()[1:] == [GALVESTON_ROW, HOUSTON_ROW]


def test_cli_larger_delta_finds_nothing(storm_dataset, capsys):
    history, data_dir = storm_dataset

    code = main(cli_args(history, data_dir, "--output", "-", "--delta", "10"))

    assert code == 0
    assert capsys.readouterr().out.splitlines() == [",".join(HEADER)]


@pytest.mark.parametrize(
    "extra",
    [
        ["--radius", "-1"],
        ["--delta", "0"],
        ["--workers", "0"],
        ["--data-dir", "/does/not/exist"],
        ["--history", "/does/not/exist.csv"],
    ],
)
def test_cli_configuration_errors(storm_dataset, tmp_path, extra):
    history, data_dir = storm_dataset

    code = main(cli_args(history, data_dir, "--output", str(tmp_path / "r.txt"), *extra))

    assert code == 1
    assert not (tmp_path / "r.txt").exists()


def test_cli_malformed_shard(storm_dataset, tmp_path):
    history, data_dir = storm_dataset
    (data_dir / "722429-12975-2009").write_text("2009 01 01 00 x\n")

    code = main(cli_args(history, data_dir, "--output", str(tmp_path / "r.txt")))

    assert code == 1


def test_parser_rejects_out_of_range_latitude(capsys):
    with pytest.raises(SystemExit):
        build_parser().parse_args(["--latitude", "91"])
    assert "latitude must be within" in capsys.readouterr().err


def test_cli_corrupt_gzip_shard(storm_dataset, tmp_path):
    history, data_dir = storm_dataset
    (data_dir / "722429-12975-2009.gz").write_bytes(b"not gzip at all")

    code = main(cli_args(history, data_dir, "--output", str(tmp_path / "r.txt")))

    assert code == 1
    assert not (tmp_path / "r.txt").exists()
