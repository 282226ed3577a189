import logging

import h5py
import numpy as np
import pytest

from displaymap.main import build_parser, main


@pytest.fixture(scope="module")
def saved_tables(tmp_path_factory):
    directory = tmp_path_factory.mktemp("tables")
    output = directory / "tables.rs"
    h5_path = directory / "tables.h5"
    status = main(["--output", str(output), "--save", str(h5_path), "--log-level", "WARNING"])
    return status, output, h5_path


def test_generates_rust_tables_and_report(saved_tables):
    status, output, _ = saved_tables
    text = output.read_text(encoding="utf-8")

    assert status == 0
    assert "pub const X_VIRTUAL_GRID: [[f64; 121]; 101] = [" in text
    assert "pub const Y_VIRTUAL_GRID: [[f64; 121]; 101] = [" in text
    assert "XVirtual=16, YVirtual=8, BoundBox=(" in text


def test_loads_saved_grids_and_emits_c(saved_tables, tmp_path):
    _, _, h5_path = saved_tables
    output = tmp_path / "tables.h"

    status = main(["--load", str(h5_path), "--language", "c", "--output", str(output), "--log-level", "WARNING"])

    assert status == 0
    assert "static const double X_VIRTUAL_GRID[101][121] = {" in output.read_text(encoding="utf-8")


def test_prints_to_stdout_without_output_file(saved_tables, capsys):
    _, _, h5_path = saved_tables

    assert main(["--load", str(h5_path), "--log-level", "ERROR"]) == 0
    assert "XVirtual=32, YVirtual=16" in capsys.readouterr().out


def test_missing_table_file_fails_with_status_1(tmp_path):
    assert main(["--load", str(tmp_path / "missing.h5"), "--log-level", "ERROR"]) == 1


def test_parser_rejects_unknown_method():
    with pytest.raises(SystemExit):
        build_parser().parse_args(["--method", "bicubic"])


def test_malformed_table_file_fails_with_status_1(tmp_path):
    path = tmp_path / "broken.h5"
    with h5py.File(path, "w") as f:
        f.attrs["physical_space"] = '{"name": "physical"}'
        grids = f.create_group("grids")
        grids.create_dataset("x", data=np.zeros((101, 121)))
        grids.create_dataset("y", data=np.zeros((101, 121)))

    assert main(["--load", str(path), "--log-level", "ERROR"]) == 1


def test_floor_applies_to_loaded_grids(saved_tables, tmp_path):
    _, _, h5_path = saved_tables
    output = tmp_path / "floored.rs"

    status = main(["--load", str(h5_path), "--floor", "--output", str(output), "--log-level", "WARNING"])

    assert status == 0
    lines = output.read_text(encoding="utf-8").splitlines()
    first_row = lines[lines.index("pub const X_VIRTUAL_GRID: [[f64; 121]; 101] = [") + 1]
    values = [float(v) for v in first_row.strip().strip("[],").split(",") if v.strip()]
    assert len(values) == 121
    assert all(v == int(v) for v in values)


def test_repeated_runs_close_the_previous_log_file(saved_tables, tmp_path):
    _, _, h5_path = saved_tables
    args = ["--load", str(h5_path), "--output", str(tmp_path / "t.rs"), "--log-level", "DEBUG"]

    assert main(args + ["--log-file", str(tmp_path / "first.log")]) == 0
    first_handler = logging.getLogger("displaymap").handlers[-1]
    assert main(args + ["--log-file", str(tmp_path / "second.log")]) == 0

    assert first_handler.stream is None
    assert "Logging initialized." in (tmp_path / "first.log").read_text(encoding="utf-8")
