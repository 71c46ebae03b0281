"""
Tests for the command line runner.
"""

import json

import pytest

from weather_analytics import run
from weather_analytics.storage import write_json


@pytest.fixture
def out_args(tmp_path):
    return ["--out", str(tmp_path / "curated"), "--trace", str(tmp_path / "trace.jsonl"), "--no-webhook"]


def test_synthetic_run_writes_outputs(tmp_path, out_args, capsys):
    code = run.main(["--source", "synthetic", "--seed", "5", "--city", "Sevilla", *out_args])
    assert code == 0
    assert (tmp_path / "curated" / "analytics.json").exists()
    assert (tmp_path / "curated" / "daily_trend.parquet").exists()

    [line] = (tmp_path / "trace.jsonl").read_text(encoding="utf-8").splitlines()
    entry = json.loads(line)
    assert entry["source"] == "synthetic"
    assert entry["count"] == 450
    assert entry["filtered_count"] == 90

    out = capsys.readouterr().out
    assert "Sevilla" in out
    assert "Curated files:" in out


def test_file_source(tmp_path, out_args, payload_rows):
    path = tmp_path / "rows.json"
    write_json(path, payload_rows)
    assert run.main(["--source", "file", "--path", str(path), *out_args]) == 0


def test_file_source_requires_path(out_args):
    with pytest.raises(SystemExit) as exc:
        run.main(["--source", "file", *out_args])
    assert exc.value.code == 2


def test_reversed_range_is_a_usage_error(out_args, capsys):
    with pytest.raises(SystemExit) as exc:
        run.main(["--source", "synthetic", "--start", "2024-03-01", "--end", "2024-01-01", *out_args])
    assert exc.value.code == 2
    assert "after end" in capsys.readouterr().err


def test_analytics_errors_exit_with_one(tmp_path, out_args, capsys):
    code = run.main(["--source", "synthetic", "--seed", "1", "--city", "Lisboa", *out_args])
    assert code == 1
    assert "Analytics failed" in capsys.readouterr().err
    assert not (tmp_path / "trace.jsonl").exists()
