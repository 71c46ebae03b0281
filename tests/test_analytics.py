"""
Tests for the full analytics pipeline.
"""

import copy
import json
import math

import pytest

from weather_analytics.analytics import ALL_STAGES, compute_analytics
from weather_analytics.config import AnalyticsConfig
from weather_analytics.curate import measurements_to_frame
from weather_analytics.errors import EmptyInputError
from weather_analytics.ingest import load_measurements, parse_measurements
from weather_analytics.models import AnalyticsFilter
from weather_analytics.storage import write_parquet


@pytest.fixture
def january():
    return AnalyticsFilter.from_strings("2024-01-01", "2024-01-31")


def test_all_views_are_computed(sample_records, january):
    result = compute_analytics(sample_records, january)
    assert result.record_count == 6
    assert [a.city for a in result.city_aggregates] == ["Madrid", "Sevilla", "Bilbao"]
    assert len(result.daily_trend) == 3
    assert len(result.derived) == 6
    assert [t.city for t in result.top_cities] == ["Sevilla", "Madrid", "Bilbao"]
    assert [c.change for c in result.changes] == [40.0, 20.0, 0.0]
    assert [b.count for b in result.histogram] == [1, 3, 2, 0]
    assert [b.percentage for b in result.histogram] == [17, 50, 33, 0]


def test_repeated_calls_are_identical_and_leave_input_alone(sample_records, january):
    before = copy.deepcopy(sample_records)
    first = compute_analytics(sample_records, january)
    second = compute_analytics(sample_records, january)
    assert first == second
    assert first.to_dict() == second.to_dict()
    assert sample_records == before


def test_accepts_any_iterable(sample_records, january):
    assert compute_analytics(iter(sample_records), january) == compute_analytics(sample_records, january)


def test_city_filter_flows_into_every_view(sample_records):
    flt = AnalyticsFilter.from_strings("2024-01-01", "2024-01-31", "Madrid")
    result = compute_analytics(sample_records, flt)
    assert result.record_count == 3
    assert [c.city for c in result.changes] == ["Madrid"]
    assert [p.avg_temp for p in result.daily_trend] == [10.0, 12.0, 14.0]


def test_partial_stages(sample_records, january):
    result = compute_analytics(sample_records, january, stages=("aggregates",))
    assert result.city_aggregates is not None
    assert result.daily_trend is None
    assert result.histogram is None
    assert result.derived is None


def test_histogram_alone_still_uses_derived_metrics(sample_records, january):
    result = compute_analytics(sample_records, january, stages=("histogram",))
    assert result.derived is None
    assert sum(b.count for b in result.histogram) == 6


def test_unknown_stage_raises(sample_records, january):
    with pytest.raises(ValueError):
        compute_analytics(sample_records, january, stages=("aggregates", "forecast"))


def test_empty_filtered_set_fails_on_histogram(sample_records):
    flt = AnalyticsFilter.from_strings("2025-01-01", "2025-01-31")
    with pytest.raises(EmptyInputError):
        compute_analytics(sample_records, flt)

    stages = [s for s in ALL_STAGES if s != "histogram"]
    result = compute_analytics(sample_records, flt, stages=stages)
    assert result.record_count == 0
    assert result.city_aggregates == [] and result.daily_trend == [] and result.changes == []


def test_alternative_config(sample_records, january):
    config = AnalyticsConfig(top_n=1, rolling_window=1, histogram_edges=(0.0, 12.0, 22.0))
    result = compute_analytics(sample_records, january, config=config)
    assert [t.city for t in result.top_cities] == ["Sevilla"]
    assert [p.rolling_avg_temp for p in result.daily_trend] == [15.0, 10.0, 19.0]
    assert [b.count for b in result.histogram] == [0, 2, 3, 1]


def test_result_serializes_to_json(sample_records, january):
    payload = json.loads(json.dumps(compute_analytics(sample_records, january).to_dict()))
    assert payload["filter"] == {"start": "2024-01-01", "end": "2024-01-31", "city": "All"}
    assert payload["recordCount"] == 6
    assert payload["daily_trend"][0] == {
        "date": "2024-01-01",
        "avgTemp": 15.0,
        "avgHumidity": 45.0,
        "rollingAvgTemp": 14.7,
    }
    assert payload["changes"][0]["firstDate"] == "2024-01-01"


def test_nan_on_the_wire_flows_through_every_view(payload_rows, january):
    payload_rows[0]["temperature"] = "NaN"
    result = compute_analytics(parse_measurements(payload_rows), january)
    madrid = result.city_aggregates[0]
    assert math.isnan(madrid.avg_temperature)
    assert madrid.avg_humidity == 62.1
    assert math.isnan(result.daily_trend[0].avg_temp)
    assert [b.count for b in result.histogram] == [1, 0, 0, 1]


def test_null_cell_in_parquet_input_is_analysed(tmp_path, sample_records, january):
    df = measurements_to_frame(sample_records)
    df.loc[0, "humidity"] = None
    path = tmp_path / "measurements.parquet"
    write_parquet(df, path)

    result = compute_analytics(load_measurements(path), january)
    assert result.record_count == 6
    madrid, sevilla, bilbao = result.city_aggregates
    assert math.isnan(madrid.avg_humidity)
    assert madrid.avg_temperature == 12.0
    assert sevilla.avg_humidity == 37.5
    assert math.isnan(result.derived[0].comfort_index)
    assert [c.change for c in result.changes] == [40.0, 20.0, 0.0]
