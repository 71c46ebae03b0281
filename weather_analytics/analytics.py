from __future__ import annotations

from typing import Iterable, Sequence

from .config import DEFAULT_CONFIG, AnalyticsConfig
from .models import AnalyticsFilter, AnalyticsResult, Measurement
from .transform import (
    aggregate_by_city,
    daily_rolling_average,
    derive_metrics,
    filter_records,
    percent_change_by_city,
    temperature_histogram,
    top_n_by_max,
)

ALL_STAGES = ("aggregates", "trend", "derived", "top_cities", "changes", "histogram")


def compute_analytics(
    records: Iterable[Measurement],
    flt: AnalyticsFilter,
    config: AnalyticsConfig = DEFAULT_CONFIG,
    stages: Sequence[str] = ALL_STAGES,
) -> AnalyticsResult:
    """
    Filter the records and run the requested stages over the filtered set.

    Each stage only sees the filtered snapshot; the histogram is built from
    the derived metrics, which are computed for it even when "derived" is not
    requested on its own. Stage errors (EmptyInputError, DivisionByZeroError)
    are raised to the caller as-is.
    """
    unknown = [s for s in stages if s not in ALL_STAGES]
    if unknown:
        raise ValueError(f"Unknown analytics stages: {unknown}, expected any of {ALL_STAGES}")

    snapshot = tuple(records)
    filtered = tuple(filter_records(snapshot, flt))
    wanted = set(stages)

    aggregates = aggregate_by_city(filtered, config.precision) if "aggregates" in wanted else None
    trend = daily_rolling_average(filtered, config.rolling_window, config.precision) if "trend" in wanted else None

    derived = None
    if "derived" in wanted or "histogram" in wanted:
        derived = derive_metrics(filtered, config.reference_pressure, config.precision, config.ratio_precision)

    top_cities = top_n_by_max(filtered, config.top_n, config.top_metric) if "top_cities" in wanted else None
    changes = percent_change_by_city(filtered, config.precision) if "changes" in wanted else None

    histogram = None
    if "histogram" in wanted:
        histogram = temperature_histogram(derived, config.histogram_edges, config.histogram_field)

    return AnalyticsResult(
        filter=flt,
        record_count=len(filtered),
        city_aggregates=aggregates,
        daily_trend=trend,
        derived=derived if "derived" in wanted else None,
        top_cities=top_cities,
        changes=changes,
        histogram=histogram,
    )
