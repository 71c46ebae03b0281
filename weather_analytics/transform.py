"""
Core analytics stages over a filtered sequence of measurements.

Every function here is pure: it reads its input, never mutates it, and
returns fresh frozen values. Rounding is half-up,
floor(x * 10^d + 0.5) / 10^d, not Python's round-half-even.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from datetime import date
from typing import Callable, Dict, Hashable, Iterable, List, Sequence, Tuple, TypeVar

from .config import DEFAULT_CONFIG
from .errors import DivisionByZeroError, EmptyInputError
from .models import (
    AnalyticsFilter,
    CityAggregate,
    CityChange,
    DailyPoint,
    DerivedMeasurement,
    HistogramBin,
    Measurement,
    TopEntry,
)

T = TypeVar("T")
K = TypeVar("K", bound=Hashable)

RANKABLE_METRICS = ("temperature", "humidity", "pressure", "wind_speed", "precipitation")
BINNABLE_FIELDS = RANKABLE_METRICS + ("temp_humidity_ratio", "comfort_index", "pressure_variation")

HISTOGRAM_BINS = (
    ("cold", "Cold (<{0:g}°C)"),
    ("mild", "Mild ({0:g}-{1:g}°C)"),
    ("warm", "Warm ({1:g}-{2:g}°C)"),
    ("hot", "Hot (>={2:g}°C)"),
)


def round_half_up(value: float, digits: int = 0) -> float:
    # NaN and infinities pass through unrounded
    if not math.isfinite(value):
        return value
    factor = 10 ** digits
    return math.floor(value * factor + 0.5) / factor


def group_by(items: Iterable[T], key: Callable[[T], K]) -> Dict[K, Tuple[T, ...]]:
    """
    Group items by key. Keys keep first-appearance order and each group
    keeps the input order of its items.
    """
    groups: Dict[K, List[T]] = {}
    for item in items:
        groups.setdefault(key(item), []).append(item)
    return {k: tuple(v) for k, v in groups.items()}


def filter_records(records: Iterable[Measurement], flt: AnalyticsFilter) -> List[Measurement]:
    return [r for r in records if flt.matches(r)]


# ----------------------------
# Aggregation by city
# ----------------------------
@dataclass(frozen=True)
class _Totals:
    temperature: float = 0.0
    humidity: float = 0.0
    pressure: float = 0.0
    wind_speed: float = 0.0
    count: int = 0

    def add(self, r: Measurement) -> "_Totals":
        return _Totals(
            temperature=self.temperature + r.temperature,
            humidity=self.humidity + r.humidity,
            pressure=self.pressure + r.pressure,
            wind_speed=self.wind_speed + r.wind_speed,
            count=self.count + 1,
        )


def aggregate_by_city(records: Sequence[Measurement], precision: int = DEFAULT_CONFIG.precision) -> List[CityAggregate]:
    out: List[CityAggregate] = []
    for city, rows in group_by(records, lambda r: r.city).items():
        totals = _Totals()
        for r in rows:
            totals = totals.add(r)
        n = totals.count
        out.append(
            CityAggregate(
                city=city,
                avg_temperature=round_half_up(totals.temperature / n, precision),
                avg_humidity=round_half_up(totals.humidity / n, precision),
                avg_pressure=round_half_up(totals.pressure / n, precision),
                avg_wind_speed=round_half_up(totals.wind_speed / n, precision),
                records=n,
            )
        )
    return out


# ----------------------------
# Daily series + rolling mean
# ----------------------------
def daily_means(records: Sequence[Measurement]) -> List[Tuple[date, float, float]]:
    """(date, mean temperature, mean humidity) per day across all cities, oldest first."""
    days = group_by(records, lambda r: r.date)
    out = []
    for day in sorted(days):
        rows = days[day]
        avg_temp = sum(r.temperature for r in rows) / len(rows)
        avg_humidity = sum(r.humidity for r in rows) / len(rows)
        out.append((day, avg_temp, avg_humidity))
    return out


def daily_rolling_average(
    records: Sequence[Measurement],
    window: int = DEFAULT_CONFIG.rolling_window,
    precision: int = DEFAULT_CONFIG.precision,
) -> List[DailyPoint]:
    """
    Centered moving average of the daily mean temperature. Near the ends of
    the series the window shrinks instead of padding or wrapping.
    """
    if window < 1 or window % 2 == 0:
        raise ValueError(f"Rolling window must be a positive odd number, got {window}")

    radius = window // 2
    daily = daily_means(records)
    last = len(daily) - 1

    points: List[DailyPoint] = []
    for i, (day, avg_temp, avg_humidity) in enumerate(daily):
        lo = max(0, i - radius)
        hi = min(last, i + radius)
        span = daily[lo : hi + 1]
        rolling = sum(p[1] for p in span) / len(span)
        points.append(
            DailyPoint(
                date=day,
                avg_temp=avg_temp,
                avg_humidity=avg_humidity,
                rolling_avg_temp=round_half_up(rolling, precision),
            )
        )
    return points


# ----------------------------
# Per-record derived metrics
# ----------------------------
def derive_measurement(
    r: Measurement,
    reference_pressure: float = DEFAULT_CONFIG.reference_pressure,
    precision: int = DEFAULT_CONFIG.precision,
    ratio_precision: int = DEFAULT_CONFIG.ratio_precision,
) -> DerivedMeasurement:
    ratio = 0.0 if r.humidity == 0 else round_half_up(r.temperature / r.humidity, ratio_precision)
    return DerivedMeasurement(
        measurement=r,
        temp_humidity_ratio=ratio,
        comfort_index=round_half_up(r.temperature - r.humidity / 10, precision),
        pressure_variation=round_half_up(r.pressure - reference_pressure, precision),
    )


def derive_metrics(
    records: Sequence[Measurement],
    reference_pressure: float = DEFAULT_CONFIG.reference_pressure,
    precision: int = DEFAULT_CONFIG.precision,
    ratio_precision: int = DEFAULT_CONFIG.ratio_precision,
) -> List[DerivedMeasurement]:
    return [derive_measurement(r, reference_pressure, precision, ratio_precision) for r in records]


# ----------------------------
# Top N cities by extreme value
# ----------------------------
def top_n_by_max(
    records: Sequence[Measurement],
    n: int = DEFAULT_CONFIG.top_n,
    metric: str = DEFAULT_CONFIG.top_metric,
) -> List[TopEntry]:
    """
    Best record per city by `metric`, then the n cities with the highest
    best value. Only a strictly greater value replaces the current best, so
    the earliest record wins a tie inside a city; the stable sort keeps
    first-seen order between tied cities.
    """
    if n < 0:
        raise ValueError(f"n must be >= 0, got {n}")
    if metric not in RANKABLE_METRICS:
        raise ValueError(f"Unknown metric '{metric}', expected one of {RANKABLE_METRICS}")

    best: Dict[str, Measurement] = {}
    for r in records:
        current = best.get(r.city)
        if current is None or getattr(r, metric) > getattr(current, metric):
            best[r.city] = r

    ranked = sorted(best.values(), key=lambda r: getattr(r, metric), reverse=True)
    return [TopEntry(city=r.city, metric=metric, value=getattr(r, metric), date=r.date) for r in ranked[:n]]


# ----------------------------
# Percent change first -> last
# ----------------------------
def percent_change_by_city(records: Sequence[Measurement], precision: int = DEFAULT_CONFIG.precision) -> List[CityChange]:
    out: List[CityChange] = []
    for city, rows in group_by(records, lambda r: r.city).items():
        if len(rows) < 2:
            out.append(CityChange(city=city, change=0.0))
            continue

        ordered = sorted(rows, key=lambda r: r.date)
        first, last = ordered[0], ordered[-1]
        if first.temperature == 0:
            raise DivisionByZeroError(city)

        change = (last.temperature - first.temperature) / first.temperature * 100
        out.append(
            CityChange(
                city=city,
                change=round_half_up(change, precision),
                first_temp=first.temperature,
                last_temp=last.temperature,
                first_date=first.date,
                last_date=last.date,
            )
        )
    return out


# ----------------------------
# Histogram over fixed ranges
# ----------------------------
def histogram_bins(edges: Sequence[float] = DEFAULT_CONFIG.histogram_edges) -> List[HistogramBin]:
    """Empty cold/mild/warm/hot bins for the given three edges."""
    edges = tuple(float(e) for e in edges)
    if len(edges) != 3 or not (edges[0] < edges[1] < edges[2]):
        raise ValueError(f"Histogram edges must be three increasing values, got {edges}")

    bounds = [(None, edges[0]), (edges[0], edges[1]), (edges[1], edges[2]), (edges[2], None)]
    return [
        HistogramBin(name=name, label=label.format(*edges), lower=lo, upper=hi, count=0, percentage=0)
        for (name, label), (lo, hi) in zip(HISTOGRAM_BINS, bounds)
    ]


def temperature_histogram(
    derived: Sequence[DerivedMeasurement],
    edges: Sequence[float] = DEFAULT_CONFIG.histogram_edges,
    field: str = DEFAULT_CONFIG.histogram_field,
) -> List[HistogramBin]:
    if field not in BINNABLE_FIELDS:
        raise ValueError(f"Unknown histogram field '{field}', expected one of {BINNABLE_FIELDS}")
    bins = histogram_bins(edges)
    total = len(derived)
    if total == 0:
        raise EmptyInputError("Cannot compute histogram proportions over an empty filtered set")

    counts = [0] * len(bins)
    for item in derived:
        value = getattr(item, field)
        for i, b in enumerate(bins):
            if b.catches(value):
                counts[i] += 1
                break

    return [
        HistogramBin(
            name=b.name,
            label=b.label,
            lower=b.lower,
            upper=b.upper,
            count=c,
            percentage=int(round_half_up(c / total * 100)),
        )
        for b, c in zip(bins, counts)
    ]
