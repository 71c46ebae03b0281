from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from typing import Any, Dict, List, Mapping, Optional

from .config import ALL_CITIES
from .errors import InvalidRangeError, MeasurementParseError

# Wire (JSON) key -> attribute name for the numeric measurement fields
NUMERIC_FIELDS = {
    "temperature": "temperature",
    "humidity": "humidity",
    "pressure": "pressure",
    "windSpeed": "wind_speed",
    "precipitation": "precipitation",
}


def parse_day(value: Any) -> date:
    """
    Accepts a date, a datetime or an ISO string ("2024-01-05" or
    "2024-01-05T00:00:00Z") and returns the calendar day.
    """
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if not isinstance(value, str):
        raise ValueError(f"Unsupported date value: {value!r}")

    text = value.strip()
    if len(text) == 10:
        return date.fromisoformat(text)
    # anything longer must be a full timestamp: day, then "T" or " ", then a time
    if len(text) < 10 or text[10] not in "T ":
        raise ValueError(f"Invalid ISO date: {value!r}")
    return datetime.fromisoformat(text.replace("Z", "+00:00")).date()


@dataclass(frozen=True)
class Measurement:
    date: date
    city: str
    temperature: float
    humidity: float
    pressure: float
    wind_speed: float
    precipitation: float

    @classmethod
    def from_dict(cls, payload: Mapping[str, Any]) -> "Measurement":
        missing = [k for k in ("date", "city", *NUMERIC_FIELDS) if k not in payload]
        if missing:
            raise MeasurementParseError(f"Measurement missing fields: {missing}")

        try:
            day = parse_day(payload["date"])
        except ValueError as e:
            raise MeasurementParseError(f"Invalid measurement date {payload['date']!r}") from e

        values: Dict[str, float] = {}
        for wire_key, attr in NUMERIC_FIELDS.items():
            raw = payload[wire_key]
            if isinstance(raw, bool):
                raise MeasurementParseError(f"Field '{wire_key}' is not numeric: {raw!r}")
            try:
                values[attr] = float(raw)
            except (TypeError, ValueError) as e:
                raise MeasurementParseError(f"Field '{wire_key}' is not numeric: {raw!r}") from e

        return cls(date=day, city=str(payload["city"]), **values)

    def to_dict(self) -> dict[str, Any]:
        return {
            "date": self.date.isoformat(),
            "city": self.city,
            "temperature": self.temperature,
            "humidity": self.humidity,
            "pressure": self.pressure,
            "windSpeed": self.wind_speed,
            "precipitation": self.precipitation,
        }


@dataclass(frozen=True)
class DerivedMeasurement:
    """A measurement plus the per-record ratio and index fields."""

    measurement: Measurement
    temp_humidity_ratio: float
    comfort_index: float
    pressure_variation: float

    @property
    def date(self) -> date:
        return self.measurement.date

    @property
    def city(self) -> str:
        return self.measurement.city

    @property
    def temperature(self) -> float:
        return self.measurement.temperature

    @property
    def humidity(self) -> float:
        return self.measurement.humidity

    @property
    def pressure(self) -> float:
        return self.measurement.pressure

    @property
    def wind_speed(self) -> float:
        return self.measurement.wind_speed

    @property
    def precipitation(self) -> float:
        return self.measurement.precipitation

    def to_dict(self) -> dict[str, Any]:
        out = self.measurement.to_dict()
        out.update(
            {
                "tempHumidityRatio": self.temp_humidity_ratio,
                "comfortIndex": self.comfort_index,
                "pressureVariation": self.pressure_variation,
            }
        )
        return out


@dataclass(frozen=True)
class CityAggregate:
    city: str
    avg_temperature: float
    avg_humidity: float
    avg_pressure: float
    avg_wind_speed: float
    records: int

    def to_dict(self) -> dict[str, Any]:
        return {
            "city": self.city,
            "avgTemperature": self.avg_temperature,
            "avgHumidity": self.avg_humidity,
            "avgPressure": self.avg_pressure,
            "avgWindSpeed": self.avg_wind_speed,
            "records": self.records,
        }


@dataclass(frozen=True)
class DailyPoint:
    date: date
    avg_temp: float
    avg_humidity: float
    rolling_avg_temp: float

    def to_dict(self) -> dict[str, Any]:
        return {
            "date": self.date.isoformat(),
            "avgTemp": self.avg_temp,
            "avgHumidity": self.avg_humidity,
            "rollingAvgTemp": self.rolling_avg_temp,
        }


@dataclass(frozen=True)
class TopEntry:
    city: str
    metric: str
    value: float
    date: date

    def to_dict(self) -> dict[str, Any]:
        return {
            "city": self.city,
            "metric": self.metric,
            "value": self.value,
            "date": self.date.isoformat(),
        }


@dataclass(frozen=True)
class CityChange:
    city: str
    change: float
    first_temp: Optional[float] = None
    last_temp: Optional[float] = None
    first_date: Optional[date] = None
    last_date: Optional[date] = None

    def to_dict(self) -> dict[str, Any]:
        out: dict[str, Any] = {"city": self.city, "change": self.change}
        if self.first_date is not None and self.last_date is not None:
            out.update(
                {
                    "firstTemp": self.first_temp,
                    "lastTemp": self.last_temp,
                    "firstDate": self.first_date.isoformat(),
                    "lastDate": self.last_date.isoformat(),
                }
            )
        return out


@dataclass(frozen=True)
class HistogramBin:
    name: str
    label: str
    lower: Optional[float]
    upper: Optional[float]
    count: int
    percentage: int

    def catches(self, value: float) -> bool:
        """
        Bins are tried lowest first, so a value belongs to the first bin whose
        upper edge it is below. The open top bin takes everything left over,
        NaN included.
        """
        return self.upper is None or value < self.upper

    def to_dict(self) -> dict[str, Any]:
        return {
            "name": self.name,
            "label": self.label,
            "lower": self.lower,
            "upper": self.upper,
            "count": self.count,
            "percentage": self.percentage,
        }


@dataclass(frozen=True)
class AnalyticsFilter:
    start: date
    end: date
    city: str = ALL_CITIES

    def __post_init__(self):
        if self.start > self.end:
            raise InvalidRangeError(
                f"Filter start {self.start.isoformat()} is after end {self.end.isoformat()}"
            )

    @classmethod
    def from_strings(cls, start: str, end: str, city: str = ALL_CITIES) -> "AnalyticsFilter":
        try:
            start_day = parse_day(start)
            end_day = parse_day(end)
        except ValueError as e:
            raise InvalidRangeError(f"Invalid filter date range: {start!r}..{end!r}") from e
        return cls(start=start_day, end=end_day, city=city)

    @property
    def all_cities(self) -> bool:
        return self.city == ALL_CITIES

    def matches(self, record: Measurement) -> bool:
        if not (self.start <= record.date <= self.end):
            return False
        return self.all_cities or record.city == self.city

    def to_dict(self) -> dict[str, Any]:
        return {"start": self.start.isoformat(), "end": self.end.isoformat(), "city": self.city}


@dataclass(frozen=True)
class AnalyticsResult:
    """
    Everything derived from one filtered snapshot. Stages that were not
    requested are left as None.
    """

    filter: AnalyticsFilter
    record_count: int
    city_aggregates: Optional[List[CityAggregate]] = None
    daily_trend: Optional[List[DailyPoint]] = None
    derived: Optional[List[DerivedMeasurement]] = None
    top_cities: Optional[List[TopEntry]] = None
    changes: Optional[List[CityChange]] = None
    histogram: Optional[List[HistogramBin]] = None

    def views(self) -> dict[str, Optional[list]]:
        return {
            "city_aggregates": self.city_aggregates,
            "daily_trend": self.daily_trend,
            "derived": self.derived,
            "top_cities": self.top_cities,
            "changes": self.changes,
            "histogram": self.histogram,
        }

    def to_dict(self) -> dict[str, Any]:
        out: dict[str, Any] = {"filter": self.filter.to_dict(), "recordCount": self.record_count}
        for name, items in self.views().items():
            out[name] = None if items is None else [x.to_dict() for x in items]
        return out
