from __future__ import annotations

import os
from dataclasses import dataclass
from datetime import date
from pathlib import Path

BASE_DIR = Path(__file__).resolve().parents[1]

RAW_DIR = BASE_DIR / "data" / "raw"
CURATED_DIR = BASE_DIR / "data" / "curated"
TRACE_FILE = BASE_DIR / "logs" / "run_trace.jsonl"

API_URL = os.getenv("WEATHER_API_URL", "http://localhost:4000/api/weather")
WEBHOOK_URL = os.getenv("WEBHOOK_URL", "")
HTTP_TIMEOUT = float(os.getenv("WEATHER_HTTP_TIMEOUT", "30"))

DEFAULT_START = date(2024, 1, 1)
DEFAULT_END = date(2024, 3, 31)

# City selector value meaning "no city constraint"
ALL_CITIES = "All"


@dataclass(frozen=True)
class City:
    name: str
    base_temp: float


CITIES = [
    City("Madrid", 16.0),
    City("Barcelona", 16.0),
    City("Valencia", 16.0),
    City("Sevilla", 20.0),
    City("Bilbao", 12.0),
]


@dataclass(frozen=True)
class AnalyticsConfig:
    """
    Tunables for the analytics stages.

    rolling_window      width of the centered moving average (odd, in days)
    top_n               how many cities the ranking keeps
    top_metric          measurement field the ranking uses
    histogram_edges     three ascending edges splitting cold/mild/warm/hot
    histogram_field     derived-measurement field that gets binned
    reference_pressure  sea-level pressure used for pressure_variation (hPa)
    precision           decimals for means, indices and percent change
    ratio_precision     decimals for temp/humidity ratio
    """

    rolling_window: int = 7
    top_n: int = 3
    top_metric: str = "temperature"
    histogram_edges: tuple[float, float, float] = (10.0, 20.0, 30.0)
    histogram_field: str = "temperature"
    reference_pressure: float = 1013.0
    precision: int = 1
    ratio_precision: int = 2


DEFAULT_CONFIG = AnalyticsConfig()
