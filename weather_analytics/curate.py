from __future__ import annotations

import logging
from pathlib import Path
from typing import Dict, List, Sequence

import pandas as pd

from .models import AnalyticsResult, Measurement
from .storage import write_json, write_parquet

logger = logging.getLogger(__name__)

MEASUREMENT_COLUMNS = ["date", "city", "temperature", "humidity", "pressure", "windSpeed", "precipitation"]

VIEW_COLUMNS: Dict[str, List[str]] = {
    "city_aggregates": ["city", "avgTemperature", "avgHumidity", "avgPressure", "avgWindSpeed", "records"],
    "daily_trend": ["date", "avgTemp", "avgHumidity", "rollingAvgTemp"],
    "derived": MEASUREMENT_COLUMNS + ["tempHumidityRatio", "comfortIndex", "pressureVariation"],
    "top_cities": ["city", "metric", "value", "date"],
    "changes": ["city", "change", "firstTemp", "lastTemp", "firstDate", "lastDate"],
    "histogram": ["name", "label", "lower", "upper", "count", "percentage"],
}

def measurements_to_frame(records: Sequence[Measurement]) -> pd.DataFrame:
    df = pd.DataFrame([r.to_dict() for r in records], columns=MEASUREMENT_COLUMNS)
    df["date"] = pd.to_datetime(df["date"])
    return df

def frame_to_measurements(df: pd.DataFrame) -> List[Measurement]:
    missing = [c for c in MEASUREMENT_COLUMNS if c not in df.columns]
    if missing:
        raise ValueError(f"Measurement frame missing columns: {missing}")

    df = df.copy()
    df["date"] = pd.to_datetime(df["date"]).dt.date.astype(str)
    return [Measurement.from_dict(row) for row in df[MEASUREMENT_COLUMNS].to_dict(orient="records")]

def result_to_frames(result: AnalyticsResult) -> Dict[str, pd.DataFrame]:
    """One DataFrame per computed view; views that were not computed are skipped."""
    frames: Dict[str, pd.DataFrame] = {}
    for name, items in result.views().items():
        if items is None:
            continue
        df = pd.DataFrame([x.to_dict() for x in items], columns=VIEW_COLUMNS[name])
        if "date" in df.columns:
            df["date"] = pd.to_datetime(df["date"])
        frames[name] = df
    return frames

def write_curated(result: AnalyticsResult, curated_dir: Path) -> Dict[str, Path]:
    paths: Dict[str, Path] = {}
    for name, df in result_to_frames(result).items():
        out_path = curated_dir / f"{name}.parquet"
        write_parquet(df, out_path)
        paths[name] = out_path

    bundle_path = curated_dir / "analytics.json"
    write_json(bundle_path, result.to_dict())
    paths["bundle"] = bundle_path

    logger.info("Wrote %d curated files to %s", len(paths), curated_dir)
    return paths
