from __future__ import annotations

import logging
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, List, Tuple

import requests

from .config import API_URL, HTTP_TIMEOUT
from .curate import frame_to_measurements
from .errors import MeasurementParseError
from .models import Measurement
from .storage import read_json, read_parquet, write_json

logger = logging.getLogger(__name__)

def _now_utc_stamp() -> str:
    return datetime.now(timezone.utc).strftime("%Y%m%dT%H%M%SZ")

def fetch_payload(url: str = API_URL, timeout: float = HTTP_TIMEOUT) -> Any:
    r = requests.get(url, timeout=timeout)
    r.raise_for_status()
    return r.json()

def parse_measurements(payload: Any) -> List[Measurement]:
    """
    Turn the weather endpoint's JSON array into Measurement values.
    Raises MeasurementParseError naming the offending row.
    """
    if not isinstance(payload, list):
        raise MeasurementParseError(f"Expected a JSON array of measurements, got {type(payload).__name__}")

    records: List[Measurement] = []
    for idx, row in enumerate(payload):
        if not isinstance(row, dict):
            raise MeasurementParseError(f"Row {idx} is not an object: {row!r}")
        try:
            records.append(Measurement.from_dict(row))
        except MeasurementParseError as e:
            raise MeasurementParseError(f"Row {idx}: {e}") from e
    return records

def fetch_measurements(url: str = API_URL, timeout: float = HTTP_TIMEOUT) -> List[Measurement]:
    records = parse_measurements(fetch_payload(url, timeout=timeout))
    logger.info("Fetched %d measurements from %s", len(records), url)
    return records

def ingest_measurements(url: str, raw_dir: Path, timeout: float = HTTP_TIMEOUT) -> Tuple[List[Measurement], Path]:
    """Fetch, keep a raw snapshot of the payload, and parse it."""
    payload = fetch_payload(url, timeout=timeout)
    out = raw_dir / f"weather_{_now_utc_stamp()}.json"
    write_json(out, payload)
    logger.info("Saved raw payload to %s", out)
    return parse_measurements(payload), out

def load_measurements(path: Path) -> List[Measurement]:
    """Load measurements from a raw .json snapshot or a curated .parquet file."""
    suffix = path.suffix.lower()
    if suffix == ".json":
        return parse_measurements(read_json(path))
    if suffix == ".parquet":
        return frame_to_measurements(read_parquet(path))
    raise ValueError(f"Unsupported measurements file: {path.name}")
