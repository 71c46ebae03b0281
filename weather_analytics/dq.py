from __future__ import annotations

from dataclasses import dataclass

import pandas as pd

@dataclass
class DQResult:
    ok: bool
    message: str

def run_dq(df: pd.DataFrame) -> list[DQResult]:
    """
    Report-only checks over a measurements frame (see curate.measurements_to_frame).
    Nothing is dropped or fixed here; analytics accept values as they come.
    """
    results: list[DQResult] = []

    # Basic freshness: must have at least some rows
    results.append(DQResult(ok=len(df) > 0, message=f"row_count={len(df)}"))

    # Null checks
    for col in ["date", "city", "temperature", "humidity", "pressure", "windSpeed", "precipitation"]:
        nulls = int(df[col].isna().sum())
        results.append(DQResult(ok=nulls == 0, message=f"nulls_{col}={nulls}"))

    # Duplicate check on city+date
    dups = int(df.duplicated(subset=["city", "date"]).sum())
    results.append(DQResult(ok=dups == 0, message=f"dups_city_date={dups}"))

    # Range checks
    bad_humidity = int(((df["humidity"] < 0) | (df["humidity"] > 100)).sum())
    results.append(DQResult(ok=bad_humidity == 0, message=f"humidity_out_of_range={bad_humidity}"))

    negative_precip = int((df["precipitation"] < 0).sum())
    results.append(DQResult(ok=negative_precip == 0, message=f"negative_precipitation={negative_precip}"))

    return results
