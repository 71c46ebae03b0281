"""
Batch runner: load measurements, compute analytics for one filter, write
curated outputs and record the run.

    python -m weather_analytics.run --source synthetic --seed 7 --city Madrid
"""

from __future__ import annotations

import argparse
import logging
import os
import sys
from pathlib import Path
from typing import List, Optional

from .analytics import compute_analytics
from .config import ALL_CITIES, API_URL, CURATED_DIR, DEFAULT_END, DEFAULT_START, RAW_DIR, TRACE_FILE, WEBHOOK_URL
from .curate import measurements_to_frame, write_curated
from .dq import run_dq
from .errors import AnalyticsError, InvalidRangeError
from .generate import generate_measurements
from .ingest import ingest_measurements, load_measurements
from .models import AnalyticsFilter, Measurement
from .notify import append_trace, build_trace_entry, post_webhook

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(description="Compute weather analytics for a date range and city")
    p.add_argument("--source", choices=["api", "synthetic", "file"], default="api", help="Where measurements come from")
    p.add_argument("--url", default=API_URL, help="Weather API endpoint (source=api)")
    p.add_argument("--path", type=Path, help="Measurements .json or .parquet file (source=file)")
    p.add_argument("--seed", type=int, default=None, help="Random seed (source=synthetic)")
    p.add_argument("--start", default=DEFAULT_START.isoformat(), help="First day, YYYY-MM-DD (inclusive)")
    p.add_argument("--end", default=DEFAULT_END.isoformat(), help="Last day, YYYY-MM-DD (inclusive)")
    p.add_argument("--city", default=ALL_CITIES, help=f"City to keep, or '{ALL_CITIES}'")
    p.add_argument("--raw-dir", type=Path, default=RAW_DIR, help="Where API payload snapshots go")
    p.add_argument("--out", type=Path, default=CURATED_DIR, help="Directory for curated outputs")
    p.add_argument("--trace", type=Path, default=TRACE_FILE, help="JSON lines run log")
    p.add_argument("--no-webhook", action="store_true", help="Skip the webhook notification")
    return p


def load_records(args: argparse.Namespace, parser: argparse.ArgumentParser) -> List[Measurement]:
    if args.source == "synthetic":
        return generate_measurements(seed=args.seed)
    if args.source == "file":
        if args.path is None:
            parser.error("--path is required with --source file")
        return load_measurements(args.path)
    records, raw_path = ingest_measurements(args.url, args.raw_dir)
    print(f"Raw payload saved: {raw_path}")
    return records


def main(argv: Optional[List[str]] = None) -> int:
    logging.basicConfig(
        level=os.getenv("LOG_LEVEL", "INFO").upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    parser = build_parser()
    args = parser.parse_args(argv)

    try:
        flt = AnalyticsFilter.from_strings(args.start, args.end, args.city)
    except InvalidRangeError as e:
        parser.error(str(e))

    records = load_records(args, parser)
    print(f"Loaded {len(records)} measurements ({args.source})")

    for check in run_dq(measurements_to_frame(records)):
        if not check.ok:
            logger.warning("Data quality check failed: %s", check.message)

    try:
        result = compute_analytics(records, flt)
    except AnalyticsError as e:
        print(f"Analytics failed: {e}", file=sys.stderr)
        return 1

    paths = write_curated(result, args.out)

    entry = build_trace_entry(args.source, len(records), result)
    append_trace(args.trace, entry)
    if not args.no_webhook:
        post_webhook(WEBHOOK_URL, entry)

    print(f"Filter: {flt.start} .. {flt.end} city={flt.city} -> {result.record_count} records")
    for agg in result.city_aggregates or []:
        print(f"  {agg.city}: avg {agg.avg_temperature} °C over {agg.records} records")
    for i, top in enumerate(result.top_cities or [], start=1):
        print(f"  #{i} {top.city}: max {top.value} on {top.date}")
    print("Curated files:")
    for name, path in paths.items():
        print(f"  {name}: {path}")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
