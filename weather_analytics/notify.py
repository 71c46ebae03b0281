from __future__ import annotations

import logging
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict

import requests

from .config import HTTP_TIMEOUT
from .models import AnalyticsResult
from .storage import append_jsonl

logger = logging.getLogger(__name__)

def build_trace_entry(source: str, total_count: int, result: AnalyticsResult) -> Dict[str, Any]:
    return {
        "ts": datetime.now(timezone.utc).isoformat(),
        "source": source,
        "filter": result.filter.to_dict(),
        "count": total_count,
        "filtered_count": result.record_count,
    }

def append_trace(path: Path, entry: Dict[str, Any]) -> None:
    append_jsonl(path, entry)

def post_webhook(url: str, entry: Dict[str, Any], timeout: float = HTTP_TIMEOUT) -> bool:
    """
    Fire-and-forget notification. Delivery problems are logged and reported
    through the return value; they never fail the run.
    """
    if not url:
        return False
    try:
        r = requests.post(url, json=entry, timeout=timeout)
        r.raise_for_status()
    except requests.RequestException as e:
        logger.warning("Webhook delivery to %s failed: %s", url, e)
        return False
    return True
