"""
Shared utilities for data ingestion: date normalisation, numeric coercion,
source detection.
"""

import logging
import math
from datetime import date, datetime
from typing import Any

from ..config import DATE_FORMAT

logger = logging.getLogger(__name__)


def strip_time(val: Any) -> str:
    """Drop any time-of-day component from a date-time string.

    "2024-03-15 00:00:00" -> "2024-03-15". Splits on the first space only,
    so values without a time component pass through unchanged.
    """
    return str(val).split(" ", 1)[0]


def parse_iso_date(val: Any) -> date | None:
    """Parse a ``YYYY-MM-DD`` string into a date.

    Uses an explicit format so the result never depends on locale or
    timezone. Returns None for empty or unparseable values.
    """
    if val is None:
        return None
    if isinstance(val, datetime):
        return val.date()
    if isinstance(val, date):
        return val
    text = str(val).strip()
    if not text:
        return None
    try:
        return datetime.strptime(strip_time(text), DATE_FORMAT).date()
    except ValueError:
        logger.warning("Could not parse date value: %s", val)
        return None


def safe_float(val: Any) -> float | None:
    """Coerce a value to float, returning None for non-numeric or non-finite values."""
    if val is None or isinstance(val, bool):
        return None
    if isinstance(val, str):
        val = val.strip()
        if not val:
            return None
    try:
        result = float(val)
    except (ValueError, TypeError):
        return None
    if not math.isfinite(result):
        return None
    return result


def is_url(source: str) -> bool:
    """Return True if ``source`` should be fetched over HTTP."""
    return str(source).lower().startswith(("http://", "https://"))
