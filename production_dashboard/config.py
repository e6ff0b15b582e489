"""
Configuration: metric registry, account groups, file paths, constants.

METRIC_REGISTRY maps each canonical metric key to its display label and
the direction used when colouring comparisons (display only; no engine
depends on it).
"""

import os
from pathlib import Path

# ---------------------------------------------------------------------------
# File paths
# ---------------------------------------------------------------------------
DATA_DIR = Path(__file__).resolve().parent.parent / "data"

PRODUCTION_EXPORT_FILE = DATA_DIR / "EmployeeProductionExport.json"

# A local path or an http(s) URL; overrides PRODUCTION_EXPORT_FILE when set.
PRODUCTION_EXPORT_SOURCE = os.environ.get(
    "PRODUCTION_EXPORT_SOURCE", str(PRODUCTION_EXPORT_FILE)
)

HTTP_TIMEOUT_SECONDS = 30

# ---------------------------------------------------------------------------
# Dashboard identity
# ---------------------------------------------------------------------------
COMPANY_NAME = "Badger Inventory Service, Inc."
DASHBOARD_TITLE = "Employee Production Dashboard"

# ---------------------------------------------------------------------------
# Metric Registry
# ---------------------------------------------------------------------------
# label: display label
# direction: "higher_is_better" or "lower_is_better"
METRIC_REGISTRY: dict[str, dict] = {
    "pieces": {
        "label": "Pieces",
        "direction": "higher_is_better",
    },
    "dollars": {
        "label": "Dollars",
        "direction": "higher_is_better",
    },
    "skus": {
        "label": "SKUs",
        "direction": "higher_is_better",
    },
    "avg_delta": {
        "label": "Average Delta",
        "direction": "lower_is_better",
    },
    "gap5_count": {
        "label": "Gap > 5",
        "direction": "lower_is_better",
    },
    "gap10_count": {
        "label": "Gap > 10",
        "direction": "lower_is_better",
    },
    "gap15_count": {
        "label": "Gap > 15",
        "direction": "lower_is_better",
    },
}

# Mapping from raw export field names to normalized metric columns
RAW_METRIC_MAP: dict[str, str] = {
    "PiecesPerHr": "pieces",
    "DollarPerHr": "dollars",
    "SkusPerHr": "skus",
    "AVG_DELTA": "avg_delta",
    "GAP5_COUNT": "gap5_count",
    "GAP10_COUNT": "gap10_count",
    "GAP15_COUNT": "gap15_count",
}

RAW_REQUIRED_FIELDS = (
    "Employee", "FirstName", "LastName", "OfficeName", "AccountName",
    "StoreName", "DateOfInv", "SupervisorNumber", *RAW_METRIC_MAP,
)

# ---------------------------------------------------------------------------
# Account groups
# ---------------------------------------------------------------------------
# Filtering by one account in a group includes every account in the group.
# Aliases are lowercase; source account names are lowercased before lookup.
ACCOUNT_GROUPS: dict[str, list[str]] = {
    "kroger": ["kroger", "mariano's"],
    "piggly wiggly": [
        "piggly wiggly",
        "piggly wiggly - franchise",
        "pigs coporate",
        "pigs dave s",
        "pigs fox brothers",
        "pigs jake b",
        "pigs malicki",
        "pigs migel",
        "pigs mike day",
        "pigs red",
        "pigs ryan o",
        "pigs stinebrinks",
        "pigs stoneridge",
        "pigs tietz",
    ],
    "ascension rx": [
        "ascension rx",
        "ascension rx - per k",
        "ascension rx - man hr",
    ],
    "fuel on": [
        "fuel on",
        "relaince fuel, llc",  # misspelling present in the export
        "reliance fuel, llc",
        "schierl",
    ],
    "single c-stores": [
        "single c-stores",
        "*single c-stores $-check",
        "*single c-stores $ cash",
    ],
}

# ---------------------------------------------------------------------------
# Constants
# ---------------------------------------------------------------------------
ALL = "all"

DEFAULT_METRIC = "pieces"
DEFAULT_TIMEFRAME = "last180"
DEFAULT_TOP_N = 10
DEFAULT_DEVIATION_THRESHOLD = 30.0

# Trend spike/dip band, in population standard deviations
STDEV_THRESHOLD = 1.5
MIN_TREND_POINTS = 3

DATE_FORMAT = "%Y-%m-%d"

# Sunday-first, matching the weekday chart ordering
WEEKDAY_LABELS = ["Sun", "Mon", "Tue", "Wed", "Thu", "Fri", "Sat"]
