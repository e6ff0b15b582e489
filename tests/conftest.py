"""
conftest.py — Shared pytest fixtures for the production dashboard test suite.

No network or file fixtures beyond pytest's tmp_path are used; HTTP loading
is exercised by monkeypatching ``requests.get``.

Import-path bootstrapping:
    The project root is inserted into sys.path so ``production_dashboard``
    resolves without an editable install.
"""

import os
import sys
from datetime import date

import pandas as pd
import pytest

_ROOT_DIR = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))
if _ROOT_DIR not in sys.path:
    sys.path.insert(0, _ROOT_DIR)


def _raw(emp_id, first, last, sup, office, account, store, when, pieces, **metrics):
    row = {
        "Employee": emp_id,
        "FirstName": first,
        "LastName": last,
        "OfficeName": office,
        "AccountName": account,
        "StoreName": store,
        "DateOfInv": when,
        "PiecesPerHr": pieces,
        "DollarPerHr": pieces * 2,
        "SkusPerHr": pieces / 4,
        "AVG_DELTA": 10,
        "GAP5_COUNT": 2,
        "GAP10_COUNT": 1,
        "GAP15_COUNT": 0,
        "SupervisorNumber": sup,
    }
    row.update(metrics)
    return row


# ---------------------------------------------------------------------------
# Raw export payload
# ---------------------------------------------------------------------------

@pytest.fixture
def raw_payload():
    """
    Two buckets, four raw rows, deliberately out of date order.

    - Employee 1 appears twice with different first names ("Ann" first,
      then "Annie"); the supervisor lookup must keep "Ann Lee".
    - Employee 2 has untrimmed names.
    - Employee 3 (Cat Diaz) supervises 1 and 2; her own supervisor id 99
      matches no employee.
    """
    return {
        "Table0": [
            _raw(1, "Ann", "Lee", 3, "Madison", "Kroger", "Kroger #1", "2024-03-15 00:00:00", 100),
            _raw(2, " Bob ", "Stone ", 3, "Madison", "Mariano's", "Mariano's Lakeview", "2024-03-14", 80),
        ],
        "Table1": [
            _raw(3, "Cat", "Diaz", 99, "Milwaukee", "Festival Foods", "Festival #2", "2024-01-01 08:30:00", 60),
            _raw(1, "Annie", "Lee", 3, "Madison", "Pigs Tietz", "Pigs Tietz Plymouth", "2024-02-10", 120),
        ],
    }


@pytest.fixture
def fact_production(raw_payload):
    """Normalized records built from raw_payload."""
    from production_dashboard.transforms import build_fact_production
    return build_fact_production(raw_payload)


@pytest.fixture
def today():
    """Fixed reference day for relative timeframe filters."""
    return date(2024, 3, 20)


# ---------------------------------------------------------------------------
# Record factory
# ---------------------------------------------------------------------------

@pytest.fixture
def make_records():
    """
    Build a normalized record frame from partial rows.

    Missing dimensions default to a single Madison/Kroger store and missing
    metrics default to 0, so a test only spells out what it asserts on.
    """
    from production_dashboard.models import METRIC_COLUMNS, RECORD_COLUMNS

    defaults = {
        "employee": "A",
        "office": "Madison",
        "account": "Kroger",
        "store": "S1",
        "supervisor": "Sup",
        "date": "2024-01-01",
        **{m: 0.0 for m in METRIC_COLUMNS},
    }

    def _make(rows):
        df = pd.DataFrame([{**defaults, **row} for row in rows], columns=RECORD_COLUMNS)
        df[METRIC_COLUMNS] = df[METRIC_COLUMNS].astype("float64")
        return df

    return _make
