"""
Simulated data generator for the employee production dashboard.

Generates a raw export payload in the same shape as
EmployeeProductionExport.json, based on typical inventory-count crew
parameters. All values are synthetic — no real employee data is used.
"""

import json
from pathlib import Path

import numpy as np
import pandas as pd

# ---------------------------------------------------------------------------
# Typical crew parameters (realistic ranges)
# ---------------------------------------------------------------------------
_METRIC_PARAMS = {
    "PiecesPerHr": {"mean": 1_050, "std": 180},
    "DollarPerHr": {"mean": 2_400, "std": 450},
    "SkusPerHr": {"mean": 310, "std": 60},
    "AVG_DELTA": {"mean": 14.0, "std": 4.0},
}

_GAP_RATES = {"GAP5_COUNT": 3.0, "GAP10_COUNT": 1.2, "GAP15_COUNT": 0.5}

_OFFICES = ["Madison", "Milwaukee", "Green Bay"]

_ACCOUNTS = [
    ("Kroger", ["Kroger #412", "Kroger #518"]),
    ("Mariano's", ["Mariano's Lakeview"]),
    ("Piggly Wiggly", ["Piggly Wiggly #12", "Piggly Wiggly #31"]),
    ("Pigs Tietz", ["Pigs Tietz Plymouth"]),
    ("Ascension Rx", ["Ascension Rx St. Mary"]),
    ("Fuel On", ["Fuel On #7"]),
    ("Festival Foods", ["Festival Foods Onalaska", "Festival Foods Fitchburg"]),
    ("Woodman's", ["Woodman's West"]),
]

_FIRST_NAMES = [
    "Alex", "Jordan", "Taylor", "Morgan", "Casey", "Riley", "Jamie", "Avery",
    "Quinn", "Drew", "Parker", "Rowan", "Skyler", "Reese", "Emerson", "Hayden",
]
_LAST_NAMES = [
    "Anderson", "Brooks", "Carlson", "Dahl", "Engel", "Fischer", "Gross", "Hansen",
    "Iverson", "Jensen", "Kraus", "Lind", "Meyer", "Nelson", "Olson", "Peters",
]


def generate_production_export(
    start_date: str = "2025-01-06",
    n_days: int = 300,
    n_employees: int = 24,
    n_supervisors: int = 3,
    n_buckets: int = 3,
    seed: int = 42,
) -> dict[str, list[dict]]:
    """Generate a simulated raw export.

    Each count day sends a crew of employees to one store; the rows are
    spread round-robin over ``n_buckets`` arrays the way the exporter
    splits large exports. The first ``n_supervisors`` employees supervise
    everyone, so supervisor ids resolve to names; one extra id deliberately
    has no employee row.
    """
    rng = np.random.default_rng(seed)
    employee_ids = list(range(1001, 1001 + n_employees))
    names = {
        emp_id: (_FIRST_NAMES[i % len(_FIRST_NAMES)], _LAST_NAMES[(i * 7) % len(_LAST_NAMES)])
        for i, emp_id in enumerate(employee_ids)
    }
    supervisor_ids = employee_ids[:n_supervisors] + [9999]
    supervisor_of = {emp_id: supervisor_ids[i % len(supervisor_ids)] for i, emp_id in enumerate(employee_ids)}
    office_of = {emp_id: _OFFICES[i % len(_OFFICES)] for i, emp_id in enumerate(employee_ids)}
    skill = {emp_id: rng.uniform(0.8, 1.2) for emp_id in employee_ids}

    buckets: dict[str, list[dict]] = {f"Table{i}": [] for i in range(n_buckets)}
    row_counter = 0

    for day in pd.date_range(start_date, periods=n_days, freq="D"):
        # Fewer counts on Sundays
        if day.dayofweek == 6 and rng.random() < 0.7:
            continue

        account, stores = _ACCOUNTS[rng.integers(len(_ACCOUNTS))]
        store = stores[rng.integers(len(stores))]
        crew = rng.choice(employee_ids, size=rng.integers(4, 9), replace=False)

        for emp_id in crew:
            emp_id = int(emp_id)
            first, last = names[emp_id]
            row = {
                "Employee": emp_id,
                "FirstName": f" {first}" if row_counter % 11 == 0 else first,
                "LastName": last,
                "OfficeName": office_of[emp_id],
                "AccountName": account,
                "StoreName": store,
                "DateOfInv": f"{day:%Y-%m-%d} 00:00:00",
                "SupervisorNumber": supervisor_of[emp_id],
            }
            for field, params in _METRIC_PARAMS.items():
                value = params["mean"] * skill[emp_id] + rng.normal(0, params["std"])
                row[field] = round(max(value, 0.0), 2)
            for field, rate in _GAP_RATES.items():
                row[field] = int(rng.poisson(rate))

            buckets[f"Table{row_counter % n_buckets}"].append(row)
            row_counter += 1

    return buckets


def write_sample_export(path: str | Path, **kwargs) -> Path:
    """Write a simulated export to ``path`` as JSON."""
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    with path.open("w", encoding="utf-8") as fh:
        json.dump(generate_production_export(**kwargs), fh, indent=1)
    return path
