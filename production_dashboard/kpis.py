"""
KPI computation functions — pure functions with no side effects.

Provides group/overall averages, consistency scores, top/bottom-N
rankings, day-of-week and monthly aggregation, and the KPI card summary.
"""

import logging
from typing import Iterable

import numpy as np
import pandas as pd

from .config import DATE_FORMAT, WEEKDAY_LABELS
from .models import GROUP_BY_FIELDS, METRIC_COLUMNS, Metric

logger = logging.getLogger(__name__)


def _metric_columns(metrics: Iterable["Metric | str"] | None) -> list[str]:
    if metrics is None:
        return list(METRIC_COLUMNS)
    return [Metric.parse(m).value for m in metrics]


def consistency_score(values: Iterable[float] | None) -> float:
    """Return a 0-100 score from the coefficient of variation of ``values``.

    Rules
    -----
    - no values      -> 0
    - one value      -> 100
    - mean == 0      -> 100 if every value is 0, else 0
    - otherwise      -> max(0, 1 - std / |mean|) * 100

    std is the population standard deviation (divides by N).
    """
    if values is None:
        return 0.0

    arr = np.asarray(list(values), dtype=float)
    if arr.size == 0:
        return 0.0
    if arr.size == 1:
        return 100.0

    mean = arr.mean()
    if mean == 0:
        return 100.0 if np.all(arr == 0) else 0.0

    cv = arr.std() / abs(mean)
    return float(max(0.0, 1 - cv) * 100)


def overall_averages(
    records: pd.DataFrame,
    metrics: Iterable["Metric | str"] | None = None,
) -> dict[str, float] | None:
    """Mean of each metric across all records; None when there are none."""
    if records.empty:
        return None
    cols = _metric_columns(metrics)
    n = len(records)
    return {col: float(records[col].sum() / n) for col in cols}


def group_averages(
    records: pd.DataFrame,
    group_by: str,
    metrics: Iterable["Metric | str"] | None = None,
) -> pd.DataFrame:
    """Average each metric per store, supervisor or employee.

    Returns
    -------
    DataFrame with columns:
        group, count, <one column per metric>
    one row per group, in order of first appearance.
    """
    if group_by not in GROUP_BY_FIELDS:
        raise ValueError(
            f"Cannot group by '{group_by}' (expected one of: {', '.join(GROUP_BY_FIELDS)})"
        )
    cols = _metric_columns(metrics)

    if records.empty:
        return pd.DataFrame(columns=["group", "count", *cols])

    grouped = records.groupby(group_by, sort=False)
    result = grouped[cols].mean()
    result.insert(0, "count", grouped.size())
    result = result.reset_index().rename(columns={group_by: "group"})

    logger.debug("Grouped %d records into %d %s rows", len(records), len(result), group_by)
    return result


def employee_averages(records: pd.DataFrame, metric: "Metric | str") -> pd.DataFrame:
    """Per-employee averages of every metric plus a consistency score.

    Returns
    -------
    DataFrame with columns:
        employee, consistency, count, pieces, dollars, skus, avg_delta,
        gap5_count, gap10_count, gap15_count
    where consistency is computed over the active ``metric`` only.
    """
    metric = Metric.parse(metric).value

    if records.empty:
        return pd.DataFrame(columns=["employee", "consistency", "count", *METRIC_COLUMNS])

    result = group_averages(records, "employee").rename(columns={"group": "employee"})
    scores = records.groupby("employee", sort=False)[metric].apply(consistency_score)
    result.insert(1, "consistency", result["employee"].map(scores).astype(float))
    return result


def top_n(
    records: pd.DataFrame,
    metric: "Metric | str",
    n: int,
    direction: str = "top",
) -> pd.DataFrame:
    """Rank employees by their average ``metric``.

    Averages are sorted descending (ties keep first-appearance order). For
    direction="bottom" the whole ranking is reversed before taking ``n``,
    so the bottom list reads lowest first.

    Returns
    -------
    DataFrame with columns: employee, <metric>
    """
    metric = Metric.parse(metric).value
    if direction not in ("top", "bottom"):
        raise ValueError(f"direction must be 'top' or 'bottom', got '{direction}'")

    if records.empty:
        return pd.DataFrame(columns=["employee", metric])

    averages = records.groupby("employee", sort=False)[metric].mean().reset_index()
    ranked = averages.sort_values(metric, ascending=False, kind="stable")
    if direction == "bottom":
        ranked = ranked.iloc[::-1]

    return ranked.head(max(int(n), 0)).reset_index(drop=True)


def get_kpi_summary(records: pd.DataFrame, metric: "Metric | str") -> dict:
    """Return a dict suitable for the top-level KPI cards.

    Returns
    -------
    {
        "avg_metric": 12.3,
        "unique_employees": 42,
        "best_performer": {"name": "Jane Doe", "value": 20.1},
    }
    The best performer is the first employee reaching the highest average.
    """
    metric = Metric.parse(metric).value

    if records.empty:
        return {
            "avg_metric": 0.0,
            "unique_employees": 0,
            "best_performer": {"name": "N/A", "value": 0.0},
        }

    averages = records.groupby("employee", sort=False)[metric].mean()
    best = averages.idxmax()

    return {
        "avg_metric": float(records[metric].sum() / len(records)),
        "unique_employees": int(records["employee"].nunique()),
        "best_performer": {"name": best, "value": float(averages[best])},
    }


def day_of_week_averages(records: pd.DataFrame, metric: "Metric | str") -> pd.DataFrame:
    """Average ``metric`` per weekday, Sunday first.

    Returns
    -------
    DataFrame with columns: day, <metric>
    seven rows; weekdays without records show 0.
    """
    metric = Metric.parse(metric).value

    if records.empty:
        return pd.DataFrame(columns=["day", metric])

    dates = pd.to_datetime(records["date"], format=DATE_FORMAT, errors="coerce")
    # pandas counts Monday as 0; shift so Sunday is 0
    day_index = (dates.dt.dayofweek + 1) % 7
    means = records[metric].groupby(day_index).mean()

    return pd.DataFrame({
        "day": WEEKDAY_LABELS,
        metric: [float(means.get(i, 0.0)) for i in range(7)],
    })


def monthly_averages(records: pd.DataFrame, metric: "Metric | str") -> pd.DataFrame:
    """Average ``metric`` per calendar month (YYYY-MM), ascending.

    Returns
    -------
    DataFrame with columns: month, <metric>
    """
    metric = Metric.parse(metric).value

    if records.empty:
        return pd.DataFrame(columns=["month", metric])

    month = records["date"].str[:7].rename("month")
    result = records[metric].groupby(month, sort=True).mean().reset_index()

    logger.debug("Summarised %d records to %d monthly rows", len(records), len(result))
    return result
