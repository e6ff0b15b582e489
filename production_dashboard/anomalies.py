"""
Anomaly detection — two independent detectors.

1. Per-record deviation from the employee's own mean for the active metric.
   Only meaningful within one account scope, so it returns nothing when
   every account is selected.
2. Peak / lowest / spike / dip annotation of a trend series, using a
   fixed band of STDEV_THRESHOLD population standard deviations.
"""

import logging
from dataclasses import dataclass
from enum import Enum

import numpy as np
import pandas as pd

from .config import ALL, DEFAULT_DEVIATION_THRESHOLD, MIN_TREND_POINTS, STDEV_THRESHOLD
from .kpis import monthly_averages
from .loaders.utils import safe_float
from .models import AnomalyKind, Metric
from .sorting import sort_table

logger = logging.getLogger(__name__)

ANOMALY_COLUMNS = [
    "employee", "date", "store", "metric_value",
    "employee_average", "deviation_pct", "kind",
]


def coerce_threshold(value) -> float:
    """Parse a deviation-threshold input; non-numeric or negative becomes 0."""
    parsed = safe_float(value)
    if parsed is None:
        return 0.0
    return max(parsed, 0.0)


def _empty_anomalies() -> pd.DataFrame:
    return pd.DataFrame(columns=ANOMALY_COLUMNS)


def detect_employee_anomalies(
    records: pd.DataFrame,
    metric: "Metric | str",
    account: str,
    threshold: float = DEFAULT_DEVIATION_THRESHOLD,
) -> pd.DataFrame:
    """Flag records deviating more than ``threshold`` percent from the
    employee's own average.

    Parameters
    ----------
    records : Filtered fact_production DataFrame (already scoped to the
        selected account group).
    metric : Active metric.
    account : Selected account filter. "all" disables detection.
    threshold : Percentage band, >= 0.

    Returns
    -------
    DataFrame with columns:
        employee, date, store, metric_value, employee_average,
        deviation_pct, kind
    in record order. Employees averaging exactly 0 are never flagged.
    """
    metric = Metric.parse(metric).value
    if threshold < 0:
        raise ValueError(f"threshold must be >= 0, got {threshold}")

    if account == ALL or records.empty:
        return _empty_anomalies()

    values = records[metric]
    means = records.groupby("employee", sort=False)[metric].transform("mean")
    means = means.where(means != 0)  # zero mean -> NaN, never flagged

    deviation_pct = (values - means) / means * 100
    flagged = deviation_pct.abs() > threshold

    if not flagged.any():
        return _empty_anomalies()

    result = pd.DataFrame({
        "employee": records.loc[flagged, "employee"],
        "date": records.loc[flagged, "date"],
        "store": records.loc[flagged, "store"],
        "metric_value": values[flagged],
        "employee_average": means[flagged],
        "deviation_pct": deviation_pct[flagged],
        "kind": np.where(
            values[flagged] > means[flagged], AnomalyKind.SPIKE.value, AnomalyKind.DIP.value
        ),
    }).reset_index(drop=True)

    logger.info(
        "Found %d %s anomalies beyond %.1f%% across %d records",
        len(result), metric, threshold, len(records),
    )
    return result


def sort_anomalies(
    anomalies: pd.DataFrame,
    key: str = "date",
    ascending: bool = True,
) -> pd.DataFrame:
    """Order anomalies by any column (date chronologically)."""
    if key not in ANOMALY_COLUMNS:
        raise ValueError(f"Cannot sort anomalies by '{key}'")
    return sort_table(anomalies, key, ascending)


# ---------------------------------------------------------------------------
# Trend series
# ---------------------------------------------------------------------------

class TrendView(str, Enum):
    MONTHLY = "monthly"
    STORE = "store"


TREND_COLUMNS = ["date", "value", "store", "is_peak", "is_lowest", "is_spike", "is_dip"]


@dataclass
class TrendSeries:
    """A time-ordered series plus its extrema annotations.

    ``points`` has TREND_COLUMNS; ``date`` is a YYYY-MM bucket for monthly
    series and a YYYY-MM-DD day for the per-store view (where ``store`` is
    filled in). Statistics stay None when the series is too short to
    annotate.
    """

    points: pd.DataFrame
    mean: float | None = None
    std_dev: float | None = None
    upper_threshold: float | None = None
    lower_threshold: float | None = None

    @property
    def annotated(self) -> bool:
        return self.mean is not None

    def _first(self, column: str) -> dict | None:
        hits = self.points[self.points[column]]
        if hits.empty:
            return None
        return hits.iloc[0].to_dict()

    @property
    def peak(self) -> dict | None:
        return self._first("is_peak")

    @property
    def lowest(self) -> dict | None:
        return self._first("is_lowest")

    @property
    def spikes(self) -> pd.DataFrame:
        return self.points[self.points["is_spike"]].reset_index(drop=True)

    @property
    def dips(self) -> pd.DataFrame:
        return self.points[self.points["is_dip"]].reset_index(drop=True)


def _empty_points() -> pd.DataFrame:
    return pd.DataFrame(columns=TREND_COLUMNS).astype({
        "value": "float64",
        "is_peak": bool,
        "is_lowest": bool,
        "is_spike": bool,
        "is_dip": bool,
    })


def _trend_points(source: pd.DataFrame, metric: str, view: TrendView) -> pd.DataFrame:
    if view == TrendView.MONTHLY:
        points = monthly_averages(source, metric).rename(columns={"month": "date", metric: "value"})
        points["store"] = None
    else:
        points = (
            source.sort_values("date", kind="stable")[["date", metric, "store"]]
            .rename(columns={metric: "value"})
        )
    points = points.reset_index(drop=True)
    points["value"] = points["value"].astype(float)
    for flag in ("is_peak", "is_lowest", "is_spike", "is_dip"):
        points[flag] = False
    return points[TREND_COLUMNS]


def build_trend_series(
    records: pd.DataFrame,
    metric: "Metric | str",
    employee: str = ALL,
    view: "TrendView | str" = TrendView.MONTHLY,
) -> TrendSeries:
    """Build the trend series for the chart and annotate its extrema.

    Series
    ------
    - employee="all": monthly averages over every record.
    - single employee, view="monthly": that employee's monthly averages.
    - single employee, view="store": that employee's records by date.

    Annotations (only with at least MIN_TREND_POINTS points)
    -----------
    - peak / lowest: first global maximum / minimum.
    - spike: value > mean + 1.5 std, excluding the peak point.
    - dip:   value < mean - 1.5 std, excluding the lowest point.
    """
    metric = Metric.parse(metric).value
    view = TrendView(view)

    if employee == ALL:
        source = records
        view = TrendView.MONTHLY
    else:
        source = records[records["employee"] == employee]

    if source.empty:
        return TrendSeries(points=_empty_points())

    points = _trend_points(source, metric, view)
    if len(points) < MIN_TREND_POINTS:
        return TrendSeries(points=points)

    values = points["value"].to_numpy(dtype=float)
    mean = float(values.mean())
    std_dev = float(values.std())
    upper = mean + STDEV_THRESHOLD * std_dev
    lower = mean - STDEV_THRESHOLD * std_dev

    # argmax/argmin return the first occurrence on ties
    peak_pos = int(np.argmax(values))
    lowest_pos = int(np.argmin(values))
    positions = np.arange(len(values))

    points["is_peak"] = positions == peak_pos
    points["is_lowest"] = positions == lowest_pos
    points["is_spike"] = (values > upper) & (positions != peak_pos)
    points["is_dip"] = (values < lower) & (positions != lowest_pos)

    return TrendSeries(
        points=points,
        mean=mean,
        std_dev=std_dev,
        upper_threshold=upper,
        lower_threshold=lower,
    )
