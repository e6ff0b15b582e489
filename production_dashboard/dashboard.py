"""
Dashboard-ready output functions.

These are the primary entry points for a Streamlit front end. Each
function takes the immutable base records plus the current selections and
returns plain dicts, dataclasses or DataFrames suitable for rendering
cards, charts and tables. Nothing is cached between calls.
"""

import logging
from dataclasses import dataclass
from datetime import date

import pandas as pd

from .anomalies import TrendSeries, TrendView, build_trend_series, detect_employee_anomalies
from .config import DEFAULT_DEVIATION_THRESHOLD, DEFAULT_METRIC, METRIC_REGISTRY
from .filters import DEFAULT_FILTERS, FilterState, apply_filters
from .kpis import (
    consistency_score,
    day_of_week_averages,
    employee_averages,
    get_kpi_summary,
    group_averages,
    overall_averages,
    top_n,
)
from .models import Metric, UniqueValues
from .sorting import SortState, sort_table

logger = logging.getLogger(__name__)


def get_metric_options() -> list[dict[str, str]]:
    """Metric selector options: [{"value": "pieces", "label": "Pieces"}, ...]."""
    return [{"value": key, "label": entry["label"]} for key, entry in METRIC_REGISTRY.items()]


def get_metric_label(metric: "Metric | str") -> str:
    return METRIC_REGISTRY[Metric.parse(metric).value]["label"]


def get_unique_values(records: pd.DataFrame) -> UniqueValues:
    """Sorted distinct values for each selector; empty lists when no data."""
    if records.empty:
        return UniqueValues()

    def _distinct(column: str) -> list[str]:
        return sorted(records[column].unique().tolist())

    return UniqueValues(
        employees=_distinct("employee"),
        accounts=_distinct("account"),
        offices=_distinct("office"),
        stores=_distinct("store"),
        supervisors=_distinct("supervisor"),
    )


def get_records_table(
    records: pd.DataFrame,
    sort: SortState = SortState("date", ascending=False),
) -> pd.DataFrame:
    """All filtered records for the raw table, newest first by default."""
    return sort_table(records, sort.key, sort.ascending)


@dataclass
class DashboardView:
    """Every derived view for one combination of selections."""

    metric: str
    filters: FilterState
    records: pd.DataFrame
    kpis: dict
    ranking: pd.DataFrame
    employee_table: pd.DataFrame
    overall: dict[str, float] | None
    overall_consistency: float
    group_table: pd.DataFrame
    day_of_week: pd.DataFrame
    anomalies: pd.DataFrame
    trend: TrendSeries


def get_dashboard_view(
    records: pd.DataFrame,
    filters: FilterState = DEFAULT_FILTERS,
    metric: "Metric | str" = DEFAULT_METRIC,
    group_by: str = "store",
    trend_view: "TrendView | str" = TrendView.MONTHLY,
    deviation_threshold: float = DEFAULT_DEVIATION_THRESHOLD,
    today: date | None = None,
) -> DashboardView:
    """Single entry point a Streamlit app calls whenever a selection changes.

    Parameters
    ----------
    records : Normalized fact_production DataFrame (never modified).
    filters : Current FilterState.
    metric : Active metric.
    group_by : "store" or "supervisor" for the group table.
    trend_view : "monthly" or "store" (single-employee trend only).
    deviation_threshold : Percentage band for the per-record detector.
    today : Reference day for relative timeframes.

    Returns
    -------
    DashboardView recomputed from scratch from ``records``.
    """
    metric = Metric.parse(metric).value
    filtered = apply_filters(records, filters, today=today)

    view = DashboardView(
        metric=metric,
        filters=filters,
        records=filtered,
        kpis=get_kpi_summary(filtered, metric),
        ranking=top_n(filtered, metric, filters.top_n, "top" if filters.show_top else "bottom"),
        employee_table=employee_averages(filtered, metric),
        overall=overall_averages(filtered),
        overall_consistency=consistency_score(filtered[metric]),
        group_table=group_averages(filtered, group_by),
        day_of_week=day_of_week_averages(filtered, metric),
        anomalies=detect_employee_anomalies(
            filtered, metric, filters.account, deviation_threshold
        ),
        trend=build_trend_series(filtered, metric, filters.employee, trend_view),
    )

    if filtered.empty:
        logger.warning("No records match the current filters")
    return view
