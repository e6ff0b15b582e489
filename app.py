"""
Employee Production Dashboard — Interactive Dashboard

Run with:  streamlit run app.py
"""

import sys
from datetime import date
from pathlib import Path

import streamlit as st
import plotly.graph_objects as go
import pandas as pd

sys.path.insert(0, str(Path(__file__).resolve().parent))

from production_dashboard.anomalies import ANOMALY_COLUMNS, TrendView, coerce_threshold, sort_anomalies
from production_dashboard.config import (
    ALL,
    COMPANY_NAME,
    DASHBOARD_TITLE,
    DEFAULT_DEVIATION_THRESHOLD,
    DEFAULT_TOP_N,
    PRODUCTION_EXPORT_SOURCE,
)
from production_dashboard.dashboard import (
    get_dashboard_view,
    get_metric_label,
    get_metric_options,
    get_records_table,
    get_unique_values,
)
from production_dashboard.filters import DEFAULT_FILTERS, TIMEFRAME_LABELS, FilterState, Timeframe
from production_dashboard.sorting import SortState, next_sort_state
from production_dashboard.session import DashboardSession, SessionStatus

# ---------------------------------------------------------------------------
# Page config
# ---------------------------------------------------------------------------
st.set_page_config(
    page_title=DASHBOARD_TITLE,
    page_icon="📦",
    layout="wide",
    initial_sidebar_state="expanded",
)

ANNOTATION_COLORS = {
    "peak": "#2ecc71",
    "lowest": "#e74c3c",
    "spike": "#f39c12",
    "dip": "#8e44ad",
}


# ---------------------------------------------------------------------------
# Data loading (cached)
# ---------------------------------------------------------------------------
@st.cache_data
def load_all_data():
    session = DashboardSession(source=PRODUCTION_EXPORT_SOURCE)
    session.load()
    return session.status.value, session.error, session.records


status, error, records = load_all_data()

if status == SessionStatus.FAILED.value:
    st.title("Dashboard Error")
    st.error(error)
    st.stop()

unique_values = get_unique_values(records)

# ---------------------------------------------------------------------------
# Sidebar
# ---------------------------------------------------------------------------
st.sidebar.title(COMPANY_NAME)
st.sidebar.caption("Where Quality Counts")
st.sidebar.divider()

metric_options = get_metric_options()
metric = st.sidebar.selectbox(
    "Primary Metric",
    [m["value"] for m in metric_options],
    format_func=get_metric_label,
)
metric_label = get_metric_label(metric)

timeframe = st.sidebar.selectbox(
    "Timeframe",
    list(Timeframe),
    index=list(Timeframe).index(DEFAULT_FILTERS.timeframe),
    format_func=lambda tf: TIMEFRAME_LABELS[tf],
)

start_date = end_date = specific_date = ""
if timeframe == Timeframe.CUSTOM:
    start = st.sidebar.date_input("Start Date", value=None)
    end = st.sidebar.date_input("End Date", value=None)
    start_date = start.isoformat() if start else ""
    end_date = end.isoformat() if end else ""
elif timeframe == Timeframe.SPECIFIC:
    specific = st.sidebar.date_input("Date", value=None)
    specific_date = specific.isoformat() if specific else ""


def select_filter(label: str, options: list[str]) -> str:
    return st.sidebar.selectbox(label, [ALL, *options], format_func=lambda v: "All" if v == ALL else v)


st.sidebar.subheader("Data Filters")
employee = select_filter("Employee", unique_values.employees)
account = select_filter("Account Name", unique_values.accounts)
store = select_filter("Store", unique_values.stores)
supervisor = select_filter("Supervisor", unique_values.supervisors)
office = select_filter("Office", unique_values.offices)

st.sidebar.subheader("Chart Options")
show_top = st.sidebar.toggle("Show top performers (off = bottom)", value=True)
top_n = st.sidebar.number_input("Number of Employees", min_value=1, value=DEFAULT_TOP_N, step=1)
by_supervisor = st.sidebar.toggle("Group table by Supervisor", value=False)

filters = FilterState(
    office=office,
    account=account,
    employee=employee,
    store=store,
    supervisor=supervisor,
    timeframe=timeframe,
    start_date=start_date,
    end_date=end_date,
    specific_date=specific_date,
    top_n=top_n,
    show_top=show_top,
)

page = st.sidebar.radio("Performance Analysis", ["Comparison", "Trend", "Day of Week", "Anomalies"])

st.sidebar.divider()
st.sidebar.caption(f"{len(records):,} records loaded")

# ---------------------------------------------------------------------------
# Per-page controls feeding the view
# ---------------------------------------------------------------------------
trend_view = TrendView.MONTHLY
if page == "Trend" and employee != ALL:
    trend_view = st.radio(
        "Trend view", list(TrendView), horizontal=True,
        format_func=lambda v: "Monthly" if v == TrendView.MONTHLY else "By Store",
    )

threshold = DEFAULT_DEVIATION_THRESHOLD
if page == "Anomalies":
    threshold = coerce_threshold(
        st.number_input("Deviation Threshold (%)", min_value=0.0, value=DEFAULT_DEVIATION_THRESHOLD)
    )

group_by = "supervisor" if by_supervisor else "store"

view = get_dashboard_view(
    records,
    filters=filters,
    metric=metric,
    group_by=group_by,
    trend_view=trend_view,
    deviation_threshold=threshold,
    today=date.today(),
)

# ---------------------------------------------------------------------------
# KPI cards
# ---------------------------------------------------------------------------
st.title(DASHBOARD_TITLE)

cols = st.columns(3 if employee == ALL else 2)
cols[0].metric(f"Avg. {metric_label}", f"{view.kpis['avg_metric']:.2f}")
if employee == ALL:
    cols[1].metric("Filtered Employees", f"{view.kpis['unique_employees']:,}")
best = view.kpis["best_performer"]
cols[-1].metric(f"Top Performer ({metric_label})", best["name"], f"Avg: {best['value']:.2f}", delta_color="off")

st.divider()


# ===========================================================================
# Chart area
# ===========================================================================
def chart_layout(fig: go.Figure, **kwargs) -> go.Figure:
    fig.update_layout(height=350, plot_bgcolor="rgba(0,0,0,0)", margin=dict(l=10, r=10, t=30, b=40), **kwargs)
    return fig


if page == "Comparison":
    ranking = view.ranking
    if ranking.empty:
        st.info("No data available for the selected filters.")
    else:
        fig = go.Figure(go.Bar(x=ranking["employee"], y=ranking[metric], name=metric_label, marker_color="#3498db"))
        title = f"{'Top' if show_top else 'Bottom'} {filters.top_n} by {metric_label}"
        st.plotly_chart(chart_layout(fig, title=title), use_container_width=True)

elif page == "Trend":
    points = view.trend.points
    if points.empty:
        st.info("No trend data available.")
    else:
        name = "Overall Average" if employee == ALL else employee
        hover = points["store"] if trend_view == TrendView.STORE else None
        fig = go.Figure(go.Scatter(
            x=points["date"], y=points["value"], name=name, mode="lines+markers",
            line=dict(color="#3498db", width=2), hovertext=hover,
        ))
        for flag, label in [("is_peak", "peak"), ("is_lowest", "lowest"), ("is_spike", "spike"), ("is_dip", "dip")]:
            marked = points[points[flag]]
            if not marked.empty:
                fig.add_trace(go.Scatter(
                    x=marked["date"], y=marked["value"], mode="markers+text",
                    text=[label.title()] * len(marked), textposition="top center",
                    marker=dict(size=11, color=ANNOTATION_COLORS[label]),
                    name=label.title(),
                ))
        if view.trend.annotated:
            fig.add_hline(y=view.trend.mean, line_dash="dash", line_color="#888")
        st.plotly_chart(chart_layout(fig, title=f"{metric_label} Trend"), use_container_width=True)

elif page == "Day of Week":
    dow = view.day_of_week
    if dow.empty or (dow[metric] == 0).all():
        st.info("No data available for the selected filters.")
    else:
        fig = go.Figure(go.Bar(x=dow["day"], y=dow[metric], marker_color="#3498db"))
        st.plotly_chart(chart_layout(fig, title=f"Avg {metric_label} by Day of Week"), use_container_width=True)

elif page == "Anomalies":
    if account == ALL:
        st.info("Please select a specific account from the sidebar filters to detect anomalies.")
    elif view.anomalies.empty:
        st.info("No anomalies found for the current filters and settings.")
    else:
        # Clicking the active column flips the direction; a new column sorts ascending
        sort_state = st.session_state.setdefault("anomaly_sort", SortState("date", ascending=True))
        for col, key in zip(st.columns(len(ANOMALY_COLUMNS)), ANOMALY_COLUMNS):
            arrow = (" ▲" if sort_state.ascending else " ▼") if key == sort_state.key else ""
            if col.button(f"{key}{arrow}", key=f"sort_{key}", use_container_width=True):
                sort_state = next_sort_state(sort_state, key)
                st.session_state["anomaly_sort"] = sort_state
        anomalies = sort_anomalies(view.anomalies, sort_state.key, sort_state.ascending)
        st.caption(f"Anomalies for **{metric_label}** vs employee average.")
        st.dataframe(anomalies, use_container_width=True, hide_index=True)

st.divider()

# ===========================================================================
# Tables
# ===========================================================================
tab1, tab2, tab3 = st.tabs(["Averages by Employee", "Store & Supervisor", "All Stores"])

with tab1:
    if view.overall is not None:
        overall = pd.DataFrame([{get_metric_label(k): round(v, 2) for k, v in view.overall.items()}])
        overall["Consistency"] = round(view.overall_consistency, 1)
        st.markdown("**Overall Averages**")
        st.dataframe(overall, use_container_width=True, hide_index=True)
    st.dataframe(view.employee_table, use_container_width=True, hide_index=True)

with tab2:
    st.caption(f"Grouped by {group_by}")
    st.dataframe(view.group_table, use_container_width=True, hide_index=True)

with tab3:
    st.dataframe(get_records_table(view.records), use_container_width=True, hide_index=True)
