"""
Employee Production Dashboard — End-to-end analytics pipeline.

Loads the production export, builds every dashboard view and prints
smoke-test summaries. Falls back to simulated data when the export file
is not present.

Usage:
    python main.py
"""

import logging
import sys
from pathlib import Path

# Add project root to path
sys.path.insert(0, str(Path(__file__).resolve().parent))

from production_dashboard.config import DASHBOARD_TITLE, PRODUCTION_EXPORT_SOURCE
from production_dashboard.dashboard import get_metric_label
from production_dashboard.filters import DEFAULT_FILTERS, Timeframe
from production_dashboard.loaders.utils import is_url
from production_dashboard.session import DashboardSession, SessionStatus
from production_dashboard.simulator import generate_production_export

# ---------------------------------------------------------------------------
# Logging setup
# ---------------------------------------------------------------------------
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s | %(name)s | %(levelname)s | %(message)s",
    datefmt="%H:%M:%S",
)
logger = logging.getLogger(__name__)


def main() -> int:
    """Run the full analytics pipeline and print smoke-test outputs."""

    print("=" * 70)
    print(f"  {DASHBOARD_TITLE.upper()}")
    print("  Analytics Pipeline Smoke Test")
    print("=" * 70)
    print()

    # ------------------------------------------------------------------
    # 1. Load source data
    # ------------------------------------------------------------------
    print("[ 1 ] LOADING SOURCE DATA")
    print("-" * 40)

    if is_url(PRODUCTION_EXPORT_SOURCE) or Path(PRODUCTION_EXPORT_SOURCE).exists():
        session = DashboardSession(source=PRODUCTION_EXPORT_SOURCE)
    else:
        logger.warning("%s not found — using simulated data", PRODUCTION_EXPORT_SOURCE)
        session = DashboardSession(loader=generate_production_export)

    if session.load() == SessionStatus.FAILED:
        print(f"\nDashboard Error: {session.error}")
        return 1

    records = session.records
    print(f"\nfact_production: {len(records)} rows")
    print(records.head(10).to_string(index=False))

    uv = session.unique_values
    print(
        f"\nSelectors: {len(uv.employees)} employees, {len(uv.accounts)} accounts, "
        f"{len(uv.offices)} offices, {len(uv.stores)} stores, {len(uv.supervisors)} supervisors"
    )

    # ------------------------------------------------------------------
    # 2. Dashboard outputs
    # ------------------------------------------------------------------
    print("\n")
    print("[ 2 ] DASHBOARD OUTPUTS")
    print("-" * 40)

    filters = DEFAULT_FILTERS.with_changes(timeframe=Timeframe.ALL)
    view = session.view(filters=filters, metric="pieces")
    label = get_metric_label(view.metric)

    kpis = view.kpis
    print(f"\nAvg. {label}: {kpis['avg_metric']:.2f}")
    print(f"Filtered Employees: {kpis['unique_employees']}")
    best = kpis["best_performer"]
    print(f"Top Performer ({label}): {best['name']} (avg {best['value']:.2f})")
    print(f"Overall consistency: {view.overall_consistency:.1f}")

    print(f"\nTop {filters.top_n} by {label}:")
    print(view.ranking.to_string(index=False))

    print("\nAverages by store:")
    print(view.group_table.head(10).to_string(index=False))

    print(f"\n{label} by day of week:")
    print(view.day_of_week.to_string(index=False))

    trend = view.trend
    print(f"\nMonthly trend ({len(trend.points)} points):")
    print(trend.points.to_string(index=False))

    # Per-record anomalies need a single account scope
    if uv.accounts:
        account = uv.accounts[0]
        scoped = session.view(filters=filters.with_changes(account=account), metric="pieces")
        print(f"\nAnomalies for account '{account}': {len(scoped.anomalies)}")
        if not scoped.anomalies.empty:
            print(scoped.anomalies.head(10).to_string(index=False))

    # ------------------------------------------------------------------
    # 3. Acceptance checks
    # ------------------------------------------------------------------
    print("\n")
    print("[ 3 ] ACCEPTANCE CRITERIA CHECKS")
    print("-" * 40)

    check1 = records["date"].is_monotonic_increasing
    print(f"\n  [{'PASS' if check1 else 'FAIL'}] Records sorted ascending by date")

    check2 = view.anomalies.empty
    print(f"  [{'PASS' if check2 else 'FAIL'}] No per-record anomalies when all accounts selected")

    check3 = not (trend.points["is_peak"] & trend.points["is_spike"]).any()
    print(f"  [{'PASS' if check3 else 'FAIL'}] Peak point never reported as a spike")

    print("\n" + "=" * 70)
    print("  Pipeline complete.")
    print("=" * 70)
    return 0


if __name__ == "__main__":
    sys.exit(main())
