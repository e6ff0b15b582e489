"""
Filter engine: narrows fact_production by dimension equality and timeframe.

Every predicate is evaluated against the full normalized frame and the
masks are combined once, so the result never depends on predicate order.
"""

import logging
from dataclasses import dataclass, replace
from datetime import date, timedelta
from enum import Enum

import pandas as pd

from .accounts import get_linked_accounts
from .config import ALL, DATE_FORMAT, DEFAULT_TIMEFRAME, DEFAULT_TOP_N
from .loaders.utils import parse_iso_date, safe_float

logger = logging.getLogger(__name__)


class Timeframe(str, Enum):
    ALL = "all"
    LAST7 = "last7"
    LAST30 = "last30"
    LAST180 = "last180"
    LAST365 = "last365"
    CUSTOM = "custom"
    SPECIFIC = "specific"


TIMEFRAME_LABELS: dict[Timeframe, str] = {
    Timeframe.ALL: "All Time",
    Timeframe.LAST7: "Last 7 Days",
    Timeframe.LAST30: "Last 30 Days",
    Timeframe.LAST180: "Last 6 Months",
    Timeframe.LAST365: "Last 12 Months",
    Timeframe.CUSTOM: "Custom Range",
    Timeframe.SPECIFIC: "Specific Date",
}


def parse_timeframe(value: "Timeframe | str") -> Timeframe:
    """Return the Timeframe for ``value``; raise ValueError if unknown."""
    if isinstance(value, Timeframe):
        return value
    try:
        return Timeframe(str(value))
    except ValueError:
        valid = ", ".join(t.value for t in Timeframe)
        raise ValueError(f"Unknown timeframe '{value}' (expected one of: {valid})") from None


def timeframe_days(timeframe: "Timeframe | str") -> int | None:
    """Window length for the relative timeframes ("last30" -> 30), else None."""
    key = parse_timeframe(timeframe).value
    if not key.startswith("last"):
        return None
    return int(key[len("last"):])


def coerce_top_n(value) -> int:
    """Parse a top-N input; anything non-numeric or below 1 becomes 1."""
    parsed = safe_float(value)
    if parsed is None:
        return 1
    return max(int(parsed), 1)


@dataclass(frozen=True)
class FilterState:
    """User-selected filters. "all" disables a dimension filter."""

    office: str = ALL
    account: str = ALL
    employee: str = ALL
    store: str = ALL
    supervisor: str = ALL
    timeframe: Timeframe = Timeframe(DEFAULT_TIMEFRAME)
    start_date: str = ""
    end_date: str = ""
    specific_date: str = ""
    top_n: int = DEFAULT_TOP_N
    show_top: bool = True

    def __post_init__(self):
        object.__setattr__(self, "timeframe", parse_timeframe(self.timeframe))
        object.__setattr__(self, "top_n", coerce_top_n(self.top_n))

    def with_changes(self, **changes) -> "FilterState":
        """Return a copy with ``changes`` applied."""
        return replace(self, **changes)


DEFAULT_FILTERS = FilterState()


def _timeframe_mask(
    record_dates: pd.Series,
    date_strings: pd.Series,
    filters: FilterState,
    today: date,
) -> pd.Series | None:
    tf = filters.timeframe

    if tf == Timeframe.ALL:
        return None

    if tf == Timeframe.SPECIFIC:
        if not filters.specific_date:
            return None
        return date_strings == filters.specific_date

    if tf == Timeframe.CUSTOM:
        start = parse_iso_date(filters.start_date)
        end = parse_iso_date(filters.end_date)
        if start is None or end is None:
            logger.info("Custom timeframe without both bounds; date filter skipped")
            return None
        # Record dates are whole days, so "<= end" covers the entire end day.
        return (record_dates >= pd.Timestamp(start)) & (record_dates <= pd.Timestamp(end))

    days = timeframe_days(tf)
    # The window starts the day after today - N: keeps today-N+1 .. today
    cutoff = pd.Timestamp(today - timedelta(days=days))
    return record_dates > cutoff


def apply_filters(
    records: pd.DataFrame,
    filters: FilterState,
    today: date | None = None,
) -> pd.DataFrame:
    """Return the records matching every active filter.

    Parameters
    ----------
    records : fact_production DataFrame. Not modified.
    filters : Active FilterState.
    today : Reference day for the relative timeframes. Defaults to
        date.today().

    Returns
    -------
    New DataFrame (fresh index) holding the matching rows in their
    original order.
    """
    if today is None:
        today = date.today()

    mask = pd.Series(True, index=records.index)

    if filters.office != ALL:
        mask &= records["office"] == filters.office

    if filters.account != ALL:
        linked = get_linked_accounts(filters.account)
        mask &= records["account"].str.lower().isin(linked)

    if filters.employee != ALL:
        mask &= records["employee"] == filters.employee
    if filters.store != ALL:
        mask &= records["store"] == filters.store
    if filters.supervisor != ALL:
        mask &= records["supervisor"] == filters.supervisor

    record_dates = pd.to_datetime(records["date"], format=DATE_FORMAT, errors="coerce")
    tf_mask = _timeframe_mask(record_dates, records["date"], filters, today)
    if tf_mask is not None:
        mask &= tf_mask

    result = records.loc[mask].reset_index(drop=True)
    logger.debug("Filtered %d -> %d records", len(records), len(result))
    return result
