"""
Column sorting shared by every sortable table (employee averages, group
averages, anomalies, raw records).

Clicking the active column flips the direction; clicking a new column
sorts it ascending.
"""

from dataclasses import dataclass

import pandas as pd
from pandas.api.types import is_numeric_dtype

from .config import DATE_FORMAT


@dataclass(frozen=True)
class SortState:
    key: str
    ascending: bool = True


def next_sort_state(current: SortState, key: str) -> SortState:
    """Sort state after the user selects column ``key``."""
    if current.key == key:
        return SortState(key, not current.ascending)
    return SortState(key, True)


def sort_table(df: pd.DataFrame, key: str, ascending: bool = True) -> pd.DataFrame:
    """Stable sort of ``df`` by one column.

    ``date`` sorts chronologically, numeric columns numerically and text
    columns case-insensitively. Rows with equal keys keep their order in
    both directions.
    """
    if key not in df.columns:
        raise ValueError(f"Cannot sort by '{key}': no such column")
    if df.empty:
        return df.reset_index(drop=True)

    if key == "date":
        sort_key = lambda s: pd.to_datetime(s, format=DATE_FORMAT, errors="coerce")  # noqa: E731
    elif is_numeric_dtype(df[key]):
        sort_key = None
    else:
        sort_key = lambda s: s.astype(str).str.casefold()  # noqa: E731

    return df.sort_values(key, ascending=ascending, kind="stable", key=sort_key).reset_index(drop=True)
