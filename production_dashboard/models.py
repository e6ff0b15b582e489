"""
Record schema and typed values shared by the analytics modules.

The normalized dataset is a pandas DataFrame with exactly RECORD_COLUMNS.
EmployeeRecord is the typed view of one of its rows.
"""

from dataclasses import asdict, dataclass, field
from enum import Enum
from typing import Any, Mapping

import pandas as pd


class Metric(str, Enum):
    """The seven numeric fields aggregation and anomaly detection operate on."""

    PIECES = "pieces"
    DOLLARS = "dollars"
    SKUS = "skus"
    AVG_DELTA = "avg_delta"
    GAP5_COUNT = "gap5_count"
    GAP10_COUNT = "gap10_count"
    GAP15_COUNT = "gap15_count"

    @classmethod
    def parse(cls, value: "Metric | str") -> "Metric":
        """Return the Metric for ``value``; raise ValueError if unknown."""
        if isinstance(value, cls):
            return value
        try:
            return cls(str(value))
        except ValueError:
            valid = ", ".join(m.value for m in cls)
            raise ValueError(f"Unknown metric '{value}' (expected one of: {valid})") from None


class AnomalyKind(str, Enum):
    SPIKE = "Spike"
    DIP = "Dip"


DIMENSION_COLUMNS = ["employee", "office", "account", "store", "supervisor", "date"]
METRIC_COLUMNS = [m.value for m in Metric]
RECORD_COLUMNS = DIMENSION_COLUMNS + METRIC_COLUMNS

GROUP_BY_FIELDS = ("employee", "store", "supervisor")


@dataclass(frozen=True)
class EmployeeRecord:
    """One observation for an employee at a store on a day."""

    employee: str
    office: str
    account: str
    store: str
    supervisor: str
    date: str  # YYYY-MM-DD
    pieces: float
    dollars: float
    skus: float
    avg_delta: float
    gap5_count: float
    gap10_count: float
    gap15_count: float

    @classmethod
    def from_row(cls, row: Mapping[str, Any]) -> "EmployeeRecord":
        return cls(**{col: row[col] for col in RECORD_COLUMNS})

    def to_dict(self) -> dict:
        return asdict(self)


def get_metric(record: "EmployeeRecord | Mapping[str, Any] | pd.Series", metric: "Metric | str") -> float:
    """Typed metric accessor for a record, a mapping or a DataFrame row."""
    key = Metric.parse(metric).value
    if isinstance(record, EmployeeRecord):
        return float(getattr(record, key))
    return float(record[key])


def empty_records() -> pd.DataFrame:
    """Empty frame with the normalized record schema."""
    df = pd.DataFrame(columns=RECORD_COLUMNS)
    return df.astype({col: "float64" for col in METRIC_COLUMNS})


@dataclass(frozen=True)
class UniqueValues:
    """Sorted distinct dimension values used to populate selectors."""

    employees: list[str] = field(default_factory=list)
    accounts: list[str] = field(default_factory=list)
    offices: list[str] = field(default_factory=list)
    stores: list[str] = field(default_factory=list)
    supervisors: list[str] = field(default_factory=list)
