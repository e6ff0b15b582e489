"""
Data transforms: flatten and normalise raw export buckets into the
fact_production table every analytics module reads.
"""

import logging
from typing import Any, Mapping

import pandas as pd

from .config import RAW_METRIC_MAP, RAW_REQUIRED_FIELDS
from .errors import DataFormatError
from .loaders.utils import safe_float, strip_time
from .models import METRIC_COLUMNS, RECORD_COLUMNS, empty_records

logger = logging.getLogger(__name__)


def _display_name(raw: Mapping[str, Any]) -> str:
    return f"{str(raw['FirstName']).strip()} {str(raw['LastName']).strip()}"


def _format_id(value: Any) -> str:
    """Render a numeric id the way it appears in the export (123, not 123.0)."""
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


def _flatten(raw_buckets: Mapping[str, Any]) -> list[Mapping[str, Any]]:
    if not isinstance(raw_buckets, Mapping):
        raise DataFormatError(
            "Loaded data is not in the expected format (object of record arrays not found)."
        )
    rows: list[Mapping[str, Any]] = []
    for bucket, records in raw_buckets.items():
        if not isinstance(records, list):
            raise DataFormatError(
                f"Loaded data is not in the expected format (bucket '{bucket}' is not an array)."
            )
        rows.extend(records)
    return rows


def build_employee_lookup(raw_rows: list[Mapping[str, Any]]) -> dict[Any, str]:
    """Map Employee id -> "FirstName LastName".

    The first name seen for an id wins; later rows never overwrite it.
    """
    lookup: dict[Any, str] = {}
    for raw in raw_rows:
        emp_id = raw["Employee"]
        if emp_id not in lookup:
            lookup[emp_id] = _display_name(raw)
    return lookup


def build_fact_production(raw_buckets: Mapping[str, Any]) -> pd.DataFrame:
    """Flatten the raw export into the normalized fact table.

    Parameters
    ----------
    raw_buckets : Mapping of bucket name -> list of raw record dicts, as
        returned by load_production_export(). Not modified.

    Returns
    -------
    fact_production DataFrame with columns RECORD_COLUMNS:
        employee, office, account, store, supervisor, date,
        pieces, dollars, skus, avg_delta, gap5_count, gap10_count, gap15_count
    sorted ascending by date (ties keep export order).

    Raises
    ------
    DataFormatError : payload is not an object of arrays, or a raw record
        is missing a field or carries a non-numeric metric.
    """
    raw_rows = _flatten(raw_buckets)

    if not raw_rows:
        logger.warning("Production export is empty — returning empty fact_production")
        return empty_records()

    for idx, raw in enumerate(raw_rows):
        if not isinstance(raw, Mapping):
            raise DataFormatError(f"Record {idx} is not an object")
        missing = [f for f in RAW_REQUIRED_FIELDS if f not in raw]
        if missing:
            raise DataFormatError(f"Record {idx} is missing fields: {', '.join(missing)}")

    lookup = build_employee_lookup(raw_rows)

    rows = []
    unresolved: set[str] = set()
    for idx, raw in enumerate(raw_rows):
        supervisor_id = raw["SupervisorNumber"]
        supervisor = lookup.get(supervisor_id)
        if supervisor is None:
            supervisor = _format_id(supervisor_id)
            unresolved.add(supervisor)

        row = {
            "employee": _display_name(raw),
            "office": str(raw["OfficeName"]),
            "account": str(raw["AccountName"]),
            "store": str(raw["StoreName"]),
            "supervisor": supervisor,
            "date": strip_time(raw["DateOfInv"]),
        }
        for raw_field, column in RAW_METRIC_MAP.items():
            value = safe_float(raw[raw_field])
            if value is None:
                raise DataFormatError(
                    f"Record {idx} has a non-numeric or non-finite {raw_field}: {raw[raw_field]!r}"
                )
            row[column] = value
        rows.append(row)

    if unresolved:
        logger.warning(
            "%d supervisor id(s) not found among employees; showing raw ids", len(unresolved)
        )

    df = pd.DataFrame(rows, columns=RECORD_COLUMNS)
    df[METRIC_COLUMNS] = df[METRIC_COLUMNS].astype("float64")
    df = df.sort_values("date", kind="stable").reset_index(drop=True)

    logger.info("Built fact_production with %d rows", len(df))
    return df
