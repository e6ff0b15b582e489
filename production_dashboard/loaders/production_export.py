"""
Loader for the employee production export.

Source: EmployeeProductionExport.json, served as a static file.

Structure:
    A JSON object whose values are arrays of raw records. The keys are
    arbitrary bucket names (the exporter splits rows across several);
    only the values matter.

    Each raw record carries Employee (numeric id), FirstName, LastName,
    OfficeName, AccountName, StoreName, DateOfInv ("YYYY-MM-DD" optionally
    followed by a time), the seven per-hour/gap metrics, and
    SupervisorNumber (the supervisor's Employee id).
"""

import json
import logging
from pathlib import Path

import requests

from ..config import HTTP_TIMEOUT_SECONDS, PRODUCTION_EXPORT_SOURCE
from ..errors import DataFormatError, LoadError
from .utils import is_url

logger = logging.getLogger(__name__)


def load_production_export(
    source: str | Path | None = None,
    timeout: float = HTTP_TIMEOUT_SECONDS,
) -> dict[str, list[dict]]:
    """Load the raw export from a local path or an http(s) URL.

    Parameters
    ----------
    source : Path or URL. Defaults to config.PRODUCTION_EXPORT_SOURCE.
    timeout : HTTP timeout in seconds (URL sources only).

    Returns
    -------
    Mapping of bucket name -> list of raw record dicts, unmodified.

    Raises
    ------
    LoadError : network failure, non-success status, unreadable file or
        invalid JSON.
    DataFormatError : the payload is not an object of arrays.
    """
    source = str(source or PRODUCTION_EXPORT_SOURCE)

    if is_url(source):
        payload = _fetch_json(source, timeout)
    else:
        payload = _read_json(Path(source))

    if not isinstance(payload, dict):
        raise DataFormatError(
            "Loaded data is not in the expected format (object of record arrays not found)."
        )

    for bucket, rows in payload.items():
        if not isinstance(rows, list):
            raise DataFormatError(
                f"Loaded data is not in the expected format (bucket '{bucket}' is not an array)."
            )

    n_rows = sum(len(rows) for rows in payload.values())
    logger.info("Loaded %d raw records in %d buckets from %s", n_rows, len(payload), source)
    return payload


def _fetch_json(url: str, timeout: float):
    try:
        response = requests.get(url, timeout=timeout)
    except requests.RequestException as e:
        logger.exception("Failed to fetch production export: %s", url)
        raise LoadError(f"Failed to fetch performance data: {e}") from e

    if not response.ok:
        raise LoadError(f"HTTP error! status: {response.status_code}")

    try:
        return response.json()
    except ValueError as e:
        raise LoadError(f"Production export is not valid JSON: {e}") from e


def _read_json(path: Path):
    try:
        with path.open(encoding="utf-8") as fh:
            return json.load(fh)
    except OSError as e:
        logger.exception("Failed to open production export: %s", path)
        raise LoadError(f"Failed to read performance data: {e}") from e
    except json.JSONDecodeError as e:
        raise LoadError(f"Production export is not valid JSON: {e}") from e
