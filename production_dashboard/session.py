"""
Session lifecycle for the loaded dataset.

uninitialized -> loading -> ready | failed

The session loads the export once. A failed load is terminal for the
session; the user starts a new one to try again.
"""

import logging
from enum import Enum
from pathlib import Path
from typing import Callable

import pandas as pd

from .dashboard import DashboardView, get_dashboard_view, get_unique_values
from .errors import LoadError
from .loaders import load_production_export
from .models import UniqueValues, empty_records
from .transforms import build_fact_production

logger = logging.getLogger(__name__)


class SessionStatus(str, Enum):
    UNINITIALIZED = "uninitialized"
    LOADING = "loading"
    READY = "ready"
    FAILED = "failed"


class DashboardSession:
    """Owns the raw-to-normalized dataset for one dashboard session."""

    def __init__(self, loader: Callable[[], dict] | None = None, source: str | Path | None = None):
        self._loader = loader or (lambda: load_production_export(source))
        self.status = SessionStatus.UNINITIALIZED
        self.error: str | None = None
        self._records = empty_records()
        self._unique_values = UniqueValues()

    @property
    def records(self) -> pd.DataFrame:
        """The immutable base dataset; empty unless ready."""
        return self._records

    @property
    def unique_values(self) -> UniqueValues:
        return self._unique_values

    @property
    def is_ready(self) -> bool:
        return self.status == SessionStatus.READY

    def load(self) -> SessionStatus:
        """Load and normalise the export. May only be called once."""
        if self.status != SessionStatus.UNINITIALIZED:
            raise RuntimeError(f"Session already {self.status.value}; start a new session to reload")

        self.status = SessionStatus.LOADING
        try:
            records = build_fact_production(self._loader())
        except LoadError as e:
            logger.error("Failed to load performance data: %s", e)
            self.status = SessionStatus.FAILED
            self.error = str(e) or "Failed to load performance data."
            return self.status
        except Exception:
            logger.exception("Unexpected error while loading performance data")
            self.status = SessionStatus.FAILED
            self.error = "Failed to load performance data."
            raise

        self._records = records
        self._unique_values = get_unique_values(records)
        self.status = SessionStatus.READY
        logger.info("Session ready with %d records", len(records))
        return self.status

    def view(self, **selections) -> DashboardView:
        """Derived views for ``selections`` (see get_dashboard_view)."""
        return get_dashboard_view(self._records, **selections)
