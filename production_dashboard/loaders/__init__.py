"""Data ingestion loaders for the employee production export."""

from .production_export import load_production_export

__all__ = [
    "load_production_export",
]
