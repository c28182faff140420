"""Database module for the Food Waste Tracker."""
from .repository import (
    WasteEntry,
    WasteRepository,
    WasteStats,
    utc_timestamp,
)
from .schema import (
    SCHEMA_VERSION,
    close_database,
    get_schema_version,
    init_database,
)

__all__ = [
    # Schema
    "SCHEMA_VERSION",
    "init_database",
    "close_database",
    "get_schema_version",
    # Data classes
    "WasteEntry",
    "WasteStats",
    "utc_timestamp",
    # Repositories
    "WasteRepository",
]
