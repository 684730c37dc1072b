# ========================
# src/ev_pipeline/__init__.py
# ========================

"""
EV Dashboard Pipeline Package

This package turns an EV registration CSV into dashboard-ready data:
- ingestion / loader: CSV reading with load status
- cleaning: Raw rows to typed records
- filtering: Year/state selection
- transformation: Yearly, state, vehicle type and KPI aggregates
- options: Dropdown option lists
- orchestrator: Pipeline coordination
"""

from .schema import (
    AggregateViews,
    ColumnMapping,
    DashboardView,
    FilterOptions,
    FilterSelection,
    KPISet,
    Record,
    StateCount,
    VehicleTypeShare,
    YearlyCount,
)
from .exceptions import (
    DatasetNotLoadedError,
    LoadCancelledError,
    LoadError,
    MissingColumnsError,
    PipelineError,
)
from .ingestion import CSVReader
from .loader import DataLoader, LoadResult, LoadStatus
from .cleaning import RecordCleaner, clean
from .filtering import filter_records
from .transformation import DataAggregator, aggregate
from .options import derive_filter_options
from .orchestrator import DashboardPipeline

__all__ = [
    'AggregateViews',
    'ColumnMapping',
    'DashboardView',
    'FilterOptions',
    'FilterSelection',
    'KPISet',
    'Record',
    'StateCount',
    'VehicleTypeShare',
    'YearlyCount',
    'DatasetNotLoadedError',
    'LoadCancelledError',
    'LoadError',
    'MissingColumnsError',
    'PipelineError',
    'CSVReader',
    'DataLoader',
    'LoadResult',
    'LoadStatus',
    'RecordCleaner',
    'clean',
    'filter_records',
    'DataAggregator',
    'aggregate',
    'derive_filter_options',
    'DashboardPipeline',
]

__version__ = "1.0.0"
