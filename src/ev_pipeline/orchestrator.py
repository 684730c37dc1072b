# ========================
# src/ev_pipeline/orchestrator.py
# ========================

"""
Pipeline Orchestrator Module

Coordinates loading, cleaning, filtering and aggregation for the dashboard.
"""

import logging
from datetime import date
from typing import Any, Dict, List, Optional, Sequence

from .cleaning import RecordCleaner
from .exceptions import DatasetNotLoadedError, MissingColumnsError
from .filtering import filter_records
from .loader import DataLoader, LoadResult, LoadStatus
from .options import derive_filter_options
from .schema import ColumnMapping, DashboardView, FilterOptions, FilterSelection, Record
from .transformation import DataAggregator
from ..utils.config import Config
from ..utils.performance_monitor import monitor_performance

logger = logging.getLogger(__name__)

TABLE_COLUMNS = ('year', 'state', 'make', 'model', 'vehicleType')


def table_rows(records: Sequence[Record], limit: int = 20) -> List[Dict[str, Any]]:
    """The first ``limit`` records as rows of the raw-data table."""
    rows = []
    for record in records[:limit]:
        data = record.to_dict()
        rows.append({column: data[column] for column in TABLE_COLUMNS})
    return rows


class DashboardPipeline:
    """
    Loads the dataset once and derives a dashboard view for any selection.
    The cleaned set and the option lists are rebuilt only on load.
    """

    def __init__(self, source: Optional[str] = None, config: Optional[Config] = None):
        """
        Initialize the dashboard pipeline.

        Args:
            source (str): Path or URL of the CSV; defaults to the configured path
            config (Config): Configuration object
        """
        self.config = config or Config()
        self.source = source or self.config.DATA_PATH

        self.loader = DataLoader(self.source, timeout=self.config.FETCH_TIMEOUT_SECONDS)
        self.cleaner = RecordCleaner(
            columns=ColumnMapping(**self.config.column_names()),
            strict_columns=self.config.STRICT_COLUMNS,
        )
        self.aggregator = DataAggregator(top_states_limit=self.config.TOP_STATES_LIMIT)

        self.records: List[Record] = []
        self.options = FilterOptions()
        self.last_result: Optional[LoadResult] = None

        logger.info("DashboardPipeline initialized:")
        logger.info(f"  Source: {self.source}")
        logger.info(f"  Top states: {self.config.TOP_STATES_LIMIT}, table rows: {self.config.TABLE_ROW_LIMIT}")

    @property
    def status(self) -> LoadStatus:
        return self.loader.status

    @property
    def error(self) -> Optional[str]:
        return self.loader.error

    def load(self) -> LoadResult:
        """
        Load and clean the dataset.

        Returns:
            LoadResult: The loader's result. In strict column mode a missing
            column turns a successful fetch into a failure.
        """
        with monitor_performance("Dataset load") as monitor:
            result = self.loader.load()
            if result.ok:
                result = self._ingest(result)
                monitor.update_progress(len(result.rows))

        return self._finish(result)

    async def load_async(self) -> LoadResult:
        """Async variant of ``load``; only the fetch leaves the event loop."""
        with monitor_performance("Dataset load") as monitor:
            result = await self.loader.load_async()
            if result.ok:
                result = self._ingest(result)
                monitor.update_progress(len(result.rows))

        return self._finish(result)

    def _finish(self, result: LoadResult) -> LoadResult:
        if not result.ok:
            self.records = []
            self.options = FilterOptions()
        self.last_result = result
        return result

    def _ingest(self, result: LoadResult) -> LoadResult:
        self.cleaner = RecordCleaner(
            columns=self.cleaner.columns,
            strict_columns=self.cleaner.strict_columns,
        )
        try:
            self.cleaner.validate_columns(result.header)
        except MissingColumnsError as e:
            return self.loader.fail(str(e))

        self.records = self.cleaner.clean(result.rows)
        self.options = derive_filter_options(self.records)
        return result

    def build_view(self, selection: Optional[FilterSelection] = None,
                   current_year: Optional[int] = None) -> DashboardView:
        """
        Derive everything the dashboard renders for one selection.

        Args:
            selection (FilterSelection): Active filters; defaults to All/All
            current_year (int): Year for the "this year" KPI; defaults to today

        Raises:
            DatasetNotLoadedError: If no load has succeeded yet.
        """
        if self.status is not LoadStatus.SUCCESS:
            raise DatasetNotLoadedError(
                f"Dataset is not loaded (status: {self.status.value})"
            )

        selection = selection or FilterSelection()
        if current_year is None:
            current_year = date.today().year

        filtered = filter_records(self.records, selection)
        return DashboardView(
            selection=selection,
            current_year=current_year,
            cleaned_count=len(self.records),
            filtered=filtered,
            aggregates=self.aggregator.aggregate(filtered, current_year),
            options=self.options,
            table=table_rows(filtered, self.config.TABLE_ROW_LIMIT),
        )

    def get_statistics(self) -> Dict[str, Any]:
        """Load status plus data quality counters."""
        return {
            'source': self.source,
            'status': self.status.value,
            'error': self.error,
            'records': len(self.records),
            'data_quality': self.cleaner.get_statistics(),
        }
