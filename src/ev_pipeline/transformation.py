# ========================
# src/ev_pipeline/transformation.py
# ========================

"""
Data Transformation Module

Derives the chart-ready aggregates (yearly counts, top states, vehicle type
breakdown, KPIs) from a filtered record set.
"""

import math
import logging
from collections import defaultdict
from typing import Dict, List, Sequence

from .schema import (
    AggregateViews,
    KPISet,
    Record,
    StateCount,
    VehicleTypeShare,
    YearlyCount,
)

logger = logging.getLogger(__name__)


def round_half_up(value: float, digits: int = 2) -> float:
    """
    Round with floor(value * 10**digits + 0.5), the display rounding of the
    dashboard. Works on binary floats, so 1.005 gives 1.0, not 1.01.
    """
    factor = 10 ** digits
    return math.floor(value * factor + 0.5) / factor


class DataAggregator:
    """
    Computes the aggregate views of a record set.
    Holds no state between calls; every call rebuilds its counts.
    """

    def __init__(self, top_states_limit: int = 10):
        """
        Initialize the data aggregator.

        Args:
            top_states_limit (int): Number of states kept in the ranking
        """
        self.top_states_limit = top_states_limit
        logger.debug(f"DataAggregator initialized with top_states_limit={top_states_limit}")

    def aggregate(self, records: Sequence[Record], current_year: int) -> AggregateViews:
        """
        Build all aggregate views for ``records``.

        Args:
            records (list[Record]): The filtered record set
            current_year (int): Calendar year counted by the "this year" KPI

        Returns:
            AggregateViews: yearly, top_states, vehicle_types and kpis.
        """
        year_counts: Dict[int, int] = defaultdict(int)
        state_counts: Dict[str, int] = defaultdict(int)
        type_counts: Dict[str, int] = defaultdict(int)

        for record in records:
            year_counts[record.year] += 1
            state_counts[record.state] += 1
            type_counts[record.vehicle_type] += 1

        views = AggregateViews(
            yearly=self._yearly(year_counts),
            top_states=self._top_states(state_counts),
            vehicle_types=[VehicleTypeShare(type=name, value=count) for name, count in type_counts.items()],
            kpis=self.kpis(records, current_year),
        )
        logger.debug(
            f"Aggregated {len(records)} records: {len(views.yearly)} years, "
            f"{len(state_counts)} states, {len(views.vehicle_types)} vehicle types"
        )
        return views

    def kpis(self, records: Sequence[Record], current_year: int) -> KPISet:
        """Total, current-year count and average range (0 for an empty set)."""
        total = len(records)
        current_year_count = sum(1 for record in records if record.year == current_year)
        range_sum = sum(record.range for record in records)
        return KPISet(
            total=total,
            current_year_count=current_year_count,
            avg_range=round_half_up(range_sum / max(1, total)),
        )

    def _yearly(self, year_counts: Dict[int, int]) -> List[YearlyCount]:
        return [YearlyCount(year=year, count=year_counts[year]) for year in sorted(year_counts)]

    def _top_states(self, state_counts: Dict[str, int]) -> List[StateCount]:
        # sorted() is stable, so equal counts keep first-seen order
        ranked = sorted(state_counts.items(), key=lambda item: item[1], reverse=True)
        return [StateCount(state=state, count=count) for state, count in ranked[:self.top_states_limit]]


def aggregate(records: Sequence[Record], current_year: int, top_n: int = 10) -> AggregateViews:
    """Aggregate ``records`` with a fresh DataAggregator."""
    return DataAggregator(top_states_limit=top_n).aggregate(records, current_year)
